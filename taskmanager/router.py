"""
Request Router — (method, path) Dispatch Table
================================================
Maps an inbound HTTP method and path to exactly one handler.

Routes are registered up front and looked up by exact path (no patterns,
no path parameters). A route registered with the empty method string
matches every method. Resolution has three outcomes:

    RouteMatch                         — a handler was found
    Failure(METHOD_NOT_ALLOWED, msg)   — path known, method not registered
    Failure(NOT_FOUND)                 — path not registered at all
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Union

from taskmanager.outcomes import ErrorKind, Failure, Outcome

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Outcome]]

ANY_METHOD = ""


@dataclass(frozen=True)
class RouteMatch:
    """A resolved route: the handler to call and the key it matched."""
    method: str
    path: str
    handler: Handler


@dataclass
class _PathEntry:
    methods: dict[str, Handler] = field(default_factory=dict)
    not_allowed_message: Optional[str] = None


class Router:
    """Dispatch table keyed by (method, path).

    Usage:
        router = Router()
        router.add("", "/", root)
        router.add("GET", "/tasks", list_tasks)
        router.add("POST", "/tasks", create_task)
        outcome = await router.dispatch(request)
    """

    def __init__(self):
        self._paths: dict[str, _PathEntry] = {}

    def add(self, methods: str, path: str, handler: Handler,
            not_allowed_message: Optional[str] = None) -> None:
        """Register ``handler`` for ``path`` under one or more methods.

        Args:
            methods: "GET", "GET|POST", or "" for any method.
            path: Exact request path, e.g. "/tasks".
            handler: Async callable taking the request, returning an Outcome.
            not_allowed_message: 405 text for this path (default from
                the error table).

        Raises:
            ValueError: If the same (method, path) is registered twice or
                the path does not start with "/".
        """
        if not path.startswith("/"):
            raise ValueError(f"Route path must start with '/': {path!r}")

        entry = self._paths.setdefault(path, _PathEntry())
        for method in _split_methods(methods):
            if method in entry.methods:
                label = method or "*"
                raise ValueError(f"Route already registered: {label} {path}")
            entry.methods[method] = handler
        if not_allowed_message is not None:
            entry.not_allowed_message = not_allowed_message

    def resolve(self, method: str, path: str) -> Union[RouteMatch, Failure]:
        """Select the handler for (method, path), or say why there is none."""
        entry = self._paths.get(path)
        if entry is None:
            return Failure(ErrorKind.NOT_FOUND, detail=f"{method} {path}")

        method = method.upper()
        if method in entry.methods:
            return RouteMatch(method, path, entry.methods[method])
        if ANY_METHOD in entry.methods:
            return RouteMatch(ANY_METHOD, path, entry.methods[ANY_METHOD])

        return Failure(
            ErrorKind.METHOD_NOT_ALLOWED,
            message=entry.not_allowed_message,
            allow=tuple(self.allowed_methods(path)),
            detail=f"{method} {path}",
        )

    async def dispatch(self, request) -> Outcome:
        """Resolve the request and run its handler."""
        resolved = self.resolve(request.method, request.url.path)
        if isinstance(resolved, Failure):
            logger.debug("No handler for %s", resolved.detail)
            return resolved
        return await resolved.handler(request)

    def allowed_methods(self, path: str) -> list[str]:
        """Methods registered for ``path`` ("" means any)."""
        entry = self._paths.get(path)
        return sorted(entry.methods) if entry else []


def _split_methods(methods: str) -> list[str]:
    if not methods:
        return [ANY_METHOD]
    return [m.strip().upper() for m in methods.split("|") if m.strip()]
