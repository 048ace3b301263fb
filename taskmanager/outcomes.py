"""
Handler Outcomes — Typed Results and the Error Taxonomy
=========================================================
Handlers never build HTTP responses themselves. They return either a
``Success`` (payload ready to send) or a ``Failure`` tagged with an
``ErrorKind``. The server converts these to status/body pairs in one
place, using the ``ERROR_RESPONSES`` table below.

Error taxonomy:
    Client input  — INVALID_JSON, INVALID_FORM          → 400
    Transport     — BODY_READ                           → 500
    Routing       — METHOD_NOT_ALLOWED, NOT_FOUND       → 405 / 404
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


TEXT_PLAIN = "text/plain; charset=utf-8"
APPLICATION_JSON = "application/json"


class ErrorKind(Enum):
    """Every way a request can fail short of crashing the process."""
    INVALID_JSON = "invalid_json"
    INVALID_FORM = "invalid_form"
    BODY_READ = "body_read"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    NOT_FOUND = "not_found"


# ErrorKind -> (HTTP status, default message)
ERROR_RESPONSES: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.INVALID_JSON: (400, "Invalid JSON format."),
    ErrorKind.INVALID_FORM: (400, "Error parsing form data."),
    ErrorKind.BODY_READ: (500, "Error reading request body."),
    ErrorKind.METHOD_NOT_ALLOWED: (405, "Method not allowed."),
    ErrorKind.NOT_FOUND: (404, "404 page not found"),
}


@dataclass(frozen=True)
class Success:
    """A handled request. ``payload`` is text, or JSON-able data when
    ``content_type`` is JSON."""

    payload: Any
    content_type: str = TEXT_PLAIN
    status: int = 200

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A request that failed with a known kind of error.

    ``message`` overrides the default text for the kind (routes use it
    to phrase their own 405 message). ``detail`` is for logs only and is
    never sent to the client. ``allow`` becomes the 405 ``Allow`` header.
    """

    kind: ErrorKind
    message: Optional[str] = None
    detail: str = ""
    allow: tuple[str, ...] = ()     # Methods the path accepts (405 only)

    @property
    def ok(self) -> bool:
        return False

    @property
    def status(self) -> int:
        return ERROR_RESPONSES[self.kind][0]

    @property
    def text(self) -> str:
        """The message the client sees."""
        return self.message or ERROR_RESPONSES[self.kind][1]


Outcome = Union[Success, Failure]


def text(message: str) -> Success:
    """Shorthand for a 200 plain-text success."""
    return Success(payload=message)


def json_payload(data: Any) -> Success:
    """Shorthand for a 200 JSON success."""
    return Success(payload=data, content_type=APPLICATION_JSON)
