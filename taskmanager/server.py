"""
Task Manager Server — FastAPI Application and Launcher
========================================================
Builds the ASGI app around a TaskStore and the task Router, and runs it
under uvicorn.

Launch:
    python -m taskmanager.cli serve                 # Port 4001
    python -m taskmanager.cli serve --port 8080
    uvicorn --factory taskmanager.server:create_app # Bring your own uvicorn

Every request goes through one catch-all route: the Router picks the
handler, and ``render()`` is the single place where a handler Outcome
becomes an HTTP status, headers and body.
"""

from __future__ import annotations

import logging
import socket
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from taskmanager import __version__
from taskmanager.config import ServerConfig
from taskmanager.handlers import build_router
from taskmanager.outcomes import APPLICATION_JSON, Failure, Outcome
from taskmanager.store import TaskStore

logger = logging.getLogger(__name__)

HTTP_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE",
                "OPTIONS", "CONNECT", "TRACE"]


class ListenerError(RuntimeError):
    """The listening socket could not be bound. Fatal at startup."""


# ─────────────────────────────────────────────────────────────
#  Outcome → HTTP Response
# ─────────────────────────────────────────────────────────────

def render(outcome: Outcome) -> Response:
    """Convert a handler Outcome into the response sent on the wire."""
    if isinstance(outcome, Failure):
        headers = {"X-Content-Type-Options": "nosniff"}
        if outcome.allow:
            headers["Allow"] = ", ".join(outcome.allow)
        return PlainTextResponse(outcome.text, status_code=outcome.status, headers=headers)

    if outcome.content_type == APPLICATION_JSON:
        return JSONResponse(outcome.payload, status_code=outcome.status)
    return PlainTextResponse(
        outcome.payload,
        status_code=outcome.status,
        media_type=outcome.content_type,
    )


# ─────────────────────────────────────────────────────────────
#  App Setup
# ─────────────────────────────────────────────────────────────

def create_app(store: Optional[TaskStore] = None,
               config: Optional[ServerConfig] = None) -> FastAPI:
    """Build the Task Manager app.

    Args:
        store: The TaskStore to serve. A fresh, empty one if omitted.
        config: Server settings (only ``max_form_bytes`` matters here).

    Returns:
        A FastAPI app. ``app.state.store`` and ``app.state.router`` expose
        its collaborators.
    """
    config = config or ServerConfig()
    if store is None:
        store = TaskStore()
    router = build_router(store, max_form_bytes=config.max_form_bytes)

    # Interactive docs would claim /docs and /openapi.json ahead of the Router.
    app = FastAPI(
        title="Task Manager API",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.store = store
    app.state.router = router
    app.state.config = config

    @app.api_route("/{full_path:path}", methods=HTTP_METHODS, include_in_schema=False)
    async def dispatch(request: Request):
        outcome = await router.dispatch(request)
        logger.debug("%s %s -> %d", request.method, request.url.path, outcome.status)
        return render(outcome)

    return app


# ─────────────────────────────────────────────────────────────
#  Startup
# ─────────────────────────────────────────────────────────────

def bind_listener(host: str, port: int) -> socket.socket:
    """Bind (but do not yet listen on) the server socket.

    Raises:
        ListenerError: If the address is unavailable.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        raise ListenerError(f"Error starting server on {host}:{port}: {e}") from e
    sock.set_inheritable(True)
    return sock


def run_server(config: Optional[ServerConfig] = None,
               store: Optional[TaskStore] = None) -> int:
    """Launch the Task Manager server and block until it stops.

    Returns:
        Process exit status: 0 after a clean shutdown, 1 if the listener
        could not be bound.
    """
    config = config or ServerConfig()
    app = create_app(store, config)

    try:
        sock = bind_listener(config.host, config.port)
    except ListenerError as e:
        logger.error("%s", e)
        print(f"✘ {e}", file=sys.stderr)
        return 1

    print(f"Starting server on {config.address}...")
    logger.info("Listening on %s:%d", config.host, config.port)

    server = uvicorn.Server(uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level,
    ))
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()

    logger.info("Server stopped")
    return 0
