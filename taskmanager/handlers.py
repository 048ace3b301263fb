"""
Handlers — Task Manager Endpoints
===================================
One coroutine per (method, path). Each takes the request and returns an
Outcome; none of them touches the HTTP response directly.

Routes:
    *     /        → root          "Welcome to the Task Manager API!"
    GET   /tasks   → list_tasks    JSON array of {title, description}
    POST  /tasks   → create_task   JSON body → new task
    POST  /submit  → submit_form   URL-encoded form → new task

The request object only needs ``method``, ``url.path``, ``url.query``,
``headers`` and an awaitable ``body()``, i.e. a Starlette ``Request``.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Union

from pydantic import (
    BaseModel, BeforeValidator, ConfigDict, StrictStr, ValidationError, model_validator,
)
from starlette.requests import ClientDisconnect

from taskmanager.forms import DEFAULT_MAX_FORM_BYTES, FormError, decode_form
from taskmanager.outcomes import ErrorKind, Failure, Outcome, json_payload, text
from taskmanager.router import Router
from taskmanager.store import TaskRecord, TaskStore

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to the Task Manager API!"
TASK_ADDED_MESSAGE = "Task added successfully!"
FORM_SUBMITTED_MESSAGE = "Form submitted successfully!"
TASKS_NOT_ALLOWED_MESSAGE = "Method not allowed."
SUBMIT_NOT_ALLOWED_MESSAGE = "Only POST method is allowed."


def _null_as_empty(value):
    return "" if value is None else value


# JSON null leaves a text field empty; any other non-string is still rejected.
NullableText = Annotated[StrictStr, BeforeValidator(_null_as_empty)]


class TaskPayload(BaseModel):
    """JSON body accepted by POST /tasks.

    Decoding is lenient about shape but not about types: missing fields
    and ``null`` become "", a top-level ``null`` is an empty task, and
    keys match case-insensitively (``"Title"`` fills ``title``; for
    repeated keys the last one wins). Unknown keys are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    title: NullableText = ""
    description: NullableText = ""

    @model_validator(mode="before")
    @classmethod
    def _fold_keys(cls, data: Any) -> Any:
        if data is None:
            return {}
        if not isinstance(data, dict):
            return data

        folded = {}
        for key, value in data.items():
            name = key.lower() if isinstance(key, str) else key
            if name in cls.model_fields:
                folded[name] = value
        return folded

    def to_record(self) -> TaskRecord:
        return TaskRecord(title=self.title, description=self.description)


async def read_body(request) -> Union[bytes, Failure]:
    """Read the full request body, or a BODY_READ failure if the transport fails."""
    try:
        return await request.body()
    except (ClientDisconnect, OSError) as e:
        logger.warning("Error reading body of %s %s: %r",
                       request.method, request.url.path, e)
        return Failure(ErrorKind.BODY_READ, detail=repr(e))


class TaskHandlers:
    """The endpoint coroutines, bound to one TaskStore."""

    def __init__(self, store: TaskStore, max_form_bytes: int = DEFAULT_MAX_FORM_BYTES):
        self.store = store
        self.max_form_bytes = max_form_bytes

    async def root(self, request) -> Outcome:
        return text(WELCOME_MESSAGE)

    async def list_tasks(self, request) -> Outcome:
        return json_payload(self.store.to_json_list())

    async def create_task(self, request) -> Outcome:
        body = await read_body(request)
        if isinstance(body, Failure):
            return body

        try:
            payload = TaskPayload.model_validate_json(body)
        except ValidationError as e:
            logger.info("Rejected task JSON: %d error(s), first: %s",
                        e.error_count(), e.errors()[0].get("msg", ""))
            return Failure(ErrorKind.INVALID_JSON, detail=str(e))

        count = self.store.append(payload.to_record())
        logger.debug("Task added via JSON (store size %d)", count)
        return text(TASK_ADDED_MESSAGE)

    async def submit_form(self, request) -> Outcome:
        """Form submission. A body that cannot be read counts as unparsable form data."""
        body = await read_body(request)
        if isinstance(body, Failure):
            return Failure(ErrorKind.INVALID_FORM, detail=body.detail)

        try:
            form = decode_form(
                request.url.query,
                body,
                request.headers.get("content-type"),
                max_bytes=self.max_form_bytes,
            )
        except FormError as e:
            logger.info("Rejected form data: %s", e)
            return Failure(ErrorKind.INVALID_FORM, detail=str(e))

        record = TaskRecord(title=form.get("title"), description=form.get("description"))
        count = self.store.append(record)
        logger.debug("Task added via form (store size %d)", count)
        return text(FORM_SUBMITTED_MESSAGE)


def build_router(store: TaskStore, max_form_bytes: int = DEFAULT_MAX_FORM_BYTES) -> Router:
    """Wire the task manager's routes to handlers sharing ``store``."""
    handlers = TaskHandlers(store, max_form_bytes=max_form_bytes)

    router = Router()
    router.add("", "/", handlers.root)
    router.add("GET", "/tasks", handlers.list_tasks,
               not_allowed_message=TASKS_NOT_ALLOWED_MESSAGE)
    router.add("POST", "/tasks", handlers.create_task)
    router.add("POST", "/submit", handlers.submit_form,
               not_allowed_message=SUBMIT_NOT_ALLOWED_MESSAGE)
    return router
