"""
Task Manager — In-Memory Task API
===================================
A small HTTP service holding to-do items in memory.

Architecture:
    Store     — TaskRecord values in a lock-guarded, append-only TaskStore
    Router    — (method, path) dispatch table
    Handlers  — root, task list/create, form submit; return typed Outcomes
    Server    — FastAPI app + uvicorn launcher; renders Outcomes as HTTP
"""

__version__ = "0.1.0"

from taskmanager.store import TaskRecord, TaskStore
from taskmanager.outcomes import ErrorKind, Success, Failure
from taskmanager.router import Router, RouteMatch

__all__ = [
    "TaskRecord", "TaskStore",
    "ErrorKind", "Success", "Failure",
    "Router", "RouteMatch",
]
