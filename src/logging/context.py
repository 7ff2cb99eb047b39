# src/logging/context.py - v3
"""Per-task topic and operation tags picked up by the formatters.

Values live in contextvars, so each asyncio task resolving or expanding a
topic keeps its own tags without passing them through every call.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import Iterator, NamedTuple

_current_topic: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "topicforge_topic", default=None
)
_current_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "topicforge_operation", default=None
)


class LogContext(NamedTuple):
    topic: str | None = None
    operation: str | None = None

    def as_dict(self) -> dict[str, str]:
        """Only the tags that are set."""
        return {name: value for name, value in self._asdict().items() if value is not None}


def get_context() -> LogContext:
    return LogContext(_current_topic.get(), _current_operation.get())


def set_topic_context(topic: str, operation: str | None = None) -> None:
    """Tag subsequent records in this task with a topic and the operation serving it."""
    _current_topic.set(topic)
    _current_operation.set(operation)


@contextmanager
def topic_context(topic: str, operation: str | None = None) -> Iterator[LogContext]:
    """Scoped variant of set_topic_context; restores the previous tags on exit."""
    topic_token = _current_topic.set(topic)
    operation_token = _current_operation.set(operation)
    try:
        yield get_context()
    finally:
        _current_operation.reset(operation_token)
        _current_topic.reset(topic_token)


def clear_context() -> None:
    _current_topic.set(None)
    _current_operation.set(None)
