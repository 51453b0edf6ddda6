from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator
from uuid import uuid4

# Fields stamped onto every JSON log line emitted inside a ``log_context`` block.
_log_fields: ContextVar[dict[str, str] | None] = ContextVar("accountlib_log_fields", default=None)


def new_request_id() -> str:
    return uuid4().hex


@contextmanager
def log_context(**fields: object) -> Iterator[dict[str, str]]:
    """Layer ``fields`` over the enclosing context; ``None`` values are skipped."""
    merged = dict(_log_fields.get() or {})
    merged.update({key: str(value) for key, value in fields.items() if value is not None})
    token = _log_fields.set(merged)
    try:
        yield merged
    finally:
        _log_fields.reset(token)


def get_log_context() -> dict[str, str]:
    return dict(_log_fields.get() or {})
