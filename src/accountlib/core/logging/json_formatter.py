from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from .context import get_log_context
from .redact import redact_string

_BASE_KEYS = frozenset({"ts_iso_utc", "level", "logger", "msg"})


def _record_fields(record: logging.LogRecord) -> dict[str, object]:
    fields = getattr(record, "extra_fields", None)
    if not isinstance(fields, dict):
        return {}
    return {
        key: redact_string(value) if isinstance(value, str) else value
        for key, value in fields.items()
        if key not in _BASE_KEYS
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line: record basics, dispatch context, then per-call fields."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        payload: dict[str, object] = {
            "ts_iso_utc": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": redact_string(record.getMessage()),
        }
        payload.update(get_log_context())
        payload.update(_record_fields(record))

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_type"] = record.exc_info[0].__name__
            payload["exc_msg"] = redact_string(str(record.exc_info[1]))
            payload["stack"] = self.formatException(record.exc_info)

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)
