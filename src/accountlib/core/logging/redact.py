from __future__ import annotations

import re

_SECRET_KEY_RE = re.compile(r"(TOKEN|KEY|SECRET|PASSWORD|SIGNATURE)", re.IGNORECASE)
_SECRET_VALUE_RE = re.compile(r"(?i)(token|key|secret|password|signature)(\s*[=:]\s*)([^\s,;&]+)")
_BEARER_RE = re.compile(r"(?i)(bearer\s+)([^\s]+)")
_USERINFO_RE = re.compile(r"(?i)(https?://)([^/@\s]+)@")


def redact_string(s: str) -> str:
    redacted = _SECRET_VALUE_RE.sub(lambda m: f"{m.group(1)}{m.group(2)}***", s)
    redacted = _BEARER_RE.sub(lambda m: f"{m.group(1)}***", redacted)
    redacted = _USERINFO_RE.sub(lambda m: f"{m.group(1)}***@", redacted)
    return redacted


def redact_headers(headers: dict) -> dict:
    output = dict(headers)
    for key in list(output.keys()):
        if _SECRET_KEY_RE.search(str(key)) or str(key).casefold() == "authorization":
            output[key] = "***"
    return output
