from __future__ import annotations

from dataclasses import dataclass, field

from .errors import AccountLibError


@dataclass(frozen=True)
class RequestSpecification:
    method: str
    url: str
    body: bytes | None = None
    timeout_s: float = 0
    retry_count: int = 0


@dataclass
class RequestResult:
    status_code: int = 0
    body: bytes = b""
    headers: dict[str, list[str]] = field(default_factory=dict)
    error: AccountLibError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def header(self, name: str) -> str | None:
        values = self.headers.get(name.lower())
        return values[0] if values else None
