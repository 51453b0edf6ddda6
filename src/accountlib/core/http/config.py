from __future__ import annotations

import os
from dataclasses import dataclass, field

_DEFAULT_MAX_IDLE_CONNECTIONS = 100
_DEFAULT_KEEPALIVE_S = 30.0
_DEFAULT_IDLE_TIMEOUT_S = 30.0
_DEFAULT_TLS_HANDSHAKE_TIMEOUT_S = 10.0
_DEFAULT_TIMEOUT_S = 5.0
_DEFAULT_RETRIES = 3
_DEFAULT_BACKOFF_BASE_S = 0.1
_DEFAULT_BACKOFF_FACTOR = 2.0
DEFAULT_RETRYABLE_STATUSES = frozenset({408, 503, 504})


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class TransportConfig:
    """Connection pool and timeout defaults for a dispatcher-owned client.

    Ignored entirely when the caller hands the dispatcher its own
    ``httpx.Client``.
    """

    max_idle_connections: int = _DEFAULT_MAX_IDLE_CONNECTIONS
    max_idle_connections_per_host: int = _DEFAULT_MAX_IDLE_CONNECTIONS
    idle_connection_timeout_s: float = _DEFAULT_IDLE_TIMEOUT_S
    keepalive_s: float = _DEFAULT_KEEPALIVE_S
    tls_handshake_timeout_s: float = _DEFAULT_TLS_HANDSHAKE_TIMEOUT_S
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = "accountlib/1.0"

    @classmethod
    def from_env(cls) -> "TransportConfig":
        max_idle = max(1, _get_int_env("ACCOUNTLIB_HTTP_MAX_IDLE_CONNECTIONS", _DEFAULT_MAX_IDLE_CONNECTIONS))
        return cls(
            max_idle_connections=max_idle,
            max_idle_connections_per_host=max_idle,
            idle_connection_timeout_s=max(0.0, _get_float_env("ACCOUNTLIB_HTTP_IDLE_TIMEOUT_S", _DEFAULT_IDLE_TIMEOUT_S)),
            keepalive_s=max(1.0, _get_float_env("ACCOUNTLIB_HTTP_KEEPALIVE_S", _DEFAULT_KEEPALIVE_S)),
            tls_handshake_timeout_s=max(
                0.1, _get_float_env("ACCOUNTLIB_HTTP_TLS_HANDSHAKE_TIMEOUT_S", _DEFAULT_TLS_HANDSHAKE_TIMEOUT_S)
            ),
            timeout_s=max(0.1, _get_float_env("ACCOUNTLIB_HTTP_TIMEOUT_S", _DEFAULT_TIMEOUT_S)),
            user_agent=os.getenv("ACCOUNTLIB_HTTP_USER_AGENT", "accountlib/1.0"),
        )


@dataclass(frozen=True)
class DispatchPolicy:
    """Retry and backoff tuning for a dispatcher.

    ``retry_count`` is the total number of attempts, the first one included.
    ``backoff_max_s`` of ``None`` leaves the exponential growth uncapped.
    """

    retry_count: int = _DEFAULT_RETRIES
    backoff_base_s: float = _DEFAULT_BACKOFF_BASE_S
    backoff_factor: float = _DEFAULT_BACKOFF_FACTOR
    backoff_max_s: float | None = None
    retryable_statuses: frozenset[int] = field(default_factory=lambda: DEFAULT_RETRYABLE_STATUSES)

    @classmethod
    def from_env(cls) -> "DispatchPolicy":
        return cls(
            retry_count=max(1, _get_int_env("ACCOUNTLIB_HTTP_RETRIES", _DEFAULT_RETRIES)),
            backoff_base_s=max(0.0, _get_float_env("ACCOUNTLIB_HTTP_BACKOFF_BASE_S", _DEFAULT_BACKOFF_BASE_S)),
        )

    def is_retryable_status(self, status_code: int) -> bool:
        return status_code in self.retryable_statuses

    def next_backoff(self, current_s: float) -> float:
        grown = current_s * self.backoff_factor
        if self.backoff_max_s is not None:
            return min(self.backoff_max_s, grown)
        return grown
