from __future__ import annotations

"""Configuration loader for accountlib clients."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from accountlib.core.http.config import DEFAULT_RETRYABLE_STATUSES, DispatchPolicy, TransportConfig


class TransportSettings(BaseModel):
    max_idle_connections: int = Field(100, ge=1)
    max_idle_connections_per_host: int = Field(100, ge=1)
    idle_connection_timeout_s: float = Field(30.0, ge=0)
    keepalive_s: float = Field(30.0, gt=0)
    tls_handshake_timeout_s: float = Field(10.0, gt=0)
    timeout_s: float = Field(5.0, gt=0)
    user_agent: str = "accountlib/1.0"

    def to_transport_config(self) -> TransportConfig:
        return TransportConfig(**self.model_dump())


class RetrySettings(BaseModel):
    retry_count: int = Field(3, ge=1)
    backoff_base_s: float = Field(0.1, ge=0)
    backoff_factor: float = Field(2.0, ge=1)
    backoff_max_s: Optional[float] = None
    retryable_statuses: list[int] = Field(default_factory=lambda: sorted(DEFAULT_RETRYABLE_STATUSES))

    @field_validator("retryable_statuses")
    @classmethod
    def _valid_status_codes(cls, value: list[int]) -> list[int]:
        for code in value:
            if not 100 <= code <= 599:
                raise ValueError(f"not an HTTP status code: {code}")
        return value

    def to_policy(self) -> DispatchPolicy:
        return DispatchPolicy(
            retry_count=self.retry_count,
            backoff_base_s=self.backoff_base_s,
            backoff_factor=self.backoff_factor,
            backoff_max_s=self.backoff_max_s,
            retryable_statuses=frozenset(self.retryable_statuses),
        )


class LoggingSettings(BaseModel):
    enabled: bool = True
    level: str = "INFO"
    log_dir: Optional[str] = None


class ClientConfig(BaseModel):
    base_url: str = "http://localhost:8080"
    resource_path: str = "v1/organisation/accounts"
    request_timeout_s: float = Field(0, ge=0)
    transport: TransportSettings = Field(default_factory=TransportSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_config(path: Optional[str | Path] = None) -> ClientConfig:
    """Load and validate configuration from a YAML file; defaults when no path is given."""
    if path is None:
        return ClientConfig()
    cfg_path = Path(path)
    with cfg_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return ClientConfig.model_validate(data)
