from __future__ import annotations

import logging
import re
import socket
import threading
import time

import httpx

from accountlib.core.logging.redact import redact_headers, redact_string

from .config import DispatchPolicy, TransportConfig
from .errors import (
    DispatchCancelledError,
    RequestBuildError,
    RequestTimeoutError,
    ResponseReadError,
    SendRequestError,
    TransportError,
)
from .specs import RequestResult, RequestSpecification

logger = logging.getLogger(__name__)

# RFC 7230 token characters
_METHOD_TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_URL_FORBIDDEN_RE = re.compile(r"[\x00-\x20\x7f]")
_BODY_METHODS = {"POST", "PUT", "PATCH"}
_JSON_CONTENT_TYPE = "application/json"


def _socket_options(keepalive_s: float) -> list[tuple[int, int, int]]:
    interval = max(1, int(keepalive_s))
    options = [(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)]
    if hasattr(socket, "TCP_KEEPIDLE"):
        options.append((socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, interval))
    if hasattr(socket, "TCP_KEEPINTVL"):
        options.append((socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, interval))
    return options


def _build_timeout(total_s: float, tls_handshake_s: float) -> httpx.Timeout:
    total = max(0.1, total_s)
    return httpx.Timeout(total, connect=min(max(0.1, tls_handshake_s), total))


def build_http_client(config: TransportConfig | None = None) -> httpx.Client:
    cfg = config or TransportConfig()
    # httpx pools per client, not per host; the per-host bound collapses into the global one.
    limits = httpx.Limits(
        max_connections=None,
        max_keepalive_connections=max(cfg.max_idle_connections, cfg.max_idle_connections_per_host),
        keepalive_expiry=cfg.idle_connection_timeout_s,
    )
    transport = httpx.HTTPTransport(limits=limits, socket_options=_socket_options(cfg.keepalive_s))
    return httpx.Client(
        transport=transport,
        timeout=_build_timeout(cfg.timeout_s, cfg.tls_handshake_timeout_s),
        headers={"User-Agent": cfg.user_agent},
    )


def _describe(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


def _collect_headers(headers: httpx.Headers) -> dict[str, list[str]]:
    collected: dict[str, list[str]] = {}
    for name, value in headers.multi_items():
        collected.setdefault(name.lower(), []).append(value)
    return collected


def _wait(delay_s: float, cancel_event: threading.Event | None) -> bool:
    """Sleep for ``delay_s``; returns True when woken by cancellation."""
    if cancel_event is None:
        time.sleep(delay_s)
        return False
    return cancel_event.wait(delay_s)


class HTTPDispatcher:
    """Executes request specifications with retries and exponential backoff.

    Errors never propagate out of :meth:`dispatch`; every outcome, including
    build failures and exhausted retries, comes back as a ``RequestResult``.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        transport_config: TransportConfig | None = None,
        policy: DispatchPolicy | None = None,
    ) -> None:
        self._owns_client = client is None
        self.client = client if client is not None else build_http_client(transport_config)
        self.policy = policy or DispatchPolicy()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "HTTPDispatcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def dispatch(
        self,
        spec: RequestSpecification,
        *,
        cancel_event: threading.Event | None = None,
    ) -> RequestResult:
        try:
            request = self._build_request(spec)
        except RequestBuildError as exc:
            return RequestResult(error=exc)

        retry_count = spec.retry_count if spec.retry_count > 0 else self.policy.retry_count
        safe_url = redact_string(spec.url)
        backoff_s = self.policy.backoff_base_s
        attempt = 1
        result = RequestResult()

        while True:
            if cancel_event is not None and cancel_event.is_set():
                return self._cancelled(result, attempt - 1)

            logger.debug(
                "dispatch attempt %d/%d: %s %s headers=%s",
                attempt,
                retry_count,
                request.method,
                safe_url,
                redact_headers(dict(request.headers)),
            )
            result = self._send(request)
            if not self._should_retry(result):
                return result

            if attempt >= retry_count:
                logger.warning(
                    "dispatch exhausted %d attempt(s) for %s %s: status=%d error=%s",
                    attempt,
                    request.method,
                    safe_url,
                    result.status_code,
                    result.error,
                    extra={"extra_fields": {"attempt": attempt, "max_attempts": retry_count, "status": result.status_code}},
                )
                return result

            logger.warning(
                "retrying %s %s after attempt %d/%d (status=%d error=%s); waiting %.3fs",
                request.method,
                safe_url,
                attempt,
                retry_count,
                result.status_code,
                result.error,
                backoff_s,
                extra={
                    "extra_fields": {
                        "attempt": attempt,
                        "max_attempts": retry_count,
                        "status": result.status_code,
                        "backoff_s": backoff_s,
                    }
                },
            )
            if _wait(backoff_s, cancel_event):
                return self._cancelled(result, attempt)
            backoff_s = self.policy.next_backoff(backoff_s)
            attempt += 1

    def _build_request(self, spec: RequestSpecification) -> httpx.Request:
        method = spec.method or ""
        if not _METHOD_TOKEN_RE.fullmatch(method):
            raise RequestBuildError(f"unable to create http request: invalid method {method!r}")
        if not spec.url or _URL_FORBIDDEN_RE.search(spec.url):
            raise RequestBuildError(f"unable to create http request: invalid url {redact_string(spec.url)!r}")

        try:
            url = httpx.URL(spec.url)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise RequestBuildError(f"unable to create http request: {_describe(exc)}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise RequestBuildError(f"unable to create http request: unsupported url {redact_string(spec.url)!r}")

        headers: dict[str, str] = {}
        content: bytes | None = None
        if method.upper() in _BODY_METHODS and spec.body:
            headers["Content-Type"] = _JSON_CONTENT_TYPE
            content = spec.body

        # per-call timeout rides on the request; the shared client stays untouched
        timeout = httpx.Timeout(spec.timeout_s) if spec.timeout_s > 0 else httpx.USE_CLIENT_DEFAULT
        try:
            return self.client.build_request(method, url, headers=headers or None, content=content, timeout=timeout)
        except (httpx.InvalidURL, httpx.HTTPError, TypeError, ValueError) as exc:
            raise RequestBuildError(f"unable to create http request: {_describe(exc)}") from exc

    def _send(self, request: httpx.Request) -> RequestResult:
        try:
            response = self.client.send(request, stream=True)
        except httpx.TimeoutException as exc:
            return RequestResult(status_code=408, error=RequestTimeoutError(f"timeout encountered: {_describe(exc)}"))
        except httpx.HTTPError as exc:
            return RequestResult(status_code=0, error=SendRequestError(f"failed to send request: {_describe(exc)}"))

        headers = _collect_headers(response.headers)
        try:
            body = response.read()
        except httpx.HTTPError as exc:
            return RequestResult(
                status_code=response.status_code,
                headers=headers,
                error=ResponseReadError(f"failed to read response body: {_describe(exc)}"),
            )
        finally:
            response.close()
        return RequestResult(status_code=response.status_code, body=body, headers=headers)

    def _should_retry(self, result: RequestResult) -> bool:
        return isinstance(result.error, TransportError) or self.policy.is_retryable_status(result.status_code)

    @staticmethod
    def _cancelled(last: RequestResult, attempts: int) -> RequestResult:
        return RequestResult(
            status_code=last.status_code,
            body=last.body,
            headers=last.headers,
            error=DispatchCancelledError(f"dispatch cancelled after {attempts} attempt(s)"),
        )
