from __future__ import annotations


STATUS_CATEGORIES: dict[int, str] = {
    400: "bad request",
    401: "unauthorized",
    403: "forbidden",
    404: "resource not found",
    405: "incorrect http method",
    406: "incorrect content type",
    409: "request conflict",
    429: "too many requests",
    500: "internal server error",
    502: "bad gateway",
    503: "service unavailable",
    504: "gateway timeout",
}

_FALLBACK_CATEGORY = "internal error"


class AccountLibError(RuntimeError):
    """Base error for every failure surfaced by accountlib."""


class RequestBuildError(AccountLibError):
    """Raised when the method or URL cannot form a valid request."""


class TransportError(AccountLibError):
    """Connection level failure; eligible for retry."""


class RequestTimeoutError(TransportError):
    pass


class SendRequestError(TransportError):
    pass


class ResponseReadError(TransportError):
    pass


class DispatchCancelledError(AccountLibError):
    pass


class InvalidArgumentError(AccountLibError, ValueError):
    pass


class ResponseDecodeError(AccountLibError):
    """The server answered with the expected status but the body did not parse."""


class StatusError(AccountLibError):
    def __init__(self, message: str, status_code: int, category: str, body: bytes = b"") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.category = category
        self.body = body


def body_text(body: bytes | None) -> str:
    if not body:
        return ""
    return body.decode("utf-8", errors="replace")


def classify_status(status_code: int, body: bytes | None = None) -> StatusError:
    category = STATUS_CATEGORIES.get(status_code, _FALLBACK_CATEGORY)
    raw = body or b""
    return StatusError(f"{category}: {body_text(raw)}", status_code=status_code, category=category, body=raw)
