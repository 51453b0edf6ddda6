from .base import RequestDispatcher
from .client import HTTPDispatcher, build_http_client
from .config import DispatchPolicy, TransportConfig
from .errors import (
    AccountLibError,
    DispatchCancelledError,
    InvalidArgumentError,
    RequestBuildError,
    RequestTimeoutError,
    ResponseDecodeError,
    ResponseReadError,
    SendRequestError,
    StatusError,
    TransportError,
    classify_status,
)
from .fake import FakeDispatcher
from .specs import RequestResult, RequestSpecification

__all__ = [
    "RequestDispatcher",
    "HTTPDispatcher",
    "build_http_client",
    "DispatchPolicy",
    "TransportConfig",
    "AccountLibError",
    "DispatchCancelledError",
    "InvalidArgumentError",
    "RequestBuildError",
    "RequestTimeoutError",
    "ResponseDecodeError",
    "ResponseReadError",
    "SendRequestError",
    "StatusError",
    "TransportError",
    "classify_status",
    "FakeDispatcher",
    "RequestResult",
    "RequestSpecification",
]
