import logging

from accountlib.core.http import (
    AccountLibError,
    DispatchPolicy,
    FakeDispatcher,
    HTTPDispatcher,
    RequestResult,
    RequestSpecification,
    StatusError,
    TransportConfig,
    classify_status,
)
from accountlib.resources import ResourceClient, ResourceData

logging.getLogger("accountlib").addHandler(logging.NullHandler())

__all__ = [
    "AccountLibError",
    "DispatchPolicy",
    "FakeDispatcher",
    "HTTPDispatcher",
    "RequestResult",
    "RequestSpecification",
    "ResourceClient",
    "ResourceData",
    "StatusError",
    "TransportConfig",
    "classify_status",
]
