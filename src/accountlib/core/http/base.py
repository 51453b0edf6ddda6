from __future__ import annotations

import threading
from typing import Protocol

from .specs import RequestResult, RequestSpecification


class RequestDispatcher(Protocol):
    def dispatch(
        self,
        spec: RequestSpecification,
        *,
        cancel_event: threading.Event | None = None,
    ) -> RequestResult: ...
