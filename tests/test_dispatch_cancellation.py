from __future__ import annotations

import threading

import httpx

from accountlib.core.http.client import HTTPDispatcher
from accountlib.core.http.errors import DispatchCancelledError
from accountlib.core.http.specs import RequestSpecification


def test_cancelled_before_first_attempt_makes_no_request() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(200, request=request)

    dispatcher = HTTPDispatcher(httpx.Client(transport=httpx.MockTransport(handler)))
    cancel = threading.Event()
    cancel.set()

    result = dispatcher.dispatch(RequestSpecification(method="GET", url="http://service.local/a"), cancel_event=cancel)

    assert calls["count"] == 0
    assert isinstance(result.error, DispatchCancelledError)


def test_cancellation_interrupts_backoff() -> None:
    calls = {"count": 0}
    cancel = threading.Event()

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        cancel.set()
        return httpx.Response(503, request=request, content=b"busy")

    dispatcher = HTTPDispatcher(httpx.Client(transport=httpx.MockTransport(handler)))

    result = dispatcher.dispatch(
        RequestSpecification(method="GET", url="http://service.local/a", retry_count=5),
        cancel_event=cancel,
    )

    assert calls["count"] == 1
    assert result.status_code == 503
    assert result.body == b"busy"
    assert isinstance(result.error, DispatchCancelledError)
    assert "after 1 attempt" in str(result.error)


def test_unset_event_waits_out_backoff() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] == 1:
            return httpx.Response(503, request=request)
        return httpx.Response(200, request=request)

    dispatcher = HTTPDispatcher(httpx.Client(transport=httpx.MockTransport(handler)))

    result = dispatcher.dispatch(
        RequestSpecification(method="GET", url="http://service.local/a"),
        cancel_event=threading.Event(),
    )

    assert calls["count"] == 2
    assert result.status_code == 200
    assert result.error is None
