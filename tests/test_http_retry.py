from __future__ import annotations

import httpx

from accountlib.core.http.client import HTTPDispatcher
from accountlib.core.http.specs import RequestSpecification


def test_dispatch_retries_transient_http_status(sleeps) -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] < 2:
            return httpx.Response(503, request=request)
        return httpx.Response(200, request=request, json={"ok": True})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    dispatcher = HTTPDispatcher(client)

    result = dispatcher.dispatch(RequestSpecification(method="GET", url="http://service.local/test"))

    assert result.status_code == 200
    assert result.error is None
    assert calls["count"] == 2
    assert sleeps == [0.1]


def test_dispatch_exhausts_retry_count_on_persistent_503(sleeps) -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(503, request=request, content=b"down")

    dispatcher = HTTPDispatcher(httpx.Client(transport=httpx.MockTransport(handler)))

    result = dispatcher.dispatch(RequestSpecification(method="GET", url="http://service.local/test", retry_count=4))

    assert calls["count"] == 4
    assert result.status_code == 503
    assert result.body == b"down"
    assert result.error is None


def test_dispatch_uses_default_retry_count_when_zero(sleeps) -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(504, request=request)

    dispatcher = HTTPDispatcher(httpx.Client(transport=httpx.MockTransport(handler)))

    result = dispatcher.dispatch(RequestSpecification(method="GET", url="http://service.local/test"))

    assert calls["count"] == 3
    assert result.status_code == 504


def test_dispatch_retries_synthesized_408(sleeps) -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] == 1:
            return httpx.Response(408, request=request)
        return httpx.Response(204, request=request)

    dispatcher = HTTPDispatcher(httpx.Client(transport=httpx.MockTransport(handler)))

    result = dispatcher.dispatch(RequestSpecification(method="DELETE", url="http://service.local/x?version=0"))

    assert result.status_code == 204
    assert calls["count"] == 2
