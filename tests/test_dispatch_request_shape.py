from __future__ import annotations

import httpx

from accountlib.core.http.client import HTTPDispatcher
from accountlib.core.http.specs import RequestSpecification


def _capturing() -> tuple[list[httpx.Request], HTTPDispatcher]:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, request=request)

    return seen, HTTPDispatcher(httpx.Client(transport=httpx.MockTransport(handler)))


def test_post_with_body_sends_json_content_type() -> None:
    seen, dispatcher = _capturing()

    dispatcher.dispatch(RequestSpecification(method="POST", url="http://service.local/items", body=b'{"data":{}}'))

    assert seen[0].method == "POST"
    assert seen[0].headers["content-type"] == "application/json"
    assert seen[0].content == b'{"data":{}}'


def test_post_without_body_has_no_content_type() -> None:
    seen, dispatcher = _capturing()

    dispatcher.dispatch(RequestSpecification(method="POST", url="http://service.local/items"))

    assert "content-type" not in seen[0].headers
    assert seen[0].content == b""


def test_get_ignores_body() -> None:
    seen, dispatcher = _capturing()

    dispatcher.dispatch(RequestSpecification(method="GET", url="http://service.local/items", body=b"{}"))

    assert "content-type" not in seen[0].headers
    assert seen[0].content == b""


def test_get_returns_literal_body_bytes() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, request=request, content=b'{"data": null}')

    dispatcher = HTTPDispatcher(httpx.Client(transport=httpx.MockTransport(handler)))

    result = dispatcher.dispatch(RequestSpecification(method="GET", url="http://service.local/items/1"))

    assert result.status_code == 200
    assert result.body == b'{"data": null}'
    assert result.error is None
    assert result.ok is True


def test_repeated_response_headers_keep_every_value() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            request=request,
            headers=[("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("Content-Type", "application/json")],
        )

    dispatcher = HTTPDispatcher(httpx.Client(transport=httpx.MockTransport(handler)))

    result = dispatcher.dispatch(RequestSpecification(method="GET", url="http://service.local/items"))

    assert result.headers["set-cookie"] == ["a=1", "b=2"]
    assert result.header("Content-Type") == "application/json"
    assert result.header("missing") is None
