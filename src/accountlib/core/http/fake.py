from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence

from .errors import SendRequestError
from .specs import RequestResult, RequestSpecification

CannedResponse = RequestResult | Sequence[RequestResult]


class FakeDispatcher:
    """In-memory dispatcher answering from a table keyed by ``(METHOD, url)``.

    A sequence of results is served in order and the last one repeats once the
    sequence runs out. Every received specification is kept in ``calls``.
    """

    def __init__(self, responses: Mapping[tuple[str, str], CannedResponse] | None = None) -> None:
        self._responses: dict[tuple[str, str], list[RequestResult]] = {}
        self._served: dict[tuple[str, str], int] = {}
        self._lock = threading.Lock()
        self.calls: list[RequestSpecification] = []
        for (method, url), canned in (responses or {}).items():
            self.add(method, url, canned)

    def add(self, method: str, url: str, canned: CannedResponse) -> None:
        results = [canned] if isinstance(canned, RequestResult) else list(canned)
        if not results:
            raise ValueError("canned response sequence must not be empty")
        key = (method.upper(), url)
        with self._lock:
            self._responses[key] = results
            self._served[key] = 0

    def dispatch(
        self,
        spec: RequestSpecification,
        *,
        cancel_event: threading.Event | None = None,
    ) -> RequestResult:
        key = (spec.method.upper(), spec.url)
        with self._lock:
            self.calls.append(spec)
            results = self._responses.get(key)
            if results is None:
                return RequestResult(error=SendRequestError(f"failed to send request: no canned response for {key[0]} {key[1]}"))
            index = min(self._served[key], len(results) - 1)
            self._served[key] += 1
        return results[index]
