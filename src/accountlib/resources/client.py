from __future__ import annotations

import json
import logging
import threading
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from accountlib.core.http.base import RequestDispatcher
from accountlib.core.http.client import HTTPDispatcher
from accountlib.core.http.config import DispatchPolicy, TransportConfig
from accountlib.core.http.errors import InvalidArgumentError, ResponseDecodeError, classify_status
from accountlib.core.http.specs import RequestResult, RequestSpecification
from accountlib.core.logging.context import log_context, new_request_id
from accountlib.core.logging.setup import configure_logging

from .schemas import DataEnvelope, ResourceData

if TYPE_CHECKING:
    from accountlib.config.loader import ClientConfig

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_RESOURCE_PATH = "v1/organisation/accounts"


def _decode(body: bytes, failure_prefix: str) -> ResourceData:
    try:
        envelope = DataEnvelope.model_validate_json(body or b"")
    except ValidationError as exc:
        raise ResponseDecodeError(f"{failure_prefix}: {exc}") from exc
    if envelope.data is None:
        raise ResponseDecodeError(f"{failure_prefix}: missing data")
    return envelope.data


class ResourceClient:
    """Create, fetch and delete resources behind a ``{"data": ...}`` REST API."""

    def __init__(
        self,
        dispatcher: RequestDispatcher | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        path: str = DEFAULT_RESOURCE_PATH,
        http_client: httpx.Client | None = None,
        transport_config: TransportConfig | None = None,
        policy: DispatchPolicy | None = None,
        timeout_s: float = 0,
        retry_count: int = 0,
    ) -> None:
        self._owned_dispatcher: HTTPDispatcher | None = None
        if dispatcher is None:
            self._owned_dispatcher = HTTPDispatcher(http_client, transport_config=transport_config, policy=policy)
            dispatcher = self._owned_dispatcher
        self.dispatcher = dispatcher
        self.collection_url = f"{base_url.rstrip('/')}/{path.strip('/')}"
        self.timeout_s = timeout_s
        self.retry_count = retry_count

    @classmethod
    def from_config(cls, config: "ClientConfig", http_client: httpx.Client | None = None) -> "ResourceClient":
        if config.logging.enabled:
            configure_logging(log_dir=config.logging.log_dir, level=config.logging.level)
        return cls(
            base_url=config.base_url,
            path=config.resource_path,
            http_client=http_client,
            transport_config=config.transport.to_transport_config(),
            policy=config.retry.to_policy(),
            timeout_s=config.request_timeout_s,
        )

    def close(self) -> None:
        if self._owned_dispatcher is not None:
            self._owned_dispatcher.close()

    def __enter__(self) -> "ResourceClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def create(
        self,
        params: ResourceData | dict[str, Any],
        *,
        cancel_event: threading.Event | None = None,
    ) -> ResourceData:
        try:
            data = params if isinstance(params, ResourceData) else ResourceData.model_validate(params)
            payload = json.dumps({"data": data.model_dump(mode="json", exclude_none=True)}).encode("utf-8")
        except (ValidationError, TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"unable to marshal create params: {exc}") from exc

        with log_context(operation="create", resource_id=data.id):
            result = self._dispatch("POST", self.collection_url, payload, cancel_event)
            if result.status_code == 201:
                return _decode(result.body, "resource created, but received invalid response")
            raise classify_status(result.status_code, result.body)

    def fetch(self, resource_id: str, *, cancel_event: threading.Event | None = None) -> ResourceData:
        if not resource_id:
            raise InvalidArgumentError("invalid resource id")

        with log_context(operation="fetch", resource_id=resource_id):
            result = self._dispatch("GET", self._item_url(resource_id), None, cancel_event)
            if result.status_code == 200:
                return _decode(result.body, "received invalid response")
            raise classify_status(result.status_code, result.body)

    def delete(
        self,
        resource_id: str,
        version: int | None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> None:
        if not resource_id:
            raise InvalidArgumentError("invalid resource id")
        if not isinstance(version, int) or isinstance(version, bool) or version < 0:
            raise InvalidArgumentError("invalid version")

        with log_context(operation="delete", resource_id=resource_id):
            url = f"{self._item_url(resource_id)}?version={version}"
            result = self._dispatch("DELETE", url, None, cancel_event)
            if result.status_code != 204:
                raise classify_status(result.status_code, result.body)

    def _item_url(self, resource_id: str) -> str:
        return f"{self.collection_url}/{quote(resource_id, safe='')}"

    def _dispatch(
        self,
        method: str,
        url: str,
        body: bytes | None,
        cancel_event: threading.Event | None,
    ) -> RequestResult:
        spec = RequestSpecification(
            method=method,
            url=url,
            body=body,
            timeout_s=self.timeout_s,
            retry_count=self.retry_count,
        )
        with log_context(request_id=new_request_id()):
            result = self.dispatcher.dispatch(spec, cancel_event=cancel_event)
            logger.debug("%s %s -> status=%d", method, url, result.status_code)
        if result.error is not None:
            raise result.error
        return result
