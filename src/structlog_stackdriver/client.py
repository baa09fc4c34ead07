"""
Write collaborators for the hook.

The hook depends only on the LoggingClient protocol. GCloudLoggingClient is
the production implementation backed by google-cloud-logging.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol

import httpx
import orjson
from google.api_core.exceptions import GoogleAPICallError
from pydantic import BaseModel

from .config import ClientConfig
from .core import get_logger
from .exceptions import WriteError
from .formatting import SupportsJSON
from .types import WriteData

if TYPE_CHECKING:
    from google.cloud.logging import Client as GCloudLoggingClientType

logger = get_logger("structlog_stackdriver.client")

# orjson encodes integers in [-2**63, 2**64)
_INT_MIN = -(2**63)
_INT_MAX = 2**64


class LoggingClient(Protocol):
    """Anything that can deliver a payload to the logging backend."""

    def write(self, payload: WriteData) -> None: ...


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, SupportsJSON):
        return value.__json__()
    return str(value)


def _stringify_big_ints(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return value if _INT_MIN <= value < _INT_MAX else str(value)
    if isinstance(value, dict):
        return {k: _stringify_big_ints(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_stringify_big_ints(v) for v in value]
    return value


def _dumps(data: Any) -> bytes:
    return orjson.dumps(
        data,
        default=_json_default,
        option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC | orjson.OPT_NON_STR_KEYS,
    )


def to_json_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce field values to plain JSON types accepted by ``log_struct``.

    Integers orjson cannot encode (outside the 64-bit range) are written as
    strings.
    """
    try:
        encoded = _dumps(data)
    except orjson.JSONEncodeError:
        encoded = _dumps(_stringify_big_ints(data))
    return orjson.loads(encoded)


def build_http_request(
    request: Optional[httpx.Request],
    response: Optional[httpx.Response],
) -> Optional[Dict[str, Any]]:
    """Build the ``httpRequest`` section of a LogEntry.

    The response's originating request is used when no request is given.
    Keys follow the Cloud Logging HttpRequest JSON representation.
    """
    if request is None and response is None:
        return None

    if request is None and response is not None:
        try:
            request = response.request
        except RuntimeError:
            # response built without a request
            request = None

    info: Dict[str, Any] = {}
    if request is not None:
        info["requestMethod"] = request.method
        info["requestUrl"] = str(request.url)
        if "content-length" in request.headers:
            info["requestSize"] = request.headers["content-length"]
        if "user-agent" in request.headers:
            info["userAgent"] = request.headers["user-agent"]
        if "referer" in request.headers:
            info["referer"] = request.headers["referer"]

    if response is not None:
        info["status"] = response.status_code
        info["protocol"] = response.http_version
        if "content-length" in response.headers:
            info["responseSize"] = response.headers["content-length"]
        try:
            info["latency"] = f"{response.elapsed.total_seconds()}s"
        except RuntimeError:
            # elapsed is only set once the response has been closed
            pass

    return info


class GCloudLoggingClient:
    """Google Cloud Logging client.

    Credentials resolution order: ``config.credentials``, then
    ``config.credentials_file``, then Application Default Credentials.
    """

    def __init__(self, project_id: Optional[str] = None, config: Optional[ClientConfig] = None):
        from google.cloud import logging as gcloud_logging
        from google.oauth2 import service_account

        config = config or ClientConfig()
        credentials = config.credentials
        if credentials is None and config.credentials_file:
            credentials = service_account.Credentials.from_service_account_file(config.credentials_file)

        self._client: GCloudLoggingClientType = gcloud_logging.Client(project=project_id, credentials=credentials)
        logger.debug("logging_client_created", project_id=self._client.project)

    @property
    def project(self) -> str:
        return self._client.project

    def write(self, payload: WriteData) -> None:
        try:
            self._client.logger(payload.log_name).log_struct(
                to_json_payload(payload.data),
                severity=payload.severity.value,
                labels=dict(payload.labels) if payload.labels else None,
                resource=payload.resource,
                http_request=build_http_request(payload.request, payload.response),
            )
        except GoogleAPICallError as exc:
            raise WriteError(log_name=payload.log_name, reason=str(exc)) from exc

    def close(self) -> None:
        self._client.close()
