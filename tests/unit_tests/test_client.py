"""
GCloudLoggingClient tests.

google.cloud.logging.Client is patched; the tests only check how payloads are
translated into ``log_struct`` calls.
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import httpx
import pytest
from google.api_core.exceptions import ServiceUnavailable
from pydantic import BaseModel

from structlog_stackdriver.client import GCloudLoggingClient, build_http_request, to_json_payload
from structlog_stackdriver.config import ClientConfig
from structlog_stackdriver.exceptions import WriteError
from structlog_stackdriver.types import GLOBAL_RESOURCE, Severity, WriteData


class Order(BaseModel):
    id: int
    total: float


class Opaque:
    def __repr__(self) -> str:
        return "<opaque>"


@pytest.fixture
def gcloud_client():
    with patch("google.cloud.logging.Client") as mock_client_cls:
        yield mock_client_cls


class TestJsonPayload:
    """to_json_payload"""

    def test_plain_values(self) -> None:
        assert to_json_payload({"a": 1, "b": [1, "x"], "c": None}) == {"a": 1, "b": [1, "x"], "c": None}

    def test_rich_values(self) -> None:
        data = {
            "order": Order(id=1, total=9.5),
            "at": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            "opaque": Opaque(),
        }
        assert to_json_payload(data) == {
            "order": {"id": 1, "total": 9.5},
            "at": "2024-01-02T03:04:05Z",
            "opaque": "<opaque>",
        }

    def test_out_of_range_ints_become_strings(self) -> None:
        data = {"id": 2**70, "n": 1, "nested": [-(2**64), {"ok": 2**63}], "flag": True}
        assert to_json_payload(data) == {
            "id": str(2**70),
            "n": 1,
            "nested": [str(-(2**64)), {"ok": 2**63}],
            "flag": True,
        }


class TestHttpRequest:
    """build_http_request"""

    def test_none(self) -> None:
        assert build_http_request(None, None) is None

    def test_request_only(self) -> None:
        request = httpx.Request(
            "POST",
            "https://example.com/orders?id=1",
            headers={"User-Agent": "tests/1.0", "Referer": "https://example.com/"},
            content=b"abc",
        )
        assert build_http_request(request, None) == {
            "requestMethod": "POST",
            "requestUrl": "https://example.com/orders?id=1",
            "requestSize": "3",
            "userAgent": "tests/1.0",
            "referer": "https://example.com/",
        }

    def test_response_uses_its_request(self) -> None:
        request = httpx.Request("GET", "https://example.com/")
        response = httpx.Response(503, request=request, content=b"unavailable")

        info = build_http_request(None, response)

        assert info["requestMethod"] == "GET"
        assert info["status"] == 503
        assert info["responseSize"] == "11"
        assert info["protocol"] == "HTTP/1.1"
        assert "latency" not in info

    def test_response_without_request(self) -> None:
        info = build_http_request(None, httpx.Response(200))
        assert info["status"] == 200
        assert "requestMethod" not in info


class TestGCloudLoggingClient:
    """Construction and write"""

    def test_uses_application_default_credentials(self, gcloud_client) -> None:
        GCloudLoggingClient("proj")
        gcloud_client.assert_called_once_with(project="proj", credentials=None)

    def test_uses_explicit_credentials(self, gcloud_client) -> None:
        credentials = object()
        GCloudLoggingClient("proj", ClientConfig(credentials=credentials))
        gcloud_client.assert_called_once_with(project="proj", credentials=credentials)

    def test_loads_credentials_file(self, gcloud_client) -> None:
        with patch("google.oauth2.service_account.Credentials.from_service_account_file") as mock_load:
            GCloudLoggingClient("proj", ClientConfig(credentials_file="/secrets/key.json"))
        mock_load.assert_called_once_with("/secrets/key.json")
        gcloud_client.assert_called_once_with(project="proj", credentials=mock_load.return_value)

    def test_write(self, gcloud_client) -> None:
        client = GCloudLoggingClient("proj")
        request = httpx.Request("GET", "https://example.com/")

        client.write(
            WriteData(
                log_name="svc",
                severity=Severity.WARNING,
                data={"message": "slow", "order": Order(id=2, total=1.0)},
                labels={"env": "test"},
                request=request,
            )
        )

        gcloud_client.return_value.logger.assert_called_once_with("svc")
        log_struct = gcloud_client.return_value.logger.return_value.log_struct
        log_struct.assert_called_once_with(
            {"message": "slow", "order": {"id": 2, "total": 1.0}},
            severity="WARNING",
            labels={"env": "test"},
            resource=GLOBAL_RESOURCE,
            http_request={"requestMethod": "GET", "requestUrl": "https://example.com/"},
        )

    def test_write_without_labels(self, gcloud_client) -> None:
        client = GCloudLoggingClient("proj")
        client.write(WriteData(log_name="svc", severity=Severity.INFO, data={}))

        kwargs = gcloud_client.return_value.logger.return_value.log_struct.call_args.kwargs
        assert kwargs["labels"] is None
        assert kwargs["http_request"] is None

    def test_write_with_big_int(self, gcloud_client) -> None:
        client = GCloudLoggingClient("proj")
        client.write(WriteData(log_name="svc", severity=Severity.INFO, data={"trace_id": 2**100}))

        data = gcloud_client.return_value.logger.return_value.log_struct.call_args.args[0]
        assert data == {"trace_id": str(2**100)}

    def test_api_error_becomes_write_error(self, gcloud_client) -> None:
        log_struct = gcloud_client.return_value.logger.return_value.log_struct
        log_struct.side_effect = ServiceUnavailable("try later")
        client = GCloudLoggingClient("proj")

        with pytest.raises(WriteError) as exc_info:
            client.write(WriteData(log_name="svc", severity=Severity.ERROR, data={}))

        assert exc_info.value.code == "WRITE_FAILED"
        assert isinstance(exc_info.value.__cause__, ServiceUnavailable)

    def test_close(self, gcloud_client) -> None:
        GCloudLoggingClient("proj").close()
        gcloud_client.return_value.close.assert_called_once()

    def test_hook_surfaces_construction_failure(self) -> None:
        from structlog_stackdriver.exceptions import ClientInitializationError
        from structlog_stackdriver.hook import StackdriverHook

        with patch("google.cloud.logging.Client", side_effect=RuntimeError("no credentials")):
            with pytest.raises(ClientInitializationError, match="no credentials"):
                StackdriverHook.new("proj", "svc")


def test_logger_project_is_exposed(gcloud_client) -> None:
    gcloud_client.return_value = MagicMock(project="resolved-project")
    assert GCloudLoggingClient(None).project == "resolved-project"
