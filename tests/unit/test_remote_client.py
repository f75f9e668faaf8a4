"""
Unit Tests for Rendering Service Client
=======================================

Tests for payload construction and response handling against an in-process
rendering service.
"""

import base64

import pytest

from chromic_client.core.errors import RemoteStatusError, TransportError
from chromic_client.core.remote_client import (
    RenderServiceClient,
    build_options,
    build_payload,
)
from chromic_client.models.schemas import Operation


class TestOperationTable:
    """Test endpoint paths and body fields."""

    @pytest.mark.parametrize(
        "operation,path,field",
        [
            (Operation.PRINT_TO_PDF, "/v1/print", "html"),
            (Operation.PRINT_TO_PDFA, "/v1/print_pdfa", "html"),
            (Operation.CONVERT_TO_PDFA, "/v1/convert_pdfa", "pdf"),
            (Operation.CAPTURE_SCREENSHOT, "/v1/screenshot", "html"),
        ],
    )
    def test_paths_and_fields(self, operation, path, field):
        assert operation.path == path
        assert operation.body_field == field


class TestBuildPayload:
    """Test request body construction."""

    def test_output_never_transmitted(self):
        options = {"output": "/tmp/out.pdf", "landscape": True, "margin_top": 0.2}
        assert build_options(options) == {"landscape": True, "margin_top": 0.2}

    def test_options_forwarded_unvalidated(self):
        options = {"scale": "huge", "unknown_flag": [1, 2]}
        assert build_options(options) == options

    def test_html_payload(self):
        payload = build_payload(Operation.PRINT_TO_PDF, "<h1>Hi</h1>", {"output": "x.pdf"})
        assert payload == {"html": "<h1>Hi</h1>", "options": {}}

    def test_pdf_payload_is_base64(self):
        payload = build_payload(Operation.CONVERT_TO_PDFA, b"%PDF\xff", {"pdfa_version": "2b"})
        assert base64.b64decode(payload["pdf"]) == b"%PDF\xff"
        assert payload["options"] == {"pdfa_version": "2b"}


class TestRenderServiceClient:
    """Test HTTP exchanges with the rendering service."""

    @pytest.fixture
    def client(self, remote_settings):
        return RenderServiceClient(remote_settings.api_url)

    def test_endpoint_url_strips_trailing_slash(self):
        client = RenderServiceClient("http://chrome-service:8080/")
        assert client.endpoint_url(Operation.PRINT_TO_PDF) == "http://chrome-service:8080/v1/print"

    @pytest.mark.asyncio
    async def test_success_returns_body(self, client, render_service):
        render_service.body = b"%PDF-1.7 exact bytes"

        data = await client.render(Operation.PRINT_TO_PDF, "<p>x</p>", {"landscape": True})

        assert data == b"%PDF-1.7 exact bytes"
        request = render_service.last_request
        assert request["path"] == "/v1/print"
        assert request["content_type"] == "application/json"
        assert request["json"] == {"html": "<p>x</p>", "options": {"landscape": True}}

    @pytest.mark.asyncio
    async def test_output_not_sent(self, client, render_service):
        await client.render(
            Operation.CAPTURE_SCREENSHOT, "<p>x</p>", {"output": "shot.png", "width": 640}
        )
        assert render_service.last_request["json"]["options"] == {"width": 640}

    @pytest.mark.asyncio
    async def test_path_option_values_serialized(self, client, render_service, tmp_path):
        await client.render(Operation.PRINT_TO_PDF, "<p>x</p>", {"header": tmp_path})
        assert render_service.last_request["json"]["options"] == {"header": str(tmp_path)}

    @pytest.mark.asyncio
    async def test_non_200_raises_status_error(self, client, render_service):
        render_service.status = 500
        render_service.body = b"boom"

        with pytest.raises(RemoteStatusError) as exc_info:
            await client.render(Operation.PRINT_TO_PDF, "<p>x</p>", {})

        assert exc_info.value.status_code == 500
        assert exc_info.value.body == "boom"
        assert "500" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_client_error_status(self, client, render_service):
        render_service.status = 422
        render_service.body = b'{"detail": "bad scale"}'

        with pytest.raises(RemoteStatusError) as exc_info:
            await client.render(Operation.PRINT_TO_PDFA, "<p>x</p>", {"scale": -1})

        assert exc_info.value.status_code == 422
        assert exc_info.value.body == '{"detail": "bad scale"}'

    @pytest.mark.asyncio
    async def test_connection_refused_raises_transport_error(self):
        client = RenderServiceClient("http://127.0.0.1:1", connect_timeout=2.0)

        with pytest.raises(TransportError) as exc_info:
            await client.render(Operation.PRINT_TO_PDF, "<p>x</p>", {})

        assert exc_info.value.cause is not None
        assert exc_info.value.__cause__ is exc_info.value.cause

    @pytest.mark.asyncio
    async def test_receive_timeout_raises_transport_error(self, remote_settings, render_service):
        render_service.delay = 0.5
        client = RenderServiceClient(remote_settings.api_url, receive_timeout=0.05)

        with pytest.raises(TransportError):
            await client.render(Operation.PRINT_TO_PDF, "<p>x</p>", {})

        assert len(render_service.requests) == 1
