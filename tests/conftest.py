"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides test settings, a mock rendering service and a mock local engine.
"""

import pytest
import pytest_asyncio
from pathlib import Path
from typing import AsyncGenerator
from unittest.mock import patch

from aiohttp.test_utils import TestServer

from chromic_client.config.settings import Settings
from chromic_client.core.dispatcher import Dispatcher
from chromic_client.models.schemas import Mode, Source

from tests.utils.mocks import MockRenderEngine, MockRenderService


def make_settings(**overrides) -> Settings:
    """Build test settings, ignoring any .env file."""
    values = {
        "environment": "testing",
        "mode": Mode.REMOTE_SERVICE,
        "api_url": "http://127.0.0.1:1",
        "log_level": "DEBUG",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    """Test settings fixture."""
    return make_settings()


@pytest.fixture
def render_service() -> MockRenderService:
    """Mock rendering service answering 200 with fixed PDF bytes."""
    return MockRenderService()


@pytest_asyncio.fixture
async def render_server(render_service: MockRenderService) -> AsyncGenerator[TestServer, None]:
    """Run the mock rendering service on a local port."""
    server = TestServer(render_service.build_app())
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def remote_settings(render_server: TestServer) -> Settings:
    """Settings pointing at the running mock rendering service."""
    return make_settings(api_url=str(render_server.make_url("/")))


@pytest.fixture
def mock_engine() -> MockRenderEngine:
    """Mock local rendering engine."""
    return MockRenderEngine()


@pytest.fixture
def remote_dispatcher(remote_settings: Settings, mock_engine: MockRenderEngine) -> Dispatcher:
    """Dispatcher in remote mode against the mock service."""
    return Dispatcher(remote_settings, engine=mock_engine)


@pytest.fixture
def local_dispatcher(mock_engine: MockRenderEngine) -> Dispatcher:
    """Dispatcher in local mode with the mock engine."""
    return Dispatcher(make_settings(mode=Mode.LOCAL_ENGINE), engine=mock_engine)


@pytest.fixture
def html_source() -> Source:
    """Sample HTML source."""
    return Source.html("<h1>Hello</h1>")


@pytest.fixture
def pdf_file(tmp_path: Path) -> Path:
    """Sample PDF file on disk."""
    path = tmp_path / "input.pdf"
    path.write_bytes(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<<>>\nendobj\n%%EOF")
    return path


@pytest.fixture
def isolated_global_settings():
    """Patch the process-wide settings used by the module-level operations."""
    with patch("chromic_client.config.settings.settings", None):
        yield
