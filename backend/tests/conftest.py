"""
Test configuration and fixtures for CaseVault tests.
"""

import httpx
import pytest
import pytest_asyncio

from casevault.api import ApiClient, CaseService, EvidenceService, FileService, LogService
from casevault.core.config import Settings
from casevault.session import PortalSession
from fake_backend import FakeStore, build_app, make_store


BASE_URL = "http://backend.test"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at the fake backend, downloads under tmp_path."""
    return Settings(
        API_BASE_URL=BASE_URL,
        API_TOKEN="test-token",
        API_MAX_RETRIES=0,
        DOWNLOAD_DIR=str(tmp_path / "downloads"),
    )


@pytest.fixture
def store() -> FakeStore:
    return make_store()


@pytest_asyncio.fixture
async def http(store: FakeStore):
    """HTTP client wired to the fake backend app."""
    transport = httpx.ASGITransport(app=build_app(store))
    async with httpx.AsyncClient(base_url=BASE_URL, transport=transport) as client:
        yield client


@pytest.fixture
def api(http, settings) -> ApiClient:
    return ApiClient(settings, client=http)


@pytest.fixture
def case_service(api) -> CaseService:
    return CaseService(api)


@pytest.fixture
def evidence_service(api) -> EvidenceService:
    return EvidenceService(api)


@pytest.fixture
def log_service(api) -> LogService:
    return LogService(api)


@pytest.fixture
def file_service(api) -> FileService:
    return FileService(api)


@pytest.fixture
def portal(http, settings) -> PortalSession:
    """A full session against the fake backend."""
    return PortalSession(settings, http_client=http)
