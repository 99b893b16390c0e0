"""
Portal session: wires the API client and all components together.
"""
from typing import Optional

import httpx

from casevault.api import ApiClient, CaseService, EvidenceService, FileService, LogService
from casevault.core.config import Settings, settings as default_settings
from casevault.core.logging import get_logger
from casevault.services.access_gate import CaseAccessGate
from casevault.services.access_requests import AccessRequestTracker
from casevault.services.board import CaseBoard
from casevault.services.catalog import CaseCatalog
from casevault.services.files import DirectorySaveTarget, EvidenceFileRetriever, SaveTarget
from casevault.services.workspace import CaseWorkspace

logger = get_logger(__name__)


class PortalSession:
    """
    One authenticated user's view of the backend.

    Usage:
        async with PortalSession() as portal:
            await portal.board.refresh()
            await portal.workspace.load_cases()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        save_target: Optional[SaveTarget] = None,
    ):
        self.settings = settings or default_settings
        self.api = ApiClient(self.settings, client=http_client)

        self.cases = CaseService(self.api)
        self.evidence = EvidenceService(self.api)
        self.logs = LogService(self.api)
        self.files = FileService(self.api)

        self.gate = CaseAccessGate(settings=self.settings)
        self.catalog = CaseCatalog(self.cases)
        self.tracker = AccessRequestTracker(self.cases, self.catalog, self.gate)
        self.board = CaseBoard(self.catalog, self.tracker, self.gate)

        retriever = EvidenceFileRetriever(
            self.files,
            save_target or DirectorySaveTarget(settings=self.settings),
            settings=self.settings,
        )
        self.workspace = CaseWorkspace(
            self.cases, self.evidence, self.logs, retriever, self.gate
        )

    async def __aenter__(self) -> "PortalSession":
        logger.info(f"Starting {self.settings.APP_NAME} session against {self.settings.API_BASE_URL}")
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.api.aclose()
