"""
Case workspace: the user's approved cases, their evidence, access logs,
custody history and evidence downloads.
"""
import asyncio
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from casevault.api.cases import CaseService
from casevault.api.evidence import EvidenceService
from casevault.api.logs import LogService
from casevault.core.exceptions import DownloadFailedError, FetchError, UnknownActionError
from casevault.core.logging import get_logger, log_access_event
from casevault.models import AccessLog, Case, Entitlement, Evidence
from casevault.services.access_gate import CaseAccessGate, GateContext, GateDecision
from casevault.services.catalog import TitleFilter
from casevault.services.custody import CustodyTrail, EvidenceCustodyAggregator
from casevault.services.files import DownloadResult, EvidenceFileRetriever
from casevault.services.operation import OperationState

logger = get_logger(__name__)


@dataclass(frozen=True)
class CaseDetail:
    case: Case
    evidence: Tuple[Evidence, ...]
    logs: Tuple[AccessLog, ...]


async def gather_all(*aws):
    """
    Await all awaitables concurrently and return their results in order.

    Every awaitable runs to completion; the first failure (in argument
    order) is raised only after the whole join has settled.
    """
    outcomes = await asyncio.gather(*aws, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return outcomes


class CaseWorkspace:
    def __init__(
        self,
        cases: CaseService,
        evidence: EvidenceService,
        logs: LogService,
        retriever: EvidenceFileRetriever,
        gate: Optional[CaseAccessGate] = None,
    ):
        self.case_service = cases
        self.evidence_service = evidence
        self.log_service = logs
        self.retriever = retriever
        self.gate = gate or CaseAccessGate()
        self.custody = EvidenceCustodyAggregator(evidence, self.entitlement, self.gate)

        self.cases: Tuple[Case, ...] = ()
        self.cases_state = OperationState.idle()
        self._entitlements: Dict[str, Entitlement] = {}
        self._loads_issued = 0
        self._loads_committed = 0

        self.selected: Optional[Case] = None
        self.detail: Optional[CaseDetail] = None
        self.detail_state = OperationState.idle()

        self.error: Optional[str] = None

    def entitlement(self, case_id: str) -> Entitlement:
        return self._entitlements.get(case_id, Entitlement.NONE)

    def decision(self, case_id: str) -> GateDecision:
        return self.gate.decide(self.entitlement(case_id), GateContext.DETAIL)

    async def load_cases(self) -> Tuple[Case, ...]:
        """
        Load full details of every case the user holds an APPROVED request for.

        All detail fetches run concurrently; nothing is committed unless
        every fetch succeeds. A load never replaces the result of one
        started after it.
        """
        self._loads_issued += 1
        ticket = self._loads_issued
        self.cases_state = OperationState.started()
        try:
            requests = await self.case_service.list_my_requests()
            entitlements: Dict[str, Entitlement] = {}
            for request in requests:
                entitlements[request.case_id] = Entitlement.from_status(request.status)
            approved = [
                case_id
                for case_id, entitlement in entitlements.items()
                if entitlement is Entitlement.APPROVED
            ]
            cases = await gather_all(*(self.case_service.get_case(case_id) for case_id in approved))
        except FetchError as e:
            if ticket == self._loads_issued:
                self.error = e.message or "Failed to load cases"
                self.cases_state = OperationState.failed_with(self.error)
            return self.cases

        if ticket > self._loads_committed:
            self._loads_committed = ticket
            self.cases = tuple(cases)
            self._entitlements = entitlements
        if ticket == self._loads_issued:
            self.error = None
            self.cases_state = OperationState.succeeded()
        return self.cases

    def filter(self, term: str) -> TitleFilter[Case]:
        return TitleFilter(self.cases, term, lambda case: case.title)

    async def select_case(self, case_id: str) -> Optional[CaseDetail]:
        """
        Open a case and load its evidence and access logs concurrently.

        The detail is committed only when both loads succeed.

        Raises:
            NotAuthorizedError: If the case is not APPROVED for the user
        """
        self.gate.ensure_can_load(case_id, self.entitlement(case_id))
        case = next(c for c in self.cases if c.id == case_id)

        self.selected = case
        self.detail = None
        self.detail_state = OperationState.started()
        try:
            evidence, logs = await gather_all(
                self.evidence_service.list_by_case(case_id),
                self.log_service.list_by_case(case_id),
            )
        except FetchError as e:
            if self.selected is case:
                self.error = e.message or "Failed to load case details"
                self.detail_state = OperationState.failed_with(self.error)
            return None

        if self.selected is not case:
            # Another case was opened meanwhile
            return None
        self.detail = CaseDetail(case=case, evidence=tuple(evidence), logs=tuple(logs))
        self.detail_state = OperationState.succeeded()
        return self.detail

    def close_case(self) -> None:
        self.selected = None
        self.detail = None
        self.detail_state = OperationState.idle()

    async def view_history(self, evidence_id: str) -> Optional[CustodyTrail]:
        """Custody chain of an evidence item of the open case."""
        if self.selected is None:
            return None
        try:
            return await self.custody.load_history(self.selected.id, evidence_id)
        except FetchError as e:
            self.error = e.message or "Failed to load evidence history"
        except UnknownActionError as e:
            logger.error(f"Evidence {evidence_id} history is malformed: {e}")
            self.error = str(e)
        return None

    async def download_evidence(
        self,
        evidence: Evidence,
        fallback_name: Optional[str] = None,
    ) -> Optional[DownloadResult]:
        """Download the stored file of an evidence item of the open case."""
        if self.selected is None or not evidence.has_file:
            return None
        try:
            result = await self.retriever.download(evidence.ipfs_hash, fallback_name)
        except DownloadFailedError as e:
            self.error = e.message or "File download failed"
            return None
        if result is not None:
            log_access_event(
                "evidence.downloaded", self.selected.id,
                {"evidence_id": evidence.id, "file_name": result.artifact.file_name},
            )
        return result
