"""
Case board: the public case list with per-case request affordances.
"""
from dataclasses import dataclass
from typing import List, Optional

from casevault.core.exceptions import DuplicateRequestError, FetchError
from casevault.core.logging import get_logger
from casevault.models import CaseSummary, Entitlement
from casevault.services.access_gate import CaseAccessGate, GateDecision
from casevault.services.access_requests import AccessRequestTracker
from casevault.services.catalog import CaseCatalog
from casevault.services.operation import OperationState

logger = get_logger(__name__)


@dataclass(frozen=True)
class BoardRow:
    case: CaseSummary
    entitlement: Entitlement
    decision: GateDecision
    submitting: bool = False

    @property
    def can_request(self) -> bool:
        return self.decision.can_request and not self.submitting


class CaseBoard:
    """Public case list merged with the user's request statuses."""

    def __init__(
        self,
        catalog: CaseCatalog,
        tracker: AccessRequestTracker,
        gate: Optional[CaseAccessGate] = None,
    ):
        self.catalog = catalog
        self.tracker = tracker
        self.gate = gate or tracker.gate
        self.error: Optional[str] = None

    @property
    def state(self) -> OperationState:
        return self.catalog.state

    async def refresh(self) -> bool:
        """Reload the board. Failures are kept in `error`."""
        try:
            await self.catalog.refresh()
        except FetchError as e:
            self.error = e.message or "Failed to load cases"
            return False
        self.error = None
        return True

    def rows(self, term: str = "") -> List[BoardRow]:
        rows = []
        for entry in self.catalog.filter(term):
            entitlement = self.tracker.status(entry.case.id)
            rows.append(
                BoardRow(
                    case=entry.case,
                    entitlement=entitlement,
                    decision=self.gate.decide(entitlement),
                    submitting=self.tracker.in_flight(entry.case.id),
                )
            )
        return rows

    async def request_access(self, case_id: str) -> bool:
        """
        Request access to a case.

        Returns True when a request was submitted. Repeated clicks while a
        request is in flight, pending or approved are ignored. When the
        re-read that follows a submission fails, `error` says so.
        """
        try:
            await self.tracker.submit_request(case_id)
        except DuplicateRequestError as e:
            logger.debug(str(e))
            return False
        except FetchError as e:
            self.error = e.message or "Access request failed"
            return False
        logger.info(f"Access request sent for {case_id}")
        if self.catalog.state.failed:
            self.error = self.catalog.state.error or "Failed to reload cases"
        else:
            self.error = None
        return True
