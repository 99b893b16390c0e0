"""
Access request tracker.

Guards access-request submission per case and answers the current
request status of each case. A successful submission is recorded as
PENDING immediately and then triggers a full catalog re-read; the
catalog is eventually consistent with the backend, not transactional.
"""
from typing import Dict, Optional, Tuple

from casevault.api.cases import CaseService
from casevault.core.exceptions import DuplicateRequestError, FetchError
from casevault.core.logging import get_logger, log_access_event
from casevault.models import Entitlement
from casevault.services.access_gate import CaseAccessGate
from casevault.services.catalog import CaseCatalog
from casevault.services.operation import KeyedSingleFlight, OperationState

logger = get_logger(__name__)


class AccessRequestTracker:
    def __init__(
        self,
        cases: CaseService,
        catalog: CaseCatalog,
        gate: Optional[CaseAccessGate] = None,
    ):
        self.cases = cases
        self.catalog = catalog
        self.gate = gate or CaseAccessGate()
        self._submissions = KeyedSingleFlight("access_request")
        # case_id -> (status, last catalog refresh ticket issued when the POST resolved)
        self._local: Dict[str, Tuple[Entitlement, int]] = {}

    def status(self, case_id: str) -> Entitlement:
        """
        Most recent known request status for the case.

        A local submission stands until the catalog commits a refresh that
        was started after the submission resolved.
        """
        local = self._local.get(case_id)
        if local is not None:
            entitlement, ticket = local
            if self.catalog.snapshot.ticket <= ticket:
                return entitlement
            del self._local[case_id]
        return self.catalog.entitlement(case_id)

    def state(self, case_id: str) -> OperationState:
        return self._submissions.state(case_id)

    def in_flight(self, case_id: str) -> bool:
        return self._submissions.busy(case_id)

    async def submit_request(self, case_id: str) -> Entitlement:
        """
        Submit an access request for a case.

        Args:
            case_id: The case to request access to

        Returns:
            The entitlement recorded for the case (PENDING)

        Raises:
            DuplicateRequestError: If a submission is in flight or the case
                already has a request that blocks another one
            FetchError: If the backend rejects or fails the submission
        """
        if self._submissions.busy(case_id):
            raise DuplicateRequestError(case_id, "a request is already in flight")

        current = self.status(case_id)
        if not self.gate.can_request(current):
            raise DuplicateRequestError(case_id, f"request already {current.value.lower()}")

        with self._submissions.run(case_id):
            await self.cases.request_access(case_id)
            self._local[case_id] = (Entitlement.PENDING, self.catalog.issued)

        log_access_event("access.requested", case_id, {"previous": current.value})

        try:
            await self.catalog.refresh()
        except FetchError as e:
            logger.warning(f"Catalog refresh after access request for {case_id} failed: {e}")

        return self.status(case_id)
