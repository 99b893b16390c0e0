"""
Evidence custody aggregation.

Turns the backend's evidence history into a displayable audit trail.
The server order is authoritative: records are never re-sorted, action
codes are decoded strictly and timestamps are scaled from unix seconds to
epoch milliseconds before display.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional, Sequence, Tuple

from casevault.api.evidence import EvidenceService
from casevault.core.logging import get_logger, log_access_event
from casevault.models import AuditAction, Entitlement, EvidenceHistoryEntry
from casevault.services.access_gate import CaseAccessGate
from casevault.services.operation import OperationState, SingleFlight

logger = get_logger(__name__)


@dataclass(frozen=True)
class CustodyRecord:
    """One decoded entry of the custody chain."""
    id: str
    version: int
    action: AuditAction
    performed_by: str
    epoch_millis: int
    description: str
    e_type: str
    location_found: str

    @classmethod
    def from_entry(cls, entry: EvidenceHistoryEntry) -> "CustodyRecord":
        return cls(
            id=entry.id,
            version=entry.version,
            action=AuditAction.decode(entry.action),
            performed_by=entry.performed_by_name,
            epoch_millis=entry.timestamp * 1000,
            description=entry.description,
            e_type=entry.e_type,
            location_found=entry.location_found,
        )

    @property
    def recorded_at(self) -> datetime:
        return datetime.fromtimestamp(self.epoch_millis / 1000, tz=timezone.utc)

    @property
    def headline(self) -> str:
        return (
            f"Evidence Version {self.version} | Action : {self.action.label} | "
            f"Performed by {self.performed_by}"
        )


@dataclass(frozen=True)
class CustodyTrail:
    case_id: str
    evidence_id: str
    records: Tuple[CustodyRecord, ...]

    def __iter__(self) -> Iterator[CustodyRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def versions(self) -> Tuple[int, ...]:
        return tuple(record.version for record in self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records


def has_dense_versions(entries: Sequence[EvidenceHistoryEntry]) -> bool:
    """True when versions run 1, 2, 3, ... in the given order."""
    return all(entry.version == index for index, entry in enumerate(entries, start=1))


class EvidenceCustodyAggregator:
    """
    Loads the custody chain of one evidence item at a time.

    `entitlement_of` resolves the caller's entitlement for a case id; only
    APPROVED cases may be read.
    """

    def __init__(
        self,
        evidence: EvidenceService,
        entitlement_of: Callable[[str], Entitlement],
        gate: Optional[CaseAccessGate] = None,
    ):
        self.evidence = evidence
        self.entitlement_of = entitlement_of
        self.gate = gate or CaseAccessGate()
        self._load = SingleFlight("custody.load_history")
        self.trail: Optional[CustodyTrail] = None

    @property
    def state(self) -> OperationState:
        return self._load.state

    async def load_history(self, case_id: str, evidence_id: str) -> Optional[CustodyTrail]:
        """
        Fetch and decode the custody chain of an evidence item.

        Returns None without fetching while another load is in flight.

        Raises:
            NotAuthorizedError: If the case is not APPROVED
            UnknownActionError: If an entry carries an unknown action code
            FetchError: If the history cannot be fetched
        """
        if self._load.busy:
            logger.debug(f"History load for {evidence_id} ignored, another load is in flight")
            return None

        self.gate.ensure_can_load(case_id, self.entitlement_of(case_id))

        with self._load.run():
            entries = await self.evidence.get_history(case_id, evidence_id)
            if entries and not has_dense_versions(entries):
                logger.warning(
                    f"Evidence {evidence_id} history versions are not dense: "
                    f"{[entry.version for entry in entries]}"
                )
            trail = CustodyTrail(
                case_id=case_id,
                evidence_id=evidence_id,
                records=tuple(CustodyRecord.from_entry(entry) for entry in entries),
            )

        self.trail = trail
        log_access_event(
            "evidence.history_viewed", case_id,
            {"evidence_id": evidence_id, "versions": len(trail)},
        )
        return trail
