"""
Case and Evidence Enumeration Types

These enums define the closed value sets the backend uses for case
metadata, access requests and evidence audit records.
"""
from enum import Enum as PyEnum, IntEnum
from typing import Optional

from casevault.core.exceptions import UnknownActionError


class RequestStatus(str, PyEnum):
    """Server-side status of an access request."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Entitlement(str, PyEnum):
    """Resolved access state of the current user for one case."""
    NONE = "NONE"            # Never requested
    PENDING = "PENDING"      # Awaiting review
    APPROVED = "APPROVED"    # Case data may be loaded
    REJECTED = "REJECTED"    # Reviewed and denied

    @classmethod
    def from_status(cls, status: Optional[RequestStatus]) -> "Entitlement":
        if status is None:
            return cls.NONE
        return cls(RequestStatus(status).value)


class CasePriority(str, PyEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def tone(self) -> str:
        """Badge tone for the priority."""
        return PRIORITY_TONES[self]


class CaseStatus(str, PyEnum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"
    ARCHIVED = "ARCHIVED"

    @property
    def tone(self) -> str:
        """Badge tone for the lifecycle status."""
        return STATUS_TONES[self]


PRIORITY_TONES: dict[CasePriority, str] = {
    CasePriority.LOW: "green",
    CasePriority.MEDIUM: "yellow",
    CasePriority.HIGH: "orange",
    CasePriority.CRITICAL: "red",
}

STATUS_TONES: dict[CaseStatus, str] = {
    CaseStatus.OPEN: "blue",
    CaseStatus.IN_PROGRESS: "purple",
    CaseStatus.CLOSED: "gray",
    CaseStatus.ARCHIVED: "slate",
}


class AuditAction(IntEnum):
    """Evidence history action. The integer value is the wire code."""
    READ = 0
    CREATE = 1
    UPDATE = 2
    DELETE = 3

    @property
    def label(self) -> str:
        return self.name

    @classmethod
    def decode(cls, code: int) -> "AuditAction":
        """
        Decode a wire action code.

        Raises:
            UnknownActionError: If the code is not one of the known indices
        """
        if isinstance(code, bool) or not isinstance(code, int):
            raise UnknownActionError(code)
        try:
            return cls(code)
        except ValueError:
            raise UnknownActionError(code) from None
