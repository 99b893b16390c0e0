"""
Domain models
"""
from casevault.models.enums import (
    RequestStatus,
    Entitlement,
    CasePriority,
    CaseStatus,
    AuditAction,
)
from casevault.models.case import CaseSummary, Case, AccessRequest
from casevault.models.evidence import Evidence, EvidenceHistoryEntry, AccessLog

__all__ = [
    "RequestStatus",
    "Entitlement",
    "CasePriority",
    "CaseStatus",
    "AuditAction",
    "CaseSummary",
    "Case",
    "AccessRequest",
    "Evidence",
    "EvidenceHistoryEntry",
    "AccessLog",
]
