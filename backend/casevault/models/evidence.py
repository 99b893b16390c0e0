"""
Evidence, evidence history and access log models
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from casevault.models.case import WireModel


class Evidence(WireModel):
    """An evidence item belonging to exactly one case."""

    id: str
    e_type: str
    description: str = ""
    collected_at: datetime
    location_found: str = ""
    ipfs_hash: Optional[str] = None

    @property
    def has_file(self) -> bool:
        """True when a downloadable artifact exists for this evidence."""
        return bool(self.ipfs_hash)


class EvidenceHistoryEntry(WireModel):
    """One immutable audit record of an evidence item."""

    id: str
    version: int = Field(ge=1)
    action: int
    performed_by_name: str = ""
    timestamp: int  # unix seconds
    description: str = ""
    e_type: str = ""
    location_found: str = ""


class AccessLog(WireModel):
    """Case-level access log line, display only."""

    id: str
    action: str
    performed_by_name: str = ""
    performed_by_role: str = ""
    timestamp: datetime
