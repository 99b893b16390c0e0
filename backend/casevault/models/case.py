"""
Case, case summary and access request models
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from casevault.models.enums import CasePriority, CaseStatus, RequestStatus


class WireModel(BaseModel):
    """Base for backend payloads: camelCase on the wire, immutable locally."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )


class CaseSummary(WireModel):
    """Publicly listable case summary."""

    id: str
    title: str
    case_type: str
    timestamp: Optional[datetime] = None


class Case(CaseSummary):
    """Case detail, only served for approved access requests."""

    description: str = ""
    location: str = ""
    priority: CasePriority = CasePriority.MEDIUM
    status: CaseStatus = CaseStatus.OPEN
    police_name: Optional[str] = None


class AccessRequest(WireModel):
    """The current user's access request for one case."""

    case_id: str
    status: RequestStatus
    requested_by: Optional[str] = None
