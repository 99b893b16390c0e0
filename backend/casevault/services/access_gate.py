"""
Case access gate.

Pure decision logic: maps an entitlement to the affordance shown for a
case and decides whether case detail, evidence and logs may be loaded.
"""
from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Optional

from casevault.core.config import Settings, settings as default_settings
from casevault.core.exceptions import NotAuthorizedError
from casevault.models import Entitlement


class GateAction(str, PyEnum):
    REQUEST = "request"              # Request button enabled
    SHOW_PENDING = "show_pending"    # Pending badge, request disabled
    SHOW_APPROVED = "show_approved"  # Approved badge, request disabled
    SHOW_REJECTED = "show_rejected"  # Rejected badge when re-request is disabled
    VIEW = "view"                    # Open the case detail


class GateContext(str, PyEnum):
    CATALOG = "catalog"  # Public case list
    DETAIL = "detail"    # The user's approved cases


@dataclass(frozen=True)
class GateDecision:
    action: GateAction
    can_request: bool
    can_load_detail: bool
    badge: Optional[Entitlement] = None


class CaseAccessGate:
    def __init__(self, allow_rerequest: Optional[bool] = None, settings: Optional[Settings] = None):
        if allow_rerequest is None:
            allow_rerequest = (settings or default_settings).ALLOW_REREQUEST_AFTER_REJECTION
        self.allow_rerequest = allow_rerequest

    def decide(
        self,
        entitlement: Entitlement,
        context: GateContext = GateContext.CATALOG,
    ) -> GateDecision:
        if entitlement is Entitlement.APPROVED:
            if context is GateContext.DETAIL:
                return GateDecision(GateAction.VIEW, can_request=False, can_load_detail=True)
            return GateDecision(
                GateAction.SHOW_APPROVED,
                can_request=False,
                can_load_detail=True,
                badge=Entitlement.APPROVED,
            )
        if entitlement is Entitlement.PENDING:
            return GateDecision(
                GateAction.SHOW_PENDING,
                can_request=False,
                can_load_detail=False,
                badge=Entitlement.PENDING,
            )
        if entitlement is Entitlement.REJECTED and not self.allow_rerequest:
            return GateDecision(
                GateAction.SHOW_REJECTED,
                can_request=False,
                can_load_detail=False,
                badge=Entitlement.REJECTED,
            )
        if entitlement in (Entitlement.NONE, Entitlement.REJECTED):
            return GateDecision(GateAction.REQUEST, can_request=True, can_load_detail=False)
        raise ValueError(f"Unhandled entitlement: {entitlement!r}")

    def can_request(self, entitlement: Entitlement) -> bool:
        return self.decide(entitlement).can_request

    def ensure_can_load(self, case_id: str, entitlement: Entitlement) -> None:
        """
        Raises:
            NotAuthorizedError: Unless the entitlement is APPROVED
        """
        if not self.decide(entitlement).can_load_detail:
            raise NotAuthorizedError(case_id, entitlement.value)
