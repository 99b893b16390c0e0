"""
Services package
"""
from casevault.services.operation import OperationState, Phase, SingleFlight
from casevault.services.catalog import CaseCatalog, CatalogSnapshot, CatalogEntry, TitleFilter
from casevault.services.access_gate import CaseAccessGate, GateAction, GateContext, GateDecision
from casevault.services.access_requests import AccessRequestTracker
from casevault.services.custody import CustodyRecord, CustodyTrail, EvidenceCustodyAggregator
from casevault.services.files import (
    DirectorySaveTarget,
    EvidenceArtifact,
    EvidenceFileRetriever,
    extension_for,
)
from casevault.services.board import CaseBoard, BoardRow
from casevault.services.workspace import CaseWorkspace, CaseDetail

__all__ = [
    "OperationState",
    "Phase",
    "SingleFlight",
    "CaseCatalog",
    "CatalogSnapshot",
    "CatalogEntry",
    "TitleFilter",
    "CaseAccessGate",
    "GateAction",
    "GateContext",
    "GateDecision",
    "AccessRequestTracker",
    "CustodyRecord",
    "CustodyTrail",
    "EvidenceCustodyAggregator",
    "DirectorySaveTarget",
    "EvidenceArtifact",
    "EvidenceFileRetriever",
    "extension_for",
    "CaseBoard",
    "BoardRow",
    "CaseWorkspace",
    "CaseDetail",
]
