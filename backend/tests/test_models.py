"""
Tests for domain models and enumerations.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from casevault.core.exceptions import UnknownActionError
from casevault.models import (
    AccessRequest,
    AuditAction,
    Case,
    CasePriority,
    CaseStatus,
    Entitlement,
    Evidence,
    EvidenceHistoryEntry,
    RequestStatus,
)


class TestAuditActionDecode:
    """Test strict decoding of history action codes."""

    @pytest.mark.parametrize(
        "code,label",
        [(0, "READ"), (1, "CREATE"), (2, "UPDATE"), (3, "DELETE")],
    )
    def test_known_codes(self, code, label):
        """Test each known index decodes to its label."""
        assert AuditAction.decode(code).label == label

    @pytest.mark.parametrize("code", [4, -1, 99])
    def test_out_of_range_code_raises(self, code):
        """Test out-of-range codes are rejected, not coerced."""
        with pytest.raises(UnknownActionError) as exc_info:
            AuditAction.decode(code)
        assert exc_info.value.code == code

    def test_non_integer_code_raises(self):
        """Test booleans and strings are not accepted as codes."""
        with pytest.raises(UnknownActionError):
            AuditAction.decode(True)
        with pytest.raises(UnknownActionError):
            AuditAction.decode("READ")


class TestEnumTones:
    """Test badge tones cover every member."""

    def test_every_priority_has_a_tone(self):
        assert {p.tone for p in CasePriority} == {"green", "yellow", "orange", "red"}

    def test_every_status_has_a_tone(self):
        assert [s.tone for s in CaseStatus] == ["blue", "purple", "gray", "slate"]


class TestEntitlement:
    """Test entitlement derivation from request status."""

    def test_no_request_is_none(self):
        assert Entitlement.from_status(None) is Entitlement.NONE

    @pytest.mark.parametrize("status", list(RequestStatus))
    def test_status_maps_to_same_name(self, status):
        assert Entitlement.from_status(status).value == status.value


class TestWireModels:
    """Test parsing of backend payloads."""

    def test_camel_case_access_request(self):
        """Test camelCase keys are accepted."""
        request = AccessRequest.model_validate(
            {"caseId": "CASE-1", "status": "PENDING", "requestedBy": "officer-7"}
        )
        assert request.case_id == "CASE-1"
        assert request.status is RequestStatus.PENDING
        assert request.requested_by == "officer-7"

    def test_unknown_request_status_rejected(self):
        """Test statuses outside the enumeration fail validation."""
        with pytest.raises(ValidationError):
            AccessRequest.model_validate({"caseId": "CASE-1", "status": "MAYBE"})

    def test_case_detail_enums(self):
        """Test priority and status parse into their enums."""
        case = Case.model_validate({
            "id": 42,
            "title": "Harbor Smuggling Ring",
            "caseType": "SMUGGLING",
            "priority": "CRITICAL",
            "status": "ARCHIVED",
        })
        assert case.id == "42"
        assert case.priority is CasePriority.CRITICAL
        assert case.status is CaseStatus.ARCHIVED
        assert case.police_name is None

    def test_unknown_priority_rejected(self):
        """Test priorities outside the enumeration fail validation."""
        with pytest.raises(ValidationError):
            Case.model_validate({
                "id": "CASE-1", "title": "x", "caseType": "y", "priority": "URGENT",
            })

    def test_evidence_without_hash_has_no_file(self):
        evidence = Evidence.model_validate({
            "id": "EV-3",
            "eType": "PHYSICAL",
            "collectedAt": "2024-02-13T17:45:00Z",
        })
        assert evidence.has_file is False
        assert evidence.collected_at == datetime(2024, 2, 13, 17, 45, tzinfo=timezone.utc)

    def test_evidence_with_hash_has_file(self):
        evidence = Evidence.model_validate({
            "id": "EV-1",
            "eType": "PHOTO",
            "collectedAt": "2024-02-11T09:00:00Z",
            "ipfsHash": "abc123",
        })
        assert evidence.has_file is True

    def test_history_timestamp_accepts_numeric_string(self):
        """Test second-resolution timestamps sent as strings."""
        entry = EvidenceHistoryEntry.model_validate({
            "id": "H-1", "version": 1, "action": 0, "timestamp": "1707642000",
        })
        assert entry.timestamp == 1707642000

    def test_history_version_starts_at_one(self):
        with pytest.raises(ValidationError):
            EvidenceHistoryEntry.model_validate({
                "id": "H-0", "version": 0, "action": 0, "timestamp": 1,
            })

    def test_models_are_immutable(self):
        request = AccessRequest(case_id="CASE-1", status=RequestStatus.PENDING)
        with pytest.raises(ValidationError):
            request.status = RequestStatus.APPROVED
