"""
Tests for evidence custody reconstruction.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from casevault.core.exceptions import FetchError, NotAuthorizedError, UnknownActionError
from casevault.models import AuditAction, Entitlement, EvidenceHistoryEntry
from casevault.services.custody import (
    CustodyRecord,
    EvidenceCustodyAggregator,
    has_dense_versions,
)
from casevault.services.operation import Phase


def entitlements(**by_case):
    return lambda case_id: by_case.get(case_id.replace("-", "_"), Entitlement.NONE)


@pytest.fixture
def aggregator(evidence_service) -> EvidenceCustodyAggregator:
    return EvidenceCustodyAggregator(evidence_service, entitlements(CASE_2=Entitlement.APPROVED))


class TestCustodyRecord:
    """Test decoding of single history entries."""

    def make_entry(self, **overrides) -> EvidenceHistoryEntry:
        data = {
            "id": "H-1",
            "version": 1,
            "action": 1,
            "performedByName": "Officer Khan",
            "timestamp": 1707642000,
            "description": "Dock camera still",
            "eType": "PHOTO",
            "locationFound": "Pier 4",
        }
        data.update(overrides)
        return EvidenceHistoryEntry.model_validate(data)

    def test_seconds_are_scaled_to_millis(self):
        """Test the timestamp is multiplied by 1000 before display."""
        record = CustodyRecord.from_entry(self.make_entry(timestamp=1707642000))
        assert record.epoch_millis == 1707642000000
        assert record.recorded_at == datetime(2024, 2, 11, 9, 0, tzinfo=timezone.utc)

    def test_action_is_decoded(self):
        record = CustodyRecord.from_entry(self.make_entry(action=3))
        assert record.action is AuditAction.DELETE
        assert "Action : DELETE" in record.headline

    def test_unknown_action_raises(self):
        with pytest.raises(UnknownActionError):
            CustodyRecord.from_entry(self.make_entry(action=4))


class TestDenseVersions:
    def test_dense(self):
        entries = [
            EvidenceHistoryEntry(id=f"H-{v}", version=v, action=0, timestamp=v)
            for v in (1, 2, 3)
        ]
        assert has_dense_versions(entries) is True

    def test_gap(self):
        entries = [
            EvidenceHistoryEntry(id=f"H-{v}", version=v, action=0, timestamp=v)
            for v in (1, 3)
        ]
        assert has_dense_versions(entries) is False


class TestLoadHistory:
    """Test loading the custody chain from the backend."""

    @pytest.mark.asyncio
    async def test_server_order_is_preserved(self, aggregator):
        """Test versions stay [1, 2, 3] although timestamps are out of order."""
        trail = await aggregator.load_history("CASE-2", "EV-1")

        assert trail.versions == (1, 2, 3)
        assert [r.action.label for r in trail] == ["CREATE", "UPDATE", "READ"]
        assert [r.epoch_millis for r in trail] == [1707642000000, 1707640000000, 1707641000000]
        assert [r.performed_by for r in trail] == ["Officer Khan", "Analyst Mehta", "Insp. Rao"]
        assert aggregator.state.phase is Phase.SUCCEEDED
        assert aggregator.trail is trail

    @pytest.mark.asyncio
    async def test_empty_history(self, aggregator):
        trail = await aggregator.load_history("CASE-2", "EV-3")
        assert trail.is_empty
        assert len(trail) == 0

    @pytest.mark.asyncio
    async def test_unknown_action_fails_the_load(self, aggregator, store):
        """Test a bad action code is surfaced, not coerced."""
        store.history[("CASE-2", "EV-1")][1]["action"] = 4

        with pytest.raises(UnknownActionError):
            await aggregator.load_history("CASE-2", "EV-1")

        assert aggregator.state.phase is Phase.FAILED
        assert aggregator.trail is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("case_id", ["CASE-1", "CASE-3", "CASE-4"])
    async def test_unapproved_case_is_denied(self, evidence_service, store, case_id):
        """Test the gate denies history loads even when invoked directly."""
        aggregator = EvidenceCustodyAggregator(
            evidence_service,
            entitlements(
                CASE_1=Entitlement.NONE,
                CASE_3=Entitlement.PENDING,
                CASE_4=Entitlement.REJECTED,
            ),
        )
        with pytest.raises(NotAuthorizedError):
            await aggregator.load_history(case_id, "EV-1")
        assert store.calls["history"] == 0

    @pytest.mark.asyncio
    async def test_second_call_while_pending_is_a_no_op(self, aggregator, store):
        release = store.hold("history")

        first = asyncio.create_task(aggregator.load_history("CASE-2", "EV-1"))
        await asyncio.sleep(0)
        assert aggregator.state.phase is Phase.IN_FLIGHT

        assert await aggregator.load_history("CASE-2", "EV-2") is None

        release.set()
        trail = await first
        assert trail.evidence_id == "EV-1"
        assert store.calls["history"] == 1

    @pytest.mark.asyncio
    async def test_fetch_failure_releases_guard(self, aggregator, store):
        store.fail("history", 500, "History service down")

        with pytest.raises(FetchError):
            await aggregator.load_history("CASE-2", "EV-1")
        assert aggregator.state.phase is Phase.FAILED
        assert aggregator.state.error == "History service down"

        del store.failures["history"]
        trail = await aggregator.load_history("CASE-2", "EV-1")
        assert len(trail) == 3
