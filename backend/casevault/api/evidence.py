"""
Evidence API
"""
from typing import List

from pydantic import TypeAdapter

from casevault.api.cases import parse_payload
from casevault.api.client import ApiClient
from casevault.models import Evidence, EvidenceHistoryEntry

_evidence = TypeAdapter(List[Evidence])
_history = TypeAdapter(List[EvidenceHistoryEntry])


class EvidenceService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def list_by_case(self, case_id: str) -> List[Evidence]:
        payload = await self.api.get_json(f"/evidence/case/{case_id}")
        return parse_payload(_evidence, payload, "evidence list")

    async def get_history(self, case_id: str, evidence_id: str) -> List[EvidenceHistoryEntry]:
        """History entries of one evidence item, in server order."""
        payload = await self.api.get_json(
            f"/evidence/case/{case_id}/{evidence_id}/history"
        )
        return parse_payload(_history, payload, "evidence history")
