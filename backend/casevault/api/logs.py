"""
Access log API
"""
from typing import List

from pydantic import TypeAdapter

from casevault.api.cases import parse_payload
from casevault.api.client import ApiClient
from casevault.core.logging import get_logger
from casevault.models import AccessLog

logger = get_logger(__name__)

_logs = TypeAdapter(List[AccessLog])


class LogService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def list_by_case(self, case_id: str) -> List[AccessLog]:
        payload = await self.api.get_json(f"/logs/case/{case_id}")
        if not isinstance(payload, list):
            logger.warning(f"Access log payload for case {case_id} is not a list, treating as empty")
            return []
        return parse_payload(_logs, payload, "access log")
