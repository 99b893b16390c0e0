"""
Case API: public summaries, access requests and case detail
"""
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from casevault.api.client import ApiClient
from casevault.core.exceptions import FetchError
from casevault.models import AccessRequest, Case, CaseSummary

_summaries = TypeAdapter(List[CaseSummary])
_requests = TypeAdapter(List[AccessRequest])
_case = TypeAdapter(Case)
_request = TypeAdapter(AccessRequest)


def parse_payload(adapter: TypeAdapter, payload, what: str):
    """Validate a decoded payload, reporting contract violations as FetchError."""
    try:
        return adapter.validate_python(payload if payload is not None else [])
    except ValidationError as e:
        raise FetchError(f"Unexpected {what} payload: {e.error_count()} invalid field(s)") from e


class CaseService:
    """Case endpoints of the backend."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def list_public_cases(self) -> List[CaseSummary]:
        payload = await self.api.get_json("/cases/public")
        return parse_payload(_summaries, payload, "case list")

    async def list_my_requests(self) -> List[AccessRequest]:
        payload = await self.api.get_json("/cases/requests/me")
        return parse_payload(_requests, payload, "access request list")

    async def get_case(self, case_id: str) -> Case:
        payload = await self.api.get_json(f"/cases/{case_id}")
        if payload is None:
            raise FetchError(f"Case {case_id} returned no data")
        return parse_payload(_case, payload, "case")

    async def request_access(self, case_id: str) -> Optional[AccessRequest]:
        """Submit an access request. Returns the created request when echoed."""
        payload = await self.api.post_json(f"/cases/{case_id}/access-requests")
        if not isinstance(payload, dict):
            return None
        return parse_payload(_request, payload, "access request")
