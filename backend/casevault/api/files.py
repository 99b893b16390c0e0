"""
File storage API
"""
from casevault.api.client import ApiClient, RawPayload


class FileService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def fetch(self, content_id: str) -> RawPayload:
        """Raw bytes and declared media type of a stored evidence file."""
        return await self.api.get_bytes(f"/files/{content_id}")
