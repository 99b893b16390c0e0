"""
Backend API client.

Thin wrapper over httpx.AsyncClient: bearer authentication, retry with
backoff for idempotent reads, and translation of every transport or
status failure into FetchError.
"""
from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from casevault.core.config import Settings, settings as default_settings
from casevault.core.exceptions import FetchError
from casevault.core.logging import get_logger

logger = get_logger(__name__)

RETRYABLE_STATUS = (429, 502, 503, 504)
RETRYABLE_ERRORS = (httpx.ConnectError, httpx.ReadTimeout, httpx.RemoteProtocolError)


@dataclass(frozen=True)
class RawPayload:
    """Raw response body plus its declared media type."""
    content: bytes
    media_type: Optional[str]


class ApiClient:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        client: httpx.AsyncClient | None = None,
    ):
        self._settings = settings or default_settings
        self._owned_client = client is None

        if client is None:
            timeout_s = self._settings.API_TIMEOUT_SECONDS
            timeout = httpx.Timeout(
                timeout=timeout_s,
                connect=min(5.0, timeout_s),
                pool=min(5.0, timeout_s),
            )
            limits = httpx.Limits(
                max_connections=self._settings.API_MAX_CONNECTIONS,
                keepalive_expiry=30.0,
            )
            headers = {"Accept": "application/json"}
            if self._settings.API_TOKEN:
                headers["Authorization"] = f"Bearer {self._settings.API_TOKEN}"
            client = httpx.AsyncClient(
                base_url=self._settings.API_BASE_URL.rstrip("/"),
                timeout=timeout,
                limits=limits,
                headers=headers,
                follow_redirects=True,
            )

        self._client = client

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owned_client:
            await self._client.aclose()

    async def get_json(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        resp = await self._request("GET", path, params=params)
        return self._decode_json(resp)

    async def post_json(self, path: str, *, json_body: Any | None = None) -> Any:
        resp = await self._request("POST", path, json_body=json_body)
        return self._decode_json(resp)

    async def get_bytes(self, path: str) -> RawPayload:
        resp = await self._request("GET", path, headers={"Accept": "*/*"})
        return RawPayload(
            content=resp.content,
            media_type=resp.headers.get("content-type") or None,
        )

    @staticmethod
    def _decode_json(resp: httpx.Response) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise FetchError(
                f"Malformed JSON from {resp.request.url.path}", resp.status_code
            ) from e

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        path_norm = path if path.startswith("/") else f"/{path}"
        # Submissions are not idempotent, only reads are retried
        max_retries = self._settings.API_MAX_RETRIES if method == "GET" else 0

        last_exc: Exception | None = None
        for attempt in range(max_retries + 1):
            try:
                resp = await self._client.request(
                    method,
                    path_norm,
                    params=params,
                    json=json_body,
                    headers=headers,
                )
            except RETRYABLE_ERRORS as e:
                last_exc = e
                if attempt >= max_retries:
                    break
                logger.warning(f"{method} {path_norm} failed ({e!r}), retrying")
                await self._sleep_backoff(None, attempt)
                continue
            except httpx.HTTPError as e:
                raise FetchError(f"Request to {path_norm} failed: {e}") from e

            if resp.status_code in RETRYABLE_STATUS and attempt < max_retries:
                logger.warning(f"{method} {path_norm} returned {resp.status_code}, retrying")
                await self._sleep_backoff(resp, attempt)
                continue

            if resp.is_error:
                raise FetchError(self._error_message(resp), resp.status_code)

            return resp

        raise FetchError(f"Request to {path_norm} failed: {last_exc}")

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        detail: Any = None
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("message") or body.get("detail")
        if not detail:
            detail = resp.text or resp.reason_phrase
        return str(detail)

    async def _sleep_backoff(
        self, response: httpx.Response | None, attempt: int
    ) -> None:
        retry_after_s: float | None = None
        if response is not None:
            ra = response.headers.get("retry-after")
            if ra:
                try:
                    retry_after_s = float(ra)
                except ValueError:
                    retry_after_s = None

        base = 0.25 * (2**attempt)
        jitter = random.random() * 0.25
        delay = min(2.0, base + jitter)
        if retry_after_s is not None:
            delay = max(delay, retry_after_s)

        await asyncio.sleep(delay)
