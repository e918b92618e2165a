"""
Async HTTP client for the Judge0 code execution API.

Only the three calls the execute flow needs are wrapped. Non-2xx answers
raise httpx.HTTPStatusError; mapping them to API errors is up to the caller.
"""
from typing import Any, Dict, List, Optional

import httpx

from devmate.utils.config import Settings


class Judge0Client:
    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        api_host: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_host = api_host
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "Judge0Client":
        return cls(
            base_url=settings.JUDGE0_BASE_URL,
            api_key=settings.JUDGE0_API_KEY,
            api_host=settings.JUDGE0_API_HOST,
            timeout=settings.JUDGE0_REQUEST_TIMEOUT,
        )

    @property
    def headers(self) -> Dict[str, str]:
        # RapidAPI credentials; a self-hosted Judge0 takes none
        if not self.api_key:
            return {}
        headers = {"X-RapidAPI-Key": self.api_key}
        if self.api_host:
            headers["X-RapidAPI-Host"] = self.api_host
        return headers

    def _client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {
            "base_url": self.base_url,
            "headers": self.headers,
            "timeout": self.timeout,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def list_languages(self) -> List[Dict[str, Any]]:
        """GET /languages - the catalog of {id, name, ...} records"""
        async with self._client() as client:
            resp = await client.get("/languages")
            resp.raise_for_status()
            return resp.json()

    async def create_submission(self, source_code: str, language_id: int, stdin: str = "") -> Any:
        """POST /submissions - returns the raw payload, normally {"token": ...}"""
        async with self._client() as client:
            resp = await client.post(
                "/submissions",
                json={
                    "source_code": source_code,
                    "language_id": language_id,
                    "stdin": stdin,
                },
            )
            resp.raise_for_status()
            return resp.json()

    async def get_submission(self, token: str) -> Any:
        """GET /submissions/{token} - one status snapshot"""
        async with self._client() as client:
            resp = await client.get(f"/submissions/{token}")
            resp.raise_for_status()
            return resp.json()
