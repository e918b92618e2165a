"""
Gemini generateContent over plain HTTP.
"""
from typing import Any, Dict, Optional

import httpx

from devmate.utils.config import Settings


class GeminiError(Exception):
    """Base error for the Gemini client"""
    pass


class GeminiConfigError(GeminiError):
    """No API key configured"""
    pass


class GeminiResponseError(GeminiError):
    """Payload without the expected structure"""
    pass


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        max_output_tokens: int = 2000,
        timeout: float = 45.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            base_url=settings.GEMINI_BASE_URL,
            max_output_tokens=settings.GEMINI_MAX_OUTPUT_TOKENS,
            timeout=settings.GEMINI_REQUEST_TIMEOUT,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [
                {"role": "user", "parts": [{"text": prompt}]}
            ],
            "generationConfig": {
                "maxOutputTokens": self.max_output_tokens,
            },
        }

    async def generate(self, prompt: str) -> str:
        """Send a single-turn prompt and return the completion text ("" if none)"""
        if not self.api_key:
            raise GeminiConfigError("GEMINI_API_KEY is not configured")

        kwargs: Dict[str, Any] = {"timeout": self.timeout}
        if self._transport is not None:
            kwargs["transport"] = self._transport

        async with httpx.AsyncClient(**kwargs) as client:
            resp = await client.post(
                self.endpoint,
                json=self.build_payload(prompt),
                headers={"x-goog-api-key": self.api_key},
            )
            resp.raise_for_status()
            data = resp.json()

        return extract_text(data)


def extract_text(data: Any) -> str:
    """Concatenate the text parts of the first candidate"""
    if not isinstance(data, dict):
        raise GeminiResponseError(f"Unexpected response: {str(data)[:500]}")

    candidates = data.get("candidates") or []
    if not candidates:
        return ""

    try:
        parts = candidates[0].get("content", {}).get("parts", [])
    except AttributeError:
        raise GeminiResponseError(f"Unexpected response: {str(data)[:500]}")

    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))
