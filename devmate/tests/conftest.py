"""
Shared fixtures: in-memory fakes of Judge0 and Gemini served through
httpx.MockTransport, and an app wired to them.
"""
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from devmate.main import create_app
from devmate.utils.config import Settings
from devmate.utils.dependencies import get_gemini_client, get_judge0_client
from devmate.utils.gemini_client import GeminiClient
from devmate.utils.judge0_client import Judge0Client

JUDGE0_URL = "https://judge0.test"
TOKEN = "d85cd024-1548-4165-96c7-7bc88673f194"


def judge0_status(status_id: int, description: str, **fields: Any) -> Dict[str, Any]:
    payload = {"status": {"id": status_id, "description": description}}
    payload.update(fields)
    return payload


class FakeJudge0:
    """Answers /languages, /submissions and /submissions/{token}"""

    def __init__(
        self,
        polls: Optional[List[Any]] = None,
        catalog: Any = None,
        created: Any = None,
        catalog_status: int = 200,
        create_status: int = 201,
        poll_status: int = 200,
    ):
        self.polls = polls or [judge0_status(3, "Accepted", stdout="1")]
        self.catalog = catalog if catalog is not None else []
        self.created = created if created is not None else {"token": TOKEN}
        self.catalog_status = catalog_status
        self.create_status = create_status
        self.poll_status = poll_status
        self.requests: List[httpx.Request] = []
        self._poll_count = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "GET" and path == "/languages":
            return httpx.Response(self.catalog_status, json=self.catalog)

        if request.method == "POST" and path == "/submissions":
            return httpx.Response(self.create_status, json=self.created)

        if request.method == "GET" and path.startswith("/submissions/"):
            payload = self.polls[min(self._poll_count, len(self.polls) - 1)]
            self._poll_count += 1
            return httpx.Response(self.poll_status, json=payload)

        return httpx.Response(404, json={"error": "not found"})

    def client(self, api_key: str = "judge-key") -> Judge0Client:
        return Judge0Client(
            JUDGE0_URL,
            api_key=api_key,
            api_host="judge0.test",
            transport=httpx.MockTransport(self.handler),
        )

    def count(self, method: str, path_prefix: str) -> int:
        return sum(
            1 for r in self.requests
            if r.method == method and r.url.path.startswith(path_prefix)
        )

    @property
    def submissions(self) -> List[Dict[str, Any]]:
        return [
            json.loads(r.content)
            for r in self.requests
            if r.method == "POST" and r.url.path == "/submissions"
        ]


class FakeGemini:
    """Answers generateContent with a fixed reply"""

    def __init__(self, reply: str = "An explanation", status_code: int = 200, payload: Any = None):
        self.reply = reply
        self.status_code = status_code
        self.payload = payload
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.payload is not None:
            return httpx.Response(self.status_code, json=self.payload)
        return httpx.Response(
            self.status_code,
            json={"candidates": [{"content": {"parts": [{"text": self.reply}]}}]},
        )

    def client(self, api_key: str = "gemini-key") -> GeminiClient:
        return GeminiClient(api_key=api_key, transport=httpx.MockTransport(self.handler))

    @property
    def prompts(self) -> List[str]:
        return [
            json.loads(r.content)["contents"][0]["parts"][0]["text"]
            for r in self.requests
        ]


class FakeClock:
    """Monotonic clock advanced only by its own sleep()"""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def judge0() -> FakeJudge0:
    return FakeJudge0()


@pytest.fixture
def gemini() -> FakeGemini:
    return FakeGemini()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        GEMINI_API_KEY="gemini-key",
        JUDGE0_API_KEY="judge-key",
        JUDGE0_BASE_URL=JUDGE0_URL,
        POLL_INTERVAL_MS=0,
        POLL_TIMEOUT_MS=2000,
        RATE_LIMIT_PER_MINUTE=1000,
        MAX_REQUEST_BODY_BYTES=1048576,
        CORS_ALLOWED_ORIGINS="*",
    )


@pytest.fixture
def make_client(settings, judge0, gemini):
    """Build a TestClient; pass Settings overrides as keyword arguments"""
    def _make(**overrides: Any) -> TestClient:
        app_settings = settings.model_copy(update=overrides) if overrides else settings
        app = create_app(app_settings)
        app.dependency_overrides[get_judge0_client] = lambda: judge0.client()
        app.dependency_overrides[get_gemini_client] = lambda: gemini.client()
        return TestClient(app)
    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
