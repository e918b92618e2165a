import threading
import time
from typing import Annotated, Callable, List

from fastapi import Depends, HTTPException, Request, status

from devmate.utils.config import Settings
from devmate.utils.gemini_client import GeminiClient
from devmate.utils.judge0_client import Judge0Client


class RateLimiter:
    """
    Sliding-window request counter shared by one application instance.
    """

    def __init__(self, limit: int, window: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window = window
        self._clock = clock
        self._lock = threading.Lock()
        self._hits: List[float] = []

    def allow(self) -> bool:
        now = self._clock()
        with self._lock:
            self._hits[:] = [t for t in self._hits if now - t < self.window]
            if len(self._hits) >= self.limit:
                return False
            self._hits.append(now)
        return True


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_app_settings)]


def get_judge0_client(settings: AppSettings) -> Judge0Client:
    return Judge0Client.from_settings(settings)


def get_gemini_client(settings: AppSettings) -> GeminiClient:
    return GeminiClient.from_settings(settings)


async def enforce_rate_limit(request: Request) -> None:
    limiter: RateLimiter = request.app.state.rate_limiter
    if not limiter.allow():
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests, please try again later.",
        )


# Type aliases for dependency injection
Judge0 = Annotated[Judge0Client, Depends(get_judge0_client)]
Gemini = Annotated[GeminiClient, Depends(get_gemini_client)]
