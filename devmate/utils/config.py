import os
from dotenv import load_dotenv
from pydantic_settings import BaseSettings
from functools import lru_cache
from urllib.parse import urlparse

# Load .env (but env vars already set take priority)
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "../../.env"))


class Settings(BaseSettings):
    # Gemini (explain / improve)
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    GEMINI_MAX_OUTPUT_TOKENS: int = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", 2000))
    GEMINI_REQUEST_TIMEOUT: float = float(os.getenv("GEMINI_REQUEST_TIMEOUT", 45))

    # Judge0 (execute)
    JUDGE0_API_KEY: str = os.getenv("JUDGE0_API_KEY", "")
    JUDGE0_BASE_URL: str = os.getenv("JUDGE0_BASE_URL", "https://judge0-ce.p.rapidapi.com")
    JUDGE0_API_HOST: str = os.getenv("JUDGE0_API_HOST", "judge0-ce.p.rapidapi.com")
    JUDGE0_REQUEST_TIMEOUT: float = float(os.getenv("JUDGE0_REQUEST_TIMEOUT", 10))

    # Polling
    POLL_INTERVAL_MS: int = int(os.getenv("POLL_INTERVAL_MS", 800))
    POLL_TIMEOUT_MS: int = int(os.getenv("POLL_TIMEOUT_MS", 20000))

    # Inbound limits
    RATE_LIMIT_PER_MINUTE: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", 60))
    MAX_REQUEST_BODY_BYTES: int = int(os.getenv("MAX_REQUEST_BODY_BYTES", 1048576))

    # CORS
    CORS_ALLOWED_ORIGINS: str = os.getenv("CORS_ALLOWED_ORIGINS", "*")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 5005))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def origins_list(self) -> list[str]:
        origins = [o.strip() for o in self.CORS_ALLOWED_ORIGINS.split(',') if o.strip()]
        return origins or ["*"]

    @property
    def poll_interval_seconds(self) -> float:
        return self.POLL_INTERVAL_MS / 1000

    @property
    def poll_timeout_seconds(self) -> float:
        return self.POLL_TIMEOUT_MS / 1000

    @property
    def judge0_requires_key(self) -> bool:
        """Only the RapidAPI-hosted Judge0 needs a key; self-hosted ones don't"""
        host = urlparse(self.JUDGE0_BASE_URL).hostname or ""
        return host == "rapidapi.com" or host.endswith(".rapidapi.com")

    def missing_credentials(self) -> list[str]:
        """Names of unset API keys (the service starts degraded without them)"""
        missing = []
        if not self.GEMINI_API_KEY:
            missing.append("GEMINI_API_KEY")
        if not self.JUDGE0_API_KEY and self.judge0_requires_key:
            missing.append("JUDGE0_API_KEY")
        return missing

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
