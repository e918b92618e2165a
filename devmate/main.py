import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from devmate.routers import code, health
from devmate.utils.config import Settings, get_settings
from devmate.utils.dependencies import RateLimiter, enforce_rate_limit
from devmate.utils.middleware import BodySizeLimitMiddleware

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown"""
    settings: Settings = app.state.settings
    logger.info("Starting DevMate API...")
    for name in settings.missing_credentials():
        # Degraded mode: the endpoints relying on the key fail per request
        logger.warning(f"{name} not set, requests depending on it will fail")

    yield

    logger.info("Shutting down DevMate API...")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Code and language required"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="DevMate API",
        description="Explain, improve and run code from the browser",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.rate_limiter = RateLimiter(settings.RATE_LIMIT_PER_MINUTE)

    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.MAX_REQUEST_BODY_BYTES)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include routers
    app.include_router(
        code.router,
        prefix="/api",
        dependencies=[Depends(enforce_rate_limit)],
    )
    app.include_router(health.router, prefix="/api")
    app.include_router(health.router)

    # Editor UI; mounted last so API routes take precedence
    if STATIC_DIR.exists():
        app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")

    return app


# Create the app instance
app = create_app()
