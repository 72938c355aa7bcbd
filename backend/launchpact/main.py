"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from launchpact.api.deps import limiter
from launchpact.config import get_settings
from launchpact.utils.errors import (
    GENERIC_GENERATION_FAILURE,
    GenerationCancelledError,
    GenerationFailedError,
)
from launchpact.utils.logging import setup_logging

# Configure logging with file output
settings = get_settings()
setup_logging(level=settings.log_level)
logger = logging.getLogger(__name__)

# Non-standard "client closed request" status
CLIENT_CLOSED_REQUEST = 499


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    logger.info(f"Starting application in {settings.environment} mode")
    if not settings.api_key_configured:
        logger.warning("OPENROUTER_API_KEY is missing, AI features are disabled")
    logger.info(f"Per-attempt timeout: {settings.llm_attempt_timeout_seconds}s")
    yield
    # Shutdown
    logger.info("Shutting down application")


# Create FastAPI app
app = FastAPI(
    title="LaunchPact AI API",
    description="Resilient multi-model generation for product blueprints and launch plans",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# Attach rate limiter to app
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(GenerationFailedError)
async def generation_failed_handler(request: Request, exc: GenerationFailedError):
    # The internal taxonomy is logged, never shown to the end user
    logger.error(
        f"Generation failed | path={request.url.path} | task={exc.task} | "
        f"error_class={exc.details.get('error_class')} | attempts={len(exc.attempts)}"
    )
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": GENERIC_GENERATION_FAILURE},
    )


@app.exception_handler(GenerationCancelledError)
async def generation_cancelled_handler(request: Request, exc: GenerationCancelledError):
    logger.info(f"Generation cancelled by client | path={request.url.path}")
    return Response(status_code=CLIENT_CLOSED_REQUEST)


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Requested-With"],
    expose_headers=["X-Rescue-Artifact"],
)

# Import and include routers
from launchpact.api import generation, health  # noqa: E402

app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(generation.router, prefix="/api", tags=["Generation"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "LaunchPact AI API",
        "version": "1.0.0",
        "docs": "/docs" if not settings.is_production else None,
    }
