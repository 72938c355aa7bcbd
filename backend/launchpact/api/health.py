"""Health and status endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from launchpact.api.deps import Orchestrator, limiter
from launchpact.config import get_settings
from launchpact.llm import DEFAULT_ROSTER, GenerationRequest, GenerationSuccess, ProviderRoster, parse_structured
from launchpact.models.schemas import AiCheckResponse, StatusResponse
from launchpact.services.recovery import describe_result
from launchpact.services.rescue import RESCUE_CATALOG_VERSION
from launchpact.utils.errors import GENERIC_GENERATION_FAILURE, MalformedStructuredOutputError

router = APIRouter()
logger = logging.getLogger(__name__)

AI_CHECK_PROMPT = 'Say "Hello, LaunchPact AI is working!" in JSON format: {"message": "your response"}'
AI_CHECK_MAX_TOKENS = 100
AI_CHECK_SUGGESTION = "Check your OPENROUTER_API_KEY and internet connection"


@router.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "version": "1.0.0",
    }


@router.get("/status", response_model=StatusResponse)
async def generation_status():
    """Report the configured provider roster."""
    settings = get_settings()
    roster = (
        ProviderRoster.from_model_ids(settings.llm_model_ids)
        if settings.llm_model_ids
        else DEFAULT_ROSTER
    )
    primary = roster.primary
    return StatusResponse(
        status="online",
        provider="OpenRouter",
        api_key_configured=settings.api_key_configured,
        primary_model=primary.model_id if primary else None,
        total_models=len(roster),
        fallback_models=max(0, len(roster) - 1),
        rescue_catalog_version=RESCUE_CATALOG_VERSION,
        time=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/test-ai", response_model=AiCheckResponse)
@limiter.limit("5/minute")
async def check_ai_connection(request: Request, orchestrator: Orchestrator):
    """Run one short structured request through the whole fallback chain."""
    check = GenerationRequest.create(
        [{"role": "user", "content": AI_CHECK_PROMPT}],
        wants_structured_output=True,
        max_output_tokens=AI_CHECK_MAX_TOKENS,
    )
    result = await orchestrator.attempt(check)
    logger.info(f"[LLM] AI connection check | {describe_result(result)}")

    if isinstance(result, GenerationSuccess):
        try:
            parsed = parse_structured(result.content)
        except MalformedStructuredOutputError as e:
            logger.warning(f"[LLM] AI connection check got unparseable output | reason={e.message}")
        else:
            return AiCheckResponse(
                success=True,
                message="AI connection working!",
                response=parsed,
                model=result.winning_model,
                attempts=len(result.attempts),
            )

    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "success": False,
            "error": "AI connection failed",
            "message": GENERIC_GENERATION_FAILURE,
            "suggestion": AI_CHECK_SUGGESTION,
        },
    )
