"""AI generation routes."""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager, suppress
from typing import AsyncIterator

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from launchpact.api.deps import Chat, Planner, limiter
from launchpact.config import get_settings
from launchpact.models.llm_outputs import Blueprint, ExecutionTask, GuidedAdvice, TimelineAssessment
from launchpact.models.schemas import (
    BlueprintRequest,
    ChatRequest,
    ChatResponse,
    DailyTasksRequest,
    DailyTasksResponse,
    EnhancePromptRequest,
    EnhancePromptResponse,
    ExecutionPlanRequest,
    GuidedStepRequest,
    LockPlanRequest,
    LockPlanResponse,
    TimelineRequest,
    ToolRecommendationRequest,
    ToolRecommendationResponse,
)
from launchpact.services.recovery import RecoveredOutput
from launchpact.services.rescue import rescue_blueprint
from launchpact.services.tool_catalog import recommend_tools
from launchpact.utils.errors import GENERIC_GENERATION_FAILURE, GenerationFailedError, bad_request

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)

RESCUE_HEADER = "X-Rescue-Artifact"
DISCONNECT_POLL_SECONDS = 0.5


@asynccontextmanager
async def cancel_on_disconnect(request: Request) -> AsyncIterator[asyncio.Event]:
    """Yield an event that is set once the client goes away."""
    event = asyncio.Event()

    async def watch() -> None:
        while not event.is_set():
            if await request.is_disconnected():
                logger.info(f"Client disconnected, cancelling generation | path={request.url.path}")
                event.set()
                return
            await asyncio.sleep(DISCONNECT_POLL_SECONDS)

    watcher = asyncio.create_task(watch())
    try:
        yield event
    finally:
        watcher.cancel()
        with suppress(asyncio.CancelledError):
            await watcher


def _flag_rescue(response: Response, recovered: RecoveredOutput) -> None:
    # Telemetry only; the body is the same shape as a genuine result
    if recovered.substituted:
        response.headers[RESCUE_HEADER] = recovered.task.value


@router.post("/enhance-prompt", response_model=EnhancePromptResponse)
@limiter.limit(settings.generation_rate_limit)
async def enhance_prompt(request: Request, payload: EnhancePromptRequest, chat: Chat):
    """Rewrite a raw idea into a professional prompt."""
    async with cancel_on_disconnect(request) as cancel_event:
        text, _ = await chat.enhance_prompt(payload.raw_input, cancel_event)
    return EnhancePromptResponse(text=text)


@router.post("/generate-blueprint", response_model=Blueprint)
@limiter.limit(settings.generation_rate_limit)
async def generate_blueprint(request: Request, payload: BlueprintRequest, planner: Planner):
    """Generate a product blueprint from a raw idea."""
    if not payload.raw_idea.strip():
        raise bad_request("rawIdea is required")

    request_id = uuid.uuid4().hex[:7].upper()
    try:
        async with cancel_on_disconnect(request) as cancel_event:
            recovered = await planner.generate_blueprint(payload.raw_idea, cancel_event)
    except GenerationFailedError as e:
        logger.error(
            f"Blueprint generation failed | request_id={request_id} | "
            f"error_class={e.details.get('error_class')} | attempts={len(e.attempts)}"
        )
        # The template is returned alongside the error so the client can opt in
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "error": "AI generation failed",
                "message": GENERIC_GENERATION_FAILURE,
                "requestId": request_id,
                "rescue": rescue_blueprint(payload.raw_idea).model_dump(by_alias=True),
            },
        )
    return recovered.value


@router.post("/execution-plan", response_model=list[ExecutionTask])
@limiter.limit(settings.generation_rate_limit)
async def execution_plan(
    request: Request, response: Response, payload: ExecutionPlanRequest, planner: Planner
):
    """Generate the MVP execution checklist."""
    async with cancel_on_disconnect(request) as cancel_event:
        recovered = await planner.generate_execution_plan(payload.blueprint, cancel_event)
    _flag_rescue(response, recovered)
    return recovered.value.tasks


@router.post("/simulate-timeline", response_model=TimelineAssessment)
@limiter.limit(settings.generation_rate_limit)
async def simulate_timeline(
    request: Request, response: Response, payload: TimelineRequest, planner: Planner
):
    """Assess whether the launch window is feasible."""
    async with cancel_on_disconnect(request) as cancel_event:
        recovered = await planner.simulate_timeline(
            payload.blueprint, payload.months, cancel_event
        )
    _flag_rescue(response, recovered)
    return recovered.value


@router.post("/guided-step", response_model=GuidedAdvice)
@limiter.limit(settings.generation_rate_limit)
async def guided_step(
    request: Request, response: Response, payload: GuidedStepRequest, planner: Planner
):
    """Advise on one guided builder step."""
    async with cancel_on_disconnect(request) as cancel_event:
        recovered = await planner.guided_step(
            payload.step, payload.blueprint, payload.selections, cancel_event
        )
    _flag_rescue(response, recovered)
    return recovered.value


@router.post("/chat", response_model=ChatResponse)
@limiter.limit(settings.generation_rate_limit)
async def chat_turn(request: Request, payload: ChatRequest, chat: Chat):
    """Answer one co-founder chat message."""
    history = [
        {"role": turn.role, "content": turn.text or turn.content or ""}
        for turn in payload.history
    ]
    async with cancel_on_disconnect(request) as cancel_event:
        reply, _ = await chat.reply(
            history,
            payload.new_message,
            payload.context,
            payload.is_co_founder_mode,
            cancel_event,
        )
    return reply


@router.post("/generate-daily-tasks", response_model=DailyTasksResponse)
@limiter.limit(settings.generation_rate_limit)
async def generate_daily_tasks(
    request: Request, response: Response, payload: DailyTasksRequest, planner: Planner
):
    """Break the execution plan into daily micro-tasks."""
    async with cancel_on_disconnect(request) as cancel_event:
        recovered = await planner.generate_daily_tasks(
            payload.execution_plan, payload.timeline, cancel_event
        )
    _flag_rescue(response, recovered)
    return DailyTasksResponse(daily_tasks=recovered.value.daily_tasks)


@router.post("/lock-plan", response_model=LockPlanResponse)
@limiter.limit(settings.generation_rate_limit)
async def lock_plan(
    request: Request, response: Response, payload: LockPlanRequest, planner: Planner
):
    """Lock the plan and attach generated daily tasks."""
    async with cancel_on_disconnect(request) as cancel_event:
        recovered = await planner.lock_plan(
            payload.blueprint, payload.execution_plan, payload.timeline, cancel_event
        )
    _flag_rescue(response, recovered)
    return LockPlanResponse(locked_plan=recovered.value)


@router.post("/tool-recommendations", response_model=ToolRecommendationResponse)
async def tool_recommendations(payload: ToolRecommendationRequest):
    """Suggest tools for a task phase from the static catalog."""
    return ToolRecommendationResponse(tools=recommend_tools(payload.task_phase))
