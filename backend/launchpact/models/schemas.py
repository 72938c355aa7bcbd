"""Pydantic schemas for request/response validation."""

from typing import Any

from pydantic import Field

from launchpact.models.llm_outputs import CamelModel, ChatReply, DailyTask, ExecutionTask, LockedPlan


# ============================================
# Generation requests
# ============================================


class EnhancePromptRequest(CamelModel):
    raw_input: str = ""


class EnhancePromptResponse(CamelModel):
    text: str


class BlueprintRequest(CamelModel):
    raw_idea: str = ""


class ExecutionPlanRequest(CamelModel):
    blueprint: dict[str, Any] = Field(default_factory=dict)


class TimelineRequest(CamelModel):
    blueprint: dict[str, Any] = Field(default_factory=dict)
    months: int = Field(default=3, ge=1, le=60)


class GuidedStepRequest(CamelModel):
    step: str = ""
    blueprint: dict[str, Any] = Field(default_factory=dict)
    selections: dict[str, Any] = Field(default_factory=dict)


class ChatTurn(CamelModel):
    role: str = "user"
    text: str | None = None
    content: str | None = None


class ChatRequest(CamelModel):
    history: list[ChatTurn] = Field(default_factory=list)
    new_message: str = ""
    context: str = ""
    is_co_founder_mode: bool = False


class DailyTasksRequest(CamelModel):
    execution_plan: list[dict[str, Any]] = Field(default_factory=list)
    timeline: dict[str, Any] = Field(default_factory=dict)


class LockPlanRequest(CamelModel):
    blueprint: dict[str, Any] = Field(default_factory=dict)
    execution_plan: list[ExecutionTask] = Field(default_factory=list)
    timeline: dict[str, Any] = Field(default_factory=dict)


# ============================================
# Responses
# ============================================


class DailyTasksResponse(CamelModel):
    daily_tasks: list[DailyTask]


class LockPlanResponse(CamelModel):
    locked_plan: LockedPlan


ChatResponse = ChatReply


class StatusResponse(CamelModel):
    status: str
    provider: str
    api_key_configured: bool
    primary_model: str | None
    total_models: int
    fallback_models: int
    rescue_catalog_version: str
    time: str


class AiCheckResponse(CamelModel):
    success: bool
    message: str
    response: Any
    model: str
    attempts: int


# ============================================
# Tool recommendations
# ============================================


class ToolRecommendationRequest(CamelModel):
    task_phase: str = ""


class Tool(CamelModel):
    name: str
    url: str
    description: str
    category: str


class ToolRecommendationResponse(CamelModel):
    tools: list[Tool] = Field(default_factory=list)
    resources: list[Tool] = Field(default_factory=list)
