"""Pydantic models for LLM structured outputs with validation.

These models are the validation gate applied to repaired model output.
Field names are snake_case in Python and camelCase on the wire, matching
what the prompts ask the models to emit.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising to camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _not_blank(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} cannot be empty")
    return value.strip()


# ============================================
# Blueprint
# ============================================


class MarketAnalysis(CamelModel):
    target_audience: str = ""
    market_gap: str = ""
    potential_size: str = ""


class Viability(CamelModel):
    score: int = 70
    saturation_analysis: str = ""
    pivot_suggestion: str = ""

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, v: Any) -> int:
        try:
            score = int(float(v))
        except (TypeError, ValueError):
            return 70
        return max(0, min(100, score))


class Competitor(CamelModel):
    name: str
    strength: str = ""
    weakness: str = ""


class MvpFeature(CamelModel):
    title: str
    description: str = ""
    priority: str = "Medium"


class TechStack(CamelModel):
    frontend: str = ""
    backend: str = ""
    database: str = ""
    deployment: str = ""
    extras: list[str] = Field(default_factory=list)


class RoadmapPhase(CamelModel):
    name: str
    timeline: str = ""
    key_deliverables: list[str] = Field(default_factory=list)


class Blueprint(CamelModel):
    """Product blueprint generated from a raw startup idea."""

    product_name: str
    tagline: str = ""
    idea_summary: str
    problem_statement: str = ""
    usp: str = ""
    pain_points: list[str] = Field(default_factory=list)
    domain_suggestions: list[str] = Field(default_factory=list)
    market_analysis: MarketAnalysis = Field(default_factory=MarketAnalysis)
    viability: Viability = Field(default_factory=Viability)
    competitors: list[Competitor] = Field(default_factory=list)
    monetization_strategy: list[str] = Field(default_factory=list)
    risks_and_assumptions: list[str] = Field(default_factory=list)
    mvp_features: list[MvpFeature] = Field(default_factory=list)
    tech_stack: TechStack = Field(default_factory=TechStack)
    roadmap: list[RoadmapPhase] = Field(default_factory=list)
    maintenance_strategy: str = ""
    sources: list[str] = Field(default_factory=list)

    @field_validator("product_name")
    @classmethod
    def product_name_not_empty(cls, v: str) -> str:
        return _not_blank(v, "Product name")

    @field_validator("idea_summary")
    @classmethod
    def idea_summary_not_empty(cls, v: str) -> str:
        return _not_blank(v, "Idea summary")


# ============================================
# Execution plan
# ============================================


class ExecutionTask(CamelModel):
    id: str
    phase: str = "Planning"
    task: str
    time_estimate: str = ""
    outcome: str = ""
    is_completed: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> str:
        return str(v)

    @field_validator("task")
    @classmethod
    def task_not_empty(cls, v: str) -> str:
        return _not_blank(v, "Task")


class ExecutionPlan(CamelModel):
    """MVP execution checklist."""

    tasks: list[ExecutionTask] = Field(..., min_length=1)

    @model_validator(mode="before")
    @classmethod
    def accept_bare_list(cls, data: Any) -> Any:
        # Models return either {"tasks": [...]} or the bare array
        if isinstance(data, list):
            return {"tasks": data}
        return data


# ============================================
# Timeline and guidance
# ============================================


class TimelineAssessment(CamelModel):
    target_months: int
    feasible: bool
    cuts_required: list[str] = Field(default_factory=list)
    risk_factor: str = "Moderate"
    adjusted_roadmap_suggestion: str = ""


class GuidedAdvice(CamelModel):
    advice: str
    suggestions: list[str] = Field(default_factory=list)

    @field_validator("advice")
    @classmethod
    def advice_not_empty(cls, v: str) -> str:
        return _not_blank(v, "Advice")


# ============================================
# Daily tasks
# ============================================


TASKS_PER_DAY = 3


class SubTask(CamelModel):
    id: str
    title: str
    is_completed: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> str:
        return str(v)


class DailyTask(CamelModel):
    id: str
    title: str = "Task"
    description: str = ""
    phase: str = "Planning"
    estimated_time: str = "1 day"
    sub_tasks: list[SubTask] = Field(default_factory=list)
    ai_guidance_prompt: str = ""
    is_completed: bool = False
    xp_reward: int = 100
    day_number: int = 1

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> str:
        return str(v)


class DailyTaskSet(CamelModel):
    """Daily micro-tasks, three per day."""

    daily_tasks: list[DailyTask] = Field(..., min_length=1)

    @model_validator(mode="before")
    @classmethod
    def fill_positional_defaults(cls, data: Any) -> Any:
        if isinstance(data, list):
            data = {"dailyTasks": data}
        if not isinstance(data, dict):
            return data

        key = "dailyTasks" if "dailyTasks" in data else "daily_tasks"
        tasks = data.get(key)
        if not isinstance(tasks, list):
            return data

        filled = []
        for idx, task in enumerate(tasks):
            if isinstance(task, dict):
                task = dict(task)
                if not task.get("id"):
                    task["id"] = f"task-{idx + 1}"
                if not task.get("dayNumber") and not task.get("day_number"):
                    task["dayNumber"] = idx // TASKS_PER_DAY + 1
            filled.append(task)
        return {**data, key: filled}


# ============================================
# Chat and locked plans
# ============================================


class ChatReply(CamelModel):
    text: str
    suggestions: list[str] = Field(default_factory=list)
    updates: dict[str, Any] | None = None


class LockedPlan(CamelModel):
    """A committed plan: blueprint, checklist and generated daily tasks."""

    id: str
    blueprint: dict[str, Any] = Field(default_factory=dict)
    execution_plan: list[ExecutionTask] = Field(default_factory=list)
    timeline: dict[str, Any] = Field(default_factory=dict)
    daily_tasks: list[DailyTask] = Field(default_factory=list)
    locked_at: str
    start_date: str
    target_launch_date: str
    current_progress: int = 0
    completed_tasks_count: int = 0
    total_tasks_count: int = 0
