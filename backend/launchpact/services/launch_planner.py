"""Launch planning generators.

Thin callers of the orchestrator: each supplies a prompt and chooses its
recovery policy. Steps feeding the rest of the workflow substitute a
rescue artifact on failure; blueprint generation propagates.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from launchpact.llm import FallbackOrchestrator, GenerationRequest
from launchpact.models.llm_outputs import (
    Blueprint,
    DailyTaskSet,
    ExecutionPlan,
    ExecutionTask,
    GuidedAdvice,
    LockedPlan,
    TimelineAssessment,
)
from launchpact.services import prompts
from launchpact.services.recovery import (
    RecoveredOutput,
    RecoveryPolicy,
    TaskKind,
    with_rescue,
)
from launchpact.services.rescue import (
    rescue_daily_tasks,
    rescue_execution_plan,
    rescue_guided_advice,
    rescue_timeline,
)

logger = logging.getLogger(__name__)

DEFAULT_TARGET_MONTHS = 3
DAYS_PER_MONTH = 30


class LaunchPlanner:
    """Blueprint, execution plan, timeline and daily task generation."""

    def __init__(self, orchestrator: FallbackOrchestrator):
        self.orchestrator = orchestrator

    def _generate(
        self,
        messages: list[dict[str, str]],
        cancel_event: Optional[asyncio.Event] = None,
    ):
        request = GenerationRequest.create(messages, wants_structured_output=True)
        return lambda: self.orchestrator.attempt(request, cancel_event)

    async def generate_blueprint(
        self, raw_idea: str, cancel_event: Optional[asyncio.Event] = None
    ) -> RecoveredOutput[Blueprint]:
        """Generate a product blueprint.

        Raises:
            GenerationFailedError: If no model produced a valid blueprint
        """
        logger.info(f"[LLM] Generating blueprint | idea_chars={len(raw_idea)}")
        recovered = await with_rescue(
            self._generate(prompts.blueprint_messages(raw_idea), cancel_event),
            task=TaskKind.BLUEPRINT,
            output_schema=Blueprint,
            policy=RecoveryPolicy.PROPAGATE,
        )
        # Sources are never model-generated
        blueprint = recovered.value.model_copy(update={"sources": []})
        return RecoveredOutput(
            value=blueprint,
            state=recovered.state,
            task=recovered.task,
            model=recovered.model,
        )

    async def generate_execution_plan(
        self, blueprint: dict[str, Any], cancel_event: Optional[asyncio.Event] = None
    ) -> RecoveredOutput[ExecutionPlan]:
        return await with_rescue(
            self._generate(prompts.execution_plan_messages(blueprint), cancel_event),
            task=TaskKind.EXECUTION_PLAN,
            output_schema=ExecutionPlan,
            policy=RecoveryPolicy.SUBSTITUTE,
            rescue=rescue_execution_plan,
        )

    async def simulate_timeline(
        self,
        blueprint: dict[str, Any],
        months: int = DEFAULT_TARGET_MONTHS,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> RecoveredOutput[TimelineAssessment]:
        return await with_rescue(
            self._generate(prompts.timeline_messages(blueprint, months), cancel_event),
            task=TaskKind.TIMELINE,
            output_schema=TimelineAssessment,
            policy=RecoveryPolicy.SUBSTITUTE,
            rescue=lambda: rescue_timeline(months),
        )

    async def guided_step(
        self,
        step: str,
        blueprint: dict[str, Any],
        selections: dict[str, Any],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> RecoveredOutput[GuidedAdvice]:
        return await with_rescue(
            self._generate(
                prompts.guided_step_messages(step, blueprint, selections), cancel_event
            ),
            task=TaskKind.GUIDED_STEP,
            output_schema=GuidedAdvice,
            policy=RecoveryPolicy.SUBSTITUTE,
            rescue=lambda: rescue_guided_advice(step),
        )

    async def generate_daily_tasks(
        self,
        execution_plan: list[dict[str, Any]],
        timeline: dict[str, Any],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> RecoveredOutput[DailyTaskSet]:
        target_months = _target_months(timeline)
        return await with_rescue(
            self._generate(
                prompts.daily_tasks_messages(execution_plan, target_months), cancel_event
            ),
            task=TaskKind.DAILY_TASKS,
            output_schema=DailyTaskSet,
            policy=RecoveryPolicy.SUBSTITUTE,
            rescue=rescue_daily_tasks,
        )

    async def lock_plan(
        self,
        blueprint: dict[str, Any],
        execution_plan: list[ExecutionTask],
        timeline: dict[str, Any],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> RecoveredOutput[LockedPlan]:
        """Commit to a plan and generate its daily tasks.

        An empty checklist is replaced by the generic rescue checklist.
        """
        plan_context = [t.model_dump(by_alias=True) for t in execution_plan]
        daily = await self.generate_daily_tasks(plan_context, timeline, cancel_event)

        checklist = list(execution_plan) or rescue_execution_plan().tasks

        now = datetime.now(timezone.utc)
        target = now + timedelta(days=_target_months(timeline) * DAYS_PER_MONTH)
        prefix = "rescue-" if daily.substituted else ""
        tasks = daily.value.daily_tasks

        plan = LockedPlan(
            id=f"{prefix}{uuid.uuid4().hex[:10]}",
            blueprint=blueprint,
            execution_plan=checklist,
            timeline=timeline,
            daily_tasks=tasks,
            locked_at=now.isoformat(),
            start_date=now.isoformat(),
            target_launch_date=target.isoformat(),
            total_tasks_count=len(tasks),
        )
        logger.info(
            f"[LLM] Plan locked | id={plan.id} | tasks={len(tasks)} | "
            f"daily_tasks={daily.state.value}"
        )
        return RecoveredOutput(
            value=plan, state=daily.state, task=daily.task, model=daily.model
        )


def _target_months(timeline: dict[str, Any]) -> int:
    try:
        months = int(timeline.get("targetMonths") or DEFAULT_TARGET_MONTHS)
    except (TypeError, ValueError):
        return DEFAULT_TARGET_MONTHS
    return months if months > 0 else DEFAULT_TARGET_MONTHS
