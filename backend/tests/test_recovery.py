"""Tests for response recovery, rescue artifacts and the generation callers."""

import json

import pytest
from conftest import ok, status

from launchpact.llm import GenerationCancelled, GenerationExhausted, GenerationSuccess
from launchpact.models.llm_outputs import Blueprint, DailyTaskSet, ExecutionPlan, ExecutionTask
from launchpact.services.co_founder_chat import (
    DEFAULT_REPLY_TEXT,
    GREETING,
    MAX_RAW_REPLY_CHARS,
    CoFounderChat,
)
from launchpact.services.launch_planner import LaunchPlanner
from launchpact.services.recovery import (
    RecoveryPolicy,
    RecoveryState,
    TaskKind,
    validate_output,
    with_rescue,
)
from launchpact.services.rescue import rescue_execution_plan
from launchpact.utils.errors import (
    GenerationCancelledError,
    GenerationFailedError,
    MalformedStructuredOutputError,
)

ALL_FAIL = {"fast-free": status(500), "mid-free": status(500), "paid-fallback": status(500)}

PLAN_JSON = json.dumps(
    {
        "tasks": [
            {"id": 1, "phase": "Build", "task": "Ship landing page", "timeEstimate": "2 days"},
            {"id": 2, "phase": "Launch", "task": "Invite beta users", "timeEstimate": "1 day"},
        ]
    }
)


def fixed(result):
    async def generate():
        return result

    return generate


class TestWithRescue:
    @pytest.mark.asyncio
    async def test_valid_output_is_accepted(self):
        recovered = await with_rescue(
            fixed(GenerationSuccess(content=PLAN_JSON, winning_model="m")),
            task=TaskKind.EXECUTION_PLAN,
            output_schema=ExecutionPlan,
            policy=RecoveryPolicy.SUBSTITUTE,
            rescue=rescue_execution_plan,
        )
        assert recovered.state is RecoveryState.ACCEPTED
        assert recovered.model == "m"
        assert [t.id for t in recovered.value.tasks] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_schema_violation_substitutes(self):
        recovered = await with_rescue(
            fixed(GenerationSuccess(content='{"tasks": []}', winning_model="m")),
            task=TaskKind.EXECUTION_PLAN,
            output_schema=ExecutionPlan,
            policy=RecoveryPolicy.SUBSTITUTE,
            rescue=rescue_execution_plan,
        )
        assert recovered.substituted
        assert recovered.value == rescue_execution_plan()

    @pytest.mark.asyncio
    async def test_unparseable_output_propagates_as_malformed(self):
        with pytest.raises(GenerationFailedError) as exc_info:
            await with_rescue(
                fixed(GenerationSuccess(content="no json here", winning_model="m")),
                task=TaskKind.BLUEPRINT,
                output_schema=Blueprint,
                policy=RecoveryPolicy.PROPAGATE,
            )
        assert exc_info.value.details["error_class"] == "MalformedStructuredOutput"
        assert isinstance(exc_info.value.__cause__, MalformedStructuredOutputError)

    @pytest.mark.asyncio
    async def test_exhausted_propagates(self):
        with pytest.raises(GenerationFailedError) as exc_info:
            await with_rescue(
                fixed(GenerationExhausted()),
                task=TaskKind.BLUEPRINT,
                output_schema=Blueprint,
                policy=RecoveryPolicy.PROPAGATE,
            )
        assert exc_info.value.task == "blueprint"
        assert exc_info.value.details["error_class"] == "Exhausted"

    @pytest.mark.asyncio
    async def test_cancelled_never_substitutes(self):
        with pytest.raises(GenerationCancelledError):
            await with_rescue(
                fixed(GenerationCancelled()),
                task=TaskKind.EXECUTION_PLAN,
                output_schema=ExecutionPlan,
                policy=RecoveryPolicy.SUBSTITUTE,
                rescue=rescue_execution_plan,
            )

    @pytest.mark.asyncio
    async def test_substitute_without_rescue_is_a_programming_error(self):
        with pytest.raises(ValueError):
            await with_rescue(
                fixed(GenerationExhausted()),
                task=TaskKind.TIMELINE,
                output_schema=ExecutionPlan,
                policy=RecoveryPolicy.SUBSTITUTE,
            )


class TestValidateOutput:
    def test_blank_product_name_rejected(self):
        with pytest.raises(MalformedStructuredOutputError):
            validate_output('{"productName": "  ", "ideaSummary": "x"}', Blueprint)

    def test_daily_tasks_get_positional_defaults(self):
        content = json.dumps({"dailyTasks": [{"title": f"T{i}"} for i in range(4)]})
        task_set = validate_output(content, DailyTaskSet)
        assert [t.id for t in task_set.daily_tasks] == ["task-1", "task-2", "task-3", "task-4"]
        assert [t.day_number for t in task_set.daily_tasks] == [1, 1, 1, 2]
        assert task_set.daily_tasks[0].xp_reward == 100


class TestLaunchPlanner:
    @pytest.mark.asyncio
    async def test_execution_plan_rescue_is_deterministic(self, make_orchestrator):
        orchestrator, _ = make_orchestrator(ALL_FAIL)
        planner = LaunchPlanner(orchestrator)

        first = await planner.generate_execution_plan({"productName": "Foo"})
        second = await planner.generate_execution_plan({"productName": "Foo"})

        assert first.substituted and second.substituted
        assert first.value.model_dump_json() == second.value.model_dump_json()
        assert first.value == rescue_execution_plan()
        assert len(first.value.tasks) == 10

    @pytest.mark.asyncio
    async def test_blueprint_exhaustion_propagates(self, make_orchestrator):
        orchestrator, _ = make_orchestrator(ALL_FAIL)
        planner = LaunchPlanner(orchestrator)

        with pytest.raises(GenerationFailedError) as exc_info:
            await planner.generate_blueprint("A marketplace for vintage synths")
        assert len(exc_info.value.attempts) == 3

    @pytest.mark.asyncio
    async def test_blueprint_sources_are_cleared(self, make_orchestrator):
        content = json.dumps(
            {"productName": "Foo", "ideaSummary": "Bar", "sources": ["http://made.up"]}
        )
        orchestrator, _ = make_orchestrator({"fast-free": ok(content)})
        planner = LaunchPlanner(orchestrator)

        recovered = await planner.generate_blueprint("Foo idea")

        assert recovered.value.product_name == "Foo"
        assert recovered.value.sources == []

    @pytest.mark.asyncio
    async def test_timeline_rescue_uses_requested_months(self, make_orchestrator):
        orchestrator, _ = make_orchestrator(ALL_FAIL)
        planner = LaunchPlanner(orchestrator)

        recovered = await planner.simulate_timeline({}, months=2)

        assert recovered.substituted
        assert recovered.value.target_months == 2
        assert recovered.value.risk_factor == "High"

    @pytest.mark.asyncio
    async def test_locked_plan_marks_rescued_daily_tasks(self, make_orchestrator):
        orchestrator, _ = make_orchestrator(ALL_FAIL)
        planner = LaunchPlanner(orchestrator)

        recovered = await planner.lock_plan({}, [], {"targetMonths": 2})

        plan = recovered.value
        assert plan.id.startswith("rescue-")
        assert [t.id for t in plan.daily_tasks] == ["r1", "r2", "r3"]
        assert plan.total_tasks_count == 3
        assert len(plan.execution_plan) == 10

    @pytest.mark.asyncio
    async def test_locked_plan_keeps_given_checklist(self, make_orchestrator):
        orchestrator, transport = make_orchestrator(ALL_FAIL)
        planner = LaunchPlanner(orchestrator)
        checklist = [ExecutionTask(id="7", phase="Build", task="Ship landing page")]

        recovered = await planner.lock_plan({"productName": "Foo"}, checklist, {})

        assert recovered.value.execution_plan == checklist
        # The checklist is handed to the daily-task prompt in wire form
        assert "Ship landing page" in transport.calls[0]["messages"][-1]["content"]


class TestCoFounderChat:
    @pytest.mark.asyncio
    async def test_blank_message_gets_greeting_without_calls(self, make_orchestrator):
        orchestrator, transport = make_orchestrator(ALL_FAIL)

        reply, state = await CoFounderChat(orchestrator).reply([], "   ")

        assert reply == GREETING
        assert state is RecoveryState.ACCEPTED
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_exhaustion_propagates(self, make_orchestrator):
        orchestrator, _ = make_orchestrator(ALL_FAIL)

        with pytest.raises(GenerationFailedError):
            await CoFounderChat(orchestrator).reply([], "How do I price this?")

    @pytest.mark.asyncio
    async def test_structured_reply(self, make_orchestrator):
        content = '```json\n{"text": "Charge monthly.", "suggestions": ["Tiered pricing"]}\n```'
        orchestrator, _ = make_orchestrator({"fast-free": ok(content)})

        reply, _ = await CoFounderChat(orchestrator).reply([], "How do I price this?")

        assert reply.text == "Charge monthly."
        assert reply.suggestions == ["Tiered pricing"]

    @pytest.mark.asyncio
    async def test_json_without_text_gets_default(self, make_orchestrator):
        orchestrator, _ = make_orchestrator({"fast-free": ok('{"answer": "yes"}')})

        reply, _ = await CoFounderChat(orchestrator).reply([], "Ready?")

        assert reply.text == DEFAULT_REPLY_TEXT

    @pytest.mark.asyncio
    async def test_prose_reply_is_truncated(self, make_orchestrator):
        orchestrator, _ = make_orchestrator({"fast-free": ok("word " * 200)})

        reply, _ = await CoFounderChat(orchestrator).reply([], "Thoughts?")

        assert len(reply.text) == MAX_RAW_REPLY_CHARS + 3
        assert reply.text.endswith("...")

    @pytest.mark.asyncio
    async def test_enhance_prompt_echoes_input_on_exhaustion(self, make_orchestrator):
        orchestrator, _ = make_orchestrator(ALL_FAIL)

        text, state = await CoFounderChat(orchestrator).enhance_prompt("uber for dogs")

        assert text == "uber for dogs"
        assert state is RecoveryState.SUBSTITUTED
