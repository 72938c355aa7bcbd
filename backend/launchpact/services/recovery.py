"""Response recovery: turn an orchestration result into a domain object.

Separates product-level degradation policy from network resilience. The
orchestrator only knows about providers; this layer knows about repair,
validation and what each caller does when generation fails.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from launchpact.llm import (
    GenerationCancelled,
    GenerationExhausted,
    GenerationSuccess,
    OrchestrationResult,
    parse_structured,
)
from launchpact.utils.errors import (
    GenerationCancelledError,
    GenerationFailedError,
    MalformedStructuredOutputError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class TaskKind(Enum):
    """Generation tasks, each with its own recovery policy."""

    BLUEPRINT = "blueprint"
    EXECUTION_PLAN = "execution-plan"
    TIMELINE = "timeline"
    GUIDED_STEP = "guided-step"
    DAILY_TASKS = "daily-tasks"
    CHAT = "chat"
    ENHANCE_PROMPT = "enhance-prompt"


class RecoveryPolicy(Enum):
    """What a caller does when generation is exhausted or rejected."""

    PROPAGATE = "propagate"
    SUBSTITUTE = "substitute"


class RecoveryState(Enum):
    """Terminal states of one recovered generation."""

    ACCEPTED = "accepted"
    SUBSTITUTED = "substituted"


@dataclass(frozen=True)
class RecoveredOutput(Generic[T]):
    value: T
    state: RecoveryState
    task: TaskKind
    model: Optional[str] = None

    @property
    def substituted(self) -> bool:
        return self.state is RecoveryState.SUBSTITUTED


def validate_output(content: str, output_schema: type[T]) -> T:
    """Repair, parse and shape-check model output.

    Raises:
        MalformedStructuredOutputError: On a parse or validation failure
    """
    parsed = parse_structured(content)
    try:
        return output_schema.model_validate(parsed)
    except ValidationError as e:
        raise MalformedStructuredOutputError(
            f"Output failed {output_schema.__name__} validation: {e.error_count()} error(s)",
            raw_text=content,
            details={"errors": e.errors(include_url=False)},
        ) from e


async def with_rescue(
    generate: Callable[[], Awaitable[OrchestrationResult]],
    *,
    task: TaskKind,
    output_schema: type[T],
    policy: RecoveryPolicy,
    rescue: Optional[Callable[[], T]] = None,
) -> RecoveredOutput[T]:
    """Run a generation and apply the caller's recovery policy.

    Args:
        generate: Zero-argument coroutine factory running the orchestration
        task: Which generation task this is
        output_schema: Pydantic model used as the validation gate
        policy: PROPAGATE raises on failure, SUBSTITUTE returns ``rescue()``
        rescue: Rescue artifact factory, required for SUBSTITUTE

    Returns:
        RecoveredOutput holding either the accepted or the substituted value

    Raises:
        GenerationFailedError: Generation failed under the PROPAGATE policy
        GenerationCancelledError: The orchestration was cancelled
    """
    if policy is RecoveryPolicy.SUBSTITUTE and rescue is None:
        raise ValueError(f"SUBSTITUTE policy for {task.value} needs a rescue factory")

    result = await generate()

    if isinstance(result, GenerationCancelled):
        logger.info(f"[LLM] Generation cancelled | task={task.value}")
        raise GenerationCancelledError(
            f"Generation for {task.value} was cancelled",
            details={"attempts": len(result.attempts)},
        )

    if isinstance(result, GenerationSuccess):
        try:
            value = validate_output(result.content, output_schema)
        except MalformedStructuredOutputError as e:
            logger.warning(
                f"[LLM] Output rejected | task={task.value} | model={result.winning_model} | "
                f"error_class=MalformedStructuredOutput | reason={e.message} | "
                f"preview={result.content[:200]!r}"
            )
            failure: Exception = e
            attempts = result.attempts
        else:
            logger.info(
                f"[LLM] Output accepted | task={task.value} | model={result.winning_model}"
            )
            return RecoveredOutput(
                value=value,
                state=RecoveryState.ACCEPTED,
                task=task,
                model=result.winning_model,
            )
    else:
        # GenerationExhausted
        failure = None
        attempts = result.attempts
        logger.warning(
            f"[LLM] Generation exhausted | task={task.value} | "
            f"error_class=Exhausted | attempts={len(attempts)}"
        )

    if policy is RecoveryPolicy.SUBSTITUTE:
        logger.warning(f"[LLM] Substituting rescue artifact | task={task.value}")
        return RecoveredOutput(
            value=rescue(),
            state=RecoveryState.SUBSTITUTED,
            task=task,
        )

    error_class = "MalformedStructuredOutput" if failure is not None else "Exhausted"
    raise GenerationFailedError(
        f"Generation for {task.value} failed ({error_class})",
        task=task.value,
        attempts=attempts,
        details={"error_class": error_class},
    ) from failure


def describe_result(result: OrchestrationResult) -> str:
    """One-line summary of an orchestration result for logs."""
    if isinstance(result, GenerationSuccess):
        return f"success model={result.winning_model} attempts={len(result.attempts)}"
    if isinstance(result, GenerationExhausted):
        return f"exhausted attempts={len(result.attempts)} last={result.summary()}"
    return f"cancelled attempts={len(result.attempts)}"
