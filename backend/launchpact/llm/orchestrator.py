"""Sequential multi-model fallback orchestration.

Walks the provider roster in order, one attempt per provider, until one
returns usable content. Every attempt is recorded as an AttemptOutcome so
the whole trial history is available to callers and to the logs.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from .config import GatewayConfig, ModelDescriptor, ProviderRoster
from .request import GenerationRequest
from .transport import (
    ChatTransport,
    LiteLLMTransport,
    ProviderResponse,
    TokenUsage,
    build_wire_request,
)

logger = logging.getLogger(__name__)


class ErrorClass(Enum):
    """Failure taxonomy for the generation subsystem."""

    # Per-attempt classes, recovered inside the orchestrator
    TIMEOUT = "Timeout"
    RATE_LIMITED = "RateLimited"
    NETWORK = "Network"
    UPSTREAM_REJECTED = "UpstreamRejected"
    EMPTY_CONTENT = "EmptyContent"
    # Classes that surface to callers
    MALFORMED_STRUCTURED_OUTPUT = "MalformedStructuredOutput"
    CANCELLED = "Cancelled"
    EXHAUSTED = "Exhausted"


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of trying a single provider."""

    model_id: str
    succeeded: bool
    duration_ms: int
    http_status: Optional[int] = None
    error_class: Optional[ErrorClass] = None
    raw_error_text: str = ""

    def log_fields(self) -> dict:
        return {
            "model": self.model_id,
            "succeeded": self.succeeded,
            "duration_ms": self.duration_ms,
            "http_status": self.http_status,
            "error_class": self.error_class.value if self.error_class else None,
        }


AttemptLog = tuple[AttemptOutcome, ...]


@dataclass(frozen=True)
class GenerationSuccess:
    """First provider that answered with non-empty 2xx content."""

    content: str
    winning_model: str
    attempts: AttemptLog = ()
    served_model: Optional[str] = None
    usage: Optional[TokenUsage] = None


@dataclass(frozen=True)
class GenerationExhausted:
    """Every provider in the roster failed."""

    attempts: AttemptLog = field(default_factory=tuple)

    def summary(self, last: int = 3) -> str:
        return " | ".join(
            f"{a.model_id} ({a.error_class.value if a.error_class else 'ok'})"
            for a in self.attempts[-last:]
        )


@dataclass(frozen=True)
class GenerationCancelled:
    """The caller cancelled before any provider succeeded."""

    attempts: AttemptLog = field(default_factory=tuple)


OrchestrationResult = Union[GenerationSuccess, GenerationExhausted, GenerationCancelled]


def classify_status(status_code: int) -> ErrorClass:
    """Map a non-2xx HTTP status to an error class."""
    if status_code == 429:
        return ErrorClass.RATE_LIMITED
    return ErrorClass.UPSTREAM_REJECTED


class FallbackOrchestrator:
    """Provides one reliable generation call on top of many unreliable ones.

    Providers are tried strictly in roster order; there is no fan-out and no
    retry against the same provider. Worst-case latency is bounded by
    ``len(roster) * attempt_timeout`` plus rate-limit pauses.
    """

    def __init__(
        self,
        config: GatewayConfig,
        transport: Optional[ChatTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the orchestrator.

        Args:
            config: Gateway configuration (roster, timeouts, backoff)
            transport: Wire transport; defaults to LiteLLM against OpenRouter
            sleep: Coroutine used for the rate-limit pause
        """
        self.config = config
        self.roster: ProviderRoster = config.roster
        self.transport = transport or LiteLLMTransport(config)
        self._sleep = sleep

    async def attempt(
        self,
        request: GenerationRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> OrchestrationResult:
        """Try providers in order until one succeeds.

        Args:
            request: The generation request
            cancel_event: Set by the caller to abandon the request

        Returns:
            GenerationSuccess, GenerationExhausted or GenerationCancelled
        """
        attempts: list[AttemptOutcome] = []
        started = time.monotonic()

        logger.info(
            f"[LLM] Orchestration started | structured={request.wants_structured_output} | "
            f"models={len(self.roster)}"
        )

        for index, descriptor in enumerate(self.roster):
            if cancel_event is not None and cancel_event.is_set():
                return self._cancelled(attempts)

            trial = await self._try_provider(descriptor, request, cancel_event)
            if trial is None:
                return self._cancelled(attempts)

            outcome, response = trial
            attempts.append(outcome)
            self._log_outcome(outcome, index)

            if outcome.succeeded:
                logger.info(
                    f"[LLM] Orchestration succeeded | model={descriptor.model_id} | "
                    f"attempt={index + 1}/{len(self.roster)} | "
                    f"total_ms={int((time.monotonic() - started) * 1000)}"
                )
                return GenerationSuccess(
                    content=response.content,
                    winning_model=descriptor.model_id,
                    attempts=tuple(attempts),
                    served_model=response.model,
                    usage=response.usage,
                )

            is_last = index == len(self.roster) - 1
            if outcome.error_class is ErrorClass.RATE_LIMITED and not is_last:
                logger.info(
                    f"[LLM] Rate limit hit on {descriptor.model_id}, "
                    f"waiting {self.config.rate_limit_backoff_seconds}s before fallback"
                )
                if not await self._backoff(cancel_event):
                    return self._cancelled(attempts)

        exhausted = GenerationExhausted(attempts=tuple(attempts))
        logger.error(
            f"[LLM] All {len(self.roster)} models failed | "
            f"total_ms={int((time.monotonic() - started) * 1000)} | "
            f"last_errors={exhausted.summary()}"
        )
        return exhausted

    async def _try_provider(
        self,
        descriptor: ModelDescriptor,
        request: GenerationRequest,
        cancel_event: Optional[asyncio.Event],
    ) -> Optional[tuple[AttemptOutcome, Optional[ProviderResponse]]]:
        """Run one attempt under the per-attempt timeout.

        Returns None if the caller cancelled while the call was in flight;
        the partial attempt is not recorded.
        """
        wire = build_wire_request(descriptor, request)
        started = time.monotonic()

        call = asyncio.ensure_future(self.transport.complete(wire))
        waiters: set[asyncio.Future] = {call}
        cancel_waiter = None
        if cancel_event is not None:
            cancel_waiter = asyncio.ensure_future(cancel_event.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(
                waiters,
                timeout=self.config.attempt_timeout_seconds,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()
            if not call.done():
                # Cancel the network call itself, not just the wait
                call.cancel()
                try:
                    await call
                except asyncio.CancelledError:
                    # Only the provider call was cancelled; an outer cancel must still propagate
                    current = asyncio.current_task()
                    if current is not None and current.cancelling():
                        raise

        duration_ms = int((time.monotonic() - started) * 1000)

        def failed(
            error_class: ErrorClass, text: str, status: Optional[int] = None
        ) -> tuple[AttemptOutcome, None]:
            return (
                AttemptOutcome(
                    model_id=descriptor.model_id,
                    succeeded=False,
                    duration_ms=duration_ms,
                    http_status=status,
                    error_class=error_class,
                    raw_error_text=text,
                ),
                None,
            )

        if call not in done:
            if cancel_waiter is not None and cancel_waiter in done:
                return None
            return failed(
                ErrorClass.TIMEOUT,
                f"No response within {self.config.attempt_timeout_seconds}s",
            )

        if call.cancelled():
            return failed(ErrorClass.NETWORK, "Call was cancelled by the transport")

        error = call.exception()
        if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
            return failed(ErrorClass.TIMEOUT, str(error) or "Transport timeout")
        if error is not None:
            return failed(ErrorClass.NETWORK, f"{type(error).__name__}: {error}")

        response: ProviderResponse = call.result()
        if not response.ok:
            return failed(
                classify_status(response.status_code),
                response.error_text,
                response.status_code,
            )

        if not response.content or not response.content.strip():
            return failed(
                ErrorClass.EMPTY_CONTENT,
                "Empty content in response",
                response.status_code,
            )

        outcome = AttemptOutcome(
            model_id=descriptor.model_id,
            succeeded=True,
            duration_ms=duration_ms,
            http_status=response.status_code,
        )
        return outcome, response

    async def _backoff(self, cancel_event: Optional[asyncio.Event]) -> bool:
        """Pause after a rate limit. Returns False if cancelled meanwhile."""
        delay = self.config.rate_limit_backoff_seconds
        if cancel_event is None:
            await self._sleep(delay)
            return True

        pause = asyncio.ensure_future(self._sleep(delay))
        cancel_waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait(
                {pause, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (pause, cancel_waiter):
                task.cancel()
        return not cancel_event.is_set()

    def _cancelled(self, attempts: list[AttemptOutcome]) -> GenerationCancelled:
        logger.info(f"[LLM] Orchestration cancelled | completed_attempts={len(attempts)}")
        return GenerationCancelled(attempts=tuple(attempts))

    def _log_outcome(self, outcome: AttemptOutcome, index: int) -> None:
        error_class = outcome.error_class.value if outcome.error_class else "-"
        message = (
            f"[LLM] attempt | model={outcome.model_id} | "
            f"attempt={index + 1}/{len(self.roster)} | "
            f"duration_ms={outcome.duration_ms} | status={outcome.http_status} | "
            f"error_class={error_class}"
        )
        extra = {"attempt": outcome.log_fields()}
        if outcome.succeeded:
            logger.info(message, extra=extra)
        else:
            logger.warning(
                f"{message} | error={outcome.raw_error_text[:200]}", extra=extra
            )


def create_orchestrator_from_settings() -> FallbackOrchestrator:
    """Create a FallbackOrchestrator from application settings.

    Returns:
        Configured FallbackOrchestrator instance

    Raises:
        ConfigurationError: If no gateway API key is configured
    """
    # Import here to avoid circular imports
    from launchpact.config import get_settings
    from launchpact.utils.errors import ConfigurationError

    settings = get_settings()
    if not settings.api_key_configured:
        raise ConfigurationError("OPENROUTER_API_KEY is not configured")
    roster = (
        ProviderRoster.from_model_ids(settings.llm_model_ids)
        if settings.llm_model_ids
        else None
    )

    config = GatewayConfig(
        api_key=settings.openrouter_api_key,
        api_base=settings.openrouter_api_base,
        attempt_timeout_seconds=settings.llm_attempt_timeout_seconds,
        rate_limit_backoff_seconds=settings.llm_rate_limit_backoff_seconds,
        referer=settings.app_url,
        title=settings.app_title,
        **({"roster": roster} if roster is not None else {}),
    )

    return FallbackOrchestrator(config)
