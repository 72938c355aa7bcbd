"""Co-founder chat and prompt enhancement.

Chat replies are user-facing, so exhausted generation is propagated rather
than papered over with invented content.
"""

import asyncio
import logging
from typing import Optional

from launchpact.llm import (
    FallbackOrchestrator,
    GenerationCancelled,
    GenerationRequest,
    GenerationSuccess,
    parse_structured,
)
from launchpact.models.llm_outputs import ChatReply
from launchpact.services import prompts
from launchpact.services.recovery import RecoveryState, TaskKind, describe_result
from launchpact.utils.errors import (
    GenerationCancelledError,
    GenerationFailedError,
    MalformedStructuredOutputError,
)

logger = logging.getLogger(__name__)

MAX_RAW_REPLY_CHARS = 500
DEFAULT_REPLY_TEXT = "I've processed your request. How can I refine this further?"
GREETING = ChatReply(
    text="I'm here! What would you like to discuss about your project?",
    suggestions=["Tell me about your idea", "Help with blueprint", "Execution advice"],
)
RAW_REPLY_SUGGESTIONS = ["Refine the question", "Change mode", "Continue building"]


class CoFounderChat:
    """Conversational assistant over the fallback orchestrator."""

    def __init__(self, orchestrator: FallbackOrchestrator):
        self.orchestrator = orchestrator

    async def reply(
        self,
        history: list[dict[str, str]],
        new_message: str,
        context: str = "",
        co_founder_mode: bool = False,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> tuple[ChatReply, RecoveryState]:
        """Produce the next chat turn.

        Args:
            history: Previous turns ({"role", "text"} or {"role", "content"})
            new_message: The user's new message
            context: Project context injected into the system turn
            co_founder_mode: Use the critical co-founder persona
            cancel_event: Set by the caller to abandon the request

        Returns:
            Tuple of (ChatReply, RecoveryState)

        Raises:
            GenerationFailedError: If every model failed
            GenerationCancelledError: If the caller cancelled
        """
        if not new_message or not new_message.strip():
            return GREETING.model_copy(deep=True), RecoveryState.ACCEPTED

        request = GenerationRequest.create(
            prompts.chat_messages(history, new_message, context, co_founder_mode),
            wants_structured_output=True,
        )
        result = await self.orchestrator.attempt(request, cancel_event)
        logger.info(f"[LLM] Chat turn | {describe_result(result)}")

        if isinstance(result, GenerationCancelled):
            raise GenerationCancelledError("Chat generation was cancelled")
        if not isinstance(result, GenerationSuccess):
            raise GenerationFailedError(
                "Chat generation failed (Exhausted)",
                task=TaskKind.CHAT.value,
                attempts=result.attempts,
                details={"error_class": "Exhausted"},
            )

        return self._to_reply(result.content), RecoveryState.ACCEPTED

    def _to_reply(self, content: str) -> ChatReply:
        try:
            parsed = parse_structured(content)
        except MalformedStructuredOutputError as e:
            logger.warning(f"[LLM] Chat reply not JSON, using raw text | reason={e.message}")
            parsed = None

        if isinstance(parsed, dict) and isinstance(parsed.get("text"), str) and parsed["text"].strip():
            suggestions = parsed.get("suggestions")
            updates = parsed.get("updates")
            return ChatReply(
                text=parsed["text"],
                suggestions=[str(s) for s in suggestions] if isinstance(suggestions, list) else [],
                updates=updates if isinstance(updates, dict) and updates else None,
            )

        if isinstance(parsed, dict) and parsed:
            # Valid JSON without a usable text field
            return ChatReply(text=DEFAULT_REPLY_TEXT)

        # Sloppy but successful answer: show the model's own words
        text = content.strip()
        if len(text) > MAX_RAW_REPLY_CHARS:
            text = text[:MAX_RAW_REPLY_CHARS] + "..."
        return ChatReply(text=text, suggestions=list(RAW_REPLY_SUGGESTIONS))

    async def enhance_prompt(
        self, raw_input: str, cancel_event: Optional[asyncio.Event] = None
    ) -> tuple[str, RecoveryState]:
        """Rewrite a raw idea into a polished prompt; echoes the input on failure."""
        if not raw_input or not raw_input.strip():
            return raw_input or "", RecoveryState.ACCEPTED

        request = GenerationRequest.create(prompts.enhance_prompt_messages(raw_input))
        result = await self.orchestrator.attempt(request, cancel_event)
        logger.info(f"[LLM] Prompt enhancement | {describe_result(result)}")

        if isinstance(result, GenerationCancelled):
            raise GenerationCancelledError("Prompt enhancement was cancelled")
        if isinstance(result, GenerationSuccess):
            return result.content.strip(), RecoveryState.ACCEPTED
        return raw_input, RecoveryState.SUBSTITUTED
