"""Wire transport to the upstream LLM gateway.

The orchestrator only ever talks to a :class:`ChatTransport`. The
production implementation goes through LiteLLM to OpenRouter; tests swap
in a scripted transport.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import litellm

from .config import GatewayConfig, ModelDescriptor
from .request import GenerationRequest

logger = logging.getLogger(__name__)

JSON_RESPONSE_FORMAT = {"type": "json_object"}


@dataclass(frozen=True)
class TokenUsage:
    """Token usage statistics for a request."""

    input_tokens: int
    output_tokens: int
    total_tokens: int
    model: str


@dataclass(frozen=True)
class ProviderResponse:
    """What came back from one provider call."""

    status_code: int
    content: Optional[str] = None
    error_text: str = ""
    model: Optional[str] = None
    usage: Optional[TokenUsage] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ChatTransport(Protocol):
    async def complete(self, wire_request: dict[str, Any]) -> ProviderResponse:
        """Send one chat completion request.

        Non-2xx answers are returned as responses. Raises TimeoutError on a
        transport timeout and ConnectionError (or anything else) when no
        answer was received at all.
        """
        ...


def build_wire_request(
    descriptor: ModelDescriptor, request: GenerationRequest
) -> dict[str, Any]:
    """Build the provider-specific request body.

    The native JSON flag is only attached for providers known to accept
    it; others reject unknown parameters and rely on the system prompt.
    """
    wire: dict[str, Any] = {
        "model": descriptor.model_id,
        "messages": request.wire_messages(),
        "temperature": request.temperature,
        "max_tokens": request.max_output_tokens,
    }
    if request.wants_structured_output and descriptor.supports_strict_json_mode:
        wire["response_format"] = dict(JSON_RESPONSE_FORMAT)
    return wire


class LiteLLMTransport:
    """Calls OpenRouter through LiteLLM's async completion API."""

    def __init__(self, config: GatewayConfig):
        self.config = config
        # Keep LiteLLM quiet; attempts are logged by the orchestrator
        litellm.suppress_debug_info = True

    def _extra_headers(self) -> dict[str, str]:
        headers = {}
        if self.config.referer:
            headers["HTTP-Referer"] = self.config.referer
        if self.config.title:
            headers["X-Title"] = self.config.title
        return headers

    async def complete(self, wire_request: dict[str, Any]) -> ProviderResponse:
        params = dict(wire_request)
        model_id = params.pop("model")

        try:
            response = await litellm.acompletion(
                model=f"openrouter/{model_id}",
                api_key=self.config.api_key,
                api_base=self.config.api_base,
                extra_headers=self._extra_headers(),
                # One attempt per provider; fallback happens in the orchestrator
                max_retries=0,
                **params,
            )
        except litellm.Timeout as e:
            raise TimeoutError(str(e)) from e
        except litellm.APIConnectionError as e:
            raise ConnectionError(str(e)) from e
        except Exception as e:
            status_code = getattr(e, "status_code", None)
            if isinstance(status_code, int):
                return ProviderResponse(status_code=status_code, error_text=str(e))
            raise

        content = None
        if response.choices:
            content = response.choices[0].message.content

        usage = getattr(response, "usage", None)
        served_model = getattr(response, "model", None) or model_id
        token_usage = None
        if usage:
            token_usage = TokenUsage(
                input_tokens=usage.prompt_tokens or 0,
                output_tokens=usage.completion_tokens or 0,
                total_tokens=usage.total_tokens or 0,
                model=served_model,
            )

        return ProviderResponse(
            status_code=200,
            content=content,
            model=served_model,
            usage=token_usage,
        )
