"""LLM subsystem: one reliable generation call over many unreliable models.

This module provides:
- A static, ordered provider roster (cheap/free models first)
- Sequential fallback orchestration with per-attempt timeouts
- Failure classification and a full attempt log per request
- Best-effort repair of quasi-JSON model output

Example usage:
    from launchpact.llm import (
        FallbackOrchestrator,
        GatewayConfig,
        GenerationRequest,
        GenerationSuccess,
        parse_structured,
    )

    orchestrator = FallbackOrchestrator(GatewayConfig(api_key="..."))

    request = GenerationRequest.create(
        messages=[{"role": "user", "content": "Create a blueprint..."}],
        wants_structured_output=True,
    )
    result = await orchestrator.attempt(request)

    if isinstance(result, GenerationSuccess):
        data = parse_structured(result.content)
"""

from .config import (
    DEFAULT_ROSTER,
    GatewayConfig,
    ModelDescriptor,
    ProviderRoster,
)
from .orchestrator import (
    AttemptLog,
    AttemptOutcome,
    ErrorClass,
    FallbackOrchestrator,
    GenerationCancelled,
    GenerationExhausted,
    GenerationSuccess,
    OrchestrationResult,
    create_orchestrator_from_settings,
)
from .repair import extract_structured, parse_structured
from .request import ChatMessage, GenerationRequest
from .transport import (
    ChatTransport,
    LiteLLMTransport,
    ProviderResponse,
    TokenUsage,
    build_wire_request,
)

__all__ = [
    # Config
    "GatewayConfig",
    "ModelDescriptor",
    "ProviderRoster",
    "DEFAULT_ROSTER",
    # Requests
    "ChatMessage",
    "GenerationRequest",
    # Orchestration
    "FallbackOrchestrator",
    "AttemptOutcome",
    "AttemptLog",
    "ErrorClass",
    "GenerationSuccess",
    "GenerationExhausted",
    "GenerationCancelled",
    "OrchestrationResult",
    "create_orchestrator_from_settings",
    # Transport
    "ChatTransport",
    "LiteLLMTransport",
    "ProviderResponse",
    "TokenUsage",
    "build_wire_request",
    # Repair
    "extract_structured",
    "parse_structured",
]
