"""LLM configuration and the provider roster.

This module defines the model descriptors, the ordered roster the
orchestrator walks, and the gateway configuration constants.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional


@dataclass(frozen=True)
class ModelDescriptor:
    """Static description of one provider+model pair."""

    model_id: str
    tier: int
    supports_strict_json_mode: bool = False

    @classmethod
    def from_model_id(cls, model_id: str, tier: int) -> "ModelDescriptor":
        """Build a descriptor, inferring native JSON mode support.

        Free and auto-routed OpenRouter models reject or ignore
        ``response_format``, so only paid models get the native flag.
        """
        strict = ":free" not in model_id and "/auto" not in model_id
        return cls(model_id=model_id, tier=tier, supports_strict_json_mode=strict)


class ProviderRoster:
    """Immutable, ordered list of model descriptors.

    Trial order is ascending tier with ties kept in list order. The order
    is fixed once here and never re-sorted per request, so a single roster
    can be shared by every concurrent orchestration.
    """

    def __init__(self, descriptors: Iterable[ModelDescriptor]):
        # sorted() is stable, which keeps list order inside a tier
        self._descriptors: tuple[ModelDescriptor, ...] = tuple(
            sorted(descriptors, key=lambda d: d.tier)
        )

    @classmethod
    def from_model_ids(cls, model_ids: Iterable[str]) -> "ProviderRoster":
        """Build a roster where each model's tier is its position."""
        return cls(
            ModelDescriptor.from_model_id(model_id, tier=index + 1)
            for index, model_id in enumerate(model_ids)
        )

    def __iter__(self) -> Iterator[ModelDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __getitem__(self, index: int) -> ModelDescriptor:
        return self._descriptors[index]

    @property
    def model_ids(self) -> list[str]:
        return [d.model_id for d in self._descriptors]

    @property
    def primary(self) -> Optional[ModelDescriptor]:
        return self._descriptors[0] if self._descriptors else None

    def __repr__(self) -> str:
        return f"ProviderRoster({self.model_ids!r})"


# Tier 1: auto-select, tier 2: verified free models, tier 3: last-resort
# free models, tier 4: paid emergency fallbacks
DEFAULT_ROSTER = ProviderRoster(
    [
        ModelDescriptor("openrouter/auto:free", tier=1),
        ModelDescriptor("mistralai/mixtral-8x7b-instruct:free", tier=2),
        ModelDescriptor("mistralai/mistral-7b-instruct:free", tier=2),
        ModelDescriptor("meta-llama/llama-3-8b-instruct:free", tier=2),
        ModelDescriptor("deepseek/deepseek-chat-v3.1:free", tier=2),
        ModelDescriptor("openchat/openchat-3.5-0106:free", tier=2),
        ModelDescriptor("qwen/qwen3-coder:free", tier=2),
        ModelDescriptor("nousresearch/nous-capybara-7b:free", tier=2),
        ModelDescriptor("gryphe/mythomax-l2-13b:free", tier=2),
        ModelDescriptor("z-ai/glm-4.5-air:free", tier=3),
        ModelDescriptor("moonshotai/kimi-k2:free", tier=3),
        ModelDescriptor("anthropic/claude-3-haiku", tier=4, supports_strict_json_mode=True),
        ModelDescriptor("openai/gpt-3.5-turbo", tier=4, supports_strict_json_mode=True),
    ]
)

DEFAULT_ATTEMPT_TIMEOUT_SECONDS = 30.0
RATE_LIMIT_WAIT_SECONDS = 2.0


@dataclass(frozen=True)
class GatewayConfig:
    """Configuration for the upstream LLM gateway."""

    api_key: Optional[str] = None
    api_base: str = "https://openrouter.ai/api/v1"

    # Timeout applied to each provider attempt, not the whole request
    attempt_timeout_seconds: float = DEFAULT_ATTEMPT_TIMEOUT_SECONDS

    # Pause after a 429 before moving on to the next provider
    rate_limit_backoff_seconds: float = RATE_LIMIT_WAIT_SECONDS

    roster: ProviderRoster = field(default_factory=lambda: DEFAULT_ROSTER)

    # Attribution headers sent to OpenRouter
    referer: Optional[str] = None
    title: Optional[str] = None
