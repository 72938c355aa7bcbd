"""Generation request types."""

from dataclasses import dataclass
from typing import Iterable, Literal, Mapping, Union

Role = Literal["system", "user", "assistant"]

JSON_ONLY_INSTRUCTION = (
    "CRITICAL JSON OUTPUT REQUIREMENT: respond with ONLY valid JSON. "
    "No markdown code blocks, no explanations, no text outside the JSON. "
    "The response must be parseable directly."
)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_STRUCTURED_MAX_TOKENS = 4000
DEFAULT_TEXT_MAX_TOKENS = 2000


@dataclass(frozen=True)
class ChatMessage:
    """One role-tagged turn of a conversation."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


MessageLike = Union[ChatMessage, Mapping[str, str]]


def _coerce(message: MessageLike) -> ChatMessage:
    if isinstance(message, ChatMessage):
        return message
    role = message.get("role", "user")
    if role not in ("system", "user", "assistant"):
        raise ValueError(f"Unsupported message role: {role}")
    return ChatMessage(role=role, content=message.get("content", "") or "")


@dataclass(frozen=True)
class GenerationRequest:
    """A provider-agnostic generation request.

    When ``wants_structured_output`` is set the system turn must already
    carry the JSON-only instruction; use :meth:`create` to have it added.
    """

    messages: tuple[ChatMessage, ...]
    wants_structured_output: bool = False
    max_output_tokens: int = DEFAULT_TEXT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE

    def __post_init__(self) -> None:
        if not self.messages:
            raise ValueError("A generation request needs at least one message")
        if self.wants_structured_output and not any(
            m.role == "system" and JSON_ONLY_INSTRUCTION in m.content
            for m in self.messages
        ):
            raise ValueError(
                "Structured requests must carry the JSON-only instruction "
                "in the system turn"
            )

    @classmethod
    def create(
        cls,
        messages: Iterable[MessageLike],
        wants_structured_output: bool = False,
        max_output_tokens: int | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> "GenerationRequest":
        """Build a request, embedding the JSON instruction if needed.

        Args:
            messages: Ordered turns, as ChatMessage or {"role", "content"} dicts
            wants_structured_output: Whether the caller expects JSON back
            max_output_tokens: Output budget (defaults depend on the mode)
            temperature: Sampling temperature

        Returns:
            An immutable GenerationRequest
        """
        turns = [_coerce(m) for m in messages]

        if wants_structured_output:
            system_index = next(
                (i for i, m in enumerate(turns) if m.role == "system"), None
            )
            if system_index is None:
                turns.insert(0, ChatMessage("system", JSON_ONLY_INSTRUCTION))
            elif JSON_ONLY_INSTRUCTION not in turns[system_index].content:
                system = turns[system_index]
                turns[system_index] = ChatMessage(
                    "system", f"{system.content}\n\n{JSON_ONLY_INSTRUCTION}"
                )

        if max_output_tokens is None:
            max_output_tokens = (
                DEFAULT_STRUCTURED_MAX_TOKENS
                if wants_structured_output
                else DEFAULT_TEXT_MAX_TOKENS
            )

        return cls(
            messages=tuple(turns),
            wants_structured_output=wants_structured_output,
            max_output_tokens=max_output_tokens,
            temperature=temperature,
        )

    def wire_messages(self) -> list[dict[str, str]]:
        return [m.to_dict() for m in self.messages]
