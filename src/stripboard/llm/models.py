"""Data models for LLM integration."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from typing_extensions import NotRequired, TypedDict


class LLMProvider(str, Enum):
    """Available LLM providers."""

    GITHUB_MODELS = "github_models"
    OPENAI_COMPATIBLE = "openai_compatible"


class CompletionMessage(TypedDict):
    """Message in completion choice."""

    role: str
    content: Any  # Can be str, int, None - converted to str in the property


class CompletionChoice(TypedDict):
    """Choice in completion response."""

    index: int
    message: CompletionMessage
    finish_reason: NotRequired[str | None]


class UsageInfo(TypedDict, total=False):
    """Token usage information."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


def _default_usage_info() -> UsageInfo:
    """Create default empty UsageInfo."""
    return UsageInfo()


class Model(BaseModel):
    """LLM model information."""

    id: str
    name: str
    provider: LLMProvider
    capabilities: list[str] = Field(default_factory=list)
    context_window: int | None = None
    max_output_tokens: int | None = None


class CompletionRequest(BaseModel):
    """Request for text completion."""

    model: str
    messages: list[dict[str, str]]
    temperature: float = 0.7
    max_tokens: int | None = None
    top_p: float = 1.0
    stream: bool = False
    system: str | None = None


class CompletionResponse(BaseModel):
    """Response from text completion."""

    id: str
    model: str
    choices: list[CompletionChoice]
    usage: UsageInfo = Field(default_factory=_default_usage_info)
    provider: LLMProvider

    @property
    def content(self) -> str:
        """Get the content from the first choice message.

        Raises:
            IndexError: If no choices available.
        """
        if not self.choices:
            raise IndexError("No choices available in response")
        content = self.choices[0]["message"]["content"]
        return "" if content is None else str(content)

    @property
    def finish_reason(self) -> str | None:
        """Finish reason of the first choice, "length" when truncated."""
        if not self.choices:
            return None
        return self.choices[0].get("finish_reason")
