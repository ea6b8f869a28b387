"""Protocol definitions for LLM providers and text generation."""

from typing import Protocol, runtime_checkable

from stripboard.llm.models import CompletionRequest, CompletionResponse, Model


@runtime_checkable
class LLMProviderProtocol(Protocol):
    """Protocol for LLM provider implementations."""

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Generate a completion for the given request."""
        ...

    async def list_models(self) -> list[Model]:
        """List available models from this provider."""
        ...

    async def is_available(self) -> bool:
        """Check if the provider is available and configured."""
        ...


@runtime_checkable
class TextGenerator(Protocol):
    """Anything that turns a system/user instruction pair into text.

    Implementations may raise, time out, or return text that is not valid
    JSON. Callers are expected to treat every such outcome as recoverable.
    """

    async def generate(
        self,
        system: str,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Return the raw generated text for one instruction."""
        ...
