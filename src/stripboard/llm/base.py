"""Base class for LLM providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stripboard.llm.models import (
    CompletionRequest,
    CompletionResponse,
    LLMProvider,
    Model,
)


class BaseLLMProvider(ABC):
    """Base class for LLM providers."""

    provider_type: LLMProvider

    @abstractmethod
    async def list_models(self) -> list[Model]:
        """List available models."""
        pass

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Generate text completion."""
        pass

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if provider is available."""
        pass

    async def aclose(self) -> None:
        """Release any network resources held by the provider."""
        return None
