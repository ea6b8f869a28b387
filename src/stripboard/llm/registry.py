"""Provider registry for managing LLM provider instances."""

from __future__ import annotations

from typing import Any

from stripboard.config import get_logger
from stripboard.llm.base import BaseLLMProvider
from stripboard.llm.models import LLMProvider
from stripboard.llm.providers import GitHubModelsProvider, OpenAICompatibleProvider

logger = get_logger(__name__)


class ProviderRegistry:
    """Registry for managing LLM provider instances."""

    def __init__(self) -> None:
        """Initialize the provider registry."""
        self.providers: dict[LLMProvider, BaseLLMProvider] = {}

    def create_provider(
        self, provider_type: LLMProvider, **kwargs: Any
    ) -> BaseLLMProvider:
        """Create a provider instance.

        Args:
            provider_type: The provider type to create.
            **kwargs: Provider-specific initialization arguments.

        Returns:
            The created provider instance.

        Raises:
            ValueError: If the provider type is unknown.
        """
        if provider_type == LLMProvider.GITHUB_MODELS:
            return GitHubModelsProvider(**kwargs)
        if provider_type == LLMProvider.OPENAI_COMPATIBLE:
            return OpenAICompatibleProvider(**kwargs)
        raise ValueError(f"Unknown provider type: {provider_type}")

    def initialize_default_providers(
        self,
        github_token: str | None = None,
        openai_endpoint: str | None = None,
        openai_api_key: str | None = None,
        timeout: float = 60.0,
    ) -> dict[LLMProvider, BaseLLMProvider]:
        """Initialize default provider instances.

        Args:
            github_token: GitHub token for GitHub Models provider.
            openai_endpoint: Endpoint URL for OpenAI-compatible provider.
            openai_api_key: API key for OpenAI-compatible provider.
            timeout: Default timeout for HTTP requests.

        Returns:
            Dictionary of initialized providers.
        """
        providers: dict[LLMProvider, BaseLLMProvider] = {
            LLMProvider.GITHUB_MODELS: self.create_provider(
                LLMProvider.GITHUB_MODELS,
                token=github_token,
                timeout=timeout,
            ),
            LLMProvider.OPENAI_COMPATIBLE: self.create_provider(
                LLMProvider.OPENAI_COMPATIBLE,
                endpoint=openai_endpoint,
                api_key=openai_api_key,
                timeout=timeout,
            ),
        }
        self.providers = providers
        return providers

    def get_provider(self, provider_type: LLMProvider) -> BaseLLMProvider | None:
        """Get a provider instance by type, or None if not registered."""
        return self.providers.get(provider_type)

    def set_provider(
        self, provider_type: LLMProvider, provider: BaseLLMProvider
    ) -> None:
        """Set a provider instance."""
        self.providers[provider_type] = provider
        logger.debug("Set provider", provider=provider_type.value)

    def remove_provider(self, provider_type: LLMProvider) -> None:
        """Remove a provider from the registry."""
        if provider_type in self.providers:
            del self.providers[provider_type]
            logger.debug("Removed provider", provider=provider_type.value)

    def list_providers(self) -> list[LLMProvider]:
        return list(self.providers.keys())

    async def cleanup(self) -> None:
        """Clean up resources for all providers."""
        for provider_type, provider in self.providers.items():
            await provider.aclose()
            logger.debug("Cleaned up provider", provider=provider_type.value)
