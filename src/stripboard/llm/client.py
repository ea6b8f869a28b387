"""Multi-provider LLM client with automatic fallback."""

from __future__ import annotations

import traceback
from typing import Any

from stripboard.config import get_logger
from stripboard.exceptions import LLMError, LLMProviderError
from stripboard.llm.base import BaseLLMProvider
from stripboard.llm.fallback import DEFAULT_FALLBACK_ORDER, FallbackHandler
from stripboard.llm.models import (
    CompletionRequest,
    CompletionResponse,
    LLMProvider,
    Model,
)
from stripboard.llm.registry import ProviderRegistry
from stripboard.llm.retry_strategy import RetryStrategy

logger = get_logger(__name__)


class LLMClient:
    """Multi-provider LLM client with automatic fallback."""

    def __init__(
        self,
        preferred_provider: LLMProvider | None = None,
        fallback_order: list[LLMProvider] | None = None,
        github_token: str | None = None,
        openai_endpoint: str | None = None,
        openai_api_key: str | None = None,
        timeout: float = 60.0,
        registry: ProviderRegistry | None = None,
        max_retries: int = 3,
        base_retry_delay: float = 1.0,
        max_retry_delay: float = 10.0,
        debug_mode: bool = False,
        default_model: str | None = None,
    ) -> None:
        """Initialize LLM client with provider preferences.

        Args:
            preferred_provider: Preferred provider to use if available.
            fallback_order: Order of providers to try if preferred isn't available.
            github_token: GitHub token for GitHub Models provider.
            openai_endpoint: Endpoint URL for OpenAI-compatible provider.
            openai_api_key: API key for OpenAI-compatible provider.
            timeout: Default timeout for HTTP requests.
            registry: Optional provider registry to use. If not provided,
                creates a new one with the default providers.
            max_retries: Maximum number of attempts for transient failures.
            base_retry_delay: Base delay in seconds for exponential backoff.
            max_retry_delay: Maximum delay in seconds for exponential backoff.
            debug_mode: Enable debug mode for detailed error information.
            default_model: Model used when a request does not name one.
        """
        self.preferred_provider = preferred_provider
        self.fallback_order = fallback_order or list(DEFAULT_FALLBACK_ORDER)
        self.timeout = timeout
        self.debug_mode = debug_mode
        self.default_model = default_model
        self.last_fallback_chain: list[str] = []

        # provider:capability -> model id
        self._model_selection_cache: dict[str, str] = {}

        self.retry_strategy = RetryStrategy(
            max_retries=max_retries,
            base_retry_delay=base_retry_delay,
            max_retry_delay=max_retry_delay,
        )

        if registry is not None:
            self.registry = registry
        else:
            self.registry = ProviderRegistry()
            self.registry.initialize_default_providers(
                github_token=github_token,
                openai_endpoint=openai_endpoint,
                openai_api_key=openai_api_key,
                timeout=timeout,
            )

        self.fallback_handler = FallbackHandler(
            registry=self.registry,
            preferred_provider=self.preferred_provider,
            fallback_order=self.fallback_order,
            debug_mode=self.debug_mode,
        )

    @property
    def providers(self) -> dict[LLMProvider, BaseLLMProvider]:
        """Get all providers from the registry."""
        return self.registry.providers

    def _record_chain(self, chain: list[str]) -> None:
        self.last_fallback_chain = chain

    async def available_providers(self) -> list[LLMProvider]:
        """Providers in fallback order that report themselves available."""
        available = []
        for provider_type in self.fallback_handler.build_chain():
            provider = self.registry.get_provider(provider_type)
            if provider and await provider.is_available():
                available.append(provider_type)
        return available

    async def list_models(self, provider: LLMProvider | None = None) -> list[Model]:
        """List models across available providers, or from one provider."""
        targets = [provider] if provider else list(self.providers.keys())
        all_models: list[Model] = []
        for provider_type in targets:
            instance = self.registry.get_provider(provider_type)
            if instance and await instance.is_available():
                all_models.extend(await instance.list_models())
        return all_models

    async def complete(
        self,
        messages: list[dict[str, str]] | CompletionRequest,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        system: str | None = None,
        provider: LLMProvider | None = None,
    ) -> CompletionResponse:
        """Generate text completion.

        Args:
            messages: List of message dictionaries with 'role' and 'content',
                or CompletionRequest.
            model: Model ID to use. If None, uses the default or auto-selects.
            temperature: Sampling temperature (0-2).
            max_tokens: Maximum tokens to generate.
            system: System prompt to prepend.
            provider: Specific provider to use, bypassing fallback logic.

        Returns:
            Completion response with generated text.

        Raises:
            LLMFallbackError: If every provider in the chain failed.
            LLMProviderError: If the requested provider is not available.
        """
        if isinstance(messages, CompletionRequest):
            request = messages
        else:
            request = CompletionRequest(
                model=model or self.default_model or "",
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                system=system,
            )

        if provider:
            instance = self.registry.get_provider(provider)
            if instance and await instance.is_available():
                return await self._try_complete_with_provider(instance, request)
            raise LLMProviderError(
                message=f"Requested provider {provider.value} is not available",
                hint="Check the provider's credentials and endpoint",
            )

        return await self.fallback_handler.complete_with_fallback(
            request,
            self._try_complete_with_provider,
            self._record_chain,
        )

    async def _select_best_model(
        self, provider: BaseLLMProvider, capability_type: str = "chat"
    ) -> str | None:
        """Select the first model with the capability, caching the choice."""
        cache_key = f"{provider.provider_type.value}:{capability_type}"
        if cache_key in self._model_selection_cache:
            return self._model_selection_cache[cache_key]

        models = await provider.list_models()
        if not models:
            logger.warning(
                "No models available", provider=provider.provider_type.value
            )
            return None

        selected = next(
            (m.id for m in models if capability_type in m.capabilities),
            models[0].id,
        )
        logger.info(
            "Selected model",
            provider=provider.provider_type.value,
            model=selected,
            capability=capability_type,
        )
        self._model_selection_cache[cache_key] = selected
        return selected

    async def _try_complete_with_provider(
        self, provider: BaseLLMProvider, request: CompletionRequest
    ) -> CompletionResponse:
        """Try completion with a specific provider, handling model selection."""
        provider_name = provider.provider_type.value

        if not request.model:
            selected_model = await self._select_best_model(provider, "chat")
            if not selected_model:
                raise LLMProviderError(
                    message=f"No models available from provider {provider_name}",
                    details={"provider": provider_name},
                )
            # Copy so a model picked for one provider is not reused by the next
            request = request.model_copy(update={"model": selected_model})

        try:
            response: CompletionResponse = await self.retry_strategy.execute_with_retry(
                provider.complete,
                provider_name,
                request,
            )
        except LLMError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError, RuntimeError) as e:
            error_details: dict[str, Any] = {
                "error": str(e),
                "error_type": type(e).__name__,
                "model": request.model,
                "provider": provider_name,
            }
            if self.debug_mode:
                error_details["stack_trace"] = traceback.format_exc()
            logger.error("Provider failed to complete request", **error_details)
            raise LLMProviderError(
                message=f"Failed to complete prompt: {e}",
                hint="Check provider configuration and request format",
                details=error_details,
            ) from e

        logger.info(
            "Completed request",
            provider=provider_name,
            model=response.model,
            response_length=len(response.content) if response.choices else 0,
        )
        return response

    async def cleanup(self) -> None:
        """Clean up resources for all providers."""
        await self.registry.cleanup()

    async def __aenter__(self) -> LLMClient:
        """Enter async context manager."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit async context manager and cleanup."""
        await self.cleanup()
