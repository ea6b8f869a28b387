"""Fallback logic for multi-provider LLM operations."""

import traceback
from collections.abc import Awaitable, Callable

from stripboard.config import get_logger
from stripboard.exceptions import LLMFallbackError
from stripboard.llm.base import BaseLLMProvider
from stripboard.llm.models import CompletionRequest, CompletionResponse, LLMProvider
from stripboard.llm.registry import ProviderRegistry

logger = get_logger(__name__)

DEFAULT_FALLBACK_ORDER = [
    LLMProvider.GITHUB_MODELS,
    LLMProvider.OPENAI_COMPATIBLE,
]


class FallbackHandler:
    """Handles fallback logic for LLM operations across multiple providers."""

    def __init__(
        self,
        registry: ProviderRegistry,
        preferred_provider: LLMProvider | None = None,
        fallback_order: list[LLMProvider] | None = None,
        debug_mode: bool = False,
    ) -> None:
        """Initialize fallback handler.

        Args:
            registry: Provider registry containing available providers.
            preferred_provider: Preferred provider to try first.
            fallback_order: Order of providers to try if preferred fails.
            debug_mode: Log stack traces for provider failures.
        """
        self.registry = registry
        self.preferred_provider = preferred_provider
        self.fallback_order = fallback_order or list(DEFAULT_FALLBACK_ORDER)
        self.debug_mode = debug_mode

    def build_chain(self) -> list[LLMProvider]:
        """Preferred provider first, then the fallback order without repeats."""
        chain: list[LLMProvider] = []
        if self.preferred_provider:
            chain.append(self.preferred_provider)
        chain.extend(p for p in self.fallback_order if p not in chain)
        return chain

    async def complete_with_fallback(
        self,
        request: CompletionRequest,
        try_provider_func: Callable[
            [BaseLLMProvider, CompletionRequest], Awaitable[CompletionResponse]
        ],
        record_chain_func: Callable[[list[str]], None] | None = None,
    ) -> CompletionResponse:
        """Try completion with providers in fallback order.

        Args:
            request: Completion request.
            try_provider_func: Function to try completion with a provider.
            record_chain_func: Optional function receiving the provider chain.

        Returns:
            Completion response from successful provider.

        Raises:
            LLMFallbackError: If all providers fail.
        """
        provider_errors: dict[str, Exception] = {}
        attempted_providers: list[str] = []
        chain = self.build_chain()
        fallback_chain = [p.value for p in chain]

        logger.info(
            "Starting LLM completion with fallback strategy",
            preferred_provider=self.preferred_provider.value
            if self.preferred_provider
            else "none",
            fallback_chain=fallback_chain,
        )

        for provider_type in chain:
            role = (
                "preferred"
                if provider_type == self.preferred_provider
                else "fallback"
            )
            result = await self._try_provider(
                provider_type,
                request,
                try_provider_func,
                provider_errors,
                attempted_providers,
                role,
            )
            if result is not None:
                if record_chain_func:
                    record_chain_func(fallback_chain)
                return result

        if record_chain_func:
            record_chain_func(fallback_chain)

        logger.error(
            "All LLM providers failed",
            provider_errors={k: str(v) for k, v in provider_errors.items()},
            attempted_providers=attempted_providers,
            fallback_chain=fallback_chain,
        )
        raise LLMFallbackError(
            message="All LLM providers failed",
            provider_errors=provider_errors,
            attempted_providers=attempted_providers,
            fallback_chain=fallback_chain,
        )

    async def _try_provider(
        self,
        provider_type: LLMProvider,
        request: CompletionRequest,
        try_func: Callable[
            [BaseLLMProvider, CompletionRequest], Awaitable[CompletionResponse]
        ],
        provider_errors: dict[str, Exception],
        attempted_providers: list[str],
        provider_role: str,
    ) -> CompletionResponse | None:
        """Try a single provider, recording its error on failure."""
        attempted_providers.append(provider_type.value)
        provider = self.registry.get_provider(provider_type)
        if not provider:
            error_msg = (
                f"{provider_role.capitalize()} provider "
                f"{provider_type.value} not found in registry"
            )
            provider_errors[provider_type.value] = RuntimeError(error_msg)
            logger.warning(error_msg)
            return None

        is_available = await provider.is_available()
        logger.info(
            "Checking provider",
            provider=provider_type.value,
            role=provider_role,
            is_available=is_available,
        )
        if not is_available:
            provider_errors[provider_type.value] = RuntimeError(
                f"Provider {provider_type.value} not available"
            )
            return None

        try:
            return await try_func(provider, request)
        except Exception as e:
            provider_errors[provider_type.value] = e
            error_details = {
                "provider": provider_type.value,
                "error": str(e),
                "error_type": type(e).__name__,
            }
            if self.debug_mode:
                error_details["stack_trace"] = traceback.format_exc()
            logger.warning(
                f"{provider_role.capitalize()} provider failed", **error_details
            )
            return None
