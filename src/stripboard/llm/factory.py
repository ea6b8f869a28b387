"""Factory functions for creating LLM clients."""

from __future__ import annotations

from stripboard.config import StripboardSettings, get_logger, get_settings
from stripboard.exceptions import ConfigurationError
from stripboard.llm.client import LLMClient
from stripboard.llm.models import LLMProvider
from stripboard.llm.text_generator import LLMTextGenerator

logger = get_logger(__name__)


def _parse_provider(value: str | None) -> LLMProvider | None:
    if not value:
        return None
    try:
        return LLMProvider(value.strip().lower())
    except ValueError as e:
        raise ConfigurationError(
            message=f"Unknown LLM provider '{value}'",
            hint="Use one of: "
            + ", ".join(provider.value for provider in LLMProvider),
            details={"llm_provider": value},
        ) from e


def create_llm_client(settings: StripboardSettings | None = None) -> LLMClient:
    """Create an LLM client from settings.

    Args:
        settings: Settings to use. Defaults to the global settings.

    Returns:
        Configured LLMClient instance.

    Raises:
        ConfigurationError: If ``llm_provider`` names an unknown provider.
    """
    settings = settings or get_settings()
    preferred = _parse_provider(settings.llm_provider)

    logger.debug(
        "Creating LLM client",
        preferred_provider=preferred.value if preferred else None,
        endpoint=settings.llm_endpoint,
        model=settings.llm_model,
        timeout=settings.llm_timeout,
    )
    return LLMClient(
        preferred_provider=preferred,
        github_token=settings.github_token,
        openai_endpoint=settings.llm_endpoint,
        openai_api_key=settings.llm_api_key,
        timeout=settings.llm_timeout,
        max_retries=settings.llm_max_retries,
        debug_mode=settings.debug,
        default_model=settings.llm_model,
    )


def create_text_generator(
    settings: StripboardSettings | None = None,
) -> LLMTextGenerator:
    """Create a TextGenerator backed by a new LLM client."""
    settings = settings or get_settings()
    return LLMTextGenerator(create_llm_client(settings), model=settings.llm_model)
