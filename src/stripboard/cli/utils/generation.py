"""Open a text generator for CLI commands."""

from __future__ import annotations

from stripboard.config import StripboardSettings, get_logger
from stripboard.llm import LLMTextGenerator, create_text_generator

logger = get_logger(__name__)


async def open_text_generator(
    settings: StripboardSettings, offline: bool = False
) -> LLMTextGenerator | None:
    """Return a generator backed by an available provider, or None.

    None means the caller runs offline. The caller closes a returned
    generator with ``aclose``.
    """
    if offline:
        return None

    generator = create_text_generator(settings)
    available = await generator.client.available_providers()
    if not available:
        logger.warning("No LLM provider available, scheduling offline")
        await generator.aclose()
        return None

    logger.info("LLM providers available", providers=[p.value for p in available])
    return generator
