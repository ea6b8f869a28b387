"""TextGenerator adapter over the multi-provider LLM client."""

from __future__ import annotations

from stripboard.config import get_logger
from stripboard.llm.client import LLMClient
from stripboard.llm.models import CompletionRequest

logger = get_logger(__name__)


class LLMTextGenerator:
    """Send one system/user instruction pair through an ``LLMClient``."""

    def __init__(self, client: LLMClient, model: str | None = None) -> None:
        self.client = client
        self.model = model

    async def generate(
        self,
        system: str,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        request = CompletionRequest(
            model=self.model or self.client.default_model or "",
            messages=[{"role": "user", "content": prompt}],
            system=system,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        response = await self.client.complete(request)
        if response.finish_reason == "length":
            # Output hit max_tokens; the parser may still recover complete days
            logger.warning(
                "Generated text was truncated",
                model=response.model,
                provider=response.provider.value,
                max_tokens=max_tokens,
            )
        return response.content if response.choices else ""

    async def aclose(self) -> None:
        await self.client.cleanup()
