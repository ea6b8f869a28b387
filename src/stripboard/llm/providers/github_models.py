"""GitHub Models provider using OpenAI-compatible API."""

from __future__ import annotations

import os
from typing import ClassVar

from stripboard.config import get_logger
from stripboard.llm.models import LLMProvider, Model
from stripboard.llm.providers.openai_compatible import OpenAICompatibleProvider

logger = get_logger(__name__)

GITHUB_MODELS_URL = "https://models.inference.ai.azure.com"


class GitHubModelsProvider(OpenAICompatibleProvider):
    """GitHub Models inference endpoint authenticated with a GitHub token."""

    provider_type = LLMProvider.GITHUB_MODELS

    # Used when the endpoint does not list its models
    STATIC_MODELS: ClassVar[list[Model]] = [
        Model(
            id="gpt-4o",
            name="GPT-4o",
            provider=LLMProvider.GITHUB_MODELS,
            capabilities=["chat", "json"],
            context_window=128000,
            max_output_tokens=16384,
        ),
        Model(
            id="gpt-4o-mini",
            name="GPT-4o Mini",
            provider=LLMProvider.GITHUB_MODELS,
            capabilities=["chat"],
            context_window=128000,
            max_output_tokens=16384,
        ),
    ]

    def __init__(self, token: str | None = None, timeout: float = 60.0) -> None:
        """Initialize GitHub Models provider.

        Args:
            token: GitHub token. If not provided, checks GITHUB_TOKEN env var.
            timeout: HTTP request timeout in seconds.
        """
        super().__init__(
            endpoint=GITHUB_MODELS_URL,
            api_key=token or os.getenv("GITHUB_TOKEN", ""),
            timeout=timeout,
        )

    async def list_models(self) -> list[Model]:
        """List models from the endpoint, falling back to the static list."""
        if not self.configured:
            return []
        models = await super().list_models()
        if not models:
            logger.debug("Using static GitHub Models list")
            return list(self.STATIC_MODELS)
        return models
