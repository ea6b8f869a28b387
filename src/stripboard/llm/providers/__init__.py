"""LLM provider implementations."""

from __future__ import annotations

from stripboard.llm.providers.github_models import GitHubModelsProvider
from stripboard.llm.providers.openai_compatible import OpenAICompatibleProvider

__all__ = [
    "GitHubModelsProvider",
    "OpenAICompatibleProvider",
]
