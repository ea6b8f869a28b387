"""LLM integration module for Stripboard."""

from __future__ import annotations

from stripboard.llm.client import LLMClient
from stripboard.llm.factory import create_llm_client, create_text_generator
from stripboard.llm.models import (
    CompletionRequest,
    CompletionResponse,
    LLMProvider,
    Model,
)
from stripboard.llm.protocols import TextGenerator
from stripboard.llm.registry import ProviderRegistry
from stripboard.llm.text_generator import LLMTextGenerator

__all__ = [
    "CompletionRequest",
    "CompletionResponse",
    "LLMClient",
    "LLMProvider",
    "LLMTextGenerator",
    "Model",
    "ProviderRegistry",
    "TextGenerator",
    "create_llm_client",
    "create_text_generator",
]
