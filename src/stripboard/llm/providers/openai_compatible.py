"""Generic OpenAI-compatible API provider."""

from __future__ import annotations

import asyncio
import json
import os
import time
from typing import Any

import httpx

from stripboard.config import get_logger
from stripboard.exceptions import LLMProviderError, RateLimitError
from stripboard.llm.base import BaseLLMProvider
from stripboard.llm.models import (
    CompletionRequest,
    CompletionResponse,
    LLMProvider,
    Model,
)

logger = get_logger(__name__)

AVAILABILITY_CACHE_SECONDS = 300


class OpenAICompatibleProvider(BaseLLMProvider):
    """Provider for any endpoint that speaks the chat completions API."""

    provider_type = LLMProvider.OPENAI_COMPATIBLE

    def __init__(
        self,
        endpoint: str | None = None,
        api_key: str | None = None,
        timeout: float = 60.0,
    ) -> None:
        """Initialize OpenAI-compatible provider.

        Args:
            endpoint: API endpoint URL. Defaults to STRIPBOARD_LLM_ENDPOINT.
            api_key: API key. Defaults to STRIPBOARD_LLM_API_KEY.
            timeout: HTTP request timeout in seconds.
        """
        self.base_url = (endpoint or os.getenv("STRIPBOARD_LLM_ENDPOINT", "")).rstrip(
            "/"
        )
        self.api_key = api_key or os.getenv("STRIPBOARD_LLM_API_KEY", "")
        self.timeout = timeout
        self.client = httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._availability_cache: bool | None = None
        self._cache_timestamp: float = 0
        # Local servers handle one generation at a time
        self._request_semaphore = asyncio.Semaphore(1)

        logger.debug(
            "Initialized LLM provider",
            provider=self.provider_type.value,
            endpoint=self.base_url or "not configured",
            has_api_key=bool(self.api_key),
            timeout=timeout,
        )

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    def _headers(self, content_type: bool = False) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        if content_type:
            headers["Content-Type"] = "application/json"
        return headers

    async def is_available(self) -> bool:
        """Check configuration and, at most every few minutes, the endpoint."""
        if not self.configured:
            logger.debug(
                "LLM provider not available",
                provider=self.provider_type.value,
                reason="missing configuration",
            )
            return False

        if (
            self._availability_cache is not None
            and (time.time() - self._cache_timestamp) < AVAILABILITY_CACHE_SECONDS
        ):
            return self._availability_cache

        try:
            response = await self.client.get(
                f"{self.base_url}/models", headers=self._headers()
            )
            result = response.status_code == 200
            logger.info(
                "LLM provider availability check",
                provider=self.provider_type.value,
                is_available=result,
                status_code=response.status_code,
            )
        except httpx.HTTPError as e:
            logger.warning(
                "LLM endpoint not reachable",
                provider=self.provider_type.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            result = False

        self._availability_cache = result
        self._cache_timestamp = time.time()
        return result

    def _parse_models(self, data: Any) -> list[Model]:
        """Read a model list in either ``{"data": [...]}`` or bare-list form."""
        if isinstance(data, dict):
            entries = data.get("data", [])
        elif isinstance(data, list):
            entries = data
        else:
            entries = []

        models = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            model_id = str(entry.get("id") or entry.get("name") or "")
            if not model_id or "embedding" in model_id.lower():
                continue
            models.append(
                Model(
                    id=model_id,
                    name=str(entry.get("friendly_name") or model_id),
                    provider=self.provider_type,
                    capabilities=["chat", "completion"],
                )
            )
        return models

    async def list_models(self) -> list[Model]:
        """List chat models from the endpoint."""
        if not self.configured:
            return []
        try:
            response = await self.client.get(
                f"{self.base_url}/models", headers=self._headers()
            )
            if response.status_code != 200:
                logger.warning(
                    "Failed to list models",
                    provider=self.provider_type.value,
                    status_code=response.status_code,
                )
                return []
            return self._parse_models(response.json())
        except (httpx.HTTPError, json.JSONDecodeError) as e:
            logger.error(
                "Failed to list models",
                provider=self.provider_type.value,
                error=str(e),
            )
            return []

    def _build_payload(self, request: CompletionRequest) -> dict[str, Any]:
        messages = list(request.messages)
        if request.system:
            messages = [{"role": "system", "content": request.system}, *messages]
        payload: dict[str, Any] = {
            "model": request.model,
            "messages": messages,
            "temperature": request.temperature,
            "top_p": request.top_p,
            "stream": request.stream,
        }
        if request.max_tokens:
            payload["max_tokens"] = request.max_tokens
        return payload

    def _raise_for_status(self, response: httpx.Response, model: str) -> None:
        if response.status_code == 200:
            return
        error_text = response.text[:500]
        logger.error(
            "LLM API error",
            provider=self.provider_type.value,
            status_code=response.status_code,
            error_text=error_text,
            model=model,
        )
        if response.status_code == 429:
            retry_after = response.headers.get("retry-after")
            try:
                wait = float(retry_after) if retry_after else None
            except ValueError:
                wait = None
            raise RateLimitError(
                message=f"Rate limited by {self.provider_type.value}",
                retry_after=wait,
                provider=self.provider_type.value,
            )
        raise LLMProviderError(
            message=(
                f"API error {response.status_code} "
                f"{response.reason_phrase}: {error_text}"
            ),
            details={
                "provider": self.provider_type.value,
                "status_code": response.status_code,
                "model": model,
            },
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Generate a chat completion."""
        if not self.configured:
            raise LLMProviderError(
                message=f"{self.provider_type.value} endpoint not configured",
                hint="Set STRIPBOARD_LLM_ENDPOINT and STRIPBOARD_LLM_API_KEY",
            )

        completions_url = f"{self.base_url}/chat/completions"
        async with self._request_semaphore:
            logger.info(
                "Sending completion request",
                provider=self.provider_type.value,
                model=request.model,
                message_count=len(request.messages),
                temperature=request.temperature,
                max_tokens=request.max_tokens,
            )
            try:
                response = await self.client.post(
                    completions_url,
                    headers=self._headers(content_type=True),
                    json=self._build_payload(request),
                )
                self._raise_for_status(response, request.model)
                data: dict[str, Any] = response.json()
            except httpx.HTTPError as e:
                logger.error(
                    "Completion request failed",
                    provider=self.provider_type.value,
                    error=str(e),
                    error_type=type(e).__name__,
                    model=request.model,
                )
                raise
            except json.JSONDecodeError as e:
                raise LLMProviderError(
                    message=f"Invalid API response: {e}",
                    details={"provider": self.provider_type.value},
                ) from e

        choices = data.get("choices") or []
        if not isinstance(choices, list):
            raise LLMProviderError(
                message="Invalid API response: choices is not a list",
                details={"provider": self.provider_type.value},
            )
        completion = CompletionResponse(
            id=str(data.get("id", "")),
            model=str(data.get("model", request.model)),
            choices=choices,
            usage=data.get("usage") or {},
            provider=self.provider_type,
        )
        logger.info(
            "Completion successful",
            provider=self.provider_type.value,
            model=completion.model,
            response_length=len(completion.content) if choices else 0,
            finish_reason=completion.finish_reason,
            usage=completion.usage,
        )
        return completion

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> OpenAICompatibleProvider:
        """Enter async context manager."""
        return self

    async def __aexit__(self, *_: Any) -> None:
        """Exit async context manager and cleanup."""
        await self.aclose()
