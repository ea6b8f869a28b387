"""Tests for the OpenAI-compatible and GitHub Models providers."""

import json

import httpx
import pytest

from stripboard.exceptions import LLMProviderError, RateLimitError
from stripboard.llm.models import CompletionRequest, LLMProvider
from stripboard.llm.providers import GitHubModelsProvider, OpenAICompatibleProvider

COMPLETION = {
    "id": "cmpl-1",
    "model": "local-model",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "[]"},
            "finish_reason": "stop",
        }
    ],
    "usage": {"prompt_tokens": 10, "completion_tokens": 2, "total_tokens": 12},
}

REQUEST = CompletionRequest(model="m", messages=[{"role": "user", "content": "x"}])


def _provider(handler, cls=OpenAICompatibleProvider, **kwargs):
    if cls is OpenAICompatibleProvider:
        kwargs.setdefault("endpoint", "http://llm.test/v1/")
        kwargs.setdefault("api_key", "secret")  # pragma: allowlist secret
    provider = cls(**kwargs)
    provider.client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return provider


class TestOpenAICompatibleProvider:
    def test_unconfigured_from_empty_env(self):
        provider = OpenAICompatibleProvider()

        assert not provider.configured

    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv("STRIPBOARD_LLM_ENDPOINT", "http://env.test/v1")
        monkeypatch.setenv("STRIPBOARD_LLM_API_KEY", "k")

        provider = OpenAICompatibleProvider()

        assert provider.base_url == "http://env.test/v1"
        assert provider.configured

    @pytest.mark.asyncio
    async def test_is_available_cached(self):
        calls = []

        def handler(request):
            calls.append(request.url.path)
            return httpx.Response(200, json={"data": []})

        provider = _provider(handler)

        assert await provider.is_available()
        assert await provider.is_available()
        assert calls == ["/v1/models"]
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_unreachable_endpoint_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        provider = _provider(handler)

        assert not await provider.is_available()
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_list_models_skips_embeddings(self):
        def handler(request):
            return httpx.Response(
                200,
                json={"data": [{"id": "chat-7b"}, {"id": "text-embedding-3"}]},
            )

        provider = _provider(handler)

        models = await provider.list_models()

        assert [m.id for m in models] == ["chat-7b"]
        assert models[0].provider is LLMProvider.OPENAI_COMPATIBLE
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_complete_sends_system_message(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=COMPLETION)

        provider = _provider(handler)

        response = await provider.complete(
            CompletionRequest(
                model="local-model",
                messages=[{"role": "user", "content": "schedule"}],
                system="You are an AD",
                max_tokens=100,
            )
        )

        assert response.content == "[]"
        assert response.finish_reason == "stop"
        assert seen["auth"] == "Bearer secret"
        assert seen["body"]["messages"][0] == {
            "role": "system",
            "content": "You are an AD",
        }
        assert seen["body"]["max_tokens"] == 100
        assert set(seen["body"]) == {
            "model",
            "messages",
            "temperature",
            "top_p",
            "stream",
            "max_tokens",
        }
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_rate_limit(self):
        def handler(request):
            return httpx.Response(429, headers={"retry-after": "3"}, text="slow down")

        provider = _provider(handler)

        with pytest.raises(RateLimitError) as exc_info:
            await provider.complete(REQUEST)
        assert exc_info.value.retry_after == 3.0
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_api_error(self):
        def handler(request):
            return httpx.Response(500, text="boom")

        provider = _provider(handler)

        with pytest.raises(LLMProviderError, match="API error 500"):
            await provider.complete(REQUEST)
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_complete_requires_configuration(self):
        provider = OpenAICompatibleProvider()

        with pytest.raises(LLMProviderError, match="not configured"):
            await provider.complete(REQUEST)
        await provider.aclose()


class TestGitHubModelsProvider:
    def test_token_from_env(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")

        provider = GitHubModelsProvider()

        assert provider.configured
        assert provider.base_url == "https://models.inference.ai.azure.com"

    @pytest.mark.asyncio
    async def test_static_models_when_listing_fails(self):
        def handler(request):
            return httpx.Response(404)

        provider = _provider(handler, GitHubModelsProvider, token="ghp_test")

        models = await provider.list_models()

        assert [m.id for m in models] == ["gpt-4o", "gpt-4o-mini"]
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_no_models_without_token(self):
        provider = GitHubModelsProvider()

        assert await provider.list_models() == []
        await provider.aclose()
