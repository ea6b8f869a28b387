"""Tests for the multi-provider LLM client, fallback and factory."""

import pytest

from stripboard.config import StripboardSettings
from stripboard.exceptions import ConfigurationError, LLMFallbackError, LLMProviderError
from stripboard.llm import (
    CompletionRequest,
    CompletionResponse,
    LLMClient,
    LLMProvider,
    LLMTextGenerator,
    Model,
    ProviderRegistry,
    TextGenerator,
    create_llm_client,
    create_text_generator,
)
from stripboard.llm.base import BaseLLMProvider
from stripboard.llm.providers import GitHubModelsProvider


class StubProvider(BaseLLMProvider):
    """Provider answering from memory."""

    def __init__(
        self,
        provider_type: LLMProvider,
        available: bool = True,
        content: str = "[]",
        error: Exception | None = None,
        finish_reason: str = "stop",
    ) -> None:
        self.provider_type = provider_type
        self.available = available
        self.content = content
        self.error = error
        self.finish_reason = finish_reason
        self.requests: list[CompletionRequest] = []
        self.closed = False

    async def list_models(self) -> list[Model]:
        return [
            Model(id="embed", name="embed", provider=self.provider_type),
            Model(
                id="chat-model",
                name="chat",
                provider=self.provider_type,
                capabilities=["chat"],
            ),
        ]

    async def is_available(self) -> bool:
        return self.available

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return CompletionResponse(
            id="1",
            model=request.model,
            choices=[
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": self.content},
                    "finish_reason": self.finish_reason,
                }
            ],
            provider=self.provider_type,
        )

    async def aclose(self) -> None:
        self.closed = True


def _client(*providers: StubProvider, **kwargs) -> LLMClient:
    registry = ProviderRegistry()
    for provider in providers:
        registry.set_provider(provider.provider_type, provider)
    return LLMClient(registry=registry, max_retries=1, **kwargs)


class TestLLMClient:
    @pytest.mark.asyncio
    async def test_falls_back_to_next_provider(self):
        github = StubProvider(LLMProvider.GITHUB_MODELS, error=ValueError("bad"))
        local = StubProvider(LLMProvider.OPENAI_COMPATIBLE, content="hello")
        client = _client(github, local)

        response = await client.complete([{"role": "user", "content": "hi"}])

        assert response.content == "hello"
        assert response.provider is LLMProvider.OPENAI_COMPATIBLE
        assert client.last_fallback_chain == ["github_models", "openai_compatible"]

    @pytest.mark.asyncio
    async def test_preferred_provider_first(self):
        github = StubProvider(LLMProvider.GITHUB_MODELS, content="gh")
        local = StubProvider(LLMProvider.OPENAI_COMPATIBLE, content="local")
        client = _client(
            github, local, preferred_provider=LLMProvider.OPENAI_COMPATIBLE
        )

        response = await client.complete([{"role": "user", "content": "hi"}])

        assert response.content == "local"
        assert github.requests == []

    @pytest.mark.asyncio
    async def test_all_fail(self):
        client = _client(
            StubProvider(LLMProvider.GITHUB_MODELS, available=False),
            StubProvider(LLMProvider.OPENAI_COMPATIBLE, error=KeyError("choices")),
        )

        with pytest.raises(LLMFallbackError) as exc_info:
            await client.complete([{"role": "user", "content": "hi"}])

        assert exc_info.value.attempted_providers == [
            "github_models",
            "openai_compatible",
        ]
        assert set(exc_info.value.provider_errors) == {
            "github_models",
            "openai_compatible",
        }

    @pytest.mark.asyncio
    async def test_model_selected_when_missing(self):
        local = StubProvider(LLMProvider.OPENAI_COMPATIBLE)
        client = _client(local)

        await client.complete([{"role": "user", "content": "hi"}])

        assert local.requests[0].model == "chat-model"

    @pytest.mark.asyncio
    async def test_default_model_used(self):
        local = StubProvider(LLMProvider.OPENAI_COMPATIBLE)
        client = _client(local, default_model="qwen2.5")

        await client.complete([{"role": "user", "content": "hi"}])

        assert local.requests[0].model == "qwen2.5"

    @pytest.mark.asyncio
    async def test_specific_provider_unavailable(self):
        client = _client(StubProvider(LLMProvider.GITHUB_MODELS, available=False))

        with pytest.raises(LLMProviderError, match="not available"):
            await client.complete(
                [{"role": "user", "content": "hi"}],
                provider=LLMProvider.GITHUB_MODELS,
            )

    @pytest.mark.asyncio
    async def test_available_providers_and_cleanup(self):
        github = StubProvider(LLMProvider.GITHUB_MODELS, available=False)
        local = StubProvider(LLMProvider.OPENAI_COMPATIBLE)

        async with _client(github, local) as client:
            assert await client.available_providers() == [
                LLMProvider.OPENAI_COMPATIBLE
            ]

        assert github.closed
        assert local.closed


class TestLLMTextGenerator:
    @pytest.mark.asyncio
    async def test_generate_sends_system_and_prompt(self):
        local = StubProvider(LLMProvider.OPENAI_COMPATIBLE, content="[{}]")
        generator = LLMTextGenerator(_client(local), model="m")

        text = await generator.generate("sys", "user", temperature=0.2, max_tokens=50)

        assert text == "[{}]"
        request = local.requests[0]
        assert request.system == "sys"
        assert request.messages == [{"role": "user", "content": "user"}]
        assert request.temperature == 0.2
        assert request.max_tokens == 50
        assert isinstance(generator, TextGenerator)

    @pytest.mark.asyncio
    async def test_truncated_output_still_returned(self):
        local = StubProvider(
            LLMProvider.OPENAI_COMPATIBLE, content="[{", finish_reason="length"
        )
        generator = LLMTextGenerator(_client(local), model="m")

        assert await generator.generate("s", "u", temperature=0, max_tokens=1) == "[{"


class TestFactory:
    def test_client_from_settings(self):
        settings = StripboardSettings(
            _env_file=None,
            llm_provider="openai_compatible",
            llm_endpoint="http://llm.test/v1",
            llm_api_key="k",  # pragma: allowlist secret
            llm_model="local",
        )

        client = create_llm_client(settings)

        assert client.preferred_provider is LLMProvider.OPENAI_COMPATIBLE
        assert client.default_model == "local"
        provider = client.registry.get_provider(LLMProvider.OPENAI_COMPATIBLE)
        assert provider.base_url == "http://llm.test/v1"

    def test_unknown_provider(self):
        settings = StripboardSettings(_env_file=None, llm_provider="claude_code")

        with pytest.raises(ConfigurationError, match="Unknown LLM provider"):
            create_llm_client(settings)

    @pytest.mark.asyncio
    async def test_registry_creates_known_providers(self):
        registry = ProviderRegistry()

        provider = registry.create_provider(LLMProvider.GITHUB_MODELS, token="t")

        assert isinstance(provider, GitHubModelsProvider)
        with pytest.raises(ValueError, match="Unknown provider type"):
            registry.create_provider("claude_code")
        await provider.aclose()

    def test_text_generator(self):
        settings = StripboardSettings(_env_file=None, llm_model="gpt-4o")

        generator = create_text_generator(settings)

        assert generator.model == "gpt-4o"
        assert generator.client.preferred_provider is None
