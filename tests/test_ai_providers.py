"""Tests for the AI provider fallback chain."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
import requests

from app.core.exceptions import ExternalServiceError
from app.core.rate_limiter import TTLCache
from app.services.ai_providers import AIProviderChain, GeminiProvider


def make_provider(name: str, answer=None, error=None, configured: bool = True) -> MagicMock:
    provider = MagicMock()
    provider.name = name
    provider.is_configured = configured
    if error is not None:
        provider.complete.side_effect = error
    else:
        provider.complete.return_value = answer
    return provider


def make_chain(*providers) -> AIProviderChain:
    limiter = MagicMock()
    limiter.acquire = AsyncMock(return_value=0.0)
    return AIProviderChain(providers, limiter, TTLCache(60))


class TestAIProviderChain:
    """Tests for AIProviderChain.generate."""

    def test_first_provider_answers(self) -> None:
        first = make_provider("gemini", answer="texto")
        second = make_provider("mistral", answer="outro")
        chain = make_chain(first, second)

        assert asyncio.run(chain.generate("prompt")) == ("texto", "gemini")
        second.complete.assert_not_called()

    def test_falls_back_on_failure(self) -> None:
        first = make_provider("gemini", error=requests.ConnectionError("down"))
        second = make_provider("mistral", answer="texto")
        chain = make_chain(first, second)

        assert asyncio.run(chain.generate("prompt")) == ("texto", "mistral")
        first.complete.assert_called_once()

    def test_malformed_answer_falls_back(self) -> None:
        first = make_provider("gemini", error=KeyError("candidates"))
        second = make_provider("openrouter", answer="texto")
        chain = make_chain(first, second)

        assert asyncio.run(chain.generate("prompt"))[1] == "openrouter"

    def test_unexpected_response_shape_falls_back(self) -> None:
        # e.g. "candidates": null in the provider's JSON
        first = make_provider("gemini", error=TypeError("'NoneType' object is not subscriptable"))
        second = make_provider("mistral", answer="texto")
        chain = make_chain(first, second)

        assert asyncio.run(chain.generate("prompt")) == ("texto", "mistral")

    def test_non_text_answer_falls_back(self) -> None:
        first = make_provider("gemini", answer=None)
        second = make_provider("mistral", answer="texto")
        chain = make_chain(first, second)

        assert asyncio.run(chain.generate("prompt")) == ("texto", "mistral")

    def test_unconfigured_providers_skipped(self) -> None:
        first = make_provider("gemini", configured=False)
        second = make_provider("mistral", answer="texto")
        chain = make_chain(first, second)

        assert chain.configured_providers == ["mistral"]
        assert asyncio.run(chain.generate("prompt"))[1] == "mistral"
        first.complete.assert_not_called()

    def test_no_provider_configured(self) -> None:
        chain = make_chain(make_provider("gemini", configured=False))
        with pytest.raises(ExternalServiceError) as exc_info:
            asyncio.run(chain.generate("prompt"))
        assert exc_info.value.message == "No AI provider is configured"

    def test_all_providers_fail(self) -> None:
        chain = make_chain(
            make_provider("gemini", error=requests.Timeout()),
            make_provider("mistral", error=ValueError("bad json")),
        )
        with pytest.raises(ExternalServiceError) as exc_info:
            asyncio.run(chain.generate("prompt"))
        assert exc_info.value.details["attempts"] == ["gemini", "mistral"]

    def test_repeated_prompt_served_from_cache(self) -> None:
        provider = make_provider("gemini", answer="texto")
        chain = make_chain(provider)

        asyncio.run(chain.generate("prompt", b"image"))
        assert asyncio.run(chain.generate("prompt", b"image")) == ("texto", "gemini")
        provider.complete.assert_called_once()

    def test_different_image_not_cached(self) -> None:
        provider = make_provider("gemini", answer="texto")
        chain = make_chain(provider)

        asyncio.run(chain.generate("prompt", b"one"))
        asyncio.run(chain.generate("prompt", b"two"))
        assert provider.complete.call_count == 2


class TestGeminiProvider:
    """Tests for the Gemini request payload."""

    def test_payload_includes_inline_image(self) -> None:
        provider = GeminiProvider("key", "gemini-test")
        provider._post = MagicMock(
            return_value={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]}
        )

        assert provider.complete("prompt", b"img", "image/jpeg") == "ok"

        url, payload = provider._post.call_args.args
        assert url.endswith("gemini-test:generateContent?key=key")
        parts = payload["contents"][0]["parts"]
        assert parts[0] == {"text": "prompt"}
        assert parts[1]["inline_data"]["mime_type"] == "image/jpeg"

    def test_not_configured_without_key(self) -> None:
        assert not GeminiProvider(None, "gemini-test").is_configured
