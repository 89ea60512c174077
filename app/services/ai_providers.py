"""
Clients for the AI providers used to read reservation documents.

Every provider takes a text prompt, optionally with one image, and returns
the model's text answer. ``AIProviderChain`` tries the configured providers
in order and returns the first answer it gets.
"""

import base64
import hashlib
import logging
from typing import List, Optional, Sequence, Tuple

import requests
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.core.rate_limiter import AsyncRateLimiter, TTLCache

logger = logging.getLogger(__name__)


class AIProvider:
    """Base class for a remote model reached over HTTP with ``requests``."""

    name = "base"

    def __init__(self, api_key: Optional[str], model: str, timeout: float = 60):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def complete(
        self,
        prompt: str,
        image: Optional[bytes] = None,
        mime_type: str = "image/png",
    ) -> str:
        raise NotImplementedError

    def _post(self, url: str, payload: dict, headers: Optional[dict] = None) -> dict:
        response = requests.post(url, json=payload, headers=headers, timeout=self.timeout)
        response.raise_for_status()
        return response.json()


class GeminiProvider(AIProvider):
    name = "gemini"
    base_url = "https://generativelanguage.googleapis.com/v1beta/models"

    def complete(self, prompt, image=None, mime_type="image/png"):
        parts: List[dict] = [{"text": prompt}]
        if image is not None:
            parts.append(
                {
                    "inline_data": {
                        "mime_type": mime_type,
                        "data": base64.b64encode(image).decode("ascii"),
                    }
                }
            )
        payload = {
            "contents": [{"parts": parts}],
            "generationConfig": {"temperature": 0.1},
        }
        data = self._post(
            f"{self.base_url}/{self.model}:generateContent?key={self.api_key}", payload
        )
        return data["candidates"][0]["content"]["parts"][0]["text"]


class ChatCompletionsProvider(AIProvider):
    """Providers exposing an OpenAI-style ``/chat/completions`` endpoint."""

    endpoint = ""

    def _image_part(self, data_url: str) -> dict:
        return {"type": "image_url", "image_url": {"url": data_url}}

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def complete(self, prompt, image=None, mime_type="image/png"):
        if image is None:
            content = prompt
        else:
            data_url = (
                f"data:{mime_type};base64,{base64.b64encode(image).decode('ascii')}"
            )
            content = [{"type": "text", "text": prompt}, self._image_part(data_url)]

        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": content}],
            "temperature": 0.1,
        }
        data = self._post(self.endpoint, payload, self._headers())
        return data["choices"][0]["message"]["content"]


class MistralProvider(ChatCompletionsProvider):
    name = "mistral"
    endpoint = "https://api.mistral.ai/v1/chat/completions"

    def _image_part(self, data_url: str) -> dict:
        return {"type": "image_url", "image_url": data_url}


class OpenRouterProvider(ChatCompletionsProvider):
    name = "openrouter"
    endpoint = "https://openrouter.ai/api/v1/chat/completions"

    def _headers(self) -> dict:
        headers = super()._headers()
        headers["X-Title"] = "Maria Faz"
        return headers


class AIProviderChain:
    """Tries each configured provider in turn until one answers."""

    def __init__(
        self,
        providers: Sequence[AIProvider],
        rate_limiter: AsyncRateLimiter,
        cache: TTLCache,
    ):
        self.providers = list(providers)
        self.rate_limiter = rate_limiter
        self.cache = cache

    @property
    def configured_providers(self) -> List[str]:
        return [p.name for p in self.providers if p.is_configured]

    async def generate(
        self,
        prompt: str,
        image: Optional[bytes] = None,
        mime_type: str = "image/png",
    ) -> Tuple[str, str]:
        """
        Answer a prompt with the first provider that succeeds.

        Returns:
            Tuple of (text, provider name)

        Raises:
            ExternalServiceError: If no provider is configured or all of them fail
        """
        image_digest = hashlib.sha256(image).hexdigest() if image else ""
        cache_key = TTLCache.make_key(prompt, image_digest)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"AI response served from cache ({cached[1]})")
            return cached

        attempts: List[str] = []
        for provider in self.providers:
            if not provider.is_configured:
                continue
            attempts.append(provider.name)
            await self.rate_limiter.acquire()
            try:
                text = await run_in_threadpool(
                    provider.complete, prompt, image, mime_type
                )
                if not isinstance(text, str):
                    raise TypeError(f"expected text, got {type(text).__name__}")
            except (
                requests.RequestException,
                KeyError,
                IndexError,
                TypeError,
                ValueError,
            ) as e:
                logger.warning(f"AI provider {provider.name} failed: {e}")
                continue

            logger.info(f"AI provider {provider.name} answered ({len(text)} chars)")
            self.cache.set(cache_key, (text, provider.name))
            return text, provider.name

        if not attempts:
            raise ExternalServiceError("ai", "No AI provider is configured")
        raise ExternalServiceError("ai", "All AI providers failed", attempts)


PROVIDER_CLASSES = {
    "gemini": (GeminiProvider, "GEMINI_API_KEY", "GEMINI_MODEL"),
    "mistral": (MistralProvider, "MISTRAL_API_KEY", "MISTRAL_MODEL"),
    "openrouter": (OpenRouterProvider, "OPENROUTER_API_KEY", "OPENROUTER_MODEL"),
}


def build_provider_chain() -> AIProviderChain:
    providers = []
    for name in settings.OCR_PROVIDERS:
        if name not in PROVIDER_CLASSES:
            logger.warning(f"Unknown AI provider {name!r} in OCR_PROVIDERS, skipping")
            continue
        provider_class, key_setting, model_setting = PROVIDER_CLASSES[name]
        providers.append(
            provider_class(
                getattr(settings, key_setting),
                getattr(settings, model_setting),
                settings.AI_REQUEST_TIMEOUT,
            )
        )
    return AIProviderChain(
        providers,
        AsyncRateLimiter(settings.AI_MIN_REQUEST_INTERVAL),
        TTLCache(settings.AI_CACHE_TTL_SECONDS),
    )


_provider_chain: Optional[AIProviderChain] = None


def get_provider_chain() -> AIProviderChain:
    """Process-wide chain, so the rate limit and cache span requests."""
    global _provider_chain
    if _provider_chain is None:
        _provider_chain = build_provider_chain()
    return _provider_chain
