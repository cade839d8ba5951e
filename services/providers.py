"""
Language-model providers.

Every supported vendor exposes an OpenAI-compatible chat-completions
endpoint, so one aiohttp client covers all of them.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from core.config import SUPPORTED_PROVIDERS, ConfigError

logger = logging.getLogger("smartbot.providers")

DEFAULT_BASE_URLS: dict[str, str] = {
    "openai": "https://api.openai.com/v1",
    "groq": "https://api.groq.com/openai/v1",
    "mistral": "https://api.mistral.ai/v1",
    "togetherai": "https://api.together.xyz/v1",
}

DEFAULT_TIMEOUT_SECONDS = 60.0
CONTEXT_HEADER = "Here is some relevant internal documentation to help with this query:\n\n"
CONTEXT_SEPARATOR = "\n---\n"


class ProviderError(RuntimeError):
    """A generation call failed."""


def build_messages(
    system_prompt: str,
    context_documents: list[str],
    user_text: str,
) -> list[dict[str, str]]:
    messages = [{"role": "system", "content": system_prompt}]
    if context_documents:
        messages.append({
            "role": "system",
            "content": CONTEXT_HEADER + CONTEXT_SEPARATOR.join(context_documents),
        })
    messages.append({"role": "user", "content": user_text})
    return messages


class ChatProvider:
    """Base class for text generation backends."""

    name = "base"

    async def generate(
        self,
        system_prompt: str,
        context_documents: list[str],
        user_text: str,
    ) -> str:
        raise NotImplementedError

    async def close(self) -> None:
        return None


class OpenAICompatibleProvider(ChatProvider):
    """
    Chat-completions client for OpenAI and compatible vendors.

    The aiohttp session is created on first use and closed by close().
    """

    def __init__(
        self,
        name: str,
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.name = name
        self.api_key = api_key
        self.model = model
        self.base_url = (base_url or DEFAULT_BASE_URLS[name]).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds, connect=10)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def generate(
        self,
        system_prompt: str,
        context_documents: list[str],
        user_text: str,
    ) -> str:
        payload = {
            "model": self.model,
            "messages": build_messages(system_prompt, context_documents, user_text),
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with self._get_session().post(self.endpoint, json=payload, headers=headers) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    raise ProviderError(f"{self.name} returned HTTP {resp.status}: {body[:300]}")
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProviderError(f"{self.name} request failed: {e!r}") from e
        except ValueError as e:
            raise ProviderError(f"{self.name} returned invalid JSON: {e}") from e

        return _extract_text(self.name, data)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


def _extract_text(name: str, data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise ProviderError(f"{name} response is missing message content") from e
    if not isinstance(content, str) or not content.strip():
        raise ProviderError(f"{name} returned an empty completion")
    return content


def create_provider(name: str, settings: dict[str, Any]) -> ChatProvider:
    """Build the configured provider. Raises ConfigError when unusable."""
    key = (name or "").strip().lower()
    if key not in SUPPORTED_PROVIDERS:
        raise ConfigError(f"Unsupported AI provider: {name}")
    api_key = settings.get("api_key")
    if not isinstance(api_key, str) or not api_key.strip():
        raise ConfigError(f"No API key configured for provider {key}")
    model = settings.get("model")
    if not isinstance(model, str) or not model.strip():
        raise ConfigError(f"No model configured for provider {key}")
    base_url = settings.get("base_url")
    if base_url is not None and not isinstance(base_url, str):
        raise ConfigError(f"providers.{key}.base_url must be a string")
    timeout = settings.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(f"providers.{key}.timeout_seconds must be a positive number")

    return OpenAICompatibleProvider(
        name=key,
        api_key=api_key.strip(),
        model=model.strip(),
        base_url=base_url,
        timeout_seconds=float(timeout),
    )
