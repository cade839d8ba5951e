import asyncio

import pytest
from aiohttp import web
from aiohttp import test_utils

from core.config import ConfigError
from services.providers import (
    CONTEXT_HEADER,
    OpenAICompatibleProvider,
    ProviderError,
    build_messages,
    create_provider,
)


def _completion(text):
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


async def _with_server(handler, call):
    app = web.Application()
    app.router.add_post("/v1/chat/completions", handler)
    async with test_utils.TestServer(app) as server:
        provider = OpenAICompatibleProvider(
            "openai", "secret", "test-model", base_url=str(server.make_url("/v1"))
        )
        try:
            return await call(provider)
        finally:
            await provider.close()


def test_build_messages_without_context():
    messages = build_messages("system", [], "question")
    assert messages == [
        {"role": "system", "content": "system"},
        {"role": "user", "content": "question"},
    ]


def test_build_messages_with_context():
    messages = build_messages("system", ["doc one", "doc two"], "question")
    assert len(messages) == 3
    assert messages[1]["role"] == "system"
    assert messages[1]["content"] == CONTEXT_HEADER + "doc one\n---\ndoc two"
    assert messages[2] == {"role": "user", "content": "question"}


def test_generate_posts_chat_completion():
    seen = {}

    async def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = await request.json()
        return web.json_response(_completion("[STEP_1] Do it"))

    text = asyncio.run(_with_server(handler, lambda p: p.generate("sys", ["ctx"], "hello")))

    assert text == "[STEP_1] Do it"
    assert seen["auth"] == "Bearer secret"
    assert seen["body"]["model"] == "test-model"
    assert [m["role"] for m in seen["body"]["messages"]] == ["system", "system", "user"]
    assert seen["body"]["messages"][-1]["content"] == "hello"


def test_http_error_raises_provider_error():
    async def handler(request):
        return web.Response(status=500, text="upstream broke")

    with pytest.raises(ProviderError, match="HTTP 500"):
        asyncio.run(_with_server(handler, lambda p: p.generate("sys", [], "hello")))


def test_missing_choices_raises_provider_error():
    async def handler(request):
        return web.json_response({"id": "x"})

    with pytest.raises(ProviderError):
        asyncio.run(_with_server(handler, lambda p: p.generate("sys", [], "hello")))


def test_invalid_json_raises_provider_error():
    async def handler(request):
        return web.Response(status=200, text="not json")

    with pytest.raises(ProviderError):
        asyncio.run(_with_server(handler, lambda p: p.generate("sys", [], "hello")))


def test_connection_failure_raises_provider_error():
    async def run():
        provider = OpenAICompatibleProvider("openai", "k", "m", base_url="http://127.0.0.1:1/v1")
        try:
            await provider.generate("sys", [], "hello")
        finally:
            await provider.close()

    with pytest.raises(ProviderError):
        asyncio.run(run())


def test_create_provider_uses_vendor_base_url():
    provider = create_provider("Groq", {"api_key": "k", "model": "llama"})
    assert provider.name == "groq"
    assert provider.endpoint == "https://api.groq.com/openai/v1/chat/completions"

    custom = create_provider("openai", {"api_key": "k", "model": "m", "base_url": "http://proxy/v1/"})
    assert custom.endpoint == "http://proxy/v1/chat/completions"


@pytest.mark.parametrize(
    "name, settings",
    [
        ("anthropic", {"api_key": "k", "model": "m"}),
        ("openai", {"model": "m"}),
        ("openai", {"api_key": "  ", "model": "m"}),
        ("openai", {"api_key": "k"}),
        ("openai", {"api_key": "k", "model": "m", "base_url": 5}),
        ("openai", {"api_key": "k", "model": "m", "timeout_seconds": 0}),
        ("openai", {"api_key": "k", "model": "m", "timeout_seconds": True}),
    ],
)
def test_create_provider_rejects_unusable_settings(name, settings):
    with pytest.raises(ConfigError):
        create_provider(name, settings)
