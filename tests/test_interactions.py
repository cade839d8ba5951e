import asyncio
from types import SimpleNamespace

import discord

from core.interactions import ERROR_TEXT, InteractionRouter, send_ephemeral_error


class FakeResponse:
    def __init__(self, done=False):
        self.done = done
        self.messages = []

    def is_done(self):
        return self.done

    async def send_message(self, content, ephemeral=False):
        self.messages.append((content, ephemeral))


class FakeFollowup:
    def __init__(self):
        self.messages = []

    async def send(self, content, ephemeral=False):
        self.messages.append((content, ephemeral))


def _interaction(custom_id, kind=discord.InteractionType.component, done=False):
    return SimpleNamespace(
        type=kind,
        data={"custom_id": custom_id},
        response=FakeResponse(done),
        followup=FakeFollowup(),
    )


def test_dispatch_routes_by_prefix():
    seen = []

    async def handler(interaction):
        seen.append(interaction.data["custom_id"])
        return True

    router = InteractionRouter()
    router.register("next_step", handler)

    assert asyncio.run(router.dispatch(_interaction("next_step"))) is True
    assert asyncio.run(router.dispatch(_interaction("ask_question"))) is False
    assert seen == ["next_step"]


def test_dispatch_ignores_non_component_interactions():
    async def handler(interaction):
        raise AssertionError("should not be called")

    router = InteractionRouter()
    router.register("question", handler)
    interaction = _interaction("question_modal", kind=discord.InteractionType.modal_submit)
    assert asyncio.run(router.dispatch(interaction)) is False


def test_handler_error_sends_ephemeral_notice():
    async def handler(interaction):
        raise RuntimeError("boom")

    router = InteractionRouter()
    router.register("next_step", handler)
    interaction = _interaction("next_step")

    assert asyncio.run(router.dispatch(interaction)) is True
    assert interaction.response.messages == [(ERROR_TEXT, True)]


def test_ephemeral_error_uses_followup_once_responded():
    interaction = _interaction("next_step", done=True)
    asyncio.run(send_ephemeral_error(interaction, "failed"))
    assert interaction.followup.messages == [("failed", True)]
    assert interaction.response.messages == []
