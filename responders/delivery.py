"""
Response delivery for the smart responder.

Renders SmartReplies as Discord messages: chunked text, embeds for rich
cards, the step button row and the follow-up question modal.
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

import discord
from discord.ui import Button, Modal, TextInput, View

from core.constants import ComponentId
from core.interactions import send_ephemeral_error
from core.types import SmartReply
from services.session_store import DEFAULT_IDLE_TIMEOUT

from .chunking import DISCORD_MESSAGE_LIMIT, split_for_transport

logger = logging.getLogger("smartbot.responder")

SendFunc = Callable[..., Awaitable[Any]]
QuestionCallback = Callable[[discord.Interaction, str], Awaitable[None]]

NEXT_STEP_LABEL = "Show Next Step"
ASK_QUESTION_LABEL = "Ask Another Question"
QUESTION_MIN_LENGTH = 10
QUESTION_MAX_LENGTH = 1000


class ReplyView(View):
    """
    Buttons under a reply: next step (when more remain) and ask another question.

    Clicks are routed by custom_id through the client, so the view only has to
    live as long as a walkthrough can stay idle. After that discord.py drops
    it from its view store.
    """

    def __init__(self, has_more: bool, timeout: float = DEFAULT_IDLE_TIMEOUT) -> None:
        super().__init__(timeout=timeout)
        if has_more:
            self.add_item(Button(
                label=NEXT_STEP_LABEL,
                style=discord.ButtonStyle.primary,
                emoji="➡️",
                custom_id=ComponentId.NEXT_STEP,
            ))
        self.add_item(Button(
            label=ASK_QUESTION_LABEL,
            style=discord.ButtonStyle.secondary,
            emoji="❓",
            custom_id=ComponentId.ASK_QUESTION,
        ))


class QuestionModal(Modal, title="Ask a Question"):
    question = TextInput(
        label="What would you like to know?",
        style=discord.TextStyle.paragraph,
        placeholder="Type your question here...",
        min_length=QUESTION_MIN_LENGTH,
        max_length=QUESTION_MAX_LENGTH,
        required=True,
        custom_id=ComponentId.QUESTION_INPUT,
    )

    def __init__(self, on_question: QuestionCallback) -> None:
        super().__init__(custom_id=ComponentId.QUESTION_MODAL)
        self._on_question = on_question

    async def on_submit(self, interaction: discord.Interaction) -> None:
        await self._on_question(interaction, self.question.value)

    async def on_error(self, interaction: discord.Interaction, error: Exception) -> None:
        logger.error("Error handling question modal: %s", error, exc_info=error)
        await send_ephemeral_error(interaction, "Sorry, I encountered an error processing your question.")


def build_embed(data: Any) -> discord.Embed:
    if not isinstance(data, dict):
        raise ValueError("Rich card payload must be a dict")
    return discord.Embed.from_dict(data)


async def send_reply(
    send: SendFunc,
    reply: SmartReply,
    max_length: int = DISCORD_MESSAGE_LIMIT,
    view_timeout: float = DEFAULT_IDLE_TIMEOUT,
) -> int:
    """
    Send a reply through `send` (message.reply or a followup webhook).

    Text is split into chunks; only the last chunk carries the buttons.
    Returns the number of messages sent.
    """
    allowed_mentions = discord.AllowedMentions.none()

    if reply.is_card:
        await send(
            embed=build_embed(reply.embed),
            view=ReplyView(False, timeout=view_timeout),
            allowed_mentions=allowed_mentions,
        )
        return 1

    chunks = [chunk for chunk in split_for_transport(reply.content or "", max_length) if chunk.strip()]
    for index, chunk in enumerate(chunks):
        kwargs: dict[str, Any] = {"content": chunk, "allowed_mentions": allowed_mentions}
        if index == len(chunks) - 1:
            kwargs["view"] = ReplyView(reply.has_more, timeout=view_timeout)
        await send(**kwargs)
    return len(chunks)
