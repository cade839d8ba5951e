"""
Discord bot client - lean event handling.

Business logic is delegated to the SmartResponder; this class only
translates Discord events into responder calls and renders the results.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import discord

from core.constants import ComponentId, K
from core.interactions import InteractionRouter, send_ephemeral_error
from responders.delivery import QuestionModal, send_reply
from responders.engine import SmartResponder
from responders.matching import passes_gate
from services.session_store import DEFAULT_IDLE_TIMEOUT, DEFAULT_SWEEP_INTERVAL

logger = logging.getLogger("smartbot")

PENDING_REACTION = "⏳"
DONE_REACTION = "✅"
FAILED_REACTION = "❌"

QUESTION_ERROR_TEXT = "I apologize, but I couldn't process your question. Please try rephrasing it."
NEXT_STEP_ERROR_TEXT = "Sorry, I encountered an error processing the next step."


class SmartBot(discord.Client):
    """
    Main Discord bot client.

    Handles:
    - Discord events (on_ready, on_message, on_interaction)
    - The periodic session sweep
    - Responder lifecycle
    """

    def __init__(self, config: dict[str, Any], responder: SmartResponder) -> None:
        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True
        super().__init__(intents=intents)

        self.config = config
        self.responder = responder
        self.router = InteractionRouter()
        self.max_message_length = int(config.get(K.MAX_MESSAGE_LENGTH, 2000))
        self.sweep_interval = float(config.get(K.SWEEP_INTERVAL_SECONDS, DEFAULT_SWEEP_INTERVAL))
        self.view_timeout = float(config.get(K.SESSION_IDLE_SECONDS, DEFAULT_IDLE_TIMEOUT))
        self.ready_once = False
        self._sweep_task: Optional[asyncio.Task] = None

    # ─── Lifecycle ────────────────────────────────────────────────────────────

    async def setup_hook(self) -> None:
        """Called when the bot is starting up."""
        self.router.register(ComponentId.NEXT_STEP, self._handle_next_step)
        self.router.register(ComponentId.ASK_QUESTION, self._handle_ask_question)

        await self.responder.initialize()
        self._sweep_task = asyncio.create_task(self._sweep_loop())

    async def on_ready(self) -> None:
        """Called when the bot is ready."""
        if not self.ready_once:
            logger.info("Bot ready as %s", self.user)
            self.ready_once = True

    async def close(self) -> None:
        """Cleanup when shutting down."""
        if self._sweep_task:
            self._sweep_task.cancel()
            await asyncio.gather(self._sweep_task, return_exceptions=True)
        await self.responder.close()
        await super().close()

    async def _sweep_loop(self) -> None:
        """Periodically drop expired walkthrough sessions."""
        while True:
            await asyncio.sleep(self.sweep_interval)
            try:
                removed = await self.responder.sweep_sessions()
                if removed:
                    logger.info("Removed %d expired conversations", removed)
            except Exception as e:
                logger.error("Error sweeping conversations: %s", e, exc_info=True)

    @property
    def bot_id(self) -> Optional[int]:
        return self.user.id if self.user else None

    # ─── Message Events ───────────────────────────────────────────────────────

    async def on_message(self, message: discord.Message) -> None:
        """Handle incoming messages."""
        if not passes_gate(message, self.bot_id, self.config):
            return

        await self._react(message, PENDING_REACTION)
        try:
            reply = await self.responder.process_message(
                message.content,
                channel_id=message.channel.id,
                user_id=message.author.id,
                category_id=getattr(message.channel, "category_id", None),
                bot_id=self.bot_id,
            )
            await self._unreact(message, PENDING_REACTION)
            if reply is None:
                return
            await send_reply(
                lambda **kwargs: message.reply(mention_author=False, **kwargs),
                reply,
                self.max_message_length,
                view_timeout=self.view_timeout,
            )
            await self._react(message, DONE_REACTION)
        except Exception as e:
            logger.error("Error handling message %s: %s", message.id, e, exc_info=True)
            await self._unreact(message, PENDING_REACTION)
            await self._react(message, FAILED_REACTION)

    async def _react(self, message: discord.Message, emoji: str) -> None:
        try:
            await message.add_reaction(emoji)
        except discord.HTTPException as e:
            logger.debug("Failed to add reaction %s: %s", emoji, e)

    async def _unreact(self, message: discord.Message, emoji: str) -> None:
        if self.user is None:
            return
        try:
            await message.remove_reaction(emoji, self.user)
        except discord.HTTPException as e:
            logger.debug("Failed to remove reaction %s: %s", emoji, e)

    # ─── Interaction Events ───────────────────────────────────────────────────

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        """Handle interactions (button clicks)."""
        await self.router.dispatch(interaction)

    async def _handle_next_step(self, interaction: discord.Interaction) -> bool:
        await interaction.response.defer()
        if interaction.channel_id is None:
            return True
        try:
            reply = await self.responder.advance(interaction.channel_id, interaction.user.id)
            await send_reply(
                interaction.followup.send, reply, self.max_message_length, view_timeout=self.view_timeout
            )
        except Exception as e:
            logger.error("Error handling next step: %s", e, exc_info=True)
            await send_ephemeral_error(interaction, NEXT_STEP_ERROR_TEXT)
        return True

    async def _handle_ask_question(self, interaction: discord.Interaction) -> bool:
        await interaction.response.send_modal(QuestionModal(self._answer_question))
        return True

    async def _answer_question(self, interaction: discord.Interaction, question: str) -> None:
        await interaction.response.defer(thinking=True)
        channel = interaction.channel
        reply = await self.responder.process_message(
            question,
            channel_id=interaction.channel_id or 0,
            user_id=interaction.user.id,
            category_id=getattr(channel, "category_id", None),
            bot_id=self.bot_id,
        )
        if reply is None:
            await interaction.followup.send(QUESTION_ERROR_TEXT)
            return
        await send_reply(
            interaction.followup.send, reply, self.max_message_length, view_timeout=self.view_timeout
        )
