"""
Core interaction handling - routes interactions to appropriate handlers.

Buttons are dispatched by custom_id prefix. Modals carry their own
on_submit callbacks and never reach this router.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Coroutine, Dict

import discord

logger = logging.getLogger("smartbot.interactions")

# Type alias for interaction handlers
InteractionHandler = Callable[[discord.Interaction], Coroutine[Any, Any, bool]]

ERROR_TEXT = "An error occurred. Please try again later."


class InteractionRouter:
    """Registry of component handlers keyed by custom_id prefix."""

    def __init__(self) -> None:
        self._handlers: Dict[str, InteractionHandler] = {}

    def register(self, prefix: str, handler: InteractionHandler) -> None:
        self._handlers[prefix] = handler
        logger.debug("Registered component handler for prefix: %s", prefix)

    async def dispatch(self, interaction: discord.Interaction) -> bool:
        """
        Route an interaction to the appropriate handler.

        Returns True if the interaction was handled, False otherwise.
        """
        if interaction.type != discord.InteractionType.component:
            return False
        if not interaction.data:
            return False

        custom_id = interaction.data.get("custom_id", "")
        if not isinstance(custom_id, str):
            return False

        for prefix, handler in self._handlers.items():
            if not custom_id.startswith(prefix):
                continue
            try:
                return await handler(interaction)
            except Exception as e:
                logger.error("Error in component handler for %s: %s", prefix, e, exc_info=True)
                await send_ephemeral_error(interaction, ERROR_TEXT)
                return True
        return False


async def send_ephemeral_error(interaction: discord.Interaction, text: str) -> None:
    """Tell the user something failed, whichever response channel is still open."""
    try:
        if interaction.response.is_done():
            await interaction.followup.send(text, ephemeral=True)
        else:
            await interaction.response.send_message(text, ephemeral=True)
    except discord.HTTPException as e:
        logger.warning("Could not deliver error notice: %s", e)
