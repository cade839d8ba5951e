"""
Trigger matching logic for the smart responder.

Handles phrase scoring across configured triggers and the inbound
channel/mention gate.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import discord

from core.constants import K
from core.types import ScoredCandidate, TriggerDefinition
from core.utils import safe_int

from .similarity import SimilarityScorer

logger = logging.getLogger("smartbot.responder")


def normalize_id_list(value: Any) -> list[int]:
    """Convert various input formats to a list of integer IDs."""
    if isinstance(value, (list, tuple, set, frozenset)):
        items = []
        for item in value:
            parsed = safe_int(item)
            if parsed is not None:
                items.append(parsed)
        return items
    return []


def trigger_in_scope(
    trigger: TriggerDefinition,
    channel_id: Optional[int],
    category_id: Optional[int],
) -> bool:
    """Check a trigger's optional channel/category scoping."""
    if not trigger.allowed_channel_ids and not trigger.allowed_category_ids:
        return True
    if channel_id is not None and channel_id in trigger.allowed_channel_ids:
        return True
    if category_id is not None and category_id in trigger.allowed_category_ids:
        return True
    return False


class PhraseMatcher:
    """Picks the best qualifying trigger for a message."""

    def __init__(self, scorer: Optional[SimilarityScorer] = None) -> None:
        self.scorer = scorer or SimilarityScorer()

    def score_trigger(self, message: str, trigger: TriggerDefinition) -> float:
        """Best fused score over a trigger's phrases, with the direct-match floor."""
        best = 0.0
        for phrase in trigger.phrases:
            score = self.scorer.score(message, phrase)
            if self.scorer.is_direct_match(message, phrase):
                score = max(score, trigger.threshold)
            if score > best:
                best = score
        return best

    def find_best_match(
        self,
        message: str,
        triggers: Iterable[TriggerDefinition],
        channel_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> Optional[TriggerDefinition]:
        """
        Return the qualifying trigger with the strictly highest score.

        A trigger qualifies when its best phrase score reaches its own
        threshold. Ties keep the first trigger in configuration order.
        Returns None when nothing qualifies.
        """
        if not message:
            return None

        best: Optional[ScoredCandidate] = None
        for trigger in triggers:
            if not trigger_in_scope(trigger, channel_id, category_id):
                continue
            score = self.score_trigger(message, trigger)
            if score < trigger.threshold:
                continue
            if best is None or score > best.score:
                best = ScoredCandidate(trigger=trigger, score=score)

        if best is None:
            return None
        logger.debug("Matched trigger %s with score %.3f", best.trigger.trigger_id, best.score)
        return best.trigger


def is_allowed_channel(message: discord.Message, settings: dict[str, Any]) -> bool:
    """
    Check the channel and category allow-lists.

    Empty allow-lists let every channel through.
    """
    channels = normalize_id_list(settings.get(K.WHITELISTED_CHANNEL_IDS))
    categories = normalize_id_list(settings.get(K.WHITELISTED_CATEGORY_IDS))
    if not channels and not categories:
        return True
    if message.channel.id in channels:
        return True
    category_id = getattr(message.channel, "category_id", None)
    if category_id is not None and category_id in categories:
        return True
    return False


def is_mention_valid(message: discord.Message, bot_id: Optional[int], settings: dict[str, Any]) -> bool:
    """Check the require-mention setting."""
    if not settings.get(K.REQUIRE_MENTION):
        return True
    if bot_id is None:
        return False
    return any(mention.id == bot_id for mention in message.mentions)


def passes_gate(message: discord.Message, bot_id: Optional[int], settings: dict[str, Any]) -> bool:
    """Check whether an inbound message should be answered at all."""
    if message.author.bot:
        return False
    if not (message.content or "").strip():
        return False
    return is_allowed_channel(message, settings) and is_mention_valid(message, bot_id, settings)
