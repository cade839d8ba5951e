"""
Smart responder engine - main entry point and orchestration.

This module ties together matching, generation, step parsing and the
session store. It never touches Discord objects; the bot client feeds it
plain ids and text and renders the SmartReply it gets back.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from core.config import provider_settings
from core.constants import CorpusMode, K
from core.io_utils import ensure_dirs, read_text
from core.paths import BASE_DIR, RESOURCE_SUBDIRS, RESOURCES_DIR, resolve_repo_path
from core.types import ResponseKind, SmartReply, StepStatus, TriggerDefinition
from services.documents import DocumentStore
from services.providers import ChatProvider, ProviderError, create_provider
from services.session_store import DEFAULT_IDLE_TIMEOUT, ConversationStore, session_key

from .config_loader import load_trigger_definitions
from .matching import PhraseMatcher
from .similarity import SimilarityScorer
from .steps import parse_steps
from .text import clean_message_content

logger = logging.getLogger("smartbot.responder")

GENERATION_ERROR_TEXT = "I apologize, but I encountered an error processing your request."
SESSION_NOT_FOUND_TEXT = "I couldn't find that conversation anymore. Please ask your question again."
SESSION_EXPIRED_TEXT = "This conversation timed out. Please ask your question again."

STEP_GUIDANCE = (
    "When providing multi-step guidance:\n"
    "1. Break your response into clear, numbered steps\n"
    "[STEP_1] First step content here...\n"
    "[STEP_2] Second step content here...\n"
    "And so on...\n"
    "2. Each step should be self-contained and clear\n"
    "3. Keep each step concise but informative\n"
    "4. If your response requires multiple steps, include [HAS_NEXT_STEPS] at the start\n"
)


def build_system_prompt(base_prompt: str, profile: Optional[str], guidance: Optional[str] = None) -> str:
    parts = [base_prompt.strip()]
    if profile and profile.strip():
        parts.append("Here is your personality profile and core knowledge:\n" + profile.strip())
    parts.append(STEP_GUIDANCE)
    if guidance and guidance.strip():
        parts.append("Topic guidance for this question:\n" + guidance.strip())
    return "\n\n".join(parts)


class SmartResponder:
    """
    Decides how to answer each message and pages multi-step answers.

    Owns the trigger list, the document store and the session store for
    the lifetime of the bot.
    """

    def __init__(
        self,
        config: dict[str, Any],
        provider: ChatProvider,
        triggers: Optional[list[TriggerDefinition]] = None,
        documents: Optional[DocumentStore] = None,
        sessions: Optional[ConversationStore] = None,
        matcher: Optional[PhraseMatcher] = None,
        base_dir: Path = BASE_DIR,
    ) -> None:
        self.config = config
        self.provider = provider
        self.base_dir = base_dir
        self.triggers = triggers if triggers is not None else load_trigger_definitions(config)
        self.documents = documents if documents is not None else DocumentStore(base_dir=base_dir)
        if sessions is None:
            sessions = ConversationStore(
                idle_timeout=float(config.get(K.SESSION_IDLE_SECONDS, DEFAULT_IDLE_TIMEOUT)),
            )
        self.sessions = sessions
        self.matcher = matcher or PhraseMatcher(
            SimilarityScorer(config.get(K.CORPUS_MODE) or CorpusMode.PER_CALL),
        )
        self.profile: Optional[str] = None

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> SmartResponder:
        """Build a responder and its provider. Raises ConfigError."""
        triggers = load_trigger_definitions(config)
        provider = create_provider(config[K.PROVIDER], provider_settings(config))
        return cls(config, provider, triggers=triggers)

    @property
    def generate_fallback(self) -> bool:
        return bool(self.config.get(K.GENERATE_FALLBACK, True))

    async def initialize(self) -> None:
        """Create resource folders, read the profile and load documents."""
        resources = self.base_dir / RESOURCES_DIR
        await ensure_dirs([resources, *(resources / name for name in RESOURCE_SUBDIRS)])

        profile_path = self.config.get(K.PROFILE_PATH)
        if profile_path:
            path = resolve_repo_path(profile_path, base=self.base_dir)
            try:
                self.profile = await read_text(path)
            except (OSError, UnicodeDecodeError) as e:
                logger.error("Failed to read profile %s: %s", path, e)
            else:
                if self.profile is None:
                    logger.warning("Profile file not found at %s", path)

        await self.documents.load(self.config.get(K.INTERNAL_DATA_SOURCES) or [])
        logger.info(
            "Smart responder ready: %d triggers, %d documents",
            len(self.triggers),
            len(self.documents),
        )

    async def close(self) -> None:
        await self.sessions.clear()
        await self.provider.close()

    async def process_message(
        self,
        content: str,
        channel_id: int,
        user_id: int,
        category_id: Optional[int] = None,
        bot_id: Optional[int] = None,
    ) -> Optional[SmartReply]:
        """
        Choose a reply for an inbound message.

        Returns None when the message is empty, or when nothing matches and
        generation fallback is disabled.
        """
        cleaned = clean_message_content(content, bot_id)
        if not cleaned:
            return None
        query = clean_message_content(content, bot_id, lowercase=False)

        trigger = self.matcher.find_best_match(cleaned, self.triggers, channel_id, category_id)

        if trigger is None:
            if not self.generate_fallback:
                return None
            return await self.generate(query, channel_id, user_id)

        if trigger.kind is ResponseKind.FIXED_TEXT:
            return SmartReply(ResponseKind.FIXED_TEXT, content=trigger.response, trigger_id=trigger.trigger_id)
        if trigger.kind is ResponseKind.RICH_CARD:
            return SmartReply(ResponseKind.RICH_CARD, embed=trigger.embed, trigger_id=trigger.trigger_id)
        return await self.generate(query, channel_id, user_id, trigger=trigger)

    async def generate(
        self,
        query: str,
        channel_id: int,
        user_id: int,
        trigger: Optional[TriggerDefinition] = None,
    ) -> SmartReply:
        """Ask the provider, split the answer into steps and open a walkthrough if needed."""
        trigger_id = trigger.trigger_id if trigger else None
        context = self.documents.select_relevant(query)
        system_prompt = build_system_prompt(
            self.config.get(K.SYSTEM_PROMPT) or "",
            self.profile,
            trigger.prompt if trigger else None,
        )

        try:
            text = await self.provider.generate(system_prompt, context, query)
        except ProviderError as e:
            logger.error("Generation failed for %s/%s: %s", channel_id, user_id, e)
            return SmartReply(ResponseKind.GENERATE, content=GENERATION_ERROR_TEXT, trigger_id=trigger_id)
        except Exception:
            logger.exception("Provider %s raised unexpectedly", self.provider.name)
            return SmartReply(ResponseKind.GENERATE, content=GENERATION_ERROR_TEXT, trigger_id=trigger_id)

        steps = parse_steps(text)
        if len(steps) > 1:
            await self.sessions.put(session_key(channel_id, user_id), steps, query)
            return SmartReply(ResponseKind.GENERATE, content=steps[0], has_more=True, trigger_id=trigger_id)

        return SmartReply(ResponseKind.GENERATE, content=steps[0], trigger_id=trigger_id)

    async def advance(self, channel_id: int, user_id: int) -> SmartReply:
        """Return the next step of the user's walkthrough."""
        result = await self.sessions.advance(session_key(channel_id, user_id))
        if result.status is StepStatus.NOT_FOUND:
            return SmartReply(ResponseKind.FIXED_TEXT, content=SESSION_NOT_FOUND_TEXT)
        if result.status is StepStatus.EXPIRED:
            return SmartReply(ResponseKind.FIXED_TEXT, content=SESSION_EXPIRED_TEXT)
        return SmartReply(ResponseKind.GENERATE, content=result.text, has_more=result.has_more)

    async def sweep_sessions(self) -> int:
        return await self.sessions.sweep()


__all__ = ["SmartResponder", "build_system_prompt"]
