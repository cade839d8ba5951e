"""
Configuration key constants.

Using constants instead of string literals provides:
- IDE autocomplete
- Typo protection (caught at import time)
- Single source of truth for key names
"""
from __future__ import annotations


class ConfigKey:
    """All top-level keys of the smart responder config."""

    # Provider
    PROVIDER = "provider"
    PROVIDERS = "providers"
    SYSTEM_PROMPT = "system_prompt"
    PROFILE_PATH = "profile_path"

    # Knowledge
    INTERNAL_DATA_SOURCES = "internal_data_sources"

    # Gate
    REQUIRE_MENTION = "require_mention"
    WHITELISTED_CHANNEL_IDS = "whitelisted_channel_ids"
    WHITELISTED_CATEGORY_IDS = "whitelisted_category_ids"

    # Behaviour
    GENERATE_FALLBACK = "generate_fallback"
    CORPUS_MODE = "corpus_mode"
    MAX_MESSAGE_LENGTH = "max_message_length"

    # Sessions
    SESSION_IDLE_SECONDS = "session_idle_seconds"
    SWEEP_INTERVAL_SECONDS = "sweep_interval_seconds"

    # Triggers
    PHRASES = "phrases"


class TriggerKey:
    """Keys inside a single trigger entry."""
    PHRASES = "phrases"
    MATCH_PERCENT = "match_percent"
    TYPE = "type"
    RESPONSE = "response"
    EMBED = "embed"
    PROMPT = "prompt"
    ENABLED = "enabled"
    ALLOWED_CHANNEL_IDS = "allowed_channel_ids"
    ALLOWED_CATEGORY_IDS = "allowed_category_ids"


class CorpusMode:
    """How the corpus-weighted similarity keeps its term statistics."""
    PER_CALL = "per_call"
    CUMULATIVE = "cumulative"


class ComponentId:
    """custom_id values for buttons and modals."""
    NEXT_STEP = "next_step"
    ASK_QUESTION = "ask_question"
    QUESTION_MODAL = "question_modal"
    QUESTION_INPUT = "question_input"


# Shorthand alias for cleaner imports
K = ConfigKey
