"""
Trigger definition loading for the smart responder.

Turns the `phrases` section of the validated config into immutable
TriggerDefinitions, preserving configuration order.
"""
from __future__ import annotations

from typing import Any, Optional

from core.config import ConfigError
from core.constants import K, TriggerKey
from core.types import ResponseKind, TriggerDefinition
from core.utils import is_number

from .matching import normalize_id_list

DEFAULT_MATCH_PERCENT = 0.8


def _clean_phrases(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    phrases: list[str] = []
    for item in value:
        if isinstance(item, str) and item.strip():
            phrases.append(item.strip())
    return phrases


def build_trigger_definition(
    trigger_id: str,
    value: Any,
    errors: list[str],
) -> Optional[TriggerDefinition]:
    """
    Build a TriggerDefinition from one config entry.

    Returns None for disabled entries. Problems are appended to errors.
    """
    if not isinstance(value, dict):
        errors.append(f"phrases.{trigger_id} must be an object")
        return None
    if not value.get(TriggerKey.ENABLED, True):
        return None

    phrases = _clean_phrases(value.get(TriggerKey.PHRASES))
    if not phrases:
        errors.append(f"phrases.{trigger_id}.phrases must be a non-empty list of strings")
        return None

    threshold = value.get(TriggerKey.MATCH_PERCENT, DEFAULT_MATCH_PERCENT)
    if not is_number(threshold) or not 0.0 <= float(threshold) <= 1.0:
        errors.append(f"phrases.{trigger_id}.match_percent must be a number between 0 and 1")
        return None

    kind = ResponseKind.parse(value.get(TriggerKey.TYPE))
    if kind is None:
        errors.append(f"phrases.{trigger_id}.type must be one of text, embed, smart")
        return None

    response = value.get(TriggerKey.RESPONSE)
    embed = value.get(TriggerKey.EMBED)
    prompt = value.get(TriggerKey.PROMPT)

    if kind is ResponseKind.FIXED_TEXT and (not isinstance(response, str) or not response.strip()):
        errors.append(f"phrases.{trigger_id}.response must be a non-empty string for text triggers")
        return None
    if kind is ResponseKind.RICH_CARD and not isinstance(embed, dict):
        errors.append(f"phrases.{trigger_id}.embed must be an object for embed triggers")
        return None
    if prompt is not None and not isinstance(prompt, str):
        errors.append(f"phrases.{trigger_id}.prompt must be a string")
        return None

    return TriggerDefinition(
        trigger_id=trigger_id,
        phrases=tuple(phrases),
        threshold=float(threshold),
        kind=kind,
        response=response if kind is ResponseKind.FIXED_TEXT else None,
        embed=dict(embed) if kind is ResponseKind.RICH_CARD else None,
        prompt=prompt or None,
        allowed_channel_ids=frozenset(normalize_id_list(value.get(TriggerKey.ALLOWED_CHANNEL_IDS))),
        allowed_category_ids=frozenset(normalize_id_list(value.get(TriggerKey.ALLOWED_CATEGORY_IDS))),
    )


def load_trigger_definitions(config: dict[str, Any]) -> list[TriggerDefinition]:
    """
    Build every enabled trigger from config, in configuration order.

    Raises ConfigError listing every invalid entry.
    """
    data = config.get(K.PHRASES) or {}
    if not isinstance(data, dict):
        raise ConfigError("phrases must be a dict/object")

    errors: list[str] = []
    items: list[TriggerDefinition] = []
    for key, value in data.items():
        trigger_id = str(key).strip()
        if not trigger_id:
            errors.append("phrases keys must be non-empty")
            continue
        definition = build_trigger_definition(trigger_id, value, errors)
        if definition:
            items.append(definition)

    if errors:
        raise ConfigError("; ".join(errors))
    return items
