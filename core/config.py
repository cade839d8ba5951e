"""
Smart responder configuration loading and validation.

Handles loading, validating, and normalizing the JSON config file.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .constants import CorpusMode, K
from .io_utils import read_json
from .paths import BASE_DIR, resolve_repo_path
from .utils import is_int, is_safe_relative_path, is_valid_id

DEFAULT_CONFIG_PATH = BASE_DIR / "config.smart.json"
CONFIG_PATH_ENV = "SMART_CONFIG_PATH"

SUPPORTED_PROVIDERS = ("openai", "groq", "mistral", "togetherai")

DEFAULT_CONFIG: Dict[str, Any] = {
    "provider": "openai",
    "providers": {},
    "system_prompt": "You are a helpful assistant.",
    "profile_path": "resources/profile.md",
    "internal_data_sources": ["resources/docs", "resources/wiki", "resources/knowledge_base"],
    "generate_fallback": True,
    "require_mention": False,
    "whitelisted_channel_ids": [],
    "whitelisted_category_ids": [],
    "corpus_mode": CorpusMode.PER_CALL,
    "max_message_length": 2000,
    "session_idle_seconds": 30 * 60,
    "sweep_interval_seconds": 5 * 60,
    "phrases": {},
}

CONFIG_SCHEMA: Dict[str, Tuple[str, bool]] = {
    K.PROVIDER: ("provider", True),
    K.PROVIDERS: ("dict", True),
    K.SYSTEM_PROMPT: ("str", True),
    K.PROFILE_PATH: ("path_or_none", False),
    K.INTERNAL_DATA_SOURCES: ("list_path", True),
    K.GENERATE_FALLBACK: ("bool", True),
    K.REQUIRE_MENTION: ("bool", True),
    K.WHITELISTED_CHANNEL_IDS: ("list_int", True),
    K.WHITELISTED_CATEGORY_IDS: ("list_int", True),
    K.CORPUS_MODE: ("corpus_mode", True),
    K.MAX_MESSAGE_LENGTH: ("pos_int", True),
    K.SESSION_IDLE_SECONDS: ("pos_int", True),
    K.SWEEP_INTERVAL_SECONDS: ("pos_int", True),
    K.PHRASES: ("dict", True),
}


class ConfigError(RuntimeError):
    pass


def validate_and_normalize_config(data: Dict[str, Any]) -> Dict[str, Any]:
    errors: List[str] = []
    normalized: Dict[str, Any] = {}

    for key, (type_name, required) in CONFIG_SCHEMA.items():
        if key not in data:
            if required:
                errors.append(f"Missing required config key: {key}")
            else:
                normalized[key] = DEFAULT_CONFIG.get(key)
            continue
        value = data[key]
        if type_name == "provider":
            if not isinstance(value, str) or value.strip().lower() not in SUPPORTED_PROVIDERS:
                errors.append(f"{key} must be one of: {', '.join(SUPPORTED_PROVIDERS)}")
            else:
                normalized[key] = value.strip().lower()
        elif type_name == "str":
            if not isinstance(value, str):
                errors.append(f"{key} must be a string")
            else:
                normalized[key] = value
        elif type_name == "path_or_none":
            if value is None:
                normalized[key] = None
            elif isinstance(value, str) and is_safe_relative_path(value):
                normalized[key] = value
            else:
                errors.append(f"{key} must be a safe relative path or null")
        elif type_name == "pos_int":
            if not is_int(value) or value <= 0:
                errors.append(f"{key} must be a positive integer")
            else:
                normalized[key] = int(value)
        elif type_name == "bool":
            if not isinstance(value, bool):
                errors.append(f"{key} must be a boolean")
            else:
                normalized[key] = value
        elif type_name == "list_int":
            if not isinstance(value, list):
                errors.append(f"{key} must be a list of integer IDs")
                continue
            items: List[int] = []
            for item in value:
                if not is_valid_id(item):
                    errors.append(f"{key} must be a list of integer IDs")
                    items = []
                    break
                items.append(int(item))
            normalized[key] = items
        elif type_name == "list_path":
            if not isinstance(value, list) or any(not isinstance(item, str) for item in value):
                errors.append(f"{key} must be a list of strings")
                continue
            if any(not is_safe_relative_path(item) for item in value):
                errors.append(f"{key} must use safe relative paths")
                continue
            normalized[key] = list(value)
        elif type_name == "corpus_mode":
            if value not in (CorpusMode.PER_CALL, CorpusMode.CUMULATIVE):
                errors.append(f"{key} must be '{CorpusMode.PER_CALL}' or '{CorpusMode.CUMULATIVE}'")
            else:
                normalized[key] = value
        elif type_name == "dict":
            if not isinstance(value, dict):
                errors.append(f"{key} must be a dict/object")
            else:
                normalized[key] = value
        else:
            errors.append(f"Unknown config type for {key}")

    if errors:
        raise ConfigError("; ".join(errors))

    provider = normalized[K.PROVIDER]
    settings = normalized[K.PROVIDERS].get(provider)
    if not isinstance(settings, dict):
        raise ConfigError(f"providers.{provider} must be configured for the selected provider")
    if not isinstance(settings.get("model"), str) or not settings["model"].strip():
        raise ConfigError(f"providers.{provider}.model must be a non-empty string")

    return normalized


def provider_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """Return the selected provider's settings, filling the API key from the environment."""
    name = config[K.PROVIDER]
    settings = dict(config[K.PROVIDERS].get(name) or {})
    if not settings.get("api_key"):
        settings["api_key"] = os.getenv(f"{name.upper()}_API_KEY")
    return settings


def config_path_from_env() -> Path:
    raw = os.getenv(CONFIG_PATH_ENV)
    if raw:
        return resolve_repo_path(raw)
    return DEFAULT_CONFIG_PATH


async def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    path = path or config_path_from_env()
    try:
        data = await read_json(path, default=None)
    except ValueError as exc:
        raise ConfigError(f"Config file is not valid JSON: {exc}") from exc
    if data is None:
        raise ConfigError(f"Missing config file: {path}")
    if not isinstance(data, dict):
        raise ConfigError("Config file must be a JSON object")
    merged = dict(DEFAULT_CONFIG)
    merged.update(data)
    return validate_and_normalize_config(merged)
