"""
General utility functions.

Provides validation helpers for config values.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_id(value: Any) -> bool:
    return is_int(value) and 1 <= value <= 2**63 - 1


def safe_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isdigit():
            return int(stripped)
    return default


def is_safe_relative_path(path_str: str) -> bool:
    path = Path(path_str)
    if path.is_absolute() or path.drive:
        return False
    return ".." not in path.parts
