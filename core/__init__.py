"""
Core utilities and infrastructure for the smart responder bot.

This package contains:
- config: Configuration loading and validation
- constants: Configuration keys and component ids
- interactions: Button routing
- io_utils: File I/O helpers
- paths: Path resolution
- types: Dataclasses and enums shared across packages
- utils: General utilities
"""
from .constants import ComponentId, ConfigKey, CorpusMode, K, TriggerKey
from .types import (
    ConversationSession,
    ResponseKind,
    ScoredCandidate,
    SmartReply,
    StepResult,
    StepStatus,
    TriggerDefinition,
)

__all__ = [
    # Constants
    "ComponentId",
    "ConfigKey",
    "CorpusMode",
    "K",
    "TriggerKey",
    # Types
    "ConversationSession",
    "ResponseKind",
    "ScoredCandidate",
    "SmartReply",
    "StepResult",
    "StepStatus",
    "TriggerDefinition",
]
