"""
Type definitions and dataclasses for the smart responder.

Using dataclasses instead of raw dicts provides:
- Type safety and IDE autocomplete
- Self-documenting code
- Easier refactoring
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional


class ResponseKind(enum.Enum):
    """What a matched trigger answers with."""
    FIXED_TEXT = "fixed_text"
    RICH_CARD = "rich_card"
    GENERATE = "generate"

    @classmethod
    def parse(cls, value: Any) -> Optional[ResponseKind]:
        if not isinstance(value, str):
            return None
        return _KIND_ALIASES.get(value.strip().lower())


_KIND_ALIASES: dict[str, ResponseKind] = {
    "text": ResponseKind.FIXED_TEXT,
    "fixed_text": ResponseKind.FIXED_TEXT,
    "embed": ResponseKind.RICH_CARD,
    "rich_card": ResponseKind.RICH_CARD,
    "smart": ResponseKind.GENERATE,
    "generate": ResponseKind.GENERATE,
}


@dataclass(frozen=True)
class TriggerDefinition:
    """A configured phrase-matching rule."""
    trigger_id: str
    phrases: tuple[str, ...]
    threshold: float
    kind: ResponseKind
    response: Optional[str] = None
    embed: Optional[dict[str, Any]] = None
    prompt: Optional[str] = None
    allowed_channel_ids: frozenset[int] = frozenset()
    allowed_category_ids: frozenset[int] = frozenset()


@dataclass
class ScoredCandidate:
    """Best score seen so far for one trigger during a single match pass."""
    trigger: TriggerDefinition
    score: float


@dataclass
class ConversationSession:
    """
    Paging state for a multi-step answer.

    `index` always stays within [0, len(steps)).
    """
    steps: list[str]
    original_query: str
    last_touched: float
    index: int = 0

    @property
    def has_more(self) -> bool:
        return self.index < len(self.steps) - 1

    @property
    def current(self) -> str:
        return self.steps[self.index]


class StepStatus(enum.Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"


@dataclass
class StepResult:
    """Outcome of advancing a conversation."""
    status: StepStatus
    text: str = ""
    has_more: bool = False

    @property
    def success(self) -> bool:
        return self.status is StepStatus.OK


@dataclass
class SmartReply:
    """
    A response chosen by the engine, ready for the delivery layer.

    `content` is set for text replies, `embed` for rich cards.
    """
    kind: ResponseKind
    content: Optional[str] = None
    embed: Optional[dict[str, Any]] = None
    has_more: bool = False
    trigger_id: Optional[str] = None

    @property
    def is_card(self) -> bool:
        return self.kind is ResponseKind.RICH_CARD
