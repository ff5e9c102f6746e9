from __future__ import annotations

from dataclasses import dataclass, field

from fileintel.models.enums import FeedbackAction


@dataclass(slots=True, frozen=True)
class FeedbackObservation:
    path: str
    action: FeedbackAction
    timestamp: float
    pattern: str | None = None


@dataclass(slots=True)
class PatternUsage:
    pattern: str
    total: int = 0
    by_action: dict[FeedbackAction, int] = field(default_factory=dict)
    last_seen: float | None = None
