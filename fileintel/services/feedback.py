from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable

from fileintel.models.enums import FeedbackAction
from fileintel.models.feedback import FeedbackObservation, PatternUsage

logger = logging.getLogger(__name__)

DEFAULT_MAX_OBSERVATIONS = 10_000


class FeedbackStore:
    """Thread-safe log of user decisions about files.

    When more than ``max_observations`` entries accumulate the oldest ones
    are dropped; per-pattern usage totals keep counting.
    """

    def __init__(
        self,
        max_observations: int = DEFAULT_MAX_OBSERVATIONS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._lock = threading.Lock()
        self._observations: deque[FeedbackObservation] = deque(maxlen=max(1, max_observations))
        self._usage: dict[str, PatternUsage] = {}
        self._clock = clock

    def record(self, action: FeedbackAction, path: str, pattern: str | None = None) -> FeedbackObservation:
        observation = FeedbackObservation(path=path, action=action, timestamp=self._clock(), pattern=pattern)
        with self._lock:
            self._observations.append(observation)
            if pattern is not None:
                usage = self._usage.setdefault(pattern, PatternUsage(pattern=pattern))
                usage.total += 1
                usage.by_action[action] = usage.by_action.get(action, 0) + 1
                usage.last_seen = observation.timestamp
        logger.debug("Recorded %s feedback for %s", action.value, path)
        return observation

    def observations(self, path: str | None = None) -> list[FeedbackObservation]:
        with self._lock:
            snapshot = list(self._observations)
        if path is None:
            return snapshot
        return [obs for obs in snapshot if obs.path == path]

    def tally(self, path: str) -> dict[FeedbackAction, int]:
        counts = {action: 0 for action in FeedbackAction}
        for obs in self.observations(path):
            counts[obs.action] += 1
        return counts

    def usage(self, pattern: str) -> PatternUsage | None:
        with self._lock:
            usage = self._usage.get(pattern)
            if usage is None:
                return None
            return PatternUsage(
                pattern=usage.pattern,
                total=usage.total,
                by_action=dict(usage.by_action),
                last_seen=usage.last_seen,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._observations)
