from __future__ import annotations

import logging
import time
from collections.abc import Callable

from result import Err, Ok, Result

from fileintel.config.defaults import default_config
from fileintel.config.loader import load_config
from fileintel.config.schema import EngineConfig
from fileintel.models.analysis import FileAnalysis, RecommendationResult
from fileintel.models.duplicates import CleanableItem, DuplicateDetectionResults, ItemDuplicateGroup
from fileintel.models.enums import FeedbackAction
from fileintel.models.errors import FileError
from fileintel.services.duplicates import DuplicateService
from fileintel.services.feedback import FeedbackStore
from fileintel.services.fs import DEFAULT_FS, FileSystem
from fileintel.services.hashing import Hasher
from fileintel.services.recommendations import generate_recommendations
from fileintel.services.scoring import HeuristicScorer

logger = logging.getLogger(__name__)


class SmartDetector:
    """Entry point tying hashing, duplicate grouping, scoring and feedback together.

    Each instance owns its own :class:`FeedbackStore` unless one is passed
    in, so separate detectors never share feedback.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        fs: FileSystem = DEFAULT_FS,
        feedback: FeedbackStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config or default_config()
        hashing = self._config.hashing
        self._hasher = Hasher(
            chunk_size=hashing.chunk_size,
            max_file_size=hashing.max_file_size,
            fs=fs,
        )
        self._duplicates = DuplicateService(self._hasher, fs=fs, hash_workers=hashing.hash_workers)
        self._scorer = HeuristicScorer(self._config.scoring, self._config.patterns, fs=fs, clock=clock)
        if feedback is None:
            feedback = FeedbackStore(self._config.feedback_max_observations, clock=clock)
        self._feedback = feedback

    @classmethod
    def from_config_file(
        cls,
        path: str | None = None,
        fs: FileSystem = DEFAULT_FS,
        feedback: FeedbackStore | None = None,
    ) -> Result[SmartDetector, str]:
        """Build a detector from a JSON config; defaults apply when the file is missing."""
        loaded = load_config(path, fs)
        if isinstance(loaded, Err):
            logger.warning("Not using config: %s", loaded.unwrap_err())
            return Err(loaded.unwrap_err())
        return Ok(cls(loaded.unwrap(), fs=fs, feedback=feedback))

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def hasher(self) -> Hasher:
        return self._hasher

    @property
    def duplicates(self) -> DuplicateService:
        return self._duplicates

    @property
    def scorer(self) -> HeuristicScorer:
        return self._scorer

    @property
    def feedback(self) -> FeedbackStore:
        return self._feedback

    def analyze_file(self, path: str) -> Result[FileAnalysis, FileError]:
        return self._scorer.analyze_file(path)

    def generate_recommendations(self, paths: list[str]) -> RecommendationResult:
        return generate_recommendations(self._scorer, paths, workers=self._config.scoring_workers)

    def find_all_duplicates(self, paths: list[str]) -> DuplicateDetectionResults:
        return self._duplicates.find_all(paths)

    def find_duplicates_batched(self, paths: list[str], batch_size: int | None = None) -> DuplicateDetectionResults:
        return self._duplicates.find_all_batched(paths, batch_size or self._config.hashing.batch_size)

    def detect_duplicates(self, items: list[CleanableItem]) -> list[ItemDuplicateGroup]:
        """Group already-scanned items by identical content."""
        by_path: dict[str, CleanableItem] = {}
        for item in items:
            by_path.setdefault(item.path, item)
        groups = self._duplicates.find_by_content(list(by_path))
        return [
            ItemDuplicateGroup(checksum=group.group_key, items=[by_path[path] for path in group.files])
            for group in groups
        ]

    def learn_from_feedback(self, action: FeedbackAction | str, path: str) -> None:
        try:
            parsed = FeedbackAction(action)
        except ValueError:
            logger.warning("Ignoring feedback with unknown action %r for %s", action, path)
            return
        rule = self._scorer.match_pattern(path)
        self._feedback.record(parsed, path, pattern=rule.name if rule is not None else None)
