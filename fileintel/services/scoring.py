"""Per-file disposability scoring.

Every score in this module runs in the *disposability* direction: a higher
number means the file is safer to remove.  ``importance_score`` keeps that
name for compatibility with existing consumers even though it measures how
disposable a file is, not how valuable.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from result import Err, Ok, Result

from fileintel.config.schema import PatternRule, ScoringConfig
from fileintel.models.analysis import FileAnalysis
from fileintel.models.enums import AgeCategory, Recommendation
from fileintel.models.errors import FileError, FileErrorCode, error_from_os, not_a_file, not_found
from fileintel.services.content import content_type_for
from fileintel.services.fs import DEFAULT_FS, FileSystem
from fileintel.services.patterns import CompiledRuleSet, compile_ruleset, match_path

logger = logging.getLogger(__name__)

_DAY = 24 * 60 * 60


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return min(high, max(low, value))


class HeuristicScorer:
    def __init__(
        self,
        config: ScoringConfig,
        rules: list[PatternRule],
        fs: FileSystem = DEFAULT_FS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._ruleset: CompiledRuleSet = compile_ruleset(rules)
        self._fs = fs
        self._clock = clock
        self._user_dirs = frozenset(d.lower() for d in config.user_content_dirs)
        self._disposable_dirs = frozenset(d.lower() for d in config.disposable_dirs)

    @property
    def config(self) -> ScoringConfig:
        return self._config

    # -- individual heuristics -------------------------------------------

    def age_category(self, elapsed_seconds: float) -> AgeCategory:
        cfg = self._config
        elapsed = max(0.0, elapsed_seconds)
        if elapsed < cfg.new_days * _DAY:
            return AgeCategory.NEW
        if elapsed < cfg.recent_days * _DAY:
            return AgeCategory.RECENT
        if elapsed < cfg.old_days * _DAY:
            return AgeCategory.OLD
        return AgeCategory.VERY_OLD

    def match_pattern(self, path: str) -> PatternRule | None:
        return match_path(self._ruleset, path)

    def _directory_delta(self, path: str) -> int:
        parents = {part.lower() for part in path.replace("\\", "/").split("/")[:-1] if part}
        if parents & self._user_dirs:
            return self._config.user_content_delta
        if parents & self._disposable_dirs:
            return self._config.disposable_delta
        return 0

    def importance_score(self, path: str, size_bytes: int, rule: PatternRule | None) -> int:
        cfg = self._config
        score = rule.score if rule is not None else cfg.base_importance
        score += self._directory_delta(path)
        if size_bytes >= cfg.large_file_bytes:
            score += cfg.large_file_delta
        return int(_clamp(score))

    def access_score(self, age: AgeCategory) -> int:
        cfg = self._config
        by_age = {
            AgeCategory.NEW: cfg.access_new,
            AgeCategory.RECENT: cfg.access_recent,
            AgeCategory.OLD: cfg.access_old,
            AgeCategory.VERY_OLD: cfg.access_very_old,
        }
        return int(_clamp(by_age[age]))

    def combined_score(self, importance: int, access: int) -> float:
        cfg = self._config
        total = cfg.importance_weight + cfg.access_weight
        blended = (cfg.importance_weight * importance + cfg.access_weight * access) / total
        return round(_clamp(blended), 2)

    def recommendation_for(self, combined: float) -> Recommendation:
        if combined > self._config.safe_threshold:
            return Recommendation.SAFE_TO_DELETE
        if combined > self._config.review_threshold:
            return Recommendation.REVIEW_RECOMMENDED
        return Recommendation.KEEP

    # -- analysis --------------------------------------------------------

    def analyze_file(self, path: str, now: float | None = None) -> Result[FileAnalysis, FileError]:
        if not self._fs.exists(path):
            return Err(not_found(path))
        try:
            st = self._fs.stat(path)
        except OSError as exc:
            return Err(error_from_os(path, exc, FileErrorCode.CANNOT_GET_FILE_SIZE))
        if not st.is_file:
            return Err(not_a_file(path))

        current = self._clock() if now is None else now
        age = self.age_category(current - st.mtime)
        rule = self.match_pattern(path)
        importance = self.importance_score(path, st.size, rule)
        access = self.access_score(age)
        combined = self.combined_score(importance, access)
        recommendation = self.recommendation_for(combined)
        logger.debug(
            "Scored %s: importance=%d access=%d combined=%.2f -> %s",
            path,
            importance,
            access,
            combined,
            recommendation.value,
        )
        return Ok(
            FileAnalysis(
                path=path,
                size_bytes=st.size,
                modified_ts=st.mtime,
                importance_score=importance,
                access_score=access,
                combined_score=combined,
                age_category=age,
                recommendation=recommendation,
                pattern_match=rule.name if rule is not None else None,
                content_type=content_type_for(path),
            )
        )
