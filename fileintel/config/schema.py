from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fileintel.models.enums import RuleCategory

# Bumped whenever a default below changes the score a file receives.
SCORING_VERSION = 1


@dataclass(slots=True)
class PatternRule:
    name: str
    pattern: str
    category: RuleCategory
    score: int


@dataclass(slots=True)
class HashingConfig:
    chunk_size: int = 1024 * 1024
    max_file_size: int = 1024 * 1024 * 1024
    hash_workers: int = 4
    batch_size: int = 1000


@dataclass(slots=True)
class ScoringConfig:
    importance_weight: float = 0.6
    access_weight: float = 0.4
    new_days: int = 7
    recent_days: int = 30
    old_days: int = 365
    access_new: int = 15
    access_recent: int = 35
    access_old: int = 65
    access_very_old: int = 90
    base_importance: int = 50
    user_content_dirs: list[str] = field(default_factory=list)
    user_content_delta: int = -15
    disposable_dirs: list[str] = field(default_factory=list)
    disposable_delta: int = 10
    large_file_mb: int = 100
    large_file_delta: int = -10
    safe_threshold: float = 70.0
    review_threshold: float = 50.0
    large_file_bytes: int = field(init=False)

    def __post_init__(self) -> None:
        self.large_file_bytes = self.large_file_mb * 1024 * 1024


@dataclass(slots=True)
class EngineConfig:
    hashing: HashingConfig = field(default_factory=HashingConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    patterns: list[PatternRule] = field(default_factory=list)
    scoring_workers: int = 4
    feedback_max_observations: int = 10_000

    def to_dict(self) -> dict[str, Any]:
        scoring = self.scoring
        return {
            "scoringVersion": SCORING_VERSION,
            "hashing": {
                "chunkSize": self.hashing.chunk_size,
                "maxFileSize": self.hashing.max_file_size,
                "hashWorkers": self.hashing.hash_workers,
                "batchSize": self.hashing.batch_size,
            },
            "scoring": {
                "importanceWeight": scoring.importance_weight,
                "accessWeight": scoring.access_weight,
                "newDays": scoring.new_days,
                "recentDays": scoring.recent_days,
                "oldDays": scoring.old_days,
                "accessNew": scoring.access_new,
                "accessRecent": scoring.access_recent,
                "accessOld": scoring.access_old,
                "accessVeryOld": scoring.access_very_old,
                "baseImportance": scoring.base_importance,
                "userContentDirs": scoring.user_content_dirs,
                "userContentDelta": scoring.user_content_delta,
                "disposableDirs": scoring.disposable_dirs,
                "disposableDelta": scoring.disposable_delta,
                "largeFileMb": scoring.large_file_mb,
                "largeFileDelta": scoring.large_file_delta,
                "safeThreshold": scoring.safe_threshold,
                "reviewThreshold": scoring.review_threshold,
            },
            "scoringWorkers": self.scoring_workers,
            "feedbackMaxObservations": self.feedback_max_observations,
            "patterns": [_rule_to_dict(rule) for rule in self.patterns],
        }


def _rule_to_dict(rule: PatternRule) -> dict[str, Any]:
    return {
        "name": rule.name,
        "pattern": rule.pattern,
        "category": rule.category.value,
        "score": rule.score,
    }


def _clamp_score(value: Any) -> int:
    return min(100, max(0, int(value)))


def _rule_from_dict(payload: dict[str, Any]) -> PatternRule:
    return PatternRule(
        name=str(payload["name"]),
        pattern=str(payload["pattern"]),
        category=RuleCategory(str(payload["category"])),
        score=_clamp_score(payload["score"]),
    )


def _hashing_from_dict(data: dict[str, Any], defaults: HashingConfig) -> HashingConfig:
    return HashingConfig(
        chunk_size=max(4096, int(data.get("chunkSize", defaults.chunk_size))),
        max_file_size=max(1, int(data.get("maxFileSize", defaults.max_file_size))),
        hash_workers=max(1, int(data.get("hashWorkers", defaults.hash_workers))),
        batch_size=max(1, int(data.get("batchSize", defaults.batch_size))),
    )


def _scoring_from_dict(data: dict[str, Any], defaults: ScoringConfig) -> ScoringConfig:
    new_days = max(1, int(data.get("newDays", defaults.new_days)))
    recent_days = max(new_days, int(data.get("recentDays", defaults.recent_days)))
    old_days = max(recent_days, int(data.get("oldDays", defaults.old_days)))
    return ScoringConfig(
        importance_weight=float(data.get("importanceWeight", defaults.importance_weight)),
        access_weight=float(data.get("accessWeight", defaults.access_weight)),
        new_days=new_days,
        recent_days=recent_days,
        old_days=old_days,
        access_new=_clamp_score(data.get("accessNew", defaults.access_new)),
        access_recent=_clamp_score(data.get("accessRecent", defaults.access_recent)),
        access_old=_clamp_score(data.get("accessOld", defaults.access_old)),
        access_very_old=_clamp_score(data.get("accessVeryOld", defaults.access_very_old)),
        base_importance=_clamp_score(data.get("baseImportance", defaults.base_importance)),
        user_content_dirs=[str(x).lower() for x in data.get("userContentDirs", defaults.user_content_dirs)],
        user_content_delta=int(data.get("userContentDelta", defaults.user_content_delta)),
        disposable_dirs=[str(x).lower() for x in data.get("disposableDirs", defaults.disposable_dirs)],
        disposable_delta=int(data.get("disposableDelta", defaults.disposable_delta)),
        large_file_mb=max(1, int(data.get("largeFileMb", defaults.large_file_mb))),
        large_file_delta=int(data.get("largeFileDelta", defaults.large_file_delta)),
        safe_threshold=float(data.get("safeThreshold", defaults.safe_threshold)),
        review_threshold=float(data.get("reviewThreshold", defaults.review_threshold)),
    )


def from_dict(data: dict[str, Any], defaults: EngineConfig) -> EngineConfig:
    scoring = _scoring_from_dict(data.get("scoring", {}), defaults.scoring)
    weight_total = scoring.importance_weight + scoring.access_weight
    if scoring.importance_weight < 0 or scoring.access_weight < 0 or weight_total <= 0:
        raise ValueError("scoring weights must be non-negative and not both zero")
    if scoring.review_threshold > scoring.safe_threshold:
        raise ValueError("reviewThreshold must not exceed safeThreshold")

    return EngineConfig(
        hashing=_hashing_from_dict(data.get("hashing", {}), defaults.hashing),
        scoring=scoring,
        patterns=[_rule_from_dict(x) for x in data["patterns"]] if "patterns" in data else list(defaults.patterns),
        scoring_workers=max(1, int(data.get("scoringWorkers", defaults.scoring_workers))),
        feedback_max_observations=max(
            100,
            int(data.get("feedbackMaxObservations", defaults.feedback_max_observations)),
        ),
    )
