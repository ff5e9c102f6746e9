from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from fileintel.models.enums import AgeCategory, ContentType, Recommendation
from fileintel.models.errors import FileError


@dataclass(slots=True, frozen=True)
class FileAnalysis:
    path: str
    size_bytes: int
    modified_ts: float
    importance_score: int
    access_score: int
    combined_score: float
    age_category: AgeCategory
    recommendation: Recommendation
    pattern_match: str | None = None
    content_type: ContentType | None = None


@dataclass(slots=True, frozen=True)
class RecommendationSummary:
    total_files: int
    safe_to_delete: int
    review_recommended: int
    risky_files: int
    total_size_mb: float


@dataclass(slots=True)
class RecommendationResult:
    analyses: list[FileAnalysis]
    summary: RecommendationSummary
    timestamp: datetime
    skipped: list[FileError] = field(default_factory=list)
