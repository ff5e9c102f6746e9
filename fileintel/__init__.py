from __future__ import annotations

from fileintel.engine import SmartDetector
from fileintel.models.analysis import FileAnalysis, RecommendationResult, RecommendationSummary
from fileintel.models.duplicates import (
    CleanableItem,
    DuplicateDetectionResults,
    DuplicateGroup,
    DuplicateStatistics,
    ItemDuplicateGroup,
)
from fileintel.models.enums import AgeCategory, ContentType, DetectionType, FeedbackAction, Recommendation
from fileintel.models.errors import FileError, FileErrorCode

__version__ = "0.1.0"

__all__ = [
    "AgeCategory",
    "CleanableItem",
    "ContentType",
    "DetectionType",
    "DuplicateDetectionResults",
    "DuplicateGroup",
    "DuplicateStatistics",
    "FeedbackAction",
    "FileAnalysis",
    "FileError",
    "FileErrorCode",
    "ItemDuplicateGroup",
    "Recommendation",
    "RecommendationResult",
    "RecommendationSummary",
    "SmartDetector",
]
