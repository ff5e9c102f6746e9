from __future__ import annotations

from enum import Enum


class DetectionType(str, Enum):
    CONTENT = "content"
    NAME = "name"
    SIZE = "size"


class AgeCategory(str, Enum):
    NEW = "new"
    RECENT = "recent"
    OLD = "old"
    VERY_OLD = "very_old"


class Recommendation(str, Enum):
    SAFE_TO_DELETE = "safe_to_delete"
    REVIEW_RECOMMENDED = "review_recommended"
    KEEP = "keep"


class RuleCategory(str, Enum):
    TEMP = "temp"
    CACHE = "cache"
    LOG = "log"
    BUILD_ARTIFACT = "build_artifact"
    SYSTEM = "system"


class FeedbackAction(str, Enum):
    DELETED = "deleted"
    KEPT = "kept"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ContentType(str, Enum):
    DOCUMENT = "document"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    ARCHIVE = "archive"
    APPLICATION = "application"
    OTHER = "other"
