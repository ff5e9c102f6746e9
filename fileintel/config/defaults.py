from __future__ import annotations

from fileintel.config.schema import EngineConfig, HashingConfig, PatternRule, ScoringConfig
from fileintel.models.enums import RuleCategory


def default_patterns() -> list[PatternRule]:
    # Order matters: the first matching rule decides the file's pattern.
    return [
        PatternRule(".DS_Store", "**/.DS_Store", RuleCategory.SYSTEM, 95),
        PatternRule("Thumbs.db", "**/Thumbs.db", RuleCategory.SYSTEM, 95),
        PatternRule("*.log", "**/*.log", RuleCategory.LOG, 90),
        PatternRule("*.tmp", "**/*.tmp", RuleCategory.TEMP, 90),
        PatternRule("*.temp", "**/*.temp", RuleCategory.TEMP, 90),
        PatternRule("*.cache", "**/*.cache", RuleCategory.CACHE, 90),
        PatternRule("~$*", "**/~$*", RuleCategory.TEMP, 90),
        PatternRule("*.swp", "**/*.{swp,swo}", RuleCategory.TEMP, 85),
        PatternRule("*.crash", "**/*.{crash,ips}", RuleCategory.LOG, 85),
        PatternRule("*.pyc", "**/*.{pyc,pyo}", RuleCategory.BUILD_ARTIFACT, 90),
        PatternRule("__pycache__", "**/__pycache__/**", RuleCategory.BUILD_ARTIFACT, 90),
        PatternRule("node_modules", "**/node_modules/**", RuleCategory.BUILD_ARTIFACT, 85),
        PatternRule("DerivedData", "**/DerivedData/**", RuleCategory.BUILD_ARTIFACT, 90),
        PatternRule(".gradle", "**/.gradle/**", RuleCategory.BUILD_ARTIFACT, 80),
        PatternRule("Library/Caches", "**/Library/Caches/**", RuleCategory.CACHE, 85),
        PatternRule(".cache", "**/.cache/**", RuleCategory.CACHE, 85),
        PatternRule("Library/Logs", "**/Library/Logs/**", RuleCategory.LOG, 85),
        PatternRule("*.bak", "**/*.{bak,old}", RuleCategory.TEMP, 75),
    ]


def default_config() -> EngineConfig:
    return EngineConfig(
        hashing=HashingConfig(),
        scoring=ScoringConfig(
            user_content_dirs=[
                "desktop",
                "documents",
                "pictures",
                "photos",
                "movies",
                "videos",
                "music",
            ],
            disposable_dirs=[
                "caches",
                "cache",
                ".cache",
                "build",
                "dist",
                "downloads",
                "deriveddata",
                "logs",
            ],
        ),
        patterns=default_patterns(),
    )
