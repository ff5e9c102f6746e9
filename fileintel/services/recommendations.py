from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from result import Err, Ok, Result

from fileintel.models.analysis import FileAnalysis, RecommendationResult, RecommendationSummary
from fileintel.models.enums import Recommendation
from fileintel.models.errors import FileError, FileErrorCode
from fileintel.services.scoring import HeuristicScorer
from fileintel.services.workers import map_bounded

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


def summarize(analyses: list[FileAnalysis]) -> RecommendationSummary:
    counts = {rec: 0 for rec in Recommendation}
    total_size = 0
    for analysis in analyses:
        counts[analysis.recommendation] += 1
        total_size += analysis.size_bytes
    return RecommendationSummary(
        total_files=len(analyses),
        safe_to_delete=counts[Recommendation.SAFE_TO_DELETE],
        review_recommended=counts[Recommendation.REVIEW_RECOMMENDED],
        risky_files=counts[Recommendation.KEEP],
        total_size_mb=round(total_size / _MB, 2),
    )


def build_result(
    analyses: list[FileAnalysis],
    skipped: Iterable[FileError] = (),
    now: datetime | None = None,
) -> RecommendationResult:
    return RecommendationResult(
        analyses=list(analyses),
        summary=summarize(analyses),
        timestamp=now or datetime.now(UTC),
        skipped=list(skipped),
    )


def generate_recommendations(
    scorer: HeuristicScorer,
    paths: list[str],
    workers: int = 4,
) -> RecommendationResult:
    """Score every path; failures are logged and reported in ``skipped``."""
    logger.info("Generating recommendations for %d files", len(paths))

    def analyze(path: str) -> Result[FileAnalysis, FileError]:
        try:
            return scorer.analyze_file(path)
        except Exception as exc:  # noqa: BLE001
            return Err(
                FileError(
                    code=FileErrorCode.INVALID_FILE_FORMAT,
                    path=path,
                    message=f"Unhandled analysis failure: {exc}",
                )
            )

    analyses: list[FileAnalysis] = []
    skipped: list[FileError] = []
    for result in map_bounded(analyze, paths, workers):
        if isinstance(result, Ok):
            analyses.append(result.unwrap())
        else:
            error = result.unwrap_err()
            logger.warning("Skipping %s: %s (%s)", error.path, error.message, error.code.value)
            skipped.append(error)

    outcome = build_result(analyses, skipped)
    logger.info(
        "Recommendations ready: %d safe, %d review, %d keep, %d skipped",
        outcome.summary.safe_to_delete,
        outcome.summary.review_recommended,
        outcome.summary.risky_files,
        len(skipped),
    )
    return outcome
