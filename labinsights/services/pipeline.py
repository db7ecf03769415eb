import logging
from collections.abc import Iterable, Mapping

from labinsights.reference.store import ReferenceData, get_reference_data
from labinsights.schemas.analysis import HistoryAnalysis, Pattern, ReportEvaluation
from labinsights.schemas.measurement import NormalizedBiomarker, RawMeasurement, RiskProfile, SeriesPoint
from labinsights.services.correlation import correlate, significant_correlations
from labinsights.services.insights import compose_insights
from labinsights.services.normalizer import normalize_many
from labinsights.services.patterns import detect_patterns
from labinsights.services.risk import assess_all
from labinsights.services.status import summarize
from labinsights.services.trend_analyzer import SeriesInput, analyze_trends, as_datetime

logger = logging.getLogger(__name__)


def evaluate_report(
    measurements: Iterable[RawMeasurement],
    profile: RiskProfile | None = None,
    reference: ReferenceData | None = None,
) -> ReportEvaluation:
    """Normalize one report, then detect patterns, score risks and summarize.

    The profile doubles as the demographics used for sex and age specific
    reference ranges.
    """
    ref = reference or get_reference_data()
    biomarkers = normalize_many(measurements, profile, ref)
    patterns = detect_patterns(biomarkers)
    risks = assess_all(biomarkers, profile, ref)
    summary = summarize(biomarkers, pattern_count=len(patterns))
    warnings = [warning for biomarker in biomarkers for warning in biomarker.warnings]

    logger.info(
        "Evaluated %d biomarker(s): %d abnormal, %d pattern(s), overall risk %s",
        summary.total,
        summary.abnormal,
        len(patterns),
        risks.overall_level,
    )
    return ReportEvaluation(
        biomarkers=biomarkers,
        patterns=patterns,
        risks=risks,
        summary=summary,
        warnings=warnings,
    )


def build_series(biomarkers: Iterable[NormalizedBiomarker]) -> dict[str, list[SeriesPoint]]:
    series: dict[str, list[SeriesPoint]] = {}
    for biomarker in biomarkers:
        if biomarker.code is None or biomarker.collected_at is None:
            continue
        series.setdefault(biomarker.code, []).append(
            SeriesPoint(collected_at=biomarker.collected_at, value=biomarker.value)
        )
    for points in series.values():
        points.sort(key=lambda point: as_datetime(point.collected_at))
    return series


def analyze_history(
    series_by_code: Mapping[str, SeriesInput],
    patterns: Iterable[Pattern] = (),
    reference: ReferenceData | None = None,
) -> HistoryAnalysis:
    """Correlate and trend a patient's history, then merge the findings into insights."""
    ref = reference or get_reference_data()
    series = {code: list(points) for code, points in series_by_code.items()}
    correlations = correlate(series, reference=ref)
    significant = significant_correlations(correlations)
    trends = analyze_trends(series)
    insights = compose_insights(patterns, correlations, trends)

    populated = sum(1 for points in series.values() if points)
    noun = "correlation" if len(significant) == 1 else "correlations"
    message = f"Found {len(significant)} significant {noun} across {populated} biomarkers."
    logger.info(message)
    return HistoryAnalysis(
        correlations=correlations,
        significant_correlations=significant,
        trends=trends,
        insights=insights,
        message=message,
    )
