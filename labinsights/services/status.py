import math
from collections.abc import Iterable

from labinsights.config import settings
from labinsights.exceptions import InvalidRangeError
from labinsights.schemas.analysis import AbnormalBiomarker, ReportSummary
from labinsights.schemas.measurement import Classification, NormalizedBiomarker, StatusEnum


def _out_of_range(ratio: float | None, status: StatusEnum) -> Classification:
    # ratio is None when the boundary is zero or negative and a relative distance is undefined
    if ratio is None:
        return Classification(status=status, severity="high", percent_from_range=100)
    severity = "high" if ratio > settings.severity_high_ratio else "low"
    return Classification(status=status, severity=severity, percent_from_range=math.floor(ratio * 100 + 0.5))


def classify(value: float, reference_min: float | None, reference_max: float | None) -> Classification:
    """Place a value relative to its reference range.

    ``value == reference_min`` and ``value == reference_max`` are in range.
    ``percent_from_range`` is a non-negative distance from the violated bound
    relative to that bound; the direction is carried by ``status``.
    A lower bound of exactly 0 is a floor rather than a limit (LDL, hs-CRP),
    so values near it are never borderline_low.
    """
    if reference_min is None or reference_max is None:
        return Classification(status=StatusEnum.UNKNOWN, severity="none", percent_from_range=0)
    if reference_min > reference_max:
        raise InvalidRangeError(reference_min, reference_max)

    if value < reference_min:
        ratio = (reference_min - value) / reference_min if reference_min > 0 else None
        return _out_of_range(ratio, StatusEnum.BELOW_RANGE)
    if value > reference_max:
        ratio = (value - reference_max) / reference_max if reference_max > 0 else None
        return _out_of_range(ratio, StatusEnum.ABOVE_RANGE)

    width = reference_max - reference_min
    if width == 0:
        return Classification(status=StatusEnum.NORMAL, severity="none", percent_from_range=0)
    position = (value - reference_min) / width
    if reference_min != 0 and position < settings.borderline_fraction:
        return Classification(status=StatusEnum.BORDERLINE_LOW, severity="minimal", percent_from_range=0)
    if position > 1 - settings.borderline_fraction:
        return Classification(status=StatusEnum.BORDERLINE_HIGH, severity="minimal", percent_from_range=0)
    return Classification(status=StatusEnum.NORMAL, severity="none", percent_from_range=0)


def apply_critical_tier(classification: Classification, threshold: float | None = None) -> Classification:
    """Escalate out-of-range results beyond the critical threshold to critical_low/critical_high."""
    limit = settings.critical_percent_threshold if threshold is None else threshold
    if classification.percent_from_range <= limit:
        return classification
    if classification.status == StatusEnum.BELOW_RANGE:
        return classification.model_copy(update={"status": StatusEnum.CRITICAL_LOW})
    if classification.status == StatusEnum.ABOVE_RANGE:
        return classification.model_copy(update={"status": StatusEnum.CRITICAL_HIGH})
    return classification


def classify_value(value: float, reference_min: float | None, reference_max: float | None) -> Classification:
    return apply_critical_tier(classify(value, reference_min, reference_max))


def summarize(biomarkers: Iterable[NormalizedBiomarker], pattern_count: int = 0) -> ReportSummary:
    summary = ReportSummary(pattern_count=pattern_count)
    for biomarker in biomarkers:
        summary.total += 1
        status = biomarker.status
        if status == StatusEnum.NORMAL:
            summary.normal += 1
        elif status.is_borderline:
            summary.borderline += 1
        elif not status.is_abnormal:
            summary.unknown += 1
        else:
            summary.abnormal += 1
            summary.abnormal_biomarkers.append(
                AbnormalBiomarker(
                    code=biomarker.code,
                    name=biomarker.canonical_name,
                    value=biomarker.value,
                    unit=biomarker.unit,
                    status=status.value,
                )
            )
    return summary
