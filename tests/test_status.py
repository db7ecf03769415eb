import pytest

from labinsights.config import settings
from labinsights.exceptions import InvalidRangeError
from labinsights.reference.biomarkers import GLUCOSE, HEMOGLOBIN, TOTAL_CHOLESTEROL
from labinsights.schemas.measurement import Classification, StatusEnum
from labinsights.services.status import apply_critical_tier, classify, classify_value, summarize


def test_value_inside_range_is_normal():
    result = classify(95, 70, 99)
    assert result.status == StatusEnum.NORMAL
    assert result.severity == "none"
    assert result.percent_from_range == 0


def test_value_above_range_reports_distance_from_max():
    result = classify(240, 125, 200)
    assert result.status == StatusEnum.ABOVE_RANGE
    assert result.percent_from_range == 20
    assert result.severity == "low"


def test_value_below_range_reports_distance_from_min():
    result = classify(11, 13.5, 17.5)
    assert result.status == StatusEnum.BELOW_RANGE
    assert result.percent_from_range == 19
    assert result.severity == "low"


def test_boundaries_are_in_range():
    assert classify(70, 70, 99).status == StatusEnum.BORDERLINE_LOW
    assert classify(99, 70, 99).status == StatusEnum.BORDERLINE_HIGH


def test_borderline_band_follows_settings(monkeypatch):
    monkeypatch.setattr(settings, "borderline_fraction", 0.0)
    assert classify(70, 70, 99).status == StatusEnum.NORMAL


def test_far_out_of_range_is_high_severity():
    result = classify(5, 13.5, 17.5)
    assert result.severity == "high"
    assert result.percent_from_range == 63


def test_non_positive_boundary_uses_full_distance():
    result = classify(-1, 0, 10)
    assert result.status == StatusEnum.BELOW_RANGE
    assert result.severity == "high"
    assert result.percent_from_range == 100


def test_zero_width_range():
    assert classify(5, 5, 5).status == StatusEnum.NORMAL


def test_missing_bound_is_unknown():
    result = classify(5, None, 10)
    assert result.status == StatusEnum.UNKNOWN
    assert result.severity == "none"


def test_inverted_range_raises():
    with pytest.raises(InvalidRangeError) as excinfo:
        classify(5, 10, 1)
    assert excinfo.value.code == "INVALID_RANGE"
    assert isinstance(excinfo.value, ValueError)


def test_critical_tier_is_strictly_above_threshold():
    assert classify_value(240, 125, 200).status == StatusEnum.ABOVE_RANGE
    assert classify_value(300, 125, 200).status == StatusEnum.CRITICAL_HIGH
    assert classify_value(5, 13.5, 17.5).status == StatusEnum.CRITICAL_LOW


def test_critical_tier_custom_threshold():
    base = Classification(status=StatusEnum.ABOVE_RANGE, severity="low", percent_from_range=20)
    assert apply_critical_tier(base, threshold=10).status == StatusEnum.CRITICAL_HIGH
    assert apply_critical_tier(base).status == StatusEnum.ABOVE_RANGE

    borderline = Classification(status=StatusEnum.BORDERLINE_HIGH, severity="minimal")
    assert apply_critical_tier(borderline, threshold=-1).status == StatusEnum.BORDERLINE_HIGH


def test_summarize_counts_each_bucket(marker):
    biomarkers = [
        marker(GLUCOSE, 85),
        marker(GLUCOSE, 98),
        marker(TOTAL_CHOLESTEROL, 240),
        marker(HEMOGLOBIN, 9),
    ]
    summary = summarize(biomarkers, pattern_count=2)

    assert summary.total == 4
    assert summary.normal == 1
    assert summary.borderline == 1
    assert summary.abnormal == 2
    assert summary.unknown == 0
    assert summary.pattern_count == 2
    assert {item.status for item in summary.abnormal_biomarkers} == {"above_range", "critical_low"}


def test_zero_floor_is_never_borderline_low():
    assert classify(0.2, 0.0, 3.0).status == StatusEnum.NORMAL
    assert classify(8, 0.0, 100.0).status == StatusEnum.NORMAL
    assert classify(0, 0.0, 150.0).status == StatusEnum.NORMAL
    assert classify(145, 0.0, 150.0).status == StatusEnum.BORDERLINE_HIGH


def test_negative_lower_bound_keeps_borderline_band():
    assert classify(-1.9, -2.0, 2.0).status == StatusEnum.BORDERLINE_LOW


def test_percent_rounds_half_up():
    assert classify(225, 100, 200).percent_from_range == 13
    assert classify(87.5, 100, 200).percent_from_range == 13
