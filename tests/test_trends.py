from datetime import date, datetime, timedelta, timezone

import pytest

from labinsights.config import settings
from labinsights.reference.biomarkers import GLUCOSE, HDL
from labinsights.schemas.measurement import SeriesPoint
from labinsights.services.trend_analyzer import analyze_trends, as_datetime, compute_delta, trend


def test_compute_delta():
    assert compute_delta(100, 110) == pytest.approx(10.0)
    assert compute_delta(-50, -25) == pytest.approx(50.0)
    assert compute_delta(0, 10) is None
    assert compute_delta(None, 10) is None


def test_increasing_trend_over_days():
    series = [(date(2024, 1, 1), 90), (date(2024, 1, 11), 100), (date(2024, 1, 21), 110)]
    result = trend(GLUCOSE, series)

    assert result.slope == pytest.approx(1.0)
    assert result.intercept == pytest.approx(90.0)
    assert result.r_squared == pytest.approx(1.0)
    assert result.direction == "increasing"
    assert result.significant is True
    assert result.sample_count == 3
    assert result.time_span_days == pytest.approx(20.0)
    assert result.percent_change == pytest.approx(22.222, abs=1e-3)
    assert (result.first_value, result.last_value) == (90, 110)
    assert (result.start, result.end) == (date(2024, 1, 1), date(2024, 1, 21))


def test_unsorted_input_is_ordered_by_date():
    series = [
        SeriesPoint(collected_at=date(2024, 3, 1), value=40),
        SeriesPoint(collected_at=date(2024, 1, 1), value=60),
        SeriesPoint(collected_at=date(2024, 2, 1), value=50),
    ]
    result = trend(HDL, series)
    assert result.direction == "decreasing"
    assert result.first_value == 60
    assert result.start == date(2024, 1, 1)


def test_slow_change_is_not_significant():
    series = [(date(2024, 1, 1), 90), (date(2024, 12, 31), 95)]
    result = trend(GLUCOSE, series)
    assert result.direction == "increasing"
    assert result.significant is False


def test_slope_threshold_comes_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "trend_slope_threshold", 0.01)
    series = [(date(2024, 1, 1), 90), (date(2024, 12, 31), 95)]
    assert trend(GLUCOSE, series).significant is True


def test_flat_series_is_stable_with_perfect_fit():
    result = trend(GLUCOSE, [(date(2024, 1, 1), 95), (date(2024, 2, 1), 95), (date(2024, 3, 1), 95)])
    assert result.slope == 0.0
    assert result.direction == "stable"
    assert result.r_squared == 1.0
    assert result.percent_change == 0.0


def test_identical_timestamps_give_zero_slope():
    when = datetime(2024, 1, 1, 9, 0)
    result = trend(GLUCOSE, [(when, 90), (when, 100)])
    assert result.slope == 0.0
    assert result.r_squared == 0.0
    assert result.intercept == pytest.approx(95.0)


def test_single_point_yields_no_trend():
    assert trend(GLUCOSE, [(date(2024, 1, 1), 90)]) is None


def test_min_points_setting(monkeypatch):
    monkeypatch.setattr(settings, "trend_min_points", 3)
    assert trend(GLUCOSE, [(date(2024, 1, 1), 90), (date(2024, 1, 2), 91)]) is None


def test_aware_datetimes_are_compared_in_utc():
    plus_two = timezone(timedelta(hours=2))
    assert as_datetime(datetime(2024, 1, 1, 2, 0, tzinfo=plus_two)) == datetime(2024, 1, 1, 0, 0)
    assert as_datetime(date(2024, 1, 1)) == datetime(2024, 1, 1)


def test_analyze_trends_skips_short_series():
    results = analyze_trends(
        {
            GLUCOSE: [(date(2024, 1, 1), 90), (date(2024, 1, 11), 100)],
            HDL: [(date(2024, 1, 1), 50)],
        }
    )
    assert [result.code for result in results] == [GLUCOSE]


def test_decimal_constant_series_is_stable():
    days = [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 3)]
    for value in (0.1, 0.7, 13.3):
        result = trend(GLUCOSE, [(day, value) for day in days])
        assert result.slope == 0.0
        assert result.direction == "stable"
        assert result.r_squared == 1.0
        assert result.intercept == value
        assert result.significant is False
