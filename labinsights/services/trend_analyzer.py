import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone

from labinsights.config import settings
from labinsights.schemas.analysis import TrendResult
from labinsights.schemas.measurement import SeriesPoint

logger = logging.getLogger(__name__)

SeriesInput = Iterable[SeriesPoint | tuple[date | datetime, float]]

SECONDS_PER_DAY = 86400.0


def coerce_series(series: SeriesInput) -> list[tuple[date | datetime, float]]:
    points = []
    for point in series:
        if isinstance(point, SeriesPoint):
            points.append((point.collected_at, float(point.value)))
        else:
            when, value = point
            points.append((when, float(value)))
    return points


def as_datetime(when: date | datetime) -> datetime:
    if isinstance(when, datetime):
        if when.tzinfo is None:
            return when
        # aware values are compared as naive UTC so they mix with plain dates
        return when.astimezone(timezone.utc).replace(tzinfo=None)
    return datetime(when.year, when.month, when.day)


def compute_delta(prev: float | None, curr: float | None) -> float | None:
    if prev is None or curr is None or prev == 0:
        return None
    return ((curr - prev) / abs(prev)) * 100.0


def trend(code: str, series: SeriesInput) -> TrendResult | None:
    """Least-squares line of value against days since the first sample.

    Returns None below ``settings.trend_min_points`` samples. ``significant``
    compares the raw slope (unit per day) with a single fixed threshold, so it
    is only meaningful relative to the biomarker's own scale.
    """
    points = sorted(coerce_series(series), key=lambda point: as_datetime(point[0]))
    n = len(points)
    if n < max(settings.trend_min_points, 2):
        logger.debug("Skipping trend for %s: %d sample(s)", code, n)
        return None

    origin = as_datetime(points[0][0])
    xs = [(as_datetime(when) - origin).total_seconds() / SECONDS_PER_DAY for when, _ in points]
    ys = [value for _, value in points]

    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_xx = sum(x * x for x in xs)
    mean_y = sum_y / n

    ss_tot = sum((y - mean_y) ** 2 for y in ys)
    denominator = n * sum_xx - sum_x * sum_x
    # compare values directly; a float mean leaves residue in ss_tot for values like 0.1
    if min(ys) == max(ys):
        slope, intercept, r_squared = 0.0, ys[0], 1.0
    elif xs[-1] == xs[0]:
        # every sample shares one timestamp
        slope, intercept, r_squared = 0.0, mean_y, 0.0
    else:
        slope = (n * sum_xy - sum_x * sum_y) / denominator
        intercept = (sum_y - slope * sum_x) / n
        ss_res = sum((y - (slope * x + intercept)) ** 2 for x, y in zip(xs, ys))
        r_squared = min(1.0, max(0.0, 1 - ss_res / ss_tot))

    first, last = ys[0], ys[-1]
    percent_change = compute_delta(first, last)
    if slope > 0:
        direction = "increasing"
    elif slope < 0:
        direction = "decreasing"
    else:
        direction = "stable"

    return TrendResult(
        code=code,
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        percent_change=percent_change if percent_change is not None else 0.0,
        direction=direction,
        significant=abs(slope) >= settings.trend_slope_threshold,
        sample_count=n,
        time_span_days=xs[-1],
        first_value=first,
        last_value=last,
        start=points[0][0],
        end=points[-1][0],
    )


def analyze_trends(series_by_code: Mapping[str, SeriesInput]) -> list[TrendResult]:
    results = []
    for code, series in series_by_code.items():
        result = trend(code, series)
        if result is not None:
            results.append(result)
    return results
