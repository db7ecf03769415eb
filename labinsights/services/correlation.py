import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from labinsights.config import settings
from labinsights.reference.store import ReferenceData, get_reference_data
from labinsights.schemas.analysis import CorrelationEdge
from labinsights.services.trend_analyzer import SeriesInput, as_datetime, coerce_series

logger = logging.getLogger(__name__)


def pearson_correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson r from centered sums; 0.0 when either side has no variance."""
    if len(xs) != len(ys):
        raise ValueError(f"Cannot correlate sequences of different lengths ({len(xs)} and {len(ys)})")
    n = len(xs)
    if n < 2 or min(xs) == max(xs) or min(ys) == max(ys):
        return 0.0

    mean_x = sum(xs) / n
    mean_y = sum(ys) / n
    covariance = 0.0
    var_x = 0.0
    var_y = 0.0
    for x, y in zip(xs, ys):
        dx = x - mean_x
        dy = y - mean_y
        covariance += dx * dy
        var_x += dx * dx
        var_y += dy * dy

    if var_x == 0 or var_y == 0:
        return 0.0
    r = covariance / math.sqrt(var_x * var_y)
    return max(-1.0, min(1.0, r))


def describe_relationship(coefficient: float) -> str:
    strength = abs(coefficient)
    if strength >= 0.8:
        label = "strong"
    elif strength >= 0.5:
        label = "moderate"
    elif strength >= 0.3:
        label = "weak"
    else:
        return "none"
    return f"{label} {'positive' if coefficient > 0 else 'negative'}"


def _by_calendar_date(series: SeriesInput) -> dict[date, float]:
    by_date: dict[date, float] = {}
    for when, value in sorted(coerce_series(series), key=lambda point: as_datetime(point[0])):
        by_date[as_datetime(when).date()] = value
    return by_date


def pair_series(series_a: SeriesInput, series_b: SeriesInput) -> list[tuple[date, float, float]]:
    """Pair two series on exact calendar date; no tolerance window is applied."""
    a = _by_calendar_date(series_a)
    b = _by_calendar_date(series_b)
    return [(day, a[day], b[day]) for day in sorted(a.keys() & b.keys())]


def correlate(
    series_by_code: Mapping[str, SeriesInput],
    min_pairs: int | None = None,
    reference: ReferenceData | None = None,
) -> list[CorrelationEdge]:
    """Pearson correlation for every unordered pair of codes with enough same-day samples."""
    ref = reference or get_reference_data()
    required = max(settings.correlation_min_pairs if min_pairs is None else min_pairs, 3)
    series = {code: coerce_series(points) for code, points in series_by_code.items()}
    codes = [code for code, points in series.items() if points]

    edges = []
    for i, code_a in enumerate(codes):
        for code_b in codes[i + 1:]:
            paired = pair_series(series[code_a], series[code_b])
            if len(paired) < required:
                logger.debug("Skipping %s/%s: %d paired sample(s)", code_a, code_b, len(paired))
                continue
            coefficient = pearson_correlation([a for _, a, _ in paired], [b for _, _, b in paired])
            relationship = describe_relationship(coefficient)
            expected = ref.relationship_direction(code_a, code_b)
            edges.append(
                CorrelationEdge(
                    code_a=code_a,
                    code_b=code_b,
                    coefficient=coefficient,
                    paired_sample_count=len(paired),
                    relationship=relationship,
                    expected=expected is not None and relationship.endswith(expected),
                )
            )
    return edges


def significant_correlations(
    edges: Iterable[CorrelationEdge],
    min_coefficient: float | None = None,
    min_pairs: int | None = None,
) -> list[CorrelationEdge]:
    threshold = settings.correlation_significance_threshold if min_coefficient is None else min_coefficient
    required = settings.correlation_min_pairs if min_pairs is None else min_pairs
    return [
        edge for edge in edges
        if abs(edge.coefficient) >= threshold and edge.paired_sample_count >= required
    ]
