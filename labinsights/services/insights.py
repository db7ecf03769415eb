from collections.abc import Iterable

from labinsights.config import settings
from labinsights.schemas.analysis import CorrelationEdge, Insight, Pattern, TrendResult
from labinsights.services.correlation import significant_correlations

_STRENGTH_ORDER = {"high": 2, "medium": 1, "low": 0}


def _pattern_insights(patterns: Iterable[Pattern]) -> list[Insight]:
    return [
        Insight(
            kind="pattern",
            title=pattern.name,
            strength=pattern.confidence,
            biomarker_codes=list(pattern.biomarker_codes),
            score=float(len(pattern.biomarker_codes)),
        )
        for pattern in patterns
    ]


def _correlation_insights(edges: Iterable[CorrelationEdge]) -> list[Insight]:
    insights = []
    for edge in edges:
        strength = "high" if abs(edge.coefficient) >= settings.insight_strong_correlation else "medium"
        insights.append(
            Insight(
                kind="correlation",
                title=f"{edge.relationship.capitalize()} relationship between {edge.code_a} and {edge.code_b}",
                strength=strength,
                biomarker_codes=[edge.code_a, edge.code_b],
                score=abs(edge.coefficient),
                expected=edge.expected,
            )
        )
    return insights


def _trend_insights(trends: Iterable[TrendResult]) -> list[Insight]:
    insights = []
    for result in trends:
        if not result.significant:
            continue
        strength = "high" if abs(result.slope) >= settings.insight_strong_slope else "medium"
        verb = "Rising" if result.direction == "increasing" else "Declining"
        insights.append(
            Insight(
                kind="trend",
                title=f"{verb} {result.code} levels ({result.percent_change:+.1f}% over {result.time_span_days:.0f} days)",
                strength=strength,
                biomarker_codes=[result.code],
                score=abs(result.slope),
            )
        )
    return insights


def _combined_insights(edges: Iterable[CorrelationEdge], trends: Iterable[TrendResult]) -> list[Insight]:
    by_code = {result.code: result for result in trends if result.significant}
    insights = []
    for edge in edges:
        first = by_code.get(edge.code_a)
        second = by_code.get(edge.code_b)
        if first is None or second is None:
            continue
        insights.append(
            Insight(
                kind="combined",
                title=(
                    f"{edge.code_a} and {edge.code_b} changing together "
                    f"({first.direction} and {second.direction}, {edge.relationship})"
                ),
                strength="high",
                biomarker_codes=[edge.code_a, edge.code_b],
                score=abs(edge.coefficient),
                expected=edge.expected,
            )
        )
    return insights


def compose_insights(
    patterns: Iterable[Pattern] = (),
    correlations: Iterable[CorrelationEdge] = (),
    trends: Iterable[TrendResult] = (),
) -> list[Insight]:
    """Merge pattern, correlation and trend facts into one ranked, deduplicated list.

    Only significant correlations are considered. Duplicates share a kind and
    the same set of biomarker codes; the first one seen is kept.
    """
    significant = significant_correlations(correlations)
    trend_list = list(trends)
    candidates = (
        _pattern_insights(patterns)
        + _combined_insights(significant, trend_list)
        + _correlation_insights(significant)
        + _trend_insights(trend_list)
    )

    seen = set()
    unique = []
    for insight in candidates:
        key = (insight.kind, frozenset(insight.biomarker_codes))
        if key in seen:
            continue
        seen.add(key)
        unique.append(insight)

    return sorted(unique, key=lambda insight: (_STRENGTH_ORDER[insight.strength], insight.score), reverse=True)
