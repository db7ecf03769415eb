from labinsights.services.correlation import correlate, pearson_correlation, significant_correlations
from labinsights.services.insights import compose_insights
from labinsights.services.normalizer import convert_unit, normalize, normalize_many
from labinsights.services.patterns import PATTERN_RULES, PatternRule, detect_patterns, register_pattern_rule
from labinsights.services.pipeline import analyze_history, build_series, evaluate_report
from labinsights.services.risk import assess_all, score
from labinsights.services.status import apply_critical_tier, classify, classify_value, summarize
from labinsights.services.trend_analyzer import analyze_trends, trend

__all__ = [
    "PATTERN_RULES",
    "PatternRule",
    "analyze_history",
    "analyze_trends",
    "apply_critical_tier",
    "assess_all",
    "build_series",
    "classify",
    "classify_value",
    "compose_insights",
    "convert_unit",
    "correlate",
    "detect_patterns",
    "evaluate_report",
    "normalize",
    "normalize_many",
    "pearson_correlation",
    "register_pattern_rule",
    "score",
    "significant_correlations",
    "summarize",
    "trend",
]
