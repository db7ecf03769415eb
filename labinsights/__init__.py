"""Lab report normalization, pattern detection, risk scoring and trend analysis."""
from labinsights.exceptions import InvalidRangeError, LabInsightsError, ReferenceDataError
from labinsights.services.pipeline import analyze_history, build_series, evaluate_report

__version__ = "0.1.0"

__all__ = [
    "InvalidRangeError",
    "LabInsightsError",
    "ReferenceDataError",
    "analyze_history",
    "build_series",
    "evaluate_report",
]
