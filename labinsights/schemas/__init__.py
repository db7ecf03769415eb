from labinsights.schemas.analysis import (
    AbnormalBiomarker,
    CorrelationEdge,
    HistoryAnalysis,
    Insight,
    Pattern,
    ReportEvaluation,
    ReportSummary,
    RiskAssessment,
    RiskReport,
    TrendResult,
)
from labinsights.schemas.measurement import (
    Classification,
    Demographics,
    NormalizedBiomarker,
    RawMeasurement,
    RiskProfile,
    SeriesPoint,
    StatusEnum,
)

__all__ = [
    "AbnormalBiomarker",
    "Classification",
    "CorrelationEdge",
    "Demographics",
    "HistoryAnalysis",
    "Insight",
    "NormalizedBiomarker",
    "Pattern",
    "RawMeasurement",
    "ReportEvaluation",
    "ReportSummary",
    "RiskAssessment",
    "RiskProfile",
    "RiskReport",
    "SeriesPoint",
    "StatusEnum",
    "TrendResult",
]
