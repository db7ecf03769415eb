from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from labinsights.schemas.measurement import NormalizedBiomarker


Confidence = Literal["low", "medium", "high"]
RiskLevel = Literal["low", "moderate", "high", "very_high"]
Direction = Literal["increasing", "decreasing", "stable"]


class Pattern(BaseModel):
    """Named combination of biomarker abnormalities found in one snapshot."""
    rule_id: str
    name: str
    description: str
    confidence: Confidence
    biomarker_codes: list[str]
    note: str = ""


class CorrelationEdge(BaseModel):
    code_a: str
    code_b: str
    coefficient: float = Field(ge=-1.0, le=1.0)
    paired_sample_count: int = Field(ge=3)
    relationship: str
    expected: bool = False


class TrendResult(BaseModel):
    code: str
    slope: float
    intercept: float
    r_squared: float = Field(ge=0.0, le=1.0)
    percent_change: float
    direction: Direction
    significant: bool
    sample_count: int
    time_span_days: float
    first_value: float
    last_value: float
    start: date | datetime
    end: date | datetime


class RiskAssessment(BaseModel):
    category: str
    score: float = Field(ge=0.0, le=1.0)
    level: RiskLevel
    factors: list[str] = Field(default_factory=list)
    limitations: list[str] = Field(default_factory=list)
    data_completeness: float = Field(default=1.0, ge=0.0, le=1.0)


class RiskReport(BaseModel):
    assessments: dict[str, RiskAssessment]
    overall_level: RiskLevel
    urgent_action: bool


class Insight(BaseModel):
    kind: Literal["pattern", "correlation", "trend", "combined"]
    title: str
    strength: Confidence
    biomarker_codes: list[str]
    score: float = 0.0
    expected: bool = False


class AbnormalBiomarker(BaseModel):
    code: str | None
    name: str
    value: float
    unit: str
    status: str


class ReportSummary(BaseModel):
    total: int = 0
    normal: int = 0
    borderline: int = 0
    abnormal: int = 0
    unknown: int = 0
    pattern_count: int = 0
    abnormal_biomarkers: list[AbnormalBiomarker] = Field(default_factory=list)


class ReportEvaluation(BaseModel):
    biomarkers: list[NormalizedBiomarker]
    patterns: list[Pattern]
    risks: RiskReport
    summary: ReportSummary
    warnings: list[str] = Field(default_factory=list)


class HistoryAnalysis(BaseModel):
    correlations: list[CorrelationEdge]
    significant_correlations: list[CorrelationEdge]
    trends: list[TrendResult]
    insights: list[Insight]
    message: str
