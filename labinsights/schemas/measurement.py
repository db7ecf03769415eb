from datetime import date, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


Severity = Literal["none", "minimal", "low", "high"]


class StatusEnum(str, Enum):
    NORMAL = "normal"
    BORDERLINE_LOW = "borderline_low"
    BORDERLINE_HIGH = "borderline_high"
    BELOW_RANGE = "below_range"
    ABOVE_RANGE = "above_range"
    CRITICAL_LOW = "critical_low"
    CRITICAL_HIGH = "critical_high"
    UNKNOWN = "unknown"

    @property
    def is_low(self) -> bool:
        return self in (StatusEnum.BELOW_RANGE, StatusEnum.CRITICAL_LOW)

    @property
    def is_high(self) -> bool:
        return self in (StatusEnum.ABOVE_RANGE, StatusEnum.CRITICAL_HIGH)

    @property
    def is_abnormal(self) -> bool:
        return self.is_low or self.is_high

    @property
    def is_borderline(self) -> bool:
        return self in (StatusEnum.BORDERLINE_LOW, StatusEnum.BORDERLINE_HIGH)


class RawMeasurement(BaseModel):
    """Single name/value/unit triple as extracted from a lab report."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Biomarker name as printed on the report")
    value: float = Field(description="Measured value in the reported unit")
    unit: str = Field(default="", description="Unit as printed on the report")
    reference_min: float | None = Field(default=None, description="Lower reference bound, reported unit")
    reference_max: float | None = Field(default=None, description="Upper reference bound, reported unit")
    collected_at: date | datetime | None = Field(default=None, description="Sample collection date")


class Demographics(BaseModel):
    """Attributes used to select demographic reference ranges."""
    age: float | None = Field(default=None, ge=0)
    sex: Literal["male", "female"] | None = None

    @field_validator("sex", mode="before")
    @classmethod
    def _lower_sex(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            return {"m": "male", "f": "female"}.get(value, value) or None
        return value


class RiskProfile(Demographics):
    """Demographic and lifestyle inputs for risk scoring."""
    smoking: bool | None = None
    family_history: set[str] = Field(default_factory=set)
    bmi: float | None = Field(default=None, gt=0)
    activity_level: Literal["low", "moderate", "high"] | None = None
    diet: str | None = None
    sun_exposure: Literal["low", "moderate", "high"] | None = None

    @field_validator("family_history", mode="before")
    @classmethod
    def _flatten_family_history(cls, value):
        if value is None:
            return set()
        if isinstance(value, dict):
            value = [key for key, present in value.items() if present]
        return {str(item).strip().lower() for item in value}

    @field_validator("diet", mode="before")
    @classmethod
    def _lower_diet(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class Classification(BaseModel):
    status: StatusEnum
    severity: Severity = "none"
    percent_from_range: int = 0


class NormalizedBiomarker(BaseModel):
    """Biomarker mapped to its canonical code, unit and reference range."""
    code: str | None = Field(default=None, description="Canonical code, None when the name is unresolved")
    canonical_name: str
    category: str
    value: float
    unit: str
    reference_min: float | None = None
    reference_max: float | None = None
    status: StatusEnum = StatusEnum.UNKNOWN
    severity: Severity = "none"
    percent_from_range: int = 0

    original_name: str
    original_value: float
    original_unit: str
    standardized: bool = False
    collected_at: date | datetime | None = None
    warnings: list[str] = Field(default_factory=list)


class SeriesPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    collected_at: date | datetime
    value: float
