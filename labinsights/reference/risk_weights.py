from dataclasses import dataclass
from typing import Any, Literal

from labinsights.reference.biomarkers import (
    FERRITIN,
    FOLATE,
    GLUCOSE,
    HBA1C,
    HDL,
    HEMOGLOBIN,
    HS_CRP,
    INSULIN,
    IRON,
    LDL,
    SYSTOLIC_BP,
    TOTAL_CHOLESTEROL,
    TRIGLYCERIDES,
    VITAMIN_B12,
    VITAMIN_D,
)


Operator = Literal[">=", ">", "<=", "<", "==", "in", "contains"]


@dataclass(frozen=True)
class Tier:
    op: Operator
    threshold: Any
    weight: float
    factor: str


@dataclass(frozen=True)
class ThresholdRule:
    """Tiers over the canonical value of one biomarker; the first matching tier counts."""
    code: str
    label: str
    tiers: tuple[Tier, ...]


@dataclass(frozen=True)
class StatusRule:
    """Fixed contribution when a biomarker is out of range in one direction."""
    code: str
    label: str
    direction: Literal["low", "high"]
    weight: float
    factor: str
    severe_weight: float | None = None


@dataclass(frozen=True)
class ProfileRule:
    attribute: str
    label: str
    tiers: tuple[Tier, ...]


RiskRule = ThresholdRule | StatusRule | ProfileRule


@dataclass(frozen=True)
class LevelThresholds:
    moderate: float = 0.3
    high: float = 0.7
    very_high: float | None = None

    def level_for(self, score: float) -> str:
        if self.very_high is not None and score >= self.very_high:
            return "very_high"
        if score >= self.high:
            return "high"
        if score >= self.moderate:
            return "moderate"
        return "low"


DEFAULT_THRESHOLDS = LevelThresholds()
QUARTILE_THRESHOLDS = LevelThresholds(moderate=0.25, high=0.5, very_high=0.75)


@dataclass(frozen=True)
class RiskCategory:
    name: str
    rules: tuple[RiskRule, ...]
    thresholds: LevelThresholds = DEFAULT_THRESHOLDS


_AGE_45 = Tier(">=", 45, 0.08, "Age 45 or older")
_OBESITY = Tier(">=", 30, 0.15, "Obesity (BMI 30 or higher)")


CARDIOVASCULAR = RiskCategory(
    name="cardiovascular",
    rules=(
        ThresholdRule(LDL, "LDL cholesterol", (
            Tier(">=", 190, 0.30, "Very high LDL cholesterol"),
            Tier(">=", 160, 0.20, "High LDL cholesterol"),
            Tier(">=", 130, 0.12, "Elevated LDL cholesterol"),
        )),
        ThresholdRule(HDL, "HDL cholesterol", (
            Tier("<", 40, 0.15, "Low HDL cholesterol"),
        )),
        ThresholdRule(TRIGLYCERIDES, "Triglycerides", (
            Tier(">=", 500, 0.20, "Very high triglycerides"),
            Tier(">=", 200, 0.15, "High triglycerides"),
            Tier(">=", 150, 0.08, "Borderline-high triglycerides"),
        )),
        ThresholdRule(TOTAL_CHOLESTEROL, "Total cholesterol", (
            Tier(">=", 240, 0.10, "High total cholesterol"),
            Tier(">=", 200, 0.05, "Borderline-high total cholesterol"),
        )),
        ThresholdRule(SYSTOLIC_BP, "Blood pressure", (
            Tier(">=", 140, 0.20, "Hypertension"),
            Tier(">=", 130, 0.10, "Elevated blood pressure"),
        )),
        ThresholdRule(HS_CRP, "hs-CRP", (
            Tier(">", 3, 0.08, "Elevated hs-CRP"),
        )),
        ProfileRule("age", "Age", (
            Tier(">=", 65, 0.15, "Age 65 or older"),
            _AGE_45,
        )),
        ProfileRule("sex", "Sex", (
            Tier("==", "male", 0.05, "Male sex"),
        )),
        ProfileRule("smoking", "Smoking status", (
            Tier("==", True, 0.15, "Current smoker"),
        )),
        ProfileRule("family_history", "Family history", (
            Tier("contains", "cardiovascular", 0.10, "Family history of cardiovascular disease"),
        )),
        ProfileRule("bmi", "BMI", (
            Tier(">=", 30, 0.05, "Obesity (BMI 30 or higher)"),
        )),
    ),
)

METABOLIC = RiskCategory(
    name="metabolic",
    rules=(
        ThresholdRule(HBA1C, "HbA1c", (
            Tier(">=", 6.5, 0.35, "HbA1c in diabetic range"),
            Tier(">=", 5.7, 0.20, "HbA1c in pre-diabetic range"),
        )),
        ThresholdRule(GLUCOSE, "Fasting glucose", (
            Tier(">=", 126, 0.30, "Fasting glucose in diabetic range"),
            Tier(">=", 100, 0.15, "Fasting glucose in pre-diabetic range"),
        )),
        ThresholdRule(INSULIN, "Fasting insulin", (
            Tier(">=", 25, 0.10, "Elevated fasting insulin"),
        )),
        ThresholdRule(TRIGLYCERIDES, "Triglycerides", (
            Tier(">=", 150, 0.05, "Elevated triglycerides"),
        )),
        ThresholdRule(HDL, "HDL cholesterol", (
            Tier("<", 40, 0.05, "Low HDL cholesterol"),
        )),
        ProfileRule("bmi", "BMI", (
            _OBESITY,
            Tier(">=", 25, 0.08, "Overweight (BMI 25 or higher)"),
        )),
        ProfileRule("age", "Age", (_AGE_45,)),
        ProfileRule("family_history", "Family history", (
            Tier("contains", "diabetes", 0.10, "Family history of diabetes"),
        )),
        ProfileRule("activity_level", "Physical activity", (
            Tier("==", "low", 0.07, "Low physical activity"),
        )),
    ),
)

NUTRITIONAL = RiskCategory(
    name="nutritional",
    thresholds=QUARTILE_THRESHOLDS,
    rules=(
        ThresholdRule(VITAMIN_D, "Vitamin D", (
            Tier("<", 20, 0.30, "Vitamin D deficiency"),
            Tier("<", 30, 0.15, "Vitamin D insufficiency"),
        )),
        StatusRule(VITAMIN_B12, "Vitamin B12", "low", 0.20, "Low vitamin B12", severe_weight=0.30),
        StatusRule(FOLATE, "Folate", "low", 0.15, "Low folate"),
        StatusRule(FERRITIN, "Ferritin", "low", 0.20, "Low ferritin (depleted iron stores)"),
        StatusRule(IRON, "Iron", "low", 0.15, "Low serum iron"),
        StatusRule(HEMOGLOBIN, "Hemoglobin", "low", 0.10, "Low hemoglobin"),
        ProfileRule("diet", "Diet", (
            Tier("in", frozenset({"vegan", "vegetarian"}), 0.10, "Plant-based diet"),
        )),
        ProfileRule("sun_exposure", "Sun exposure", (
            Tier("==", "low", 0.05, "Low sun exposure"),
        )),
    ),
)


RISK_CATEGORIES = [CARDIOVASCULAR, METABOLIC, NUTRITIONAL]

CATEGORY_ALIASES = {
    "cardiac": "cardiovascular",
    "heart": "cardiovascular",
    "diabetes": "metabolic",
    "nutrition": "nutritional",
}
