import logging
from collections.abc import Iterable, Mapping
from typing import Any

from labinsights.reference.risk_weights import ProfileRule, RiskCategory, StatusRule, ThresholdRule, Tier
from labinsights.reference.store import ReferenceData, get_reference_data, normalize_unit_key
from labinsights.schemas.analysis import RiskAssessment, RiskReport
from labinsights.schemas.measurement import NormalizedBiomarker, RiskProfile
from labinsights.services.patterns import build_lookup

logger = logging.getLogger(__name__)

LEVEL_ORDER = ("low", "moderate", "high", "very_high")
NO_PROFILE = "No demographic or lifestyle profile provided"


def _compare(op: str, actual: Any, threshold: Any) -> bool:
    if op == ">=":
        return actual >= threshold
    if op == ">":
        return actual > threshold
    if op == "<=":
        return actual <= threshold
    if op == "<":
        return actual < threshold
    if op == "==":
        return actual == threshold
    if op == "in":
        return actual in threshold
    if op == "contains":
        return threshold in actual
    raise ValueError(f"Unsupported risk rule operator {op!r}")


def _first_tier(tiers: Iterable[Tier], actual: Any) -> Tier | None:
    for tier in tiers:
        if _compare(tier.op, actual, tier.threshold):
            return tier
    return None


class _Evaluation:
    def __init__(self) -> None:
        self.contributions: list[tuple[float, str]] = []
        self.limitations: list[str] = []
        self.inputs: dict[tuple[str, str], bool] = {}

    def record(self, key: tuple[str, str], available: bool, limitation: str | None = None) -> None:
        seen = self.inputs.get(key)
        self.inputs[key] = bool(seen) or available
        if not available and seen is None and limitation:
            self.limitations.append(limitation)


def _in_canonical_unit(marker: NormalizedBiomarker, reference: ReferenceData) -> bool:
    definition = reference.definition(marker.code)
    return definition is not None and normalize_unit_key(marker.unit) == normalize_unit_key(definition.unit)


def _apply_biomarker_rule(
    rule: ThresholdRule | StatusRule,
    markers: Mapping[str, NormalizedBiomarker],
    reference: ReferenceData,
    state: _Evaluation,
) -> None:
    marker = markers.get(rule.code)
    key = ("biomarker", rule.code)
    if marker is None:
        state.record(key, False, f"{rule.label} result not available")
        return

    if isinstance(rule, ThresholdRule):
        if not _in_canonical_unit(marker, reference):
            state.record(key, False, f"{rule.label} reported in unsupported unit '{marker.unit}'")
            return
        state.record(key, True)
        tier = _first_tier(rule.tiers, marker.value)
        if tier is not None:
            state.contributions.append((tier.weight, tier.factor))
        return

    state.record(key, True)
    triggered = marker.status.is_low if rule.direction == "low" else marker.status.is_high
    if triggered:
        weight = rule.severe_weight if rule.severe_weight is not None and marker.severity == "high" else rule.weight
        state.contributions.append((weight, rule.factor))


def _apply_profile_rule(rule: ProfileRule, profile: RiskProfile | None, state: _Evaluation) -> None:
    key = ("profile", rule.attribute)
    if profile is None:
        state.record(key, False)
        return
    actual = getattr(profile, rule.attribute, None)
    if actual is None:
        state.record(key, False, f"{rule.label} not provided")
        return
    state.record(key, True)
    tier = _first_tier(rule.tiers, actual)
    if tier is not None:
        state.contributions.append((tier.weight, tier.factor))


def _evaluate(
    category: RiskCategory,
    biomarkers: Iterable[NormalizedBiomarker],
    profile: RiskProfile | None,
    reference: ReferenceData,
) -> RiskAssessment:
    markers = build_lookup(biomarkers)
    state = _Evaluation()
    for rule in category.rules:
        if isinstance(rule, ProfileRule):
            _apply_profile_rule(rule, profile, state)
        else:
            _apply_biomarker_rule(rule, markers, reference, state)

    if profile is None and any(kind == "profile" for kind, _ in state.inputs):
        state.limitations.append(NO_PROFILE)

    total = sum(weight for weight, _ in state.contributions)
    score = round(min(1.0, max(0.0, total)), 4)
    ordered = sorted(state.contributions, key=lambda item: -item[0])
    available = sum(state.inputs.values())
    completeness = available / len(state.inputs) if state.inputs else 0.0

    return RiskAssessment(
        category=category.name,
        score=score,
        level=category.thresholds.level_for(score),
        factors=[factor for _, factor in ordered],
        limitations=state.limitations,
        data_completeness=round(completeness, 4),
    )


def score(
    category: str,
    biomarkers: Iterable[NormalizedBiomarker],
    profile: RiskProfile | None = None,
    reference: ReferenceData | None = None,
) -> RiskAssessment:
    """Weighted, clamped risk score for one category.

    Missing inputs never block scoring; they are listed in ``limitations``.
    """
    ref = reference or get_reference_data()
    config = ref.risk_category(category)
    if config is None:
        raise ValueError(f"Unknown risk category {category!r}; expected one of {sorted(ref.risk_categories)}")
    assessment = _evaluate(config, biomarkers, profile, ref)
    logger.debug("Risk %s: score %.2f (%s)", assessment.category, assessment.score, assessment.level)
    return assessment


def assess_all(
    biomarkers: Iterable[NormalizedBiomarker],
    profile: RiskProfile | None = None,
    reference: ReferenceData | None = None,
) -> RiskReport:
    ref = reference or get_reference_data()
    markers = list(biomarkers)
    assessments = {
        name: _evaluate(config, markers, profile, ref)
        for name, config in ref.risk_categories.items()
    }
    overall = max((assessment.level for assessment in assessments.values()), key=LEVEL_ORDER.index, default="low")
    return RiskReport(
        assessments=assessments,
        overall_level=overall,
        urgent_action=overall in ("high", "very_high"),
    )
