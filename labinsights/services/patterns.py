"""
Multi-biomarker pattern rules.

Each rule is an independent predicate+builder over a code -> biomarker map
and returns a Pattern or None. All registered rules run on every snapshot and
several may fire; output order follows registry order, not clinical priority.

Adding a rule:
    1. Write ``def _my_rule(markers: Mapping[str, NormalizedBiomarker]) -> Pattern | None``
    2. Append ``PatternRule("my_rule", _my_rule)`` to PATTERN_RULES, or pass
       ``register_pattern_rule(PatternRule(...))`` as ``rules=``.
"""
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from labinsights.reference.biomarkers import (
    BUN,
    CREATININE,
    EGFR,
    FREE_T4,
    GLUCOSE,
    HDL,
    HEMATOCRIT,
    HEMOGLOBIN,
    LDL,
    MCV,
    TRIGLYCERIDES,
    TSH,
)
from labinsights.schemas.analysis import Pattern
from labinsights.schemas.measurement import NormalizedBiomarker

logger = logging.getLogger(__name__)

BiomarkerMap = Mapping[str, NormalizedBiomarker]


@dataclass(frozen=True)
class PatternRule:
    rule_id: str
    evaluate: Callable[[BiomarkerMap], Pattern | None]


def _is_low(markers: BiomarkerMap, code: str) -> bool:
    marker = markers.get(code)
    return marker is not None and marker.status.is_low


def _is_high(markers: BiomarkerMap, code: str) -> bool:
    marker = markers.get(code)
    return marker is not None and marker.status.is_high


def _anemia(markers: BiomarkerMap) -> Pattern | None:
    if not _is_low(markers, HEMOGLOBIN):
        return None

    codes = [HEMOGLOBIN]
    confidence = "medium"
    description = "Low hemoglobin, which may indicate anemia."
    if _is_low(markers, HEMATOCRIT):
        codes.append(HEMATOCRIT)
        confidence = "high"
        description = "Low hemoglobin and hematocrit, which may indicate anemia."

    note = ""
    if _is_low(markers, MCV):
        codes.append(MCV)
        note = "microcytic, suggests iron deficiency"
        description += " Low MCV points to a microcytic picture, often associated with iron deficiency."
    elif _is_high(markers, MCV):
        codes.append(MCV)
        note = "macrocytic, suggests B12/folate deficiency"
        description += " High MCV points to a macrocytic picture, often associated with vitamin B12 or folate deficiency."

    return Pattern(
        rule_id="anemia",
        name="Potential Anemia Pattern",
        description=description,
        confidence=confidence,
        biomarker_codes=codes,
        note=note,
    )


_METABOLIC_FACTORS = (
    (GLUCOSE, _is_high),
    (TRIGLYCERIDES, _is_high),
    (HDL, _is_low),
    (LDL, _is_high),
)


def _metabolic_risk(markers: BiomarkerMap) -> Pattern | None:
    present = [code for code, check in _METABOLIC_FACTORS if check(markers, code)]
    if len(present) < 2:
        return None

    names = ", ".join(markers[code].canonical_name for code in present)
    return Pattern(
        rule_id="metabolic_risk",
        name="Potential Metabolic Risk Pattern",
        description=f"{len(present)} findings associated with metabolic risk: {names}.",
        confidence="high" if len(present) >= 3 else "medium",
        biomarker_codes=present,
        note=f"{len(present)} of {len(_METABOLIC_FACTORS)} metabolic factors present",
    )


def _thyroid_dysregulation(markers: BiomarkerMap) -> Pattern | None:
    if _is_high(markers, TSH):
        if _is_low(markers, FREE_T4):
            return Pattern(
                rule_id="thyroid_dysregulation",
                name="Possible Hypothyroid Pattern",
                description="Elevated TSH with low Free T4, which may be consistent with hypothyroidism.",
                confidence="high",
                biomarker_codes=[TSH, FREE_T4],
                note="hypothyroid",
            )
        return Pattern(
            rule_id="thyroid_dysregulation",
            name="Elevated TSH Pattern",
            description="Elevated TSH, which may indicate the thyroid is being stimulated to produce more hormone.",
            confidence="medium",
            biomarker_codes=[TSH],
        )

    if _is_low(markers, TSH):
        if _is_high(markers, FREE_T4):
            return Pattern(
                rule_id="thyroid_dysregulation",
                name="Possible Hyperthyroid Pattern",
                description="Low TSH with high Free T4, which may be consistent with hyperthyroidism.",
                confidence="high",
                biomarker_codes=[TSH, FREE_T4],
                note="hyperthyroid",
            )
        return Pattern(
            rule_id="thyroid_dysregulation",
            name="Low TSH Pattern",
            description="Low TSH, which may indicate reduced thyroid stimulation.",
            confidence="medium",
            biomarker_codes=[TSH],
        )
    return None


def _renal_impairment(markers: BiomarkerMap) -> Pattern | None:
    if not _is_high(markers, CREATININE):
        return None

    codes = [CREATININE]
    findings = ["elevated creatinine"]
    if _is_high(markers, BUN):
        codes.append(BUN)
        findings.append("elevated BUN")
    if _is_low(markers, EGFR):
        codes.append(EGFR)
        findings.append("reduced eGFR")

    if len(findings) > 1:
        joined = ", ".join(findings[:-1]) + " and " + findings[-1]
    else:
        joined = findings[0]
    return Pattern(
        rule_id="renal_impairment",
        name="Potential Renal Impairment Pattern",
        description=f"{joined[0].upper()}{joined[1:]}, which may indicate reduced kidney function.",
        confidence="high" if len(codes) > 1 else "medium",
        biomarker_codes=codes,
    )


PATTERN_RULES: tuple[PatternRule, ...] = (
    PatternRule("anemia", _anemia),
    PatternRule("metabolic_risk", _metabolic_risk),
    PatternRule("thyroid_dysregulation", _thyroid_dysregulation),
    PatternRule("renal_impairment", _renal_impairment),
)


def register_pattern_rule(rule: PatternRule, rules: tuple[PatternRule, ...] = PATTERN_RULES) -> tuple[PatternRule, ...]:
    """Return a new registry with ``rule`` appended, replacing any rule with the same id."""
    return tuple(existing for existing in rules if existing.rule_id != rule.rule_id) + (rule,)


def build_lookup(biomarkers: Iterable[NormalizedBiomarker]) -> dict[str, NormalizedBiomarker]:
    # later entries win when a code appears twice
    return {biomarker.code: biomarker for biomarker in biomarkers if biomarker.code is not None}


def detect_patterns(
    biomarkers: Iterable[NormalizedBiomarker],
    rules: Iterable[PatternRule] | None = None,
) -> list[Pattern]:
    markers = build_lookup(biomarkers)
    patterns = []
    for rule in PATTERN_RULES if rules is None else rules:
        pattern = rule.evaluate(markers)
        if pattern is not None:
            patterns.append(pattern)
    if patterns:
        logger.debug("Detected patterns: %s", ", ".join(pattern.rule_id for pattern in patterns))
    return patterns
