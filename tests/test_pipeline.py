from datetime import date

from labinsights import analyze_history, build_series, evaluate_report
from labinsights.reference.biomarkers import GLUCOSE, HBA1C, HEMOGLOBIN
from labinsights.schemas.measurement import RawMeasurement, RiskProfile
from labinsights.services.normalizer import normalize_many


def _report(collected_at, glucose, a1c):
    return [
        RawMeasurement(name="Glucose", value=glucose, unit="mg/dL", collected_at=collected_at),
        RawMeasurement(name="HbA1c", value=a1c, unit="%", collected_at=collected_at),
    ]


def test_evaluate_report_end_to_end(reference):
    measurements = [
        RawMeasurement(name="Hemoglobin", value=10.2, unit="g/dL"),
        RawMeasurement(name="Hematocrit", value=31, unit="%"),
        RawMeasurement(name="Glucose, fasting", value=7.2, unit="mmol/L"),
        RawMeasurement(name="Zinc", value=80, unit="µg/dL"),
    ]
    profile = RiskProfile(age=52, sex="female", bmi=31)

    evaluation = evaluate_report(measurements, profile, reference)

    assert [item.code for item in evaluation.biomarkers] == [HEMOGLOBIN, "4544-3", GLUCOSE, None]
    assert [pattern.rule_id for pattern in evaluation.patterns] == ["anemia"]
    assert evaluation.summary.total == 4
    assert evaluation.summary.unknown == 1
    assert evaluation.summary.pattern_count == 1
    assert evaluation.warnings == ["Unknown biomarker 'Zinc'"]

    metabolic = evaluation.risks.assessments["metabolic"]
    assert "Fasting glucose in diabetic range" in metabolic.factors
    assert metabolic.level == "moderate"


def test_build_series_groups_by_code_and_skips_undated(reference):
    raws = [
        *_report(date(2024, 3, 1), 100, 5.8),
        *_report(date(2024, 1, 1), 90, 5.4),
        RawMeasurement(name="Glucose", value=120, unit="mg/dL"),
        RawMeasurement(name="Zinc", value=80, collected_at=date(2024, 1, 1)),
    ]
    series = build_series(normalize_many(raws, reference=reference))

    assert set(series) == {GLUCOSE, HBA1C}
    assert [point.value for point in series[GLUCOSE]] == [90, 100]


def test_analyze_history_finds_joint_rise(reference):
    raws = [
        *_report(date(2024, 1, 1), 90, 5.4),
        *_report(date(2024, 2, 1), 95, 5.6),
        *_report(date(2024, 3, 1), 100, 5.8),
    ]
    series = build_series(normalize_many(raws, reference=reference))

    history = analyze_history(series, reference=reference)

    assert history.message == "Found 1 significant correlation across 2 biomarkers."
    [edge] = history.significant_correlations
    assert edge.relationship == "strong positive"
    assert edge.expected is True

    trends = {result.code: result for result in history.trends}
    assert trends[GLUCOSE].direction == "increasing"
    assert trends[HBA1C].direction == "increasing"
    assert trends[GLUCOSE].significant is True
    assert trends[HBA1C].significant is False

    assert {insight.kind for insight in history.insights} == {"correlation", "trend"}


def test_analyze_history_with_too_few_pairs(reference):
    series = {
        GLUCOSE: [(date(2024, 1, 1), 90), (date(2024, 2, 1), 95)],
        HBA1C: [(date(2024, 1, 1), 5.4), (date(2024, 2, 1), 5.6)],
    }
    history = analyze_history(series, reference=reference)

    assert history.correlations == []
    assert history.message == "Found 0 significant correlations across 2 biomarkers."
    assert len(history.trends) == 2
