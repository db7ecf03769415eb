import json

import pytest

from labinsights.config import settings
from labinsights.exceptions import ReferenceDataError
from labinsights.reference import store
from labinsights.reference.biomarkers import BIOMARKERS, GLUCOSE, HEMOGLOBIN
from labinsights.reference.store import (
    build_reference_data,
    get_reference_data,
    load_reference_data,
    normalize_unit_key,
    swap_reference_data,
)
from labinsights.schemas.measurement import RawMeasurement
from labinsights.services.normalizer import normalize

CUSTOM_FILE = {
    "version": "lab-2024.1",
    "biomarkers": [
        {
            "code": "2345-7",
            "name": "Glucose",
            "category": "Metabolic Panel",
            "unit": "mg/dL",
            "range": [65, 110],
            "aliases": ["glu", "fbs"],
        },
        {"code": "2498-4", "name": "Iron", "category": "Iron Studies", "unit": "µg/dL", "range": [60, 170]},
    ],
    "unit_conversions": [{"code": "2345-7", "from": "mmol/L", "to": "mg/dL", "factor": 18.0}],
    "known_relationships": [{"codes": ["2345-7", "2498-4"], "direction": "positive"}],
}


def test_unit_keys_fold_spelling_variants():
    assert normalize_unit_key(" µg/dL ") == "ug/dl"
    assert normalize_unit_key("mcg/dL") == "ug/dl"
    assert normalize_unit_key("10*3/uL") == "10^3/ul"
    assert normalize_unit_key("mL/min/1.73m²") == normalize_unit_key("mL/min/1.73m2")
    assert normalize_unit_key(None) == ""


def test_builtin_tables_are_read_only(reference):
    assert reference.version == store.BUILTIN_VERSION
    assert reference.synonyms["hgb"] == HEMOGLOBIN
    with pytest.raises(TypeError):
        reference.synonyms["hgb"] = GLUCOSE


def test_substring_keys_are_longest_first(reference):
    lengths = [len(key) for key in reference.substring_keys]
    assert lengths == sorted(lengths, reverse=True)


def test_most_specific_demographic_range_wins():
    data = build_reference_data(
        demographic_ranges=[
            {"code": HEMOGLOBIN, "sex": "male", "range": (13.5, 17.5)},
            {"code": HEMOGLOBIN, "sex": "male", "min_age": 65, "range": (12.5, 17.0)},
        ]
    )
    assert data.demographic_range(HEMOGLOBIN, 70, "male") == (12.5, 17.0)
    assert data.demographic_range(HEMOGLOBIN, 40, "male") == (13.5, 17.5)
    assert data.demographic_range(HEMOGLOBIN, 40, None) is None


def test_duplicate_codes_are_rejected():
    with pytest.raises(ReferenceDataError):
        build_reference_data(biomarkers=[*BIOMARKERS, BIOMARKERS[0]])


def test_conflicting_synonyms_are_rejected():
    clash = {"code": "9999-9", "name": "Other", "category": "Other", "unit": "", "aliases": ["hgb"]}
    with pytest.raises(ReferenceDataError) as excinfo:
        build_reference_data(biomarkers=[*BIOMARKERS, clash])
    assert excinfo.value.details["synonym"] == "hgb"


def test_inverted_default_range_is_rejected():
    broken = {"code": "9999-9", "name": "Broken", "category": "Other", "unit": "", "range": (10, 1)}
    with pytest.raises(ReferenceDataError):
        build_reference_data(biomarkers=[*BIOMARKERS, broken])


def test_zero_conversion_factor_is_rejected():
    with pytest.raises(ReferenceDataError):
        build_reference_data(unit_conversions=[{"code": None, "from": "a", "to": "b", "factor": 0}])


def test_demographic_range_for_unknown_code_is_rejected():
    with pytest.raises(ReferenceDataError):
        build_reference_data(demographic_ranges=[{"code": "0000-0", "range": (1, 2)}])


def test_load_reference_data_from_json(tmp_path):
    path = tmp_path / "reference.json"
    path.write_text(json.dumps(CUSTOM_FILE), encoding="utf-8")

    data = load_reference_data(path)

    assert data.version == "lab-2024.1"
    assert data.synonyms["fbs"] == GLUCOSE
    assert data.definition(GLUCOSE).default_range == (65.0, 110.0)
    assert data.relationship_direction("2498-4", GLUCOSE) == "positive"
    assert data.risk_category("cardiovascular") is not None


def test_missing_file_raises(tmp_path):
    with pytest.raises(ReferenceDataError) as excinfo:
        load_reference_data(tmp_path / "missing.json")
    assert excinfo.value.code == "REFERENCE_DATA_ERROR"


def test_malformed_file_raises(tmp_path):
    path = tmp_path / "reference.json"
    path.write_text(json.dumps({"version": "x", "biomarkers": [{"code": "1"}]}), encoding="utf-8")
    with pytest.raises(ReferenceDataError) as excinfo:
        load_reference_data(path)
    assert excinfo.value.details["errors"]


def test_swap_publishes_new_snapshot(tmp_path, restore_reference):
    path = tmp_path / "reference.json"
    path.write_text(json.dumps(CUSTOM_FILE), encoding="utf-8")
    custom = load_reference_data(path)

    before = get_reference_data()
    previous = swap_reference_data(custom)

    assert previous is before
    assert get_reference_data() is custom
    result = normalize(RawMeasurement(name="FBS", value=105, unit="mg/dL"))
    assert result.code == GLUCOSE
    assert result.reference_max == 110.0


def test_swap_rejects_non_snapshots(restore_reference):
    with pytest.raises(TypeError):
        swap_reference_data({"version": "nope"})


def test_lazy_load_from_configured_path(tmp_path, monkeypatch, restore_reference):
    path = tmp_path / "reference.json"
    path.write_text(json.dumps(CUSTOM_FILE), encoding="utf-8")
    monkeypatch.setattr(settings, "reference_data_path", str(path))
    monkeypatch.setattr(store, "_current", None)

    assert get_reference_data().version == "lab-2024.1"
