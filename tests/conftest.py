from collections.abc import Callable, Generator
from datetime import date

import pytest

from labinsights.reference import store
from labinsights.reference.store import ReferenceData, build_reference_data
from labinsights.schemas.measurement import NormalizedBiomarker
from labinsights.services.status import classify_value


@pytest.fixture()
def reference() -> ReferenceData:
    return build_reference_data()


@pytest.fixture()
def restore_reference() -> Generator[None, None, None]:
    original = store._current
    yield
    store._current = original


@pytest.fixture()
def marker(reference) -> Callable[..., NormalizedBiomarker]:
    """Build a normalized biomarker in its canonical unit, classified against the default range."""

    def _make(code: str, value: float, collected_at: date | None = None) -> NormalizedBiomarker:
        definition = reference.definition(code)
        low, high = definition.default_range
        classification = classify_value(value, low, high)
        return NormalizedBiomarker(
            code=code,
            canonical_name=definition.name,
            category=definition.category,
            value=value,
            unit=definition.unit,
            reference_min=low,
            reference_max=high,
            status=classification.status,
            severity=classification.severity,
            percent_from_range=classification.percent_from_range,
            original_name=definition.name,
            original_value=value,
            original_unit=definition.unit,
            standardized=True,
            collected_at=collected_at,
        )

    return _make
