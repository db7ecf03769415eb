import logging
from collections.abc import Iterable

from labinsights.exceptions import InvalidRangeError
from labinsights.reference.store import ReferenceData, get_reference_data, normalize_unit_key
from labinsights.schemas.measurement import Demographics, NormalizedBiomarker, RawMeasurement, StatusEnum
from labinsights.services.classifier import resolve_name
from labinsights.services.status import classify_value

logger = logging.getLogger(__name__)

UNMAPPED_CATEGORY = "Other"


def conversion_factor(from_unit: str, to_unit: str, code: str | None, reference: ReferenceData) -> float | None:
    """Multiplier taking a value in ``from_unit`` to ``to_unit``, or None when no path exists."""
    source = normalize_unit_key(from_unit)
    target = normalize_unit_key(to_unit)
    if source == target:
        return 1.0
    for scope in (code, None):
        forward = reference.conversions.get((scope, source, target))
        if forward is not None:
            return forward
        inverse = reference.conversions.get((scope, target, source))
        if inverse is not None:
            return 1.0 / inverse
    return None


def convert_unit(
    value: float,
    from_unit: str,
    to_unit: str,
    code: str | None = None,
    reference: ReferenceData | None = None,
) -> float | None:
    factor = conversion_factor(from_unit, to_unit, code, reference or get_reference_data())
    if factor is None:
        return None
    return value * factor


def resolve_reference_range(
    code: str | None,
    reference_min: float | None = None,
    reference_max: float | None = None,
    demographics: Demographics | None = None,
    reference: ReferenceData | None = None,
) -> tuple[float | None, float | None]:
    """Caller-supplied bounds win per bound; the rest comes from demographic or default ranges."""
    if reference_min is not None and reference_max is not None and reference_min > reference_max:
        raise InvalidRangeError(reference_min, reference_max, code)

    fallback = None
    ref = reference or get_reference_data()
    if code is not None and (reference_min is None or reference_max is None):
        if demographics is not None:
            fallback = ref.demographic_range(code, demographics.age, demographics.sex)
        if fallback is None:
            definition = ref.definition(code)
            fallback = definition.default_range if definition else None

    low = reference_min if reference_min is not None else (fallback[0] if fallback else None)
    high = reference_max if reference_max is not None else (fallback[1] if fallback else None)
    if low is not None and high is not None and low > high:
        raise InvalidRangeError(low, high, code)
    return low, high


def _unresolved(raw: RawMeasurement) -> NormalizedBiomarker:
    return NormalizedBiomarker(
        code=None,
        canonical_name=raw.name,
        category=UNMAPPED_CATEGORY,
        value=raw.value,
        unit=raw.unit,
        reference_min=raw.reference_min,
        reference_max=raw.reference_max,
        status=StatusEnum.UNKNOWN,
        original_name=raw.name,
        original_value=raw.value,
        original_unit=raw.unit,
        standardized=False,
        collected_at=raw.collected_at,
        warnings=[f"Unknown biomarker '{raw.name}'"],
    )


def normalize(
    raw: RawMeasurement,
    demographics: Demographics | None = None,
    reference: ReferenceData | None = None,
) -> NormalizedBiomarker:
    if raw.reference_min is not None and raw.reference_max is not None and raw.reference_min > raw.reference_max:
        raise InvalidRangeError(raw.reference_min, raw.reference_max, raw.name)

    ref = reference or get_reference_data()
    match = resolve_name(raw.name, ref)
    definition = ref.definition(match.code) if match else None
    if definition is None:
        return _unresolved(raw)

    warnings = []
    value = raw.value
    unit = definition.unit
    reference_min, reference_max = raw.reference_min, raw.reference_max
    factor = conversion_factor(raw.unit, definition.unit, definition.code, ref) if raw.unit else 1.0
    if factor is None:
        message = f"No conversion from '{raw.unit}' to '{definition.unit}' for {definition.name}; value kept as reported"
        logger.warning(message)
        warnings.append(message)
        unit = raw.unit
    elif factor != 1.0:
        value = raw.value * factor
        reference_min = reference_min * factor if reference_min is not None else None
        reference_max = reference_max * factor if reference_max is not None else None

    if factor is None and (reference_min is None or reference_max is None):
        # default ranges are in the canonical unit and cannot judge an unconverted value
        low, high = None, None
    else:
        low, high = resolve_reference_range(definition.code, reference_min, reference_max, demographics, ref)
    classification = classify_value(value, low, high)

    return NormalizedBiomarker(
        code=definition.code,
        canonical_name=definition.name,
        category=definition.category,
        value=value,
        unit=unit,
        reference_min=low,
        reference_max=high,
        status=classification.status,
        severity=classification.severity,
        percent_from_range=classification.percent_from_range,
        original_name=raw.name,
        original_value=raw.value,
        original_unit=raw.unit,
        standardized=True,
        collected_at=raw.collected_at,
        warnings=warnings,
    )


def normalize_many(
    measurements: Iterable[RawMeasurement],
    demographics: Demographics | None = None,
    reference: ReferenceData | None = None,
) -> list[NormalizedBiomarker]:
    ref = reference or get_reference_data()
    return [normalize(raw, demographics, ref) for raw in measurements]
