"""
Read-only reference tables shared by every evaluation.

A ``ReferenceData`` snapshot is built once and never mutated. Replacing the
tables at runtime means building a new snapshot and publishing it with
``swap_reference_data``; readers holding the old snapshot keep a consistent
view until their call finishes.
"""
import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, Field, ValidationError

from labinsights.config import settings
from labinsights.exceptions import ReferenceDataError
from labinsights.reference.biomarkers import BIOMARKERS, DEMOGRAPHIC_RANGES, KNOWN_RELATIONSHIPS, UNIT_CONVERSIONS
from labinsights.reference.risk_weights import CATEGORY_ALIASES, RISK_CATEGORIES, RiskCategory

logger = logging.getLogger(__name__)

BUILTIN_VERSION = "builtin-1"


def normalize_unit_key(unit: str | None) -> str:
    if not unit:
        return ""
    key = unit.strip().lower().replace(" ", "")
    key = key.replace("µ", "u").replace("μ", "u").replace("mcg", "ug").replace("²", "2")
    return key.replace("10*", "10^").replace("10e", "10^")


@dataclass(frozen=True)
class BiomarkerDefinition:
    code: str
    name: str
    category: str
    unit: str
    default_range: tuple[float, float] | None = None


@dataclass(frozen=True)
class DemographicRange:
    code: str
    range: tuple[float, float]
    sex: str | None = None
    min_age: float | None = None
    max_age: float | None = None

    @property
    def specificity(self) -> int:
        return sum(item is not None for item in (self.sex, self.min_age, self.max_age))

    def matches(self, age: float | None, sex: str | None) -> bool:
        if self.sex is not None and self.sex != sex:
            return False
        if self.min_age is not None and (age is None or age < self.min_age):
            return False
        if self.max_age is not None and (age is None or age > self.max_age):
            return False
        return True


@dataclass(frozen=True)
class ReferenceData:
    version: str
    biomarkers: Mapping[str, BiomarkerDefinition]
    synonyms: Mapping[str, str]
    substring_keys: tuple[str, ...]
    demographic_ranges: tuple[DemographicRange, ...]
    conversions: Mapping[tuple[str | None, str, str], float]
    risk_categories: Mapping[str, RiskCategory]
    category_aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    known_relationships: Mapping[frozenset, str] = field(default_factory=lambda: MappingProxyType({}))

    def definition(self, code: str | None) -> BiomarkerDefinition | None:
        if code is None:
            return None
        return self.biomarkers.get(code)

    def demographic_range(self, code: str, age: float | None, sex: str | None) -> tuple[float, float] | None:
        best: DemographicRange | None = None
        for entry in self.demographic_ranges:
            if entry.code != code or not entry.matches(age, sex):
                continue
            if best is None or entry.specificity > best.specificity:
                best = entry
        return best.range if best else None

    def risk_category(self, name: str) -> RiskCategory | None:
        key = name.strip().lower()
        key = self.category_aliases.get(key, key)
        return self.risk_categories.get(key)

    def relationship_direction(self, code_a: str, code_b: str) -> str | None:
        return self.known_relationships.get(frozenset((code_a, code_b)))


def _check_range(bounds, code: str) -> tuple[float, float] | None:
    if bounds is None:
        return None
    low, high = float(bounds[0]), float(bounds[1])
    if low > high:
        raise ReferenceDataError(f"Reference range for {code} has min greater than max", {"code": code})
    return low, high


def build_reference_data(
    biomarkers: Iterable[Mapping] = BIOMARKERS,
    demographic_ranges: Iterable[Mapping] = DEMOGRAPHIC_RANGES,
    unit_conversions: Iterable[Mapping] = UNIT_CONVERSIONS,
    risk_categories: Iterable[RiskCategory] = RISK_CATEGORIES,
    known_relationships: Iterable[Mapping] = KNOWN_RELATIONSHIPS,
    version: str = BUILTIN_VERSION,
) -> ReferenceData:
    definitions: dict[str, BiomarkerDefinition] = {}
    synonyms: dict[str, str] = {}
    for item in biomarkers:
        code = item["code"]
        if code in definitions:
            raise ReferenceDataError(f"Duplicate biomarker code {code}", {"code": code})
        definitions[code] = BiomarkerDefinition(
            code=code,
            name=item["name"],
            category=item["category"],
            unit=item["unit"],
            default_range=_check_range(item.get("range"), code),
        )
        for alias in [item["name"], *item.get("aliases", [])]:
            key = alias.strip().lower()
            owner = synonyms.get(key)
            if owner is not None and owner != code:
                raise ReferenceDataError(
                    f"Synonym '{key}' maps to both {owner} and {code}",
                    {"synonym": key, "codes": [owner, code]},
                )
            synonyms[key] = code

    overrides = []
    for item in demographic_ranges:
        if item["code"] not in definitions:
            raise ReferenceDataError(f"Demographic range for unknown code {item['code']}", {"code": item["code"]})
        overrides.append(
            DemographicRange(
                code=item["code"],
                range=_check_range(item["range"], item["code"]),
                sex=item.get("sex"),
                min_age=item.get("min_age"),
                max_age=item.get("max_age"),
            )
        )

    conversions: dict[tuple[str | None, str, str], float] = {}
    for item in unit_conversions:
        factor = float(item["factor"])
        if factor == 0:
            raise ReferenceDataError("Unit conversion factor cannot be zero", dict(item))
        key = (item.get("code"), normalize_unit_key(item["from"]), normalize_unit_key(item["to"]))
        conversions[key] = factor

    relationships = {frozenset(item["codes"]): item["direction"] for item in known_relationships}

    return ReferenceData(
        version=version,
        biomarkers=MappingProxyType(definitions),
        synonyms=MappingProxyType(synonyms),
        substring_keys=tuple(sorted(synonyms, key=lambda key: (-len(key), key))),
        demographic_ranges=tuple(overrides),
        conversions=MappingProxyType(conversions),
        risk_categories=MappingProxyType({category.name: category for category in risk_categories}),
        category_aliases=MappingProxyType(dict(CATEGORY_ALIASES)),
        known_relationships=MappingProxyType(relationships),
    )


class _BiomarkerEntry(BaseModel):
    code: str
    name: str
    category: str
    unit: str
    range: tuple[float, float] | None = None
    aliases: list[str] = Field(default_factory=list)


class _DemographicEntry(BaseModel):
    code: str
    range: tuple[float, float]
    sex: str | None = None
    min_age: float | None = None
    max_age: float | None = None


class _ConversionEntry(BaseModel):
    code: str | None = None
    from_unit: str = Field(alias="from")
    to_unit: str = Field(alias="to")
    factor: float


class _RelationshipEntry(BaseModel):
    codes: tuple[str, str]
    direction: str


class _ReferenceFile(BaseModel):
    version: str
    biomarkers: list[_BiomarkerEntry]
    demographic_ranges: list[_DemographicEntry] = Field(default_factory=list)
    unit_conversions: list[_ConversionEntry] = Field(default_factory=list)
    known_relationships: list[_RelationshipEntry] = Field(default_factory=list)


def load_reference_data(path: str | Path) -> ReferenceData:
    """Build a snapshot from a JSON document. Risk categories stay the built-in ones."""
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ReferenceDataError(f"Cannot read reference data file {path}", {"path": str(path)}) from exc
    try:
        payload = _ReferenceFile.model_validate_json(raw)
    except ValidationError as exc:
        raise ReferenceDataError(
            f"Malformed reference data file {path}",
            {"path": str(path), "errors": exc.errors(include_url=False)},
        ) from exc

    return build_reference_data(
        biomarkers=[entry.model_dump() for entry in payload.biomarkers],
        demographic_ranges=[entry.model_dump() for entry in payload.demographic_ranges],
        unit_conversions=[
            {"code": entry.code, "from": entry.from_unit, "to": entry.to_unit, "factor": entry.factor}
            for entry in payload.unit_conversions
        ],
        known_relationships=[entry.model_dump() for entry in payload.known_relationships],
        version=payload.version,
    )


_current: ReferenceData | None = None
_swap_lock = threading.Lock()


def get_reference_data() -> ReferenceData:
    snapshot = _current
    if snapshot is not None:
        return snapshot
    with _swap_lock:
        if _current is None:
            if settings.reference_data_path:
                _publish(load_reference_data(settings.reference_data_path))
            else:
                _publish(build_reference_data())
        return _current


def _publish(snapshot: ReferenceData) -> ReferenceData | None:
    global _current
    previous = _current
    _current = snapshot
    logger.info("Published reference data %s", snapshot.version)
    return previous


def swap_reference_data(snapshot: ReferenceData) -> ReferenceData | None:
    """Atomically replace the process-wide snapshot and return the previous one."""
    if not isinstance(snapshot, ReferenceData):
        raise TypeError("swap_reference_data expects a ReferenceData snapshot")
    with _swap_lock:
        return _publish(snapshot)
