import logging
import re
from dataclasses import dataclass
from typing import Iterable, Literal

from rapidfuzz import fuzz

from labinsights.config import settings
from labinsights.reference.store import ReferenceData, get_reference_data

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameMatch:
    code: str
    synonym: str
    method: Literal["exact", "substring", "fuzzy"]
    score: float = 100.0


def _normalize(text: str) -> str:
    return re.sub(r"[^a-z0-9]", "", text.lower())


def _digit_runs(text: str) -> list[str]:
    return re.findall(r"\d+", text)


def _substring_match(name: str, reference: ReferenceData, min_length: int) -> NameMatch | None:
    # substring_keys is ordered longest first, so "ldl cholesterol" beats "cholesterol"
    for key in reference.substring_keys:
        if len(key) < min_length:
            continue
        if key in name:
            return NameMatch(code=reference.synonyms[key], synonym=key, method="substring")
    return None


def _fuzzy_match(name: str, reference: ReferenceData, threshold: int) -> NameMatch | None:
    name_norm = _normalize(name)
    if not name_norm:
        return None
    digits = _digit_runs(name)
    best_score = -1.0
    best_key = None
    for key in reference.substring_keys:
        # "vitamin b1" must not resolve to "vitamin b12"
        if _digit_runs(key) != digits:
            continue
        score = fuzz.ratio(name_norm, _normalize(key))
        if score > best_score:
            best_score = score
            best_key = key

    if best_key is not None and best_score >= threshold:
        return NameMatch(code=reference.synonyms[best_key], synonym=best_key, method="fuzzy", score=best_score)
    return None


def resolve_name(name: str | None, reference: ReferenceData | None = None) -> NameMatch | None:
    """Map a lab-specific biomarker name to a canonical code.

    Exact synonym lookup first, then substring containment, then an optional
    fuzzy ratio match. Containment and fuzzy matching are best-effort: when
    several synonyms fit, the longest synonym wins and ties break
    alphabetically, which is reproducible but not always clinically right.
    """
    if not name:
        return None
    ref = reference or get_reference_data()
    cleaned = name.strip().lower()
    if not cleaned:
        return None

    code = ref.synonyms.get(cleaned)
    if code is not None:
        return NameMatch(code=code, synonym=cleaned, method="exact")

    match = _substring_match(cleaned, ref, settings.normalizer_min_substring_length)
    if match is not None:
        logger.debug("Resolved '%s' to %s by containment of '%s'", name, match.code, match.synonym)
        return match

    if settings.normalizer_enable_fuzzy_fallback:
        match = _fuzzy_match(cleaned, ref, settings.normalizer_fuzzy_threshold)
        if match is not None:
            logger.debug("Resolved '%s' to %s by fuzzy match (score %.1f)", name, match.code, match.score)
            return match

    logger.warning("No canonical biomarker for '%s'", name)
    return None


def classify_many(names: Iterable[str], reference: ReferenceData | None = None) -> dict[str, str | None]:
    ref = reference or get_reference_data()
    resolved = {}
    for name in names:
        match = resolve_name(name, ref)
        resolved[name] = match.code if match else None
    return resolved
