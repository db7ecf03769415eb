from labinsights.reference.store import (
    BiomarkerDefinition,
    ReferenceData,
    build_reference_data,
    get_reference_data,
    load_reference_data,
    normalize_unit_key,
    swap_reference_data,
)

__all__ = [
    "BiomarkerDefinition",
    "ReferenceData",
    "build_reference_data",
    "get_reference_data",
    "load_reference_data",
    "normalize_unit_key",
    "swap_reference_data",
]
