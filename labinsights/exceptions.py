"""
Exception hierarchy for labinsights.

Only genuine contract violations raise. Unresolved names, unconvertible
units and short series are reported through the result shapes instead.
"""
from typing import Any


class LabInsightsError(Exception):
    """Base exception for all labinsights errors."""

    def __init__(self, message: str, code: str = "LABINSIGHTS_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class InvalidRangeError(LabInsightsError, ValueError):
    """Reference minimum is greater than reference maximum."""

    def __init__(self, reference_min: float, reference_max: float, name: str | None = None):
        label = f" for {name}" if name else ""
        super().__init__(
            f"Invalid reference range{label}: min {reference_min} is greater than max {reference_max}",
            code="INVALID_RANGE",
            details={"reference_min": reference_min, "reference_max": reference_max, "name": name},
        )
        self.reference_min = reference_min
        self.reference_max = reference_max


class ReferenceDataError(LabInsightsError):
    """Reference tables could not be loaded or are inconsistent."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code="REFERENCE_DATA_ERROR", details=details)
