"""Validation report models."""

from __future__ import annotations

from dataclasses import dataclass, field

WEATHER_CATEGORY = "weather-data"


@dataclass
class DataQuality:
    score: float  # percent, 0-100
    level: str  # EXCELLENT, GOOD, FAIR, POOR
    missing_fields: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {"score": self.score, "level": self.level, "missingFields": self.missing_fields}


@dataclass
class CapabilityReport:
    supported: bool
    missing_fields: list[str] = field(default_factory=list)
    completeness: float = 0.0  # percent of required fields present

    def to_dict(self) -> dict[str, object]:
        return {
            "supported": self.supported,
            "missingFields": self.missing_fields,
            "completeness": self.completeness,
        }


@dataclass
class ValidationReport:
    """Outcome of validating one payload."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    category: str = WEATHER_CATEGORY
    data_quality: DataQuality | None = None

    def to_dict(self) -> dict[str, object]:
        """JSON shape served by the validation endpoint."""
        out: dict[str, object] = {
            "valid": self.valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "category": self.category,
        }
        if self.data_quality is not None:
            out["dataQuality"] = self.data_quality.to_dict()
        return out
