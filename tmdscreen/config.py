"""
TMD Screening Pipeline — Configuration
======================================
Centralised scoring weights, risk thresholds and pipeline switches.
Environment defaults are loaded from the project-level .env file.

Scoring weights and thresholds are configuration data, not business
logic: two rule sets with different cut points are shipped as named
presets so a deployment picks one instead of editing scorer code.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

# ── Load .env ───────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")

from tmdscreen.core.catalog.base import Category, ProtocolVariant  # noqa: E402
from tmdscreen.utils import CatalogIntegrityError  # noqa: E402


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# ── Environment defaults ────────────────────────────────────────────────
STRICT_VALIDATION: bool = _env_bool("TMD_STRICT_VALIDATION", True)
MINIMUM_CONFIDENCE: float = float(os.getenv("TMD_MINIMUM_CONFIDENCE", "70"))
INCLUDE_SECONDARY_CODES: bool = _env_bool("TMD_INCLUDE_SECONDARY_CODES", True)
INCLUDE_DIFFERENTIAL: bool = _env_bool("TMD_INCLUDE_DIFFERENTIAL", True)
PROTOCOL_VARIANT: str = os.getenv("TMD_PROTOCOL_VARIANT", ProtocolVariant.DC_TMD_AXIS_II.value)
THRESHOLD_PRESET: str = os.getenv("TMD_THRESHOLD_PRESET", "standard")

# ── Category weights (sum to 1.0) ───────────────────────────────────────
DEFAULT_CATEGORY_WEIGHTS: Mapping[Category, float] = MappingProxyType({
    Category.PAIN:         0.35,   # Primary diagnostic criterion
    Category.FUNCTION:     0.30,   # Functional impact
    Category.JOINT_SOUNDS: 0.15,   # Structural indicators
    Category.ASSOCIATED:   0.10,
    Category.HISTORY:      0.10,   # Risk factors & triggers
})

WEIGHT_TOLERANCE = 1e-6

# ── Confidence blend ────────────────────────────────────────────────────
COMPLETENESS_WEIGHT = 0.6
CONSISTENCY_WEIGHT = 0.4
CONSISTENCY_BASELINE = 85.0


@dataclass(frozen=True)
class RiskThresholds:
    """
    Composite-score cut points: low ≤ low_max < moderate ≤ moderate_max < high.
    """
    low_max: float = 30.0
    moderate_max: float = 65.0

    def __post_init__(self):
        if not (0.0 <= self.low_max < self.moderate_max <= 100.0):
            raise CatalogIntegrityError(
                f"Risk thresholds must satisfy 0 <= low_max < moderate_max <= 100 "
                f"(got {self.low_max}, {self.moderate_max})",
                catalog="risk_thresholds",
            )


THRESHOLD_PRESETS: Mapping[str, RiskThresholds] = MappingProxyType({
    "standard":     RiskThresholds(low_max=30.0, moderate_max=65.0),
    "conservative": RiskThresholds(low_max=30.0, moderate_max=60.0),
})


@dataclass(frozen=True)
class ScoringProfile:
    """
    Weights and thresholds consumed by the scoring components.

    Validated once on construction; an inconsistent profile is a
    CatalogIntegrityError, never a silently wrong composite score.
    The profile is immutable, including its weight table.
    """
    category_weights: Mapping[Category, float] = field(
        default_factory=lambda: DEFAULT_CATEGORY_WEIGHTS
    )
    thresholds: RiskThresholds = field(default_factory=RiskThresholds)
    completeness_weight: float = COMPLETENESS_WEIGHT
    consistency_weight: float = CONSISTENCY_WEIGHT
    consistency_baseline: float = CONSISTENCY_BASELINE

    def __post_init__(self):
        # Read-only view over a private copy
        object.__setattr__(
            self, "category_weights", MappingProxyType(dict(self.category_weights))
        )
        missing = [c.value for c in Category if c not in self.category_weights]
        if missing:
            raise CatalogIntegrityError(
                f"Category weights missing for: {', '.join(missing)}",
                catalog="category_weights",
            )
        if any(w < 0 for w in self.category_weights.values()):
            raise CatalogIntegrityError(
                "Category weights must be non-negative", catalog="category_weights"
            )
        total = sum(self.category_weights.values())
        if abs(total - 1.0) > WEIGHT_TOLERANCE:
            raise CatalogIntegrityError(
                f"Category weights must sum to 1.0 (got {total:.6f})",
                catalog="category_weights",
                details={"sum": total},
            )
        if abs(self.completeness_weight + self.consistency_weight - 1.0) > WEIGHT_TOLERANCE:
            raise CatalogIntegrityError(
                "Completeness and consistency weights must sum to 1.0",
                catalog="confidence_weights",
            )
        if not 0.0 <= self.consistency_baseline <= 100.0:
            raise CatalogIntegrityError(
                "Consistency baseline must lie in [0, 100]", catalog="confidence_weights"
            )

    @classmethod
    def preset(cls, name: str) -> "ScoringProfile":
        """Profile using the named threshold preset and default weights."""
        try:
            thresholds = THRESHOLD_PRESETS[name]
        except KeyError:
            raise CatalogIntegrityError(
                f"Unknown threshold preset '{name}'",
                catalog="risk_thresholds",
                details={"available": sorted(THRESHOLD_PRESETS)},
            ) from None
        return cls(thresholds=thresholds)

    def weight(self, category: Category) -> float:
        return self.category_weights[category]


def resolve_protocol_variant(name: str) -> ProtocolVariant:
    """Protocol variant for a configured name; unknown names are a CatalogIntegrityError."""
    try:
        return ProtocolVariant(name)
    except ValueError:
        raise CatalogIntegrityError(
            f"Unknown protocol variant '{name}'",
            catalog="protocol_variant",
            details={"available": [v.value for v in ProtocolVariant]},
        ) from None


# ── Resolved environment defaults (fail at import, not per instance) ────
DEFAULT_PROTOCOL_VARIANT: ProtocolVariant = resolve_protocol_variant(PROTOCOL_VARIANT)
DEFAULT_SCORING_PROFILE: ScoringProfile = ScoringProfile.preset(THRESHOLD_PRESET)


class PipelineConfig(BaseModel):
    """Per-caller switches for one pipeline instance."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    strict_validation: bool = Field(
        default=STRICT_VALIDATION,
        description="Abort with ValidationFailure when protocol validation fails",
    )
    minimum_confidence: float = Field(
        default=MINIMUM_CONFIDENCE, ge=0, le=100,
        description="Below this, results are flagged for manual review",
    )
    include_secondary_codes: bool = INCLUDE_SECONDARY_CODES
    include_differential_diagnosis: bool = INCLUDE_DIFFERENTIAL
    protocol_variant: ProtocolVariant = DEFAULT_PROTOCOL_VARIANT
    scoring: ScoringProfile = Field(default_factory=lambda: DEFAULT_SCORING_PROFILE)
