"""
Clinical Layer — Base Types

Ordinal labels shared by the risk classifier, the clinical classifier and
the report generator.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RiskTier(str, Enum):
    """
    Ordinal risk tier.

    LOW      – self-care and monitoring
    MODERATE – conservative treatment, scheduled follow-up
    HIGH     – specialist consultation
    """
    LOW      = "low"
    MODERATE = "moderate"
    HIGH     = "high"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]


_TIER_RANK = {RiskTier.LOW: 0, RiskTier.MODERATE: 1, RiskTier.HIGH: 2}


class DisorderCategory(str, Enum):
    MUSCLE = "muscle"
    JOINT  = "joint"
    MIXED  = "mixed"


class Severity(str, Enum):
    MILD     = "mild"
    MODERATE = "moderate"
    SEVERE   = "severe"


class Chronicity(str, Enum):
    ACUTE     = "acute"
    CHRONIC   = "chronic"
    RECURRENT = "recurrent"


@dataclass(frozen=True)
class ClinicalClassification:
    """Disorder label derived from one AnswerSet."""
    category: DisorderCategory
    subtype: str
    severity: Severity
    chronicity: Chronicity

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "subtype": self.subtype,
            "severity": self.severity.value,
            "chronicity": self.chronicity.value,
        }
