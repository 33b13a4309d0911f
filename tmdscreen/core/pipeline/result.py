"""
Assessment Result

The immutable aggregate handed to storage, display and export
collaborators.  Every nested part is frozen or read-only.  ``computed_at``
is excluded from equality so two runs over the same AnswerSet and
configuration compare equal.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from tmdscreen.core.catalog import AnswerSet, Category
from tmdscreen.core.clinical.base import ClinicalClassification
from tmdscreen.core.clinical.risk import RiskAssessment
from tmdscreen.core.coding.mapper import CodeAssignmentReview, MappingResult
from tmdscreen.core.reports.recommendations import FollowUp, Prognosis
from tmdscreen.core.scoring.category import CategoryScore
from tmdscreen.core.scoring.composite import CompositeResult
from tmdscreen.core.scoring.confidence import ConfidenceEstimate
from tmdscreen.core.validation.protocol_validator import ValidationReport


def certainty_for(confidence: float) -> str:
    """Diagnostic certainty label for a mapping confidence."""
    if confidence >= 90:
        return "definitive"
    if confidence >= 75:
        return "probable"
    if confidence >= 60:
        return "possible"
    return "uncertain"


@dataclass(frozen=True)
class QualityMetrics:
    data_completeness: float        # % of catalog answered
    response_consistency: float     # consistency score after penalties
    guideline_compliance: float     # overall axis compliance
    diagnostic_confidence: float    # mapping confidence
    diagnostic_certainty: str

    @property
    def reliability(self) -> float:
        return (self.data_completeness + self.response_consistency) / 2

    def to_dict(self) -> dict:
        return {
            "data_completeness": round(self.data_completeness, 1),
            "response_consistency": round(self.response_consistency, 1),
            "guideline_compliance": round(self.guideline_compliance, 1),
            "diagnostic_confidence": round(self.diagnostic_confidence, 1),
            "diagnostic_certainty": self.diagnostic_certainty,
            "reliability": round(self.reliability, 1),
        }


@dataclass(frozen=True)
class AssessmentResult:
    answers: AnswerSet
    protocol_variant: str
    validation: ValidationReport
    category_scores: Mapping[Category, CategoryScore] = field(hash=False)
    composite: CompositeResult
    confidence: ConfidenceEstimate
    risk: RiskAssessment
    classification: ClinicalClassification
    mapping: MappingResult
    code_review: CodeAssignmentReview
    recommendations: Tuple[str, ...]
    follow_up: FollowUp
    prognosis: Prognosis
    quality_metrics: QualityMetrics
    manual_review_required: bool = False
    review_reasons: Tuple[str, ...] = ()
    computed_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )

    def __post_init__(self):
        # Read-only view over a private copy
        object.__setattr__(
            self, "category_scores", MappingProxyType(dict(self.category_scores))
        )

    @property
    def risk_tier(self):
        return self.composite.risk_tier

    @property
    def requires_immediate_attention(self) -> bool:
        return self.risk.requires_immediate_attention

    def to_dict(self) -> Dict[str, Any]:
        return {
            "protocol_variant": self.protocol_variant,
            "answers": self.answers.to_dict(),
            "validation": self.validation.to_dict(),
            "category_scores": {c.value: s.to_dict() for c, s in self.category_scores.items()},
            "composite": self.composite.to_dict(),
            "confidence": self.confidence.to_dict(),
            "risk": self.risk.to_dict(),
            "classification": self.classification.to_dict(),
            "mapping": self.mapping.to_dict(),
            "code_review": self.code_review.to_dict(),
            "recommendations": list(self.recommendations),
            "follow_up": self.follow_up.to_dict(),
            "prognosis": self.prognosis.to_dict(),
            "quality_metrics": self.quality_metrics.to_dict(),
            "manual_review_required": self.manual_review_required,
            "review_reasons": list(self.review_reasons),
            "computed_at": self.computed_at.isoformat(),
        }
