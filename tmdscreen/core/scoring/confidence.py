"""
Confidence Estimator

Blends response completeness with internal consistency.  Advisory only:
a low value never blocks scoring, it is surfaced to the caller and
compared against the configured minimum by the pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

import numpy as np

from tmdscreen.config import ScoringProfile
from tmdscreen.core.catalog import AnswerSet, Category, TOTAL_QUESTIONS
from .category import CategoryScore
from .consistency import ConsistencyIssue, apply_penalties, find_inconsistencies


@dataclass(frozen=True)
class ConfidenceEstimate:
    completeness: float             # 0–100
    consistency: float              # 0–100
    confidence: float               # 0–100 blend
    issues: Tuple[ConsistencyIssue, ...] = field(default=(), compare=False)

    def to_dict(self) -> dict:
        return {
            "completeness": round(self.completeness, 1),
            "consistency": round(self.consistency, 1),
            "confidence": round(self.confidence, 1),
            "issues": [i.to_dict() for i in self.issues],
        }


def assess_confidence(
    answers: AnswerSet,
    category_scores: Optional[Mapping[Category, CategoryScore]] = None,
    profile: Optional[ScoringProfile] = None,
) -> ConfidenceEstimate:
    profile = profile or ScoringProfile()

    completeness = answers.answered_count / TOTAL_QUESTIONS * 100.0
    issues = tuple(find_inconsistencies(answers, category_scores))
    consistency = apply_penalties(issues, profile.consistency_baseline)

    blend = np.dot(
        [completeness, consistency],
        [profile.completeness_weight, profile.consistency_weight],
    )
    return ConfidenceEstimate(
        completeness=completeness,
        consistency=consistency,
        confidence=float(np.clip(blend, 0.0, 100.0)),
        issues=issues,
    )


def estimate_confidence(
    answers: AnswerSet,
    category_scores: Optional[Mapping[Category, CategoryScore]] = None,
    profile: Optional[ScoringProfile] = None,
) -> float:
    """Overall 0–100 confidence for one AnswerSet."""
    return assess_confidence(answers, category_scores, profile).confidence
