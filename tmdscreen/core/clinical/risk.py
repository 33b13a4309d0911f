"""
Risk Classifier

Maps the composite score onto a risk tier through the configured
thresholds, then applies red-flag predicates over the raw answers.
Red flags only ever escalate the tier.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from tmdscreen.config import RiskThresholds
from tmdscreen.core.catalog import AnswerSet
from tmdscreen.core.catalog.questions import (
    LOCKING_QUESTIONS,
    PAIN_SEVERITY,
    SCALE_MAX,
    STRESS_LEVEL,
)
from tmdscreen.utils import get_logger
from .base import RiskTier

logger = get_logger(__name__)

# ── Red flags (escalating) ──────────────────────────────────────────────────
RED_FLAG_SEVERE_PAIN = f"Severe pain level ({SCALE_MAX}/{SCALE_MAX})"
RED_FLAG_LOCKING     = "Jaw locking episodes"

# ── Clinical alerts (informational) ─────────────────────────────────────────
ALERT_TRAUMA_OR_DENTAL = "Recent trauma or dental work"
ALERT_HIGH_STRESS      = "High stress level"
HIGH_STRESS_LEVEL      = 3
_TRAUMA_OR_DENTAL      = ("q22", "q23")


def tier_for(score: float, thresholds: RiskThresholds) -> RiskTier:
    """low ≤ low_max < moderate ≤ moderate_max < high"""
    if score <= thresholds.low_max:
        return RiskTier.LOW
    if score <= thresholds.moderate_max:
        return RiskTier.MODERATE
    return RiskTier.HIGH


def evaluate_red_flags(answers: AnswerSet) -> List[str]:
    flags = []
    if answers.get(PAIN_SEVERITY) == SCALE_MAX:
        flags.append(RED_FLAG_SEVERE_PAIN)
    if any(answers.is_true(q) for q in LOCKING_QUESTIONS):
        flags.append(RED_FLAG_LOCKING)
    return flags


def evaluate_clinical_alerts(answers: AnswerSet) -> List[str]:
    alerts = []
    if any(answers.is_true(q) for q in _TRAUMA_OR_DENTAL):
        alerts.append(ALERT_TRAUMA_OR_DENTAL)
    stress = answers.get(STRESS_LEVEL)
    if stress is not None and stress >= HIGH_STRESS_LEVEL:
        alerts.append(ALERT_HIGH_STRESS)
    return alerts


@dataclass(frozen=True)
class RiskAssessment:
    """Risk tier plus the flags and threshold position behind it."""
    composite_score: float
    score_tier: RiskTier                 # Tier implied by the number alone
    risk_tier: RiskTier                  # After red-flag escalation
    red_flags: Tuple[str, ...] = ()
    clinical_alerts: Tuple[str, ...] = ()
    requires_immediate_attention: bool = False
    follow_up_recommended: bool = False
    specialist_referral: bool = False
    next_threshold: float = 100.0
    distance_to_next: float = 0.0

    @property
    def escalated(self) -> bool:
        return self.risk_tier != self.score_tier

    def to_dict(self) -> dict:
        return {
            "composite_score": round(self.composite_score, 1),
            "score_tier": self.score_tier.value,
            "risk_tier": self.risk_tier.value,
            "escalated": self.escalated,
            "red_flags": list(self.red_flags),
            "clinical_alerts": list(self.clinical_alerts),
            "requires_immediate_attention": self.requires_immediate_attention,
            "follow_up_recommended": self.follow_up_recommended,
            "specialist_referral": self.specialist_referral,
            "threshold_analysis": {
                "next_threshold": self.next_threshold,
                "distance_to_next": round(self.distance_to_next, 1),
            },
        }


class RiskClassifier:
    """
    Stateless — holds only its thresholds.
    """

    def __init__(self, thresholds: Optional[RiskThresholds] = None):
        self.thresholds = thresholds or RiskThresholds()

    def classify(self, composite_score: float, answers: AnswerSet) -> RiskTier:
        return self.assess(composite_score, answers).risk_tier

    def assess(self, composite_score: float, answers: AnswerSet) -> RiskAssessment:
        score_tier = tier_for(composite_score, self.thresholds)
        red_flags = evaluate_red_flags(answers)

        tier = score_tier
        if red_flags and tier.rank < RiskTier.HIGH.rank:
            logger.debug(
                f"RiskClassifier: {len(red_flags)} red flag(s), "
                f"escalating {score_tier.value} → high"
            )
            tier = RiskTier.HIGH

        if score_tier == RiskTier.LOW:
            next_threshold = self.thresholds.low_max
        elif score_tier == RiskTier.MODERATE:
            next_threshold = self.thresholds.moderate_max
        else:
            next_threshold = 100.0

        escalated = bool(red_flags)
        return RiskAssessment(
            composite_score=composite_score,
            score_tier=score_tier,
            risk_tier=tier,
            red_flags=tuple(red_flags),
            clinical_alerts=tuple(evaluate_clinical_alerts(answers)),
            requires_immediate_attention=escalated,
            follow_up_recommended=composite_score > self.thresholds.low_max or escalated,
            specialist_referral=composite_score > self.thresholds.moderate_max or escalated,
            next_threshold=next_threshold,
            distance_to_next=max(0.0, next_threshold - composite_score),
        )
