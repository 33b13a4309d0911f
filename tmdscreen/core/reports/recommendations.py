"""
Recommendation Generator

Deterministic lookup:
    risk tier → base recommendation list
    category percentage above CATEGORY_TRIGGER → category addition
    code family → follow-up monitoring parameters
    risk tier → prognosis outlook

Output order is tier items first, then category items in category
declaration order, then code-mapper items.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Tuple

from tmdscreen.core.catalog import Category, CodeFamily
from tmdscreen.core.clinical.base import RiskTier
from tmdscreen.core.clinical.risk import RiskAssessment
from tmdscreen.core.coding.mapper import MappingResult
from tmdscreen.core.scoring.category import CategoryScore, percentage_of

CATEGORY_TRIGGER = 60.0

TIER_RECOMMENDATIONS: Dict[RiskTier, Tuple[str, ...]] = {
    RiskTier.LOW: (
        "Continue self-care measures",
        "Monitor symptoms for any changes",
        "Practice stress reduction techniques",
    ),
    RiskTier.MODERATE: (
        "Schedule follow-up appointment in 4-6 weeks",
        "Consider conservative treatment options",
        "Implement jaw exercise program",
    ),
    RiskTier.HIGH: (
        "Urgent consultation with TMD specialist",
        "Consider prescription anti-inflammatory medication",
        "Implement comprehensive jaw rest protocol",
        "Evaluate for occlusal splint therapy",
        "Consider referral to TMD specialist",
    ),
}

CATEGORY_RECOMMENDATIONS: Dict[Category, str] = {
    Category.PAIN:         "Pain management consultation recommended",
    Category.FUNCTION:     "Physical therapy evaluation for jaw function",
    Category.JOINT_SOUNDS: "TMJ imaging evaluation may be indicated",
    Category.ASSOCIATED:   "Evaluate associated headache, neck and ear symptoms",
    Category.HISTORY:      "Address contributing risk factors and triggers",
}

FALLBACK_RECOMMENDATION = "Clinical examination to establish a specific diagnosis"

# ── Follow-up ────────────────────────────────────────────────────────────────
FOLLOW_UP_TIMEFRAME: Dict[RiskTier, str] = {
    RiskTier.LOW:      "As needed",
    RiskTier.MODERATE: "6-8 weeks",
    RiskTier.HIGH:     "2-4 weeks",
}

BASE_MONITORING = ("Pain level", "Functional status", "Treatment response")
BASE_RED_FLAGS = ("Worsening symptoms", "New neurological signs", "Severe functional decline")

FAMILY_MONITORING: Dict[CodeFamily, Tuple[str, ...]] = {
    CodeFamily.DISC_DISORDER:   ("Joint sounds and locking frequency", "Maximum mouth opening"),
    CodeFamily.JOINT_DISORDER:  ("Joint pain on loading",),
    CodeFamily.MUSCLE_DISORDER: ("Masticatory muscle tenderness",),
}

# ── Prognosis ───────────────────────────────────────────────────────────────
# (short term, long term) outlook per tier
PROGNOSIS_OUTLOOK: Dict[RiskTier, Tuple[str, str]] = {
    RiskTier.LOW:      ("good", "excellent"),
    RiskTier.MODERATE: ("fair", "good"),
    RiskTier.HIGH:     ("fair", "fair"),
}
PROGNOSIS_FACTORS = ("Treatment compliance", "Risk factor modification", "Early intervention")
PROGNOSIS_TIMELINE = "Improvement expected within 4-8 weeks with appropriate treatment"
FUNCTIONAL_OUTCOME = "Return to normal jaw function anticipated"


@dataclass(frozen=True)
class FollowUp:
    required: bool
    timeframe: str
    parameters: Tuple[str, ...] = ()
    red_flags: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "required": self.required,
            "timeframe": self.timeframe,
            "parameters": list(self.parameters),
            "red_flags": list(self.red_flags),
        }


@dataclass(frozen=True)
class Prognosis:
    short_term: str
    long_term: str
    factors: Tuple[str, ...] = PROGNOSIS_FACTORS
    timeline: str = PROGNOSIS_TIMELINE
    functional_outcome: str = FUNCTIONAL_OUTCOME

    def to_dict(self) -> dict:
        return {
            "short_term": self.short_term,
            "long_term": self.long_term,
            "factors": list(self.factors),
            "timeline": self.timeline,
            "functional_outcome": self.functional_outcome,
        }


@dataclass(frozen=True)
class RecommendationSet:
    recommendations: Tuple[str, ...]
    follow_up: FollowUp
    prognosis: Prognosis
    triggered_categories: Tuple[Category, ...] = field(default=(), compare=False)

    def to_dict(self) -> dict:
        return {
            "recommendations": list(self.recommendations),
            "follow_up": self.follow_up.to_dict(),
            "prognosis": self.prognosis.to_dict(),
        }


def _append_unique(items: List[str], value: str) -> None:
    if value not in items:
        items.append(value)


class RecommendationGenerator:
    """Stateless — lookups are module-level constants."""

    def generate(
        self,
        risk: RiskAssessment,
        category_scores: Mapping[Category, CategoryScore],
        mapping: MappingResult,
    ) -> RecommendationSet:
        tier = risk.risk_tier
        items: List[str] = list(TIER_RECOMMENDATIONS[tier])

        triggered = []
        for category in Category:
            if percentage_of(category_scores, category) > CATEGORY_TRIGGER:
                triggered.append(category)
                _append_unique(items, CATEGORY_RECOMMENDATIONS[category])

        if mapping.used_fallback:
            _append_unique(items, FALLBACK_RECOMMENDATION)

        return RecommendationSet(
            recommendations=tuple(items),
            follow_up=self.follow_up(risk, mapping),
            prognosis=self.prognosis(risk),
            triggered_categories=tuple(triggered),
        )

    @staticmethod
    def prognosis(risk: RiskAssessment) -> Prognosis:
        short_term, long_term = PROGNOSIS_OUTLOOK[risk.risk_tier]
        return Prognosis(short_term=short_term, long_term=long_term)

    @staticmethod
    def follow_up(risk: RiskAssessment, mapping: MappingResult) -> FollowUp:
        tier = risk.risk_tier
        parameters = list(BASE_MONITORING)
        for family in dict.fromkeys(c.category for c in mapping.all_codes):
            for item in FAMILY_MONITORING.get(family, ()):
                _append_unique(parameters, item)

        red_flags = list(BASE_RED_FLAGS)
        for flag in risk.red_flags:
            _append_unique(red_flags, flag)

        return FollowUp(
            required=tier != RiskTier.LOW,
            timeframe=FOLLOW_UP_TIMEFRAME[tier],
            parameters=tuple(parameters),
            red_flags=tuple(red_flags),
        )
