"""
Quick Screening

Seven yes/no items, each carrying a risk weight.  The weighted total
(0–11) maps onto a tier; a reported locking episode escalates to high
exactly as it does in the full assessment.  No diagnostic codes are
mapped: the result says whether the full questionnaire should follow and
how urgently.

    0–2 → low      3–5 → moderate      6+ → high

Usage:
    from tmdscreen.core.screening import QuickScreener

    result = QuickScreener().screen({"q1": True, "q4": True})
    print(result.risk_tier, result.full_assessment_recommended)
"""
from __future__ import annotations

from collections.abc import Mapping as MappingABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from tmdscreen.core.catalog import AnswerDomain, Category, Question
from tmdscreen.core.clinical.base import RiskTier
from tmdscreen.core.clinical.risk import RED_FLAG_LOCKING
from tmdscreen.utils import InputError, get_logger

logger = get_logger(__name__)

QUICK_SCREENING = "QUICK_SCREENING"
CLASSIFICATION_LABEL = "Screening Assessment"

QUICK_LOW_MAX      = 2
QUICK_MODERATE_MAX = 5
QUICK_MAX_CONFIDENCE = 75.0      # Ceiling for a seven-item screen
LOCKING_ITEM = "q4"


def _item(qid: str, category: Category, weight: float, label: str, text: str) -> Question:
    return Question(
        id=qid,
        text=text,
        label=label,
        category=category,
        domain=AnswerDomain.boolean(),
        point_weight=weight,
    )


QUICK_QUESTIONS: Tuple[Question, ...] = (
    _item("q1", Category.PAIN, 2, "Jaw pain",
          "Do you have pain or discomfort in your jaw, temple, or ear area?"),
    _item("q2", Category.PAIN, 2, "Pain on movement",
          "Does the pain get worse when you chew, talk, or open your mouth wide?"),
    _item("q3", Category.JOINT_SOUNDS, 1, "Joint sounds",
          "Do you hear clicking, popping, or grating sounds from your jaw?"),
    _item("q4", Category.FUNCTION, 3, "Jaw locking",
          "Has your jaw ever locked or gotten stuck open or closed?"),
    _item("q5", Category.ASSOCIATED, 1, "Referred symptoms",
          "Do you have headaches, neck pain, or ear symptoms alongside jaw problems?"),
    _item("q6", Category.HISTORY, 1, "Trauma or dental work",
          "Have you had a jaw injury or extensive dental work recently?"),
    _item("q7", Category.FUNCTION, 1, "Stiffness or fatigue",
          "Does your jaw feel stiff or tired, especially in the morning?"),
)

QUICK_QUESTIONS_BY_ID: Mapping[str, Question] = MappingProxyType(
    {q.id: q for q in QUICK_QUESTIONS}
)
QUICK_MAX_SCORE = sum(q.point_weight for q in QUICK_QUESTIONS)

# Representative 0–100 score reported for each tier
TIER_SCORES: Mapping[RiskTier, float] = MappingProxyType({
    RiskTier.LOW:      25.0,
    RiskTier.MODERATE: 55.0,
    RiskTier.HIGH:     85.0,
})

QUICK_RECOMMENDATIONS: Mapping[RiskTier, Tuple[str, ...]] = MappingProxyType({
    RiskTier.LOW: (
        "Monitor symptoms and note any changes",
        "Apply warm compresses for comfort",
        "Avoid hard or chewy foods temporarily",
    ),
    RiskTier.MODERATE: (
        "Complete comprehensive assessment for detailed evaluation",
        "Consult with healthcare provider if symptoms persist",
        "Practice jaw relaxation techniques",
    ),
    RiskTier.HIGH: (
        "Seek immediate professional evaluation",
        "Complete comprehensive assessment urgently",
        "Avoid jaw overuse and implement jaw rest",
    ),
})


def quick_tier_for(score: float) -> RiskTier:
    if score <= QUICK_LOW_MAX:
        return RiskTier.LOW
    if score <= QUICK_MODERATE_MAX:
        return RiskTier.MODERATE
    return RiskTier.HIGH


@dataclass(frozen=True)
class QuickScreeningResult:
    answers: Tuple[Tuple[str, Optional[bool]], ...]
    score: float
    max_score: float
    score_tier: RiskTier
    risk_tier: RiskTier
    screening_score: float
    confidence: float
    recommendations: Tuple[str, ...]
    red_flags: Tuple[str, ...] = ()
    contributing_factors: Tuple[str, ...] = ()
    computed_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )

    @property
    def requires_immediate_attention(self) -> bool:
        return self.risk_tier == RiskTier.HIGH

    @property
    def follow_up_recommended(self) -> bool:
        return self.risk_tier != RiskTier.LOW

    @property
    def specialist_referral(self) -> bool:
        return self.risk_tier == RiskTier.HIGH

    @property
    def full_assessment_recommended(self) -> bool:
        return self.risk_tier != RiskTier.LOW

    def to_dict(self) -> dict:
        return {
            "assessment_type": QUICK_SCREENING,
            "classification": CLASSIFICATION_LABEL,
            "answers": dict(self.answers),
            "score": self.score,
            "max_score": self.max_score,
            "score_tier": self.score_tier.value,
            "risk_tier": self.risk_tier.value,
            "screening_score": self.screening_score,
            "confidence": round(self.confidence, 1),
            "recommendations": list(self.recommendations),
            "red_flags": list(self.red_flags),
            "contributing_factors": list(self.contributing_factors),
            "requires_immediate_attention": self.requires_immediate_attention,
            "follow_up_recommended": self.follow_up_recommended,
            "specialist_referral": self.specialist_referral,
            "full_assessment_recommended": self.full_assessment_recommended,
            "computed_at": self.computed_at.isoformat(),
        }


def _parse(raw: Optional[Mapping[str, Any]]) -> Tuple[Tuple[str, Optional[bool]], ...]:
    if raw is None:
        raise InputError("Quick screening answers are required")
    if not isinstance(raw, MappingABC):
        raise InputError(f"Quick screening answers must be a mapping, got {type(raw).__name__}")

    unknown = sorted(str(k) for k in raw if k not in QUICK_QUESTIONS_BY_ID)
    if unknown:
        raise InputError(
            f"Unknown quick screening question id(s): {', '.join(unknown)}",
            question_id=unknown[0],
        )

    parsed = []
    for question in QUICK_QUESTIONS:
        value = raw.get(question.id)
        if value is not None and not question.domain.accepts(value):
            raise InputError(
                f"Answer {value!r} for quick screening question '{question.id}' "
                f"must be {question.domain.describe()}",
                question_id=question.id,
            )
        parsed.append((question.id, value))

    if all(value is None for _, value in parsed):
        raise InputError("Quick screening needs at least one answered question")
    return tuple(parsed)


class QuickScreener:
    """Stateless; the item table is a module-level constant."""

    def screen(self, raw: Optional[Mapping[str, Any]]) -> QuickScreeningResult:
        """
        Score a quick screening.

        Raises:
            InputError: answers missing, unknown ids, non-boolean values or
                nothing answered at all.
        """
        answers = _parse(raw)
        values = dict(answers)

        score = 0.0
        factors = []
        for question in QUICK_QUESTIONS:
            points = question.contribution(values[question.id])
            if points > 0:
                score += points
                factors.append(question.label)

        score_tier = quick_tier_for(score)
        red_flags = (RED_FLAG_LOCKING,) if values[LOCKING_ITEM] is True else ()
        tier = RiskTier.HIGH if red_flags else score_tier
        if tier != score_tier:
            logger.debug(f"QuickScreener: locking reported, escalating {score_tier.value} → high")

        answered = sum(1 for _, value in answers if value is not None)
        return QuickScreeningResult(
            answers=answers,
            score=score,
            max_score=QUICK_MAX_SCORE,
            score_tier=score_tier,
            risk_tier=tier,
            screening_score=TIER_SCORES[tier],
            confidence=answered / len(QUICK_QUESTIONS) * QUICK_MAX_CONFIDENCE,
            recommendations=QUICK_RECOMMENDATIONS[tier],
            red_flags=red_flags,
            contributing_factors=tuple(factors),
        )
