"""
Category Scorer

Reduces the answered questions of one category into a raw score, the
answered maximum, a percentage and a qualitative band.  Unanswered
questions count toward neither numerator nor denominator.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from tmdscreen.core.catalog import AnswerSet, Category, Question, questions_in

# ── Interpretation bands (percentage upper bounds, inclusive) ──────────────────
NORMAL_MAX   = 25.0
MILD_MAX     = 50.0
MODERATE_MAX = 75.0


class Interpretation(str, Enum):
    NORMAL   = "normal"
    MILD     = "mild"
    MODERATE = "moderate"
    SEVERE   = "severe"


def interpret(percentage: float) -> Interpretation:
    """4-band label for any 0–100 percentage."""
    if percentage <= NORMAL_MAX:
        return Interpretation.NORMAL
    if percentage <= MILD_MAX:
        return Interpretation.MILD
    if percentage <= MODERATE_MAX:
        return Interpretation.MODERATE
    return Interpretation.SEVERE


# ── Clinical significance per category and band ─────────────────────────────
CLINICAL_SIGNIFICANCE: Mapping[Category, Mapping[Interpretation, str]] = MappingProxyType({
    Category.PAIN: MappingProxyType({
        Interpretation.NORMAL:   "Minimal pain impact - routine monitoring",
        Interpretation.MILD:     "Mild pain - conservative management indicated",
        Interpretation.MODERATE: "Moderate pain - active treatment recommended",
        Interpretation.SEVERE:   "Severe pain - immediate intervention required",
    }),
    Category.FUNCTION: MappingProxyType({
        Interpretation.NORMAL:   "Normal jaw function - no functional limitations",
        Interpretation.MILD:     "Mild functional impairment - lifestyle modifications",
        Interpretation.MODERATE: "Moderate functional limitation - therapy indicated",
        Interpretation.SEVERE:   "Severe functional impairment - comprehensive treatment needed",
    }),
    Category.JOINT_SOUNDS: MappingProxyType({
        Interpretation.NORMAL:   "Minimal joint sounds - likely normal variation",
        Interpretation.MILD:     "Mild joint sounds - monitor for progression",
        Interpretation.MODERATE: "Moderate joint sounds - structural changes possible",
        Interpretation.SEVERE:   "Significant joint sounds - detailed imaging recommended",
    }),
    Category.ASSOCIATED: MappingProxyType({
        Interpretation.NORMAL:   "Few associated symptoms - localized condition",
        Interpretation.MILD:     "Some associated symptoms - regional involvement",
        Interpretation.MODERATE: "Multiple associated symptoms - systemic consideration",
        Interpretation.SEVERE:   "Extensive associated symptoms - comprehensive evaluation needed",
    }),
    Category.HISTORY: MappingProxyType({
        Interpretation.NORMAL:   "Low risk factors - good prognosis",
        Interpretation.MILD:     "Some risk factors - monitor triggers",
        Interpretation.MODERATE: "Multiple risk factors - address contributing factors",
        Interpretation.SEVERE:   "High risk profile - comprehensive risk management required",
    }),
})


def significance_for(category: Category, interpretation: Interpretation) -> str:
    return CLINICAL_SIGNIFICANCE[category][interpretation]


@dataclass(frozen=True)
class CategoryScore:
    category: Category
    raw_score: float
    max_score: float
    percentage: float
    interpretation: Interpretation
    contributing_factors: Tuple[str, ...] = ()
    answered: int = 0
    clinical_significance: str = ""

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "raw_score": round(self.raw_score, 2),
            "max_score": round(self.max_score, 2),
            "percentage": round(self.percentage, 1),
            "interpretation": self.interpretation.value,
            "contributing_factors": list(self.contributing_factors),
            "answered": self.answered,
            "clinical_significance": self.clinical_significance,
        }


def score_category(
    answers: AnswerSet,
    category: Category,
    questions: Optional[Iterable[Question]] = None,
) -> CategoryScore:
    """
    Score one category.

    Args:
        answers:   Parsed AnswerSet.
        category:  Category to score.
        questions: Override the catalog questions for the category.

    Returns:
        CategoryScore; percentage is 0 when nothing in the category was answered.
    """
    items = list(questions) if questions is not None else questions_in(category)

    raw = 0.0
    maximum = 0.0
    answered = 0
    factors = []
    for question in items:
        value = answers.get(question.id)
        if value is None:
            continue
        answered += 1
        maximum += question.point_weight
        points = question.contribution(value)
        raw += points
        if points > 0:
            factors.append(question.label)

    percentage = raw / maximum * 100.0 if maximum > 0 else 0.0
    percentage = min(100.0, max(0.0, percentage))
    band = interpret(percentage)

    return CategoryScore(
        category=category,
        raw_score=raw,
        max_score=maximum,
        percentage=percentage,
        interpretation=band,
        contributing_factors=tuple(factors),
        answered=answered,
        clinical_significance=significance_for(category, band),
    )


def score_all(answers: AnswerSet) -> Dict[Category, CategoryScore]:
    """Score every category, keyed in category declaration order."""
    return {category: score_category(answers, category) for category in Category}


def percentage_of(scores: Mapping[Category, CategoryScore], category: Category) -> float:
    score = scores.get(category)
    return score.percentage if score is not None else 0.0
