"""
Response Consistency Checks

Logical contradictions between answers.  The confidence estimator turns
them into a numeric penalty; the protocol validator reports them as
warnings.  Both read the same list.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

from tmdscreen.core.catalog import AnswerSet, Category
from tmdscreen.core.catalog.questions import (
    LIMITED_OPENING,
    PAIN_SEVERITY,
    SOUND_LOCATION,
    SOUND_NONE,
    SOUND_QUESTIONS,
)
from .category import CategoryScore, score_category

MAJOR_PENALTY = 10.0
MINOR_PENALTY = 5.0

HIGH_PAIN_LEVEL = 3
_PAIN_SYMPTOMS = ("q1", "q2", "q3")
_LOCKED_CLOSED = "q13"


@dataclass(frozen=True)
class ConsistencyIssue:
    check_id: str
    message: str
    penalty: float

    def to_dict(self) -> dict:
        return {"check_id": self.check_id, "message": self.message, "penalty": self.penalty}


def find_inconsistencies(
    answers: AnswerSet,
    category_scores: Optional[Mapping[Category, CategoryScore]] = None,
) -> List[ConsistencyIssue]:
    """Run every consistency check; result order is fixed."""
    issues: List[ConsistencyIssue] = []
    pain = answers.get(PAIN_SEVERITY)

    if category_scores is not None and Category.FUNCTION in category_scores:
        function = category_scores[Category.FUNCTION]
    else:
        function = score_category(answers, Category.FUNCTION)
    if pain is not None and pain >= HIGH_PAIN_LEVEL and function.answered > 0 and function.raw_score == 0:
        issues.append(ConsistencyIssue(
            "HIGH_PAIN_NO_LIMITATION",
            "High pain level reported with no functional limitation",
            MAJOR_PENALTY,
        ))

    if pain == 0 and any(answers.is_true(q) for q in _PAIN_SYMPTOMS):
        issues.append(ConsistencyIssue(
            "ZERO_PAIN_WITH_PAIN_SYMPTOMS",
            "Pain level 0 reported alongside specific pain symptoms",
            MAJOR_PENALTY,
        ))

    location = answers.get(SOUND_LOCATION)
    any_sound = any(answers.is_true(q) for q in SOUND_QUESTIONS)
    if location == SOUND_NONE and any_sound:
        issues.append(ConsistencyIssue(
            "NO_SOUNDS_LOCATION_CONFLICT",
            "Sound location answered 'No sounds' while a joint sound is reported",
            MAJOR_PENALTY,
        ))

    if answers.is_true(_LOCKED_CLOSED) and answers.is_false(LIMITED_OPENING):
        issues.append(ConsistencyIssue(
            "LOCKING_WITHOUT_LIMITATION",
            "Closed locking reported while limited opening is denied",
            MINOR_PENALTY,
        ))

    if (location is not None and location != SOUND_NONE
            and all(answers.is_false(q) for q in SOUND_QUESTIONS)):
        issues.append(ConsistencyIssue(
            "SOUND_SIDE_WITHOUT_SOUNDS",
            "A sound location is given but every joint sound is denied",
            MINOR_PENALTY,
        ))

    return issues


def apply_penalties(issues: Iterable[ConsistencyIssue], baseline: float) -> float:
    """Baseline minus additive penalties, floored at 0."""
    return max(0.0, baseline - sum(i.penalty for i in issues))


def consistency_score(
    answers: AnswerSet,
    baseline: float,
    category_scores: Optional[Mapping[Category, CategoryScore]] = None,
) -> float:
    return apply_penalties(find_inconsistencies(answers, category_scores), baseline)
