"""
Clinical Profile

The tag set and numeric magnitudes the code mapper compares against each
catalog entry.  Magnitudes use the 0–4 DC/TMD scale so they are directly
comparable with the catalog thresholds.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Mapping

from tmdscreen.core.catalog import QUESTION_CATALOG, AnswerSet, Category, Laterality
from tmdscreen.core.catalog.questions import (
    LOCKING_QUESTIONS,
    PAIN_SEVERITY,
    SCALE_MAX,
    SOUND_QUESTIONS,
)
from tmdscreen.core.scoring.category import CategoryScore, percentage_of

SEVERE_LIMITATION_PERCENTAGE = 75.0

TAG_SEVERE_LIMITATION = "severe_limitation"
TAG_DISC_DISPLACEMENT = "disc_displacement"


@dataclass(frozen=True)
class ClinicalProfile:
    tags: FrozenSet[str]
    pain_intensity: float            # 0–4
    functional_limitation: float     # 0–4
    has_joint_sounds: bool
    has_locking: bool

    @property
    def laterality(self) -> Laterality:
        if "bilateral" in self.tags:
            return Laterality.BILATERAL
        if "right_side" in self.tags:
            return Laterality.RIGHT
        if "left_side" in self.tags:
            return Laterality.LEFT
        return Laterality.UNSPECIFIED

    def has(self, tag: str) -> bool:
        return tag in self.tags


def build_profile(
    answers: AnswerSet,
    category_scores: Mapping[Category, CategoryScore],
) -> ClinicalProfile:
    tags = set()
    for question in QUESTION_CATALOG:
        tags.update(question.tags_for(answers.get(question.id)))

    function_pct = percentage_of(category_scores, Category.FUNCTION)
    if function_pct > SEVERE_LIMITATION_PERCENTAGE:
        tags.add(TAG_SEVERE_LIMITATION)
    if ({"clicking", "popping"} & tags) and ({"locking", "deviation"} & tags):
        tags.add(TAG_DISC_DISPLACEMENT)

    # Reported pain level wins; otherwise rescale the pain percentage
    pain_level = answers.get(PAIN_SEVERITY)
    if pain_level is not None:
        pain_intensity = float(pain_level)
    else:
        pain_intensity = percentage_of(category_scores, Category.PAIN) / 100.0 * SCALE_MAX

    return ClinicalProfile(
        tags=frozenset(tags),
        pain_intensity=pain_intensity,
        functional_limitation=function_pct / 100.0 * SCALE_MAX,
        has_joint_sounds=any(answers.is_true(q) for q in SOUND_QUESTIONS),
        has_locking=any(answers.is_true(q) for q in LOCKING_QUESTIONS),
    )
