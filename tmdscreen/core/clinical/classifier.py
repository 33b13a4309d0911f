"""
Clinical Classifier

Derives a disorder category, subtype, severity and chronicity from the
category scores and specific answer patterns.

Decision order:
    1. joint sounds + locking           → joint (disc displacement with locking)
    2. pain-dominant presentation       → muscle (myofascial pain)
    3. both 1 and 2                     → mixed, overriding either single result
    4. neither: sound- or function-dominant joint patterns, else nonspecific muscle
"""
from __future__ import annotations

from typing import Mapping

from tmdscreen.core.catalog import AnswerSet, Category
from tmdscreen.core.catalog.questions import LOCKING_QUESTIONS, SOUND_QUESTIONS
from tmdscreen.core.scoring.category import (
    CategoryScore,
    Interpretation,
    interpret,
    percentage_of,
)
from tmdscreen.utils import get_logger
from .base import (
    Chronicity,
    ClinicalClassification,
    DisorderCategory,
    Severity,
)

logger = get_logger(__name__)

DOMINANT_PERCENTAGE = 50.0

# No onset or duration questions exist yet, so chronicity cannot be derived.
# Revisit once timeline items are added to the question catalog.
DEFAULT_CHRONICITY = Chronicity.CHRONIC

SUBTYPE_DISC_WITH_LOCKING    = "disc_displacement_with_locking"
SUBTYPE_DISC_WITHOUT_LOCKING = "disc_displacement_without_locking"
SUBTYPE_MYOFASCIAL           = "myofascial_pain"
SUBTYPE_MIXED                = "myofascial_pain_with_disc_displacement"
SUBTYPE_ARTHRALGIA           = "arthralgia"
SUBTYPE_NONSPECIFIC          = "nonspecific"

_SEVERITY_BY_BAND = {
    Interpretation.NORMAL:   Severity.MILD,
    Interpretation.MILD:     Severity.MILD,
    Interpretation.MODERATE: Severity.MODERATE,
    Interpretation.SEVERE:   Severity.SEVERE,
}


def severity_from(function_percentage: float) -> Severity:
    return _SEVERITY_BY_BAND[interpret(function_percentage)]


class ClinicalClassifier:
    """Stateless — safe for concurrent use."""

    def classify(
        self,
        category_scores: Mapping[Category, CategoryScore],
        answers: AnswerSet,
    ) -> ClinicalClassification:
        pain_pct = percentage_of(category_scores, Category.PAIN)
        function_pct = percentage_of(category_scores, Category.FUNCTION)
        sounds_pct = percentage_of(category_scores, Category.JOINT_SOUNDS)

        has_sounds = any(answers.is_true(q) for q in SOUND_QUESTIONS)
        has_locking = any(answers.is_true(q) for q in LOCKING_QUESTIONS)
        disc_pattern = has_sounds and has_locking
        pain_dominant = pain_pct > DOMINANT_PERCENTAGE

        if disc_pattern and pain_dominant:
            category, subtype = DisorderCategory.MIXED, SUBTYPE_MIXED
        elif disc_pattern:
            category, subtype = DisorderCategory.JOINT, SUBTYPE_DISC_WITH_LOCKING
        elif pain_dominant:
            category, subtype = DisorderCategory.MUSCLE, SUBTYPE_MYOFASCIAL
        elif sounds_pct > DOMINANT_PERCENTAGE:
            category, subtype = DisorderCategory.JOINT, SUBTYPE_DISC_WITHOUT_LOCKING
        elif function_pct > DOMINANT_PERCENTAGE:
            category, subtype = DisorderCategory.JOINT, SUBTYPE_ARTHRALGIA
        else:
            category, subtype = DisorderCategory.MUSCLE, SUBTYPE_NONSPECIFIC

        classification = ClinicalClassification(
            category=category,
            subtype=subtype,
            severity=severity_from(function_pct),
            chronicity=DEFAULT_CHRONICITY,
        )
        logger.debug(
            f"ClinicalClassifier: {category.value}/{subtype} "
            f"severity={classification.severity.value}"
        )
        return classification
