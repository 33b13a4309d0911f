"""
Comprehensive TMD Questionnaire — Question Catalog

The 26-item battery, grouped into five categories.  Pain severity and
stress use the 0–4 DC/TMD ordinal scale.

The catalog is static: it is built once at import, validated once, and
only ever read afterwards.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from tmdscreen.utils import CatalogIntegrityError, get_logger
from .base import AnswerDomain, Category, DomainKind, ProtocolVariant, Question

logger = get_logger(__name__)

# ── Scale bounds (DC/TMD 0–4 standard) ────────────────────────────────────────
SCALE_MIN = 0
SCALE_MAX = 4

# ── Enumerated option labels ──────────────────────────────────────────────────
SOUND_RIGHT = "Right side"
SOUND_LEFT  = "Left side"
SOUND_BOTH  = "Both sides"
SOUND_NONE  = "No sounds"

BRUXISM_DEFINITE     = "Yes, definitely"
BRUXISM_PROBABLE     = "I think so"
BRUXISM_UNLIKELY     = "I don't think so"
BRUXISM_DEFINITE_NOT = "No, definitely not"

# ── Question ids referenced by rules elsewhere ────────────────────────────────
PAIN_SEVERITY   = "q7"
SOUND_QUESTIONS = ("q8", "q9", "q10")
SOUND_LOCATION  = "q11"
LIMITED_OPENING = "q12"
LOCKING_QUESTIONS = ("q13", "q14")
STRESS_LEVEL    = "q24"


def _yes_no(qid: str, category: Category, points: float, label: str, text: str,
            *tags: str) -> Question:
    return Question(
        id=qid,
        text=text,
        label=label,
        category=category,
        domain=AnswerDomain.boolean(),
        point_weight=points,
        tags=tags,
    )


def _scale(qid: str, category: Category, points: float, label: str, text: str) -> Question:
    return Question(
        id=qid,
        text=text,
        label=label,
        category=category,
        domain=AnswerDomain.scale(SCALE_MIN, SCALE_MAX),
        point_weight=points,
    )


QUESTION_CATALOG: Tuple[Question, ...] = (
    # ── Pain ──────────────────────────────────────────────────────────────
    _yes_no("q1", Category.PAIN, 2, "Jaw pain at rest",
            "Do you have pain in your jaw, temple, in the ear, or in front of the ear at rest?",
            "joint_pain"),
    _yes_no("q2", Category.PAIN, 2, "Pain when opening wide",
            "Do you have pain when you open your mouth wide?", "joint_pain"),
    _yes_no("q3", Category.PAIN, 2, "Pain when chewing",
            "Do you have pain when chewing food or gum?", "muscle_pain"),
    _yes_no("q4", Category.PAIN, 2, "Temple pain",
            "Do you have pain in your temples?", "muscle_pain", "muscle_tenderness"),
    _yes_no("q5", Category.PAIN, 2, "Ear area pain",
            "Do you have pain in or around your ears?", "joint_pain"),
    _yes_no("q6", Category.PAIN, 2, "Morning jaw stiffness",
            "Do you wake up with a stiff or sore jaw in the morning?", "muscle_tenderness"),
    _scale("q7", Category.PAIN, 4, "Pain intensity",
           "What is your average jaw pain level over the past week? (0 = none, 4 = very severe)"),

    # ── Joint sounds ──────────────────────────────────────────────────────
    _yes_no("q8", Category.JOINT_SOUNDS, 1, "Clicking sounds",
            "Does your jaw make clicking sounds when you open or close your mouth?", "clicking"),
    _yes_no("q9", Category.JOINT_SOUNDS, 1, "Popping sounds",
            "Does your jaw make popping sounds when you open or close your mouth?", "popping"),
    _yes_no("q10", Category.JOINT_SOUNDS, 1, "Grating sounds",
            "Does your jaw make grinding or grating sounds when you move it?", "grinding"),
    Question(
        id="q11",
        text="If you hear sounds, are they on the right side, left side, or both sides?",
        label="Joint sound location",
        category=Category.JOINT_SOUNDS,
        domain=AnswerDomain.choice({
            SOUND_RIGHT: 1,
            SOUND_LEFT:  1,
            SOUND_BOTH:  2,
            SOUND_NONE:  0,
        }),
        point_weight=2,
        option_tags={
            SOUND_RIGHT: ("right_side",),
            SOUND_LEFT:  ("left_side",),
            SOUND_BOTH:  ("bilateral",),
        },
    ),

    # ── Jaw function ──────────────────────────────────────────────────────
    _yes_no("q12", Category.FUNCTION, 3, "Limited mouth opening",
            "Do you have difficulty opening your mouth wide?", "limited_opening"),
    _yes_no("q13", Category.FUNCTION, 3, "Jaw locked closed",
            "Has your jaw ever locked in the closed position?", "locking"),
    _yes_no("q14", Category.FUNCTION, 3, "Jaw locked open",
            "Has your jaw ever locked in the open position?", "locking"),
    _yes_no("q15", Category.FUNCTION, 3, "Deviation on opening",
            "Does your jaw deviate (move to one side) when you open your mouth?", "deviation"),
    _yes_no("q16", Category.FUNCTION, 3, "Difficulty chewing hard foods",
            "Do you have difficulty chewing hard or tough foods?", "chewing_difficulty"),
    _yes_no("q17", Category.FUNCTION, 3, "Chewing muscle fatigue",
            "Do your jaw muscles get tired easily when chewing?", "muscle_pain"),

    # ── Associated symptoms ───────────────────────────────────────────────
    _yes_no("q18", Category.ASSOCIATED, 1, "Headaches",
            "Do you frequently have headaches?", "headache"),
    _yes_no("q19", Category.ASSOCIATED, 1, "Neck pain",
            "Do you have neck pain or stiffness?", "neck_pain"),
    _yes_no("q20", Category.ASSOCIATED, 1, "Tinnitus",
            "Do you have ringing in your ears (tinnitus)?", "tinnitus"),
    _yes_no("q21", Category.ASSOCIATED, 1, "Dizziness",
            "Do you experience dizziness or balance problems?", "dizziness"),

    # ── History & triggers ────────────────────────────────────────────────
    _yes_no("q22", Category.HISTORY, 3, "Recent dental work",
            "Have you had recent dental work or oral surgery?", "dental_work"),
    _yes_no("q23", Category.HISTORY, 3, "Jaw or face trauma",
            "Have you had any injury or trauma to your jaw, face, or head?", "trauma"),
    _scale("q24", Category.HISTORY, 4, "Stress level",
           "How would you rate your current stress level? (0 = very low, 4 = very high)"),
    Question(
        id="q25",
        text="Do you grind or clench your teeth while sleeping?",
        label="Sleep bruxism",
        category=Category.HISTORY,
        domain=AnswerDomain.choice({
            BRUXISM_DEFINITE:     3,
            BRUXISM_PROBABLE:     2,
            BRUXISM_UNLIKELY:     1,
            BRUXISM_DEFINITE_NOT: 0,
        }),
        point_weight=3,
        option_tags={
            BRUXISM_DEFINITE: ("bruxism",),
            BRUXISM_PROBABLE: ("bruxism",),
        },
    ),
    _yes_no("q26", Category.HISTORY, 2, "Daytime clenching",
            "Do you clench your teeth during the day when concentrating or stressed?",
            "clenching"),
)


def verify_question_catalog(catalog: Tuple[Question, ...]) -> Mapping[str, Question]:
    """
    Check catalog integrity and return a read-only id → Question index.

    Raises:
        CatalogIntegrityError: duplicate ids, non-positive weights, or an
            enum whose point weight differs from its largest option value.
    """
    index: Dict[str, Question] = {}
    for question in catalog:
        if question.id in index:
            raise CatalogIntegrityError(
                f"Duplicate question id '{question.id}'", catalog="questions"
            )
        if question.point_weight <= 0:
            raise CatalogIntegrityError(
                f"Question '{question.id}' has non-positive point weight",
                catalog="questions",
            )
        if question.domain.kind == DomainKind.ENUM:
            top = max(points for _, points in question.domain.options)
            if top != question.point_weight:
                raise CatalogIntegrityError(
                    f"Question '{question.id}' point weight {question.point_weight} "
                    f"does not match its largest option value {top}",
                    catalog="questions",
                )
            unknown = set(question.option_tags) - set(question.domain.option_names)
            if unknown:
                raise CatalogIntegrityError(
                    f"Question '{question.id}' tags unknown options: {sorted(unknown)}",
                    catalog="questions",
                )
        index[question.id] = question
    return MappingProxyType(index)


QUESTIONS_BY_ID: Mapping[str, Question] = verify_question_catalog(QUESTION_CATALOG)

TOTAL_QUESTIONS = len(QUESTION_CATALOG)


def questions_in(category: Category) -> List[Question]:
    """Questions belonging to ``category``, in catalog order."""
    return [q for q in QUESTION_CATALOG if q.category == category]


logger.debug(f"Question catalog loaded: {TOTAL_QUESTIONS} questions")


# ── Questions mandated per protocol variant ───────────────────────────────────
_BASE_REQUIRED = ("q1", "q2", "q3", "q4", "q5", "q6", "q7")

REQUIRED_QUESTIONS: Mapping[ProtocolVariant, Tuple[str, ...]] = MappingProxyType({
    ProtocolVariant.SCREENING:      _BASE_REQUIRED,
    ProtocolVariant.DC_TMD_AXIS_I:  _BASE_REQUIRED + ("q8", "q9", "q10", "q11"),
    ProtocolVariant.DC_TMD_AXIS_II: _BASE_REQUIRED + (
        "q8", "q9", "q10", "q11", "q12", "q13", "q14", "q15", "q16", "q17",
    ),
})


def required_questions(variant: ProtocolVariant) -> Tuple[str, ...]:
    """Question ids that must be answered under ``variant``."""
    return REQUIRED_QUESTIONS.get(variant, _BASE_REQUIRED)
