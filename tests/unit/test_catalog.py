"""
Unit Tests for the Catalog Layer

Tests for the question catalog, answer parsing and the diagnostic code catalog.
"""
import pytest

from tmdscreen.core.catalog import (
    CODE_CATALOG,
    CODES_BY_ID,
    QUESTION_CATALOG,
    QUESTIONS_BY_ID,
    TOTAL_QUESTIONS,
    AnswerSet,
    Category,
    CodeFamily,
    DiagnosticCode,
    Laterality,
    MatchCriteria,
    ProtocolVariant,
    SeverityBand,
    questions_in,
    required_questions,
    verify_code_catalog,
)
from tmdscreen.core.catalog.questions import SOUND_BOTH, SOUND_LEFT, SOUND_NONE
from tmdscreen.utils import CatalogIntegrityError, InputError


class TestQuestionCatalog:
    """Tests for the static question definitions."""

    def test_catalog_has_26_unique_questions(self):
        assert TOTAL_QUESTIONS == 26
        assert len(QUESTIONS_BY_ID) == 26
        assert [q.id for q in QUESTION_CATALOG] == [f"q{i}" for i in range(1, 27)]

    def test_every_category_has_questions(self):
        for category in Category:
            assert questions_in(category), category

    def test_boolean_contribution(self):
        q1 = QUESTIONS_BY_ID["q1"]
        assert q1.contribution(True) == q1.point_weight
        assert q1.contribution(False) == 0
        assert q1.contribution(None) == 0

    def test_scale_contribution_is_proportional(self):
        q7 = QUESTIONS_BY_ID["q7"]
        assert q7.contribution(2) == pytest.approx(q7.point_weight / 2)
        assert q7.contribution(4) == pytest.approx(q7.point_weight)

    def test_enum_contribution_uses_option_points(self):
        q11 = QUESTIONS_BY_ID["q11"]
        assert q11.contribution(SOUND_BOTH) > q11.contribution(SOUND_LEFT) > q11.contribution(SOUND_NONE)
        assert q11.contribution(SOUND_NONE) == 0

    def test_enum_tags(self):
        q11 = QUESTIONS_BY_ID["q11"]
        assert q11.tags_for(SOUND_BOTH) == ("bilateral",)
        assert q11.tags_for(SOUND_NONE) == ()

    def test_scale_domain_rejects_booleans(self):
        q7 = QUESTIONS_BY_ID["q7"]
        assert not q7.domain.accepts(True)
        assert q7.domain.accepts(0)
        assert not q7.domain.accepts(5)

    def test_required_questions_grow_with_variant(self):
        screening = set(required_questions(ProtocolVariant.SCREENING))
        axis1 = set(required_questions(ProtocolVariant.DC_TMD_AXIS_I))
        axis2 = set(required_questions(ProtocolVariant.DC_TMD_AXIS_II))
        assert screening == {f"q{i}" for i in range(1, 8)}
        assert screening < axis1 < axis2
        assert len(axis2) == 17


class TestAnswerSet:
    """Tests for answer parsing and domain checks."""

    def test_missing_answers_rejected(self):
        with pytest.raises(InputError):
            AnswerSet.from_mapping(None)

    def test_non_mapping_rejected(self):
        with pytest.raises(InputError):
            AnswerSet.from_mapping([("q1", True)])

    def test_unknown_question_rejected(self):
        with pytest.raises(InputError) as exc_info:
            AnswerSet.from_mapping({"q99": True})
        assert exc_info.value.question_id == "q99"

    def test_out_of_range_scale_rejected(self):
        with pytest.raises(InputError) as exc_info:
            AnswerSet.from_mapping({"q7": 15})
        assert exc_info.value.question_id == "q7"
        assert exc_info.value.to_dict()["error"] == "INPUT_ERROR"

    def test_wrong_type_rejected(self):
        with pytest.raises(InputError):
            AnswerSet.from_mapping({"q1": "yes"})
        with pytest.raises(InputError):
            AnswerSet.from_mapping({"q7": True})

    def test_unknown_enum_option_rejected(self):
        with pytest.raises(InputError):
            AnswerSet.from_mapping({"q11": "Middle"})

    def test_unanswered_questions_map_to_none(self):
        answers = AnswerSet.from_mapping({"q1": True})
        assert len(answers) == TOTAL_QUESTIONS
        assert answers["q1"] is True
        assert answers["q2"] is None
        assert answers.answered_count == 1
        assert not answers.is_answered("q2")

    def test_order_follows_catalog(self):
        answers = AnswerSet.from_mapping({"q26": True, "q1": False})
        assert list(answers)[:2] == ["q1", "q2"]

    def test_equality_and_passthrough(self):
        a = AnswerSet.from_mapping({"q1": True, "q7": 2})
        b = AnswerSet.from_mapping({"q7": 2, "q1": True})
        assert a == b
        assert hash(a) == hash(b)
        assert AnswerSet.from_mapping(a) is a

    def test_empty(self):
        assert AnswerSet.empty().answered_count == 0


class TestCodeCatalog:
    """Tests for the diagnostic code catalog."""

    def test_catalog_verified(self):
        assert len(CODES_BY_ID) == len(CODE_CATALOG)
        assert "M26.609" in CODES_BY_ID

    def test_laterality_from_description(self):
        assert CODES_BY_ID["M26.603"].laterality == Laterality.BILATERAL
        assert CODES_BY_ID["M26.601"].laterality == Laterality.RIGHT
        assert CODES_BY_ID["M26.622"].laterality == Laterality.LEFT
        assert CODES_BY_ID["M79.11"].laterality == Laterality.UNSPECIFIED
        assert CODES_BY_ID["M26.609"].laterality == Laterality.UNSPECIFIED

    def test_duplicate_code_rejected(self):
        entry = CODES_BY_ID["M26.601"]
        with pytest.raises(CatalogIntegrityError):
            verify_code_catalog([entry, entry])

    def test_unknown_exclusion_rejected(self):
        bad = DiagnosticCode(
            code="X00.0",
            description="Test code",
            category=CodeFamily.OTHER,
            severity_band=SeverityBand.MILD,
            match_criteria=MatchCriteria(exclusions=("Z99.9",)),
        )
        with pytest.raises(CatalogIntegrityError) as exc_info:
            verify_code_catalog([bad])
        assert exc_info.value.code == "CATALOG_INTEGRITY_ERROR"

    def test_family_exclusion_needs_family_present(self):
        muscle_only = [CODES_BY_ID["M79.11"]]
        with pytest.raises(CatalogIntegrityError):
            verify_code_catalog(muscle_only)
