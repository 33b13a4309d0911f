"""
Unit Tests for the Scoring Layer

Tests for category scores, the weighted composite, consistency checks and
the confidence estimate.
"""
import pytest

from tmdscreen.config import DEFAULT_CATEGORY_WEIGHTS, ScoringProfile
from tmdscreen.core.catalog import AnswerSet, Category, QUESTION_CATALOG, DomainKind
from tmdscreen.core.catalog.questions import SOUND_BOTH, SOUND_NONE
from tmdscreen.core.scoring import (
    CLINICAL_SIGNIFICANCE,
    ConsistencyIssue,
    Interpretation,
    apply_penalties,
    assess_confidence,
    compose,
    consistency_score,
    estimate_confidence,
    find_inconsistencies,
    interpret,
    score_all,
    score_category,
    significance_for,
)
from tmdscreen.utils import CatalogIntegrityError


class TestInterpretation:

    @pytest.mark.parametrize("percentage,band", [
        (0, Interpretation.NORMAL),
        (25, Interpretation.NORMAL),
        (25.1, Interpretation.MILD),
        (50, Interpretation.MILD),
        (75, Interpretation.MODERATE),
        (75.1, Interpretation.SEVERE),
        (100, Interpretation.SEVERE),
    ])
    def test_bands(self, percentage, band):
        assert interpret(percentage) == band


class TestCategoryScorer:
    """Tests for per-category reduction."""

    def test_unanswered_category_scores_zero(self):
        score = score_category(AnswerSet.empty(), Category.PAIN)
        assert score.max_score == 0
        assert score.percentage == 0
        assert score.interpretation == Interpretation.NORMAL

    def test_denominator_is_answered_maximum(self):
        # q1 (2 pts) true, q2 (2 pts) false, rest of pain unanswered
        answers = AnswerSet.from_mapping({"q1": True, "q2": False})
        score = score_category(answers, Category.PAIN)
        assert score.raw_score == 2
        assert score.max_score == 4
        assert score.percentage == pytest.approx(50.0)
        assert score.answered == 2

    def test_scale_question(self):
        answers = AnswerSet.from_mapping({"q7": 2})
        score = score_category(answers, Category.PAIN)
        assert score.raw_score == pytest.approx(2.0)
        assert score.percentage == pytest.approx(50.0)

    def test_enum_question(self):
        answers = AnswerSet.from_mapping({"q8": True, "q11": SOUND_BOTH})
        score = score_category(answers, Category.JOINT_SOUNDS)
        assert score.raw_score == 3
        assert score.max_score == 3
        assert score.percentage == pytest.approx(100.0)

    def test_contributing_factors_in_catalog_order(self):
        answers = AnswerSet.from_mapping({"q4": True, "q1": True, "q2": False})
        score = score_category(answers, Category.PAIN)
        assert score.contributing_factors == ("Jaw pain at rest", "Temple pain")

    def test_clinical_significance_follows_band(self):
        answers = AnswerSet.from_mapping({"q1": True, "q2": False})
        score = score_category(answers, Category.PAIN)
        assert score.interpretation == Interpretation.MILD
        assert score.clinical_significance == "Mild pain - conservative management indicated"
        assert score.to_dict()["clinical_significance"] == score.clinical_significance

    def test_unanswered_category_significance(self):
        score = score_category(AnswerSet.empty(), Category.JOINT_SOUNDS)
        assert score.clinical_significance == "Minimal joint sounds - likely normal variation"

    def test_every_category_and_band_has_significance(self):
        for category in Category:
            for band in Interpretation:
                assert significance_for(category, band)
        with pytest.raises(TypeError):
            CLINICAL_SIGNIFICANCE[Category.PAIN][Interpretation.SEVERE] = "edited"

    def test_score_all_in_declaration_order(self, negative_answers):
        scores = score_all(negative_answers)
        assert list(scores) == list(Category)

    def test_percentage_bounds(self, negative_raw):
        variants = [
            negative_raw,
            {k: (True if isinstance(v, bool) else v) for k, v in negative_raw.items()},
            {"q7": 4, "q24": 4, "q11": SOUND_BOTH},
            {},
        ]
        for raw in variants:
            for score in score_all(AnswerSet.from_mapping(raw)).values():
                assert 0 <= score.percentage <= 100
                if score.max_score == 0:
                    assert score.percentage == 0

    def test_monotonic_in_boolean_answers(self, negative_raw):
        base = AnswerSet.from_mapping(negative_raw)
        for question in QUESTION_CATALOG:
            if question.domain.kind != DomainKind.BOOLEAN:
                continue
            flipped = AnswerSet.from_mapping({**negative_raw, question.id: True})
            before = score_category(base, question.category).raw_score
            after = score_category(flipped, question.category).raw_score
            assert after >= before, question.id


class TestComposite:
    """Tests for the weighted composite."""

    def test_degenerate_inputs(self):
        assert compose({}, DEFAULT_CATEGORY_WEIGHTS) == 0.0
        assert compose(score_all(AnswerSet.empty()), DEFAULT_CATEGORY_WEIGHTS) == 0.0

    def test_all_negative_scores_zero(self, negative_answers):
        assert compose(score_all(negative_answers), DEFAULT_CATEGORY_WEIGHTS) == 0.0

    def test_weighted_sum(self):
        answers = AnswerSet.from_mapping({"q1": True, "q12": False})
        scores = score_all(answers)
        # pain 100% × 0.35, function 0% × 0.30
        assert compose(scores, DEFAULT_CATEGORY_WEIGHTS) == pytest.approx(35.0)

    def test_matches_explicit_sum(self, negative_raw):
        raw = {**negative_raw, "q1": True, "q8": True, "q18": True, "q24": 3}
        scores = score_all(AnswerSet.from_mapping(raw))
        expected = sum(scores[c].percentage * w for c, w in DEFAULT_CATEGORY_WEIGHTS.items())
        assert compose(scores, DEFAULT_CATEGORY_WEIGHTS) == pytest.approx(expected)

    def test_bad_weights_rejected(self, negative_answers):
        weights = dict(DEFAULT_CATEGORY_WEIGHTS)
        weights[Category.PAIN] = 0.5
        with pytest.raises(CatalogIntegrityError):
            compose(score_all(negative_answers), weights)


class TestConsistency:
    """Tests for contradiction detection."""

    def test_consistent_answers(self, negative_answers):
        assert find_inconsistencies(negative_answers) == []
        assert consistency_score(negative_answers, 85) == 85

    def test_high_pain_without_limitation(self):
        answers = AnswerSet.from_mapping({"q7": 3, "q12": False, "q16": False})
        ids = [i.check_id for i in find_inconsistencies(answers)]
        assert ids == ["HIGH_PAIN_NO_LIMITATION"]

    def test_high_pain_without_function_answers_is_not_flagged(self):
        answers = AnswerSet.from_mapping({"q7": 4})
        assert find_inconsistencies(answers) == []

    def test_zero_pain_with_pain_symptoms(self):
        answers = AnswerSet.from_mapping({"q7": 0, "q1": True})
        ids = [i.check_id for i in find_inconsistencies(answers)]
        assert ids == ["ZERO_PAIN_WITH_PAIN_SYMPTOMS"]

    def test_no_sounds_location_conflict(self):
        answers = AnswerSet.from_mapping({"q8": True, "q11": SOUND_NONE})
        ids = [i.check_id for i in find_inconsistencies(answers)]
        assert ids == ["NO_SOUNDS_LOCATION_CONFLICT"]

    def test_penalties_are_additive_with_floor(self):
        answers = AnswerSet.from_mapping({
            "q7": 0, "q1": True, "q8": True, "q11": SOUND_NONE,
            "q12": False, "q13": True,
        })
        issues = find_inconsistencies(answers)
        assert len(issues) == 3
        assert consistency_score(answers, 85) == pytest.approx(85 - 25)
        assert consistency_score(answers, 10) == 0

    def test_apply_penalties(self):
        issues = [
            ConsistencyIssue("A", "first", 10.0),
            ConsistencyIssue("B", "second", 5.0),
        ]
        assert apply_penalties(issues, 85) == pytest.approx(70)
        assert apply_penalties(issues, 12) == 0
        assert apply_penalties([], 85) == 85


class TestConfidence:
    """Tests for the completeness/consistency blend."""

    def test_complete_consistent(self, negative_answers):
        assert estimate_confidence(negative_answers) == pytest.approx(100 * 0.6 + 85 * 0.4)

    def test_partial_answers(self):
        raw = {f"q{i}": False for i in range(1, 11)}
        raw["q7"] = 0
        estimate = assess_confidence(AnswerSet.from_mapping(raw))
        assert estimate.completeness == pytest.approx(10 / 26 * 100)
        assert estimate.consistency == 85
        assert estimate.confidence == pytest.approx(10 / 26 * 100 * 0.6 + 85 * 0.4)

    def test_custom_profile_blend(self, negative_answers):
        profile = ScoringProfile(completeness_weight=0.5, consistency_weight=0.5,
                                 consistency_baseline=80)
        assert estimate_confidence(negative_answers, profile=profile) == pytest.approx(90)

    def test_empty_answers(self):
        assert estimate_confidence(AnswerSet.empty()) == pytest.approx(85 * 0.4)

    def test_consistency_matches_consistency_score(self):
        answers = AnswerSet.from_mapping({
            "q7": 0, "q1": True, "q8": True, "q11": SOUND_NONE,
            "q12": False, "q13": True,
        })
        estimate = assess_confidence(answers)
        assert estimate.consistency == pytest.approx(consistency_score(answers, 85))
        assert len(estimate.issues) == 3
