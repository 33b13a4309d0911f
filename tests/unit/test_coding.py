"""
Unit Tests for the Coding Layer

Tests for the clinical profile, match scoring, code selection, exclusions
and code-assignment review.
"""
import pytest

from tmdscreen.core.catalog import (
    CODES_BY_ID,
    AnswerSet,
    CodeFamily,
    DiagnosticCode,
    Laterality,
    MatchCriteria,
    SeverityBand,
)
from tmdscreen.core.clinical import ClinicalClassifier
from tmdscreen.core.coding import (
    DiagnosticCodeMapper,
    build_profile,
    find_conflicts,
    match_score,
)
from tmdscreen.core.scoring import score_all
from tmdscreen.utils import CatalogIntegrityError


def _map(raw, mapper=None):
    answers = AnswerSet.from_mapping(raw)
    scores = score_all(answers)
    classification = ClinicalClassifier().classify(scores, answers)
    return (mapper or DiagnosticCodeMapper()).map_codes(classification, answers, scores)


def _test_code(code, **criteria):
    return DiagnosticCode(
        code=code,
        description=f"Test disorder {code}",
        category=CodeFamily.MUSCLE_DISORDER,
        severity_band=SeverityBand.MILD,
        match_criteria=MatchCriteria(**criteria),
    )


class TestClinicalProfile:

    def test_tags_and_magnitudes(self, bilateral_locking_raw):
        answers = AnswerSet.from_mapping(bilateral_locking_raw)
        profile = build_profile(answers, score_all(answers))
        assert {"clicking", "popping", "grinding", "bilateral", "locking"} <= profile.tags
        assert "disc_displacement" in profile.tags
        assert "severe_limitation" in profile.tags
        assert profile.laterality == Laterality.BILATERAL
        assert profile.functional_limitation == pytest.approx(4.0)
        assert profile.pain_intensity == 0
        assert profile.has_joint_sounds and profile.has_locking

    def test_reported_pain_level_wins(self):
        answers = AnswerSet.from_mapping({"q1": True, "q7": 1})
        profile = build_profile(answers, score_all(answers))
        assert profile.pain_intensity == 1.0

    def test_pain_rescaled_without_level(self):
        answers = AnswerSet.from_mapping({"q1": True, "q2": False})
        profile = build_profile(answers, score_all(answers))
        assert profile.pain_intensity == pytest.approx(2.0)


class TestMatchScore:

    def test_bounded(self, bilateral_locking_raw):
        answers = AnswerSet.from_mapping({**bilateral_locking_raw, "q7": 4})
        profile = build_profile(answers, score_all(answers))
        for code in CODES_BY_ID.values():
            assert 0.0 <= match_score(code, profile) <= 1.0
        assert match_score(CODES_BY_ID["M26.603"], profile) == 1.0

    def test_laterality_bonus(self, bilateral_locking_raw):
        answers = AnswerSet.from_mapping(bilateral_locking_raw)
        profile = build_profile(answers, score_all(answers))
        bilateral = match_score(CODES_BY_ID["M26.633"], profile)
        right = match_score(CODES_BY_ID["M26.631"], profile)
        assert bilateral > right


class TestDiagnosticCodeMapper:

    def test_bilateral_disc_presentation(self, bilateral_locking_raw):
        mapping = _map(bilateral_locking_raw)
        assert mapping.primary_code.code == "M26.603"
        assert mapping.primary_code.category == CodeFamily.DISC_DISORDER
        assert mapping.primary_code.laterality == Laterality.BILATERAL
        assert not mapping.used_fallback
        assert "M79.11" in mapping.excluded_code_ids

    def test_muscle_presentation(self, myofascial_raw):
        mapping = _map(myofascial_raw)
        assert mapping.primary_code.code == "M79.11"
        assert mapping.excluded_codes == ()
        assert mapping.secondary_codes == ()
        assert mapping.mapping_confidence == 90

    def test_secondary_codes(self, bilateral_locking_raw):
        raw = {**bilateral_locking_raw, "q3": True, "q18": True}
        mapping = _map(raw)
        assert mapping.primary_code.code == "M26.603"
        assert [c.code for c in mapping.secondary_codes] == ["G44.209", "M79.10"]
        assert mapping.mapping_confidence == 95
        assert mapping.billing.total_billable_codes == 3
        assert mapping.billing.reimbursement_notes is not None

    def test_secondary_codes_disabled(self, bilateral_locking_raw):
        raw = {**bilateral_locking_raw, "q3": True, "q18": True}
        mapping = _map(raw, DiagnosticCodeMapper(include_secondary_codes=False))
        assert mapping.secondary_codes == ()

    def test_fallback_for_weak_presentation(self, negative_raw):
        mapping = _map(negative_raw)
        assert mapping.used_fallback
        assert mapping.primary_code.code == "M26.609"
        assert mapping.mapping_confidence == 50

    def test_excluded_never_selected(self, negative_raw, bilateral_locking_raw, myofascial_raw):
        for raw in (negative_raw, bilateral_locking_raw, myofascial_raw,
                    {**bilateral_locking_raw, "q3": True, "q4": True}):
            mapping = _map(raw)
            excluded = set(mapping.excluded_code_ids)
            assert mapping.primary_code.code not in excluded
            assert not excluded & {c.code for c in mapping.secondary_codes}

    def test_mapping_confidence_bounds(self, negative_raw, bilateral_locking_raw):
        for raw in (negative_raw, bilateral_locking_raw, {"q7": 4, "q1": True}):
            assert 50 <= _map(raw).mapping_confidence <= 95

    def test_differentials(self, bilateral_locking_raw):
        mapping = _map(bilateral_locking_raw)
        notes = mapping.differential_considerations
        assert notes[0] == "Consider disc displacement vs. muscle disorder"
        assert any(n.startswith("M26.613") for n in notes)

        quiet = _map(bilateral_locking_raw, DiagnosticCodeMapper(include_differential_diagnosis=False))
        assert not any(n.startswith("M26.613") for n in quiet.differential_considerations)

    def test_justification_mentions_primary(self, bilateral_locking_raw):
        mapping = _map(bilateral_locking_raw)
        assert mapping.primary_code.description.lower() in mapping.justification
        assert "Joint locking episodes reported" in mapping.supporting_evidence

    def test_tie_resolved_by_declaration_order(self):
        fallback = CODES_BY_ID["M26.609"]
        first = _test_code("T01", pain_threshold=4, required_tags=("clicking",))
        second = _test_code("T02", pain_threshold=4, required_tags=("clicking",))
        raw = {"q7": 2, "q8": True}

        forward = DiagnosticCodeMapper(catalog=(first, second, fallback))
        results = {_map(raw, forward).primary_code.code for _ in range(5)}
        assert results == {"T01"}
        assert _map(raw, forward).match_score == pytest.approx(0.5)

        reverse = DiagnosticCodeMapper(catalog=(second, first, fallback))
        assert _map(raw, reverse).primary_code.code == "T02"

    def test_missing_fallback_rejected(self):
        with pytest.raises(CatalogIntegrityError):
            DiagnosticCodeMapper(catalog=(_test_code("T01"),))


class TestCodeAssignmentReview:

    def test_conflicts(self):
        codes = [CODES_BY_ID["M26.603"], CODES_BY_ID["M26.621"]]
        conflicts = find_conflicts(codes)
        assert len(conflicts) == 2

    def test_unilateral_joint_and_disc(self):
        conflicts = find_conflicts([CODES_BY_ID["M26.601"], CODES_BY_ID["M26.621"]])
        assert conflicts == [
            "Joint pain and disc disorder codes may be redundant - verify clinical justification"
        ]

    def test_clean_assignment(self, bilateral_locking_raw):
        mapper = DiagnosticCodeMapper()
        raw = {**bilateral_locking_raw, "q3": True, "q18": True}
        review = mapper.validate_code_assignment(_map(raw, mapper))
        assert review.is_valid
        assert review.recommendations == ()

    def test_disc_primary_without_myalgia(self, bilateral_locking_raw):
        mapper = DiagnosticCodeMapper()
        review = mapper.validate_code_assignment(_map(bilateral_locking_raw, mapper))
        assert review.is_valid
        assert any("M79.10" in r for r in review.recommendations)

    def test_low_confidence_recommendation(self, negative_raw):
        mapper = DiagnosticCodeMapper()
        review = mapper.validate_code_assignment(_map(negative_raw, mapper))
        assert "Consider clinical review due to low mapping confidence" in review.recommendations
