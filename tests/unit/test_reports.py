"""
Unit Tests for the Recommendation Generator

Tests for tier lookups, category-triggered additions and follow-up directives.
"""
import pytest

from tmdscreen.core.catalog import AnswerSet, Category
from tmdscreen.core.clinical import ClinicalClassifier, RiskClassifier, RiskTier
from tmdscreen.core.coding import DiagnosticCodeMapper
from tmdscreen.core.reports import (
    CATEGORY_RECOMMENDATIONS,
    PROGNOSIS_OUTLOOK,
    TIER_RECOMMENDATIONS,
    RecommendationGenerator,
)
from tmdscreen.core.scoring import compose, score_all
from tmdscreen.config import DEFAULT_CATEGORY_WEIGHTS


def _generate(raw):
    answers = AnswerSet.from_mapping(raw)
    scores = score_all(answers)
    risk = RiskClassifier().assess(compose(scores, DEFAULT_CATEGORY_WEIGHTS), answers)
    classification = ClinicalClassifier().classify(scores, answers)
    mapping = DiagnosticCodeMapper().map_codes(classification, answers, scores)
    return risk, RecommendationGenerator().generate(risk, scores, mapping)


class TestRecommendationGenerator:

    def test_low_tier(self, negative_raw):
        risk, result = _generate(negative_raw)
        assert risk.risk_tier == RiskTier.LOW
        base = TIER_RECOMMENDATIONS[RiskTier.LOW]
        assert result.recommendations[:len(base)] == base
        assert not result.follow_up.required
        assert result.follow_up.timeframe == "As needed"

    def test_high_tier_with_category_items(self, bilateral_locking_raw):
        risk, result = _generate({**bilateral_locking_raw, "q1": True, "q7": 4})
        assert risk.risk_tier == RiskTier.HIGH
        base = TIER_RECOMMENDATIONS[RiskTier.HIGH]
        items = result.recommendations
        assert items[:len(base)] == base
        # pain, function and joint-sound items follow in declaration order
        tail = items[len(base):]
        assert tail == (
            CATEGORY_RECOMMENDATIONS[Category.PAIN],
            CATEGORY_RECOMMENDATIONS[Category.FUNCTION],
            CATEGORY_RECOMMENDATIONS[Category.JOINT_SOUNDS],
        )
        assert result.triggered_categories == (
            Category.PAIN, Category.FUNCTION, Category.JOINT_SOUNDS,
        )

    def test_high_follow_up(self, bilateral_locking_raw):
        risk, result = _generate(bilateral_locking_raw)
        follow_up = result.follow_up
        assert follow_up.required
        assert follow_up.timeframe == "2-4 weeks"
        assert follow_up.parameters[:3] == ("Pain level", "Functional status", "Treatment response")
        assert "Joint sounds and locking frequency" in follow_up.parameters
        assert "Jaw locking episodes" in follow_up.red_flags

    def test_moderate_timeframe(self):
        # pain 100% and history 100% → 45 composite, no red flags
        risk, result = _generate({"q1": True, "q22": True})
        assert risk.risk_tier == RiskTier.MODERATE
        assert result.follow_up.timeframe == "6-8 weeks"
        assert result.recommendations[0] == "Schedule follow-up appointment in 4-6 weeks"

    def test_deterministic(self, bilateral_locking_raw):
        assert _generate(bilateral_locking_raw)[1] == _generate(bilateral_locking_raw)[1]

    @pytest.mark.parametrize("tier,short_term,long_term", [
        (RiskTier.LOW, "good", "excellent"),
        (RiskTier.MODERATE, "fair", "good"),
        (RiskTier.HIGH, "fair", "fair"),
    ])
    def test_prognosis_outlook_by_tier(self, tier, short_term, long_term):
        assert PROGNOSIS_OUTLOOK[tier] == (short_term, long_term)

    def test_prognosis_follows_risk_tier(self, negative_raw, bilateral_locking_raw):
        _, low = _generate(negative_raw)
        assert (low.prognosis.short_term, low.prognosis.long_term) == ("good", "excellent")

        _, high = _generate(bilateral_locking_raw)
        assert (high.prognosis.short_term, high.prognosis.long_term) == ("fair", "fair")
        assert "Treatment compliance" in high.prognosis.factors
        assert high.to_dict()["prognosis"]["long_term"] == "fair"
