"""
Reports Layer

Recommendation strings, follow-up directives and prognosis.
"""
from .recommendations import (
    CATEGORY_RECOMMENDATIONS,
    TIER_RECOMMENDATIONS,
    PROGNOSIS_OUTLOOK,
    FollowUp,
    Prognosis,
    RecommendationGenerator,
    RecommendationSet,
)

__all__ = [
    "CATEGORY_RECOMMENDATIONS",
    "TIER_RECOMMENDATIONS",
    "PROGNOSIS_OUTLOOK",
    "FollowUp",
    "Prognosis",
    "RecommendationGenerator",
    "RecommendationSet",
]
