"""
Scoring Layer

Category scores, the weighted composite and the confidence estimate.
"""
from .category import (
    CLINICAL_SIGNIFICANCE,
    CategoryScore,
    Interpretation,
    interpret,
    percentage_of,
    score_all,
    score_category,
    significance_for,
)
from .composite import CompositeResult, compose
from .consistency import (
    ConsistencyIssue,
    apply_penalties,
    consistency_score,
    find_inconsistencies,
)
from .confidence import ConfidenceEstimate, assess_confidence, estimate_confidence

__all__ = [
    "CLINICAL_SIGNIFICANCE",
    "CategoryScore",
    "Interpretation",
    "interpret",
    "percentage_of",
    "score_all",
    "score_category",
    "significance_for",
    "CompositeResult",
    "compose",
    "ConsistencyIssue",
    "apply_penalties",
    "consistency_score",
    "find_inconsistencies",
    "ConfidenceEstimate",
    "assess_confidence",
    "estimate_confidence",
]
