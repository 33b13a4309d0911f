"""
Composite Scorer

Convex combination of the category percentages under the configured
category weights.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import numpy as np

from tmdscreen.config import WEIGHT_TOLERANCE
from tmdscreen.core.catalog import Category
from tmdscreen.core.clinical.base import RiskTier
from tmdscreen.utils import CatalogIntegrityError
from .category import CategoryScore


@dataclass(frozen=True)
class CompositeResult:
    composite_score: float          # 0–100
    risk_tier: RiskTier
    confidence: float               # 0–100

    def to_dict(self) -> dict:
        return {
            "composite_score": round(self.composite_score, 1),
            "risk_tier": self.risk_tier.value,
            "confidence": round(self.confidence, 1),
        }


def compose(
    category_scores: Mapping[Category, CategoryScore],
    weights: Mapping[Category, float],
) -> float:
    """
    Weighted composite score in [0, 100].

    Categories missing from ``category_scores`` contribute 0.  Returns 0
    when no category has an answered question.

    Raises:
        CatalogIntegrityError: weights do not sum to 1.
    """
    total = float(sum(weights.values()))
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise CatalogIntegrityError(
            f"Category weights must sum to 1.0 (got {total:.6f})",
            catalog="category_weights",
        )

    if not category_scores or all(s.max_score == 0 for s in category_scores.values()):
        return 0.0

    categories = list(weights)
    w = np.array([weights[c] for c in categories], dtype=float)
    pct = np.array(
        [category_scores[c].percentage if c in category_scores else 0.0 for c in categories],
        dtype=float,
    )
    return float(np.clip(np.dot(pct, w), 0.0, 100.0))
