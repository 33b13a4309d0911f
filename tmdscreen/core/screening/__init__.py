"""
Screening Layer

Seven-item quick screening that triages respondents before the full
questionnaire.
"""
from .quick import (
    QUICK_QUESTIONS,
    QUICK_RECOMMENDATIONS,
    QUICK_SCREENING,
    QuickScreener,
    QuickScreeningResult,
    quick_tier_for,
)

__all__ = [
    "QUICK_QUESTIONS",
    "QUICK_RECOMMENDATIONS",
    "QUICK_SCREENING",
    "QuickScreener",
    "QuickScreeningResult",
    "quick_tier_for",
]
