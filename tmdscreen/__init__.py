"""
TMD Screening Pipeline

Rule-based scoring → classification → coding pipeline for the
comprehensive TMD questionnaire.

Usage:
    from tmdscreen import run_assessment

    result = run_assessment({"q7": 3, "q8": True, "q11": "Both sides"}, "SCREENING")
    print(result.risk_tier.value, result.mapping.primary_code.code)
"""
from tmdscreen.config import PipelineConfig, RiskThresholds, ScoringProfile, THRESHOLD_PRESETS
from tmdscreen.core.catalog import AnswerSet, ProtocolVariant
from tmdscreen.core.pipeline import AssessmentPipeline, AssessmentResult, run_assessment, run_quick_screening
from tmdscreen.core.screening import QuickScreeningResult
from tmdscreen.utils import (
    CatalogIntegrityError,
    InputError,
    ScreeningError,
    ValidationFailure,
)

__version__ = "1.0.0"

__all__ = [
    "PipelineConfig",
    "RiskThresholds",
    "ScoringProfile",
    "THRESHOLD_PRESETS",
    "AnswerSet",
    "ProtocolVariant",
    "AssessmentPipeline",
    "AssessmentResult",
    "run_assessment",
    "run_quick_screening",
    "QuickScreeningResult",
    "CatalogIntegrityError",
    "InputError",
    "ScreeningError",
    "ValidationFailure",
]
