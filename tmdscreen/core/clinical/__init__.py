"""
Clinical Layer

Risk tiering with red-flag escalation and the disorder classifier.
"""
from .base import (
    Chronicity,
    ClinicalClassification,
    DisorderCategory,
    RiskTier,
    Severity,
)
from .risk import (
    RiskAssessment,
    RiskClassifier,
    evaluate_clinical_alerts,
    evaluate_red_flags,
    tier_for,
)
from .classifier import DEFAULT_CHRONICITY, ClinicalClassifier, severity_from

__all__ = [
    "Chronicity",
    "ClinicalClassification",
    "DisorderCategory",
    "RiskTier",
    "Severity",
    "RiskAssessment",
    "RiskClassifier",
    "evaluate_clinical_alerts",
    "evaluate_red_flags",
    "tier_for",
    "DEFAULT_CHRONICITY",
    "ClinicalClassifier",
    "severity_from",
]
