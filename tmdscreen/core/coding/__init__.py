"""
Coding Layer

Clinical profile construction and ICD-10-CM code mapping.
"""
from .profile import ClinicalProfile, build_profile
from .mapper import (
    BillingInfo,
    CodeAssignmentReview,
    CodeMatch,
    DiagnosticCodeMapper,
    ExcludedCode,
    MappingResult,
    find_conflicts,
    match_score,
    satisfied_criteria,
)

__all__ = [
    "ClinicalProfile",
    "build_profile",
    "BillingInfo",
    "CodeAssignmentReview",
    "CodeMatch",
    "DiagnosticCodeMapper",
    "ExcludedCode",
    "MappingResult",
    "find_conflicts",
    "match_score",
    "satisfied_criteria",
]
