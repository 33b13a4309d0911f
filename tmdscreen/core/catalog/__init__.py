"""
Catalog Layer

Static question and diagnostic-code definitions plus the immutable
AnswerSet built from a submitted questionnaire.
"""
from .base import AnswerDomain, AnswerValue, Category, DomainKind, ProtocolVariant, Question
from .questions import (
    QUESTION_CATALOG,
    QUESTIONS_BY_ID,
    TOTAL_QUESTIONS,
    questions_in,
    required_questions,
)
from .answers import AnswerSet, Response
from .codes import (
    CODE_CATALOG,
    CODES_BY_ID,
    CodeFamily,
    DiagnosticCode,
    Laterality,
    MatchCriteria,
    SeverityBand,
    verify_code_catalog,
)

__all__ = [
    "AnswerDomain",
    "AnswerValue",
    "Category",
    "DomainKind",
    "ProtocolVariant",
    "Question",
    "QUESTION_CATALOG",
    "QUESTIONS_BY_ID",
    "TOTAL_QUESTIONS",
    "questions_in",
    "required_questions",
    "AnswerSet",
    "Response",
    "CODE_CATALOG",
    "CODES_BY_ID",
    "CodeFamily",
    "DiagnosticCode",
    "Laterality",
    "MatchCriteria",
    "SeverityBand",
    "verify_code_catalog",
]
