"""
Validation Layer

DC/TMD protocol compliance rules and the ValidationReport.
"""
from .protocol_validator import (
    PROTOCOL_RULES,
    Axis,
    AxisCompliance,
    ProtocolValidator,
    RuleCategory,
    RuleOutcome,
    RuleResult,
    RuleSeverity,
    ValidationReport,
    ValidationRule,
    resolve_variant,
)

__all__ = [
    "PROTOCOL_RULES",
    "Axis",
    "AxisCompliance",
    "ProtocolValidator",
    "RuleCategory",
    "RuleOutcome",
    "RuleResult",
    "RuleSeverity",
    "ValidationReport",
    "ValidationRule",
    "resolve_variant",
]
