"""
Protocol Validator

Runs a fixed, ordered battery of DC/TMD compliance rules against the raw
answers.  Independent of scoring: it reads answers only.

Each rule is categorised ``required | conditional | recommended`` and
carries a severity ``error | warning | info``.  The report is valid when
no error-severity rule failed; warnings and info never invalidate it.

Axis compliance:
    axis1 – BASIC_, PAIN_, JOINT_ rules
    axis2 – FUNC_, ASSOC_ rules (reported for DC_TMD_AXIS_II only)
    value = max(0, 100 - failed_errors / rules_in_axis * 100)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from tmdscreen.core.catalog import (
    QUESTION_CATALOG,
    AnswerSet,
    Category,
    ProtocolVariant,
    questions_in,
    required_questions,
)
from tmdscreen.core.catalog.questions import SOUND_LOCATION, SOUND_NONE, SOUND_QUESTIONS
from tmdscreen.core.scoring.consistency import find_inconsistencies
from tmdscreen.utils import InputError, get_logger

logger = get_logger(__name__)

ERROR_PENALTY   = 20.0
WARNING_PENALTY = 5.0
MIN_JOINT_SOUND_ANSWERS = 3
MIN_ASSOCIATED_ANSWERS  = 2

# Categories whose absence leaves a positive presentation unexplained
_CORE_CATEGORIES = (Category.PAIN, Category.FUNCTION, Category.JOINT_SOUNDS)


class RuleCategory(str, Enum):
    REQUIRED    = "required"
    CONDITIONAL = "conditional"
    RECOMMENDED = "recommended"


class RuleSeverity(str, Enum):
    ERROR   = "error"
    WARNING = "warning"
    INFO    = "info"


class Axis(str, Enum):
    AXIS_I  = "axis1"
    AXIS_II = "axis2"


@dataclass(frozen=True)
class RuleOutcome:
    passed: bool
    message: str
    details: Optional[str] = None
    suggested_action: Optional[str] = None


@dataclass(frozen=True)
class ValidationRule:
    id: str
    name: str
    description: str
    category: RuleCategory
    severity: RuleSeverity
    check: Callable[[Mapping[str, Any], Optional[ProtocolVariant], str], RuleOutcome]
    axis: Optional[Axis] = None


@dataclass(frozen=True)
class RuleResult:
    rule_id: str
    name: str
    category: RuleCategory
    severity: RuleSeverity
    passed: bool
    message: str
    details: Optional[str] = None
    suggested_action: Optional[str] = None
    axis: Optional[Axis] = None

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "name": self.name,
            "category": self.category.value,
            "severity": self.severity.value,
            "passed": self.passed,
            "message": self.message,
            "details": self.details,
            "suggested_action": self.suggested_action,
        }


@dataclass(frozen=True)
class AxisCompliance:
    axis1: float
    axis2: Optional[float] = None

    @property
    def overall(self) -> float:
        if self.axis2 is None:
            return self.axis1
        return (self.axis1 + self.axis2) / 2

    def to_dict(self) -> dict:
        return {
            "axis1": round(self.axis1),
            "axis2": round(self.axis2) if self.axis2 is not None else None,
            "overall": round(self.overall),
        }


@dataclass(frozen=True)
class ValidationReport:
    is_valid: bool
    results: Tuple[RuleResult, ...]
    axis_compliance: AxisCompliance
    protocol_variant: str
    overall_score: float = 100.0

    def failed(self) -> List[RuleResult]:
        return [r for r in self.results if not r.passed]

    def failed_errors(self) -> List[RuleResult]:
        return [r for r in self.results if not r.passed and r.severity == RuleSeverity.ERROR]

    def warnings(self) -> List[str]:
        return [
            r.message for r in self.results
            if not r.passed and r.severity == RuleSeverity.WARNING
        ]

    def recommendations(self) -> List[str]:
        return [
            r.message for r in self.results
            if not r.passed and r.severity == RuleSeverity.INFO
        ]

    def result_for(self, rule_id: str) -> Optional[RuleResult]:
        for r in self.results:
            if r.rule_id == rule_id:
                return r
        return None

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "protocol_variant": self.protocol_variant,
            "overall_score": round(self.overall_score),
            "axis_compliance": self.axis_compliance.to_dict(),
            "results": [r.to_dict() for r in self.results],
        }


# ── Rule checks ──────────────────────────────────────────────────────────────

def _answered(answers: Mapping[str, Any], qid: str) -> bool:
    return answers.get(qid) is not None


def _check_completeness(answers, variant, variant_name) -> RuleOutcome:
    required = required_questions(variant)
    missing = [q for q in required if not _answered(answers, q)]
    if missing:
        return RuleOutcome(
            False,
            f"Missing responses for {len(missing)} required questions",
            details=f"Missing: {', '.join(missing)}",
            suggested_action="Complete all required assessment questions before proceeding",
        )
    return RuleOutcome(True, "All required questions answered")


def _check_value_range(answers, variant, variant_name) -> RuleOutcome:
    for question in QUESTION_CATALOG:
        value = answers.get(question.id)
        if value is not None and not question.domain.accepts(value):
            return RuleOutcome(
                False,
                f"Answer for {question.id} is outside its declared domain",
                details=f"Found value: {value!r}; expected {question.domain.describe()}",
                suggested_action=f"Answer {question.id} with {question.domain.describe()}",
            )
    return RuleOutcome(True, "All answers lie within their declared domains")


def _check_function(answers, variant, variant_name) -> RuleOutcome:
    if not any(_answered(answers, q.id) for q in questions_in(Category.FUNCTION)):
        return RuleOutcome(
            False,
            "No functional assessment responses found",
            details="Functional assessment is critical for TMD diagnosis",
            suggested_action="Include questions about jaw function, chewing, and mouth opening",
        )
    return RuleOutcome(True, "Functional assessment completed")


def _check_joint_sounds(answers, variant, variant_name) -> RuleOutcome:
    sound_items = SOUND_QUESTIONS + (SOUND_LOCATION,)
    answered = [q for q in sound_items if _answered(answers, q)]
    positive = (
        any(answers.get(q) is True for q in SOUND_QUESTIONS)
        or answers.get(SOUND_LOCATION) not in (None, SOUND_NONE)
    )
    if positive and len(answered) < MIN_JOINT_SOUND_ANSWERS:
        return RuleOutcome(
            False,
            "Incomplete joint sounds assessment",
            details=f"{len(answered)} of {len(sound_items)} joint sound questions answered",
            suggested_action="Document timing, location, and characteristics of joint sounds",
        )
    return RuleOutcome(True, "Joint sounds assessment is adequate")


def _check_associated(answers, variant, variant_name) -> RuleOutcome:
    answered = [q for q in questions_in(Category.ASSOCIATED) if _answered(answers, q.id)]
    if len(answered) < MIN_ASSOCIATED_ANSWERS:
        return RuleOutcome(
            False,
            "Limited assessment of associated symptoms",
            details="Associated symptoms provide important diagnostic context",
            suggested_action="Consider evaluating headaches, neck pain, ear symptoms, and dizziness",
        )
    return RuleOutcome(True, "Associated symptoms adequately assessed")


def _check_coverage(answers, variant, variant_name) -> RuleOutcome:
    def positive_in(category: Category) -> bool:
        for q in questions_in(category):
            value = answers.get(q.id)
            if value is not None and q.domain.accepts(value) and q.is_positive(value):
                return True
        return False

    uncovered = [
        c for c in _CORE_CATEGORIES
        if not any(_answered(answers, q.id) for q in questions_in(c))
    ]
    if uncovered and any(positive_in(c) for c in Category if c not in uncovered):
        names = ", ".join(c.value for c in uncovered)
        return RuleOutcome(
            False,
            f"Symptoms reported but no responses for: {names}",
            details="A positive presentation should be assessed across all core categories",
            suggested_action="Complete the unanswered categories before interpreting results",
        )
    return RuleOutcome(True, "All core categories covered")


def _check_consistency(answers, variant, variant_name) -> RuleOutcome:
    try:
        parsed = AnswerSet.from_mapping(answers)
    except InputError as exc:
        return RuleOutcome(
            False,
            "Consistency not evaluated: answers outside their declared domains",
            details=exc.message,
        )
    issues = find_inconsistencies(parsed)
    if issues:
        return RuleOutcome(
            False,
            f"Found {len(issues)} response inconsistencies",
            details="; ".join(i.message for i in issues),
            suggested_action="Review and verify inconsistent responses with patient",
        )
    return RuleOutcome(True, "Responses are consistent")


def _check_protocol(answers, variant, variant_name) -> RuleOutcome:
    if variant is None:
        return RuleOutcome(
            False,
            f"Unsupported protocol variant: {variant_name}",
            details="Supported variants: " + ", ".join(v.value for v in ProtocolVariant),
            suggested_action="Administer a supported DC/TMD protocol variant",
        )
    return RuleOutcome(True, "Protocol variant is supported")


PROTOCOL_RULES: Tuple[ValidationRule, ...] = (
    ValidationRule("BASIC_001", "Assessment Completeness",
                   "Every question mandated by the protocol variant must be answered",
                   RuleCategory.REQUIRED, RuleSeverity.ERROR, _check_completeness, Axis.AXIS_I),
    ValidationRule("PAIN_001", "Scale Range Validation",
                   "Scale answers must lie within the DC/TMD 0-4 scale",
                   RuleCategory.REQUIRED, RuleSeverity.ERROR, _check_value_range, Axis.AXIS_I),
    ValidationRule("FUNC_001", "Jaw Function Assessment",
                   "Functional limitations must be assessed",
                   RuleCategory.REQUIRED, RuleSeverity.WARNING, _check_function, Axis.AXIS_II),
    ValidationRule("JOINT_001", "Joint Sounds Documentation",
                   "Reported joint sounds must be documented",
                   RuleCategory.CONDITIONAL, RuleSeverity.WARNING, _check_joint_sounds, Axis.AXIS_I),
    ValidationRule("ASSOC_001", "Associated Symptoms Assessment",
                   "Associated symptoms should be evaluated",
                   RuleCategory.RECOMMENDED, RuleSeverity.INFO, _check_associated, Axis.AXIS_II),
    ValidationRule("COVER_001", "Category Coverage",
                   "Core categories must be covered when symptoms are reported",
                   RuleCategory.CONDITIONAL, RuleSeverity.WARNING, _check_coverage),
    ValidationRule("CONS_001", "Response Consistency Check",
                   "Responses should be internally consistent",
                   RuleCategory.REQUIRED, RuleSeverity.WARNING, _check_consistency),
    ValidationRule("PROTO_001", "Protocol Variant Compliance",
                   "The protocol variant must be a supported DC/TMD variant",
                   RuleCategory.REQUIRED, RuleSeverity.ERROR, _check_protocol),
)


def resolve_variant(variant: Union[ProtocolVariant, str, None]) -> Optional[ProtocolVariant]:
    """Return the matching ProtocolVariant, or None when unsupported."""
    if isinstance(variant, ProtocolVariant):
        return variant
    try:
        return ProtocolVariant(variant)
    except ValueError:
        return None


class ProtocolValidator:
    """Stateless — the rule battery is module-level, read-only data."""

    def __init__(self, rules: Tuple[ValidationRule, ...] = PROTOCOL_RULES):
        self.rules = rules

    def validate(
        self,
        answers: Mapping[str, Any],
        protocol_variant: Union[ProtocolVariant, str],
    ) -> ValidationReport:
        """
        Evaluate every rule in order.

        Args:
            answers:          AnswerSet, or any question id → value mapping.
            protocol_variant: ProtocolVariant or its string value.

        Returns:
            ValidationReport with one RuleResult per rule.
        """
        variant = resolve_variant(protocol_variant)
        variant_name = variant.value if variant else str(protocol_variant)

        results = []
        for rule in self.rules:
            outcome = rule.check(answers, variant, variant_name)
            results.append(RuleResult(
                rule_id=rule.id,
                name=rule.name,
                category=rule.category,
                severity=rule.severity,
                passed=outcome.passed,
                message=outcome.message,
                details=outcome.details,
                suggested_action=outcome.suggested_action,
                axis=rule.axis,
            ))

        is_valid = not any(
            not r.passed and r.severity == RuleSeverity.ERROR for r in results
        )
        compliance = AxisCompliance(
            axis1=self._axis_compliance(results, Axis.AXIS_I),
            axis2=(
                self._axis_compliance(results, Axis.AXIS_II)
                if variant == ProtocolVariant.DC_TMD_AXIS_II else None
            ),
        )
        errors = sum(1 for r in results if not r.passed and r.severity == RuleSeverity.ERROR)
        warnings = sum(1 for r in results if not r.passed and r.severity == RuleSeverity.WARNING)
        score = max(0.0, compliance.overall - errors * ERROR_PENALTY - warnings * WARNING_PENALTY)

        report = ValidationReport(
            is_valid=is_valid,
            results=tuple(results),
            axis_compliance=compliance,
            protocol_variant=variant_name,
            overall_score=score,
        )
        logger.debug(
            f"ProtocolValidator [{variant_name}]: valid={is_valid} "
            f"errors={errors} warnings={warnings}"
        )
        return report

    @staticmethod
    def _axis_compliance(results: List[RuleResult], axis: Axis) -> float:
        in_axis = [r for r in results if r.axis == axis]
        if not in_axis:
            return 100.0
        errors = sum(1 for r in in_axis if not r.passed and r.severity == RuleSeverity.ERROR)
        return max(0.0, 100.0 - errors / len(in_axis) * 100.0)
