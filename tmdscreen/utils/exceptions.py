"""
Custom Exception Hierarchy

Provides specific exception types for the screening pipeline with
structured error information.
"""
from typing import Optional, Dict, Any, TYPE_CHECKING

if TYPE_CHECKING:
    from tmdscreen.core.validation.protocol_validator import ValidationReport


class ScreeningError(Exception):
    """Base exception for all screening pipeline errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class InputError(ScreeningError):
    """Answer set missing, or an answer outside its question's domain."""

    def __init__(
        self,
        message: str,
        question_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INPUT_ERROR",
            details={"question_id": question_id, **(details or {})}
        )
        self.question_id = question_id


class ValidationFailure(ScreeningError):
    """Protocol validation failed while strict validation is enabled."""

    def __init__(
        self,
        message: str,
        report: "ValidationReport",
        details: Optional[Dict[str, Any]] = None
    ):
        failed = [r.rule_id for r in report.failed_errors()]
        super().__init__(
            message=message,
            code="VALIDATION_FAILURE",
            details={"failed_rules": failed, **(details or {})}
        )
        self.report = report

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["report"] = self.report.to_dict()
        return data


class CatalogIntegrityError(ScreeningError):
    """Static catalog or scoring configuration is inconsistent."""

    def __init__(
        self,
        message: str,
        catalog: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="CATALOG_INTEGRITY_ERROR",
            details={"catalog": catalog, **(details or {})}
        )
        self.catalog = catalog
