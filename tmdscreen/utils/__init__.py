"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    ScreeningError,
    InputError,
    ValidationFailure,
    CatalogIntegrityError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ScreeningError",
    "InputError",
    "ValidationFailure",
    "CatalogIntegrityError",
]
