"""
Custom Error Types for the Heat Loss Calculation System

Critical errors stop a calculation (malformed or missing mandatory data,
cancellation). Advisory validation messages and computation warnings are
returned as data alongside results, never raised.
"""

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class HeatLossError(Exception):
    """Base exception for all heat loss calculation errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class CriticalError(HeatLossError):
    """
    Errors that must stop processing.

    Examples:
    - Door without a U-value
    - Payload that cannot be parsed into input records
    - Calculation cancelled by the caller
    """
    pass


class ConfigurationError(CriticalError):
    """Invalid service configuration values."""
    pass


class InputValidationError(CriticalError):
    """
    Inputs rejected before calculation.

    Raised by the service layer when strict validation is requested and the
    advisory validator returned messages, or when a payload does not parse.
    """

    def __init__(self, message: str, messages: Optional[List[str]] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.messages = list(messages or [])


class MissingRequiredFieldError(CriticalError):
    """
    A mandatory field is absent.

    Door U-values have no fallback in the calculation, so a door without one
    can never be calculated.
    """

    def __init__(self, field: str, element_id: Optional[str] = None,
                 message: Optional[str] = None):
        message = message or (
            f"{field} is required for {element_id}" if element_id else f"{field} is required"
        )
        super().__init__(message, {"field": field, "element_id": element_id})
        self.field = field
        self.element_id = element_id


class CalculationCancelledError(CriticalError):
    """A building calculation was cancelled before all rooms were scheduled."""
    pass


class UnknownConstructionError(LookupError):
    """Construction or glazing tag that has no entry in the reference tables."""

    def __init__(self, kind: str, tag: Any):
        super().__init__(f"Unknown {kind}: {tag!r}")
        self.kind = kind
        self.tag = tag


def log_error_with_context(error: HeatLossError, context: Dict[str, Any]):
    """
    Log error with additional context information.

    Args:
        error: Error to log
        context: Additional context (room_id, stage, etc.)
    """
    log_data = {
        'error_type': type(error).__name__,
        'error_message': error.message,
        'details': error.details,
        'context': context
    }

    if isinstance(error, CriticalError):
        logger.error(f"CRITICAL ERROR: {error.message}", extra=log_data)
    else:
        logger.warning(f"Heat loss error: {error.message}", extra=log_data)
