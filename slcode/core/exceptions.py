"""
Custom exceptions for the slcode package.

The coding engine reports failures through :class:`slcode.core.result.Result`
values. These exceptions are raised when a caller asks a result to be turned
into an exception.
"""

from typing import Optional, Any, List


class SlcodeException(Exception):
    """Base exception for all slcode errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        """
        Initialize slcode exception.

        Args:
            message: Error message
            details: Optional additional details
        """
        super().__init__(message)
        self.message = message
        self.details = details


class StructuredLightError(SlcodeException):
    """Raised by ``Result.raise_for_errors`` when a result carries errors."""

    def __init__(self, errors: List[str], warnings: Optional[List[str]] = None):
        message = f"Structured light operation failed: {', '.join(errors)}"
        super().__init__(message, details={
            'errors': list(errors),
            'warnings': list(warnings or [])
        })
        self.errors = list(errors)
        self.warnings = list(warnings or [])

