"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class NudgeError(Exception):
    """Base exception for nudge."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(NudgeError):
    """Validation error."""

    pass


class ConfigurationError(NudgeError):
    """Required configuration (push keys, data store) is missing."""

    pass
