"""Base exceptions for neo-jwt.

This module defines the base exception hierarchy for the neo-jwt library.
All exceptions inherit from NeoJwtError and carry an error code and
structured details for logging.
"""

from typing import Any, Dict, Optional


class NeoJwtError(Exception):
    """Base exception for all neo-jwt errors.

    All exceptions raised by the library inherit from this base class and
    include structured error information for easier debugging.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def create_error_response(exception: NeoJwtError) -> Dict[str, Any]:
    """Create standardized error payload from exception.

    Args:
        exception: The neo-jwt exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
