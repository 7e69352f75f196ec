"""Validation result types.

Validation failures are data, not exceptions: callers branch on
``result.is_valid`` and ``result.errors[0].code``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...core.value_objects import ValidationCode


@dataclass(frozen=True)
class ValidationError:
    """One validation failure."""

    code: ValidationCode
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"code": self.code.value, "message": self.message}
        if self.details:
            data["details"] = dict(self.details)
        return data


@dataclass
class ValidationResult:
    """Outcome of validating a token.

    ``is_valid`` is True exactly when ``errors`` is empty. On failure the
    first error comes from the first pipeline stage that failed.
    """

    errors: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> Optional[ValidationError]:
        return self.errors[0] if self.errors else None

    @property
    def code(self) -> Optional[ValidationCode]:
        """Code of the first error, if any."""
        return self.errors[0].code if self.errors else None

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def failure(
        cls,
        code: ValidationCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ValidationResult":
        return cls([ValidationError(code, message, details)])

    def add_error(
        self,
        code: ValidationCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ValidationResult":
        """Append an error and return self."""
        self.errors.append(ValidationError(code, message, details))
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [error.to_dict() for error in self.errors],
        }

    def __bool__(self) -> bool:
        return self.is_valid
