"""Context handed to claims transformers."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ...core.entities import JwtToken
from .parameters import ValidationParameters


@dataclass
class ValidationContext:
    """State of one successful validation.

    ``items`` is a free-form bag transformers can use to pass data along
    the chain.
    """

    token: JwtToken
    parameters: ValidationParameters
    validation_time: datetime
    items: Dict[str, Any] = field(default_factory=dict)

    def get_item(self, key: str, default: Optional[Any] = None) -> Any:
        return self.items.get(key, default)

    def set_item(self, key: str, value: Any) -> None:
        self.items[key] = value
