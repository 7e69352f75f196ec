"""Claims transformer protocol contract."""

from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class ClaimsTransformer(Protocol):
    """Protocol for enriching or reshaping claims after validation.

    Transformers receive a copy of the validated payload and the
    validation context, and return the claims to hand to the next one.
    """

    def transform_claims(self, claims: Dict[str, Any], context: Any) -> Dict[str, Any]:
        ...
