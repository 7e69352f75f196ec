"""Claim serializer protocol contract."""

from typing import Any, Optional, Protocol, Type, runtime_checkable


@runtime_checkable
class ClaimSerializer(Protocol):
    """Protocol for turning header and payload maps into text and back.

    Injected into the builder, parser and stores so the JSON provider is a
    per-instance choice.
    """

    def serialize(self, value: Any) -> str:
        """Serialize a value to text.

        Raises:
            SerializationError: If the value cannot be serialized
        """
        ...

    def deserialize(self, text: str, target_type: Optional[Type] = None) -> Any:
        """Deserialize text, optionally checking the result type.

        Raises:
            SerializationError: If the text is invalid or of the wrong type
        """
        ...
