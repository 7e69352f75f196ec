"""Claim serializers."""

from .json_serializer import JsonClaimSerializer, create_json_serializer

__all__ = ["JsonClaimSerializer", "create_json_serializer"]
