"""Signing and verification."""

from .signature_engine import SignatureEngine, is_key_compatible, key_kind_for

__all__ = ["SignatureEngine", "is_key_compatible", "key_kind_for"]
