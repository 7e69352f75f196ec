"""Base64url codec for JWT segments (RFC 7515 section 2, no padding)."""

import base64
import binascii
from typing import Union

from ..core.exceptions import DecodeError


def encode(data: Union[bytes, str]) -> str:
    """Encode bytes (or UTF-8 text) as unpadded base64url.

    Args:
        data: Raw bytes, or a string that is UTF-8 encoded first

    Returns:
        Base64url text without ``=`` padding
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data:
        return ""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode(text: str) -> bytes:
    """Decode unpadded (or padded) base64url text to bytes.

    Args:
        text: Base64url text

    Returns:
        Decoded bytes

    Raises:
        DecodeError: If the text has an invalid length or alphabet
    """
    if not text:
        return b""

    remainder = len(text) % 4
    if remainder == 1:
        raise DecodeError(
            "Illegal base64url string length.",
            details={"length": len(text)},
        )
    if remainder:
        text += "=" * (4 - remainder)

    standard = text.replace("-", "+").replace("_", "/")
    try:
        return base64.b64decode(standard.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, ValueError) as e:
        raise DecodeError(f"Illegal base64url string: {e}") from e


def decode_to_str(text: str) -> str:
    """Decode base64url text to a UTF-8 string.

    Raises:
        DecodeError: If decoding fails or the bytes are not valid UTF-8
    """
    data = decode(text)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError("Base64url content is not valid UTF-8.") from e
