"""
URL-safe text codec for token segments.
"""

import base64
import binascii
import re
from typing import Protocol

from .errors import DecodeError

_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


class Codec(Protocol):
    """Reversible transform between raw bytes and a URL-safe segment."""

    def encode(self, data: bytes) -> str: ...

    def decode(self, text: str) -> bytes: ...


class Base64UrlSafeCodec:
    """Base64 with the ``-_`` alphabet and no padding."""

    def encode(self, data: bytes) -> str:
        return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")

    def decode(self, text: str) -> bytes:
        if not _ALPHABET.fullmatch(text):
            raise DecodeError("Segment contains characters outside the URL-safe alphabet")
        if len(text) % 4 == 1:
            raise DecodeError("Segment has an invalid length", details={"length": len(text)})

        padded = text + "=" * (-len(text) % 4)
        try:
            data = base64.urlsafe_b64decode(padded.encode("ascii"))
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Segment is not valid base64: {e}")

        # Spare trailing bits must be zero so each byte string has one text form.
        if self.encode(data) != text:
            raise DecodeError("Segment is not canonical base64")
        return data
