from __future__ import annotations

import base64
import secrets
from typing import Optional

from .errors import InvalidCharacter, InvalidParameter
from .settings import load_otp_settings


BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

# Human friendly alphabet for new secrets. Every character is valid base32.
SECRET_ALPHABET = "2A3B4C5D6E7F2G3H4I5J6K7L2M3N4O5P6Q7R2S3T4U5V6W7X2Y3Z"

_INDEX = {c: i for i, c in enumerate(BASE32_ALPHABET)}


def base32_decode(value: str) -> bytes:
    """Decode an RFC 4648 base32 string.

    Trailing ``=`` padding is ignored, lookup is case-insensitive and bits that
    do not fill a whole trailing byte are dropped.
    """
    out = bytearray()
    acc = 0
    nbits = 0
    for char in value.rstrip("="):
        index = _INDEX.get(char.upper())
        if index is None:
            raise InvalidCharacter(char)
        acc = (acc << 5) | index
        nbits += 5
        if nbits >= 8:
            nbits -= 8
            out.append((acc >> nbits) & 0xFF)
            acc &= (1 << nbits) - 1
    return bytes(out)


def base32_encode(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii").rstrip("=")


def generate_secret(length: Optional[int] = None) -> str:
    if length is None:
        length = load_otp_settings().secret_length
    if isinstance(length, bool) or not isinstance(length, int) or length < 0:
        raise InvalidParameter("length", "must be a non-negative integer")
    return "".join(secrets.choice(SECRET_ALPHABET) for _ in range(length))
