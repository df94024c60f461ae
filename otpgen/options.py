from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Optional, Union

from .base32 import base32_decode, base32_encode, generate_secret
from .errors import InvalidParameter
from .settings import ALGORITHMS, load_otp_settings


logger = logging.getLogger(__name__)

MIN_DIGITS = 1
MAX_DIGITS = 10


@dataclass(frozen=True, kw_only=True)
class OTPOptions:
    secret: str = field(repr=False)
    key: bytes = field(repr=False)
    algorithm: str
    digits: int
    counter: Optional[int] = None
    period: Optional[int] = None
    time: Optional[float] = None


OptionsInput = Union[None, str, Mapping[str, Any], OTPOptions]

_FIELDS = frozenset(f.name for f in fields(OTPOptions))


def _as_mapping(options: OptionsInput) -> dict[str, Any]:
    if isinstance(options, OTPOptions):
        raw = {name: getattr(options, name) for name in _FIELDS}
    elif isinstance(options, Mapping):
        raw = dict(options)
    else:
        raw = {"secret": options}

    unknown = sorted(set(raw) - _FIELDS)
    if unknown:
        raise InvalidParameter(unknown[0], "unknown option")
    return {k: v for k, v in raw.items() if v is not None}


def _has_key(key: Any) -> bool:
    # An empty hex string means no key; empty raw bytes are still a key.
    return key is not None and key != ""


def _resolve_key(key: Any, secret: str) -> bytes:
    if not _has_key(key):
        return base32_decode(secret)
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    if isinstance(key, str):
        try:
            return bytes.fromhex(key)
        except ValueError:
            raise InvalidParameter("key", "must be bytes or a hex string") from None
    raise InvalidParameter("key", "must be bytes or a hex string")


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidParameter(name, "must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidParameter(name, "must be a finite integer") from None


def _as_seconds(value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidParameter("time", "must be a number of seconds")
    if isinstance(value, int):
        return value
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter("time", "must be a number of seconds") from None
    if not math.isfinite(seconds):
        raise InvalidParameter("time", "must be finite")
    return seconds


def clamp_digits(value: Any) -> int:
    if isinstance(value, float) and math.isinf(value):
        return MAX_DIGITS if value > 0 else MIN_DIGITS
    return min(MAX_DIGITS, max(MIN_DIGITS, _as_int("digits", value)))


def resolve_options(options: OptionsInput, defaults: Mapping[str, Any]) -> OTPOptions:
    """Build a complete :class:`OTPOptions` from caller input.

    ``options`` may be a base32 secret, a mapping of option names, an existing
    ``OTPOptions`` or ``None``. ``defaults`` holds the mode specific values
    (``counter`` for HOTP, ``period`` and ``time`` for TOTP) and only fills
    options the caller left out. The caller's object is never modified.
    """
    values = _as_mapping(options)
    settings = load_otp_settings()

    key = values.get("key")
    secret = values.get("secret")
    if secret is None:
        if _has_key(key):
            secret = base32_encode(_resolve_key(key, ""))
        else:
            logger.debug("no secret supplied, generating one")
            secret = generate_secret(settings.secret_length)
    elif not isinstance(secret, str):
        raise InvalidParameter("secret", "must be a base32 string")

    algorithm = str(values.get("algorithm", settings.algorithm)).strip().lower()
    if algorithm not in ALGORITHMS:
        raise InvalidParameter("algorithm", f"must be one of {', '.join(ALGORITHMS)}")

    for name, value in defaults.items():
        if name not in _FIELDS:
            raise InvalidParameter(name, "unknown option")
        values.setdefault(name, value)

    counter = values.get("counter")
    if counter is not None:
        counter = _as_int("counter", counter)
        if counter < 0:
            raise InvalidParameter("counter", "must not be negative")

    period = values.get("period")
    if period is not None:
        period = _as_int("period", period)
        if period <= 0:
            raise InvalidParameter("period", "must be positive")

    ts = values.get("time")
    if ts is not None:
        ts = _as_seconds(ts)
        if ts < 0:
            raise InvalidParameter("time", "must not be negative")

    return OTPOptions(
        secret=secret,
        key=_resolve_key(key, secret),
        algorithm=algorithm,
        digits=clamp_digits(values.get("digits", settings.digits)),
        counter=counter,
        period=period,
        time=ts,
    )
