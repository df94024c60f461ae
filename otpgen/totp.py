from __future__ import annotations

import hashlib
import hmac
import logging
import math
import struct
import time
from dataclasses import asdict, dataclass

from .errors import InvalidParameter
from .options import OptionsInput, OTPOptions, resolve_options
from .settings import ALGORITHMS, load_otp_settings


logger = logging.getLogger(__name__)

_MAX_COUNTER = 2**64 - 1


@dataclass(frozen=True, kw_only=True)
class OTPResult(OTPOptions):
    password: str


def _digestmod(algorithm: str):
    name = (algorithm or "").lower()
    if name not in ALGORITHMS:
        raise InvalidParameter("algorithm", f"must be one of {', '.join(ALGORITHMS)}")
    return getattr(hashlib, name)


def hotp(algorithm: str, key: bytes, counter: int) -> int:
    """RFC 4226 HOTP value before decimal truncation (31 bits)."""
    try:
        counter = int(counter)
    except (TypeError, ValueError, OverflowError):
        raise InvalidParameter("counter", "must be a finite integer") from None
    if not 0 <= counter <= _MAX_COUNTER:
        raise InvalidParameter("counter", "must fit in an unsigned 64-bit integer")
    msg = struct.pack(">Q", counter)
    digest = hmac.new(key, msg, _digestmod(algorithm)).digest()
    off = digest[-1] & 0x0F
    return struct.unpack(">I", digest[off:off + 4])[0] & 0x7FFFFFFF


def totp(algorithm: str, key: bytes, time: float, period: int) -> int:
    """RFC 6238 TOTP value: HOTP over the number of elapsed periods."""
    if not period > 0:
        raise InvalidParameter("period", "must be positive")
    if not math.isfinite(time):
        raise InvalidParameter("time", "must be finite")
    return hotp(algorithm, key, int(time // period))


def format_password(value: int, digits: int) -> str:
    return str(value).zfill(digits)[-digits:]


def _result(opts: OTPOptions, value: int) -> OTPResult:
    return OTPResult(**asdict(opts), password=format_password(value, opts.digits))


def _totp_defaults() -> dict:
    return {"period": load_otp_settings().period, "time": int(time.time())}


def generate_hotp(options: OptionsInput = None) -> OTPResult:
    opts = resolve_options(options, {"counter": 0})
    logger.debug(
        "hotp algorithm=%s digits=%s counter=%s", opts.algorithm, opts.digits, opts.counter
    )
    return _result(opts, hotp(opts.algorithm, opts.key, opts.counter))


def generate_totp(options: OptionsInput = None) -> OTPResult:
    opts = resolve_options(options, _totp_defaults())
    logger.debug(
        "totp algorithm=%s digits=%s period=%s", opts.algorithm, opts.digits, opts.period
    )
    return _result(opts, totp(opts.algorithm, opts.key, opts.time, opts.period))


def _normalize_code(code: str, digits: int) -> str | None:
    c = (code or "").strip().replace(" ", "")
    if len(c) != digits or not c.isdigit():
        return None
    return c


def verify_hotp(options: OptionsInput, code: str, *, look_ahead: int = 0) -> bool:
    opts = resolve_options(options, {"counter": 0})
    c = _normalize_code(code, opts.digits)
    if c is None:
        return False

    for counter in range(opts.counter, opts.counter + int(look_ahead) + 1):
        if counter > _MAX_COUNTER:
            break
        expected = format_password(hotp(opts.algorithm, opts.key, counter), opts.digits)
        if hmac.compare_digest(expected, c):
            return True
    return False


def verify_totp(options: OptionsInput, code: str, *, window: int = 1) -> bool:
    opts = resolve_options(options, _totp_defaults())
    c = _normalize_code(code, opts.digits)
    if c is None:
        return False

    counter = int(opts.time // opts.period)
    for delta in range(-int(window), int(window) + 1):
        if counter + delta < 0:
            continue
        expected = format_password(hotp(opts.algorithm, opts.key, counter + delta), opts.digits)
        if hmac.compare_digest(expected, c):
            return True
    return False
