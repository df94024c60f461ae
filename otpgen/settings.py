from __future__ import annotations

import os
from dataclasses import dataclass


ALGORITHMS = ("sha1", "sha256", "sha512")

DEFAULTS = {
    "algorithm": "sha1",
    "digits": "6",
    "period": "30",
    "secret_length": "24",
}


@dataclass(frozen=True)
class OTPSettings:
    algorithm: str
    digits: int
    period: int
    secret_length: int


def get_setting(key: str) -> str:
    value = os.environ.get(f"OTPGEN_{key.upper()}")
    if value is None:
        return DEFAULTS.get(key, "")
    return value


def _int_setting(key: str, *, minimum: int) -> int:
    raw = get_setting(key).strip() or DEFAULTS[key]
    try:
        value = int(raw)
    except ValueError:
        value = int(DEFAULTS[key])
    if value < minimum:
        value = int(DEFAULTS[key])
    return value


def load_otp_settings() -> OTPSettings:
    algorithm = get_setting("algorithm").strip().lower()
    if algorithm not in ALGORITHMS:
        algorithm = DEFAULTS["algorithm"]

    return OTPSettings(
        algorithm=algorithm,
        digits=_int_setting("digits", minimum=1),
        period=_int_setting("period", minimum=1),
        secret_length=_int_setting("secret_length", minimum=1),
    )
