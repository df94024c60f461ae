from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Union
from urllib.parse import quote_plus, urlencode

from .errors import InvalidParameter, MissingLabel


OTP_TYPES = ("hotp", "totp")

_QUERY_KEYS = ("secret", "issuer", "algorithm", "digits", "period", "counter")


@dataclass(frozen=True)
class ProvisioningURLSpec:
    label: Optional[str] = None
    type: str = "totp"
    issuer: Optional[str] = None
    secret: Optional[str] = None
    algorithm: Optional[str] = None
    digits: Optional[int] = None
    period: Optional[int] = None
    counter: Optional[int] = None


def _as_spec(spec: Union[ProvisioningURLSpec, Mapping[str, Any]]) -> ProvisioningURLSpec:
    if isinstance(spec, ProvisioningURLSpec):
        return spec
    known = {f.name for f in fields(ProvisioningURLSpec)}
    unknown = sorted(set(spec) - known)
    if unknown:
        raise InvalidParameter(unknown[0], "unknown option")
    values = {k: v for k, v in spec.items() if v is not None}
    return ProvisioningURLSpec(**values)


def otpauth_url(spec: Union[ProvisioningURLSpec, Mapping[str, Any]]) -> str:
    """Build an ``otpauth://`` URI for authenticator apps.

    The issuer is prefixed to the label unless the label already carries one
    (``issuer:account``). Query parameters appear in a fixed order and only when
    set.
    """
    s = _as_spec(spec)
    if not s.label:
        raise MissingLabel()

    otp_type = s.type or "totp"
    if otp_type not in OTP_TYPES:
        raise InvalidParameter("type", "must be hotp or totp")

    label = s.label
    if s.issuer is not None and ":" not in label:
        label = f"{s.issuer}:{label}"

    params = [(k, str(getattr(s, k))) for k in _QUERY_KEYS if getattr(s, k) is not None]
    url = f"otpauth://{otp_type}/{quote_plus(label)}"
    if params:
        url += "?" + urlencode(params)
    return url
