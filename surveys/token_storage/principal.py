"""
Authenticated principal and claim helpers.

A principal is the set of claims the identity provider asserted for the
caller. Token caches are keyed by the object identifier claim, so resolving
it is the one lookup that must succeed.
"""
from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

OBJECT_IDENTIFIER = "http://schemas.microsoft.com/identity/claims/objectidentifier"
TENANT_ID = "http://schemas.microsoft.com/identity/claims/tenantid"
NAME = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name"
ISSUER = "iss"

# Short JWT claim names accepted in place of the long URI forms
_ALIASES = {
    OBJECT_IDENTIFIER: ("oid",),
    TENANT_ID: ("tid",),
    NAME: ("name",),
}


class MissingClaimError(ValueError):
    """Raised when a required identity claim is absent from a principal."""

    def __init__(self, claim_type: str):
        super().__init__(f"Required claim not found: {claim_type}")
        self.claim_type = claim_type


@dataclass(frozen=True)
class Claim:
    type: str
    value: str


class ClaimsPrincipal:
    def __init__(self, claims: Iterable[Union[Claim, Tuple[str, str]]] = ()):
        self.claims: List[Claim] = [c if isinstance(c, Claim) else Claim(*c) for c in claims]

    @property
    def is_authenticated(self) -> bool:
        return bool(self.claims)

    @property
    def name(self) -> Optional[str]:
        return self.find_first_value(NAME)

    def find_first_value(self, claim_type: str, throw_if_not_found: bool = False) -> Optional[str]:
        accepted = (claim_type,) + _ALIASES.get(claim_type, ())
        for claim in self.claims:
            if claim.type in accepted and claim.value:
                return claim.value
        if throw_if_not_found:
            raise MissingClaimError(claim_type)
        return None

    def get_object_identifier_value(self, throw_if_not_found: bool = True) -> Optional[str]:
        return self.find_first_value(OBJECT_IDENTIFIER, throw_if_not_found)

    def get_tenant_id_value(self, throw_if_not_found: bool = True) -> Optional[str]:
        return self.find_first_value(TENANT_ID, throw_if_not_found)

    def get_issuer_value(self, throw_if_not_found: bool = True) -> Optional[str]:
        return self.find_first_value(ISSUER, throw_if_not_found)

    def __repr__(self) -> str:
        return f"ClaimsPrincipal(name={self.name!r}, claims={len(self.claims)})"


def _decode_client_principal(encoded: str) -> List[Claim]:
    try:
        payload = json.loads(base64.b64decode(encoded, validate=True))
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Malformed client principal header: {e}") from e
    if not isinstance(payload, dict):
        raise ValueError("Malformed client principal header: expected a JSON object")
    entries = payload.get("claims") or []
    if not isinstance(entries, list):
        raise ValueError("Malformed client principal header: claims must be a list")
    claims = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValueError("Malformed client principal header: each claim must be an object")
        typ = entry.get("typ")
        val = entry.get("val")
        if not isinstance(typ, str) or not isinstance(val, str):
            raise ValueError("Malformed client principal header: claim typ and val must be strings")
        if typ:
            claims.append(Claim(typ, val))
    return claims


def principal_from_headers(
    x_ms_client_principal: Optional[str],
    x_ms_client_principal_id: Optional[str],
    x_ms_client_principal_name: Optional[str],
) -> Optional[ClaimsPrincipal]:
    """Build a principal from the authentication proxy's identity headers.

    The encoded principal header carries the full claim set and wins; the
    id/name pair is a fallback. Returns None when no identity is present.
    """
    claims: List[Claim] = []
    if x_ms_client_principal:
        claims = _decode_client_principal(x_ms_client_principal)
    elif x_ms_client_principal_id:
        claims.append(Claim(OBJECT_IDENTIFIER, x_ms_client_principal_id))
        if x_ms_client_principal_name:
            claims.append(Claim(NAME, x_ms_client_principal_name))
    if not claims:
        return None
    return ClaimsPrincipal(claims)
