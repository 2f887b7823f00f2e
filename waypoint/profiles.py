"""Build ExternalProfile instances from verified OIDC claims.

Accepts both standard OIDC claim names (sub, email, name, picture) and the
normalized profile shape produced by passport-style libraries (id, emails,
displayName, photos).
"""

from __future__ import annotations

from typing import Any, Optional

import jwt

from waypoint.exceptions import InvalidTokenError
from waypoint.models import ExternalProfile
from waypoint.resolver import DEFAULT_PROVIDER_LABEL


def _first_value(entries: Any) -> Optional[str]:
    """Return the value of the first {"value": ...} entry, if any."""
    if isinstance(entries, list) and entries:
        first = entries[0]
        if isinstance(first, dict):
            return first.get("value")
    return None


def profile_from_claims(
    issuer: str,
    claims: dict[str, Any],
    provider: str = DEFAULT_PROVIDER_LABEL,
) -> ExternalProfile:
    """Map verified claims to an ExternalProfile.

    Args:
        issuer: Verified issuer URL
        claims: Userinfo or ID token claims
        provider: Provider label for the profile

    Returns:
        ExternalProfile; email may be None if the provider did not share one

    Raises:
        ValueError: If the claims carry no subject identifier
    """
    subject_id = claims.get("sub") or claims.get("id")
    if not subject_id:
        raise ValueError("Claims are missing a subject identifier ('sub')")

    email = claims.get("email") or _first_value(claims.get("emails"))
    display_name = (
        claims.get("name")
        or claims.get("displayName")
        or claims.get("preferred_username")
    )
    photo_url = claims.get("picture") or _first_value(claims.get("photos"))

    return ExternalProfile(
        provider=provider,
        issuer=issuer or claims.get("iss", ""),
        subject_id=str(subject_id),
        email=email,
        display_name=display_name,
        photo_url=photo_url,
        raw_claims=claims,
    )


def profile_from_id_token(
    issuer: str,
    id_token: str,
    provider: str = DEFAULT_PROVIDER_LABEL,
) -> ExternalProfile:
    """Build a profile from an ID token the protocol layer already verified.

    WARNING: The signature is NOT checked here. Only pass tokens that have
    been verified upstream.

    Raises:
        InvalidTokenError: If the token cannot be decoded
        ValueError: If the token has no subject claim
    """
    try:
        claims = jwt.decode(id_token, options={"verify_signature": False})
    except jwt.exceptions.DecodeError as e:
        raise InvalidTokenError(f"Malformed ID token: {e}") from e

    return profile_from_claims(issuer, claims, provider=provider)
