"""Federated login models - store-agnostic data structures."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

# Fields a user store accepts in update()
DISPLAY_NAME_FIELD = "display_name"
PHOTO_URL_FIELD = "photo_url"
PROFILE_FIELDS = (DISPLAY_NAME_FIELD, PHOTO_URL_FIELD)


@dataclass
class ExternalProfile:
    """Identity assertion from an external provider for one login attempt.

    Not persisted as-is. The email is optional so that an assertion without
    an email claim can be represented and rejected.
    """

    provider: str  # e.g., "oidc", "google"
    issuer: str
    subject_id: str  # Provider's stable sub claim
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    raw_claims: dict[str, Any] | None = None


@dataclass
class User:
    """Local user record, unique per normalized email."""

    user_id: str
    email: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def missing_profile_fields(self) -> list[str]:
        """Profile fields that are still null on this record."""
        return [name for name in PROFILE_FIELDS if not getattr(self, name)]


@dataclass
class ProviderAccount:
    """Link between a user and one external provider identity."""

    user_id: str
    provider: str
    provider_account_id: str  # Subject id at the provider
    issuer: str
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    created_at: Optional[datetime] = None
