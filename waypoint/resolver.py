"""Identity resolution for federated logins.

Maps a verified external profile onto exactly one local user: creates the
user on first login, or backfills display name and photo on an existing
user that was created through a flow that never collected them (e.g. a
magic-link signup).
"""

from __future__ import annotations

import structlog

from waypoint.core.user_store import UserStore
from waypoint.exceptions import (
    EmailNotProvidedError,
    ProfileUpdateError,
    ProfileValidationError,
    StoreError,
    UserExistsError,
)
from waypoint.models import ExternalProfile, User
from waypoint.validators import is_valid_email, normalize_email

log = structlog.get_logger()

DEFAULT_PROVIDER_LABEL = "oidc"


class IdentityResolver:
    """Find or create the local user for an external profile.

    Args:
        user_store: Store holding local users
        provider_label: Label recorded on the profile for the account linker
    """

    def __init__(
        self,
        user_store: UserStore,
        provider_label: str = DEFAULT_PROVIDER_LABEL,
    ):
        self._user_store = user_store
        self._provider_label = provider_label

    async def resolve(self, profile: ExternalProfile) -> User:
        """Resolve a profile to a local user.

        The profile is normalized in place: its email is lowercased and its
        provider is set to the configured label.

        Args:
            profile: Verified profile from the protocol layer

        Returns:
            The new or existing (possibly backfilled) User

        Raises:
            EmailNotProvidedError: If the profile carries no usable email
            ProfileUpdateError: If backfilling an existing user is rejected
            StoreError: On other store failures
        """
        if not is_valid_email(profile.email):
            log.warning(
                "Rejecting login without usable email",
                provider=profile.provider,
                issuer=profile.issuer,
            )
            raise EmailNotProvidedError(profile.provider)

        profile.email = normalize_email(profile.email)
        profile.provider = self._provider_label

        user = await self._user_store.find_by_email(profile.email)
        if user is None:
            return await self._create_user(profile)

        return await self._backfill_profile(user, profile)

    async def _create_user(self, profile: ExternalProfile) -> User:
        try:
            user = await self._user_store.create(profile)
        except UserExistsError:
            # Lost the race to a concurrent first login for this email
            log.info("User created concurrently, re-reading", email=profile.email)
            user = await self._user_store.find_by_email(profile.email)
            if user is None:
                raise StoreError(
                    f"User '{profile.email}' reported as existing but not found",
                    "create",
                )
            return await self._backfill_profile(user, profile)

        log.info("Created user from federated login", user_id=user.user_id, email=user.email)
        return user

    async def _backfill_profile(self, user: User, profile: ExternalProfile) -> User:
        fields = {
            name: getattr(profile, name)
            for name in user.missing_profile_fields
            if getattr(profile, name)
        }
        if not fields:
            log.debug("No profile fields to backfill", user_id=user.user_id)
            return user

        try:
            updated = await self._user_store.update(user, fields)
        except ProfileValidationError as e:
            log.error(
                "Profile backfill rejected",
                user_id=user.user_id,
                field=e.field,
                error=e.message,
            )
            raise ProfileUpdateError(user.user_id, e.message) from e

        log.info("Backfilled user profile", user_id=user.user_id, fields=sorted(fields))
        return updated
