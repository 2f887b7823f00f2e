"""Provider account linking.

A user may be created under one provider (or through a password or
magic-link signup) and later sign in through a different provider that
shares the same email. The linker records each provider identity once so
that a single user accumulates provider logins without duplicate users.
"""

from __future__ import annotations

from typing import Optional

import structlog

from waypoint.core.account_store import ProviderAccountStore
from waypoint.exceptions import ProviderAccountExistsError
from waypoint.models import ExternalProfile, User

log = structlog.get_logger()


class AccountLinker:
    """Ensure a provider account link exists for a resolved user."""

    def __init__(self, account_store: ProviderAccountStore):
        self._account_store = account_store

    async def ensure_linked(
        self,
        user: User,
        profile: ExternalProfile,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
    ) -> None:
        """Create the link between user and provider identity if missing.

        Existing links are left untouched, tokens included.

        Args:
            user: User returned by the identity resolver
            profile: Profile with the normalized provider label
            access_token: Opaque access token stored on a new link
            refresh_token: Opaque refresh token stored on a new link

        Raises:
            StoreError: If the link cannot be checked or written
        """
        if await self._account_store.exists(
            user.user_id, profile.provider, profile.subject_id
        ):
            log.debug(
                "Provider account already linked",
                user_id=user.user_id,
                provider=profile.provider,
            )
            return

        try:
            await self._account_store.create(
                user.user_id, profile, access_token, refresh_token
            )
        except ProviderAccountExistsError:
            log.info(
                "Provider account linked concurrently",
                user_id=user.user_id,
                provider=profile.provider,
            )
            return

        log.info(
            "Linked provider account",
            user_id=user.user_id,
            provider=profile.provider,
            issuer=profile.issuer,
        )
