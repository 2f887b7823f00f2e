"""Federated login flow: resolve the user, then link the provider account."""

from __future__ import annotations

from typing import Optional

import structlog

from waypoint.linker import AccountLinker
from waypoint.models import ExternalProfile, User
from waypoint.resolver import IdentityResolver

log = structlog.get_logger()


class FederatedLogin:
    """Reconcile one verified federated login with local state.

    The protocol layer has already verified the issuer and tokens. Any
    exception raised here means the caller must reject the login and must
    not issue a session. Nothing is retried and nothing already written is
    rolled back.

    Example:
        >>> factory = create_factory("mock")
        >>> login = factory.create_login()
        >>> user = await login.login(issuer, profile, id_token, access, refresh)
    """

    def __init__(self, resolver: IdentityResolver, linker: AccountLinker):
        self._resolver = resolver
        self._linker = linker

    async def login(
        self,
        issuer: str,
        profile: ExternalProfile,
        id_token: Optional[str] = None,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
    ) -> User:
        """Resolve and link a verified login.

        Args:
            issuer: Verified issuer URL
            profile: Verified external profile
            id_token: Verified ID token (accepted, not stored)
            access_token: Opaque access token for the provider account
            refresh_token: Opaque refresh token for the provider account

        Returns:
            The User to issue a session for

        Raises:
            EmailNotProvidedError: If the profile has no usable email
            ProfileUpdateError: If the profile backfill was rejected
            StoreError: On any other store failure
        """
        if not profile.issuer:
            profile.issuer = issuer

        user = await self._resolver.resolve(profile)
        await self._linker.ensure_linked(user, profile, access_token, refresh_token)

        log.info("Federated login reconciled", user_id=user.user_id, issuer=profile.issuer)
        return user
