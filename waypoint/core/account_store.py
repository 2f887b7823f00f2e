"""Abstract provider account store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from waypoint.models import ExternalProfile, ProviderAccount


class ProviderAccountStore(ABC):
    """Abstract store for links between users and external provider identities.

    A link is unique per (user_id, provider, provider_account_id). Like
    UserStore, implementations must reject a duplicate create with
    ProviderAccountExistsError rather than writing a second row.

    Implementations:
        - MockProviderAccountStore: In-memory for testing
        - DynamoDBProviderAccountStore: AWS DynamoDB with conditional writes
    """

    @abstractmethod
    async def exists(
        self,
        user_id: str,
        provider: str,
        provider_account_id: str,
    ) -> bool:
        """Check whether a provider account link exists.

        Args:
            user_id: The local user's ID
            provider: Provider label (e.g., "oidc")
            provider_account_id: Subject id at the provider

        Returns:
            True if the link exists, False otherwise
        """

    @abstractmethod
    async def create(
        self,
        user_id: str,
        profile: ExternalProfile,
        access_token: Optional[str],
        refresh_token: Optional[str],
    ) -> ProviderAccount:
        """Link a user to the provider identity described by a profile.

        Args:
            user_id: The local user's ID
            profile: Profile carrying provider, subject_id and issuer
            access_token: Opaque access token from the provider
            refresh_token: Opaque refresh token from the provider

        Returns:
            The created ProviderAccount

        Raises:
            ProviderAccountExistsError: If the link already exists
            StoreError: On backend errors
        """

    @abstractmethod
    async def list_accounts(self, user_id: str) -> list[ProviderAccount]:
        """List all provider accounts linked to a user.

        Args:
            user_id: The local user's ID

        Returns:
            List of ProviderAccount, empty if none
        """
