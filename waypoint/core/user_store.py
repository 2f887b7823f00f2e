"""Abstract user store interface.

This module defines the interface that any user store must implement.
The interface is storage-agnostic - implementations can use DynamoDB,
an in-memory dict, or any other backend that can enforce email uniqueness.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from waypoint.models import ExternalProfile, User


class UserStore(ABC):
    """Abstract store for local user records.

    Implementations must guarantee that at most one user exists per
    normalized email, even when two logins race to create the same email.
    The losing create raises UserExistsError instead of writing a duplicate.

    Implementations:
        - MockUserStore: In-memory for testing
        - DynamoDBUserStore: AWS DynamoDB with conditional writes
    """

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Get a user by their email address.

        Args:
            email: Normalized (lowercase) email address

        Returns:
            User if found, None otherwise

        Raises:
            StoreError: On backend errors
        """

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by their ID.

        Args:
            user_id: The user's unique ID

        Returns:
            User if found, None otherwise
        """

    @abstractmethod
    async def create(self, profile: ExternalProfile) -> User:
        """Create a user from an external profile.

        Persists the profile's email, display name and photo URL. Token
        material is never stored on the user.

        Args:
            profile: Profile with a normalized email

        Returns:
            The created User

        Raises:
            UserExistsError: If a user with this email already exists
            StoreError: On backend errors
        """

    @abstractmethod
    async def update(self, user: User, fields: dict[str, Any]) -> User:
        """Fill null profile fields on an existing user in a single write.

        Fields that are already set on the stored record are left unchanged,
        so concurrent backfills cannot overwrite each other.

        Args:
            user: The user to update
            fields: Mapping of profile field name to new value. Only
                display_name and photo_url are accepted.

        Returns:
            Updated User

        Raises:
            ProfileValidationError: If the store rejects the update
            StoreError: On backend errors
        """
