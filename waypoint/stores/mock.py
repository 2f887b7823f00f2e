"""In-memory stores for local development and testing."""

from __future__ import annotations

import asyncio
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import structlog

from waypoint.core.account_store import ProviderAccountStore
from waypoint.core.user_store import UserStore
from waypoint.exceptions import (
    ProfileValidationError,
    ProviderAccountExistsError,
    UserExistsError,
)
from waypoint.models import PROFILE_FIELDS, ExternalProfile, ProviderAccount, User
from waypoint.validators import normalize_email

log = structlog.get_logger()

MAX_FIELD_LENGTH = 2048


class MockUserStore(UserStore):
    """
    In-memory user store keyed by normalized email.

    The email index is checked and written under a lock, so concurrent
    creates for the same email yield one user and UserExistsError for the
    rest, the same contract a unique constraint gives a real database.

    Example:
        store = MockUserStore(latency=0.01)
        user = await store.create(profile)
    """

    def __init__(self, users: Optional[List[User]] = None, latency: float = 0.0):
        """Initialize mock user store.

        Args:
            users: Optional users to preload (e.g. created by a magic-link signup)
            latency: Seconds each operation yields to the event loop. Lets
                tests interleave concurrent logins the way network I/O would.
        """
        self._lock = threading.Lock()
        self._latency = latency
        self._users: Dict[str, User] = {}
        self._email_index: Dict[str, str] = {}

        for user in users or []:
            user = replace(user, email=normalize_email(user.email))
            self._users[user.user_id] = user
            self._email_index[user.email] = user.user_id

    async def _yield(self) -> None:
        await asyncio.sleep(self._latency)

    async def find_by_email(self, email: str) -> Optional[User]:
        await self._yield()
        user_id = self._email_index.get(email)
        if user_id is None:
            return None
        return replace(self._users[user_id])

    async def get_user(self, user_id: str) -> Optional[User]:
        await self._yield()
        user = self._users.get(user_id)
        return replace(user) if user else None

    async def create(self, profile: ExternalProfile) -> User:
        await self._yield()
        now = datetime.now(timezone.utc)
        user = User(
            user_id=str(uuid.uuid4()),
            email=profile.email,
            display_name=profile.display_name,
            photo_url=profile.photo_url,
            created_at=now,
            updated_at=now,
        )

        with self._lock:
            if profile.email in self._email_index:
                log.warning("Mock user already exists", email=profile.email)
                raise UserExistsError(profile.email)
            self._users[user.user_id] = user
            self._email_index[user.email] = user.user_id

        log.debug("Created mock user", user_id=user.user_id)
        return replace(user)

    async def update(self, user: User, fields: dict[str, Any]) -> User:
        await self._yield()
        for name, value in fields.items():
            if name not in PROFILE_FIELDS:
                raise ProfileValidationError(f"Field '{name}' cannot be updated", field=name)
            if value is not None and not isinstance(value, str):
                raise ProfileValidationError(f"Field '{name}' must be a string", field=name)
            if value and len(value) > MAX_FIELD_LENGTH:
                raise ProfileValidationError(
                    f"Field '{name}' exceeds {MAX_FIELD_LENGTH} characters", field=name
                )

        with self._lock:
            stored = self._users.get(user.user_id)
            if stored is None:
                raise ProfileValidationError(f"User '{user.user_id}' does not exist")
            # Set fields are kept, matching if_not_exists in DynamoDBUserStore
            missing = {
                name: value for name, value in fields.items() if not getattr(stored, name)
            }
            updated = replace(stored, **missing, updated_at=datetime.now(timezone.utc))
            self._users[user.user_id] = updated

        return replace(updated)

    @property
    def user_count(self) -> int:
        """Number of stored users."""
        return len(self._users)


class MockProviderAccountStore(ProviderAccountStore):
    """In-memory provider account store keyed by (user_id, provider, account id)."""

    def __init__(self, latency: float = 0.0):
        self._lock = threading.Lock()
        self._latency = latency
        self._accounts: Dict[Tuple[str, str, str], ProviderAccount] = {}

    async def exists(
        self,
        user_id: str,
        provider: str,
        provider_account_id: str,
    ) -> bool:
        await asyncio.sleep(self._latency)
        return (user_id, provider, provider_account_id) in self._accounts

    async def create(
        self,
        user_id: str,
        profile: ExternalProfile,
        access_token: Optional[str],
        refresh_token: Optional[str],
    ) -> ProviderAccount:
        await asyncio.sleep(self._latency)
        key = (user_id, profile.provider, profile.subject_id)
        account = ProviderAccount(
            user_id=user_id,
            provider=profile.provider,
            provider_account_id=profile.subject_id,
            issuer=profile.issuer,
            access_token=access_token,
            refresh_token=refresh_token,
            created_at=datetime.now(timezone.utc),
        )

        with self._lock:
            if key in self._accounts:
                raise ProviderAccountExistsError(*key)
            self._accounts[key] = account

        log.debug("Created mock provider account", user_id=user_id, provider=profile.provider)
        return replace(account)

    async def list_accounts(self, user_id: str) -> list[ProviderAccount]:
        await asyncio.sleep(self._latency)
        return [
            replace(account)
            for (owner, _, _), account in self._accounts.items()
            if owner == user_id
        ]

    @property
    def account_count(self) -> int:
        """Number of stored provider accounts."""
        return len(self._accounts)
