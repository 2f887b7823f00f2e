"""Waypoint - Federated login reconciliation library.

Waypoint turns a verified SSO/OIDC identity assertion into local state:
it finds or creates the user for the asserted email, backfills missing
profile fields, and links the user to the provider identity.

Features:
- Exactly-once user creation per email under concurrent first logins
- Profile backfill for users created by passwordless or magic-link signups
- Multiple provider identities per user without duplicate users
- In-memory and AWS DynamoDB stores out of the box
"""

from waypoint.core.factory import WaypointFactory, create_factory
from waypoint.core.account_store import ProviderAccountStore
from waypoint.core.user_store import UserStore
from waypoint.factories import DynamoDBFactory, MockFactory
from waypoint.linker import AccountLinker
from waypoint.login import FederatedLogin
from waypoint.profiles import profile_from_claims, profile_from_id_token
from waypoint.resolver import DEFAULT_PROVIDER_LABEL, IdentityResolver
from waypoint.stores import (
    DynamoDBProviderAccountStore,
    DynamoDBUserStore,
    MockProviderAccountStore,
    MockUserStore,
)
from waypoint.exceptions import (
    AuthenticationError,
    EmailNotProvidedError,
    InvalidTokenError,
    ProfileUpdateError,
    ProfileValidationError,
    ProviderAccountExistsError,
    StoreError,
    UserExistsError,
    WaypointError,
)
from waypoint.models import ExternalProfile, ProviderAccount, User
from waypoint.validators import is_valid_email, normalize_email

__version__ = "0.1.0"

__all__ = [
    # Core interfaces
    "UserStore",
    "ProviderAccountStore",
    # Factory (recommended entry point)
    "create_factory",
    "WaypointFactory",
    "DynamoDBFactory",
    "MockFactory",
    # Login flow
    "FederatedLogin",
    "IdentityResolver",
    "AccountLinker",
    "DEFAULT_PROVIDER_LABEL",
    # Profile helpers
    "profile_from_claims",
    "profile_from_id_token",
    "is_valid_email",
    "normalize_email",
    # Models
    "ExternalProfile",
    "ProviderAccount",
    "User",
    # Exceptions - Base
    "WaypointError",
    "StoreError",
    # Exceptions - Store conflicts
    "UserExistsError",
    "ProviderAccountExistsError",
    "ProfileValidationError",
    # Exceptions - Authentication
    "AuthenticationError",
    "EmailNotProvidedError",
    "ProfileUpdateError",
    # Exceptions - Token
    "InvalidTokenError",
    # Stores
    "DynamoDBUserStore",
    "DynamoDBProviderAccountStore",
    "MockUserStore",
    "MockProviderAccountStore",
]
