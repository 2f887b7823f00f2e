"""Waypoint exceptions.

All exceptions inherit from WaypointError for easy catching.
"""

from __future__ import annotations


class WaypointError(Exception):
    """Base exception for Waypoint errors."""

    def __init__(self, message: str, code: str):
        self.message = message
        self.code = code
        super().__init__(message)


class StoreError(WaypointError):
    """Raised when a user or provider account store operation fails."""

    def __init__(self, message: str, operation: str):
        super().__init__(message=message, code="STORE_ERROR")
        self.operation = operation


# ==================== Store Conflicts ====================


class UserExistsError(WaypointError):
    """Raised when creating a user whose email is already taken."""

    def __init__(self, email: str):
        super().__init__(
            message=f"User with email '{email}' already exists",
            code="USER_EXISTS",
        )
        self.email = email


class ProviderAccountExistsError(WaypointError):
    """Raised when creating a provider account link that already exists."""

    def __init__(self, user_id: str, provider: str, provider_account_id: str):
        super().__init__(
            message=(
                f"Provider account '{provider}:{provider_account_id}' "
                f"already linked to user '{user_id}'"
            ),
            code="PROVIDER_ACCOUNT_EXISTS",
        )
        self.user_id = user_id
        self.provider = provider
        self.provider_account_id = provider_account_id


class ProfileValidationError(WaypointError):
    """Raised by a user store when a profile update is rejected."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message=message, code="PROFILE_VALIDATION_FAILED")
        self.field = field


# ==================== Authentication Errors ====================


class AuthenticationError(WaypointError):
    """Base class for errors that must reject the login attempt."""

    def __init__(self, message: str, code: str = "AUTHENTICATION_ERROR"):
        super().__init__(message=message, code=code)


class EmailNotProvidedError(AuthenticationError):
    """Raised when the identity provider did not share a usable email."""

    def __init__(self, provider: str | None = None):
        super().__init__(
            message="Login blocked: provider did not share an email",
            code="EMAIL_NOT_PROVIDED",
        )
        self.provider = provider


class ProfileUpdateError(AuthenticationError):
    """Raised when backfilling an existing user's profile fails."""

    def __init__(self, user_id: str, reason: str | None = None):
        message = f"Failed to update profile for user '{user_id}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message=message, code="PROFILE_UPDATE_FAILED")
        self.user_id = user_id


# ==================== Token Errors ====================


class InvalidTokenError(WaypointError):
    """Raised when an ID token cannot be decoded."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message=message, code="INVALID_TOKEN")
