"""Tests for waypoint exceptions."""

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


# ==================== Base Exceptions ====================


def test_waypoint_error():
    """Test base WaypointError."""
    error = WaypointError("Test error", "TEST_CODE")
    assert str(error) == "Test error"
    assert error.message == "Test error"
    assert error.code == "TEST_CODE"


def test_store_error():
    """Test StoreError."""
    error = StoreError("Failed to create user", "create")
    assert "Failed to create user" in str(error)
    assert error.code == "STORE_ERROR"
    assert error.operation == "create"


# ==================== Store Conflicts ====================


def test_user_exists_error():
    """Test UserExistsError."""
    error = UserExistsError("a@x.com")
    assert "a@x.com" in str(error)
    assert error.code == "USER_EXISTS"
    assert error.email == "a@x.com"


def test_provider_account_exists_error():
    """Test ProviderAccountExistsError."""
    error = ProviderAccountExistsError("user-1", "oidc", "sub-123")
    assert "user-1" in str(error)
    assert "oidc:sub-123" in str(error)
    assert error.code == "PROVIDER_ACCOUNT_EXISTS"
    assert error.provider == "oidc"
    assert error.provider_account_id == "sub-123"


def test_profile_validation_error():
    """Test ProfileValidationError."""
    error = ProfileValidationError("Field too long", field="photo_url")
    assert str(error) == "Field too long"
    assert error.code == "PROFILE_VALIDATION_FAILED"
    assert error.field == "photo_url"


# ==================== Authentication Exceptions ====================


def test_authentication_error():
    """Test base AuthenticationError."""
    error = AuthenticationError("Login rejected")
    assert str(error) == "Login rejected"
    assert error.code == "AUTHENTICATION_ERROR"


def test_email_not_provided_error():
    """Test EmailNotProvidedError."""
    error = EmailNotProvidedError("google")
    assert "did not share an email" in str(error)
    assert error.code == "EMAIL_NOT_PROVIDED"
    assert error.provider == "google"


def test_profile_update_error():
    """Test ProfileUpdateError."""
    error = ProfileUpdateError("user-1", "Field too long")
    assert "user-1" in str(error)
    assert "Field too long" in str(error)
    assert error.code == "PROFILE_UPDATE_FAILED"
    assert error.user_id == "user-1"


def test_profile_update_error_without_reason():
    """Test ProfileUpdateError message without a reason."""
    error = ProfileUpdateError("user-1")
    assert str(error) == "Failed to update profile for user 'user-1'"


def test_invalid_token_error():
    """Test InvalidTokenError."""
    error = InvalidTokenError()
    assert "Invalid token" in str(error)
    assert error.code == "INVALID_TOKEN"


# ==================== Exception Hierarchy ====================


def test_exception_inheritance():
    """Test that all exceptions inherit from WaypointError."""
    assert issubclass(StoreError, WaypointError)
    assert issubclass(UserExistsError, WaypointError)
    assert issubclass(ProviderAccountExistsError, WaypointError)
    assert issubclass(ProfileValidationError, WaypointError)
    assert issubclass(AuthenticationError, WaypointError)
    assert issubclass(EmailNotProvidedError, AuthenticationError)
    assert issubclass(ProfileUpdateError, AuthenticationError)
    assert issubclass(InvalidTokenError, WaypointError)
