"""Tests for waypoint models."""

from waypoint.models import (
    DISPLAY_NAME_FIELD,
    PHOTO_URL_FIELD,
    ExternalProfile,
    ProviderAccount,
    User,
)


def test_external_profile_defaults():
    """Test ExternalProfile optional fields default to None."""
    profile = ExternalProfile(provider="oidc", issuer="https://idp", subject_id="sub-1")
    assert profile.email is None
    assert profile.display_name is None
    assert profile.photo_url is None
    assert profile.raw_claims is None


def test_user_creation():
    """Test User dataclass."""
    user = User(user_id="user-1", email="a@x.com")
    assert user.user_id == "user-1"
    assert user.email == "a@x.com"
    assert user.display_name is None  # Default
    assert user.photo_url is None  # Default
    assert user.created_at is None  # Default


def test_user_missing_profile_fields():
    """Test missing_profile_fields lists the null fields."""
    user = User(user_id="user-1", email="a@x.com")
    assert user.missing_profile_fields == [DISPLAY_NAME_FIELD, PHOTO_URL_FIELD]

    user.display_name = "Alice"
    assert user.missing_profile_fields == [PHOTO_URL_FIELD]

    user.photo_url = "https://cdn.example.com/a.png"
    assert user.missing_profile_fields == []


def test_user_empty_string_counts_as_missing():
    """Test an empty display name is treated as missing."""
    user = User(user_id="user-1", email="a@x.com", display_name="", photo_url="p")
    assert user.missing_profile_fields == [DISPLAY_NAME_FIELD]


def test_provider_account_creation():
    """Test ProviderAccount dataclass."""
    account = ProviderAccount(
        user_id="user-1",
        provider="oidc",
        provider_account_id="sub-1",
        issuer="https://idp",
    )
    assert account.provider_account_id == "sub-1"
    assert account.access_token is None  # Default
    assert account.refresh_token is None  # Default
