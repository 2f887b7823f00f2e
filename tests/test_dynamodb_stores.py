"""Integration tests for the DynamoDB stores using moto."""

import pytest

from waypoint.exceptions import (
    ProfileUpdateError,
    ProfileValidationError,
    ProviderAccountExistsError,
    StoreError,
    UserExistsError,
)
from waypoint.models import User
from waypoint.stores.dynamodb import DynamoDBProviderAccountStore, DynamoDBUserStore

TABLE_NAME = "waypoint-test"
ISSUER = "https://idp.example.com"


@pytest.fixture
def user_store(mock_dynamodb, region):
    return DynamoDBUserStore(table_name=TABLE_NAME, region=region)


@pytest.fixture
def account_store(mock_dynamodb, region):
    return DynamoDBProviderAccountStore(table_name=TABLE_NAME, region=region)


# ==================== User Store ====================


@pytest.mark.asyncio
async def test_create_and_find_user(user_store, make_profile):
    """Test creating a user and reading it back by email."""
    created = await user_store.create(make_profile())

    found = await user_store.find_by_email("a@x.com")

    assert found is not None
    assert found.user_id == created.user_id
    assert found.display_name == "Alice"
    assert found.photo_url == "https://cdn.example.com/alice.png"
    assert found.created_at is not None


@pytest.mark.asyncio
async def test_find_missing_user_returns_none(user_store):
    """Test an unknown email returns None."""
    assert await user_store.find_by_email("nobody@x.com") is None


@pytest.mark.asyncio
async def test_create_duplicate_email_raises(user_store, make_profile):
    """Test the conditional put rejects a second user for one email."""
    await user_store.create(make_profile())

    with pytest.raises(UserExistsError) as exc_info:
        await user_store.create(make_profile(subject_id="other"))

    assert exc_info.value.email == "a@x.com"


@pytest.mark.asyncio
async def test_create_user_without_optional_fields(user_store, make_profile):
    """Test null profile fields are stored as absent attributes."""
    await user_store.create(make_profile(display_name=None, photo_url=None))

    found = await user_store.find_by_email("a@x.com")

    assert found.display_name is None
    assert found.photo_url is None


@pytest.mark.asyncio
async def test_get_user_by_id(user_store, make_profile):
    """Test looking up a user by ID."""
    created = await user_store.create(make_profile())

    found = await user_store.get_user(created.user_id)

    assert found is not None
    assert found.email == "a@x.com"
    assert await user_store.get_user("missing") is None


@pytest.mark.asyncio
async def test_create_writes_user_id_pointer(user_store, mock_dynamodb, make_profile):
    """Test get_user resolves through a pointer item instead of a scan."""
    created = await user_store.create(make_profile(display_name=None))

    pointer = mock_dynamodb.get_item(
        TableName=TABLE_NAME,
        Key={"PK": {"S": f"USERID#{created.user_id}"}, "SK": {"S": "POINTER"}},
    )
    assert pointer["Item"]["email"]["S"] == "a@x.com"

    await user_store.update(created, {"display_name": "Alice"})
    found = await user_store.get_user(created.user_id)
    assert found.display_name == "Alice"


@pytest.mark.asyncio
async def test_update_fills_missing_fields(user_store, make_profile):
    """Test update writes fields that are absent."""
    user = await user_store.create(make_profile(display_name=None, photo_url=None))

    updated = await user_store.update(
        user, {"display_name": "Alice", "photo_url": "https://cdn.example.com/a.png"}
    )

    assert updated.display_name == "Alice"
    assert updated.photo_url == "https://cdn.example.com/a.png"


@pytest.mark.asyncio
async def test_update_never_overwrites_existing_values(user_store, make_profile):
    """Test a backfill racing a completed one keeps the first value."""
    user = await user_store.create(make_profile(display_name=None))
    await user_store.update(user, {"display_name": "First"})

    updated = await user_store.update(user, {"display_name": "Second"})

    assert updated.display_name == "First"


@pytest.mark.asyncio
async def test_update_rejects_unknown_field(user_store, make_profile):
    """Test only profile fields may be updated."""
    user = await user_store.create(make_profile())

    with pytest.raises(ProfileValidationError) as exc_info:
        await user_store.update(user, {"email": "b@x.com"})

    assert exc_info.value.field == "email"


@pytest.mark.asyncio
async def test_update_missing_user_raises(user_store):
    """Test updating a user that is not stored is rejected."""
    ghost = User(user_id="ghost", email="ghost@x.com")

    with pytest.raises(ProfileValidationError):
        await user_store.update(ghost, {"display_name": "Ghost"})


@pytest.mark.asyncio
async def test_missing_table_raises_store_error(mock_dynamodb, region):
    """Test backend failures surface as StoreError."""
    store = DynamoDBUserStore(table_name="does-not-exist", region=region)

    with pytest.raises(StoreError) as exc_info:
        await store.find_by_email("a@x.com")

    assert exc_info.value.operation == "find_by_email"


# ==================== Provider Account Store ====================


@pytest.mark.asyncio
async def test_create_and_list_accounts(account_store, make_profile):
    """Test creating links and listing them per user."""
    await account_store.create("user-1", make_profile(provider="oidc"), "access", "refresh")
    await account_store.create("user-1", make_profile(provider="github", subject_id="gh"), None, None)
    await account_store.create("user-2", make_profile(provider="oidc"), None, None)

    accounts = await account_store.list_accounts("user-1")

    assert len(accounts) == 2
    oidc = next(a for a in accounts if a.provider == "oidc")
    assert oidc.provider_account_id == "sub-123"
    assert oidc.issuer == ISSUER
    assert oidc.access_token == "access"
    assert oidc.refresh_token == "refresh"
    github = next(a for a in accounts if a.provider == "github")
    assert github.access_token is None


@pytest.mark.asyncio
async def test_account_exists(account_store, make_profile):
    """Test exists reflects created links."""
    assert not await account_store.exists("user-1", "oidc", "sub-123")

    await account_store.create("user-1", make_profile(provider="oidc"), None, None)

    assert await account_store.exists("user-1", "oidc", "sub-123")
    assert not await account_store.exists("user-1", "oidc", "other")


@pytest.mark.asyncio
async def test_create_duplicate_account_raises(account_store, make_profile):
    """Test the conditional put rejects a duplicate link."""
    profile = make_profile(provider="oidc")
    await account_store.create("user-1", profile, None, None)

    with pytest.raises(ProviderAccountExistsError):
        await account_store.create("user-1", profile, "new-access", None)


# ==================== Full Flow ====================


@pytest.mark.asyncio
async def test_dynamodb_login_flow(dynamodb_factory, make_profile):
    """Test the login flow end to end against DynamoDB."""
    login = dynamodb_factory.create_login()

    first = await login.login(ISSUER, make_profile(display_name=None, photo_url=None))
    second = await login.login(ISSUER, make_profile())
    third = await login.login(ISSUER, make_profile(display_name="Changed"))

    assert first.user_id == second.user_id == third.user_id
    assert second.display_name == "Alice"
    assert third.display_name == "Alice"

    accounts = await dynamodb_factory.create_account_store().list_accounts(first.user_id)
    assert len(accounts) == 1
    assert accounts[0].provider == "oidc"


@pytest.mark.asyncio
async def test_dynamodb_backfill_validation_failure(dynamodb_factory, make_profile):
    """Test a rejected backfill fails the login with ProfileUpdateError."""
    user_store = dynamodb_factory.create_user_store()
    user = await user_store.create(make_profile(display_name=None, photo_url=None))
    resolver = dynamodb_factory.create_resolver()

    with pytest.raises(ProfileUpdateError) as exc_info:
        await resolver.resolve(make_profile(display_name=123))

    assert exc_info.value.user_id == user.user_id
