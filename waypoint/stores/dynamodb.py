"""DynamoDB-backed user and provider account stores."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import boto3
import structlog
from botocore.exceptions import ClientError

from waypoint.core.account_store import ProviderAccountStore
from waypoint.core.user_store import UserStore
from waypoint.exceptions import (
    ProfileValidationError,
    ProviderAccountExistsError,
    StoreError,
    UserExistsError,
)
from waypoint.models import PROFILE_FIELDS, ExternalProfile, ProviderAccount, User

log = structlog.get_logger()

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"
TRANSACTION_CANCELED = "TransactionCanceledException"


def _create_client(region: str, endpoint_url: Optional[str]):
    client_kwargs: dict[str, Any] = {"region_name": region}
    if endpoint_url:
        client_kwargs["endpoint_url"] = endpoint_url
    return boto3.client("dynamodb", **client_kwargs)


def _user_key(email: str) -> Dict[str, Dict[str, str]]:
    return {"PK": {"S": f"USER#{email}"}, "SK": {"S": "PROFILE"}}


def _user_id_key(user_id: str) -> Dict[str, Dict[str, str]]:
    return {"PK": {"S": f"USERID#{user_id}"}, "SK": {"S": "POINTER"}}


def _account_key(
    user_id: str, provider: str, provider_account_id: str
) -> Dict[str, Dict[str, str]]:
    return {
        "PK": {"S": f"ACCOUNT#{user_id}"},
        "SK": {"S": f"PROVIDER#{provider}#{provider_account_id}"},
    }


def _parse_datetime(item: dict[str, Any], name: str) -> Optional[datetime]:
    value = item.get(name, {}).get("S")
    return datetime.fromisoformat(value) if value else None


def _item_to_user(item: dict[str, Any]) -> User:
    """Convert a DynamoDB user item to a User model."""
    return User(
        user_id=item["user_id"]["S"],
        email=item["email"]["S"],
        display_name=item.get("display_name", {}).get("S"),
        photo_url=item.get("photo_url", {}).get("S"),
        created_at=_parse_datetime(item, "created_at"),
        updated_at=_parse_datetime(item, "updated_at"),
    )


def _item_to_account(item: dict[str, Any]) -> ProviderAccount:
    """Convert a DynamoDB provider account item to a ProviderAccount model."""
    return ProviderAccount(
        user_id=item["user_id"]["S"],
        provider=item["provider"]["S"],
        provider_account_id=item["provider_account_id"]["S"],
        issuer=item.get("issuer", {}).get("S", ""),
        access_token=item.get("access_token", {}).get("S"),
        refresh_token=item.get("refresh_token", {}).get("S"),
        created_at=_parse_datetime(item, "created_at"),
    )


class DynamoDBUserStore(UserStore):
    """
    Stores users in a single DynamoDB table, keyed by normalized email.

    Expects table schema:
    - PK: USER#{email}
    - SK: PROFILE
    - Attributes: user_id, email, display_name, photo_url, created_at,
      updated_at, entity_type

    Each user also has an ID pointer item:
    - PK: USERID#{user_id}
    - SK: POINTER
    - Attributes: email, entity_type

    Creates write both items in one transaction, conditional on
    attribute_not_exists(PK), so the table itself guarantees one user per
    email. Backfills write with if_not_exists, so a value that is already
    set is never overwritten.

    Example:
        store = DynamoDBUserStore(
            table_name="waypoint-prod",
            region="us-east-1"
        )
        user = await store.find_by_email("a@example.com")
    """

    def __init__(
        self,
        table_name: str,
        region: str,
        endpoint_url: Optional[str] = None,  # For LocalStack testing
    ):
        self._table_name = table_name
        self._region = region
        self._dynamodb = _create_client(region, endpoint_url)
        log.info("Initialized DynamoDB user store", table_name=table_name, region=region)

    async def find_by_email(self, email: str) -> Optional[User]:
        try:
            response = self._dynamodb.get_item(
                TableName=self._table_name,
                Key=_user_key(email),
                ConsistentRead=True,
            )
        except ClientError as e:
            log.error("Failed to look up user by email", error=str(e))
            raise StoreError(f"Failed to look up user by email: {e}", "find_by_email") from e

        if "Item" not in response:
            return None
        return _item_to_user(response["Item"])

    async def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by ID via its pointer item."""
        try:
            response = self._dynamodb.get_item(
                TableName=self._table_name,
                Key=_user_id_key(user_id),
                ConsistentRead=True,
            )
        except ClientError as e:
            log.error("Failed to get user", user_id=user_id, error=str(e))
            raise StoreError(f"Failed to get user: {e}", "get_user") from e

        if "Item" not in response:
            return None
        return await self.find_by_email(response["Item"]["email"]["S"])

    async def create(self, profile: ExternalProfile) -> User:
        now = datetime.now(timezone.utc).isoformat()
        user_id = str(uuid.uuid4())

        item: dict[str, Any] = {
            **_user_key(profile.email),
            "entity_type": {"S": "USER"},
            "user_id": {"S": user_id},
            "email": {"S": profile.email},
            "created_at": {"S": now},
            "updated_at": {"S": now},
        }
        if profile.display_name:
            item["display_name"] = {"S": profile.display_name}
        if profile.photo_url:
            item["photo_url"] = {"S": profile.photo_url}

        pointer = {
            **_user_id_key(user_id),
            "entity_type": {"S": "USER_POINTER"},
            "email": {"S": profile.email},
        }

        try:
            self._dynamodb.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self._table_name,
                            "Item": item,
                            "ConditionExpression": "attribute_not_exists(PK)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self._table_name,
                            "Item": pointer,
                            "ConditionExpression": "attribute_not_exists(PK)",
                        }
                    },
                ]
            )
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            reasons = [r.get("Code") for r in e.response.get("CancellationReasons", [])]
            if error_code == TRANSACTION_CANCELED and "ConditionalCheckFailed" in reasons:
                log.warning("User already exists", email=profile.email)
                raise UserExistsError(profile.email) from e
            log.error("Failed to create user", email=profile.email, error=str(e))
            raise StoreError(f"Failed to create user: {e}", "create") from e

        log.debug("Created user item", user_id=user_id, table_name=self._table_name)
        return _item_to_user(item)

    async def update(self, user: User, fields: dict[str, Any]) -> User:
        set_clauses = ["updated_at = :updated_at"]
        names: dict[str, str] = {}
        values: dict[str, Any] = {
            ":updated_at": {"S": datetime.now(timezone.utc).isoformat()}
        }

        for name, value in fields.items():
            if name not in PROFILE_FIELDS:
                raise ProfileValidationError(f"Field '{name}' cannot be updated", field=name)
            if not isinstance(value, str) or not value:
                raise ProfileValidationError(
                    f"Field '{name}' must be a non-empty string", field=name
                )
            names[f"#{name}"] = name
            values[f":{name}"] = {"S": value}
            set_clauses.append(f"#{name} = if_not_exists(#{name}, :{name})")

        update_kwargs: dict[str, Any] = {
            "TableName": self._table_name,
            "Key": _user_key(user.email),
            "UpdateExpression": "SET " + ", ".join(set_clauses),
            "ConditionExpression": "attribute_exists(PK)",
            "ExpressionAttributeValues": values,
            "ReturnValues": "ALL_NEW",
        }
        if names:
            update_kwargs["ExpressionAttributeNames"] = names

        try:
            response = self._dynamodb.update_item(**update_kwargs)
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code == CONDITIONAL_CHECK_FAILED:
                raise ProfileValidationError(f"User '{user.user_id}' does not exist") from e
            if error_code == "ValidationException":
                raise ProfileValidationError(f"Update rejected: {e}") from e
            log.error("Failed to update user", user_id=user.user_id, error=str(e))
            raise StoreError(f"Failed to update user: {e}", "update") from e

        return _item_to_user(response["Attributes"])


class DynamoDBProviderAccountStore(ProviderAccountStore):
    """
    Stores provider account links in the same single DynamoDB table.

    Expects table schema:
    - PK: ACCOUNT#{user_id}
    - SK: PROVIDER#{provider}#{provider_account_id}
    - Attributes: user_id, provider, provider_account_id, issuer,
      access_token, refresh_token, created_at, entity_type
    """

    def __init__(
        self,
        table_name: str,
        region: str,
        endpoint_url: Optional[str] = None,
    ):
        self._table_name = table_name
        self._region = region
        self._dynamodb = _create_client(region, endpoint_url)
        log.info(
            "Initialized DynamoDB provider account store",
            table_name=table_name,
            region=region,
        )

    async def exists(
        self,
        user_id: str,
        provider: str,
        provider_account_id: str,
    ) -> bool:
        try:
            response = self._dynamodb.get_item(
                TableName=self._table_name,
                Key=_account_key(user_id, provider, provider_account_id),
                ConsistentRead=True,
            )
        except ClientError as e:
            log.error("Failed to check provider account", user_id=user_id, error=str(e))
            raise StoreError(f"Failed to check provider account: {e}", "exists") from e

        return "Item" in response

    async def create(
        self,
        user_id: str,
        profile: ExternalProfile,
        access_token: Optional[str],
        refresh_token: Optional[str],
    ) -> ProviderAccount:
        item: dict[str, Any] = {
            **_account_key(user_id, profile.provider, profile.subject_id),
            "entity_type": {"S": "PROVIDER_ACCOUNT"},
            "user_id": {"S": user_id},
            "provider": {"S": profile.provider},
            "provider_account_id": {"S": profile.subject_id},
            "issuer": {"S": profile.issuer},
            "created_at": {"S": datetime.now(timezone.utc).isoformat()},
        }
        # Tokens are opaque; stored as handed over
        if access_token:
            item["access_token"] = {"S": access_token}
        if refresh_token:
            item["refresh_token"] = {"S": refresh_token}

        try:
            self._dynamodb.put_item(
                TableName=self._table_name,
                Item=item,
                ConditionExpression="attribute_not_exists(PK)",
            )
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code == CONDITIONAL_CHECK_FAILED:
                raise ProviderAccountExistsError(
                    user_id, profile.provider, profile.subject_id
                ) from e
            log.error(
                "Failed to create provider account",
                user_id=user_id,
                provider=profile.provider,
                error=str(e),
            )
            raise StoreError(f"Failed to create provider account: {e}", "create") from e

        return _item_to_account(item)

    async def list_accounts(self, user_id: str) -> list[ProviderAccount]:
        accounts = []
        try:
            paginator = self._dynamodb.get_paginator("query")
            page_iterator = paginator.paginate(
                TableName=self._table_name,
                KeyConditionExpression="PK = :pk AND begins_with(SK, :prefix)",
                ExpressionAttributeValues={
                    ":pk": {"S": f"ACCOUNT#{user_id}"},
                    ":prefix": {"S": "PROVIDER#"},
                },
                ConsistentRead=True,
            )
            for page in page_iterator:
                accounts.extend(_item_to_account(item) for item in page.get("Items", []))
        except ClientError as e:
            log.error("Failed to list provider accounts", user_id=user_id, error=str(e))
            raise StoreError(f"Failed to list provider accounts: {e}", "list_accounts") from e

        return accounts
