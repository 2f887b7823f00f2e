"""Factory for AWS DynamoDB components."""

from typing import Optional

from waypoint.core.account_store import ProviderAccountStore
from waypoint.core.factory import WaypointFactory
from waypoint.core.user_store import UserStore
from waypoint.resolver import DEFAULT_PROVIDER_LABEL


class DynamoDBFactory(WaypointFactory):
    """Factory for DynamoDB-backed stores.

    Both stores share one table (single-table design, see DynamoDBUserStore
    for the key layout).

    Args:
        table_name: Name of the DynamoDB table
        region: AWS region where the table is located
        endpoint_url: Optional custom endpoint URL for LocalStack.
            Example: "http://localhost:4566"
        provider_label: Provider label recorded on linked accounts

    Note:
        AWS credentials must be configured via environment variables, AWS
        config files, or IAM roles. The table must already exist with a
        string PK hash key and a string SK range key.
    """

    def __init__(
        self,
        table_name: str,
        region: str,
        endpoint_url: Optional[str] = None,
        provider_label: str = DEFAULT_PROVIDER_LABEL,
    ):
        self.table_name = table_name
        self.region = region
        self.endpoint_url = endpoint_url
        self.provider_label = provider_label
        self._user_store: Optional[UserStore] = None
        self._account_store: Optional[ProviderAccountStore] = None

    def create_user_store(self) -> UserStore:
        if self._user_store is None:
            from waypoint.stores.dynamodb import DynamoDBUserStore

            self._user_store = DynamoDBUserStore(
                table_name=self.table_name,
                region=self.region,
                endpoint_url=self.endpoint_url,
            )
        return self._user_store

    def create_account_store(self) -> ProviderAccountStore:
        if self._account_store is None:
            from waypoint.stores.dynamodb import DynamoDBProviderAccountStore

            self._account_store = DynamoDBProviderAccountStore(
                table_name=self.table_name,
                region=self.region,
                endpoint_url=self.endpoint_url,
            )
        return self._account_store
