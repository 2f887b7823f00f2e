"""Store implementations for users and provider accounts."""

from waypoint.stores.dynamodb import DynamoDBProviderAccountStore, DynamoDBUserStore
from waypoint.stores.mock import MockProviderAccountStore, MockUserStore

__all__ = [
    "DynamoDBProviderAccountStore",
    "DynamoDBUserStore",
    "MockProviderAccountStore",
    "MockUserStore",
]
