"""Factory implementations for creating store-specific components."""

from waypoint.factories.dynamodb import DynamoDBFactory
from waypoint.factories.mock import MockFactory

__all__ = ["DynamoDBFactory", "MockFactory"]
