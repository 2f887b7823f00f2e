"""Shared pytest fixtures for waypoint tests."""

import os

import boto3
import pytest
from moto import mock_aws

from waypoint import ExternalProfile, MockFactory, create_factory

TABLE_NAME = "waypoint-test"
ISSUER = "https://idp.example.com"


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for testing."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def region():
    """AWS region for tests."""
    return "us-east-1"


@pytest.fixture
def mock_dynamodb(aws_credentials, region):
    """Mock DynamoDB with the single waypoint table created."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name=region)
        client.create_table(
            TableName=TABLE_NAME,
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        yield client


@pytest.fixture
def dynamodb_factory(mock_dynamodb, region):
    """DynamoDB-backed factory pointed at the mocked table."""
    return create_factory("dynamodb", table_name=TABLE_NAME, region=region)


@pytest.fixture
def mock_factory():
    """In-memory factory."""
    return MockFactory()


@pytest.fixture
def make_profile():
    """Build an ExternalProfile with sensible defaults."""

    def _make(**overrides):
        values = {
            "provider": "google",
            "issuer": ISSUER,
            "subject_id": "sub-123",
            "email": "a@x.com",
            "display_name": "Alice",
            "photo_url": "https://cdn.example.com/alice.png",
        }
        values.update(overrides)
        return ExternalProfile(**values)

    return _make
