"""Abstract factory for creating federated login components."""

from abc import ABC, abstractmethod

from waypoint.core.account_store import ProviderAccountStore
from waypoint.core.user_store import UserStore
from waypoint.linker import AccountLinker
from waypoint.login import FederatedLogin
from waypoint.resolver import DEFAULT_PROVIDER_LABEL, IdentityResolver


class WaypointFactory(ABC):
    """Abstract factory for creating federated login components.

    This is the base class for all store-specific factories. Implementations
    provide the user and provider account stores; the base class wires them
    into an IdentityResolver, AccountLinker and FederatedLogin. Stores are
    cached, so every component created by one factory shares the same state.

    Usage:
        Do not instantiate this class directly. Use create_factory() instead:

        >>> from waypoint import create_factory
        >>> factory = create_factory("dynamodb", table_name="waypoint", region="us-east-1")
        >>> login = factory.create_login()

    See Also:
        - create_factory(): Main entry point for creating factories
        - DynamoDBFactory: AWS DynamoDB implementation
        - MockFactory: In-memory implementation for testing
    """

    provider_label: str = DEFAULT_PROVIDER_LABEL

    @abstractmethod
    def create_user_store(self) -> UserStore:
        """Create or return the cached user store."""

    @abstractmethod
    def create_account_store(self) -> ProviderAccountStore:
        """Create or return the cached provider account store."""

    def create_resolver(self) -> IdentityResolver:
        """Create an identity resolver backed by this factory's user store."""
        return IdentityResolver(
            self.create_user_store(), provider_label=self.provider_label
        )

    def create_linker(self) -> AccountLinker:
        """Create an account linker backed by this factory's account store."""
        return AccountLinker(self.create_account_store())

    def create_login(self) -> FederatedLogin:
        """Create the full login flow (resolver followed by linker).

        Examples:
            >>> factory = create_factory("mock")
            >>> login = factory.create_login()
            >>> user = await login.login(issuer, profile, id_token, access, refresh)
        """
        return FederatedLogin(self.create_resolver(), self.create_linker())


def create_factory(store_type: str, **kwargs) -> WaypointFactory:
    """Create a factory for the specified store type.

    This is the main entry point for configuring Waypoint.

    Args:
        store_type: The backing store to use.
            Valid values: "dynamodb", "mock"

        **kwargs: Store-specific configuration arguments.

            For store_type="dynamodb":
                table_name (str, required): DynamoDB table holding users and
                    provider accounts.
                region (str, required): AWS region of the table.
                endpoint_url (str, optional): Custom endpoint URL for LocalStack.
                provider_label (str, optional): Provider label recorded on
                    linked accounts. Defaults to "oidc".

            For store_type="mock":
                provider_label (str, optional): As above.
                latency (float, optional): Seconds each store call yields to
                    the event loop.

    Returns:
        WaypointFactory: A configured factory instance.

    Raises:
        ValueError: If store_type is unknown or required arguments are missing.

    Examples:
        With environment variables:
            >>> import os
            >>> factory = create_factory(
            ...     "dynamodb",
            ...     table_name=os.environ["WAYPOINT_TABLE_NAME"],
            ...     region=os.getenv("AWS_REGION", "us-east-1"),
            ... )

        Using the mock stores for testing:
            >>> factory = create_factory("mock")
    """
    if store_type == "dynamodb":
        from waypoint.factories.dynamodb import DynamoDBFactory

        missing = [name for name in ("table_name", "region") if name not in kwargs]
        if missing:
            raise ValueError(
                f"Missing required argument(s) {missing} for store_type='dynamodb'. "
                "Example: create_factory('dynamodb', table_name='waypoint', region='us-east-1')"
            )
        return DynamoDBFactory(**kwargs)
    elif store_type == "mock":
        from waypoint.factories.mock import MockFactory

        unknown = set(kwargs) - {"provider_label", "latency"}
        if unknown:
            raise ValueError(
                f"MockFactory does not accept arguments: {sorted(unknown)}. "
                f"Use: create_factory('mock')"
            )
        return MockFactory(**kwargs)
    else:
        raise ValueError(
            f"Unknown store type: '{store_type}'. "
            f"Valid types: 'dynamodb', 'mock'. "
            f"Example: create_factory('mock')"
        )
