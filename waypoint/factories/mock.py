"""Factory for in-memory components."""

from typing import Optional

from waypoint.core.account_store import ProviderAccountStore
from waypoint.core.factory import WaypointFactory
from waypoint.core.user_store import UserStore
from waypoint.resolver import DEFAULT_PROVIDER_LABEL


class MockFactory(WaypointFactory):
    """Factory for in-memory stores.

    Creates MockUserStore and MockProviderAccountStore instances for tests
    and local development. No AWS credentials or network access needed;
    all data is lost when the process exits.

    Args:
        provider_label: Provider label recorded on linked accounts
        latency: Seconds each store call yields to the event loop

    Examples:
        >>> factory = MockFactory()
        >>> login = factory.create_login()
        >>> user = await login.login(issuer, profile)
    """

    def __init__(
        self,
        provider_label: str = DEFAULT_PROVIDER_LABEL,
        latency: float = 0.0,
    ) -> None:
        self.provider_label = provider_label
        self.latency = latency
        self._user_store: Optional[UserStore] = None
        self._account_store: Optional[ProviderAccountStore] = None

    def create_user_store(self) -> UserStore:
        if self._user_store is None:
            from waypoint.stores.mock import MockUserStore

            self._user_store = MockUserStore(latency=self.latency)
        return self._user_store

    def create_account_store(self) -> ProviderAccountStore:
        if self._account_store is None:
            from waypoint.stores.mock import MockProviderAccountStore

            self._account_store = MockProviderAccountStore(latency=self.latency)
        return self._account_store
