"""Core abstractions for Waypoint federated login reconciliation."""

from waypoint.core.account_store import ProviderAccountStore
from waypoint.core.user_store import UserStore
from waypoint.core.factory import WaypointFactory, create_factory

__all__ = [
    "ProviderAccountStore",
    "UserStore",
    "WaypointFactory",
    "create_factory",
]
