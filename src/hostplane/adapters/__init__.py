"""Adapters implementing the interfaces."""

from hostplane.adapters.memory import (
    InMemoryClusterStore,
    InMemoryObjectView,
    InMemorySeedStore,
    InMemoryServiceAccountStore,
)

__all__ = [
    "InMemoryClusterStore",
    "InMemoryObjectView",
    "InMemorySeedStore",
    "InMemoryServiceAccountStore",
]
