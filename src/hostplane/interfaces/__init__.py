"""Interface definitions for external collaborators."""

from hostplane.interfaces.cluster_store import ClusterStore
from hostplane.interfaces.seed_store import SeedStore
from hostplane.interfaces.service_account_store import ServiceAccountStore
from hostplane.interfaces.snapshot import ObjectView

__all__ = [
    "ClusterStore",
    "ObjectView",
    "SeedStore",
    "ServiceAccountStore",
]
