"""Cluster store interface used by admission checks."""

from abc import ABC, abstractmethod

from hostplane.core.models import Cluster


class ClusterStore(ABC):
    """Abstract read access to the clusters of the fleet."""

    @abstractmethod
    async def list_clusters(self) -> list[Cluster]:
        """List all clusters.

        Returns:
            List of clusters

        Raises:
            ClusterStoreError: If listing fails
        """
