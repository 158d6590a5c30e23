"""Seed store interface for datacenter lookup and creation."""

from abc import ABC, abstractmethod

from hostplane.core.models import Seed


class SeedStore(ABC):
    """Abstract access to seeds and the datacenters they own."""

    @abstractmethod
    async def list_seeds(self) -> list[Seed]:
        """List all seeds.

        Returns:
            List of seeds

        Raises:
            SeedStoreError: If listing fails
        """

    @abstractmethod
    async def get_seed(self, name: str) -> Seed | None:
        """Get a seed by name.

        Args:
            name: Seed name

        Returns:
            Seed if found, None otherwise

        Raises:
            SeedStoreError: If retrieval fails
        """

    @abstractmethod
    async def save_seed(self, seed: Seed) -> Seed:
        """Create or replace a seed.

        Args:
            seed: Seed to store

        Returns:
            The stored seed

        Raises:
            SeedStoreError: If the seed cannot be stored
        """
