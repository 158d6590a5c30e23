"""Kubernetes adapters implementing the store and snapshot interfaces."""

import asyncio
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from hostplane.adapters.memory import InMemoryObjectView
from hostplane.clients.kubernetes_client import KubernetesClient
from hostplane.core.exceptions import KubernetesError
from hostplane.core.models import Cluster, Seed
from hostplane.interfaces.cluster_store import ClusterStore
from hostplane.interfaces.exceptions import ClusterStoreError, SeedStoreError, SnapshotError
from hostplane.interfaces.seed_store import SeedStore
from hostplane.interfaces.snapshot import ObjectView
from hostplane.utils.logging import get_logger

logger = get_logger(__name__)


def cluster_from_object(obj: dict[str, Any]) -> Cluster:
    """Convert a Cluster custom object into a Cluster model."""
    metadata = obj.get("metadata", {})
    return Cluster.model_validate(
        {
            "name": metadata.get("name", ""),
            "uid": metadata.get("uid", ""),
            "spec": obj.get("spec", {}),
            "address": obj.get("address", {}),
            "status": obj.get("status", {}),
        }
    )


def seed_from_object(obj: dict[str, Any]) -> Seed:
    """Convert a Seed custom object into a Seed model."""
    metadata = obj.get("metadata", {})
    spec = obj.get("spec", {})
    return Seed.model_validate(
        {
            "name": metadata.get("name", ""),
            "namespace": metadata.get("namespace", ""),
            "resourceVersion": metadata.get("resourceVersion", ""),
            "country": spec.get("country", ""),
            "location": spec.get("location", ""),
            "datacenters": spec.get("datacenters", {}),
        }
    )


def seed_to_object(seed: Seed) -> dict[str, Any]:
    """Convert a Seed model into a Seed custom object."""
    wire = seed.to_wire()
    metadata = {"name": seed.name, "namespace": seed.namespace}
    if seed.resource_version:
        metadata["resourceVersion"] = seed.resource_version
    return {
        "apiVersion": "hostplane.io/v1",
        "kind": "Seed",
        "metadata": metadata,
        "spec": {
            "country": wire["country"],
            "location": wire["location"],
            "datacenters": wire["datacenters"],
        },
    }


class KubernetesClusterStore(ClusterStore):
    """Cluster store reading Cluster custom objects."""

    def __init__(self, client: KubernetesClient):
        self.client = client

    async def list_clusters(self) -> list[Cluster]:
        """List all clusters.

        Raises:
            ClusterStoreError: If clusters cannot be listed or parsed
        """
        try:
            objects = await asyncio.to_thread(self.client.list_clusters)
            return [cluster_from_object(obj) for obj in objects]
        except (KubernetesError, ValidationError) as e:
            logger.error("list_clusters_failed", error=str(e))
            raise ClusterStoreError(f"Failed to list clusters: {e}") from e


class KubernetesSeedStore(SeedStore):
    """Seed store reading and writing Seed custom objects in one namespace."""

    def __init__(self, client: KubernetesClient, namespace: str):
        self.client = client
        self.namespace = namespace

    async def list_seeds(self) -> list[Seed]:
        try:
            objects = await asyncio.to_thread(self.client.list_seeds, self.namespace)
            seeds = [seed_from_object(obj) for obj in objects]
        except (KubernetesError, ValidationError) as e:
            logger.error("list_seeds_failed", namespace=self.namespace, error=str(e))
            raise SeedStoreError(f"Failed to list seeds: {e}") from e
        return sorted(seeds, key=lambda s: s.name)

    async def get_seed(self, name: str) -> Seed | None:
        seeds = await self.list_seeds()
        return next((seed for seed in seeds if seed.name == name), None)

    async def save_seed(self, seed: Seed) -> Seed:
        try:
            stored = await asyncio.to_thread(
                self.client.replace_seed, self.namespace, seed.name, seed_to_object(seed)
            )
            return seed_from_object(stored)
        except (KubernetesError, ValidationError) as e:
            logger.error("save_seed_failed", seed=seed.name, error=str(e))
            raise SeedStoreError(f"Failed to save seed {seed.name}: {e}") from e


@dataclass
class NamespaceSnapshot:
    """Read-only views of the objects in one cluster namespace."""

    secrets: ObjectView
    config_maps: ObjectView
    services: ObjectView


class KubernetesSnapshotLoader:
    """Builds namespace snapshots from the live API.

    Loading happens once per compile; the returned views never call the API.
    """

    def __init__(self, client: KubernetesClient):
        self.client = client

    def load(self, namespace: str) -> NamespaceSnapshot:
        """Load secrets, config maps and services of a namespace.

        Args:
            namespace: Cluster namespace

        Returns:
            NamespaceSnapshot with one view per kind

        Raises:
            SnapshotError: If any kind cannot be listed
        """
        try:
            snapshot = NamespaceSnapshot(
                secrets=InMemoryObjectView(self.client.list_secrets(namespace)),
                config_maps=InMemoryObjectView(self.client.list_config_maps(namespace)),
                services=InMemoryObjectView(self.client.list_services(namespace)),
            )
        except KubernetesError as e:
            logger.error("snapshot_load_failed", namespace=namespace, error=str(e))
            raise SnapshotError(f"Failed to load snapshot for {namespace}: {e}") from e

        logger.info("snapshot_loaded", namespace=namespace)
        return snapshot
