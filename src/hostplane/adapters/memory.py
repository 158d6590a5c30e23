"""In-memory adapters for the store and snapshot interfaces.

Used by the CLI (objects loaded from YAML files) and by tests.
"""

import copy
from collections.abc import Iterable
from typing import Any

from hostplane.core.models import Cluster, Seed, ServiceAccount, ServiceAccountStatus
from hostplane.interfaces.cluster_store import ClusterStore
from hostplane.interfaces.seed_store import SeedStore
from hostplane.interfaces.service_account_store import ServiceAccountStore
from hostplane.interfaces.snapshot import ObjectView


class InMemoryObjectView(ObjectView):
    """Object view over a fixed list of Kubernetes-shaped dicts."""

    def __init__(self, objects: Iterable[dict[str, Any]] = ()):
        self._objects: dict[tuple[str, str], dict[str, Any]] = {}
        for obj in objects:
            metadata = obj.get("metadata", {})
            key = (metadata.get("namespace", ""), metadata["name"])
            self._objects[key] = copy.deepcopy(obj)

    def get(self, namespace: str, name: str) -> dict[str, Any] | None:
        obj = self._objects.get((namespace, name))
        return copy.deepcopy(obj) if obj is not None else None

    def __len__(self) -> int:
        return len(self._objects)


class InMemoryClusterStore(ClusterStore):
    """Cluster store backed by a list."""

    def __init__(self, clusters: Iterable[Cluster] = ()):
        self._clusters = list(clusters)

    async def list_clusters(self) -> list[Cluster]:
        return list(self._clusters)


class InMemorySeedStore(SeedStore):
    """Seed store backed by a dict keyed by seed name."""

    def __init__(self, seeds: Iterable[Seed] = ()):
        self._seeds = {seed.name: seed for seed in seeds}

    async def list_seeds(self) -> list[Seed]:
        return [self._seeds[name] for name in sorted(self._seeds)]

    async def get_seed(self, name: str) -> Seed | None:
        return self._seeds.get(name)

    async def save_seed(self, seed: Seed) -> Seed:
        self._seeds[seed.name] = seed
        return seed


class InMemoryServiceAccountStore(ServiceAccountStore):
    """Service account store with project bindings.

    Args:
        accounts: Existing service accounts
        bindings: ``(project_id, email, group)`` membership triples
        email_domain: Domain of generated service account emails
    """

    def __init__(
        self,
        accounts: Iterable[ServiceAccount] = (),
        bindings: Iterable[tuple[str, str, str]] = (),
        email_domain: str = "sa.hostplane.io",
    ):
        self._accounts = list(accounts)
        self._bindings = {(project, email): group for project, email, group in bindings}
        self.email_domain = email_domain

    def account_email(self, account: ServiceAccount) -> str:
        """Get the identity email of a service account."""
        return f"{account.id}@{self.email_domain}"

    async def list_service_accounts(self, project_id: str) -> list[ServiceAccount]:
        result = []
        for account in self._accounts:
            if account.project_id != project_id:
                continue
            bound = (project_id, self.account_email(account)) in self._bindings
            status = ServiceAccountStatus.ACTIVE if bound else ServiceAccountStatus.INACTIVE
            result.append(account.model_copy(update={"status": status}))
        return result

    async def create_service_account(self, account: ServiceAccount) -> ServiceAccount:
        self._accounts.append(account)
        return account

    async def get_member_group(self, project_id: str, email: str) -> str | None:
        return self._bindings.get((project_id, email))
