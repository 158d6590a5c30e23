"""Unit tests for the in-memory adapters."""

import pytest

from hostplane.adapters.memory import (
    InMemoryClusterStore,
    InMemoryObjectView,
    InMemorySeedStore,
    InMemoryServiceAccountStore,
)
from hostplane.core.models import Cluster, Seed, ServiceAccount, ServiceAccountStatus


class TestInMemoryObjectView:
    def test_get_by_namespace_and_name(self) -> None:
        view = InMemoryObjectView(
            [
                {"metadata": {"name": "ca-cert", "namespace": "ns-a", "resourceVersion": "1"}},
                {"metadata": {"name": "ca-cert", "namespace": "ns-b", "resourceVersion": "2"}},
            ]
        )

        assert view.get("ns-b", "ca-cert")["metadata"]["resourceVersion"] == "2"
        assert view.get("ns-c", "ca-cert") is None
        assert len(view) == 2

    def test_returns_copies(self) -> None:
        view = InMemoryObjectView([{"metadata": {"name": "x", "namespace": "ns"}}])

        view.get("ns", "x")["metadata"]["name"] = "changed"

        assert view.get("ns", "x")["metadata"]["name"] == "x"

    def test_input_is_copied(self) -> None:
        obj = {"metadata": {"name": "x", "namespace": "ns"}, "data": {"a": "1"}}
        view = InMemoryObjectView([obj])

        obj["data"]["a"] = "2"

        assert view.get("ns", "x")["data"] == {"a": "1"}


class TestInMemoryStores:
    @pytest.mark.asyncio
    async def test_cluster_store(self) -> None:
        store = InMemoryClusterStore([Cluster(name="a"), Cluster(name="b")])

        assert [c.name for c in await store.list_clusters()] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_seed_store(self) -> None:
        store = InMemorySeedStore([Seed(name="zeta"), Seed(name="alpha")])

        assert [s.name for s in await store.list_seeds()] == ["alpha", "zeta"]
        assert await store.get_seed("missing") is None

        saved = await store.save_seed(Seed(name="alpha", country="DE"))

        assert saved.country == "DE"
        assert (await store.get_seed("alpha")).country == "DE"

    @pytest.mark.asyncio
    async def test_service_account_store(self) -> None:
        store = InMemoryServiceAccountStore(
            accounts=[ServiceAccount(id="sa-1", name="one", project_id="p", group="editors-p")],
            bindings=[("p", "sa-1@example.org", "editors"), ("p", "jane@acme.com", "owners")],
            email_domain="example.org",
        )

        accounts = await store.list_service_accounts("p")

        assert accounts[0].status == ServiceAccountStatus.ACTIVE
        assert await store.list_service_accounts("q") == []
        assert await store.get_member_group("p", "jane@acme.com") == "owners"
        assert await store.get_member_group("p", "nobody@acme.com") is None
