"""Unit tests for seed topology validation."""

import asyncio
from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest

from hostplane.adapters.memory import InMemoryClusterStore, InMemorySeedStore
from hostplane.core.exceptions import (
    ConfigurationError,
    DuplicateError,
    ImmutabilityError,
    ReferentialIntegrityError,
    ValidationFailedError,
)
from hostplane.core.models import Cluster, Datacenter, Seed
from hostplane.core.providers import DatacenterSpec
from hostplane.interfaces.cluster_store import ClusterStore
from hostplane.interfaces.exceptions import ClusterStoreError, SeedStoreError
from hostplane.validation import (
    DEFAULT_SEED_NAME,
    Operation,
    SeedValidator,
    ValidationContext,
    single_seed_validate_func,
)


class SlowClusterStore(ClusterStore):
    async def list_clusters(self) -> list[Cluster]:
        await asyncio.sleep(10)
        return []


class CancelledClusterStore(ClusterStore):
    async def list_clusters(self) -> list[Cluster]:
        raise asyncio.CancelledError()


def _seeds(*seeds: Seed) -> dict[str, Seed]:
    return {seed.name: seed for seed in seeds}


class TestCreateAndUpdate:
    """Tests for create and update requests."""

    @pytest.mark.asyncio
    async def test_empty_seed(self) -> None:
        await SeedValidator(InMemoryClusterStore()).validate(Seed(), Operation.CREATE)

    @pytest.mark.asyncio
    async def test_single_datacenter_with_provider(self, make_seed: Callable) -> None:
        await SeedValidator(InMemoryClusterStore()).validate(make_seed("new-seed", "dc1"), Operation.CREATE)

    @pytest.mark.asyncio
    async def test_no_changes(self, make_seed: Callable) -> None:
        existing = make_seed("existing-seed", "dc1")

        await SeedValidator(InMemoryClusterStore()).validate(
            make_seed("existing-seed", "dc1"), Operation.UPDATE, _seeds(existing)
        )

    @pytest.mark.asyncio
    async def test_clusters_of_other_seeds_do_not_affect_new_empty_seed(
        self, make_seed: Callable, cluster_in: Callable
    ) -> None:
        store = InMemoryClusterStore([cluster_in("c1", "do-fra1")])

        await SeedValidator(store).validate(
            make_seed("asia-south1-a"), Operation.CREATE, _seeds(make_seed("europe-west3-c", "do-fra1"))
        )

    @pytest.mark.asyncio
    async def test_adding_datacenter(self, make_seed: Callable) -> None:
        await SeedValidator(InMemoryClusterStore()).validate(
            make_seed("existing-seed", "dc1", "dc2"),
            Operation.UPDATE,
            _seeds(make_seed("existing-seed", "dc1")),
        )

    @pytest.mark.asyncio
    async def test_removing_unused_datacenter(self, make_seed: Callable, cluster_in: Callable) -> None:
        store = InMemoryClusterStore([cluster_in("c1", "dc2")])

        await SeedValidator(store).validate(
            make_seed("existing-seed", "dc2"),
            Operation.UPDATE,
            _seeds(make_seed("existing-seed", "dc1", "dc2")),
        )

    @pytest.mark.asyncio
    async def test_datacenter_without_provider(self) -> None:
        seed = Seed(name="myseed", datacenters={"a": Datacenter()})

        with pytest.raises(ConfigurationError) as exc_info:
            await SeedValidator(InMemoryClusterStore()).validate(seed, Operation.CREATE)

        assert str(exc_info.value) == 'datacenter "a": one DC provider should be specified, got: []'

    @pytest.mark.asyncio
    async def test_datacenter_with_multiple_providers(self) -> None:
        seed = Seed(
            name="myseed",
            datacenters={"a": Datacenter(spec=DatacenterSpec.model_validate({"aws": {}, "azure": {}}))},
        )

        with pytest.raises(ConfigurationError) as exc_info:
            await SeedValidator(InMemoryClusterStore()).validate(seed, Operation.CREATE)

        assert exc_info.value.fields == ["aws", "azure"]
        assert "got: [aws azure]" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_provider_cannot_change(self, make_seed: Callable) -> None:
        proposed = Seed(name="existing-seed", datacenters={"dc1": Datacenter(spec=DatacenterSpec.of("aws"))})

        with pytest.raises(ImmutabilityError) as exc_info:
            await SeedValidator(InMemoryClusterStore()).validate(
                proposed, Operation.UPDATE, _seeds(make_seed("existing-seed", "dc1"))
            )

        assert str(exc_info.value) == 'cannot change provider of datacenter "dc1" from [fake] to [aws]'

    @pytest.mark.asyncio
    async def test_datacenter_names_are_unique_across_seeds(self, make_seed: Callable) -> None:
        with pytest.raises(DuplicateError) as exc_info:
            await SeedValidator(InMemoryClusterStore()).validate(
                make_seed("new-seed", "dc1"), Operation.CREATE, _seeds(make_seed("existing-seed", "dc1"))
            )

        assert str(exc_info.value) == 'datacenter "dc1" already exists in seed "existing-seed"'

    @pytest.mark.asyncio
    async def test_cannot_remove_datacenter_in_use(self, make_seed: Callable, cluster_in: Callable) -> None:
        store = InMemoryClusterStore([cluster_in("c1", "dc1")])

        with pytest.raises(ReferentialIntegrityError) as exc_info:
            await SeedValidator(store).validate(
                make_seed("existing-seed"), Operation.UPDATE, _seeds(make_seed("existing-seed", "dc1"))
            )

        assert str(exc_info.value) == 'datacenter "dc1" is still in use by cluster "c1"'

    @pytest.mark.asyncio
    async def test_previous_from_request_wins(self, make_seed: Callable, cluster_in: Callable) -> None:
        """Test that the request's previous object is used over the stored seed."""
        store = InMemoryClusterStore([cluster_in("c1", "dc9")])
        previous = make_seed("existing-seed", "dc1", "dc9")

        with pytest.raises(ReferentialIntegrityError, match='"dc9"'):
            await SeedValidator(store).validate(
                make_seed("existing-seed", "dc1"),
                Operation.UPDATE,
                _seeds(make_seed("existing-seed", "dc1")),
                previous=previous,
            )

    @pytest.mark.asyncio
    async def test_cluster_store_only_queried_on_removal(self, make_seed: Callable) -> None:
        store = AsyncMock(spec=ClusterStore)

        await SeedValidator(store).validate(
            make_seed("existing-seed", "dc1", "dc2"),
            Operation.UPDATE,
            _seeds(make_seed("existing-seed", "dc1")),
        )

        store.list_clusters.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existing_seeds_are_not_modified(self, make_seed: Callable) -> None:
        existing = _seeds(make_seed("existing-seed", "dc1"), make_seed("other", "dc2"))

        await SeedValidator(InMemoryClusterStore()).validate(
            make_seed("existing-seed", "dc1"), Operation.UPDATE, existing
        )

        assert sorted(existing) == ["existing-seed", "other"]


class TestDelete:
    """Tests for seed deletion."""

    @pytest.mark.asyncio
    async def test_clusters_of_other_seeds_do_not_block_deletion(
        self, make_seed: Callable, cluster_in: Callable
    ) -> None:
        seed = make_seed("asia-south1-a", "aws-asia-south1-a")
        existing = _seeds(make_seed("europe-west3-c", "do-fra1"), seed)
        store = InMemoryClusterStore([cluster_in("c1", "do-fra1")])

        await SeedValidator(store).validate(seed, Operation.DELETE, existing)

    @pytest.mark.asyncio
    async def test_cannot_delete_seed_with_clusters(self, make_seed: Callable, cluster_in: Callable) -> None:
        seed = make_seed("myseed", "dc1")
        store = InMemoryClusterStore([cluster_in("c1", "dc1")])

        with pytest.raises(ReferentialIntegrityError) as exc_info:
            await SeedValidator(store).validate(seed, Operation.DELETE, _seeds(seed))

        assert str(exc_info.value) == (
            'cannot delete seed "myseed": datacenter "dc1" is still in use by cluster "c1"'
        )

    @pytest.mark.asyncio
    async def test_cannot_delete_seed_leaving_dangling_cluster(self, make_seed: Callable) -> None:
        """Test that a cluster without any providing seed blocks deletion."""
        store = InMemoryClusterStore([Cluster(name="c1")])

        with pytest.raises(ReferentialIntegrityError, match="which no remaining seed provides"):
            await SeedValidator(store).validate(make_seed("myseed"), Operation.DELETE)

    @pytest.mark.asyncio
    async def test_delete_skips_topology_checks(self, make_seed: Callable) -> None:
        """Test that deleting a seed with an invalid datacenter is allowed."""
        seed = Seed(name="broken", datacenters={"a": Datacenter()})

        await SeedValidator(InMemoryClusterStore()).validate(seed, Operation.DELETE)

    @pytest.mark.asyncio
    async def test_delete_uses_stored_datacenters(self, make_seed: Callable, cluster_in: Callable) -> None:
        store = InMemoryClusterStore([cluster_in("c1", "dc1")])

        with pytest.raises(ReferentialIntegrityError, match='datacenter "dc1" is still in use'):
            await SeedValidator(store).validate(
                make_seed("myseed"), Operation.DELETE, _seeds(make_seed("myseed", "dc1"))
            )


class TestFailClosed:
    """Tests for failing cluster and seed queries."""

    @pytest.mark.asyncio
    async def test_cluster_store_error(self, make_seed: Callable) -> None:
        store = AsyncMock(spec=ClusterStore)
        store.list_clusters.side_effect = ClusterStoreError("connection refused")

        with pytest.raises(ValidationFailedError, match="failed to list clusters: connection refused"):
            await SeedValidator(store).validate(make_seed("myseed", "dc1"), Operation.DELETE)

    @pytest.mark.asyncio
    async def test_timeout(self, make_seed: Callable) -> None:
        validator = SeedValidator(SlowClusterStore(), timeout_seconds=0.01)

        with pytest.raises(ValidationFailedError, match="timed out"):
            await validator.validate(make_seed("myseed", "dc1"), Operation.DELETE)

    @pytest.mark.asyncio
    async def test_cancelled_query(self, make_seed: Callable) -> None:
        validator = SeedValidator(CancelledClusterStore())

        with pytest.raises(ValidationFailedError, match="cluster query was cancelled"):
            await validator.validate(make_seed("myseed", "dc1"), Operation.DELETE)

    @pytest.mark.asyncio
    async def test_cancelling_the_request_propagates(self, make_seed: Callable) -> None:
        validator = SeedValidator(SlowClusterStore())
        task = asyncio.create_task(validator.validate(make_seed("myseed", "dc1"), Operation.DELETE))
        await asyncio.sleep(0.01)

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_seed_store_error(self, make_seed: Callable) -> None:
        seed_store = AsyncMock()
        seed_store.list_seeds.side_effect = SeedStoreError("forbidden")
        validator = SeedValidator(InMemoryClusterStore(), seed_store)

        with pytest.raises(ValidationFailedError, match="failed to list seeds: forbidden"):
            await validator(ValidationContext(), make_seed("myseed"), Operation.CREATE)


class TestAsValidateFunc:
    """Tests for SeedValidator used inside a validation chain."""

    @pytest.mark.asyncio
    async def test_reads_existing_seeds_from_store(self, make_seed: Callable) -> None:
        validator = SeedValidator(InMemoryClusterStore(), InMemorySeedStore([make_seed("existing-seed", "dc1")]))

        with pytest.raises(DuplicateError):
            await validator(ValidationContext(), make_seed("new-seed", "dc1"), Operation.CREATE)

    @pytest.mark.asyncio
    async def test_without_seed_store(self, make_seed: Callable) -> None:
        validator = SeedValidator(InMemoryClusterStore())

        await validator(ValidationContext(), make_seed("new-seed", "dc1"), Operation.CREATE)


class TestSingleSeed:
    """Tests for the single seed constraint."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("name", "namespace", "operation", "want_error"),
        [
            (DEFAULT_SEED_NAME, "hostplane", Operation.CREATE, False),
            (DEFAULT_SEED_NAME, "kube-system", Operation.CREATE, True),
            ("my-seed", "hostplane", Operation.UPDATE, True),
            ("custom-seed", "kube-system", Operation.DELETE, False),
        ],
    )
    async def test_single_seed(self, name: str, namespace: str, operation: Operation, want_error: bool) -> None:
        validate = single_seed_validate_func("hostplane")
        seed = Seed(name=name, namespace=namespace)

        if want_error:
            with pytest.raises(ValidationFailedError, match="only a single seed"):
                await validate(ValidationContext(), seed, operation)
        else:
            await validate(ValidationContext(), seed, operation)
