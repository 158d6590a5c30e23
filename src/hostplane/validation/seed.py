"""Admission validation of seeds and their datacenters.

The compiler trusts that every datacenter name resolves to exactly one
datacenter with exactly one provider, and that no cluster points at a
datacenter that has gone away. These checks keep the seed topology in that
state as seeds are created, edited and deleted.
"""

import asyncio
from collections.abc import Iterable, Mapping

from hostplane.core.exceptions import (
    ConfigurationError,
    DuplicateError,
    ImmutabilityError,
    ReferentialIntegrityError,
    ValidationFailedError,
)
from hostplane.core.models import Cluster, Seed
from hostplane.interfaces.cluster_store import ClusterStore
from hostplane.interfaces.exceptions import ClusterStoreError, SeedStoreError
from hostplane.interfaces.seed_store import SeedStore
from hostplane.utils.logging import get_logger
from hostplane.validation.chain import Operation, ValidateFunc, ValidationContext

logger = get_logger(__name__)

DEFAULT_SEED_NAME = "default"


def check_datacenter_providers(seed: Seed) -> None:
    """Check that every datacenter sets exactly one provider.

    Raises:
        ConfigurationError: Naming the first offending datacenter
    """
    for name in sorted(seed.datacenters):
        try:
            seed.datacenters[name].spec.variant()
        except ConfigurationError as e:
            raise ConfigurationError(f'datacenter "{name}": {e}', fields=e.fields) from e


def check_provider_immutability(seed: Seed, previous: Seed | None) -> None:
    """Check that no existing datacenter changed its provider.

    Raises:
        ImmutabilityError: If a datacenter's provider differs from before
    """
    if previous is None:
        return

    for name in sorted(seed.datacenters):
        old = previous.datacenters.get(name)
        if old is None:
            continue
        old_providers = old.spec.set_variants()
        new_providers = seed.datacenters[name].spec.set_variants()
        if old_providers != new_providers:
            raise ImmutabilityError(
                f'cannot change provider of datacenter "{name}" from '
                f"[{' '.join(old_providers)}] to [{' '.join(new_providers)}]"
            )


def check_unique_datacenters(seed: Seed, other_seeds: Iterable[Seed]) -> None:
    """Check that no datacenter name is already owned by another seed.

    Raises:
        DuplicateError: If a datacenter name is taken
    """
    for other in sorted(other_seeds, key=lambda s: s.name):
        for name in sorted(seed.datacenters):
            if name in other.datacenters:
                raise DuplicateError(
                    f'datacenter "{name}" already exists in seed "{other.name}"'
                )


def removed_datacenters(seed: Seed, previous: Seed | None) -> set[str]:
    if previous is None:
        return set()
    return set(previous.datacenters) - set(seed.datacenters)


def check_no_orphans(removed: set[str], clusters: Iterable[Cluster]) -> None:
    """Check that no cluster references a removed datacenter.

    Raises:
        ReferentialIntegrityError: If a removed datacenter is still in use
    """
    for cluster in sorted(clusters, key=lambda c: c.name):
        if cluster.datacenter_name in removed:
            raise ReferentialIntegrityError(
                f'datacenter "{cluster.datacenter_name}" is still in use '
                f'by cluster "{cluster.name}"'
            )


def check_seed_deletion(
    seed_name: str,
    seed_datacenters: set[str],
    remaining_seeds: Iterable[Seed],
    clusters: Iterable[Cluster],
) -> None:
    """Check that deleting a seed leaves no cluster without a datacenter.

    A cluster blocks the deletion when it references a datacenter of the
    seed, or a datacenter that none of the remaining seeds provides.

    Raises:
        ReferentialIntegrityError: If a cluster would be orphaned
    """
    provided: set[str] = set()
    for other in remaining_seeds:
        provided.update(other.datacenters)

    for cluster in sorted(clusters, key=lambda c: c.name):
        dc = cluster.datacenter_name
        if dc in seed_datacenters:
            raise ReferentialIntegrityError(
                f'cannot delete seed "{seed_name}": datacenter "{dc}" '
                f'is still in use by cluster "{cluster.name}"'
            )
        if dc not in provided:
            raise ReferentialIntegrityError(
                f'cannot delete seed "{seed_name}": cluster "{cluster.name}" '
                f'references datacenter "{dc}" which no remaining seed provides'
            )


class SeedValidator:
    """Validates seed create, update and delete requests.

    Checks run in a fixed order and stop at the first failure. Cluster and
    seed queries are bounded by ``timeout_seconds``; a failed, timed out or
    cancelled query rejects the request.
    """

    def __init__(
        self,
        cluster_store: ClusterStore,
        seed_store: SeedStore | None = None,
        timeout_seconds: float = 10.0,
    ):
        """Initialize seed validator.

        Args:
            cluster_store: Source of cluster datacenter references
            seed_store: Source of the existing seeds (needed when used as a validate func)
            timeout_seconds: Upper bound for one validation
        """
        self.cluster_store = cluster_store
        self.seed_store = seed_store
        self.timeout_seconds = timeout_seconds

    async def validate(
        self,
        seed: Seed,
        operation: Operation,
        existing_seeds: Mapping[str, Seed] | None = None,
        previous: Seed | None = None,
    ) -> None:
        """Validate a seed request.

        Args:
            seed: Proposed seed (the deleted seed for DELETE)
            operation: Admission operation
            existing_seeds: Seeds currently stored, keyed by name
            previous: Seed before the request; defaults to the stored seed of the same name

        Raises:
            ConfigurationError: If a datacenter does not set exactly one provider
            ImmutabilityError: If a datacenter's provider changed
            DuplicateError: If a datacenter name is taken by another seed
            ReferentialIntegrityError: If clusters still reference removed datacenters
            ValidationFailedError: If a query fails, times out or is cancelled
        """
        others = dict(existing_seeds or {})
        stored = others.pop(seed.name, None)
        if previous is None:
            previous = stored

        log = logger.bind(seed=seed.name, operation=operation.value)
        try:
            await asyncio.wait_for(
                self._run_checks(seed, operation, others, previous),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as e:
            log.error("seed_validation_timeout", timeout=self.timeout_seconds)
            raise ValidationFailedError(
                f'validation of seed "{seed.name}" timed out after {self.timeout_seconds} seconds'
            ) from e
        except Exception as e:
            log.warning("seed_validation_failed", error_type=type(e).__name__, error=str(e))
            raise

        log.info("seed_validation_passed")

    async def _run_checks(
        self,
        seed: Seed,
        operation: Operation,
        others: dict[str, Seed],
        previous: Seed | None,
    ) -> None:
        if operation == Operation.DELETE:
            seed_datacenters = set(seed.datacenters)
            if previous is not None:
                seed_datacenters |= set(previous.datacenters)
            clusters = await self._list_clusters()
            check_seed_deletion(seed.name, seed_datacenters, others.values(), clusters)
            return

        check_datacenter_providers(seed)
        check_provider_immutability(seed, previous)
        check_unique_datacenters(seed, others.values())

        removed = removed_datacenters(seed, previous)
        if removed:
            check_no_orphans(removed, await self._list_clusters())

    async def _list_clusters(self) -> list[Cluster]:
        try:
            return await self.cluster_store.list_clusters()
        except ClusterStoreError as e:
            raise ValidationFailedError(f"failed to list clusters: {e}") from e
        except asyncio.CancelledError as e:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            raise ValidationFailedError("cluster query was cancelled") from e

    async def _existing_seeds(self) -> dict[str, Seed]:
        if self.seed_store is None:
            return {}
        try:
            seeds = await asyncio.wait_for(self.seed_store.list_seeds(), timeout=self.timeout_seconds)
        except TimeoutError as e:
            raise ValidationFailedError(
                f"listing seeds timed out after {self.timeout_seconds} seconds"
            ) from e
        except SeedStoreError as e:
            raise ValidationFailedError(f"failed to list seeds: {e}") from e
        return {s.name: s for s in seeds}

    async def __call__(self, ctx: ValidationContext, seed: Seed, operation: Operation) -> None:
        """Run as a validate func, reading the existing seeds from the seed store."""
        await self.validate(
            seed,
            operation,
            existing_seeds=await self._existing_seeds(),
            previous=ctx.previous,
        )


def single_seed_validate_func(
    namespace: str, name: str = DEFAULT_SEED_NAME
) -> ValidateFunc[Seed]:
    """Restrict the installation to one seed with a reserved name and namespace.

    Deletion is always allowed.

    Args:
        namespace: Designated seed namespace
        name: Reserved seed name

    Returns:
        Validate func raising ValidationFailedError for any other seed
    """

    async def validate(ctx: ValidationContext, seed: Seed, operation: Operation) -> None:
        if operation == Operation.DELETE:
            return
        if seed.name != name or seed.namespace != namespace:
            raise ValidationFailedError(
                f'only a single seed named "{name}" in namespace "{namespace}" is allowed, '
                f'got "{seed.name}" in namespace "{seed.namespace}"'
            )

    return validate
