"""Datacenter listing, lookup and creation.

Views are plain dicts in the API's JSON shape. Datacenters that require an
email domain are hidden from non-admin callers outside that domain: they
are left out of listings and a direct lookup answers "not found".
"""

from typing import Any

from pydantic import Field

from hostplane.core.exceptions import (
    AuthorizationError,
    DuplicateError,
    NotFoundError,
    ValidationFailedError,
)
from hostplane.core.models import Datacenter, NodeSettings, ResolvedDatacenter, Seed, User
from hostplane.core.providers import FAKE, DatacenterSpec, WireModel
from hostplane.interfaces.seed_store import SeedStore
from hostplane.utils.logging import get_logger

logger = get_logger(__name__)


class DatacenterRequestSpec(DatacenterSpec):
    """Requested datacenter: a provider union plus placement and policy."""

    seed: str = ""
    country: str = ""
    location: str = ""
    node: NodeSettings = Field(default_factory=NodeSettings)
    required_email_domain: str = ""
    required_email_domains: list[str] = Field(default_factory=list)
    enforce_audit_logging: bool = False
    enforce_pod_security_policy: bool = False

    def provider_spec(self) -> DatacenterSpec:
        return DatacenterSpec(**{name: getattr(self, name) for name in self.variant_types})

    def to_datacenter(self) -> Datacenter:
        return Datacenter(
            country=self.country,
            location=self.location,
            node=self.node,
            spec=self.provider_spec(),
            required_email_domain=self.required_email_domain,
            required_email_domains=self.required_email_domains,
            enforce_audit_logging=self.enforce_audit_logging,
            enforce_pod_security_policy=self.enforce_pod_security_policy,
        )


class CreateDatacenterRequest(WireModel):
    name: str
    spec: DatacenterRequestSpec


def is_visible(datacenter: Datacenter, user: User) -> bool:
    """Check whether a caller may see a datacenter."""
    if user.is_admin:
        return True
    domains = [d.lower() for d in datacenter.email_domains]
    return not domains or user.email_domain.lower() in domains


def _node_view(node: NodeSettings) -> dict[str, Any]:
    return node.model_dump(mode="json", exclude_defaults=True)


def _spec_view(seed_name: str, datacenter: Datacenter, *, with_provider: bool) -> dict[str, Any]:
    spec: dict[str, Any] = {"seed": seed_name}
    if datacenter.country:
        spec["country"] = datacenter.country
    if datacenter.location:
        spec["location"] = datacenter.location

    provider = datacenter.spec.variant()
    if with_provider:
        spec["provider"] = provider
    # The fake provider has no payload in the API shape.
    if provider != FAKE:
        spec[provider] = datacenter.spec.payload().to_wire()
    spec["node"] = _node_view(datacenter.node)

    if datacenter.required_email_domain:
        spec["requiredEmailDomain"] = datacenter.required_email_domain
    if datacenter.required_email_domains:
        spec["requiredEmailDomains"] = list(datacenter.required_email_domains)

    spec["enforceAuditLogging"] = datacenter.enforce_audit_logging
    spec["enforcePodSecurityPolicy"] = datacenter.enforce_pod_security_policy
    return spec


def datacenter_view(name: str, seed: Seed, datacenter: Datacenter) -> dict[str, Any]:
    """Render a stored datacenter in its API shape."""
    metadata = {"name": name}
    if seed.resource_version:
        metadata["resourceVersion"] = seed.resource_version
    return {"metadata": metadata, "spec": _spec_view(seed.name, datacenter, with_provider=True)}


def created_view(name: str, seed_name: str, datacenter: Datacenter) -> dict[str, Any]:
    """Render a newly created datacenter as the request echoed back.

    The echo carries no resource version and no provider name; the provider
    is only implied by the payload key.
    """
    return {"metadata": {"name": name}, "spec": _spec_view(seed_name, datacenter, with_provider=False)}


def seed_view(seed: Seed) -> dict[str, Any]:
    """Render the synthetic datacenter entry of a seed."""
    metadata = {"name": seed.name}
    if seed.resource_version:
        metadata["resourceVersion"] = seed.resource_version

    spec: dict[str, Any] = {"seed": ""}
    if seed.country:
        spec["country"] = seed.country
    if seed.location:
        spec["location"] = seed.location
    spec.update({"node": {}, "enforceAuditLogging": False, "enforcePodSecurityPolicy": False})
    return {"metadata": metadata, "spec": spec, "seed": True}


def _by_name(view: dict[str, Any]) -> str:
    return view["metadata"]["name"]


class DatacenterService:
    """Datacenter boundary service.

    Args:
        seed_store: Store of the seeds owning the datacenters
    """

    def __init__(self, seed_store: SeedStore):
        self.seed_store = seed_store

    @staticmethod
    def _visible(user: User, seeds: list[Seed]) -> list[tuple[str, Seed, Datacenter]]:
        visible = []
        for seed in seeds:
            for name, datacenter in seed.datacenters.items():
                if is_visible(datacenter, user):
                    visible.append((name, seed, datacenter))
        return visible

    async def list_datacenters(self, user: User) -> list[dict[str, Any]]:
        """List the datacenters visible to the caller plus one entry per seed.

        Returns:
            Views sorted by name
        """
        seeds = await self.seed_store.list_seeds()
        views = [datacenter_view(name, seed, dc) for name, seed, dc in self._visible(user, seeds)]
        views += [seed_view(seed) for seed in seeds]
        return sorted(views, key=_by_name)

    async def get_datacenter(self, user: User, name: str) -> dict[str, Any]:
        """Get a datacenter (or seed entry) visible to the caller.

        Raises:
            NotFoundError: If it does not exist or is hidden from the caller
        """
        for view in await self.list_datacenters(user):
            if view["metadata"]["name"] == name:
                return view
        raise NotFoundError(f'datacenter "{name}" not found')

    async def list_datacenters_for_provider(self, user: User, provider: str) -> list[dict[str, Any]]:
        """List visible datacenters of one provider, sorted by name."""
        views = [
            datacenter_view(name, seed, dc)
            for name, seed, dc in self._visible(user, await self.seed_store.list_seeds())
            if dc.spec.set_variants() == [provider]
        ]
        return sorted(views, key=_by_name)

    async def get_datacenter_for_provider(
        self, user: User, provider: str, name: str
    ) -> dict[str, Any]:
        """Get a visible datacenter of one provider.

        Raises:
            NotFoundError: If it does not exist, is hidden or has another provider
        """
        for view in await self.list_datacenters_for_provider(user, provider):
            if view["metadata"]["name"] == name:
                return view
        raise NotFoundError(f'datacenter "{name}" not found')

    async def create_datacenter(
        self, user: User, seed_name: str, request: CreateDatacenterRequest
    ) -> dict[str, Any]:
        """Create a datacenter in a seed.

        Args:
            user: Caller
            seed_name: Seed named in the request path
            request: Datacenter to create

        Returns:
            View of the created datacenter

        Raises:
            AuthorizationError: If the caller is not an admin
            ConfigurationError: If the request does not set exactly one provider
            ValidationFailedError: If the path and request seeds differ or the seed does not exist
            DuplicateError: If the datacenter name is already taken
        """
        if not user.is_admin:
            raise AuthorizationError(f'forbidden: "{user.email}" doesn\'t have admin rights')

        request.spec.variant()
        if request.spec.seed != seed_name:
            raise ValidationFailedError(
                f'path seed "{seed_name}" and request seed "{request.spec.seed}" not equal'
            )

        seed = await self.seed_store.get_seed(seed_name)
        if seed is None:
            raise ValidationFailedError(f'seed "{seed_name}" does not exist')

        for existing in await self.seed_store.list_seeds():
            if request.name in existing.datacenters:
                raise DuplicateError(f'datacenter "{request.name}" already exists')

        datacenter = request.spec.to_datacenter()
        updated = seed.model_copy(
            update={"datacenters": {**seed.datacenters, request.name: datacenter}}
        )
        await self.seed_store.save_seed(updated)

        logger.info("datacenter_created", datacenter=request.name, seed=seed_name, user=user.email)
        return created_view(request.name, seed_name, datacenter)


def resolve_datacenter(seeds: list[Seed], name: str) -> ResolvedDatacenter:
    """Find a datacenter and its owning seed by name.

    Args:
        seeds: Seeds to search
        name: Datacenter name

    Returns:
        ResolvedDatacenter

    Raises:
        NotFoundError: If no seed owns a datacenter of that name
    """
    for seed in sorted(seeds, key=lambda s: s.name):
        datacenter = seed.datacenters.get(name)
        if datacenter is not None:
            return ResolvedDatacenter(name=name, seed=seed.name, datacenter=datacenter)
    raise NotFoundError(f'datacenter "{name}" not found')
