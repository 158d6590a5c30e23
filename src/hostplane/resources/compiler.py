"""Compile the objects of a hosted control plane."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from hostplane.core.exceptions import HostplaneError, NotFoundError
from hostplane.resources.context import TemplateContext
from hostplane.resources.merge import merge_object
from hostplane.resources.registry import Creator, CreatorRegistry, default_registry
from hostplane.resources.serialize import object_identity
from hostplane.utils.logging import get_logger, log_operation

logger = get_logger(__name__)


@dataclass
class CompileResult:
    """Outcome of compiling every registered object.

    Attributes:
        objects: Compiled objects keyed by identity
        errors: Failures keyed by registry key
    """

    objects: dict[str, dict[str, Any]] = field(default_factory=dict)
    errors: dict[str, HostplaneError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def identity(creator: Creator, context: TemplateContext) -> str:
    """Get the identity of the object a creator produces for a context.

    Raises:
        ConfigurationError: If the cluster's cloud spec sets zero or several providers
    """
    return object_identity(creator.kind, context.provider, str(context.version), creator.component)


def create(
    component: str | Creator,
    context: TemplateContext,
    existing: dict[str, Any] | None = None,
    registry: CreatorRegistry | None = None,
) -> dict[str, Any]:
    """Create one object, merged with its live counterpart.

    Args:
        component: Registry key (e.g. ``deployment/apiserver``) or creator
        context: Template context
        existing: Live object, if any
        registry: Creator registry (defaults to every control plane creator)

    Returns:
        The compiled object

    Raises:
        NotFoundError: If the component is not registered
        ConfigurationError: If a provider union is invalid or providers disagree
        PreconditionError: If a required snapshot entry is missing
    """
    if isinstance(component, Creator):
        creator = component
    else:
        creator = (registry or default_registry()).get(component)
        if creator is None:
            raise NotFoundError(f'component "{component}" not found')

    provider = context.provider
    desired = creator.create(context)
    obj = merge_object(desired, existing)

    logger.debug(
        "object_compiled", key=creator.key, cluster=context.cluster_name, provider=provider
    )
    return obj


def compile_all(
    context: TemplateContext,
    existing: Mapping[str, dict[str, Any]] | None = None,
    registry: CreatorRegistry | None = None,
) -> CompileResult:
    """Compile every registered object, isolating failures per object.

    Args:
        context: Template context
        existing: Live objects keyed by registry key
        registry: Creator registry (defaults to every control plane creator)

    Returns:
        CompileResult with the compiled objects and the per-object failures
    """
    registry = registry or default_registry()
    existing = existing or {}
    result = CompileResult()

    for creator in registry.get_all():
        try:
            obj = create(creator, context, existing.get(creator.key))
            result.objects[identity(creator, context)] = obj
        except HostplaneError as e:
            logger.warning(
                "object_compile_failed",
                key=creator.key,
                cluster=context.cluster_name,
                error_type=type(e).__name__,
                error=str(e),
            )
            result.errors[creator.key] = e

    log_operation(
        logger,
        "compile",
        cluster=context.cluster_name,
        compiled=len(result.objects),
        failed=len(result.errors),
    )
    return result
