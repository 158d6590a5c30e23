"""Registry of resource creators."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from hostplane.resources import (
    apiserver,
    cloudconfig,
    controller_manager,
    machine_controller,
    openvpn,
    prometheus,
    scheduler,
)
from hostplane.resources.context import TemplateContext
from hostplane.utils.logging import get_logger

logger = get_logger(__name__)

CreateFunc = Callable[[TemplateContext], dict[str, Any]]


@dataclass(frozen=True)
class Creator:
    """A named function producing one object of the control plane."""

    kind: str
    component: str
    create: CreateFunc

    @property
    def key(self) -> str:
        """Registry key, e.g. ``deployment/apiserver``."""
        return f"{self.kind.lower()}/{self.component}"


class CreatorRegistry:
    """Registry for resource creators.

    Creators are kept in registration order, which is also the order in
    which a full compile produces objects.
    """

    def __init__(self) -> None:
        self._creators: dict[str, Creator] = {}

    def register(self, creator: Creator) -> None:
        """Register a creator.

        Args:
            creator: Creator to register

        Raises:
            ValueError: If a creator with the same key is already registered
        """
        if creator.key in self._creators:
            raise ValueError(f"creator {creator.key!r} already registered")

        self._creators[creator.key] = creator
        logger.debug("creator_registered", key=creator.key)

    def get(self, key: str) -> Creator | None:
        return self._creators.get(key)

    def get_all(self) -> list[Creator]:
        return list(self._creators.values())

    def keys(self) -> list[str]:
        return list(self._creators)

    def __len__(self) -> int:
        return len(self._creators)

    def __contains__(self, key: object) -> bool:
        return key in self._creators


def default_registry() -> CreatorRegistry:
    """Build a registry holding every control plane creator."""
    registry = CreatorRegistry()
    for creator in (
        Creator("Deployment", "apiserver", apiserver.deployment_creator),
        Creator("Deployment", "controller-manager", controller_manager.deployment_creator),
        Creator("Deployment", "scheduler", scheduler.deployment_creator),
        Creator("Deployment", "machine-controller", machine_controller.deployment_creator),
        Creator("ConfigMap", "cloud-config", cloudconfig.config_map_creator),
        Creator("ConfigMap", "openvpn", openvpn.config_map_creator),
        Creator("ConfigMap", "prometheus", prometheus.config_map_creator),
        Creator("Service", "apiserver", apiserver.internal_service_creator),
        Creator("Service", "apiserver-external", apiserver.external_service_creator),
        Creator("Service", "openvpn", openvpn.service_creator),
    ):
        registry.register(creator)
    return registry
