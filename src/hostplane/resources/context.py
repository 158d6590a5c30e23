"""Template context shared by all resource creators.

A context is derived from a cluster, its datacenter and read-only snapshots
of the cluster namespace. It is rebuilt for every compile and never written
back anywhere.
"""

import ipaddress
from typing import Any

from hostplane.core.config import HostplaneConfig
from hostplane.core.exceptions import ConfigurationError, PreconditionError
from hostplane.core.models import Cluster, Datacenter
from hostplane.core.providers import WireModel
from hostplane.core.versions import KubernetesVersion
from hostplane.interfaces.snapshot import ObjectView
from hostplane.resources.names import APISERVER_EXTERNAL_SERVICE, ETCD_CLIENT_SERVICE

DEFAULT_RESOURCES: dict[str, dict[str, dict[str, str]]] = {
    "apiserver": {
        "requests": {"cpu": "100m", "memory": "256Mi"},
        "limits": {"cpu": "1", "memory": "1Gi"},
    },
    "controller-manager": {
        "requests": {"cpu": "50m", "memory": "100Mi"},
        "limits": {"cpu": "500m", "memory": "512Mi"},
    },
    "scheduler": {
        "requests": {"cpu": "20m", "memory": "64Mi"},
        "limits": {"cpu": "250m", "memory": "256Mi"},
    },
    "machine-controller": {
        "requests": {"cpu": "25m", "memory": "32Mi"},
        "limits": {"cpu": "250m", "memory": "256Mi"},
    },
}


class TemplateContext:
    """Read-only inputs of one compile run.

    Args:
        cluster: Cluster being compiled
        datacenter: Datacenter the cluster is bound to
        secrets: Snapshot of the namespace's secrets
        config_maps: Snapshot of the namespace's config maps
        services: Snapshot of the namespace's services
        config: Compiler configuration (defaults apply when omitted)
        version: Kubernetes version override; defaults to the cluster's version
    """

    def __init__(
        self,
        cluster: Cluster,
        datacenter: Datacenter,
        secrets: ObjectView,
        config_maps: ObjectView,
        services: ObjectView,
        *,
        config: HostplaneConfig | None = None,
        version: str | KubernetesVersion | None = None,
    ):
        self.cluster = cluster
        self.datacenter = datacenter
        self.secrets = secrets
        self.config_maps = config_maps
        self.services = services
        self.config = config or HostplaneConfig()
        self._version = KubernetesVersion.parse(version or cluster.spec.version)

    @property
    def cluster_name(self) -> str:
        return self.cluster.name

    @property
    def namespace(self) -> str:
        """Get the namespace holding the cluster's control plane."""
        return self.cluster.status.namespace_name or f"cluster-{self.cluster.name}"

    @property
    def version(self) -> KubernetesVersion:
        return self._version

    @property
    def provider(self) -> str:
        """Get the cluster's cloud provider.

        Raises:
            ConfigurationError: If the cluster's cloud spec sets zero or several providers
        """
        return self.cluster.spec.cloud.variant()

    def cloud_payload(self) -> WireModel:
        """Get the cluster's cloud credentials payload."""
        return self.cluster.spec.cloud.payload()

    def datacenter_payload(self) -> WireModel:
        """Get the datacenter's provider payload.

        Raises:
            ConfigurationError: If the datacenter's provider differs from the cluster's
        """
        cluster_provider = self.provider
        datacenter_provider = self.datacenter.spec.variant()
        if datacenter_provider != cluster_provider:
            raise ConfigurationError(
                f"datacenter provider {datacenter_provider} does not match "
                f"cluster provider {cluster_provider}",
                fields=[cluster_provider, datacenter_provider],
            )
        return self.datacenter.spec.payload()

    @property
    def address_ip(self) -> str:
        return self.cluster.address.ip

    def apiserver_external_node_port(self) -> int:
        """Get the node port allocated to the external apiserver service.

        Raises:
            PreconditionError: If the service or its node port is not in the snapshot
        """
        service = self.services.get(self.namespace, APISERVER_EXTERNAL_SERVICE)
        if service is None:
            raise PreconditionError(
                f'service "{APISERVER_EXTERNAL_SERVICE}" not found in namespace "{self.namespace}"'
            )

        ports = service.get("spec", {}).get("ports") or []
        node_port = ports[0].get("nodePort") if ports else None
        if not node_port:
            raise PreconditionError(
                f'service "{APISERVER_EXTERNAL_SERVICE}" in namespace "{self.namespace}" '
                "has no node port allocated"
            )
        return int(node_port)

    def secret_revision(self, name: str) -> str:
        """Get the resource version of a secret.

        Raises:
            PreconditionError: If the secret is not in the snapshot
        """
        return self._revision(self.secrets, "secret", name)

    def config_map_revision(self, name: str) -> str:
        """Get the resource version of a config map.

        Raises:
            PreconditionError: If the config map is not in the snapshot
        """
        return self._revision(self.config_maps, "configmap", name)

    def _revision(self, view: ObjectView, kind: str, name: str) -> str:
        obj = view.get(self.namespace, name)
        if obj is None:
            raise PreconditionError(f'{kind} "{name}" not found in namespace "{self.namespace}"')
        return str(obj.get("metadata", {}).get("resourceVersion", ""))

    @property
    def service_cidr(self) -> str:
        """Get the first service range of the cluster network.

        Raises:
            ConfigurationError: If no service range is set or it is not a valid CIDR
        """
        self._network("services")
        return self.cluster.spec.cluster_network.services.cidr_blocks[0]

    @property
    def pod_cidr(self) -> str:
        """Get the first pod range of the cluster network.

        Raises:
            ConfigurationError: If no pod range is set or it is not a valid CIDR
        """
        self._network("pods")
        return self.cluster.spec.cluster_network.pods.cidr_blocks[0]

    @property
    def cluster_dns_ip(self) -> str:
        """Get the address of the in-cluster DNS service (10th address of the service range).

        Raises:
            ConfigurationError: If the service range holds fewer than 11 addresses
        """
        network = self._network("services")
        if network.num_addresses <= 10:
            raise ConfigurationError(
                f"service range {network} is too small to hold the cluster DNS address",
                fields=["services"],
            )
        return str(network[10])

    def _network(self, field: str) -> ipaddress.IPv4Network | ipaddress.IPv6Network:
        blocks = getattr(self.cluster.spec.cluster_network, field).cidr_blocks
        if not blocks:
            raise ConfigurationError(f"no {field} CIDR block specified", fields=[field])
        try:
            return ipaddress.ip_network(blocks[0], strict=False)
        except ValueError as e:
            raise ConfigurationError(
                f"invalid {field} CIDR block {blocks[0]!r}: {e}", fields=[field]
            ) from e

    @property
    def node_access_network(self) -> str:
        return self.config.compiler.node_access_network

    def resources_for(self, component: str) -> dict[str, Any]:
        """Get the container resource requirements of a component."""
        requirements = DEFAULT_RESOURCES.get(component, {})
        return {kind: dict(values) for kind, values in requirements.items()}

    def hyperkube_image(self) -> str:
        return f"{self.config.images.hyperkube}:v{self.version}"

    def machine_controller_image(self) -> str:
        return self.config.images.machine_controller

    def etcd_endpoint(self) -> str:
        """Get the etcd client URL reachable from within the namespace."""
        return f"http://{ETCD_CLIENT_SERVICE}.{self.namespace}.svc.cluster.local:2379"
