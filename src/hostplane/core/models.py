"""Core data models for hostplane."""

from enum import Enum

from pydantic import Field

from hostplane.core.providers import (
    CloudSpec,
    DatacenterSpec,
    NodeCloudSpec,
    OperatingSystemSpec,
    WireModel,
)


class NetworkRanges(WireModel):
    """A list of CIDR blocks."""

    cidr_blocks: list[str] = Field(default_factory=list)


class ClusterNetworkingConfig(WireModel):
    """Cluster network configuration."""

    services: NetworkRanges = Field(default_factory=lambda: NetworkRanges(cidr_blocks=["10.10.10.0/24"]))
    pods: NetworkRanges = Field(default_factory=lambda: NetworkRanges(cidr_blocks=["172.25.0.0/16"]))
    dns_domain: str = "cluster.local"


class ClusterSpec(WireModel):
    """Desired state of a tenant cluster."""

    cloud: CloudSpec = Field(default_factory=CloudSpec)
    version: str = ""
    cluster_network: ClusterNetworkingConfig = Field(default_factory=ClusterNetworkingConfig)


class ClusterAddress(WireModel):
    """Addresses under which the cluster control plane is reachable."""

    external_name: str = ""
    ip: str = ""
    admin_token: str = ""


class ClusterStatus(WireModel):
    """Observed state of a tenant cluster."""

    namespace_name: str = ""


class Cluster(WireModel):
    """A tenant's hosted Kubernetes control plane."""

    name: str = ""
    uid: str = ""
    spec: ClusterSpec = Field(default_factory=ClusterSpec)
    address: ClusterAddress = Field(default_factory=ClusterAddress)
    status: ClusterStatus = Field(default_factory=ClusterStatus)

    @property
    def datacenter_name(self) -> str:
        """Get the name of the datacenter this cluster is bound to."""
        return self.spec.cloud.datacenter_name


class NodeSettings(WireModel):
    """Node-level settings a datacenter imposes on its workers."""

    http_proxy: str = ""
    no_proxy: str = ""
    insecure_registries: list[str] = Field(default_factory=list)
    pause_image: str = ""
    hyperkube_image: str = ""


class Datacenter(WireModel):
    """A named deployment target with exactly one provider binding."""

    country: str = ""
    location: str = ""
    node: NodeSettings = Field(default_factory=NodeSettings)
    spec: DatacenterSpec = Field(default_factory=DatacenterSpec)
    required_email_domain: str = ""
    required_email_domains: list[str] = Field(default_factory=list)
    enforce_audit_logging: bool = False
    enforce_pod_security_policy: bool = False

    @property
    def email_domains(self) -> list[str]:
        """Get every email domain allowed to see this datacenter."""
        domains = list(self.required_email_domains)
        if self.required_email_domain:
            domains.append(self.required_email_domain)
        return domains


class Seed(WireModel):
    """A region-level grouping owning a set of datacenters."""

    name: str = ""
    namespace: str = ""
    resource_version: str = ""
    country: str = ""
    location: str = ""
    datacenters: dict[str, Datacenter] = Field(default_factory=dict)

    def is_empty(self) -> bool:
        """Check whether the seed carries no datacenters."""
        return not self.datacenters


class ResolvedDatacenter(WireModel):
    """A datacenter together with the seed that owns it."""

    name: str
    seed: str
    datacenter: Datacenter


class NodeVersionInfo(WireModel):
    kubelet: str = ""


class NodeSpec(WireModel):
    """Desired shape of a worker node."""

    cloud: NodeCloudSpec = Field(default_factory=NodeCloudSpec)
    operating_system: OperatingSystemSpec = Field(default_factory=OperatingSystemSpec)
    versions: NodeVersionInfo = Field(default_factory=NodeVersionInfo)


class Node(WireModel):
    """A worker node of a tenant cluster."""

    name: str
    spec: NodeSpec = Field(default_factory=NodeSpec)


class SSHKey(WireModel):
    """A user's SSH key and the clusters it is authorized for."""

    name: str = ""
    owner: str = ""
    fingerprint: str = ""
    public_key: str = ""
    clusters: list[str] = Field(default_factory=list)

    def is_authorized_for(self, cluster_name: str) -> bool:
        """Check whether the key may be installed on the given cluster."""
        return cluster_name in self.clusters


class User(WireModel):
    """Caller identity of a boundary service."""

    name: str = ""
    email: str
    is_admin: bool = False

    @property
    def email_domain(self) -> str:
        """Get the domain part of the caller's email address."""
        return self.email.rpartition("@")[2]


class ServiceAccountStatus(str, Enum):
    """Activation state of a service account."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"


class ServiceAccount(WireModel):
    """A project-scoped machine identity."""

    id: str
    name: str
    project_id: str
    group: str
    status: ServiceAccountStatus = ServiceAccountStatus.INACTIVE
