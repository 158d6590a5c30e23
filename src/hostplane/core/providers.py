"""Provider union types.

Every union (cluster cloud credentials, datacenter provider metadata, node
sizing, operating system) is a model with one optional field per variant.
Exactly one variant must be set; :meth:`ProviderUnion.variant` is the single
place where that invariant is checked.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hostplane.core.exceptions import ConfigurationError

AWS = "aws"
AZURE = "azure"
BRINGYOUROWN = "bringyourown"
DIGITALOCEAN = "digitalocean"
FAKE = "fake"
HETZNER = "hetzner"
OPENSTACK = "openstack"
VSPHERE = "vsphere"


class WireModel(BaseModel):
    """Base model serialized with camelCase wire names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump the model under its wire (alias) names."""
        return self.model_dump(mode="json", by_alias=True)


class ProviderUnion(WireModel):
    """Exclusive union of provider payloads."""

    variant_types: ClassVar[dict[str, type[WireModel]]] = {}
    union_label: ClassVar[str] = "provider"

    @classmethod
    def of(cls, name: str, payload: WireModel | dict[str, Any] | None = None) -> "ProviderUnion":
        """Build a union with exactly one variant set.

        Args:
            name: Variant name (e.g. "aws")
            payload: Variant payload; an empty payload is used when omitted

        Returns:
            Union instance

        Raises:
            ConfigurationError: If the variant is unknown
        """
        if name not in cls.variant_types:
            raise ConfigurationError(
                f"unknown {cls.union_label} {name!r}, expected one of: "
                f"[{' '.join(sorted(cls.variant_types))}]",
                fields=[name],
            )

        payload_type = cls.variant_types[name]
        if payload is None:
            payload = payload_type()
        elif isinstance(payload, dict):
            payload = payload_type.model_validate(payload)

        return cls(**{name: payload})

    def set_variants(self) -> list[str]:
        """Get the names of all variants that are set, sorted."""
        return sorted(name for name in self.variant_types if getattr(self, name) is not None)

    def variant(self) -> str:
        """Get the name of the single variant that is set.

        Raises:
            ConfigurationError: If zero or several variants are set
        """
        names = self.set_variants()
        if len(names) != 1:
            raise ConfigurationError(
                f"one {self.union_label} should be specified, got: [{' '.join(names)}]",
                fields=names,
            )
        return names[0]

    def payload(self) -> WireModel:
        """Get the payload of the single variant that is set."""
        return getattr(self, self.variant())


# Cluster cloud credentials


class AWSCloudSpec(WireModel):
    access_key_id: str = ""
    secret_access_key: str = ""
    vpc_id: str = ""
    subnet_id: str = ""
    role_name: str = ""
    route_table_id: str = ""
    instance_profile_name: str = ""
    security_group_id: str = ""
    availability_zone: str = ""


class AzureCloudSpec(WireModel):
    tenant_id: str = ""
    subscription_id: str = ""
    client_id: str = ""
    client_secret: str = ""
    resource_group: str = ""
    vnet_name: str = ""
    subnet_name: str = ""
    route_table_name: str = ""
    security_group: str = ""


class BringYourOwnCloudSpec(WireModel):
    pass


class DigitaloceanCloudSpec(WireModel):
    token: str = ""


class FakeCloudSpec(WireModel):
    token: str = ""


class HetznerCloudSpec(WireModel):
    token: str = ""


class OpenstackCloudSpec(WireModel):
    username: str = ""
    password: str = ""
    tenant: str = ""
    domain: str = ""
    network: str = ""
    security_groups: str = ""
    floating_ip_pool: str = ""
    router_id: str = ""
    subnet_id: str = ""


class VSphereCloudSpec(WireModel):
    username: str = ""
    password: str = ""


class CloudSpec(ProviderUnion):
    """Cloud credentials of a cluster plus the datacenter it is bound to."""

    variant_types: ClassVar[dict[str, type[WireModel]]] = {
        AWS: AWSCloudSpec,
        AZURE: AzureCloudSpec,
        BRINGYOUROWN: BringYourOwnCloudSpec,
        DIGITALOCEAN: DigitaloceanCloudSpec,
        FAKE: FakeCloudSpec,
        HETZNER: HetznerCloudSpec,
        OPENSTACK: OpenstackCloudSpec,
        VSPHERE: VSphereCloudSpec,
    }
    union_label: ClassVar[str] = "cloud provider"

    datacenter_name: str = ""
    aws: AWSCloudSpec | None = None
    azure: AzureCloudSpec | None = None
    bringyourown: BringYourOwnCloudSpec | None = None
    digitalocean: DigitaloceanCloudSpec | None = None
    fake: FakeCloudSpec | None = None
    hetzner: HetznerCloudSpec | None = None
    openstack: OpenstackCloudSpec | None = None
    vsphere: VSphereCloudSpec | None = None

    @classmethod
    def for_datacenter(
        cls, datacenter_name: str, name: str, payload: WireModel | dict[str, Any] | None = None
    ) -> "CloudSpec":
        """Build a cloud spec bound to a datacenter with exactly one provider."""
        spec = cls.of(name, payload)
        return spec.model_copy(update={"datacenter_name": datacenter_name})


# Datacenter provider metadata


class DatacenterSpecAWS(WireModel):
    region: str = ""
    ami: str = ""
    zone_character: str = ""


class DatacenterSpecAzure(WireModel):
    location: str = ""


class DatacenterSpecBringYourOwn(WireModel):
    pass


class DatacenterSpecDigitalocean(WireModel):
    region: str = ""


class DatacenterSpecFake(WireModel):
    fake_property: str = ""


class DatacenterSpecHetzner(WireModel):
    datacenter: str = ""
    location: str = ""


class DatacenterSpecOpenstack(WireModel):
    auth_url: str = ""
    availability_zone: str = ""
    region: str = ""
    ignore_volume_az: bool = False
    dns_servers: list[str] = Field(default_factory=list)


class DatacenterSpecVSphere(WireModel):
    endpoint: str = ""
    allow_insecure: bool = False
    datastore: str = ""
    datacenter: str = ""
    cluster: str = ""
    root_path: str = ""


class DatacenterSpec(ProviderUnion):
    """Provider binding of a datacenter."""

    variant_types: ClassVar[dict[str, type[WireModel]]] = {
        AWS: DatacenterSpecAWS,
        AZURE: DatacenterSpecAzure,
        BRINGYOUROWN: DatacenterSpecBringYourOwn,
        DIGITALOCEAN: DatacenterSpecDigitalocean,
        FAKE: DatacenterSpecFake,
        HETZNER: DatacenterSpecHetzner,
        OPENSTACK: DatacenterSpecOpenstack,
        VSPHERE: DatacenterSpecVSphere,
    }
    union_label: ClassVar[str] = "DC provider"

    aws: DatacenterSpecAWS | None = None
    azure: DatacenterSpecAzure | None = None
    bringyourown: DatacenterSpecBringYourOwn | None = None
    digitalocean: DatacenterSpecDigitalocean | None = None
    fake: DatacenterSpecFake | None = None
    hetzner: DatacenterSpecHetzner | None = None
    openstack: DatacenterSpecOpenstack | None = None
    vsphere: DatacenterSpecVSphere | None = None


# Node sizing


class AWSNodeSpec(WireModel):
    instance_type: str = ""
    volume_size: int = 0
    volume_type: str = ""
    ami: str = ""
    tags: dict[str, str] = Field(default_factory=dict)


class AzureNodeSpec(WireModel):
    size: str = ""
    assign_public_ip: bool = False
    tags: dict[str, str] = Field(default_factory=dict)


class DigitaloceanNodeSpec(WireModel):
    size: str = ""
    backups: bool = False
    ipv6: bool = False
    monitoring: bool = False
    tags: list[str] = Field(default_factory=list)


class HetznerNodeSpec(WireModel):
    type: str = ""


class OpenstackNodeSpec(WireModel):
    flavor: str = ""
    image: str = ""
    tags: dict[str, str] = Field(default_factory=dict)


class VSphereNodeSpec(WireModel):
    cpus: int = 0
    memory: int = 0
    template: str = ""


class NodeCloudSpec(ProviderUnion):
    """Provider-specific sizing of a worker node."""

    variant_types: ClassVar[dict[str, type[WireModel]]] = {
        AWS: AWSNodeSpec,
        AZURE: AzureNodeSpec,
        DIGITALOCEAN: DigitaloceanNodeSpec,
        HETZNER: HetznerNodeSpec,
        OPENSTACK: OpenstackNodeSpec,
        VSPHERE: VSphereNodeSpec,
    }
    union_label: ClassVar[str] = "node cloud provider"

    aws: AWSNodeSpec | None = None
    azure: AzureNodeSpec | None = None
    digitalocean: DigitaloceanNodeSpec | None = None
    hetzner: HetznerNodeSpec | None = None
    openstack: OpenstackNodeSpec | None = None
    vsphere: VSphereNodeSpec | None = None


# Operating system bootstrap

UBUNTU = "ubuntu"
CENTOS = "centos"
CONTAINERLINUX = "container_linux"


class UbuntuSpec(WireModel):
    dist_upgrade_on_boot: bool = False


class CentOSSpec(WireModel):
    dist_upgrade_on_boot: bool = False


class ContainerLinuxSpec(WireModel):
    disable_auto_update: bool = False


class OperatingSystemSpec(ProviderUnion):
    """Operating system bootstrap configuration of a worker node."""

    variant_types: ClassVar[dict[str, type[WireModel]]] = {
        CENTOS: CentOSSpec,
        CONTAINERLINUX: ContainerLinuxSpec,
        UBUNTU: UbuntuSpec,
    }
    union_label: ClassVar[str] = "operating system"

    centos: CentOSSpec | None = None
    container_linux: ContainerLinuxSpec | None = None
    ubuntu: UbuntuSpec | None = None

