"""Compile worker node specifications into Machine manifests."""

from collections.abc import Callable, Iterable
from typing import Any

from hostplane.core.exceptions import ConfigurationError
from hostplane.core.models import Cluster, Datacenter, Node, SSHKey
from hostplane.core.providers import (
    AWS,
    AZURE,
    CONTAINERLINUX,
    DIGITALOCEAN,
    HETZNER,
    OPENSTACK,
    VSPHERE,
    WireModel,
)
from hostplane.utils.logging import get_logger

logger = get_logger(__name__)

MACHINE_API_VERSION = "machine.k8s.io/v1alpha1"

# Operating system names understood by the machine controller
OS_WIRE_NAMES = {CONTAINERLINUX: "coreos"}


def _aws(cloud: Any, dc: Any) -> dict[str, Any]:
    return {
        "accessKeyId": cloud.access_key_id,
        "secretAccessKey": cloud.secret_access_key,
        "region": dc.region,
        "availabilityZone": cloud.availability_zone or f"{dc.region}{dc.zone_character}",
        "vpcId": cloud.vpc_id,
        "subnetId": cloud.subnet_id,
        "securityGroupIds": [cloud.security_group_id] if cloud.security_group_id else [],
        "instanceProfile": cloud.instance_profile_name,
        "ami": dc.ami,
    }


def _azure(cloud: Any, dc: Any) -> dict[str, Any]:
    return {
        "tenantId": cloud.tenant_id,
        "clientId": cloud.client_id,
        "clientSecret": cloud.client_secret,
        "subscriptionId": cloud.subscription_id,
        "location": dc.location,
        "resourceGroup": cloud.resource_group,
        "vnetName": cloud.vnet_name,
        "subnetName": cloud.subnet_name,
        "routeTableName": cloud.route_table_name,
        "securityGroupName": cloud.security_group,
    }


def _digitalocean(cloud: Any, dc: Any) -> dict[str, Any]:
    return {"token": cloud.token, "region": dc.region}


def _hetzner(cloud: Any, dc: Any) -> dict[str, Any]:
    return {"token": cloud.token, "datacenter": dc.datacenter, "location": dc.location}


def _openstack(cloud: Any, dc: Any) -> dict[str, Any]:
    return {
        "identityEndpoint": dc.auth_url,
        "username": cloud.username,
        "password": cloud.password,
        "domainName": cloud.domain,
        "tenantName": cloud.tenant,
        "region": dc.region,
        "availabilityZone": dc.availability_zone,
        "network": cloud.network,
        "securityGroups": [g for g in cloud.security_groups.split(",") if g],
        "floatingIpPool": cloud.floating_ip_pool,
        "subnet": cloud.subnet_id,
    }


def _vsphere(cloud: Any, dc: Any) -> dict[str, Any]:
    return {
        "username": cloud.username,
        "password": cloud.password,
        "vsphereURL": dc.endpoint,
        "allowInsecure": dc.allow_insecure,
        "datacenter": dc.datacenter,
        "datastore": dc.datastore,
        "cluster": dc.cluster,
        "folder": dc.root_path,
    }


CLOUD_PROVIDER_SPECS: dict[str, Callable[[Any, Any], dict[str, Any]]] = {
    AWS: _aws,
    AZURE: _azure,
    DIGITALOCEAN: _digitalocean,
    HETZNER: _hetzner,
    OPENSTACK: _openstack,
    VSPHERE: _vsphere,
}


def _is_empty(value: Any) -> bool:
    return value in ("", 0, None) or value == [] or value == {}


def cloud_provider_spec(cluster: Cluster, node: Node, datacenter: Datacenter) -> dict[str, Any]:
    """Build the provider payload of a machine.

    Credentials come from the cluster, location fields from the datacenter
    and sizing from the node. Every node payload field is present under its
    wire name; an empty node value falls back to a datacenter default of the
    same name (e.g. the AWS AMI).

    Raises:
        ConfigurationError: If a union is invalid or the providers disagree
    """
    node_provider = node.spec.cloud.variant()
    datacenter_provider = datacenter.spec.variant()
    cluster_provider = cluster.spec.cloud.variant()

    if node_provider != datacenter_provider:
        raise ConfigurationError(
            f"node provider {node_provider} does not match datacenter provider {datacenter_provider}",
            fields=[node_provider, datacenter_provider],
        )
    if cluster_provider != node_provider:
        raise ConfigurationError(
            f"cluster provider {cluster_provider} does not match node provider {node_provider}",
            fields=[cluster_provider, node_provider],
        )

    spec = CLOUD_PROVIDER_SPECS[node_provider](
        cluster.spec.cloud.payload(), datacenter.spec.payload()
    )
    for key, value in node.spec.cloud.payload().to_wire().items():
        if _is_empty(value) and not _is_empty(spec.get(key)):
            continue
        spec[key] = value
    return spec


def _operating_system(node: Node) -> tuple[str, WireModel]:
    os_spec = node.spec.operating_system
    name = os_spec.variant()
    return OS_WIRE_NAMES.get(name, name), os_spec.payload()


def authorized_keys(cluster_name: str, ssh_keys: Iterable[SSHKey]) -> list[str]:
    """Get the public keys authorized for a cluster, in input order."""
    return [key.public_key for key in ssh_keys if key.is_authorized_for(cluster_name)]


def compile_machine(
    cluster: Cluster,
    node: Node,
    datacenter: Datacenter,
    ssh_keys: Iterable[SSHKey] = (),
) -> dict[str, Any]:
    """Compile a node into a Machine manifest.

    Args:
        cluster: Cluster the node belongs to
        node: Node specification
        datacenter: Datacenter the cluster is bound to
        ssh_keys: Candidate SSH keys; only those authorized for the cluster are used

    Returns:
        Machine object

    Raises:
        ConfigurationError: If a union is invalid or the providers disagree
    """
    provider_spec = cloud_provider_spec(cluster, node, datacenter)
    os_name, os_payload = _operating_system(node)

    machine = {
        "apiVersion": MACHINE_API_VERSION,
        "kind": "Machine",
        "metadata": {"name": node.name},
        "spec": {
            "metadata": {"name": node.name},
            "providerConfig": {
                "sshPublicKeys": authorized_keys(cluster.name, ssh_keys),
                "cloudProvider": node.spec.cloud.variant(),
                "cloudProviderSpec": provider_spec,
                "operatingSystem": os_name,
                "operatingSystemSpec": os_payload.to_wire(),
            },
            "versions": {"kubelet": node.spec.versions.kubelet},
        },
    }

    logger.debug("machine_compiled", cluster=cluster.name, node=node.name, os=os_name)
    return machine
