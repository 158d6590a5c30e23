"""Cloud provider configuration config map."""

import json
from typing import Any
from urllib.parse import urlparse

from hostplane.core.providers import AWS, AZURE, OPENSTACK, VSPHERE
from hostplane.resources.common import config_map
from hostplane.resources.context import TemplateContext
from hostplane.resources.names import CLOUD_CONFIG_CONFIGMAP

AWS_TEMPLATE = """[global]
zone={zone}
VPC={vpc_id}
kubernetesclustertag={cluster_name}
disablesecuritygroupingress=false
SubnetID={subnet_id}
RouteTableID={route_table_id}
RoleARN={role_name}
"""

OPENSTACK_TEMPLATE = """[Global]
auth-url    = "{auth_url}"
username    = "{username}"
password    = "{password}"
domain-name = "{domain}"
tenant-name = "{tenant}"
region      = "{region}"

[BlockStorage]
ignore-volume-az  = {ignore_volume_az}
trust-device-path = false
bs-version        = "v2"

[LoadBalancer]
manage-security-groups = true
"""

VSPHERE_TEMPLATE = """[Global]
user          = "{username}"
password      = "{password}"
server        = "{server}"
port          = "{port}"
insecure-flag = "{insecure}"
working-dir   = "{cluster_name}"
datacenter    = "{datacenter}"
datastore     = "{datastore}"

[Disk]
scsicontrollertype = pvscsi

[Workspace]
server            = "{server}"
datacenter        = "{datacenter}"
folder            = "{folder}"
default-datastore = "{datastore}"
"""


def _aws(context: TemplateContext) -> str:
    cloud = context.cloud_payload()
    dc = context.datacenter_payload()
    return AWS_TEMPLATE.format(
        zone=cloud.availability_zone or f"{dc.region}{dc.zone_character}",
        vpc_id=cloud.vpc_id,
        cluster_name=context.cluster_name,
        subnet_id=cloud.subnet_id,
        route_table_id=cloud.route_table_id,
        role_name=cloud.role_name,
    )


def _openstack(context: TemplateContext) -> str:
    cloud = context.cloud_payload()
    dc = context.datacenter_payload()
    return OPENSTACK_TEMPLATE.format(
        auth_url=dc.auth_url,
        username=cloud.username,
        password=cloud.password,
        domain=cloud.domain,
        tenant=cloud.tenant,
        region=dc.region,
        ignore_volume_az=str(dc.ignore_volume_az).lower(),
    )


def _vsphere(context: TemplateContext) -> str:
    cloud = context.cloud_payload()
    dc = context.datacenter_payload()
    endpoint = urlparse(dc.endpoint)
    folder = f"{dc.root_path}/{context.cluster_name}" if dc.root_path else context.cluster_name
    return VSPHERE_TEMPLATE.format(
        username=cloud.username,
        password=cloud.password,
        server=endpoint.hostname or dc.endpoint,
        port=endpoint.port or 443,
        insecure="1" if dc.allow_insecure else "0",
        cluster_name=context.cluster_name,
        datacenter=dc.datacenter,
        datastore=dc.datastore,
        folder=folder,
    )


def _azure(context: TemplateContext) -> str:
    cloud = context.cloud_payload()
    dc = context.datacenter_payload()
    config: dict[str, Any] = {
        "cloud": "AZUREPUBLICCLOUD",
        "tenantId": cloud.tenant_id,
        "subscriptionId": cloud.subscription_id,
        "aadClientId": cloud.client_id,
        "aadClientSecret": cloud.client_secret,
        "resourceGroup": cloud.resource_group,
        "location": dc.location,
        "vnetName": cloud.vnet_name,
        "subnetName": cloud.subnet_name,
        "routeTableName": cloud.route_table_name,
        "securityGroupName": cloud.security_group,
        "useInstanceMetadata": False,
    }
    return json.dumps(config, indent=2) + "\n"


RENDERERS = {
    AWS: _aws,
    AZURE: _azure,
    OPENSTACK: _openstack,
    VSPHERE: _vsphere,
}


def cloud_config(context: TemplateContext) -> str:
    """Render the provider's cloud config; empty for providers without one.

    Raises:
        ConfigurationError: If the cluster's or datacenter's provider union is invalid
    """
    renderer = RENDERERS.get(context.provider)
    return renderer(context) if renderer else ""


def config_map_creator(context: TemplateContext) -> dict[str, Any]:
    """Create the cloud-config ConfigMap."""
    return config_map(CLOUD_CONFIG_CONFIGMAP, context, {"config": cloud_config(context)})
