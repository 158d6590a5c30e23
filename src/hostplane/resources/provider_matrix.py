"""Provider-specific flags, volumes and environment of the control plane."""

from typing import Any

from hostplane.core.providers import (
    AWS,
    AZURE,
    DIGITALOCEAN,
    HETZNER,
    OPENSTACK,
    VSPHERE,
)
from hostplane.resources.common import config_map_volume, env_var, volume_mount
from hostplane.resources.context import TemplateContext
from hostplane.resources.names import CLOUD_CONFIG_CONFIGMAP, CLOUD_CONFIG_MOUNT_PATH

IN_TREE_CLOUD_PROVIDERS = frozenset({AWS, AZURE, OPENSTACK, VSPHERE})


def uses_in_tree_cloud_provider(context: TemplateContext) -> bool:
    """Check whether the control plane runs the in-tree cloud provider.

    Raises:
        ConfigurationError: If the cluster's cloud spec sets zero or several providers
    """
    return context.provider in IN_TREE_CLOUD_PROVIDERS


def cloud_provider_flags(context: TemplateContext) -> list[str]:
    if not uses_in_tree_cloud_provider(context):
        return []
    return [
        f"--cloud-provider={context.provider}",
        f"--cloud-config={CLOUD_CONFIG_MOUNT_PATH}/config",
    ]


def cloud_config_volumes(
    context: TemplateContext,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Get the cloud-config volume and mount, if the provider needs them.

    Returns:
        Tuple of (volumes, volume mounts)
    """
    if not uses_in_tree_cloud_provider(context):
        return [], []
    return (
        [config_map_volume(CLOUD_CONFIG_CONFIGMAP)],
        [volume_mount(CLOUD_CONFIG_CONFIGMAP, CLOUD_CONFIG_MOUNT_PATH)],
    )


def cloud_config_revisions(context: TemplateContext) -> list[str]:
    """Names of config maps whose revision the pod template tracks."""
    return [CLOUD_CONFIG_CONFIGMAP] if uses_in_tree_cloud_provider(context) else []


def cloud_credentials_env(context: TemplateContext) -> list[dict[str, str]]:
    """Credentials the in-tree cloud provider reads from the environment.

    Only AWS reads its credentials from the environment; other in-tree
    providers take them from the cloud config.
    """
    if context.provider != AWS:
        return []
    aws = context.cloud_payload()
    return [
        env_var("AWS_ACCESS_KEY_ID", aws.access_key_id),
        env_var("AWS_SECRET_ACCESS_KEY", aws.secret_access_key),
    ]


def machine_controller_env(context: TemplateContext) -> list[dict[str, str]]:
    """Provider credentials handed to the machine controller.

    Raises:
        ConfigurationError: If the cluster and datacenter providers disagree
    """
    provider = context.provider
    cloud = context.cloud_payload()

    if provider == DIGITALOCEAN:
        return [env_var("DO_TOKEN", cloud.token)]
    if provider == AWS:
        return [
            env_var("AWS_ACCESS_KEY_ID", cloud.access_key_id),
            env_var("AWS_SECRET_ACCESS_KEY", cloud.secret_access_key),
        ]
    if provider == OPENSTACK:
        dc = context.datacenter_payload()
        return [
            env_var("OS_AUTH_URL", dc.auth_url),
            env_var("OS_USER_NAME", cloud.username),
            env_var("OS_PASSWORD", cloud.password),
            env_var("OS_DOMAIN_NAME", cloud.domain),
            env_var("OS_TENANT_NAME", cloud.tenant),
        ]
    if provider == AZURE:
        return [
            env_var("AZURE_CLIENT_ID", cloud.client_id),
            env_var("AZURE_CLIENT_SECRET", cloud.client_secret),
            env_var("AZURE_TENANT_ID", cloud.tenant_id),
            env_var("AZURE_SUBSCRIPTION_ID", cloud.subscription_id),
        ]
    if provider == HETZNER:
        return [env_var("HZ_TOKEN", cloud.token)]
    if provider == VSPHERE:
        dc = context.datacenter_payload()
        return [
            env_var("VSPHERE_ADDRESS", dc.endpoint),
            env_var("VSPHERE_USERNAME", cloud.username),
            env_var("VSPHERE_PASSWORD", cloud.password),
        ]
    return []
