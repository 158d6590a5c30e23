"""Kubernetes controller manager deployment."""

from typing import Any

from hostplane.core.providers import OPENSTACK
from hostplane.resources import provider_matrix
from hostplane.resources.common import deployment, revision_annotations, secret_volume, volume_mount
from hostplane.resources.context import TemplateContext
from hostplane.resources.names import (
    CA_CERT_SECRET,
    CA_KEY_SECRET,
    CONTROLLER_MANAGER,
    CONTROLLER_MANAGER_KUBECONFIG_SECRET,
    KUBECONFIG_MOUNT_PATH,
    SERVICE_ACCOUNT_KEY_SECRET,
)

ROTATE_KUBELET_SERVER_CERTIFICATE_SINCE = "1.9.0"
DELEGATED_AUTH_KUBECONFIG_SINCE = "1.12.0"

SECRETS = [
    CONTROLLER_MANAGER_KUBECONFIG_SECRET,
    CA_CERT_SECRET,
    CA_KEY_SECRET,
    SERVICE_ACCOUNT_KEY_SECRET,
]

MOUNT_PATHS = {
    CONTROLLER_MANAGER_KUBECONFIG_SECRET: KUBECONFIG_MOUNT_PATH,
    CA_CERT_SECRET: "/etc/kubernetes/pki/ca",
    CA_KEY_SECRET: "/etc/kubernetes/pki/ca-key",
    SERVICE_ACCOUNT_KEY_SECRET: "/etc/kubernetes/service-account-key",
}


def flags(context: TemplateContext) -> list[str]:
    kubeconfig = f"{KUBECONFIG_MOUNT_PATH}/kubeconfig"
    args = [
        f"--kubeconfig={kubeconfig}",
        f"--service-account-private-key-file={MOUNT_PATHS[SERVICE_ACCOUNT_KEY_SECRET]}/sa.key",
        f"--root-ca-file={MOUNT_PATHS[CA_CERT_SECRET]}/ca.crt",
        f"--cluster-signing-cert-file={MOUNT_PATHS[CA_CERT_SECRET]}/ca.crt",
        f"--cluster-signing-key-file={MOUNT_PATHS[CA_KEY_SECRET]}/ca.key",
        f"--cluster-cidr={context.pod_cidr}",
        "--allocate-node-cidrs=true",
        "--controllers=*,bootstrapsigner,tokencleaner",
        "--use-service-account-credentials=true",
        "--leader-elect=false",
    ]

    if context.version.at_least(ROTATE_KUBELET_SERVER_CERTIFICATE_SINCE):
        args.append("--feature-gates=RotateKubeletServerCertificate=true")

    if context.version.at_least(DELEGATED_AUTH_KUBECONFIG_SINCE):
        args += [
            f"--authentication-kubeconfig={kubeconfig}",
            f"--authorization-kubeconfig={kubeconfig}",
        ]

    args += provider_matrix.cloud_provider_flags(context)
    if context.provider == OPENSTACK:
        args.append("--configure-cloud-routes=false")

    return args


def deployment_creator(context: TemplateContext) -> dict[str, Any]:
    """Create the controller manager Deployment."""
    cloud_volumes, cloud_mounts = provider_matrix.cloud_config_volumes(context)

    container = {
        "name": CONTROLLER_MANAGER,
        "image": context.hyperkube_image(),
        "command": ["/hyperkube", "controller-manager"],
        "args": flags(context),
        "env": provider_matrix.cloud_credentials_env(context),
        "resources": context.resources_for(CONTROLLER_MANAGER),
        "volumeMounts": [volume_mount(name, MOUNT_PATHS[name]) for name in SECRETS] + cloud_mounts,
    }

    annotations = revision_annotations(
        context,
        secrets=SECRETS,
        config_maps=provider_matrix.cloud_config_revisions(context),
    )

    return deployment(
        CONTROLLER_MANAGER,
        context,
        container,
        volumes=[secret_volume(name) for name in SECRETS] + cloud_volumes,
        pod_annotations=annotations,
    )
