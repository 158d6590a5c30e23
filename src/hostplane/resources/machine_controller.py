"""Machine controller deployment."""

from typing import Any

from hostplane.resources import provider_matrix
from hostplane.resources.common import deployment, revision_annotations, secret_volume, volume_mount
from hostplane.resources.context import TemplateContext
from hostplane.resources.names import (
    KUBECONFIG_MOUNT_PATH,
    MACHINE_CONTROLLER,
    MACHINE_CONTROLLER_KUBECONFIG_SECRET,
)


def deployment_creator(context: TemplateContext) -> dict[str, Any]:
    """Create the machine controller Deployment.

    The controller provisions worker machines and therefore carries the
    cluster's provider credentials in its environment.
    """
    container = {
        "name": MACHINE_CONTROLLER,
        "image": context.machine_controller_image(),
        "command": [
            "/usr/local/bin/machine-controller",
            "-kubeconfig",
            f"{KUBECONFIG_MOUNT_PATH}/kubeconfig",
            "-logtostderr",
            "-v",
            "4",
            "-cluster-dns",
            context.cluster_dns_ip,
            "-internal-listen-address",
            "0.0.0.0:8085",
        ],
        "env": provider_matrix.machine_controller_env(context),
        "resources": context.resources_for(MACHINE_CONTROLLER),
        "volumeMounts": [volume_mount(MACHINE_CONTROLLER_KUBECONFIG_SECRET, KUBECONFIG_MOUNT_PATH)],
    }

    return deployment(
        MACHINE_CONTROLLER,
        context,
        container,
        volumes=[secret_volume(MACHINE_CONTROLLER_KUBECONFIG_SECRET)],
        pod_annotations=revision_annotations(
            context, secrets=[MACHINE_CONTROLLER_KUBECONFIG_SECRET]
        ),
    )
