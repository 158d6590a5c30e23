"""Kubernetes scheduler deployment."""

from typing import Any

from hostplane.resources.common import deployment, revision_annotations, secret_volume, volume_mount
from hostplane.resources.context import TemplateContext
from hostplane.resources.names import (
    KUBECONFIG_MOUNT_PATH,
    SCHEDULER,
    SCHEDULER_KUBECONFIG_SECRET,
)

DELEGATED_AUTH_KUBECONFIG_SINCE = "1.12.0"


def flags(context: TemplateContext) -> list[str]:
    kubeconfig = f"{KUBECONFIG_MOUNT_PATH}/kubeconfig"
    args = [f"--kubeconfig={kubeconfig}", "--leader-elect=false"]
    if context.version.at_least(DELEGATED_AUTH_KUBECONFIG_SINCE):
        args += [
            f"--authentication-kubeconfig={kubeconfig}",
            f"--authorization-kubeconfig={kubeconfig}",
        ]
    return args


def deployment_creator(context: TemplateContext) -> dict[str, Any]:
    """Create the scheduler Deployment."""
    container = {
        "name": SCHEDULER,
        "image": context.hyperkube_image(),
        "command": ["/hyperkube", "scheduler"],
        "args": flags(context),
        "resources": context.resources_for(SCHEDULER),
        "volumeMounts": [volume_mount(SCHEDULER_KUBECONFIG_SECRET, KUBECONFIG_MOUNT_PATH)],
    }

    return deployment(
        SCHEDULER,
        context,
        container,
        volumes=[secret_volume(SCHEDULER_KUBECONFIG_SECRET)],
        pod_annotations=revision_annotations(context, secrets=[SCHEDULER_KUBECONFIG_SECRET]),
    )
