"""Building blocks shared by the resource creators."""

from collections.abc import Sequence
from typing import Any

from hostplane.resources.context import TemplateContext
from hostplane.resources.names import CLUSTER_API_VERSION, CLUSTER_KIND


def base_labels(app: str, context: TemplateContext) -> dict[str, str]:
    return {"app": app, "cluster": context.cluster_name}


def object_meta(
    name: str,
    context: TemplateContext,
    labels: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Build object metadata owned by the cluster.

    Args:
        name: Object name
        context: Template context
        labels: Object labels (optional)

    Returns:
        Metadata dict with an owner reference to the cluster
    """
    metadata: dict[str, Any] = {
        "name": name,
        "namespace": context.namespace,
        "ownerReferences": [
            {
                "apiVersion": CLUSTER_API_VERSION,
                "kind": CLUSTER_KIND,
                "name": context.cluster_name,
                "uid": context.cluster.uid,
                "controller": True,
                "blockOwnerDeletion": True,
            }
        ],
    }
    if labels:
        metadata["labels"] = dict(labels)
    return metadata


def revision_annotations(
    context: TemplateContext,
    secrets: Sequence[str] = (),
    config_maps: Sequence[str] = (),
) -> dict[str, str]:
    """Pod annotations carrying the revisions of mounted secrets and config maps.

    A changed secret or config map changes the pod template and rolls the
    deployment.

    Raises:
        PreconditionError: If a referenced object is missing from the snapshot
    """
    annotations = {}
    for name in secrets:
        annotations[f"{name}-secret-revision"] = context.secret_revision(name)
    for name in config_maps:
        annotations[f"{name}-configmap-revision"] = context.config_map_revision(name)
    return annotations


def secret_volume(name: str) -> dict[str, Any]:
    return {"name": name, "secret": {"secretName": name, "defaultMode": 420}}


def config_map_volume(name: str) -> dict[str, Any]:
    return {"name": name, "configMap": {"name": name, "defaultMode": 420}}


def volume_mount(name: str, path: str) -> dict[str, Any]:
    return {"name": name, "mountPath": path, "readOnly": True}


def env_var(name: str, value: str) -> dict[str, str]:
    return {"name": name, "value": value}


def deployment(
    name: str,
    context: TemplateContext,
    container: dict[str, Any],
    volumes: list[dict[str, Any]],
    pod_annotations: dict[str, str],
    replicas: int = 1,
) -> dict[str, Any]:
    """Wrap a single container into a Deployment.

    Args:
        name: Deployment and app label name
        context: Template context
        container: Container spec
        volumes: Pod volumes
        pod_annotations: Pod template annotations
        replicas: Replica count

    Returns:
        Deployment object
    """
    labels = base_labels(name, context)
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": object_meta(name, context, labels),
        "spec": {
            "replicas": replicas,
            "selector": {"matchLabels": dict(labels)},
            "template": {
                "metadata": {"labels": dict(labels), "annotations": pod_annotations},
                "spec": {
                    "containers": [container],
                    "volumes": volumes,
                },
            },
        },
    }


def config_map(name: str, context: TemplateContext, data: dict[str, str]) -> dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": object_meta(name, context, base_labels(name, context)),
        "data": data,
    }


def service(
    name: str,
    context: TemplateContext,
    service_type: str,
    ports: list[dict[str, Any]],
    selector: dict[str, str],
) -> dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": object_meta(name, context, base_labels(name, context)),
        "spec": {
            "type": service_type,
            "ports": ports,
            "selector": selector,
        },
    }
