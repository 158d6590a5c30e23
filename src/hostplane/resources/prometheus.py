"""Prometheus configuration for monitoring a hosted control plane."""

from typing import Any

from hostplane.resources.common import config_map
from hostplane.resources.context import TemplateContext
from hostplane.resources.names import (
    APISERVER_INTERNAL_SERVICE,
    ETCD_CLIENT_SERVICE,
    MACHINE_CONTROLLER,
    PROMETHEUS_CONFIGMAP,
)
from hostplane.resources.serialize import to_yaml

SCRAPE_INTERVAL = "30s"


def _pod_job(name: str, app: str, context: TemplateContext) -> dict[str, Any]:
    return {
        "job_name": name,
        "kubernetes_sd_configs": [{"role": "pod", "namespaces": {"names": [context.namespace]}}],
        "relabel_configs": [
            {
                "source_labels": ["__meta_kubernetes_pod_label_app"],
                "regex": app,
                "action": "keep",
            },
        ],
    }


def prometheus_config(context: TemplateContext) -> dict[str, Any]:
    """Build the Prometheus configuration for the cluster's namespace."""
    namespace = context.namespace
    return {
        "global": {
            "scrape_interval": SCRAPE_INTERVAL,
            "external_labels": {"cluster": context.cluster_name},
        },
        "scrape_configs": [
            {
                "job_name": "etcd",
                "static_configs": [
                    {"targets": [f"{ETCD_CLIENT_SERVICE}.{namespace}.svc.cluster.local:2379"]},
                ],
            },
            {
                "job_name": "apiserver",
                "scheme": "https",
                "tls_config": {"insecure_skip_verify": True},
                "static_configs": [
                    {
                        "targets": [
                            f"{APISERVER_INTERNAL_SERVICE}.{namespace}.svc.cluster.local:443"
                        ]
                    },
                ],
            },
            _pod_job("controller-manager", "controller-manager", context),
            _pod_job("scheduler", "scheduler", context),
            _pod_job(MACHINE_CONTROLLER, MACHINE_CONTROLLER, context),
        ],
    }


def config_map_creator(context: TemplateContext) -> dict[str, Any]:
    """Create the Prometheus ConfigMap."""
    return config_map(
        PROMETHEUS_CONFIGMAP, context, {"prometheus.yaml": to_yaml(prometheus_config(context))}
    )
