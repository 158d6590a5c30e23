"""Kubernetes API server deployment and services."""

from typing import Any

from hostplane.resources import provider_matrix
from hostplane.resources.common import (
    deployment,
    revision_annotations,
    secret_volume,
    service,
    volume_mount,
)
from hostplane.resources.context import TemplateContext
from hostplane.resources.names import (
    APISERVER,
    APISERVER_EXTERNAL_SERVICE,
    APISERVER_INTERNAL_SERVICE,
    APISERVER_SECURE_PORT,
    APISERVER_TLS_SECRET,
    CA_CERT_SECRET,
    KUBELET_CLIENT_CERTIFICATES_SECRET,
    SERVICE_ACCOUNT_KEY_SECRET,
    TOKENS_SECRET,
)

# Admission configuration was renamed in 1.10
ENABLE_ADMISSION_PLUGINS_SINCE = "1.10.0"
WEBHOOK_ADMISSION_SINCE = "1.9.0"
INSECURE_PORT_DISABLED_SINCE = "1.10.0"

SECRETS = [
    TOKENS_SECRET,
    APISERVER_TLS_SECRET,
    CA_CERT_SECRET,
    SERVICE_ACCOUNT_KEY_SECRET,
    KUBELET_CLIENT_CERTIFICATES_SECRET,
]

MOUNT_PATHS = {
    TOKENS_SECRET: "/etc/kubernetes/tokens",
    APISERVER_TLS_SECRET: "/etc/kubernetes/tls",
    CA_CERT_SECRET: "/etc/kubernetes/pki/ca",
    SERVICE_ACCOUNT_KEY_SECRET: "/etc/kubernetes/service-account-key",
    KUBELET_CLIENT_CERTIFICATES_SECRET: "/etc/kubernetes/kubelet",
}


def admission_plugins(context: TemplateContext) -> list[str]:
    """Get the ordered admission plugins for the cluster's version."""
    plugins = [
        "NamespaceLifecycle",
        "LimitRanger",
        "ServiceAccount",
        "DefaultStorageClass",
        "DefaultTolerationSeconds",
        "NodeRestriction",
    ]
    if context.version.at_least(WEBHOOK_ADMISSION_SINCE):
        plugins += ["MutatingAdmissionWebhook", "ValidatingAdmissionWebhook"]
    if context.datacenter.enforce_pod_security_policy:
        plugins.append("PodSecurityPolicy")
    plugins.append("ResourceQuota")
    return plugins


def flags(context: TemplateContext) -> list[str]:
    """Build the API server command line.

    Raises:
        PreconditionError: If the external service has no node port yet
    """
    args = [
        f"--advertise-address={context.address_ip}",
        f"--secure-port={APISERVER_SECURE_PORT}",
        f"--kubernetes-service-node-port={context.apiserver_external_node_port()}",
        f"--etcd-servers={context.etcd_endpoint()}",
        "--storage-backend=etcd3",
        "--allow-privileged",
        f"--service-cluster-ip-range={context.service_cidr}",
        "--service-node-port-range=30000-32767",
        "--authorization-mode=Node,RBAC",
        f"--token-auth-file={MOUNT_PATHS[TOKENS_SECRET]}/tokens.csv",
        f"--tls-cert-file={MOUNT_PATHS[APISERVER_TLS_SECRET]}/apiserver-tls.crt",
        f"--tls-private-key-file={MOUNT_PATHS[APISERVER_TLS_SECRET]}/apiserver-tls.key",
        f"--client-ca-file={MOUNT_PATHS[CA_CERT_SECRET]}/ca.crt",
        f"--service-account-key-file={MOUNT_PATHS[SERVICE_ACCOUNT_KEY_SECRET]}/sa.key",
        f"--kubelet-client-certificate={MOUNT_PATHS[KUBELET_CLIENT_CERTIFICATES_SECRET]}/kubelet-client.crt",
        f"--kubelet-client-key={MOUNT_PATHS[KUBELET_CLIENT_CERTIFICATES_SECRET]}/kubelet-client.key",
        f"--kubelet-certificate-authority={MOUNT_PATHS[CA_CERT_SECRET]}/ca.crt",
        "--kubelet-preferred-address-types=ExternalIP,InternalIP",
    ]

    plugins = ",".join(admission_plugins(context))
    if context.version.at_least(ENABLE_ADMISSION_PLUGINS_SINCE):
        args.append(f"--enable-admission-plugins={plugins}")
    else:
        args.append(f"--admission-control={plugins}")

    if context.version.at_least(INSECURE_PORT_DISABLED_SINCE):
        args.append("--insecure-port=0")
    else:
        args += ["--insecure-bind-address=0.0.0.0", "--insecure-port=8080"]

    args += provider_matrix.cloud_provider_flags(context)
    return args


def deployment_creator(context: TemplateContext) -> dict[str, Any]:
    """Create the API server Deployment."""
    cloud_volumes, cloud_mounts = provider_matrix.cloud_config_volumes(context)

    container = {
        "name": APISERVER,
        "image": context.hyperkube_image(),
        "command": ["/hyperkube", "apiserver"],
        "args": flags(context),
        "env": provider_matrix.cloud_credentials_env(context),
        "ports": [
            {"name": "https", "containerPort": APISERVER_SECURE_PORT, "protocol": "TCP"},
        ],
        "resources": context.resources_for(APISERVER),
        "volumeMounts": [volume_mount(name, MOUNT_PATHS[name]) for name in SECRETS] + cloud_mounts,
    }

    annotations = revision_annotations(
        context,
        secrets=SECRETS,
        config_maps=provider_matrix.cloud_config_revisions(context),
    )

    return deployment(
        APISERVER,
        context,
        container,
        volumes=[secret_volume(name) for name in SECRETS] + cloud_volumes,
        pod_annotations=annotations,
        replicas=context.config.compiler.apiserver_replicas,
    )


def _secure_port() -> dict[str, Any]:
    return {"name": "secure", "port": 443, "protocol": "TCP", "targetPort": APISERVER_SECURE_PORT}


def internal_service_creator(context: TemplateContext) -> dict[str, Any]:
    """Create the in-namespace API server Service."""
    return service(
        APISERVER_INTERNAL_SERVICE,
        context,
        "ClusterIP",
        ports=[_secure_port()],
        selector={"app": APISERVER},
    )


def external_service_creator(context: TemplateContext) -> dict[str, Any]:
    """Create the NodePort Service exposing the API server to tenants.

    The node port is allocated by the API server on first creation and
    carried over from the existing object afterwards.
    """
    return service(
        APISERVER_EXTERNAL_SERVICE,
        context,
        "NodePort",
        ports=[_secure_port()],
        selector={"app": APISERVER},
    )
