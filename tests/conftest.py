"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from hostplane.adapters.memory import InMemoryObjectView
from hostplane.core.models import (
    Cluster,
    ClusterAddress,
    ClusterSpec,
    ClusterStatus,
    Datacenter,
    Seed,
    User,
)
from hostplane.core.providers import CloudSpec, DatacenterSpec
from hostplane.resources.context import TemplateContext

CLUSTER_NAME = "de-test-01"
CLUSTER_UID = "1234567890"
CLUSTER_NAMESPACE = "cluster-de-test-01"

# Cluster credentials per provider
CLUSTER_CLOUD: dict[str, dict[str, Any]] = {
    "aws": {
        "access_key_id": "aws-access-key-id",
        "secret_access_key": "aws-secret-access-key",
        "vpc_id": "vpc-819f62e9",
        "subnet_id": "subnet-2bff4f43",
        "role_name": "kubernetes-worker",
        "route_table_id": "rtb-3d1c2f43",
        "instance_profile_name": "kubernetes-worker-profile",
        "security_group_id": "sg-2f4e9a11",
    },
    "azure": {
        "tenant_id": "azure-tenant-id",
        "subscription_id": "azure-subscription-id",
        "client_id": "azure-client-id",
        "client_secret": "azure-client-secret",
        "resource_group": "cluster-de-test-01",
        "vnet_name": "cluster-de-test-01",
        "subnet_name": "cluster-de-test-01",
        "route_table_name": "cluster-de-test-01",
        "security_group": "cluster-de-test-01",
    },
    "bringyourown": {},
    "digitalocean": {"token": "digitalocean-token"},
    "hetzner": {"token": "hetzner-token"},
    "openstack": {
        "username": "os-user",
        "password": "os-password",
        "tenant": "os-tenant",
        "domain": "os-domain",
        "network": "kubermatic-network",
        "security_groups": "kubermatic-sg",
        "floating_ip_pool": "ext-net",
        "subnet_id": "subnet-1",
    },
    "vsphere": {"username": "vs-user", "password": "vs-password"},
}

# Datacenter name and provider metadata per provider
DATACENTERS: dict[str, tuple[str, dict[str, Any]]] = {
    "aws": ("aws-eu-central-1a", {"region": "eu-central-1", "zone_character": "a", "ami": "ami-0f1e2d"}),
    "azure": ("azure-westeurope", {"location": "westeurope"}),
    "bringyourown": ("byo-1", {}),
    "digitalocean": ("do-fra1", {"region": "fra1"}),
    "fake": ("fake-dc", {"fake_property": "fake"}),
    "hetzner": ("hetzner-fsn1", {"datacenter": "fsn1-dc8", "location": "fsn1"}),
    "openstack": (
        "syseleven-dbl1",
        {"auth_url": "https://api.cbk.cloud.syseleven.net:5000/v3", "availability_zone": "dbl1", "region": "dbl"},
    ),
    "vsphere": (
        "vsphere-ger",
        {
            "endpoint": "https://vcenter.example.com",
            "datacenter": "Datacenter",
            "datastore": "datastore1",
            "cluster": "cl-1",
            "root_path": "/Datacenter/vm/kubermatic",
        },
    ),
}

SECRET_REVISIONS = {
    "tokens": "1001",
    "service-account-key": "1002",
    "ca-cert": "1003",
    "ca-key": "1004",
    "apiserver-tls": "1005",
    "kubelet-client-certificates": "1006",
    "controllermanager-kubeconfig": "1007",
    "scheduler-kubeconfig": "1008",
    "machinecontroller-kubeconfig": "1009",
}

CLOUD_CONFIG_REVISION = "123456"
APISERVER_NODE_PORT = 30000


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--update-golden",
        action="store_true",
        default=False,
        help="Rewrite golden fixtures from the current compiler output",
    )


@pytest.fixture
def update_golden(request: pytest.FixtureRequest) -> bool:
    return bool(request.config.getoption("--update-golden"))


def build_cluster(provider: str = "digitalocean", version: str = "1.9.0", **updates: Any) -> Cluster:
    """Build a cluster bound to the provider's test datacenter."""
    dc_name = DATACENTERS[provider][0]
    cluster = Cluster(
        name=CLUSTER_NAME,
        uid=CLUSTER_UID,
        spec=ClusterSpec(
            cloud=CloudSpec.for_datacenter(dc_name, provider, CLUSTER_CLOUD[provider]),
            version=version,
        ),
        address=ClusterAddress(
            external_name="jh8j81chn.europe-west3-c.dev.kubermatic.io",
            ip="35.198.93.90",
            admin_token="6hzr76.u8txpkk4vhgmtgdp",
        ),
        status=ClusterStatus(namespace_name=CLUSTER_NAMESPACE),
    )
    return cluster.model_copy(update=updates) if updates else cluster


def build_datacenter(provider: str = "digitalocean", **updates: Any) -> Datacenter:
    """Build the provider's test datacenter."""
    datacenter = Datacenter(
        country="DE",
        location="Frankfurt",
        spec=DatacenterSpec.of(provider, DATACENTERS[provider][1]),
    )
    return datacenter.model_copy(update=updates) if updates else datacenter


def snapshot_secrets(namespace: str = CLUSTER_NAMESPACE) -> list[dict[str, Any]]:
    return [
        {
            "apiVersion": "v1",
            "kind": "Secret",
            "metadata": {"name": name, "namespace": namespace, "resourceVersion": revision},
        }
        for name, revision in SECRET_REVISIONS.items()
    ]


def snapshot_config_maps(namespace: str = CLUSTER_NAMESPACE) -> list[dict[str, Any]]:
    return [
        {
            "apiVersion": "v1",
            "kind": "ConfigMap",
            "metadata": {
                "name": "cloud-config",
                "namespace": namespace,
                "resourceVersion": CLOUD_CONFIG_REVISION,
            },
        }
    ]


def snapshot_services(namespace: str = CLUSTER_NAMESPACE) -> list[dict[str, Any]]:
    return [
        {
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": {"name": "apiserver-external", "namespace": namespace},
            "spec": {
                "type": "NodePort",
                "ports": [
                    {
                        "name": "secure",
                        "port": 443,
                        "protocol": "TCP",
                        "targetPort": 6443,
                        "nodePort": APISERVER_NODE_PORT,
                    }
                ],
            },
        }
    ]


def build_context(
    provider: str = "digitalocean",
    version: str = "1.9.0",
    *,
    cluster: Cluster | None = None,
    datacenter: Datacenter | None = None,
    secrets: list[dict[str, Any]] | None = None,
    config_maps: list[dict[str, Any]] | None = None,
    services: list[dict[str, Any]] | None = None,
) -> TemplateContext:
    """Build a template context with a complete namespace snapshot."""
    return TemplateContext(
        cluster or build_cluster(provider, version),
        datacenter or build_datacenter(provider),
        InMemoryObjectView(snapshot_secrets() if secrets is None else secrets),
        InMemoryObjectView(snapshot_config_maps() if config_maps is None else config_maps),
        InMemoryObjectView(snapshot_services() if services is None else services),
    )


@pytest.fixture
def make_cluster() -> Callable[..., Cluster]:
    """Factory for test clusters."""
    return build_cluster


@pytest.fixture
def make_datacenter() -> Callable[..., Datacenter]:
    """Factory for test datacenters."""
    return build_datacenter


@pytest.fixture
def make_context() -> Callable[..., TemplateContext]:
    """Factory for template contexts with a complete namespace snapshot."""
    return build_context


@pytest.fixture
def sample_context() -> TemplateContext:
    """Provide a DigitalOcean 1.9.0 template context."""
    return build_context()


@pytest.fixture
def make_seed() -> Callable[..., Seed]:
    """Factory for seeds holding fake-provider datacenters."""

    def _make(name: str, *datacenters: str, namespace: str = "hostplane") -> Seed:
        return Seed(
            name=name,
            namespace=namespace,
            datacenters={dc: Datacenter(spec=DatacenterSpec.of("fake")) for dc in datacenters},
        )

    return _make


@pytest.fixture
def cluster_in() -> Callable[[str, str], Cluster]:
    """Factory for clusters referencing a datacenter by name."""

    def _make(name: str, datacenter: str) -> Cluster:
        return Cluster(name=name, spec=ClusterSpec(cloud=CloudSpec.for_datacenter(datacenter, "fake")))

    return _make


@pytest.fixture
def regular_user() -> User:
    return User(name="Bob", email="bob@acme.com")


@pytest.fixture
def admin_user() -> User:
    return User(name="Admin", email="admin@acme.com", is_admin=True)


@pytest.fixture
def mock_kubernetes_client() -> MagicMock:
    """Mock KubernetesClient for adapter tests."""
    return MagicMock()


@pytest.fixture
def namespace_snapshot() -> list[dict[str, Any]]:
    """Secrets, config maps and services of the test cluster's namespace."""
    return snapshot_secrets() + snapshot_config_maps() + snapshot_services()
