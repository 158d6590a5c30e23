"""Kubernetes client for reading fleet objects."""

from typing import Any

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from hostplane.core.exceptions import KubernetesError
from hostplane.utils.logging import get_logger

logger = get_logger(__name__)

CRD_GROUP = "hostplane.io"
CRD_VERSION = "v1"


class KubernetesClient:
    """Kubernetes client wrapper.

    Every read returns plain dicts in Kubernetes JSON shape so callers never
    handle generated model classes.
    """

    def __init__(self, kubeconfig_path: str | None = None, context: str | None = None):
        """Initialize Kubernetes client.

        Args:
            kubeconfig_path: Path to kubeconfig file (optional)
            context: Kubernetes context to use (optional)

        Raises:
            KubernetesError: If no usable configuration is found
        """
        try:
            if kubeconfig_path:
                config.load_kube_config(config_file=kubeconfig_path, context=context)
            else:
                try:
                    config.load_kube_config(context=context)
                except config.ConfigException:
                    config.load_incluster_config()

            self.api_client = client.ApiClient()
            self.core_v1 = client.CoreV1Api(self.api_client)
            self.custom_objects = client.CustomObjectsApi(self.api_client)

            logger.debug("k8s_client_initialized", context=context)

        except config.ConfigException as e:
            logger.error("k8s_client_initialization_failed", error=str(e))
            raise KubernetesError("Failed to initialize Kubernetes client") from e

    def _sanitize(self, obj: Any) -> dict[str, Any]:
        return self.api_client.sanitize_for_serialization(obj)

    def list_clusters(self) -> list[dict[str, Any]]:
        """List all Cluster custom objects.

        Returns:
            List of cluster objects

        Raises:
            KubernetesError: If clusters cannot be retrieved
        """
        try:
            response = self.custom_objects.list_cluster_custom_object(
                group=CRD_GROUP, version=CRD_VERSION, plural="clusters"
            )
            items = response.get("items", [])
            logger.debug("clusters_retrieved", count=len(items))
            return items

        except ApiException as e:
            logger.error("list_clusters_failed", status=e.status, reason=e.reason)
            raise KubernetesError(f"Failed to list clusters: {e.reason}") from e

    def list_seeds(self, namespace: str) -> list[dict[str, Any]]:
        """List Seed custom objects in a namespace.

        Args:
            namespace: Namespace holding the seeds

        Returns:
            List of seed objects

        Raises:
            KubernetesError: If seeds cannot be retrieved
        """
        try:
            response = self.custom_objects.list_namespaced_custom_object(
                group=CRD_GROUP, version=CRD_VERSION, namespace=namespace, plural="seeds"
            )
            items = response.get("items", [])
            logger.debug("seeds_retrieved", namespace=namespace, count=len(items))
            return items

        except ApiException as e:
            logger.error("list_seeds_failed", namespace=namespace, status=e.status, reason=e.reason)
            raise KubernetesError(f"Failed to list seeds in {namespace}: {e.reason}") from e

    def replace_seed(self, namespace: str, name: str, body: dict[str, Any]) -> dict[str, Any]:
        """Replace a Seed custom object.

        Raises:
            KubernetesError: If the seed cannot be written
        """
        try:
            return self.custom_objects.replace_namespaced_custom_object(
                group=CRD_GROUP,
                version=CRD_VERSION,
                namespace=namespace,
                plural="seeds",
                name=name,
                body=body,
            )
        except ApiException as e:
            logger.error("replace_seed_failed", seed=name, status=e.status, reason=e.reason)
            raise KubernetesError(f"Failed to replace seed {name}: {e.reason}") from e

    def list_secrets(self, namespace: str) -> list[dict[str, Any]]:
        """List secrets in a namespace.

        Raises:
            KubernetesError: If secrets cannot be retrieved
        """
        try:
            response = self.core_v1.list_namespaced_secret(namespace=namespace)
            return [self._sanitize(item) for item in response.items]
        except ApiException as e:
            logger.error("list_secrets_failed", namespace=namespace, status=e.status, reason=e.reason)
            raise KubernetesError(f"Failed to list secrets in {namespace}: {e.reason}") from e

    def list_config_maps(self, namespace: str) -> list[dict[str, Any]]:
        """List config maps in a namespace.

        Raises:
            KubernetesError: If config maps cannot be retrieved
        """
        try:
            response = self.core_v1.list_namespaced_config_map(namespace=namespace)
            return [self._sanitize(item) for item in response.items]
        except ApiException as e:
            logger.error(
                "list_config_maps_failed", namespace=namespace, status=e.status, reason=e.reason
            )
            raise KubernetesError(f"Failed to list config maps in {namespace}: {e.reason}") from e

    def list_services(self, namespace: str) -> list[dict[str, Any]]:
        """List services in a namespace.

        Raises:
            KubernetesError: If services cannot be retrieved
        """
        try:
            response = self.core_v1.list_namespaced_service(namespace=namespace)
            return [self._sanitize(item) for item in response.items]
        except ApiException as e:
            logger.error("list_services_failed", namespace=namespace, status=e.status, reason=e.reason)
            raise KubernetesError(f"Failed to list services in {namespace}: {e.reason}") from e
