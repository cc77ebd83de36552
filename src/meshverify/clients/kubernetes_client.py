"""Kubernetes client for read-only cluster lookups."""

from typing import Any

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.client.models import V1Deployment, V1Job
from urllib3.exceptions import HTTPError

from meshverify.core.exceptions import FetchFailedError, KubernetesError
from meshverify.core.models import (
    ISTIO_OPERATOR_GROUP,
    ISTIO_OPERATOR_PLURAL,
    ISTIO_OPERATOR_VERSION,
)
from meshverify.interfaces.cluster_reader import ClusterReader
from meshverify.utils.logging import get_logger

logger = get_logger(__name__)


def resource_path(
    api_version: str, collection: str, name: str, namespace: str | None = None
) -> str:
    """Build the REST path of a single object.

    Core group objects ("v1") live under /api, everything else under
    /apis/<group>/<version>.

    Args:
        api_version: apiVersion of the object
        collection: Plural resource name
        name: Object name
        namespace: Namespace, or None for an unnamespaced path

    Returns:
        Absolute API path
    """
    prefix = f"/apis/{api_version}" if "/" in api_version else f"/api/{api_version}"
    if namespace:
        return f"{prefix}/namespaces/{namespace}/{collection}/{name}"
    return f"{prefix}/{collection}/{name}"


def _failure_reason(error: Exception) -> str:
    if isinstance(error, ApiException):
        return f"{error.status} {error.reason}"
    return str(error)


class KubernetesClient(ClusterReader):
    """Kubernetes client wrapper."""

    def __init__(
        self,
        kubeconfig_path: str | None = None,
        context: str | None = None,
        request_timeout: float | None = 30.0,
    ):
        """Initialize Kubernetes client.

        Args:
            kubeconfig_path: Path to kubeconfig file (optional)
            context: Kubernetes context to use (optional)
            request_timeout: Per-request deadline in seconds (optional)
        """
        self.request_timeout = request_timeout

        try:
            if kubeconfig_path:
                config.load_kube_config(config_file=kubeconfig_path, context=context)
            else:
                # Try to load from default location or in-cluster config
                try:
                    config.load_kube_config(context=context)
                except config.ConfigException:
                    config.load_incluster_config()

            self.api_client = client.ApiClient()
            self.apps_v1 = client.AppsV1Api(self.api_client)
            self.batch_v1 = client.BatchV1Api(self.api_client)
            self.custom_objects = client.CustomObjectsApi(self.api_client)

            logger.debug("k8s_client_initialized", context=context)

        except Exception as e:
            logger.error("k8s_client_initialization_failed", error=str(e))
            raise KubernetesError("Failed to initialize Kubernetes client") from e

    def get_deployment(self, name: str, namespace: str) -> V1Deployment:
        """Get a deployment.

        Args:
            name: Deployment name
            namespace: Namespace

        Returns:
            V1Deployment object

        Raises:
            FetchFailedError: If deployment cannot be retrieved
        """
        try:
            logger.debug("getting_deployment", name=name, namespace=namespace)
            deployment = self.apps_v1.read_namespaced_deployment(
                name=name, namespace=namespace, _request_timeout=self.request_timeout
            )
            logger.debug("deployment_retrieved", name=name, namespace=namespace)
            return deployment

        except (ApiException, HTTPError) as e:
            logger.warning(
                "get_deployment_failed",
                name=name,
                namespace=namespace,
                reason=_failure_reason(e),
            )
            raise FetchFailedError(
                f"Failed to get deployment {namespace}/{name}: {_failure_reason(e)}",
                collection="deployments",
                name=name,
                namespace=namespace,
                status=getattr(e, "status", None),
            ) from e

    def get_job(self, name: str, namespace: str) -> V1Job:
        """Get a job.

        Args:
            name: Job name
            namespace: Namespace

        Returns:
            V1Job object

        Raises:
            FetchFailedError: If job cannot be retrieved
        """
        try:
            logger.debug("getting_job", name=name, namespace=namespace)
            job = self.batch_v1.read_namespaced_job(
                name=name, namespace=namespace, _request_timeout=self.request_timeout
            )
            logger.debug("job_retrieved", name=name, namespace=namespace)
            return job

        except (ApiException, HTTPError) as e:
            logger.warning(
                "get_job_failed",
                name=name,
                namespace=namespace,
                reason=_failure_reason(e),
            )
            raise FetchFailedError(
                f"Failed to get job {namespace}/{name}: {_failure_reason(e)}",
                collection="jobs",
                name=name,
                namespace=namespace,
                status=getattr(e, "status", None),
            ) from e

    def get_resource(
        self,
        api_version: str,
        collection: str,
        name: str,
        namespace: str | None = None,
    ) -> dict[str, Any]:
        """Get any resource by collection name.

        Args:
            api_version: apiVersion of the object
            collection: Plural resource name
            name: Object name
            namespace: Namespace, or None for an unnamespaced lookup

        Returns:
            Unstructured object

        Raises:
            FetchFailedError: If the object cannot be retrieved
        """
        path = resource_path(api_version, collection, name, namespace)
        try:
            logger.debug("getting_resource", path=path)
            obj = self.api_client.call_api(
                path,
                "GET",
                header_params={"Accept": "application/json"},
                response_type="object",
                auth_settings=["BearerToken"],
                _return_http_data_only=True,
                _preload_content=True,
                _request_timeout=self.request_timeout,
            )
            logger.debug("resource_retrieved", path=path)
            return obj

        except (ApiException, HTTPError) as e:
            logger.debug("get_resource_failed", path=path, reason=_failure_reason(e))
            raise FetchFailedError(
                f"Failed to get {collection} {name}: {_failure_reason(e)}",
                collection=collection,
                name=name,
                namespace=namespace,
                status=getattr(e, "status", None),
            ) from e

    def list_istio_operators(self) -> list[dict[str, Any]]:
        """List IstioOperator objects across all namespaces.

        Returns:
            Unstructured IstioOperator objects

        Raises:
            KubernetesError: If the collection cannot be listed
        """
        try:
            logger.debug("listing_istio_operators")
            response = self.custom_objects.list_cluster_custom_object(
                ISTIO_OPERATOR_GROUP,
                ISTIO_OPERATOR_VERSION,
                ISTIO_OPERATOR_PLURAL,
                _request_timeout=self.request_timeout,
            )
            items = response.get("items") or []

            logger.info("istio_operators_listed", count=len(items))
            return items

        except (ApiException, HTTPError) as e:
            logger.error("list_istio_operators_failed", reason=_failure_reason(e))
            raise KubernetesError(
                f"Failed to list IstioOperators: {_failure_reason(e)}"
            ) from e
