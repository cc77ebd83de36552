"""Cluster reader interface for read-only resource lookups."""

from abc import ABC, abstractmethod
from typing import Any

from kubernetes.client.models import V1Deployment, V1Job


class ClusterReader(ABC):
    """Abstract interface for one-shot reads against a live cluster.

    Every method is a single blocking call. Implementations must not retry,
    create, update or delete anything.
    """

    @abstractmethod
    def get_deployment(self, name: str, namespace: str) -> V1Deployment:
        """Get a deployment.

        Args:
            name: Deployment name
            namespace: Namespace

        Returns:
            Typed deployment object

        Raises:
            FetchFailedError: If the deployment cannot be retrieved
        """

    @abstractmethod
    def get_job(self, name: str, namespace: str) -> V1Job:
        """Get a job.

        Args:
            name: Job name
            namespace: Namespace

        Returns:
            Typed job object

        Raises:
            FetchFailedError: If the job cannot be retrieved
        """

    @abstractmethod
    def get_resource(
        self,
        api_version: str,
        collection: str,
        name: str,
        namespace: str | None = None,
    ) -> dict[str, Any]:
        """Get any resource by collection name.

        Args:
            api_version: apiVersion of the object (e.g. "v1", "apps/v1")
            collection: Plural resource name (e.g. "configmaps")
            name: Object name
            namespace: Namespace, or None for an unnamespaced lookup

        Returns:
            Unstructured object

        Raises:
            FetchFailedError: If the object cannot be retrieved
        """

    @abstractmethod
    def list_istio_operators(self) -> list[dict[str, Any]]:
        """List IstioOperator objects across all namespaces.

        Returns:
            Unstructured IstioOperator objects in server order

        Raises:
            KubernetesError: If the collection cannot be listed
        """
