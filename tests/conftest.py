"""Pytest configuration and shared fixtures."""

import io
from collections.abc import Callable
from unittest.mock import MagicMock

import pytest
from kubernetes.client.models import (
    V1Deployment,
    V1DeploymentCondition,
    V1DeploymentSpec,
    V1DeploymentStatus,
    V1Job,
    V1JobCondition,
    V1JobStatus,
    V1LabelSelector,
    V1ObjectMeta,
    V1PodTemplateSpec,
)
from rich.console import Console

from meshverify.interfaces.cluster_reader import ClusterReader
from meshverify.interfaces.manifest_renderer import ManifestRenderer, RenderResult
from meshverify.utils.logging import ProgressLogger


class RecordingProgress(ProgressLogger):
    """ProgressLogger that keeps every emitted line."""

    def __init__(self) -> None:
        super().__init__(console=Console(file=io.StringIO(), width=200))
        self.lines: list[str] = []

    def log_and_print(self, message: str) -> None:
        self.lines.append(message)
        super().log_and_print(message)


@pytest.fixture
def progress() -> RecordingProgress:
    """Progress logger that records lines instead of relying on stdout."""
    return RecordingProgress()


@pytest.fixture
def mock_cluster() -> MagicMock:
    """Cluster reader mock; every lookup succeeds unless configured otherwise."""
    cluster = MagicMock(spec=ClusterReader)
    cluster.get_resource.return_value = {}
    cluster.list_istio_operators.return_value = []
    return cluster


@pytest.fixture
def mock_renderer() -> MagicMock:
    """Manifest renderer mock returning an empty manifest."""
    renderer = MagicMock(spec=ManifestRenderer)
    renderer.render.return_value = RenderResult()
    return renderer


@pytest.fixture
def make_deployment() -> Callable[..., V1Deployment]:
    """Factory for live deployment objects."""

    def _make(
        name: str = "istiod",
        namespace: str = "istio-system",
        desired: int | None = 1,
        ready: int | None = 1,
        conditions: list[V1DeploymentCondition] | None = None,
    ) -> V1Deployment:
        return V1Deployment(
            metadata=V1ObjectMeta(name=name, namespace=namespace),
            spec=V1DeploymentSpec(
                replicas=desired,
                selector=V1LabelSelector(match_labels={"app": name}),
                template=V1PodTemplateSpec(),
            ),
            status=V1DeploymentStatus(ready_replicas=ready, conditions=conditions),
        )

    return _make


@pytest.fixture
def make_job() -> Callable[..., V1Job]:
    """Factory for live job objects."""

    def _make(
        name: str = "istio-init",
        namespace: str = "istio-system",
        complete: bool = True,
        failed: bool = False,
    ) -> V1Job:
        conditions = []
        if complete:
            conditions.append(V1JobCondition(type="Complete", status="True"))
        if failed:
            conditions.append(V1JobCondition(type="Failed", status="True"))
        return V1Job(
            metadata=V1ObjectMeta(name=name, namespace=namespace),
            status=V1JobStatus(conditions=conditions or None),
        )

    return _make


def deployment_yaml(name: str, namespace: str | None = "istio-system") -> str:
    """YAML for a minimal Deployment manifest."""
    namespace_line = f"  namespace: {namespace}\n" if namespace else ""
    return f"apiVersion: apps/v1\nkind: Deployment\nmetadata:\n  name: {name}\n{namespace_line}"


def crd_yaml(name: str = "gateways.networking.istio.io") -> str:
    """YAML for a minimal CustomResourceDefinition manifest."""
    return (
        "apiVersion: apiextensions.k8s.io/v1\n"
        "kind: CustomResourceDefinition\n"
        f"metadata:\n  name: {name}\n"
    )


def operator_yaml(name: str = "installed-state", revision: str = "") -> str:
    """YAML for an IstioOperator manifest, with server-populated metadata."""
    return (
        "apiVersion: install.istio.io/v1alpha1\n"
        "kind: IstioOperator\n"
        "metadata:\n"
        f"  name: {name}\n"
        "  namespace: istio-system\n"
        "  creationTimestamp: 2024-01-15T10:30:00Z\n"
        "  managedFields:\n"
        "  - manager: istioctl\n"
        "    time: 2024-01-15T10:30:00Z\n"
        "spec:\n"
        "  profile: default\n"
        f"  revision: '{revision}'\n"
    )
