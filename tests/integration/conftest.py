"""Integration test fixtures and configuration."""

import os
from pathlib import Path

import pytest
from kubernetes.config.config_exception import ConfigException

from meshverify.clients.kubernetes_client import KubernetesClient
from meshverify.core.exceptions import KubernetesError


@pytest.fixture
def skip_if_no_kubeconfig():
    """Skip test if kubeconfig is not available."""
    kubeconfig_path = os.getenv("KUBECONFIG", str(Path("~/.kube/config").expanduser()))
    if not Path(kubeconfig_path).exists():
        pytest.skip(
            "Kubeconfig not found. Set KUBECONFIG environment variable or "
            "ensure ~/.kube/config exists."
        )


@pytest.fixture
def k8s_client(skip_if_no_kubeconfig) -> KubernetesClient:
    """Create Kubernetes client for integration tests."""
    context = os.getenv("K8S_TEST_CONTEXT")  # Optional: use specific context
    try:
        return KubernetesClient(context=context, request_timeout=10)
    except (ConfigException, KubernetesError) as e:
        pytest.skip(f"Failed to initialize Kubernetes client: {e}")
