"""Integration tests for meshverify.

These tests talk to a real Kubernetes cluster and require:
- A kubeconfig (``KUBECONFIG`` or ``~/.kube/config``) or in-cluster credentials
- Read access to namespaces and, optionally, IstioOperators

Tests are marked with @pytest.mark.integration and can be run with:
    pytest tests/integration/ -m integration

To skip integration tests:
    pytest -m "not integration"
"""
