"""End-to-end tests for StatusVerifier with a mocked cluster and renderer."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from conftest import crd_yaml, deployment_yaml, operator_yaml
from meshverify.core.config import VerifierConfig
from meshverify.core.exceptions import (
    InstallationFailedError,
    InstallationVerificationFailedError,
    ManifestLoadError,
    NoInstallationFoundError,
    NotReadyError,
    OperatorLookupError,
)
from meshverify.core.models import IstioOperator
from meshverify.interfaces.manifest_renderer import RenderResult
from meshverify.verifier import (
    ManifestFilesSource,
    OperatorSource,
    RevisionSource,
    StatusVerifier,
)


@pytest.fixture
def verifier(mock_cluster: MagicMock, mock_renderer: MagicMock, progress) -> StatusVerifier:
    """StatusVerifier wired to mocks."""
    return StatusVerifier(mock_cluster, mock_renderer, progress=progress)


def _write(tmp_path: Path, name: str, text: str) -> str:
    path = tmp_path / name
    path.write_text(text)
    return str(path)


class TestManifestFiles:
    """Tests for verifying manifest files."""

    def test_healthy_gateway(
        self, verifier, mock_cluster, make_deployment, progress, tmp_path
    ) -> None:
        """Test a single ready control-plane deployment verifies successfully."""
        mock_cluster.get_deployment.return_value = make_deployment(
            "istio-ingressgateway-xyz", desired=3, ready=3
        )
        path = _write(tmp_path, "gw.yaml", deployment_yaml("istio-ingressgateway-xyz"))

        verifier.verify(ManifestFilesSource(filenames=[path]))

        assert "Checked 1 Istio Deployments" in progress.lines
        assert progress.lines[-1] == "✔ Istio is installed and verified successfully"

    def test_only_deployment_unready(
        self, verifier, mock_cluster, make_deployment, tmp_path
    ) -> None:
        """Test an unready sole deployment reports no installation."""
        mock_cluster.get_deployment.return_value = make_deployment("istiod", desired=3, ready=1)
        path = _write(tmp_path, "cp.yaml", deployment_yaml("istiod"))

        with pytest.raises(NoInstallationFoundError):
            verifier.verify(ManifestFilesSource(filenames=[path]))

    def test_unready_after_healthy_deployment(
        self, verifier, mock_cluster, make_deployment, tmp_path
    ) -> None:
        """Test an unready deployment after a healthy one is a generic failure."""
        mock_cluster.get_deployment.side_effect = [
            make_deployment("istiod"),
            make_deployment("istio-ingressgateway", desired=3, ready=1),
        ]
        path = _write(
            tmp_path,
            "cp.yaml",
            deployment_yaml("istiod") + "---\n" + deployment_yaml("istio-ingressgateway"),
        )

        with pytest.raises(InstallationFailedError) as exc_info:
            verifier.verify(ManifestFilesSource(filenames=[path]))

        cause = exc_info.value.cause
        assert isinstance(cause, InstallationVerificationFailedError)
        assert isinstance(cause.reason, NotReadyError)
        assert cause.label == path

    def test_label_joins_filenames(
        self, verifier, mock_cluster, make_deployment, tmp_path
    ) -> None:
        """Test the label of a multi-file walk is the comma-joined file list."""
        first = _write(tmp_path, "a.yaml", deployment_yaml("istiod"))
        second = _write(tmp_path, "b.yaml", deployment_yaml("istio-eastwestgateway"))
        mock_cluster.get_deployment.return_value = make_deployment()

        with patch.object(verifier.walker, "walk", wraps=verifier.walker.walk) as walk:
            verifier.verify(ManifestFilesSource(filenames=[first, second]))

        assert walk.call_args[0][1] == f"{first},{second}"

    def test_numeric_deployment_name(
        self, verifier, mock_cluster, make_deployment, tmp_path
    ) -> None:
        """Test an unquoted numeric name is looked up as a string."""
        mock_cluster.get_deployment.return_value = make_deployment("123")
        path = _write(
            tmp_path,
            "num.yaml",
            "apiVersion: apps/v1\nkind: Deployment\nmetadata:\n  name: 123\n"
            "  namespace: istio-system\n",
        )

        with pytest.raises(NoInstallationFoundError):
            verifier.verify(ManifestFilesSource(filenames=[path]))

        mock_cluster.get_deployment.assert_called_once_with(name="123", namespace="istio-system")

    def test_malformed_metadata(self, verifier, tmp_path) -> None:
        """Test scalar metadata fails with ManifestLoadError before any walk."""
        path = _write(tmp_path, "bad.yaml", "kind: ConfigMap\nmetadata: oops\n")

        with pytest.raises(ManifestLoadError, match="metadata must be a mapping"):
            verifier.verify(ManifestFilesSource(filenames=[path]))

    def test_unreadable_manifest(self, verifier, tmp_path) -> None:
        """Test manifest load errors are raised before any walk."""
        with pytest.raises(ManifestLoadError):
            verifier.verify(ManifestFilesSource(filenames=[str(tmp_path / "nope.yaml")]))

    def test_crd_and_nested_operator(
        self, verifier, mock_cluster, mock_renderer, make_deployment, progress, tmp_path
    ) -> None:
        """Test a CRD plus an IstioOperator expanding to one healthy deployment."""
        mock_renderer.render.return_value = RenderResult(
            manifests={"Pilot": [deployment_yaml("istiod")]}
        )
        mock_cluster.get_deployment.return_value = make_deployment("istiod")
        path = _write(tmp_path, "install.yaml", crd_yaml() + "---\n" + operator_yaml())

        verifier.verify(ManifestFilesSource(filenames=[path]))

        assert "Checked 1 custom resource definitions" in progress.lines
        assert "Checked 1 Istio Deployments" in progress.lines
        assert progress.lines[-1] == "✔ Istio is installed and verified successfully"
        mock_cluster.list_istio_operators.assert_not_called()


class TestOperatorSource:
    """Tests for verifying an already resolved IstioOperator."""

    def test_resolved_operator(
        self, verifier, mock_cluster, mock_renderer, make_deployment
    ) -> None:
        """Test the operator is rendered and labeled by name."""
        operator = IstioOperator.from_yaml(operator_yaml())
        mock_renderer.render.return_value = RenderResult(
            manifests={"Pilot": [deployment_yaml("istiod")], "Base": [crd_yaml()]}
        )
        mock_cluster.get_deployment.return_value = make_deployment("istiod")

        verifier.verify(OperatorSource(operator=operator))

        mock_renderer.render.assert_called_once_with(operator)

    def test_render_failure(self, verifier, mock_renderer) -> None:
        """Test render errors with no deployments report no installation."""
        mock_renderer.render.return_value = RenderResult(errors=["unknown profile"])

        with pytest.raises(NoInstallationFoundError):
            verifier.verify(OperatorSource(operator=IstioOperator.from_yaml(operator_yaml())))


class TestRevisionSource:
    """Tests for verifying the in-cluster IstioOperator of a revision."""

    def test_revision_lookup_and_override(
        self, mock_cluster, mock_renderer, make_deployment, progress
    ) -> None:
        """Test the matching operator is rendered with the manifests override."""
        mock_cluster.list_istio_operators.return_value = [
            yaml.safe_load(operator_yaml("installed-state", "")),
            yaml.safe_load(operator_yaml("installed-state-canary", "canary")),
        ]
        mock_renderer.render.return_value = RenderResult(
            manifests={"Pilot": [deployment_yaml("istiod-canary")]}
        )
        mock_cluster.get_deployment.return_value = make_deployment("istiod-canary")
        config = VerifierConfig(manifests_path="/opt/istio/manifests")
        verifier = StatusVerifier(mock_cluster, mock_renderer, progress=progress, config=config)

        verifier.verify(RevisionSource(revision="canary"))

        operator = mock_renderer.render.call_args[0][0]
        assert operator.name == "installed-state-canary"
        assert operator.spec.install_package_path == "/opt/istio/manifests"

    def test_revision_not_found(self, verifier, mock_cluster, mock_renderer) -> None:
        """Test a missing revision fails before anything is rendered."""
        mock_cluster.list_istio_operators.return_value = [
            yaml.safe_load(operator_yaml("installed-state", ""))
        ]

        with pytest.raises(OperatorLookupError, match="Use --filename") as exc_info:
            verifier.verify(RevisionSource(revision="canary"))

        assert 'revision "canary" not found' in str(exc_info.value)
        mock_renderer.render.assert_not_called()


def test_unsupported_source(verifier) -> None:
    """Test unknown source types are rejected."""
    with pytest.raises(TypeError):
        verifier.verify("install.yaml")  # type: ignore[arg-type]
