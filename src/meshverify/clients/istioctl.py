"""Istioctl-backed manifest renderer."""

import subprocess
import tempfile
from pathlib import Path

from meshverify.core.exceptions import IstioError, ManifestLoadError
from meshverify.core.models import IstioOperator
from meshverify.interfaces.manifest_renderer import ManifestRenderer, RenderResult
from meshverify.utils.logging import get_logger
from meshverify.utils.manifests import read_manifest_tree

logger = get_logger(__name__)


class IstioctlRenderer(ManifestRenderer):
    """Render IstioOperator specs with ``istioctl manifest generate``."""

    def __init__(
        self,
        binary: str = "istioctl",
        kubeconfig_path: str | None = None,
        context: str | None = None,
        timeout_seconds: int | None = 120,
    ):
        """Initialize istioctl renderer.

        Args:
            binary: istioctl executable name or path
            kubeconfig_path: Path to kubeconfig file (optional)
            context: Kubernetes context to use (optional)
            timeout_seconds: Maximum run time of a single istioctl call (optional)
        """
        self.binary = binary
        self.kubeconfig_path = kubeconfig_path
        self.context = context
        self.timeout_seconds = timeout_seconds

        logger.debug("istioctl_renderer_initialized", binary=binary, context=context)

    def _run_command(self, args: list[str]) -> subprocess.CompletedProcess:
        """Run istioctl command.

        Args:
            args: Command arguments

        Returns:
            CompletedProcess instance

        Raises:
            IstioError: If command fails
        """
        cmd = [self.binary] + args

        # Add kubeconfig if specified
        if self.kubeconfig_path:
            cmd.extend(["--kubeconfig", self.kubeconfig_path])

        # Add context if specified
        if self.context:
            cmd.extend(["--context", self.context])

        logger.debug("running_istioctl_command", command=" ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout_seconds,
            )

            logger.debug("istioctl_command_completed", returncode=result.returncode)
            return result

        except subprocess.CalledProcessError as e:
            logger.error(
                "istioctl_command_failed",
                command=" ".join(cmd),
                returncode=e.returncode,
                stderr=e.stderr,
            )
            raise IstioError(f"istioctl command failed: {e.stderr or e.stdout}") from e
        except subprocess.TimeoutExpired as e:
            logger.error("istioctl_command_timed_out", command=" ".join(cmd))
            raise IstioError(f"istioctl command timed out after {e.timeout}s") from e
        except FileNotFoundError as e:
            logger.error("istioctl_not_found", binary=self.binary)
            raise IstioError("istioctl command not found. Please install Istio CLI.") from e

    def render(self, operator: IstioOperator) -> RenderResult:
        """Render an IstioOperator into manifests grouped by component.

        Failures are reported in the result instead of being raised.

        Args:
            operator: Installation specification to render

        Returns:
            RenderResult with manifests keyed by component directory
        """
        logger.info("rendering_manifest", operator=operator.name, revision=operator.revision)

        with tempfile.TemporaryDirectory(prefix="meshverify-") as workdir:
            spec_file = Path(workdir) / "istiooperator.yaml"
            spec_file.write_text(operator.to_yaml())
            output_dir = Path(workdir) / "manifests"

            args = ["manifest", "generate", "-f", str(spec_file), "-o", str(output_dir)]
            if operator.spec.install_package_path:
                args.extend(["--manifests", operator.spec.install_package_path])

            try:
                self._run_command(args)
            except IstioError as e:
                return RenderResult(errors=[str(e)])

            if not output_dir.is_dir():
                return RenderResult(errors=["istioctl produced no manifests"])

            try:
                manifests = read_manifest_tree(output_dir)
            except ManifestLoadError as e:
                return RenderResult(errors=[str(e)])

        logger.info(
            "manifest_rendered",
            operator=operator.name,
            categories=len(manifests),
            documents=sum(len(docs) for docs in manifests.values()),
        )
        return RenderResult(manifests=manifests)
