"""Post-install verification entry point."""

from dataclasses import dataclass
from typing import Union

from rich.console import Console

from meshverify.core.config import VerifierConfig
from meshverify.core.exceptions import MeshVerifyError, OperatorLookupError
from meshverify.core.models import IstioOperator, VerificationOutcome
from meshverify.interfaces.cluster_reader import ClusterReader
from meshverify.interfaces.manifest_renderer import ManifestRenderer
from meshverify.utils.logging import ProgressLogger, get_logger
from meshverify.verifier.expander import OperatorExpander
from meshverify.verifier.locator import ClusterOperatorLocator
from meshverify.verifier.objects import objects_from_files
from meshverify.verifier.reporter import VerdictReporter
from meshverify.verifier.walker import ResourceWalker

logger = get_logger(__name__)


@dataclass(frozen=True)
class OperatorSource:
    """An already resolved IstioOperator, e.g. the one just installed."""

    operator: IstioOperator


@dataclass(frozen=True)
class RevisionSource:
    """The IstioOperator stored in the cluster for a revision."""

    revision: str = ""


@dataclass(frozen=True)
class ManifestFilesSource:
    """Manifest files whose resources must exist in the cluster."""

    filenames: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "filenames", tuple(self.filenames))


InstallationSource = Union[OperatorSource, RevisionSource, ManifestFilesSource]


class StatusVerifier:
    """Check that an Istio installation is present and healthy.

    Deployments and Jobs are checked for readiness, other resources for
    existence, and CRDs and control-plane deployments are counted.
    """

    def __init__(
        self,
        cluster: ClusterReader,
        renderer: ManifestRenderer,
        progress: ProgressLogger | None = None,
        config: VerifierConfig | None = None,
    ):
        """Initialize status verifier.

        Args:
            cluster: Cluster reader used for live lookups
            renderer: Translator from IstioOperator to manifests
            progress: Channel for progress lines (defaults to stdout)
            config: Verifier configuration (defaults to VerifierConfig())
        """
        self.config = config or VerifierConfig()
        self.progress = progress or ProgressLogger()
        self.cluster = cluster
        self.locator = ClusterOperatorLocator(cluster)
        self.expander = OperatorExpander(renderer, default_namespace=self.config.default_namespace)
        self.walker = ResourceWalker(
            cluster=cluster,
            expander=self.expander,
            progress=self.progress,
            istio_namespace=self.config.istio_namespace,
            workload_name_prefix=self.config.workload_name_prefix,
            manifests_path=self.config.manifests_path,
            max_depth=self.config.max_expansion_depth,
        )
        self.reporter = VerdictReporter(self.progress)

    @classmethod
    def from_config(
        cls, config: VerifierConfig, console: Console | None = None
    ) -> "StatusVerifier":
        """Build a verifier talking to a real cluster and istioctl.

        Args:
            config: Verifier configuration
            console: Console for progress lines (optional)

        Returns:
            StatusVerifier instance

        Raises:
            KubernetesError: If the Kubernetes client cannot be initialized
        """
        from meshverify.clients.istioctl import IstioctlRenderer
        from meshverify.clients.kubernetes_client import KubernetesClient

        cluster = KubernetesClient(
            kubeconfig_path=config.kubernetes.kubeconfig,
            context=config.kubernetes.context,
            request_timeout=config.kubernetes.request_timeout_seconds,
        )
        renderer = IstioctlRenderer(
            binary=config.istioctl.binary,
            kubeconfig_path=config.kubernetes.kubeconfig,
            context=config.kubernetes.context,
            timeout_seconds=config.istioctl.timeout_seconds,
        )
        return cls(cluster, renderer, progress=ProgressLogger(console), config=config)

    def verify(self, source: InstallationSource) -> None:
        """Verify the installation described by a source.

        Args:
            source: Resolved operator, revision to look up, or manifest files

        Raises:
            NoInstallationFoundError: If no control-plane deployment was found
            InstallationFailedError: If any object is missing or unhealthy
            OperatorLookupError: If the revision's operator cannot be loaded
            ManifestLoadError: If manifest files cannot be read
        """
        logger.info("verification_started", source=type(source).__name__)

        if isinstance(source, OperatorSource):
            outcome = self._verify_operator(source.operator)
        elif isinstance(source, RevisionSource):
            outcome = self._verify_revision(source.revision)
        elif isinstance(source, ManifestFilesSource):
            outcome = self._verify_files(source.filenames)
        else:
            raise TypeError(f"unsupported installation source: {type(source).__name__}")

        self.reporter.report(outcome)

    def _verify_operator(self, operator: IstioOperator) -> VerificationOutcome:
        return self.expander.expand(operator, f"IOP:{operator.name}", self.walker)

    def _verify_revision(self, revision: str) -> VerificationOutcome:
        try:
            operator = self.locator.find_by_revision(revision)
        except MeshVerifyError as e:
            raise OperatorLookupError(
                f"could not load IstioOperator from cluster: {e}.  Use --filename"
            ) from e

        operator = operator.with_install_package_path(self.config.manifests_path)
        return self.expander.expand(operator, f"in cluster operator {operator.name}", self.walker)

    def _verify_files(self, filenames: tuple[str, ...]) -> VerificationOutcome:
        objects = objects_from_files(filenames, default_namespace=self.config.default_namespace)
        return self.walker.walk(objects, ",".join(filenames))
