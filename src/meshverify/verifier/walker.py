"""Recursive walk over discovered objects, checking each against the cluster."""

from collections.abc import Iterable

from meshverify.core.exceptions import (
    ExpansionDepthExceededError,
    FetchFailedError,
    InstallationVerificationFailedError,
    MeshVerifyError,
    NotCompleteError,
    NotReadyError,
)
from meshverify.core.models import IstioOperator, VerificationOutcome, normalize_volatile_fields
from meshverify.interfaces.cluster_reader import ClusterReader
from meshverify.utils.logging import ProgressLogger, get_logger
from meshverify.verifier.expander import OperatorExpander
from meshverify.verifier.health import verify_deployment_status, verify_job_post_install
from meshverify.verifier.kinds import CRD_KIND, collection_for_kind
from meshverify.verifier.objects import (
    DiscoveredObject,
    JobObject,
    OperatorObject,
    WorkloadObject,
)

logger = get_logger(__name__)


class ResourceWalker:
    """Visit discovered objects in order and verify each one.

    Deployments and Jobs are fetched and checked for health. Embedded
    IstioOperators are expanded and walked recursively instead of being
    fetched. Every other kind only has to exist. The first failing object
    stops the walk; counts gathered up to that point are kept.
    """

    def __init__(
        self,
        cluster: ClusterReader,
        expander: OperatorExpander,
        progress: ProgressLogger,
        istio_namespace: str = "istio-system",
        workload_name_prefix: str = "istio",
        manifests_path: str | None = None,
        max_depth: int = 5,
    ):
        """Initialize resource walker.

        Args:
            cluster: Cluster reader used for live lookups
            expander: Expander for embedded IstioOperators
            progress: Channel for per-object progress lines
            istio_namespace: Control-plane namespace
            workload_name_prefix: Name prefix of counted control-plane deployments
            manifests_path: Install package path override for embedded operators
            max_depth: Maximum IstioOperator nesting depth
        """
        self.cluster = cluster
        self.expander = expander
        self.progress = progress
        self.istio_namespace = istio_namespace
        self.workload_name_prefix = workload_name_prefix
        self.manifests_path = manifests_path
        self.max_depth = max_depth

    def walk(
        self, objects: Iterable[DiscoveredObject], label: str, depth: int = 0
    ) -> VerificationOutcome:
        """Verify a sequence of discovered objects.

        Args:
            objects: Objects to verify, in order
            label: Manifest or operator the objects came from
            depth: IstioOperator nesting depth of this walk

        Returns:
            Counts gathered and the error that stopped the walk, if any
        """
        outcome = VerificationOutcome()
        visited = 0

        for obj in objects:
            try:
                self._visit(obj, label, depth, outcome)
            except MeshVerifyError as e:
                outcome.error = e
                logger.warning(
                    "walk_aborted",
                    label=label,
                    kind=obj.kind,
                    name=obj.name,
                    namespace=obj.namespace,
                    error_type=type(e).__name__,
                )
                break

            visited += 1
            self.progress.log_and_print(
                f"✔ {obj.kind}: {obj.name}.{obj.namespace} checked successfully"
            )

        logger.debug(
            "walk_finished",
            label=label,
            depth=depth,
            visited=visited,
            crd_count=outcome.crd_count,
            workload_count=outcome.workload_count,
            failed=outcome.failed,
        )
        return outcome

    def _visit(
        self, obj: DiscoveredObject, label: str, depth: int, outcome: VerificationOutcome
    ) -> None:
        if isinstance(obj, WorkloadObject):
            self._check_deployment(obj, label, outcome)
        elif isinstance(obj, JobObject):
            self._check_job(obj, label)
        elif isinstance(obj, OperatorObject):
            self._expand_operator(obj, label, depth, outcome)
        else:
            self._check_exists(obj, label, outcome)

    def _check_deployment(
        self, obj: WorkloadObject, label: str, outcome: VerificationOutcome
    ) -> None:
        try:
            deployment = self.cluster.get_deployment(name=obj.name, namespace=obj.namespace)
        except FetchFailedError as e:
            self._report_failure(obj, e)
            raise

        try:
            verify_deployment_status(deployment)
        except NotReadyError as e:
            failure = InstallationVerificationFailedError(label, e)
            self._report_failure(obj, failure)
            raise failure from e

        if obj.namespace == self.istio_namespace and obj.name.startswith(
            self.workload_name_prefix
        ):
            outcome.workload_count += 1

    def _check_job(self, obj: JobObject, label: str) -> None:
        try:
            job = self.cluster.get_job(name=obj.name, namespace=obj.namespace)
        except FetchFailedError as e:
            self._report_failure(obj, e)
            raise

        try:
            verify_job_post_install(job)
        except NotCompleteError as e:
            failure = InstallationVerificationFailedError(label, e)
            self._report_failure(obj, failure)
            raise failure from e

    def _expand_operator(
        self, obj: OperatorObject, label: str, depth: int, outcome: VerificationOutcome
    ) -> None:
        # The desired manifest is authoritative for IstioOperators; the
        # cluster is never asked for them.
        nested_depth = depth + 1
        if nested_depth > self.max_depth:
            error = ExpansionDepthExceededError(label, self.max_depth)
            self._report_failure(obj, error)
            raise error

        try:
            operator = IstioOperator.from_dict(normalize_volatile_fields(obj.body))
        except MeshVerifyError as e:
            self._report_failure(obj, e)
            raise

        operator = operator.with_install_package_path(self.manifests_path)
        nested = self.expander.expand(operator, label, self, depth=nested_depth)
        outcome.merge(nested)
        if nested.error is not None:
            raise nested.error

    def _check_exists(
        self, obj: DiscoveredObject, label: str, outcome: VerificationOutcome
    ) -> None:
        collection = collection_for_kind(obj.kind)
        try:
            self.cluster.get_resource(obj.api_version, collection, obj.name)
        except FetchFailedError:
            try:
                self.cluster.get_resource(
                    obj.api_version, collection, obj.name, namespace=obj.namespace
                )
            except FetchFailedError as e:
                self._report_failure(obj, e)
                reason = FetchFailedError(
                    f"the required {obj.kind}:{obj.name} is not ready due to: {e}",
                    collection=collection,
                    name=obj.name,
                    namespace=obj.namespace,
                    status=e.status,
                )
                raise InstallationVerificationFailedError(label, reason) from e

        if obj.kind == CRD_KIND:
            outcome.crd_count += 1

    def _report_failure(self, obj: DiscoveredObject, error: Exception) -> None:
        self.progress.log_and_print(f"✘ {obj.kind}: {obj.name}.{obj.namespace}: {error}")
