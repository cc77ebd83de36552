"""Final verdict for a verification run."""

from meshverify.core.exceptions import InstallationFailedError, NoInstallationFoundError
from meshverify.core.models import VerificationOutcome
from meshverify.utils.logging import ProgressLogger, get_logger

logger = get_logger(__name__)


class VerdictReporter:
    """Turn a walk outcome into a pass/fail verdict."""

    def __init__(self, progress: ProgressLogger):
        self.progress = progress

    def report(self, outcome: VerificationOutcome) -> None:
        """Print the summary and raise if the installation is not verified.

        Having no control-plane deployments wins over any other failure. The
        walk error is not surfaced in the message; per-object lines have
        already described it.

        Args:
            outcome: Result of the walk

        Raises:
            NoInstallationFoundError: If no control-plane deployment was found
            InstallationFailedError: If the walk stopped on an error
        """
        self.progress.log_and_print(f"Checked {outcome.crd_count} custom resource definitions")
        self.progress.log_and_print(f"Checked {outcome.workload_count} Istio Deployments")

        if outcome.workload_count == 0:
            self.progress.log_and_print("! No Istio installation found")
            logger.error("no_installation_found", crd_count=outcome.crd_count)
            raise NoInstallationFoundError()

        if outcome.error is not None:
            logger.error(
                "installation_verification_failed",
                crd_count=outcome.crd_count,
                workload_count=outcome.workload_count,
                error_type=type(outcome.error).__name__,
                error=str(outcome.error),
            )
            raise InstallationFailedError(cause=outcome.error)

        self.progress.log_and_print("✔ Istio is installed and verified successfully")
        logger.info(
            "installation_verified",
            crd_count=outcome.crd_count,
            workload_count=outcome.workload_count,
        )
