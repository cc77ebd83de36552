"""Custom exceptions for meshverify."""


class MeshVerifyError(Exception):
    """Base exception for all meshverify errors."""


class ConfigurationError(MeshVerifyError):
    """Configuration-related errors."""


class KubernetesError(MeshVerifyError):
    """Kubernetes operation failed."""


class FetchFailedError(KubernetesError):
    """A cluster read for a specific object failed.

    Attributes:
        collection: Collection (plural resource name) that was queried
        name: Object name
        namespace: Namespace queried, None for an unnamespaced lookup
        status: HTTP status reported by the API server, if any
    """

    def __init__(
        self,
        message: str,
        collection: str,
        name: str,
        namespace: str | None = None,
        status: int | None = None,
    ):
        super().__init__(message)
        self.collection = collection
        self.name = name
        self.namespace = namespace
        self.status = status


class IstioError(MeshVerifyError):
    """Istio operation failed."""


class ManifestLoadError(MeshVerifyError):
    """Manifest files or streams could not be read or parsed."""


class OperatorDecodeError(MeshVerifyError):
    """An IstioOperator document could not be decoded."""


class NotReadyError(MeshVerifyError):
    """A live workload failed its readiness predicate."""


class NotCompleteError(MeshVerifyError):
    """A live job failed or has not completed."""


class InstallationVerificationFailedError(MeshVerifyError):
    """An object required by the installation is missing or unhealthy.

    Attributes:
        label: Manifest or operator the object came from
        reason: Underlying error
    """

    def __init__(self, label: str, reason: Exception):
        super().__init__(
            f'Istio installation failed, incomplete or does not match "{label}": {reason}'
        )
        self.label = label
        self.reason = reason


class RenderFailedError(IstioError):
    """Rendering an IstioOperator into manifests produced errors.

    Attributes:
        errors: Individual render error messages
    """

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors) if errors else "manifest rendering failed")
        self.errors = list(errors)


class ExpansionDepthExceededError(MeshVerifyError):
    """Nested IstioOperator expansion went deeper than allowed."""

    def __init__(self, label: str, max_depth: int):
        super().__init__(f"IstioOperator nesting in {label} exceeds maximum depth {max_depth}")
        self.label = label
        self.max_depth = max_depth


class RevisionNotFoundError(MeshVerifyError):
    """No in-cluster IstioOperator matches the requested revision."""

    def __init__(self, revision: str):
        super().__init__(f'control plane revision "{revision}" not found')
        self.revision = revision


class OperatorLookupError(MeshVerifyError):
    """The IstioOperator for a revision could not be loaded from the cluster."""


class NoInstallationFoundError(MeshVerifyError):
    """No healthy Istio control-plane deployments were observed."""

    def __init__(self, message: str = "no Istio installation found"):
        super().__init__(message)


class InstallationFailedError(MeshVerifyError):
    """Terminal verification failure returned to the outermost caller.

    The message is intentionally generic. The walk error that caused it is
    kept on ``cause`` for logging and tests.
    """

    def __init__(self, cause: Exception | None = None):
        super().__init__("Istio installation failed")
        self.cause = cause
