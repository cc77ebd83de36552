"""Post-install verification of Istio control-plane installations."""

from meshverify.verifier.status_verifier import (
    InstallationSource,
    ManifestFilesSource,
    OperatorSource,
    RevisionSource,
    StatusVerifier,
)

__all__ = [
    "InstallationSource",
    "ManifestFilesSource",
    "OperatorSource",
    "RevisionSource",
    "StatusVerifier",
]
