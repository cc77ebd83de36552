"""Interface definitions for the collaborators the verifier depends on."""

from meshverify.interfaces.cluster_reader import ClusterReader
from meshverify.interfaces.manifest_renderer import ManifestRenderer, RenderResult

__all__ = [
    "ClusterReader",
    "ManifestRenderer",
    "RenderResult",
]
