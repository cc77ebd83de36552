"""Manifest renderer interface for turning an IstioOperator into resources."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from meshverify.core.models import IstioOperator, RenderedManifest


@dataclass
class RenderResult:
    """Output of a render call."""

    manifests: RenderedManifest = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


class ManifestRenderer(ABC):
    """Abstract interface for the IstioOperator translator.

    Rendering is a black box: the verifier only needs the named groups of
    YAML documents it produces, plus any errors.
    """

    @abstractmethod
    def render(self, operator: IstioOperator) -> RenderResult:
        """Render an IstioOperator into manifests.

        Args:
            operator: Installation specification to render

        Returns:
            RenderResult with manifests grouped by component and any errors
        """
