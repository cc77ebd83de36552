"""Expansion of an IstioOperator into the resources it renders to."""

from typing import TYPE_CHECKING

from meshverify.core.exceptions import MeshVerifyError, RenderFailedError
from meshverify.core.models import IstioOperator, VerificationOutcome
from meshverify.interfaces.manifest_renderer import ManifestRenderer
from meshverify.utils.logging import get_logger
from meshverify.verifier.objects import DEFAULT_NAMESPACE, objects_from_rendered

if TYPE_CHECKING:
    from meshverify.verifier.walker import ResourceWalker

logger = get_logger(__name__)


class OperatorExpander:
    """Render an IstioOperator and walk the resulting resources."""

    def __init__(self, renderer: ManifestRenderer, default_namespace: str = DEFAULT_NAMESPACE):
        """Initialize operator expander.

        Args:
            renderer: Translator from IstioOperator to manifests
            default_namespace: Namespace used when a rendered object declares none
        """
        self.renderer = renderer
        self.default_namespace = default_namespace

    def expand(
        self,
        operator: IstioOperator,
        label: str,
        walker: "ResourceWalker",
        depth: int = 0,
    ) -> VerificationOutcome:
        """Verify everything an IstioOperator renders to.

        Render and load failures are returned as the outcome error with zero
        counts. Otherwise the walk outcome is returned unchanged.

        Args:
            operator: Installation specification
            label: Human-readable origin of the operator, used in diagnostics
            walker: Walker that visits the rendered objects
            depth: Nesting depth of this operator

        Returns:
            Outcome of walking the rendered objects
        """
        logger.info("expanding_operator", operator=operator.name, label=label, depth=depth)

        try:
            result = self.renderer.render(operator)
            if result.errors:
                raise RenderFailedError(result.errors)
            objects = objects_from_rendered(result.manifests, label, self.default_namespace)
        except MeshVerifyError as e:
            logger.warning(
                "operator_expansion_failed",
                operator=operator.name,
                label=label,
                error_type=type(e).__name__,
                error=str(e),
            )
            return VerificationOutcome(error=e)

        logger.debug("operator_expanded", operator=operator.name, objects=len(objects))
        return walker.walk(objects, f"generated from {label}", depth=depth)
