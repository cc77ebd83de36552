"""Lookup of IstioOperators stored in the cluster."""

from meshverify.core.exceptions import RevisionNotFoundError
from meshverify.core.models import IstioOperator, normalize_volatile_fields
from meshverify.interfaces.cluster_reader import ClusterReader
from meshverify.utils.logging import get_logger

logger = get_logger(__name__)


class ClusterOperatorLocator:
    """Find installed IstioOperators.

    IstioOperators carry no revision label, so every operator is decoded and
    its spec.revision compared.
    """

    def __init__(self, cluster: ClusterReader):
        self.cluster = cluster

    def all_operators(self) -> list[IstioOperator]:
        """List and decode every IstioOperator in the cluster.

        Returns:
            Decoded operators in list order

        Raises:
            KubernetesError: If the collection cannot be listed
            OperatorDecodeError: If any operator cannot be decoded
        """
        operators = [
            IstioOperator.from_dict(normalize_volatile_fields(item))
            for item in self.cluster.list_istio_operators()
        ]
        logger.debug("istio_operators_decoded", count=len(operators))
        return operators

    def find_by_revision(self, revision: str) -> IstioOperator:
        """Find the first IstioOperator whose spec.revision matches.

        Args:
            revision: Control plane revision; "" selects the default revision

        Returns:
            Matching operator

        Raises:
            RevisionNotFoundError: If no operator matches
        """
        for operator in self.all_operators():
            if operator.revision == revision:
                logger.info("istio_operator_found", name=operator.name, revision=revision)
                return operator

        raise RevisionNotFoundError(revision)
