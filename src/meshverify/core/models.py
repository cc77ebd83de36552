"""Core data models for meshverify."""

import copy
from dataclasses import dataclass
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from meshverify.core.exceptions import OperatorDecodeError

ISTIO_OPERATOR_KIND = "IstioOperator"
ISTIO_OPERATOR_GROUP = "install.istio.io"
ISTIO_OPERATOR_VERSION = "v1alpha1"
ISTIO_OPERATOR_PLURAL = "istiooperators"

# category -> ordered YAML blobs, one resource per blob
RenderedManifest = dict[str, list[str]]


class OperatorMetadata(BaseModel):
    """IstioOperator object metadata."""

    model_config = ConfigDict(extra="allow")

    name: str = ""
    namespace: str | None = None


class IstioOperatorSpec(BaseModel):
    """Desired control-plane state.

    Only the fields this tool reads are declared. Everything else in the
    spec (components, values, meshConfig, ...) is preserved as extra data so
    the operator can be handed back to the renderer unchanged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    revision: str = ""
    install_package_path: str | None = Field(default=None, alias="installPackagePath")
    profile: str | None = None


class IstioOperator(BaseModel):
    """Installation specification for an Istio control plane."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_version: str = Field(
        default=f"{ISTIO_OPERATOR_GROUP}/{ISTIO_OPERATOR_VERSION}", alias="apiVersion"
    )
    kind: Literal["IstioOperator"] = ISTIO_OPERATOR_KIND
    metadata: OperatorMetadata = Field(default_factory=OperatorMetadata)
    spec: IstioOperatorSpec = Field(default_factory=IstioOperatorSpec)

    @property
    def name(self) -> str:
        """Get the operator name."""
        return self.metadata.name

    @property
    def revision(self) -> str:
        """Get the control plane revision."""
        return self.spec.revision

    @classmethod
    def from_dict(cls, data: Any) -> "IstioOperator":
        """Decode an IstioOperator from an unstructured mapping.

        Args:
            data: Parsed YAML/JSON document

        Returns:
            IstioOperator instance

        Raises:
            OperatorDecodeError: If the document is not a valid IstioOperator
        """
        if not isinstance(data, dict):
            raise OperatorDecodeError(
                f"IstioOperator document must be a mapping, got {type(data).__name__}"
            )
        if data.get("kind") != ISTIO_OPERATOR_KIND:
            raise OperatorDecodeError(
                f"expected kind {ISTIO_OPERATOR_KIND}, got {data.get('kind')!r}"
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise OperatorDecodeError(f"invalid IstioOperator: {e}") from e

    @classmethod
    def from_yaml(cls, text: str | bytes) -> "IstioOperator":
        """Decode an IstioOperator from YAML.

        Raises:
            OperatorDecodeError: If the YAML is malformed or not an IstioOperator
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise OperatorDecodeError(f"failed to parse IstioOperator YAML: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Encode as an unstructured mapping using Kubernetes field names."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_yaml(self) -> str:
        """Encode as YAML."""
        return yaml.safe_dump(self.to_dict(), sort_keys=False)

    def with_install_package_path(self, path: str | None) -> "IstioOperator":
        """Return a copy whose install package path is overridden.

        A None or empty path leaves the operator unchanged.
        """
        if not path:
            return self
        spec = self.spec.model_copy(update={"install_package_path": path})
        return self.model_copy(update={"spec": spec})


def normalize_volatile_fields(body: dict[str, Any]) -> dict[str, Any]:
    """Strip server-populated metadata that gets in the way of decoding.

    Resets the creation timestamp and clears the managed field history.

    Args:
        body: Unstructured object

    Returns:
        Normalized deep copy of the object
    """
    normalized = copy.deepcopy(body)
    metadata = normalized.get("metadata")
    if isinstance(metadata, dict):
        metadata.pop("creationTimestamp", None)
        metadata.pop("managedFields", None)
    return normalized


@dataclass
class VerificationOutcome:
    """Running result of a resource walk.

    Counters only ever grow. ``error`` holds the fatal error that stopped
    the walk, if any.
    """

    crd_count: int = 0
    workload_count: int = 0
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        """Whether the walk stopped on a fatal error."""
        return self.error is not None

    def merge(self, other: "VerificationOutcome") -> None:
        """Add the counts of a nested walk into this one."""
        self.crd_count += other.crd_count
        self.workload_count += other.workload_count
