"""Discovered objects and the builders that produce them from manifests."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from meshverify.core.exceptions import ManifestLoadError
from meshverify.core.models import ISTIO_OPERATOR_KIND, RenderedManifest
from meshverify.utils.manifests import MANIFEST_SUFFIXES
from meshverify.verifier.kinds import DEPLOYMENT_KIND, JOB_KIND

DEFAULT_NAMESPACE = "default"


@dataclass(frozen=True)
class DiscoveredObject:
    """A resource declared in a manifest.

    Attributes:
        kind: Object kind
        name: Object name
        namespace: Declared namespace, or the default namespace when absent
        api_version: Declared apiVersion
        source: Manifest file or rendered category the object came from
        body: The full unstructured object
    """

    kind: str
    name: str
    namespace: str
    api_version: str
    source: str
    body: dict[str, Any] = field(default_factory=dict, compare=False, hash=False, repr=False)


@dataclass(frozen=True)
class WorkloadObject(DiscoveredObject):
    """A Deployment."""


@dataclass(frozen=True)
class JobObject(DiscoveredObject):
    """A Job."""


@dataclass(frozen=True)
class OperatorObject(DiscoveredObject):
    """An embedded IstioOperator, expanded instead of fetched."""


@dataclass(frozen=True)
class GenericObject(DiscoveredObject):
    """Any other kind."""


_KIND_TYPES: dict[str, type[DiscoveredObject]] = {
    DEPLOYMENT_KIND: WorkloadObject,
    JOB_KIND: JobObject,
    ISTIO_OPERATOR_KIND: OperatorObject,
}


def _scalar_field(metadata: dict[str, Any], key: str, source: str, kind: str) -> str:
    # Unquoted YAML names such as 123 load as numbers.
    value = metadata.get(key)
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ManifestLoadError(f"{source}: {kind} metadata.{key} must be a string")
    return str(value)


def classify(
    body: dict[str, Any], source: str, default_namespace: str = DEFAULT_NAMESPACE
) -> DiscoveredObject:
    """Build the discovered object variant matching a document's kind.

    Args:
        body: Unstructured object
        source: Where the object came from, for diagnostics
        default_namespace: Namespace used when the object declares none

    Returns:
        Discovered object

    Raises:
        ManifestLoadError: If kind or name is missing or metadata is malformed
    """
    kind = body.get("kind")
    if not kind or not isinstance(kind, str):
        raise ManifestLoadError(f"{source}: object has no kind")

    metadata = body.get("metadata") or {}
    if not isinstance(metadata, dict):
        raise ManifestLoadError(f"{source}: {kind} metadata must be a mapping")

    name = _scalar_field(metadata, "name", source, kind)
    if not name and kind != ISTIO_OPERATOR_KIND:
        raise ManifestLoadError(f"{source}: {kind} object has no name")

    object_type = _KIND_TYPES.get(kind, GenericObject)
    return object_type(
        kind=kind,
        name=name,
        namespace=_scalar_field(metadata, "namespace", source, kind) or default_namespace,
        api_version=str(body.get("apiVersion") or "v1"),
        source=source,
        body=body,
    )


def _flatten(document: Any, source: str) -> Iterator[dict[str, Any]]:
    if document is None:
        return
    if not isinstance(document, dict):
        raise ManifestLoadError(
            f"{source}: expected a mapping, got {type(document).__name__}"
        )
    kind = document.get("kind")
    if isinstance(kind, str) and kind.endswith("List") and "items" in document:
        for item in document.get("items") or []:
            yield from _flatten(item, source)
        return
    yield document


def objects_from_stream(
    text: str, source: str, default_namespace: str = DEFAULT_NAMESPACE
) -> list[DiscoveredObject]:
    """Parse a YAML stream into discovered objects.

    Args:
        text: YAML stream, possibly with several documents
        source: Name of the stream for diagnostics
        default_namespace: Namespace used when an object declares none

    Returns:
        Discovered objects in document order, with List kinds flattened

    Raises:
        ManifestLoadError: If the stream cannot be parsed
    """
    try:
        documents = list(yaml.safe_load_all(text))
    except yaml.YAMLError as e:
        raise ManifestLoadError(f"{source}: invalid YAML: {e}") from e

    return [
        classify(body, source, default_namespace)
        for document in documents
        for body in _flatten(document, source)
    ]


def _expand_paths(filenames: Iterable[str]) -> Iterator[Path]:
    for filename in filenames:
        path = Path(filename).expanduser()
        if path.is_dir():
            yield from sorted(
                p for p in path.iterdir() if p.is_file() and p.suffix in MANIFEST_SUFFIXES
            )
        else:
            yield path


def objects_from_files(
    filenames: Iterable[str], default_namespace: str = DEFAULT_NAMESPACE
) -> list[DiscoveredObject]:
    """Load discovered objects from manifest files.

    Directories contribute their manifest files, non-recursively.

    Args:
        filenames: File or directory paths
        default_namespace: Namespace used when an object declares none

    Returns:
        Discovered objects in file and document order

    Raises:
        ManifestLoadError: If a file cannot be read or parsed
    """
    objects: list[DiscoveredObject] = []
    for path in _expand_paths(filenames):
        try:
            text = path.read_text()
        except OSError as e:
            raise ManifestLoadError(f"failed to read {path}: {e}") from e
        objects.extend(objects_from_stream(text, str(path), default_namespace))
    return objects


def objects_from_rendered(
    manifest: RenderedManifest, label: str, default_namespace: str = DEFAULT_NAMESPACE
) -> list[DiscoveredObject]:
    """Load discovered objects from a rendered manifest.

    Each blob is tagged "<category>:<index> generated from <label>".

    Args:
        manifest: Rendered manifest
        label: Operator label the manifest was generated from
        default_namespace: Namespace used when an object declares none

    Returns:
        Discovered objects in category and blob order

    Raises:
        ManifestLoadError: If a blob cannot be parsed
    """
    objects: list[DiscoveredObject] = []
    for category, blobs in manifest.items():
        for index, blob in enumerate(blobs):
            source = f"{category}:{index} generated from {label}"
            objects.extend(objects_from_stream(blob, source, default_namespace))
    return objects
