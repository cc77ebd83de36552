"""Helpers for reading rendered multi-document YAML manifests."""

from pathlib import Path

import yaml

from meshverify.core.exceptions import ManifestLoadError

MANIFEST_SUFFIXES = (".yaml", ".yml", ".json")


def read_manifest_tree(root: Path) -> dict[str, list[str]]:
    """Read a directory of rendered manifests grouped by component.

    Each file's parent directory (relative to ``root``) names its category;
    files directly under ``root`` use their stem instead. Every YAML document
    becomes one blob; empty documents are dropped.

    Args:
        root: Output directory of a manifest render

    Returns:
        Mapping of category to YAML documents, categories sorted by path

    Raises:
        ManifestLoadError: If a file cannot be read or parsed
    """
    manifests: dict[str, list[str]] = {}
    files = sorted(p for p in root.rglob("*") if p.is_file() and p.suffix in MANIFEST_SUFFIXES)
    for path in files:
        relative = path.relative_to(root)
        category = relative.parent.as_posix() if relative.parent != Path(".") else path.stem
        try:
            with path.open() as f:
                documents = [doc for doc in yaml.safe_load_all(f) if doc is not None]
        except (OSError, yaml.YAMLError) as e:
            raise ManifestLoadError(f"failed to load rendered manifest {relative}: {e}") from e

        manifests.setdefault(category, []).extend(
            yaml.safe_dump(doc, sort_keys=False) for doc in documents
        )
    return manifests
