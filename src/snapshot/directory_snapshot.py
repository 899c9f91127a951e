"""Directory snapshot capture.

This module turns a directory subtree into an order-stable value so
two captures of the same on-disk state compare equal regardless of
the order the filesystem enumerates entries.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
from pathlib import Path
from typing import Any, Union

from core.errors import RegistryDependencyError, SnapshotError

BINARY_MODE_FAIL = "fail"
BINARY_MODE_DIGEST = "digest"


@dataclass(frozen=True)
class SnapshotLeaf:
    """Text file contents."""

    text: str


@dataclass(frozen=True)
class SnapshotBlob:
    """Binary file summarized by length and digest."""

    size: int
    sha256: str


@dataclass(frozen=True)
class SnapshotNode:
    """Directory entries sorted by name."""

    children: tuple[tuple[str, "SnapshotTree"], ...]

    def child(self, name: str) -> "SnapshotTree":
        """Return the subtree for an entry name.

        Raises:
            KeyError: If the directory has no such entry.
        """
        for child_name, subtree in self.children:
            if child_name == name:
                return subtree
        raise KeyError(name)

    def names(self) -> list[str]:
        return [name for name, _ in self.children]


SnapshotTree = Union[SnapshotLeaf, SnapshotBlob, SnapshotNode]


def capture(path: Path, binary_mode: str = BINARY_MODE_FAIL) -> SnapshotTree:
    """Capture a file or directory subtree.

    Args:
        path: File or directory to capture.
        binary_mode: "fail" rejects non-UTF-8 files; "digest" records
            them as SnapshotBlob leaves.

    Returns:
        Captured tree.

    Raises:
        SnapshotError: If the path is missing, unreadable, or holds
            non-text bytes in "fail" mode.
    """
    if binary_mode not in (BINARY_MODE_FAIL, BINARY_MODE_DIGEST):
        raise ValueError(f"Unsupported binary mode '{binary_mode}'.")
    if not path.exists():
        raise SnapshotError(path, "path does not exist")
    if path.is_dir():
        return _capture_directory(path, binary_mode)
    return _capture_file(path, binary_mode)


def to_plain(tree: SnapshotTree) -> Any:
    """Convert a tree into nested dicts and strings for serialization.

    Blobs become ``{"size": ..., "sha256": ...}`` mappings.
    """
    if isinstance(tree, SnapshotLeaf):
        return tree.text
    if isinstance(tree, SnapshotBlob):
        return {"size": tree.size, "sha256": tree.sha256}
    return {name: to_plain(subtree) for name, subtree in tree.children}


def render_yaml(tree: SnapshotTree) -> str:
    """Render a tree as YAML with sorted keys for golden-file comparison."""
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise RegistryDependencyError(
            "Snapshot rendering requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    return yaml.safe_dump(to_plain(tree), sort_keys=True, allow_unicode=True)


def _capture_directory(path: Path, binary_mode: str) -> SnapshotNode:
    try:
        entries = sorted(path.iterdir(), key=lambda entry: entry.name)
    except OSError as error:
        raise SnapshotError(path, error) from error
    children = tuple((entry.name, capture(entry, binary_mode)) for entry in entries)
    return SnapshotNode(children=children)


def _capture_file(path: Path, binary_mode: str) -> SnapshotLeaf | SnapshotBlob:
    try:
        data = path.read_bytes()
    except OSError as error:
        raise SnapshotError(path, error) from error
    try:
        return SnapshotLeaf(text=data.decode("utf-8"))
    except UnicodeDecodeError as error:
        if binary_mode == BINARY_MODE_DIGEST:
            return SnapshotBlob(size=len(data), sha256=hashlib.sha256(data).hexdigest())
        raise SnapshotError(path, "file is not valid UTF-8 text") from error
