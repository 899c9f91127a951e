"""Unit tests for directory snapshot capture."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import SnapshotError
from snapshot.directory_snapshot import (
    SnapshotBlob,
    SnapshotLeaf,
    SnapshotNode,
    capture,
    render_yaml,
    to_plain,
)


def _build_tree(root: Path, names: list[str]) -> None:
    for name in names:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"contents of {name}", encoding="utf-8")


def test_capture_file_returns_leaf(tmp_path) -> None:
    """A text file should become a leaf with its text."""
    path = tmp_path / "a.txt"
    path.write_text("hello", encoding="utf-8")

    tree = capture(path)

    assert tree == SnapshotLeaf("hello")


def test_capture_sorts_children_by_name(tmp_path) -> None:
    """Directory children should be ordered lexicographically."""
    _build_tree(tmp_path, ["zeta", "alpha", "mid/inner"])

    tree = capture(tmp_path)

    assert isinstance(tree, SnapshotNode) and tree.names() == ["alpha", "mid", "zeta"]


def test_capture_is_independent_of_creation_order(tmp_path) -> None:
    """Equal trees written in different orders should compare equal."""
    _build_tree(tmp_path / "one", ["b/y", "a", "b/x"])
    _build_tree(tmp_path / "two", ["b/x", "b/y", "a"])

    assert capture(tmp_path / "one") == capture(tmp_path / "two")


def test_capture_twice_is_stable(tmp_path) -> None:
    """Two captures with no writes between should be equal."""
    _build_tree(tmp_path, ["index/acme/widgets", "index/config.json"])

    assert capture(tmp_path) == capture(tmp_path)


def test_capture_rejects_binary_in_fail_mode(tmp_path) -> None:
    """Non-UTF-8 bytes should fail the capture by default."""
    (tmp_path / "blob.zip").write_bytes(b"\xff\xfe\x00")

    with pytest.raises(SnapshotError) as error_info:
        capture(tmp_path)

    assert error_info.value.path == tmp_path / "blob.zip"


def test_capture_digests_binary_in_digest_mode(tmp_path) -> None:
    """Digest mode should summarize binary files by size and hash."""
    (tmp_path / "blob.zip").write_bytes(b"\xff\xfe\x00")

    tree = capture(tmp_path, binary_mode="digest")

    blob = tree.child("blob.zip")
    assert isinstance(blob, SnapshotBlob) and blob.size == 3


def test_capture_missing_path_raises(tmp_path) -> None:
    """Capturing a missing path should raise a snapshot error."""
    with pytest.raises(SnapshotError):
        capture(tmp_path / "missing")


def test_capture_rejects_unknown_binary_mode(tmp_path) -> None:
    """Only the documented binary modes should be accepted."""
    with pytest.raises(ValueError):
        capture(tmp_path, binary_mode="base64")


def test_to_plain_and_render_yaml(tmp_path) -> None:
    """Plain and YAML renderings should mirror the tree shape."""
    _build_tree(tmp_path, ["b", "a/c"])
    tree = capture(tmp_path)

    plain = to_plain(tree)
    rendered = render_yaml(tree)

    assert plain == {"a": {"c": "contents of a/c"}, "b": "contents of b"}
    assert rendered.splitlines()[0] == "a:"
