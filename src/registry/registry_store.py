"""Filesystem registry store.

This module persists package manifests into per-name append-only
indexes and content blobs into version-specific files. It answers
version queries and resolves the configured fallback registries.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.config import RegistryConfig, parse_fallback_policy
from core.constants import (
    CONTENT_FILE_EXTENSION,
    CONTENTS_DIR_NAME,
    DEFAULT_FALLBACK_POLICY,
    FALLBACK_POLICY_SKIP,
    INDEX_CONFIG_FILE_NAME,
    INDEX_DIR_NAME,
)
from core.errors import (
    FallbackResolutionError,
    ManifestParseError,
    PackageNotFoundError,
    RegistryConfigError,
    RegistryIOError,
    RegistryValidationError,
)
from core.logging_config import get_logger
from core.types import (
    Manifest,
    PackageContents,
    PackageId,
    PackageIndexConfig,
    PackageName,
    PackageReq,
    PackageSourceId,
)
from registry.index_log import IndexLog
from registry.manifest_payload import decode_manifest_line, encode_manifest_line

_LOGGER = get_logger(__name__)


class RegistryStore:
    """Filesystem-backed package registry.

    Layout under ``root``::

        index/config.json
        index/<scope>/<name>
        contents/<scope>/<name>/<version>.zip

    The store keeps no in-memory state besides its root; every call
    goes to the filesystem.
    """

    def __init__(self, root: Path, fallback_policy: str = DEFAULT_FALLBACK_POLICY) -> None:
        """Initialize the store.

        Args:
            root: Registry root directory.
            fallback_policy: "fail" or "skip" for unresolvable fallbacks.

        Raises:
            RegistryConfigError: If the fallback policy is not supported.
        """
        self._root = Path(root)
        self._fallback_policy = parse_fallback_policy(fallback_policy)

    @classmethod
    def from_config(cls, config: RegistryConfig) -> "RegistryStore":
        return cls(config.registry_root, fallback_policy=config.fallback_policy)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def fallback_policy(self) -> str:
        return self._fallback_policy

    @property
    def source_id(self) -> PackageSourceId:
        return PackageSourceId(self._root.resolve())

    def update(self) -> None:
        """Refresh the source; local registries have nothing to fetch."""

    def publish(self, manifest: Manifest, contents: PackageContents) -> None:
        """Publish a manifest and its content blob.

        The manifest is appended to the package index as one line; prior
        lines are never read back. The content file is overwritten whole.

        Args:
            manifest: Manifest to record.
            contents: Opaque artifact bytes.

        Raises:
            RegistryIOError: If any directory or file write fails.
        """
        package_id = manifest.package_id
        index_log = self._index_log(package_id.name)
        _ensure_directory(index_log.path.parent)
        index_log.append(encode_manifest_line(manifest))

        content_path = self.content_path(package_id)
        _ensure_directory(content_path.parent)
        try:
            content_path.write_bytes(contents.as_bytes())
        except OSError as error:
            raise RegistryIOError("write package contents", content_path, error) from error
        _LOGGER.info(
            "package_published",
            package_id=str(package_id),
            size=contents.size,
            root=str(self._root),
        )

    def query(self, request: PackageReq) -> list[Manifest]:
        """Return manifests satisfying a request, oldest-published first.

        Duplicate publishes of one version are all returned.

        Args:
            request: Name and version range to match.

        Returns:
            Matching manifests; empty when the package exists but no
            version matches.

        Raises:
            PackageNotFoundError: If the package has no index.
            ManifestParseError: If any index line is malformed.
        """
        manifests = self._read_index(request.name)
        matched = [
            manifest
            for manifest in manifests
            if request.matches(manifest.package.name, manifest.package.version)
        ]
        _LOGGER.debug(
            "package_queried",
            request=str(request),
            indexed=len(manifests),
            matched=len(matched),
        )
        return matched

    def package_versions(self, name: PackageName) -> list[Manifest]:
        """Return every indexed manifest for a package name.

        Raises:
            PackageNotFoundError: If the package has no index.
            ManifestParseError: If any index line is malformed.
        """
        return self._read_index(name)

    def fetch(self, package_id: PackageId) -> PackageContents:
        """Read the content blob for a published package.

        Raises:
            PackageNotFoundError: If no blob exists for the id.
            RegistryIOError: If the blob cannot be read.
        """
        content_path = self.content_path(package_id)
        try:
            data = content_path.read_bytes()
        except FileNotFoundError as error:
            raise PackageNotFoundError(f"Contents of {package_id}", content_path) from error
        except OSError as error:
            raise RegistryIOError("read package contents", content_path, error) from error
        _LOGGER.debug("package_fetched", package_id=str(package_id), size=len(data))
        return PackageContents.from_bytes(data)

    def fallback_sources(self) -> list[PackageSourceId]:
        """Resolve configured fallback registries in declaration order.

        Returns:
            Canonical source ids for each usable fallback.

        Raises:
            PackageNotFoundError: If the index config file is missing.
            RegistryConfigError: If the config file is malformed.
            FallbackResolutionError: If an entry does not resolve and the
                policy is "fail".
        """
        config = self.index_config()
        sources: list[PackageSourceId] = []
        for entry in config.fallback_registries:
            candidate = self._root / entry
            try:
                resolved = candidate.resolve(strict=True)
            except (OSError, RuntimeError) as error:
                if self._fallback_policy == FALLBACK_POLICY_SKIP:
                    _LOGGER.warning("fallback_skipped", entry=entry, path=str(candidate))
                    continue
                raise FallbackResolutionError(entry, candidate) from error
            sources.append(PackageSourceId(resolved))
        _LOGGER.debug(
            "fallback_resolved",
            root=str(self._root),
            sources=[str(source) for source in sources],
        )
        return sources

    def index_config(self) -> PackageIndexConfig:
        """Read ``index/config.json``.

        Raises:
            PackageNotFoundError: If the config file is missing.
            RegistryConfigError: If the config file is malformed.
        """
        config_path = self._root / INDEX_DIR_NAME / INDEX_CONFIG_FILE_NAME
        try:
            text = config_path.read_text(encoding="utf-8")
        except FileNotFoundError as error:
            raise PackageNotFoundError("Index config", config_path) from error
        except OSError as error:
            raise RegistryIOError("read index config", config_path, error) from error
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as error:
            raise RegistryConfigError(
                f"Failed to parse index config at {config_path}: {error.msg}."
            ) from error
        return _index_config_from_payload(payload, config_path)

    def index_path(self, name: PackageName) -> Path:
        return self._root / INDEX_DIR_NAME / name.scope / name.name

    def content_path(self, package_id: PackageId) -> Path:
        name = package_id.name
        file_name = f"{package_id.version_text}{CONTENT_FILE_EXTENSION}"
        return self._root / CONTENTS_DIR_NAME / name.scope / name.name / file_name

    def _index_log(self, name: PackageName) -> IndexLog:
        return IndexLog(self.index_path(name))

    def _read_index(self, name: PackageName) -> list[Manifest]:
        """Parse every record of a package index or fail as a whole."""
        manifests: list[Manifest] = []
        records = self._index_log(name).read_all()
        for line_number, record in enumerate(records, start=1):
            try:
                manifests.append(decode_manifest_line(record))
            except (ValueError, RegistryValidationError) as error:
                raise ManifestParseError(str(name), line_number, error) from error
        return manifests


def _ensure_directory(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise RegistryIOError("create directory", path, error) from error


def _index_config_from_payload(payload: object, config_path: Path) -> PackageIndexConfig:
    if not isinstance(payload, dict):
        raise RegistryConfigError(
            f"Failed to parse index config at {config_path}: expected JSON object at top level."
        )
    entries = payload.get("fallback_registries", [])
    if not isinstance(entries, list) or not all(isinstance(item, str) for item in entries):
        raise RegistryConfigError(
            f"Index config at {config_path} has invalid 'fallback_registries': "
            "expected a list of relative path strings."
        )
    return PackageIndexConfig(fallback_registries=tuple(entries))
