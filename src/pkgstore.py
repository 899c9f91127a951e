"""Public SDK surface for pkgstore.

This module provides a stable import path for embedding callers.
It re-exports the registry store, fallback map and typed models.
"""

from __future__ import annotations

from core.config import RegistryConfig
from core.errors import (
    FallbackResolutionError,
    ManifestParseError,
    PackageNotFoundError,
    RegistryConfigError,
    RegistryError,
    RegistryIOError,
    RegistryValidationError,
    SnapshotError,
)
from core.types import (
    Manifest,
    PackageContents,
    PackageId,
    PackageIndexConfig,
    PackageMetadata,
    PackageName,
    PackageReq,
    PackageSourceId,
)
from registry.package_builder import PackageBuilder
from registry.registry_store import RegistryStore
from registry.source_map import PackageSourceMap, SourceQueryResult
from snapshot.directory_snapshot import capture, render_yaml

__all__ = [
    "FallbackResolutionError",
    "Manifest",
    "ManifestParseError",
    "PackageBuilder",
    "PackageContents",
    "PackageId",
    "PackageIndexConfig",
    "PackageMetadata",
    "PackageName",
    "PackageNotFoundError",
    "PackageReq",
    "PackageSourceId",
    "PackageSourceMap",
    "RegistryConfig",
    "RegistryConfigError",
    "RegistryError",
    "RegistryIOError",
    "RegistryStore",
    "RegistryValidationError",
    "SnapshotError",
    "SourceQueryResult",
    "capture",
    "render_yaml",
]
