"""Package builder for publish inputs.

This module assembles a manifest and content blob pair so tests and
embedding callers can publish packages without hand-writing manifests.
"""

from __future__ import annotations

from dataclasses import replace

from core.types import (
    Manifest,
    PackageContents,
    PackageMetadata,
    PackageName,
    parse_version,
)


class PackageBuilder:
    """Fluent builder producing a manifest and its contents."""

    def __init__(self, name: str, version: str) -> None:
        package = PackageMetadata(name=PackageName.parse(name), version=parse_version(version))
        self._manifest = Manifest(package=package)
        self._contents = PackageContents.from_bytes(f"{name}@{version}".encode("utf-8"))

    def with_dep(self, alias: str, requirement: str) -> "PackageBuilder":
        dependencies = {**self._manifest.dependencies, alias: requirement}
        self._manifest = replace(self._manifest, dependencies=dependencies)
        return self

    def with_server_dep(self, alias: str, requirement: str) -> "PackageBuilder":
        dependencies = {**self._manifest.server_dependencies, alias: requirement}
        self._manifest = replace(self._manifest, server_dependencies=dependencies)
        return self

    def with_description(self, description: str) -> "PackageBuilder":
        package = replace(self._manifest.package, description=description)
        self._manifest = replace(self._manifest, package=package)
        return self

    def with_realm(self, realm: str) -> "PackageBuilder":
        package = replace(self._manifest.package, realm=realm)
        self._manifest = replace(self._manifest, package=package)
        return self

    def with_contents(self, data: bytes) -> "PackageBuilder":
        """Replace the default contents, which are the package id text."""
        self._contents = PackageContents.from_bytes(data)
        return self

    def manifest(self) -> Manifest:
        return self._manifest

    def contents(self) -> PackageContents:
        return self._contents
