"""Registry exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each failure carries the path or package it concerns for debuggability.
"""

from __future__ import annotations

from pathlib import Path


class RegistryError(Exception):
    """Base exception for all registry store failures."""


class RegistryConfigError(RegistryError):
    """Raised for invalid runtime or index configuration."""


class RegistryValidationError(RegistryError):
    """Raised for malformed package names, versions, or requirements."""


class RegistryDependencyError(RegistryError):
    """Raised when an optional runtime dependency is missing."""


class PackageNotFoundError(RegistryError):
    """Raised when an index, content blob, or config file is absent.

    Callers walking a fallback chain treat this as "try the next source"
    rather than as an operational failure.
    """

    def __init__(self, what: str, path: Path) -> None:
        super().__init__(f"{what} not found at {path}.")
        self.what = what
        self.path = path


class RegistryIOError(RegistryError):
    """Raised when a filesystem operation fails."""

    def __init__(self, operation: str, path: Path, reason: object) -> None:
        super().__init__(f"Failed to {operation} {path}: {reason}")
        self.operation = operation
        self.path = path


class ManifestParseError(RegistryError):
    """Raised when an index line cannot be parsed into a manifest."""

    def __init__(self, package_name: str, line_number: int, reason: object) -> None:
        super().__init__(
            f"Could not parse package index entry {line_number} for {package_name}: {reason}"
        )
        self.package_name = package_name
        self.line_number = line_number


class FallbackResolutionError(RegistryError):
    """Raised when a configured fallback registry path cannot be resolved."""

    def __init__(self, entry: str, path: Path) -> None:
        super().__init__(
            f"Fallback registry '{entry}' does not resolve to an existing path ({path}). "
            "Fix index/config.json or set PKGSTORE_FALLBACK_POLICY=skip."
        )
        self.entry = entry
        self.path = path


class SnapshotError(RegistryError):
    """Raised when a directory subtree cannot be captured."""

    def __init__(self, path: Path, reason: object) -> None:
        super().__init__(f"Cannot snapshot {path}: {reason}")
        self.path = path
