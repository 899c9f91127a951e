"""Shared typed models.

This module defines immutable package identity, manifest, request and
content models used by the registry store, fallback resolution and
package builder to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import hashlib
from pathlib import Path
import re
from types import MappingProxyType
from typing import Any, Mapping

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from core.constants import (
    DEFAULT_REALM,
    MAX_NAME_SEGMENT_LENGTH,
    PACKAGE_NAME_SEPARATOR,
    PACKAGE_REQ_SEPARATOR,
)
from core.errors import RegistryValidationError

_NAME_SEGMENT_PATTERN = re.compile(r"[a-z0-9-]+")


@dataclass(frozen=True, order=True)
class PackageName:
    """Scoped package name such as ``acme/widgets``.

    Attributes:
        scope: Publisher or organization namespace.
        name: Package name within the scope.
    """

    scope: str
    name: str

    def __post_init__(self) -> None:
        _validate_name_segment(self.scope, "scope")
        _validate_name_segment(self.name, "name")

    @classmethod
    def parse(cls, value: str) -> "PackageName":
        """Parse ``scope/name`` text into a package name.

        Raises:
            RegistryValidationError: If the text is not a valid scoped name.
        """
        scope, separator, name = value.partition(PACKAGE_NAME_SEPARATOR)
        if not separator:
            raise RegistryValidationError(
                f"Package name '{value}' is missing a scope. Use the form 'scope/name'."
            )
        return cls(scope=scope, name=name)

    def __str__(self) -> str:
        return f"{self.scope}{PACKAGE_NAME_SEPARATOR}{self.name}"


@dataclass(frozen=True)
class PackageId:
    """Unique identity of one published package version."""

    name: PackageName
    version: Version

    @property
    def version_text(self) -> str:
        return canonical_version_text(self.version)

    def __str__(self) -> str:
        return f"{self.name}{PACKAGE_REQ_SEPARATOR}{self.version}"


@dataclass(frozen=True)
class PackageReq:
    """Query predicate over a package name and a version range.

    Attributes:
        name: Package name the request targets.
        specifier: Version range; an empty set matches every version.
    """

    name: PackageName
    specifier: SpecifierSet = field(default_factory=SpecifierSet)

    @classmethod
    def parse(cls, value: str) -> "PackageReq":
        """Parse ``scope/name@<range>`` text into a request.

        A bare version such as ``1.2.0`` is treated as an exact pin.

        Raises:
            RegistryValidationError: If the name or range is invalid.
        """
        name_text, _, range_text = value.partition(PACKAGE_REQ_SEPARATOR)
        name = PackageName.parse(name_text.strip())
        range_text = range_text.strip()
        if range_text and range_text[0].isdigit():
            range_text = f"=={range_text}"
        try:
            specifier = SpecifierSet(range_text)
        except InvalidSpecifier as error:
            raise RegistryValidationError(
                f"Invalid version range '{range_text}' for {name}: {error}"
            ) from error
        return cls(name=name, specifier=specifier)

    def matches(self, name: PackageName, version: Version) -> bool:
        """Return whether a published name and version satisfy this request."""
        return name == self.name and self.specifier.contains(version)

    def __str__(self) -> str:
        if not str(self.specifier):
            return str(self.name)
        return f"{self.name}{PACKAGE_REQ_SEPARATOR}{self.specifier}"


@dataclass(frozen=True)
class PackageMetadata:
    """The ``package`` section of a manifest.

    Attributes:
        name: Scoped package name.
        version: Published version.
        registry: Registry URL the package declares dependencies against.
        realm: Execution realm, "shared", "server" or "dev".
        description: Optional human description.
        license: Optional license identifier.
        authors: Declared authors.
    """

    name: PackageName
    version: Version
    registry: str = ""
    realm: str = DEFAULT_REALM
    description: str | None = None
    license: str | None = None
    authors: tuple[str, ...] = ()


@dataclass(frozen=True)
class Manifest:
    """Published package manifest; immutable once written to an index.

    Attributes:
        package: Identity and descriptive metadata.
        dependencies: Alias to requirement text for shared dependencies.
        server_dependencies: Alias to requirement text for server-only dependencies.
        dev_dependencies: Alias to requirement text for dev-only dependencies.
        extra_fields: Any other top-level keys, carried through verbatim.
    """

    package: PackageMetadata
    dependencies: Mapping[str, str] = field(default_factory=dict)
    server_dependencies: Mapping[str, str] = field(default_factory=dict)
    dev_dependencies: Mapping[str, str] = field(default_factory=dict)
    extra_fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("dependencies", "server_dependencies", "dev_dependencies", "extra_fields"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @property
    def package_id(self) -> PackageId:
        return PackageId(name=self.package.name, version=self.package.version)


@dataclass(frozen=True)
class PackageContents:
    """Opaque published artifact bytes.

    The store never inspects the structure of ``data``.
    """

    data: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> "PackageContents":
        return cls(data=bytes(data))

    def as_bytes(self) -> bytes:
        return self.data

    @property
    def size(self) -> int:
        return len(self.data)

    def sha256(self) -> str:
        """Return the hex SHA-256 digest of the content bytes."""
        return hashlib.sha256(self.data).hexdigest()


@dataclass(frozen=True)
class PackageIndexConfig:
    """Index-level configuration stored at ``index/config.json``.

    Attributes:
        fallback_registries: Paths relative to the registry root, in
            consultation order.
    """

    fallback_registries: tuple[str, ...] = ()


@dataclass(frozen=True)
class PackageSourceId:
    """Reference to a filesystem registry by canonical absolute path."""

    path: Path

    def __str__(self) -> str:
        return str(self.path)


def parse_version(value: str) -> Version:
    """Parse version text.

    Raises:
        RegistryValidationError: If the text is not a valid version.
    """
    try:
        return Version(value)
    except InvalidVersion as error:
        raise RegistryValidationError(f"Invalid package version '{value}': {error}") from error


def _validate_name_segment(value: str, label: str) -> None:
    """Validate one path-safe package name segment.

    Raises:
        RegistryValidationError: If the segment is empty, too long, or
            contains characters outside ``[a-z0-9-]``.
    """
    if not value:
        raise RegistryValidationError(f"Package {label} must not be empty.")
    if len(value) > MAX_NAME_SEGMENT_LENGTH:
        raise RegistryValidationError(
            f"Package {label} '{value}' exceeds {MAX_NAME_SEGMENT_LENGTH} characters."
        )
    if not _NAME_SEGMENT_PATTERN.fullmatch(value):
        raise RegistryValidationError(
            f"Package {label} '{value}' may only contain lowercase letters, digits and '-'."
        )


def canonical_version_text(version: Version) -> str:
    """Render the single spelling shared by every equal version.

    Trailing zero release parts are dropped and the release is padded to
    three parts, so ``1``, ``1.0`` and ``1.0.0.0`` all render as ``1.0.0``.
    """
    release = list(version.release)
    while len(release) > 1 and release[-1] == 0:
        release.pop()
    release.extend([0] * (3 - len(release)))
    text = ".".join(str(part) for part in release)
    if version.epoch:
        text = f"{version.epoch}!{text}"
    if version.pre is not None:
        text += f"{version.pre[0]}{version.pre[1]}"
    if version.post is not None:
        text += f".post{version.post}"
    if version.dev is not None:
        text += f".dev{version.dev}"
    if version.local is not None:
        text += f"+{version.local}"
    return text
