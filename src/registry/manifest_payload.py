"""Shared JSON serialization for manifest index records.

This module centralizes manifest encoding for index lines.
Each manifest becomes exactly one line of compact JSON.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from core.constants import DEFAULT_REALM, INDEX_ENCODING
from core.errors import RegistryValidationError
from core.types import Manifest, PackageMetadata, PackageName, parse_version

_KNOWN_KEYS = ("package", "dependencies", "server-dependencies", "dev-dependencies")


def manifest_to_payload(manifest: Manifest) -> dict[str, Any]:
    """Serialize a manifest into a JSON-safe payload.

    Args:
        manifest: Manifest instance.

    Returns:
        Dictionary payload for JSON encoding.
    """
    package = manifest.package
    package_payload: dict[str, Any] = {
        "name": str(package.name),
        "version": str(package.version),
        "registry": package.registry,
        "realm": package.realm,
    }
    if package.description is not None:
        package_payload["description"] = package.description
    if package.license is not None:
        package_payload["license"] = package.license
    package_payload["authors"] = list(package.authors)
    payload: dict[str, Any] = {
        "package": package_payload,
        "dependencies": dict(manifest.dependencies),
        "server-dependencies": dict(manifest.server_dependencies),
        "dev-dependencies": dict(manifest.dev_dependencies),
    }
    for key, value in manifest.extra_fields.items():
        payload.setdefault(key, value)
    return payload


def manifest_from_payload(payload: object) -> Manifest:
    """Deserialize a JSON payload into a manifest.

    Args:
        payload: Decoded JSON value of one index line.

    Returns:
        Parsed manifest.

    Raises:
        RegistryValidationError: If required fields are missing or invalid.
    """
    root = _expect_mapping(payload, "manifest")
    package_payload = _expect_mapping(root.get("package"), "package section")
    if "name" not in package_payload or "version" not in package_payload:
        raise RegistryValidationError("Manifest package section requires 'name' and 'version'.")
    package = PackageMetadata(
        name=PackageName.parse(str(package_payload["name"])),
        version=parse_version(str(package_payload["version"])),
        registry=str(package_payload.get("registry", "")),
        realm=str(package_payload.get("realm", DEFAULT_REALM)),
        description=_optional_str(package_payload.get("description")),
        license=_optional_str(package_payload.get("license")),
        authors=_author_list(package_payload.get("authors", [])),
    )
    return Manifest(
        package=package,
        dependencies=_dependency_table(root, "dependencies"),
        server_dependencies=_dependency_table(root, "server-dependencies"),
        dev_dependencies=_dependency_table(root, "dev-dependencies"),
        extra_fields={key: value for key, value in root.items() if key not in _KNOWN_KEYS},
    )


def encode_manifest_line(manifest: Manifest) -> bytes:
    """Encode a manifest as one index record without the line terminator."""
    text = json.dumps(manifest_to_payload(manifest), separators=(",", ":"), ensure_ascii=False)
    return text.encode(INDEX_ENCODING)


def decode_manifest_line(record: bytes) -> Manifest:
    """Decode one index record into a manifest.

    Raises:
        ValueError: If the record is not UTF-8 JSON. ``json.JSONDecodeError``
            and ``UnicodeDecodeError`` are both ``ValueError`` subclasses.
        RegistryValidationError: If the JSON is not a valid manifest.
    """
    return manifest_from_payload(json.loads(record.decode(INDEX_ENCODING)))


def _expect_mapping(value: object, label: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise RegistryValidationError(f"Expected {label} to be a JSON object.")
    return value


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)


def _author_list(value: object) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(author, str) for author in value):
        raise RegistryValidationError("Expected package authors to be a list of strings.")
    return tuple(value)


def _dependency_table(root: Mapping[str, Any], key: str) -> dict[str, str]:
    table = _expect_mapping(root.get(key, {}), f"'{key}' table")
    return {str(alias): str(requirement) for alias, requirement in table.items()}
