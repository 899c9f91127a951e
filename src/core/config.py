"""Runtime configuration model for the registry store.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_FALLBACK_POLICY,
    DEFAULT_REGISTRY_ROOT,
    SUPPORTED_FALLBACK_POLICIES,
)
from core.errors import RegistryConfigError


@dataclass(frozen=True)
class RegistryConfig:
    """Validated runtime configuration.

    Attributes:
        registry_root: Root directory holding index and contents trees.
        fallback_policy: How unresolvable fallback registries are handled,
            either "fail" or "skip".
    """

    registry_root: Path
    fallback_policy: str

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            RegistryConfigError: If environment values are invalid.
        """
        registry_root_value = os.getenv("PKGSTORE_REGISTRY_ROOT", str(DEFAULT_REGISTRY_ROOT))
        policy_value = os.getenv("PKGSTORE_FALLBACK_POLICY", DEFAULT_FALLBACK_POLICY)
        return cls(
            registry_root=Path(registry_root_value).expanduser().resolve(),
            fallback_policy=parse_fallback_policy(policy_value),
        )


def parse_fallback_policy(raw_value: str) -> str:
    """Parse a fallback policy name.

    Args:
        raw_value: Raw policy text from the environment or a caller.

    Returns:
        Normalized policy name.

    Raises:
        RegistryConfigError: If value is not a supported policy.
    """
    policy = raw_value.strip().lower()
    if policy not in SUPPORTED_FALLBACK_POLICIES:
        raise RegistryConfigError(
            "Invalid fallback policy (PKGSTORE_FALLBACK_POLICY): "
            f"expected one of {', '.join(SUPPORTED_FALLBACK_POLICIES)}, got '{raw_value}'."
        )
    return policy
