"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path so core, registry and snapshot import."""
    src_path = Path(__file__).resolve().parent.parent / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _isolate_registry_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer PKGSTORE_* settings out of test runs."""
    for name in ("PKGSTORE_REGISTRY_ROOT", "PKGSTORE_FALLBACK_POLICY"):
        monkeypatch.delenv(name, raising=False)
