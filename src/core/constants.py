"""Core constants used across registry modules.

This module centralizes directory names and validation limits.
Keeping values here avoids magic literals in store logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_REGISTRY_ROOT = Path(".pkgstore")
INDEX_DIR_NAME = "index"
CONTENTS_DIR_NAME = "contents"
INDEX_CONFIG_FILE_NAME = "config.json"
CONTENT_FILE_EXTENSION = ".zip"
INDEX_ENCODING = "utf-8"
PACKAGE_NAME_SEPARATOR = "/"
PACKAGE_REQ_SEPARATOR = "@"
MAX_NAME_SEGMENT_LENGTH = 64
FALLBACK_POLICY_FAIL = "fail"
FALLBACK_POLICY_SKIP = "skip"
SUPPORTED_FALLBACK_POLICIES = (FALLBACK_POLICY_FAIL, FALLBACK_POLICY_SKIP)
DEFAULT_FALLBACK_POLICY = FALLBACK_POLICY_FAIL
DEFAULT_REALM = "shared"
