"""Registry storage layer.

This module persists package manifests and content blobs on disk.
It powers version queries and fallback-chain resolution.
"""
