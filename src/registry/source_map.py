"""Fallback-chain resolution across registry stores.

This module walks a primary registry and its configured fallbacks
to find the first source that can satisfy a package request.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from core.errors import PackageNotFoundError
from core.logging_config import get_logger
from core.types import Manifest, PackageContents, PackageId, PackageReq, PackageSourceId
from registry.registry_store import RegistryStore

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class SourceQueryResult:
    """Manifests matched by one source.

    Attributes:
        source_id: Source that produced the manifests.
        manifests: Matching manifests in publish order.
    """

    source_id: PackageSourceId
    manifests: tuple[Manifest, ...]


class PackageSourceMap:
    """Registry of opened stores keyed by source id."""

    def __init__(self, primary: RegistryStore) -> None:
        self._primary_id = primary.source_id
        self._fallback_policy = primary.fallback_policy
        self._sources: dict[PackageSourceId, RegistryStore] = {self._primary_id: primary}

    @property
    def primary_id(self) -> PackageSourceId:
        return self._primary_id

    def source(self, source_id: PackageSourceId) -> RegistryStore:
        """Return the store for a source id, opening it on first use."""
        store = self._sources.get(source_id)
        if store is None:
            store = RegistryStore(source_id.path, fallback_policy=self._fallback_policy)
            self._sources[source_id] = store
        return store

    def query_with_fallbacks(self, request: PackageReq) -> SourceQueryResult:
        """Query the primary store, then fallbacks breadth-first.

        Sources are visited at most once. A source without an index for
        the package is skipped; a source without an index config has no
        further fallbacks. Parse and resolution failures propagate.

        Args:
            request: Package request to satisfy.

        Returns:
            First non-empty match, or an empty result for the primary source.
        """
        pending: deque[PackageSourceId] = deque([self._primary_id])
        visited: set[PackageSourceId] = set()
        while pending:
            source_id = pending.popleft()
            if source_id in visited:
                continue
            visited.add(source_id)
            store = self.source(source_id)
            try:
                manifests = store.query(request)
            except PackageNotFoundError:
                manifests = []
            if manifests:
                _LOGGER.info(
                    "fallback_source_selected",
                    request=str(request),
                    source=str(source_id),
                    matched=len(manifests),
                )
                return SourceQueryResult(source_id=source_id, manifests=tuple(manifests))
            pending.extend(self._fallbacks_of(store))
        return SourceQueryResult(source_id=self._primary_id, manifests=())

    def fetch(self, source_id: PackageSourceId, package_id: PackageId) -> PackageContents:
        """Download package contents from a specific source."""
        return self.source(source_id).fetch(package_id)

    def _fallbacks_of(self, store: RegistryStore) -> list[PackageSourceId]:
        try:
            return store.fallback_sources()
        except PackageNotFoundError:
            return []
