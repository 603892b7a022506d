"""Internal link inventory: published articles the prompt builder may cite."""

import threading
import time
from typing import List, Optional, Protocol

from ..models import LinkTarget
from .prompts import MAX_LINK_INVENTORY


class PublishedSource(Protocol):
    """Anything that can list published articles as link targets."""

    def list_published(self, limit: int) -> List[LinkTarget]:
        ...


class LinkInventory:
    """Read-only, cached view over published articles.

    One instance can be shared by concurrent generations. The cached list is
    replaced wholesale on refresh and never mutated in place.
    """

    def __init__(
        self,
        source: PublishedSource,
        limit: int = MAX_LINK_INVENTORY,
        ttl_seconds: float = 300.0,
    ) -> None:
        self.source = source
        self.limit = max(0, min(limit, MAX_LINK_INVENTORY))
        self.ttl_seconds = ttl_seconds
        self._cached: Optional[List[LinkTarget]] = None
        self._fetched_at = 0.0
        self._lock = threading.Lock()

    def list(self) -> List[LinkTarget]:
        """Return up to ``limit`` link targets, refreshing the cache when stale."""
        if self.limit == 0:
            return []

        with self._lock:
            stale = (
                self._cached is None
                or self.ttl_seconds <= 0
                or time.monotonic() - self._fetched_at >= self.ttl_seconds
            )
            if stale:
                self._cached = list(self.source.list_published(self.limit))[: self.limit]
                self._fetched_at = time.monotonic()
            return list(self._cached)

    def invalidate(self) -> None:
        """Drop the cached list so the next call refetches."""
        with self._lock:
            self._cached = None
