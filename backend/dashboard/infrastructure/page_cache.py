"""Page Cache — per-path staleness marker behind the revalidate_path boundary.

Invariants:
    - revalidate_path(p) bumps the generation of p and of nothing else
    - generation(p) only ever increases; a fresh path starts at 0

Design Decisions:
    - Only the invalidation side lives here: page renderers keep their own output and
      compare generation(p) with the one they rendered at to decide whether to recompute
    - Module-level singleton behind the get_page_cache dependency: one process, one cache
      (tests override the dependency with a fresh instance)
    - Plain dict, no locking: all access happens on the event loop thread
"""

import logging

logger = logging.getLogger(__name__)


class PageCache:
    """Generation counter per path."""

    def __init__(self):
        self._generations: dict[str, int] = {}

    def generation(self, path: str) -> int:
        return self._generations.get(path, 0)

    def revalidate_path(self, path: str) -> None:
        """Mark path stale so the next request recomputes it."""
        self._generations[path] = self.generation(path) + 1
        logger.debug(f"Revalidated {path}", extra={"path": path})


page_cache = PageCache()


def get_page_cache() -> PageCache:
    """FastAPI dependency for the process-wide page cache."""
    return page_cache
