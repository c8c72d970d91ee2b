"""
Refresh Orchestrator - decides when ranked views are recomputed.

- scheduled_refresh(key): unconditional recompute + overwrite, run by the
  scheduler on a fixed interval per view. Failures keep the previous value.
- get_or_compute(key): read path. Serves the cached view; on a cold cache
  recomputes synchronously and stores the result.

There is no single-flight coalescing: if a cold-start computation and a
scheduled refresh for the same key overlap, both complete and the later write
wins.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from loguru import logger

from constants import ViewKey
from .aggregator import UserListingError
from .cache import TTLCache
from .rankings import ViewSpec


class RefreshOrchestrator:
    """Owns the view cache and the recomputation of every registered view."""

    def __init__(self, cache: TTLCache, views: Iterable[ViewSpec]):
        self.cache = cache
        self._views: Dict[ViewKey, ViewSpec] = {view.key: view for view in views}
        self.last_refreshed: Dict[ViewKey, datetime] = {}

    @property
    def views(self) -> List[ViewSpec]:
        return list(self._views.values())

    def view(self, key: Union[ViewKey, str]) -> ViewSpec:
        """Look up a view by key; raises KeyError for unknown keys."""
        try:
            return self._views[ViewKey(key)]
        except (ValueError, KeyError):
            raise KeyError(f"Unknown view: {key}") from None

    def cached(self, key: Union[ViewKey, str]) -> Optional[Any]:
        view = self.view(key)
        return self.cache.get(view.key.value)

    async def get_or_compute(self, key: Union[ViewKey, str]) -> Any:
        """
        Return the cached view, recomputing it on a miss.

        If the user listing is unavailable the result is an empty view that is
        not cached. Other errors propagate to the caller.
        """
        view = self.view(key)
        cached = self.cache.get(view.key.value)
        if cached is not None:
            return cached

        logger.info(f"[Refresh] Cache miss for {view.key.value}, computing on demand")
        try:
            value = await view.compute()
        except UserListingError as e:
            logger.error(f"[Refresh] Cannot compute {view.key.value}: {e}")
            return []

        self._store(view, value)
        return value

    async def scheduled_refresh(self, key: Union[ViewKey, str]) -> bool:
        """
        Recompute a view and overwrite its cache entry.

        Returns:
            True if the cache was updated, False if the previous value was kept
        """
        view = self.view(key)
        logger.info(f"[Refresh] Updating {view.key.value}...")

        try:
            value = await view.compute()
        except UserListingError as e:
            logger.error(f"[Refresh] {view.key.value} not updated, keeping previous value: {e}")
            return False
        except Exception as e:
            logger.exception(f"[Refresh] {view.key.value} refresh failed: {e}")
            return False

        self._store(view, value)
        logger.info(f"[Refresh] {view.key.value} updated ({len(value)} entries)")
        return True

    async def refresh_all(self) -> Dict[ViewKey, bool]:
        """Run scheduled_refresh for every view, in registration order."""
        results = {}
        for key in self._views:
            results[key] = await self.scheduled_refresh(key)
        return results

    def flush(self) -> None:
        """Invalidate every cached view."""
        for key in self._views:
            self.cache.delete(key.value)
        logger.info("[Refresh] All views flushed")

    def _store(self, view: ViewSpec, value: Any) -> None:
        self.cache.set(view.key.value, value, ttl=view.ttl_seconds)
        self.last_refreshed[view.key] = datetime.now()
