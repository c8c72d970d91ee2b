"""
Processor package for the Social Rankings Service.

Ranking pipeline:
- Aggregator: pull users/posts/comments with per-entity failure isolation
- Selection: reduce raw entities to ranked views (top-K, latest, popular)
- RefreshOrchestrator: TTL cache + scheduled recomputation

Main entry point: RefreshOrchestrator
"""

from .models import Post, UserActivity, id_sort_key
from .aggregator import Aggregator, UserListingError
from .cache import CacheEntry, TTLCache
from .rankings import ViewSpec, build_views
from .refresh import RefreshOrchestrator

__all__ = [
    # Orchestration
    "RefreshOrchestrator",
    "ViewSpec",
    "build_views",
    # Aggregation
    "Aggregator",
    "UserListingError",
    # Cache
    "CacheEntry",
    "TTLCache",
    # Models
    "Post",
    "UserActivity",
    "id_sort_key",
]
