"""
Selection Engine

Heap-based top-K and priority extraction used to build ranked views.

Components:
- BinaryHeap: comparator-parameterised array heap
- BoundedTopK / PriorityExtractor: selection primitives
- select_*: ranking policies for users and posts
"""

from .heap import BinaryHeap
from .topk import BoundedTopK, PriorityExtractor
from .policies import (
    DEFAULT_TOP_K,
    select_top_users,
    select_latest_posts,
    select_popular_posts,
)


__all__ = [
    # Primitives
    "BinaryHeap",
    "BoundedTopK",
    "PriorityExtractor",
    # Policies
    "DEFAULT_TOP_K",
    "select_top_users",
    "select_latest_posts",
    "select_popular_posts",
]
