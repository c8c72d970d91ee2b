"""
Ranked view definitions.

Each view couples an aggregation with a selection policy, plus its own TTL
and refresh interval. Users change slowly and get the longer settings; the
post views share the shorter ones.
"""
from dataclasses import dataclass
from typing import Awaitable, Callable, List

from config import Settings
from constants import ViewKey
from .aggregator import Aggregator
from .selection import select_latest_posts, select_popular_posts, select_top_users


@dataclass(frozen=True)
class ViewSpec:
    """How to compute one ranked view and how long it stays fresh."""
    key: ViewKey
    compute: Callable[[], Awaitable[List[dict]]]
    ttl_seconds: float
    refresh_interval_seconds: float


async def compute_top_users(aggregator: Aggregator, k: int) -> List[dict]:
    users = await aggregator.aggregate_user_activity()
    return [user.to_dict() for user in select_top_users(users, k)]


async def compute_latest_posts(aggregator: Aggregator, count: int) -> List[dict]:
    posts = await aggregator.aggregate_all_posts()
    return [post.to_dict() for post in select_latest_posts(posts, count)]


async def compute_popular_posts(aggregator: Aggregator) -> List[dict]:
    posts = await aggregator.aggregate_commented_posts()
    return [post.to_dict() for post in select_popular_posts(posts)]


def build_views(aggregator: Aggregator, config: Settings) -> List[ViewSpec]:
    """The three views served by the API."""
    return [
        ViewSpec(
            key=ViewKey.TOP_USERS,
            compute=lambda: compute_top_users(aggregator, config.TOP_K),
            ttl_seconds=config.CACHE_TTL_USERS,
            refresh_interval_seconds=config.USERS_REFRESH_INTERVAL_SECONDS,
        ),
        ViewSpec(
            key=ViewKey.LATEST_POSTS,
            compute=lambda: compute_latest_posts(aggregator, config.TOP_K),
            ttl_seconds=config.CACHE_TTL_POSTS,
            refresh_interval_seconds=config.POSTS_REFRESH_INTERVAL_SECONDS,
        ),
        ViewSpec(
            key=ViewKey.POPULAR_POSTS,
            compute=lambda: compute_popular_posts(aggregator),
            ttl_seconds=config.CACHE_TTL_POSTS,
            refresh_interval_seconds=config.POSTS_REFRESH_INTERVAL_SECONDS,
        ),
    ]
