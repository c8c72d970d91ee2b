"""
Shared Enums

Application-wide enums used across multiple modules.
"""
from enum import Enum


class ViewKey(str, Enum):
    """Logical names of the cached ranked views."""
    TOP_USERS = "top_users"
    LATEST_POSTS = "latest_posts"
    POPULAR_POSTS = "popular_posts"


class PostRankingType(str, Enum):
    """Values accepted by the `type` query parameter of GET /posts."""
    LATEST = "latest"
    POPULAR = "popular"


# Which view answers each post ranking type
POST_TYPE_VIEWS = {
    PostRankingType.LATEST: ViewKey.LATEST_POSTS,
    PostRankingType.POPULAR: ViewKey.POPULAR_POSTS,
}
