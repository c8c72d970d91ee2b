"""
Ranking policies built on the selection primitives.

The two post rankings use different cardinality policies over the same heap:
latest posts take a fixed count, popular posts take every post tied for the
highest comment count.
"""
from typing import Iterable, List

from processor.models import Post, UserActivity, id_sort_key
from .topk import BoundedTopK, PriorityExtractor

DEFAULT_TOP_K = 5


def select_top_users(users: Iterable[UserActivity], k: int = DEFAULT_TOP_K) -> List[UserActivity]:
    """K users with the most posts; ties go to the higher identifier."""
    selector = BoundedTopK(k, key=lambda user: (user.post_count, id_sort_key(user.id)))
    return selector.extend(users).snapshot()


def select_latest_posts(posts: Iterable[Post], count: int = DEFAULT_TOP_K) -> List[Post]:
    """Newest posts, using the identifier as a recency proxy."""
    extractor = PriorityExtractor(key=lambda post: id_sort_key(post.id), items=posts)
    return extractor.take(count)


def select_popular_posts(posts: Iterable[Post]) -> List[Post]:
    """All posts tied for the highest comment count, newest first."""
    extractor = PriorityExtractor(key=lambda post: post.comment_count or 0, items=posts)
    tied = extractor.take_ties()
    return sorted(tied, key=lambda post: id_sort_key(post.id), reverse=True)
