"""
Aggregation Layer - builds scored entity sets from upstream fetches.

Failure isolation is per entity: a failed posts/comments fetch downgrades that
one user or post to zero and the cycle continues. Only the top-level user
listing is fatal for a cycle (UserListingError). Authentication failures are
never absorbed here.
"""
import asyncio
from typing import Any, Awaitable, Callable, Iterable, List, Optional, TypeVar

from loguru import logger

from clients.social_api import ApiError, SocialApiClient
from .models import Post, UserActivity

T = TypeVar("T")
R = TypeVar("R")


class UserListingError(Exception):
    """Raised when the list of known users cannot be fetched."""
    pass


class Aggregator:
    """
    Pulls users, posts and comments through the API client.

    Per-entity requests run through a semaphore of `max_concurrency`; with the
    default of 1 they form a sequential chain. Results always follow the
    upstream enumeration order.
    """

    def __init__(self, client: SocialApiClient, max_concurrency: int = 1):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.client = client
        self.max_concurrency = max_concurrency
        self._posts_task: Optional["asyncio.Future[List[Post]]"] = None

    async def list_users(self) -> dict[str, str]:
        """Known users as id -> name. Raises UserListingError on failure."""
        try:
            users = await self.client.fetch_users()
        except ApiError as e:
            logger.error(f"[Aggregator] Could not list users: {e}")
            raise UserListingError(str(e)) from e
        logger.debug(f"[Aggregator] Listed {len(users)} users")
        return users

    async def aggregate_user_activity(self) -> List[UserActivity]:
        """One UserActivity per known user; failed post fetches count as 0."""
        users = await self.list_users()
        user_ids = list(users)

        post_lists = await self._map_isolated(
            self.client.fetch_user_posts,
            user_ids,
            fallback=[],
            describe=lambda user_id: f"posts for user {user_id}",
        )

        return [
            UserActivity(id=user_id, name=users[user_id], post_count=len(posts))
            for user_id, posts in zip(user_ids, post_lists)
        ]

    async def aggregate_all_posts(self) -> List[Post]:
        """
        Every user's posts tagged with the owner's name.

        Concurrent callers (the latest and popular views refresh on the same
        interval) share one in-flight fetch. Once it finishes, the next call
        fetches again.
        """
        task = self._posts_task
        if task is None:
            task = asyncio.ensure_future(self._collect_posts())
            task.add_done_callback(self._forget_posts_task)
            self._posts_task = task
        else:
            logger.debug("[Aggregator] Joining in-flight posts fetch")
        return list(await asyncio.shield(task))

    def _forget_posts_task(self, task: "asyncio.Future[List[Post]]") -> None:
        if self._posts_task is task:
            self._posts_task = None

    async def _collect_posts(self) -> List[Post]:
        users = await self.list_users()
        user_ids = list(users)

        post_lists = await self._map_isolated(
            self.client.fetch_user_posts,
            user_ids,
            fallback=[],
            describe=lambda user_id: f"posts for user {user_id}",
        )

        all_posts = []
        for user_id, payloads in zip(user_ids, post_lists):
            for payload in payloads:
                if not isinstance(payload, dict) or "id" not in payload:
                    logger.warning(f"[Aggregator] Skipping malformed post for user {user_id}: {payload!r}")
                    continue
                all_posts.append(Post.from_payload(payload, username=users[user_id]))
        return all_posts

    async def aggregate_post_comments(self, post: Post) -> int:
        """Comment count for one post; 0 if the fetch fails."""
        try:
            comments = await self.client.fetch_post_comments(post.id)
        except ApiError as e:
            logger.warning(f"[Aggregator] Error fetching comments for post {post.id}: {e}")
            return 0
        return len(comments)

    async def aggregate_commented_posts(self) -> List[Post]:
        """All posts, each annotated with its comment count."""
        posts = await self.aggregate_all_posts()
        counts = await self._map_ordered(self.aggregate_post_comments, posts)
        return [post.with_comment_count(count) for post, count in zip(posts, counts)]

    # ------------------------------------------------------------------
    # Fan-out helpers
    # ------------------------------------------------------------------

    async def _map_ordered(self, func: Callable[[T], Awaitable[R]], items: Iterable[T]) -> List[R]:
        """
        Apply `func` to every item, keeping input order.

        The first exception stops the fan-out: items still waiting for the
        semaphore are skipped and that exception is raised.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)
        aborted = asyncio.Event()

        async def bounded(item: T) -> Optional[R]:
            async with semaphore:
                if aborted.is_set():
                    return None
                try:
                    return await func(item)
                except Exception:
                    aborted.set()
                    raise

        results = await asyncio.gather(*(bounded(item) for item in items), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)

    async def _map_isolated(
        self,
        func: Callable[[T], Awaitable[R]],
        items: Iterable[T],
        fallback: Any,
        describe: Callable[[T], str],
    ) -> List[R]:
        """Like _map_ordered, but an ApiError for one item yields `fallback` for it."""

        async def isolated(item: T) -> R:
            try:
                return await func(item)
            except ApiError as e:
                logger.warning(f"[Aggregator] Error fetching {describe(item)}: {e}")
                return fallback

        return await self._map_ordered(isolated, items)
