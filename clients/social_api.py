"""
Social API Client - authorized access to the upstream users/posts/comments API.

Endpoints consumed:
- GET /users                   -> {"users": {id: name}}
- GET /users/{id}/posts        -> {"posts": [...]}
- GET /posts/{id}/comments     -> {"comments": [...]}

Every failure (transport, HTTP status, payload shape) surfaces as ApiError;
deciding whether it is fatal is left to the caller.
"""
from typing import Any

import httpx
from loguru import logger

from .auth import TokenProvider


class ApiError(Exception):
    """Raised when an upstream call fails or returns an unexpected payload."""
    pass


class SocialApiClient:
    """Thin async client over the upstream social data API."""

    def __init__(self, base_url: str, token_provider: TokenProvider, http_client: httpx.AsyncClient):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.http_client = http_client

    async def fetch_users(self) -> dict[str, str]:
        """Mapping of user id -> display name."""
        payload = await self._get("/users")
        users = payload.get("users")
        if not isinstance(users, dict):
            raise ApiError(f"Unexpected users payload: {type(users).__name__}")
        return users

    async def fetch_user_posts(self, user_id: Any) -> list[dict]:
        """Posts authored by one user; a missing key means no posts."""
        payload = await self._get(f"/users/{user_id}/posts")
        return self._list_field(payload, "posts")

    async def fetch_post_comments(self, post_id: Any) -> list[dict]:
        """Comments on one post; a missing key means no comments."""
        payload = await self._get(f"/posts/{post_id}/comments")
        return self._list_field(payload, "comments")

    @staticmethod
    def _list_field(payload: dict, field: str) -> list[dict]:
        items = payload.get(field)
        if items is None:
            return []
        if not isinstance(items, list):
            raise ApiError(f"Unexpected {field} payload: {type(items).__name__}")
        return items

    async def _get(self, path: str) -> dict:
        token = await self.token_provider.get_token()
        url = f"{self.base_url}{path}"

        try:
            response = await self.http_client.get(url, headers={"Authorization": token})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == httpx.codes.UNAUTHORIZED:
                self.token_provider.invalidate()
            logger.debug(f"[API] HTTP error {status} for GET {path}")
            raise ApiError(f"HTTP error {status} for GET {path}") from e
        except httpx.RequestError as e:
            logger.debug(f"[API] Request error for GET {path}: {e}")
            raise ApiError(f"Request error for GET {path}: {e}") from e
        except ValueError as e:
            raise ApiError(f"Invalid JSON from GET {path}") from e

        if not isinstance(payload, dict):
            raise ApiError(f"Unexpected payload from GET {path}: {type(payload).__name__}")
        return payload
