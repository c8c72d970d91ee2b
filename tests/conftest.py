"""Shared test fixtures for the Social Rankings Service."""

from __future__ import annotations

import httpx
import pytest

from clients.auth import TokenProvider
from clients.social_api import SocialApiClient
from config import Settings
from processor.aggregator import Aggregator

BASE_URL = "http://upstream.test"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRenewalScheduler:
    """Records renewal requests instead of scheduling them."""

    def __init__(self):
        self.scheduled = []

    def schedule_renewal(self, delay_seconds, renew):
        self.scheduled.append((delay_seconds, renew))


def make_posts(user_id: str, post_ids: list[int]) -> list[dict]:
    return [
        {"id": post_id, "userid": int(user_id), "content": f"Post {post_id} by user {user_id}"}
        for post_id in post_ids
    ]


class FakeUpstream:
    """
    In-memory stand-in for the upstream social API, served through
    httpx.MockTransport.

    Default data: 4 users, posts 1..8, posts 2/3/5 tied at 5 comments.
    """

    def __init__(self):
        self.users = {"1": "John Doe", "2": "Jane Doe", "3": "Alice", "4": "Bob"}
        self.posts = {
            "1": make_posts("1", [1, 2]),
            "2": make_posts("2", [3, 4, 5]),
            "3": make_posts("3", [6]),
            "4": make_posts("4", [7, 8]),
        }
        self.comment_counts = {1: 3, 2: 5, 3: 5, 4: 2, 5: 5}
        self.failures: dict[str, int] = {}
        self.auth_status = 200
        self.expires_in = 3600
        self.auth_calls = 0
        self.requests: list[tuple[str, str, str | None]] = []

    def fail(self, path: str, status: int = 500) -> None:
        self.failures[path] = status

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append((request.method, path, request.headers.get("Authorization")))

        if request.method == "POST" and path == "/auth":
            self.auth_calls += 1
            if self.auth_status != 200:
                return httpx.Response(self.auth_status, json={"message": "invalid credentials"})
            return httpx.Response(200, json={
                "access_token": f"tok{self.auth_calls}",
                "token_type": "Bearer",
                "expires_in": self.expires_in,
            })

        if path in self.failures:
            return httpx.Response(self.failures[path], json={"message": "failure"})

        if not (request.headers.get("Authorization") or "").startswith("Bearer "):
            return httpx.Response(401, json={"message": "unauthorized"})

        parts = path.strip("/").split("/")
        if parts == ["users"]:
            return httpx.Response(200, json={"users": self.users})
        if len(parts) == 3 and parts[0] == "users" and parts[2] == "posts":
            return httpx.Response(200, json={"posts": self.posts.get(parts[1], [])})
        if len(parts) == 3 and parts[0] == "posts" and parts[2] == "comments":
            count = self.comment_counts.get(int(parts[1]), 0)
            comments = [{"id": i, "postid": int(parts[1]), "content": "nice"} for i in range(count)]
            return httpx.Response(200, json={"comments": comments})

        return httpx.Response(404, json={"message": "not found"})

    def paths(self) -> list[str]:
        return [path for _, path, _ in self.requests]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def http_client(upstream: FakeUpstream) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))


@pytest.fixture
def renewals() -> FakeRenewalScheduler:
    return FakeRenewalScheduler()


@pytest.fixture
def credentials() -> dict[str, str]:
    return {
        "email": "owner@example.com",
        "name": "Owner",
        "rollNo": "42",
        "accessCode": "code",
        "clientID": "client",
        "clientSecret": "secret",
    }


@pytest.fixture
def token_provider(http_client, credentials, renewals, clock) -> TokenProvider:
    return TokenProvider(
        base_url=BASE_URL,
        credentials=credentials,
        http_client=http_client,
        refresh_margin_seconds=300,
        renewal_scheduler=renewals,
        clock=clock,
    )


@pytest.fixture
def api_client(token_provider, http_client) -> SocialApiClient:
    return SocialApiClient(BASE_URL, token_provider, http_client)


@pytest.fixture
def aggregator(api_client) -> Aggregator:
    return Aggregator(api_client)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        TEST_SERVER_URL=BASE_URL,
        OWNER_EMAIL="owner@example.com",
        OWNER_NAME="Owner",
        ROLL_NO="42",
        ACCESS_CODE="code",
        CLIENT_ID="client",
        CLIENT_SECRET="secret",
    )
