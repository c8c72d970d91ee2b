"""
Service wiring - builds every long-lived object once at startup.

The cache, token provider, client, aggregator, orchestrator and scheduler are
constructed here and passed by reference; nothing else keeps module-level
mutable state.
"""
from dataclasses import dataclass
from typing import Optional

import httpx

from clients.auth import TokenProvider
from clients.social_api import SocialApiClient
from config import Settings
from processor.aggregator import Aggregator
from processor.cache import TTLCache
from processor.rankings import build_views
from processor.refresh import RefreshOrchestrator
from scheduler import RankingScheduler


@dataclass
class RankingServices:
    """Everything the API and the scheduler share."""
    settings: Settings
    http_client: httpx.AsyncClient
    token_provider: TokenProvider
    client: SocialApiClient
    aggregator: Aggregator
    cache: TTLCache
    orchestrator: RefreshOrchestrator
    scheduler: RankingScheduler

    async def aclose(self) -> None:
        await self.http_client.aclose()


def build_services(config: Settings, http_client: Optional[httpx.AsyncClient] = None) -> RankingServices:
    """Construct the service graph from settings."""
    http_client = http_client or httpx.AsyncClient(
        timeout=config.REQUEST_TIMEOUT_SECONDS,
        follow_redirects=True,
    )

    token_provider = TokenProvider(
        base_url=config.TEST_SERVER_URL,
        credentials=config.credentials(),
        http_client=http_client,
        refresh_margin_seconds=config.TOKEN_REFRESH_MARGIN_SECONDS,
    )
    client = SocialApiClient(config.TEST_SERVER_URL, token_provider, http_client)
    aggregator = Aggregator(client, max_concurrency=config.FETCH_CONCURRENCY)

    cache = TTLCache(default_ttl=config.CACHE_TTL_POSTS)
    orchestrator = RefreshOrchestrator(cache, build_views(aggregator, config))

    scheduler = RankingScheduler(orchestrator, initial_delay_seconds=config.INITIAL_REFRESH_DELAY_SECONDS)
    token_provider.renewal_scheduler = scheduler

    return RankingServices(
        settings=config,
        http_client=http_client,
        token_provider=token_provider,
        client=client,
        aggregator=aggregator,
        cache=cache,
        orchestrator=orchestrator,
        scheduler=scheduler,
    )
