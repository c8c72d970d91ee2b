"""
Session token provider for the upstream social API.

Lifecycle:
    UNAUTHENTICATED -> AUTHENTICATED -> RENEWING -> AUTHENTICATED

A one-shot renewal is scheduled at `expires_in - margin` after every
successful exchange. A failed exchange keeps the previous state and token,
raises to the caller and is not retried.
"""
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol

import httpx
from loguru import logger


class AuthenticationError(Exception):
    """Raised when the credential exchange fails."""
    pass


class TokenState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    RENEWING = "renewing"


class RenewalScheduler(Protocol):
    """Anything able to run `renew` once after `delay_seconds`."""

    def schedule_renewal(self, delay_seconds: float, renew: Callable[[], Awaitable[None]]) -> None:
        ...


@dataclass(frozen=True)
class SessionToken:
    """Authorization header value with its expiry on the provider's clock."""
    value: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TokenProvider:
    """Holds exactly one active token and renews it before it expires."""

    def __init__(
        self,
        base_url: str,
        credentials: dict[str, str],
        http_client: httpx.AsyncClient,
        refresh_margin_seconds: float = 300,
        renewal_scheduler: Optional[RenewalScheduler] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.http_client = http_client
        self.refresh_margin_seconds = refresh_margin_seconds
        self.renewal_scheduler = renewal_scheduler
        self.clock = clock

        self.state = TokenState.UNAUTHENTICATED
        self._token: Optional[SessionToken] = None

    @property
    def token(self) -> Optional[SessionToken]:
        return self._token

    async def get_token(self) -> str:
        """Return the current token, exchanging credentials if there is none."""
        if self._token is not None and not self._token.is_expired(self.clock()):
            return self._token.value
        token = await self.authenticate()
        return token.value

    async def authenticate(self) -> SessionToken:
        """
        Exchange credentials for a new token.

        Raises:
            AuthenticationError: on transport, status or payload failure
        """
        try:
            response = await self.http_client.post(f"{self.base_url}/auth", json=self.credentials)
            response.raise_for_status()
            payload = response.json()
            access_token = payload["access_token"]
            token_type = payload["token_type"]
            expires_in = float(payload["expires_in"])
        except httpx.HTTPStatusError as e:
            logger.error(f"[Auth] HTTP error {e.response.status_code} during credential exchange")
            raise AuthenticationError(f"Auth endpoint returned {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"[Auth] Request error during credential exchange: {e}")
            raise AuthenticationError(f"Auth request failed: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"[Auth] Malformed auth response: {e}")
            raise AuthenticationError(f"Malformed auth response: {e}") from e

        self._token = SessionToken(
            value=f"{token_type} {access_token}",
            expires_at=self.clock() + expires_in,
        )
        self.state = TokenState.AUTHENTICATED
        logger.info(f"[Auth] Authentication successful, token valid for {expires_in:.0f}s")

        self._schedule_renewal(expires_in)
        return self._token

    def renewal_delay(self, expires_in: float) -> float:
        """Seconds until renewal; half the lifetime when it is shorter than the margin."""
        delay = expires_in - self.refresh_margin_seconds
        if delay <= 0:
            delay = expires_in / 2
        return max(delay, 0.0)

    async def renew(self) -> None:
        """Renewal job callback. Failures are logged; callers re-trigger on demand."""
        previous = self.state
        self.state = TokenState.RENEWING
        try:
            await self.authenticate()
        except AuthenticationError as e:
            # invalidate() may have run meanwhile; keep its state
            if self.state == TokenState.RENEWING:
                self.state = previous
            logger.error(f"[Auth] Token renewal failed, will re-authenticate on next request: {e}")

    def invalidate(self) -> None:
        """Drop the current token so the next request performs a fresh exchange."""
        if self._token is not None:
            logger.warning("[Auth] Token invalidated")
        self._token = None
        self.state = TokenState.UNAUTHENTICATED

    def _schedule_renewal(self, expires_in: float) -> None:
        if self.renewal_scheduler is None:
            return
        delay = self.renewal_delay(expires_in)
        self.renewal_scheduler.schedule_renewal(delay, self.renew)
        logger.debug(f"[Auth] Token renewal scheduled in {delay:.0f}s")
