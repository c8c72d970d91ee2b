"""Clients package for the upstream social data API."""

from .auth import AuthenticationError, SessionToken, TokenProvider, TokenState
from .social_api import ApiError, SocialApiClient

__all__ = [
    "ApiError",
    "AuthenticationError",
    "SessionToken",
    "SocialApiClient",
    "TokenProvider",
    "TokenState",
]
