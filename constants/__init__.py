"""
Constants package for the Social Rankings Service.
"""

from .enums import ViewKey, PostRankingType, POST_TYPE_VIEWS

__all__ = [
    "ViewKey",
    "PostRankingType",
    "POST_TYPE_VIEWS",
]
