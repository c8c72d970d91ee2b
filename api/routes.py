"""
API Routes - endpoint definitions for the Social Rankings Service

Endpoints:
- GET /users                 Top users by post count
- GET /posts?type=latest     Newest posts
- GET /posts?type=popular    Posts tied for the most comments
- GET /health                Health check
"""
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from constants import POST_TYPE_VIEWS, PostRankingType, ViewKey
from processor.refresh import RefreshOrchestrator
from utils import logger

router = APIRouter()

INVALID_TYPE_MESSAGE = 'Invalid type parameter. Use "latest" or "popular".'
INTERNAL_ERROR_MESSAGE = "Internal Server Error"


def get_orchestrator(request: Request) -> RefreshOrchestrator:
    """Orchestrator built at startup and stored on the application state."""
    return request.app.state.orchestrator


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# ============================================================
# Health Check
# ============================================================
@router.get("/health")
async def health_check(orchestrator: RefreshOrchestrator = Depends(get_orchestrator)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "cached_views": sorted(orchestrator.cache.keys()),
    }


# ============================================================
# Users
# ============================================================
@router.get("/users")
async def top_users(orchestrator: RefreshOrchestrator = Depends(get_orchestrator)):
    """Top users by number of posts, highest first."""
    try:
        return await orchestrator.get_or_compute(ViewKey.TOP_USERS)
    except Exception as e:
        logger.exception(f"[API] Error in /users endpoint: {e}")
        return error_response(500, INTERNAL_ERROR_MESSAGE)


# ============================================================
# Posts
# ============================================================
@router.get("/posts")
async def ranked_posts(
    post_type: str = Query(default=PostRankingType.LATEST.value, alias="type", description="latest or popular"),
    orchestrator: RefreshOrchestrator = Depends(get_orchestrator),
):
    """
    Ranked posts.

    - latest: the newest posts, by identifier
    - popular: every post tied for the highest comment count, newest first
    """
    try:
        ranking_type = PostRankingType(post_type)
    except ValueError:
        return error_response(400, INVALID_TYPE_MESSAGE)

    try:
        return await orchestrator.get_or_compute(POST_TYPE_VIEWS[ranking_type])
    except Exception as e:
        logger.exception(f"[API] Error in /posts endpoint: {e}")
        return error_response(500, INTERNAL_ERROR_MESSAGE)
