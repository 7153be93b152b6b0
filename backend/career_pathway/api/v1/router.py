"""API v1 router aggregator.

All v1 endpoint routers are included here.
"""

from fastapi import APIRouter

from career_pathway.api.v1 import career_assistant

router = APIRouter()

# =============================================================================
# Career Assistant
# =============================================================================

router.include_router(
    career_assistant.router,
    prefix="/career-assistant",
    tags=["career-assistant"],
)
