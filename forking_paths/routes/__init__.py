"""FastAPI API endpoints under /api.

Endpoint groups: health, and per-guild resources nested under
/api/guilds/{guild_id}/ (commands, state, members, messages).
"""

from fastapi import APIRouter

from .guilds import router as guilds_router
from .health import router as health_router

router = APIRouter()
router.include_router(health_router)
router.include_router(guilds_router)
