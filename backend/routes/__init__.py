"""FastAPI API endpoints under /api.

Endpoint groups: settings (health, settings, wallet), missions, players
(profile, inventory, history), sessions (start, actions, continue, abort)
and leaderboard. Every player-scoped route takes the player id in the path;
there is no implicit default player.
"""

from fastapi import APIRouter

from .leaderboard import router as leaderboard_router
from .missions import router as missions_router
from .players import router as players_router
from .sessions import router as sessions_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(missions_router)
router.include_router(players_router)
router.include_router(sessions_router)
router.include_router(leaderboard_router)
