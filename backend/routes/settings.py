"""Health check, game settings, and wallet simulation endpoints."""

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from backend.engine import service
from crime_missions.config import get_settings, update_settings
from crime_missions.storage import NotFound

from .models import UpdateSettings, WalletConnectBody

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/settings")
async def get_game_settings():
    """Get game settings (starting balances, abort refund, progress mode)."""
    return get_settings(service().storage)


@router.patch("/settings")
async def update_game_settings(body: UpdateSettings):
    """Update game settings (partial merge)."""
    try:
        return update_settings(service().storage, body.model_dump(exclude_none=True))
    except ValidationError as e:
        raise HTTPException(400, str(e))


@router.post("/wallet/connect")
async def connect_wallet(body: WalletConnectBody):
    """Simulated wallet connection. Always succeeds for a known player."""
    try:
        return service().connect_wallet(body.player_id)
    except NotFound:
        raise HTTPException(404, "Player not found")
