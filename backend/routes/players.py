"""Player profile, inventory, and mission history endpoints."""

from fastapi import APIRouter, HTTPException

from backend.engine import service
from crime_missions.storage import NotFound

from .models import CreatePlayer, UpdatePlayer

router = APIRouter()


@router.post("/players", status_code=201)
async def create_player(body: CreatePlayer):
    """Create a player with the configured starting balances."""
    return service().create_player(body.username)


@router.get("/players/{player_id}")
async def get_player(player_id: int):
    """Get a player record."""
    try:
        return service().get_player(player_id)
    except NotFound:
        raise HTTPException(404, "Player not found")


@router.patch("/players/{player_id}")
async def update_player(player_id: int, body: UpdatePlayer):
    """Update username or reputation title. Balances are not writable here."""
    try:
        return service().update_player(player_id, body.model_dump(exclude_none=True))
    except NotFound:
        raise HTTPException(404, "Player not found")


@router.post("/players/{player_id}/inventory/{item_id}/equip")
async def toggle_equipped(player_id: int, item_id: int):
    """Equip or unequip an inventory item."""
    try:
        return service().toggle_equipped(player_id, item_id)
    except NotFound as e:
        raise HTTPException(404, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))


@router.get("/players/{player_id}/history")
async def get_history(player_id: int):
    """Mission history for a player, newest first."""
    try:
        return service().get_history(player_id)
    except NotFound:
        raise HTTPException(404, "Player not found")
