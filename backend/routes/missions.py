"""Mission catalog endpoints."""

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from backend.engine import service
from crime_missions.storage import NotFound

from .models import CreateMission

router = APIRouter()


@router.get("/missions")
async def list_missions():
    """List all missions."""
    return service().list_missions()


@router.get("/missions/{mission_id}")
async def get_mission(mission_id: int):
    """Get a single mission."""
    try:
        return service().get_mission(mission_id)
    except NotFound:
        raise HTTPException(404, "Mission not found")


@router.post("/missions", status_code=201)
async def create_mission(body: CreateMission):
    """Create a mission. Unknown difficulty or min_reward > max_reward is rejected."""
    try:
        return service().create_mission(body.model_dump())
    except ValidationError as e:
        raise HTTPException(400, str(e))
