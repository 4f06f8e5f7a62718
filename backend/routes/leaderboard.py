"""Leaderboard endpoint."""

from fastapi import APIRouter, HTTPException

from backend.engine import service

router = APIRouter()


@router.get("/leaderboard")
async def get_leaderboard(period: str = "day"):
    """Leaderboard rows for day, week or all_time, ordered by rank."""
    try:
        return service().get_leaderboard(period)
    except ValueError as e:
        raise HTTPException(400, str(e))
