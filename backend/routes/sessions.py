"""Mission session endpoints: start, actions, continue, abort."""

import logging
from typing import Any, Callable

from fastapi import APIRouter, HTTPException

from backend.engine import service
from crime_missions.ledger import InsufficientFunds
from crime_missions.session import InvalidSessionState
from crime_missions.storage import LedgerWriteFailed, NotFound

logger = logging.getLogger(__name__)

router = APIRouter()


def _call(operation: Callable[..., Any], *args: Any) -> Any:
    """Run a service call and translate engine errors to HTTP errors."""
    try:
        return operation(*args)
    except NotFound as e:
        raise HTTPException(404, str(e))
    except InsufficientFunds as e:
        raise HTTPException(400, str(e))
    except InvalidSessionState as e:
        logger.warning("Invalid session call: %s", e)
        raise HTTPException(409, str(e))
    except IndexError as e:
        raise HTTPException(404, str(e))
    except LedgerWriteFailed as e:
        raise HTTPException(503, str(e))


@router.post("/players/{player_id}/missions/{mission_id}/start", status_code=201)
async def start_mission(player_id: int, mission_id: int):
    """Charge the entry cost and start a mission (also used to try again)."""
    return _call(service().start_mission, player_id, mission_id)


@router.get("/players/{player_id}/session")
async def get_session(player_id: int):
    """Current (or last resolved) mission session."""
    return _call(service().current_session, player_id)


@router.post("/players/{player_id}/session/actions/{index}")
async def take_action(player_id: int, index: int):
    """Take the action offer at `index`."""
    return _call(service().submit_action, player_id, index)


@router.post("/players/{player_id}/session/continue")
async def continue_mission(player_id: int):
    """Advance the mission; resolves it once progress reaches 100."""
    return _call(service().continue_mission, player_id)


@router.post("/players/{player_id}/session/abort")
async def abort_mission(player_id: int):
    """Abort the mission for a partial refund."""
    outcome, player = _call(service().resolve_or_abort, player_id, False)
    return {"outcome": outcome, "player": player}


@router.post("/players/{player_id}/session/resolve")
async def resolve_mission(player_id: int):
    """Resolve a mission at 100% progress and return the outcome with the updated player."""
    outcome, player = _call(service().resolve_or_abort, player_id, True)
    return {"outcome": outcome, "player": player}
