"""Mission service, the entry point the transport layer calls.

Owns at most one session per player. Every session operation for a player
runs under that player's lock, so two requests for the same player never
mutate a session concurrently. Requests for different players run in
parallel; the storage layer serializes shared file writes.

Queued ledger writes are replayed before every player read and before
every start, so a stranded credit lands before the next funds check.
"""

from __future__ import annotations

import logging
import random
import threading
from typing import Any

from crime_missions.config import GameSettings, get_settings
from crime_missions.ledger import LEADERBOARD_PERIODS, PlayerLedger, period_key
from crime_missions.models import (
    HistoryEntry,
    LeaderboardEntry,
    Mission,
    MissionSessionState,
    Outcome,
    Player,
)
from crime_missions.session import InvalidSessionState, MissionSession
from crime_missions.storage import NotFound, Storage

logger = logging.getLogger(__name__)

PLAYER_UPDATABLE_FIELDS = {"username", "reputation"}


class MissionService:
    def __init__(
        self,
        storage: Storage,
        ledger: PlayerLedger | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.storage = storage
        self.ledger = ledger or PlayerLedger(storage)
        self._rng = rng or random.Random()
        # One entry per player id ever seen. A player's next start replaces their
        # terminal session, so both maps stay bounded by the player count.
        self._sessions: dict[int, MissionSession] = {}
        self._locks: dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _player_lock(self, player_id: int) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(player_id, threading.Lock())

    @property
    def settings(self) -> GameSettings:
        return get_settings(self.storage)

    # ------------------------------------------------------------------
    # Missions
    # ------------------------------------------------------------------

    def list_missions(self) -> list[Mission]:
        return self.storage.list_missions()

    def get_mission(self, mission_id: int) -> Mission:
        mission = self.storage.get_mission(mission_id)
        if mission is None:
            raise NotFound(f"Mission {mission_id} not found")
        return mission

    def create_mission(self, fields: dict[str, Any]) -> Mission:
        return self.storage.create_mission(fields)

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def get_player(self, player_id: int) -> Player:
        self._flush_ledger()
        player = self.storage.get_player(player_id)
        if player is None:
            raise NotFound(f"Player {player_id} not found")
        return player

    def create_player(self, username: str) -> Player:
        settings = self.settings
        return self.storage.create_player({
            "username": username,
            "crime_coin": settings.starting_crime_coin,
            "fun_coin": settings.starting_fun_coin,
        })

    def update_player(self, player_id: int, fields: dict[str, Any]) -> Player:
        """Update cosmetic player fields. Balances only move through the ledger."""
        with self._player_lock(player_id):
            player = self.get_player(player_id)
            update = {k: v for k, v in fields.items() if k in PLAYER_UPDATABLE_FIELDS}
            player = player.model_copy(update=update)
            self.storage.save_player(player)
        return player

    def toggle_equipped(self, player_id: int, item_id: int) -> Player:
        with self._player_lock(player_id):
            player = self.get_player(player_id)
            item = next((i for i in player.inventory if i.id == item_id), None)
            if item is None:
                raise NotFound(f"Item {item_id} not found")
            if not item.equippable:
                raise ValueError(f"{item.name} cannot be equipped")
            item.equipped = not item.equipped
            self.storage.save_player(player)
        return player

    def connect_wallet(self, player_id: int) -> dict[str, Any]:
        """Simulated wallet connection; always succeeds for a known player."""
        with self._player_lock(player_id):
            player = self.get_player(player_id)
            self.storage.save_player(player.model_copy(update={"wallet_connected": True}))
        return {"success": True, "message": "Wallet connected successfully"}

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def start_mission(self, player_id: int, mission_id: int) -> MissionSessionState:
        """Start a mission, or try it again after a resolved attempt."""
        with self._player_lock(player_id):
            # queued credits must land before the funds check
            self._flush_ledger()
            current = self._sessions.get(player_id)
            if current is not None and not current.is_terminal:
                raise InvalidSessionState(
                    f"Player {player_id} already has a mission in progress"
                )
            mission = self.get_mission(mission_id)
            player = self.get_player(player_id)
            settings = self.settings
            session = MissionSession(
                mission,
                self.ledger,
                rng=self._rng,
                randomized_progress=settings.randomized_progress,
                abort_refund_percent=settings.abort_refund_percent,
            )
            state = session.start(player)
            self._sessions[player_id] = session
        return state

    def current_session(self, player_id: int) -> MissionSessionState:
        with self._player_lock(player_id):
            return self._session(player_id).snapshot()

    def submit_action(self, player_id: int, index: int) -> MissionSessionState:
        with self._player_lock(player_id):
            return self._session(player_id).take_action(index)

    def continue_mission(self, player_id: int) -> MissionSessionState:
        with self._player_lock(player_id):
            session = self._session(player_id)
            if session.progress >= 100 and not session.is_terminal:
                self._flush_ledger()
            session.continue_mission()
            return session.snapshot()

    def resolve_or_abort(self, player_id: int, attempt: bool) -> tuple[Outcome, Player]:
        """Resolve a fully progressed mission (attempt=True) or abort it."""
        with self._player_lock(player_id):
            session = self._session(player_id)
            if attempt and not session.is_terminal and session.progress < 100:
                raise InvalidSessionState(
                    f"Mission is only {session.progress}% complete"
                )
            if not session.is_terminal:
                self._flush_ledger()
            result = session.continue_mission() if attempt else session.abort()
            return result, self.get_player(player_id)

    def _session(self, player_id: int) -> MissionSession:
        session = self._sessions.get(player_id)
        if session is None:
            logger.warning("No mission session for player %s", player_id)
            raise InvalidSessionState(f"Player {player_id} has no mission session")
        return session

    def _flush_ledger(self) -> None:
        if self.ledger.pending_count():
            landed = self.ledger.retry_pending()
            logger.info("Replayed %d pending ledger writes", landed)

    # ------------------------------------------------------------------
    # History and leaderboard
    # ------------------------------------------------------------------

    def get_history(self, player_id: int) -> list[HistoryEntry]:
        self.get_player(player_id)
        return self.storage.get_history(player_id)

    def get_leaderboard(self, period: str = "day") -> list[LeaderboardEntry]:
        if period not in LEADERBOARD_PERIODS:
            raise ValueError(f"Unknown leaderboard period {period!r}")
        key = period_key(period)
        # day and week rows from an earlier period are stale until overwritten
        return [
            row for row in self.storage.get_leaderboard(period)
            if row.period_key in (key, "")
        ]
