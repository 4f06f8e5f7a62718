"""Player ledger: entry charges, outcome application, history, leaderboard.

An outcome is applied in three stages: player record, leaderboard rows,
history entry. Each stage runs at most once per session id. When a stage
fails to write, the remaining stages are queued in-process and replayed by
retry_pending(); the caller still gets the computed outcome.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone

from crime_missions.models import (
    HistoryEntry,
    InventoryItem,
    LeaderboardEntry,
    Mission,
    Outcome,
    Player,
)
from crime_missions.storage import LedgerWriteFailed, NotFound, Storage

logger = logging.getLogger(__name__)

LEADERBOARD_PERIODS = ("day", "week", "all_time")

STAGES = ("player", "leaderboard", "history")


class InsufficientFunds(RuntimeError):
    """Raised when a player cannot pay a mission's entry cost."""


@dataclass
class PendingWrite:
    player_id: int
    mission: Mission
    session_id: str
    outcome: Outcome
    done: set[str] = field(default_factory=set)


def period_key(period: str, now: datetime | None = None) -> str:
    """Bucket a timestamp into the leaderboard period it accumulates for."""
    now = now or datetime.now(timezone.utc)
    if period == "day":
        return now.date().isoformat()
    if period == "week":
        year, week, _ = now.isocalendar()
        return f"{year}-W{week:02d}"
    return "all_time"


class PlayerLedger:
    def __init__(self, storage: Storage) -> None:
        self._storage = storage
        self._pending_lock = threading.Lock()
        self._pending: list[PendingWrite] = []
        # writes interrupted by an unexpected error, resumed when resubmitted
        self._stalled: dict[str, PendingWrite] = {}

    # ------------------------------------------------------------------
    # Charges
    # ------------------------------------------------------------------

    def charge(self, player_id: int, amount: int) -> Player:
        """Deduct an entry cost. Nothing is written when funds are short."""
        with self._storage.lock():
            player = self._storage.get_player(player_id)
            if player is None:
                raise NotFound(f"Player {player_id} not found")
            if player.crime_coin < amount:
                raise InsufficientFunds(
                    f"Player {player_id} has {player.crime_coin} $CRIME, needs {amount}"
                )
            player = player.model_copy(update={"crime_coin": player.crime_coin - amount})
            self._storage.save_player(player)
        return player

    # ------------------------------------------------------------------
    # Outcomes
    # ------------------------------------------------------------------

    def apply_outcome(
        self, player_id: int, mission: Mission, session_id: str, outcome: Outcome
    ) -> bool:
        """Apply an outcome once. Returns False when the write was queued."""
        with self._pending_lock:
            write = self._stalled.pop(session_id, None)
        return self._run(write or PendingWrite(player_id, mission, session_id, outcome))

    def retry_pending(self) -> int:
        """Replay queued writes. Returns how many completed."""
        with self._pending_lock:
            queued, self._pending = self._pending, []
        completed = 0
        try:
            while queued:
                if self._run(queued.pop(0)):
                    completed += 1
        finally:
            if queued:
                with self._pending_lock:
                    self._pending[:0] = queued
        return completed

    def pending_count(self) -> int:
        with self._pending_lock:
            return len(self._pending)

    def record_history(
        self, player_id: int, mission_id: int, session_id: str, outcome: Outcome
    ) -> HistoryEntry:
        return self._storage.append_history({
            "player_id": player_id,
            "mission_id": mission_id,
            "session_id": session_id,
            "kind": outcome.kind,
            "success": outcome.kind == "Success",
            "crime_coin_change": outcome.crime_coin_delta,
            "fun_coin_change": outcome.fun_coin_delta,
            "experience_gained": outcome.experience_delta,
        })

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _run(self, write: PendingWrite) -> bool:
        try:
            if not write.done and self._storage.has_history_for_session(write.session_id):
                logger.warning(
                    "Outcome for session %s already applied, skipping", write.session_id
                )
                return True
            for stage in STAGES:
                if stage in write.done:
                    continue
                if stage == "player":
                    self._apply_to_player(write)
                elif stage == "leaderboard":
                    self._update_leaderboard(write)
                else:
                    self.record_history(
                        write.player_id, write.mission.id, write.session_id, write.outcome
                    )
                write.done.add(stage)
        except LedgerWriteFailed as e:
            logger.warning(
                "Ledger write for session %s failed (%s), queued for retry",
                write.session_id, e,
            )
            with self._pending_lock:
                self._pending.append(write)
            return False
        except Exception:
            with self._pending_lock:
                self._stalled[write.session_id] = write
            raise
        return True

    def _apply_to_player(self, write: PendingWrite) -> None:
        outcome = write.outcome
        with self._storage.lock():
            player = self._storage.get_player(write.player_id)
            if player is None:
                raise NotFound(f"Player {write.player_id} not found")
            update = {
                "crime_coin": max(0, player.crime_coin + outcome.crime_coin_delta),
                "fun_coin": player.fun_coin + outcome.fun_coin_delta,
                "experience": player.experience + outcome.experience_delta,
                "total_missions": player.total_missions + 1,
                "daily_missions": player.daily_missions + 1,
            }
            if outcome.kind == "Success":
                update.update({
                    "successful_missions": player.successful_missions + 1,
                    "total_earnings": player.total_earnings + outcome.crime_coin_delta,
                    "biggest_heist": max(player.biggest_heist, outcome.crime_coin_delta),
                    "notoriety": player.notoriety + outcome.notoriety_delta,
                    "inventory": player.inventory + self._loot(player, outcome),
                })
            self._storage.save_player(player.model_copy(update=update))

    def _loot(self, player: Player, outcome: Outcome) -> list[InventoryItem]:
        next_id = max((i.id for i in player.inventory), default=0) + 1
        return [
            InventoryItem(id=next_id + i, name=item.name, icon=item.icon)
            for i, item in enumerate(outcome.bonus_items)
        ]

    def _update_leaderboard(self, write: PendingWrite) -> None:
        if write.outcome.kind != "Success":
            return
        with self._storage.lock():
            player = self._storage.get_player(write.player_id)
            if player is None:
                raise NotFound(f"Player {write.player_id} not found")
            for period in LEADERBOARD_PERIODS:
                rows = self._storage.get_leaderboard(period)
                key = period_key(period)
                # Rows from a past day/week restart from zero
                rows = [r for r in rows if r.period_key in (key, "")]
                row = next((r for r in rows if r.player_id == player.id), None)
                if row is None:
                    row = LeaderboardEntry(
                        player_id=player.id, username=player.username,
                        period=period, period_key=key,
                    )
                    rows.append(row)
                row.crime_earned += write.outcome.crime_coin_delta
                row.biggest_heist = max(row.biggest_heist, write.outcome.crime_coin_delta)
                row.notoriety = player.notoriety
                row.username = player.username
                rows.sort(key=lambda r: r.crime_earned, reverse=True)
                for rank, r in enumerate(rows, start=1):
                    r.rank = rank
                self._storage.save_leaderboard(rows)
