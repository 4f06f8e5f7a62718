"""JSON file storage.

All state is stored in flat JSON files under a configurable base directory.
There is no database or ORM — reads and writes go through plain helper
methods that load and dump JSON.

Directory layout:

    {base}/
      players.json      ← list of Player objects
      missions.json     ← list of Mission objects
      history.json      ← append-only HistoryEntry log
      leaderboard.json  ← LeaderboardEntry rows, one per (player, period)
      config.json       ← game settings (see crime_missions.config)

Read-modify-write cycles hold a process-wide lock so concurrent sessions
of different players never interleave on the shared files. Every write
goes through a temp file and os.replace, so readers never see a partial file.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from crime_missions.models import (
    HistoryEntry,
    LeaderboardEntry,
    Mission,
    Player,
)


class NotFound(LookupError):
    """Raised when a mission or player id does not exist."""


class LedgerWriteFailed(RuntimeError):
    """Raised when a data file cannot be read or written."""


class Storage:
    def __init__(self, base_path: Path) -> None:
        self._base = base_path
        self._base.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()

    @property
    def base_path(self) -> Path:
        return self._base

    # ------------------------------------------------------------------
    # Internal path helpers
    # ------------------------------------------------------------------

    def _path(self, name: str) -> Path:
        return self._base / f"{name}.json"

    def _read_json(self, path: Path, default: Any) -> Any:
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text())
        except (OSError, ValueError) as e:
            raise LedgerWriteFailed(f"Cannot read {path.name}: {e}") from e

    def _write_json(self, path: Path, data: Any) -> None:
        """Write to a sibling .tmp file, then swap it in with os.replace.

        Readers never take the lock, so they must only ever see a complete file.
        """
        tmp = path.with_suffix(path.suffix + ".tmp")
        with self._lock:
            try:
                tmp.write_text(json.dumps(data, indent=2))
                os.replace(tmp, path)
            except OSError as e:
                tmp.unlink(missing_ok=True)
                raise LedgerWriteFailed(f"Cannot write {path.name}: {e}") from e

    # ------------------------------------------------------------------
    # Missions
    # ------------------------------------------------------------------

    def list_missions(self) -> list[Mission]:
        return [Mission.model_validate(m) for m in self._read_json(self._path("missions"), [])]

    def get_mission(self, mission_id: int) -> Mission | None:
        for mission in self.list_missions():
            if mission.id == mission_id:
                return mission
        return None

    def create_mission(self, fields: dict[str, Any]) -> Mission:
        """Validate and store a new mission with the next free id."""
        with self._lock:
            missions = self.list_missions()
            next_id = max((m.id for m in missions), default=0) + 1
            mission = Mission.model_validate({**fields, "id": next_id})
            missions.append(mission)
            self._write_json(self._path("missions"), [m.model_dump() for m in missions])
        return mission

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def list_players(self) -> list[Player]:
        return [Player.model_validate(p) for p in self._read_json(self._path("players"), [])]

    def get_player(self, player_id: int) -> Player | None:
        for player in self.list_players():
            if player.id == player_id:
                return player
        return None

    def create_player(self, fields: dict[str, Any]) -> Player:
        with self._lock:
            players = self.list_players()
            next_id = max((p.id for p in players), default=0) + 1
            player = Player.model_validate({**fields, "id": next_id})
            players.append(player)
            self._write_json(self._path("players"), [p.model_dump() for p in players])
        return player

    def save_player(self, player: Player) -> None:
        """Upsert a player by id."""
        with self._lock:
            players = self.list_players()
            for i, p in enumerate(players):
                if p.id == player.id:
                    players[i] = player
                    break
            else:
                players.append(player)
            self._write_json(self._path("players"), [p.model_dump() for p in players])

    # ------------------------------------------------------------------
    # Mission history (append-only)
    # ------------------------------------------------------------------

    def get_history(self, player_id: int) -> list[HistoryEntry]:
        """History for one player, newest first."""
        entries = [
            HistoryEntry.model_validate(h)
            for h in self._read_json(self._path("history"), [])
            if h["player_id"] == player_id
        ]
        return sorted(entries, key=lambda h: (h.timestamp, h.id), reverse=True)

    def has_history_for_session(self, session_id: str) -> bool:
        return any(
            h["session_id"] == session_id
            for h in self._read_json(self._path("history"), [])
        )

    def append_history(self, fields: dict[str, Any]) -> HistoryEntry:
        with self._lock:
            existing = self._read_json(self._path("history"), [])
            entry = HistoryEntry.model_validate({
                "timestamp": datetime.now(timezone.utc).isoformat(),
                **fields,
                "id": max((h["id"] for h in existing), default=0) + 1,
            })
            existing.append(entry.model_dump())
            self._write_json(self._path("history"), existing)
        return entry

    # ------------------------------------------------------------------
    # Leaderboard
    # ------------------------------------------------------------------

    def get_leaderboard(self, period: str) -> list[LeaderboardEntry]:
        rows = [
            LeaderboardEntry.model_validate(e)
            for e in self._read_json(self._path("leaderboard"), [])
            if e["period"] == period
        ]
        return sorted(rows, key=lambda e: e.rank)

    def save_leaderboard(self, entries: list[LeaderboardEntry]) -> None:
        """Replace all rows of the periods present in `entries`."""
        periods = {e.period for e in entries}
        with self._lock:
            kept = [
                e for e in self._read_json(self._path("leaderboard"), [])
                if e["period"] not in periods
            ]
            kept.extend(e.model_dump() for e in entries)
            self._write_json(self._path("leaderboard"), kept)

    # ------------------------------------------------------------------
    # Config
    # ------------------------------------------------------------------

    def read_config(self) -> dict[str, Any]:
        return self._read_json(self._path("config"), {})

    def write_config(self, config: dict[str, Any]) -> None:
        self._write_json(self._path("config"), config)

    def lock(self) -> threading.RLock:
        return self._lock
