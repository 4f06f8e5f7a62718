"""Process-wide engine holder: storage, ledger and mission service."""

import random
from pathlib import Path

from crime_missions.service import MissionService
from crime_missions.storage import Storage

_service: MissionService | None = None


def init_engine(data_dir: Path, rng: random.Random | None = None) -> MissionService:
    global _service
    _service = MissionService(Storage(data_dir), rng=rng)
    return _service


def service() -> MissionService:
    assert _service is not None, "Call init_engine() before using the engine"
    return _service
