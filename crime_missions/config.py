"""Game settings (starting balances, abort refund, progress mode).

Stored in config.json next to the other data files. get_settings() returns
defaults merged with stored values; update_settings() applies a partial
update and ignores unknown keys.
"""

from typing import Any

from pydantic import BaseModel, Field

from crime_missions.storage import Storage


class GameSettings(BaseModel):
    starting_crime_coin: int = Field(default=1000, ge=0)
    starting_fun_coin: int = Field(default=10, ge=0)
    abort_refund_percent: int = Field(default=25, ge=0, le=100)
    randomized_progress: bool = False  # 20-35% per action instead of a flat 20%


def get_settings(storage: Storage) -> GameSettings:
    """Read settings, returning defaults merged with stored values."""
    stored = storage.read_config()
    known = {k: v for k, v in stored.items() if k in GameSettings.model_fields}
    return GameSettings.model_validate(known)


def update_settings(storage: Storage, fields: dict[str, Any]) -> GameSettings:
    """Merge fields into settings and persist. Returns full settings."""
    current = get_settings(storage).model_dump()
    for key, value in fields.items():
        if key in current:
            current[key] = value
    settings = GameSettings.model_validate(current)
    storage.write_config(settings.model_dump())
    return settings
