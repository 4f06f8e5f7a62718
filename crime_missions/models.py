"""Core domain models.

Every engine stage and storage function operates on these types.
Pydantic is used for validation and serialisation at every data boundary.
StatVector is frozen: stat updates always build a new vector.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Difficulty = Literal["Easy", "Medium", "Hard"]

DIFFICULTIES: tuple[Difficulty, ...] = ("Easy", "Medium", "Hard")

StatName = Literal["stealth", "intimidation", "speed", "luck"]

STAT_NAMES: tuple[StatName, ...] = ("stealth", "intimidation", "speed", "luck")

OutcomeKind = Literal["Success", "Failure", "Aborted"]

SessionStatus = Literal["NotStarted", "InProgress", "Success", "Failure", "Aborted"]

LeaderboardPeriod = Literal["day", "week", "all_time"]


class InvalidDifficulty(ValueError):
    """Raised when a difficulty string is not one of Easy, Medium, Hard."""


def parse_difficulty(value: str) -> Difficulty:
    """Normalise a difficulty string ("hard", "HARD" → "Hard")."""
    if isinstance(value, str):
        for tier in DIFFICULTIES:
            if tier.lower() == value.strip().lower():
                return tier
    raise InvalidDifficulty(f"Unknown difficulty {value!r}")


def difficulty_rank(difficulty: str) -> int:
    """0 for Easy, 1 for Medium, 2 for Hard."""
    return DIFFICULTIES.index(parse_difficulty(difficulty))


class StatVector(BaseModel):
    """A player's momentary aptitude during one mission attempt."""

    model_config = ConfigDict(frozen=True)

    stealth: int = Field(ge=0, le=100)
    intimidation: int = Field(ge=0, le=100)
    speed: int = Field(ge=0, le=100)
    luck: int = Field(ge=0, le=100)

    def values(self) -> list[int]:
        return [getattr(self, name) for name in STAT_NAMES]


class Mission(BaseModel):
    """A mission definition. Read-only to the engine."""

    id: int
    name: str
    description: str = ""
    difficulty: Difficulty
    cost: int = Field(ge=0)
    min_reward: int = Field(ge=0)
    max_reward: int = Field(ge=0)
    success_rate: int = 50  # display only
    time_required: str = ""
    image_url: str = ""

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalise_difficulty(cls, value: str) -> str:
        return parse_difficulty(value)

    @model_validator(mode="after")
    def _check_reward_range(self) -> Mission:
        if self.min_reward > self.max_reward:
            raise ValueError(
                f"min_reward ({self.min_reward}) exceeds max_reward ({self.max_reward})"
            )
        return self


class ActionOffer(BaseModel):
    """One choice offered to the player during a mission."""

    name: str
    description: str = ""
    affected_stat: Literal["stealth", "intimidation", "speed", "luck", "success"]
    bonus: int = Field(gt=0)
    risk: int = Field(ge=0, le=100)  # % chance of a negative side effect
    narrative: str
    cooldown: int = 1  # display only


class BonusItem(BaseModel):
    name: str
    icon: str


class Outcome(BaseModel):
    """Terminal result of a mission session.

    crime_coin_delta is what the ledger applies at resolution; the entry
    cost was already charged at start. crime_coin_lost is the total loss
    of the attempt (entry cost included) for failures and aborts.
    """

    kind: OutcomeKind
    crime_coin_delta: int
    crime_coin_lost: int = 0
    fun_coin_delta: int = Field(ge=0)
    experience_delta: int = Field(ge=0)
    notoriety_delta: int = 0
    success_chance: float | None = None
    roll: float | None = None
    narrative: str
    lesson: str = ""
    bonus_items: list[BonusItem] = Field(default_factory=list)


class ItemEffect(BaseModel):
    type: Literal["boost", "protection"]
    stat: StatName
    value: int


class InventoryItem(BaseModel):
    id: int
    name: str
    description: str = ""
    category: str = "Loot"
    rarity: Literal["common", "uncommon", "rare", "legendary"] = "common"
    icon: str = ""
    effects: list[ItemEffect] = Field(default_factory=list)
    equippable: bool = False
    equipped: bool = False


class Player(BaseModel):
    """Cumulative player record kept by the ledger."""

    id: int
    username: str
    crime_coin: int = 1000
    fun_coin: int = 10
    reputation: str = "Rookie Thief"
    level: int = 1
    experience: int = 0
    successful_missions: int = 0
    total_missions: int = 0
    total_earnings: int = 0
    biggest_heist: int = 0
    daily_missions: int = 0
    notoriety: int = 1
    inventory: list[InventoryItem] = Field(default_factory=list)
    wallet_connected: bool = False


class HistoryEntry(BaseModel):
    """One resolved session in a player's audit log."""

    id: int
    player_id: int
    mission_id: int
    session_id: str
    timestamp: str
    kind: OutcomeKind
    success: bool
    crime_coin_change: int
    fun_coin_change: int
    experience_gained: int = 0


class LeaderboardEntry(BaseModel):
    player_id: int
    username: str
    crime_earned: int = 0
    biggest_heist: int = 0
    notoriety: int = 1
    rank: int = 0
    period: LeaderboardPeriod
    period_key: str = ""  # date or ISO week the row accumulates for


class MissionSessionState(BaseModel):
    """Serialisable snapshot of a mission session."""

    session_id: str
    player_id: int
    mission: Mission
    status: SessionStatus
    stats: StatVector | None = None
    progress: int = Field(default=0, ge=0, le=100)
    actions: list[ActionOffer] = Field(default_factory=list)
    narrative: str = ""
    outcome: Outcome | None = None
    ledger_pending: bool = False
