"""Pydantic request models for API endpoints."""

from pydantic import BaseModel


class CreateMission(BaseModel):
    name: str
    description: str = ""
    difficulty: str
    cost: int
    min_reward: int
    max_reward: int
    success_rate: int = 50
    time_required: str = ""
    image_url: str = ""


class CreatePlayer(BaseModel):
    username: str


class UpdatePlayer(BaseModel):
    username: str | None = None
    reputation: str | None = None


class WalletConnectBody(BaseModel):
    player_id: int


class UpdateSettings(BaseModel):
    starting_crime_coin: int | None = None
    starting_fun_coin: int | None = None
    abort_refund_percent: int | None = None
    randomized_progress: bool | None = None
