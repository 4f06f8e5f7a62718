"""State machine for one mission attempt.

    NotStarted --start--> InProgress --continue at 100--> Success | Failure
                                     --abort-----------> Aborted

start()            checks funds, charges the entry cost once, rolls the
                   initial stats (plus equipped boosts) and deals 3 offers.
take_action(i)     applies offer i, maybe a risk penalty, advances progress,
                   replaces the consumed offer with one fresh offer.
continue_mission() below 100: advances progress with a milestone narrative
                   and, from 60 on, a 30% random event. At 100: rolls the
                   outcome and applies it to the ledger.
abort()            applies the abort refund.

Terminal sessions reject every call with InvalidSessionState.
"""

from __future__ import annotations

import logging
import math
import random
import uuid
from typing import Protocol

from crime_missions import content, outcome as calculator, stats as stat_model
from crime_missions.ledger import InsufficientFunds
from crime_missions.models import (
    STAT_NAMES,
    ActionOffer,
    Mission,
    MissionSessionState,
    Outcome,
    Player,
    SessionStatus,
    StatVector,
)

logger = logging.getLogger(__name__)

PROGRESS_STEP = 20
RANDOMIZED_PROGRESS_RANGE = (20, 35)
MAX_PROGRESS = 100
INITIAL_OFFERS = 3
RANDOM_EVENT_THRESHOLD = 60
RANDOM_EVENT_CHANCE = 0.3


class Ledger(Protocol):
    def charge(self, player_id: int, amount: int) -> Player: ...

    def apply_outcome(
        self, player_id: int, mission: Mission, session_id: str, outcome: Outcome
    ) -> bool: ...


class InvalidSessionState(RuntimeError):
    """Raised when an operation is not allowed in the session's current state."""


class MissionSession:
    def __init__(
        self,
        mission: Mission,
        ledger: Ledger,
        *,
        rng: random.Random | None = None,
        randomized_progress: bool = False,
        abort_refund_percent: int = calculator.DEFAULT_ABORT_REFUND_PERCENT,
        session_id: str | None = None,
    ) -> None:
        self.mission = mission
        self.session_id = session_id or uuid.uuid4().hex
        self.status: SessionStatus = "NotStarted"
        self.player_id: int | None = None
        self.stats: StatVector | None = None
        self.progress = 0
        self.actions: list[ActionOffer] = []
        self.narrative = ""
        self.outcome: Outcome | None = None
        self.ledger_pending = False
        self._ledger = ledger
        self._rng = rng or random.Random()
        self._randomized_progress = randomized_progress
        self._abort_refund_percent = abort_refund_percent

    @property
    def is_terminal(self) -> bool:
        return self.status in ("Success", "Failure", "Aborted")

    def snapshot(self) -> MissionSessionState:
        return MissionSessionState(
            session_id=self.session_id,
            player_id=self.player_id if self.player_id is not None else 0,
            mission=self.mission,
            status=self.status,
            stats=self.stats,
            progress=self.progress,
            actions=list(self.actions),
            narrative=self.narrative,
            outcome=self.outcome,
            ledger_pending=self.ledger_pending,
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self, player: Player) -> MissionSessionState:
        if self.status != "NotStarted":
            self._reject("start")
        if player.crime_coin < self.mission.cost:
            raise InsufficientFunds(
                f"You don't have enough $CRIME to start {self.mission.name}"
            )
        self._ledger.charge(player.id, self.mission.cost)

        initial = stat_model.random_initial_vector(self.mission.difficulty, self._rng)
        self.player_id = player.id
        self.stats = stat_model.apply_equipment(initial, player.inventory)
        self.progress = 0
        self.actions = content.generate_actions(
            self.mission.difficulty, INITIAL_OFFERS, self._rng
        )
        self.narrative = (
            f"You're about to start the {self.mission.name} mission. "
            "Ready to commit some crime?"
        )
        self.status = "InProgress"
        logger.info(
            "session %s started player=%s mission=%s cost=%d",
            self.session_id, player.id, self.mission.id, self.mission.cost,
        )
        return self.snapshot()

    def take_action(self, index: int) -> MissionSessionState:
        self._require_in_progress("take_action")
        if self.outcome is not None:
            self._reject_resolved("take_action")
        if not 0 <= index < len(self.actions):
            raise IndexError(f"Action index {index} out of range")
        offer = self.actions[index]

        updated = stat_model.apply_bonus(self.stats, offer.affected_stat, offer.bonus)
        if self._rng.random() * 100 < offer.risk:
            hit = self._rng.choice(STAT_NAMES)
            updated = stat_model.apply_penalty(updated, hit, math.ceil(offer.risk / 10))
            self.narrative = f"{offer.narrative} {content.complication(hit, self._rng)}"
        else:
            self.narrative = offer.narrative
        self.stats = updated

        self._advance(self._action_step())
        replacement = content.generate_actions(self.mission.difficulty, 1, self._rng)
        self.actions = self.actions[:index] + self.actions[index + 1:] + replacement
        return self.snapshot()

    def continue_mission(self) -> Outcome | None:
        """Advance the mission; resolves and returns the outcome at 100%."""
        self._require_in_progress("continue_mission")
        if self.outcome is not None:
            # resolved earlier but the ledger call raised; hand over the same outcome
            self._finish(self.outcome)
            return self.outcome
        if self.progress < MAX_PROGRESS:
            self._advance(PROGRESS_STEP)
            self.narrative = content.milestone_narrative(self.progress)
            if (
                self.progress >= RANDOM_EVENT_THRESHOLD
                and self._rng.random() < RANDOM_EVENT_CHANCE
            ):
                stat, boost, message = content.random_event(self._rng)
                self.stats = stat_model.apply_bonus(self.stats, stat, boost)
                self.narrative = message
            return None

        chance = calculator.final_success_chance(self.stats, self.mission.difficulty)
        result = calculator.resolve(self.stats, self.mission, chance, self._rng)
        self._finish(result)
        return result

    def abort(self) -> Outcome:
        self._require_in_progress("abort")
        if self.outcome is not None:
            if self.outcome.kind != "Aborted":
                self._reject_resolved("abort")
            self._finish(self.outcome)
            return self.outcome
        result = calculator.abort_outcome(self.mission, self._abort_refund_percent)
        self._finish(result)
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _action_step(self) -> int:
        if self._randomized_progress:
            return self._rng.randint(*RANDOMIZED_PROGRESS_RANGE)
        return PROGRESS_STEP

    def _advance(self, step: int) -> None:
        self.progress = min(MAX_PROGRESS, self.progress + step)

    def _finish(self, result: Outcome) -> None:
        """Hand the outcome to the ledger, then go terminal.

        If the ledger raises, the session stays InProgress holding the outcome,
        so the next call re-submits it instead of rolling again.
        """
        self.outcome = result
        applied = self._ledger.apply_outcome(
            self.player_id, self.mission, self.session_id, result
        )
        self.status = result.kind
        self.narrative = result.narrative
        self.actions = []
        self.ledger_pending = not applied
        logger.info(
            "session %s resolved kind=%s crime_delta=%d pending=%s",
            self.session_id, result.kind, result.crime_coin_delta, self.ledger_pending,
        )

    def _require_in_progress(self, operation: str) -> None:
        if self.status != "InProgress":
            self._reject(operation)

    def _reject_resolved(self, operation: str) -> None:
        logger.warning(
            "Rejected %s on session %s, outcome %s not yet recorded",
            operation, self.session_id, self.outcome.kind,
        )
        raise InvalidSessionState(
            f"Cannot {operation}: the mission is resolved, continue to record it"
        )

    def _reject(self, operation: str) -> None:
        logger.warning(
            "Rejected %s on session %s in state %s", operation, self.session_id, self.status
        )
        raise InvalidSessionState(
            f"Cannot {operation} a session in state {self.status}"
        )
