"""Success chance and mission resolution.

This is the only implementation of the resolution math. Any offline or
degraded client path must call into this module.

Success chance:
  base  = mean(stats) / 100
  Easy    min(0.95, base + 0.20)
  Medium  min(0.85, base + 0.10)
  Hard    min(0.75, base)
  final = min(0.95, chance + luck / 200)

Resolution draws exactly one roll in [0, 1); roll < final is a success.

  Success  crime = floor(randint(min_reward, max_reward) * multiplier)
           multiplier = min(1.5, 1 + 2 * max(0, final - 0.5) * 0.5)
           fun 10-29, xp = base_reward // 10 + 0-4, notoriety = crime // 50
  Failure  severity = min(1, (1 - final) * 2)
           lost = cost + floor(cost * severity * {0.5, 1.0, 1.5})
           the entry cost was charged at start, so only the extra is applied
           fun = floor(severity * 5) + 1, xp 5
  Abort    refund floor(cost * refund_percent / 100), fun 1, xp 0
"""

import logging
import math
import random

from crime_missions import content
from crime_missions.models import Mission, Outcome, StatVector, difficulty_rank

logger = logging.getLogger(__name__)

# (additive bonus, cap) per difficulty rank
DIFFICULTY_ADJUSTMENTS = [(0.20, 0.95), (0.10, 0.85), (0.0, 0.75)]

FINAL_CHANCE_CAP = 0.95
MAX_REWARD_MULTIPLIER = 1.5
FAILURE_LOSS_MULTIPLIERS = [0.5, 1.0, 1.5]

SUCCESS_FUN_COIN_RANGE = (10, 30)  # half-open
EXPERIENCE_JITTER = 4
NOTORIETY_DIVISOR = 50
FAILURE_EXPERIENCE = 5

DEFAULT_ABORT_REFUND_PERCENT = 25
ABORT_FUN_COIN = 1


def success_chance(stats: StatVector, difficulty: str) -> float:
    """Probability in [0, 1] from the stat average and difficulty ceiling."""
    bonus, cap = DIFFICULTY_ADJUSTMENTS[difficulty_rank(difficulty)]
    base = sum(stats.values()) / len(stats.values()) / 100
    return min(cap, base + bonus)


def final_success_chance(stats: StatVector, difficulty: str) -> float:
    """success_chance plus the luck bonus (up to +0.5), capped at 0.95."""
    return min(FINAL_CHANCE_CAP, success_chance(stats, difficulty) + stats.luck / 200)


def reward_multiplier(final_chance: float) -> float:
    return min(MAX_REWARD_MULTIPLIER, 1 + 2 * max(0.0, final_chance - 0.5) * 0.5)


def failure_severity(final_chance: float) -> float:
    return min(1.0, (1 - final_chance) * 2)


def resolve(
    stats: StatVector,
    mission: Mission,
    final_chance: float,
    rng: random.Random | None = None,
) -> Outcome:
    """Roll once and build the Success or Failure outcome."""
    rng = rng or random.Random()
    roll = rng.random()
    logger.debug(
        "resolve mission=%s chance=%.3f roll=%.3f", mission.id, final_chance, roll
    )
    if roll < final_chance:
        return _success(mission, final_chance, roll, rng)
    return _failure(stats, mission, final_chance, roll, rng)


def _success(
    mission: Mission, final_chance: float, roll: float, rng: random.Random
) -> Outcome:
    base_reward = rng.randint(mission.min_reward, mission.max_reward)
    crime_coin = math.floor(base_reward * reward_multiplier(final_chance))
    return Outcome(
        kind="Success",
        crime_coin_delta=crime_coin,
        fun_coin_delta=rng.randrange(*SUCCESS_FUN_COIN_RANGE),
        experience_delta=base_reward // 10 + rng.randint(0, EXPERIENCE_JITTER),
        notoriety_delta=crime_coin // NOTORIETY_DIVISOR,
        success_chance=final_chance,
        roll=roll,
        narrative=content.success_narrative(mission, rng),
        bonus_items=content.roll_bonus_items(mission.difficulty, rng),
    )


def _failure(
    stats: StatVector,
    mission: Mission,
    final_chance: float,
    roll: float,
    rng: random.Random,
) -> Outcome:
    severity = failure_severity(final_chance)
    loss_multiplier = FAILURE_LOSS_MULTIPLIERS[difficulty_rank(mission.difficulty)]
    extra_loss = math.floor(mission.cost * severity * loss_multiplier)
    reason, lesson = content.generate_outcome_narrative(stats, rng)
    return Outcome(
        kind="Failure",
        crime_coin_delta=-extra_loss,
        crime_coin_lost=mission.cost + extra_loss,
        fun_coin_delta=math.floor(severity * 5) + 1,
        experience_delta=FAILURE_EXPERIENCE,
        success_chance=final_chance,
        roll=roll,
        narrative=reason,
        lesson=lesson,
    )


def abort_outcome(
    mission: Mission, refund_percent: int = DEFAULT_ABORT_REFUND_PERCENT
) -> Outcome:
    """Player walked away: partial refund of the entry cost."""
    refund = mission.cost * refund_percent // 100
    return Outcome(
        kind="Aborted",
        crime_coin_delta=refund,
        crime_coin_lost=mission.cost - refund,
        fun_coin_delta=ABORT_FUN_COIN,
        experience_delta=0,
        narrative=content.ABORT_NARRATIVE,
        lesson=content.ABORT_LESSON,
    )
