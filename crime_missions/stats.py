"""Stat vector logic: baseline rolls, bonuses, penalties, weakest stat.

Baseline bands (inclusive) for a fresh mission attempt:
  stealth       50-79
  intimidation  60-89   highest start
  speed         40-69
  luck          20-49   lowest start

Difficulty never shifts the baseline; only the outcome calculator and the
action bonus scale read it.

Every update returns a new StatVector with each component clamped to
[0, 100]. The pseudo-stat "success" spreads a quarter of its amount onto
all four stats. Unknown stat names are ignored.
"""

import random

from crime_missions.models import STAT_NAMES, InventoryItem, StatVector, parse_difficulty

STAT_MAX = 100

BASELINE_BANDS = {
    "stealth": (50, 79),
    "intimidation": (60, 89),
    "speed": (40, 69),
    "luck": (20, 49),
}


def _clamp(value: int) -> int:
    return max(0, min(STAT_MAX, value))


def _shift(vector: StatVector, deltas: dict[str, int]) -> StatVector:
    values = vector.model_dump()
    for stat, delta in deltas.items():
        values[stat] = _clamp(values[stat] + delta)
    return StatVector(**values)


def _deltas(stat: str, amount: int) -> dict[str, int]:
    if stat in STAT_NAMES:
        return {stat: amount}
    if stat == "success":
        share = int(amount / 4)  # truncates toward zero for penalties too
        return {name: share for name in STAT_NAMES}
    return {}


def apply_bonus(vector: StatVector, stat: str, amount: int) -> StatVector:
    """Raise one stat (or all four for "success") capped at 100."""
    return _shift(vector, _deltas(stat, amount))


def apply_penalty(vector: StatVector, stat: str, amount: int) -> StatVector:
    """Lower one stat (or all four for "success") floored at 0."""
    return _shift(vector, _deltas(stat, -amount))


def weakest_stat(vector: StatVector) -> str:
    """Name of the lowest stat; the first in enumeration order wins ties."""
    weakest = STAT_NAMES[0]
    for name in STAT_NAMES[1:]:
        if getattr(vector, name) < getattr(vector, weakest):
            weakest = name
    return weakest


def random_initial_vector(difficulty: str, rng: random.Random | None = None) -> StatVector:
    parse_difficulty(difficulty)
    rng = rng or random.Random()
    return StatVector(**{
        name: rng.randint(low, high) for name, (low, high) in BASELINE_BANDS.items()
    })


def apply_equipment(vector: StatVector, items: list[InventoryItem]) -> StatVector:
    """Add the boost effects of every equipped item."""
    for item in items:
        if not item.equipped:
            continue
        for effect in item.effects:
            if effect.type == "boost":
                vector = apply_bonus(vector, effect.stat, effect.value)
    return vector
