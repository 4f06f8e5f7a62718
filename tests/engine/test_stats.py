"""Tests for crime_missions.stats."""

import random

import pytest

from crime_missions.models import InvalidDifficulty, InventoryItem, StatVector
from crime_missions.stats import (
    BASELINE_BANDS,
    apply_bonus,
    apply_equipment,
    apply_penalty,
    random_initial_vector,
    weakest_stat,
)


def _vec(stealth=50, intimidation=50, speed=50, luck=50) -> StatVector:
    return StatVector(stealth=stealth, intimidation=intimidation, speed=speed, luck=luck)


# ── apply_bonus / apply_penalty ─────────────────────────────


def test_bonus_raises_named_stat():
    v = apply_bonus(_vec(), "speed", 12)
    assert v.speed == 62
    assert v.stealth == 50


def test_bonus_caps_at_100():
    assert apply_bonus(_vec(stealth=95), "stealth", 20).stealth == 100


def test_success_bonus_spreads_quarter():
    v = apply_bonus(_vec(luck=99), "success", 15)
    assert (v.stealth, v.intimidation, v.speed) == (53, 53, 53)
    assert v.luck == 100


def test_unknown_stat_is_noop():
    v = _vec()
    assert apply_bonus(v, "charisma", 10) == v
    assert apply_penalty(v, "charisma", 10) == v


def test_penalty_floors_at_zero():
    assert apply_penalty(_vec(luck=3), "luck", 5).luck == 0


def test_success_penalty_spreads_quarter():
    v = apply_penalty(_vec(), "success", 9)
    assert v.values() == [48, 48, 48, 48]


def test_updates_return_new_vector():
    v = _vec()
    apply_bonus(v, "stealth", 10)
    assert v.stealth == 50


def test_stats_stay_in_bounds_under_random_updates():
    rng = random.Random(1234)
    v = _vec()
    for _ in range(500):
        stat = rng.choice(["stealth", "intimidation", "speed", "luck", "success", "bogus"])
        amount = rng.randint(0, 250)
        v = apply_bonus(v, stat, amount) if rng.random() < 0.5 else apply_penalty(v, stat, amount)
        assert all(0 <= x <= 100 for x in v.values())


def test_vector_rejects_out_of_range():
    with pytest.raises(ValueError):
        StatVector(stealth=101, intimidation=0, speed=0, luck=0)


# ── weakest_stat ────────────────────────────────────────────


def test_weakest_stat_picks_minimum():
    assert weakest_stat(_vec(speed=10)) == "speed"


def test_weakest_stat_ties_go_to_first():
    assert weakest_stat(_vec(intimidation=5, luck=5)) == "intimidation"
    assert weakest_stat(_vec()) == "stealth"


# ── random_initial_vector ───────────────────────────────────


@pytest.mark.parametrize("difficulty", ["Easy", "Medium", "Hard"])
def test_initial_vector_within_bands(difficulty):
    rng = random.Random(99)
    for _ in range(200):
        v = random_initial_vector(difficulty, rng)
        for name, (low, high) in BASELINE_BANDS.items():
            assert low <= getattr(v, name) <= high


def test_initial_vector_ignores_difficulty():
    easy = random_initial_vector("Easy", random.Random(5))
    hard = random_initial_vector("Hard", random.Random(5))
    assert easy == hard


def test_initial_vector_rejects_unknown_difficulty():
    with pytest.raises(InvalidDifficulty):
        random_initial_vector("Legendary", random.Random(1))


# ── apply_equipment ─────────────────────────────────────────


def test_equipped_boosts_apply():
    mask = InventoryItem(
        id=1, name="Ski Mask", equippable=True, equipped=True,
        effects=[{"type": "boost", "stat": "stealth", "value": 5}],
    )
    wallet = InventoryItem(
        id=2, name="Crypto Wallet", equippable=True, equipped=True,
        effects=[{"type": "protection", "stat": "luck", "value": 10}],
    )
    picks = InventoryItem(
        id=3, name="Lockpick Set", equippable=True, equipped=False,
        effects=[{"type": "boost", "stat": "speed", "value": 5}],
    )
    v = apply_equipment(_vec(), [mask, wallet, picks])
    assert v.values() == [55, 50, 50, 50]
