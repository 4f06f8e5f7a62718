"""Tests for crime_missions.outcome: chance formula and resolution math."""

import itertools

import pytest

from crime_missions import outcome as calc
from crime_missions.models import Mission, StatVector
from tests.helpers import FixedRandom


def _mission(**overrides) -> Mission:
    fields = {
        "id": 2, "name": "Corner Store Heist", "difficulty": "Medium",
        "cost": 10, "min_reward": 20, "max_reward": 40,
    }
    fields.update(overrides)
    return Mission(**fields)


def _vec(s, i, sp, lk) -> StatVector:
    return StatVector(stealth=s, intimidation=i, speed=sp, luck=lk)


# ── success_chance ──────────────────────────────────────────


def test_chance_easy_adds_bonus():
    assert calc.success_chance(_vec(50, 50, 50, 50), "Easy") == pytest.approx(0.70)


def test_chance_caps_per_difficulty():
    top = _vec(100, 100, 100, 100)
    assert calc.success_chance(top, "Easy") == pytest.approx(0.95)
    assert calc.success_chance(top, "Medium") == pytest.approx(0.85)
    assert calc.success_chance(top, "Hard") == pytest.approx(0.75)


def test_final_chance_adds_luck_and_caps():
    v = _vec(40, 40, 40, 40)
    assert calc.final_success_chance(v, "Hard") == pytest.approx(0.60)
    assert calc.final_success_chance(_vec(100, 100, 100, 100), "Easy") == 0.95


def test_chance_monotonic_in_each_stat():
    levels = [0, 25, 50, 75, 100]
    for difficulty in ("Easy", "Medium", "Hard"):
        for base in itertools.product(levels, repeat=4):
            v = _vec(*base)
            for idx in range(4):
                raised = list(base)
                raised[idx] = min(100, raised[idx] + 10)
                higher = _vec(*raised)
                assert calc.final_success_chance(higher, difficulty) >= calc.final_success_chance(v, difficulty)


def test_chance_monotonic_in_difficulty():
    for base in itertools.product([0, 30, 60, 100], repeat=4):
        v = _vec(*base)
        easy = calc.final_success_chance(v, "Easy")
        medium = calc.final_success_chance(v, "Medium")
        hard = calc.final_success_chance(v, "Hard")
        assert easy >= medium >= hard
        assert 0.0 <= hard <= easy <= 1.0


# ── resolve ─────────────────────────────────────────────────


def test_success_scenario():
    """0.85 chance, roll 0.5, base reward 30 → floor(30 * 1.35) = 40."""
    result = calc.resolve(_vec(60, 60, 60, 60), _mission(), 0.85, FixedRandom(roll=0.5, pick=30))
    assert result.kind == "Success"
    assert result.crime_coin_delta == 40
    assert 10 <= result.fun_coin_delta < 30
    assert 3 <= result.experience_delta <= 7
    assert result.notoriety_delta == 0
    assert result.roll == 0.5


def test_failure_scenario():
    """0.85 chance, roll 0.99 → severity 0.3, extra loss 3, total lost 13."""
    result = calc.resolve(_vec(60, 60, 60, 60), _mission(), 0.85, FixedRandom(roll=0.99))
    assert result.kind == "Failure"
    assert result.crime_coin_lost == 13
    assert result.crime_coin_delta == -3
    assert result.fun_coin_delta == 2
    assert result.experience_delta == 5
    assert result.narrative
    assert result.lesson


def test_failure_scales_with_difficulty():
    hard = _mission(difficulty="Hard", cost=50, min_reward=100, max_reward=300)
    result = calc.resolve(_vec(10, 10, 10, 10), hard, 0.2, FixedRandom(roll=0.9))
    # severity min(1, 1.6) = 1 → extra floor(50 * 1 * 1.5) = 75
    assert result.crime_coin_lost == 125
    assert result.crime_coin_delta == -75
    assert result.fun_coin_delta == 6


def test_multiplier_capped():
    assert calc.reward_multiplier(0.95) == pytest.approx(1.45)
    assert calc.reward_multiplier(2.0) == 1.5
    assert calc.reward_multiplier(0.3) == 1.0


def test_roll_equal_to_chance_fails():
    result = calc.resolve(_vec(50, 50, 50, 50), _mission(), 0.5, FixedRandom(roll=0.5))
    assert result.kind == "Failure"


def test_notoriety_from_big_reward():
    hard = _mission(difficulty="Hard", cost=50, min_reward=250, max_reward=250)
    # a 50% chance earns no performance multiplier
    result = calc.resolve(_vec(50, 50, 50, 50), hard, 0.5, FixedRandom(roll=0.1, pick=250))
    assert result.crime_coin_delta == 250
    assert result.notoriety_delta == 5


def test_abort_refunds_quarter():
    result = calc.abort_outcome(_mission())
    assert result.kind == "Aborted"
    assert result.crime_coin_delta == 2
    assert result.crime_coin_lost == 8
    assert result.fun_coin_delta == 1
    assert result.experience_delta == 0


def test_abort_custom_refund():
    assert calc.abort_outcome(_mission(cost=50), refund_percent=50).crime_coin_delta == 25


def test_mission_rejects_inverted_reward_range():
    with pytest.raises(ValueError):
        _mission(min_reward=50, max_reward=10)
