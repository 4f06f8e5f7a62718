"""Tests for crime_missions.content."""

import random

import pytest

from crime_missions import content
from crime_missions.models import InvalidDifficulty, StatVector
from tests.helpers import FixedRandom


@pytest.mark.parametrize("difficulty", ["Easy", "Medium", "Hard", "hard", "easy"])
def test_generate_three_actions(difficulty):
    rng = random.Random(3)
    for _ in range(50):
        offers = content.generate_actions(difficulty, rng=rng)
        assert len(offers) == 3
        for offer in offers:
            assert offer.bonus > 0
            assert 0 <= offer.risk <= 100
            assert offer.narrative


@pytest.mark.parametrize("difficulty,low,high", [
    ("Easy", 5, 15),
    ("Medium", 10, 20),
    ("Hard", 15, 25),
])
def test_bonus_range_by_difficulty(difficulty, low, high):
    rng = random.Random(11)
    bonuses = [
        o.bonus
        for _ in range(200)
        for o in content.generate_actions(difficulty, rng=rng)
        if o.affected_stat != "success"
    ]
    assert min(bonuses) >= low
    assert max(bonuses) <= high


def test_catalog_risks_in_band():
    for archetypes in content.ACTION_CATALOG.values():
        for _, _, risk in archetypes:
            assert 20 <= risk <= 50


def test_special_offer_only_on_hard():
    rng = random.Random(21)
    for difficulty in ("Easy", "Medium"):
        for _ in range(200):
            offers = content.generate_actions(difficulty, rng=rng)
            assert all(o.affected_stat != "success" for o in offers)


def test_special_offer_replaces_last_slot_on_hard():
    offers = content.generate_actions("Hard", 3, FixedRandom(roll=0.1, pick=20))
    assert len(offers) == 3
    special = offers[-1]
    assert special.affected_stat == "success"
    assert special.bonus == content.SPECIAL_OFFER_BONUS
    assert special.risk == content.SPECIAL_OFFER_RISK


def test_replenish_count_one():
    assert len(content.generate_actions("Hard", 1, random.Random(4))) == 1


def test_unknown_difficulty_fails_fast():
    with pytest.raises(InvalidDifficulty):
        content.generate_actions("Impossible")


def test_outcome_narrative_keyed_on_weakest_stat():
    stats = StatVector(stealth=70, intimidation=70, speed=12, luck=40)
    reason, lesson = content.generate_outcome_narrative(stats, random.Random(8))
    assert reason in content.FAILURE_REASONS["speed"]
    assert lesson


def test_lesson_can_name_weakest_stat():
    stats = StatVector(stealth=70, intimidation=70, speed=70, luck=10)
    lessons = {
        content.generate_outcome_narrative(stats, random.Random(seed))[1]
        for seed in range(200)
    }
    assert "Consider improving your luck skills for future missions." in lessons


def test_milestone_narrative_indexing():
    assert content.milestone_narrative(20) == content.MILESTONES[0]
    assert content.milestone_narrative(100) == content.MILESTONES[4]
    assert content.milestone_narrative(0) == content.MILESTONE_FALLBACK


def test_random_event_boosts_matching_stat():
    stat, boost, message = content.random_event(random.Random(2))
    assert boost == 5
    assert message == content.RANDOM_EVENTS[stat]


def test_bonus_items_by_difficulty():
    assert content.roll_bonus_items("Easy", FixedRandom(roll=0.2)) == []
    assert len(content.roll_bonus_items("Hard", FixedRandom(roll=0.2))) == 1
