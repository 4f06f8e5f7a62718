"""Randomized mission content: action offers, narratives, events, loot.

All draws go through an injectable random.Random so tests can seed or
script them. Nothing here keeps state between calls.

Action bonus ranges (inclusive) by difficulty:
  Easy    5-15
  Medium  10-20
  Hard    15-25

On Hard there is a 25% chance the last offer of a batch is the special
"success" offer (bonus 15, risk 40), which boosts every stat by a quarter
of its bonus. A batch always has exactly the requested size.
"""

import math
import random

from crime_missions.models import (
    STAT_NAMES,
    ActionOffer,
    BonusItem,
    Mission,
    StatVector,
    difficulty_rank,
)
from crime_missions.stats import weakest_stat

BONUS_RANGES = [(5, 15), (10, 20), (15, 25)]

SPECIAL_OFFER_CHANCE = 0.25
SPECIAL_OFFER_BONUS = 15
SPECIAL_OFFER_RISK = 40

# (name, description, risk) per affected stat
ACTION_CATALOG: dict[str, list[tuple[str, str, int]]] = {
    "stealth": [
        ("Hide in shadows", "Use the darkness to conceal your movements, decreasing detection chance.", 20),
        ("Move silently", "Tread carefully to avoid making noise that could alert guards.", 20),
        ("Create a distraction", "Set up a diversion to draw attention away from your objective.", 25),
        ("Disable cameras", "Take out security systems to prevent surveillance recordings.", 30),
        ("Use crypto masking", "Apply digital stealth techniques to hide your virtual footprint.", 20),
    ],
    "intimidation": [
        ("Threaten the target", "Make it clear what will happen if they don't comply with your demands.", 40),
        ("Show your weapon", "Reveal your piece to demonstrate you mean business.", 35),
        ("Demand compliance", "Use authoritative tone to command respect and obedience.", 25),
        ("Assert dominance", "Establish yourself as the alpha through body language and attitude.", 30),
        ("Dox threaten", "Imply you have access to their personal blockchain information.", 35),
    ],
    "speed": [
        ("Move quickly", "Rapid action minimizes exposure time and chance of being caught.", 20),
        ("Plan escape route", "Map out the fastest way to get out once the job is done.", 20),
        ("Grab the loot fast", "Prioritize speed over thoroughness when collecting valuables.", 25),
        ("Sprint to safety", "Make a rapid dash to get clear of the danger zone.", 30),
        ("High-frequency trading", "Execute transactions at lightning speed before security catches on.", 35),
    ],
    "luck": [
        ("Bribe a security guard", "Money talks - pay someone on the inside to look the other way.", 45),
        ("Use inside information", "Leverage intel from your network to gain an advantage.", 25),
        ("Wait for perfect timing", "Patience is a virtue that can drastically improve success rates.", 20),
        ("Deploy special equipment", "Use your specialized tools to make the job easier and cleaner.", 30),
        ("Flash loan attack", "Temporarily borrow massive amounts of crypto for quick exploitation.", 50),
    ],
}

SPECIAL_OFFER = (
    "Call in the crew",
    "Bring in your whole crew for a coordinated push. Everyone gets a little sharper.",
)

ACTION_NARRATIVES = [
    "You blend into the shadows, avoiding detection completely.",
    "You create a clever distraction, drawing all eyes away from your true objective.",
    "Your intimidating presence makes everyone comply without question.",
    "You move with lightning speed, in and out before anyone realizes what happened.",
    "Your careful planning pays off as you execute the perfect maneuver.",
    "You deploy your specialized tools, turning a difficult job into child's play.",
    "You find an unexpected opportunity and capitalize on it brilliantly.",
    "Your criminal instincts kick in, guiding you through what could have been a fatal error.",
    "Your digital ghost protocol conceals all traces of your virtual presence.",
    "The blockchain transaction confirms just as you complete the physical breach.",
    "You manipulate the security systems with well-timed exploits.",
    "You social engineer your way past what should have been impenetrable defenses.",
]

COMPLICATIONS = [
    "Something goes wrong. You take a minor setback.",
    "Your {stat} is tested and you struggle a bit.",
    "The situation gets more complicated than you expected.",
    "You encounter unexpected resistance.",
]

MILESTONES = [
    "You begin approaching the target location, scouting for any security...",
    "You're inside now, carefully navigating through potential obstacles...",
    "You're getting closer to the objective, but the risk is increasing...",
    "Almost there! Just need to finish the job and make your escape...",
    "Time to get out with the loot before anyone notices!",
]

MILESTONE_FALLBACK = "You continue with the mission..."

RANDOM_EVENT_BOOST = 5

RANDOM_EVENTS = {
    "stealth": "You spot a security guard ahead! Your stealth skills help you avoid detection.",
    "speed": "You find an alternative route that saves time! Your speed improves.",
    "intimidation": "You encounter a bystander, but your intimidating presence keeps them quiet.",
    "luck": "You discover a hidden stash of extra loot! Your luck just improved.",
}

FAILURE_REASONS = {
    "stealth": [
        "You weren't stealthy enough! Security cameras caught you red-handed.",
        "Your noisy approach alerted the guards. Stealth fail!",
        "You stepped on a creaky floorboard at the worst possible moment!",
    ],
    "intimidation": [
        "Your attempt to intimidate the security guard backfired completely.",
        "No one took your threats seriously, and they called your bluff.",
        "Your disguise was unconvincing and the staff immediately called security.",
    ],
    "speed": [
        "You were too slow! The police arrived before you could escape.",
        "Your getaway vehicle stalled and you couldn't outrun the cops.",
        "You tripped during your escape and got caught in an embarrassing faceplant.",
    ],
    "luck": [
        "Just bad luck! A random police patrol happened to drive by.",
        "What are the odds? The owner returned early from vacation.",
        "Murphy's Law in full effect - everything that could go wrong, did go wrong.",
    ],
}

LESSONS = [
    "Next time, spend more time scouting the location first.",
    "You should invest in better equipment for jobs like these.",
    "Consider improving your {stat} skills for future missions.",
    "Maybe bring a partner along next time for backup.",
    "Try a less risky job until you build up more experience.",
    "This wasn't your day. Sometimes it's better to walk away than force it.",
]

SUCCESS_NARRATIVES = [
    "{name} goes off without a hitch. You vanish before the sirens start.",
    "Clean job. {name} pays out and nobody saw your face.",
    "The crew is still talking about how smooth {name} went.",
]

ABORT_NARRATIVE = "You decided to abort the mission and cut your losses."
ABORT_LESSON = (
    "You aborted the mission and lost most of your investment. "
    "Sometimes it's better to walk away than get caught!"
)

BONUS_ITEM_CHANCES = [0.1, 0.3, 0.5]

BONUS_ITEMS = [
    BonusItem(name="Ski Mask", icon="fa-mask"),
    BonusItem(name="Lockpick Set", icon="fa-key"),
    BonusItem(name="Hacking Device", icon="fa-laptop-code"),
    BonusItem(name="Disguise Kit", icon="fa-user-secret"),
    BonusItem(name="Smoke Bomb", icon="fa-bomb"),
]


def _rng(rng: random.Random | None) -> random.Random:
    return rng or random.Random()


def generate_actions(
    difficulty: str, count: int = 3, rng: random.Random | None = None
) -> list[ActionOffer]:
    """Draw `count` action offers for a mission of the given difficulty."""
    rank = difficulty_rank(difficulty)
    rng = _rng(rng)
    min_bonus, max_bonus = BONUS_RANGES[rank]

    offers = []
    for _ in range(count):
        stat = rng.choice(STAT_NAMES)
        name, description, risk = rng.choice(ACTION_CATALOG[stat])
        bonus = rng.randint(min_bonus, max_bonus)
        offers.append(ActionOffer(
            name=name,
            description=description,
            affected_stat=stat,
            bonus=bonus,
            risk=risk,
            narrative=rng.choice(ACTION_NARRATIVES),
            cooldown=math.ceil(bonus / 5),
        ))

    if offers and rank >= 2 and rng.random() < SPECIAL_OFFER_CHANCE:
        name, description = SPECIAL_OFFER
        offers[-1] = ActionOffer(
            name=name,
            description=description,
            affected_stat="success",
            bonus=SPECIAL_OFFER_BONUS,
            risk=SPECIAL_OFFER_RISK,
            narrative=rng.choice(ACTION_NARRATIVES),
            cooldown=math.ceil(SPECIAL_OFFER_BONUS / 5),
        )
    return offers


def generate_outcome_narrative(
    stats: StatVector, rng: random.Random | None = None
) -> tuple[str, str]:
    """Return (failure_reason, lesson_learned) keyed on the weakest stat."""
    rng = _rng(rng)
    weakest = weakest_stat(stats)
    reasons = FAILURE_REASONS.get(weakest, FAILURE_REASONS["luck"])
    reason = rng.choice(reasons)
    lesson = rng.choice(LESSONS).format(stat=weakest)
    return reason, lesson


def complication(stat: str, rng: random.Random | None = None) -> str:
    return _rng(rng).choice(COMPLICATIONS).format(stat=stat)


def milestone_narrative(progress: int) -> str:
    index = progress // 20 - 1
    if 0 <= index < len(MILESTONES):
        return MILESTONES[index]
    return MILESTONE_FALLBACK


def random_event(rng: random.Random | None = None) -> tuple[str, int, str]:
    """Pick a flavor event. Returns (stat, boost, message)."""
    stat = _rng(rng).choice(STAT_NAMES)
    return stat, RANDOM_EVENT_BOOST, RANDOM_EVENTS[stat]


def success_narrative(mission: Mission, rng: random.Random | None = None) -> str:
    return _rng(rng).choice(SUCCESS_NARRATIVES).format(name=mission.name)


def roll_bonus_items(difficulty: str, rng: random.Random | None = None) -> list[BonusItem]:
    """Harder missions are more likely to drop one loot item."""
    rng = _rng(rng)
    if rng.random() < BONUS_ITEM_CHANCES[difficulty_rank(difficulty)]:
        return [rng.choice(BONUS_ITEMS)]
    return []
