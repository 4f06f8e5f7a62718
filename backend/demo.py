"""Create starter data: missions, the default player, rival leaderboard rows."""

from backend.engine import service
from crime_missions.models import LeaderboardEntry

DEMO_MISSIONS = [
    {
        "name": "Street Tagger",
        "description": "Tag a rival gang's territory with your crew's logo. Easy money, low risk.",
        "difficulty": "Easy",
        "cost": 1,
        "min_reward": 2,
        "max_reward": 5,
        "success_rate": 95,
        "time_required": "10 min",
        "image_url": "https://images.unsplash.com/photo-1569880153113-76e33fc52d5f",
    },
    {
        "name": "Corner Store Heist",
        "description": "Rob the local corner store. Classic risk, decent reward. "
        "Watch for security cameras!",
        "difficulty": "Medium",
        "cost": 10,
        "min_reward": 20,
        "max_reward": 40,
        "success_rate": 75,
        "time_required": "30 min",
        "image_url": "https://images.unsplash.com/photo-1616469829167-0bd76a80c913",
    },
    {
        "name": "Crypto Wallet Hack",
        "description": "Hack into a forgotten crypto wallet. High-tech crime, high rewards, "
        "but risky.",
        "difficulty": "Hard",
        "cost": 50,
        "min_reward": 100,
        "max_reward": 300,
        "success_rate": 45,
        "time_required": "2 hours",
        "image_url": "https://images.unsplash.com/photo-1633265486501-0cf524a07213",
    },
]

DEMO_INVENTORY = [
    {
        "id": 1,
        "name": "Ski Mask",
        "description": "A basic ski mask to hide your identity. Crime 101 essential gear.",
        "category": "Disguise",
        "icon": "fa-mask",
        "effects": [{"type": "boost", "stat": "stealth", "value": 5}],
        "equippable": True,
    },
    {
        "id": 2,
        "name": "Lockpick Set",
        "description": "Standard set of lockpicks. Gets the job done for most basic locks.",
        "category": "Tools",
        "icon": "fa-key",
        "effects": [{"type": "boost", "stat": "speed", "value": 5}],
        "equippable": True,
    },
    {
        "id": 3,
        "name": "Crypto Wallet",
        "description": "Digital wallet for storing your ill-gotten gains.",
        "category": "Tech",
        "rarity": "uncommon",
        "icon": "fa-wallet",
        "effects": [{"type": "protection", "stat": "luck", "value": 10}],
        "equippable": True,
    },
]

# (player_id, username, crime_earned, biggest_heist, notoriety)
DEMO_RIVALS = [
    (101, "CryptoThief420", 42069, 15000, 5),
    (102, "RugPuller9000", 31337, 12000, 4),
    (103, "DeFiVillain", 28456, 9800, 3),
]


def create_demo_data() -> None:
    """Populate an empty data dir with starter missions, player 1 and rivals."""
    engine = service()
    for mission in DEMO_MISSIONS:
        engine.create_mission(mission)

    if engine.storage.get_player(1) is None:
        engine.storage.create_player({
            "username": "Player",
            "crime_coin": 1337,
            "fun_coin": 42,
            "inventory": DEMO_INVENTORY,
        })

    for period in ("day", "week", "all_time"):
        engine.storage.save_leaderboard([
            LeaderboardEntry(
                player_id=pid, username=name, crime_earned=earned,
                biggest_heist=heist, notoriety=notoriety, rank=rank, period=period,
            )
            for rank, (pid, name, earned, heist, notoriety) in enumerate(DEMO_RIVALS, start=1)
        ])
