"""
Rewards System

Level titles, level-gated unlocks, daily streak rewards, achievement rewards,
and rarity colour tokens for the UI.

Level Reward Tiers:
- Level 1-4: Novice Alchemist
- Level 5-9: Apprentice Alchemist (+50 XP)
- Level 10-14: Journeyman Alchemist (+100 XP)
- Level 15-19: Expert Alchemist (+200 XP)
- Level 20: Master Alchemist (+500 XP)
- Beyond 20: Legendary Alchemist (+1000 XP)
"""

import copy
import math
from datetime import datetime
from statistics import fmean
from typing import Any, Dict, List, Optional, Union

from src.gamification.xp_system import MAX_LEVEL
from src.models.achievement import AchievementDefinition, Rarity
from src.models.experiment import Experiment, UserStats

# Ordered by level threshold
LEVEL_REWARDS = [
    (1, {
        "title": "Novice Alchemist",
        "description": "Welcome to the world of consumable alchemy!",
        "unlocks": ["Basic mixing", "Safety guidelines"],
        "bonus_xp": 0,
    }),
    (5, {
        "title": "Apprentice Alchemist",
        "description": "You're getting the hang of this!",
        "unlocks": ["Advanced mixing", "Temperature control"],
        "bonus_xp": 50,
    }),
    (10, {
        "title": "Journeyman Alchemist",
        "description": "Your skills are growing!",
        "unlocks": ["Complex combinations", "Fermentation"],
        "bonus_xp": 100,
    }),
    (15, {
        "title": "Expert Alchemist",
        "description": "You've mastered the basics!",
        "unlocks": ["Distillation", "Extraction"],
        "bonus_xp": 200,
    }),
    (MAX_LEVEL, {
        "title": "Master Alchemist",
        "description": "You are a true master!",
        "unlocks": ["Synthesis", "All techniques"],
        "bonus_xp": 500,
    }),
]

LEGENDARY_REWARD = {
    "title": "Legendary Alchemist",
    "description": "You have reached the pinnacle!",
    "unlocks": ["All techniques mastered"],
    "bonus_xp": 1000,
}

LEVEL_UNLOCKS = {
    1: {
        "features": ["basic_mixing", "safety_guidelines"],
        "consumables": ["food", "beverage"],
        "techniques": ["mix"],
    },
    5: {
        "features": ["temperature_control", "advanced_mixing"],
        "consumables": ["supplement"],
        "techniques": ["blend", "heat", "cool"],
    },
    10: {
        "features": ["complex_combinations", "fermentation"],
        "consumables": ["herb"],
        "techniques": ["ferment"],
    },
    15: {
        "features": ["distillation", "extraction"],
        "consumables": ["medication"],
        "techniques": ["distill", "extract"],
    },
    20: {
        "features": ["synthesis", "all_techniques"],
        "consumables": ["alcohol", "drug", "chemical"],
        "techniques": ["synthesize"],
    },
}

# (streak day, xp, title, description)
DAILY_REWARDS = [
    (1, 50, "Welcome Back!", "50 XP bonus"),
    (2, 75, "Getting Started", "75 XP bonus"),
    (3, 100, "Building Momentum", "100 XP bonus"),
    (7, 200, "Week Warrior", "200 XP bonus + Special consumable"),
    (14, 300, "Two Week Champion", "300 XP bonus + Rare consumable"),
    (30, 500, "Monthly Master", "500 XP bonus + Epic consumable"),
]

DAILY_SPECIAL_REWARDS = {
    7: "Rare consumable: Golden Apple",
    30: "Epic consumable: Philosopher's Stone",
}

LEVEL_UP_CONSUMABLES = {
    5: "Rare consumable: Energy Elixir",
    10: "Epic consumable: Wisdom Potion",
    20: "Legendary consumable: Master's Brew",
}

ACHIEVEMENT_XP = {
    Rarity.COMMON: 25,
    Rarity.RARE: 50,
    Rarity.EPIC: 100,
    Rarity.LEGENDARY: 250,
}

SPECIAL_CONSUMABLES = [
    {
        "id": "golden_apple",
        "name": "Golden Apple",
        "description": "A mythical fruit that enhances all combinations",
        "rarity": Rarity.RARE,
        "category": "food",
        "unlock_condition": "7-day streak",
        "unlock_stat": "streak",
        "unlock_threshold": 7,
    },
    {
        "id": "philosophers_stone",
        "name": "Philosopher's Stone",
        "description": "The ultimate alchemical ingredient",
        "rarity": Rarity.LEGENDARY,
        "category": "chemical",
        "unlock_condition": "30-day streak",
        "unlock_stat": "streak",
        "unlock_threshold": 30,
    },
    {
        "id": "elixir_of_life",
        "name": "Elixir of Life",
        "description": "A potion that grants perfect safety scores",
        "rarity": Rarity.EPIC,
        "category": "beverage",
        "unlock_condition": "Level 15",
        "unlock_stat": "level",
        "unlock_threshold": 15,
    },
    {
        "id": "mystical_herb",
        "name": "Mystical Herb",
        "description": "A rare herb with unknown properties",
        "rarity": Rarity.RARE,
        "category": "herb",
        "unlock_condition": "100 experiments",
        "unlock_stat": "experiments",
        "unlock_threshold": 100,
    },
    {
        "id": "crystal_powder",
        "name": "Crystal Powder",
        "description": "A crystalline substance that amplifies effects",
        "rarity": Rarity.EPIC,
        "category": "chemical",
        "unlock_condition": "Level 10",
        "unlock_stat": "level",
        "unlock_threshold": 10,
    },
]

SPECIAL_UNLOCK_REASONS = {
    "streak": "{}-day streak achieved!",
    "level": "Reached Level {}!",
    "experiments": "Completed {} experiments!",
}

RARITY_COLORS = {
    Rarity.COMMON: "text-gray-400",
    Rarity.RARE: "text-blue-400",
    Rarity.EPIC: "text-purple-400",
    Rarity.LEGENDARY: "text-yellow-400",
}

RARITY_BG_COLORS = {
    Rarity.COMMON: "bg-gray-400/10",
    Rarity.RARE: "bg-blue-400/10",
    Rarity.EPIC: "bg-purple-400/10",
    Rarity.LEGENDARY: "bg-yellow-400/10",
}


def get_level_rewards(level: int) -> Dict[str, Any]:
    """
    Get the reward tier for a level

    Returns:
        {
            'title': str,
            'description': str,
            'unlocks': list[str],
            'bonus_xp': int
        }
    """
    if level > MAX_LEVEL:
        return copy.deepcopy(LEGENDARY_REWARD)

    reward = LEVEL_REWARDS[0][1]
    for threshold, tier in LEVEL_REWARDS:
        if level >= threshold:
            reward = tier
        else:
            break

    return copy.deepcopy(reward)


def _to_rarity(rarity: Union[str, Rarity]) -> Rarity:
    try:
        return Rarity(rarity)
    except ValueError:
        return Rarity.COMMON


def get_rarity_color(rarity: Union[str, Rarity]) -> str:
    """Text colour token for a rarity; unknown rarities use the common colour"""
    return RARITY_COLORS[_to_rarity(rarity)]


def get_rarity_bg_color(rarity: Union[str, Rarity]) -> str:
    """Background colour token for a rarity; unknown rarities use the common colour"""
    return RARITY_BG_COLORS[_to_rarity(rarity)]


def get_unlocked_features(level: int) -> Dict[str, List[str]]:
    """Everything unlocked at or below the given level"""
    unlocked = {"features": [], "consumables": [], "techniques": []}

    for required_level, unlocks in LEVEL_UNLOCKS.items():
        if level >= required_level:
            for key in unlocked:
                unlocked[key].extend(unlocks[key])

    return unlocked


def is_feature_unlocked(level: int, feature: str) -> bool:
    return feature in get_unlocked_features(level)["features"]


def is_consumable_category_unlocked(level: int, category: str) -> bool:
    return category in get_unlocked_features(level)["consumables"]


def is_technique_unlocked(level: int, technique: str) -> bool:
    return technique in get_unlocked_features(level)["techniques"]


def get_daily_reward(streak: int) -> Dict[str, Any]:
    """
    Get the daily login reward for the current streak

    The highest tier the streak qualifies for wins. Streaks below one day get
    the first tier. Day 7 and day 30 also grant a special consumable.
    """
    day, xp, title, description = DAILY_REWARDS[0]
    for tier in DAILY_REWARDS:
        if streak >= tier[0]:
            day, xp, title, description = tier
        else:
            break

    reward = {
        "day": day,
        "xp": xp,
        "title": title,
        "description": description,
    }

    special = DAILY_SPECIAL_REWARDS.get(streak)
    if special:
        reward["special_reward"] = special

    return reward


def get_level_up_rewards(level: int) -> Dict[str, Any]:
    """
    Bonus granted on reaching a level

    10 XP per level, plus milestone consumables and whatever the level
    newly unlocks.
    """
    consumables = []
    if level in LEVEL_UP_CONSUMABLES:
        consumables.append(LEVEL_UP_CONSUMABLES[level])

    unlocks = LEVEL_UNLOCKS.get(level, {})

    return {
        "xp": level * 10,
        "consumables": consumables,
        "features": list(unlocks.get("features", [])),
        "techniques": list(unlocks.get("techniques", [])),
    }


def get_achievement_rewards(achievement: AchievementDefinition) -> Dict[str, Any]:
    """XP and items granted when an achievement unlocks"""
    rarity = _to_rarity(achievement.rarity)
    return {
        "xp": ACHIEVEMENT_XP[rarity],
        "consumables": ["Special consumable"] if rarity == Rarity.LEGENDARY else [],
        "title": achievement.name,
    }


def calculate_bonus_xp(
    base_xp: int,
    stats: UserStats,
    experiment: Experiment,
    last_experiment_at: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Apply situational multipliers to an XP award

    Multipliers (compounded in this order):
    - Streak: +2% per day once the streak is 2+ days
    - Level: +1% per level, always applied
    - First experiment of its day: x1.5 (no previous experiment, or the
      previous one was on an earlier calendar day)
    - Safety excellence: x1.3 when average safety >= 95
    - Innovation: x1.25 when average novelty >= 90
    - Complexity: x1.2 for 5+ consumables

    Score averages run over all results; without results neither score
    multiplier applies.

    Returns:
        {
            'total_xp': int (rounded half up),
            'bonuses': [{'name': str, 'multiplier': float, 'description': str}, ...]
        }
    """
    total = float(base_xp)
    bonuses = []

    def apply(name: str, multiplier: float, description: str) -> None:
        nonlocal total
        total *= multiplier
        bonuses.append({"name": name, "multiplier": multiplier, "description": description})

    if stats.streak > 1:
        apply("Streak Bonus", 1 + stats.streak * 0.02, f"{stats.streak} day streak")

    apply("Level Bonus", 1 + stats.level * 0.01, f"Level {stats.level} bonus")

    if last_experiment_at is None or last_experiment_at.date() < experiment.timestamp.date():
        apply("First Experiment Today", 1.5, "50% bonus for first experiment of the day")

    if experiment.results:
        if fmean(r.safety_score for r in experiment.results) >= 95:
            apply("Safety Excellence", 1.3, "30% bonus for excellent safety score")
        if fmean(r.novelty_score for r in experiment.results) >= 90:
            apply("Innovation Bonus", 1.25, "25% bonus for novel combination")

    if len(experiment.consumables) >= 5:
        apply("Complexity Bonus", 1.2, "20% bonus for complex experiment")

    return {
        "total_xp": math.floor(total + 0.5),
        "bonuses": bonuses,
    }


def get_special_consumables() -> List[Dict[str, Any]]:
    """Catalogue of special consumables and how each is unlocked"""
    return copy.deepcopy(SPECIAL_CONSUMABLES)


def check_special_consumable_unlock(stats: UserStats) -> List[Dict[str, Any]]:
    """
    Special consumables the player currently qualifies for

    Returns:
        [{'consumable': dict, 'reason': str}, ...] in catalogue order
    """
    unlocked = []
    for consumable in get_special_consumables():
        stat = consumable["unlock_stat"]
        threshold = consumable["unlock_threshold"]
        if getattr(stats, stat) >= threshold:
            unlocked.append({
                "consumable": consumable,
                "reason": SPECIAL_UNLOCK_REASONS[stat].format(threshold),
            })

    return unlocked
