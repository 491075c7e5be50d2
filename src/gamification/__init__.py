"""
Gamification engine for Consumable Alchemy

This module implements the progression core of the alchemy lab:
- XP awards for experiments
- Non-linear 20-level progression
- Level rewards and unlocks
- Achievements and rarity colours
"""

from src.gamification.xp_system import (
    calculate_experiment_xp,
    calculate_level,
    get_xp_for_next_level,
    get_level_progress,
)
from src.gamification.rewards import (
    get_level_rewards,
    get_rarity_color,
    get_rarity_bg_color,
    calculate_bonus_xp,
    check_special_consumable_unlock,
)
from src.gamification.achievement_system import check_achievements
from src.gamification.progression import (
    process_experiment_completion,
    get_progression_summary,
    get_next_milestone,
)

__all__ = [
    "calculate_experiment_xp",
    "calculate_level",
    "get_xp_for_next_level",
    "get_level_progress",
    "get_level_rewards",
    "get_rarity_color",
    "get_rarity_bg_color",
    "calculate_bonus_xp",
    "check_special_consumable_unlock",
    "check_achievements",
    "process_experiment_completion",
    "get_progression_summary",
    "get_next_milestone",
]
