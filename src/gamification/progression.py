"""
Progression Tracking

Applies a completed experiment to a player's stats:
- XP award and level recalculation
- Achievement checks
- Streak, play time and favorite category updates

Everything here is stateless. Callers own persistence and pass the full
experiment history in.
"""

from collections import Counter
from typing import Any, Dict, List, Optional
from datetime import date, datetime, timedelta
import logging

from src.gamification.achievement_system import ACHIEVEMENTS, check_achievements
from src.gamification.rewards import get_level_rewards
from src.gamification.xp_system import calculate_experiment_xp, calculate_level, get_level_progress
from src.models.experiment import Experiment, UserStats

logger = logging.getLogger(__name__)

BASE_EXPERIMENT_TIME = timedelta(minutes=2)
TIME_PER_CONSUMABLE = timedelta(seconds=30)
FAVORITE_CATEGORY_LIMIT = 3
EXPERIMENT_MILESTONES = (10, 25, 50, 100, 250, 500, 1000)
STREAK_MILESTONES = (3, 7, 14, 30, 60, 100)


def process_experiment_completion(
    stats: UserStats,
    experiment: Experiment,
    all_experiments: List[Experiment],
    today: Optional[date] = None
) -> Dict[str, Any]:
    """
    Apply a completed experiment to the player's stats

    Args:
        stats: Stats before the experiment (not modified)
        experiment: The experiment just completed
        all_experiments: Full history, including this experiment
        today: Reference day for streak counting (defaults to today)

    Returns:
        {
            'updated_stats': UserStats,
            'new_achievements': list[UnlockedAchievement],
            'level_up': bool,
            'xp_gained': int,
            'old_level': int,
            'new_level': int,
            'level_rewards': dict or None (only on level up)
        }
    """
    xp_gained = calculate_experiment_xp(experiment)
    new_xp = stats.experience + xp_gained
    old_level = stats.level
    new_level = calculate_level(new_xp)
    level_up = new_level > old_level

    updated_stats = stats.model_copy(update={
        "experience": new_xp,
        "level": new_level,
        "experiments": stats.experiments + 1,
        "total_play_time": stats.total_play_time + calculate_experiment_time(experiment),
    })

    new_achievements = check_achievements(updated_stats, all_experiments)

    updated_stats = updated_stats.model_copy(update={
        "achievements": stats.achievements + new_achievements,
        "favorite_categories": get_top_categories(all_experiments, FAVORITE_CATEGORY_LIMIT),
        "streak": calculate_streak(all_experiments, today),
    })

    logger.info(
        f"Experiment {experiment.id} completed by user {experiment.user_id}: "
        f"+{xp_gained} XP, total {new_xp} XP, level {new_level}"
    )

    level_rewards = None
    if level_up:
        level_rewards = get_level_rewards(new_level)
        logger.info(
            f"User {experiment.user_id} leveled up from {old_level} to {new_level} "
            f"({level_rewards['title']})"
        )

    return {
        "updated_stats": updated_stats,
        "new_achievements": new_achievements,
        "level_up": level_up,
        "xp_gained": xp_gained,
        "old_level": old_level,
        "new_level": new_level,
        "level_rewards": level_rewards,
    }


def calculate_experiment_time(experiment: Experiment) -> timedelta:
    """Estimated play time: 2 minutes plus 30 seconds per consumable"""
    return BASE_EXPERIMENT_TIME + TIME_PER_CONSUMABLE * len(experiment.consumables)


def get_top_categories(experiments: List[Experiment], limit: int) -> List[str]:
    """Most used consumable categories, most frequent first"""
    counts = Counter(c.category for exp in experiments for c in exp.consumables)
    return [category for category, _ in counts.most_common(limit)]


def calculate_streak(experiments: List[Experiment], today: Optional[date] = None) -> int:
    """
    Count consecutive days with at least one experiment

    The streak is still alive if the latest experiment was yesterday.
    """
    if today is None:
        today = date.today()

    active_days = {_as_date(exp.timestamp) for exp in experiments}
    if not active_days:
        return 0

    day = today if today in active_days else today - timedelta(days=1)
    streak = 0
    while day in active_days:
        streak += 1
        day -= timedelta(days=1)

    return streak


def _as_date(value: datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def get_progression_summary(stats: UserStats) -> Dict[str, Any]:
    """
    Snapshot of a player's progression for dashboards

    Returns:
        {
            'level': int,
            'experience': int,
            'level_progress': dict (see get_level_progress),
            'achievements': {'total': int, 'unlocked': int, 'by_rarity': dict[str, int]},
            'stats': {'experiments', 'streak', 'total_play_time', 'favorite_categories'}
        }
    """
    by_rarity = Counter(ach.rarity.value for ach in stats.achievements)

    return {
        "level": stats.level,
        "experience": stats.experience,
        "level_progress": get_level_progress(stats.experience, stats.level),
        "achievements": {
            "total": len(ACHIEVEMENTS),
            "unlocked": len(stats.achievements),
            "by_rarity": dict(by_rarity),
        },
        "stats": {
            "experiments": stats.experiments,
            "streak": stats.streak,
            "total_play_time": stats.total_play_time,
            "favorite_categories": list(stats.favorite_categories),
        },
    }


def get_next_milestone(stats: UserStats) -> Optional[Dict[str, Any]]:
    """
    The goal to show the player next

    Checked in order: next level, next experiment count, next streak length.
    Returns None once all three are exhausted.
    """
    level_progress = get_level_progress(stats.experience, stats.level)
    if level_progress["xp_needed"] > 0:
        next_level = stats.level + 1
        return {
            "type": "level",
            "description": f"Reach Level {next_level}",
            "progress": level_progress["progress"],
            "max_progress": 100,
            "reward": (
                f"Unlock new techniques and "
                f"{get_level_rewards(next_level)['bonus_xp']} bonus XP"
            ),
        }

    return get_next_experiment_milestone(stats.experiments) or get_next_streak_milestone(stats.streak)


def get_next_experiment_milestone(experiment_count: int) -> Optional[Dict[str, Any]]:
    """Next experiment-count milestone; rewards 2 XP per experiment in the target"""
    target = next((m for m in EXPERIMENT_MILESTONES if experiment_count < m), None)
    if target is None:
        return None

    return {
        "type": "experiments",
        "description": f"Complete {target} experiments",
        "progress": experiment_count / target * 100,
        "max_progress": 100,
        "reward": f"{target * 2} bonus XP",
    }


def get_next_streak_milestone(streak: int) -> Optional[Dict[str, Any]]:
    """Next streak milestone; rewards 5 XP per day in the target"""
    target = next((m for m in STREAK_MILESTONES if streak < m), None)
    if target is None:
        return None

    return {
        "type": "streak",
        "description": f"Maintain {target}-day streak",
        "progress": streak / target * 100,
        "max_progress": 100,
        "reward": f"{target * 5} bonus XP",
    }
