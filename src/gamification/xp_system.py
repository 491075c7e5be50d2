"""
XP and Leveling System

Manages XP awards for experiments, level calculations, and progress bars.

Leveling Curve (cumulative XP, levels 1-20):
- Level 2 at 100 XP, level 3 at 250 XP
- Each level costs 50 XP more than the previous one
- Level 10 at 2700 XP, level 20 (max) at 10450 XP

XP Award Rules (per experiment, first result only):
- Base: 10 XP
- Safety score >= 90: +15 XP, safety score < 50: -10 XP
- Effectiveness score >= 90: +10 XP
- Novelty score >= 90: +10 XP
- 5+ consumables: +5 XP
- Successful experiment: +5 XP
"""

from typing import Any, Dict, Optional, Union
from datetime import date, datetime, timedelta
import logging

from src import config
from src.models.experiment import Experiment

logger = logging.getLogger(__name__)

# Cumulative XP required to reach each level, indexed by level - 1
XP_PER_LEVEL = (
    0,      # Level 1
    100,    # Level 2
    250,    # Level 3
    450,    # Level 4
    700,    # Level 5
    1000,   # Level 6
    1350,   # Level 7
    1750,   # Level 8
    2200,   # Level 9
    2700,   # Level 10
    3250,   # Level 11
    3850,   # Level 12
    4500,   # Level 13
    5200,   # Level 14
    5950,   # Level 15
    6750,   # Level 16
    7600,   # Level 17
    8500,   # Level 18
    9450,   # Level 19
    10450,  # Level 20
)

MAX_LEVEL = len(XP_PER_LEVEL)

BASE_EXPERIMENT_XP = 10
HIGH_SCORE_THRESHOLD = 90
LOW_SAFETY_THRESHOLD = 50
COMPLEX_EXPERIMENT_SIZE = 5


def calculate_experiment_xp(experiment: Experiment) -> int:
    """
    Calculate XP awarded for a completed experiment

    Only the first result is scored. An experiment without results earns
    the base XP only.

    Returns:
        XP amount, floored at XP_MINIMUM_AWARD and capped at
        XP_MAXIMUM_AWARD when one is configured
    """
    if not experiment.results:
        logger.debug(f"Experiment {experiment.id} has no results, awarding base XP only")
        return _clamp_award(BASE_EXPERIMENT_XP)

    result = experiment.results[0]
    xp = BASE_EXPERIMENT_XP

    if result.safety_score >= HIGH_SCORE_THRESHOLD:
        xp += 15
    elif result.safety_score < LOW_SAFETY_THRESHOLD:
        xp -= 10

    if result.effectiveness_score >= HIGH_SCORE_THRESHOLD:
        xp += 10

    if result.novelty_score >= HIGH_SCORE_THRESHOLD:
        xp += 10

    if len(experiment.consumables) >= COMPLEX_EXPERIMENT_SIZE:
        xp += 5

    if experiment.success:
        xp += 5

    awarded = _clamp_award(xp)
    logger.debug(
        f"Experiment {experiment.id}: raw {xp} XP, awarded {awarded} XP "
        f"(safety={result.safety_score}, effectiveness={result.effectiveness_score}, "
        f"novelty={result.novelty_score}, consumables={len(experiment.consumables)}, "
        f"success={experiment.success})"
    )
    return awarded


def _clamp_award(xp: int) -> int:
    xp = max(config.XP_MINIMUM_AWARD, xp)
    if config.XP_MAXIMUM_AWARD is not None:
        xp = min(config.XP_MAXIMUM_AWARD, xp)
    return xp


def calculate_level(total_xp: int) -> int:
    """Return the highest level whose XP threshold has been reached (1-20)"""
    for index in range(MAX_LEVEL - 1, -1, -1):
        if total_xp >= XP_PER_LEVEL[index]:
            return index + 1
    return 1


def get_xp_for_next_level(current_level: int) -> int:
    """
    Cumulative XP required to reach the level after current_level

    Returns 0 at or above the max level.
    """
    if current_level >= MAX_LEVEL:
        return 0
    return XP_PER_LEVEL[max(current_level, 1)]


def get_level_progress(current_xp: int, current_level: int) -> Dict[str, Any]:
    """
    Calculate progress through the current level

    Returns:
        {
            'current_level_xp': int,
            'next_level_xp': int (0 at max level),
            'progress': float (0-100),
            'xp_needed': int
        }
    """
    level = min(max(current_level, 1), MAX_LEVEL)
    current_level_xp = XP_PER_LEVEL[level - 1]
    next_level_xp = get_xp_for_next_level(current_level)

    if next_level_xp == 0:
        return {
            "current_level_xp": current_level_xp,
            "next_level_xp": 0,
            "progress": 100.0,
            "xp_needed": 0,
        }

    progress = (current_xp - current_level_xp) / (next_level_xp - current_level_xp) * 100

    return {
        "current_level_xp": current_level_xp,
        "next_level_xp": next_level_xp,
        "progress": min(100.0, max(0.0, progress)),
        "xp_needed": next_level_xp - current_xp,
    }


def calculate_streak_bonus(current_streak: int) -> float:
    """XP multiplier for consecutive experiment days (0 means no bonus)"""
    if current_streak < 2:
        return 0.0
    if current_streak < 7:
        return 1.1
    if current_streak < 30:
        return 1.25
    return 1.5


def calculate_daily_bonus(
    last_experiment_at: Union[date, datetime],
    now: Optional[datetime] = None
) -> float:
    """
    XP multiplier for returning the same day (1.2) or the next day (1.1)

    Days are calendar days: a datetime is reduced to its date before
    comparing, so 23:00 yesterday against 01:00 today counts as the next day.
    """
    if now is None:
        now = datetime.now()

    if isinstance(last_experiment_at, datetime):
        last_experiment_at = last_experiment_at.date()

    days_since = (now.date() - last_experiment_at).days

    if days_since == 0:
        return 1.2
    if days_since == 1:
        return 1.1
    return 1.0


def calculate_play_time_bonus(total_play_time: timedelta) -> float:
    """XP multiplier for accumulated play time"""
    hours = total_play_time / timedelta(hours=1)
    if hours < 1:
        return 1.0
    if hours < 10:
        return 1.05
    if hours < 50:
        return 1.1
    if hours < 100:
        return 1.15
    return 1.2
