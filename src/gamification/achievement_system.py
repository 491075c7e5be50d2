"""
Achievement System

Tracks and awards achievements across four rarities:
- Common (first steps, safe experiments, exploration)
- Rare (volume, perfect safety, category coverage)
- Epic (mastery, perfect scores, novel combinations)
- Legendary (long-term volume and excellence)

Features:
- Progress counters for locked achievements
- Automatic detection of newly met criteria
"""

from typing import Callable, Dict, List, Optional
from datetime import datetime
import logging

from src.models.achievement import AchievementDefinition, Rarity, UnlockedAchievement
from src.models.experiment import Experiment, UserStats

logger = logging.getLogger(__name__)


ACHIEVEMENTS: List[AchievementDefinition] = [
    # Beginner
    AchievementDefinition(
        id="first_experiment",
        name="First Steps",
        description="Complete your first experiment",
        icon="🧪",
        rarity=Rarity.COMMON,
        max_progress=1,
    ),
    AchievementDefinition(
        id="safety_first",
        name="Safety First",
        description="Complete 10 experiments with safety score above 80",
        icon="🛡️",
        rarity=Rarity.COMMON,
        max_progress=10,
    ),
    AchievementDefinition(
        id="explorer",
        name="Explorer",
        description="Discover 50 different consumables",
        icon="🔍",
        rarity=Rarity.COMMON,
        max_progress=50,
    ),

    # Intermediate
    AchievementDefinition(
        id="mix_master",
        name="Mix Master",
        description="Complete 100 experiments",
        icon="⚗️",
        rarity=Rarity.RARE,
        max_progress=100,
    ),
    AchievementDefinition(
        id="safety_expert",
        name="Safety Expert",
        description="Complete 50 experiments with perfect safety scores",
        icon="🏆",
        rarity=Rarity.RARE,
        max_progress=50,
    ),
    AchievementDefinition(
        id="category_master",
        name="Category Master",
        description="Experiment with all consumable categories",
        icon="📚",
        rarity=Rarity.RARE,
        max_progress=8,
    ),

    # Advanced
    AchievementDefinition(
        id="alchemist",
        name="Master Alchemist",
        description="Complete 500 experiments",
        icon="🧙‍♂️",
        rarity=Rarity.EPIC,
        max_progress=500,
    ),
    AchievementDefinition(
        id="perfectionist",
        name="Perfectionist",
        description="Achieve 100 perfect experiment scores",
        icon="💎",
        rarity=Rarity.EPIC,
        max_progress=100,
    ),
    AchievementDefinition(
        id="innovator",
        name="Innovator",
        description="Create 25 novel combinations",
        icon="💡",
        rarity=Rarity.EPIC,
        max_progress=25,
    ),

    # Legendary
    AchievementDefinition(
        id="legend",
        name="Legendary Alchemist",
        description="Complete 1000 experiments",
        icon="👑",
        rarity=Rarity.LEGENDARY,
        max_progress=1000,
    ),
    AchievementDefinition(
        id="guardian",
        name="Safety Guardian",
        description="Prevent 100 dangerous combinations",
        icon="🛡️👑",
        rarity=Rarity.LEGENDARY,
        max_progress=100,
    ),
    AchievementDefinition(
        id="genius",
        name="Scientific Genius",
        description="Achieve 500 perfect experiment scores",
        icon="🧠👑",
        rarity=Rarity.LEGENDARY,
        max_progress=500,
    ),
]


def _experiment_count(experiments: List[Experiment]) -> int:
    return len(experiments)


def _safe_experiments(experiments: List[Experiment]) -> int:
    return sum(1 for exp in experiments if any(r.safety_score > 80 for r in exp.results))


def _unique_consumables(experiments: List[Experiment]) -> int:
    return len({c.id for exp in experiments for c in exp.consumables})


def _perfect_safety(experiments: List[Experiment]) -> int:
    # all() is vacuously true, so experiments without results are excluded
    return sum(
        1 for exp in experiments
        if exp.results and all(r.safety_score == 100 for r in exp.results)
    )


def _unique_categories(experiments: List[Experiment]) -> int:
    return len({c.category for exp in experiments for c in exp.consumables})


def _perfect_overall(experiments: List[Experiment]) -> int:
    return sum(
        1 for exp in experiments
        if exp.results and all(r.overall_score == 100 for r in exp.results)
    )


def _novel_combinations(experiments: List[Experiment]) -> int:
    return sum(1 for exp in experiments if any(r.novelty_score >= 90 for r in exp.results))


def _dangerous_combinations(experiments: List[Experiment]) -> int:
    return sum(1 for exp in experiments if any(r.safety_score < 30 for r in exp.results))


_PROGRESS_COUNTERS: Dict[str, Callable[[List[Experiment]], int]] = {
    "first_experiment": lambda exps: min(len(exps), 1),
    "safety_first": _safe_experiments,
    "explorer": _unique_consumables,
    "mix_master": _experiment_count,
    "safety_expert": _perfect_safety,
    "category_master": _unique_categories,
    "alchemist": _experiment_count,
    "perfectionist": _perfect_overall,
    "innovator": _novel_combinations,
    "legend": _experiment_count,
    "guardian": _dangerous_combinations,
    "genius": _perfect_overall,
}


def get_achievement_progress(achievement_id: str, experiments: List[Experiment]) -> int:
    """
    Raw progress counter for an achievement

    Returns 0 for unknown achievement IDs.
    """
    counter = _PROGRESS_COUNTERS.get(achievement_id)
    if counter is None:
        return 0
    return counter(experiments)


def check_achievements(
    stats: UserStats,
    experiments: List[Experiment],
    now: Optional[datetime] = None
) -> List[UnlockedAchievement]:
    """
    Check which achievements the experiment history newly unlocks

    Args:
        stats: Player stats; achievements already listed there are skipped
        experiments: Full experiment history
        now: Unlock timestamp (defaults to now)

    Returns:
        Newly unlocked achievements with progress set to max_progress
    """
    if now is None:
        now = datetime.now()

    unlocked_ids = {ach.id for ach in stats.achievements}
    newly_unlocked = []

    for definition in ACHIEVEMENTS:
        if definition.id in unlocked_ids:
            continue

        progress = get_achievement_progress(definition.id, experiments)
        if progress < definition.max_progress:
            continue

        newly_unlocked.append(UnlockedAchievement(
            **definition.model_dump(),
            unlocked_at=now,
            progress=definition.max_progress,
        ))

        logger.info(f"Unlocked achievement: {definition.id} ({definition.name}, {definition.rarity.value})")

    return newly_unlocked
