"""Unit tests for Achievement System (src/gamification/achievement_system.py)"""
import pytest
from datetime import datetime

from src.gamification.achievement_system import (
    ACHIEVEMENTS,
    check_achievements,
    get_achievement_progress,
)
from src.models.achievement import Rarity, UnlockedAchievement
from src.models.experiment import UserStats


DAY = datetime(2024, 1, 15, 12, 0, 0)


def test_achievement_catalogue():
    """Test every rarity has achievements and IDs are unique"""
    ids = [ach.id for ach in ACHIEVEMENTS]

    assert len(ids) == 12
    assert len(set(ids)) == len(ids)
    assert {ach.rarity for ach in ACHIEVEMENTS} == set(Rarity)


def test_no_achievements_without_experiments(fresh_stats):
    """Test empty history unlocks nothing"""
    assert check_achievements(fresh_stats, []) == []


def test_first_experiment_unlock(fresh_stats, experiment_factory):
    """Test unlocking First Steps"""
    now = datetime(2024, 1, 15, 13, 0, 0)

    unlocked = check_achievements(fresh_stats, [experiment_factory(DAY)], now=now)

    assert [ach.id for ach in unlocked] == ["first_experiment"]
    assert unlocked[0].name == "First Steps"
    assert unlocked[0].progress == 1
    assert unlocked[0].unlocked_at == now


def test_already_unlocked_achievements_are_skipped(experiment_factory):
    """Test achievements in stats are not awarded twice"""
    first = ACHIEVEMENTS[0]
    stats = UserStats(achievements=[
        UnlockedAchievement(**first.model_dump(), unlocked_at=DAY, progress=1)
    ])

    assert check_achievements(stats, [experiment_factory(DAY)]) == []


def test_safety_first_unlock(fresh_stats, experiment_factory):
    """Test 10 safe experiments unlock Safety First"""
    experiments = [experiment_factory(DAY, safety=85) for _ in range(10)]

    unlocked_ids = {ach.id for ach in check_achievements(fresh_stats, experiments)}

    assert "safety_first" in unlocked_ids
    assert "safety_expert" not in unlocked_ids


def test_category_master_unlock(fresh_stats, experiment_factory):
    """Test using 8 categories unlocks Category Master"""
    categories = ("food", "beverage", "supplement", "herb", "medication", "alcohol", "drug", "chemical")
    experiment = experiment_factory(DAY, categories=categories)

    unlocked_ids = {ach.id for ach in check_achievements(fresh_stats, [experiment])}

    assert "category_master" in unlocked_ids


@pytest.mark.parametrize("achievement_id,kwargs,count,expected", [
    ("mix_master", {}, 3, 3),
    ("safety_first", {"safety": 81}, 2, 2),
    ("safety_first", {"safety": 80}, 2, 0),
    ("safety_expert", {"safety": 100}, 4, 4),
    ("perfectionist", {"overall": 100}, 2, 2),
    ("genius", {"overall": 99}, 2, 0),
    ("innovator", {"novelty": 90}, 5, 5),
    ("guardian", {"safety": 29}, 3, 3),
    ("guardian", {"safety": 30}, 3, 0),
])
def test_get_achievement_progress(experiment_factory, achievement_id, kwargs, count, expected):
    """Test progress counters"""
    experiments = [experiment_factory(DAY, **kwargs) for _ in range(count)]

    assert get_achievement_progress(achievement_id, experiments) == expected


def test_get_achievement_progress_unique_counts(experiment_factory):
    """Test explorer and category_master count distinct values"""
    experiments = [
        experiment_factory(DAY, categories=("food", "herb")),
        experiment_factory(DAY, categories=("food",)),
    ]

    assert get_achievement_progress("explorer", experiments) == 2
    assert get_achievement_progress("category_master", experiments) == 2


def test_perfect_counters_ignore_experiments_without_results(experiment_factory):
    """Test experiments with no results never count as perfect"""
    empty = experiment_factory(DAY).model_copy(update={"results": []})

    assert get_achievement_progress("safety_expert", [empty]) == 0
    assert get_achievement_progress("perfectionist", [empty]) == 0


def test_get_achievement_progress_unknown():
    """Test unknown achievements report zero progress"""
    assert get_achievement_progress("does_not_exist", []) == 0
