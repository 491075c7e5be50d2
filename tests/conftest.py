"""Global test fixtures and utilities for alchemy engine tests"""
import pytest
from datetime import datetime

from src.models.experiment import Consumable, Experiment, ExperimentResult, UserStats


# ============================================================================
# Experiment Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "123456789"


@pytest.fixture
def mock_consumable():
    """Standard test consumable"""
    return Consumable(
        id="1",
        name="Test Food",
        category="food",
        type="solid",
        safety_level="safe",
        source="openfoodfacts",
        nutritional_info={"calories": 100, "protein": 10, "carbs": 20, "fat": 5},
    )


@pytest.fixture
def mock_result():
    """Result with good but not exceptional scores"""
    return ExperimentResult(
        id="1",
        safety_score=90,
        effectiveness_score=85,
        novelty_score=80,
        overall_score=85,
    )


@pytest.fixture
def mock_experiment(mock_consumable, mock_result, test_user_id):
    """Successful single-consumable experiment"""
    return Experiment(
        id="1",
        user_id=test_user_id,
        consumables=[mock_consumable],
        results=[mock_result],
        timestamp=datetime(2024, 1, 15, 12, 0, 0),
        success=True,
        score=85,
    )


@pytest.fixture
def neutral_experiment(mock_consumable):
    """Failed experiment whose scores earn no bonus or penalty"""
    return Experiment(
        id="neutral",
        consumables=[mock_consumable],
        results=[ExperimentResult(
            safety_score=70,
            effectiveness_score=70,
            novelty_score=70,
            overall_score=70,
        )],
        success=False,
    )


@pytest.fixture
def fresh_stats():
    """Stats for a brand-new player"""
    return UserStats()


@pytest.fixture
def experiment_factory():
    """Factory for experiments with one consumable per category"""
    return _make_experiment


def _make_experiment(
    day: datetime,
    categories=("food",),
    safety=70,
    effectiveness=70,
    novelty=70,
    overall=70,
    success=False,
    experiment_id=None,
):
    """Build an experiment with one consumable per category"""
    consumables = [
        Consumable(id=f"{category}-{i}", name=category.title(), category=category)
        for i, category in enumerate(categories)
    ]
    return Experiment(
        id=experiment_id,
        consumables=consumables,
        results=[ExperimentResult(
            safety_score=safety,
            effectiveness_score=effectiveness,
            novelty_score=novelty,
            overall_score=overall,
        )],
        timestamp=day,
        success=success,
    )
