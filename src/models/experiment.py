"""Experiment models for the alchemy lab"""
from datetime import datetime, timedelta
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from src.exceptions import ValidationError
from src.models.achievement import UnlockedAchievement


class Consumable(BaseModel):
    """Food, beverage, supplement or other item used in an experiment"""
    id: str
    name: str
    category: str
    type: Optional[str] = None
    safety_level: Optional[str] = None
    source: Optional[str] = None
    nutritional_info: dict[str, float] = Field(default_factory=dict)


class ExperimentResult(BaseModel):
    """Scored outcome of a combination (scores are conventionally 0-100)"""
    id: Optional[str] = None
    safety_score: float
    effectiveness_score: float
    novelty_score: float
    overall_score: float
    warnings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class Experiment(BaseModel):
    """A simulated combination of consumables and its results"""
    id: Optional[str] = None
    user_id: Optional[str] = None
    consumables: list[Consumable] = Field(default_factory=list)
    results: list[ExperimentResult] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)
    success: bool = False
    score: Optional[float] = None
    notes: Optional[str] = None


class UserStats(BaseModel):
    """Progression counters for a single player"""
    level: int = 1
    experience: int = 0
    experiments: int = 0
    discoveries: int = 0
    achievements: list[UnlockedAchievement] = Field(default_factory=list)
    streak: int = 0
    total_play_time: timedelta = timedelta(0)
    favorite_categories: list[str] = Field(default_factory=list)


def parse_experiment(data: dict[str, Any], user_id: Optional[str] = None) -> Experiment:
    """
    Build an Experiment from a raw payload

    Raises:
        ValidationError: if the payload does not describe a valid experiment
    """
    try:
        return Experiment.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ValidationError(
            message=first["msg"],
            field=field,
            value=first.get("input"),
            context={"user_id": user_id, "error_count": e.error_count()},
            operation="parse_experiment",
            cause=e,
        ) from e
