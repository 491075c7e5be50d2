"""Achievement models for gamification"""
from enum import Enum
from pydantic import BaseModel
from datetime import datetime


class Rarity(str, Enum):
    """Achievement rarity, used for colour-coding badges"""
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class AchievementDefinition(BaseModel):
    """Achievement definition"""
    id: str
    name: str
    description: str
    icon: str
    rarity: Rarity
    max_progress: int


class UnlockedAchievement(AchievementDefinition):
    """Achievement unlocked by a user"""
    unlocked_at: datetime
    progress: int
