"""
업적 모델
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from socialsage.models.base import BaseModel


class AchievementCategory(str, Enum):
    """업적 카테고리"""
    GROWTH = "growth"
    ENGAGEMENT = "engagement"
    CONTENT = "content"
    CONSISTENCY = "consistency"
    MILESTONE = "milestone"


class Difficulty(str, Enum):
    """업적 난이도 (bronze < silver < gold < platinum)"""
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"

    @property
    def rank(self) -> int:
        return DIFFICULTY_ORDER.index(self)

    @property
    def weight(self) -> int:
        """점수 가중치"""
        return DIFFICULTY_WEIGHTS[self]


DIFFICULTY_ORDER = (
    Difficulty.BRONZE,
    Difficulty.SILVER,
    Difficulty.GOLD,
    Difficulty.PLATINUM,
)

DIFFICULTY_WEIGHTS: Dict[Difficulty, int] = {
    Difficulty.BRONZE: 10,
    Difficulty.SILVER: 25,
    Difficulty.GOLD: 50,
    Difficulty.PLATINUM: 100,
}


class Achievement(BaseModel):
    """
    업적 인스턴스

    평가 시마다 새로 생성된다. unlocked_at은 평가기가 채우지 않으며,
    이전 상태와 비교해 최초 달성 시각을 기록하는 것은 호출 측 책임이다.
    """
    id: str
    title: str
    description: str
    icon: str
    category: AchievementCategory
    difficulty: Difficulty
    unlocked: bool = False
    unlocked_at: Optional[datetime] = None
    progress: Optional[float] = None
    max_progress: Optional[float] = None
    share_text: Optional[str] = None
    celebration_message: Optional[str] = None


class UserStats(BaseModel):
    """업적 집계"""
    total_achievements: int = 0
    bronze_count: int = 0
    silver_count: int = 0
    gold_count: int = 0
    platinum_count: int = 0
    achievement_score: int = 0
    latest_unlock: Optional[Achievement] = None
