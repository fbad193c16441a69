"""
업적 카탈로그
카테고리별 고정 티어 정의 (임계값 오름차순)
"""

from dataclasses import dataclass
from typing import Tuple

from socialsage.models.achievement import Difficulty


@dataclass(frozen=True)
class TierDefinition:
    """업적 티어 정의"""
    threshold: int
    title: str
    icon: str
    difficulty: Difficulty


FOLLOWER_MILESTONES: Tuple[TierDefinition, ...] = (
    TierDefinition(100, "First Century", "🌱", Difficulty.BRONZE),
    TierDefinition(500, "Rising Star", "⭐", Difficulty.BRONZE),
    TierDefinition(1000, "1K Club", "🎯", Difficulty.SILVER),
    TierDefinition(5000, "Influence Builder", "🚀", Difficulty.SILVER),
    TierDefinition(10000, "10K Legend", "👑", Difficulty.GOLD),
    TierDefinition(50000, "Creator Elite", "💎", Difficulty.GOLD),
    TierDefinition(100000, "Mega Influencer", "🌟", Difficulty.PLATINUM),
)

ENGAGEMENT_TIERS: Tuple[TierDefinition, ...] = (
    TierDefinition(2, "Engagement Starter", "💬", Difficulty.BRONZE),
    TierDefinition(4, "Community Builder", "🤝", Difficulty.SILVER),
    TierDefinition(6, "Engagement Master", "🔥", Difficulty.GOLD),
    TierDefinition(10, "Viral Magnet", "⚡", Difficulty.PLATINUM),
)

VIRAL_TIERS: Tuple[TierDefinition, ...] = (
    TierDefinition(100, "Hundred Club", "💯", Difficulty.BRONZE),
    TierDefinition(500, "Crowd Pleaser", "👏", Difficulty.SILVER),
    TierDefinition(1000, "Viral Rookie", "🌊", Difficulty.GOLD),
    TierDefinition(5000, "Viral Expert", "🔥", Difficulty.PLATINUM),
)

CONTENT_TIERS: Tuple[TierDefinition, ...] = (
    TierDefinition(10, "Content Creator", "📸", Difficulty.BRONZE),
    TierDefinition(50, "Prolific Poster", "📚", Difficulty.SILVER),
    TierDefinition(100, "Content Machine", "⚙️", Difficulty.GOLD),
    TierDefinition(500, "Content Legend", "🏆", Difficulty.PLATINUM),
)

GROWTH_TIERS: Tuple[TierDefinition, ...] = (
    TierDefinition(5, "Growth Spurt", "📈", Difficulty.BRONZE),
    TierDefinition(10, "Momentum Builder", "🚀", Difficulty.SILVER),
    TierDefinition(25, "Viral Growth", "💥", Difficulty.GOLD),
    TierDefinition(50, "Explosive Growth", "🌋", Difficulty.PLATINUM),
)

CONSISTENCY_TIERS: Tuple[TierDefinition, ...] = (
    TierDefinition(7, "Week Warrior", "⚡", Difficulty.BRONZE),
    TierDefinition(15, "Consistency King", "👑", Difficulty.SILVER),
    TierDefinition(30, "Daily Dedication", "🔥", Difficulty.GOLD),
)

DIVERSITY_ACHIEVEMENT_ID = "content_diversity"
