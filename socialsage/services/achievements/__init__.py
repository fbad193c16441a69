"""
Achievement Services
업적 카탈로그 / 평가 / 집계
"""

from socialsage.services.achievements.catalog import (
    TierDefinition,
    FOLLOWER_MILESTONES,
    ENGAGEMENT_TIERS,
    VIRAL_TIERS,
    CONTENT_TIERS,
    GROWTH_TIERS,
    CONSISTENCY_TIERS,
)
from socialsage.services.achievements.engine import (
    AchievementEngine,
    AchievementConfig,
    calculate_user_stats,
    merge_unlock_state,
    newly_unlocked,
)

__all__ = [
    # Catalog
    "TierDefinition",
    "FOLLOWER_MILESTONES",
    "ENGAGEMENT_TIERS",
    "VIRAL_TIERS",
    "CONTENT_TIERS",
    "GROWTH_TIERS",
    "CONSISTENCY_TIERS",
    # Engine
    "AchievementEngine",
    "AchievementConfig",
    "calculate_user_stats",
    "merge_unlock_state",
    "newly_unlocked",
]
