"""
데이터 모델 패키지
"""
from socialsage.models.base import BaseModel, SnapshotModel
from socialsage.models.instagram import (
    AccountType,
    HistorySnapshot,
    InstagramDataPackage,
    MediaPost,
    MediaType,
    Profile,
)
from socialsage.models.achievement import (
    Achievement,
    AchievementCategory,
    Difficulty,
    UserStats,
)
from socialsage.models.analysis import (
    CaptionSentiment,
    ContentCategory,
    ContentInsights,
    ContentPattern,
    EngagementSummary,
    GrowthTrends,
    MediaBucket,
    OptimalPostingTime,
    PostingFrequency,
    PostingPatterns,
    ContentRecommendation,
    EngagementForecast,
    TrendAnalysis,
    TrendPrediction,
)
from socialsage.models.insight import (
    SmartInsight,
    SmartNotification,
    WeeklyPerformance,
    WeeklyWin,
)
from socialsage.models.report import InsightReport

__all__ = [
    'BaseModel',
    'SnapshotModel',
    'AccountType',
    'HistorySnapshot',
    'InstagramDataPackage',
    'MediaPost',
    'MediaType',
    'Profile',
    'Achievement',
    'AchievementCategory',
    'Difficulty',
    'UserStats',
    'CaptionSentiment',
    'ContentCategory',
    'ContentInsights',
    'ContentPattern',
    'EngagementSummary',
    'GrowthTrends',
    'MediaBucket',
    'OptimalPostingTime',
    'PostingFrequency',
    'PostingPatterns',
    'ContentRecommendation',
    'EngagementForecast',
    'TrendAnalysis',
    'TrendPrediction',
    'SmartInsight',
    'SmartNotification',
    'WeeklyPerformance',
    'WeeklyWin',
    'InsightReport',
]
