"""
리포트 모델
파이프라인 전체 결과
"""

from datetime import datetime
from typing import Dict, List

from pydantic import Field

from socialsage.models.achievement import Achievement, UserStats
from socialsage.models.analysis import (
    CaptionSentiment,
    ContentInsights,
    ContentPattern,
    EngagementSummary,
    GrowthTrends,
    MediaBucket,
    OptimalPostingTime,
    PostingPatterns,
    TrendAnalysis,
)
from socialsage.models.base import BaseModel
from socialsage.models.insight import (
    SmartInsight,
    SmartNotification,
    WeeklyPerformance,
    WeeklyWin,
)
from socialsage.models.instagram import Profile


class InsightReport(BaseModel):
    """인사이트 리포트"""
    generated_at: datetime
    profile: Profile

    # 분류
    niche: str = "general"
    media_buckets: Dict[MediaBucket, int] = Field(default_factory=dict)
    post_buckets: Dict[str, MediaBucket] = Field(default_factory=dict)
    content: ContentInsights = Field(default_factory=ContentInsights)

    # 패턴 / 참여
    posting_patterns: PostingPatterns = Field(default_factory=PostingPatterns)
    optimal_time: OptimalPostingTime
    posting_consistency: float = 1.0
    engagement: EngagementSummary = Field(default_factory=EngagementSummary)
    growth: GrowthTrends = Field(default_factory=GrowthTrends)
    trends: TrendAnalysis = Field(default_factory=TrendAnalysis)
    content_patterns: List[ContentPattern] = Field(default_factory=list)
    sentiment: CaptionSentiment = Field(default_factory=CaptionSentiment)

    # 업적
    achievements: List[Achievement] = Field(default_factory=list)
    user_stats: UserStats = Field(default_factory=UserStats)

    # 생성 텍스트
    weekly_wins: List[WeeklyWin] = Field(default_factory=list)
    smart_insights: List[SmartInsight] = Field(default_factory=list)
    notifications: List[SmartNotification] = Field(default_factory=list)
    weekly_performance: WeeklyPerformance

    @property
    def unlocked_achievements(self) -> List[Achievement]:
        return [a for a in self.achievements if a.unlocked]
