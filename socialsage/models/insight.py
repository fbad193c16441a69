"""
인사이트 / 알림 / 주간 성과 모델
요청마다 재생성되는 파생 텍스트 엔티티
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field

from socialsage.models.base import BaseModel


# ============================================================
# Weekly Wins
# ============================================================

class WinType(str, Enum):
    """주간 성과 유형"""
    POST_PERFORMANCE = "post_performance"
    ENGAGEMENT_SPIKE = "engagement_spike"
    GROWTH_MILESTONE = "growth_milestone"
    CONTENT_DISCOVERY = "content_discovery"


class WeeklyWin(BaseModel):
    """주간 성과"""
    type: WinType
    title: str
    description: str
    data: Dict[str, Any] = Field(default_factory=dict)
    actionable_tip: str = ""
    confidence_score: float = 0.0


# ============================================================
# Smart Insights
# ============================================================

class InsightType(str, Enum):
    """인사이트 유형"""
    TIMING = "timing"
    CONTENT = "content"
    AUDIENCE = "audience"
    TREND = "trend"
    OPPORTUNITY = "opportunity"


class Impact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Effort(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SmartInsight(BaseModel):
    """스마트 인사이트"""
    id: str
    type: InsightType
    title: str
    description: str
    impact: Impact
    effort: Effort
    data_source: str
    created_at: datetime


# ============================================================
# Notifications
# ============================================================

class NotificationType(str, Enum):
    """알림 유형"""
    TIMING = "timing"
    OPPORTUNITY = "opportunity"
    MILESTONE = "milestone"
    INSIGHT = "insight"
    REMINDER = "reminder"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SmartNotification(BaseModel):
    """실행 가능한 알림"""
    id: str
    type: NotificationType
    title: str
    body: str
    action_url: Optional[str] = None
    action_label: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    scheduled_for: Optional[datetime] = None
    data: Dict[str, Any] = Field(default_factory=dict)


# ============================================================
# Weekly Performance
# ============================================================

class PeriodMetrics(BaseModel):
    """기간 집계"""
    likes: int = 0
    comments: int = 0
    posts: int = 0
    shares: int = 0
    impressions: int = 0


class MetricChange(BaseModel):
    """지표 변화량"""
    value: int = 0
    percentage: float = 0.0


class PeriodChanges(BaseModel):
    """지표별 변화량"""
    likes: MetricChange = Field(default_factory=MetricChange)
    comments: MetricChange = Field(default_factory=MetricChange)
    posts: MetricChange = Field(default_factory=MetricChange)
    shares: MetricChange = Field(default_factory=MetricChange)
    impressions: MetricChange = Field(default_factory=MetricChange)


class TopPostSummary(BaseModel):
    """기간 최고 게시물"""
    type: str = "post"
    engagements: int = 0
    caption: Optional[str] = None


class SmartTip(BaseModel):
    """스마트 팁"""
    title: str
    description: str
    confidence: str


class WeeklyPerformance(BaseModel):
    """주간 성과 비교"""
    current_week: PeriodMetrics
    previous_week: PeriodMetrics
    changes: PeriodChanges
    top_post: TopPostSummary
    smart_tip: SmartTip
