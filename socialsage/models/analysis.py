"""
분석 결과 모델
분류기/분석기가 생성하는 파생 구조 (JSON 직렬화 가능한 순수 데이터)
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field

from socialsage.models.base import BaseModel
from socialsage.models.instagram import MediaPost


# ============================================================
# Posting Patterns
# ============================================================

class PostingFrequency(str, Enum):
    """게시 빈도"""
    DAILY = "daily"
    EVERY_FEW_DAYS = "every_few_days"
    WEEKLY = "weekly"
    IRREGULAR = "irregular"


class PostingPatterns(BaseModel):
    """게시 패턴 (요일: 0=월요일)"""
    frequency: PostingFrequency = PostingFrequency.IRREGULAR
    best_hours: List[int] = Field(default_factory=list)
    best_days: List[int] = Field(default_factory=list)
    average_interval_days: float = 0.0
    timestamped_posts: int = 0


class OptimalPostingTime(BaseModel):
    """최적 게시 시점"""
    day: str
    weekday: int
    hour: int
    average_engagement: float = 0.0
    confidence: float = 0.0
    is_default: bool = False


# ============================================================
# Content Classification
# ============================================================

class MediaBucket(str, Enum):
    """게시물 형식 버킷 (게시물당 정확히 하나)"""
    CAROUSEL = "carousel"
    VIDEO = "video"
    REEL = "reel"
    IMAGE = "image"


class ContentCategory(BaseModel):
    """콘텐츠 카테고리 집계"""
    category: str
    count: int = 0
    percentage: float = 0.0
    avg_likes: float = 0.0
    avg_comments: float = 0.0
    avg_engagement: float = 0.0
    engagement_rate: float = 0.0
    top_post: Optional[MediaPost] = None
    examples: List[MediaPost] = Field(default_factory=list)


class ContentInsights(BaseModel):
    """콘텐츠 카테고리 분석 결과"""
    categories: List[ContentCategory] = Field(default_factory=list)
    best_performing_category: Optional[ContentCategory] = None
    underperforming_category: Optional[ContentCategory] = None
    recommendations: List[str] = Field(default_factory=list)


# ============================================================
# Engagement
# ============================================================

class AudienceTier(str, Enum):
    """팔로워 규모"""
    MICRO = "micro"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class EngagementSummary(BaseModel):
    """참여 요약"""
    total_likes: int = 0
    total_comments: int = 0
    total_engagement: int = 0
    avg_likes: float = 0.0
    avg_comments: float = 0.0
    avg_engagement: float = 0.0
    engagement_rate: float = 0.0
    comment_like_ratio: float = 0.0
    audience_tier: AudienceTier = AudienceTier.MICRO
    top_posts: List[MediaPost] = Field(default_factory=list)


# ============================================================
# Growth
# ============================================================

class GrowthStep(BaseModel):
    """스냅샷 간 성장률"""
    period: Optional[str] = None
    follower_growth: float = 0.0
    following_growth: float = 0.0
    posts_growth: float = 0.0
    engagement_rate: float = 0.0


class GrowthTrends(BaseModel):
    """성장 추세"""
    growth_rates: List[GrowthStep] = Field(default_factory=list)
    average_follower_growth: float = 0.0
    average_posts_growth: float = 0.0
    projections: Dict[str, int] = Field(default_factory=dict)


# ============================================================
# Content Patterns
# ============================================================

class PatternType(str, Enum):
    """콘텐츠 패턴 유형"""
    VISUAL = "visual"
    TEXTUAL = "textual"
    TEMPORAL = "temporal"
    ENGAGEMENT = "engagement"


class ContentPattern(BaseModel):
    """발견된 콘텐츠 패턴"""
    id: str
    pattern_type: PatternType
    name: str
    description: str
    frequency: float = 0.0
    performance_impact: float = 0.0
    confidence: float = 0.0
    examples: List[str] = Field(default_factory=list)
    recommendation: str = ""


# ============================================================
# Caption Sentiment
# ============================================================

class CaptionSentiment(BaseModel):
    """캡션 감정 요약"""
    overall_sentiment: str = "neutral"
    sentiment_score: float = 0.0  # -1 ~ 1
    sentiment_trend: str = "stable"  # improving, declining, stable
    top_positive_words: List[str] = Field(default_factory=list)
    top_negative_words: List[str] = Field(default_factory=list)
    analyzed_captions: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)


# ============================================================
# Trends & Forecasts
# ============================================================

class Level(str, Enum):
    """영향도 / 구현 난이도"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TrendType(str, Enum):
    """추세 예측 유형"""
    CONTENT = "content"
    ENGAGEMENT = "engagement"
    AUDIENCE = "audience"
    TIMING = "timing"


class TrendPrediction(BaseModel):
    """추세 예측"""
    id: str
    trend_type: TrendType
    prediction: str
    confidence: float = 0.0
    timeframe: str = ""
    potential_impact: Level = Level.MEDIUM
    data_points: List[str] = Field(default_factory=list)
    recommendation: str = ""


class RecommendationType(str, Enum):
    """콘텐츠 추천 유형"""
    FORMAT = "format"
    TOPIC = "topic"
    STYLE = "style"
    TIMING = "timing"


class ContentRecommendation(BaseModel):
    """콘텐츠 추천 (priority 높을수록 우선)"""
    id: str
    recommendation_type: RecommendationType
    title: str
    description: str
    priority: int = 0
    expected_improvement: str = ""
    implementation_effort: Level = Level.MEDIUM
    specific_actions: List[str] = Field(default_factory=list)


class ConfidenceInterval(BaseModel):
    min: float = 0.0
    max: float = 0.0


class EngagementForecast(BaseModel):
    """지표별 참여 예측"""
    id: str
    metric: str  # likes, comments, saves
    current_average: float = 0.0
    predicted_value: float = 0.0
    confidence_interval: ConfidenceInterval = Field(default_factory=ConfidenceInterval)
    timeframe: str = ""
    factors: List[str] = Field(default_factory=list)


class TrendAnalysis(BaseModel):
    """추세 예측 + 콘텐츠 추천 + 참여 예측"""
    predictions: List[TrendPrediction] = Field(default_factory=list)
    recommendations: List[ContentRecommendation] = Field(default_factory=list)
    forecasts: List[EngagementForecast] = Field(default_factory=list)
