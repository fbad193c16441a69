"""
Analysis Services
프로필 + 미디어 기반 분석기

모듈:
- classifier: 니치 / 미디어 형식 / 콘텐츠 카테고리 분류
- posting_patterns: 게시 빈도 / 시간 / 요일 분석
- engagement: 참여 지표
- growth: 스냅샷 기반 성장 추세
- content_patterns: 콘텐츠 패턴 발견
- sentiment: 캡션 감정 분석
- trends: 추세 예측 / 콘텐츠 추천 / 참여 예측
"""

# Classifier
from socialsage.services.analysis.classifier import (
    KeywordRule,
    NICHE_RULES,
    CATEGORY_RULES,
    NicheClassifier,
    MediaTypeClassifier,
    ContentCategorizer,
    load_keyword_rules,
)

# Posting Patterns
from socialsage.services.analysis.posting_patterns import (
    PostingPatternAnalyzer,
    DAY_NAMES,
)

# Engagement
from socialsage.services.analysis.engagement import (
    EngagementCalculator,
    derive_engagement_rate,
    safe_divide,
)

# Growth
from socialsage.services.analysis.growth import (
    calculate_growth_trends,
    growth_rate,
)

# Content Patterns
from socialsage.services.analysis.content_patterns import (
    ContentPatternAnalyzer,
    ContentPatternConfig,
)

# Sentiment
from socialsage.services.analysis.sentiment import (
    SentimentAnalyzer,
    SentimentConfig,
    SentimentLabel,
    SentimentResult,
    SentimentTrend,
)

# Trends
from socialsage.services.analysis.trends import (
    TrendAnalyzer,
    TrendConfig,
)

__all__ = [
    # Classifier
    "KeywordRule",
    "NICHE_RULES",
    "CATEGORY_RULES",
    "NicheClassifier",
    "MediaTypeClassifier",
    "ContentCategorizer",
    "load_keyword_rules",
    # Posting Patterns
    "PostingPatternAnalyzer",
    "DAY_NAMES",
    # Engagement
    "EngagementCalculator",
    "derive_engagement_rate",
    "safe_divide",
    # Growth
    "calculate_growth_trends",
    "growth_rate",
    # Content Patterns
    "ContentPatternAnalyzer",
    "ContentPatternConfig",
    # Sentiment
    "SentimentAnalyzer",
    "SentimentConfig",
    "SentimentLabel",
    "SentimentResult",
    "SentimentTrend",
    # Trends
    "TrendAnalyzer",
    "TrendConfig",
]
