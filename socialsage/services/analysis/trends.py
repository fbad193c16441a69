"""
Trend Analyzer - Production Grade v1.0
게시물 기반 추세 예측 / 콘텐츠 추천 / 참여 예측

Features:
    - 최근 vs 이전 참여 추세
    - 미디어 형식 / 시간대 추세
    - 참여율 기반 오디언스 성장 전망
    - 형식 / 주제 / 캡션 스타일 / 게시 빈도 추천
    - 지표별 (좋아요 / 댓글 / 저장) 30일 예측 + 신뢰 구간
"""

from dataclasses import dataclass
from datetime import tzinfo, timezone
from operator import attrgetter
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import logging

from socialsage.models.analysis import (
    ConfidenceInterval,
    ContentRecommendation,
    EngagementForecast,
    Level,
    RecommendationType,
    TrendAnalysis,
    TrendPrediction,
    TrendType,
)
from socialsage.models.instagram import MediaPost, MediaType, Profile
from socialsage.services.analysis.classifier import KeywordRule, RuleSet
from socialsage.services.analysis.content_patterns import CAPTION_LENGTH_BUCKETS, FORMAT_LABELS
from socialsage.services.analysis.engagement import derive_engagement_rate

logger = logging.getLogger(__name__)


@dataclass
class TrendConfig:
    """추세 분석 설정"""
    # 예측
    min_trend_posts: int = 5
    trend_threshold: float = 0.1
    high_impact_trend: float = 0.3
    medium_impact_trend: float = 0.15
    min_timing_posts: int = 7
    min_slot_posts: int = 2
    rapid_growth_rate: float = 5.0
    steady_growth_rate: float = 2.0

    # 추천
    video_share_target: float = 0.3
    carousel_share_target: float = 0.2
    small_account_posts: int = 10
    topic_share_limit: float = 0.2
    topic_lift: float = 1.1
    min_style_captions: int = 6
    short_caption_length: int = 100
    min_frequency_posts: int = 5
    min_frequency_timestamps: int = 3
    infrequent_gap_days: float = 7.0

    # 예측치
    min_forecast_posts: int = 3
    forecast_growth: float = 1.1
    forecast_variance: float = 0.3


# (상한 시각(미포함), 이름)
TIME_SLOTS: Tuple[Tuple[int, str], ...] = (
    (6, "early morning"),
    (12, "morning"),
    (18, "afternoon"),
    (22, "evening"),
    (24, "night"),
)

# 먼저 매칭된 주제 하나만, 없으면 entertainment
TOPIC_RULES: RuleSet = (
    KeywordRule("educational", ("tip", "tips", "learn", "how to")),
    KeywordRule("personal", ("i", "my", "personal")),
    KeywordRule("promotional", ("buy", "sale", "link")),
)
FALLBACK_TOPIC = "entertainment"

TOPIC_ACTIONS: Dict[str, List[str]] = {
    "educational": [
        "Create weekly tip series",
        "Share industry insights",
        "Make tutorial carousels",
        "Answer frequently asked questions",
    ],
    "personal": [
        "Share behind-the-scenes content",
        "Tell your story",
        "Show daily routines",
        "Discuss challenges and wins",
    ],
    "promotional": [
        "Highlight customer testimonials",
        "Showcase product benefits",
        "Create limited-time offers",
        "Share user-generated content",
    ],
    "entertainment": [
        "Create trending content",
        "Share funny moments",
        "Use popular memes",
        "Join viral challenges",
    ],
}

FORECAST_METRICS: Tuple[Tuple[str, Callable[[MediaPost], int]], ...] = (
    ("likes", attrgetter("like_count")),
    ("comments", attrgetter("comments_count")),
    ("saves", attrgetter("saved")),
)

SECONDS_PER_DAY = 86400.0


def _average(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def time_slot(hour: int) -> str:
    """시각 -> 시간대 이름"""
    for limit, name in TIME_SLOTS:
        if hour < limit:
            return name
    return TIME_SLOTS[-1][1]


def topic_of(post: MediaPost) -> str:
    """캡션 주제 (첫 매칭 규칙)"""
    for rule in TOPIC_RULES:
        if rule.matches(post.caption_text):
            return rule.label
    return FALLBACK_TOPIC


class TrendAnalyzer:
    """
    추세 분석기

    id는 항목 종류에서 결정되므로 같은 입력은 같은 결과를 낸다.
    시간대는 지정한 타임존 기준 (기본 UTC).

    Example:
        >>> analyzer = TrendAnalyzer(tz=ZoneInfo("Asia/Seoul"))
        >>> trends = analyzer.analyze(profile, posts)
        >>> trends.predictions[0].prediction
    """

    def __init__(self, config: Optional[TrendConfig] = None, tz: Optional[tzinfo] = None):
        self.config = config or TrendConfig()
        self.tz = tz or timezone.utc

    def analyze(self, profile: Profile, posts: Sequence[MediaPost]) -> TrendAnalysis:
        """예측 + 추천 + 참여 예측"""
        analysis = TrendAnalysis(
            predictions=self.predict(profile, posts),
            recommendations=self.recommend(posts),
            forecasts=self.forecast(posts),
        )
        logger.debug(
            f"[TrendAnalyzer] predictions={len(analysis.predictions)}, "
            f"recommendations={len(analysis.recommendations)}, forecasts={len(analysis.forecasts)}"
        )
        return analysis

    @staticmethod
    def _chronological(posts: Sequence[MediaPost]) -> List[MediaPost]:
        """타임스탬프 있는 게시물, 오래된 순"""
        return sorted((p for p in posts if p.timestamp is not None), key=lambda p: p.timestamp)

    # ============================================================
    # Predictions
    # ============================================================

    def predict(self, profile: Profile, posts: Sequence[MediaPost]) -> List[TrendPrediction]:
        """
        추세 예측

        Returns:
            confidence 내림차순 예측 목록 (게시물 없으면 빈 목록)
        """
        if not posts:
            return []

        predictions = [
            prediction for prediction in (
                self._engagement_trend(posts),
                self._format_trend(posts),
                self._audience_trend(profile, posts),
                self._timing_trend(posts),
            )
            if prediction is not None
        ]
        predictions.sort(key=lambda p: p.confidence, reverse=True)
        return predictions

    def _engagement_trend(self, posts: Sequence[MediaPost]) -> Optional[TrendPrediction]:
        """최근 절반 vs 이전 절반 평균 참여"""
        timed = self._chronological(posts)
        if len(posts) < self.config.min_trend_posts or len(timed) < self.config.min_trend_posts:
            return None

        half = len(timed) // 2
        older_avg = _average([p.engagement for p in timed[:half]])
        recent_avg = _average([p.engagement for p in timed[-half:]])

        # 기준 참여가 0이면 변화율 정의 불가
        if older_avg <= 0:
            return None

        strength = abs(recent_avg - older_avg) / older_avg
        if strength <= self.config.trend_threshold:
            return None

        upward = recent_avg > older_avg
        if strength > self.config.high_impact_trend:
            impact = Level.HIGH
        elif strength > self.config.medium_impact_trend:
            impact = Level.MEDIUM
        else:
            impact = Level.LOW

        return TrendPrediction(
            id="trend_engagement",
            trend_type=TrendType.ENGAGEMENT,
            prediction=(
                f"Your engagement is trending {'upward' if upward else 'downward'} "
                f"with a {strength * 100:.1f}% change"
            ),
            confidence=min(0.9, 0.5 + strength),
            timeframe="next 30 days",
            potential_impact=impact,
            data_points=[
                f"Recent avg: {recent_avg:.0f}",
                f"Previous avg: {older_avg:.0f}",
                f"Trend strength: {strength * 100:.1f}%",
            ],
            recommendation=(
                "Continue current content strategy and increase posting frequency" if upward
                else "Analyze top-performing posts and adjust content strategy accordingly"
            ),
        )

    def _format_trend(self, posts: Sequence[MediaPost]) -> Optional[TrendPrediction]:
        """게시물 2개 이상인 형식 중 최고 평균 참여"""
        by_type: Dict[MediaType, List[MediaPost]] = {}
        for post in posts:
            by_type.setdefault(post.media_type, []).append(post)

        best: Optional[Tuple[MediaType, float]] = None
        for media_type, items in by_type.items():
            if len(items) < self.config.min_slot_posts:
                continue
            average = _average([p.engagement for p in items])
            if average > (best[1] if best else 0.0):
                best = (media_type, average)

        if best is None:
            return None

        media_type, average = best
        count = len(by_type[media_type])
        share = count / len(posts)
        label = FORMAT_LABELS[media_type]

        return TrendPrediction(
            id=f"trend_format_{media_type.value.lower()}",
            trend_type=TrendType.CONTENT,
            prediction=f"{label} content will continue to outperform other formats",
            confidence=0.7 + share * 0.2,
            timeframe="next 60 days",
            potential_impact=Level.HIGH if average > 100 else Level.MEDIUM,
            data_points=[
                f"{label} avg engagement: {average:.0f}",
                f"Usage rate: {share * 100:.1f}%",
                f"Total {label.lower()} posts: {count}",
            ],
            recommendation=f"Increase {label.lower()} content to 60-70% of your posts for optimal engagement",
        )

    def _audience_trend(self, profile: Profile, posts: Sequence[MediaPost]) -> TrendPrediction:
        """게시물 평균 참여율 기반 성장 전망"""
        followers = profile.followers_count
        average = _average([p.engagement for p in posts])
        rate = derive_engagement_rate(followers, posts)

        if rate > self.config.rapid_growth_rate:
            prediction, confidence, impact = (
                "Rapid audience growth expected due to high engagement rate", 0.8, Level.HIGH
            )
        elif rate > self.config.steady_growth_rate:
            prediction, confidence, impact = (
                "Steady audience growth expected with current engagement levels", 0.7, Level.MEDIUM
            )
        else:
            prediction, confidence, impact = (
                "Slow audience growth predicted - engagement optimization needed", 0.6, Level.LOW
            )

        return TrendPrediction(
            id="trend_audience",
            trend_type=TrendType.AUDIENCE,
            prediction=prediction,
            confidence=confidence,
            timeframe="next 90 days",
            potential_impact=impact,
            data_points=[
                f"Current followers: {followers:,}",
                f"Engagement rate: {rate:.2f}%",
                f"Avg post engagement: {average:.0f}",
            ],
            recommendation=(
                "Focus on creating more engaging content and interacting with your audience"
                if rate < self.config.steady_growth_rate
                else "Maintain current strategy and consider expanding content themes"
            ),
        )

    def _timing_trend(self, posts: Sequence[MediaPost]) -> Optional[TrendPrediction]:
        """게시물 2개 이상인 시간대 중 최고 평균 참여"""
        if len(posts) < self.config.min_timing_posts:
            return None

        slots: Dict[str, List[MediaPost]] = {}
        for post in posts:
            if post.timestamp is None:
                continue
            slots.setdefault(time_slot(post.timestamp.astimezone(self.tz).hour), []).append(post)

        best: Optional[Tuple[str, float]] = None
        for slot, items in slots.items():
            if len(items) < self.config.min_slot_posts:
                continue
            average = _average([p.engagement for p in items])
            if average > (best[1] if best else 0.0):
                best = (slot, average)

        if best is None:
            return None

        slot, average = best
        return TrendPrediction(
            id=f"trend_timing_{slot.replace(' ', '_')}",
            trend_type=TrendType.TIMING,
            prediction=f"{slot.capitalize()} posts will continue to perform best",
            confidence=0.75,
            timeframe="ongoing",
            potential_impact=Level.MEDIUM,
            data_points=[
                f"Best time: {slot}",
                f"Avg engagement: {average:.0f}",
                f"Posts analyzed: {len(slots[slot])}",
            ],
            recommendation=f"Schedule important content during {slot} hours for maximum reach",
        )

    # ============================================================
    # Recommendations
    # ============================================================

    def recommend(self, posts: Sequence[MediaPost]) -> List[ContentRecommendation]:
        """
        콘텐츠 추천

        Returns:
            priority 내림차순 추천 목록 (게시물 없으면 빈 목록)
        """
        if not posts:
            return []

        recommendations: List[ContentRecommendation] = []
        recommendations.extend(self._format_recommendations(posts))
        recommendations.extend(self._topic_recommendations(posts))
        for builder in (self._style_recommendation, self._frequency_recommendation):
            recommendation = builder(posts)
            if recommendation is not None:
                recommendations.append(recommendation)

        recommendations.sort(key=lambda r: r.priority, reverse=True)
        return recommendations

    def _format_recommendations(self, posts: Sequence[MediaPost]) -> List[ContentRecommendation]:
        """활용이 적은 형식 (비디오 / 캐러셀)"""
        total = len(posts)
        by_type: Dict[MediaType, List[int]] = {}
        for post in posts:
            by_type.setdefault(post.media_type, []).append(post.engagement)

        video_share = len(by_type.get(MediaType.VIDEO, [])) / total
        video_avg = _average(by_type.get(MediaType.VIDEO, []))
        image_avg = _average(by_type.get(MediaType.IMAGE, []))
        carousel_share = len(by_type.get(MediaType.CAROUSEL_ALBUM, [])) / total

        recommendations = []
        if video_share < self.config.video_share_target and (
            video_avg > image_avg or total < self.config.small_account_posts
        ):
            recommendations.append(ContentRecommendation(
                id="recommend_format_video",
                recommendation_type=RecommendationType.FORMAT,
                title="Increase Video Content",
                description="Video content typically drives 2-3x higher engagement than static posts",
                priority=8,
                expected_improvement="30-50% engagement increase",
                implementation_effort=Level.MEDIUM,
                specific_actions=[
                    "Create short-form videos (15-30 seconds)",
                    "Use trending audio and effects",
                    "Show behind-the-scenes content",
                    "Create how-to or tutorial videos",
                ],
            ))

        if carousel_share < self.config.carousel_share_target:
            recommendations.append(ContentRecommendation(
                id="recommend_format_carousel",
                recommendation_type=RecommendationType.FORMAT,
                title="Leverage Carousel Posts",
                description="Carousel posts increase time spent on your content and boost engagement",
                priority=6,
                expected_improvement="20-30% engagement boost",
                implementation_effort=Level.LOW,
                specific_actions=[
                    "Create educational slide series",
                    "Share before/after transformations",
                    "Tell stories across multiple slides",
                    "Create interactive polls and quizzes",
                ],
            ))
        return recommendations

    def _topic_recommendations(self, posts: Sequence[MediaPost]) -> List[ContentRecommendation]:
        """평균 이상 성과지만 비중이 낮은 주제"""
        topics: Dict[str, List[int]] = {rule.label: [] for rule in TOPIC_RULES}
        topics[FALLBACK_TOPIC] = []
        for post in posts:
            topics[topic_of(post)].append(post.engagement)

        overall = _average([p.engagement for p in posts])
        share_limit = len(posts) * self.config.topic_share_limit

        recommendations = []
        for topic, engagements in topics.items():
            if not engagements or len(engagements) >= share_limit:
                continue
            if _average(engagements) <= overall * self.config.topic_lift:
                continue
            recommendations.append(ContentRecommendation(
                id=f"recommend_topic_{topic}",
                recommendation_type=RecommendationType.TOPIC,
                title=f"Increase {topic.capitalize()} Content",
                description=f"Your {topic} posts outperform average but are underutilized",
                priority=7,
                expected_improvement="15-25% engagement increase",
                implementation_effort=Level.MEDIUM if topic == "educational" else Level.LOW,
                specific_actions=list(TOPIC_ACTIONS[topic]),
            ))
        return recommendations

    def _style_recommendation(self, posts: Sequence[MediaPost]) -> Optional[ContentRecommendation]:
        """짧은 캡션 위주인데 더 긴 캡션이 성과가 좋은 경우"""
        captioned = [p for p in posts if p.caption]
        if len(captioned) < self.config.min_style_captions:
            return None

        averages = {
            name: _average([p.engagement for p in captioned if predicate(len(p.caption_text))])
            for name, _, predicate in CAPTION_LENGTH_BUCKETS
        }
        short, medium, long_ = averages["Short"], averages["Medium"], averages["Long"]
        if short > medium and short > long_:
            best = "short"
        elif medium > long_:
            best = "medium"
        else:
            best = "long"

        average_length = _average([len(p.caption_text) for p in captioned])
        if average_length >= self.config.short_caption_length or best == "short":
            return None

        return ContentRecommendation(
            id="recommend_style_caption_length",
            recommendation_type=RecommendationType.STYLE,
            title="Optimize Caption Length",
            description=f"{best.capitalize()} captions perform better for your audience",
            priority=5,
            expected_improvement="10-20% engagement boost",
            implementation_effort=Level.LOW,
            specific_actions=[
                "Write 100-300 character captions" if best == "medium" else "Write longer, story-driven captions",
                "Include clear call-to-actions",
                "Use line breaks for readability",
                "End with engaging questions",
            ],
        )

    def _frequency_recommendation(self, posts: Sequence[MediaPost]) -> Optional[ContentRecommendation]:
        """평균 게시 간격이 일주일 초과"""
        if len(posts) < self.config.min_frequency_posts:
            return None

        timed = self._chronological(posts)
        if len(timed) < self.config.min_frequency_timestamps:
            return None

        gaps = [
            (timed[i].timestamp - timed[i - 1].timestamp).total_seconds() / SECONDS_PER_DAY
            for i in range(1, len(timed))
        ]
        if _average(gaps) <= self.config.infrequent_gap_days:
            return None

        return ContentRecommendation(
            id="recommend_timing_frequency",
            recommendation_type=RecommendationType.TIMING,
            title="Increase Posting Frequency",
            description="More consistent posting will improve your reach and engagement",
            priority=6,
            expected_improvement="25-40% reach increase",
            implementation_effort=Level.MEDIUM,
            specific_actions=[
                "Post 3-5 times per week minimum",
                "Create a content calendar",
                "Batch create content in advance",
                "Use scheduling tools",
            ],
        )

    # ============================================================
    # Forecasts
    # ============================================================

    def forecast(self, posts: Sequence[MediaPost]) -> List[EngagementForecast]:
        """
        지표별 30일 예측

        예측치 = 현재 평균 * (최근 절반 평균 / 이전 절반 평균) * 1.1
        신뢰 구간 = 예측치 ± 현재 평균 * 0.3 (하한 0)
        평균이 0인 지표는 제외한다.
        """
        if len(posts) < self.config.min_forecast_posts:
            return []

        # 최신순, 타임스탬프 없는 게시물은 뒤로
        ordered = sorted(
            (p for p in posts if p.timestamp is not None),
            key=lambda p: p.timestamp,
            reverse=True,
        ) + [p for p in posts if p.timestamp is None]
        half = len(ordered) // 2

        forecasts = []
        for metric, value in FORECAST_METRICS:
            current = _average([value(p) for p in ordered])
            if current == 0:
                continue

            recent = _average([value(p) for p in ordered[:half]])
            older = _average([value(p) for p in ordered[half:]])
            multiplier = recent / older if older > 0 else 1.0
            predicted = current * multiplier * self.config.forecast_growth
            variance = current * self.config.forecast_variance

            forecasts.append(EngagementForecast(
                id=f"forecast_{metric}",
                metric=metric,
                current_average=current,
                predicted_value=predicted,
                confidence_interval=ConfidenceInterval(
                    min=max(0.0, predicted - variance),
                    max=predicted + variance,
                ),
                timeframe="next 30 days",
                factors=[
                    "Historical performance trend",
                    "Engagement rate patterns",
                    "Content optimization potential",
                ],
            ))
        return forecasts
