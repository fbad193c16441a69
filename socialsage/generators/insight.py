"""
Insight Generator - Production Grade v1.0
주간 성과 / 스마트 인사이트 생성

Features:
    - 최근 7일 최고 게시물 하이라이트 + 재현 팁
    - 참여율 칭찬
    - 미디어가 없을 때 팔로워 기반 폴백
    - 게시 시간 / 콘텐츠 형식 / 참여율 인사이트
    - now 기준 결정적 id / created_at
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import List, Optional
import logging

from socialsage.models.insight import (
    Effort,
    Impact,
    InsightType,
    SmartInsight,
    WeeklyWin,
    WinType,
)
from socialsage.models.instagram import InstagramDataPackage, MediaPost, MediaType
from socialsage.services.analysis.classifier import MediaTypeClassifier
from socialsage.services.analysis.engagement import EngagementCalculator

logger = logging.getLogger(__name__)


MEDIA_TYPE_NAMES = {
    MediaType.IMAGE: "photo",
    MediaType.VIDEO: "video",
    MediaType.CAROUSEL_ALBUM: "carousel",
}


def stamp_millis(now: datetime) -> int:
    """id 접미사용 epoch 밀리초"""
    return int(now.timestamp() * 1000)


@dataclass
class InsightConfig:
    """인사이트 생성 설정"""
    recent_window_days: int = 7
    fallback_posts: int = 5
    fallback_min_followers: int = 100
    engagement_win_rate: float = 3.0
    excellent_rate: float = 6.0
    good_rate: float = 3.0
    video_outperform_ratio: float = 1.3
    long_caption_chars: int = 100
    evening_hours: tuple = (18, 21)

    @classmethod
    def from_settings(cls, settings) -> "InsightConfig":
        return cls(
            recent_window_days=settings.RECENT_WINDOW_DAYS,
            engagement_win_rate=settings.ENGAGEMENT_GOOD_RATE,
            excellent_rate=settings.ENGAGEMENT_EXCELLENT_RATE,
            good_rate=settings.ENGAGEMENT_GOOD_RATE,
            video_outperform_ratio=settings.VIDEO_OUTPERFORM_RATIO,
        )


class InsightGenerator:
    """
    인사이트 생성기

    Example:
        >>> generator = InsightGenerator()
        >>> wins = generator.generate_weekly_wins(package, now=now)
    """

    def __init__(self, config: Optional[InsightConfig] = None, tz: Optional[tzinfo] = None):
        self.config = config or InsightConfig()
        self.tz = tz or timezone.utc

    # ============================================================
    # Weekly Wins
    # ============================================================

    def generate_weekly_wins(
        self,
        package: InstagramDataPackage,
        now: Optional[datetime] = None
    ) -> List[WeeklyWin]:
        """
        주간 성과 생성

        Args:
            package: 데이터 패키지
            now: 기준 시각

        Returns:
            WeeklyWin 목록 (미디어가 없으면 폴백)
        """
        now = now or datetime.now(timezone.utc)

        if not package.has_media:
            return self.generate_fallback_wins(package)

        window_start = now - timedelta(days=self.config.recent_window_days)
        recent = [
            post for post in package.media
            if post.timestamp is not None and post.timestamp >= window_start
        ]
        candidates = recent or package.media[:self.config.fallback_posts]

        wins: List[WeeklyWin] = []

        best = EngagementCalculator.best_post(candidates)
        if best is not None and best.engagement > 0:
            wins.append(WeeklyWin(
                type=WinType.POST_PERFORMANCE,
                title="🔥 Your Top Performing Post!",
                description=(
                    f"Your {MEDIA_TYPE_NAMES[best.media_type]} got {best.engagement:,} total engagements "
                    f"- that's your best one yet!"
                ),
                data=best.model_dump(mode="json"),
                actionable_tip=self.post_tip(best),
                confidence_score=0.9,
            ))

        rate = package.profile.engagement_rate
        if rate > self.config.engagement_win_rate:
            wins.append(WeeklyWin(
                type=WinType.ENGAGEMENT_SPIKE,
                title="📈 Great Engagement Rate!",
                description=(
                    f"Your {rate:.2f}% engagement rate is above average "
                    f"- your audience loves your content!"
                ),
                data={"engagement_rate": rate},
                actionable_tip="Keep posting consistently to maintain this momentum!",
                confidence_score=0.8,
            ))

        logger.info(
            f"[InsightGenerator] Generated {len(wins)} wins "
            f"(recent={len(recent)}, analyzed={len(candidates)})"
        )
        return wins

    def generate_fallback_wins(self, package: InstagramDataPackage) -> List[WeeklyWin]:
        """미디어가 없을 때 팔로워 기반 성과"""
        followers = package.profile.followers_count
        if followers <= self.config.fallback_min_followers:
            return []

        return [WeeklyWin(
            type=WinType.GROWTH_MILESTONE,
            title="🌟 Nice Following!",
            description=f"You have {followers:,} followers - that's a solid foundation to build on!",
            data={"followers": followers},
            actionable_tip="Focus on consistent posting to grow your engaged audience.",
            confidence_score=0.7,
        )]

    def post_tip(self, post: MediaPost) -> str:
        """최고 게시물 재현 팁"""
        tips = []

        if post.media_type == MediaType.VIDEO:
            tips.append("Video content is performing great for you")

        if len(post.caption_text) > self.config.long_caption_chars:
            tips.append("Longer captions seem to resonate with your audience")

        if post.timestamp is not None:
            start, end = self.config.evening_hours
            if start <= post.timestamp.astimezone(self.tz).hour <= end:
                tips.append("Evening posts (6-9 PM) work well for your audience")

        if tips:
            return f"Try this again: {', '.join(tips)}"
        return "This type of content resonates well with your audience - create more like this!"

    # ============================================================
    # Smart Insights
    # ============================================================

    def generate_smart_insights(
        self,
        package: InstagramDataPackage,
        now: Optional[datetime] = None
    ) -> List[SmartInsight]:
        """
        스마트 인사이트 생성

        게시 시간 인사이트는 항상 포함
        """
        now = now or datetime.now(timezone.utc)
        stamp = stamp_millis(now)

        insights = [SmartInsight(
            id=f"insight_timing_{stamp}",
            type=InsightType.TIMING,
            title="Perfect Posting Window",
            description="Evening posts (7-9 PM) typically get the best engagement on Instagram",
            impact=Impact.HIGH,
            effort=Effort.EASY,
            data_source="posting_pattern_analysis",
            created_at=now,
        )]

        performance = MediaTypeClassifier.average_engagement_by_type(package.media)
        video = performance.get(MediaType.VIDEO)
        image = performance.get(MediaType.IMAGE)
        if video and image and video > image * self.config.video_outperform_ratio:
            lift = round((video / image - 1) * 100)
            insights.append(SmartInsight(
                id=f"insight_content_{stamp}",
                type=InsightType.CONTENT,
                title="Video Content is Your Secret Weapon",
                description=(
                    f"Your video posts outperform images by {lift}%. "
                    f"Create more Reels and video content!"
                ),
                impact=Impact.MEDIUM,
                effort=Effort.MEDIUM,
                data_source="content_performance_analysis",
                created_at=now,
            ))

        rate = package.profile.engagement_rate
        if rate > 0:
            if rate > self.config.excellent_rate:
                message = f"Your {rate:.2f}% engagement rate is excellent! Your audience is highly engaged."
                impact = Impact.HIGH
            elif rate > self.config.good_rate:
                message = (
                    f"Your {rate:.2f}% engagement rate is good. "
                    f"Focus on building deeper connections with your audience."
                )
                impact = Impact.MEDIUM
            else:
                message = (
                    f"Your {rate:.2f}% engagement rate has room for improvement. "
                    f"Try asking questions in your captions to boost interaction."
                )
                impact = Impact.HIGH

            insights.append(SmartInsight(
                id=f"insight_engagement_{stamp}",
                type=InsightType.AUDIENCE,
                title="Engagement Rate Analysis",
                description=message,
                impact=impact,
                effort=Effort.EASY,
                data_source="audience_behavior_analysis",
                created_at=now,
            ))

        logger.info(f"[InsightGenerator] Generated {len(insights)} insights")
        return insights
