"""
Weekly Performance Calculator
현재 / 이전 기간 집계 비교

Features:
    - 지표별 절대 / 퍼센트 변화 (이전 값 0 -> 0%)
    - 현재 기간 최고 게시물
    - 교체 가능한 스마트 팁 선택기 (요일 순환 / 시드 랜덤)
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional, Sequence
import random
import logging

from socialsage.models.insight import (
    MetricChange,
    PeriodChanges,
    PeriodMetrics,
    SmartTip,
    TopPostSummary,
    WeeklyPerformance,
)
from socialsage.models.instagram import InstagramDataPackage, MediaPost
from socialsage.services.analysis.engagement import EngagementCalculator

logger = logging.getLogger(__name__)


SMART_TIPS = (
    SmartTip(
        title="Post consistently for better engagement",
        description="Accounts that post 4-5 times per week see 23% higher engagement rates",
        confidence="High",
    ),
    SmartTip(
        title="Optimize your posting time",
        description="Your audience is most active during evening hours (7-9 PM)",
        confidence="Medium",
    ),
    SmartTip(
        title="Use more carousel posts",
        description="Carousel posts typically get 1.4x more engagement than single photos",
        confidence="High",
    ),
    SmartTip(
        title="Engage with your audience",
        description="Responding to comments within 1 hour increases future engagement by 12%",
        confidence="Medium",
    ),
    SmartTip(
        title="Try video content",
        description="Reels and video posts get 22% more engagement than photo posts",
        confidence="High",
    ),
    SmartTip(
        title="Use relevant hashtags",
        description="Posts with 5-10 relevant hashtags perform better than those with more or fewer",
        confidence="Medium",
    ),
)


# ============================================================
# Tip Selectors
# ============================================================

class TipSelector(ABC):
    """스마트 팁 선택 전략"""

    @abstractmethod
    def select(self, tips: Sequence[SmartTip], now: datetime) -> SmartTip:
        pass


class RotatingTipSelector(TipSelector):
    """요일 기준 순환 (같은 날은 같은 팁)"""

    def select(self, tips: Sequence[SmartTip], now: datetime) -> SmartTip:
        return tips[now.weekday() % len(tips)]


class RandomTipSelector(TipSelector):
    """시드 가능한 랜덤 선택"""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def select(self, tips: Sequence[SmartTip], now: datetime) -> SmartTip:
        return self._random.choice(list(tips))


def build_tip_selector(mode: str, seed: Optional[int] = None) -> TipSelector:
    """설정값으로 선택기 생성 (rotate, random)"""
    if mode.strip().lower() == "random":
        return RandomTipSelector(seed)
    return RotatingTipSelector()


# ============================================================
# Calculator
# ============================================================

def aggregate_period(posts: Sequence[MediaPost]) -> PeriodMetrics:
    """기간 집계 (노출은 impressions, 없으면 reach)"""
    return PeriodMetrics(
        likes=sum(post.like_count for post in posts),
        comments=sum(post.comments_count for post in posts),
        posts=len(posts),
        shares=sum(post.shares_count for post in posts),
        impressions=sum(post.impressions or post.reach for post in posts),
    )


def metric_change(current: int, previous: int) -> MetricChange:
    """변화량 (이전 값이 0이면 0%)"""
    percentage = (current - previous) / previous * 100 if previous > 0 else 0.0
    return MetricChange(value=current - previous, percentage=percentage)


class WeeklyPerformanceCalculator:
    """
    주간 성과 계산기

    Example:
        >>> calculator = WeeklyPerformanceCalculator(RandomTipSelector(seed=7))
        >>> performance = calculator.calculate(current, previous, now=now)
    """

    def __init__(
        self,
        tip_selector: Optional[TipSelector] = None,
        tips: Sequence[SmartTip] = SMART_TIPS
    ):
        self.tip_selector = tip_selector or RotatingTipSelector()
        self.tips = tuple(tips)

    def calculate(
        self,
        current: InstagramDataPackage,
        previous: Optional[InstagramDataPackage] = None,
        now: Optional[datetime] = None
    ) -> WeeklyPerformance:
        """
        주간 성과 계산

        Args:
            current: 현재 기간 패키지
            previous: 이전 기간 패키지 (없으면 0)
            now: 팁 선택 기준 시각

        Returns:
            WeeklyPerformance
        """
        now = now or datetime.now(timezone.utc)

        current_week = aggregate_period(current.media)
        previous_week = aggregate_period(previous.media) if previous is not None else PeriodMetrics()

        changes = PeriodChanges(**{
            name: metric_change(getattr(current_week, name), getattr(previous_week, name))
            for name in PeriodChanges.model_fields
        })

        best = EngagementCalculator.best_post(current.media)
        if best is None:
            top_post = TopPostSummary(type="post", engagements=0, caption="No posts found")
        else:
            top_post = TopPostSummary(
                type=best.media_type.value,
                engagements=best.engagement,
                caption=best.caption,
            )

        performance = WeeklyPerformance(
            current_week=current_week,
            previous_week=previous_week,
            changes=changes,
            top_post=top_post,
            smart_tip=self.tip_selector.select(self.tips, now),
        )

        logger.debug(
            f"[WeeklyPerformanceCalculator] posts {previous_week.posts} -> {current_week.posts}, "
            f"likes change {changes.likes.percentage:.1f}%"
        )
        return performance
