"""
Growth Calculator
과거 스냅샷 기반 성장 추세

Features:
    - 스냅샷 간 팔로워 / 팔로잉 / 게시물 성장률
    - 평균 성장률
    - 1 / 3 / 6개월 팔로워 예측 (선형)
"""

from typing import List, Sequence
import logging

from socialsage.models.analysis import GrowthStep, GrowthTrends
from socialsage.models.instagram import HistorySnapshot

logger = logging.getLogger(__name__)


PROJECTION_MONTHS = (
    ("one_month_followers", 1),
    ("three_month_followers", 3),
    ("six_month_followers", 6),
)


def growth_rate(current: float, previous: float) -> float:
    """성장률 (%) - 이전 값이 0 이하면 0"""
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def calculate_growth_trends(history: Sequence[HistorySnapshot]) -> GrowthTrends:
    """
    성장 추세 계산

    Args:
        history: 과거 스냅샷 (오래된 순)

    Returns:
        GrowthTrends (스냅샷이 2개 미만이면 성장률 없음, 예측은 최신 팔로워 그대로)
    """
    steps: List[GrowthStep] = []
    for previous, current in zip(history, history[1:]):
        steps.append(GrowthStep(
            period=current.recorded_at.isoformat() if current.recorded_at else None,
            follower_growth=growth_rate(current.followers_count, previous.followers_count),
            following_growth=growth_rate(current.follows_count, previous.follows_count),
            posts_growth=growth_rate(current.media_count, previous.media_count),
            engagement_rate=current.engagement_rate,
        ))

    average_follower = sum(s.follower_growth for s in steps) / len(steps) if steps else 0.0
    average_posts = sum(s.posts_growth for s in steps) / len(steps) if steps else 0.0

    latest_followers = history[-1].followers_count if history else 0
    projections = {
        key: max(0, round(latest_followers * (1 + average_follower / 100 * months)))
        for key, months in PROJECTION_MONTHS
    }

    logger.debug(
        f"[GrowthCalculator] steps={len(steps)}, "
        f"avg_follower_growth={average_follower:.2f}%"
    )

    return GrowthTrends(
        growth_rates=steps,
        average_follower_growth=average_follower,
        average_posts_growth=average_posts,
        projections=projections,
    )
