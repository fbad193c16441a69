"""
Engagement Calculator
게시물/계정 참여 지표 계산

Features:
    - 게시물 참여 (좋아요 + 댓글)
    - 계정 참여율 (0 팔로워 -> 0)
    - 안정 정렬 기반 Top-N
    - 참여 요약 및 오디언스 규모
"""

from typing import List, Optional, Sequence
import logging

from socialsage.models.analysis import AudienceTier, EngagementSummary
from socialsage.models.instagram import MediaPost, Profile

logger = logging.getLogger(__name__)


def safe_divide(numerator: float, denominator: float) -> float:
    """분모가 0 이하이면 0.0"""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def derive_engagement_rate(followers: int, posts: Sequence[MediaPost]) -> float:
    """게시물 평균 참여 / 팔로워 * 100 (입력 경계에서 사용)"""
    if not posts:
        return 0.0
    average = sum(post.engagement for post in posts) / len(posts)
    return EngagementCalculator.engagement_rate(average, followers)


class EngagementCalculator:
    """참여 지표 계산기 (부수 효과 없음)"""

    AUDIENCE_TIERS = (
        (1000, AudienceTier.MICRO),
        (10000, AudienceTier.SMALL),
        (100000, AudienceTier.MEDIUM),
    )

    @staticmethod
    def post_engagement(post: MediaPost) -> int:
        """게시물 참여 수"""
        return post.like_count + post.comments_count

    @staticmethod
    def engagement_rate(engagement: float, followers: int) -> float:
        """참여율 (%) = 참여 / 팔로워 * 100"""
        return safe_divide(engagement, followers) * 100

    @classmethod
    def account_engagement_rate(cls, profile: Profile, posts: Sequence[MediaPost]) -> float:
        """
        계정 참여율

        프로필이 참여율을 제공하면 그대로, 아니면 게시물 평균으로 산출
        """
        if profile.has_engagement_rate:
            return profile.engagement_rate
        return derive_engagement_rate(profile.followers_count, posts)

    @staticmethod
    def average_engagement(posts: Sequence[MediaPost]) -> float:
        """평균 참여"""
        return safe_divide(sum(post.engagement for post in posts), len(posts))

    @staticmethod
    def top_posts(posts: Sequence[MediaPost], n: int = 5) -> List[MediaPost]:
        """
        참여 상위 N개

        동일 참여는 원래 순서 유지 (sorted는 reverse=True에서도 안정 정렬)
        """
        if n <= 0:
            return []
        return sorted(posts, key=lambda post: post.engagement, reverse=True)[:n]

    @staticmethod
    def best_post(posts: Sequence[MediaPost]) -> Optional[MediaPost]:
        """최고 참여 게시물 (동률이면 먼저 나온 게시물, 빈 입력은 None)"""
        if not posts:
            return None
        return max(posts, key=lambda post: post.engagement)

    @classmethod
    def audience_tier(cls, followers: int) -> AudienceTier:
        """팔로워 규모 분류"""
        for limit, tier in cls.AUDIENCE_TIERS:
            if followers < limit:
                return tier
        return AudienceTier.LARGE

    @classmethod
    def summarize(
        cls,
        profile: Profile,
        posts: Sequence[MediaPost],
        top_n: int = 5
    ) -> EngagementSummary:
        """
        참여 요약

        Args:
            profile: 프로필
            posts: 게시물 목록
            top_n: 상위 게시물 수

        Returns:
            EngagementSummary
        """
        total_likes = sum(post.like_count for post in posts)
        total_comments = sum(post.comments_count for post in posts)
        count = len(posts)

        avg_likes = safe_divide(total_likes, count)
        avg_comments = safe_divide(total_comments, count)

        summary = EngagementSummary(
            total_likes=total_likes,
            total_comments=total_comments,
            total_engagement=total_likes + total_comments,
            avg_likes=avg_likes,
            avg_comments=avg_comments,
            avg_engagement=safe_divide(total_likes + total_comments, count),
            engagement_rate=cls.account_engagement_rate(profile, posts),
            comment_like_ratio=avg_comments / max(avg_likes, 1),
            audience_tier=cls.audience_tier(profile.followers_count),
            top_posts=cls.top_posts(posts, top_n),
        )

        logger.debug(
            f"[EngagementCalculator] posts={count}, "
            f"rate={summary.engagement_rate:.2f}, tier={summary.audience_tier.value}"
        )
        return summary
