"""
Achievement Engine - Production Grade v1.0
고정 카탈로그 기반 업적 평가

Features:
    - 팔로워 / 참여율 / 바이럴 / 콘텐츠 / 성장 / 일관성 티어 평가
    - 티어별 독립 평가 (전체 사다리 반환)
    - 업적 점수 집계 (bronze=10, silver=25, gold=50, platinum=100)
    - 이전 상태와 병합해 최초 달성 시각 기록 (호출 측 헬퍼)

평가는 매 호출마다 새로 수행되며 unlocked_at을 채우지 않는다.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence
import logging

from socialsage.models.achievement import (
    Achievement,
    AchievementCategory,
    Difficulty,
    UserStats,
)
from socialsage.models.instagram import HistorySnapshot, MediaPost, Profile
from socialsage.services.achievements.catalog import (
    CONSISTENCY_TIERS,
    CONTENT_TIERS,
    DIVERSITY_ACHIEVEMENT_ID,
    ENGAGEMENT_TIERS,
    FOLLOWER_MILESTONES,
    GROWTH_TIERS,
    VIRAL_TIERS,
)
from socialsage.services.analysis.engagement import EngagementCalculator
from socialsage.services.analysis.growth import growth_rate

logger = logging.getLogger(__name__)


@dataclass
class AchievementConfig:
    """업적 평가 설정"""
    consistency_window_days: int = 30
    min_consistency_posts: int = 7
    min_growth_snapshots: int = 2
    min_diversity_types: int = 2

    @classmethod
    def from_settings(cls, settings) -> "AchievementConfig":
        return cls(consistency_window_days=settings.CONSISTENCY_WINDOW_DAYS)


class AchievementEngine:
    """
    업적 평가기

    카테고리 순서: milestone -> engagement -> viral -> content -> growth -> consistency
    """

    def __init__(self, config: Optional[AchievementConfig] = None):
        self.config = config or AchievementConfig()

    def evaluate(
        self,
        profile: Profile,
        posts: Sequence[MediaPost],
        history: Optional[Sequence[HistorySnapshot]] = None,
        now: Optional[datetime] = None
    ) -> List[Achievement]:
        """
        업적 평가

        Args:
            profile: 프로필
            posts: 게시물 목록
            history: 과거 스냅샷 (오래된 순, optional)
            now: 기준 시각 (일관성 윈도우 계산용)

        Returns:
            업적 인스턴스 목록
        """
        now = now or datetime.now(timezone.utc)

        achievements: List[Achievement] = []
        achievements.extend(self._follower_milestones(profile))
        achievements.extend(self._engagement_tiers(profile))
        achievements.extend(self._viral_tiers(posts))
        achievements.extend(self._content_tiers(posts))
        achievements.extend(self._growth_tiers(profile, history or []))
        achievements.extend(self._consistency_tiers(posts, now))

        unlocked = sum(1 for a in achievements if a.unlocked)
        logger.info(f"[AchievementEngine] Evaluated {len(achievements)} achievements ({unlocked} unlocked)")
        return achievements

    # ============================================================
    # Categories
    # ============================================================

    def _follower_milestones(self, profile: Profile) -> List[Achievement]:
        followers = profile.followers_count
        results = []
        for tier in FOLLOWER_MILESTONES:
            unlocked = followers >= tier.threshold
            results.append(Achievement(
                id=f"followers_{tier.threshold}",
                title=tier.title,
                description=f"Reach {tier.threshold:,} followers",
                icon=tier.icon,
                category=AchievementCategory.MILESTONE,
                difficulty=tier.difficulty,
                unlocked=unlocked,
                progress=min(followers, tier.threshold),
                max_progress=tier.threshold,
                share_text=(
                    f'🎉 Just unlocked "{tier.title}" on Social Sage! '
                    f'{tier.threshold:,} followers and counting! 📈 #SocialSageWins'
                ) if unlocked else None,
                celebration_message=(
                    f"Congratulations! You've reached {tier.threshold:,} followers! 🎉"
                ) if unlocked else None,
            ))
        return results

    def _engagement_tiers(self, profile: Profile) -> List[Achievement]:
        rate = profile.engagement_rate
        results = []
        for tier in ENGAGEMENT_TIERS:
            unlocked = rate >= tier.threshold
            results.append(Achievement(
                id=f"engagement_{tier.threshold}",
                title=tier.title,
                description=f"Achieve {tier.threshold}%+ engagement rate",
                icon=tier.icon,
                category=AchievementCategory.ENGAGEMENT,
                difficulty=tier.difficulty,
                unlocked=unlocked,
                progress=min(rate, tier.threshold),
                max_progress=tier.threshold,
                share_text=(
                    f'💪 Unlocked "{tier.title}" with {rate:.1f}% engagement rate! '
                    f'My audience loves my content! 🔥 #EngagementWins'
                ) if unlocked else None,
            ))
        return results

    def _viral_tiers(self, posts: Sequence[MediaPost]) -> List[Achievement]:
        """최고 게시물 기준 (게시물이 없으면 생략)"""
        best = EngagementCalculator.best_post(posts)
        if best is None:
            return []

        top = best.engagement
        results = []
        for tier in VIRAL_TIERS:
            unlocked = top >= tier.threshold
            results.append(Achievement(
                id=f"viral_{tier.threshold}",
                title=tier.title,
                description=f"Get {tier.threshold:,}+ total engagement on a single post",
                icon=tier.icon,
                category=AchievementCategory.CONTENT,
                difficulty=tier.difficulty,
                unlocked=unlocked,
                share_text=(
                    f'🚀 My post just got {top:,} total engagement! '
                    f'Unlocked "{tier.title}" badge! 📈 #ViralMoment'
                ) if unlocked else None,
            ))
        return results

    def _content_tiers(self, posts: Sequence[MediaPost]) -> List[Achievement]:
        count = len(posts)
        results = []
        for tier in CONTENT_TIERS:
            results.append(Achievement(
                id=f"content_{tier.threshold}",
                title=tier.title,
                description=f"Create {tier.threshold} posts",
                icon=tier.icon,
                category=AchievementCategory.CONTENT,
                difficulty=tier.difficulty,
                unlocked=count >= tier.threshold,
                progress=min(count, tier.threshold),
                max_progress=tier.threshold,
            ))

        media_types = {post.media_type for post in posts}
        if len(media_types) >= self.config.min_diversity_types:
            results.append(Achievement(
                id=DIVERSITY_ACHIEVEMENT_ID,
                title="Content Diversifier",
                description="Post different types of content (photos, videos, carousels)",
                icon="🎨",
                category=AchievementCategory.CONTENT,
                difficulty=Difficulty.SILVER,
                unlocked=True,
                share_text=(
                    '🎨 I mix up my content types to keep my audience engaged! '
                    'Just unlocked "Content Diversifier" 📸🎥 #ContentStrategy'
                ),
            ))
        return results

    def _growth_tiers(self, profile: Profile, history: Sequence[HistorySnapshot]) -> List[Achievement]:
        """
        성장 티어

        비교 데이터가 없으면 잠금 상태가 아니라 아예 생략한다.
        """
        if len(history) < self.config.min_growth_snapshots:
            return []

        previous_followers = history[-2].followers_count
        if previous_followers <= 0:
            return []

        rate = growth_rate(profile.followers_count, previous_followers)
        results = []
        for tier in GROWTH_TIERS:
            unlocked = rate >= tier.threshold
            results.append(Achievement(
                id=f"growth_{tier.threshold}",
                title=tier.title,
                description=f"Achieve {tier.threshold}%+ follower growth",
                icon=tier.icon,
                category=AchievementCategory.GROWTH,
                difficulty=tier.difficulty,
                unlocked=unlocked,
                share_text=(
                    f'📈 Just achieved {rate:.1f}% follower growth! '
                    f'Unlocked "{tier.title}" badge! 🚀 #GrowthWins'
                ) if unlocked else None,
            ))
        return results

    def _consistency_tiers(self, posts: Sequence[MediaPost], now: datetime) -> List[Achievement]:
        """최근 윈도우 내 게시 수 (전체 게시물 7개 미만이면 생략)"""
        if len(posts) < self.config.min_consistency_posts:
            return []

        window_start = now - timedelta(days=self.config.consistency_window_days)
        recent = sum(
            1 for post in posts
            if post.timestamp is not None and post.timestamp >= window_start
        )

        results = []
        for tier in CONSISTENCY_TIERS:
            unlocked = recent >= tier.threshold
            results.append(Achievement(
                id=f"consistency_{tier.threshold}",
                title=tier.title,
                description=f"Post {tier.threshold} times in {self.config.consistency_window_days} days",
                icon=tier.icon,
                category=AchievementCategory.CONSISTENCY,
                difficulty=tier.difficulty,
                unlocked=unlocked,
                progress=min(recent, tier.threshold),
                max_progress=tier.threshold,
                share_text=(
                    f'💪 Consistency pays off! Posted {recent} times this month '
                    f'and unlocked "{tier.title}"! 📅 #ConsistencyWins'
                ) if unlocked else None,
            ))
        return results


# ============================================================
# Aggregation
# ============================================================

def calculate_user_stats(achievements: Iterable[Achievement]) -> UserStats:
    """
    업적 집계

    latest_unlock은 unlocked_at이 있는 달성 업적 중 가장 최근 것
    """
    unlocked = [a for a in achievements if a.unlocked]
    counts: Dict[Difficulty, int] = {difficulty: 0 for difficulty in Difficulty}
    for achievement in unlocked:
        counts[achievement.difficulty] += 1

    stamped = [a for a in unlocked if a.unlocked_at is not None]
    latest = max(stamped, key=lambda a: a.unlocked_at) if stamped else None

    return UserStats(
        total_achievements=len(unlocked),
        bronze_count=counts[Difficulty.BRONZE],
        silver_count=counts[Difficulty.SILVER],
        gold_count=counts[Difficulty.GOLD],
        platinum_count=counts[Difficulty.PLATINUM],
        achievement_score=sum(count * difficulty.weight for difficulty, count in counts.items()),
        latest_unlock=latest,
    )


def _unlocked_by_id(achievements: Iterable[Achievement]) -> Dict[str, Achievement]:
    return {a.id: a for a in achievements if a.unlocked}


def newly_unlocked(
    current: Sequence[Achievement],
    previous: Iterable[Achievement]
) -> List[Achievement]:
    """이전 상태에서 잠겨 있었거나 없던 달성 업적"""
    before = _unlocked_by_id(previous)
    return [a for a in current if a.unlocked and a.id not in before]


def merge_unlock_state(
    current: Sequence[Achievement],
    previous: Iterable[Achievement],
    now: datetime
) -> List[Achievement]:
    """
    저장된 상태와 병합

    이전에 달성한 업적은 저장된 unlocked_at을 유지하고,
    새로 달성한 업적에는 now를 기록한다. 잠긴 업적은 None.

    Args:
        current: 이번 평가 결과
        previous: 저장된 이전 업적 상태
        now: 기록 시각

    Returns:
        unlocked_at이 채워진 새 업적 목록
    """
    before = _unlocked_by_id(previous)
    merged = []
    for achievement in current:
        if not achievement.unlocked:
            merged.append(achievement.model_copy(update={"unlocked_at": None}))
            continue

        stored = before.get(achievement.id)
        stamp = stored.unlocked_at if stored is not None and stored.unlocked_at else now
        merged.append(achievement.model_copy(update={"unlocked_at": stamp}))

    stamped = sum(1 for a in merged if a.unlocked_at == now)
    logger.debug(f"[AchievementEngine] Merged unlock state ({stamped} newly stamped)")
    return merged
