"""
Posting Pattern Analyzer - Production Grade v1.0
타임스탬프 기반 게시 패턴 분석

Features:
    - 게시 빈도 분류 (daily / every_few_days / weekly / irregular)
    - 상위 3개 게시 시간 / 요일 (요일: 0=월요일)
    - (요일, 시간) 슬롯별 평균 참여 기반 최적 게시 시점
    - 게시 간격 일관성 점수
"""

from collections import Counter
from datetime import datetime, tzinfo, timezone
from typing import Dict, List, Optional, Sequence, Tuple
import statistics
import logging

from socialsage.models.analysis import OptimalPostingTime, PostingFrequency, PostingPatterns
from socialsage.models.instagram import MediaPost

logger = logging.getLogger(__name__)


DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# (최대 평균 간격 일수, 빈도)
FREQUENCY_THRESHOLDS = (
    (1.0, PostingFrequency.DAILY),
    (3.0, PostingFrequency.EVERY_FEW_DAYS),
    (7.0, PostingFrequency.WEEKLY),
)

SECONDS_PER_DAY = 86400.0


class PostingPatternAnalyzer:
    """
    게시 패턴 분석기

    타임스탬프가 없는 게시물은 제외한다.
    시간/요일은 지정한 타임존 기준 (기본 UTC).
    """

    TOP_N = 3
    MIN_SLOT_POSTS = 2
    MIN_CONSISTENCY_POSTS = 7

    # 데이터가 부족할 때의 기본 슬롯 (화요일 19시)
    DEFAULT_WEEKDAY = 1
    DEFAULT_HOUR = 19

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz or timezone.utc

    @staticmethod
    def _instants(posts: Sequence[MediaPost]) -> List[datetime]:
        """타임스탬프 (절대 시각), 최신순 정렬"""
        return sorted(
            (post.timestamp.astimezone(timezone.utc) for post in posts if post.timestamp is not None),
            reverse=True,
        )

    @staticmethod
    def _gaps_in_days(times: Sequence[datetime]) -> List[float]:
        """연속 게시물 간 간격 (일)"""
        return [
            (times[i] - times[i + 1]).total_seconds() / SECONDS_PER_DAY
            for i in range(len(times) - 1)
        ]

    @staticmethod
    def classify_frequency(average_gap_days: float) -> PostingFrequency:
        """평균 간격 -> 빈도"""
        for limit, frequency in FREQUENCY_THRESHOLDS:
            if average_gap_days <= limit:
                return frequency
        return PostingFrequency.IRREGULAR

    def analyze(self, posts: Sequence[MediaPost]) -> PostingPatterns:
        """
        게시 패턴 분석

        Args:
            posts: 게시물 목록 (순서 무관)

        Returns:
            PostingPatterns (타임스탬프 2개 미만이면 irregular + 빈 목록)
        """
        instants = self._instants(posts)
        if len(instants) < 2:
            return PostingPatterns(timestamped_posts=len(instants))

        # 간격은 절대 시각 기준 (DST 전환과 무관), 시간/요일만 로컬 기준
        gaps = self._gaps_in_days(instants)
        times = [instant.astimezone(self.tz) for instant in instants]
        average_gap = sum(gaps) / len(gaps)

        # most_common은 동률일 때 처음 등장한 순서 유지
        hour_counts = Counter(local.hour for local in times)
        day_counts = Counter(local.weekday() for local in times)

        patterns = PostingPatterns(
            frequency=self.classify_frequency(average_gap),
            best_hours=[hour for hour, _ in hour_counts.most_common(self.TOP_N)],
            best_days=[day for day, _ in day_counts.most_common(self.TOP_N)],
            average_interval_days=average_gap,
            timestamped_posts=len(instants),
        )

        logger.debug(
            f"[PostingPatternAnalyzer] frequency={patterns.frequency.value}, "
            f"avg_gap={average_gap:.2f}d, hours={patterns.best_hours}, days={patterns.best_days}"
        )
        return patterns

    def slot_performance(self, posts: Sequence[MediaPost]) -> Dict[Tuple[int, int], Tuple[int, int]]:
        """(요일, 시간) 슬롯별 (참여 합계, 게시물 수)"""
        slots: Dict[Tuple[int, int], Tuple[int, int]] = {}
        for post in posts:
            if post.timestamp is None:
                continue
            local = post.timestamp.astimezone(self.tz)
            key = (local.weekday(), local.hour)
            engagement, count = slots.get(key, (0, 0))
            slots[key] = (engagement + post.engagement, count + 1)
        return slots

    def optimal_slot(self, posts: Sequence[MediaPost]) -> OptimalPostingTime:
        """
        최적 게시 시점

        게시물이 2개 이상인 슬롯 중 평균 참여가 가장 높은 슬롯.
        해당 슬롯이 없으면 화요일 19시.
        """
        best_key: Optional[Tuple[int, int]] = None
        best_average = 0.0

        for key, (engagement, count) in self.slot_performance(posts).items():
            if count < self.MIN_SLOT_POSTS:
                continue
            average = engagement / count
            if average > best_average:
                best_key = key
                best_average = average

        if best_key is None:
            weekday, hour = self.DEFAULT_WEEKDAY, self.DEFAULT_HOUR
        else:
            weekday, hour = best_key

        return OptimalPostingTime(
            day=DAY_NAMES[weekday],
            weekday=weekday,
            hour=hour,
            average_engagement=best_average,
            confidence=min(best_average / 100, 1.0),
            is_default=best_key is None,
        )

    def posting_consistency(self, posts: Sequence[MediaPost]) -> float:
        """
        게시 일관성 (0~1)

        1 - (간격 표준편차 / 간격 평균). 게시물이 적으면 1.
        """
        if len(posts) < self.MIN_CONSISTENCY_POSTS:
            return 1.0

        instants = self._instants(posts)
        if len(instants) < 2:
            return 1.0

        gaps = self._gaps_in_days(instants)
        mean_gap = sum(gaps) / len(gaps)
        if mean_gap <= 0:
            return 1.0

        deviation = statistics.pstdev(gaps)
        return max(0.0, min(1.0, 1 - deviation / mean_gap))
