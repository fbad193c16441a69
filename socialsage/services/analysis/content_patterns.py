"""
Content Pattern Analyzer - Production Grade v1.0
캡션 / 시간 / 참여 기반 콘텐츠 패턴 발견

Features:
    - 최고 성과 미디어 형식
    - 캡션 길이 최적 구간
    - 질문형 캡션의 댓글 효과
    - 해시태그 사용 전략
    - 요일 / 시간대 패턴
    - 토론 유발 콘텐츠 / 저장 많은 콘텐츠
    - performance_impact 기준 정렬
"""

from collections import Counter
from dataclasses import dataclass
from datetime import tzinfo, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import re
import logging

from socialsage.models.analysis import ContentPattern, PatternType
from socialsage.models.instagram import MediaPost, MediaType
from socialsage.services.analysis.posting_patterns import DAY_NAMES

logger = logging.getLogger(__name__)

HASHTAG_PATTERN = re.compile(r"#\w+")


@dataclass
class ContentPatternConfig:
    """콘텐츠 패턴 분석 설정"""
    min_format_posts: int = 3
    min_caption_posts: int = 6
    min_bucket_posts: int = 3
    question_comment_ratio: float = 1.3
    min_hashtag_posts: int = 3
    min_temporal_posts: int = 7
    min_slot_posts: int = 2
    min_discussion_posts: int = 6
    discussion_ratio_factor: float = 0.7
    min_saved_posts: int = 4
    examples: int = 3
    top_hashtags: int = 5


# (이름, 범위 설명, 조건)
CAPTION_LENGTH_BUCKETS: Tuple[Tuple[str, str, Callable[[int], bool]], ...] = (
    ("Short", "≤100 characters", lambda n: n <= 100),
    ("Medium", "100-300 characters", lambda n: 100 < n <= 300),
    ("Long", ">300 characters", lambda n: n > 300),
)

FORMAT_LABELS = {
    MediaType.IMAGE: "Image",
    MediaType.VIDEO: "Video",
    MediaType.CAROUSEL_ALBUM: "Carousel",
}


def _average(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _hour_label(hour: int) -> str:
    """0 -> 12:00 AM, 13 -> 1:00 PM"""
    if hour == 0:
        return "12:00 AM"
    if hour < 12:
        return f"{hour}:00 AM"
    if hour == 12:
        return "12:00 PM"
    return f"{hour - 12}:00 PM"


class ContentPatternAnalyzer:
    """
    콘텐츠 패턴 분석기

    패턴 id는 패턴 종류에서 결정되므로 같은 입력은 같은 결과를 낸다.
    """

    def __init__(self, config: Optional[ContentPatternConfig] = None, tz: Optional[tzinfo] = None):
        self.config = config or ContentPatternConfig()
        self.tz = tz or timezone.utc

    def analyze(self, posts: Sequence[MediaPost]) -> List[ContentPattern]:
        """
        패턴 분석

        Args:
            posts: 게시물 목록

        Returns:
            performance_impact 내림차순 패턴 목록 (빈 입력은 빈 목록)
        """
        if not posts:
            return []

        patterns: List[ContentPattern] = []
        for detector in (
            self._format_pattern,
            self._caption_length_pattern,
            self._question_pattern,
            self._hashtag_pattern,
            self._day_pattern,
            self._hour_pattern,
            self._discussion_pattern,
            self._saves_pattern,
        ):
            pattern = detector(posts)
            if pattern is not None:
                patterns.append(pattern)

        patterns.sort(key=lambda p: p.performance_impact, reverse=True)

        logger.debug(
            f"[ContentPatternAnalyzer] {len(patterns)} patterns: "
            f"{[p.id for p in patterns]}"
        )
        return patterns

    # ============================================================
    # Visual
    # ============================================================

    def _format_pattern(self, posts: Sequence[MediaPost]) -> Optional[ContentPattern]:
        """최고 평균 참여 미디어 형식"""
        by_type: Dict[MediaType, List[MediaPost]] = {}
        for post in posts:
            by_type.setdefault(post.media_type, []).append(post)

        best_type: Optional[MediaType] = None
        best_average = 0.0
        for media_type in FORMAT_LABELS:
            items = by_type.get(media_type, [])
            average = _average([p.engagement for p in items])
            if average > best_average:
                best_type, best_average = media_type, average

        if best_type is None or len(by_type[best_type]) < self.config.min_format_posts:
            return None

        total_engagement = sum(p.engagement for p in posts)
        label = FORMAT_LABELS[best_type]
        return ContentPattern(
            id=f"visual_{best_type.value.lower()}",
            pattern_type=PatternType.VISUAL,
            name=f"{label} Content Excellence",
            description=f"Your {label.lower()} content consistently outperforms other formats",
            frequency=len(by_type[best_type]) / len(posts),
            performance_impact=best_average / total_engagement * len(posts) if total_engagement else 0.0,
            confidence=0.8,
            examples=[p.id for p in by_type[best_type][:self.config.examples]],
            recommendation=f"Continue creating {label.lower()} content and consider increasing frequency by 25%",
        )

    # ============================================================
    # Textual
    # ============================================================

    def _caption_length_pattern(self, posts: Sequence[MediaPost]) -> Optional[ContentPattern]:
        """캡션 길이 최적 구간"""
        captioned = [p for p in posts if p.caption]
        if len(captioned) < self.config.min_caption_posts:
            return None

        best: Optional[Tuple[str, str, List[MediaPost]]] = None
        best_average = 0.0
        for name, label, predicate in CAPTION_LENGTH_BUCKETS:
            items = [p for p in captioned if predicate(len(p.caption_text))]
            average = _average([p.engagement for p in items])
            if average > best_average:
                best, best_average = (name, label, items), average

        if best is None or len(best[2]) < self.config.min_bucket_posts:
            return None

        name, label, items = best
        return ContentPattern(
            id=f"textual_length_{name.lower()}",
            pattern_type=PatternType.TEXTUAL,
            name=f"{name} Caption Sweet Spot",
            description=f"{name} captions ({label}) perform best for your audience",
            frequency=len(items) / len(captioned),
            performance_impact=best_average,
            confidence=0.75,
            examples=[p.id for p in items[:self.config.examples]],
            recommendation=f"Aim for {label} in your captions for optimal engagement",
        )

    def _question_pattern(self, posts: Sequence[MediaPost]) -> Optional[ContentPattern]:
        """질문형 캡션의 댓글 효과"""
        with_questions = [p for p in posts if "?" in p.caption_text]
        without_questions = [p for p in posts if "?" not in p.caption_text]
        if not with_questions or not without_questions:
            return None

        question_comments = _average([p.comments_count for p in with_questions])
        other_comments = _average([p.comments_count for p in without_questions])
        if other_comments <= 0 or question_comments <= other_comments * self.config.question_comment_ratio:
            return None

        return ContentPattern(
            id="textual_questions",
            pattern_type=PatternType.TEXTUAL,
            name="Question-Driven Engagement",
            description="Posts with questions generate significantly more comments",
            frequency=len(with_questions) / len(posts),
            performance_impact=(question_comments - other_comments) / other_comments * 100,
            confidence=0.8,
            examples=[p.id for p in with_questions[:self.config.examples]],
            recommendation="Include thoughtful questions in 60-80% of your captions to boost comments",
        )

    def _hashtag_pattern(self, posts: Sequence[MediaPost]) -> Optional[ContentPattern]:
        """해시태그 사용 전략"""
        tag_counts: Counter = Counter()
        tagged_posts = 0
        total_tags = 0

        for post in posts:
            tags = HASHTAG_PATTERN.findall(post.caption_text)
            if tags:
                tagged_posts += 1
                total_tags += len(tags)
                tag_counts.update(tag.lower() for tag in tags)

        if tagged_posts < self.config.min_hashtag_posts:
            return None

        per_post = total_tags / tagged_posts
        if per_post < 5:
            recommendation = "Increase hashtag usage to 8-12 per post for better discoverability"
        elif per_post > 15:
            recommendation = "Reduce hashtag count to 8-12 for optimal engagement"
        else:
            recommendation = "Your hashtag usage is optimal - focus on researching trending tags in your niche"

        return ContentPattern(
            id="textual_hashtags",
            pattern_type=PatternType.TEXTUAL,
            name="Hashtag Strategy Pattern",
            description=f"You use an average of {per_post:.1f} hashtags per post",
            frequency=tagged_posts / len(posts),
            performance_impact=per_post * 10,
            confidence=0.6,
            examples=[tag for tag, _ in tag_counts.most_common(self.config.top_hashtags)],
            recommendation=recommendation,
        )

    # ============================================================
    # Temporal
    # ============================================================

    def _best_slot(self, posts: Sequence[MediaPost], key: Callable) -> Optional[Tuple[int, float, List[MediaPost]]]:
        """게시물 2개 이상인 슬롯 중 최고 평균 참여 (동률이면 먼저 등장한 슬롯)"""
        slots: Dict[int, List[MediaPost]] = {}
        for post in posts:
            if post.timestamp is None:
                continue
            slots.setdefault(key(post.timestamp.astimezone(self.tz)), []).append(post)

        best: Optional[Tuple[int, float, List[MediaPost]]] = None
        for slot, items in slots.items():
            if len(items) < self.config.min_slot_posts:
                continue
            average = _average([p.engagement for p in items])
            if best is None or average > best[1]:
                best = (slot, average, items)
        return best

    def _day_pattern(self, posts: Sequence[MediaPost]) -> Optional[ContentPattern]:
        """요일 패턴"""
        if len(posts) < self.config.min_temporal_posts:
            return None

        best = self._best_slot(posts, lambda local: local.weekday())
        if best is None:
            return None

        weekday, average, items = best
        day = DAY_NAMES[weekday]
        return ContentPattern(
            id=f"temporal_day_{day.lower()}",
            pattern_type=PatternType.TEMPORAL,
            name=f"{day} Power Pattern",
            description=f"{day} posts consistently outperform other days",
            frequency=len(items) / len(posts),
            performance_impact=average,
            confidence=0.7,
            examples=[p.id for p in items[:self.config.examples]],
            recommendation=f"Schedule your most important content for {day}s to maximize reach",
        )

    def _hour_pattern(self, posts: Sequence[MediaPost]) -> Optional[ContentPattern]:
        """시간대 패턴"""
        if len(posts) < self.config.min_temporal_posts:
            return None

        best = self._best_slot(posts, lambda local: local.hour)
        if best is None:
            return None

        hour, average, items = best
        label = _hour_label(hour)
        return ContentPattern(
            id=f"temporal_hour_{hour}",
            pattern_type=PatternType.TEMPORAL,
            name=f"Golden Hour: {label}",
            description=f"Posts at {label} achieve peak engagement",
            frequency=len(items) / len(posts),
            performance_impact=average,
            confidence=0.75,
            examples=[p.id for p in items[:self.config.examples]],
            recommendation=f"Post at {label} for maximum audience engagement",
        )

    # ============================================================
    # Engagement
    # ============================================================

    def _discussion_pattern(self, posts: Sequence[MediaPost]) -> Optional[ContentPattern]:
        """좋아요 대비 댓글 비율이 높은 게시물"""
        both = [p for p in posts if p.like_count > 0 and p.comments_count > 0]
        if len(both) < self.config.min_discussion_posts:
            return None

        ratios = [(p.like_count / p.comments_count, p) for p in both]
        average_ratio = _average([ratio for ratio, _ in ratios])
        chatty = [p for ratio, p in ratios if ratio < average_ratio * self.config.discussion_ratio_factor]
        if len(chatty) < 3:
            return None

        return ContentPattern(
            id="engagement_discussion",
            pattern_type=PatternType.ENGAGEMENT,
            name="Discussion Catalyst Content",
            description="Certain posts generate disproportionately high comment engagement",
            frequency=len(chatty) / len(posts),
            performance_impact=_average([p.engagement for p in chatty]),
            confidence=0.7,
            examples=[p.id for p in chatty[:self.config.examples]],
            recommendation="Create more conversation-starter content that encourages discussion",
        )

    def _saves_pattern(self, posts: Sequence[MediaPost]) -> Optional[ContentPattern]:
        """저장 많은 콘텐츠"""
        saved = [p for p in posts if p.saved > 0]
        if len(saved) < self.config.min_saved_posts:
            return None

        return ContentPattern(
            id="engagement_saves",
            pattern_type=PatternType.ENGAGEMENT,
            name="Save-Worthy Content Pattern",
            description="Your educational/inspirational content gets saved frequently",
            frequency=len(saved) / len(posts),
            performance_impact=_average([p.saved for p in saved]),
            confidence=0.6,
            examples=[p.id for p in saved[:self.config.examples]],
            recommendation="Create more educational carousels and inspirational quotes that provide value",
        )
