"""
Content Classifier - Production Grade v1.0
캡션 키워드 / 미디어 타입 기반 콘텐츠 분류

Features:
    - 교체 가능한 키워드 규칙 (순서 있는 (label, keywords) 목록)
    - 단어 경계 기반 대소문자 무시 매칭
    - 계정 니치 감지 (동점 시 먼저 선언된 규칙 우선)
    - 게시물별 형식 버킷 (carousel / video / reel / image)
    - 카테고리별 참여 통계 및 추천
    - YAML 규칙 파일 로딩 (현지화)
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union
import re
import logging

import yaml

from socialsage.core.errors import RuleConfigError
from socialsage.models.analysis import ContentCategory, ContentInsights, MediaBucket
from socialsage.models.instagram import MediaPost, MediaType
from socialsage.services.analysis.engagement import EngagementCalculator, safe_divide

logger = logging.getLogger(__name__)


# ============================================================
# Keyword Rules
# ============================================================

@dataclass(frozen=True)
class KeywordRule:
    """
    키워드 규칙

    각 키워드를 단어 경계로 감싼 정규식으로 매칭한다.
    ("art"는 "smart"에 매칭되지 않음)
    """
    label: str
    keywords: Tuple[str, ...]
    _patterns: Tuple[re.Pattern, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        keywords = tuple(kw.strip().lower() for kw in self.keywords if kw and kw.strip())
        object.__setattr__(self, "keywords", keywords)
        object.__setattr__(self, "_patterns", tuple(
            re.compile(rf"\b{re.escape(kw)}\b", re.IGNORECASE) for kw in keywords
        ))

    def score(self, text: str) -> int:
        """키워드별 매칭 횟수 합계"""
        if not text:
            return 0
        return sum(len(pattern.findall(text)) for pattern in self._patterns)

    def matches(self, text: str) -> bool:
        """하나라도 매칭되는지"""
        if not text:
            return False
        return any(pattern.search(text) for pattern in self._patterns)


RuleSet = Tuple[KeywordRule, ...]


NICHE_RULES: RuleSet = (
    KeywordRule("fitness", ("workout", "gym", "fitness", "training", "muscle", "cardio", "exercise", "health")),
    KeywordRule("business", ("entrepreneur", "startup", "business", "success", "growth", "money", "sales")),
    KeywordRule("lifestyle", ("life", "daily", "morning", "routine", "lifestyle", "mood", "vibes")),
    KeywordRule("food", ("food", "recipe", "cooking", "meal", "delicious", "taste", "chef")),
    KeywordRule("travel", ("travel", "adventure", "explore", "trip", "vacation", "journey")),
    KeywordRule("tech", ("tech", "code", "programming", "development", "software", "app")),
    KeywordRule("fashion", ("fashion", "style", "outfit", "wear", "clothes", "trend")),
    KeywordRule("beauty", ("beauty", "makeup", "skincare", "cosmetics", "glow")),
)

CATEGORY_RULES: RuleSet = (
    KeywordRule("Educational", ("tip", "tips", "how to", "tutorial", "learn", "guide", "lesson", "advice", "hack", "strategy")),
    KeywordRule("Personal/Lifestyle", ("my", "today", "morning", "coffee", "weekend", "family", "home", "personal", "life", "daily")),
    KeywordRule("Promotional", ("sale", "discount", "buy", "shop", "offer", "deal", "promo", "code", "link", "available")),
    KeywordRule("Behind the Scenes", ("behind", "process", "making", "setup", "backstage", "work", "studio", "creating")),
    KeywordRule("User Generated", ("repost", "feature", "customer", "community", "fan", "follower", "thanks", "shoutout")),
)


def load_keyword_rules(path: Union[str, Path]) -> RuleSet:
    """
    YAML 규칙 파일 로딩

    지원 형식:
        fitness: [workout, gym]          # 매핑 (선언 순서 유지)
        - {label: fitness, keywords: []} # 목록

    Raises:
        RuleConfigError: 파일 없음 / 파싱 실패 / 형식 오류
    """
    rules_path = Path(path)
    if not rules_path.is_file():
        raise RuleConfigError(f"Rules file not found: {rules_path}", details={"path": str(rules_path)})

    try:
        with open(rules_path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RuleConfigError(f"YAML parse error: {e}", details={"path": str(rules_path)}) from e
    except OSError as e:
        raise RuleConfigError(f"Cannot read rules file: {e}", details={"path": str(rules_path)}) from e

    if isinstance(raw, dict):
        entries = list(raw.items())
    elif isinstance(raw, list):
        entries = []
        for item in raw:
            if not isinstance(item, dict) or "label" not in item:
                raise RuleConfigError("Rule entries must be mappings with a 'label'", details={"entry": item})
            entries.append((item["label"], item.get("keywords", [])))
    else:
        raise RuleConfigError("Rules file must contain a mapping or a list", details={"path": str(rules_path)})

    rules = []
    for label, keywords in entries:
        if not isinstance(keywords, list) or not all(isinstance(kw, str) for kw in keywords):
            raise RuleConfigError(f"Keywords for '{label}' must be a list of strings")
        rules.append(KeywordRule(str(label), tuple(keywords)))

    logger.info(f"[ContentClassifier] Loaded {len(rules)} rules from {rules_path}")
    return tuple(rules)


# ============================================================
# Niche Classifier
# ============================================================

class NicheClassifier:
    """
    계정 니치 감지

    전체 캡션을 이어 붙여 규칙별 매칭 횟수를 세고 최고 점수를 고른다.
    """

    DEFAULT_NICHE = "general"

    def __init__(self, rules: Optional[Sequence[KeywordRule]] = None):
        self.rules: RuleSet = tuple(rules) if rules is not None else NICHE_RULES

    def scores(self, posts: Sequence[MediaPost]) -> Dict[str, int]:
        """규칙별 점수 (선언 순서)"""
        text = " ".join(post.caption_text for post in posts)
        return OrderedDict((rule.label, rule.score(text)) for rule in self.rules)

    def detect(self, posts: Sequence[MediaPost]) -> str:
        """
        니치 감지

        Returns:
            최고 점수 규칙의 label, 매칭이 없으면 "general"
        """
        best_label = self.DEFAULT_NICHE
        best_score = 0

        for label, score in self.scores(posts).items():
            # 동점이면 먼저 선언된 규칙 유지
            if score > best_score:
                best_score = score
                best_label = label

        logger.debug(f"[NicheClassifier] niche={best_label} (score={best_score})")
        return best_label


# ============================================================
# Media Type Classifier
# ============================================================

# "#reel" / "#reels" 해시태그
REEL_HASHTAG = re.compile(r"(?<![\w#])#reels?\b", re.IGNORECASE)


class MediaTypeClassifier:
    """게시물 형식 분류 (모든 게시물은 정확히 한 버킷에 속함)"""

    @staticmethod
    def classify(post: MediaPost) -> MediaBucket:
        """형식 버킷 결정"""
        if post.media_type == MediaType.CAROUSEL_ALBUM:
            return MediaBucket.CAROUSEL

        if post.media_type == MediaType.VIDEO:
            product_type = (post.media_product_type or "").upper()
            if product_type == "REELS" or REEL_HASHTAG.search(post.caption_text):
                return MediaBucket.REEL
            return MediaBucket.VIDEO

        return MediaBucket.IMAGE

    @classmethod
    def partition(cls, posts: Sequence[MediaPost]) -> Dict[MediaBucket, List[MediaPost]]:
        """버킷별 게시물 (원래 순서 유지)"""
        buckets: Dict[MediaBucket, List[MediaPost]] = {bucket: [] for bucket in MediaBucket}
        for post in posts:
            buckets[cls.classify(post)].append(post)
        return buckets

    @classmethod
    def bucket_counts(cls, posts: Sequence[MediaPost]) -> Dict[MediaBucket, int]:
        """버킷별 개수"""
        return {bucket: len(items) for bucket, items in cls.partition(posts).items()}

    @staticmethod
    def average_engagement_by_type(posts: Sequence[MediaPost]) -> Dict[MediaType, float]:
        """미디어 타입별 평균 참여 (존재하는 타입만)"""
        totals: Dict[MediaType, List[int]] = {}
        for post in posts:
            totals.setdefault(post.media_type, []).append(post.engagement)
        return {
            media_type: sum(values) / len(values)
            for media_type, values in totals.items()
        }


# ============================================================
# Content Categorizer
# ============================================================

MEDIA_CATEGORY_LABELS = OrderedDict([
    (MediaType.IMAGE, "Photo Posts"),
    (MediaType.VIDEO, "Video Content"),
    (MediaType.CAROUSEL_ALBUM, "Carousel Posts"),
])


class ContentCategorizer:
    """
    콘텐츠 카테고리 분석

    미디어 타입 카테고리는 배타적, 캡션 키워드 카테고리는 중복 허용
    """

    MAX_RECOMMENDATIONS = 4
    EXAMPLES_PER_CATEGORY = 3

    # 카테고리 비중 기준 (%)
    VIDEO_SHARE_TARGET = 20
    CAROUSEL_SHARE_TARGET = 15
    EDUCATIONAL_SHARE_TARGET = 25

    def __init__(self, rules: Optional[Sequence[KeywordRule]] = None):
        self.rules: RuleSet = tuple(rules) if rules is not None else CATEGORY_RULES

    def categorize(self, posts: Sequence[MediaPost]) -> "OrderedDict[str, List[MediaPost]]":
        """카테고리별 게시물"""
        groups: "OrderedDict[str, List[MediaPost]]" = OrderedDict(
            (label, []) for label in MEDIA_CATEGORY_LABELS.values()
        )
        for rule in self.rules:
            groups.setdefault(rule.label, [])

        for post in posts:
            groups[MEDIA_CATEGORY_LABELS[post.media_type]].append(post)

            caption = post.caption_text
            for rule in self.rules:
                if rule.matches(caption):
                    groups[rule.label].append(post)

        return groups

    def analyze(self, posts: Sequence[MediaPost], followers: int = 0) -> ContentInsights:
        """
        카테고리 분석

        Args:
            posts: 게시물 목록
            followers: 팔로워 수 (카테고리 참여율 계산용)

        Returns:
            ContentInsights
        """
        if not posts:
            return ContentInsights(recommendations=["Need more data to generate insights"])

        categories = [
            self._build_category(label, items, len(posts), followers)
            for label, items in self.categorize(posts).items()
            if items
        ]
        categories.sort(key=lambda c: c.avg_engagement, reverse=True)

        best = categories[0]
        worst = categories[-1]

        insights = ContentInsights(
            categories=categories,
            best_performing_category=best,
            underperforming_category=worst,
            recommendations=self._recommend(categories, best, worst),
        )

        logger.debug(
            f"[ContentCategorizer] {len(categories)} categories, "
            f"best={best.category}, worst={worst.category}"
        )
        return insights

    def _build_category(
        self,
        label: str,
        items: List[MediaPost],
        total_posts: int,
        followers: int
    ) -> ContentCategory:
        """카테고리 통계"""
        total_likes = sum(post.like_count for post in items)
        total_comments = sum(post.comments_count for post in items)
        avg_engagement = (total_likes + total_comments) / len(items)
        ranked = EngagementCalculator.top_posts(items, len(items))

        return ContentCategory(
            category=label,
            count=len(items),
            percentage=safe_divide(len(items), total_posts) * 100,
            avg_likes=total_likes / len(items),
            avg_comments=total_comments / len(items),
            avg_engagement=avg_engagement,
            engagement_rate=EngagementCalculator.engagement_rate(avg_engagement, followers),
            top_post=ranked[0],
            examples=ranked[:self.EXAMPLES_PER_CATEGORY],
        )

    def _recommend(
        self,
        categories: List[ContentCategory],
        best: ContentCategory,
        worst: ContentCategory
    ) -> List[str]:
        """카테고리 성과 기반 추천"""
        recommendations = [
            f"Your {best.category.lower()} content performs best with "
            f"{best.avg_engagement:.0f} avg engagement. Create more of this type."
        ]

        if worst is not best and worst.avg_engagement < best.avg_engagement * 0.5:
            recommendations.append(
                f"Consider reducing {worst.category.lower()} content or improving its quality "
                f"(currently {worst.avg_engagement:.0f} avg engagement)."
            )

        by_label = {c.category: c for c in categories}
        video = by_label.get(MEDIA_CATEGORY_LABELS[MediaType.VIDEO])
        carousel = by_label.get(MEDIA_CATEGORY_LABELS[MediaType.CAROUSEL_ALBUM])
        educational = by_label.get("Educational")

        if not video or video.percentage < self.VIDEO_SHARE_TARGET:
            recommendations.append(
                "Video content typically drives 2-3x higher engagement. Consider creating more video posts."
            )
        if not carousel or carousel.percentage < self.CAROUSEL_SHARE_TARGET:
            recommendations.append(
                "Carousel posts increase time spent viewing content. Try creating educational slide series."
            )
        if not educational or educational.percentage < self.EDUCATIONAL_SHARE_TARGET:
            recommendations.append(
                "Educational content gets saved and shared more often. Share tips and tutorials in your niche."
            )

        return recommendations[:self.MAX_RECOMMENDATIONS]
