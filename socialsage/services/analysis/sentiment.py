"""
Caption Sentiment Analysis - Production Grade v1.0
캡션 감정 분석 서비스

Features:
- 영어 키워드 기반 빠른 분석 (단어 단위 매칭)
- 다중 레이블 지원 (positive, negative, neutral, mixed)
- 극성 점수 (-1 ~ 1)
- 최근/과거 게시물 비교 감정 추세
- 배치 처리 지원
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Dict, Any, Optional, Sequence, Tuple
import re
import logging

from socialsage.models.analysis import CaptionSentiment
from socialsage.models.instagram import MediaPost

logger = logging.getLogger(__name__)

_WORD_PATTERN = re.compile(r"[a-z']+")


# ============================================================
# Enums and Data Classes
# ============================================================

class SentimentLabel(str, Enum):
    """감정 레이블"""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    MIXED = "mixed"


class SentimentTrend(str, Enum):
    """감정 추세"""
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


@dataclass
class SentimentScore:
    """개별 감정 점수"""
    positive: float = 0.0
    negative: float = 0.0
    neutral: float = 0.0

    def dominant(self) -> SentimentLabel:
        """지배적인 감정 반환"""
        scores = {
            SentimentLabel.POSITIVE: self.positive,
            SentimentLabel.NEGATIVE: self.negative,
            SentimentLabel.NEUTRAL: self.neutral,
        }

        # 혼합 감정 감지 (positive와 negative가 모두 높음)
        if self.positive > 0.3 and self.negative > 0.3:
            return SentimentLabel.MIXED

        return max(scores, key=scores.get)

    def confidence(self) -> float:
        """확신도 (가장 높은 점수)"""
        return max(self.positive, self.negative, self.neutral)


@dataclass
class SentimentResult:
    """감정 분석 결과"""
    label: SentimentLabel
    score: SentimentScore
    confidence: float
    polarity: float = 0.0  # -1 ~ 1
    keywords_found: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            "label": self.label.value,
            "score": {
                "positive": round(self.score.positive, 3),
                "negative": round(self.score.negative, 3),
                "neutral": round(self.score.neutral, 3),
            },
            "confidence": round(self.confidence, 3),
            "polarity": round(self.polarity, 3),
            "keywords_found": self.keywords_found,
        }


@dataclass
class SentimentConfig:
    """감정 분석 설정"""
    # 극성 임계값 (전체 레이블)
    polarity_threshold: float = 0.2

    # 추세 판단 (최근 절반 vs 과거 절반)
    trend_threshold: float = 0.1
    min_trend_posts: int = 6

    # 상위 단어 수
    top_words: int = 5

    # 배치 설정
    batch_size: int = 10


# ============================================================
# Sentiment Analyzer
# ============================================================

class SentimentAnalyzer:
    """
    감정 분석기

    캡션 텍스트를 단어로 나눠 감정 키워드를 센다.
    """

    POSITIVE_KEYWORDS = frozenset([
        "amazing", "great", "love", "awesome", "wonderful", "fantastic",
        "excellent", "perfect", "beautiful", "happy", "excited", "grateful",
        "blessed", "incredible", "outstanding", "best", "good", "nice",
        "enjoy", "thanks", "thank", "proud", "fun", "inspired",
    ])

    NEGATIVE_KEYWORDS = frozenset([
        "bad", "terrible", "awful", "hate", "horrible", "disgusting",
        "annoying", "frustrated", "disappointed", "sad", "angry", "stressed",
        "worried", "difficult", "worst", "tired", "upset", "problem",
        "broken", "waste", "fail", "failed",
    ])

    def __init__(self, config: Optional[SentimentConfig] = None):
        """
        감정 분석기 초기화

        Args:
            config: 분석 설정
        """
        self.config = config or SentimentConfig()

    def _count_keywords(self, text: str) -> Tuple[Counter, Counter]:
        """긍정/부정 키워드 출현 횟수 (첫 등장 순서 유지)"""
        positive: Counter = Counter()
        negative: Counter = Counter()
        for word in _WORD_PATTERN.findall(text.lower()):
            if word in self.POSITIVE_KEYWORDS:
                positive[word] += 1
            elif word in self.NEGATIVE_KEYWORDS:
                negative[word] += 1
        return positive, negative

    @staticmethod
    def _polarity(positive_count: int, negative_count: int) -> float:
        total = positive_count + negative_count
        if total == 0:
            return 0.0
        return (positive_count - negative_count) / total

    def analyze(self, text: str) -> SentimentResult:
        """
        단일 텍스트 감정 분석

        Args:
            text: 분석할 텍스트

        Returns:
            SentimentResult: 감정 분석 결과
        """
        if not text or not text.strip():
            return SentimentResult(
                label=SentimentLabel.NEUTRAL,
                score=SentimentScore(neutral=1.0),
                confidence=1.0,
            )

        positive, negative = self._count_keywords(text)
        pos_count = sum(positive.values())
        neg_count = sum(negative.values())
        total = pos_count + neg_count + 1  # +1 for smoothing

        positive_score = pos_count / total
        negative_score = neg_count / total
        score = SentimentScore(
            positive=positive_score,
            negative=negative_score,
            neutral=max(0.0, 1.0 - positive_score - negative_score),
        )

        # 키워드 없으면 낮은 확신도
        confidence = score.confidence() if (pos_count or neg_count) else 0.5

        return SentimentResult(
            label=score.dominant(),
            score=score,
            confidence=confidence,
            polarity=self._polarity(pos_count, neg_count),
            keywords_found=list(positive) + list(negative),
        )

    def analyze_batch(self, texts: List[str]) -> List[SentimentResult]:
        """
        배치 감정 분석

        Args:
            texts: 분석할 텍스트 리스트

        Returns:
            List[SentimentResult]: 감정 분석 결과 리스트
        """
        results = []

        for i in range(0, len(texts), self.config.batch_size):
            batch = texts[i:i + self.config.batch_size]
            results.extend(self.analyze(text) for text in batch)

        return results

    def text_polarity(self, text: str) -> float:
        """텍스트 극성 (-1 ~ 1)"""
        positive, negative = self._count_keywords(text)
        return self._polarity(sum(positive.values()), sum(negative.values()))

    def summarize_captions(self, posts: Sequence[MediaPost]) -> CaptionSentiment:
        """
        캡션 감정 요약

        Args:
            posts: 게시물 목록

        Returns:
            CaptionSentiment (게시물이 없으면 neutral 기본값)
        """
        captions = [post.caption_text for post in posts if post.caption_text]
        if not captions:
            return CaptionSentiment()

        positive, negative = self._count_keywords(" ".join(captions))
        polarity = self._polarity(sum(positive.values()), sum(negative.values()))

        if polarity > self.config.polarity_threshold:
            overall = SentimentLabel.POSITIVE
        elif polarity < -self.config.polarity_threshold:
            overall = SentimentLabel.NEGATIVE
        else:
            overall = SentimentLabel.NEUTRAL

        distribution = Counter(result.label.value for result in self.analyze_batch(captions))

        summary = CaptionSentiment(
            overall_sentiment=overall.value,
            sentiment_score=polarity,
            sentiment_trend=self._trend(posts).value,
            top_positive_words=[word for word, _ in positive.most_common(self.config.top_words)],
            top_negative_words=[word for word, _ in negative.most_common(self.config.top_words)],
            analyzed_captions=len(captions),
            metadata={"distribution": dict(distribution)},
        )

        logger.debug(
            f"[SentimentAnalyzer] captions={len(captions)}, "
            f"overall={summary.overall_sentiment}, trend={summary.sentiment_trend}"
        )
        return summary

    # ============================================================
    # Private Methods
    # ============================================================

    def _trend(self, posts: Sequence[MediaPost]) -> SentimentTrend:
        """최근 절반과 과거 절반의 극성 비교"""
        if len(posts) < self.config.min_trend_posts:
            return SentimentTrend.STABLE

        # 최신순, 타임스탬프 없는 게시물은 뒤로
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        ordered = sorted(posts, key=lambda post: post.timestamp or oldest, reverse=True)

        half = len(ordered) // 2
        recent = self.text_polarity(" ".join(p.caption_text for p in ordered[:half]))
        older = self.text_polarity(" ".join(p.caption_text for p in ordered[half:]))

        if recent > older + self.config.trend_threshold:
            return SentimentTrend.IMPROVING
        if recent < older - self.config.trend_threshold:
            return SentimentTrend.DECLINING
        return SentimentTrend.STABLE
