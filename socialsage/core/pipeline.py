"""
Report Pipeline - Production Grade v1.0
데이터 패키지 -> 인사이트 리포트

Features:
    - 분류 -> 패턴 -> 참여 -> 업적 -> 생성기 순차 실행
    - 단계별 소요 시간 추적 (PipelineTrace)
    - 설정 기반 컴포넌트 구성 (규칙 파일, 타임존, 팁 선택)
    - 저장된 업적 상태와 병합 (선택)

파이프라인 인스턴스는 호출 간 상태를 공유하지 않는다.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union
import time
import logging

from socialsage.core.config import Settings, settings as default_settings
from socialsage.generators.insight import InsightConfig, InsightGenerator
from socialsage.generators.notification import NotificationConfig, NotificationEngine, resolve_timezone
from socialsage.generators.weekly_performance import (
    TipSelector,
    WeeklyPerformanceCalculator,
    build_tip_selector,
)
from socialsage.models.achievement import Achievement
from socialsage.models.instagram import InstagramDataPackage
from socialsage.models.report import InsightReport
from socialsage.services.achievements.engine import (
    AchievementConfig,
    AchievementEngine,
    calculate_user_stats,
    merge_unlock_state,
)
from socialsage.services.analysis.classifier import (
    ContentCategorizer,
    MediaTypeClassifier,
    NicheClassifier,
    load_keyword_rules,
)
from socialsage.services.analysis.content_patterns import ContentPatternAnalyzer
from socialsage.services.analysis.engagement import EngagementCalculator
from socialsage.services.analysis.growth import calculate_growth_trends
from socialsage.services.analysis.posting_patterns import PostingPatternAnalyzer
from socialsage.services.analysis.sentiment import SentimentAnalyzer
from socialsage.services.analysis.trends import TrendAnalyzer

logger = logging.getLogger(__name__)

T = TypeVar("T")

PackageInput = Union[InstagramDataPackage, Mapping[str, Any]]


# ============================================================
# Enums
# ============================================================

class PipelineStage(str, Enum):
    """파이프라인 단계"""
    INIT = "init"
    CLASSIFICATION = "classification"
    PATTERNS = "patterns"
    ENGAGEMENT = "engagement"
    ACHIEVEMENTS = "achievements"
    GENERATION = "generation"
    COMPLETED = "completed"
    ERROR = "error"


# ============================================================
# Pipeline Metrics
# ============================================================

@dataclass
class StepMetrics:
    """단계별 메트릭"""
    step_name: str
    start_time: float = field(default_factory=time.perf_counter)
    end_time: Optional[float] = None
    success: bool = True
    error: Optional[str] = None

    @property
    def duration_ms(self) -> float:
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return (end - self.start_time) * 1000

    def complete(self, success: bool = True, error: Optional[str] = None):
        """단계 완료"""
        self.end_time = time.perf_counter()
        self.success = success
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        return {
            'step_name': self.step_name,
            'duration_ms': round(self.duration_ms, 2),
            'success': self.success,
            'error': self.error,
        }


@dataclass
class PipelineTrace:
    """파이프라인 실행 추적"""
    username: str
    stages: List[StepMetrics] = field(default_factory=list)
    current_stage: PipelineStage = PipelineStage.INIT

    def add_stage(self, stage: PipelineStage) -> StepMetrics:
        """단계 추가"""
        self.current_stage = stage
        metrics = StepMetrics(step_name=stage.value)
        self.stages.append(metrics)
        return metrics

    @property
    def total_duration_ms(self) -> float:
        return sum(s.duration_ms for s in self.stages)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'username': self.username,
            'total_duration_ms': round(self.total_duration_ms, 2),
            'current_stage': self.current_stage.value,
            'stages': [s.to_dict() for s in self.stages],
        }


# ============================================================
# Report Pipeline
# ============================================================

class ReportPipeline:
    """
    리포트 파이프라인

    Example:
        >>> pipeline = ReportPipeline()
        >>> report = pipeline.run(raw_package, now=now)
        >>> report.model_dump(mode="json")
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        tip_selector: Optional[TipSelector] = None
    ):
        self.settings = settings or default_settings
        self.tz = resolve_timezone(None, self.settings.DEFAULT_TIMEZONE)

        niche_rules = load_keyword_rules(self.settings.NICHE_RULES_PATH) if self.settings.NICHE_RULES_PATH else None
        category_rules = load_keyword_rules(self.settings.CATEGORY_RULES_PATH) if self.settings.CATEGORY_RULES_PATH else None

        self.niche_classifier = NicheClassifier(niche_rules)
        self.categorizer = ContentCategorizer(category_rules)
        self.posting_analyzer = PostingPatternAnalyzer(self.tz)
        self.pattern_analyzer = ContentPatternAnalyzer(tz=self.tz)
        self.sentiment_analyzer = SentimentAnalyzer()
        self.trend_analyzer = TrendAnalyzer(tz=self.tz)
        self.achievement_engine = AchievementEngine(AchievementConfig.from_settings(self.settings))
        self.insight_generator = InsightGenerator(InsightConfig.from_settings(self.settings), tz=self.tz)
        self.notification_engine = NotificationEngine(NotificationConfig.from_settings(self.settings))
        self.weekly_calculator = WeeklyPerformanceCalculator(
            tip_selector or build_tip_selector(self.settings.TIP_SELECTION, self.settings.TIP_RANDOM_SEED)
        )

        logger.info(
            f"[ReportPipeline] Initialized (tz={self.settings.DEFAULT_TIMEZONE}, "
            f"tips={type(self.weekly_calculator.tip_selector).__name__})"
        )

    def run(
        self,
        package: PackageInput,
        previous: Optional[PackageInput] = None,
        now: Optional[datetime] = None,
        previous_achievements: Optional[Sequence[Achievement]] = None
    ) -> InsightReport:
        """
        리포트 생성

        Args:
            package: 현재 데이터 패키지 (dict 허용)
            previous: 이전 기간 패키지 (주간 비교용)
            now: 기준 시각
            previous_achievements: 저장된 업적 상태 (있으면 unlocked_at 병합)

        Returns:
            InsightReport

        Raises:
            InputError: 패키지가 매핑이 아닌 경우 (타임존 오류는 생성 시점)
        """
        report, _ = self.run_with_trace(package, previous, now, previous_achievements)
        return report

    def run_with_trace(
        self,
        package: PackageInput,
        previous: Optional[PackageInput] = None,
        now: Optional[datetime] = None,
        previous_achievements: Optional[Sequence[Achievement]] = None
    ) -> Tuple[InsightReport, PipelineTrace]:
        """리포트 + 실행 추적"""
        now = now or datetime.now(timezone.utc)
        current = InstagramDataPackage.from_raw(package)
        prior = InstagramDataPackage.from_raw(previous) if previous is not None else None

        trace = PipelineTrace(username=current.profile.username)
        logger.info(f"[ReportPipeline] Running for {current.summary()}")

        posts = current.media
        profile = current.profile

        # 1. 분류
        niche, buckets, post_buckets, content = self._stage(
            trace, PipelineStage.CLASSIFICATION,
            lambda: (
                self.niche_classifier.detect(posts),
                MediaTypeClassifier.bucket_counts(posts),
                {post.id: MediaTypeClassifier.classify(post) for post in posts if post.id},
                self.categorizer.analyze(posts, profile.followers_count),
            ),
        )

        # 2. 패턴
        patterns, optimal, consistency, content_patterns, sentiment = self._stage(
            trace, PipelineStage.PATTERNS,
            lambda: (
                self.posting_analyzer.analyze(posts),
                self.posting_analyzer.optimal_slot(posts),
                self.posting_analyzer.posting_consistency(posts),
                self.pattern_analyzer.analyze(posts),
                self.sentiment_analyzer.summarize_captions(posts),
            ),
        )

        # 3. 참여 / 성장 / 추세
        engagement, growth, trends = self._stage(
            trace, PipelineStage.ENGAGEMENT,
            lambda: (
                EngagementCalculator.summarize(profile, posts, self.settings.TOP_POSTS_LIMIT),
                calculate_growth_trends(current.history),
                self.trend_analyzer.analyze(profile, posts),
            ),
        )

        # 4. 업적
        achievements = self._stage(
            trace, PipelineStage.ACHIEVEMENTS,
            lambda: self.achievement_engine.evaluate(profile, posts, current.history, now),
        )
        if previous_achievements is not None:
            achievements = merge_unlock_state(achievements, previous_achievements, now)

        # 5. 텍스트 생성
        wins, insights, notifications, weekly = self._stage(
            trace, PipelineStage.GENERATION,
            lambda: (
                self.insight_generator.generate_weekly_wins(current, now),
                self.insight_generator.generate_smart_insights(current, now),
                self.notification_engine.generate(current, now, self.tz),
                self.weekly_calculator.calculate(current, prior, now),
            ),
        )

        trace.current_stage = PipelineStage.COMPLETED

        report = InsightReport(
            generated_at=now,
            profile=profile,
            niche=niche,
            media_buckets=buckets,
            post_buckets=post_buckets,
            content=content,
            posting_patterns=patterns,
            optimal_time=optimal,
            posting_consistency=consistency,
            engagement=engagement,
            growth=growth,
            trends=trends,
            content_patterns=content_patterns,
            sentiment=sentiment,
            achievements=achievements,
            user_stats=calculate_user_stats(achievements),
            weekly_wins=wins,
            smart_insights=insights,
            notifications=notifications,
            weekly_performance=weekly,
        )

        logger.info(
            f"[ReportPipeline] Completed in {trace.total_duration_ms:.1f}ms "
            f"(niche={niche}, unlocked={len(report.unlocked_achievements)}, "
            f"notifications={len(notifications)})"
        )
        return report, trace

    def _stage(self, trace: PipelineTrace, stage: PipelineStage, step: Callable[[], T]) -> T:
        """단계 실행 + 메트릭 기록 (예외는 그대로 전파)"""
        metrics = trace.add_stage(stage)
        try:
            result = step()
        except Exception as e:
            metrics.complete(success=False, error=str(e))
            trace.current_stage = PipelineStage.ERROR
            logger.error(f"[ReportPipeline] Stage {stage.value} failed: {e}")
            raise

        metrics.complete()
        logger.debug(f"[ReportPipeline] Stage {stage.value} done in {metrics.duration_ms:.1f}ms")
        return result
