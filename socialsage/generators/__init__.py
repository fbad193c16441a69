"""
Generators - Production Grade v1.0
분석 결과 기반 텍스트 엔티티 생성

모듈:
- insight: 주간 성과 / 스마트 인사이트
- notification: 실행 가능한 알림
- weekly_performance: 기간 비교 + 스마트 팁
"""

from socialsage.generators.insight import (
    InsightGenerator,
    InsightConfig,
)
from socialsage.generators.notification import (
    NotificationEngine,
    NotificationConfig,
    MilestoneStatus,
    check_milestone,
    next_occurrence,
)
from socialsage.generators.weekly_performance import (
    WeeklyPerformanceCalculator,
    TipSelector,
    RotatingTipSelector,
    RandomTipSelector,
    SMART_TIPS,
    build_tip_selector,
)

__all__ = [
    # Insight
    "InsightGenerator",
    "InsightConfig",
    # Notification
    "NotificationEngine",
    "NotificationConfig",
    "MilestoneStatus",
    "check_milestone",
    "next_occurrence",
    # Weekly Performance
    "WeeklyPerformanceCalculator",
    "TipSelector",
    "RotatingTipSelector",
    "RandomTipSelector",
    "SMART_TIPS",
    "build_tip_selector",
]
