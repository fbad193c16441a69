"""
Social Sage Insight Core - Core Package
코어 레이어: 설정, 에러, 리포트 파이프라인

Usage:
    from socialsage.core.pipeline import ReportPipeline

    pipeline = ReportPipeline()
    report = pipeline.run(raw_package)

파이프라인은 모델을 import하므로 여기서 다시 내보내지 않는다.
"""

# Settings
from socialsage.core.config import settings, configure_logging, Settings

# Errors
from socialsage.core.errors import (
    ErrorType,
    SocialSageError,
    InputError,
    RuleConfigError,
)

__all__ = [
    # Settings
    "settings",
    "configure_logging",
    "Settings",
    # Errors
    "ErrorType",
    "SocialSageError",
    "InputError",
    "RuleConfigError",
]
