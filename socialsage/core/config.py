"""
전역 설정 관리
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import logging


class Settings(BaseSettings):
    """인사이트 코어 전역 설정"""

    # ============================================
    # Application Settings
    # ============================================
    APP_NAME: str = "Social Sage Insight Core"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # ============================================
    # Time Settings
    # ============================================
    DEFAULT_TIMEZONE: str = "America/Los_Angeles"
    RECENT_WINDOW_DAYS: int = 7
    CONSISTENCY_WINDOW_DAYS: int = 30

    # ============================================
    # Engagement Bands (%)
    # ============================================
    ENGAGEMENT_EXCELLENT_RATE: float = 6.0
    ENGAGEMENT_GOOD_RATE: float = 3.0
    ENGAGEMENT_REMINDER_RATE: float = 3.0

    # ============================================
    # Content Comparison
    # ============================================
    VIDEO_OUTPERFORM_RATIO: float = 1.3
    TOP_POSTS_LIMIT: int = 5

    # ============================================
    # Milestone Proximity
    # ============================================
    MILESTONE_WINDOW: float = 0.05

    # ============================================
    # Classifier Rules (YAML, optional)
    # ============================================
    NICHE_RULES_PATH: Optional[str] = None
    CATEGORY_RULES_PATH: Optional[str] = None

    # ============================================
    # Smart Tip Selection
    # ============================================
    TIP_SELECTION: str = "rotate"  # rotate, random
    TIP_RANDOM_SEED: Optional[int] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow",  # 추가 환경변수 허용
    )


def configure_logging(level: Optional[str] = None) -> None:
    """로깅 설정 (CLI/호출 측에서 한 번 실행)"""
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


# 싱글톤 인스턴스
settings = Settings()
