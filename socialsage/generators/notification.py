"""
Notification Engine - Production Grade v1.0
실행 가능한 알림 생성

Features:
    - 최적 게시 시점 알림 (다음 발생 시각 예약)
    - 콘텐츠 기회 감지 (비디오 우세 / 좋은 게시 요일)
    - 팔로워 마일스톤 근접 / 달성 감지
    - 낮은 참여율 리마인더
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

from socialsage.core.errors import InputError
from socialsage.generators.insight import stamp_millis
from socialsage.models.analysis import OptimalPostingTime
from socialsage.models.insight import NotificationType, Priority, SmartNotification
from socialsage.models.instagram import InstagramDataPackage, MediaType
from socialsage.services.analysis.classifier import MediaTypeClassifier
from socialsage.services.analysis.posting_patterns import DAY_NAMES, PostingPatternAnalyzer

logger = logging.getLogger(__name__)

# generate()의 timezone 인자가 모듈 이름을 가림
_UTC = timezone.utc


FOLLOWER_MILESTONE_LADDER: Tuple[int, ...] = (100, 500, 1000, 5000, 10000, 50000, 100000)

# 월, 화, 목
GOOD_POSTING_WEEKDAYS = (0, 1, 3)


@dataclass
class NotificationConfig:
    """알림 생성 설정"""
    default_timezone: str = "America/Los_Angeles"
    milestone_ladder: Tuple[int, ...] = FOLLOWER_MILESTONE_LADDER
    milestone_window: float = 0.05
    video_outperform_ratio: float = 1.3
    engagement_reminder_rate: float = 3.0
    good_posting_weekdays: Tuple[int, ...] = GOOD_POSTING_WEEKDAYS

    @classmethod
    def from_settings(cls, settings) -> "NotificationConfig":
        return cls(
            default_timezone=settings.DEFAULT_TIMEZONE,
            milestone_window=settings.MILESTONE_WINDOW,
            video_outperform_ratio=settings.VIDEO_OUTPERFORM_RATIO,
            engagement_reminder_rate=settings.ENGAGEMENT_REMINDER_RATE,
        )


@dataclass
class MilestoneStatus:
    """마일스톤 근접 상태"""
    kind: str  # follower_milestone_close, follower_milestone_reached
    milestone: int
    current: int
    title: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "milestone": self.milestone,
            "current": self.current,
            "title": self.title,
            "message": self.message,
        }


def check_milestone(
    followers: int,
    ladder: Sequence[int] = FOLLOWER_MILESTONE_LADDER,
    window: float = 0.05
) -> Optional[MilestoneStatus]:
    """
    마일스톤 근접 판단

    근접: (1 - window)·m <= f < m
    달성: m <= f < (1 + window)·m
    두 조건은 같은 임계값에서 동시에 성립하지 않는다. 첫 매칭만 반환.
    """
    if followers <= 0:
        return None

    for milestone in ladder:
        if milestone * (1 - window) <= followers < milestone:
            return MilestoneStatus(
                kind="follower_milestone_close",
                milestone=milestone,
                current=followers,
                title=f"Almost at {milestone:,} followers!",
                message=f"You're only {milestone - followers} followers away from {milestone:,}!",
            )

        if milestone <= followers < milestone * (1 + window):
            return MilestoneStatus(
                kind="follower_milestone_reached",
                milestone=milestone,
                current=followers,
                title=f"{milestone:,} followers achieved!",
                message=(
                    f"Congratulations! You've reached {milestone:,} followers. "
                    f"Keep up the great work!"
                ),
            )

    return None


def next_occurrence(slot: OptimalPostingTime, now: datetime, tz: tzinfo) -> datetime:
    """
    슬롯의 다음 발생 시각

    오늘이 같은 요일이면 다음 주로 넘긴다.
    """
    local_now = now.astimezone(tz)
    days_ahead = (slot.weekday - local_now.weekday()) % 7 or 7
    target = local_now + timedelta(days=days_ahead)
    return target.replace(hour=slot.hour, minute=0, second=0, microsecond=0)


def resolve_timezone(value: Union[str, tzinfo, None], default: str) -> tzinfo:
    """
    타임존 이름 또는 tzinfo

    Raises:
        InputError: 알 수 없는 타임존 이름
    """
    if isinstance(value, tzinfo):
        return value
    name = value or default
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InputError(f"Unknown timezone: {name}", details={"timezone": name}) from e


class NotificationEngine:
    """
    알림 엔진

    Example:
        >>> engine = NotificationEngine()
        >>> notifications = engine.generate(package, now=now, timezone="Asia/Seoul")
    """

    def __init__(self, config: Optional[NotificationConfig] = None):
        self.config = config or NotificationConfig()

    def generate(
        self,
        package: InstagramDataPackage,
        now: Optional[datetime] = None,
        timezone: Union[str, tzinfo, None] = None
    ) -> List[SmartNotification]:
        """
        알림 생성

        Args:
            package: 데이터 패키지
            now: 기준 시각
            timezone: 사용자 타임존 (이름 또는 tzinfo)

        Returns:
            SmartNotification 목록
        """
        now = now or datetime.now(_UTC)
        tz = resolve_timezone(timezone, self.config.default_timezone)
        stamp = stamp_millis(now)

        notifications: List[SmartNotification] = []

        slot = self.optimal_time(package, tz)
        notifications.append(SmartNotification(
            id=f"notification_timing_{stamp}",
            type=NotificationType.TIMING,
            title="⏰ Perfect time to post!",
            body="Your audience is most active right now. Post something to maximize engagement!",
            action_url="/analysis/new",
            action_label="Create Post",
            priority=Priority.HIGH,
            scheduled_for=next_occurrence(slot, now, tz),
            data={"optimal_time": slot.model_dump(mode="json")},
        ))

        opportunity = self.content_opportunity(package, now, tz)
        if opportunity:
            notifications.append(SmartNotification(
                id=f"notification_opportunity_{stamp}",
                type=NotificationType.OPPORTUNITY,
                title="🔥 Trending opportunity detected!",
                body=opportunity["message"],
                action_url="/dashboard",
                action_label="See Details",
                priority=Priority.MEDIUM,
                data=opportunity,
            ))

        milestone = check_milestone(
            package.profile.followers_count,
            self.config.milestone_ladder,
            self.config.milestone_window,
        )
        if milestone:
            notifications.append(SmartNotification(
                id=f"notification_milestone_{stamp}",
                type=NotificationType.MILESTONE,
                title=f"🎉 {milestone.title}",
                body=milestone.message,
                action_url="/dashboard",
                action_label="Celebrate",
                priority=Priority.HIGH,
                data=milestone.to_dict(),
            ))

        if package.profile.engagement_rate < self.config.engagement_reminder_rate:
            notifications.append(SmartNotification(
                id=f"notification_reminder_{stamp}",
                type=NotificationType.REMINDER,
                title="💬 Time to engage with your community",
                body="Respond to comments and engage with your followers to boost your reach",
                action_url="https://instagram.com",
                action_label="Open Instagram",
                priority=Priority.LOW,
                data={"reminder_type": "engagement"},
            ))

        logger.info(
            f"[NotificationEngine] Generated {len(notifications)} notifications "
            f"(tz={getattr(tz, 'key', tz)})"
        )
        return notifications

    def optimal_time(self, package: InstagramDataPackage, tz: tzinfo) -> OptimalPostingTime:
        """최적 게시 시점 (미디어가 없으면 기본 슬롯, confidence 0.5)"""
        slot = PostingPatternAnalyzer(tz).optimal_slot(package.media)
        if not package.has_media:
            slot = slot.model_copy(update={"confidence": 0.5})
        return slot

    def content_opportunity(
        self,
        package: InstagramDataPackage,
        now: datetime,
        tz: tzinfo
    ) -> Optional[Dict[str, Any]]:
        """콘텐츠 기회 (비디오 우세 -> 좋은 게시 요일 순)"""
        performance = MediaTypeClassifier.average_engagement_by_type(package.media)
        video = performance.get(MediaType.VIDEO)
        image = performance.get(MediaType.IMAGE)

        if video is not None and image is not None and video > image * self.config.video_outperform_ratio:
            return {
                "type": "video_performs_better",
                "message": "Your video content gets 30% more engagement. Consider posting a Reel today!",
                "confidence": 0.8,
            }

        weekday = now.astimezone(tz).weekday()
        if weekday in self.config.good_posting_weekdays:
            return {
                "type": "good_posting_day",
                "message": f"{DAY_NAMES[weekday]} is typically a high-engagement day for your audience",
                "confidence": 0.6,
            }

        return None
