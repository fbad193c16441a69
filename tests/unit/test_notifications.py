"""
Unit Tests for Notification Engine
마일스톤 근접 / 최적 시간 / 리마인더 알림 테스트

Run: pytest tests/unit/test_notifications.py -v
"""

import pytest
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from socialsage.core.errors import InputError
from socialsage.generators.notification import (
    NotificationConfig,
    NotificationEngine,
    check_milestone,
    next_occurrence,
    resolve_timezone,
)
from socialsage.models.analysis import OptimalPostingTime
from socialsage.models.insight import NotificationType, Priority


@pytest.fixture
def engine():
    return NotificationEngine(NotificationConfig(default_timezone="UTC"))


class TestMilestoneProximity:
    """마일스톤 근접 판단 테스트"""

    def test_approaching(self):
        """950 -> 1000 근접"""
        status = check_milestone(950)

        assert status.kind == "follower_milestone_close"
        assert status.milestone == 1000
        assert status.message == "You're only 50 followers away from 1,000!"

    def test_just_reached(self):
        """1000 -> 달성"""
        status = check_milestone(1000)

        assert status.kind == "follower_milestone_reached"
        assert status.milestone == 1000
        assert status.to_dict()["type"] == "follower_milestone_reached"

    @pytest.mark.parametrize("followers", [0, 1050, 700, 3000])
    def test_outside_window(self, followers):
        """5% 범위 밖 -> 없음"""
        assert check_milestone(followers) is None

    @pytest.mark.parametrize("followers", [94, 95, 99, 100, 104, 105, 4750, 5200, 99999, 100000])
    def test_never_both(self, followers):
        """같은 임계값에서 근접과 달성은 동시에 성립하지 않음"""
        status = check_milestone(followers)
        if status is None:
            return
        if status.kind == "follower_milestone_close":
            assert followers < status.milestone
        else:
            assert followers >= status.milestone

    def test_custom_window(self):
        """윈도우 조정"""
        assert check_milestone(900, window=0.1).milestone == 1000
        assert check_milestone(900, window=0.05) is None


class TestScheduling:
    """다음 발생 시각 테스트"""

    def test_next_occurrence(self, now):
        """수요일 기준 다음 화요일 19시"""
        slot = OptimalPostingTime(day="Tuesday", weekday=1, hour=19)
        scheduled = next_occurrence(slot, now, timezone.utc)

        assert scheduled == datetime(2024, 1, 16, 19, 0, tzinfo=timezone.utc)

    def test_same_weekday_rolls_to_next_week(self, now):
        """같은 요일이면 다음 주"""
        slot = OptimalPostingTime(day="Wednesday", weekday=2, hour=19)

        assert next_occurrence(slot, now, timezone.utc) == datetime(2024, 1, 17, 19, 0, tzinfo=timezone.utc)

    def test_local_timezone(self, now):
        """사용자 타임존 기준"""
        tz = ZoneInfo("America/Los_Angeles")
        slot = OptimalPostingTime(day="Tuesday", weekday=1, hour=19)
        scheduled = next_occurrence(slot, now, tz)

        assert scheduled.tzinfo == tz
        assert (scheduled.month, scheduled.day, scheduled.hour) == (1, 16, 19)

    def test_resolve_timezone(self):
        """이름 / tzinfo / 기본값"""
        assert resolve_timezone(timezone.utc, "UTC") is timezone.utc
        assert resolve_timezone("Asia/Seoul", "UTC").key == "Asia/Seoul"
        assert resolve_timezone(None, "UTC").key == "UTC"

    @pytest.mark.parametrize("name", ["Mars/Olympus_Mons", "../etc"])
    def test_unknown_timezone(self, name):
        """알 수 없는 타임존 -> InputError"""
        with pytest.raises(InputError) as exc_info:
            resolve_timezone(name, "UTC")

        assert exc_info.value.details == {"timezone": name}


class TestNotificationEngine:
    """알림 생성 테스트"""

    def test_all_notification_kinds(self, engine, make_package, now):
        """최적 시간 + 기회 + 마일스톤 + 리마인더"""
        package = make_package(
            profile={'followers_count': 990, 'engagement_rate': 1.0},
            media=[
                {'media_type': 'VIDEO', 'like_count': 300},
                {'media_type': 'IMAGE', 'like_count': 100},
            ],
        )
        notifications = engine.generate(package, now)

        assert [n.type for n in notifications] == [
            NotificationType.TIMING,
            NotificationType.OPPORTUNITY,
            NotificationType.MILESTONE,
            NotificationType.REMINDER,
        ]
        assert notifications[1].data["type"] == "video_performs_better"
        assert notifications[2].title == "🎉 Almost at 1,000 followers!"
        assert notifications[3].priority == Priority.LOW

    def test_timing_scheduled_for_optimal_slot(self, engine, make_package, now):
        """데이터 부족 -> 화요일 19시, confidence 0.5"""
        notifications = engine.generate(make_package(), now)
        timing = notifications[0]

        assert timing.scheduled_for == datetime(2024, 1, 16, 19, 0, tzinfo=ZoneInfo("UTC"))
        assert timing.data["optimal_time"]["confidence"] == 0.5
        assert timing.data["optimal_time"]["is_default"] is True

    def test_good_posting_day(self, engine, make_package):
        """월요일 -> 좋은 게시 요일 기회"""
        monday = datetime(2024, 1, 8, 12, tzinfo=timezone.utc)
        notifications = engine.generate(make_package(profile={'engagement_rate': 5.0}), monday)
        opportunity = [n for n in notifications if n.type == NotificationType.OPPORTUNITY]

        assert len(opportunity) == 1
        assert opportunity[0].body == "Monday is typically a high-engagement day for your audience"

    def test_no_opportunity_midweek(self, engine, make_package, now):
        """수요일 + 비디오 우세 없음 -> 기회 없음"""
        notifications = engine.generate(make_package(profile={'engagement_rate': 5.0}), now)

        assert NotificationType.OPPORTUNITY not in [n.type for n in notifications]

    def test_no_reminder_for_healthy_rate(self, engine, make_package, now):
        """참여율 3% 이상 -> 리마인더 없음"""
        notifications = engine.generate(make_package(profile={'engagement_rate': 3.0}), now)

        assert NotificationType.REMINDER not in [n.type for n in notifications]

    def test_timezone_argument(self, engine, make_package, now):
        """호출 시 타임존 지정"""
        notifications = engine.generate(make_package(), now, timezone="Asia/Seoul")

        assert notifications[0].scheduled_for.tzinfo == ZoneInfo("Asia/Seoul")

    def test_unknown_timezone_argument(self, engine, make_package, now):
        """잘못된 타임존 인자 -> InputError"""
        with pytest.raises(InputError):
            engine.generate(make_package(), now, timezone="Bad/Zone")

    def test_deterministic_ids(self, engine, package, now):
        """id는 now에서 결정"""
        first = engine.generate(package, now)
        second = engine.generate(package, now)

        assert first == second
        assert all(n.id.endswith(str(int(now.timestamp() * 1000))) for n in first)
