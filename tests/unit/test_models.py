"""
Unit Tests for Input Models
원시 데이터 패키지 경계 정규화 테스트

Run: pytest tests/unit/test_models.py -v
"""

import pytest
from datetime import datetime, timezone

from pydantic import ValidationError

from socialsage.core.errors import InputError
from socialsage.models.instagram import (
    AccountType,
    HistorySnapshot,
    InstagramDataPackage,
    MediaPost,
    MediaType,
    Profile,
    coerce_count,
    coerce_rate,
    parse_timestamp,
)


class TestCoercion:
    """정규화 헬퍼 테스트"""

    @pytest.mark.parametrize("value,expected", [
        (12, 12),
        ("12", 12),
        ("12.7", 12),
        (None, 0),
        (-5, 0),
        ("abc", 0),
        (True, 0),
    ])
    def test_coerce_count(self, value, expected):
        """카운트 정규화"""
        assert coerce_count(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (3.5, 3.5),
        ("2.25", 2.25),
        (None, 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        ("n/a", 0.0),
    ])
    def test_coerce_rate(self, value, expected):
        """비율 정규화"""
        assert coerce_rate(value) == expected

    def test_parse_graph_api_offset(self):
        """'+0000' 오프셋 파싱"""
        parsed = parse_timestamp("2024-01-08T19:04:11+0000")

        assert parsed == datetime(2024, 1, 8, 19, 4, 11, tzinfo=timezone.utc)

    def test_parse_naive_as_utc(self):
        """오프셋 없는 값은 UTC"""
        parsed = parse_timestamp("2024-01-08T19:04:11")

        assert parsed.tzinfo is not None
        assert parsed.utcoffset().total_seconds() == 0

    def test_parse_zulu_and_epoch(self):
        """'Z' 접미사와 epoch 초"""
        assert parse_timestamp("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert parse_timestamp(1704067200) == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_parse_invalid(self):
        """해석 불가 -> None"""
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp("") is None
        assert parse_timestamp(None) is None


class TestProfile:
    """Profile 모델 테스트"""

    def test_defaults(self):
        """누락 필드 기본값"""
        profile = Profile.model_validate({})

        assert profile.followers_count == 0
        assert profile.username == ""
        assert profile.engagement_rate == 0.0
        assert profile.account_type == AccountType.PERSONAL
        assert profile.has_engagement_rate is False

    def test_none_values_use_defaults(self):
        """None 값은 기본값"""
        profile = Profile.model_validate({'followers_count': None, 'username': None})

        assert profile.followers_count == 0
        assert profile.username == ""

    def test_aliases(self):
        """대체 필드명 허용"""
        profile = Profile.model_validate({'followers': '2500', 'following_count': 40, 'handle': 'sage'})

        assert profile.followers_count == 2500
        assert profile.follows_count == 40
        assert profile.username == 'sage'

    def test_account_type_case_insensitive(self):
        """계정 타입 대소문자 무시"""
        assert Profile.model_validate({'account_type': 'business'}).account_type == AccountType.BUSINESS
        assert Profile.model_validate({'account_type': 'robot'}).account_type == AccountType.PERSONAL

    def test_frozen(self):
        """입력 스냅샷은 불변"""
        profile = Profile.model_validate({'followers_count': 10})

        with pytest.raises(ValidationError):
            profile.followers_count = 20


class TestMediaPost:
    """MediaPost 모델 테스트"""

    @pytest.mark.parametrize("raw,expected", [
        ("IMAGE", MediaType.IMAGE),
        ("video", MediaType.VIDEO),
        ("CAROUSEL_ALBUM", MediaType.CAROUSEL_ALBUM),
        ("carousel", MediaType.CAROUSEL_ALBUM),
        ("REELS", MediaType.VIDEO),
        ("HOLOGRAM", MediaType.IMAGE),
        (None, MediaType.IMAGE),
    ])
    def test_media_type_fallback(self, raw, expected):
        """알 수 없는 미디어 타입은 IMAGE"""
        assert MediaPost.model_validate({'media_type': raw}).media_type == expected

    def test_missing_counts_are_zero(self):
        """카운트 누락 -> 0"""
        post = MediaPost.model_validate({'id': 'x', 'like_count': None})

        assert post.like_count == 0
        assert post.comments_count == 0
        assert post.engagement == 0
        assert post.timestamp is None
        assert post.caption_text == ""

    def test_engagement(self):
        """참여 = 좋아요 + 댓글"""
        post = MediaPost.model_validate({'like_count': 40, 'comment_count': 2})

        assert post.engagement == 42

    def test_insight_metrics(self):
        """선택 메트릭 별칭"""
        post = MediaPost.model_validate({'send_count': 3, 'impressions_count': 900, 'saves_count': 7})

        assert post.shares_count == 3
        assert post.impressions == 900
        assert post.saved == 7


class TestHistorySnapshot:
    """HistorySnapshot 모델 테스트"""

    def test_flat_shape(self):
        """평면 형식"""
        snapshot = HistorySnapshot.model_validate({'followers': 900, 'date': '2024-01-01T00:00:00Z'})

        assert snapshot.followers_count == 900
        assert snapshot.recorded_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_stored_report_shape(self):
        """저장된 리포트 형식"""
        snapshot = HistorySnapshot.model_validate({
            'report_data': {'profile': {'followers_count': 1200, 'media_count': 30}},
            'created_at': '2024-01-05T00:00:00Z',
        })

        assert snapshot.followers_count == 1200
        assert snapshot.media_count == 30
        assert snapshot.recorded_at == datetime(2024, 1, 5, tzinfo=timezone.utc)


class TestInstagramDataPackage:
    """InstagramDataPackage 경계 테스트"""

    def test_from_raw(self, raw_package):
        """기본 패키지 생성"""
        package = InstagramDataPackage.from_raw(raw_package)

        assert package.profile.username == 'sage.creator'
        assert len(package.media) == 8
        assert len(package.history) == 2
        assert package.has_media is True

    @pytest.mark.parametrize("raw", [None, [], "package", 42])
    def test_from_raw_rejects_non_mapping(self, raw):
        """매핑이 아니면 InputError"""
        with pytest.raises(InputError) as exc_info:
            InstagramDataPackage.from_raw(raw)

        assert exc_info.value.to_dict()['type'] == 'input'

    def test_empty_mapping(self):
        """빈 매핑은 빈 패키지"""
        package = InstagramDataPackage.from_raw({})

        assert package.media == []
        assert package.profile.followers_count == 0
        assert package.has_media is False

    def test_content_analysis_path(self, raw_profile, raw_media):
        """media가 없으면 contentAnalysis.topPosts 사용"""
        package = InstagramDataPackage.from_raw({
            'profile': raw_profile,
            'contentAnalysis': {'topPosts': raw_media[:2]},
        })

        assert [p.id for p in package.media] == ['p1', 'p2']

    def test_raw_instagram_data_path(self, raw_profile, raw_media):
        """raw_instagram_data.media 경로"""
        package = InstagramDataPackage.from_raw({
            'profile': raw_profile,
            'raw_instagram_data': {'media': raw_media[:3]},
        })

        assert len(package.media) == 3

    def test_non_mapping_media_items_skipped(self):
        """매핑이 아닌 미디어 항목은 무시"""
        package = InstagramDataPackage.from_raw({'media': [{'id': 'a'}, None, "junk"]})

        assert [p.id for p in package.media] == ['a']

    def test_derived_engagement_rate(self):
        """참여율이 없으면 게시물 평균 / 팔로워로 산출"""
        package = InstagramDataPackage.from_raw({
            'profile': {'followers_count': 1000},
            'media': [
                {'like_count': 100, 'comments_count': 0},
                {'like_count': 50, 'comments_count': 50},
            ],
        })

        assert package.profile.engagement_rate == pytest.approx(10.0)
        assert package.profile.has_engagement_rate is True

    def test_provided_engagement_rate_kept(self):
        """제공된 참여율 유지"""
        package = InstagramDataPackage.from_raw({
            'profile': {'followers_count': 1000, 'engagement_rate': 2.5},
            'media': [{'like_count': 500}],
        })

        assert package.profile.engagement_rate == 2.5

    def test_zero_followers_rate(self):
        """팔로워 0 -> 참여율 0"""
        package = InstagramDataPackage.from_raw({
            'profile': {'followers_count': 0},
            'media': [{'like_count': 500, 'comments_count': 20}],
        })

        assert package.profile.engagement_rate == 0.0

    def test_historical_growth_alias(self):
        """historical_growth 키 허용"""
        package = InstagramDataPackage.from_raw({
            'historical_growth': [{'followers_count': 10}, {'followers_count': 20}],
        })

        assert [s.followers_count for s in package.history] == [10, 20]

    def test_summary(self, package):
        """로깅용 요약"""
        summary = package.summary()

        assert summary == {
            'username': 'sage.creator',
            'followers': 1520,
            'posts': 8,
            'history_points': 2,
        }
