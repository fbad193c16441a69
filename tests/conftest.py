"""
Pytest Configuration and Fixtures
socialsage 테스트 공통 설정

Features:
- 공통 fixture 정의
- 고정 기준 시각 (결정적 테스트)
- 원시 데이터 패키지 / 게시물 팩토리 제공
"""

import pytest
from datetime import datetime, timezone
from typing import Any, Callable, Dict

from socialsage.models.instagram import InstagramDataPackage, MediaPost, Profile


# ============================================================
# Time Fixtures
# ============================================================

@pytest.fixture
def now() -> datetime:
    """기준 시각 (2024-01-10 수요일 12:00 UTC)"""
    return datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


# ============================================================
# Raw Data Fixtures
# ============================================================

@pytest.fixture
def raw_profile() -> Dict[str, Any]:
    """테스트용 프로필"""
    return {
        'id': '17841400000000000',
        'username': 'sage.creator',
        'name': 'Sage Creator',
        'account_type': 'CREATOR',
        'followers_count': 1520,
        'follows_count': 310,
        'media_count': 84,
    }


@pytest.fixture
def raw_media() -> list:
    """테스트용 미디어 목록 (최신순)"""
    return [
        {
            'id': 'p1',
            'caption': 'Morning workout routine at the gym #reels #fitness',
            'media_type': 'VIDEO',
            'like_count': 230,
            'comments_count': 18,
            'timestamp': '2024-01-09T19:04:11+0000',
            'permalink': 'https://www.instagram.com/p/p1/',
        },
        {
            'id': 'p2',
            'caption': 'Healthy meal prep tips for the week? #food',
            'media_type': 'IMAGE',
            'like_count': 120,
            'comments_count': 12,
            'timestamp': '2024-01-08T19:10:00+0000',
        },
        {
            'id': 'p3',
            'caption': '5 training tips to build muscle #fitness #tips',
            'media_type': 'CAROUSEL_ALBUM',
            'like_count': 180,
            'comments_count': 25,
            'timestamp': '2024-01-06T17:30:00+0000',
            'saved': 40,
        },
        {
            'id': 'p4',
            'caption': 'Cardio session with the crew',
            'media_type': 'VIDEO',
            'like_count': 200,
            'comments_count': 15,
            'timestamp': '2024-01-04T19:00:00+0000',
        },
        {
            'id': 'p5',
            'caption': 'Rest day vibes',
            'media_type': 'IMAGE',
            'like_count': 90,
            'comments_count': 5,
            'timestamp': '2024-01-02T12:00:00+0000',
        },
        {
            'id': 'p6',
            'caption': 'Gym progress update',
            'media_type': 'IMAGE',
            'like_count': 110,
            'comments_count': 9,
            'timestamp': '2023-12-31T18:00:00+0000',
        },
        {
            'id': 'p7',
            'caption': 'Leg day workout #reel',
            'media_type': 'VIDEO',
            'like_count': 260,
            'comments_count': 30,
            'timestamp': '2023-12-29T19:30:00+0000',
        },
        {
            'id': 'p8',
            'caption': 'Behind the scenes of my training plan',
            'media_type': 'CAROUSEL_ALBUM',
            'like_count': 150,
            'comments_count': 20,
            'timestamp': '2023-12-27T10:00:00+0000',
        },
    ]


@pytest.fixture
def raw_package(raw_profile, raw_media) -> Dict[str, Any]:
    """테스트용 원시 데이터 패키지"""
    return {
        'profile': raw_profile,
        'media': raw_media,
        'history': [
            {'followers_count': 1300, 'follows_count': 300, 'media_count': 70, 'date': '2023-12-01T00:00:00Z'},
            {'followers_count': 1400, 'follows_count': 305, 'media_count': 78, 'date': '2023-12-15T00:00:00Z'},
        ],
    }


@pytest.fixture
def package(raw_package) -> InstagramDataPackage:
    """정규화된 데이터 패키지"""
    return InstagramDataPackage.from_raw(raw_package)


# ============================================================
# Factories
# ============================================================

@pytest.fixture
def make_post() -> Callable[..., MediaPost]:
    """게시물 팩토리"""
    counter = {'n': 0}

    def _make(**fields) -> MediaPost:
        counter['n'] += 1
        fields.setdefault('id', f"post_{counter['n']}")
        return MediaPost.model_validate(fields)

    return _make


@pytest.fixture
def make_package() -> Callable[..., InstagramDataPackage]:
    """패키지 팩토리 (게시물은 dict 또는 MediaPost)"""

    def _make(profile: Dict[str, Any] = None, media: list = None, history: list = None) -> InstagramDataPackage:
        return InstagramDataPackage.from_raw({
            'profile': profile or {},
            'media': media or [],
            'history': history or [],
        })

    return _make


@pytest.fixture
def make_profile() -> Callable[..., Profile]:
    """프로필 팩토리"""

    def _make(**fields) -> Profile:
        return Profile.model_validate(fields)

    return _make
