"""
Instagram 입력 모델
Graph API 결과(프로필 + 미디어 목록)를 코어 공통 타입으로 정규화

실제 데이터 형식:
{
    "profile": {
        "id": "17841400000000000",
        "username": "sage.creator",
        "name": "Sage Creator",
        "account_type": "CREATOR",
        "followers_count": 1520,
        "follows_count": 310,
        "media_count": 84
    },
    "media": [
        {
            "id": "17900000000000001",
            "caption": "Morning routine #reels",
            "media_type": "VIDEO",
            "like_count": 230,
            "comments_count": 18,
            "timestamp": "2024-01-08T19:04:11+0000",
            "permalink": "https://www.instagram.com/p/C1abc/"
        }
    ]
}

누락 필드는 0/빈 값으로 처리하고, 타임스탬프가 없는 게시물은
시간 기반 분석에서만 제외된다.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional
import math
import re
import logging

from pydantic import AliasChoices, Field, field_validator, model_validator

from socialsage.core.errors import InputError
from socialsage.models.base import SnapshotModel

logger = logging.getLogger(__name__)

# "+0000" 형식 오프셋을 "+00:00"으로 변환
_OFFSET_PATTERN = re.compile(r'([+-]\d{2})(\d{2})$')

# 미디어 배열 탐색 경로 (우선순위 순)
MEDIA_PATHS = (
    ("media",),
    ("contentAnalysis", "topPosts"),
    ("raw_instagram_data", "media"),
)


# ============================================================
# Coercion Helpers
# ============================================================

def coerce_count(value: Any) -> int:
    """카운트 정규화 (None/잘못된 값 -> 0, 음수 -> 0)"""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


def coerce_rate(value: Any) -> float:
    """비율 정규화 (NaN/무한대/잘못된 값 -> 0.0)"""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    타임스탬프 파싱

    ISO 문자열("Z", "+0000" 오프셋 포함)과 epoch 초를 지원한다.
    오프셋이 없으면 UTC로 간주하고, 해석할 수 없으면 None.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip().replace("Z", "+00:00")
        text = _OFFSET_PATTERN.sub(r'\1:\2', text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug(f"[InstagramModels] Unparseable timestamp: {value!r}")
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _drop_none(data: Any) -> Any:
    """None 값 키 제거 (기본값 적용)"""
    if isinstance(data, Mapping):
        return {key: value for key, value in data.items() if value is not None}
    return data


# ============================================================
# Enums
# ============================================================

class MediaType(str, Enum):
    """미디어 타입 (Graph API media_type)"""
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    CAROUSEL_ALBUM = "CAROUSEL_ALBUM"

    @classmethod
    def from_string(cls, value: Any) -> "MediaType":
        """문자열에서 변환 (알 수 없으면 IMAGE)"""
        if isinstance(value, cls):
            return value

        key = str(value or "").strip().upper()
        aliases = {
            "CAROUSEL": cls.CAROUSEL_ALBUM,
            "SIDECAR": cls.CAROUSEL_ALBUM,
            "REEL": cls.VIDEO,
            "REELS": cls.VIDEO,
            "PHOTO": cls.IMAGE,
        }
        try:
            return cls(key)
        except ValueError:
            return aliases.get(key, cls.IMAGE)


class AccountType(str, Enum):
    """계정 타입"""
    BUSINESS = "BUSINESS"
    CREATOR = "CREATOR"
    PERSONAL = "PERSONAL"

    @classmethod
    def from_string(cls, value: Any) -> "AccountType":
        """문자열에서 변환 (알 수 없으면 PERSONAL)"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            return cls.PERSONAL


# ============================================================
# Snapshots
# ============================================================

class Profile(SnapshotModel):
    """프로필 스냅샷 (조회 시점 기준, 불변)"""
    id: str = ""
    username: str = Field(default="", validation_alias=AliasChoices("username", "handle"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "full_name"))
    biography: str = ""
    followers_count: int = Field(
        default=0,
        validation_alias=AliasChoices("followers_count", "follower_count", "followers"),
    )
    follows_count: int = Field(
        default=0,
        validation_alias=AliasChoices("follows_count", "following_count", "following"),
    )
    media_count: int = 0
    engagement_rate: float = 0.0
    account_type: AccountType = AccountType.PERSONAL

    @model_validator(mode="before")
    @classmethod
    def _apply_defaults(cls, data: Any) -> Any:
        return _drop_none(data)

    @field_validator("followers_count", "follows_count", "media_count", mode="before")
    @classmethod
    def _coerce_counts(cls, value: Any) -> int:
        return coerce_count(value)

    @field_validator("engagement_rate", mode="before")
    @classmethod
    def _coerce_rate(cls, value: Any) -> float:
        return coerce_rate(value)

    @field_validator("account_type", mode="before")
    @classmethod
    def _coerce_account_type(cls, value: Any) -> AccountType:
        return AccountType.from_string(value)

    @field_validator("id", "username", "name", "biography", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return str(value)

    @property
    def has_engagement_rate(self) -> bool:
        """호출 측이 참여율을 직접 제공했는지"""
        return "engagement_rate" in self.model_fields_set


class MediaPost(SnapshotModel):
    """게시물 (불변)"""
    id: str = ""
    caption: Optional[str] = None
    media_type: MediaType = MediaType.IMAGE
    media_product_type: Optional[str] = None  # FEED, REELS, STORY
    like_count: int = 0
    comments_count: int = Field(
        default=0,
        validation_alias=AliasChoices("comments_count", "comment_count"),
    )
    timestamp: Optional[datetime] = None
    permalink: str = ""

    # 선택 메트릭 (Insights API)
    shares_count: int = Field(
        default=0,
        validation_alias=AliasChoices("shares_count", "send_count"),
    )
    impressions: int = Field(
        default=0,
        validation_alias=AliasChoices("impressions", "impressions_count"),
    )
    reach: int = 0
    saved: int = Field(
        default=0,
        validation_alias=AliasChoices("saved", "saves_count"),
    )

    @field_validator(
        "like_count", "comments_count", "shares_count", "impressions", "reach", "saved",
        mode="before",
    )
    @classmethod
    def _coerce_counts(cls, value: Any) -> int:
        return coerce_count(value)

    @field_validator("media_type", mode="before")
    @classmethod
    def _coerce_media_type(cls, value: Any) -> MediaType:
        return MediaType.from_string(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Optional[datetime]:
        return parse_timestamp(value)

    @field_validator("id", "permalink", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("caption", "media_product_type", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)

    @property
    def engagement(self) -> int:
        """좋아요 + 댓글"""
        return self.like_count + self.comments_count

    @property
    def caption_text(self) -> str:
        return self.caption or ""


class HistorySnapshot(SnapshotModel):
    """
    과거 스냅샷

    평면 형식과 저장된 리포트 형식({"report_data": {"profile": {...}}}) 모두 허용
    """
    followers_count: int = Field(
        default=0,
        validation_alias=AliasChoices("followers_count", "followers"),
    )
    follows_count: int = Field(
        default=0,
        validation_alias=AliasChoices("follows_count", "following_count", "following"),
    )
    media_count: int = Field(
        default=0,
        validation_alias=AliasChoices("media_count", "posts"),
    )
    engagement_rate: float = 0.0
    recorded_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("recorded_at", "date", "created_at"),
    )

    @model_validator(mode="before")
    @classmethod
    def _unwrap_report(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and isinstance(data.get("report_data"), Mapping):
            profile = data["report_data"].get("profile")
            merged = dict(profile) if isinstance(profile, Mapping) else {}
            merged.setdefault("created_at", data.get("created_at"))
            data = merged
        return _drop_none(data)

    @field_validator("followers_count", "follows_count", "media_count", mode="before")
    @classmethod
    def _coerce_counts(cls, value: Any) -> int:
        return coerce_count(value)

    @field_validator("engagement_rate", mode="before")
    @classmethod
    def _coerce_rate(cls, value: Any) -> float:
        return coerce_rate(value)

    @field_validator("recorded_at", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Optional[datetime]:
        return parse_timestamp(value)


# ============================================================
# Data Package
# ============================================================

def _find_media(data: Mapping) -> List[Any]:
    """미디어 배열 탐색 (media -> contentAnalysis.topPosts -> raw_instagram_data.media)"""
    for path in MEDIA_PATHS:
        node: Any = data
        for key in path:
            node = node.get(key) if isinstance(node, Mapping) else None
        if isinstance(node, (list, tuple)):
            return list(node)
    return []


class InstagramDataPackage(SnapshotModel):
    """
    원시 Instagram 데이터 패키지

    코어의 유일한 입력. 경계에서 검증/기본값 처리를 마치므로
    내부 로직은 선택 필드를 다시 확인하지 않는다.
    """
    profile: Profile = Field(default_factory=Profile)
    media: List[MediaPost] = Field(default_factory=list)
    history: List[HistorySnapshot] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        raw_profile = data.get("profile")
        if isinstance(raw_profile, Profile):
            profile = raw_profile
        else:
            profile = Profile.model_validate(raw_profile if isinstance(raw_profile, Mapping) else {})

        media = [
            item if isinstance(item, MediaPost) else MediaPost.model_validate(item)
            for item in _find_media(data)
            if isinstance(item, (Mapping, MediaPost))
        ]

        raw_history = data.get("history") or data.get("historical_growth") or []
        history = [
            item for item in raw_history
            if isinstance(item, (Mapping, HistorySnapshot))
        ] if isinstance(raw_history, (list, tuple)) else []

        # 참여율이 없으면 게시물 평균 참여 / 팔로워로 산출
        if not profile.has_engagement_rate:
            from socialsage.services.analysis.engagement import derive_engagement_rate
            profile = profile.model_copy(
                update={"engagement_rate": derive_engagement_rate(profile.followers_count, media)}
            )

        return {"profile": profile, "media": media, "history": history}

    @classmethod
    def from_raw(cls, raw: Any) -> "InstagramDataPackage":
        """
        원시 데이터에서 패키지 생성

        Args:
            raw: 외부에서 수집된 데이터 (dict)

        Returns:
            InstagramDataPackage

        Raises:
            InputError: 매핑이 아닌 입력
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, Mapping):
            raise InputError(
                "Raw Instagram data package must be a mapping",
                details={"received_type": type(raw).__name__},
            )
        return cls.model_validate(raw)

    @property
    def has_media(self) -> bool:
        return len(self.media) > 0

    def summary(self) -> Dict[str, Any]:
        """로깅용 요약"""
        return {
            "username": self.profile.username,
            "followers": self.profile.followers_count,
            "posts": len(self.media),
            "history_points": len(self.history),
        }
