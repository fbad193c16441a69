"""
기본 모델
"""

from pydantic import BaseModel as PydanticBaseModel, ConfigDict


class BaseModel(PydanticBaseModel):
    """
    기본 모델 클래스
    모든 파생 결과 모델의 베이스
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=False,
    )


class SnapshotModel(PydanticBaseModel):
    """
    입력 스냅샷 모델 베이스
    호출 측이 넘긴 값은 불변, 모르는 필드는 무시
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
