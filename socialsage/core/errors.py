"""
에러 정의

데이터 품질 문제는 기본값으로 흡수하고,
구조적으로 잘못된 입력만 예외로 알린다.
"""

from typing import Dict, Any, Optional
from enum import Enum


class ErrorType(str, Enum):
    """에러 유형"""
    INPUT = "input"
    RULE_CONFIG = "rule_config"
    INTERNAL = "internal"


class SocialSageError(Exception):
    """인사이트 코어 에러"""

    error_type: ErrorType = ErrorType.INTERNAL

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'message': self.message,
            'type': self.error_type.value,
            'details': self.details,
        }


class InputError(SocialSageError):
    """원시 데이터 패키지 구조 오류"""
    error_type = ErrorType.INPUT


class RuleConfigError(SocialSageError):
    """분류 규칙 파일 오류"""
    error_type = ErrorType.RULE_CONFIG
