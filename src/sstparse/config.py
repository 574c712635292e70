"""설정 관리

환경변수(.env 포함)에서 stage 계산, 출력 크기 제한, 로깅 설정을 읽는다.
파싱 코어는 설정을 직접 읽지 않고, CLI가 Config 값을 인자로 넘긴다.
"""

import logging
import os
from typing import List

from dotenv import load_dotenv

from sstparse.stage import DEFAULT_PREFIX, DEFAULT_TRUNCATION_LENGTH, StageConfig

load_dotenv()

DEFAULT_MAX_OUTPUT_SIZE = 50_000


class ConfigurationError(Exception):
    """설정 오류 예외

    환경변수 값이 잘못된 경우 발생합니다.
    """

    def __init__(self, invalid_vars: List[str]):
        self.invalid_vars = invalid_vars
        message = f"잘못된 환경변수 값: {', '.join(invalid_vars)}"
        super().__init__(message)


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """문자열을 bool로 변환"""
    if value is None:
        return default
    return value.lower() == "true"


def _parse_int(value: str | None, default: int) -> int | None:
    """문자열을 int로 변환. 숫자가 아니면 None (validate에서 보고)"""
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        return None


class Config:
    """sstparse 설정 (모듈 로드 시 평가)"""

    # ========================================
    # stage 계산
    # ========================================
    STAGE_PREFIX = os.getenv("SSTPARSE_STAGE_PREFIX", DEFAULT_PREFIX)
    TRUNCATION_LENGTH = _parse_int(
        os.getenv("SSTPARSE_TRUNCATION_LENGTH"), DEFAULT_TRUNCATION_LENGTH
    )

    # ========================================
    # 출력 크기 제한 (0 = 제한 없음)
    # ========================================
    MAX_OUTPUT_SIZE = _parse_int(os.getenv("SSTPARSE_MAX_OUTPUT_SIZE"), DEFAULT_MAX_OUTPUT_SIZE)

    # ========================================
    # 로깅
    # ========================================
    DEBUG = _parse_bool(os.getenv("SSTPARSE_DEBUG"), False)
    LOG_LEVEL = os.getenv("SSTPARSE_LOG_LEVEL", "INFO").upper()

    @classmethod
    def log_level(cls) -> int:
        """logging 모듈 레벨 값"""
        if cls.DEBUG:
            return logging.DEBUG
        level = logging.getLevelName(cls.LOG_LEVEL)
        return level if isinstance(level, int) else logging.INFO

    @classmethod
    def stage_config(cls) -> StageConfig:
        return StageConfig(prefix=cls.STAGE_PREFIX, truncation_length=cls.TRUNCATION_LENGTH)

    # ========================================
    # 검증
    # ========================================
    @classmethod
    def validate(cls) -> None:
        """환경변수 값 검증

        Raises:
            ConfigurationError: 잘못된 값이 있을 때 (모든 항목을 함께 보고)
        """
        invalid = []
        if cls.TRUNCATION_LENGTH is None or cls.TRUNCATION_LENGTH < 1:
            invalid.append("SSTPARSE_TRUNCATION_LENGTH")
        if cls.MAX_OUTPUT_SIZE is None or cls.MAX_OUTPUT_SIZE < 0:
            invalid.append("SSTPARSE_MAX_OUTPUT_SIZE")

        if invalid:
            raise ConfigurationError(invalid)
