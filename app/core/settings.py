"""
환경 설정 모듈
환경별 설정을 관리하고 유효성 검증 수행
"""
import os
from typing import Optional, List
from functools import cached_property

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator


class BaseConfig(BaseSettings):
    """
    기본 설정 클래스
    모든 환경에서 공통으로 사용되는 설정
    """
    # ===========================================
    # 애플리케이션 설정
    # ===========================================
    SERVICE_NAME: str = Field(default="midpaper-generator")
    ENV: str = Field(default="development")
    LOG_LEVEL: str = Field(default="INFO")

    # ===========================================
    # 업로드 설정
    # ===========================================
    MAX_UPLOAD_SIZE: int = Field(default=10 * 1024 * 1024)  # 10MB

    # ===========================================
    # 문항 선택 설정
    # ===========================================
    # True면 합산 풀 추첨에서 앞 단계에서 이미 뽑힌 문항을 제외
    POOLED_DRAW_EXCLUDES_SELECTED: bool = Field(default=False)
    RANDOM_SEED: Optional[int] = None

    # ===========================================
    # CORS 설정
    # ===========================================
    CORS_ORIGINS: str = Field(default="*")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v_upper

    @field_validator("MAX_UPLOAD_SIZE")
    @classmethod
    def validate_max_upload_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("MAX_UPLOAD_SIZE must be positive")
        return v

    @cached_property
    def cors_origins_list(self) -> List[str]:
        """CORS origins를 리스트로 반환"""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


class DevelopmentConfig(BaseConfig):
    """개발 환경 설정"""
    ENV: str = Field(default="development")
    LOG_LEVEL: str = Field(default="DEBUG")


class StagingConfig(BaseConfig):
    """스테이징 환경 설정"""
    ENV: str = Field(default="staging")
    LOG_LEVEL: str = Field(default="INFO")


class ProductionConfig(BaseConfig):
    """운영 환경 설정"""
    ENV: str = Field(default="production")
    LOG_LEVEL: str = Field(default="WARNING")


class TestConfig(BaseConfig):
    """테스트 환경 설정"""
    ENV: str = Field(default="test")
    LOG_LEVEL: str = Field(default="DEBUG")
    MAX_UPLOAD_SIZE: int = Field(default=1024 * 1024)


def get_settings() -> BaseConfig:
    """
    환경에 맞는 설정 객체 반환

    ENV 환경변수에 따라 적절한 설정 클래스를 선택
    """
    env = os.getenv("ENV", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "dev": DevelopmentConfig,
        "local": DevelopmentConfig,
        "staging": StagingConfig,
        "stage": StagingConfig,
        "production": ProductionConfig,
        "prod": ProductionConfig,
        "test": TestConfig,
        "testing": TestConfig,
    }

    config_class = config_map.get(env, DevelopmentConfig)
    return config_class()


# 전역 설정 인스턴스
settings = get_settings()
