from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from urllib.parse import quote_plus


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="coachapi/.env",
        env_file_encoding="utf-8",
        extra="allow",
    )
    # Application
    APP_NAME: str = "Coach API"
    PROJECT_NAME: str = "Coach Gamification API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_HOST: str = ""
    POSTGRES_PORT: int = 5432
    POSTGRES_USERNAME: str = ""
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DATABASE: str = ""
    POSTGRES_SCHEMA: str = "coach"

    # 설정 시 POSTGRES_* 조합보다 우선 (예: sqlite:///./coach.db)
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_LOCK_TIMEOUT_MS: int = 5000  # 행 잠금 대기 한도 (PostgreSQL lock_timeout)

    @property
    def database_url(self) -> str:
        """Construct database URL from individual components"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        # URL encode the password to handle special characters
        encoded_password = quote_plus(self.POSTGRES_PASSWORD)
        return f"postgresql+psycopg2://{self.POSTGRES_USERNAME}:{encoded_password}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DATABASE}"

    # Security
    SECRET_KEY: str = ""
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Gamification
    DAY_BOUNDARY_UTC_OFFSET_HOURS: int = -3  # 하루 경계 기준 오프셋 (칠레 본토, UTC-3 고정)
    DAILY_CHECKIN_POINTS: int = 10  # 일일 체크인 포인트
    FIRST_CHECKIN_POINTS: int = 50  # 첫 체크인 보너스
    STREAK_7_POINTS: int = 70  # 7일 연속 달성 보너스
    STREAK_30_POINTS: int = 150  # 30일 연속 달성 보너스
    REJECT_BACKDATED_CHECKINS: bool = (
        False  # True면 마지막 집계일 이전 날짜를 리셋 대신 거부
    )

    # Pagination
    POINTS_PAGE_DEFAULT: int = 20
    POINTS_PAGE_MAX: int = 100

    @field_validator("DAY_BOUNDARY_UTC_OFFSET_HOURS")
    @classmethod
    def validate_utc_offset(cls, v: int) -> int:
        if not -12 <= v <= 14:
            raise ValueError("DAY_BOUNDARY_UTC_OFFSET_HOURS must be between -12 and 14")
        return v

    @field_validator(
        "DAILY_CHECKIN_POINTS",
        "FIRST_CHECKIN_POINTS",
        "STREAK_7_POINTS",
        "STREAK_30_POINTS",
    )
    @classmethod
    def validate_points(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Point values must not be negative")
        return v


settings = Settings()
