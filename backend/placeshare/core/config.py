# 설정 모듈
# - .env 값들을 한 곳에서 관리
# - 기본값을 제공하여 로컬 실행 편의성 확보
# - create_app(settings)에 명시적으로 전달되어 HTTP 계층이 사용

from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# backend/placeshare/core/config.py 기준으로 3단계 위가 프로젝트 루트
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    APP_NAME: str = "placeshare"
    ENV: str = "dev"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # 트랜잭션은 replica set이 필요합니다 (로컬 단독 mongod는 MONGODB_TRANSACTIONS=false)
    MONGODB_URI: str = "mongodb://localhost:27017/placeshare"
    MONGODB_TRANSACTIONS: bool = True

    JWT_SECRET_KEY: str = Field(..., description="JWT 토큰 서명에 사용되는 비밀키. 반드시 강력한 랜덤 문자열로 설정하세요.")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 90
    BCRYPT_ROUNDS: int = 12

    CORS_ALLOW_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # /api 경로에 대한 IP당 요청 제한 (기본: 1시간에 100회)
    API_RATE_LIMIT: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 3600

    # Mapbox 지오코딩 API
    MAPBOX_API_KEY: str = Field(..., description="Mapbox 지오코딩 API 접근 토큰")
    GEOCODING_API_BASE: str = "https://api.mapbox.com"
    GEOCODING_TIMEOUT_SECONDS: float = 10.0

    DEFAULT_PLACE_IMAGE: str = "default-place.png"
    DEFAULT_USER_IMAGE: str = "default-user.png"

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH) if ENV_FILE_PATH.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]


settings = Settings()
