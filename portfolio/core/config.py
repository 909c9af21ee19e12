from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    PROJECT_NAME: str = "Portfolio"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"

    # Comma separated list of allowed origins
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "portfolio"
    # Transactions need a replica set; standalone servers reject them
    MONGODB_USE_TRANSACTIONS: bool = False

    # Security
    SECRET_KEY: str = "your-secret-key-here-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    AUTH_COOKIE_NAME: str = "token"
    AUTH_COOKIE_SECURE: bool = False

    # Themes
    ACTIVE_THEME_CACHE_TTL_SECONDS: int = 300
    SEED_DEFAULT_THEMES: bool = True
    # Unauthenticated activation used by the public theme switcher
    ALLOW_PUBLIC_THEME_ACTIVATION: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    GRAYLOG_HOST: Optional[str] = None
    GRAYLOG_PORT: int = 12201

    # Client / admin CLI
    API_BASE_URL: str = "http://localhost:8000"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
