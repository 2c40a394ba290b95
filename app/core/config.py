import json
import logging
import os
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, PostgresDsn, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "BlogSpot"

    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:4200",
        "http://localhost:8080",
    ]

    ENVIRONMENT: str = Field(default="development")

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "blogspot"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "blogspot"
    POSTGRES_PORT: int = Field(default=5432)
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)

    SECRET_KEY: SecretStr = Field(default=SecretStr("change-me"))
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 50

    TRENDING_WINDOW_DAYS: int = 7
    TRENDING_CACHE_TTL_SECONDS: int = 300
    TRENDING_CACHE_MAXSIZE: int = 256

    # Real-time push channel; no URL means events are only logged
    PUSH_CHANNEL_URL: Optional[str] = None
    PUSH_CHANNEL_TIMEOUT_SECONDS: float = 2.0
    PUSH_WORKERS: int = 2

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="allow")

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: Any) -> Any:
        if isinstance(v, str) and v:
            return v
        data: Dict[str, Any] = info.data
        return str(
            PostgresDsn.build(
                scheme="postgresql",
                username=data.get("POSTGRES_USER"),
                password=data.get("POSTGRES_PASSWORD") or None,
                host=data.get("POSTGRES_SERVER"),
                port=int(data.get("POSTGRES_PORT", 5432)),
                path=data.get("POSTGRES_DB") or "",
            )
        )

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @computed_field
    @property
    def IS_SQLITE(self) -> bool:
        return bool(self.DATABASE_URL) and self.DATABASE_URL.startswith("sqlite")


def get_settings() -> Settings:
    env = os.getenv("ENVIRONMENT", "development")
    logger.info(f"Loading settings for {env} environment")
    return Settings()


settings = get_settings()


def log_settings(current: Settings) -> None:
    logger.info("Settings loaded:")
    for field, value in current.model_dump().items():
        if isinstance(value, SecretStr) or field in ("POSTGRES_PASSWORD", "DATABASE_URL"):
            logger.info(f"{field}: [REDACTED]")
        else:
            logger.info(f"{field}: {value}")
