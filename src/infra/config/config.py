from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from infra.utils.version import get_version


class LoggingConfig(BaseModel):
    LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    JSON_FORMAT: bool = False
    LIBRARY_LOG_LEVELS: dict[str, str | int] = Field(
        default_factory=lambda: {"apscheduler": "WARNING", "httpx": "WARNING"}
    )


class DatabaseConfig(BaseModel):
    DRIVER: Literal["postgres", "sqlite"] = "postgres"
    SQLITE_PATH: str = "./uptime_engine.db"

    USER: str | None = None
    PASSWORD: str | None = None
    HOST: str | None = None
    PORT: int | None = None
    DATABASE: str | None = None
    ECHO: bool = False
    POOL_SIZE: int = 10
    MAX_OVERFLOW: int = 20
    POOL_TIMEOUT: int = 30
    POOL_RECYCLE: int = 1800

    @model_validator(mode="after")
    def validate_required_postgres_fields(self) -> "DatabaseConfig":
        if self.DRIVER == "sqlite":
            return self

        required_fields = {
            "USER": self.USER,
            "PASSWORD": self.PASSWORD,
            "HOST": self.HOST,
            "PORT": self.PORT,
            "DATABASE": self.DATABASE,
        }
        missing_fields = [field_name for field_name, value in required_fields.items() if value in (None, "")]

        if missing_fields:
            raise ValueError(
                f"DATABASE_CONFIG fields required when DRIVER=postgres: {', '.join(missing_fields)}"
            )

        return self


class MonitoringConfig(BaseModel):
    CHECK_INTERVAL_SECONDS: int = Field(default=300, ge=1)
    RESYNC_INTERVAL_SECONDS: int = Field(default=1800, ge=1)
    MAX_CONCURRENT_CHECKS: int = Field(default=10, ge=1)
    RETRY_BACKOFF_SECONDS: float = Field(default=1.0, ge=0)
    SHUTDOWN_GRACE_SECONDS: float = Field(default=30.0, ge=0)
    UPTIME_WINDOW_DAYS: int = Field(default=30, ge=1)
    USER_AGENT: str = "Uptime-Monitor/1.0"
    HTTP_MAX_CONNECTIONS: int = Field(default=100, ge=1)
    HTTP_FOLLOW_REDIRECTS: bool = True


class SubscriptionConfig(BaseModel):
    FREE_ENDPOINT_LIMIT: int = Field(default=3, ge=0)
    ENDPOINTS_PER_ADDON: int = Field(default=5, ge=0)


class Config(BaseSettings):
    APP_NAME: str = "uptime-engine"
    VERSION: str = get_version()
    ENVIRONMENT: Literal["loc", "dev", "pre", "pro"] = "dev"
    ROOT_PATH: str = ""

    HOST: str = "0.0.0.0"
    PORT: int = 8080

    LOGGING_CONFIG: LoggingConfig = LoggingConfig()
    DATABASE_CONFIG: DatabaseConfig
    MONITORING_CONFIG: MonitoringConfig = MonitoringConfig()
    SUBSCRIPTION_CONFIG: SubscriptionConfig = SubscriptionConfig()

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_nested_delimiter="__",
    )


@lru_cache
def get_config() -> Config:
    return Config()  # type: ignore
