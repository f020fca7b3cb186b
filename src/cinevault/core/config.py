"""CineVault settings.

Values come from ``CINEVAULT_*`` environment variables, then ``.env``, then
the defaults below. The resulting object is frozen and cached per process.
"""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, PositiveInt, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_ACCESS_TOKEN_SECRET = "change-me-in-production-access-token-secret"
DEFAULT_REFRESH_TOKEN_SECRET = "change-me-in-production-refresh-token-secret"

DEFAULT_MIME_TYPES = [
    "video/mp4",
    "video/mpeg",
    "video/webm",
    "video/quicktime",
    "video/x-matroska",
    "video/x-msvideo",
    "image/jpeg",
    "image/png",
    "image/webp",
    "application/octet-stream",
]

GIB = 1024**3


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CINEVAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    app_name: str = "CineVault"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"

    host: str = "0.0.0.0"
    port: int = 8080
    workers: PositiveInt = 1

    database_url: str = "sqlite+aiosqlite:///./data/cinevault.db"
    db_echo: bool = False

    # Access and refresh tokens are signed with different keys so that one
    # kind can never be accepted as the other.
    access_token_secret: str = DEFAULT_ACCESS_TOKEN_SECRET
    refresh_token_secret: str = DEFAULT_REFRESH_TOKEN_SECRET
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7

    # NoDecode: env values reach split_csv as raw strings instead of JSON.
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:3000", "http://localhost:8080"]
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    storage_path: str = "./uploads"
    max_file_size: int = 2 * GIB
    upload_timeout_seconds: float = 300.0
    allowed_mime_types: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_MIME_TYPES)
    )

    @field_validator("cors_origins", "allowed_mime_types", mode="before")
    @classmethod
    def split_csv(cls, value: str | list[str]) -> list[str]:
        """Accept ``a, b, c`` from the environment, or a list from code."""
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("access_token_expire_minutes", "refresh_token_expire_days")
    @classmethod
    def require_positive_lifetime(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("token lifetimes must be positive")
        return value

    @model_validator(mode="after")
    def single_worker_for_sqlite(self) -> "Settings":
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                f"workers={self.workers} is not supported with SQLite; "
                "run a single worker or point CINEVAULT_DATABASE_URL at a server database"
            )
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"

    @property
    def uses_default_secrets(self) -> bool:
        """True while either token secret is still the shipped placeholder."""
        return DEFAULT_ACCESS_TOKEN_SECRET == self.access_token_secret or (
            DEFAULT_REFRESH_TOKEN_SECRET == self.refresh_token_secret
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
