from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = Field(default="sqlite:///./lostfound.db", min_length=1)
    sql_echo: bool = False  # Set SQL_ECHO=true for SQL query logging

    jwt_secret: str = Field(default="your_really_long_secret_key", min_length=1)
    access_token_expire_minutes: int = Field(default=60 * 24, gt=0)  # 1 day
    password_hash_rounds: int = Field(default=310_000, gt=0)

    storage_root: str = "./storage"
    storage_base_url: str = "http://localhost:8000/storage"

    # Comma separated
    cors_origins_raw: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    @field_validator("storage_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins_raw.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
