# files_manager/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # persistent metadata store
    database_url: str = "sqlite+aiosqlite:///./files_manager.db"

    # ephemeral session store
    cache_backend: Literal["redis", "memory"] = "redis"
    redis_url: str = "redis://localhost:6379/0"
    session_ttl_seconds: int = 24 * 3600

    # blob storage
    blob_backend: Literal["local", "s3"] = "local"
    folder_path: str = "/tmp/files_manager"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = "us-east-1"
    aws_s3_bucket_name: str = ""

    page_size: int = 20
    log_level: str = "INFO"
    port: int = 5000

    # Tell pydantic-settings to load from .env at project root
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore any extra stuff in .env
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
