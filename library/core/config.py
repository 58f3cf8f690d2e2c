from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Library"
    log_level: str = "INFO"

    # Хранилище: "sql" (SQLAlchemy) или "memory" (для разработки и тестов)
    storage_backend: Literal["sql", "memory"] = "sql"
    database_url: str = "postgresql+asyncpg://library:library@db:5432/library"
    echo_sql: bool = False

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    upload_dir: str = "uploads"
    max_upload_size: int = 50 * 1024 * 1024  # 50 МБ

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Получение настроек приложения (кэшируется)"""
    return Settings()
