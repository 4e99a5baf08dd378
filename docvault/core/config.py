from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./docvault.db"
    db_pool_size: int = Field(10, validation_alias="DB_POOL_MAX")
    db_pool_timeout_seconds: float = 5.0
    db_echo: bool = False

    # Верхняя граница времени одной операции сервиса, включая ожидание блокировок
    operation_timeout_seconds: float = 10.0
    lock_timeout_ms: int = 5000

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Разрешить заголовок X-User-Id вместо bearer-токена (режим разработки)
    dev_auth_enabled: bool = True

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3001

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def reload_settings() -> Settings:
    """Сброс кэша настроек и повторное чтение окружения"""
    get_settings.cache_clear()
    return get_settings()
