from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DB_PATH: str = '/var/lib/sqlite3/drud_cli_metrics.db'
    HOST: str = '0.0.0.0'
    PORT: int = 12345
    LOG_LEVEL: str = 'INFO'
    DEFAULT_LOCALE: str = 'en'

    model_config = SettingsConfigDict(env_file='.env', env_prefix='CLI_METRICS_')


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
