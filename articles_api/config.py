from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    host: str = Field(default="127.0.0.1", alias="REST_HOST")
    port: int = Field(default=3333, alias="REST_PORT")
    routes: bool = Field(default=False, alias="REST_ROUTES")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    article_store: Literal["memory", "sql"] = Field(default="memory", alias="ARTICLE_STORE")
    database_url: str = Field(default="sqlite+pysqlite:///:memory:", alias="DATABASE_URL")
    seed_fixtures: bool = Field(default=True, alias="SEED_FIXTURES")

    enable_metrics_endpoint: bool = Field(default=True, alias="ENABLE_METRICS_ENDPOINT")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
