from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "shop_test"
    db_username: str = "postgres"
    db_password: str = "secret"
    db_schema: str = "public"

    # Replaces the bundled base document when set
    anonymization_config_path: Path | None = None

    # Emptied with DELETE after anonymization, e.g. search indexes
    purge_tables: list[str] = []
