"""
Pydantic Settings: centralized configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Application ───────────────────────────
    APP_ENV: str = "development"

    # ── Logging ───────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ── Database ──────────────────────────────
    DATABASE_PATH: str = "./database/users.db"
    DB_ECHO: bool = False

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
