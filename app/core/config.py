from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    All config comes from the environment or a .env file.
    Values in .env apply everywhere.
    """

    # ── Database ──────────────────────────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/takip.db"   # async driver, used by FastAPI
    DATABASE_SYNC_URL: str = "sqlite:///./data/takip.db"        # sync driver, used only by Alembic

    # ── JWT ───────────────────────────────────────────────
    SECRET_KEY: str = "change-this-secret-key"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 7 * 24 * 60
    COOKIE_NAME: str = "token"
    COOKIE_SECURE: bool = False

    # ── CORS ──────────────────────────────────────────────
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    # ── App ───────────────────────────────────────────────
    APP_ENV: str = "production"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── Study tracking ────────────────────────────────────
    # Hours of study after which a topic counts as 100% complete
    TOPIC_TARGET_HOURS: float = 10.0
    DASHBOARD_WINDOW_DAYS: int = 30
    SEARCH_MIN_QUERY_LENGTH: int = 2
    SEARCH_RESULT_LIMIT: int = 20
    # True  → one row per (student, date, topic)
    # False → one row per (student, date), a second topic overwrites the first
    STUDY_SESSION_UPSERT_BY_TOPIC: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def origins_list(self) -> list[str]:
        """Splits comma-separated ALLOWED_ORIGINS into a list."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()


# Single instance used across the entire app
settings = get_settings()
