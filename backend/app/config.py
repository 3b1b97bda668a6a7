"""
Application configuration loaded from environment variables via pydantic-settings.
All settings are validated at startup — a missing Finnhub key fails fast and loudly.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

_DEFAULT_STATIC_DIR = Path(__file__).resolve().parent.parent / "public"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Finnhub ────────────────────────────────────────────────────────────
    finnhub_api_key: str = Field(alias="FINNHUB_API_KEY")

    # ── Database ───────────────────────────────────────────────────────────
    # DATABASE_URL wins when set; otherwise the URL is built from PG* vars.
    database_url: str = Field(default="", alias="DATABASE_URL")
    pghost: str = Field(default="localhost", alias="PGHOST")
    pgport: int = Field(default=5432, alias="PGPORT")
    pguser: str = Field(default="", alias="PGUSER")
    pgpassword: str = Field(default="", alias="PGPASSWORD")
    pgdatabase: str = Field(default="", alias="PGDATABASE")
    db_create_tables: bool = Field(default=False, alias="DB_CREATE_TABLES")

    # ── App config ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=4000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    static_dir: Path = Field(default=_DEFAULT_STATIC_DIR, alias="STATIC_DIR")

    @field_validator("finnhub_api_key")
    @classmethod
    def validate_finnhub_api_key(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("FINNHUB_API_KEY is not set")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}")
        return upper

    @property
    def sqlalchemy_url(self) -> str | URL:
        """Async driver URL for the watchlist store."""
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+asyncpg",
            username=self.pguser or None,
            password=self.pgpassword or None,
            host=self.pghost,
            port=self.pgport,
            database=self.pgdatabase or None,
        )

    @property
    def libpq_dsn(self) -> str:
        """Same target as sqlalchemy_url, in the plain postgresql:// form asyncpg.connect takes."""
        url = make_url(self.sqlalchemy_url).set(drivername="postgresql")
        return url.render_as_string(hide_password=False)

    def finnhub_configured(self) -> bool:
        """True unless the key is still the .env.example placeholder."""
        return not self.finnhub_api_key.startswith("your-")


@lru_cache
def get_settings() -> Settings:
    return Settings()
