
from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables / .env file."""

    app_name: str = "PropComply API"
    app_env: str = "development"
    app_port: int = 8000
    frontend_url: str = "http://localhost:3000"

    # Database (SQLite for local dev, any async SQLAlchemy URL in production)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./propcomply_dev.db",
        alias="DATABASE_URL",
    )
    sql_echo: bool = Field(default=False, alias="SQL_ECHO")
    auto_create_schema: bool = Field(
        default=False, alias="AUTO_CREATE_SCHEMA",
    )  # create tables on startup instead of running Alembic (local dev only)

    # Multi-tenancy default
    default_client_id: str = Field(default="default", alias="DEFAULT_CLIENT_ID")

    # Compliance rules
    default_jurisdiction: str = Field(
        default="UK", alias="DEFAULT_JURISDICTION",
    )  # used when a property's jurisdiction code is unknown
    expiring_soon_days: int = Field(
        default=90, ge=1, alias="EXPIRING_SOON_DAYS",
    )  # warning window before expiry
    derive_missing_expiry: bool = Field(
        default=True, alias="DERIVE_MISSING_EXPIRY",
    )  # fill expiry from the renewal cadence when none is submitted
    catalog_path: str | None = Field(
        default=None, alias="CATALOG_PATH",
    )  # JSON catalog replacing the built-in one

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
    }

settings = Settings()
