"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the ledger service."""

    app_name: str = "floor_ledger API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    log_level: str = getenv("LOG_LEVEL", "INFO")
    database_url: str = getenv("DATABASE_URL", "sqlite:///./floor_ledger.db")
    state_key: str = getenv("LEDGER_STATE_KEY", "root")
    seed_default_tables: bool = getenv("SEED_DEFAULT_TABLES", "1") == "1"
    ticket_output_dir: str = getenv("TICKET_OUTPUT_DIR", "data/tickets")
    ticket_font_path: str | None = getenv("TICKET_FONT_PATH") or None


settings: Settings = Settings()
