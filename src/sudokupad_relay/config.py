from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime config.

    - Loaded from environment variables (`SUDOKUPAD_RELAY_*`)
    - Also reads `.env` if present (via pydantic-settings + python-dotenv)
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="SUDOKUPAD_RELAY_", extra="ignore")

    # Puzzle host; channels live at `{base_url}{channel_prefix}{channel}`
    base_url: str = "https://sudokupad.app/"
    channel_prefix: str = "sudokucon/"
    upload_timeout_s: float = 10.0

    # Initial relay policy (both stay mutable at runtime)
    send_pointer: bool = True
    show_pointers: bool = True

    # Web app
    host: str = "127.0.0.1"
    port: int = 8000

    # Debugging
    log_level: str = "INFO"
    debug_log_msgs: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
