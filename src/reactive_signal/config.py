"""Configuration loaded from environment variables."""
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Logging configuration for embedding applications.

    Signal and reactive behaviour is fixed; only diagnostics are tunable.

    Attributes:
        debug: Emit debug-level events (listener bookkeeping, changes).
        log_format: Renderer used by configure_logging.
    """

    model_config = SettingsConfigDict(
        env_prefix="REACTIVE_SIGNAL_",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False
    log_format: Literal["json", "console"] = "json"
