"""
Application Configuration.

Pydantic Settings model for House Life Notes.
All configuration is loaded from environment variables and .env files.
Inject an AppConfig instance via dependency injection where needed.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    """Central configuration loaded from environment variables and defaults."""

    # --- Hosted backend (Supabase) ---
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: SecretStr = SecretStr("")

    # --- Local store (preferences + audit log) ---
    LOCAL_DB_PATH: str = "house_notes_local.db"

    # --- Logging ---
    LOG_FILE: str = "house_notes.log"
    LOG_MAX_BYTES: int = 5_242_880  # 5 MB
    LOG_BACKUP_COUNT: int = 3

    # --- Attachments (inline data URIs) ---
    ATTACHMENT_MAX_FILES: int = Field(default=10, ge=1)
    ATTACHMENT_MAX_SIZE_MB: int = Field(default=5, ge=1)

    # --- Cost aggregation fan-out ---
    AGGREGATION_MAX_WORKERS: int = Field(default=4, ge=1)

    # --- Account ---
    MIN_PASSWORD_LENGTH: int = Field(default=6, ge=1)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _warn_missing_env(self) -> "AppConfig":
        """Emit a startup warning when critical configuration is empty."""
        _log = logging.getLogger("house_notes.config")

        if not Path(".env").exists():
            _log.warning(
                "No .env file found; all configuration loaded from "
                "environment variables or defaults."
            )

        if not self.SUPABASE_URL or not self.SUPABASE_ANON_KEY.get_secret_value():
            _log.warning(
                "SUPABASE_URL or SUPABASE_ANON_KEY is empty. Records cannot "
                "be read or saved until the hosted backend is configured."
            )

        return self

    @property
    def attachment_max_bytes(self) -> int:
        """Per-file attachment cap in bytes."""
        return self.ATTACHMENT_MAX_SIZE_MB * 1024 * 1024


# ---------------------------------------------------------------------------
# Module-level singleton factory
# ---------------------------------------------------------------------------

_config_instance: Optional[AppConfig] = None
_config_lock: threading.Lock = threading.Lock()


def get_config() -> AppConfig:
    """Return a cached ``AppConfig`` singleton.

    On first call, creates an ``AppConfig`` instance (reading from ``.env``).
    Subsequent calls return the same instance.  Uses a check-lock-check
    pattern so the lock is only taken during first initialisation.

    Prefer direct constructor injection of ``AppConfig`` in new code.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = AppConfig()
    return _config_instance
