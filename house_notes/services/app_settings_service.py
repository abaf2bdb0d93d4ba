"""
Application Settings Service.

Read/write access to the ``app_settings`` key-value table in the local
SQLite database.  Provides typed getters for known settings and a
generic get/set for anything else.

This is a documented exception to the Repository pattern because
``app_settings`` stores per-installation preferences, not house records.

The delete-confirmation flag is global and never expires: once the user
ticks "don't show this again" it applies to every item type until
:meth:`AppSettingsService.reset_delete_confirmation` is called.
"""

from __future__ import annotations

import sqlite3
from typing import Optional

from house_notes.database import DatabaseManager
from house_notes.logger import StructuredLogger

KEY_HIDE_DELETE_CONFIRMATION: str = "hideDeleteConfirmation"


class AppSettingsService:
    """Manages persistent application preferences in local SQLite.

    Parameters
    ----------
    db:
        Initialised ``DatabaseManager`` with active SQLite connection.
    logger:
        Structured logger instance.
    """

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        self._db = db
        self._logger = logger

    # ------------------------------------------------------------------
    # Generic key-value access
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[str]:
        """Read a setting value by key.  Returns ``None`` if not found."""
        try:
            row = self._db.sqlite.execute(
                "SELECT value FROM app_settings WHERE key = ?",
                (key,),
            ).fetchone()
            return row["value"] if row is not None else None
        except sqlite3.Error as exc:
            self._logger.warning("Failed to read app_settings[%s]: %s", key, exc)
            return None

    def set(self, key: str, value: str) -> bool:
        """Upsert a setting value.  Returns ``True`` on success."""
        try:
            with self._db.write_lock:
                self._db.sqlite.execute(
                    """
                    INSERT INTO app_settings (key, value)
                    VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value      = excluded.value,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (key, value),
                )
                self._db.sqlite.commit()
            self._logger.info("app_settings[%s] updated.", key)
            return True
        except sqlite3.Error as exc:
            self._logger.error("Failed to write app_settings[%s]: %s", key, exc)
            return False

    def delete(self, key: str) -> bool:
        """Remove a setting.  Returns ``True`` on success."""
        try:
            with self._db.write_lock:
                self._db.sqlite.execute(
                    "DELETE FROM app_settings WHERE key = ?", (key,)
                )
                self._db.sqlite.commit()
            self._logger.info("app_settings[%s] cleared.", key)
            return True
        except sqlite3.Error as exc:
            self._logger.error("Failed to clear app_settings[%s]: %s", key, exc)
            return False

    # ------------------------------------------------------------------
    # Typed convenience: delete confirmation
    # ------------------------------------------------------------------

    def should_show_delete_confirmation(self) -> bool:
        """``False`` once the user has asked not to be warned again."""
        return self.get(KEY_HIDE_DELETE_CONFIRMATION) != "true"

    def suppress_delete_confirmation(self) -> bool:
        return self.set(KEY_HIDE_DELETE_CONFIRMATION, "true")

    def reset_delete_confirmation(self) -> bool:
        """Show the delete warning again."""
        return self.delete(KEY_HIDE_DELETE_CONFIRMATION)
