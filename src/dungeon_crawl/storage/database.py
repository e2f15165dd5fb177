"""SQLite persistence for the single save slot.

The entity roster and the game state are saved together as one
``SaveGame`` document (pydantic JSON) in a one-row table. Loading either
yields exactly that pair or raises a ``PersistenceError`` subclass the
caller can report as "no saved game" and carry on.

Storage location: ``settings.storage.save_path`` (``savegame.db``).
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Generator

from pydantic import ValidationError as PydanticValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from dungeon_crawl.core.config import get_settings
from dungeon_crawl.core.exceptions import (
    PersistenceError,
    SaveGameCorruptError,
    SaveGameNotFoundError,
)
from dungeon_crawl.core.logging import get_logger
from dungeon_crawl.models.game_state import SaveGame


if TYPE_CHECKING:
    from dungeon_crawl.models.game_state import EntityRoster, GameState

logger = get_logger(__name__)

SLOT_ID = 1


class SaveGameStore:
    """Single-slot save file backed by SQLite."""

    SCHEMA_VERSION = 1

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(str(self.path))
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self, conn: sqlite3.Connection) -> None:
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS save_slot (
                slot_id INTEGER PRIMARY KEY,
                schema_version INTEGER NOT NULL,
                saved_at TEXT NOT NULL,
                payload TEXT NOT NULL
            )
        """)

    @retry(
        retry=retry_if_exception_type(sqlite3.OperationalError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, max=1),
        reraise=True,
    )
    def _write(self, save: SaveGame) -> None:
        """Write the slot, retrying while the database is locked."""
        with self._get_connection() as conn:
            self._init_schema(conn)
            conn.execute(
                """
                INSERT OR REPLACE INTO save_slot (slot_id, schema_version, saved_at, payload)
                VALUES (?, ?, ?, ?)
                """,
                (SLOT_ID, self.SCHEMA_VERSION, save.saved_at.isoformat(), save.model_dump_json()),
            )

    def save(self, roster: "EntityRoster", state: "GameState") -> SaveGame:
        """Persist the roster and the game state as one unit.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        save = SaveGame(roster=roster, state=state, saved_at=datetime.now())
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write(save)
        except (sqlite3.Error, OSError) as exc:
            logger.error("Failed to save game", path=str(self.path), error=str(exc))
            raise PersistenceError(f"Could not write save file: {exc}", path=self.path) from exc

        logger.info(
            "Game saved",
            path=str(self.path),
            dungeon_level=state.dungeon_level,
            entities=len(roster),
        )
        return save

    def load(self) -> tuple["EntityRoster", "GameState"]:
        """Read back the saved roster and game state.

        Raises:
            SaveGameNotFoundError: If there is no save file or no saved game in it.
            SaveGameCorruptError: If the save exists but cannot be decoded.
        """
        if not self.path.is_file():
            raise SaveGameNotFoundError("No saved game to load.", path=self.path)

        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT payload FROM save_slot WHERE slot_id = ?", (SLOT_ID,)
                ).fetchone()
        except sqlite3.DatabaseError as exc:
            raise SaveGameCorruptError(f"Unreadable save file: {exc}", path=self.path) from exc

        if row is None:
            raise SaveGameNotFoundError("No saved game to load.", path=self.path)

        try:
            save = SaveGame.model_validate_json(row[0])
        except PydanticValidationError as exc:
            raise SaveGameCorruptError(
                "Save file does not contain a valid game",
                path=self.path,
                details={"errors": exc.error_count()},
            ) from exc

        logger.info("Game loaded", path=str(self.path), saved_at=save.saved_at.isoformat())
        return save.roster, save.state

    def exists(self) -> bool:
        """Whether a saved game can be loaded."""
        if not self.path.is_file():
            return False
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT COUNT(*) FROM save_slot WHERE slot_id = ?", (SLOT_ID,)
                ).fetchone()
        except sqlite3.DatabaseError as exc:
            logger.warning("Save file is unreadable", path=str(self.path), error=str(exc))
            return False
        return bool(row and row[0])

    def delete(self) -> None:
        """Remove the save file, if any."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Could not delete save file: {exc}", path=self.path) from exc
        logger.info("Save file deleted", path=str(self.path))


# =============================================================================
# Singleton Instance
# =============================================================================


_store_instance: SaveGameStore | None = None


def get_save_store() -> SaveGameStore:
    """Get the global save store on the configured save path.

    Returns:
        SaveGameStore singleton instance.
    """
    global _store_instance

    if _store_instance is None:
        _store_instance = SaveGameStore(get_settings().storage.save_path)

    return _store_instance


__all__ = [
    "SaveGameStore",
    "get_save_store",
]
