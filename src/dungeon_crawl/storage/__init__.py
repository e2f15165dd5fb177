"""Storage module for dungeon_crawl persistence.

Provides a SQLite-backed single save slot holding the entity roster and
the game state as one document.
"""

from dungeon_crawl.storage.database import SaveGameStore, get_save_store

__all__ = [
    "SaveGameStore",
    "get_save_store",
]
