"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        DungeonCrawlError: Base exception for all application errors.
        GenerationError: Map generation could not place a single room.
        PersistenceError: Save file errors.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        start_game_context: Replace the context with a new game's.
"""

from __future__ import annotations

from dungeon_crawl.core.config import (
    FovSettings,
    GameSettings,
    MapSettings,
    Settings,
    StorageSettings,
    UISettings,
    clear_settings_cache,
    get_settings,
)
from dungeon_crawl.core.exceptions import (
    CombatError,
    ConfigurationError,
    DungeonCrawlError,
    GameEngineError,
    GenerationError,
    InvalidGameStateError,
    PersistenceError,
    SaveGameCorruptError,
    SaveGameNotFoundError,
    ValidationError,
)
from dungeon_crawl.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
    start_game_context,
)


__all__ = [
    # Base exception
    "DungeonCrawlError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "GenerationError",
    # Persistence exceptions
    "PersistenceError",
    "SaveGameNotFoundError",
    "SaveGameCorruptError",
    # Configuration
    "Settings",
    "MapSettings",
    "FovSettings",
    "GameSettings",
    "UISettings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "start_game_context",
]
