"""dungeon_crawl - simulation core of a turn-based dungeon crawler.

Procedural rooms-and-corridors levels, a field-of-view gated turn loop,
melee and spell combat, monster AI with confusion, and an inventory with
equipment slots. Drawing and input polling stay outside: the engine
pulls events from an ``InputSource`` and pushes ``RenderSnapshot`` frames
to a ``Presenter``.

Example:
    >>> from dungeon_crawl import TurnEngine, configure_logging
    >>>
    >>> configure_logging(level="DEBUG")
    >>> engine = TurnEngine.new_game(input_source=keyboard, presenter=screen)
    >>> result = engine.play()
    >>> result.saved
    True

Modules:
    core: Configuration, logging, constants and base exceptions.
    models: Pydantic V2 models for tiles, entities and game state.
    engine: Generation, visibility, combat, AI, inventory and the turn loop.
    storage: SQLite save slot.
"""

from __future__ import annotations

# Core
from dungeon_crawl.core.config import Settings, get_settings
from dungeon_crawl.core.exceptions import DungeonCrawlError
from dungeon_crawl.core.logging import configure_logging, get_logger

# Models
from dungeon_crawl.models import (
    Entity,
    EntityRoster,
    GameState,
    TileGrid,
    create_item,
    create_monster,
    create_player,
)

# Engine
from dungeon_crawl.engine import (
    InputEvent,
    InputKind,
    MapGenerator,
    PlayerAction,
    PlayResult,
    RenderSnapshot,
    TurnEngine,
    VisibilityEngine,
    main_menu,
)

# Storage
from dungeon_crawl.storage import SaveGameStore, get_save_store


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "DungeonCrawlError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Entity",
    "EntityRoster",
    "GameState",
    "TileGrid",
    "create_item",
    "create_monster",
    "create_player",
    # Engine
    "InputEvent",
    "InputKind",
    "MapGenerator",
    "PlayerAction",
    "PlayResult",
    "RenderSnapshot",
    "TurnEngine",
    "VisibilityEngine",
    "main_menu",
    # Storage
    "SaveGameStore",
    "get_save_store",
]
