"""Pydantic models for the dungeon_crawl simulation core.

This package contains:
- Enums: closed variants (death behaviour, slots, item kinds)
- Tiles: Tile, Rect, TileGrid
- Entities: Entity and its Fighter/AI/Equipment components
- Game state: EntityRoster, GameState, MessageLog, SaveGame
"""

from __future__ import annotations

from dungeon_crawl.models.entities import (
    AiState,
    BasicAi,
    ConfusedAi,
    Entity,
    Equipment,
    Fighter,
    create_item,
    create_monster,
    create_player,
    create_stairs,
)
from dungeon_crawl.models.enums import (
    DeathBehavior,
    EquipmentSlot,
    ItemKind,
    MonsterKind,
    StatChoice,
    UseResult,
)
from dungeon_crawl.models.game_state import (
    EntityRoster,
    GameState,
    Message,
    MessageLog,
    SaveGame,
)
from dungeon_crawl.models.tiles import Rect, Tile, TileGrid


__all__ = [
    # Enums
    "DeathBehavior",
    "EquipmentSlot",
    "ItemKind",
    "MonsterKind",
    "StatChoice",
    "UseResult",
    # Tiles
    "Tile",
    "Rect",
    "TileGrid",
    # Entities
    "AiState",
    "BasicAi",
    "ConfusedAi",
    "Entity",
    "Equipment",
    "Fighter",
    "create_item",
    "create_monster",
    "create_player",
    "create_stairs",
    # Game state
    "EntityRoster",
    "GameState",
    "Message",
    "MessageLog",
    "SaveGame",
]
