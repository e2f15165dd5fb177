"""Game state containers.

- ``EntityRoster`` owns every entity on the current map and knows which
  one is the player. Slot order is the AI turn order.
- ``GameState`` owns the tile grid, the in-game message log, the player's
  inventory and the dungeon depth.
- ``SaveGame`` bundles both as the single unit that is persisted.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dungeon_crawl.core import constants as c
from dungeon_crawl.core.exceptions import InvalidGameStateError
from dungeon_crawl.models.entities import Entity
from dungeon_crawl.models.enums import EquipmentSlot
from dungeon_crawl.models.tiles import TileGrid


# =============================================================================
# Message Log
# =============================================================================


class Message(BaseModel):
    """One line of the in-game message log."""

    model_config = ConfigDict(frozen=True)

    text: str
    color: c.Color = c.WHITE


class MessageLog(BaseModel):
    """Ordered in-game messages, oldest first, keeping the newest
    ``MAX_STORED_MESSAGES``."""

    entries: list[Message] = Field(default_factory=list)

    def add(self, text: str, color: c.Color = c.WHITE) -> None:
        self.entries.append(Message(text=text, color=color))
        if len(self.entries) > c.MAX_STORED_MESSAGES:
            del self.entries[: -c.MAX_STORED_MESSAGES]

    def tail(self, count: int) -> list[Message]:
        """The ``count`` most recent messages, oldest first."""
        if count <= 0:
            return []
        return self.entries[-count:]

    def texts(self) -> list[str]:
        return [entry.text for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


# =============================================================================
# Entity Roster
# =============================================================================


class EntityRoster(BaseModel):
    """Owning container for the entities of the current map.

    The player is identified by handle, not by position in the list.
    """

    model_config = ConfigDict(validate_assignment=True)

    entities: list[Entity] = Field(default_factory=list)
    player_uid: UUID

    @model_validator(mode="after")
    def validate_player_present(self) -> "EntityRoster":
        if not any(entity.uid == self.player_uid for entity in self.entities):
            raise ValueError("player_uid must reference an entity in the roster")
        return self

    @classmethod
    def with_player(cls, player: Entity, others: list[Entity] | None = None) -> "EntityRoster":
        """Build a roster with the player in the first slot."""
        return cls(entities=[player, *(others or [])], player_uid=player.uid)

    @property
    def player(self) -> Entity:
        for entity in self.entities:
            if entity.uid == self.player_uid:
                return entity
        raise InvalidGameStateError("Player is missing from the roster")

    def is_player(self, entity: Entity) -> bool:
        return entity.uid == self.player_uid

    def get(self, uid: UUID) -> Entity | None:
        for entity in self.entities:
            if entity.uid == uid:
                return entity
        return None

    def add(self, entity: Entity) -> None:
        self.entities.append(entity)

    def remove(self, entity: Entity) -> None:
        """Remove an entity from the map.

        Raises:
            InvalidGameStateError: When asked to remove the player.
        """
        if self.is_player(entity):
            raise InvalidGameStateError("The player cannot be removed from the map")
        self.entities = [e for e in self.entities if e.uid != entity.uid]

    def at(self, x: int, y: int) -> list[Entity]:
        return [entity for entity in self.entities if entity.pos == (x, y)]

    def blocking_at(self, x: int, y: int) -> Entity | None:
        for entity in self.entities:
            if entity.blocks and entity.pos == (x, y):
                return entity
        return None

    def fighter_at(self, x: int, y: int) -> Entity | None:
        """The first entity at a cell that can be attacked."""
        for entity in self.entities:
            if entity.fighter is not None and entity.pos == (x, y):
                return entity
        return None

    def item_at(self, x: int, y: int) -> Entity | None:
        for entity in self.entities:
            if entity.item is not None and entity.pos == (x, y):
                return entity
        return None

    def ai_entities(self) -> list[Entity]:
        """Entities that act on their own, in slot order."""
        return [
            entity
            for entity in self.entities
            if entity.ai is not None and not self.is_player(entity)
        ]

    def pair(self, first: Entity, second: Entity) -> tuple[Entity, Entity]:
        """Return two distinct entities to be mutated together.

        Raises:
            InvalidGameStateError: If both handles are the same entity.
        """
        if first.uid == second.uid:
            raise InvalidGameStateError(
                "An entity cannot interact with itself",
                details={"entity": first.name},
            )
        return first, second

    def send_to_back(self, entity: Entity) -> None:
        """Move an entity to the start of the list so it is drawn first."""
        self.entities = [entity] + [e for e in self.entities if e.uid != entity.uid]

    def truncate_to_player(self) -> None:
        """Drop everything but the player (used when changing level)."""
        self.entities = [self.player]

    def __len__(self) -> int:
        return len(self.entities)


# =============================================================================
# Game State
# =============================================================================


class GameState(BaseModel):
    """Map, messages, inventory and depth for the running game."""

    model_config = ConfigDict(validate_assignment=True)

    tile_grid: TileGrid
    messages: MessageLog = Field(default_factory=MessageLog)
    inventory: list[Entity] = Field(default_factory=list)
    dungeon_level: int = Field(default=1, ge=1)

    def log(self, text: str, color: c.Color = c.WHITE) -> None:
        self.messages.add(text, color)

    def equipped_items(self) -> list[Entity]:
        return [
            item
            for item in self.inventory
            if item.equipment is not None and item.equipment.equipped
        ]

    def equipped_in_slot(self, slot: EquipmentSlot) -> Entity | None:
        for item in self.equipped_items():
            if item.equipment.slot == slot:
                return item
        return None


# =============================================================================
# Save Game
# =============================================================================


class SaveGame(BaseModel):
    """Everything persisted by save/load, as one unit."""

    roster: EntityRoster
    state: GameState
    saved_at: datetime = Field(default_factory=datetime.now)


__all__ = [
    "Message",
    "MessageLog",
    "EntityRoster",
    "GameState",
    "SaveGame",
]
