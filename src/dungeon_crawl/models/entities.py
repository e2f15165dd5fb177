"""Entity models: the single polymorphic record for actors and items.

An Entity is anything that sits on the map or in the inventory: the
player, monsters, items, the stairs. Optional components give it
capabilities:

- ``fighter``: can attack and be attacked
- ``ai``: acts on its own each turn
- ``item``: can be picked up and used
- ``equipment``: can be equipped for stat bonuses

Entities are mutated in place by the engine. The AI state is a closed,
depth-1 tagged variant: a confused monster remembers the basic AI it had
before, and confusion never nests.
"""

from __future__ import annotations

import math
from typing import Annotated, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from dungeon_crawl.core import constants as c
from dungeon_crawl.models.enums import DeathBehavior, EquipmentSlot, ItemKind, MonsterKind


# =============================================================================
# Components
# =============================================================================


class Component(BaseModel):
    """Base class for entity components."""

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        extra="ignore",
    )


class Fighter(Component):
    """Combat stats.

    ``hp`` may go below zero while damage is applied; death is triggered
    the moment it reaches zero or less. Max HP, defense and power here are
    BASE values; see ``dungeon_crawl.engine.inventory`` for effective ones.
    """

    base_max_hp: int = Field(ge=1, description="Base maximum hit points")
    hp: int = Field(description="Current hit points")
    base_defense: int = Field(default=0, description="Base defense")
    base_power: int = Field(default=0, description="Base attack power")
    xp: int = Field(default=0, ge=0, description="Experience held or awarded on death")
    on_death: DeathBehavior = Field(default=DeathBehavior.MONSTER)


class BasicAi(Component):
    """Chase the player when seen, attack when adjacent."""

    kind: Literal["basic"] = "basic"


class ConfusedAi(Component):
    """Stumble around at random, then go back to ``previous``."""

    kind: Literal["confused"] = "confused"
    previous: BasicAi = Field(default_factory=BasicAi)
    turns_remaining: int = Field(ge=0)


AiState = Annotated[BasicAi | ConfusedAi, Field(discriminator="kind")]


class Equipment(Component):
    """An item that can be equipped to yield bonuses."""

    slot: EquipmentSlot
    equipped: bool = False
    power_bonus: int = 0
    defense_bonus: int = 0
    max_hp_bonus: int = 0


# =============================================================================
# Entity
# =============================================================================


class Entity(Component):
    """A generic map object: the player, a monster, an item, the stairs."""

    uid: UUID = Field(default_factory=uuid4, description="Stable handle")
    x: int = 0
    y: int = 0
    glyph: str = Field(min_length=1, max_length=1)
    color: c.Color = c.WHITE
    name: str
    blocks: bool = Field(default=False, description="Blocks movement")
    alive: bool = False
    fighter: Fighter | None = None
    ai: AiState | None = None
    item: ItemKind | None = None
    equipment: Equipment | None = None
    always_visible: bool = Field(default=False, description="Drawn once its tile is explored")
    level: int = Field(default=1, ge=1)

    @property
    def pos(self) -> tuple[int, int]:
        return self.x, self.y

    def set_pos(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def distance_to(self, other: "Entity") -> float:
        """Euclidean distance to another entity."""
        return self.distance(other.x, other.y)

    def distance(self, x: int, y: int) -> float:
        return math.hypot(x - self.x, y - self.y)


# =============================================================================
# Factory Functions
# =============================================================================


MONSTER_TEMPLATES: dict[MonsterKind, dict] = {
    MonsterKind.ORC: {
        "glyph": "o",
        "color": c.DESATURATED_GREEN,
        "hp": 20,
        "defense": 0,
        "power": 4,
        "xp": 35,
    },
    MonsterKind.TROLL: {
        "glyph": "T",
        "color": c.DARKER_GREEN,
        "hp": 30,
        "defense": 2,
        "power": 8,
        "xp": 100,
    },
}

ITEM_TEMPLATES: dict[ItemKind, dict] = {
    ItemKind.HEAL: {"glyph": "!", "name": "healing potion", "color": c.VIOLET},
    ItemKind.LIGHTNING: {
        "glyph": "#",
        "name": "scroll of lightning bolt",
        "color": c.LIGHT_YELLOW,
    },
    ItemKind.FIREBALL: {"glyph": "#", "name": "scroll of fireball", "color": c.LIGHT_YELLOW},
    ItemKind.CONFUSE: {"glyph": "#", "name": "scroll of confusion", "color": c.LIGHT_YELLOW},
    ItemKind.SWORD: {
        "glyph": "/",
        "name": "sword",
        "color": c.SKY,
        "equipment": {"slot": EquipmentSlot.RIGHT_HAND, "power_bonus": 3},
    },
    ItemKind.SHIELD: {
        "glyph": "[",
        "name": "shield",
        "color": c.DARKER_ORANGE,
        "equipment": {"slot": EquipmentSlot.LEFT_HAND, "defense_bonus": 1},
    },
    ItemKind.DAGGER: {
        "glyph": "-",
        "name": "dagger",
        "color": c.SKY,
        "equipment": {"slot": EquipmentSlot.LEFT_HAND, "power_bonus": 2},
    },
}


def create_player(x: int = 0, y: int = 0, name: str = "player") -> Entity:
    """Create the player entity with its starting stats."""
    return Entity(
        x=x,
        y=y,
        glyph=c.PLAYER_GLYPH,
        color=c.WHITE,
        name=name,
        blocks=True,
        alive=True,
        fighter=Fighter(
            base_max_hp=100,
            hp=100,
            base_defense=1,
            base_power=2,
            xp=0,
            on_death=DeathBehavior.PLAYER,
        ),
    )


def create_monster(kind: MonsterKind, x: int = 0, y: int = 0) -> Entity:
    """Create a monster of the given species."""
    template = MONSTER_TEMPLATES[kind]
    return Entity(
        x=x,
        y=y,
        glyph=template["glyph"],
        color=template["color"],
        name=kind.value,
        blocks=True,
        alive=True,
        fighter=Fighter(
            base_max_hp=template["hp"],
            hp=template["hp"],
            base_defense=template["defense"],
            base_power=template["power"],
            xp=template["xp"],
            on_death=DeathBehavior.MONSTER,
        ),
        ai=BasicAi(),
    )


def create_item(kind: ItemKind, x: int = 0, y: int = 0) -> Entity:
    """Create an item lying at the given position."""
    template = ITEM_TEMPLATES[kind]
    equipment = template.get("equipment")
    return Entity(
        x=x,
        y=y,
        glyph=template["glyph"],
        color=template["color"],
        name=template["name"],
        item=kind,
        equipment=Equipment(**equipment) if equipment else None,
    )


def create_stairs(x: int, y: int) -> Entity:
    return Entity(
        x=x,
        y=y,
        glyph=c.STAIRS_GLYPH,
        color=c.WHITE,
        name="stairs",
        always_visible=True,
    )


__all__ = [
    "Component",
    "Fighter",
    "BasicAi",
    "ConfusedAi",
    "AiState",
    "Equipment",
    "Entity",
    "MONSTER_TEMPLATES",
    "ITEM_TEMPLATES",
    "create_player",
    "create_monster",
    "create_item",
    "create_stairs",
]
