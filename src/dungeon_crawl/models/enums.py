"""Enumeration types for the dungeon_crawl simulation core.

These enums are closed tagged variants: every switch over them is
explicit at the call site, including death behaviour.
"""

from __future__ import annotations

from enum import StrEnum


class DeathBehavior(StrEnum):
    """What happens when a fighter's HP drops to zero or below."""

    PLAYER = "player"
    """Cosmetic corpse transform; the game keeps running."""

    MONSTER = "monster"
    """Corpse transform, stops blocking, loses fighter and AI."""


class EquipmentSlot(StrEnum):
    """Where an equipment item is worn."""

    LEFT_HAND = "left hand"
    RIGHT_HAND = "right hand"
    HEAD = "head"


class ItemKind(StrEnum):
    """What an item does when used."""

    HEAL = "heal"
    LIGHTNING = "lightning"
    CONFUSE = "confuse"
    FIREBALL = "fireball"
    SWORD = "sword"
    SHIELD = "shield"
    DAGGER = "dagger"


class MonsterKind(StrEnum):
    """Spawnable monster species."""

    ORC = "orc"
    TROLL = "troll"


class UseResult(StrEnum):
    """Outcome of using an inventory item."""

    USED_UP = "used_up"
    """The item was consumed and leaves the inventory."""

    CANCELLED = "cancelled"
    """Nothing happened; the item stays."""

    KEPT = "kept"
    """The item did something but is not consumed (equip toggles)."""


class StatChoice(StrEnum):
    """Stat raised on level up."""

    CONSTITUTION = "constitution"
    STRENGTH = "strength"
    AGILITY = "agility"


__all__ = [
    "DeathBehavior",
    "EquipmentSlot",
    "ItemKind",
    "MonsterKind",
    "UseResult",
    "StatChoice",
]
