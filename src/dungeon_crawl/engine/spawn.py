"""Depth-scaled spawn tables.

Counts and weights are piecewise-constant functions of dungeon depth,
written as ascending ``(level, value)`` transitions: the value at depth
*d* is the value of the last transition whose level is <= *d*, or 0.
"""

from __future__ import annotations

import random
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from typing import TypeVar

from dungeon_crawl.models.enums import ItemKind, MonsterKind


K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class Transition:
    """Value that applies from ``level`` downward."""

    level: int
    value: int


def from_dungeon_level(table: list[Transition], level: int) -> int:
    """Return the value that applies at a given depth."""
    for transition in reversed(table):
        if level >= transition.level:
            return transition.value
    return 0


def random_choice(chances: Mapping[K, int], rng: random.Random) -> K | None:
    """Pick one key, weighted by its chance.

    Returns:
        The chosen key, or None when every chance is zero.
    """
    total = sum(chance for chance in chances.values() if chance > 0)
    if total <= 0:
        return None

    dice = rng.randint(1, total)
    running_sum = 0
    for key, chance in chances.items():
        if chance <= 0:
            continue
        running_sum += chance
        if dice <= running_sum:
            return key
    return None


# =============================================================================
# Tables
# =============================================================================

MAX_MONSTERS_TABLE = [Transition(1, 2), Transition(4, 3), Transition(6, 5)]

MONSTER_CHANCE_TABLES: dict[MonsterKind, list[Transition]] = {
    MonsterKind.ORC: [Transition(1, 80)],
    MonsterKind.TROLL: [Transition(3, 15), Transition(5, 30), Transition(7, 60)],
}

MAX_ITEMS_TABLE = [Transition(1, 1), Transition(4, 2)]

ITEM_CHANCE_TABLES: dict[ItemKind, list[Transition]] = {
    ItemKind.HEAL: [Transition(1, 35)],
    ItemKind.LIGHTNING: [Transition(4, 25)],
    ItemKind.FIREBALL: [Transition(6, 25)],
    ItemKind.CONFUSE: [Transition(2, 10)],
    ItemKind.SWORD: [Transition(4, 5)],
    ItemKind.SHIELD: [Transition(8, 15)],
}


def monster_chances(level: int) -> dict[MonsterKind, int]:
    return {kind: from_dungeon_level(table, level) for kind, table in MONSTER_CHANCE_TABLES.items()}


def item_chances(level: int) -> dict[ItemKind, int]:
    return {kind: from_dungeon_level(table, level) for kind, table in ITEM_CHANCE_TABLES.items()}


__all__ = [
    "Transition",
    "from_dungeon_level",
    "random_choice",
    "MAX_MONSTERS_TABLE",
    "MONSTER_CHANCE_TABLES",
    "MAX_ITEMS_TABLE",
    "ITEM_CHANCE_TABLES",
    "monster_chances",
    "item_chances",
]
