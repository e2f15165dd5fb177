"""Monster AI resolution.

Each AI-driven entity acts once per player turn, in roster slot order.

- ``BasicAi``: when the monster stands in the player's field of view it
  walks toward the player, or attacks once adjacent.
- ``ConfusedAi``: staggers one random step (possibly staying put) whether
  or not it can see the player. After ``turns_remaining + 1`` activations
  the previous AI is restored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dungeon_crawl.core import constants as c
from dungeon_crawl.core.logging import get_logger
from dungeon_crawl.engine.combat import attack
from dungeon_crawl.models.entities import BasicAi, ConfusedAi


if TYPE_CHECKING:
    from dungeon_crawl.engine.context import GameContext
    from dungeon_crawl.models.entities import Entity

logger = get_logger(__name__)


def is_cell_free(x: int, y: int, ctx: "GameContext") -> bool:
    """Walkable terrain with no blocking entity on it."""
    if ctx.state.tile_grid.is_blocked(x, y):
        return False
    return ctx.roster.blocking_at(x, y) is None


def move(entity: "Entity", dx: int, dy: int, ctx: "GameContext") -> bool:
    """Step by (dx, dy) if the destination is free.

    Returns:
        True if the entity moved.
    """
    x, y = entity.x + dx, entity.y + dy
    if (dx, dy) == (0, 0) or not is_cell_free(x, y, ctx):
        return False
    entity.set_pos(x, y)
    return True


def move_towards(entity: "Entity", target_x: int, target_y: int, ctx: "GameContext") -> bool:
    """Take one step along the rounded unit vector toward a cell."""
    dx = target_x - entity.x
    dy = target_y - entity.y
    distance = entity.distance(target_x, target_y)
    if distance == 0:
        return False
    return move(entity, round(dx / distance), round(dy / distance), ctx)


def take_turn(monster: "Entity", ctx: "GameContext") -> None:
    """Run one AI activation for a monster."""
    ai = monster.ai
    if isinstance(ai, ConfusedAi):
        _confused_turn(monster, ai, ctx)
    elif isinstance(ai, BasicAi):
        _basic_turn(monster, ctx)


def _basic_turn(monster: "Entity", ctx: "GameContext") -> None:
    if not ctx.fov.is_visible(monster.x, monster.y):
        return

    player = ctx.player
    if monster.distance_to(player) >= 2:
        move_towards(monster, player.x, player.y, ctx)
    elif player.alive and player.fighter is not None:
        attack(monster, player, ctx)


def _confused_turn(monster: "Entity", ai: ConfusedAi, ctx: "GameContext") -> None:
    move(monster, ctx.rng.randint(-1, 1), ctx.rng.randint(-1, 1), ctx)

    if ai.turns_remaining > 0:
        ai.turns_remaining -= 1
        return

    monster.ai = ai.previous
    ctx.log(f"The {monster.name} is no longer confused!", c.RED)
    logger.debug("Confusion wore off", monster=monster.name)


__all__ = [
    "is_cell_free",
    "move",
    "move_towards",
    "take_turn",
]
