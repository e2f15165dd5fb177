"""Combat and item effects resolution.

Damage is ``power - defense`` using effective stats. Death fires exactly
once per entity: ``take_damage`` ignores entities that are already dead,
and a dead monster loses its fighter so nothing can target it again.

Item effects return a ``UseResult`` instead of raising on cancellation,
so a cancelled scroll leaves inventory, HP and positions untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from dungeon_crawl.core import constants as c
from dungeon_crawl.core.exceptions import CombatError
from dungeon_crawl.core.logging import get_logger
from dungeon_crawl.engine.inventory import defense, max_hp, power
from dungeon_crawl.models.entities import ConfusedAi
from dungeon_crawl.models.enums import DeathBehavior, ItemKind, UseResult


if TYPE_CHECKING:
    from dungeon_crawl.engine.context import GameContext
    from dungeon_crawl.models.entities import Entity

logger = get_logger(__name__)


# =============================================================================
# Attacks and Damage
# =============================================================================


def attack(attacker: "Entity", defender: "Entity", ctx: "GameContext") -> int:
    """Resolve one melee attack.

    Returns:
        Damage dealt (0 when the attack had no effect).

    Raises:
        CombatError: If either side has no fighter component.
        InvalidGameStateError: If attacker and defender are the same entity.
    """
    attacker, defender = ctx.roster.pair(attacker, defender)
    if attacker.fighter is None or defender.fighter is None:
        raise CombatError(
            "Both sides of an attack need a fighter component",
            attacker=attacker.name,
            defender=defender.name,
        )
    if not attacker.alive:
        return 0

    damage = power(attacker, ctx) - defense(defender, ctx)
    if damage <= 0:
        ctx.log(f"{attacker.name.capitalize()} attacks {defender.name} but it has no effect!")
        return 0

    ctx.log(f"{attacker.name.capitalize()} attacks {defender.name} for {damage} hit points.")
    xp = take_damage(defender, damage, ctx)
    if xp and attacker.fighter is not None:
        attacker.fighter.xp += xp

    logger.debug(
        "Attack resolved",
        attacker=attacker.name,
        defender=defender.name,
        damage=damage,
    )
    return damage


def take_damage(entity: "Entity", amount: int, ctx: "GameContext") -> int | None:
    """Apply damage and trigger death when HP drops to zero or below.

    Returns:
        Experience awarded for the kill, or None.
    """
    if entity.fighter is None or not entity.alive:
        return None

    if amount > 0:
        entity.fighter.hp -= amount

    if entity.fighter.hp > 0:
        return None

    xp = entity.fighter.xp
    on_death = entity.fighter.on_death
    entity.alive = False

    if on_death == DeathBehavior.PLAYER:
        _player_death(entity, ctx)
        return None

    _monster_death(entity, xp, ctx)
    return xp


def _player_death(player: "Entity", ctx: "GameContext") -> None:
    ctx.log("You died!", c.RED)
    player.glyph = c.CORPSE_GLYPH
    player.color = c.DARK_RED
    logger.info("Player died", dungeon_level=ctx.state.dungeon_level)


def _monster_death(monster: "Entity", xp: int, ctx: "GameContext") -> None:
    ctx.log(f"{monster.name.capitalize()} is dead! You gain {xp} experience points.", c.ORANGE)
    monster.glyph = c.CORPSE_GLYPH
    monster.color = c.DARK_RED
    monster.blocks = False
    monster.fighter = None
    monster.ai = None
    monster.name = f"remains of {monster.name}"
    ctx.roster.send_to_back(monster)
    logger.debug("Monster died", name=monster.name, xp=xp)


def heal(entity: "Entity", amount: int, ctx: "GameContext") -> None:
    """Restore HP without exceeding the effective maximum."""
    if entity.fighter is None:
        return
    entity.fighter.hp = min(entity.fighter.hp + amount, max_hp(entity, ctx))


def apply_confusion(target: "Entity", turns: int) -> bool:
    """Swap a monster's AI for a confused one.

    Confusion never nests: re-applying it refreshes the counter and keeps
    the AI the monster had before it was first confused.

    Returns:
        True if the target had an AI to confuse.
    """
    if target.ai is None:
        return False
    if isinstance(target.ai, ConfusedAi):
        previous = target.ai.previous
    else:
        previous = target.ai
    target.ai = ConfusedAi(previous=previous, turns_remaining=turns)
    return True


def closest_monster(max_range: int, ctx: "GameContext") -> "Entity | None":
    """The nearest visible AI-driven fighter within ``max_range`` of the player."""
    player = ctx.player
    closest: Entity | None = None
    closest_dist = float("inf")

    for entity in ctx.roster.entities:
        if entity.fighter is None or entity.ai is None or ctx.roster.is_player(entity):
            continue
        if not ctx.fov.is_visible(entity.x, entity.y):
            continue
        dist = player.distance_to(entity)
        if dist > max_range:
            continue
        if dist < closest_dist:
            closest = entity
            closest_dist = dist
    return closest


# =============================================================================
# Item Effects
# =============================================================================


def cast_heal(ctx: "GameContext") -> UseResult:
    player = ctx.player
    if player.fighter is None or player.fighter.hp >= max_hp(player, ctx):
        ctx.log("You are already at full health.", c.RED)
        return UseResult.CANCELLED

    ctx.log("Your wounds start to feel better!", c.LIGHT_VIOLET)
    heal(player, ctx.settings.game.heal_amount, ctx)
    return UseResult.USED_UP


def cast_lightning(ctx: "GameContext") -> UseResult:
    game = ctx.settings.game
    monster = closest_monster(game.lightning_range, ctx)
    if monster is None:
        ctx.log("No enemy is close enough to strike.", c.RED)
        return UseResult.CANCELLED

    ctx.log(
        f"A lightning bolt strikes the {monster.name} with a loud thunder! "
        f"The damage is {game.lightning_damage} hit points.",
        c.LIGHT_BLUE,
    )
    _award(take_damage(monster, game.lightning_damage, ctx), ctx)
    return UseResult.USED_UP


def cast_confuse(ctx: "GameContext") -> UseResult:
    game = ctx.settings.game
    if ctx.targeter is None:
        return UseResult.CANCELLED

    ctx.log("Left-click an enemy to confuse it, or right-click to cancel.", c.LIGHT_CYAN)
    monster = ctx.targeter.target_monster(game.confuse_range)
    if monster is None or not apply_confusion(monster, game.confuse_num_turns):
        return UseResult.CANCELLED

    ctx.log(
        f"The eyes of the {monster.name} look vacant, as he starts to stumble around!",
        c.LIGHT_GREEN,
    )
    return UseResult.USED_UP


def cast_fireball(ctx: "GameContext") -> UseResult:
    game = ctx.settings.game
    if ctx.targeter is None:
        return UseResult.CANCELLED

    ctx.log("Left-click a target tile for the fireball, or right-click to cancel.", c.LIGHT_CYAN)
    target = ctx.targeter.target_tile()
    if target is None:
        return UseResult.CANCELLED

    x, y = target
    ctx.log(f"The fireball explodes, burning everything within {game.fireball_radius} tiles!", c.ORANGE)

    caught = [
        entity
        for entity in ctx.roster.entities
        if entity.alive and entity.fighter is not None and entity.distance(x, y) <= game.fireball_radius
    ]
    xp_to_gain = 0
    for entity in caught:
        ctx.log(f"The {entity.name} gets burned for {game.fireball_damage} hit points.", c.ORANGE)
        xp = take_damage(entity, game.fireball_damage, ctx)
        if xp:
            xp_to_gain += xp

    _award(xp_to_gain, ctx)
    logger.debug("Fireball resolved", target=target, caught=len(caught), xp=xp_to_gain)
    return UseResult.USED_UP


def _award(xp: int | None, ctx: "GameContext") -> None:
    player = ctx.player
    if xp and player.fighter is not None:
        player.fighter.xp += xp


ITEM_EFFECTS: dict[ItemKind, Callable[["GameContext"], UseResult]] = {
    ItemKind.HEAL: cast_heal,
    ItemKind.LIGHTNING: cast_lightning,
    ItemKind.CONFUSE: cast_confuse,
    ItemKind.FIREBALL: cast_fireball,
}


__all__ = [
    "attack",
    "take_damage",
    "heal",
    "apply_confusion",
    "closest_monster",
    "cast_heal",
    "cast_lightning",
    "cast_confuse",
    "cast_fireball",
    "ITEM_EFFECTS",
]
