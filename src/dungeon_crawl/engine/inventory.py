"""Inventory and equipment management.

Effective stats are never cached: ``power``, ``defense`` and ``max_hp``
are recomputed on every call as the fighter's base value plus the bonuses
of every equipped inventory item. Only the player carries an inventory,
so for any other entity the effective stat is the base stat.

At most one item is equipped per slot; ``equip`` enforces it by
dequipping the current occupant first.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dungeon_crawl.core import constants as c
from dungeon_crawl.core.logging import get_logger
from dungeon_crawl.models.enums import EquipmentSlot, UseResult


if TYPE_CHECKING:
    from dungeon_crawl.engine.context import GameContext
    from dungeon_crawl.models.entities import Entity

logger = get_logger(__name__)


# =============================================================================
# Effective Stats
# =============================================================================


def _equipment_bonus(entity: "Entity", ctx: "GameContext", attribute: str) -> int:
    if not ctx.roster.is_player(entity):
        return 0
    return sum(getattr(item.equipment, attribute) for item in ctx.state.equipped_items())


def power(entity: "Entity", ctx: "GameContext") -> int:
    """Base power plus equipment bonuses."""
    if entity.fighter is None:
        return 0
    return entity.fighter.base_power + _equipment_bonus(entity, ctx, "power_bonus")


def defense(entity: "Entity", ctx: "GameContext") -> int:
    """Base defense plus equipment bonuses."""
    if entity.fighter is None:
        return 0
    return entity.fighter.base_defense + _equipment_bonus(entity, ctx, "defense_bonus")


def max_hp(entity: "Entity", ctx: "GameContext") -> int:
    """Base max HP plus equipment bonuses."""
    if entity.fighter is None:
        return 0
    return entity.fighter.base_max_hp + _equipment_bonus(entity, ctx, "max_hp_bonus")


def get_equipped_in_slot(slot: EquipmentSlot, ctx: "GameContext") -> "Entity | None":
    return ctx.state.equipped_in_slot(slot)


# =============================================================================
# Equipment
# =============================================================================


def equip(item: "Entity", ctx: "GameContext") -> bool:
    """Equip an item, swapping out whatever occupies its slot.

    Returns:
        True if the item is now equipped.
    """
    if item.equipment is None:
        logger.warning("Equip requested for non-equipment item", item=item.name)
        return False
    if item.equipment.equipped:
        return True

    occupant = get_equipped_in_slot(item.equipment.slot, ctx)
    if occupant is not None and occupant.uid != item.uid:
        dequip(occupant, ctx)

    item.equipment.equipped = True
    ctx.log(f"Equipped {item.name} on {item.equipment.slot}.", c.LIGHT_GREEN)
    logger.debug("Item equipped", item=item.name, slot=str(item.equipment.slot))
    return True


def dequip(item: "Entity", ctx: "GameContext") -> bool:
    """Take an item off.

    Returns:
        True if the item was equipped before the call.
    """
    if item.equipment is None:
        logger.warning("Dequip requested for non-equipment item", item=item.name)
        return False
    if not item.equipment.equipped:
        return False

    item.equipment.equipped = False
    ctx.log(f"Dequipped {item.name} from {item.equipment.slot}.", c.LIGHT_YELLOW)
    logger.debug("Item dequipped", item=item.name, slot=str(item.equipment.slot))
    return True


def toggle_equip(item: "Entity", ctx: "GameContext") -> None:
    if item.equipment is None:
        logger.warning("Toggle requested for non-equipment item", item=item.name)
        return
    if item.equipment.equipped:
        dequip(item, ctx)
    else:
        equip(item, ctx)


# =============================================================================
# Inventory
# =============================================================================


def pick_up(item: "Entity", ctx: "GameContext") -> bool:
    """Move an item from the map into the inventory.

    Over capacity the item stays where it is. Equipment is equipped
    straight away when its slot is free.

    Returns:
        True if the item was picked up.
    """
    capacity = ctx.settings.game.inventory_capacity
    if len(ctx.state.inventory) >= capacity:
        ctx.log(f"Your inventory is full, cannot pick up {item.name}.", c.RED)
        logger.info("Pick-up refused, inventory full", item=item.name, capacity=capacity)
        return False

    ctx.roster.remove(item)
    ctx.state.inventory.append(item)
    ctx.log(f"You picked up a {item.name}!", c.GREEN)

    if item.equipment is not None and get_equipped_in_slot(item.equipment.slot, ctx) is None:
        equip(item, ctx)
    return True


def drop(item: "Entity", ctx: "GameContext") -> None:
    """Put an item back on the map at the player's feet."""
    if item.equipment is not None:
        dequip(item, ctx)

    ctx.state.inventory = [entry for entry in ctx.state.inventory if entry.uid != item.uid]
    item.set_pos(*ctx.player.pos)
    ctx.roster.add(item)
    ctx.log(f"You dropped a {item.name}.", c.YELLOW)


def use_item(item: "Entity", ctx: "GameContext") -> UseResult:
    """Use an inventory item.

    Equipment toggles and is kept. Consumables run their effect: a used-up
    item leaves the inventory, a cancelled one leaves everything as it was.
    """
    from dungeon_crawl.engine.combat import ITEM_EFFECTS

    if item.equipment is not None:
        toggle_equip(item, ctx)
        return UseResult.KEPT

    effect = ITEM_EFFECTS.get(item.item) if item.item is not None else None
    if effect is None:
        ctx.log(f"The {item.name} cannot be used.")
        return UseResult.KEPT

    result = effect(ctx)
    if result == UseResult.USED_UP:
        ctx.state.inventory = [entry for entry in ctx.state.inventory if entry.uid != item.uid]
    elif result == UseResult.CANCELLED:
        ctx.log("Cancelled", c.WHITE)

    logger.debug("Item used", item=item.name, result=str(result))
    return result


__all__ = [
    "power",
    "defense",
    "max_hp",
    "get_equipped_in_slot",
    "equip",
    "dequip",
    "toggle_equip",
    "pick_up",
    "drop",
    "use_item",
]
