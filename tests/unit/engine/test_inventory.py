"""Tests for inventory, equipment and effective stats."""

from __future__ import annotations

from collections.abc import Callable

from dungeon_crawl.core import constants as c
from dungeon_crawl.core.config import GameSettings, Settings
from dungeon_crawl.engine.context import GameContext
from dungeon_crawl.engine.inventory import (
    defense,
    dequip,
    drop,
    equip,
    get_equipped_in_slot,
    max_hp,
    pick_up,
    power,
    toggle_equip,
    use_item,
)
from dungeon_crawl.models.entities import create_item, create_monster
from dungeon_crawl.models.enums import EquipmentSlot, ItemKind, MonsterKind, UseResult


ContextFactory = Callable[..., GameContext]


class TestEffectiveStats:
    """Tests for base-plus-bonus stats."""

    def test_base_stats(self, make_context: ContextFactory) -> None:
        ctx = make_context()

        assert power(ctx.player, ctx) == 2
        assert defense(ctx.player, ctx) == 1
        assert max_hp(ctx.player, ctx) == 100

    def test_equipped_bonuses_add_up(self, make_context: ContextFactory) -> None:
        ctx = make_context()
        sword = create_item(ItemKind.SWORD)
        shield = create_item(ItemKind.SHIELD)
        ctx.state.inventory.extend([sword, shield])
        equip(sword, ctx)
        equip(shield, ctx)

        assert power(ctx.player, ctx) == 5
        assert defense(ctx.player, ctx) == 2

    def test_carried_but_unequipped_gives_nothing(self, make_context: ContextFactory) -> None:
        ctx = make_context()
        ctx.state.inventory.append(create_item(ItemKind.SWORD))

        assert power(ctx.player, ctx) == 2

    def test_monsters_ignore_player_equipment(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 7, 7)
        ctx = make_context(orc)
        sword = create_item(ItemKind.SWORD)
        ctx.state.inventory.append(sword)
        equip(sword, ctx)

        assert power(orc, ctx) == 4

    def test_entities_without_fighter(self, make_context: ContextFactory) -> None:
        ctx = make_context()
        assert power(create_item(ItemKind.HEAL), ctx) == 0


class TestEquipment:
    """Tests for equipping and dequipping."""

    def test_equip_logs_slot(self, make_context: ContextFactory) -> None:
        ctx = make_context()
        sword = create_item(ItemKind.SWORD)
        ctx.state.inventory.append(sword)

        assert equip(sword, ctx)

        assert get_equipped_in_slot(EquipmentSlot.RIGHT_HAND, ctx) is sword
        last = ctx.state.messages.tail(1)[0]
        assert last.text == "Equipped sword on right hand."
        assert last.color == c.LIGHT_GREEN

    def test_equip_swaps_occupant(self, make_context: ContextFactory) -> None:
        ctx = make_context()
        dagger = create_item(ItemKind.DAGGER)
        shield = create_item(ItemKind.SHIELD)
        ctx.state.inventory.extend([dagger, shield])
        equip(dagger, ctx)

        equip(shield, ctx)

        assert not dagger.equipment.equipped
        assert shield.equipment.equipped
        assert ctx.state.messages.texts()[-2:] == [
            "Dequipped dagger from left hand.",
            "Equipped shield on left hand.",
        ]

    def test_one_item_per_slot(self, make_context: ContextFactory) -> None:
        ctx = make_context()
        items = [create_item(ItemKind.DAGGER), create_item(ItemKind.SHIELD), create_item(ItemKind.DAGGER)]
        ctx.state.inventory.extend(items)

        for item in items:
            equip(item, ctx)

        left = [i for i in ctx.state.equipped_items() if i.equipment.slot == EquipmentSlot.LEFT_HAND]
        assert left == [items[2]]

    def test_non_equipment_is_refused(self, make_context: ContextFactory) -> None:
        ctx = make_context()
        potion = create_item(ItemKind.HEAL)

        assert not equip(potion, ctx)
        assert not dequip(potion, ctx)
        assert len(ctx.state.messages) == 0

    def test_dequip_logs(self, make_context: ContextFactory) -> None:
        ctx = make_context()
        sword = create_item(ItemKind.SWORD)
        ctx.state.inventory.append(sword)
        equip(sword, ctx)

        assert dequip(sword, ctx)
        assert not dequip(sword, ctx)
        last = ctx.state.messages.tail(1)[0]
        assert last.text == "Dequipped sword from right hand."
        assert last.color == c.LIGHT_YELLOW

    def test_toggle(self, make_context: ContextFactory) -> None:
        ctx = make_context()
        sword = create_item(ItemKind.SWORD)
        ctx.state.inventory.append(sword)

        toggle_equip(sword, ctx)
        assert sword.equipment.equipped
        toggle_equip(sword, ctx)
        assert not sword.equipment.equipped


class TestPickUpAndDrop:
    """Tests for moving items between map and inventory."""

    def test_pick_up(self, make_context: ContextFactory) -> None:
        potion = create_item(ItemKind.HEAL, 5, 5)
        ctx = make_context(potion)

        assert pick_up(potion, ctx)

        assert ctx.state.inventory == [potion]
        assert ctx.roster.get(potion.uid) is None
        assert ctx.state.messages.texts()[-1] == "You picked up a healing potion!"

    def test_pick_up_auto_equips_into_free_slot(self, make_context: ContextFactory) -> None:
        sword = create_item(ItemKind.SWORD, 5, 5)
        ctx = make_context(sword)

        pick_up(sword, ctx)

        assert sword.equipment.equipped

    def test_pick_up_keeps_occupied_slot(self, make_context: ContextFactory) -> None:
        dagger = create_item(ItemKind.DAGGER)
        shield = create_item(ItemKind.SHIELD, 5, 5)
        ctx = make_context(shield)
        ctx.state.inventory.append(dagger)
        equip(dagger, ctx)

        pick_up(shield, ctx)

        assert dagger.equipment.equipped
        assert not shield.equipment.equipped

    def test_full_inventory_refuses(self, make_context: ContextFactory) -> None:
        potion = create_item(ItemKind.HEAL, 5, 5)
        scroll = create_item(ItemKind.LIGHTNING, 5, 5)
        ctx = make_context(
            potion,
            scroll,
            settings_override=Settings(game=GameSettings(inventory_capacity=1)),
        )
        pick_up(potion, ctx)

        assert not pick_up(scroll, ctx)

        assert ctx.state.inventory == [potion]
        assert ctx.roster.get(scroll.uid) is scroll
        last = ctx.state.messages.tail(1)[0]
        assert last.text == "Your inventory is full, cannot pick up scroll of lightning bolt."
        assert last.color == c.RED

    def test_drop_places_at_player_feet(self, make_context: ContextFactory) -> None:
        sword = create_item(ItemKind.SWORD, 5, 5)
        ctx = make_context(sword)
        pick_up(sword, ctx)
        ctx.player.set_pos(7, 8)

        drop(sword, ctx)

        assert sword.pos == (7, 8)
        assert not sword.equipment.equipped
        assert ctx.state.inventory == []
        assert ctx.roster.item_at(7, 8) is sword
        assert ctx.state.messages.texts()[-2:] == [
            "Dequipped sword from right hand.",
            "You dropped a sword.",
        ]


class TestUseItem:
    """Tests for using inventory items."""

    def test_equipment_toggles_and_is_kept(self, make_context: ContextFactory) -> None:
        ctx = make_context()
        sword = create_item(ItemKind.SWORD)
        ctx.state.inventory.append(sword)

        assert use_item(sword, ctx) == UseResult.KEPT
        assert sword.equipment.equipped
        assert ctx.state.inventory == [sword]

    def test_used_up_item_leaves_inventory(self, make_context: ContextFactory) -> None:
        ctx = make_context()
        potion = create_item(ItemKind.HEAL)
        ctx.state.inventory.append(potion)
        ctx.player.fighter.hp = 20

        assert use_item(potion, ctx) == UseResult.USED_UP

        assert ctx.state.inventory == []
        assert ctx.player.fighter.hp == 60

    def test_cancelled_use_changes_nothing(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 6, 5)
        ctx = make_context(orc)
        potion = create_item(ItemKind.HEAL)
        ctx.state.inventory.append(potion)

        assert use_item(potion, ctx) == UseResult.CANCELLED

        assert ctx.state.inventory == [potion]
        assert ctx.player.fighter.hp == 100
        assert orc.pos == (6, 5)
        assert ctx.state.messages.texts()[-2:] == ["You are already at full health.", "Cancelled"]
