"""Tests for monster AI."""

from __future__ import annotations

import random
from collections.abc import Callable

from dungeon_crawl.engine.ai import is_cell_free, move, move_towards, take_turn
from dungeon_crawl.engine.combat import apply_confusion
from dungeon_crawl.engine.context import GameContext
from dungeon_crawl.models.entities import BasicAi, ConfusedAi, create_item, create_monster
from dungeon_crawl.models.enums import ItemKind, MonsterKind


ContextFactory = Callable[..., GameContext]


class StepDice(random.Random):
    """Random source whose randint replays a fixed sequence."""

    def __init__(self, values: list[int]) -> None:
        super().__init__(0)
        self.values = list(values)

    def randint(self, a: int, b: int) -> int:
        return self.values.pop(0)


class TestMovement:
    """Tests for single-step movement."""

    def test_move_into_free_cell(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 8, 8)
        ctx = make_context(orc)

        assert move(orc, 1, 0, ctx)
        assert orc.pos == (9, 8)

    def test_walls_block(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 1, 1)
        ctx = make_context(orc)

        assert not move(orc, -1, 0, ctx)
        assert orc.pos == (1, 1)

    def test_blocking_entities_block(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 8, 8)
        troll = create_monster(MonsterKind.TROLL, 9, 8)
        ctx = make_context(orc, troll)

        assert not move(orc, 1, 0, ctx)
        assert not is_cell_free(9, 8, ctx)

    def test_items_do_not_block(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 8, 8)
        ctx = make_context(orc, create_item(ItemKind.HEAL, 9, 8))

        assert move(orc, 1, 0, ctx)

    def test_zero_step_is_not_a_move(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 8, 8)
        ctx = make_context(orc)

        assert not move(orc, 0, 0, ctx)

    def test_move_towards_rounds_diagonals(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 10, 10)
        ctx = make_context(orc)

        move_towards(orc, 5, 5, ctx)

        assert orc.pos == (9, 9)

    def test_move_towards_shallow_angle(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 12, 6)
        ctx = make_context(orc)

        move_towards(orc, 5, 5, ctx)

        assert orc.pos == (11, 6)


class TestBasicAi:
    """Tests for the chasing AI."""

    def test_chases_visible_player(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 9, 5)
        ctx = make_context(orc)

        take_turn(orc, ctx)

        assert orc.pos == (8, 5)
        assert ctx.player.fighter.hp == 100

    def test_idles_out_of_sight(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 9, 5)
        ctx = make_context(orc, compute_fov=False)

        take_turn(orc, ctx)

        assert orc.pos == (9, 5)

    def test_attacks_when_adjacent(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 6, 6)
        ctx = make_context(orc)

        take_turn(orc, ctx)

        assert orc.pos == (6, 6)
        assert ctx.player.fighter.hp == 97

    def test_does_not_attack_dead_player(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 6, 5)
        ctx = make_context(orc)
        ctx.player.alive = False
        logged = len(ctx.state.messages)

        take_turn(orc, ctx)

        assert len(ctx.state.messages) == logged

    def test_dead_monster_does_nothing(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 9, 5)
        orc.ai = None
        ctx = make_context(orc)

        take_turn(orc, ctx)

        assert orc.pos == (9, 5)


class TestConfusedAi:
    """Tests for the confusion lifecycle."""

    def test_stumbles_randomly(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 9, 9)
        ctx = make_context(orc, rng_override=StepDice([1, -1]))
        apply_confusion(orc, 3)

        take_turn(orc, ctx)

        assert orc.pos == (10, 8)
        assert isinstance(orc.ai, ConfusedAi)
        assert orc.ai.turns_remaining == 2

    def test_acts_even_when_unseen(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 9, 9)
        ctx = make_context(orc, rng_override=StepDice([-1, 0]), compute_fov=False)
        apply_confusion(orc, 3)

        take_turn(orc, ctx)

        assert orc.pos == (8, 9)

    def test_does_not_attack_adjacent_player(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 6, 5)
        ctx = make_context(orc, rng_override=StepDice([-1, 0]))
        apply_confusion(orc, 3)

        take_turn(orc, ctx)

        assert orc.pos == (6, 5)
        assert ctx.player.fighter.hp == 100

    def test_restores_previous_after_counter_runs_out(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 12, 12)
        ctx = make_context(orc, rng_override=StepDice([0, 0] * 3), compute_fov=False)
        apply_confusion(orc, 2)

        for _ in range(2):
            take_turn(orc, ctx)
            assert isinstance(orc.ai, ConfusedAi)
        take_turn(orc, ctx)

        assert isinstance(orc.ai, BasicAi)
        assert ctx.state.messages.texts().count("The orc is no longer confused!") == 1

    def test_zero_turns_lasts_one_activation(self, make_context: ContextFactory) -> None:
        orc = create_monster(MonsterKind.ORC, 12, 12)
        ctx = make_context(orc, rng_override=StepDice([0, 0]), compute_fov=False)
        apply_confusion(orc, 0)

        take_turn(orc, ctx)

        assert isinstance(orc.ai, BasicAi)
