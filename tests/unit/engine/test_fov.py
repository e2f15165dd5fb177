"""Tests for the visibility engine."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from dungeon_crawl.core.config import FovSettings
from dungeon_crawl.core.exceptions import InvalidGameStateError
from dungeon_crawl.engine.fov import FOV_ALGORITHMS, VisibilityEngine
from dungeon_crawl.models.entities import create_monster, create_stairs
from dungeon_crawl.models.enums import MonsterKind
from dungeon_crawl.models.tiles import Tile, TileGrid


@pytest.fixture
def walled_grid(open_grid: Callable[..., TileGrid]) -> TileGrid:
    """An open room split by a full-height wall at x == 10."""
    grid = open_grid(20, 15)
    for y in range(grid.height):
        grid.tiles[10][y] = Tile.wall()
    return grid


@pytest.fixture
def engine(walled_grid: TileGrid) -> VisibilityEngine:
    fov = VisibilityEngine(FovSettings())
    fov.reset(walled_grid)
    return fov


class TestCompute:
    """Tests for a single field-of-view scan."""

    def test_origin_is_visible(self, engine: VisibilityEngine) -> None:
        visible = engine.compute((5, 5))
        assert (5, 5) in visible
        assert engine.is_visible(5, 5)

    def test_wall_occludes(self, engine: VisibilityEngine) -> None:
        engine.compute((5, 5))

        assert engine.is_visible(10, 5)
        assert not engine.is_visible(12, 5)
        assert not engine.is_visible(15, 7)

    def test_radius_limits_sight(self, engine: VisibilityEngine) -> None:
        engine.compute((2, 2), radius=2)

        assert engine.is_visible(3, 3)
        assert not engine.is_visible(8, 2)

    def test_visible_tiles_become_explored(self, engine: VisibilityEngine, walled_grid: TileGrid) -> None:
        visible = engine.compute((5, 5))

        assert all(walled_grid.is_explored(x, y) for x, y in visible)
        assert not walled_grid.is_explored(15, 5)

    def test_explored_never_reverts(self, engine: VisibilityEngine, walled_grid: TileGrid) -> None:
        engine.compute((2, 2), radius=3)
        first = {
            (x, y)
            for x in range(walled_grid.width)
            for y in range(walled_grid.height)
            if walled_grid.is_explored(x, y)
        }

        engine.compute((8, 12), radius=3)

        assert all(walled_grid.is_explored(x, y) for x, y in first)
        assert not engine.is_visible(2, 2)

    def test_compute_requires_reset(self) -> None:
        with pytest.raises(InvalidGameStateError):
            VisibilityEngine(FovSettings()).compute((1, 1))

    def test_every_algorithm_is_mapped(self) -> None:
        for name in ("basic", "diamond", "shadow", "permissive", "restrictive"):
            assert name in FOV_ALGORITHMS


class TestRecomputePolicy:
    """Tests for recomputing only when the player moved."""

    def test_first_update_computes(self, engine: VisibilityEngine) -> None:
        assert engine.update((5, 5)) is True
        assert engine.last_origin == (5, 5)

    def test_idle_update_is_skipped(self, engine: VisibilityEngine, monkeypatch: pytest.MonkeyPatch) -> None:
        engine.update((5, 5))
        calls: list[tuple[int, int]] = []
        monkeypatch.setattr(engine, "compute", lambda origin, radius=None: calls.append(origin))

        assert engine.update((5, 5)) is False
        assert calls == []

    def test_move_triggers_update(self, engine: VisibilityEngine) -> None:
        engine.update((5, 5))
        assert engine.update((6, 5)) is True
        assert engine.last_origin == (6, 5)

    def test_reset_forces_update(self, engine: VisibilityEngine, walled_grid: TileGrid) -> None:
        engine.update((5, 5))
        engine.reset(walled_grid)

        assert engine.visible == frozenset()
        assert engine.update((5, 5)) is True


class TestShouldRender:
    """Tests for entity render gating."""

    def test_visible_entity_renders(self, engine: VisibilityEngine, walled_grid: TileGrid) -> None:
        engine.compute((5, 5))
        assert engine.should_render(create_monster(MonsterKind.ORC, 6, 6), walled_grid)

    def test_hidden_entity_does_not_render(self, engine: VisibilityEngine, walled_grid: TileGrid) -> None:
        engine.compute((5, 5))
        assert not engine.should_render(create_monster(MonsterKind.ORC, 15, 5), walled_grid)

    def test_stairs_render_once_explored(self, engine: VisibilityEngine, walled_grid: TileGrid) -> None:
        stairs = create_stairs(3, 3)
        engine.compute((3, 3))
        engine.compute((15, 5))

        assert not engine.is_visible(3, 3)
        assert engine.should_render(stairs, walled_grid)

    def test_unexplored_stairs_stay_hidden(self, engine: VisibilityEngine, walled_grid: TileGrid) -> None:
        engine.compute((5, 5))
        assert not engine.should_render(create_stairs(15, 5), walled_grid)

    def test_explored_monster_out_of_sight_is_hidden(
        self, engine: VisibilityEngine, walled_grid: TileGrid
    ) -> None:
        engine.compute((3, 3))
        engine.compute((15, 5))
        assert not engine.should_render(create_monster(MonsterKind.ORC, 3, 3), walled_grid)
