"""Tests for procedural map generation."""

from __future__ import annotations

import random
from itertools import combinations

import pytest

from dungeon_crawl.core.config import MapSettings
from dungeon_crawl.core.exceptions import GenerationError
from dungeon_crawl.engine.mapgen import Corridor, GeneratedLevel, MapGenerator
from dungeon_crawl.models.entities import Entity


def _generate(seed: int, dungeon_level: int = 1, **overrides: int) -> GeneratedLevel:
    return MapGenerator(MapSettings(**overrides), random.Random(seed)).generate(dungeon_level)


class TestCorridor:
    """Tests for L-shaped corridors."""

    def test_horizontal_first(self) -> None:
        corridor = Corridor(start=(1, 1), end=(3, 4), horizontal_first=True)
        cells = set(corridor.cells())

        assert {(1, 1), (2, 1), (3, 1)} <= cells
        assert {(3, 2), (3, 3), (3, 4)} <= cells
        assert (1, 4) not in cells

    def test_vertical_first(self) -> None:
        corridor = Corridor(start=(1, 1), end=(3, 4), horizontal_first=False)
        cells = set(corridor.cells())

        assert {(1, 1), (1, 2), (1, 3), (1, 4)} <= cells
        assert {(2, 4), (3, 4)} <= cells
        assert (3, 1) not in cells

    def test_ranges_are_inclusive_in_either_direction(self) -> None:
        corridor = Corridor(start=(5, 2), end=(2, 2), horizontal_first=True)
        assert {(x, 2) for x in range(2, 6)} <= set(corridor.cells())


class TestGeneratedLevels:
    """Properties every successful generation must satisfy."""

    @pytest.mark.parametrize("seed", [1, 2, 3, 42, 1234])
    def test_rooms_do_not_overlap(self, seed: int) -> None:
        level = _generate(seed)

        assert level.rooms
        for a, b in combinations(level.rooms, 2):
            assert not a.intersects(b)

    @pytest.mark.parametrize("seed", [1, 2, 3, 42, 1234])
    def test_room_interiors_are_floor(self, seed: int) -> None:
        level = _generate(seed)

        for room in level.rooms:
            assert all(not level.grid.is_blocked(x, y) for x, y in room.interior())

    @pytest.mark.parametrize("seed", [1, 2, 3, 42, 1234])
    def test_corridors_join_successive_rooms(self, seed: int) -> None:
        level = _generate(seed)

        assert len(level.corridors) == len(level.rooms) - 1
        for index, corridor in enumerate(level.corridors):
            assert corridor.start == level.rooms[index].center()
            assert corridor.end == level.rooms[index + 1].center()
            assert all(not level.grid.is_blocked(x, y) for x, y in corridor.cells())

    def test_player_start_and_stairs(self) -> None:
        level = _generate(7)

        assert level.player_start == level.rooms[0].center()
        assert level.stairs is not None
        assert level.stairs.pos == level.rooms[-1].center()
        assert level.entities[-1] is level.stairs

    @pytest.mark.parametrize("seed", [1, 2, 3, 42, 1234])
    def test_spawns_on_free_cells(self, seed: int) -> None:
        level = _generate(seed, dungeon_level=6)

        blocking: list[Entity] = [e for e in level.entities if e.blocks]
        positions = [e.pos for e in blocking]
        assert len(positions) == len(set(positions))
        assert level.player_start not in positions
        assert all(not level.grid.is_blocked(*e.pos) for e in level.entities)

    def test_same_seed_same_map(self) -> None:
        a = _generate(99)
        b = _generate(99)

        assert a.rooms == b.rooms
        assert a.player_start == b.player_start
        assert [e.name for e in a.entities] == [e.name for e in b.entities]

    def test_walls_surround_the_map(self) -> None:
        level = _generate(5)
        grid = level.grid

        assert all(grid.is_blocked(x, 0) for x in range(grid.width))
        assert all(grid.is_blocked(0, y) for y in range(grid.height))

    def test_shallow_levels_spawn_no_trolls(self) -> None:
        for seed in range(5):
            names = {e.name for e in _generate(seed, dungeon_level=1).entities}
            assert "troll" not in names


class TestZeroRoomPolicy:
    """Tests for the zero-accepted-rooms boundary."""

    def test_exhausted_attempts_raise(self) -> None:
        """Rooms that can never fit leave nothing to build a level on."""
        generator = MapGenerator(
            MapSettings(width=8, height=8, room_min_size=8, room_max_size=8, generation_attempts=3),
            random.Random(0),
        )

        with pytest.raises(GenerationError) as exc_info:
            generator.generate()

        assert exc_info.value.details["attempts"] == 3
        assert exc_info.value.details["width"] == 8

    def test_no_room_attempts_raise(self) -> None:
        generator = MapGenerator(MapSettings(max_rooms=0, generation_attempts=2), random.Random(0))

        with pytest.raises(GenerationError):
            generator.generate()

    def test_failed_attempt_is_retried(self, monkeypatch: pytest.MonkeyPatch) -> None:
        generator = MapGenerator(MapSettings(generation_attempts=3), random.Random(3))
        original = generator._generate_once
        calls: list[int] = []

        def flaky(dungeon_level: int) -> GeneratedLevel:
            calls.append(dungeon_level)
            if len(calls) == 1:
                raise GenerationError("no rooms")
            return original(dungeon_level)

        monkeypatch.setattr(generator, "_generate_once", flaky)

        level = generator.generate(2)

        assert calls == [2, 2]
        assert level.rooms

    def test_single_room_map(self) -> None:
        """A map with room for exactly one room still gets a start and stairs."""
        level = _generate(4, width=12, height=12, room_min_size=10, room_max_size=10)

        assert len(level.rooms) == 1
        assert level.corridors == []
        assert level.stairs.pos == level.player_start
