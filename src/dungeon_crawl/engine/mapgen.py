"""Procedural map generation.

Rooms are randomly sized and placed rectangles that must not overlap
(touching edges count as overlapping). Each accepted room is carved,
populated from the depth-scaled spawn tables, and joined to the previous
room's center by an L-shaped corridor. The first room holds the player
start and the last one the stairs down.

An attempt that accepts no room at all is fatal to that attempt: it raises
GenerationError and the whole map is retried with the continuation of the
random stream, up to ``MapSettings.generation_attempts`` times.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt

from dungeon_crawl.core.exceptions import GenerationError
from dungeon_crawl.core.logging import get_logger
from dungeon_crawl.engine.spawn import (
    MAX_ITEMS_TABLE,
    MAX_MONSTERS_TABLE,
    from_dungeon_level,
    item_chances,
    monster_chances,
    random_choice,
)
from dungeon_crawl.models.entities import Entity, create_item, create_monster, create_stairs
from dungeon_crawl.models.tiles import Rect, TileGrid


if TYPE_CHECKING:
    from dungeon_crawl.core.config import MapSettings

logger = get_logger(__name__)


@dataclass(frozen=True)
class Corridor:
    """An L-shaped tunnel between two room centers.

    Attributes:
        start: Center of the previously accepted room.
        end: Center of the newly accepted room.
        horizontal_first: Whether the horizontal leg was dug from ``start``.
    """

    start: tuple[int, int]
    end: tuple[int, int]
    horizontal_first: bool

    def cells(self) -> list[tuple[int, int]]:
        """Every cell dug for this corridor."""
        (x1, y1), (x2, y2) = self.start, self.end
        if self.horizontal_first:
            horizontal = [(x, y1) for x in _inclusive(x1, x2)]
            vertical = [(x2, y) for y in _inclusive(y1, y2)]
        else:
            vertical = [(x1, y) for y in _inclusive(y1, y2)]
            horizontal = [(x, y2) for x in _inclusive(x1, x2)]
        return horizontal + vertical


@dataclass
class GeneratedLevel:
    """Output of one successful generation.

    Attributes:
        grid: The carved tile grid.
        player_start: Center of the first room.
        rooms: Accepted rooms, in acceptance order.
        corridors: Corridors, one per room after the first.
        entities: Spawned monsters and items, then the stairs.
        stairs: The stairs down, in the last room.
    """

    grid: TileGrid
    player_start: tuple[int, int]
    rooms: list[Rect]
    corridors: list[Corridor]
    entities: list[Entity] = field(default_factory=list)
    stairs: Entity | None = None


def _inclusive(a: int, b: int) -> range:
    return range(min(a, b), max(a, b) + 1)


class MapGenerator:
    """Build tile grids and spawn lists for a given dungeon depth.

    Attributes:
        settings: Map generation settings.
        rng: Random source; seed it for reproducible maps.
    """

    def __init__(self, settings: "MapSettings", rng: random.Random | None = None) -> None:
        self._settings = settings
        self._rng = rng or random.Random()

    @property
    def settings(self) -> "MapSettings":
        return self._settings

    def generate(self, dungeon_level: int = 1) -> GeneratedLevel:
        """Generate a level, retrying zero-room attempts.

        Args:
            dungeon_level: Depth used to scale the spawn tables.

        Returns:
            The generated level.

        Raises:
            GenerationError: If every attempt failed to place a room.
        """
        attempts = self._settings.generation_attempts
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(attempts),
                retry=retry_if_exception_type(GenerationError),
                before_sleep=self._log_retry,
                reraise=True,
            ):
                with attempt:
                    level = self._generate_once(dungeon_level)
        except GenerationError as exc:
            logger.error(
                "Map generation failed",
                attempts=attempts,
                width=self._settings.width,
                height=self._settings.height,
            )
            raise GenerationError(
                f"Could not place a single room after {attempts} attempts",
                attempts=attempts,
                width=self._settings.width,
                height=self._settings.height,
            ) from exc

        logger.info(
            "Map generated",
            dungeon_level=dungeon_level,
            rooms=len(level.rooms),
            spawned=len(level.entities),
        )
        return level

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "Map generation attempt accepted no rooms, retrying",
            attempt=retry_state.attempt_number,
        )

    def _generate_once(self, dungeon_level: int) -> GeneratedLevel:
        grid = TileGrid.filled(self._settings.width, self._settings.height)
        rooms: list[Rect] = []
        corridors: list[Corridor] = []
        entities: list[Entity] = []
        player_start: tuple[int, int] | None = None

        for _ in range(self._settings.max_rooms):
            room = self._sample_room()
            if room is None:
                continue
            if any(room.intersects(other) for other in rooms):
                continue

            for x, y in room.interior():
                grid.carve(x, y)

            center = room.center()
            if not rooms:
                player_start = center

            self._place_entities(room, grid, entities, dungeon_level, reserved=player_start)

            if rooms:
                corridors.append(self._connect(grid, rooms[-1].center(), center))

            rooms.append(room)

        if not rooms or player_start is None:
            raise GenerationError(
                "Generation attempt accepted no rooms",
                width=self._settings.width,
                height=self._settings.height,
            )

        stairs = create_stairs(*rooms[-1].center())
        entities.append(stairs)

        return GeneratedLevel(
            grid=grid,
            player_start=player_start,
            rooms=rooms,
            corridors=corridors,
            entities=entities,
            stairs=stairs,
        )

    def _sample_room(self) -> Rect | None:
        """Draw a candidate room, or None if it cannot fit on the map."""
        w = self._rng.randint(self._settings.room_min_size, self._settings.room_max_size)
        h = self._rng.randint(self._settings.room_min_size, self._settings.room_max_size)
        if w >= self._settings.width or h >= self._settings.height:
            return None
        x = self._rng.randrange(0, self._settings.width - w)
        y = self._rng.randrange(0, self._settings.height - h)
        return Rect.from_size(x, y, w, h)

    def _connect(
        self,
        grid: TileGrid,
        previous: tuple[int, int],
        new: tuple[int, int],
    ) -> Corridor:
        corridor = Corridor(start=previous, end=new, horizontal_first=self._rng.random() < 0.5)
        for x, y in corridor.cells():
            grid.carve(x, y)
        return corridor

    def _place_entities(
        self,
        room: Rect,
        grid: TileGrid,
        entities: list[Entity],
        dungeon_level: int,
        *,
        reserved: tuple[int, int] | None,
    ) -> None:
        max_monsters = from_dungeon_level(MAX_MONSTERS_TABLE, dungeon_level)
        for _ in range(self._rng.randint(0, max_monsters)):
            x, y = self._random_cell(room)
            if (x, y) == reserved or not _is_free(x, y, grid, entities):
                continue
            kind = random_choice(monster_chances(dungeon_level), self._rng)
            if kind is not None:
                entities.append(create_monster(kind, x, y))

        max_items = from_dungeon_level(MAX_ITEMS_TABLE, dungeon_level)
        for _ in range(self._rng.randint(0, max_items)):
            x, y = self._random_cell(room)
            if not _is_free(x, y, grid, entities):
                continue
            kind = random_choice(item_chances(dungeon_level), self._rng)
            if kind is not None:
                entities.append(create_item(kind, x, y))

    def _random_cell(self, room: Rect) -> tuple[int, int]:
        return (
            self._rng.randint(room.x1 + 1, room.x2 - 1),
            self._rng.randint(room.y1 + 1, room.y2 - 1),
        )


def _is_free(x: int, y: int, grid: TileGrid, entities: list[Entity]) -> bool:
    if grid.is_blocked(x, y):
        return False
    return not any(entity.blocks and entity.pos == (x, y) for entity in entities)


__all__ = [
    "Corridor",
    "GeneratedLevel",
    "MapGenerator",
]
