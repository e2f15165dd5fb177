"""Tile grid models.

The map is a fixed-size grid of tiles indexed ``tiles[x][y]``. Tiles start
as walls and are carved into floor by the map generator. ``explored`` only
ever goes from False to True.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Tile(BaseModel):
    """A single map cell."""

    model_config = ConfigDict(extra="ignore")

    blocked: bool = Field(default=True, description="Blocks movement")
    blocks_sight: bool = Field(default=True, description="Blocks line of sight")
    explored: bool = Field(default=False, description="Seen at least once")

    @classmethod
    def wall(cls) -> "Tile":
        return cls(blocked=True, blocks_sight=True)

    @classmethod
    def floor(cls) -> "Tile":
        return cls(blocked=False, blocks_sight=False)


class Rect(BaseModel):
    """A rectangle on the map, used to characterize a room.

    Only exists while a map is being generated.
    """

    model_config = ConfigDict(frozen=True)

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, w: int, h: int) -> "Rect":
        """Build a room from its top-left corner and size."""
        return cls(x1=x, y1=y, x2=x + w, y2=y + h)

    def center(self) -> tuple[int, int]:
        return (self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2

    def intersects(self, other: "Rect") -> bool:
        """Inclusive-bound overlap test.

        Rooms that merely touch along an edge count as intersecting.
        """
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def interior(self) -> Iterable[tuple[int, int]]:
        """Cells carved for this room (the border stays wall)."""
        for x in range(self.x1 + 1, self.x2):
            for y in range(self.y1 + 1, self.y2):
                yield x, y


class TileGrid(BaseModel):
    """Fixed-size 2D array of tiles, indexed ``tiles[x][y]``."""

    model_config = ConfigDict(extra="ignore")

    width: int = Field(ge=1)
    height: int = Field(ge=1)
    tiles: list[list[Tile]]

    @model_validator(mode="after")
    def validate_shape(self) -> "TileGrid":
        if len(self.tiles) != self.width or any(len(col) != self.height for col in self.tiles):
            raise ValueError(
                f"tiles must be {self.width} columns of {self.height} tiles"
            )
        return self

    @classmethod
    def filled(cls, width: int, height: int) -> "TileGrid":
        """Create a grid made entirely of walls."""
        return cls(
            width=width,
            height=height,
            tiles=[[Tile.wall() for _ in range(height)] for _ in range(width)],
        )

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile(self, x: int, y: int) -> Tile:
        return self.tiles[x][y]

    def carve(self, x: int, y: int) -> None:
        """Turn a cell into floor, keeping its explored flag."""
        explored = self.tiles[x][y].explored
        self.tiles[x][y] = Tile(blocked=False, blocks_sight=False, explored=explored)

    def is_blocked(self, x: int, y: int) -> bool:
        """Terrain check only; anything off the map is blocked."""
        if not self.in_bounds(x, y):
            return True
        return self.tiles[x][y].blocked

    def mark_explored(self, cells: Iterable[tuple[int, int]]) -> int:
        """Mark cells as explored and return how many were new."""
        newly = 0
        for x, y in cells:
            tile = self.tiles[x][y]
            if not tile.explored:
                tile.explored = True
                newly += 1
        return newly

    def is_explored(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.tiles[x][y].explored

    def explored_count(self) -> int:
        return sum(tile.explored for column in self.tiles for tile in column)

    def transparency(self) -> np.ndarray:
        """Boolean array shaped (width, height), True where light passes."""
        return np.array(
            [[not tile.blocks_sight for tile in column] for column in self.tiles],
            dtype=bool,
        )


__all__ = [
    "Tile",
    "Rect",
    "TileGrid",
]
