"""Field-of-view tracking for the player.

The raw shadow-casting scan is delegated to ``tcod.map.compute_fov``. This
module owns the policy around it:

- the scan only reruns when the player's position changed since the last
  computation (idle turns reuse the previous visible set);
- every visible tile is marked explored on the grid, permanently;
- entities are drawn when visible, or when flagged ``always_visible`` and
  standing on an explored tile.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import tcod.constants
import tcod.map

from dungeon_crawl.core.exceptions import InvalidGameStateError
from dungeon_crawl.core.logging import get_logger


if TYPE_CHECKING:
    from dungeon_crawl.core.config import FovSettings
    from dungeon_crawl.models.entities import Entity
    from dungeon_crawl.models.tiles import TileGrid

logger = get_logger(__name__)


FOV_ALGORITHMS: dict[str, int] = {
    "basic": tcod.constants.FOV_BASIC,
    "diamond": tcod.constants.FOV_DIAMOND,
    "shadow": tcod.constants.FOV_SHADOW,
    "permissive": tcod.constants.FOV_PERMISSIVE_8,
    "restrictive": tcod.constants.FOV_RESTRICTIVE,
}


class VisibilityEngine:
    """Compute and cache the set of tiles the player can see.

    Call ``reset`` whenever the tile grid is replaced (new game, load,
    descending); the next ``update`` then always recomputes.
    """

    def __init__(self, settings: "FovSettings") -> None:
        self._settings = settings
        self._grid: TileGrid | None = None
        self._transparency: np.ndarray | None = None
        self._visible: frozenset[tuple[int, int]] = frozenset()
        self._last_origin: tuple[int, int] | None = None

    @property
    def visible(self) -> frozenset[tuple[int, int]]:
        return self._visible

    @property
    def last_origin(self) -> tuple[int, int] | None:
        return self._last_origin

    def reset(self, grid: "TileGrid") -> None:
        """Bind to a (new) grid and forget the previous scan."""
        self._grid = grid
        self._transparency = grid.transparency()
        self._visible = frozenset()
        self._last_origin = None
        logger.debug("Visibility reset", width=grid.width, height=grid.height)

    def compute(self, origin: tuple[int, int], radius: int | None = None) -> frozenset[tuple[int, int]]:
        """Scan from ``origin`` and mark the visible tiles explored.

        Args:
            origin: Cell the scan starts from.
            radius: Sight radius; defaults to the configured torch radius.

        Returns:
            The set of visible cells.
        """
        if self._grid is None or self._transparency is None:
            raise InvalidGameStateError("VisibilityEngine.reset() must be called before compute()")

        if radius is None:
            radius = self._settings.torch_radius

        lit = tcod.map.compute_fov(
            self._transparency,
            origin,
            radius=radius,
            light_walls=self._settings.light_walls,
            algorithm=FOV_ALGORITHMS[self._settings.algorithm],
        )
        xs, ys = np.nonzero(lit)
        self._visible = frozenset(zip(xs.tolist(), ys.tolist()))
        self._last_origin = origin

        newly_explored = self._grid.mark_explored(self._visible)
        logger.debug(
            "FOV computed",
            origin=origin,
            visible=len(self._visible),
            newly_explored=newly_explored,
        )
        return self._visible

    def update(self, player_pos: tuple[int, int]) -> bool:
        """Recompute only if the player moved since the last scan.

        Returns:
            True when a scan was performed.
        """
        if player_pos == self._last_origin:
            return False
        self.compute(player_pos)
        return True

    def is_visible(self, x: int, y: int) -> bool:
        return (x, y) in self._visible

    def should_render(self, entity: "Entity", grid: "TileGrid") -> bool:
        """Whether an entity belongs in this frame's render list."""
        if self.is_visible(entity.x, entity.y):
            return True
        return entity.always_visible and grid.is_explored(entity.x, entity.y)


__all__ = [
    "FOV_ALGORITHMS",
    "VisibilityEngine",
]
