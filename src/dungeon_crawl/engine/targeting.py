"""Targeting sub-loop for aimed items.

Entered only while an item effect is resolving. It redraws the current
state, polls one event at a time and returns a cell or an entity on a
valid left-click. Right-click, Escape and quit cancel with ``None``.
The sub-loop never runs AI and never consumes a turn.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dungeon_crawl.core.logging import get_logger
from dungeon_crawl.engine.interface import InputKind
from dungeon_crawl.engine.render import build_snapshot


if TYPE_CHECKING:
    from dungeon_crawl.engine.context import GameContext
    from dungeon_crawl.engine.interface import InputSource, Presenter
    from dungeon_crawl.models.entities import Entity

logger = get_logger(__name__)

CANCEL_KINDS = frozenset({InputKind.ESCAPE, InputKind.QUIT})


class Targeter:
    """Blocking target picker bound to one game context."""

    def __init__(self, ctx: "GameContext", input_source: "InputSource", presenter: "Presenter") -> None:
        self._ctx = ctx
        self._input = input_source
        self._presenter = presenter

    def target_tile(self, max_range: float | None = None) -> tuple[int, int] | None:
        """Wait for a left-click on a visible cell within range.

        Clicks outside the field of view or beyond ``max_range`` are
        ignored and the player keeps aiming.

        Returns:
            The clicked cell, or None if targeting was cancelled.
        """
        mouse: tuple[int, int] | None = None
        while True:
            self._presenter.present(build_snapshot(self._ctx, mouse))
            event = self._input.next_event()
            if event.mouse is not None:
                mouse = event.mouse

            if event.kind in CANCEL_KINDS or event.rbutton:
                logger.debug("Targeting cancelled")
                return None

            if event.lbutton and event.mouse is not None and self._in_reach(*event.mouse, max_range):
                return event.mouse

    def target_monster(self, max_range: float | None = None) -> "Entity | None":
        """Wait for a click on a fighter other than the player."""
        while True:
            cell = self.target_tile(max_range)
            if cell is None:
                return None
            for entity in self._ctx.roster.at(*cell):
                if entity.fighter is not None and not self._ctx.roster.is_player(entity):
                    return entity

    def _in_reach(self, x: int, y: int, max_range: float | None) -> bool:
        if not self._ctx.fov.is_visible(x, y):
            return False
        return max_range is None or self._ctx.player.distance(x, y) <= max_range


__all__ = ["Targeter"]
