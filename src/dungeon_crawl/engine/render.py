"""Renderable state handed to the presentation layer.

A ``RenderSnapshot`` is a plain, immutable description of one frame:
which explored cells to paint and with which palette, the entity draw
list back-to-front, the HP bar, depth, the wrapped message panel and the
mouse-look line. Nothing here draws.
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dungeon_crawl.core import constants as c
from dungeon_crawl.engine.inventory import max_hp


if TYPE_CHECKING:
    from dungeon_crawl.engine.context import GameContext


@dataclass(frozen=True)
class CellView:
    """One explored map cell."""

    x: int
    y: int
    visible: bool
    wall: bool
    color: c.Color


@dataclass(frozen=True)
class EntityView:
    x: int
    y: int
    glyph: str
    color: c.Color
    name: str


@dataclass(frozen=True)
class MessageLine:
    text: str
    color: c.Color


@dataclass(frozen=True)
class RenderSnapshot:
    """Everything the presenter needs to draw one frame.

    Attributes:
        width: Map width in cells.
        height: Map height in cells.
        cells: Explored cells only; unexplored cells are not drawn.
        entities: Draw list, back to front.
        hp: Player's current HP.
        max_hp: Player's effective max HP.
        dungeon_level: Current depth.
        messages: Wrapped message panel lines, oldest first.
        names_under_mouse: Mouse-look text.
        visible: Cells currently in the player's field of view.
    """

    width: int
    height: int
    cells: tuple[CellView, ...] = field(default_factory=tuple)
    entities: tuple[EntityView, ...] = field(default_factory=tuple)
    hp: int = 0
    max_hp: int = 0
    dungeon_level: int = 1
    messages: tuple[MessageLine, ...] = field(default_factory=tuple)
    names_under_mouse: str = ""
    visible: frozenset[tuple[int, int]] = field(default_factory=frozenset)

    def cell_at(self, x: int, y: int) -> CellView | None:
        for cell in self.cells:
            if (cell.x, cell.y) == (x, y):
                return cell
        return None


def tile_color(visible: bool, wall: bool) -> c.Color:
    if visible:
        return c.COLOR_LIGHT_WALL if wall else c.COLOR_LIGHT_GROUND
    return c.COLOR_DARK_WALL if wall else c.COLOR_DARK_GROUND


def wrap_messages(ctx: "GameContext") -> tuple[MessageLine, ...]:
    """Newest messages wrapped to the panel, oldest lines cut first."""
    ui = ctx.settings.ui
    lines: list[MessageLine] = []
    for message in ctx.state.messages.tail(ui.message_height):
        for line in textwrap.wrap(message.text, ui.message_width) or [""]:
            lines.append(MessageLine(text=line, color=message.color))
    return tuple(lines[-ui.message_height:])


def names_under_mouse(mouse: tuple[int, int] | None, ctx: "GameContext") -> str:
    """Comma-separated names of the visible entities under the mouse."""
    if mouse is None or not ctx.fov.is_visible(*mouse):
        return ""
    names = [entity.name for entity in ctx.roster.at(*mouse)]
    return ", ".join(names).capitalize()


def build_snapshot(ctx: "GameContext", mouse: tuple[int, int] | None = None) -> RenderSnapshot:
    """Capture the current frame."""
    grid = ctx.state.tile_grid
    cells = []
    for x in range(grid.width):
        for y in range(grid.height):
            tile = grid.tile(x, y)
            if not tile.explored:
                continue
            visible = ctx.fov.is_visible(x, y)
            cells.append(
                CellView(
                    x=x,
                    y=y,
                    visible=visible,
                    wall=tile.blocks_sight,
                    color=tile_color(visible, tile.blocks_sight),
                )
            )

    player = ctx.player
    others = [
        entity
        for entity in ctx.roster.entities
        if not ctx.roster.is_player(entity) and ctx.fov.should_render(entity, grid)
    ]
    # non-blocking entities draw first, under anything that blocks
    ordered = sorted(others, key=lambda entity: entity.blocks) + [player]
    entities = tuple(
        EntityView(x=e.x, y=e.y, glyph=e.glyph, color=e.color, name=e.name) for e in ordered
    )

    return RenderSnapshot(
        width=grid.width,
        height=grid.height,
        cells=tuple(cells),
        entities=entities,
        hp=player.fighter.hp if player.fighter is not None else 0,
        max_hp=max_hp(player, ctx),
        dungeon_level=ctx.state.dungeon_level,
        messages=wrap_messages(ctx),
        names_under_mouse=names_under_mouse(mouse, ctx),
        visible=ctx.fov.visible,
    )


__all__ = [
    "CellView",
    "EntityView",
    "MessageLine",
    "RenderSnapshot",
    "tile_color",
    "wrap_messages",
    "names_under_mouse",
    "build_snapshot",
]
