"""Game-wide constants for the dungeon_crawl simulation core.

Colors are plain RGB triples; the presentation layer decides how to
draw them.
"""

from __future__ import annotations

Color = tuple[int, int, int]

# =============================================================================
# Tile Palette
# =============================================================================

COLOR_DARK_WALL: Color = (0, 0, 100)
"""Explored wall outside the field of view."""

COLOR_LIGHT_WALL: Color = (130, 110, 50)
"""Wall inside the field of view."""

COLOR_DARK_GROUND: Color = (50, 50, 150)
"""Explored floor outside the field of view."""

COLOR_LIGHT_GROUND: Color = (200, 180, 50)
"""Floor inside the field of view."""

# =============================================================================
# Named Colors
# =============================================================================

WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)
RED: Color = (255, 0, 0)
DARK_RED: Color = (191, 0, 0)
LIGHT_RED: Color = (255, 63, 63)
ORANGE: Color = (255, 127, 0)
DARKER_ORANGE: Color = (127, 63, 0)
YELLOW: Color = (255, 255, 0)
LIGHT_YELLOW: Color = (255, 255, 114)
GREEN: Color = (0, 255, 0)
LIGHT_GREEN: Color = (114, 255, 114)
DESATURATED_GREEN: Color = (63, 127, 63)
DARKER_GREEN: Color = (0, 127, 0)
LIGHT_CYAN: Color = (114, 255, 255)
SKY: Color = (0, 191, 255)
LIGHT_BLUE: Color = (63, 159, 255)
VIOLET: Color = (127, 0, 255)
LIGHT_VIOLET: Color = (185, 114, 255)
DARKER_RED: Color = (127, 0, 0)
LIGHT_GREY: Color = (159, 159, 159)

# =============================================================================
# Glyphs
# =============================================================================

PLAYER_GLYPH = "@"
CORPSE_GLYPH = "%"
STAIRS_GLYPH = ">"

# =============================================================================
# Menus
# =============================================================================

MAX_MENU_OPTIONS = 26
"""One option per letter a-z."""

EMPTY_INVENTORY_TEXT = "Inventory is empty."

# =============================================================================
# Message Log
# =============================================================================

MAX_STORED_MESSAGES = 200
"""Older messages are dropped; far more than the panel ever shows."""


__all__ = [
    "Color",
    "COLOR_DARK_WALL",
    "COLOR_LIGHT_WALL",
    "COLOR_DARK_GROUND",
    "COLOR_LIGHT_GROUND",
    "WHITE",
    "BLACK",
    "RED",
    "DARK_RED",
    "LIGHT_RED",
    "ORANGE",
    "DARKER_ORANGE",
    "YELLOW",
    "LIGHT_YELLOW",
    "GREEN",
    "LIGHT_GREEN",
    "DESATURATED_GREEN",
    "DARKER_GREEN",
    "LIGHT_CYAN",
    "SKY",
    "LIGHT_BLUE",
    "VIOLET",
    "LIGHT_VIOLET",
    "DARKER_RED",
    "LIGHT_GREY",
    "PLAYER_GLYPH",
    "CORPSE_GLYPH",
    "STAIRS_GLYPH",
    "MAX_MENU_OPTIONS",
    "EMPTY_INVENTORY_TEXT",
    "MAX_STORED_MESSAGES",
]
