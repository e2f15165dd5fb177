"""Boundary with the input and presentation collaborators.

The core never polls a keyboard or draws a pixel. Instead it pulls
``InputEvent`` values from an ``InputSource`` and pushes render snapshots
and menu views to a ``Presenter``. Both are structural protocols so any
frontend (a tcod console, a curses screen, a scripted test double) can
plug in.

Menus are blocking: they present one view, wait for exactly one event and
map a letter to an option index. Anything else is "no selection", which
is a normal return value, not an error.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from dungeon_crawl.core.constants import EMPTY_INVENTORY_TEXT, MAX_MENU_OPTIONS
from dungeon_crawl.core.exceptions import ValidationError


if TYPE_CHECKING:
    from dungeon_crawl.engine.render import RenderSnapshot
    from dungeon_crawl.models.entities import Entity


# =============================================================================
# Input Events
# =============================================================================


class InputKind(StrEnum):
    """Discrete input events understood by the turn engine."""

    MOVE = "move"
    PICK_UP = "pick_up"
    INVENTORY = "inventory"
    DROP = "drop"
    DESCEND = "descend"
    CHARACTER_SCREEN = "character_screen"
    FULLSCREEN = "fullscreen"
    QUIT = "quit"
    ESCAPE = "escape"
    KEY = "key"
    MOUSE = "mouse"
    NONE = "none"


@dataclass(frozen=True)
class InputEvent:
    """One polled input event.

    ``char`` carries the printable character of any key press, so menus
    can read a letter whatever the event kind. Mouse fields are in map
    cells and are only consumed by targeting and the mouse-look line.
    """

    kind: InputKind = InputKind.NONE
    dx: int = 0
    dy: int = 0
    char: str | None = None
    mouse_x: int | None = None
    mouse_y: int | None = None
    lbutton: bool = False
    rbutton: bool = False

    @classmethod
    def move(cls, dx: int, dy: int) -> "InputEvent":
        return cls(kind=InputKind.MOVE, dx=dx, dy=dy)

    @classmethod
    def key(cls, char: str) -> "InputEvent":
        return cls(kind=InputKind.KEY, char=char)

    @classmethod
    def click(cls, x: int, y: int, *, right: bool = False) -> "InputEvent":
        return cls(kind=InputKind.MOUSE, mouse_x=x, mouse_y=y, lbutton=not right, rbutton=right)

    @property
    def mouse(self) -> tuple[int, int] | None:
        if self.mouse_x is None or self.mouse_y is None:
            return None
        return self.mouse_x, self.mouse_y


# =============================================================================
# Collaborator Protocols
# =============================================================================


@dataclass(frozen=True)
class MenuView:
    """A modal menu as handed to the presenter."""

    header: str
    options: tuple[str, ...] = field(default_factory=tuple)
    width: int = 50

    def lines(self) -> list[str]:
        """Options prefixed with their selection letter."""
        return [f"({chr(ord('a') + index)}) {text}" for index, text in enumerate(self.options)]


class InputSource(Protocol):
    def next_event(self) -> InputEvent:
        """Block until the next input event is available."""
        ...


class Presenter(Protocol):
    def present(self, snapshot: "RenderSnapshot") -> None:
        """Draw one frame of game state."""
        ...

    def present_menu(self, view: MenuView) -> None:
        """Draw a modal menu over the current frame."""
        ...

    def toggle_fullscreen(self) -> None:
        ...


# =============================================================================
# Menus
# =============================================================================


def menu(
    header: str,
    options: Sequence[str],
    width: int,
    input_source: InputSource,
    presenter: Presenter,
) -> int | None:
    """Show a menu and wait for one selection.

    Returns:
        The selected option index, or None for anything but a valid letter.

    Raises:
        ValidationError: If more options are given than there are letters.
    """
    if len(options) > MAX_MENU_OPTIONS:
        raise ValidationError(
            f"Cannot have a menu with more than {MAX_MENU_OPTIONS} options.",
            field_name="options",
            invalid_value=len(options),
        )

    presenter.present_menu(MenuView(header=header, options=tuple(options), width=width))
    event = input_source.next_event()

    if event.kind == InputKind.FULLSCREEN:
        presenter.toggle_fullscreen()
        return None

    if event.char is None or len(event.char) != 1:
        return None
    index = ord(event.char.lower()) - ord("a")
    if 0 <= index < len(options):
        return index
    return None


def inventory_options(inventory: Sequence["Entity"]) -> list[str]:
    """Menu lines for the inventory, marking equipped items."""
    if not inventory:
        return [EMPTY_INVENTORY_TEXT]
    options = []
    for item in inventory:
        text = item.name
        if item.equipment is not None and item.equipment.equipped:
            text = f"{text} (on {item.equipment.slot})"
        options.append(text)
    return options


def inventory_menu(
    header: str,
    inventory: Sequence["Entity"],
    width: int,
    input_source: InputSource,
    presenter: Presenter,
) -> "Entity | None":
    """Let the player pick an inventory item."""
    index = menu(header, inventory_options(inventory), width, input_source, presenter)
    if index is None or not inventory:
        return None
    return inventory[index]


def msgbox(text: str, width: int, input_source: InputSource, presenter: Presenter) -> None:
    """A menu with no options, dismissed by any event."""
    menu(text, [], width, input_source, presenter)


__all__ = [
    "InputKind",
    "InputEvent",
    "MenuView",
    "InputSource",
    "Presenter",
    "menu",
    "inventory_options",
    "inventory_menu",
    "msgbox",
]
