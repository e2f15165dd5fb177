"""Game engine module for the dungeon_crawl simulation core.

This module provides map generation, field of view, combat, monster AI,
inventory management, targeting and the turn loop.

Submodules:
    spawn: Depth-scaled spawn tables and weighted choice
    mapgen: Rooms, corridors and spawn placement
    fov: Field of view and explored-tile policy
    combat: Attacks, damage, death and item effects
    ai: Monster behaviour (basic and confused)
    inventory: Pick-up, drop, use, equip and effective stats
    interface: Input events, presenter protocol and menus
    targeting: Blocking target picker for aimed items
    render: Render snapshot for the presentation layer
    loop: Turn engine and main menu

Example:
    >>> from dungeon_crawl.engine import TurnEngine, PlayerAction
    >>>
    >>> engine = TurnEngine.new_game(input_source=keyboard, presenter=screen)
    >>> while engine.frame() != PlayerAction.EXIT:
    ...     pass
"""

from __future__ import annotations

# =============================================================================
# Generation
# =============================================================================
from dungeon_crawl.engine.mapgen import Corridor, GeneratedLevel, MapGenerator
from dungeon_crawl.engine.spawn import Transition, from_dungeon_level, random_choice

# =============================================================================
# Visibility
# =============================================================================
from dungeon_crawl.engine.fov import VisibilityEngine

# =============================================================================
# Resolution
# =============================================================================
from dungeon_crawl.engine.ai import take_turn
from dungeon_crawl.engine.combat import apply_confusion, attack, heal, take_damage
from dungeon_crawl.engine.context import GameContext
from dungeon_crawl.engine.inventory import (
    defense,
    drop,
    dequip,
    equip,
    max_hp,
    pick_up,
    power,
    toggle_equip,
    use_item,
)

# =============================================================================
# Input and Presentation
# =============================================================================
from dungeon_crawl.engine.interface import (
    InputEvent,
    InputKind,
    InputSource,
    MenuView,
    Presenter,
    inventory_menu,
    menu,
    msgbox,
)
from dungeon_crawl.engine.render import RenderSnapshot, build_snapshot
from dungeon_crawl.engine.targeting import Targeter

# =============================================================================
# Turn Loop
# =============================================================================
from dungeon_crawl.engine.loop import (
    FrameState,
    PlayerAction,
    PlayResult,
    TurnEngine,
    main_menu,
)


__all__ = [
    # Generation
    "Corridor",
    "GeneratedLevel",
    "MapGenerator",
    "Transition",
    "from_dungeon_level",
    "random_choice",
    # Visibility
    "VisibilityEngine",
    # Resolution
    "GameContext",
    "take_turn",
    "attack",
    "take_damage",
    "heal",
    "apply_confusion",
    "power",
    "defense",
    "max_hp",
    "pick_up",
    "drop",
    "use_item",
    "equip",
    "dequip",
    "toggle_equip",
    # Input and Presentation
    "InputEvent",
    "InputKind",
    "InputSource",
    "MenuView",
    "Presenter",
    "menu",
    "inventory_menu",
    "msgbox",
    "RenderSnapshot",
    "build_snapshot",
    "Targeter",
    # Turn Loop
    "FrameState",
    "PlayerAction",
    "PlayResult",
    "TurnEngine",
    "main_menu",
]
