"""Shared handles passed to every resolver during a frame."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dungeon_crawl.core import constants as c


if TYPE_CHECKING:
    from dungeon_crawl.core.config import Settings
    from dungeon_crawl.engine.fov import VisibilityEngine
    from dungeon_crawl.engine.targeting import Targeter
    from dungeon_crawl.models.entities import Entity
    from dungeon_crawl.models.game_state import EntityRoster, GameState


@dataclass
class GameContext:
    """Everything combat, AI and inventory code may read or mutate.

    The turn engine owns the roster and the state; resolvers borrow them
    through this context for the duration of one frame.

    Attributes:
        roster: Entities on the current map.
        state: Map, message log, inventory and depth.
        fov: The player's visibility engine.
        settings: Application settings.
        rng: Random source for AI and generation.
        targeter: Targeting sub-loop, or None when no one can pick targets.
    """

    roster: "EntityRoster"
    state: "GameState"
    fov: "VisibilityEngine"
    settings: "Settings"
    rng: random.Random = field(default_factory=random.Random)
    targeter: "Targeter | None" = None

    @property
    def player(self) -> "Entity":
        return self.roster.player

    def log(self, text: str, color: c.Color = c.WHITE) -> None:
        self.state.log(text, color)


__all__ = ["GameContext"]
