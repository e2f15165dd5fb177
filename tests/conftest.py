"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the dungeon_crawl test suite.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator

    from dungeon_crawl.core.config import Settings
    from dungeon_crawl.engine.context import GameContext
    from dungeon_crawl.engine.interface import InputEvent, MenuView
    from dungeon_crawl.engine.render import RenderSnapshot
    from dungeon_crawl.models.entities import Entity
    from dungeon_crawl.models.tiles import TileGrid


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dungeon_crawl.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every test in an empty directory with no save store singleton."""
    import dungeon_crawl.storage.database as database

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(database, "_store_instance", None)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Start each test with no bound log context and default structlog config."""
    import structlog

    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of the environment."""
    from dungeon_crawl.core.config import Settings

    return Settings()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


# =============================================================================
# Collaborator Doubles
# =============================================================================


class ScriptedInput:
    """Input source replaying a fixed list of events.

    Once the script runs out it keeps answering ESCAPE; a loop that never
    accepts ESCAPE fails loudly instead of hanging.
    """

    MAX_EXTRA_POLLS = 100

    def __init__(self, events: Iterable[InputEvent] = ()) -> None:
        self.events = list(events)
        self.polled = 0
        self._extra = 0

    def push(self, *events: InputEvent) -> None:
        self.events.extend(events)

    def next_event(self) -> InputEvent:
        from dungeon_crawl.engine.interface import InputEvent, InputKind

        self.polled += 1
        if self.events:
            return self.events.pop(0)
        self._extra += 1
        if self._extra > self.MAX_EXTRA_POLLS:
            raise RuntimeError("Input script exhausted")
        return InputEvent(kind=InputKind.ESCAPE)


class RecordingPresenter:
    """Presenter that remembers everything it was asked to show."""

    def __init__(self) -> None:
        self.snapshots: list[RenderSnapshot] = []
        self.menus: list[MenuView] = []
        self.fullscreen_toggles = 0

    def present(self, snapshot: RenderSnapshot) -> None:
        self.snapshots.append(snapshot)

    def present_menu(self, view: MenuView) -> None:
        self.menus.append(view)

    def toggle_fullscreen(self) -> None:
        self.fullscreen_toggles += 1


@pytest.fixture
def scripted_input() -> ScriptedInput:
    return ScriptedInput()


@pytest.fixture
def scripted_input_factory() -> type[ScriptedInput]:
    """For tests that need more than one independent input script."""
    return ScriptedInput


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


# =============================================================================
# Map and Context Fixtures
# =============================================================================


@pytest.fixture
def open_grid() -> Callable[..., TileGrid]:
    """Factory for a walled rectangle whose interior is all floor."""
    from dungeon_crawl.models.tiles import TileGrid

    def _build(width: int = 20, height: int = 15) -> TileGrid:
        grid = TileGrid.filled(width, height)
        for x in range(1, width - 1):
            for y in range(1, height - 1):
                grid.carve(x, y)
        return grid

    return _build


@pytest.fixture
def make_context(
    settings: Settings,
    rng: random.Random,
    open_grid: Callable[..., TileGrid],
) -> Callable[..., GameContext]:
    """Factory for a hand-built game context around an open room.

    The player stands at (5, 5) unless another player is given, and the
    field of view is computed from there unless ``compute_fov`` is False.
    """
    from dungeon_crawl.engine.context import GameContext
    from dungeon_crawl.engine.fov import VisibilityEngine
    from dungeon_crawl.models.entities import create_player
    from dungeon_crawl.models.game_state import EntityRoster, GameState

    def _make(
        *others: Entity,
        player: Entity | None = None,
        grid: TileGrid | None = None,
        settings_override: Settings | None = None,
        rng_override: random.Random | None = None,
        targeter: object | None = None,
        compute_fov: bool = True,
    ) -> GameContext:
        active_settings = settings_override or settings
        player = player or create_player(5, 5)
        grid = grid or open_grid()
        roster = EntityRoster.with_player(player, list(others))
        state = GameState(tile_grid=grid)
        fov = VisibilityEngine(active_settings.fov)
        fov.reset(grid)
        ctx = GameContext(
            roster=roster,
            state=state,
            fov=fov,
            settings=active_settings,
            rng=rng_override or rng,
            targeter=targeter,
        )
        if compute_fov:
            fov.compute(player.pos)
        return ctx

    return _make
