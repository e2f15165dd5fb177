"""Turn engine: the frame loop driving player input, AI and level changes.

One call to ``TurnEngine.frame`` is one frame:

1. recompute the field of view if the player moved,
2. hand a render snapshot to the presenter,
3. resolve any pending level-up (blocking stat choice),
4. poll one input event and resolve it to a ``PlayerAction``,
5. if the action took a turn and the player lives, run every AI once.

Turn costs:
    move, attack, pick-up on an item tile and a successful drop consume a
    turn. Using or (de)equipping an item, descending, the character screen,
    menus, fullscreen and a pick-up with nothing underfoot do not.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from dungeon_crawl.core import constants as c
from dungeon_crawl.core.config import get_settings
from dungeon_crawl.core.exceptions import PersistenceError
from dungeon_crawl.core.logging import bind_context, configure_from_settings, get_logger, start_game_context
from dungeon_crawl.engine.ai import move, take_turn
from dungeon_crawl.engine.combat import attack, heal
from dungeon_crawl.engine.context import GameContext
from dungeon_crawl.engine.fov import VisibilityEngine
from dungeon_crawl.engine.interface import InputEvent, InputKind, inventory_menu, menu, msgbox
from dungeon_crawl.engine.inventory import defense, drop, equip, max_hp, pick_up, power, use_item
from dungeon_crawl.engine.mapgen import MapGenerator
from dungeon_crawl.engine.render import RenderSnapshot, build_snapshot
from dungeon_crawl.engine.targeting import Targeter
from dungeon_crawl.models.entities import create_item, create_player
from dungeon_crawl.models.enums import ItemKind, StatChoice
from dungeon_crawl.models.game_state import EntityRoster, GameState
from dungeon_crawl.storage.database import get_save_store


if TYPE_CHECKING:
    from dungeon_crawl.core.config import Settings
    from dungeon_crawl.engine.interface import InputSource, Presenter
    from dungeon_crawl.models.entities import Entity
    from dungeon_crawl.storage.database import SaveGameStore

logger = get_logger(__name__)

WELCOME_MESSAGE = "Welcome stranger! Prepare to perish in the Tombs of the Ancient Kings."
NO_SAVE_MESSAGE = "\n No saved game to load.\n"
SAVE_FAILED_MESSAGE = "\n Could not save the game!\n"
MAIN_MENU_WIDTH = 24


# =============================================================================
# Actions and Results
# =============================================================================


class PlayerAction(StrEnum):
    """Outcome of resolving one input event."""

    TOOK_TURN = "took_turn"
    """The player spent a turn; monsters act next."""

    DIDNT_TAKE_TURN = "didnt_take_turn"
    """Menus, toggles and free actions; monsters wait."""

    EXIT = "exit"
    """Leave the game loop."""


class FrameState(StrEnum):
    """Where the engine is within the current frame."""

    AWAITING_INPUT = "awaiting_input"
    RESOLVING_PLAYER_ACTION = "resolving_player_action"
    RESOLVING_AI = "resolving_ai"


@dataclass
class PlayResult:
    """Result of a full play session.

    Attributes:
        saved: Whether the game was saved on exit.
        error: Why saving failed, if it did.
        frames: Number of frames played.
    """

    saved: bool
    error: str = ""
    frames: int = 0


# =============================================================================
# Turn Engine
# =============================================================================


class TurnEngine:
    """Owns the entity roster and game state and runs the frame loop.

    Attributes:
        ctx: Shared handles lent to combat, AI and inventory resolution.
        frame_state: Current position within the frame.
    """

    def __init__(
        self,
        roster: EntityRoster,
        state: GameState,
        *,
        input_source: "InputSource",
        presenter: "Presenter",
        settings: "Settings | None" = None,
        rng: random.Random | None = None,
        store: "SaveGameStore | None" = None,
        generator: MapGenerator | None = None,
    ) -> None:
        """Initialize the engine around an existing game.

        Args:
            roster: Entities on the current map, including the player.
            state: Map, messages, inventory and depth.
            input_source: Where input events come from.
            presenter: Where frames and menus are sent.
            settings: Application settings; the global ones by default.
            rng: Random source for AI and map generation.
            store: Save store; the global one by default.
            generator: Map generator used when descending.
        """
        self._settings = settings or get_settings()
        self._rng = rng or random.Random()
        self._input = input_source
        self._presenter = presenter
        self._store = store
        self._generator = generator or MapGenerator(self._settings.map, self._rng)
        self._mouse: tuple[int, int] | None = None
        self.frame_state = FrameState.AWAITING_INPUT

        fov = VisibilityEngine(self._settings.fov)
        self.ctx = GameContext(
            roster=roster,
            state=state,
            fov=fov,
            settings=self._settings,
            rng=self._rng,
        )
        self.ctx.targeter = Targeter(self.ctx, input_source, presenter)
        fov.reset(state.tile_grid)

        logger.info(
            "TurnEngine initialized",
            dungeon_level=state.dungeon_level,
            entities=len(roster),
        )

    @classmethod
    def new_game(
        cls,
        *,
        input_source: "InputSource",
        presenter: "Presenter",
        settings: "Settings | None" = None,
        rng: random.Random | None = None,
        store: "SaveGameStore | None" = None,
        player_name: str = "player",
    ) -> "TurnEngine":
        """Start a fresh game on dungeon level 1."""
        settings = settings or get_settings()
        rng = rng or random.Random()
        generator = MapGenerator(settings.map, rng)
        level = generator.generate(1)

        player = create_player(*level.player_start, name=player_name)
        roster = EntityRoster.with_player(player, level.entities)
        state = GameState(tile_grid=level.grid, dungeon_level=1)

        engine = cls(
            roster,
            state,
            input_source=input_source,
            presenter=presenter,
            settings=settings,
            rng=rng,
            store=store,
            generator=generator,
        )

        dagger = create_item(ItemKind.DAGGER)
        state.inventory.append(dagger)
        equip(dagger, engine.ctx)
        state.log(WELCOME_MESSAGE, c.RED)

        start_game_context("new", state.dungeon_level)
        logger.info("New game started", player=player_name)
        return engine

    @classmethod
    def load(
        cls,
        *,
        input_source: "InputSource",
        presenter: "Presenter",
        settings: "Settings | None" = None,
        rng: random.Random | None = None,
        store: "SaveGameStore | None" = None,
    ) -> "TurnEngine":
        """Resume the saved game.

        Raises:
            PersistenceError: If there is no loadable save.
        """
        store = store or get_save_store()
        roster, state = store.load()
        start_game_context("loaded", state.dungeon_level)
        return cls(
            roster,
            state,
            input_source=input_source,
            presenter=presenter,
            settings=settings,
            rng=rng,
            store=store,
        )

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def roster(self) -> EntityRoster:
        return self.ctx.roster

    @property
    def state(self) -> GameState:
        return self.ctx.state

    @property
    def fov(self) -> VisibilityEngine:
        return self.ctx.fov

    @property
    def player(self) -> "Entity":
        return self.ctx.roster.player

    @property
    def store(self) -> "SaveGameStore":
        if self._store is None:
            self._store = get_save_store()
        return self._store

    def level_up_xp(self) -> int:
        """Experience needed for the player's next level."""
        game = self._settings.game
        return game.level_up_base + self.player.level * game.level_up_factor

    def snapshot(self) -> RenderSnapshot:
        return build_snapshot(self.ctx, self._mouse)

    # -------------------------------------------------------------------------
    # Frame Loop
    # -------------------------------------------------------------------------

    def frame(self) -> PlayerAction:
        """Run one frame and return the player's action."""
        self.frame_state = FrameState.AWAITING_INPUT
        self.fov.update(self.player.pos)
        self._presenter.present(self.snapshot())
        self.check_level_up()

        event = self._input.next_event()
        action = self.handle_event(event)

        if action == PlayerAction.TOOK_TURN and self.player.alive:
            self.run_ai()

        self.frame_state = FrameState.AWAITING_INPUT
        return action

    def play(self) -> PlayResult:
        """Run frames until the player exits, then save.

        A failed save is logged and reported in the result, never raised.
        """
        frames = 0
        while True:
            action = self.frame()
            frames += 1
            if action == PlayerAction.EXIT:
                break

        try:
            self.save()
        except PersistenceError as exc:
            logger.error("Save on exit failed", error=exc.message)
            self.state.log("Could not save the game!", c.RED)
            return PlayResult(saved=False, error=str(exc), frames=frames)
        return PlayResult(saved=True, frames=frames)

    def handle_event(self, event: InputEvent) -> PlayerAction:
        """Resolve one input event to a player action."""
        self.frame_state = FrameState.RESOLVING_PLAYER_ACTION
        if event.mouse is not None:
            self._mouse = event.mouse

        kind = event.kind
        if kind == InputKind.FULLSCREEN:
            self._presenter.toggle_fullscreen()
            return PlayerAction.DIDNT_TAKE_TURN
        if kind in (InputKind.QUIT, InputKind.ESCAPE):
            return PlayerAction.EXIT
        if kind == InputKind.CHARACTER_SCREEN:
            self.show_character_screen()
            return PlayerAction.DIDNT_TAKE_TURN

        if not self.player.alive:
            return PlayerAction.DIDNT_TAKE_TURN

        if kind == InputKind.MOVE:
            self.player_move_or_attack(event.dx, event.dy)
            return PlayerAction.TOOK_TURN

        if kind == InputKind.PICK_UP:
            item = self.roster.item_at(*self.player.pos)
            if item is None:
                return PlayerAction.DIDNT_TAKE_TURN
            pick_up(item, self.ctx)
            return PlayerAction.TOOK_TURN

        if kind == InputKind.INVENTORY:
            item = self._choose_item("Press the key next to an item to use it, or any other to cancel.\n")
            if item is not None:
                use_item(item, self.ctx)
            return PlayerAction.DIDNT_TAKE_TURN

        if kind == InputKind.DROP:
            item = self._choose_item("Press the key next to an item to drop it, or any other to cancel.\n")
            if item is None:
                return PlayerAction.DIDNT_TAKE_TURN
            drop(item, self.ctx)
            return PlayerAction.TOOK_TURN

        if kind == InputKind.DESCEND:
            if self.on_stairs():
                self.next_level()
            return PlayerAction.DIDNT_TAKE_TURN

        return PlayerAction.DIDNT_TAKE_TURN

    def _choose_item(self, header: str) -> "Entity | None":
        return inventory_menu(
            header,
            self.state.inventory,
            self._settings.ui.inventory_width,
            self._input,
            self._presenter,
        )

    def player_move_or_attack(self, dx: int, dy: int) -> None:
        player = self.player
        x, y = player.x + dx, player.y + dy

        target = self.roster.fighter_at(x, y)
        if target is not None and not self.roster.is_player(target):
            attack(player, target, self.ctx)
        else:
            move(player, dx, dy, self.ctx)

    def run_ai(self) -> None:
        """Give every AI-driven entity one activation, in slot order."""
        self.frame_state = FrameState.RESOLVING_AI
        for monster in self.roster.ai_entities():
            if monster.ai is not None:
                take_turn(monster, self.ctx)

    # -------------------------------------------------------------------------
    # Progression
    # -------------------------------------------------------------------------

    def check_level_up(self) -> int:
        """Apply every level the player's experience pays for.

        Each level blocks on a stat choice until a valid option is picked.

        Returns:
            Number of levels gained.
        """
        player = self.player
        if player.fighter is None:
            return 0

        gained = 0
        while player.fighter.xp >= self.level_up_xp():
            player.fighter.xp -= self.level_up_xp()
            player.level += 1
            gained += 1
            self.state.log(
                f"Your battle skills grow stronger! You reached level {player.level}!",
                c.YELLOW,
            )
            self._apply_stat_choice(self._choose_stat())
            logger.info("Player levelled up", level=player.level)
        return gained

    def _choose_stat(self) -> StatChoice:
        fighter = self.player.fighter
        options = [
            f"Constitution (+20 HP, from {fighter.base_max_hp})",
            f"Strength (+1 attack, from {fighter.base_power})",
            f"Agility (+1 defense, from {fighter.base_defense})",
        ]
        choices = list(StatChoice)
        choice = None
        while choice is None:
            choice = menu(
                "Level up! Choose a stat to raise:\n",
                options,
                self._settings.ui.level_screen_width,
                self._input,
                self._presenter,
            )
        return choices[choice]

    def _apply_stat_choice(self, choice: StatChoice) -> None:
        fighter = self.player.fighter
        if choice == StatChoice.CONSTITUTION:
            fighter.base_max_hp += 20
            fighter.hp += 20
        elif choice == StatChoice.STRENGTH:
            fighter.base_power += 1
        elif choice == StatChoice.AGILITY:
            fighter.base_defense += 1

    def show_character_screen(self) -> None:
        player = self.player
        xp = player.fighter.xp if player.fighter is not None else 0
        text = (
            "Character information\n\n"
            f"Level: {player.level}\n"
            f"Experience: {xp}\n"
            f"Experience to level up: {self.level_up_xp()}\n\n"
            f"Maximum HP: {max_hp(player, self.ctx)}\n"
            f"Attack: {power(player, self.ctx)}\n"
            f"Defense: {defense(player, self.ctx)}"
        )
        msgbox(text, self._settings.ui.character_screen_width, self._input, self._presenter)

    def on_stairs(self) -> bool:
        return any(
            entity.glyph == c.STAIRS_GLYPH and entity.always_visible
            for entity in self.roster.at(*self.player.pos)
        )

    def next_level(self) -> None:
        """Descend: rest, regenerate the map one level deeper, keep the player."""
        depth = self.state.dungeon_level + 1
        level = self._generator.generate(depth)

        player = self.player
        self.state.log("You take a moment to rest, and recover your strength.", c.LIGHT_VIOLET)
        heal(player, max_hp(player, self.ctx) // 2, self.ctx)
        self.state.log(
            "After a rare moment of peace, you descend deeper into the heart of the dungeon...",
            c.RED,
        )

        self.roster.truncate_to_player()
        for entity in level.entities:
            self.roster.add(entity)
        player.set_pos(*level.player_start)
        self.state.tile_grid = level.grid
        self.state.dungeon_level = depth
        self.fov.reset(level.grid)
        bind_context(dungeon_level=depth)

        logger.info("Descended", entities=len(self.roster))

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self) -> None:
        """Save the roster and game state.

        Raises:
            PersistenceError: If the save could not be written.
        """
        self.store.save(self.roster, self.state)


# =============================================================================
# Main Menu
# =============================================================================


MAIN_MENU_OPTIONS = ["Play a new game", "Continue last game", "Quit"]


def main_menu(
    input_source: "InputSource",
    presenter: "Presenter",
    settings: "Settings | None" = None,
    store: "SaveGameStore | None" = None,
    rng: random.Random | None = None,
) -> PlayResult | None:
    """Offer new game, continue or quit until the player quits.

    Returns:
        The result of the last game played, or None if none was.
    """
    settings = settings or get_settings()
    store = store or get_save_store()
    configure_from_settings(settings)
    last: PlayResult | None = None

    def play(engine: TurnEngine) -> PlayResult:
        result = engine.play()
        if not result.saved:
            msgbox(SAVE_FAILED_MESSAGE, MAIN_MENU_WIDTH, input_source, presenter)
        return result

    while True:
        choice = menu(
            settings.app_name.upper(),
            MAIN_MENU_OPTIONS,
            MAIN_MENU_WIDTH,
            input_source,
            presenter,
        )

        if choice == 0:
            engine = TurnEngine.new_game(
                input_source=input_source,
                presenter=presenter,
                settings=settings,
                rng=rng,
                store=store,
            )
            last = play(engine)
        elif choice == 1:
            try:
                engine = TurnEngine.load(
                    input_source=input_source,
                    presenter=presenter,
                    settings=settings,
                    rng=rng,
                    store=store,
                )
            except PersistenceError as exc:
                logger.warning("Continue failed", error=exc.message)
                msgbox(NO_SAVE_MESSAGE, MAIN_MENU_WIDTH, input_source, presenter)
                continue
            last = play(engine)
        elif choice == 2:
            return last


__all__ = [
    "PlayerAction",
    "FrameState",
    "PlayResult",
    "TurnEngine",
    "main_menu",
    "MAIN_MENU_OPTIONS",
    "WELCOME_MESSAGE",
    "NO_SAVE_MESSAGE",
    "SAVE_FAILED_MESSAGE",
]
