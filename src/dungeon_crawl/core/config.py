"""Configuration management for the dungeon_crawl simulation core.

This module provides centralized configuration using pydantic-settings,
supporting environment variables, .env files, and runtime overrides.

Example:
    >>> from dungeon_crawl.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.map.max_rooms
    30

Environment Variables:
    DUNGEON_CRAWL_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DUNGEON_CRAWL_MAP_WIDTH: Map width in tiles
    DUNGEON_CRAWL_FOV_TORCH_RADIUS: Player sight radius
    DUNGEON_CRAWL_SAVE_PATH: Path of the save file
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dungeon_crawl.core.exceptions import ConfigurationError


class MapSettings(BaseSettings):
    """Configuration for procedural map generation.

    Attributes:
        width: Map width in tiles.
        height: Map height in tiles.
        room_min_size: Smallest room side, walls included.
        room_max_size: Largest room side, walls included.
        max_rooms: Room placement attempts per generation.
        generation_attempts: Whole-map retries when no room was accepted.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWL_MAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    width: int = Field(default=80, ge=1, le=1000, description="Map width")
    height: int = Field(default=43, ge=1, le=1000, description="Map height")
    room_min_size: int = Field(default=6, ge=3, description="Minimum room size")
    room_max_size: int = Field(default=10, ge=3, description="Maximum room size")
    max_rooms: int = Field(default=30, ge=0, le=500, description="Room attempts per map")
    generation_attempts: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Map retries after a zero-room attempt",
    )

    @model_validator(mode="after")
    def validate_room_sizes(self) -> "MapSettings":
        """Ensure the room size range is not empty.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If room_min_size > room_max_size.
        """
        if self.room_min_size > self.room_max_size:
            raise ConfigurationError(
                f"room_min_size ({self.room_min_size}) must not exceed "
                f"room_max_size ({self.room_max_size})",
                config_key="room_min_size",
            )
        return self


class FovSettings(BaseSettings):
    """Configuration for the field-of-view scan.

    Attributes:
        torch_radius: Sight radius around the player.
        light_walls: Whether walls bordering lit floor are visible.
        algorithm: Scan algorithm handed to tcod.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWL_FOV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    torch_radius: int = Field(default=10, ge=0, le=200, description="Sight radius")
    light_walls: bool = Field(default=True, description="Light walls bordering floor")
    algorithm: Literal["basic", "diamond", "shadow", "permissive", "restrictive"] = Field(
        default="basic",
        description="FOV algorithm",
    )


class GameSettings(BaseSettings):
    """Gameplay tuning values.

    Attributes:
        inventory_capacity: Maximum carried items.
        heal_amount: HP restored by a healing potion.
        lightning_damage: Damage of a lightning bolt.
        lightning_range: Reach of a lightning bolt.
        confuse_range: Reach of a confusion scroll.
        confuse_num_turns: Turns of confusion.
        fireball_radius: Blast radius of a fireball.
        fireball_damage: Damage dealt by a fireball.
        level_up_base: Experience needed for the first level up.
        level_up_factor: Additional experience needed per level.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWL_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    inventory_capacity: int = Field(default=26, ge=1, le=26, description="Inventory slots")
    heal_amount: int = Field(default=40, ge=0)
    lightning_damage: int = Field(default=40, ge=0)
    lightning_range: int = Field(default=5, ge=0)
    confuse_range: int = Field(default=8, ge=0)
    confuse_num_turns: int = Field(default=10, ge=0)
    fireball_radius: int = Field(default=3, ge=0)
    fireball_damage: int = Field(default=25, ge=0)
    level_up_base: int = Field(default=200, ge=1)
    level_up_factor: int = Field(default=150, ge=0)


class UISettings(BaseSettings):
    """Shape of the renderable state handed to the presentation layer.

    Attributes:
        bar_width: Width of the HP bar.
        panel_height: Height of the bottom panel.
        message_width: Wrap width of message log lines.
        message_height: Number of message log lines shown.
        inventory_width: Width of the inventory menu.
        character_screen_width: Width of the character screen.
        level_screen_width: Width of the level-up menu.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWL_UI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bar_width: int = Field(default=20, ge=1)
    panel_height: int = Field(default=7, ge=1)
    message_width: int = Field(default=58, ge=10)
    message_height: int = Field(default=6, ge=1)
    inventory_width: int = Field(default=50, ge=10)
    character_screen_width: int = Field(default=30, ge=10)
    level_screen_width: int = Field(default=40, ge=10)


class StorageSettings(BaseSettings):
    """Configuration for the save file.

    Attributes:
        save_path: The single, well-known save file.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    save_path: Path = Field(
        default=Path("savegame.db"),
        description="Path to the SQLite save file",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        map: Map generation settings.
        fov: Field-of-view settings.
        game: Gameplay tuning.
        ui: Renderable state shape.
        storage: Save file settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="Tombs of the Ancient Kings", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    map: MapSettings = Field(default_factory=MapSettings)
    fov: FovSettings = Field(default_factory=FovSettings)
    game: GameSettings = Field(default_factory=GameSettings)
    ui: UISettings = Field(default_factory=UISettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "MapSettings",
    "FovSettings",
    "GameSettings",
    "UISettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
