"""Custom exception hierarchy for the dungeon_crawl simulation core.

All exceptions inherit from DungeonCrawlError, enabling unified error
handling at the application boundary (main menu, quit-and-save) while
preserving domain-specific context.

User-input mistakes (bad menu letter, out-of-range target) are NOT
exceptions: menus and targeting return ``None`` instead.

Example:
    >>> from dungeon_crawl.core.exceptions import GenerationError
    >>> raise GenerationError("No room could be placed", attempts=3)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class DungeonCrawlError(Exception):
    """Base exception for all dungeon_crawl errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(DungeonCrawlError):
    """Base exception for all game engine errors."""


class InvalidGameStateError(GameEngineError):
    """Raised when the game enters an invalid or inconsistent state.

    Acting on a dead entity is NOT reported this way (it is ignored); this
    is reserved for programming errors such as asking for the same entity
    as both attacker and defender.
    """

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid game state error with state context.

        Args:
            message: Human-readable error description.
            current_state: The current invalid state identifier.
            expected_states: List of valid states that were expected.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_state:
            combined_details["current_state"] = current_state
        if expected_states:
            combined_details["expected_states"] = expected_states
        super().__init__(message, details=combined_details)


class CombatError(GameEngineError):
    """Raised when combat resolution is asked to do something impossible.

    Typically an attack involving an entity without a fighter component.
    """

    def __init__(
        self,
        message: str,
        *,
        attacker: str | None = None,
        defender: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize combat error with combatant context.

        Args:
            message: Human-readable error description.
            attacker: Name of the attacking entity.
            defender: Name of the defending entity.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if attacker:
            combined_details["attacker"] = attacker
        if defender:
            combined_details["defender"] = defender
        super().__init__(message, details=combined_details)


class GenerationError(GameEngineError):
    """Raised when a map generation attempt accepts zero rooms.

    The generator retries with the continuation of its random stream;
    when every attempt fails this error reaches the caller.
    """

    def __init__(
        self,
        message: str,
        *,
        attempts: int | None = None,
        width: int | None = None,
        height: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize generation error with map context.

        Args:
            message: Human-readable error description.
            attempts: Number of generation attempts made.
            width: Requested map width.
            height: Requested map height.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if attempts is not None:
            combined_details["attempts"] = attempts
        if width is not None:
            combined_details["width"] = width
        if height is not None:
            combined_details["height"] = height
        super().__init__(message, details=combined_details)


# =============================================================================
# Persistence Exceptions
# =============================================================================


class PersistenceError(DungeonCrawlError):
    """Raised when the save file cannot be written or read."""

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize persistence error with file context.

        Args:
            message: Human-readable error description.
            path: Path of the save file involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if path is not None:
            combined_details["path"] = str(path)
        super().__init__(message, details=combined_details)


class SaveGameNotFoundError(PersistenceError):
    """Raised when there is no saved game to load."""


class SaveGameCorruptError(PersistenceError):
    """Raised when the saved game exists but cannot be decoded."""


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(DungeonCrawlError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(DungeonCrawlError):
    """Raised when caller-supplied data violates a constraint."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "DungeonCrawlError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "GenerationError",
    # Persistence exceptions
    "PersistenceError",
    "SaveGameNotFoundError",
    "SaveGameCorruptError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
