"""Structured diagnostic logging for the dungeon_crawl simulation core.

Unrelated to the in-game message log, which lives on GameState. Every
entry carries the game context bound by the turn engine (how the game
was started and the current dungeon level), so a session's log can be
filtered per game.

Example:
    >>> from dungeon_crawl.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Map generated", rooms=12, dungeon_level=1)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from dungeon_crawl.core.config import Settings


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    event_dict["app"] = "dungeon_crawl"
    return event_dict


def configure_logging(*, level: str = "INFO", json_format: bool = False) -> None:
    """Configure structlog for the simulation core.

    Output goes to stderr; stdout belongs to whatever presenter draws the game.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, render entries as JSON lines.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
    ]

    if json_format:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def configure_from_settings(settings: Settings) -> None:
    """Apply ``Settings.log_level``; debug mode keeps the readable console format."""
    configure_logging(level=settings.log_level, json_format=not settings.debug)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables included in all subsequent entries.

    Example:
        >>> bind_context(dungeon_level=3)
        >>> logger.info("Player descended")  # includes dungeon_level
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def start_game_context(game: str, dungeon_level: int) -> None:
    """Drop the previous game's context and bind the new game's."""
    clear_context()
    bind_context(game=game, dungeon_level=dungeon_level)


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "start_game_context",
]
