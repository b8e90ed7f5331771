"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        TombcrawlError: Base exception for all application errors.
        InvalidGameStateError: Engine invariant violations.
        PersistenceError: Recoverable save/load failures.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
"""

from __future__ import annotations

from tombcrawl.core.config import (
    FovSettings,
    GameSettings,
    MapSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from tombcrawl.core.exceptions import (
    CombatError,
    ConfigurationError,
    CorruptSaveError,
    DiceRollError,
    GameEngineError,
    InvalidGameStateError,
    MapGenerationError,
    PersistenceError,
    SaveNotFoundError,
    TombcrawlError,
    ValidationError,
)
from tombcrawl.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Configuration
    "FovSettings",
    "GameSettings",
    "MapSettings",
    "Settings",
    "StorageSettings",
    "clear_settings_cache",
    "get_settings",
    # Exceptions
    "TombcrawlError",
    "ConfigurationError",
    "ValidationError",
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "DiceRollError",
    "MapGenerationError",
    "PersistenceError",
    "SaveNotFoundError",
    "CorruptSaveError",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
