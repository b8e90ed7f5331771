"""Custom exception hierarchy for the tombcrawl simulation engine.

This module defines the exception hierarchy used across the engine. All
exceptions inherit from TombcrawlError, enabling unified error handling
at the application boundary (the main menu) while preserving
domain-specific context.

Soft gameplay failures (full inventory, no target in range, already at
full health) are never raised: they are reported through the in-game
message log. Only configuration problems, broken engine invariants and
save/load failures are exceptions.

Example:
    >>> from tombcrawl.core.exceptions import SaveNotFoundError
    >>> raise SaveNotFoundError("No saved game to load", path="savegame")
"""

from __future__ import annotations

from typing import Any


class TombcrawlError(Exception):
    """Base exception for all tombcrawl errors.

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
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(TombcrawlError):
    """Raised when configuration is missing or inconsistent."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with the offending key.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(TombcrawlError):
    """Raised when a value fails engine-level validation."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        super().__init__(message, details=combined_details)


# =============================================================================
# Game Engine Exceptions
# =============================================================================


class GameEngineError(TombcrawlError):
    """Base exception for all simulation engine errors."""


class InvalidGameStateError(GameEngineError):
    """Raised when an engine invariant is violated.

    This signals a bug in the engine (for example the player no longer
    sitting at index 0 of the entity store) and is never recovered from.
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
    """Raised when combat resolution is asked to do something impossible."""

    def __init__(
        self,
        message: str,
        *,
        attacker: str | None = None,
        defender: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize combat error with the entities involved.

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


class DiceRollError(GameEngineError):
    """Raised when a random draw cannot be made (e.g. all weights are zero)."""


class MapGenerationError(GameEngineError):
    """Raised when a level cannot be generated at all."""

    def __init__(
        self,
        message: str,
        *,
        dungeon_level: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize map generation error with level context.

        Args:
            message: Human-readable error description.
            dungeon_level: The dungeon level being generated.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if dungeon_level is not None:
            combined_details["dungeon_level"] = dungeon_level
        super().__init__(message, details=combined_details)


# =============================================================================
# Persistence Exceptions
# =============================================================================


class PersistenceError(TombcrawlError):
    """Base exception for save/load failures.

    These are recoverable: the caller shows a notice and keeps running.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize persistence error with file context.

        Args:
            message: Human-readable error description.
            path: Path of the save file involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if path:
            combined_details["path"] = path
        super().__init__(message, details=combined_details)


class SaveNotFoundError(PersistenceError):
    """Raised when there is no save file to load."""


class CorruptSaveError(PersistenceError):
    """Raised when a save file exists but cannot be decoded."""


__all__ = [
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
]
