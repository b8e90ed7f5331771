"""Configuration management for the tombcrawl engine.

Settings are loaded with pydantic-settings from environment variables
and an optional .env file. Only session-shaping knobs live here (map
size, torch radius, save location, RNG seed); monster and item tables
are fixed data in tombcrawl.core.constants.

Example:
    >>> from tombcrawl.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.map.width
    80

Environment Variables:
    TOMBCRAWL_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    TOMBCRAWL_MAP_WIDTH / TOMBCRAWL_MAP_HEIGHT: Dungeon grid size
    TOMBCRAWL_FOV_TORCH_RADIUS: Sight radius of the player
    TOMBCRAWL_GAME_SEED: Seed for a reproducible session
    TOMBCRAWL_SAVE_PATH: Location of the save file
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tombcrawl.core.exceptions import ConfigurationError


class MapSettings(BaseSettings):
    """Dungeon grid and room generation parameters.

    Attributes:
        width: Grid width in cells.
        height: Grid height in cells.
        room_min_size: Smallest room side length.
        room_max_size: Largest room side length.
        max_rooms: Number of room placement attempts per level.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOMBCRAWL_MAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    width: int = Field(default=80, ge=8, description="Grid width")
    height: int = Field(default=43, ge=8, description="Grid height")
    room_min_size: int = Field(default=6, ge=3, description="Minimum room side")
    room_max_size: int = Field(default=10, ge=3, description="Maximum room side")
    max_rooms: int = Field(default=30, ge=1, description="Room placement attempts")

    @model_validator(mode="after")
    def validate_room_sizes(self) -> "MapSettings":
        """Ensure rooms can actually fit on the grid.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If room bounds are inconsistent.
        """
        if self.room_min_size > self.room_max_size:
            raise ConfigurationError(
                f"room_min_size ({self.room_min_size}) must not exceed "
                f"room_max_size ({self.room_max_size})",
                config_key="room_min_size",
            )
        if self.room_max_size >= min(self.width, self.height):
            raise ConfigurationError(
                f"room_max_size ({self.room_max_size}) must be smaller than the grid",
                config_key="room_max_size",
            )
        return self


class FovSettings(BaseSettings):
    """Visibility field parameters.

    Attributes:
        torch_radius: How far the player can see.
        light_walls: Whether the wall cells bounding a view are visible.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOMBCRAWL_FOV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    torch_radius: int = Field(default=10, ge=0, description="Sight radius")
    light_walls: bool = Field(default=True, description="Light the walls in view")


class GameSettings(BaseSettings):
    """Session behavior.

    Attributes:
        message_log_capacity: Number of lines the message log retains.
        inventory_capacity: Maximum number of carried items.
        seed: Optional RNG seed for a reproducible session.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOMBCRAWL_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    message_log_capacity: int = Field(default=6, ge=1, description="Message log lines")
    inventory_capacity: int = Field(
        default=26,
        ge=1,
        le=26,
        description="Carried item limit (one menu letter per item)",
    )
    seed: int | None = Field(default=None, description="RNG seed")


class StorageSettings(BaseSettings):
    """Save file location.

    Attributes:
        save_path: File holding the serialized game.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOMBCRAWL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    save_path: Path = Field(default=Path("savegame"), description="Save file path")


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        map: Map generation settings.
        fov: Visibility settings.
        game: Session settings.
        storage: Save file settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOMBCRAWL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Tombs of the Ancient Kings",
        description="Application name",
    )
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    map: MapSettings = Field(default_factory=MapSettings)
    fov: FovSettings = Field(default_factory=FovSettings)
    game: GameSettings = Field(default_factory=GameSettings)
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
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
