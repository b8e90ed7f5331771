"""Tombcrawl - turn-based dungeon crawl simulation engine.

Procedurally generated levels, ray-cast field of view, melee and spell
combat with experience-driven leveling, and JSON save files. Rendering
and input belong to a front end that plugs into the ports defined in
``tombcrawl.engine.ports``.

Example:
    >>> from tombcrawl import DiceRoller, new_game
    >>> store, game = new_game(DiceRoller(seed=7))
    >>> store.player.name
    'player'

Modules:
    core: Configuration, logging, constants and exceptions.
    models: Pydantic V2 models for terrain, entities and game state.
    engine: Map generation, visibility, combat, AI, items and the turn loop.
    storage: Save file codec.
"""

from __future__ import annotations

from tombcrawl.core.config import Settings, get_settings
from tombcrawl.core.exceptions import TombcrawlError
from tombcrawl.core.logging import configure_logging, get_logger
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.loop import GameLoop
from tombcrawl.engine.session import Frontend, main_menu, new_game
from tombcrawl.models.entities import Entity, EntityStore
from tombcrawl.models.game_state import Game
from tombcrawl.storage.savegame import load_game, save_game


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "TombcrawlError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Entity",
    "EntityStore",
    "Game",
    # Engine
    "DiceRoller",
    "GameLoop",
    "Frontend",
    "new_game",
    "main_menu",
    # Storage
    "save_game",
    "load_game",
]
