"""Data model of the dungeon: terrain, entities and their capabilities.

Everything here is a pydantic model so the full world state can be
written to and read back from a save file without a separate schema.
"""

from __future__ import annotations

from tombcrawl.models.components import (
    AiState,
    BasicAi,
    Component,
    ConfusedAi,
    Equipment,
    Fighter,
)
from tombcrawl.models.entities import (
    Entity,
    EntityStore,
    create_dagger,
    create_item,
    create_monster,
    create_player,
    create_stairs,
)
from tombcrawl.models.enums import (
    DeathCallback,
    ItemKind,
    LevelUpChoice,
    PlayerAction,
    Slot,
    UseResult,
)
from tombcrawl.models.game_state import Game, LogEntry, MessageLog, Tile, TileGrid


__all__ = [
    # Components
    "Component",
    "Fighter",
    "BasicAi",
    "ConfusedAi",
    "AiState",
    "Equipment",
    # Entities
    "Entity",
    "EntityStore",
    "create_player",
    "create_monster",
    "create_item",
    "create_dagger",
    "create_stairs",
    # Enums
    "Slot",
    "ItemKind",
    "DeathCallback",
    "UseResult",
    "PlayerAction",
    "LevelUpChoice",
    # Game state
    "Tile",
    "TileGrid",
    "LogEntry",
    "MessageLog",
    "Game",
]
