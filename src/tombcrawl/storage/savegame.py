"""Save file codec.

A save file is one JSON document holding the pair (entities, game): the
full entity list with every capability record (nested confusion states
included), the tile grid with explored flags, the message log, the
inventory and the dungeon level.

Save and load failures raise PersistenceError subclasses; callers show
a notice and keep running.
"""

from __future__ import annotations

import os
from pathlib import Path

import pydantic
from pydantic import BaseModel, ConfigDict

from tombcrawl.core.exceptions import (
    CorruptSaveError,
    InvalidGameStateError,
    PersistenceError,
    SaveNotFoundError,
)
from tombcrawl.core.logging import get_logger
from tombcrawl.models.entities import Entity, EntityStore
from tombcrawl.models.game_state import Game


logger = get_logger(__name__)


class SaveGame(BaseModel):
    """On-disk layout of a saved session."""

    model_config = ConfigDict(extra="forbid")

    entities: list[Entity]
    game: Game


def encode(store: EntityStore, game: Game) -> str:
    """Serialize a session to a JSON document."""
    return SaveGame(entities=store.entities, game=game).model_dump_json(indent=2)


def decode(document: str | bytes) -> tuple[EntityStore, Game]:
    """Rebuild a session from a JSON document.

    Raises:
        CorruptSaveError: If the document is malformed or breaks the
            player-first invariant.
    """
    try:
        data = SaveGame.model_validate_json(document)
    except pydantic.ValidationError as e:
        raise CorruptSaveError(
            "Save document is malformed",
            details={"errors": e.error_count()},
        ) from e

    try:
        store = EntityStore(data.entities)
    except InvalidGameStateError as e:
        raise CorruptSaveError("Save document does not start with the player") from e
    return store, data.game


def save_game(store: EntityStore, game: Game, path: str | Path) -> Path:
    """Write a session to disk, replacing any previous save.

    The document is written to a sibling temporary file that then replaces
    the save in one rename; an interrupted write leaves the old save intact.

    Returns:
        The path written.

    Raises:
        PersistenceError: If the file cannot be written.
    """
    path = Path(path)
    document = encode(store, game)
    temp_path = path.with_name(f"{path.name}.tmp")
    try:
        temp_path.write_text(document, encoding="utf-8")
        os.replace(temp_path, path)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise PersistenceError(f"Could not write save file: {e}", path=str(path)) from e

    logger.info(
        "Game saved",
        path=str(path),
        entities=len(store),
        dungeon_level=game.dungeon_level,
    )
    return path


def load_game(path: str | Path) -> tuple[EntityStore, Game]:
    """Read a session from disk.

    Raises:
        SaveNotFoundError: If there is no save file.
        CorruptSaveError: If the file cannot be decoded.
        PersistenceError: If the file cannot be read.
    """
    path = Path(path)
    try:
        document = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SaveNotFoundError("No saved game", path=str(path)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise PersistenceError(f"Could not read save file: {e}", path=str(path)) from e

    try:
        store, game = decode(document)
    except CorruptSaveError as e:
        logger.warning("Save file rejected", path=str(path), error=e.message)
        raise CorruptSaveError(e.message, path=str(path), details=dict(e.details)) from e

    logger.info("Game loaded", path=str(path), entities=len(store), dungeon_level=game.dungeon_level)
    return store, game


__all__ = [
    "SaveGame",
    "encode",
    "decode",
    "save_game",
    "load_game",
]
