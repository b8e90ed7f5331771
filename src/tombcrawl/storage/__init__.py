"""Persistence of play sessions."""

from tombcrawl.storage.savegame import SaveGame, decode, encode, load_game, save_game


__all__ = [
    "SaveGame",
    "encode",
    "decode",
    "save_game",
    "load_game",
]
