"""Enumeration types for the tombcrawl engine.

These enums tag the capability records carried by entities and the
outcomes passed between the engine's subsystems. They are StrEnums so
they serialize to readable strings in save files.
"""

from __future__ import annotations

from enum import StrEnum


class Slot(StrEnum):
    """Body slot an equipment item occupies."""

    LEFT_HAND = "left_hand"
    RIGHT_HAND = "right_hand"
    HEAD = "head"

    @property
    def display_name(self) -> str:
        """Get the slot name as shown in messages.

        Returns:
            Human-readable slot name (e.g., 'left hand').
        """
        return self.value.replace("_", " ")


class ItemKind(StrEnum):
    """What happens when an item is used."""

    HEAL = "heal"
    LIGHTNING = "lightning"
    CONFUSE = "confuse"
    FIREBALL = "fireball"
    SWORD = "sword"
    SHIELD = "shield"


class DeathCallback(StrEnum):
    """Death behavior of a fighter."""

    PLAYER = "player"
    """The player's body stays in place as a controllable-inert corpse."""

    MONSTER = "monster"
    """The monster is converted into inert remains and yields its xp."""


class UseResult(StrEnum):
    """Outcome of using an inventory item."""

    USED_UP = "used_up"
    """Consumed; removed from the inventory."""

    CANCELLED = "cancelled"
    """Nothing happened; the item stays and no turn passes."""

    USED_AND_KEPT = "used_and_kept"
    """Took effect but stays in the inventory (equipment)."""


class PlayerAction(StrEnum):
    """Whether a resolved player action consumed the turn."""

    TOOK_TURN = "took_turn"
    DID_NOT_TAKE_TURN = "did_not_take_turn"
    EXIT = "exit"


class LevelUpChoice(StrEnum):
    """Stat raised on level up, in menu order."""

    CONSTITUTION = "constitution"
    STRENGTH = "strength"
    AGILITY = "agility"


__all__ = [
    "Slot",
    "ItemKind",
    "DeathCallback",
    "UseResult",
    "PlayerAction",
    "LevelUpChoice",
]
