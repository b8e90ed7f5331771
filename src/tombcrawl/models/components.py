"""Capability records attached to entities.

An entity's behavior is determined by which of these optional records it
carries: a Fighter can fight and die, an AI state makes it act on its
own, an Equipment record makes an item wearable.

The AI state is a discriminated union. ``ConfusedAi`` owns the state it
replaced, so confusion can wrap any other state (including another
confusion) and unwinds back to it when it wears off.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from tombcrawl.models.enums import DeathCallback, Slot


class Component(BaseModel):
    """Base class for all capability records.

    Components are plain data; the engine's systems mutate them in place.
    """

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        extra="forbid",
    )


class Fighter(Component):
    """Combat capability.

    ``base_*`` values exclude equipment; see Entity.power/defense/max_hp
    for the effective values.
    """

    hp: int = Field(description="Current hit points (may drop below zero)")
    base_max_hp: int = Field(ge=1, description="Maximum hit points without equipment")
    base_defense: int = Field(default=0, description="Defense without equipment")
    base_power: int = Field(default=0, description="Attack power without equipment")
    on_death: DeathCallback = Field(default=DeathCallback.MONSTER)
    xp: int = Field(default=0, ge=0, description="Xp carried (reward when killed)")


class BasicAi(Component):
    """Chase the player when in view, attack when adjacent."""

    kind: Literal["basic"] = "basic"


class ConfusedAi(Component):
    """Stumble around randomly, then revert to ``previous``."""

    kind: Literal["confused"] = "confused"
    previous: AiState
    num_turns: int = Field(description="Remaining turns; reverts once below zero")


AiState = Annotated[Union[BasicAi, ConfusedAi], Field(discriminator="kind")]

ConfusedAi.model_rebuild()


class Equipment(Component):
    """Wearable item data."""

    slot: Slot
    equipped: bool = False
    max_hp_bonus: int = 0
    power_bonus: int = 0
    defense_bonus: int = 0


__all__ = [
    "Component",
    "Fighter",
    "BasicAi",
    "ConfusedAi",
    "AiState",
    "Equipment",
]
