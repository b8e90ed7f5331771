"""Entities and the index-stable entity store.

Every simulated object in the dungeon (the player, monsters, items,
stairs) is an Entity whose behavior comes from the optional capability
records it carries (see tombcrawl.models.components).

The EntityStore keeps the player at index 0 for the whole session. Other
indices are NOT stable: picking an item up removes it by swapping the
last entity into its place. Engine code therefore resolves indices again
on every turn instead of holding on to them across a mutation.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from tombcrawl.core.constants import (
    DARKER_GREEN,
    DARKER_ORANGE,
    DESATURATED_GREEN,
    LIGHT_GREEN,
    LIGHT_YELLOW,
    ORC_STATS,
    PLAYER_INDEX,
    PLAYER_NAME,
    PLAYER_START_DEFENSE,
    PLAYER_START_HP,
    PLAYER_START_POWER,
    RED,
    SHIELD_DEFENSE_BONUS,
    SKY,
    STAIRS_NAME,
    STARTING_DAGGER_POWER,
    SWORD_POWER_BONUS,
    TROLL_STATS,
    VIOLET,
    WHITE,
    Color,
)
from tombcrawl.core.exceptions import InvalidGameStateError
from tombcrawl.core.logging import get_logger
from tombcrawl.models.components import AiState, BasicAi, Equipment, Fighter
from tombcrawl.models.enums import DeathCallback, ItemKind, Slot


if TYPE_CHECKING:
    from tombcrawl.models.game_state import Game, MessageLog, TileGrid

logger = get_logger(__name__)


# =============================================================================
# Entity
# =============================================================================


class Entity(BaseModel):
    """Any object living on the dungeon grid.

    Attributes:
        x: Column on the grid.
        y: Row on the grid.
        glyph: Character used to draw the entity.
        color: Foreground color used to draw the entity.
        name: Display name.
        blocks: Whether the entity occupies its cell for movement.
        alive: Whether the entity is a living actor.
        level: Character level (only meaningful for the player).
        fighter: Combat capability.
        ai: Autonomous behavior state.
        item: Use effect, present iff the entity can be picked up.
        equipment: Wearable data.
        always_visible: Drawn whenever its cell was ever explored.
        is_player: Marks the player entity.
    """

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        extra="forbid",
    )

    x: int = 0
    y: int = 0
    glyph: str = Field(min_length=1, max_length=1)
    color: Color = WHITE
    name: str
    blocks: bool = False
    alive: bool = False
    level: int = Field(default=1, ge=1)

    fighter: Fighter | None = None
    ai: AiState | None = None
    item: ItemKind | None = None
    equipment: Equipment | None = None

    always_visible: bool = False
    is_player: bool = False

    @property
    def pos(self) -> tuple[int, int]:
        return (self.x, self.y)

    def set_pos(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def distance_to(self, other: Entity) -> float:
        return self.distance(other.x, other.y)

    def distance(self, x: int, y: int) -> float:
        return math.hypot(x - self.x, y - self.y)

    # -------------------------------------------------------------------------
    # Derived stats
    # -------------------------------------------------------------------------

    def equipped(self, game: Game) -> list[Equipment]:
        """Get the equipment currently worn by this entity.

        Only the player wears equipment (from the inventory); every other
        entity fights with its base stats.
        """
        if not self.is_player:
            return []
        return [
            item.equipment
            for item in game.inventory
            if item.equipment is not None and item.equipment.equipped
        ]

    def power(self, game: Game) -> int:
        base = self.fighter.base_power if self.fighter else 0
        return base + sum(e.power_bonus for e in self.equipped(game))

    def defense(self, game: Game) -> int:
        base = self.fighter.base_defense if self.fighter else 0
        return base + sum(e.defense_bonus for e in self.equipped(game))

    def max_hp(self, game: Game) -> int:
        base = self.fighter.base_max_hp if self.fighter else 0
        return base + sum(e.max_hp_bonus for e in self.equipped(game))

    def heal(self, amount: int, game: Game) -> None:
        """Restore hit points, never above the effective maximum."""
        if self.fighter is None:
            return
        self.fighter.hp = min(self.fighter.hp + amount, self.max_hp(game))

    # -------------------------------------------------------------------------
    # Equipment
    # -------------------------------------------------------------------------

    def equip(self, log: MessageLog) -> None:
        """Put this item on, reporting through the message log."""
        if self.item is None:
            log.add(f"Can't equip {self.name} because it's not an Item.", RED)
            return
        if self.equipment is None:
            log.add(f"Can't equip {self.name} because it's not an Equipment.", RED)
            return
        if not self.equipment.equipped:
            self.equipment.equipped = True
            log.add(
                f"Equipped {self.name} on {Slot(self.equipment.slot).display_name}.",
                LIGHT_GREEN,
            )

    def dequip(self, log: MessageLog) -> None:
        """Take this item off, reporting through the message log."""
        if self.item is None:
            log.add(f"Can't dequip {self.name} because it's not an Item.", RED)
            return
        if self.equipment is None:
            log.add(f"Can't dequip {self.name} because it's not an Equipment.", RED)
            return
        if self.equipment.equipped:
            self.equipment.equipped = False
            log.add(
                f"Dequipped {self.name} from {Slot(self.equipment.slot).display_name}.",
                LIGHT_YELLOW,
            )


# =============================================================================
# Entity Store
# =============================================================================


class EntityStore:
    """Ordered collection of live entities with the player at index 0.

    Removal is swap-with-last, so any index other than 0 may change after
    a removal. Callers must not keep indices across mutations.
    """

    def __init__(self, entities: list[Entity] | None = None) -> None:
        """Initialize the store.

        Args:
            entities: Initial entities; the first one must be the player.

        Raises:
            InvalidGameStateError: If the first entity is not the player.
        """
        self._entities: list[Entity] = list(entities or [])
        self.check_invariants()

    def __len__(self) -> int:
        return len(self._entities)

    def __getitem__(self, index: int) -> Entity:
        return self._entities[index]

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities)

    @property
    def entities(self) -> list[Entity]:
        """Get a shallow copy of the entity list (for snapshots and saving)."""
        return list(self._entities)

    @property
    def player(self) -> Entity:
        return self._entities[PLAYER_INDEX]

    def check_invariants(self) -> None:
        """Verify the player still sits at index 0.

        Raises:
            InvalidGameStateError: If the invariant is broken.
        """
        if not self._entities or not self._entities[PLAYER_INDEX].is_player:
            raise InvalidGameStateError(
                "Entity store must hold the player at index 0",
                current_state=self._entities[0].name if self._entities else "empty",
                expected_states=[PLAYER_NAME],
            )

    def append(self, entity: Entity) -> int:
        """Add an entity at the end of the store.

        Returns:
            The index the entity was stored at.
        """
        if entity.is_player:
            raise InvalidGameStateError("The store already holds a player")
        self._entities.append(entity)
        return len(self._entities) - 1

    def swap_remove(self, index: int) -> Entity:
        """Remove an entity by moving the last entity into its slot.

        Args:
            index: Index of the entity to remove.

        Returns:
            The removed entity.

        Raises:
            InvalidGameStateError: If asked to remove the player.
        """
        if index == PLAYER_INDEX:
            raise InvalidGameStateError("The player cannot be removed from the store")
        removed = self._entities[index]
        last = self._entities.pop()
        if index < len(self._entities):
            self._entities[index] = last
        self.check_invariants()
        logger.debug("Entity removed", name=removed.name, index=index)
        return removed

    def replace_level(self, entities: list[Entity]) -> None:
        """Drop everything but the player and add a new level's entities."""
        player = self.player
        self._entities = [player, *(e for e in entities if e is not player)]
        self.check_invariants()

    def pair(self, first: int, second: int) -> tuple[Entity, Entity]:
        """Borrow two distinct entities for mutation, e.g. attacker and defender.

        Args:
            first: Index of the first entity.
            second: Index of the second entity.

        Returns:
            The two entities, in argument order.

        Raises:
            InvalidGameStateError: If both indices are the same.
        """
        if first == second:
            raise InvalidGameStateError(
                "Cannot borrow the same entity twice",
                details={"index": first},
            )
        return self._entities[first], self._entities[second]

    def find(self, predicate: Callable[[Entity], bool]) -> int | None:
        """Get the index of the first entity matching a predicate."""
        for index, entity in enumerate(self._entities):
            if predicate(entity):
                return index
        return None

    def at(self, x: int, y: int) -> list[Entity]:
        return [e for e in self._entities if e.x == x and e.y == y]

    def is_blocked(self, x: int, y: int, grid: TileGrid) -> bool:
        """Whether terrain or a blocking entity occupies (x, y)."""
        if grid.is_blocked(x, y):
            return True
        return any(e.blocks and e.x == x and e.y == y for e in self._entities)


# =============================================================================
# Factory Functions
# =============================================================================


def create_player(x: int = 0, y: int = 0) -> Entity:
    """Create the player with the starting stat block."""
    return Entity(
        x=x,
        y=y,
        glyph="@",
        color=WHITE,
        name=PLAYER_NAME,
        blocks=True,
        alive=True,
        is_player=True,
        fighter=Fighter(
            hp=PLAYER_START_HP,
            base_max_hp=PLAYER_START_HP,
            base_defense=PLAYER_START_DEFENSE,
            base_power=PLAYER_START_POWER,
            on_death=DeathCallback.PLAYER,
            xp=0,
        ),
    )


_MONSTER_TEMPLATES: dict[str, tuple[str, Color, dict[str, int]]] = {
    "orc": ("o", DESATURATED_GREEN, ORC_STATS),
    "troll": ("T", DARKER_GREEN, TROLL_STATS),
}


def create_monster(kind: str, x: int, y: int) -> Entity:
    """Create a hostile monster from its fixed stat block.

    Args:
        kind: Species name ('orc' or 'troll').
        x: Column to place the monster at.
        y: Row to place the monster at.

    Returns:
        A living, blocking entity with a Fighter and basic AI.

    Raises:
        KeyError: If the species is unknown.
    """
    glyph, color, stats = _MONSTER_TEMPLATES[kind]
    return Entity(
        x=x,
        y=y,
        glyph=glyph,
        color=color,
        name=kind,
        blocks=True,
        alive=True,
        fighter=Fighter(
            hp=stats["hp"],
            base_max_hp=stats["hp"],
            base_defense=stats["defense"],
            base_power=stats["power"],
            on_death=DeathCallback.MONSTER,
            xp=stats["xp"],
        ),
        ai=BasicAi(),
    )


_ITEM_TEMPLATES: dict[ItemKind, tuple[str, str, Color]] = {
    ItemKind.HEAL: ("!", "healing potion", VIOLET),
    ItemKind.LIGHTNING: ("#", "scroll of lightning bolt", LIGHT_YELLOW),
    ItemKind.FIREBALL: ("#", "scroll of fireball", LIGHT_YELLOW),
    ItemKind.CONFUSE: ("#", "scroll of confusion", LIGHT_YELLOW),
    ItemKind.SWORD: ("/", "sword", SKY),
    ItemKind.SHIELD: ("[", "shield", DARKER_ORANGE),
}


def create_item(kind: ItemKind, x: int, y: int) -> Entity:
    """Create a pickable item of the given kind."""
    glyph, name, color = _ITEM_TEMPLATES[kind]
    equipment = None
    if kind == ItemKind.SWORD:
        equipment = Equipment(slot=Slot.RIGHT_HAND, power_bonus=SWORD_POWER_BONUS)
    elif kind == ItemKind.SHIELD:
        equipment = Equipment(slot=Slot.LEFT_HAND, defense_bonus=SHIELD_DEFENSE_BONUS)
    return Entity(
        x=x,
        y=y,
        glyph=glyph,
        color=color,
        name=name,
        item=kind,
        equipment=equipment,
    )


def create_dagger() -> Entity:
    """Create the player's starting weapon, already equipped."""
    return Entity(
        glyph="-",
        color=SKY,
        name="dagger",
        item=ItemKind.SWORD,
        equipment=Equipment(
            slot=Slot.LEFT_HAND,
            equipped=True,
            power_bonus=STARTING_DAGGER_POWER,
        ),
    )


def create_stairs(x: int, y: int) -> Entity:
    return Entity(
        x=x,
        y=y,
        glyph="<",
        color=WHITE,
        name=STAIRS_NAME,
        always_visible=True,
    )


__all__ = [
    "Entity",
    "EntityStore",
    "create_player",
    "create_monster",
    "create_item",
    "create_dagger",
    "create_stairs",
]
