"""Combat resolution and experience-driven leveling.

Damage is plain arithmetic over derived stats: attacker power minus
defender defense. A non-positive result leaves the defender untouched
("no effect"). Death converts the entity in place; it is never removed
from the entity store.
"""

from __future__ import annotations

from dataclasses import dataclass

from tombcrawl.core.constants import (
    AGILITY_BONUS_DEFENSE,
    CONSTITUTION_BONUS_HP,
    DARK_RED,
    LEVEL_UP_BASE,
    LEVEL_UP_FACTOR,
    ORANGE,
    RED,
    STRENGTH_BONUS_POWER,
    WHITE,
    YELLOW,
)
from tombcrawl.core.exceptions import CombatError
from tombcrawl.core.logging import get_logger
from tombcrawl.models.entities import Entity, EntityStore
from tombcrawl.models.enums import DeathCallback, LevelUpChoice
from tombcrawl.models.game_state import Game


logger = get_logger(__name__)


@dataclass(frozen=True)
class AttackResult:
    """Outcome of a single attack.

    Attributes:
        attacker: Name of the attacker.
        defender: Name of the defender (before any death rename).
        damage: Damage dealt; 0 when the attack had no effect.
        killed: Whether this attack killed the defender.
        xp_gained: Experience transferred to the attacker.
    """

    attacker: str
    defender: str
    damage: int
    killed: bool = False
    xp_gained: int = 0

    @property
    def had_effect(self) -> bool:
        return self.damage > 0


# =============================================================================
# Damage and Death
# =============================================================================


def take_damage(entity: Entity, amount: int, game: Game) -> int | None:
    """Apply damage and run the death transition if hit points run out.

    Args:
        entity: The entity being hurt.
        amount: Damage to apply; non-positive amounts change nothing.
        game: Game aggregate (for the message log).

    Returns:
        The xp reward carried by the entity if this call killed it, else None.
        An entity that is already dead never dies a second time.
    """
    fighter = entity.fighter
    if fighter is None:
        return None
    if amount > 0:
        fighter.hp -= amount
    if fighter.hp > 0 or not entity.alive:
        return None

    entity.alive = False
    xp = fighter.xp
    if fighter.on_death == DeathCallback.PLAYER:
        _player_death(entity, game)
    else:
        _monster_death(entity, game)
    return xp


def _player_death(player: Entity, game: Game) -> None:
    game.log.add("You died!", RED)
    player.glyph = "%"
    player.color = DARK_RED
    logger.info("Player died", dungeon_level=game.dungeon_level, level=player.level)


def _monster_death(monster: Entity, game: Game) -> None:
    xp = monster.fighter.xp if monster.fighter else 0
    game.log.add(f"{monster.name} is dead! You gain {xp} experience points.", ORANGE)
    logger.debug("Monster died", name=monster.name, xp=xp, pos=monster.pos)
    monster.glyph = "%"
    monster.color = DARK_RED
    monster.blocks = False
    monster.fighter = None
    monster.ai = None
    monster.name = f"remains of {monster.name}"


# =============================================================================
# Attacks
# =============================================================================


def attack(attacker: Entity, defender: Entity, game: Game) -> AttackResult:
    """Resolve one melee attack.

    Args:
        attacker: The attacking entity.
        defender: The defending entity. Must not be the attacker.
        game: Game aggregate (derived stats and message log).

    Returns:
        The attack outcome.

    Raises:
        CombatError: If either side cannot fight or both are the same entity.
    """
    if attacker is defender:
        raise CombatError("An entity cannot attack itself", attacker=attacker.name)
    if attacker.fighter is None or defender.fighter is None:
        raise CombatError(
            "Both sides of an attack need a Fighter",
            attacker=attacker.name,
            defender=defender.name,
        )

    attacker_name, defender_name = attacker.name, defender.name
    damage = attacker.power(game) - defender.defense(game)
    if damage <= 0:
        game.log.add(f"{attacker_name} attacks {defender_name} but it has no effect!", WHITE)
        return AttackResult(attacker=attacker_name, defender=defender_name, damage=0)

    game.log.add(f"{attacker_name} attacks {defender_name} for {damage} hit points.", WHITE)
    xp = take_damage(defender, damage, game)
    if xp is not None and attacker.fighter is not None:
        attacker.fighter.xp += xp
    return AttackResult(
        attacker=attacker_name,
        defender=defender_name,
        damage=damage,
        killed=xp is not None,
        xp_gained=xp or 0,
    )


def attack_by_index(
    store: EntityStore, attacker_index: int, defender_index: int, game: Game
) -> AttackResult:
    """Resolve an attack between two entities of the store.

    Both are borrowed together through EntityStore.pair, which refuses to
    hand out the same index twice.
    """
    attacker, defender = store.pair(attacker_index, defender_index)
    return attack(attacker, defender, game)


# =============================================================================
# Leveling
# =============================================================================


def level_up_threshold(level: int) -> int:
    """Xp needed to advance from the given character level."""
    return LEVEL_UP_BASE + level * LEVEL_UP_FACTOR


def can_level_up(player: Entity) -> bool:
    if player.fighter is None:
        return False
    return player.fighter.xp >= level_up_threshold(player.level)


def level_up_options(player: Entity) -> list[str]:
    """Menu lines for the stat choice, in LevelUpChoice order."""
    fighter = player.fighter
    if fighter is None:
        return []
    return [
        f"Constitution (+{CONSTITUTION_BONUS_HP} HP, from {fighter.base_max_hp})",
        f"Strength (+{STRENGTH_BONUS_POWER} attack, from {fighter.base_power})",
        f"Agility (+{AGILITY_BONUS_DEFENSE} defense, from {fighter.base_defense})",
    ]


def apply_level_up(player: Entity, choice: LevelUpChoice, game: Game) -> None:
    """Advance the player one level and raise the chosen stat.

    Raises:
        CombatError: If the player has too little xp or no Fighter.
    """
    fighter = player.fighter
    if fighter is None or not can_level_up(player):
        raise CombatError("Player is not ready to level up", attacker=player.name)

    threshold = level_up_threshold(player.level)
    player.level += 1
    game.log.add(
        f"Your battle skills grow stronger! You reached level {player.level}!", YELLOW
    )
    fighter.xp -= threshold
    if choice == LevelUpChoice.CONSTITUTION:
        fighter.base_max_hp += CONSTITUTION_BONUS_HP
        fighter.hp += CONSTITUTION_BONUS_HP
    elif choice == LevelUpChoice.STRENGTH:
        fighter.base_power += STRENGTH_BONUS_POWER
    elif choice == LevelUpChoice.AGILITY:
        fighter.base_defense += AGILITY_BONUS_DEFENSE

    logger.info("Level up", level=player.level, choice=choice, xp_left=fighter.xp)


__all__ = [
    "AttackResult",
    "take_damage",
    "attack",
    "attack_by_index",
    "level_up_threshold",
    "can_level_up",
    "level_up_options",
    "apply_level_up",
]
