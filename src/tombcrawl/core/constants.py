"""Fixed game data for the tombcrawl engine.

Monster stat blocks, spawn tables and item effect numbers are part of
the game's content and deliberately not configurable. Step tables are
tuples of ``(dungeon_level, value)`` pairs sorted by level; see
tombcrawl.engine.mapgen.from_dungeon_level for the lookup rule.
"""

from __future__ import annotations

# =============================================================================
# Colors (RGB)
# =============================================================================

Color = tuple[int, int, int]

WHITE: Color = (255, 255, 255)
LIGHT_GREY: Color = (159, 159, 159)
RED: Color = (255, 0, 0)
LIGHT_RED: Color = (255, 63, 63)
DARK_RED: Color = (191, 0, 0)
ORANGE: Color = (255, 127, 0)
DARKER_ORANGE: Color = (127, 63, 0)
YELLOW: Color = (255, 255, 0)
LIGHT_YELLOW: Color = (255, 255, 63)
GREEN: Color = (0, 255, 0)
LIGHT_GREEN: Color = (63, 255, 63)
DESATURATED_GREEN: Color = (63, 127, 63)
DARKER_GREEN: Color = (0, 127, 0)
LIGHT_CYAN: Color = (63, 255, 255)
LIGHT_BLUE: Color = (63, 63, 255)
SKY: Color = (0, 191, 255)
VIOLET: Color = (127, 0, 255)
LIGHT_VIOLET: Color = (159, 63, 255)

# =============================================================================
# Entity Store
# =============================================================================

PLAYER_INDEX = 0
"""The player always occupies index 0 of the entity store."""

PLAYER_NAME = "player"
STAIRS_NAME = "stairs"

MAX_MENU_OPTIONS = 26
"""One menu letter (a-z) per option."""

# =============================================================================
# Player
# =============================================================================

PLAYER_START_HP = 100
PLAYER_START_DEFENSE = 1
PLAYER_START_POWER = 2

STARTING_DAGGER_POWER = 2

LEVEL_UP_BASE = 200
LEVEL_UP_FACTOR = 150

CONSTITUTION_BONUS_HP = 20
STRENGTH_BONUS_POWER = 1
AGILITY_BONUS_DEFENSE = 1

# =============================================================================
# Monsters
# =============================================================================

MONSTER_MOVE_THRESHOLD = 2.0
"""Monsters at least this far from the player step closer instead of attacking."""

ORC_STATS = {"hp": 20, "defense": 0, "power": 4, "xp": 35}
TROLL_STATS = {"hp": 30, "defense": 2, "power": 8, "xp": 100}

MAX_MONSTERS_PER_ROOM: tuple[tuple[int, int], ...] = ((1, 2), (4, 3), (6, 5))
ORC_CHANCE: tuple[tuple[int, int], ...] = ((1, 80),)
TROLL_CHANCE: tuple[tuple[int, int], ...] = ((3, 15), (5, 30), (7, 60))

# =============================================================================
# Items
# =============================================================================

MAX_ITEMS_PER_ROOM: tuple[tuple[int, int], ...] = ((1, 1), (4, 2))
HEAL_CHANCE: tuple[tuple[int, int], ...] = ((1, 35),)
LIGHTNING_CHANCE: tuple[tuple[int, int], ...] = ((4, 25),)
FIREBALL_CHANCE: tuple[tuple[int, int], ...] = ((6, 25),)
CONFUSE_CHANCE: tuple[tuple[int, int], ...] = ((2, 10),)
SWORD_CHANCE: tuple[tuple[int, int], ...] = ((4, 5),)
SHIELD_CHANCE: tuple[tuple[int, int], ...] = ((8, 15),)

HEAL_AMOUNT = 40

LIGHTNING_DAMAGE = 40
LIGHTNING_RANGE = 5

CONFUSE_RANGE = 8
CONFUSE_NUM_TURNS = 10

FIREBALL_RADIUS = 3
FIREBALL_DAMAGE = 25

SWORD_POWER_BONUS = 3
SHIELD_DEFENSE_BONUS = 1
