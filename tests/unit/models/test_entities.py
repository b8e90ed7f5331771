"""Tests for entities, derived stats and the entity store."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from tombcrawl.core.constants import DARKER_GREEN, DESATURATED_GREEN
from tombcrawl.core.exceptions import InvalidGameStateError
from tombcrawl.models.entities import (
    Entity,
    EntityStore,
    create_dagger,
    create_item,
    create_monster,
    create_player,
    create_stairs,
)
from tombcrawl.models.enums import ItemKind, Slot
from tombcrawl.models.game_state import Game


class TestFactories:
    """Tests for the entity factory functions."""

    def test_player(self) -> None:
        """Test the player's starting stat block."""
        player = create_player(3, 4)

        assert player.is_player and player.alive and player.blocks
        assert player.pos == (3, 4)
        assert player.fighter is not None
        assert (player.fighter.hp, player.fighter.base_max_hp) == (100, 100)
        assert (player.fighter.base_defense, player.fighter.base_power) == (1, 2)

    @pytest.mark.parametrize(
        ("kind", "glyph", "color", "stats"),
        [
            ("orc", "o", DESATURATED_GREEN, (20, 0, 4, 35)),
            ("troll", "T", DARKER_GREEN, (30, 2, 8, 100)),
        ],
    )
    def test_monsters(
        self, kind: str, glyph: str, color: tuple[int, int, int], stats: tuple[int, ...]
    ) -> None:
        """Test monster stat blocks are fixed data."""
        monster = create_monster(kind, 1, 1)

        assert monster.glyph == glyph and monster.color == color
        assert monster.ai is not None and monster.alive
        f = monster.fighter
        assert f is not None
        assert (f.base_max_hp, f.base_defense, f.base_power, f.xp) == stats

    def test_unknown_monster(self) -> None:
        """Test unknown species are rejected."""
        with pytest.raises(KeyError):
            create_monster("dragon", 0, 0)

    def test_items(self) -> None:
        """Test item names and equipment bindings."""
        sword = create_item(ItemKind.SWORD, 0, 0)
        shield = create_item(ItemKind.SHIELD, 0, 0)

        assert create_item(ItemKind.HEAL, 0, 0).name == "healing potion"
        assert create_item(ItemKind.CONFUSE, 0, 0).equipment is None
        assert sword.equipment is not None and sword.equipment.slot == Slot.RIGHT_HAND
        assert sword.equipment.power_bonus == 3
        assert shield.equipment is not None and shield.equipment.defense_bonus == 1
        assert not sword.blocks

    def test_dagger_and_stairs(self) -> None:
        """Test the starting dagger is worn and the stairs are always visible."""
        dagger = create_dagger()
        stairs = create_stairs(2, 2)

        assert dagger.equipment is not None and dagger.equipment.equipped
        assert dagger.equipment.slot == Slot.LEFT_HAND
        assert stairs.always_visible and not stairs.blocks


class TestDerivedStats:
    """Tests for equipment-derived power, defense and max hp."""

    def test_player_gets_equipment_bonuses(self, player: Entity, game: Game) -> None:
        """Test equipped inventory items add to the player's stats."""
        game.inventory.append(create_dagger())
        shield = create_item(ItemKind.SHIELD, 0, 0)
        game.inventory.append(shield)

        assert player.power(game) == 4
        assert player.defense(game) == 1

        assert shield.equipment is not None
        shield.equipment.equipped = True
        assert player.defense(game) == 2

    def test_monsters_ignore_inventory(self, game: Game, make_monster: Callable[..., Entity]) -> None:
        """Test non-player entities never get inventory bonuses."""
        game.inventory.append(create_dagger())
        orc = make_monster()

        assert orc.power(game) == 4

    def test_heal_clamps_to_max(self, player: Entity, game: Game) -> None:
        """Test healing never exceeds effective max hp."""
        assert player.fighter is not None
        player.fighter.hp = 90
        player.heal(40, game)

        assert player.fighter.hp == 100


class TestEquipToggle:
    """Tests for Entity.equip and Entity.dequip."""

    def test_equip_and_dequip_messages(self, game: Game) -> None:
        """Test toggling reports the slot by name."""
        sword = create_item(ItemKind.SWORD, 0, 0)
        sword.equip(game.log)
        sword.dequip(game.log)

        assert game.log.texts == [
            "Equipped sword on right hand.",
            "Dequipped sword from right hand.",
        ]

    def test_equip_non_equipment(self, game: Game) -> None:
        """Test equipping a potion is a soft failure."""
        potion = create_item(ItemKind.HEAL, 0, 0)
        potion.equip(game.log)

        assert game.log.texts == ["Can't equip healing potion because it's not an Equipment."]


class TestEntityStore:
    """Tests for the player-first entity store."""

    def test_requires_player_first(self) -> None:
        """Test a store must start with the player."""
        with pytest.raises(InvalidGameStateError):
            EntityStore([create_monster("orc", 0, 0)])
        with pytest.raises(InvalidGameStateError):
            EntityStore([])

    def test_swap_remove_moves_last_into_hole(self, store: EntityStore) -> None:
        """Test removal swaps the last entity into the freed index."""
        a, b, c = (create_item(ItemKind.HEAL, i, 0) for i in range(3))
        for item in (a, b, c):
            store.append(item)

        removed = store.swap_remove(1)

        assert removed is a
        assert len(store) == 3
        assert store[1] is c
        assert store[2] is b

    def test_swap_remove_last(self, store: EntityStore) -> None:
        """Test removing the last entity leaves the rest in place."""
        item = create_item(ItemKind.HEAL, 0, 0)
        store.append(item)

        assert store.swap_remove(1) is item
        assert len(store) == 1

    def test_player_cannot_be_removed(self, store: EntityStore) -> None:
        """Test index 0 is protected."""
        with pytest.raises(InvalidGameStateError):
            store.swap_remove(0)

    def test_pair_refuses_aliasing(self, store: EntityStore) -> None:
        """Test the same index cannot be borrowed twice."""
        store.append(create_monster("orc", 1, 1))

        with pytest.raises(InvalidGameStateError):
            store.pair(1, 1)
        first, second = store.pair(1, 0)
        assert first.name == "orc" and second.is_player

    def test_is_blocked(self, store: EntityStore, game: Game) -> None:
        """Test blocking by terrain and by blocking entities only."""
        store.append(create_monster("orc", 7, 7))
        store.append(create_item(ItemKind.HEAL, 8, 8))

        assert store.is_blocked(7, 7, game.map)
        assert not store.is_blocked(8, 8, game.map)
        assert store.is_blocked(0, 0, game.map)

    def test_replace_level_keeps_player(self, store: EntityStore, player: Entity) -> None:
        """Test a new level keeps only the player from the old one."""
        store.append(create_monster("orc", 1, 1))

        store.replace_level([create_stairs(2, 2)])

        assert store[0] is player
        assert [e.name for e in store] == ["player", "stairs"]

    def test_append_second_player_rejected(self, store: EntityStore) -> None:
        """Test the store never holds two players."""
        with pytest.raises(InvalidGameStateError):
            store.append(create_player())
