"""Item effects, inventory handling and equipment.

Use effects are registered per ItemKind with the ``item_effect``
decorator and looked up by ``use_item``. Each effect reports a UseResult:
USED_UP items leave the inventory, USED_AND_KEPT items stay, and a
CANCELLED use changes nothing and costs no turn.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from tombcrawl.core.constants import (
    CONFUSE_NUM_TURNS,
    CONFUSE_RANGE,
    FIREBALL_DAMAGE,
    FIREBALL_RADIUS,
    GREEN,
    HEAL_AMOUNT,
    LIGHT_BLUE,
    LIGHT_CYAN,
    LIGHT_GREEN,
    LIGHT_VIOLET,
    LIGHTNING_DAMAGE,
    LIGHTNING_RANGE,
    ORANGE,
    PLAYER_INDEX,
    RED,
    WHITE,
    YELLOW,
)
from tombcrawl.core.logging import get_logger
from tombcrawl.engine.combat import take_damage
from tombcrawl.engine.fov import VisibilityField
from tombcrawl.engine.ports import TargetingPort
from tombcrawl.engine.targeting import target_monster, target_tile
from tombcrawl.models.components import BasicAi, ConfusedAi
from tombcrawl.models.entities import EntityStore
from tombcrawl.models.enums import ItemKind, UseResult
from tombcrawl.models.game_state import Game


logger = get_logger(__name__)


@dataclass
class ItemContext:
    """Everything an item effect may touch.

    Attributes:
        store: Live entities.
        game: Game aggregate (inventory, log, map).
        field: Current visibility field.
        targeting: Pointer source for targeted spells.
    """

    store: EntityStore
    game: Game
    field: VisibilityField
    targeting: TargetingPort


Effect = Callable[[int, ItemContext], UseResult]

_effect_registry: dict[ItemKind, Effect] = {}


def item_effect(*kinds: ItemKind) -> Callable[[Effect], Effect]:
    """Decorator to register a function as the use effect of item kinds."""

    def decorator(func: Effect) -> Effect:
        for kind in kinds:
            _effect_registry[kind] = func
        return func

    return decorator


def get_effect(kind: ItemKind) -> Effect | None:
    return _effect_registry.get(kind)


# =============================================================================
# Effects
# =============================================================================


@item_effect(ItemKind.HEAL)
def cast_heal(inventory_index: int, ctx: ItemContext) -> UseResult:
    player = ctx.store.player
    if player.fighter is None:
        return UseResult.CANCELLED
    if player.fighter.hp == player.max_hp(ctx.game):
        ctx.game.log.add("You are already at full health", RED)
        return UseResult.CANCELLED
    ctx.game.log.add("Your wounds start to feel better!", LIGHT_VIOLET)
    player.heal(HEAL_AMOUNT, ctx.game)
    return UseResult.USED_UP


def closest_monster(max_range: int, store: EntityStore, field: VisibilityField) -> int | None:
    """Find the nearest visible AI-driven fighter within range of the player.

    Returns:
        Its store index, or None if nothing qualifies.
    """
    player = store.player
    closest: int | None = None
    closest_dist = float(max_range + 1)
    for index, entity in enumerate(store):
        if index == PLAYER_INDEX or entity.fighter is None or entity.ai is None:
            continue
        if not field.is_visible(entity.x, entity.y):
            continue
        dist = player.distance_to(entity)
        if dist < closest_dist:
            closest, closest_dist = index, dist
    return closest


def _reward_player(ctx: ItemContext, xp: int) -> None:
    fighter = ctx.store.player.fighter
    if fighter is not None and xp:
        fighter.xp += xp


@item_effect(ItemKind.LIGHTNING)
def cast_lightning(inventory_index: int, ctx: ItemContext) -> UseResult:
    target = closest_monster(LIGHTNING_RANGE, ctx.store, ctx.field)
    if target is None:
        ctx.game.log.add("No enemy is close enough to strike.", RED)
        return UseResult.CANCELLED

    monster = ctx.store[target]
    ctx.game.log.add(
        f"A lightning bolt strikes the {monster.name} with a loud thunder! "
        f"The damage is {LIGHTNING_DAMAGE} hit points.",
        LIGHT_BLUE,
    )
    xp = take_damage(monster, LIGHTNING_DAMAGE, ctx.game)
    if xp is not None:
        _reward_player(ctx, xp)
    return UseResult.USED_UP


@item_effect(ItemKind.CONFUSE)
def cast_confuse(inventory_index: int, ctx: ItemContext) -> UseResult:
    ctx.game.log.add("Left-click an enemy to confuse it, or right-click to cancel.", LIGHT_CYAN)
    target = target_monster(
        ctx.targeting, ctx.store, ctx.game.map, ctx.field, float(CONFUSE_RANGE)
    )
    if target is None:
        ctx.game.log.add("No enemy is close enough to strike.", RED)
        return UseResult.CANCELLED

    monster = ctx.store[target]
    previous = monster.ai if monster.ai is not None else BasicAi()
    monster.ai = ConfusedAi(previous=previous, num_turns=CONFUSE_NUM_TURNS)
    ctx.game.log.add(
        f"The eyes of {monster.name} look vacant, as he starts to stumble around!",
        LIGHT_GREEN,
    )
    return UseResult.USED_UP


@item_effect(ItemKind.FIREBALL)
def cast_fireball(inventory_index: int, ctx: ItemContext) -> UseResult:
    ctx.game.log.add(
        "Left-click a target tile for the fireball, or right-click to cancel.", LIGHT_CYAN
    )
    tile = target_tile(ctx.targeting, ctx.store, ctx.game.map, ctx.field)
    if tile is None:
        return UseResult.CANCELLED

    x, y = tile
    ctx.game.log.add(
        f"The fireball explodes, burning everything within {FIREBALL_RADIUS} tiles!", ORANGE
    )
    xp_to_gain = 0
    for index, entity in enumerate(ctx.store):
        if entity.fighter is None or entity.distance(x, y) > FIREBALL_RADIUS:
            continue
        ctx.game.log.add(
            f"The {entity.name} get burned for {FIREBALL_DAMAGE} hit points.", ORANGE
        )
        xp = take_damage(entity, FIREBALL_DAMAGE, ctx.game)
        if xp is not None and index != PLAYER_INDEX:
            xp_to_gain += xp
    _reward_player(ctx, xp_to_gain)
    # Consumed even when nothing was caught in the blast
    return UseResult.USED_UP


@item_effect(ItemKind.SWORD, ItemKind.SHIELD)
def toggle_equipment(inventory_index: int, ctx: ItemContext) -> UseResult:
    """Equip or unequip; whatever held the slot before is taken off first."""
    inventory = ctx.game.inventory
    item = inventory[inventory_index]
    if item.equipment is None:
        return UseResult.CANCELLED

    if item.equipment.equipped:
        item.dequip(ctx.game.log)
    else:
        occupant = ctx.game.equipped_in_slot(item.equipment.slot)
        if occupant is not None:
            inventory[occupant].dequip(ctx.game.log)
        item.equip(ctx.game.log)
    return UseResult.USED_AND_KEPT


# =============================================================================
# Inventory Operations
# =============================================================================


def use_item(inventory_index: int, ctx: ItemContext) -> UseResult:
    """Use an inventory item and apply the consumption rule.

    Args:
        inventory_index: Index into the player's inventory.
        ctx: Item context.

    Returns:
        The effect's outcome.
    """
    item = ctx.game.inventory[inventory_index]
    effect = get_effect(item.item) if item.item is not None else None
    if effect is None:
        ctx.game.log.add(f"The {item.name} cannot be used.", WHITE)
        return UseResult.CANCELLED

    result = effect(inventory_index, ctx)
    if result == UseResult.USED_UP:
        ctx.game.inventory.pop(inventory_index)
    elif result == UseResult.CANCELLED:
        ctx.game.log.add("Cancelled", WHITE)
    logger.debug("Item used", name=item.name, kind=item.item, result=result)
    return result


def pick_item_up(store_index: int, store: EntityStore, game: Game, capacity: int) -> bool:
    """Move an item from the map into the inventory.

    Equipment is put on straight away when its slot is free.

    Returns:
        True if the item was picked up.
    """
    if len(game.inventory) >= capacity:
        game.log.add(f"Your inventory is full, cannot pick up {store[store_index].name}.", RED)
        return False

    item = store.swap_remove(store_index)
    game.log.add(f"You picked up a {item.name}!", GREEN)
    game.inventory.append(item)
    if item.equipment is not None and game.equipped_in_slot(item.equipment.slot) is None:
        item.equip(game.log)
    return True


def drop_item(inventory_index: int, store: EntityStore, game: Game) -> None:
    """Put an inventory item down on the player's cell, unequipping it first."""
    item = game.inventory.pop(inventory_index)
    if item.equipment is not None:
        item.dequip(game.log)
    player = store.player
    item.set_pos(player.x, player.y)
    game.log.add(f"You dropped a {item.name}.", YELLOW)
    store.append(item)


__all__ = [
    "ItemContext",
    "item_effect",
    "get_effect",
    "cast_heal",
    "cast_lightning",
    "cast_confuse",
    "cast_fireball",
    "toggle_equipment",
    "closest_monster",
    "use_item",
    "pick_item_up",
    "drop_item",
]
