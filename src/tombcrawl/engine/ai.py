"""Per-entity AI controller.

Each AI-bearing entity is advanced once per turn by ``take_turn``, which
dispatches on the entity's current AI state and stores the state the
handler returns. Handlers receive the entity's store index, never a
cached reference, because indices may shift between turns.
"""

from __future__ import annotations

from collections.abc import Callable

from tombcrawl.core.constants import MONSTER_MOVE_THRESHOLD, PLAYER_INDEX, RED
from tombcrawl.core.logging import get_logger
from tombcrawl.engine.combat import attack_by_index
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.fov import VisibilityField
from tombcrawl.engine.movement import move_by, move_towards
from tombcrawl.models.components import AiState, BasicAi, ConfusedAi
from tombcrawl.models.entities import EntityStore
from tombcrawl.models.game_state import Game


logger = get_logger(__name__)


class AiContext:
    """What an AI handler may look at and mutate during its turn."""

    def __init__(
        self,
        store: EntityStore,
        game: Game,
        field: VisibilityField,
        dice: DiceRoller,
    ) -> None:
        self.store = store
        self.game = game
        self.field = field
        self.dice = dice


def basic(index: int, state: BasicAi, ctx: AiContext) -> AiState:
    """Chase the player while in view and attack when adjacent."""
    monster = ctx.store[index]
    player = ctx.store.player
    if not ctx.field.is_visible(monster.x, monster.y):
        return state

    if monster.distance_to(player) >= MONSTER_MOVE_THRESHOLD:
        move_towards(index, player.x, player.y, ctx.game.map, ctx.store)
    elif player.fighter is not None and player.fighter.hp > 0:
        attack_by_index(ctx.store, index, PLAYER_INDEX, ctx.game)
    return state


def confused(index: int, state: ConfusedAi, ctx: AiContext) -> AiState:
    """Stumble randomly until the counter runs out, then unwrap.

    A counter of N gives N + 1 random steps; the evaluation after that
    restores the wrapped state.
    """
    if state.num_turns >= 0:
        move_by(
            index,
            ctx.dice.randint(-1, 1),
            ctx.dice.randint(-1, 1),
            ctx.game.map,
            ctx.store,
        )
        state.num_turns -= 1
        return state

    name = ctx.store[index].name
    ctx.game.log.add(f"The {name} is no longer confused!", RED)
    logger.debug("Confusion wore off", name=name, index=index)
    return state.previous


_HANDLERS: dict[str, Callable[[int, AiState, AiContext], AiState]] = {
    "basic": basic,
    "confused": confused,
}


def take_turn(index: int, ctx: AiContext) -> None:
    """Advance one entity's AI by a single turn.

    Entities without AI (including ones killed earlier in the same pass)
    are skipped.
    """
    entity = ctx.store[index]
    state = entity.ai
    if state is None or not entity.alive:
        return

    # Detach the state while it runs; the handler returns the next one
    entity.ai = None
    new_state: AiState = state
    try:
        new_state = _HANDLERS[state.kind](index, state, ctx)
    finally:
        entity = ctx.store[index]
        if entity.alive:
            entity.ai = new_state


def run_ai_pass(ctx: AiContext) -> None:
    """Give every AI-bearing entity one turn, in store order."""
    index = 0
    while index < len(ctx.store):
        if index != PLAYER_INDEX:
            take_turn(index, ctx)
        index += 1


__all__ = [
    "AiContext",
    "basic",
    "confused",
    "take_turn",
    "run_ai_pass",
]
