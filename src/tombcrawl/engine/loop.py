"""Turn scheduler.

The GameLoop drives a session: it renders, resolves pending level ups,
reads one action, resolves it, refreshes the visibility field if the
player moved, then lets every AI-bearing entity act in store order.

State machine per iteration::

    AWAITING_ACTION -> RESOLVING_ACTION -> RESOLVING_AI -> AWAITING_ACTION
                                        \\-> LEVEL_TRANSITION (stairs)
                                        \\-> TERMINATED (quit / window closed)

Actions that take no turn skip RESOLVING_AI, and so does everything once
the player is dead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable

from tombcrawl.core.config import Settings, get_settings
from tombcrawl.core.constants import (
    MAX_MENU_OPTIONS,
    PLAYER_INDEX,
    RED,
    STAIRS_NAME,
    VIOLET,
)
from tombcrawl.core.exceptions import InvalidGameStateError
from tombcrawl.core.logging import get_logger
from tombcrawl.engine.ai import AiContext, run_ai_pass
from tombcrawl.engine.combat import (
    apply_level_up,
    attack_by_index,
    can_level_up,
    level_up_options,
    level_up_threshold,
)
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.fov import VisibilityField
from tombcrawl.engine.items import ItemContext, drop_item, pick_item_up, use_item
from tombcrawl.engine.mapgen import MapGenerator
from tombcrawl.engine.movement import move_by
from tombcrawl.engine.ports import (
    Action,
    ActionKind,
    InputPort,
    MenuPort,
    PlayerStats,
    RenderPort,
    Snapshot,
    TargetingPort,
)
from tombcrawl.models.entities import EntityStore
from tombcrawl.models.enums import LevelUpChoice, PlayerAction, Slot, UseResult
from tombcrawl.models.game_state import Game


logger = get_logger(__name__)

ExitHandler = Callable[[EntityStore, Game], None]

LEVEL_UP_HEADER = "Level up! Choose a stat to raise:\n"
DROP_HEADER = "Press the key next to an item to drop it, or any other to cancel.\n"
USE_HEADER = "Press the key next to an item to use it, or any other to cancel.\n"


# =============================================================================
# Turn Status
# =============================================================================


class SchedulerState(StrEnum):
    """Where the scheduler is within an iteration."""

    AWAITING_ACTION = "awaiting_action"
    RESOLVING_ACTION = "resolving_action"
    RESOLVING_AI = "resolving_ai"
    LEVEL_TRANSITION = "level_transition"
    TERMINATED = "terminated"


@dataclass
class TurnResult:
    """Result of one scheduler iteration.

    Attributes:
        action: The action that was read (None if the window closed).
        player_action: Whether the action consumed the turn.
        state: Scheduler state after the iteration.
        descended: Whether the player took the stairs.
        levels_gained: Level ups resolved at the start of the iteration.
    """

    action: Action | None
    player_action: PlayerAction
    state: SchedulerState
    descended: bool = False
    levels_gained: list[LevelUpChoice] = field(default_factory=list)

    @property
    def terminated(self) -> bool:
        return self.state == SchedulerState.TERMINATED


# =============================================================================
# Player Actions
# =============================================================================


def player_move_or_attack(dx: int, dy: int, store: EntityStore, game: Game) -> None:
    """Attack whatever fighter stands on the target cell, otherwise step there."""
    player = store.player
    x, y = player.x + dx, player.y + dy
    target = store.find(
        lambda e: e.fighter is not None and e.x == x and e.y == y and not e.is_player
    )
    if target is not None:
        attack_by_index(store, PLAYER_INDEX, target, game)
    else:
        move_by(PLAYER_INDEX, dx, dy, game.map, store)


def inventory_options(game: Game) -> list[str]:
    """Menu lines for the inventory, equipped items tagged with their slot."""
    if not game.inventory:
        return ["Inventory is empty"]
    options = []
    for item in game.inventory:
        if item.equipment is not None and item.equipment.equipped:
            options.append(f"{item.name} (on {Slot(item.equipment.slot).display_name})")
        else:
            options.append(item.name)
    return options


def character_sheet(store: EntityStore, game: Game) -> str:
    player = store.player
    xp = player.fighter.xp if player.fighter else 0
    return (
        "Character information\n"
        "\n"
        f"Level: {player.level}\n"
        f"Experience: {xp}\n"
        f"Experience to level up: {level_up_threshold(player.level)}\n"
        "\n"
        f"Maximum HP: {player.max_hp(game)}\n"
        f"Attack: {player.power(game)}\n"
        f"Defense: {player.defense(game)}"
    )


# =============================================================================
# Game Loop
# =============================================================================


class GameLoop:
    """Turn-synchronous scheduler for one play session.

    Attributes:
        store: Live entities, player at index 0.
        game: Game aggregate.
        field: Visibility field from the player's position.
        state: Current scheduler state.
    """

    def __init__(
        self,
        store: EntityStore,
        game: Game,
        *,
        input_port: InputPort,
        menu_port: MenuPort,
        render_port: RenderPort,
        targeting_port: TargetingPort,
        dice: DiceRoller,
        settings: Settings | None = None,
        on_exit: ExitHandler | None = None,
    ) -> None:
        """Initialize the game loop.

        Args:
            store: Live entities of the session.
            game: Game aggregate of the session.
            input_port: Source of player actions.
            menu_port: Menus and message boxes.
            render_port: Frame sink.
            targeting_port: Pointer events for targeted spells.
            dice: Random source for generation and AI.
            settings: Application settings (defaults to get_settings()).
            on_exit: Called with the session state when the loop terminates,
                typically to write the save file.
        """
        self.store = store
        self.game = game
        self.field = VisibilityField()
        self.state = SchedulerState.AWAITING_ACTION

        self._input = input_port
        self._menu = menu_port
        self._render = render_port
        self._targeting = targeting_port
        self._dice = dice
        self._settings = settings or get_settings()
        self._generator = MapGenerator(dice, self._settings.map)
        self._on_exit = on_exit
        self._turn_callbacks: list[Callable[[TurnResult], None]] = []

        logger.info(
            "GameLoop initialized",
            entities=len(store),
            dungeon_level=game.dungeon_level,
        )

    def add_turn_callback(self, callback: Callable[[TurnResult], None]) -> None:
        """Add a callback to be invoked after each iteration."""
        self._turn_callbacks.append(callback)

    def _invoke_callbacks(self, result: TurnResult) -> None:
        for callback in self._turn_callbacks:
            try:
                callback(result)
            except Exception:
                logger.exception("Turn callback failed")

    # -------------------------------------------------------------------------
    # Visibility
    # -------------------------------------------------------------------------

    def refresh_fov(self, *, force: bool = False) -> bool:
        """Recompute the visibility field if the player moved (or if forced).

        Returns:
            True if the field was recomputed.
        """
        player = self.store.player
        if not force and not self.field.needs_update(player.pos):
            return False
        self.field.compute(
            self.game.map,
            player.pos,
            self._settings.fov.torch_radius,
            self._settings.fov.light_walls,
        )
        return True

    # -------------------------------------------------------------------------
    # Running
    # -------------------------------------------------------------------------

    def run(self) -> TurnResult:
        """Play until the player quits or the window is closed.

        Returns:
            The final (terminating) iteration result.
        """
        self.refresh_fov(force=True)
        while True:
            result = self.step()
            if result.terminated:
                return result

    def step(self) -> TurnResult:
        """Run one scheduler iteration."""
        self.state = SchedulerState.AWAITING_ACTION
        self.refresh_fov()
        self._render.render(self.snapshot())
        levels_gained = self.resolve_level_ups()

        action = self._input.poll()
        if action is None:
            logger.info("Window closed")
            return self._terminate(None, levels_gained)

        self.state = SchedulerState.RESOLVING_ACTION
        level_before = self.game.dungeon_level
        player_action = self.handle_action(action)
        if player_action == PlayerAction.EXIT:
            return self._terminate(action, levels_gained)

        descended = self.game.dungeon_level != level_before
        if self.store.player.alive and player_action == PlayerAction.TOOK_TURN:
            self.refresh_fov()
            self.state = SchedulerState.RESOLVING_AI
            run_ai_pass(AiContext(self.store, self.game, self.field, self._dice))
            self.store.check_invariants()

        self.state = SchedulerState.AWAITING_ACTION
        result = TurnResult(
            action=action,
            player_action=player_action,
            state=self.state,
            descended=descended,
            levels_gained=levels_gained,
        )
        self._invoke_callbacks(result)
        return result

    def _terminate(self, action: Action | None, levels_gained: list[LevelUpChoice]) -> TurnResult:
        self.state = SchedulerState.TERMINATED
        result = TurnResult(
            action=action,
            player_action=PlayerAction.EXIT,
            state=self.state,
            levels_gained=levels_gained,
        )
        if self._on_exit is not None:
            self._on_exit(self.store, self.game)
        self._invoke_callbacks(result)
        logger.info("Game loop terminated", dungeon_level=self.game.dungeon_level)
        return result

    # -------------------------------------------------------------------------
    # Level ups
    # -------------------------------------------------------------------------

    def resolve_level_ups(self) -> list[LevelUpChoice]:
        """Resolve at most one pending level up, asking until a stat is chosen.

        Any further level up still pending is handled next iteration.
        """
        player = self.store.player
        if not can_level_up(player):
            return []
        choices = list(LevelUpChoice)
        selected = None
        while selected is None or not 0 <= selected < len(choices):
            selected = self._menu.select(LEVEL_UP_HEADER, level_up_options(player))
        choice = choices[selected]
        apply_level_up(player, choice, self.game)
        return [choice]

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def handle_action(self, action: Action) -> PlayerAction:
        """Resolve one player action.

        Only toggling fullscreen and quitting are possible once the player
        is dead.
        """
        if action.kind == ActionKind.QUIT:
            return PlayerAction.EXIT
        if action.kind == ActionKind.TOGGLE_FULLSCREEN:
            self._render.toggle_fullscreen()
            return PlayerAction.DID_NOT_TAKE_TURN
        if not self.store.player.alive:
            return PlayerAction.DID_NOT_TAKE_TURN

        if action.kind == ActionKind.MOVE:
            player_move_or_attack(action.dx, action.dy, self.store, self.game)
            return PlayerAction.TOOK_TURN
        if action.kind == ActionKind.WAIT:
            return PlayerAction.TOOK_TURN
        if action.kind == ActionKind.PICK_UP:
            self._pick_up()
        elif action.kind == ActionKind.DROP:
            index = self.inventory_menu(DROP_HEADER)
            if index is not None:
                drop_item(index, self.store, self.game)
        elif action.kind == ActionKind.USE_ITEM:
            index = self.inventory_menu(USE_HEADER)
            if index is not None:
                result = use_item(index, self._item_context())
                if result != UseResult.CANCELLED:
                    return PlayerAction.TOOK_TURN
        elif action.kind == ActionKind.VIEW_CHARACTER:
            if self.store.player.fighter is not None:
                self._menu.message(character_sheet(self.store, self.game))
        elif action.kind == ActionKind.DESCEND:
            if self._on_stairs():
                self.next_level()
        return PlayerAction.DID_NOT_TAKE_TURN

    def _pick_up(self) -> None:
        player = self.store.player
        index = self.store.find(
            lambda e: e.item is not None and e.pos == player.pos and not e.is_player
        )
        if index is not None:
            pick_item_up(
                index, self.store, self.game, self._settings.game.inventory_capacity
            )

    def _on_stairs(self) -> bool:
        player = self.store.player
        return any(e.name == STAIRS_NAME and e.pos == player.pos for e in self.store)

    def _item_context(self) -> ItemContext:
        return ItemContext(
            store=self.store,
            game=self.game,
            field=self.field,
            targeting=self._targeting,
        )

    def inventory_menu(self, header: str) -> int | None:
        """Ask for an inventory item.

        Returns:
            Inventory index, or None if cancelled or the inventory is empty.

        Raises:
            InvalidGameStateError: If the inventory exceeds the menu size.
        """
        options = inventory_options(self.game)
        if len(options) > MAX_MENU_OPTIONS:
            raise InvalidGameStateError(
                "Cannot have a menu with more than 26 options",
                details={"options": len(options)},
            )
        selected = self._menu.select(header, options)
        if not self.game.inventory or selected is None:
            return None
        if not 0 <= selected < len(self.game.inventory):
            return None
        return selected

    # -------------------------------------------------------------------------
    # Level transition
    # -------------------------------------------------------------------------

    def next_level(self) -> None:
        """Rest, then generate the next dungeon level and move the player there."""
        self.state = SchedulerState.LEVEL_TRANSITION
        player = self.store.player
        self.game.log.add("You take a moment to rest, and recover your strength.", VIOLET)
        player.heal(player.max_hp(self.game) // 2, self.game)
        self.game.log.add(
            "After a rare moment of peace, you descend deeper into "
            "the heart of the dungeon...",
            RED,
        )
        self.game.dungeon_level += 1
        self.enter_level()

    def enter_level(self) -> None:
        """Generate a level for the current dungeon level and place the player."""
        level = self._generator.generate(self.game.dungeon_level)
        self.game.map = level.grid
        self.store.replace_level(level.entities)
        self.store.player.set_pos(*level.start)
        self.field.reset()
        self.refresh_fov(force=True)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        """Build the frame description for the renderer.

        The grid and entities are deep copies, so nothing a renderer does to
        them reaches the game state.
        """
        grid = self.game.map
        shown = [e for e in self.store if self.field.shows(e, grid)]
        # Stable sort: items and remains first, actors drawn on top
        shown.sort(key=lambda e: e.blocks)
        player = self.store.player
        fighter = player.fighter
        return Snapshot(
            grid=grid.model_copy(deep=True),
            entities=tuple(e.model_copy(deep=True) for e in shown),
            visible=self.field.visible,
            messages=tuple(self.game.log.entries),
            player=PlayerStats(
                hp=fighter.hp if fighter else 0,
                max_hp=player.max_hp(self.game),
                power=player.power(self.game),
                defense=player.defense(self.game),
                level=player.level,
                xp=fighter.xp if fighter else 0,
            ),
            dungeon_level=self.game.dungeon_level,
        )


__all__ = [
    "SchedulerState",
    "TurnResult",
    "GameLoop",
    "player_move_or_attack",
    "inventory_options",
    "character_sheet",
]
