"""Session entry points: starting a new game and the main menu."""

from __future__ import annotations

from dataclasses import dataclass

from tombcrawl.core.config import Settings, get_settings
from tombcrawl.core.constants import RED
from tombcrawl.core.exceptions import PersistenceError
from tombcrawl.core.logging import bind_context, clear_context, configure_logging, get_logger
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.loop import GameLoop
from tombcrawl.engine.mapgen import MapGenerator
from tombcrawl.engine.ports import InputPort, MenuPort, RenderPort, TargetingPort
from tombcrawl.models.entities import EntityStore, create_dagger, create_player
from tombcrawl.models.game_state import Game, MessageLog
from tombcrawl.storage.savegame import load_game, save_game


logger = get_logger(__name__)

WELCOME_MESSAGE = "Welcome stranger! Prepare to perish in the Tombs of the Ancient Kings."
MAIN_MENU_OPTIONS = ["Play a new game", "Continue last game", "Quit"]
NO_SAVE_MESSAGE = "\nNo saved game to load.\n"
SAVE_FAILED_MESSAGE = "\nThe game could not be saved.\n"


@dataclass
class Frontend:
    """The set of ports a front end provides."""

    input: InputPort
    menu: MenuPort
    render: RenderPort
    targeting: TargetingPort


def new_game(dice: DiceRoller, settings: Settings | None = None) -> tuple[EntityStore, Game]:
    """Create a fresh session on dungeon level 1.

    The player starts with a dagger equipped in the left hand.
    """
    settings = settings or get_settings()
    player = create_player()
    level = MapGenerator(dice, settings.map).generate(1)
    player.set_pos(*level.start)
    store = EntityStore([player, *level.entities])

    game = Game(
        map=level.grid,
        log=MessageLog(capacity=settings.game.message_log_capacity),
        inventory=[create_dagger()],
        dungeon_level=1,
    )
    game.log.add(WELCOME_MESSAGE, RED)
    logger.info("New game started", seed=dice.seed, entities=len(store))
    return store, game


def play_game(
    store: EntityStore,
    game: Game,
    frontend: Frontend,
    dice: DiceRoller,
    settings: Settings | None = None,
) -> None:
    """Run the turn scheduler until exit, saving the session on the way out.

    Raises:
        PersistenceError: If the exit save fails.
    """
    settings = settings or get_settings()
    save_path = settings.storage.save_path

    loop = GameLoop(
        store,
        game,
        input_port=frontend.input,
        menu_port=frontend.menu,
        render_port=frontend.render,
        targeting_port=frontend.targeting,
        dice=dice,
        settings=settings,
        on_exit=lambda s, g: save_game(s, g, save_path),
    )
    loop.run()


def main_menu(
    frontend: Frontend,
    *,
    settings: Settings | None = None,
    dice: DiceRoller | None = None,
) -> None:
    """Show the title menu until the player quits.

    A failed load shows a notice and returns to the menu. Dismissing the
    menu (window closed) leaves it like Quit.
    Diagnostic logging is configured from the settings on entry.
    """
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_format=not settings.debug)
    dice = dice or DiceRoller(seed=settings.game.seed)

    while True:
        choice = frontend.menu.select("", MAIN_MENU_OPTIONS)
        if choice is None or choice == 2:
            logger.info("Leaving main menu")
            return

        if choice == 0:
            store, game = new_game(dice, settings)
        elif choice == 1:
            try:
                store, game = load_game(settings.storage.save_path)
            except PersistenceError as e:
                logger.warning("Could not load game", error=str(e))
                frontend.menu.message(NO_SAVE_MESSAGE)
                continue
        else:
            continue

        bind_context(session_seed=dice.seed)
        try:
            play_game(store, game, frontend, dice, settings)
        except PersistenceError as e:
            logger.error("Could not save game", error=str(e))
            frontend.menu.message(SAVE_FAILED_MESSAGE)
        finally:
            clear_context()


__all__ = [
    "Frontend",
    "new_game",
    "play_game",
    "main_menu",
    "WELCOME_MESSAGE",
    "MAIN_MENU_OPTIONS",
    "NO_SAVE_MESSAGE",
]
