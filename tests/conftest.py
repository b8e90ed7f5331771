"""Pytest configuration and shared fixtures.

This module provides common fixtures for the tombcrawl test suite:
settings isolation, a seeded random source, small hand-built maps and
scripted stand-ins for the front-end ports.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator

    from tombcrawl.engine.dice import DiceRoller
    from tombcrawl.engine.ports import Action, PointerEvent, Snapshot
    from tombcrawl.models.entities import Entity, EntityStore
    from tombcrawl.models.game_state import Game, TileGrid


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from tombcrawl.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Restore the default structlog configuration after each test."""
    import structlog

    yield
    structlog.reset_defaults()


@pytest.fixture
def save_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the save file into a temporary directory.

    Returns:
        The save file path the settings will use.
    """
    path = tmp_path / "savegame"
    monkeypatch.setenv("TOMBCRAWL_SAVE_PATH", str(path))
    return path


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Provide a seeded random source."""
    from tombcrawl.engine.dice import DiceRoller

    return DiceRoller(seed=1234)


@pytest.fixture
def open_grid() -> TileGrid:
    """Provide a 20x15 grid: one open room surrounded by wall."""
    from tombcrawl.models.game_state import TileGrid

    grid = TileGrid.filled(20, 15)
    for x in range(1, 19):
        for y in range(1, 14):
            grid.carve(x, y)
    return grid


@pytest.fixture
def player() -> Entity:
    """Provide the player standing at (5, 5)."""
    from tombcrawl.models.entities import create_player

    return create_player(5, 5)


@pytest.fixture
def store(player: Entity) -> EntityStore:
    """Provide an entity store holding only the player."""
    from tombcrawl.models.entities import EntityStore

    return EntityStore([player])


@pytest.fixture
def game(open_grid: TileGrid) -> Game:
    """Provide a game aggregate on the open grid with an empty inventory."""
    from tombcrawl.models.game_state import Game, MessageLog

    return Game(map=open_grid, log=MessageLog(capacity=6))


@pytest.fixture
def make_monster() -> Callable[..., Entity]:
    """Provide a factory for monsters with overridable fighter stats.

    Returns:
        Callable taking (kind, x, y, **fighter_overrides).
    """
    from tombcrawl.models.entities import create_monster

    def _make(kind: str = "orc", x: int = 6, y: int = 5, **overrides: Any) -> Entity:
        monster = create_monster(kind, x, y)
        assert monster.fighter is not None
        for key, value in overrides.items():
            setattr(monster.fighter, key, value)
        return monster

    return _make


# =============================================================================
# Scripted Ports
# =============================================================================


class ScriptedInput:
    """Input port returning queued actions, then None (window closed)."""

    def __init__(self, actions: Sequence[Action]) -> None:
        self._actions = list(actions)
        self.polls = 0

    def poll(self) -> Action | None:
        self.polls += 1
        if not self._actions:
            return None
        return self._actions.pop(0)


class ScriptedMenu:
    """Menu port returning queued selections, then None (cancel)."""

    def __init__(self, selections: Sequence[int | None] = ()) -> None:
        self._selections = list(selections)
        self.prompts: list[tuple[str, list[str]]] = []
        self.messages: list[str] = []

    def select(self, header: str, options: Sequence[str]) -> int | None:
        self.prompts.append((header, list(options)))
        if not self._selections:
            return None
        return self._selections.pop(0)

    def message(self, text: str) -> None:
        self.messages.append(text)


class ScriptedTargeting:
    """Targeting port streaming a fixed list of pointer events."""

    def __init__(self, events: Iterable[PointerEvent] = ()) -> None:
        self._events = list(events)

    def events(self) -> Iterable[PointerEvent]:
        return iter(self._events)


class RecordingRender:
    """Render port keeping every snapshot it is given."""

    def __init__(self) -> None:
        self.snapshots: list[Snapshot] = []
        self.fullscreen_toggles = 0

    def render(self, snapshot: Snapshot) -> None:
        self.snapshots.append(snapshot)

    def toggle_fullscreen(self) -> None:
        self.fullscreen_toggles += 1


@pytest.fixture
def make_ports() -> Callable[..., dict[str, Any]]:
    """Provide a factory for scripted ports.

    Returns:
        Callable taking (actions, selections, events) and returning the
        keyword arguments GameLoop expects for its ports.
    """

    def _make(
        actions: Sequence[Action] = (),
        selections: Sequence[int | None] = (),
        events: Iterable[PointerEvent] = (),
    ) -> dict[str, Any]:
        return {
            "input_port": ScriptedInput(actions),
            "menu_port": ScriptedMenu(selections),
            "render_port": RecordingRender(),
            "targeting_port": ScriptedTargeting(events),
        }

    return _make
