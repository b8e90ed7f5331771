"""Simulation engine: generation, visibility, combat, AI, items and the turn loop."""

from __future__ import annotations

from tombcrawl.engine.combat import AttackResult, attack, take_damage
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.fov import VisibilityField, describe_position
from tombcrawl.engine.items import use_item
from tombcrawl.engine.loop import GameLoop, SchedulerState, TurnResult
from tombcrawl.engine.mapgen import GeneratedLevel, MapGenerator, Rect
from tombcrawl.engine.ports import (
    Action,
    ActionKind,
    ClickKind,
    InputPort,
    MenuPort,
    PointerEvent,
    RenderPort,
    Snapshot,
    TargetingPort,
)
from tombcrawl.engine.session import Frontend, main_menu, new_game


__all__ = [
    # Random source
    "DiceRoller",
    # Generation
    "MapGenerator",
    "GeneratedLevel",
    "Rect",
    # Visibility
    "VisibilityField",
    "describe_position",
    # Combat and items
    "AttackResult",
    "attack",
    "take_damage",
    "use_item",
    # Ports
    "Action",
    "ActionKind",
    "ClickKind",
    "PointerEvent",
    "Snapshot",
    "InputPort",
    "MenuPort",
    "RenderPort",
    "TargetingPort",
    # Scheduler
    "GameLoop",
    "SchedulerState",
    "TurnResult",
    # Session
    "Frontend",
    "new_game",
    "main_menu",
]
