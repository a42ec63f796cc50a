"""
Action Dispatcher: one table for pointer and gesture input.

ACTION_TABLE maps (screen, answered, pose label) to a command. Gesture input
looks up the confirmed label directly. Pointer buttons that have a gesture
counterpart are bound to the same label (POINTER_BINDINGS) and take the same
path, so both input modalities always do the same thing. Buttons with no
gesture counterpart map straight to a command.

    screen  answered  label                        command
    HOME    -         Both_Up                      start New session
    QUIZ    False     Left_Up/Right_Up/Left_Side/  select option 0/1/2/3
                      Right_Side
    QUIZ    any       Cross_Arms                   go home
    QUIZ    True      Both_Up                      advance
    STATS   -         Cross_Arms                   go home

Anything else is a no-op.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from loguru import logger

from joyo.core.errors import GestureModeError
from joyo.core.modes import Screen, SessionMode
from joyo.gesture.camera import GestureController
from joyo.gesture.classifier import PoseLabel

from . import context as transitions
from .context import SessionContext


class Action(str, Enum):
    START_SESSION = "start_session"
    SELECT_OPTION = "select_option"
    ADVANCE = "advance"
    GO_HOME = "go_home"
    OPEN_STATS = "open_stats"
    TOGGLE_FLIP = "toggle_flip"
    RESET_PROGRESS = "reset_progress"


@dataclass(frozen=True)
class Command:
    action: Action
    arg: Any = None


# None in the answered slot means "not applicable on this screen"
TableKey = tuple[Screen, bool | None, PoseLabel]

_OPTION_POSES = (PoseLabel.LEFT_UP, PoseLabel.RIGHT_UP, PoseLabel.LEFT_SIDE, PoseLabel.RIGHT_SIDE)

ACTION_TABLE: dict[TableKey, Command] = {
    (Screen.HOME, None, PoseLabel.BOTH_UP): Command(Action.START_SESSION, SessionMode.NEW),
    **{
        (Screen.QUIZ, False, pose): Command(Action.SELECT_OPTION, position)
        for position, pose in enumerate(_OPTION_POSES)
    },
    (Screen.QUIZ, False, PoseLabel.CROSS_ARMS): Command(Action.GO_HOME),
    (Screen.QUIZ, True, PoseLabel.CROSS_ARMS): Command(Action.GO_HOME),
    (Screen.QUIZ, True, PoseLabel.BOTH_UP): Command(Action.ADVANCE),
    (Screen.STATS, None, PoseLabel.CROSS_ARMS): Command(Action.GO_HOME),
}


class Control(str, Enum):
    """Pointer-driven controls (buttons)."""

    START_LEARNING = "start_learning"
    START_REVIEW = "start_review"
    VIEW_STATS = "view_stats"
    OPTION_1 = "option_1"
    OPTION_2 = "option_2"
    OPTION_3 = "option_3"
    OPTION_4 = "option_4"
    NEXT = "next"
    HOME = "home"
    FLIP = "flip"
    RESET = "reset"


# Pointer controls are screen-scoped like the poses they stand for: NEXT on
# Home starts a New session and START_LEARNING on an answered card advances.
# Hosts show each control only on the screen it belongs to.
POINTER_BINDINGS: dict[Control, PoseLabel] = {
    Control.START_LEARNING: PoseLabel.BOTH_UP,
    Control.OPTION_1: PoseLabel.LEFT_UP,
    Control.OPTION_2: PoseLabel.RIGHT_UP,
    Control.OPTION_3: PoseLabel.LEFT_SIDE,
    Control.OPTION_4: PoseLabel.RIGHT_SIDE,
    Control.NEXT: PoseLabel.BOTH_UP,
    Control.HOME: PoseLabel.CROSS_ARMS,
}

POINTER_ONLY: dict[Control, Command] = {
    Control.START_REVIEW: Command(Action.START_SESSION, SessionMode.REVIEW),
    Control.VIEW_STATS: Command(Action.OPEN_STATS),
    Control.FLIP: Command(Action.TOGGLE_FLIP),
    Control.RESET: Command(Action.RESET_PROGRESS),
}


def resolve(screen: Screen, answered: bool | None, label: PoseLabel) -> Command | None:
    """Look up the command for an input in the current state."""
    if screen is not Screen.QUIZ:
        answered = None
    return ACTION_TABLE.get((screen, answered, label))


class ActionDispatcher:
    """
    Applies commands to a SessionContext.
    """

    def __init__(self, ctx: SessionContext):
        self.ctx = ctx
        self._handlers: dict[Action, Callable[[SessionContext, Any], SessionContext]] = {
            Action.START_SESSION: transitions.start_session,
            Action.SELECT_OPTION: transitions.select_option_at,
            Action.ADVANCE: lambda ctx, _: transitions.advance(ctx),
            Action.GO_HOME: lambda ctx, _: transitions.return_home(ctx),
            Action.OPEN_STATS: lambda ctx, _: transitions.open_stats(ctx),
            Action.TOGGLE_FLIP: lambda ctx, _: transitions.toggle_flip(ctx),
            Action.RESET_PROGRESS: lambda ctx, _: transitions.reset_progress(ctx),
        }

    def on_label(self, label: PoseLabel) -> Command | None:
        """Dispatch an input label (confirmed gesture or bound pointer press)."""
        command = resolve(self.ctx.screen, self.ctx.answered, label)
        if command is None:
            logger.debug(f"No action for {label.value} on {self.ctx.screen.value}")
            return None
        self.execute(command)
        return command

    def on_gesture(self, label: PoseLabel) -> Command | None:
        return self.on_label(label)

    def on_pointer(self, control: Control) -> Command | None:
        if control in POINTER_BINDINGS:
            return self.on_label(POINTER_BINDINGS[control])
        command = POINTER_ONLY[control]
        self.execute(command)
        return command

    def execute(self, command: Command) -> SessionContext:
        logger.debug(f"Executing {command.action.value} ({command.arg!r})")
        self.ctx = self._handlers[command.action](self.ctx, command.arg)
        return self.ctx


def enable_gesture_mode(controller: GestureController, ctx: SessionContext) -> bool:
    """
    Turn gesture mode on; on failure post the notice and keep manual input.

    Returns:
        True if gesture mode is now enabled
    """
    try:
        controller.enable()
    except GestureModeError as e:
        ctx.notice = e.notice
        return False
    return True
