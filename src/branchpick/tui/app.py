"""Picker application: the loop that draws state and turns keys into actions."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from typing import Protocol

from branchpick.tui.state import (
    Action,
    EntriesLoaded,
    PickerState,
    QueryBackspace,
    QueryChanged,
    QueryCleared,
    QuitRequested,
    SelectedIndexDecreased,
    SelectedIndexIncreased,
    SelectionCommitted,
    apply,
)
from branchpick.tui.view import TerminalView

logger = logging.getLogger(__name__)

_QUIT_KEYS = frozenset({"escape", "ctrl+c", "ctrl+d"})

# The list grows upward from the bottom, so "up" moves toward later entries.
_KEY_ACTIONS: dict[str, Action] = {
    "enter": SelectionCommitted(),
    "up": SelectedIndexIncreased(),
    "ctrl+p": SelectedIndexIncreased(),
    "down": SelectedIndexDecreased(),
    "ctrl+n": SelectedIndexDecreased(),
    "backspace": QueryBackspace(),
    "ctrl+u": QueryCleared(),
}


class View(Protocol):
    def draw(self, state: PickerState) -> None: ...

    def read_key(self) -> str | None: ...


def action_for_key(key: str) -> Action | None:
    """Translate a key name from KeyboardInput into at most one action."""
    if key in _QUIT_KEYS:
        return QuitRequested()
    action = _KEY_ACTIONS.get(key)
    if action is not None:
        return action
    if len(key) == 1 and key.isprintable():
        return QueryChanged(key)
    return None


class PickerApp:
    """Interactive branch picker.

    Loads the entries, takes over the terminal, then alternates between
    drawing the state and applying the action for the next key until the
    user commits a selection or quits. The terminal is restored before
    ``run`` returns or raises.
    """

    def __init__(
        self,
        state: PickerState,
        load_entries: Callable[[], Sequence[str]],
        view_factory: Callable[[], AbstractContextManager[View]] = TerminalView,
    ) -> None:
        self._state = state
        self._load_entries = load_entries
        self._view_factory = view_factory

    @property
    def state(self) -> PickerState:
        return self._state

    def run(self) -> str | None:
        """Run until commit or quit. Returns the committed entry, if any."""
        state = self._state

        # Load before taking the terminal so a bad repo never flashes the UI.
        entries = self._load_entries()

        with self._view_factory() as view:
            apply(state, EntriesLoaded(entries))
            while state.running:
                view.draw(state)
                key = view.read_key()
                if key is None:
                    continue
                action = action_for_key(key)
                if action is not None:
                    apply(state, action)

        if state.result is None:
            logger.info("Picker quit without a selection")
        else:
            logger.info("Picker committed %s", state.result)
        return state.result
