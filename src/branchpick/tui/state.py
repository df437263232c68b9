"""Picker state, the closed set of actions, and the reducer that applies them."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Union

from branchpick.matching import filter_entries


@dataclass
class PickerState:
    """All state of the interactive picker.

    Owned by the driving loop and mutated only through :func:`apply`.
    ``selected_index`` indexes ``matches`` (the filtered view), never the
    raw ``entries``, and is always 0 when there is nothing to select.
    """

    input: str = ""
    entries: list[str] | None = None
    selected_index: int = 0
    match_limit: int | None = None
    matches: list[str] = field(default_factory=list)
    running: bool = True
    result: str | None = None

    @property
    def selected(self) -> str | None:
        """The entry under the cursor, or None when nothing matches."""
        if not self.matches:
            return None
        return self.matches[self.selected_index]


@dataclass(frozen=True)
class EntriesLoaded:
    """The entries source finished; replaces all entries."""

    entries: Sequence[str]


@dataclass(frozen=True)
class SelectedIndexIncreased:
    """Move the selection one row toward the end of the list."""


@dataclass(frozen=True)
class SelectedIndexDecreased:
    """Move the selection one row toward the start of the list."""


@dataclass(frozen=True)
class QueryChanged:
    """Append typed text to the query."""

    char: str


@dataclass(frozen=True)
class QueryBackspace:
    """Delete the last character of the query."""


@dataclass(frozen=True)
class QueryCleared:
    """Erase the whole query."""


@dataclass(frozen=True)
class SelectionCommitted:
    """Accept the entry under the cursor and stop the picker."""


@dataclass(frozen=True)
class QuitRequested:
    """Stop the picker without a selection."""


Action = Union[
    EntriesLoaded,
    SelectedIndexIncreased,
    SelectedIndexDecreased,
    QueryChanged,
    QueryBackspace,
    QueryCleared,
    SelectionCommitted,
    QuitRequested,
]


def apply(state: PickerState, action: Action) -> None:
    """Mutate ``state`` to reflect ``action``.

    This is the only function that may mutate a PickerState. It never
    raises and leaves ``selected_index`` within ``matches`` on return.
    Once the picker has stopped, only ``EntriesLoaded`` still has an effect.
    """
    if isinstance(action, EntriesLoaded):
        state.entries = list(action.entries)
        _refilter(state)
        return

    if not state.running:
        return

    if isinstance(action, SelectedIndexIncreased):
        _selected_index_increased(state)
    elif isinstance(action, SelectedIndexDecreased):
        _selected_index_decreased(state)
    elif isinstance(action, QueryChanged):
        state.input += action.char
        _refilter(state)
    elif isinstance(action, QueryBackspace):
        state.input = state.input[:-1]
        _refilter(state)
    elif isinstance(action, QueryCleared):
        state.input = ""
        _refilter(state)
    elif isinstance(action, SelectionCommitted):
        _selection_committed(state)
    elif isinstance(action, QuitRequested):
        state.running = False
        state.result = None


def _refilter(state: PickerState) -> None:
    if state.entries is None:
        state.matches = []
    else:
        state.matches = filter_entries(state.input, state.entries, state.match_limit)
    state.selected_index = 0


def _selected_index_increased(state: PickerState) -> None:
    total = len(state.matches)
    if total == 0:
        state.selected_index = 0
    else:
        state.selected_index = min(state.selected_index + 1, total - 1)


def _selected_index_decreased(state: PickerState) -> None:
    total = len(state.matches)
    if total == 0 or state.selected_index <= 0:
        state.selected_index = 0
    else:
        state.selected_index = min(state.selected_index - 1, total - 1)


def _selection_committed(state: PickerState) -> None:
    selected = state.selected
    if selected is None:
        return
    state.result = selected
    state.running = False
