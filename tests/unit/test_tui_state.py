"""Tests for the picker state and reducer."""

from __future__ import annotations

import itertools

import pytest

from branchpick.tui.state import (
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

BRANCHES = ["main", "feat/my-feature", "bug/my-bug", "feat/another-feature"]


def _make_state(num_entries: int) -> PickerState:
    state = PickerState()
    apply(state, EntriesLoaded(BRANCHES[:num_entries]))
    return state


def test_default_state():
    state = PickerState()
    assert state.input == ""
    assert state.entries is None
    assert state.selected_index == 0
    assert state.matches == []
    assert state.running is True
    assert state.result is None


# --- loading entries ---


def test_empty_entries_loaded():
    state = PickerState()
    apply(state, EntriesLoaded([]))
    assert state.entries == []
    assert state.selected_index == 0


def test_entries_loaded_updates_entries():
    state = PickerState()
    entries = ["main", "feat/my-feature"]
    apply(state, EntriesLoaded(entries))
    assert state.entries == entries
    assert state.matches == entries


def test_entries_loaded_copies_input_sequence():
    entries = ["main"]
    state = PickerState()
    apply(state, EntriesLoaded(entries))
    entries.append("other")
    assert state.entries == ["main"]


def test_reload_resets_selection():
    state = _make_state(2)
    apply(state, SelectedIndexIncreased())
    assert state.selected_index == 1

    apply(state, EntriesLoaded(["x", "y", "z"]))
    assert state.entries == ["x", "y", "z"]
    assert state.selected_index == 0


def test_entries_loaded_applies_existing_query():
    state = PickerState(input="feat")
    apply(state, EntriesLoaded(["main", "feat/a", "bug/b", "feat/c"]))
    assert state.matches == ["feat/a", "feat/c"]


# --- selected index ---


def test_increase_without_entries_stays_zero():
    state = PickerState()
    apply(state, SelectedIndexIncreased())
    assert state.selected_index == 0


def test_decrease_without_entries_stays_zero():
    state = PickerState()
    apply(state, SelectedIndexDecreased())
    assert state.selected_index == 0


def test_increase():
    state = _make_state(3)
    apply(state, SelectedIndexIncreased())
    assert state.selected_index == 1


def test_decrease():
    state = _make_state(3)
    apply(state, SelectedIndexIncreased())
    apply(state, SelectedIndexDecreased())
    assert state.selected_index == 0


def test_decrease_below_zero_stays_zero():
    state = _make_state(3)
    apply(state, SelectedIndexIncreased())
    apply(state, SelectedIndexDecreased())
    apply(state, SelectedIndexDecreased())
    assert state.selected_index == 0


def test_increase_past_end_stays_at_last():
    state = _make_state(3)
    for _ in range(3):
        apply(state, SelectedIndexIncreased())
    assert state.selected_index == 2


def test_three_branches_scenario():
    state = PickerState()
    apply(state, EntriesLoaded(["main", "feat/x", "bug/y"]))
    assert state.selected_index == 0
    apply(state, SelectedIndexIncreased())
    apply(state, SelectedIndexIncreased())
    assert state.selected_index == 2
    apply(state, SelectedIndexIncreased())
    assert state.selected_index == 2


def test_empty_list_scenario():
    state = PickerState()
    apply(state, EntriesLoaded([]))
    apply(state, SelectedIndexIncreased())
    assert state.entries == []
    assert state.selected_index == 0


@pytest.mark.parametrize("count", [0, 1, 2, 4])
def test_selection_stays_in_bounds_for_all_short_sequences(count: int):
    moves = [SelectedIndexIncreased(), SelectedIndexDecreased()]
    upper = max(count - 1, 0)
    for sequence in itertools.product(moves, repeat=6):
        state = _make_state(count)
        for action in sequence:
            apply(state, action)
            assert 0 <= state.selected_index <= upper


def test_moves_before_any_load_never_fail():
    state = PickerState()
    for _ in range(10):
        apply(state, SelectedIndexIncreased())
        apply(state, SelectedIndexDecreased())
    assert state.selected_index == 0


# --- query editing ---


def test_query_changed_appends_and_filters():
    state = _make_state(4)
    apply(state, QueryChanged("f"))
    apply(state, QueryChanged("e"))
    assert state.input == "fe"
    assert "main" not in state.matches
    assert set(state.matches) >= {"feat/my-feature", "feat/another-feature"}


def test_query_change_resets_selection():
    state = _make_state(4)
    apply(state, SelectedIndexIncreased())
    apply(state, SelectedIndexIncreased())
    apply(state, QueryChanged("f"))
    assert state.selected_index == 0


def test_selection_bounds_follow_filtered_view():
    state = _make_state(4)
    apply(state, QueryChanged("main"))
    assert state.matches == ["main"]
    apply(state, SelectedIndexIncreased())
    assert state.selected_index == 0


def test_query_backspace():
    state = _make_state(4)
    apply(state, QueryChanged("b"))
    apply(state, QueryChanged("u"))
    apply(state, QueryBackspace())
    assert state.input == "b"


def test_query_backspace_on_empty_input():
    state = _make_state(2)
    apply(state, QueryBackspace())
    assert state.input == ""
    assert state.matches == ["main", "feat/my-feature"]


def test_query_cleared_restores_all_entries():
    state = _make_state(4)
    apply(state, QueryChanged("zzz"))
    assert state.matches == []
    apply(state, QueryCleared())
    assert state.input == ""
    assert state.matches == state.entries


def test_query_before_load():
    state = PickerState()
    apply(state, QueryChanged("m"))
    assert state.input == "m"
    assert state.matches == []
    assert state.selected_index == 0


def test_match_limit_caps_matches():
    state = PickerState(match_limit=2)
    apply(state, EntriesLoaded(["a1", "a2", "a3"]))
    assert state.matches == ["a1", "a2"]
    for _ in range(5):
        apply(state, SelectedIndexIncreased())
    assert state.selected_index == 1


# --- commit and quit ---


def test_commit_returns_selected_entry():
    state = _make_state(3)
    apply(state, SelectedIndexIncreased())
    apply(state, SelectionCommitted())
    assert state.running is False
    assert state.result == "feat/my-feature"


def test_commit_uses_filtered_view():
    state = _make_state(4)
    for ch in "bug":
        apply(state, QueryChanged(ch))
    apply(state, SelectionCommitted())
    assert state.result == "bug/my-bug"


def test_commit_without_matches_keeps_running():
    state = PickerState()
    apply(state, SelectionCommitted())
    assert state.running is True
    assert state.result is None

    apply(state, EntriesLoaded([]))
    apply(state, SelectionCommitted())
    assert state.running is True


def test_quit():
    state = _make_state(2)
    apply(state, QuitRequested())
    assert state.running is False
    assert state.result is None


def test_actions_after_stop_are_ignored():
    state = _make_state(3)
    apply(state, SelectionCommitted())
    apply(state, SelectedIndexIncreased())
    apply(state, QueryChanged("x"))
    apply(state, QuitRequested())
    assert state.selected_index == 0
    assert state.input == ""
    assert state.result == "main"


def test_selected_property():
    state = PickerState()
    assert state.selected is None
    apply(state, EntriesLoaded(["main", "dev"]))
    apply(state, SelectedIndexIncreased())
    assert state.selected == "dev"
