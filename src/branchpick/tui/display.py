"""Picker display: builds Rich renderables from PickerState."""

from __future__ import annotations

from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from branchpick.tui.state import PickerState

# Rows taken by the search box: one content row plus its border.
SEARCH_HEIGHT = 3
# Border rows around the list box.
_LIST_CHROME = 2
# Border columns plus horizontal padding of a Panel.
_PANEL_CHROME = 4

_SELECTED_GUTTER = "> "
_GUTTER = "  "


class PickerDisplay:
    """Builds Rich Layout objects from the current PickerState.

    Rendering never mutates the state, so drawing the same state twice
    yields the same frame.
    """

    def render(self, state: PickerState, height: int = 24, width: int = 80) -> Layout:
        """Build the full screen layout: branch list above, search box below."""
        layout = Layout()
        layout.split_column(
            Layout(name="list"),
            Layout(name="search", size=SEARCH_HEIGHT),
        )

        list_rows = max(0, height - SEARCH_HEIGHT - _LIST_CHROME)
        layout["list"].update(self._render_list(state, list_rows))
        layout["search"].update(self._render_search(state, width))
        return layout

    def _render_list(self, state: PickerState, rows: int) -> Panel:
        lines = list_lines(state, rows)
        body = Text("\n", no_wrap=True, overflow="ellipsis").join(lines)
        return Panel(body, title="Branches", title_align="left")

    def _render_search(self, state: PickerState, width: int) -> Panel:
        visible = clip_query(state.input, width - _PANEL_CHROME)
        subtitle = None
        if state.entries is not None:
            subtitle = f"{len(state.matches)}/{len(state.entries)}"
        return Panel(
            Text(visible, no_wrap=True, overflow="crop"),
            title="Search",
            title_align="left",
            subtitle=subtitle,
            subtitle_align="right",
            height=SEARCH_HEIGHT,
        )


def list_lines(state: PickerState, rows: int) -> list[Text]:
    """Lay out ``rows`` list lines, anchored to the bottom.

    The first match sits on the last row and later matches stack upward.
    When there are more matches than rows, the window scrolls just enough
    to keep the selection visible.
    """
    if rows <= 0:
        return []

    matches = state.matches
    start = max(0, state.selected_index - rows + 1)
    window = matches[start : start + rows]

    lines: list[Text] = []
    for offset, entry in enumerate(window):
        if start + offset == state.selected_index:
            line = Text(_SELECTED_GUTTER, style="bold cyan")
            line.append(entry, style="bold")
        else:
            line = Text(_GUTTER)
            line.append(entry)
        lines.append(line)

    lines.reverse()
    padding = [Text("") for _ in range(rows - len(lines))]
    return padding + lines


def clip_query(query: str, width: int) -> str:
    """Return the tail of ``query`` that fits in ``width`` columns."""
    if width <= 0:
        return ""
    if len(query) <= width:
        return query
    return query[len(query) - width :]
