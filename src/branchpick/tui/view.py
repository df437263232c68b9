"""Terminal view: exclusive, scoped ownership of the terminal."""

from __future__ import annotations

import logging
from contextlib import ExitStack
from types import TracebackType

from rich.console import Console
from rich.live import Live

from branchpick.exceptions import TerminalError
from branchpick.tui.display import PickerDisplay
from branchpick.tui.input import KeyboardInput
from branchpick.tui.state import PickerState

logger = logging.getLogger(__name__)

# Basic button tracking plus SGR extended coordinates
_MOUSE_ON = "\x1b[?1000h\x1b[?1006h"
_MOUSE_OFF = "\x1b[?1006l\x1b[?1000l"


class TerminalView:
    """Owns the terminal while the picker runs.

    Entering the context switches the input to raw mode, then the display
    to the alternate screen with mouse reporting on. Leaving it undoes
    those steps in reverse order, exactly once, however the block exits.
    If any step fails while entering, the steps already taken are undone
    before ``TerminalError`` is raised.

    Usage::

        with TerminalView() as view:
            view.draw(state)
            key = view.read_key()
    """

    def __init__(
        self,
        console: Console | None = None,
        keyboard: KeyboardInput | None = None,
    ) -> None:
        self._console = console or Console(stderr=True)
        self._keyboard = keyboard or KeyboardInput()
        self._display = PickerDisplay()
        self._stack: ExitStack | None = None
        self._live: Live | None = None

    def __enter__(self) -> TerminalView:
        if self._stack is not None:
            raise TerminalError("Terminal view is already acquired")
        if not self._console.is_terminal:
            raise TerminalError("branchpick must be run from an interactive terminal")

        stack = ExitStack()
        try:
            stack.enter_context(self._keyboard)
            self._live = stack.enter_context(
                Live(
                    console=self._console,
                    screen=True,
                    auto_refresh=False,
                    redirect_stdout=False,
                    redirect_stderr=False,
                )
            )
            self._write_control(_MOUSE_ON)
            stack.callback(self._write_control, _MOUSE_OFF)
        except TerminalError:
            self._live = None
            stack.close()
            raise
        except Exception as exc:
            self._live = None
            stack.close()
            raise TerminalError(f"Failed to attach to terminal: {exc}") from exc

        self._stack = stack
        logger.debug("Terminal acquired")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def acquired(self) -> bool:
        return self._stack is not None

    def close(self) -> None:
        """Restore the terminal. Safe to call more than once."""
        stack, self._stack = self._stack, None
        if stack is None:
            return
        self._live = None
        stack.close()
        logger.debug("Terminal released")

    def draw(self, state: PickerState) -> None:
        """Render ``state`` as a full frame."""
        if self._live is None:
            raise TerminalError("Terminal view is not acquired")
        width, height = self._console.size
        layout = self._display.render(state, height=height, width=width)
        self._live.update(layout, refresh=True)

    def read_key(self) -> str | None:
        """Block until the next key press and return its name."""
        if self._stack is None:
            raise TerminalError("Terminal view is not acquired")
        return self._keyboard.read()

    def _write_control(self, sequence: str) -> None:
        self._console.file.write(sequence)
        self._console.file.flush()
