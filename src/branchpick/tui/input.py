"""Blocking keyboard input via termios raw mode."""

from __future__ import annotations

import os
import selectors
import sys
import termios
import tty
from types import TracebackType

from branchpick.exceptions import TerminalError

# Final byte of a CSI sequence -> key name
_CSI_KEYS = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

# Numeric CSI sequences ending in "~"
_TILDE_KEYS = {
    "1": "home",
    "3": "delete",
    "4": "end",
    "7": "home",
    "8": "end",
}

_CONTROL_KEYS = {
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x7f": "backspace",
    "\x08": "backspace",
}

_ESCAPE_TIMEOUT = 0.02
_MAX_SEQUENCE = 32


class KeyboardInput:
    """Context manager that puts the terminal into raw mode for single-key reads.

    Raw mode turns off line buffering, echo and signal generation, so
    Ctrl+C arrives as a key (``"ctrl+c"``) instead of SIGINT. Reads go
    through ``os.read`` on the file descriptor so they stay in sync with
    what ``selectors`` reports as available.

    Usage::

        with KeyboardInput() as kb:
            key = kb.read()  # blocks for one key
    """

    def __init__(self, fd: int | None = None) -> None:
        self._old_settings: list | None = None
        self._selector = selectors.DefaultSelector()
        self._fd: int = sys.stdin.fileno() if fd is None else fd

    def __enter__(self) -> KeyboardInput:
        try:
            self._old_settings = termios.tcgetattr(self._fd)
            tty.setraw(self._fd)
            # Keep output post-processing so "\n" still moves to column 0.
            attrs = termios.tcgetattr(self._fd)
            attrs[1] |= termios.OPOST
            termios.tcsetattr(self._fd, termios.TCSADRAIN, attrs)
        except termios.error as exc:
            self._selector.close()
            raise TerminalError(f"Failed to enter terminal's raw mode: {exc}") from exc
        self._selector.register(self._fd, selectors.EVENT_READ)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._selector.unregister(self._fd)
        self._selector.close()
        if self._old_settings is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._old_settings)
            self._old_settings = None

    def _wait(self, timeout: float | None) -> bool:
        return bool(self._selector.select(timeout=timeout))

    def _read_byte(self) -> int:
        data = os.read(self._fd, 1)
        if not data:
            raise TerminalError("Terminal input was closed")
        return data[0]

    def read(self, timeout: float | None = None) -> str | None:
        """Read a single key press.

        Blocks until a key arrives when ``timeout`` is None, otherwise
        returns None if nothing arrives in time.
        """
        if not self._wait(timeout):
            return None

        byte = self._read_byte()
        if byte == 0x1B:
            return self._read_escape_sequence()
        if byte < 0x80:
            return _name_ascii(chr(byte))
        return self._read_utf8(byte)

    def _read_utf8(self, lead: int) -> str:
        if lead >= 0xF0:
            remaining = 3
        elif lead >= 0xE0:
            remaining = 2
        elif lead >= 0xC0:
            remaining = 1
        else:
            return "unknown"

        data = bytearray([lead])
        for _ in range(remaining):
            if not self._wait(_ESCAPE_TIMEOUT):
                break
            data.append(self._read_byte())
        text = data.decode("utf-8", errors="replace")
        return text if len(text) == 1 and text.isprintable() else "unknown"

    def _read_escape_sequence(self) -> str:
        """Decode what follows an ESC byte.

        A lone ESC is the escape key. Mouse reports (SGR ``ESC [ <`` and
        X10 ``ESC [ M``) are consumed whole and reported as ``"mouse"``.
        """
        if not self._wait(_ESCAPE_TIMEOUT):
            return "escape"

        introducer = chr(self._read_byte())
        if introducer == "O":
            if not self._wait(_ESCAPE_TIMEOUT):
                return "unknown"
            return _CSI_KEYS.get(chr(self._read_byte()), "unknown")
        if introducer != "[":
            return f"alt+{introducer}" if introducer.isprintable() else "escape"

        body = ""
        while len(body) < _MAX_SEQUENCE:
            if not self._wait(_ESCAPE_TIMEOUT):
                return "unknown"
            ch = chr(self._read_byte())
            if body == "" and ch == "M":
                # X10 mouse: three raw bytes follow
                for _ in range(3):
                    if self._wait(_ESCAPE_TIMEOUT):
                        self._read_byte()
                return "mouse"
            if "\x40" <= ch <= "\x7e":
                return _decode_csi(body, ch)
            body += ch
        return "unknown"


def _name_ascii(ch: str) -> str:
    if ch in _CONTROL_KEYS:
        return _CONTROL_KEYS[ch]
    code = ord(ch)
    if 1 <= code <= 26:
        return f"ctrl+{chr(code + 0x60)}"
    if ch.isprintable():
        return ch
    return "unknown"


def _decode_csi(params: str, final: str) -> str:
    if params.startswith("<"):
        return "mouse"
    if final == "~":
        return _TILDE_KEYS.get(params.split(";")[0], "unknown")
    return _CSI_KEYS.get(final, "unknown")
