"""Single-keypress reader for the terminal frontend.

Arrow keys, WASD and the command letters are read raw (no Enter needed)
on macOS / Linux (tty + termios + select) and Windows (msvcrt).
"""

from __future__ import annotations

import os
import sys

# Actions a key can map to.
#   "up" "down" "left" "right"   look below / above / right / left of the gap
#   "cycle"                      select the next gap
#   "undo" "redo" "moves"        history and valid-move listing
#   "reset" "shuffle" "pause"    board / challenge controls
#   "giveup" "help" "quit" "enter"
_KEY_MAP: dict[str, str] = {
    "w": "up",
    "s": "down",
    "a": "left",
    "d": "right",
    " ": "cycle",
    "\t": "cycle",
    "u": "undo",
    "y": "redo",
    "m": "moves",
    "r": "reset",
    "x": "shuffle",
    "p": "pause",
    "g": "giveup",
    "?": "help",
    "q": "quit",
    "\x03": "quit",  # Ctrl-C
    "\r": "enter",
    "\n": "enter",
}

_ARROW_MAP: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
}


def _resolve(ch: str) -> str:
    if ch in _KEY_MAP:
        return _KEY_MAP[ch]
    lower = ch.lower()
    if lower in _KEY_MAP and lower.isalpha():
        return _KEY_MAP[lower]
    return ch if ch.isprintable() else ""


# -- Windows --------------------------------------------------------------------


def _read_windows(timeout: float | None) -> str | None:
    import msvcrt  # type: ignore[import-not-found]
    import time

    if timeout is not None:
        end = time.monotonic() + timeout
        while not msvcrt.kbhit():
            if time.monotonic() >= end:
                return None
            time.sleep(0.02)

    ch = msvcrt.getwch()
    if ch in ("\x00", "\xe0"):  # arrow prefix
        return {"H": "up", "P": "down", "K": "left", "M": "right"}.get(msvcrt.getwch(), "")
    if ch == "\x1b":
        return "quit"
    return _resolve(ch)


# -- POSIX ----------------------------------------------------------------------


def _read_posix(timeout: float | None) -> str | None:
    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)

    def pending(wait: float | None) -> bool:
        ready, _, _ = select.select([fd], [], [], wait)
        return bool(ready)

    def read1() -> str:
        # os.read is unbuffered, so select() still sees the rest of an
        # escape sequence.
        return os.read(fd, 1).decode("utf-8", errors="ignore")

    try:
        tty.setraw(fd)
        if not pending(timeout):
            return None

        ch = read1()
        if ch != "\x1b":
            return _resolve(ch)

        # ESC [ A/B/C/D, or a bare Escape.
        if not pending(0.1):
            return "quit"
        if read1() != "[":
            return "quit"
        if not pending(0.1):
            return ""
        return _ARROW_MAP.get(read1(), "")
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


# -- public API -----------------------------------------------------------------


def read_key(timeout: float | None = None) -> str | None:
    """Read one keypress and return its action name.

    Blocks until a key arrives, or returns ``None`` once *timeout* seconds
    pass without one. Unmapped printable keys come back as themselves,
    anything else as ``""``.
    """
    if os.name == "nt":
        return _read_windows(timeout)
    return _read_posix(timeout)


def get_key() -> str:
    """Blocking variant of :func:`read_key`."""
    key = read_key()
    return key or ""
