from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, TextIO, Tuple

from nicestats.common.models import MAGNITUDE_KINDS, Metric


CLEAR_SCREEN = "\x1b[2J\x1b[H"


def printable_key(key: str) -> str:
    return key.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


def format_metric(key: str, metric: Metric) -> str:
    key = printable_key(key)
    if metric.kind in MAGNITUDE_KINDS:
        return f"{key}: {metric.count} @ {metric.value:f}"
    return f"{key}: {metric.count}"


def render_lines(snapshot: Sequence[Tuple[str, Metric]]) -> List[str]:
    return [format_metric(key, metric) for key, metric in snapshot]


@dataclass
class StreamDisplay:
    """Writes each frame to a text stream, optionally preceded by an ANSI clear."""

    stream: TextIO = field(default_factory=lambda: sys.stdout)
    clear: bool = False
    frames: int = field(default=0, init=False)

    def open(self) -> None:
        return None

    def draw(self, snapshot: Sequence[Tuple[str, Metric]]) -> None:
        lines = render_lines(snapshot)
        if self.clear:
            self.stream.write(CLEAR_SCREEN)
        for line in lines:
            self.stream.write(line + "\n")
        self.stream.flush()
        self.frames += 1

    def close(self) -> None:
        return None


@dataclass
class CursesDisplay:
    """Full-screen white-on-black window, erased and rewritten on every frame."""

    _screen: Optional[Any] = field(default=None, init=False)
    _window: Optional[Any] = field(default=None, init=False)
    frames: int = field(default=0, init=False)

    def open(self) -> None:
        import curses

        self._screen = curses.initscr()
        curses.noecho()
        curses.cbreak()
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        if curses.has_colors():
            curses.start_color()
            curses.init_pair(1, curses.COLOR_WHITE, curses.COLOR_BLACK)
        self._window = curses.newwin(curses.LINES, curses.COLS, 0, 0)
        if curses.has_colors():
            self._window.bkgd(" ", curses.color_pair(1))
        self._window.scrollok(True)
        self._window.refresh()

    def draw(self, snapshot: Sequence[Tuple[str, Metric]]) -> None:
        import curses

        if self._window is None:
            raise RuntimeError("display not open")
        self._window.erase()
        for line in render_lines(snapshot):
            try:
                self._window.addstr(line + "\n")
            except curses.error:
                # Lines wider than the window wrap; the final cell can still refuse a write.
                break
        self._window.refresh()
        self.frames += 1

    def close(self) -> None:
        if self._screen is None:
            return
        import curses

        curses.nocbreak()
        curses.echo()
        curses.endwin()
        self._screen = None
        self._window = None
