from nicestats.display.renderer import CursesDisplay, StreamDisplay, format_metric, render_lines

__all__ = [
    "CursesDisplay",
    "StreamDisplay",
    "format_metric",
    "render_lines",
]
