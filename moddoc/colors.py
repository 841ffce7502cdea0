"""Terminal colour detection for text output."""

from __future__ import annotations

from typing import Optional, TextIO

from rich.console import Console


def use_color(mode: str = "auto", file: Optional[TextIO] = None) -> bool:
    """Decide whether styled output should be emitted.

    ``always`` and ``never`` are honoured as given; ``auto`` colours only a
    terminal and respects ``NO_COLOR``.
    """
    if mode == "always":
        return True
    if mode == "never":
        return False
    console = Console(file=file)
    return console.is_terminal and not console.no_color


__all__ = ["use_color"]
