# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Consoles used for update progress, engine echo and failure reports."""

from __future__ import annotations

import sys
from functools import cache
from typing import NamedTuple

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when the current ``sys.stdout`` is a terminal."""

    isatty = getattr(sys.stdout, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # Closed stream, e.g. after a launcher swapped stdout out.
        return False


def resolve_color(use_color: bool | None) -> bool:
    """Return whether to colour output; ``None`` means "only on a terminal"."""

    return detect_tty() if use_color is None else use_color


class ConsoleKey(NamedTuple):
    color: bool
    emoji: bool
    tty: bool


class RichConsoleManager:
    """Hand out the consoles that echo engine messages and boot status lines.

    Contract:

    * Consoles never bind an output file. Each print goes to whatever
      ``sys.stdout`` is at that moment, so a bootstrap that redirects stdout
      (or a test capturing it) sees every update line.
    * Engine lines are printed verbatim: no markup parsing, no highlighting,
      and no wrapping of long artifact URLs or log paths.
    * Colour is emitted only when requested *and* stdout is a terminal; the
      terminal state is part of the cache key because it can change between
      calls when stdout is swapped.
    """

    def __init__(self) -> None:
        self._consoles: dict[ConsoleKey, Console] = {}

    def get(self, *, color: bool, emoji: bool) -> Console:
        """Return the console for ``color`` and ``emoji`` under the current stdout.

        Args:
            color: ``True`` when ANSI colour output is wanted.
            emoji: ``True`` when emoji glyphs may be rendered.

        Returns:
            Console: Cached console for the resulting key.
        """

        key = ConsoleKey(color=color, emoji=emoji, tty=detect_tty())
        console = self._consoles.get(key)
        if console is None:
            console = self._consoles[key] = _build_console(key)
        return console

    def clear(self) -> None:
        """Drop cached consoles, forcing fresh ones on the next lookup."""

        self._consoles.clear()


def _build_console(key: ConsoleKey) -> Console:
    colored = key.color and key.tty
    return Console(
        color_system="auto" if colored else None,
        force_terminal=key.tty,
        no_color=not colored,
        emoji=key.emoji,
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


@cache
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide :class:`RichConsoleManager` instance."""

    return RichConsoleManager()


__all__ = ["ConsoleKey", "RichConsoleManager", "detect_tty", "get_console_manager", "resolve_color"]
