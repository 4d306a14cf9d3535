# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Message sink recording every engine message and echoing the relevant ones."""

from __future__ import annotations

import logging
import traceback
from collections.abc import Callable, Iterable
from typing import TextIO

from .constants import IGNORED_MESSAGE_PREFIX
from .logging import echo

EchoFn = Callable[[str, int], None]
WriteErrorFn = Callable[[OSError], None]


class DiagnosticLogger:
    """Engine message logger backed by the update log file.

    Every message is written to the log file. Messages at or above
    ``threshold`` are also echoed to the console unless they start with one of
    ``ignore_prefixes``. The default prefix covers warnings about classes
    "impossible to define", which the shrunk launcher jars trigger routinely.

    Writing to the log file never raises. The first ``OSError`` is handed to
    ``on_write_error`` and later file writes are skipped; console echo keeps
    working. A ``None`` writer records nothing to file.
    """

    def __init__(
        self,
        writer: TextIO | None,
        *,
        threshold: int = logging.INFO,
        ignore_prefixes: Iterable[str] = (IGNORED_MESSAGE_PREFIX,),
        use_color: bool | None = None,
        echo_fn: EchoFn | None = None,
        on_write_error: WriteErrorFn | None = None,
    ) -> None:
        """Initialise the logger.

        Args:
            writer: Open text stream of the update log file, or ``None`` when it could not be opened.
            threshold: Minimum ``logging`` level echoed to the console.
            ignore_prefixes: Message prefixes never echoed to the console.
            use_color: Optional explicit colour flag for console output.
            echo_fn: Replacement for the console echo, mainly for embedding.
            on_write_error: Called once with the first error raised by the log file.
        """

        self._writer = writer
        self._threshold = threshold
        self._ignore_prefixes = tuple(ignore_prefixes)
        self._use_color = use_color
        self._echo = echo_fn or self._console_echo
        self._on_write_error = on_write_error
        self._write_error: OSError | None = None

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def ignore_prefixes(self) -> tuple[str, ...]:
        return self._ignore_prefixes

    @property
    def write_error(self) -> OSError | None:
        """Return the error that disabled the log file, if any."""

        return self._write_error

    def log(self, msg: str | None, level: int) -> None:
        """Write ``msg`` to the log file and echo it when it passes the filter."""

        self.write(f"{'' if msg is None else msg}\n")
        if msg is not None and self.should_echo(msg, level):
            self._echo(msg, level)

    def rawlog(self, msg: str | None, level: int) -> None:
        self.log(msg, level)

    def should_echo(self, msg: str, level: int) -> bool:
        """Return ``True`` when ``msg`` at ``level`` belongs on the console."""

        if level < self._threshold:
            return False
        return not any(msg.startswith(prefix) for prefix in self._ignore_prefixes)

    def error(self, msg: str) -> None:
        self.log(msg, logging.ERROR)

    def warn(self, msg: str) -> None:
        self.log(msg, logging.WARNING)

    def info(self, msg: str) -> None:
        self.log(msg, logging.INFO)

    def verbose(self, msg: str) -> None:
        self.log(msg, logging.DEBUG)

    def log_exception(self, exc: BaseException) -> None:
        """Write the full traceback of ``exc`` to the log file, bypassing the console filter."""

        self.write("".join(traceback.format_exception(exc)))

    def write(self, text: str) -> None:
        """Append ``text`` verbatim to the log file."""

        if self._writer is None or self._write_error is not None:
            return
        try:
            self._writer.write(text)
        except OSError as exc:
            self._disable(exc)

    def close(self) -> None:
        """Flush and close the log file."""

        if self._writer is None:
            return
        writer, self._writer = self._writer, None
        try:
            writer.close()
        except OSError as exc:
            if self._write_error is None:
                self._disable(exc)

    def _disable(self, exc: OSError) -> None:
        self._write_error = exc
        if self._on_write_error is not None:
            self._on_write_error(exc)

    def _console_echo(self, msg: str, level: int) -> None:
        if level >= logging.ERROR:
            style: str | None = "red"
        elif level >= logging.WARNING:
            style = "yellow"
        else:
            style = None
        echo(msg, style=style, use_color=self._use_color)


__all__ = ["DiagnosticLogger", "EchoFn", "WriteErrorFn"]
