# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy surfaced by the bootstrap updater."""

from __future__ import annotations

from collections.abc import Iterable


class BootError(Exception):
    """Base class for failures reported by the bootstrap updater."""


class ConfigurationError(BootError):
    """Raised when the update configuration is unusable.

    Configuration errors are detected before any log or network activity and
    always propagate to the caller.
    """


class ResolutionFailure(BootError):
    """Raised when one or more dependencies could not be resolved."""

    def __init__(self, message: str, problems: Iterable[str] = ()) -> None:
        """Initialise the failure with the distinct problem messages.

        Args:
            message: Summary shown to the user.
            problems: Distinct problem messages reported by the engine.
        """

        super().__init__(message)
        self.problems: tuple[str, ...] = tuple(problems)


class UnexpectedFailure(BootError):
    """Wrap any other exception raised while resolving or retrieving."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause) or type(cause).__name__)
        self.__cause__ = cause

    @property
    def summary(self) -> str:
        """Return the one-line description of the wrapped exception."""

        cause = self.__cause__
        if cause is None:  # pragma: no cover - always set by __init__
            return str(self)
        detail = str(cause)
        name = f"{type(cause).__module__}.{type(cause).__qualname__}"
        return f"{name}: {detail}" if detail else name


__all__ = [
    "BootError",
    "ConfigurationError",
    "ResolutionFailure",
    "UnexpectedFailure",
]
