# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Settings controlling logging and console behaviour of the updater."""

from __future__ import annotations

import logging
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import IGNORED_MESSAGE_PREFIX, UPDATE_LOG_NAME
from .engine.options import LogOptions

LEVEL_NAMES: Final[dict[str, int]] = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "verbose": logging.DEBUG,
    "debug": logging.DEBUG,
}


def parse_level(value: str | int) -> int:
    """Return the ``logging`` level for a level name or number.

    Raises:
        ValueError: If ``value`` is neither a known name nor an integer.
    """

    if isinstance(value, int):
        return value
    normalised = value.strip().lower()
    if normalised in LEVEL_NAMES:
        return LEVEL_NAMES[normalised]
    if normalised.isdigit():
        return int(normalised)
    raise ValueError(f"unknown log level '{value}'")


class BootSettings(BaseModel):
    """Presentation and logging knobs shared by every update of a boot."""

    model_config = ConfigDict(frozen=True)

    log_file_name: str = Field(default=UPDATE_LOG_NAME, min_length=1)
    console_threshold: int = logging.INFO
    ignore_prefixes: tuple[str, ...] = (IGNORED_MESSAGE_PREFIX,)
    resolve_log_option: LogOptions = LogOptions.DOWNLOAD_ONLY
    use_emoji: bool = False
    use_color: bool | None = None

    @field_validator("console_threshold", mode="before")
    @classmethod
    def _coerce_threshold(cls, value: object) -> int:
        if isinstance(value, (str, int)):
            return parse_level(value)
        raise TypeError("console_threshold must be a level name or number")

    @field_validator("ignore_prefixes", mode="before")
    @classmethod
    def _coerce_prefixes(cls, value: object) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        if isinstance(value, (list, tuple, set, frozenset)):
            return tuple(str(entry) for entry in value)
        raise TypeError("ignore_prefixes must be a sequence of strings")


__all__ = ["BootSettings", "LEVEL_NAMES", "parse_level"]
