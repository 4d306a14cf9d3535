# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Scoped engine context shared by the resolve and retrieve calls of one update."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from threading import Lock

from .protocols import MessageLogger
from .settings import EngineSettings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EngineContext:
    """Settings and message sink active for one update call."""

    settings: EngineSettings
    logger: MessageLogger

    def message(self, msg: str, level: int = logging.INFO) -> None:
        self.logger.log(msg, level)


@contextmanager
def engine_context(settings: EngineSettings, logger: MessageLogger, *, lock: Lock) -> Iterator[EngineContext]:
    """Yield an :class:`EngineContext` while holding ``lock``.

    Only one context per lock is active at a time, so callers sharing an
    engine and its settings are serialized.

    Args:
        settings: Engine settings used by the calls made within the context.
        logger: Message sink installed for the duration of the context.
        lock: Lock guarding the engine and its settings.

    Yields:
        EngineContext: Context to pass to resolve and retrieve calls.
    """

    with lock:
        LOGGER.debug("engine context pushed (base dir %s)", settings.base_dir)
        try:
            yield EngineContext(settings=settings, logger=logger)
        finally:
            LOGGER.debug("engine context popped (base dir %s)", settings.base_dir)


__all__ = ["EngineContext", "engine_context"]
