# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Options controlling resolve and retrieve calls."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LogOptions(str, Enum):
    """Verbosity requested from the engine for one call."""

    DEFAULT = "default"
    DOWNLOAD_ONLY = "download-only"
    QUIET = "quiet"


@dataclass(frozen=True, slots=True)
class ResolveOptions:
    """Options for :meth:`ResolutionEngine.resolve`."""

    log: LogOptions = LogOptions.DEFAULT


@dataclass(frozen=True, slots=True)
class RetrieveOptions:
    """Options for :meth:`ResolutionEngine.retrieve`."""

    log: LogOptions = LogOptions.DEFAULT
    overwrite: bool = False


__all__ = ["LogOptions", "ResolveOptions", "RetrieveOptions"]
