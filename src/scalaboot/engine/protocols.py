# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Protocols describing the resolution engine boundary."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

from .descriptors import ModuleDescriptor, ModuleRevisionId
from .options import ResolveOptions, RetrieveOptions
from .reports import ResolveReport
from .settings import EngineSettings

if TYPE_CHECKING:
    from .context import EngineContext


@runtime_checkable
class MessageLogger(Protocol):
    """Sink receiving engine messages tagged with a ``logging`` level."""

    def log(self, msg: str | None, level: int) -> None:
        """Record ``msg`` at ``level``."""

    def rawlog(self, msg: str | None, level: int) -> None:
        """Record ``msg`` at ``level`` without engine-side formatting."""


@runtime_checkable
class ResolutionEngine(Protocol):
    """Engine resolving module descriptors and retrieving their artifacts."""

    def resolve(
        self,
        module: ModuleDescriptor,
        options: ResolveOptions,
        *,
        context: EngineContext,
    ) -> ResolveReport:
        """Resolve every dependency declared by ``module``.

        Args:
            module: Module whose dependencies should be resolved.
            options: Resolve options, including log verbosity.
            context: Active engine context carrying settings and logger.

        Returns:
            ResolveReport: Report exposing artifacts and unresolved dependencies.
        """

    def retrieve(
        self,
        revision_id: ModuleRevisionId,
        pattern: str,
        options: RetrieveOptions,
        *,
        context: EngineContext,
    ) -> int:
        """Copy the artifacts resolved for ``revision_id`` to ``pattern``.

        Args:
            revision_id: Identifier of a module previously resolved.
            pattern: Destination pattern, relative paths anchored at the settings base directory.
            options: Retrieve options.
            context: Active engine context carrying settings and logger.

        Returns:
            int: Number of artifacts copied.
        """


EngineFactory: TypeAlias = Callable[[EngineSettings], ResolutionEngine]


__all__ = ["EngineFactory", "MessageLogger", "ResolutionEngine"]
