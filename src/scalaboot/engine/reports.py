# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve reports returned by the resolution engine."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .descriptors import ModuleRevisionId


class ArtifactNotFoundError(LookupError):
    """Raised when no resolver in the chain provides a dependency."""

    def __init__(self, dependency_id: ModuleRevisionId, tried: Sequence[str] = ()) -> None:
        super().__init__("not found")
        self.dependency_id = dependency_id
        self.tried: tuple[str, ...] = tuple(tried)


@dataclass(frozen=True, slots=True)
class ResolvedArtifact:
    """Artifact available on the local file system after resolution."""

    dependency_id: ModuleRevisionId
    name: str
    location: Path
    resolver_name: str
    type: str = "jar"
    ext: str = "jar"
    classifier: str | None = None


@dataclass(frozen=True, slots=True)
class UnresolvedDependency:
    """Dependency no resolver could provide, with the underlying problem if known."""

    id: ModuleRevisionId
    problem: BaseException | None = None

    def problem_message(self) -> str:
        if self.problem is None:
            return "not found"
        return str(self.problem) or type(self.problem).__name__


@dataclass(slots=True)
class ResolveReport:
    """Outcome of resolving one module descriptor."""

    module_id: ModuleRevisionId
    artifacts: list[ResolvedArtifact] = field(default_factory=list)
    unresolved_dependencies: list[UnresolvedDependency] = field(default_factory=list)
    problem_messages: list[str] = field(default_factory=list)

    @property
    def has_error(self) -> bool:
        """Return ``True`` when any dependency is unresolved or a problem was reported."""

        return bool(self.unresolved_dependencies or self.problem_messages)

    def add_unresolved(self, unresolved: UnresolvedDependency) -> None:
        self.unresolved_dependencies.append(unresolved)
        self.problem_messages.append(f"unresolved dependency: {unresolved.id}: {unresolved.problem_message()}")

    def all_problem_messages(self) -> list[str]:
        """Return every problem message in the order it was reported."""

        return list(self.problem_messages)


__all__ = ["ArtifactNotFoundError", "ResolveReport", "ResolvedArtifact", "UnresolvedDependency"]
