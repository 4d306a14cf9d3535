# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolver configurations understood by the resolution engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias

from ..constants import MAVEN_ARTIFACT_PATTERN, MAVEN_CENTRAL_ROOT


def join_url(base: str, pattern: str) -> str:
    """Join ``base`` and ``pattern`` with exactly the separating slash ``base`` lacks."""

    if base.endswith("/"):
        return f"{base}{pattern}"
    return f"{base}/{pattern}"


@dataclass(slots=True)
class PatternResolver:
    """Resolver locating metadata and artifacts through Ivy patterns."""

    name: str
    ivy_patterns: list[str] = field(default_factory=list)
    artifact_patterns: list[str] = field(default_factory=list)

    def add_ivy_pattern(self, pattern: str) -> None:
        self.ivy_patterns.append(pattern)

    def add_artifact_pattern(self, pattern: str) -> None:
        self.artifact_patterns.append(pattern)


@dataclass(slots=True)
class URLResolver(PatternResolver):
    """Pattern resolver reading from URLs (``http``, ``https`` or ``file``)."""


@dataclass(slots=True)
class FileSystemResolver(PatternResolver):
    """Pattern resolver reading from local paths."""


@dataclass(slots=True)
class IBiblioResolver:
    """Maven-layout resolver rooted at ``root``.

    With ``m2compatible`` enabled the organisation is expanded into nested
    directories (``org.scala-lang`` becomes ``org/scala-lang``), matching the
    Maven 2 repository layout.
    """

    name: str
    root: str = MAVEN_CENTRAL_ROOT
    m2compatible: bool = False
    pattern: str = MAVEN_ARTIFACT_PATTERN

    def artifact_patterns(self) -> tuple[str, ...]:
        """Return the absolute artifact patterns probed by this resolver."""

        return (join_url(self.root, self.pattern),)

    def organisation_path(self, organisation: str) -> str:
        """Return ``organisation`` as it appears in repository paths."""

        if self.m2compatible:
            return organisation.replace(".", "/")
        return organisation


@dataclass(slots=True)
class ChainResolver:
    """Ordered list of resolvers where the first resolver to answer wins."""

    name: str
    resolvers: list[Resolver] = field(default_factory=list)

    def add(self, resolver: Resolver) -> None:
        self.resolvers.append(resolver)

    def resolver_names(self) -> tuple[str, ...]:
        return tuple(resolver.name for resolver in self.resolvers)

    def __len__(self) -> int:
        return len(self.resolvers)


Resolver: TypeAlias = IBiblioResolver | URLResolver | FileSystemResolver | ChainResolver


__all__ = [
    "ChainResolver",
    "FileSystemResolver",
    "IBiblioResolver",
    "PatternResolver",
    "Resolver",
    "URLResolver",
    "join_url",
]
