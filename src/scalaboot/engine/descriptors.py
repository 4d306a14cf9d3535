# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Module and dependency descriptors handed to the resolution engine."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Literal

Visibility = Literal["public", "private"]


@dataclass(frozen=True, slots=True)
class ModuleRevisionId:
    """Coordinates of one module revision."""

    organisation: str
    name: str
    revision: str

    @classmethod
    def new_instance(cls, organisation: str, name: str, revision: str) -> ModuleRevisionId:
        return cls(organisation=organisation, name=name, revision=revision)

    def __str__(self) -> str:
        return f"{self.organisation}#{self.name};{self.revision}"


@dataclass(frozen=True, slots=True)
class Configuration:
    """Named configuration declared by a module."""

    name: str
    visibility: Visibility = "public"


@dataclass(slots=True)
class DependencyDescriptor:
    """Dependency of a module on another module revision.

    ``configuration_mappings`` maps each master configuration to the dependency
    configuration expressions it pulls in, for example
    ``{"default": ["runtime(default)"]}``.
    """

    parent: ModuleRevisionId
    dependency_id: ModuleRevisionId
    force: bool = False
    changing: bool = False
    transitive: bool = True
    configuration_mappings: dict[str, list[str]] = field(default_factory=dict)

    def add_dependency_configuration(self, master: str, dependency_conf: str) -> None:
        """Map ``master`` configuration onto ``dependency_conf`` of the dependency."""

        self.configuration_mappings.setdefault(master, []).append(dependency_conf)

    def module_configurations(self) -> tuple[str, ...]:
        """Return the master configurations this dependency is attached to."""

        return tuple(self.configuration_mappings)

    def dependency_configurations(self, master: str) -> tuple[str, ...]:
        """Return the dependency configuration expressions mapped from ``master``."""

        return tuple(self.configuration_mappings.get(master, ()))


@dataclass(slots=True)
class ModuleDescriptor:
    """In-memory module declaring configurations and dependencies."""

    revision_id: ModuleRevisionId
    status: str = "release"
    last_modified: int = field(default_factory=lambda: int(time.time() * 1000))
    configurations: list[Configuration] = field(default_factory=list)
    dependencies: list[DependencyDescriptor] = field(default_factory=list)

    def add_configuration(self, configuration: Configuration) -> None:
        if any(existing.name == configuration.name for existing in self.configurations):
            raise ValueError(f"configuration '{configuration.name}' already declared on {self.revision_id}")
        self.configurations.append(configuration)

    def add_dependency(self, dependency: DependencyDescriptor) -> None:
        self.dependencies.append(dependency)

    def configuration_names(self) -> tuple[str, ...]:
        return tuple(configuration.name for configuration in self.configurations)


__all__ = [
    "Configuration",
    "DependencyDescriptor",
    "ModuleDescriptor",
    "ModuleRevisionId",
    "Visibility",
]
