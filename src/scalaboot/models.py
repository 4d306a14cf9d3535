# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models describing update targets, applications and repositories."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

VersionSource: TypeAlias = Callable[[], str]


@dataclass(frozen=True, slots=True)
class AppId:
    """Module coordinates of an application revision."""

    group_id: str
    name: str
    version: str


class Application(BaseModel):
    """Application launched through the boot loader.

    ``version`` is either an explicit revision or a zero-argument callable that
    is evaluated each time the revision is needed, which lets callers defer
    reading it from a project definition until the update actually runs.
    """

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    version: str | VersionSource
    cross_versioned: bool = False

    def get_version(self) -> str:
        """Return the application revision, evaluating lazy sources.

        Returns:
            str: Concrete revision string.
        """

        if callable(self.version):
            return self.version()
        return self.version

    def resolved_name(self, scala_version: str) -> str:
        """Return the artifact name, suffixed with ``scala_version`` when cross-versioned.

        Args:
            scala_version: Scala version the application was built against.

        Returns:
            str: Name used for the dependency coordinates.
        """

        if self.cross_versioned:
            return f"{self.name}_{scala_version}"
        return self.name

    def to_id(self) -> AppId:
        """Return the unsuffixed module coordinates of the application."""

        return AppId(group_id=self.group_id, name=self.name, version=self.get_version())


@dataclass(frozen=True, slots=True)
class UpdateScala:
    """Target requesting the Scala compiler and library jars."""

    tpe: ClassVar[str] = "scala"


@dataclass(frozen=True, slots=True)
class UpdateApp:
    """Target requesting the jars of a named application."""

    app: Application
    tpe: ClassVar[str] = "app"


UpdateTarget: TypeAlias = UpdateScala | UpdateApp


class Predefined(str, Enum):
    """Well-known repositories with a fixed resolver configuration."""

    LOCAL = "local"
    MAVEN_LOCAL = "maven-local"
    MAVEN_CENTRAL = "maven-central"
    SCALA_TOOLS_RELEASES = "scala-tools-releases"
    SCALA_TOOLS_SNAPSHOTS = "scala-tools-snapshots"

    @classmethod
    def from_str(cls, value: str) -> Predefined:
        """Return the member matching ``value`` case-insensitively.

        Raises:
            ValueError: If ``value`` names no predefined repository.
        """

        normalised = value.strip().lower().replace("_", "-")
        for member in cls:
            if member.value == normalised:
                return member
        raise ValueError(value)


class MavenRepository(BaseModel):
    """Maven 2 layout repository rooted at ``url``."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    url: str = Field(min_length=1)


class IvyRepository(BaseModel):
    """Repository addressed through an Ivy artifact pattern below ``url``."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    url: str = Field(min_length=1)
    pattern: str = Field(min_length=1)


class PredefinedRepository(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Predefined


Repository: TypeAlias = MavenRepository | IvyRepository | PredefinedRepository


class UpdateConfiguration(BaseModel):
    """Inputs shared by every update performed during one boot."""

    model_config = ConfigDict(frozen=True)

    boot_directory: Path
    scala_version: str = Field(min_length=1)
    repositories: tuple[Repository, ...] = Field(default_factory=tuple)

    @field_validator("repositories", mode="before")
    @classmethod
    def _coerce_repositories(cls, value: object) -> tuple[object, ...]:
        if value is None:
            return ()
        if isinstance(value, (list, tuple)):
            return tuple(value)
        raise TypeError("UpdateConfiguration.repositories must be a sequence of repositories")


__all__ = [
    "AppId",
    "Application",
    "IvyRepository",
    "MavenRepository",
    "Predefined",
    "PredefinedRepository",
    "Repository",
    "UpdateApp",
    "UpdateConfiguration",
    "UpdateScala",
    "UpdateTarget",
    "VersionSource",
]
