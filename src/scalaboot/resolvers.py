# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Translate configured repositories into the engine's resolver chain."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import assert_never

from .constants import (
    CHAIN_RESOLVER_NAME,
    LOCAL_ARTIFACT_PATTERN,
    LOCAL_IVY_NAME,
    LOCAL_IVY_PATTERN,
    MAVEN_CENTRAL_NAME,
    MAVEN_LOCAL_NAME,
    SCALA_TOOLS_RELEASES_NAME,
    SCALA_TOOLS_RELEASES_ROOT,
    SCALA_TOOLS_SNAPSHOTS_NAME,
    SCALA_TOOLS_SNAPSHOTS_ROOT,
)
from .engine.resolvers import ChainResolver, FileSystemResolver, IBiblioResolver, Resolver, URLResolver, join_url
from .engine.settings import EngineSettings, RepositoryCacheManager
from .errors import ConfigurationError
from .models import IvyRepository, MavenRepository, Predefined, PredefinedRepository, Repository


class ResolverAssembler:
    """Build the ``redefined-public`` chain resolver from ordered repositories."""

    def __init__(self, repositories: Sequence[Repository], *, home: Path | None = None) -> None:
        """Initialise the assembler.

        Args:
            repositories: Repositories in resolution priority order.
            home: User home used to locate the Maven local repository; defaults to ``Path.home()``.
        """

        self._repositories = tuple(repositories)
        self._home = home

    @property
    def repositories(self) -> tuple[Repository, ...]:
        return self._repositories

    def assemble(self, settings: EngineSettings) -> ChainResolver:
        """Register the chain resolver on ``settings`` and make it the default.

        Every check happens before ``settings`` is touched, so a configuration
        error leaves it exactly as it was.

        Args:
            settings: Engine settings receiving the chain.

        Returns:
            ChainResolver: The registered chain, one resolver per repository in order.

        Raises:
            ConfigurationError: If no repositories are configured, two repositories
                share a name, or the chain name is already taken.
        """

        if not self._repositories:
            raise ConfigurationError("No repositories defined.")
        chain = ChainResolver(name=CHAIN_RESOLVER_NAME)
        for repository in self._repositories:
            chain.add(self.to_resolver(repository, settings))
        duplicates = sorted(name for name, count in Counter(chain.resolver_names()).items() if count > 1)
        if duplicates:
            raise ConfigurationError(f"Duplicate repository name(s): {', '.join(duplicates)}")
        if chain.name in settings.resolvers:
            raise ConfigurationError(f"A resolver named '{chain.name}' is already registered.")
        on_default_repository_cache_manager(settings, _enable_use_origin)
        settings.add_resolver(chain)
        settings.set_default_resolver(chain.name)
        return chain

    def to_resolver(self, repository: Repository, settings: EngineSettings) -> Resolver:
        """Return the concrete resolver configured for ``repository``."""

        match repository:
            case MavenRepository(id=name, url=url):
                return maven_resolver(name, url)
            case IvyRepository(id=name, url=url, pattern=pattern):
                return url_resolver(name, url, pattern)
            case PredefinedRepository(kind=kind):
                return self._predefined_resolver(kind, settings)
            case _:
                assert_never(repository)

    def _predefined_resolver(self, kind: Predefined, settings: EngineSettings) -> Resolver:
        match kind:
            case Predefined.LOCAL:
                return local_resolver(settings.default_ivy_user_dir)
            case Predefined.MAVEN_LOCAL:
                return maven_local_resolver(self._home or Path.home())
            case Predefined.MAVEN_CENTRAL:
                return maven_main_resolver()
            case Predefined.SCALA_TOOLS_RELEASES:
                return maven_resolver(SCALA_TOOLS_RELEASES_NAME, SCALA_TOOLS_RELEASES_ROOT)
            case Predefined.SCALA_TOOLS_SNAPSHOTS:
                return maven_resolver(SCALA_TOOLS_SNAPSHOTS_NAME, SCALA_TOOLS_SNAPSHOTS_ROOT)
            case _:
                assert_never(kind)


def on_default_repository_cache_manager(
    settings: EngineSettings,
    action: Callable[[RepositoryCacheManager], None],
) -> None:
    """Apply ``action`` to the default cache manager when it is the standard implementation."""

    manager = settings.get_default_repository_cache_manager()
    if isinstance(manager, RepositoryCacheManager):
        action(manager)


def _enable_use_origin(manager: RepositoryCacheManager) -> None:
    manager.set_use_origin(True)


def url_resolver(name: str, base: str, pattern: str) -> URLResolver:
    """Return a URL resolver using ``base/pattern`` for metadata and artifacts."""

    resolver = URLResolver(name=name)
    adjusted = join_url(base, pattern)
    resolver.add_ivy_pattern(adjusted)
    resolver.add_artifact_pattern(adjusted)
    return resolver


def maven_resolver(name: str, root: str) -> IBiblioResolver:
    """Return a Maven 2 compatible resolver rooted at ``root``."""

    resolver = default_maven_resolver(name)
    resolver.root = root
    return resolver


def maven_main_resolver() -> IBiblioResolver:
    """Return the resolver for Maven Central."""

    return default_maven_resolver(MAVEN_CENTRAL_NAME)


def default_maven_resolver(name: str) -> IBiblioResolver:
    return IBiblioResolver(name=name, m2compatible=True)


def maven_local_resolver(home: Path) -> IBiblioResolver:
    return maven_resolver(MAVEN_LOCAL_NAME, f"{(home / '.m2' / 'repository').as_uri()}/")


def local_resolver(ivy_user_directory: Path) -> FileSystemResolver:
    """Return the resolver for the local Ivy repository below ``ivy_user_directory``."""

    local_ivy_root = f"{ivy_user_directory}/local"
    resolver = FileSystemResolver(name=LOCAL_IVY_NAME)
    resolver.add_ivy_pattern(f"{local_ivy_root}/{LOCAL_IVY_PATTERN}")
    resolver.add_artifact_pattern(f"{local_ivy_root}/{LOCAL_ARTIFACT_PATTERN}")
    return resolver


__all__ = [
    "ResolverAssembler",
    "default_maven_resolver",
    "local_resolver",
    "maven_local_resolver",
    "maven_main_resolver",
    "maven_resolver",
    "on_default_repository_cache_manager",
    "url_resolver",
]
