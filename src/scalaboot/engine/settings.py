# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Engine-wide settings: registered resolvers, cache manager and base directory."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .resolvers import Resolver

DEFAULT_CACHE_NAME: Final[str] = "default-cache"
DEFAULT_CONFLICT_MANAGER: Final[str] = "default"


def _default_ivy_user_dir() -> Path:
    return Path.home() / ".ivy2"


@dataclass(slots=True)
class RepositoryCacheManager:
    """Cache manager storing downloaded artifacts below ``base_dir``.

    When ``use_origin`` is enabled, artifacts reachable on the local file
    system are used in place instead of being copied into the cache.
    """

    base_dir: Path
    name: str = DEFAULT_CACHE_NAME
    use_origin: bool = False

    def set_use_origin(self, enabled: bool) -> None:
        self.use_origin = enabled


@dataclass(slots=True)
class EngineSettings:
    """Mutable configuration consumed by the resolution engine."""

    base_dir: Path
    default_ivy_user_dir: Path = field(default_factory=_default_ivy_user_dir)
    conflict_manager_name: str = DEFAULT_CONFLICT_MANAGER
    resolvers: dict[str, Resolver] = field(default_factory=dict)
    default_resolver_name: str | None = None
    default_cache_manager: RepositoryCacheManager | None = None

    def add_resolver(self, resolver: Resolver) -> None:
        """Register ``resolver`` under its name.

        Raises:
            ValueError: If a resolver with the same name is already registered.
        """

        if resolver.name in self.resolvers:
            raise ValueError(f"resolver '{resolver.name}' is already registered")
        self.resolvers[resolver.name] = resolver

    def set_default_resolver(self, name: str) -> None:
        """Select the registered resolver ``name`` as the default.

        Raises:
            KeyError: If no resolver named ``name`` is registered.
        """

        if name not in self.resolvers:
            raise KeyError(name)
        self.default_resolver_name = name

    def get_default_resolver(self) -> Resolver:
        """Return the default resolver.

        Raises:
            LookupError: If no default resolver has been selected.
        """

        if self.default_resolver_name is None:
            raise LookupError("no default resolver configured")
        return self.resolvers[self.default_resolver_name]

    def get_default_repository_cache_manager(self) -> RepositoryCacheManager:
        """Return the default cache manager, creating it below the Ivy user directory."""

        if self.default_cache_manager is None:
            self.default_cache_manager = RepositoryCacheManager(base_dir=self.default_ivy_user_dir / "cache")
        return self.default_cache_manager

    def resolve_path(self, value: str | Path) -> Path:
        """Return ``value`` as an absolute path, relative paths anchored at :attr:`base_dir`."""

        path = Path(value).expanduser()
        if path.is_absolute():
            return path
        return self.base_dir / path


__all__ = ["DEFAULT_CACHE_NAME", "DEFAULT_CONFLICT_MANAGER", "EngineSettings", "RepositoryCacheManager"]
