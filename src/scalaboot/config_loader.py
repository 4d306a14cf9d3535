# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Load launcher files describing the Scala version, application and repositories."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from .config import BootSettings
from .errors import ConfigurationError
from .models import (
    Application,
    IvyRepository,
    MavenRepository,
    Predefined,
    PredefinedRepository,
    Repository,
    UpdateConfiguration,
)

DEFAULT_BOOT_DIRECTORY: Final[str] = "project/boot"
DEFAULT_REPOSITORIES: Final[tuple[Predefined, ...]] = (
    Predefined.LOCAL,
    Predefined.MAVEN_LOCAL,
    Predefined.MAVEN_CENTRAL,
)


@dataclass(frozen=True, slots=True)
class LauncherConfig:
    """Everything a launcher file declares."""

    path: Path
    update: UpdateConfiguration
    settings: BootSettings
    application: Application | None = None


def load_launcher_config(path: Path) -> LauncherConfig:
    """Parse the launcher file at ``path``.

    Args:
        path: TOML launcher file.

    Returns:
        LauncherConfig: Update configuration, boot settings and optional application.

    Raises:
        ConfigurationError: If the file is missing, is not valid TOML or declares
            unusable values.
    """

    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Launcher file {path} does not exist") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Launcher file {path} is not valid TOML: {exc}") from exc
    return parse_launcher_config(data, base_dir=path.parent, path=path)


def parse_launcher_config(data: Mapping[str, Any], *, base_dir: Path, path: Path | None = None) -> LauncherConfig:
    """Build a :class:`LauncherConfig` from an already decoded document."""

    source = path or base_dir
    scala = _table(data, "scala")
    version = scala.get("version")
    if not isinstance(version, str) or not version.strip():
        raise ConfigurationError(f"{source}: [scala] version must be a non-empty string")
    boot = _table(data, "boot")
    directory = boot.get("directory", DEFAULT_BOOT_DIRECTORY)
    if not isinstance(directory, str) or not directory:
        raise ConfigurationError(f"{source}: [boot] directory must be a non-empty string")
    boot_directory = Path(directory).expanduser()
    if not boot_directory.is_absolute():
        boot_directory = base_dir / boot_directory

    repositories_table = _table(data, "repositories")
    entries = repositories_table.get("entries", [member.value for member in DEFAULT_REPOSITORIES])
    if not isinstance(entries, list):
        raise ConfigurationError(f"{source}: [repositories] entries must be an array")
    repositories = tuple(_repository(entry, source) for entry in entries)

    try:
        update = UpdateConfiguration(
            boot_directory=boot_directory,
            scala_version=version.strip(),
            repositories=repositories,
        )
        settings = _boot_settings(_table(data, "log"))
    except (ValidationError, ValueError, TypeError) as exc:
        raise ConfigurationError(f"{source}: {exc}") from exc
    application = _application(data.get("app"), source)
    return LauncherConfig(
        path=source,
        update=update,
        settings=settings,
        application=application,
    )


def _table(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"[{key}] must be a table")
    return value


def _repository(entry: object, source: Path) -> Repository:
    if isinstance(entry, str):
        try:
            return PredefinedRepository(kind=Predefined.from_str(entry))
        except ValueError as exc:
            known = ", ".join(member.value for member in Predefined)
            raise ConfigurationError(f"{source}: unknown repository '{entry}' (known: {known})") from exc
    if isinstance(entry, Mapping):
        try:
            if "pattern" in entry:
                return IvyRepository(id=entry.get("id"), url=entry.get("url"), pattern=entry["pattern"])
            return MavenRepository(id=entry.get("id"), url=entry.get("url"))
        except ValidationError as exc:
            raise ConfigurationError(f"{source}: invalid repository {dict(entry)!r}: {exc}") from exc
    raise ConfigurationError(f"{source}: unsupported repository entry {entry!r}")


def _application(raw: object, source: Path) -> Application | None:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"{source}: [app] must be a table")
    try:
        return Application(
            group_id=raw.get("org"),
            name=raw.get("name"),
            version=raw.get("version"),
            cross_versioned=raw.get("cross-versioned", False),
        )
    except ValidationError as exc:
        raise ConfigurationError(f"{source}: invalid [app] table: {exc}") from exc


def _boot_settings(log: Mapping[str, Any]) -> BootSettings:
    values: dict[str, Any] = {}
    if "level" in log:
        values["console_threshold"] = log["level"]
    if "ignore-prefixes" in log:
        values["ignore_prefixes"] = log["ignore-prefixes"]
    if "file" in log:
        values["log_file_name"] = log["file"]
    return BootSettings(**values)


__all__ = [
    "DEFAULT_BOOT_DIRECTORY",
    "DEFAULT_REPOSITORIES",
    "LauncherConfig",
    "load_launcher_config",
    "parse_launcher_config",
]
