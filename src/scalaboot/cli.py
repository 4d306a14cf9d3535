# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line entry point running boot updates from a launcher file."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated, Final

import typer

from . import __version__
from .config_loader import LauncherConfig, load_launcher_config
from .errors import ConfigurationError
from .logging import fail, info, ok
from .models import UpdateApp, UpdateScala, UpdateTarget
from .update import Update

EXIT_OK: Final[int] = 0
EXIT_UPDATE_FAILED: Final[int] = 1
EXIT_CONFIGURATION_ERROR: Final[int] = 2


class TargetChoice(str, Enum):
    """Targets selectable from the command line."""

    SCALA = "scala"
    APP = "app"
    ALL = "all"


CONFIG_ARGUMENT = Annotated[
    Path,
    typer.Argument(help="Launcher file (TOML) describing the boot.", show_default=False),
]
TARGET_OPTION = Annotated[
    TargetChoice,
    typer.Option("--target", "-t", help="Jars to update: scala, app or all.", case_sensitive=False),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
COLOR_OPTION = Annotated[
    bool,
    typer.Option("--color/--no-color", help="Allow coloured output when attached to a terminal."),
]


@dataclass(slots=True)
class UpdateOptions:
    """Normalised CLI inputs for the update command."""

    config: Path
    target: TargetChoice
    use_emoji: bool
    use_color: bool | None


app = typer.Typer(
    name="scalaboot",
    help="Fetch the Scala and application jars required to boot a build.",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"scalaboot {__version__}")
        raise typer.Exit(code=EXIT_OK)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Fetch the Scala and application jars required to boot a build."""


@app.command("update")
def update_command(
    config: CONFIG_ARGUMENT,
    target: TARGET_OPTION = TargetChoice.ALL,
    emoji: EMOJI_OPTION = False,
    color: COLOR_OPTION = True,
) -> None:
    """Resolve and retrieve the jars declared by a launcher file."""

    options = UpdateOptions(
        config=config,
        target=target,
        use_emoji=emoji,
        use_color=None if color else False,
    )
    _run_update(options)


def _run_update(options: UpdateOptions) -> None:
    """Run the update workflow and exit with the matching status code.

    Args:
        options: Parsed CLI options controlling the update.

    Raises:
        typer.Exit: Always; the code reflects the outcome.
    """

    launcher = _load_launcher(options)
    targets = _select_targets(options.target, launcher, use_emoji=options.use_emoji)
    settings = launcher.settings.model_copy(update={"use_emoji": options.use_emoji, "use_color": options.use_color})
    try:
        update = Update(launcher.update, settings=settings)
        for target in targets:
            info(f"Updating {target.tpe} for Scala {launcher.update.scala_version}", use_emoji=options.use_emoji)
            result = update(target)
            if not result.ok:
                fail(f"Update of {target.tpe} failed ({result.phase.value})", use_emoji=options.use_emoji)
                raise typer.Exit(code=EXIT_UPDATE_FAILED)
            ok(
                f"Updated {target.tpe}: {result.retrieved} artifact(s) retrieved",
                use_emoji=options.use_emoji,
            )
    except ConfigurationError as exc:
        fail(f"Configuration invalid: {exc}", use_emoji=options.use_emoji)
        raise typer.Exit(code=EXIT_CONFIGURATION_ERROR) from exc
    raise typer.Exit(code=EXIT_OK)


def _load_launcher(options: UpdateOptions) -> LauncherConfig:
    try:
        return load_launcher_config(options.config)
    except ConfigurationError as exc:
        fail(f"Configuration invalid: {exc}", use_emoji=options.use_emoji)
        raise typer.Exit(code=EXIT_CONFIGURATION_ERROR) from exc


def _select_targets(choice: TargetChoice, launcher: LauncherConfig, *, use_emoji: bool) -> list[UpdateTarget]:
    """Return the update targets requested by ``choice``.

    ``all`` includes the application only when the launcher declares one.

    Raises:
        typer.Exit: If ``app`` is requested but the launcher has no ``[app]`` table.
    """

    application = launcher.application
    if choice is TargetChoice.SCALA:
        return [UpdateScala()]
    if choice is TargetChoice.APP:
        if application is None:
            fail(f"{launcher.path} declares no [app] table", use_emoji=use_emoji)
            raise typer.Exit(code=EXIT_CONFIGURATION_ERROR)
        return [UpdateApp(application)]
    targets: list[UpdateTarget] = [UpdateScala()]
    if application is not None:
        targets.append(UpdateApp(application))
    return targets


__all__ = [
    "EXIT_CONFIGURATION_ERROR",
    "EXIT_OK",
    "EXIT_UPDATE_FAILED",
    "TargetChoice",
    "UpdateOptions",
    "app",
]
