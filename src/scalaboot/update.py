# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ensure the Scala and application jars exist for the configured versions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from threading import Lock
from typing import Final, TextIO

from .config import BootSettings
from .constants import CONFLICT_MANAGER_NAME, base_directory_name
from .diagnostics import DiagnosticLogger
from .engine.context import EngineContext, engine_context
from .engine.direct import DirectEngine
from .engine.options import ResolveOptions, RetrieveOptions
from .engine.protocols import EngineFactory, ResolutionEngine
from .engine.reports import ResolveReport
from .engine.settings import EngineSettings
from .errors import BootError, ResolutionFailure, UnexpectedFailure
from .logging import echo, fail
from .models import UpdateConfiguration, UpdateTarget
from .resolvers import ResolverAssembler
from .translator import translate

LOGGER = logging.getLogger(__name__)

RESOLUTION_FAILURE_MESSAGE: Final[str] = "Error retrieving required libraries"


class UpdatePhase(str, Enum):
    """Lifecycle of one update call."""

    IDLE = "idle"
    LOGGER_INSTALLED = "logger-installed"
    TRANSLATING = "translating"
    RESOLVING = "resolving"
    RESOLVE_FAILED = "resolve-failed"
    RETRIEVING = "retrieving"
    RETRIEVE_FAILED = "retrieve-failed"
    DONE = "done"
    FAILED = "failed"
    LOGGER_TORN_DOWN = "logger-torn-down"


_FAILURE_PHASES: Final[dict[UpdatePhase, UpdatePhase]] = {
    UpdatePhase.LOGGER_INSTALLED: UpdatePhase.FAILED,
    UpdatePhase.TRANSLATING: UpdatePhase.FAILED,
    UpdatePhase.RESOLVING: UpdatePhase.RESOLVE_FAILED,
    UpdatePhase.RETRIEVING: UpdatePhase.RETRIEVE_FAILED,
}


@dataclass(frozen=True, slots=True)
class UpdateResult:
    """Terminal state reached by one update call."""

    target: UpdateTarget
    phase: UpdatePhase
    log_file: Path
    error: BootError | None = None
    retrieved: int = 0
    problems: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.phase is UpdatePhase.DONE

    def raise_for_error(self) -> None:
        """Raise the recorded error when the update did not complete."""

        if self.error is not None:
            raise self.error


class Update:
    """Resolve and retrieve the jars required by an :class:`UpdateTarget`.

    The engine settings and engine handle are built once, on the first call
    or an explicit :meth:`open`, and reused by later calls. Calls on one
    instance are serialized. The update log is truncated when the instance is
    created and appended to by every call. A log file that cannot be written
    is reported on the console and never fails the update.
    """

    def __init__(
        self,
        config: UpdateConfiguration,
        *,
        settings: BootSettings | None = None,
        engine_factory: EngineFactory = DirectEngine,
        ivy_home: Path | None = None,
        home: Path | None = None,
    ) -> None:
        """Initialise the updater and create the boot directory.

        Args:
            config: Boot directory, Scala version and repositories.
            settings: Logging and console settings; defaults to :class:`BootSettings`.
            engine_factory: Callable building the resolution engine from the engine settings.
            ivy_home: Ivy user directory holding the local repository and cache.
            home: User home used to locate the Maven local repository.
        """

        self._config = config
        self._settings = settings or BootSettings()
        self._engine_factory = engine_factory
        self._ivy_home = ivy_home
        self._assembler = ResolverAssembler(config.repositories, home=home)
        self._open_lock = Lock()
        self._context_lock = Lock()
        self._engine_settings: EngineSettings | None = None
        self._engine: ResolutionEngine | None = None
        config.boot_directory.mkdir(parents=True, exist_ok=True)
        try:
            self.log_file.write_text("", encoding="utf-8")
        except OSError as exc:
            self._report_write_error(exc)

    @property
    def config(self) -> UpdateConfiguration:
        return self._config

    @property
    def log_file(self) -> Path:
        return self._config.boot_directory / self._settings.log_file_name

    @property
    def engine_settings(self) -> EngineSettings | None:
        """Return the engine settings once :meth:`open` has succeeded."""

        return self._engine_settings

    def open(self) -> ResolutionEngine:
        """Build the engine settings and engine handle if not done yet.

        Returns:
            ResolutionEngine: The memoized engine handle.

        Raises:
            ConfigurationError: If the repositories cannot form a resolver chain.
        """

        with self._open_lock:
            if self._engine is None:
                settings = self._new_engine_settings()
                self._assembler.assemble(settings)
                settings.conflict_manager_name = CONFLICT_MANAGER_NAME
                self._engine_settings = settings
                self._engine = self._engine_factory(settings)
                LOGGER.debug("engine ready with resolvers %s", list(settings.resolvers))
            return self._engine

    def __call__(self, target: UpdateTarget) -> UpdateResult:
        return self.apply(target)

    def apply(self, target: UpdateTarget) -> UpdateResult:
        """Run resolve then retrieve for ``target``.

        Resolution problems and unexpected exceptions are logged, reported on
        the console and returned as a failed :class:`UpdateResult`.

        Args:
            target: Jars to make available below the boot directory.

        Returns:
            UpdateResult: Terminal phase and error, if any.

        Raises:
            ConfigurationError: If the repositories cannot form a resolver chain.
        """

        engine = self.open()
        settings = self._engine_settings
        if settings is None:  # pragma: no cover - set by open()
            raise RuntimeError("engine settings unavailable after open()")
        logger = DiagnosticLogger(
            self._open_log(),
            threshold=self._settings.console_threshold,
            ignore_prefixes=self._settings.ignore_prefixes,
            use_color=self._settings.use_color,
            on_write_error=self._report_write_error,
        )
        try:
            with engine_context(settings, logger, lock=self._context_lock) as context:
                LOGGER.debug("update %s: %s", target.tpe, UpdatePhase.LOGGER_INSTALLED.value)
                result = self._update(target, engine, context, logger)
        finally:
            logger.close()
        LOGGER.debug("update %s: %s (%s)", target.tpe, UpdatePhase.LOGGER_TORN_DOWN.value, result.phase.value)
        return result

    def _update(
        self,
        target: UpdateTarget,
        engine: ResolutionEngine,
        context: EngineContext,
        logger: DiagnosticLogger,
    ) -> UpdateResult:
        phase = UpdatePhase.LOGGER_INSTALLED
        try:
            phase = UpdatePhase.TRANSLATING
            translated = translate(target, self._config.scala_version)
            module = translated.module

            phase = UpdatePhase.RESOLVING
            report = engine.resolve(module, ResolveOptions(log=self._settings.resolve_log_option), context=context)
            if report.has_error:
                failure = self._resolution_failure(report, logger)
                return self._result(target, UpdatePhase.RESOLVE_FAILED, error=failure, problems=failure.problems)

            phase = UpdatePhase.RETRIEVING
            pattern = f"{base_directory_name(self._config.scala_version)}/{translated.retrieve_pattern}"
            retrieved = engine.retrieve(module.revision_id, pattern, RetrieveOptions(), context=context)
            return self._result(target, UpdatePhase.DONE, retrieved=retrieved)
        except Exception as exc:  # noqa: BLE001 - failures are reported, never propagated
            failure = UnexpectedFailure(exc)
            logger.log_exception(exc)
            logger.write(f"{failure.summary}\n")
            fail(failure.summary, use_emoji=self._settings.use_emoji, use_color=self._settings.use_color)
            echo(f"  (see {self.log_file} for complete log)", use_color=self._settings.use_color)
            return self._result(target, _FAILURE_PHASES.get(phase, UpdatePhase.FAILED), error=failure)

    def _resolution_failure(self, report: ResolveReport, logger: DiagnosticLogger) -> ResolutionFailure:
        for unresolved in report.unresolved_dependencies:
            if unresolved.problem is not None:
                logger.log_exception(unresolved.problem)
        problems = distinct_messages(report.all_problem_messages())
        echo("\n".join(problems), style="red", use_color=self._settings.use_color)
        logger.write(f"{RESOLUTION_FAILURE_MESSAGE}\n")
        return ResolutionFailure(RESOLUTION_FAILURE_MESSAGE, problems)

    def _open_log(self) -> TextIO | None:
        try:
            return self.log_file.open("a", encoding="utf-8")
        except OSError as exc:
            self._report_write_error(exc)
            return None

    def _report_write_error(self, exc: OSError) -> None:
        fail(f"Error writing to update log file: {exc}", use_emoji=self._settings.use_emoji)

    def _result(self, target: UpdateTarget, phase: UpdatePhase, **kwargs: object) -> UpdateResult:
        LOGGER.debug("update %s: %s", target.tpe, phase.value)
        return UpdateResult(target=target, phase=phase, log_file=self.log_file, **kwargs)  # type: ignore[arg-type]

    def _new_engine_settings(self) -> EngineSettings:
        settings = EngineSettings(base_dir=self._config.boot_directory)
        if self._ivy_home is not None:
            settings.default_ivy_user_dir = self._ivy_home
        return settings


def distinct_messages(messages: list[str]) -> tuple[str, ...]:
    """Return ``messages`` without duplicates, keeping first occurrences in order."""

    return tuple(dict.fromkeys(messages))


__all__ = [
    "RESOLUTION_FAILURE_MESSAGE",
    "Update",
    "UpdatePhase",
    "UpdateResult",
    "distinct_messages",
]
