# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from scalaboot.console import get_console_manager
from scalaboot.engine import (
    EngineContext,
    EngineSettings,
    ModuleDescriptor,
    ModuleRevisionId,
    ResolveOptions,
    ResolveReport,
    RetrieveOptions,
    UnresolvedDependency,
)


class RecordingEngine:
    """Resolution engine double recording every call it receives."""

    def __init__(self) -> None:
        self.settings: EngineSettings | None = None
        self.factory_calls = 0
        self.calls: list[str] = []
        self.modules: list[ModuleDescriptor] = []
        self.resolve_options: list[ResolveOptions] = []
        self.retrievals: list[tuple[ModuleRevisionId, str, RetrieveOptions]] = []
        self.unresolved: list[UnresolvedDependency] = []
        self.problem_messages: list[str] = []
        self.resolve_error: BaseException | None = None
        self.retrieve_error: BaseException | None = None
        self.retrieved_count = 2

    def bind(self, settings: EngineSettings) -> RecordingEngine:
        self.settings = settings
        self.factory_calls += 1
        return self

    def resolve(self, module: ModuleDescriptor, options: ResolveOptions, *, context: EngineContext) -> ResolveReport:
        self.calls.append("resolve")
        self.modules.append(module)
        self.resolve_options.append(options)
        context.message(f"resolving {module.revision_id}", logging.DEBUG)
        if self.resolve_error is not None:
            raise self.resolve_error
        return ResolveReport(
            module_id=module.revision_id,
            unresolved_dependencies=list(self.unresolved),
            problem_messages=list(self.problem_messages),
        )

    def retrieve(
        self,
        revision_id: ModuleRevisionId,
        pattern: str,
        options: RetrieveOptions,
        *,
        context: EngineContext,
    ) -> int:
        self.calls.append("retrieve")
        self.retrievals.append((revision_id, pattern, options))
        context.message(f"retrieving {revision_id}", logging.DEBUG)
        if self.retrieve_error is not None:
            raise self.retrieve_error
        return self.retrieved_count


@pytest.fixture
def recording_engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture(autouse=True)
def _fresh_consoles() -> Iterator[None]:
    """Drop cached rich consoles so each test writes to its own captured stdout."""

    get_console_manager().clear()
    yield
    get_console_manager().clear()


@pytest.fixture
def maven_repo(tmp_path: Path) -> Path:
    root = tmp_path / "maven-repo"
    root.mkdir()
    return root


@pytest.fixture
def publish_jar(maven_repo: Path) -> Callable[..., Path]:
    """Return a helper writing a jar into the Maven-layout repository fixture."""

    def _publish(organisation: str, name: str, revision: str, content: bytes | None = None) -> Path:
        directory = maven_repo.joinpath(*organisation.split("."), name, revision)
        directory.mkdir(parents=True, exist_ok=True)
        jar = directory / f"{name}-{revision}.jar"
        jar.write_bytes(content if content is not None else f"{organisation}:{name}:{revision}".encode())
        return jar

    return _publish
