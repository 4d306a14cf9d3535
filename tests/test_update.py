# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the boot update orchestrator."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from scalaboot.config import BootSettings
from scalaboot.engine import LogOptions, ModuleRevisionId, UnresolvedDependency
from scalaboot.errors import ConfigurationError, ResolutionFailure, UnexpectedFailure
from scalaboot.models import (
    Application,
    MavenRepository,
    Predefined,
    PredefinedRepository,
    UpdateApp,
    UpdateConfiguration,
    UpdateScala,
)
from scalaboot.update import Update, UpdatePhase, distinct_messages


def _config(boot: Path, version: str = "2.8.1", repositories=None) -> UpdateConfiguration:  # noqa: ANN001
    if repositories is None:
        repositories = [PredefinedRepository(kind=Predefined.MAVEN_CENTRAL)]
    return UpdateConfiguration(boot_directory=boot, scala_version=version, repositories=repositories)


def test_scala_update_resolves_compiler_and_library(tmp_path: Path, recording_engine) -> None:
    boot = tmp_path / "boot"
    update = Update(_config(boot), engine_factory=recording_engine.bind)

    result = update(UpdateScala())

    assert result.ok
    assert result.phase is UpdatePhase.DONE
    assert result.retrieved == 2
    assert recording_engine.calls == ["resolve", "retrieve"]
    module = recording_engine.modules[0]
    assert str(module.revision_id) == "org.scala-tools.sbt#boot-scala;1.0"
    assert [str(dep.dependency_id) for dep in module.dependencies] == [
        "org.scala-lang#scala-compiler;2.8.1",
        "org.scala-lang#scala-library;2.8.1",
    ]
    revision_id, pattern, _ = recording_engine.retrievals[0]
    assert revision_id == module.revision_id
    assert pattern == "2.8.1/lib/[artifact].[ext]"
    assert recording_engine.resolve_options[0].log is LogOptions.DOWNLOAD_ONLY


def test_open_assembles_settings_once(tmp_path: Path, recording_engine) -> None:
    boot = tmp_path / "boot"
    update = Update(_config(boot), engine_factory=recording_engine.bind)

    assert update.engine_settings is None
    update.open()
    update(UpdateScala())
    update(UpdateScala())

    settings = update.engine_settings
    assert settings is not None
    assert recording_engine.factory_calls == 1
    assert settings.default_resolver_name == "redefined-public"
    assert settings.get_default_resolver().resolver_names() == ("Maven Central",)
    assert settings.conflict_manager_name == "latest-revision"
    assert settings.base_dir == boot
    assert settings.get_default_repository_cache_manager().use_origin is True


def test_empty_repositories_raise_before_logging(tmp_path: Path, recording_engine) -> None:
    boot = tmp_path / "boot"
    update = Update(_config(boot, repositories=[]), engine_factory=recording_engine.bind)

    with pytest.raises(ConfigurationError, match="No repositories defined."):
        update(UpdateScala())

    assert recording_engine.calls == []
    assert recording_engine.factory_calls == 0
    assert (boot / "update.log").read_text(encoding="utf-8") == ""


def test_duplicate_repository_names_raise(tmp_path: Path, recording_engine) -> None:
    repositories = [
        MavenRepository(id="corp", url="https://one.example.com/maven2"),
        MavenRepository(id="corp", url="https://two.example.com/maven2"),
    ]
    update = Update(_config(tmp_path / "boot", repositories=repositories), engine_factory=recording_engine.bind)

    with pytest.raises(ConfigurationError, match="corp"):
        update.open()
    assert update.engine_settings is None


def test_cross_versioned_app_uses_suffixed_name(tmp_path: Path, recording_engine) -> None:
    app = Application(group_id="org.example", name="tool", version="1.0", cross_versioned=True)
    update = Update(_config(tmp_path / "boot", version="2.9.0"), engine_factory=recording_engine.bind)

    result = update(UpdateApp(app))

    assert result.ok
    module = recording_engine.modules[0]
    assert str(module.revision_id) == "org.scala-tools.sbt#boot-app;1.0"
    (dependency,) = module.dependencies
    assert dependency.dependency_id == ModuleRevisionId("org.example", "tool_2.9.0", "1.0")
    assert dependency.dependency_configurations("default") == ("runtime(default)",)
    _, pattern, _ = recording_engine.retrievals[0]
    assert pattern == "2.9.0/org.example/tool/1.0(/[component])/[artifact]-[revision].[ext]"


def _raised(exc: BaseException) -> BaseException:
    try:
        raise exc
    except BaseException as caught:  # noqa: BLE001
        return caught


def test_resolution_failure_prints_distinct_problems(tmp_path: Path, recording_engine, capsys) -> None:
    boot = tmp_path / "boot"
    recording_engine.unresolved = [
        UnresolvedDependency(ModuleRevisionId("org.example", "a", "1.0"), _raised(RuntimeError("a missing"))),
        UnresolvedDependency(ModuleRevisionId("org.example", "b", "1.0"), _raised(RuntimeError("b missing"))),
    ]
    recording_engine.problem_messages = ["problem one", "problem two", "problem one"]
    update = Update(_config(boot), engine_factory=recording_engine.bind)

    result = update(UpdateScala())

    assert result.phase is UpdatePhase.RESOLVE_FAILED
    assert isinstance(result.error, ResolutionFailure)
    assert result.problems == ("problem one", "problem two")
    assert recording_engine.calls == ["resolve"]
    out_lines = capsys.readouterr().out.splitlines()
    assert out_lines == ["problem one", "problem two"]
    log_text = (boot / "update.log").read_text(encoding="utf-8")
    assert log_text.count("Traceback") == 2
    assert "RuntimeError: a missing" in log_text
    assert "RuntimeError: b missing" in log_text
    with pytest.raises(ResolutionFailure, match="Error retrieving required libraries"):
        result.raise_for_error()


def test_unexpected_retrieve_failure_is_reported(tmp_path: Path, recording_engine, capsys) -> None:
    boot = tmp_path / "boot"
    recording_engine.retrieve_error = OSError("disk full")
    update = Update(_config(boot), engine_factory=recording_engine.bind)

    result = update(UpdateScala())

    assert result.phase is UpdatePhase.RETRIEVE_FAILED
    assert isinstance(result.error, UnexpectedFailure)
    assert isinstance(result.error.__cause__, OSError)
    out = capsys.readouterr().out
    assert "builtins.OSError: disk full" in out
    assert f"  (see {boot / 'update.log'} for complete log)" in out
    log_text = (boot / "update.log").read_text(encoding="utf-8")
    assert "Traceback" in log_text
    assert "builtins.OSError: disk full" in log_text


def test_unexpected_resolve_failure_skips_retrieve(tmp_path: Path, recording_engine) -> None:
    recording_engine.resolve_error = RuntimeError("engine exploded")
    update = Update(_config(tmp_path / "boot"), engine_factory=recording_engine.bind)

    result = update(UpdateScala())

    assert result.phase is UpdatePhase.RESOLVE_FAILED
    assert isinstance(result.error, UnexpectedFailure)
    assert recording_engine.calls == ["resolve"]


def test_lazy_version_failure_happens_while_translating(tmp_path: Path, recording_engine) -> None:
    def _version() -> str:
        raise KeyError("version")

    app = Application(group_id="org.example", name="tool", version=_version)
    update = Update(_config(tmp_path / "boot"), engine_factory=recording_engine.bind)

    result = update(UpdateApp(app))

    assert result.phase is UpdatePhase.FAILED
    assert recording_engine.calls == []


def test_log_truncated_on_construction_and_appended_per_call(tmp_path: Path, recording_engine) -> None:
    boot = tmp_path / "boot"
    boot.mkdir()
    (boot / "update.log").write_text("stale\n", encoding="utf-8")

    update = Update(_config(boot), engine_factory=recording_engine.bind)
    assert (boot / "update.log").read_text(encoding="utf-8") == ""

    update(UpdateScala())
    update(UpdateScala())

    lines = (boot / "update.log").read_text(encoding="utf-8").splitlines()
    assert lines.count("resolving org.scala-tools.sbt#boot-scala;1.0") == 2


def test_engine_messages_follow_console_threshold(tmp_path: Path, recording_engine, capsys) -> None:
    settings = BootSettings(console_threshold="debug")
    update = Update(_config(tmp_path / "boot"), engine_factory=recording_engine.bind, settings=settings)

    update(UpdateScala())

    out = capsys.readouterr().out
    assert "resolving org.scala-tools.sbt#boot-scala;1.0" in out


def test_custom_log_file_name(tmp_path: Path, recording_engine) -> None:
    settings = BootSettings(log_file_name="boot.log")
    update = Update(_config(tmp_path / "boot"), engine_factory=recording_engine.bind, settings=settings)

    result = update(UpdateScala())

    assert result.log_file == tmp_path / "boot" / "boot.log"
    assert "retrieving" in result.log_file.read_text(encoding="utf-8")


def test_distinct_messages_keeps_first_occurrence_order() -> None:
    assert distinct_messages(["b", "a", "b", "c", "a"]) == ("b", "a", "c")


def test_debug_logger_traces_phases(tmp_path: Path, recording_engine, caplog) -> None:
    update = Update(_config(tmp_path / "boot"), engine_factory=recording_engine.bind)

    with caplog.at_level(logging.DEBUG, logger="scalaboot.update"):
        update(UpdateScala())

    messages = [record.getMessage() for record in caplog.records if record.name == "scalaboot.update"]
    assert "update scala: done" in messages
    assert any(message.startswith("update scala: logger-torn-down") for message in messages)


def test_direct_engine_end_to_end(tmp_path: Path, maven_repo: Path, publish_jar) -> None:
    publish_jar("org.scala-lang", "scala-compiler", "2.8.1", b"compiler")
    publish_jar("org.scala-lang", "scala-library", "2.8.1", b"library")
    boot = tmp_path / "boot"
    config = _config(boot, repositories=[MavenRepository(id="test-repo", url=maven_repo.as_uri())])
    update = Update(config, ivy_home=tmp_path / "ivy", home=tmp_path / "home")

    result = update(UpdateScala())

    assert result.ok, result.error
    assert result.retrieved == 2
    assert (boot / "2.8.1" / "lib" / "scala-compiler.jar").read_bytes() == b"compiler"
    assert (boot / "2.8.1" / "lib" / "scala-library.jar").read_bytes() == b"library"
    assert not (tmp_path / "ivy" / "cache").exists()


def test_direct_engine_missing_artifact_fails_resolution(tmp_path: Path, maven_repo: Path, publish_jar, capsys) -> None:
    publish_jar("org.scala-lang", "scala-library", "2.8.1")
    boot = tmp_path / "boot"
    config = _config(boot, repositories=[MavenRepository(id="test-repo", url=maven_repo.as_uri())])
    update = Update(config, ivy_home=tmp_path / "ivy", home=tmp_path / "home")

    result = update(UpdateScala())

    assert result.phase is UpdatePhase.RESOLVE_FAILED
    assert result.problems == (
        "unresolved dependency: org.scala-lang#scala-compiler;2.8.1: not found",
    )
    assert not (boot / "2.8.1").exists()
    assert "scala-compiler" in capsys.readouterr().out


@pytest.mark.skipif(not Path("/dev/full").exists(), reason="needs /dev/full")
def test_unwritable_log_file_never_fails_the_update(tmp_path: Path, recording_engine, capsys) -> None:
    recording_engine.resolve_error = RuntimeError("engine exploded")
    settings = BootSettings(log_file_name="/dev/full")
    update = Update(_config(tmp_path / "boot"), engine_factory=recording_engine.bind, settings=settings)

    result = update(UpdateScala())

    assert result.phase is UpdatePhase.RESOLVE_FAILED
    assert isinstance(result.error, UnexpectedFailure)
    out = capsys.readouterr().out
    assert "builtins.RuntimeError: engine exploded" in out
    assert out.count("Error writing to update log file") == 1


def test_log_path_that_cannot_be_opened_is_reported(tmp_path: Path, recording_engine, capsys) -> None:
    boot = tmp_path / "boot"
    (boot / "update.log").mkdir(parents=True)

    update = Update(_config(boot), engine_factory=recording_engine.bind)
    result = update(UpdateScala())

    assert result.ok
    assert recording_engine.calls == ["resolve", "retrieve"]
    out = capsys.readouterr().out
    assert out.count("Error writing to update log file") == 2
    assert (boot / "update.log").is_dir()
