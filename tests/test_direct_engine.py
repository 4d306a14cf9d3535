# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the direct resolution engine."""

from __future__ import annotations

import io
import logging
import urllib.error
from pathlib import Path
from threading import Lock

import pytest

from scalaboot.diagnostics import DiagnosticLogger
from scalaboot.engine import (
    ChainResolver,
    DirectEngine,
    EngineSettings,
    IBiblioResolver,
    LogOptions,
    ModuleRevisionId,
    ResolveOptions,
    RetrieveOptions,
    engine_context,
)
from scalaboot.models import UpdateScala
from scalaboot.resolvers import local_resolver, maven_resolver
from scalaboot.translator import translate


def _settings(tmp_path: Path, *resolvers, use_origin: bool = True) -> EngineSettings:  # noqa: ANN002
    settings = EngineSettings(base_dir=tmp_path / "boot", default_ivy_user_dir=tmp_path / "ivy")
    chain = ChainResolver(name="chain", resolvers=list(resolvers))
    settings.add_resolver(chain)
    settings.set_default_resolver(chain.name)
    settings.get_default_repository_cache_manager().set_use_origin(use_origin)
    return settings


def _run(settings: EngineSettings, pattern: str = "2.8.1/lib/[artifact].[ext]"):  # noqa: ANN202
    engine = DirectEngine(settings)
    writer = io.StringIO()
    logger = DiagnosticLogger(writer, threshold=logging.CRITICAL)
    module = translate(UpdateScala(), "2.8.1").module
    with engine_context(settings, logger, lock=Lock()) as context:
        report = engine.resolve(module, ResolveOptions(log=LogOptions.DOWNLOAD_ONLY), context=context)
        copied = None
        if not report.has_error:
            copied = engine.retrieve(module.revision_id, pattern, RetrieveOptions(), context=context)
    return report, copied, writer.getvalue()


def test_first_resolver_in_chain_wins(tmp_path: Path, maven_repo: Path, publish_jar) -> None:
    publish_jar("org.scala-lang", "scala-compiler", "2.8.1", b"second")
    publish_jar("org.scala-lang", "scala-library", "2.8.1", b"second")
    first = tmp_path / "first"
    for name in ("scala-compiler", "scala-library"):
        directory = first / "org" / "scala-lang" / name / "2.8.1"
        directory.mkdir(parents=True)
        (directory / f"{name}-2.8.1.jar").write_bytes(b"first")
    settings = _settings(
        tmp_path,
        maven_resolver("first", first.as_uri()),
        maven_resolver("second", maven_repo.as_uri()),
    )

    report, copied, _ = _run(settings)

    assert not report.has_error
    assert [artifact.resolver_name for artifact in report.artifacts] == ["first", "first"]
    assert copied == 2
    assert (tmp_path / "boot" / "2.8.1" / "lib" / "scala-library.jar").read_bytes() == b"first"


def test_fallback_to_later_resolver(tmp_path: Path, maven_repo: Path, publish_jar) -> None:
    publish_jar("org.scala-lang", "scala-compiler", "2.8.1")
    publish_jar("org.scala-lang", "scala-library", "2.8.1")
    settings = _settings(
        tmp_path,
        maven_resolver("empty", (tmp_path / "empty").as_uri()),
        maven_resolver("repo", maven_repo.as_uri()),
    )

    report, _, log_text = _run(settings)

    assert [artifact.resolver_name for artifact in report.artifacts] == ["repo", "repo"]
    assert all(body.closed for body in opener.not_found_bodies)
    assert "tried" not in log_text


def test_local_ivy_repository_layout(tmp_path: Path) -> None:
    ivy_home = tmp_path / "ivy"
    for name in ("scala-compiler", "scala-library"):
        directory = ivy_home / "local" / "org.scala-lang" / name / "2.8.1" / "jars"
        directory.mkdir(parents=True)
        (directory / f"{name}.jar").write_bytes(name.encode())
    settings = _settings(tmp_path, local_resolver(ivy_home))

    report, copied, _ = _run(settings)

    assert not report.has_error
    assert copied == 2
    assert (tmp_path / "boot" / "2.8.1" / "lib" / "scala-compiler.jar").read_bytes() == b"scala-compiler"


def test_without_use_origin_artifacts_are_cached(tmp_path: Path, maven_repo: Path, publish_jar) -> None:
    publish_jar("org.scala-lang", "scala-compiler", "2.8.1")
    publish_jar("org.scala-lang", "scala-library", "2.8.1")
    settings = _settings(tmp_path, maven_resolver("repo", maven_repo.as_uri()), use_origin=False)

    report, _, _ = _run(settings)

    cache = tmp_path / "ivy" / "cache"
    assert all(artifact.location.is_relative_to(cache) for artifact in report.artifacts)
    assert (cache / "org.scala-lang" / "scala-library" / "jars" / "scala-library-2.8.1.jar").is_file()


def test_second_retrieve_skips_up_to_date_copies(tmp_path: Path, maven_repo: Path, publish_jar) -> None:
    publish_jar("org.scala-lang", "scala-compiler", "2.8.1")
    publish_jar("org.scala-lang", "scala-library", "2.8.1")
    settings = _settings(tmp_path, maven_resolver("repo", maven_repo.as_uri()))

    _, first, _ = _run(settings)
    _, second, log_text = _run(settings)

    assert first == 2
    assert second == 0
    assert "0 artifacts copied, 2 already retrieved" in log_text


def test_unresolved_dependencies_are_reported(tmp_path: Path, maven_repo: Path, publish_jar) -> None:
    publish_jar("org.scala-lang", "scala-library", "2.8.1")
    settings = _settings(tmp_path, maven_resolver("repo", maven_repo.as_uri()))

    report, copied, log_text = _run(settings)

    assert report.has_error
    assert copied is None
    (unresolved,) = report.unresolved_dependencies
    assert unresolved.id == ModuleRevisionId("org.scala-lang", "scala-compiler", "2.8.1")
    assert unresolved.problem is not None
    assert "scala-compiler-2.8.1.jar" in unresolved.problem.tried[0]  # type: ignore[attr-defined]
    assert report.all_problem_messages() == ["unresolved dependency: org.scala-lang#scala-compiler;2.8.1: not found"]
    assert "not found" in log_text


def test_retrieve_requires_prior_resolve(tmp_path: Path) -> None:
    settings = _settings(tmp_path, maven_resolver("repo", "file:///nowhere"))
    engine = DirectEngine(settings)
    logger = DiagnosticLogger(io.StringIO())

    with engine_context(settings, logger, lock=Lock()) as context, pytest.raises(LookupError):
        engine.retrieve(ModuleRevisionId("org", "boot-scala", "1.0"), "lib/[artifact].[ext]", RetrieveOptions(), context=context)


class _FakeResponse(io.BytesIO):
    def __enter__(self) -> _FakeResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class _FakeOpener:
    def __init__(self, payloads: dict[str, bytes]) -> None:
        self.payloads = payloads
        self.requested: list[str] = []
        self.not_found_bodies: list[io.BytesIO] = []

    def open(self, request, timeout=None):  # noqa: ANN001, ANN201
        url = request.full_url
        self.requested.append(url)
        if url not in self.payloads:
            body = io.BytesIO(b"Not Found")
            self.not_found_bodies.append(body)
            raise urllib.error.HTTPError(url, 404, "Not Found", {}, body)  # type: ignore[arg-type]
        return _FakeResponse(self.payloads[url])


def test_remote_artifacts_are_downloaded_into_cache(tmp_path: Path, monkeypatch) -> None:
    root = "https://repo.example.com/maven2/"
    opener = _FakeOpener(
        {
            f"{root}org/scala-lang/scala-compiler/2.8.1/scala-compiler-2.8.1.jar": b"compiler",
            f"{root}org/scala-lang/scala-library/2.8.1/scala-library-2.8.1.jar": b"library",
        }
    )
    monkeypatch.setattr("scalaboot.engine.direct.urllib.request.build_opener", lambda *handlers: opener)
    resolver = IBiblioResolver(name="remote", root=root, m2compatible=True)
    settings = _settings(tmp_path, resolver)

    report, copied, log_text = _run(settings)

    assert not report.has_error
    assert copied == 2
    assert (tmp_path / "boot" / "2.8.1" / "lib" / "scala-compiler.jar").read_bytes() == b"compiler"
    assert "downloading" in log_text
    assert "[SUCCESSFUL ]" in log_text
    assert not list((tmp_path / "ivy" / "cache").rglob("*.part"))

    opener.requested.clear()
    _run(settings)
    assert opener.requested == []


def test_remote_not_found_moves_to_next_resolver(tmp_path: Path, monkeypatch, maven_repo: Path, publish_jar) -> None:
    publish_jar("org.scala-lang", "scala-compiler", "2.8.1")
    publish_jar("org.scala-lang", "scala-library", "2.8.1")
    opener = _FakeOpener({})
    monkeypatch.setattr("scalaboot.engine.direct.urllib.request.build_opener", lambda *handlers: opener)
    settings = _settings(
        tmp_path,
        IBiblioResolver(name="remote", root="https://repo.example.com/maven2/", m2compatible=True),
        maven_resolver("repo", maven_repo.as_uri()),
    )

    report, _, _ = _run(settings)

    assert len(opener.requested) == 2
    assert [artifact.resolver_name for artifact in report.artifacts] == ["repo", "repo"]
    assert len(opener.not_found_bodies) == 2
    assert all(body.closed for body in opener.not_found_bodies)
