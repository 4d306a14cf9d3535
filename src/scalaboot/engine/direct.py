# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolution engine fetching declared dependencies without graph resolution.

:class:`DirectEngine` walks the default chain resolver for each dependency of
a module, in order, and stops at the first resolver that provides the jar.
Artifacts are fetched into the repository cache, or used in place when the
cache manager has ``use_origin`` enabled and the resolver points at the local
file system. Transitive dependencies, metadata files and conflict management
are out of its reach; callers declare everything they need explicitly.
"""

from __future__ import annotations

import logging
import shutil
import ssl
import time
import urllib.error
import urllib.request
from collections.abc import Iterator
from pathlib import Path
from typing import Final
from urllib.parse import urlparse
from urllib.request import url2pathname

from .context import EngineContext
from .descriptors import ModuleDescriptor, ModuleRevisionId
from .options import LogOptions, ResolveOptions, RetrieveOptions
from .patterns import substitute_tokens
from .reports import ArtifactNotFoundError, ResolvedArtifact, ResolveReport, UnresolvedDependency
from .resolvers import ChainResolver, FileSystemResolver, IBiblioResolver, Resolver, URLResolver
from .settings import EngineSettings

LOGGER = logging.getLogger(__name__)

ARTIFACT_TYPE: Final[str] = "jar"
ARTIFACT_EXT: Final[str] = "jar"
USER_AGENT: Final[str] = "scalaboot/1.0"
_REMOTE_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})
_NOT_FOUND_STATUS: Final[int] = 404


class DirectEngine:
    """Fetch declared dependencies from the default chain resolver."""

    def __init__(self, settings: EngineSettings, *, timeout: float | None = None) -> None:
        """Initialise the engine bound to ``settings``.

        Args:
            settings: Settings whose default resolver and cache manager are used.
            timeout: Optional socket timeout in seconds for remote downloads.
        """

        self._settings = settings
        self._timeout = timeout
        self._reports: dict[ModuleRevisionId, ResolveReport] = {}

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def resolve(
        self,
        module: ModuleDescriptor,
        options: ResolveOptions,
        *,
        context: EngineContext,
    ) -> ResolveReport:
        """Resolve each dependency of ``module`` against the default resolver."""

        report = ResolveReport(module_id=module.revision_id)
        chain = context.settings.get_default_resolver()
        if options.log is LogOptions.DEFAULT:
            context.message(f":: resolving dependencies :: {module.revision_id}")
            context.message(f"\tconfs: {list(module.configuration_names())}")
        for dependency in module.dependencies:
            dependency_id = dependency.dependency_id
            try:
                artifact = self._resolve_dependency(dependency_id, chain, options, context)
            except ArtifactNotFoundError as exc:
                for location in exc.tried:
                    context.message(f"\t\ttried {location}", logging.DEBUG)
                context.message(f"\t:: {dependency_id}: not found", logging.WARNING)
                report.add_unresolved(UnresolvedDependency(dependency_id, exc))
                continue
            if options.log is LogOptions.DEFAULT:
                context.message(f"\tfound {dependency_id} in {artifact.resolver_name}")
            report.artifacts.append(artifact)
        self._reports[module.revision_id] = report
        return report

    def retrieve(
        self,
        revision_id: ModuleRevisionId,
        pattern: str,
        options: RetrieveOptions,
        *,
        context: EngineContext,
    ) -> int:
        """Copy the artifacts resolved for ``revision_id`` to ``pattern``.

        Raises:
            LookupError: If ``revision_id`` has not been resolved by this engine.
        """

        report = self._reports.get(revision_id)
        if report is None:
            raise LookupError(f"{revision_id} has not been resolved")
        if options.log is not LogOptions.QUIET:
            context.message(f":: retrieving :: {revision_id}")
        copied = 0
        up_to_date = 0
        for artifact in report.artifacts:
            destination = context.settings.resolve_path(substitute_tokens(pattern, _artifact_tokens(artifact)))
            if not options.overwrite and _is_up_to_date(artifact.location, destination):
                up_to_date += 1
                context.message(f"\t{destination} is up to date", logging.DEBUG)
                continue
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(artifact.location, destination)
            copied += 1
            context.message(f"\tretrieved {artifact.location} -> {destination}", logging.DEBUG)
        if options.log is not LogOptions.QUIET:
            context.message(f"\t{copied} artifacts copied, {up_to_date} already retrieved")
        return copied

    def _resolve_dependency(
        self,
        dependency_id: ModuleRevisionId,
        chain: Resolver,
        options: ResolveOptions,
        context: EngineContext,
    ) -> ResolvedArtifact:
        cache = context.settings.get_default_repository_cache_manager()
        cached = _cache_location(cache.base_dir, dependency_id)
        tried: list[str] = []
        for resolver in _leaf_resolvers(chain):
            for location in _candidate_locations(resolver, dependency_id):
                tried.append(location)
                local = _local_path(location)
                if local is not None:
                    if not local.is_file():
                        continue
                    if cache.use_origin:
                        return _artifact(dependency_id, local, resolver.name)
                    if not cached.is_file():
                        cached.parent.mkdir(parents=True, exist_ok=True)
                        shutil.copy2(local, cached)
                    return _artifact(dependency_id, cached, resolver.name)
                if cached.is_file():
                    return _artifact(dependency_id, cached, resolver.name)
                if self._download(location, cached, dependency_id, options, context):
                    return _artifact(dependency_id, cached, resolver.name)
        raise ArtifactNotFoundError(dependency_id, tried)

    def _download(
        self,
        url: str,
        destination: Path,
        dependency_id: ModuleRevisionId,
        options: ResolveOptions,
        context: EngineContext,
    ) -> bool:
        parsed = urlparse(url)
        if parsed.scheme.lower() not in _REMOTE_SCHEMES:
            context.message(f"\tunsupported scheme for {url}", logging.WARNING)
            return False
        request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        opener = urllib.request.build_opener(urllib.request.HTTPSHandler(context=ssl.create_default_context()))
        started = time.monotonic()
        partial = destination.with_name(f"{destination.name}.part")
        try:
            with opener.open(request, timeout=self._timeout) as response:
                if options.log is not LogOptions.QUIET:
                    context.message(f"downloading {url} ...")
                destination.parent.mkdir(parents=True, exist_ok=True)
                with partial.open("wb") as handle:
                    shutil.copyfileobj(response, handle)
        except urllib.error.HTTPError as exc:
            exc.close()
            if exc.code != _NOT_FOUND_STATUS:
                context.message(f"\t{url}: {exc}", logging.WARNING)
            return False
        except (urllib.error.URLError, OSError) as exc:
            partial.unlink(missing_ok=True)
            context.message(f"\t{url}: {exc}", logging.WARNING)
            return False
        partial.replace(destination)
        elapsed_ms = int((time.monotonic() - started) * 1000)
        if options.log is not LogOptions.QUIET:
            context.message(f"\t[SUCCESSFUL ] {dependency_id}!{dependency_id.name}.{ARTIFACT_EXT} ({elapsed_ms}ms)")
        LOGGER.debug("downloaded %s to %s", url, destination)
        return True


def _leaf_resolvers(resolver: Resolver) -> Iterator[Resolver]:
    if isinstance(resolver, ChainResolver):
        for child in resolver.resolvers:
            yield from _leaf_resolvers(child)
        return
    yield resolver


def _candidate_locations(resolver: Resolver, dependency_id: ModuleRevisionId) -> tuple[str, ...]:
    tokens = _dependency_tokens(dependency_id)
    if isinstance(resolver, IBiblioResolver):
        maven_tokens = {**tokens, "organisation": resolver.organisation_path(dependency_id.organisation)}
        return tuple(substitute_tokens(pattern, maven_tokens) for pattern in resolver.artifact_patterns())
    if isinstance(resolver, (URLResolver, FileSystemResolver)):
        return tuple(substitute_tokens(pattern, tokens) for pattern in resolver.artifact_patterns)
    return ()


def _dependency_tokens(dependency_id: ModuleRevisionId) -> dict[str, str | None]:
    return {
        "organisation": dependency_id.organisation,
        "organization": dependency_id.organisation,
        "module": dependency_id.name,
        "artifact": dependency_id.name,
        "revision": dependency_id.revision,
        "type": ARTIFACT_TYPE,
        "ext": ARTIFACT_EXT,
        "classifier": None,
    }


def _artifact_tokens(artifact: ResolvedArtifact) -> dict[str, str | None]:
    dependency_id = artifact.dependency_id
    return {
        "organisation": dependency_id.organisation,
        "organization": dependency_id.organisation,
        "module": dependency_id.name,
        "artifact": artifact.name,
        "revision": dependency_id.revision,
        "type": artifact.type,
        "ext": artifact.ext,
        "classifier": artifact.classifier,
    }


def _artifact(dependency_id: ModuleRevisionId, location: Path, resolver_name: str) -> ResolvedArtifact:
    return ResolvedArtifact(
        dependency_id=dependency_id,
        name=dependency_id.name,
        location=location,
        resolver_name=resolver_name,
    )


def _cache_location(cache_dir: Path, dependency_id: ModuleRevisionId) -> Path:
    return (
        cache_dir
        / dependency_id.organisation
        / dependency_id.name
        / f"{ARTIFACT_TYPE}s"
        / f"{dependency_id.name}-{dependency_id.revision}.{ARTIFACT_EXT}"
    )


def _local_path(location: str) -> Path | None:
    """Return the file-system path for ``location`` or ``None`` for remote URLs."""

    parsed = urlparse(location)
    scheme = parsed.scheme.lower()
    if scheme == "file":
        return Path(url2pathname(parsed.path))
    if scheme in _REMOTE_SCHEMES:
        return None
    if len(scheme) == 1:
        # Windows drive letter parsed as a scheme.
        return Path(location)
    if scheme:
        return None
    return Path(location).expanduser()


def _is_up_to_date(source: Path, destination: Path) -> bool:
    if not destination.is_file():
        return False
    source_stat = source.stat()
    destination_stat = destination.stat()
    return (
        source_stat.st_size == destination_stat.st_size
        and int(source_stat.st_mtime) <= int(destination_stat.st_mtime)
    )


__all__ = ["DirectEngine"]
