# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolution engine boundary: descriptors, resolvers, settings and engines."""

from __future__ import annotations

from .context import EngineContext, engine_context
from .descriptors import Configuration, DependencyDescriptor, ModuleDescriptor, ModuleRevisionId
from .direct import DirectEngine
from .options import LogOptions, ResolveOptions, RetrieveOptions
from .patterns import pattern_tokens, substitute_tokens
from .protocols import EngineFactory, MessageLogger, ResolutionEngine
from .reports import ArtifactNotFoundError, ResolvedArtifact, ResolveReport, UnresolvedDependency
from .resolvers import (
    ChainResolver,
    FileSystemResolver,
    IBiblioResolver,
    PatternResolver,
    Resolver,
    URLResolver,
    join_url,
)
from .settings import EngineSettings, RepositoryCacheManager

__all__ = [
    "ArtifactNotFoundError",
    "ChainResolver",
    "Configuration",
    "DependencyDescriptor",
    "DirectEngine",
    "EngineContext",
    "EngineFactory",
    "EngineSettings",
    "FileSystemResolver",
    "IBiblioResolver",
    "LogOptions",
    "MessageLogger",
    "ModuleDescriptor",
    "ModuleRevisionId",
    "PatternResolver",
    "RepositoryCacheManager",
    "ResolutionEngine",
    "ResolveOptions",
    "ResolveReport",
    "ResolvedArtifact",
    "Resolver",
    "RetrieveOptions",
    "URLResolver",
    "UnresolvedDependency",
    "engine_context",
    "join_url",
    "pattern_tokens",
    "substitute_tokens",
]
