# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Translate update targets into synthetic module descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import assert_never

from .constants import (
    COMPILER_MODULE_NAME,
    DEFAULT_CONFIGURATION,
    LIBRARY_MODULE_NAME,
    RUNTIME_CONFIGURATION,
    SBT_ORG,
    SCALA_ORG,
    SCALA_RETRIEVE_PATTERN,
    SYNTHETIC_MODULE_REVISION,
    SYNTHETIC_MODULE_STATUS,
    app_retrieve_pattern,
)
from .engine.descriptors import Configuration, DependencyDescriptor, ModuleDescriptor, ModuleRevisionId
from .models import UpdateApp, UpdateScala, UpdateTarget


@dataclass(frozen=True, slots=True)
class TranslatedTarget:
    """Synthetic module for one update together with its retrieve pattern."""

    module: ModuleDescriptor
    retrieve_pattern: str


def translate(target: UpdateTarget, scala_version: str) -> TranslatedTarget:
    """Build the synthetic module and retrieve pattern for ``target``.

    The module identity only needs to be unique for the duration of the call;
    it carries a single public ``default`` configuration to which every
    dependency is attached.

    Args:
        target: Target describing which jars are required.
        scala_version: Configured Scala version.

    Returns:
        TranslatedTarget: Module descriptor and retrieve pattern.

    Raises:
        TypeError: If ``target`` is not a known update target.
    """

    if not isinstance(target, (UpdateScala, UpdateApp)):
        raise TypeError(f"unsupported update target: {target!r}")
    module = new_module(target.tpe)
    match target:
        case UpdateScala():
            add_dependency(module, SCALA_ORG, COMPILER_MODULE_NAME, scala_version, DEFAULT_CONFIGURATION)
            add_dependency(module, SCALA_ORG, LIBRARY_MODULE_NAME, scala_version, DEFAULT_CONFIGURATION)
            return TranslatedTarget(module=module, retrieve_pattern=SCALA_RETRIEVE_PATTERN)
        case UpdateApp(app=app):
            app_id = app.to_id()
            add_dependency(
                module,
                app_id.group_id,
                app.resolved_name(scala_version),
                app_id.version,
                RUNTIME_CONFIGURATION,
            )
            pattern = app_retrieve_pattern(app_id.group_id, app_id.name, app_id.version)
            return TranslatedTarget(module=module, retrieve_pattern=pattern)
        case _:
            assert_never(target)


def new_module(tpe: str) -> ModuleDescriptor:
    """Return an empty synthetic module declaring only the ``default`` configuration."""

    module = ModuleDescriptor(
        revision_id=ModuleRevisionId.new_instance(SBT_ORG, f"boot-{tpe}", SYNTHETIC_MODULE_REVISION),
        status=SYNTHETIC_MODULE_STATUS,
    )
    module.add_configuration(Configuration(name=DEFAULT_CONFIGURATION, visibility="public"))
    return module


def add_dependency(
    module: ModuleDescriptor,
    organisation: str,
    name: str,
    revision: str,
    conf: str,
) -> DependencyDescriptor:
    """Add a non-forced, transitive dependency mapped from ``default`` to ``conf``."""

    dependency = DependencyDescriptor(
        parent=module.revision_id,
        dependency_id=ModuleRevisionId.new_instance(organisation, name, revision),
        force=False,
        changing=False,
        transitive=True,
    )
    dependency.add_dependency_configuration(DEFAULT_CONFIGURATION, conf)
    module.add_dependency(dependency)
    return dependency


__all__ = ["TranslatedTarget", "add_dependency", "new_module", "translate"]
