# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fixed names, coordinates and layout patterns used during boot updates."""

from __future__ import annotations

from typing import Final

UPDATE_LOG_NAME: Final[str] = "update.log"

SBT_ORG: Final[str] = "org.scala-tools.sbt"
SCALA_ORG: Final[str] = "org.scala-lang"
COMPILER_MODULE_NAME: Final[str] = "scala-compiler"
LIBRARY_MODULE_NAME: Final[str] = "scala-library"

DEFAULT_CONFIGURATION: Final[str] = "default"
RUNTIME_CONFIGURATION: Final[str] = "runtime(default)"
CONFLICT_MANAGER_NAME: Final[str] = "latest-revision"
CHAIN_RESOLVER_NAME: Final[str] = "redefined-public"
SYNTHETIC_MODULE_REVISION: Final[str] = "1.0"
SYNTHETIC_MODULE_STATUS: Final[str] = "release"

LOCAL_IVY_NAME: Final[str] = "local"
LOCAL_IVY_PATTERN: Final[str] = "[organisation]/[module]/[revision]/[type]s/[artifact].[ext]"
LOCAL_ARTIFACT_PATTERN: Final[str] = (
    "[organisation]/[module]/[revision]/[type]s/[artifact](-[classifier]).[ext]"
)

MAVEN_CENTRAL_NAME: Final[str] = "Maven Central"
MAVEN_CENTRAL_ROOT: Final[str] = "https://repo1.maven.org/maven2/"
MAVEN_LOCAL_NAME: Final[str] = "Maven2 Local"
MAVEN_ARTIFACT_PATTERN: Final[str] = (
    "[organisation]/[module]/[revision]/[artifact]-[revision](-[classifier]).[ext]"
)
SCALA_TOOLS_RELEASES_NAME: Final[str] = "Scala-Tools Maven2 Repository"
SCALA_TOOLS_RELEASES_ROOT: Final[str] = "http://scala-tools.org/repo-releases"
SCALA_TOOLS_SNAPSHOTS_NAME: Final[str] = "Scala-Tools Maven2 Snapshots Repository"
SCALA_TOOLS_SNAPSHOTS_ROOT: Final[str] = "http://scala-tools.org/repo-snapshots"

SCALA_DIRECTORY_NAME: Final[str] = "lib"
SCALA_RETRIEVE_PATTERN: Final[str] = f"{SCALA_DIRECTORY_NAME}/[artifact].[ext]"

IGNORED_MESSAGE_PREFIX: Final[str] = "impossible to define"


def base_directory_name(scala_version: str) -> str:
    """Return the boot sub-directory holding artifacts for ``scala_version``."""

    return scala_version


def app_directory_name(group_id: str, name: str, version: str) -> str:
    """Return the directory fragment identifying an application revision."""

    return "/".join((group_id, name, version))


def app_retrieve_pattern(group_id: str, name: str, version: str) -> str:
    """Return the retrieve pattern placing an application's jars by module id.

    Args:
        group_id: Organisation of the application.
        name: Unsuffixed application name.
        version: Application revision.

    Returns:
        str: Ivy-style pattern relative to the Scala version directory.
    """

    return f"{app_directory_name(group_id, name, version)}(/[component])/[artifact]-[revision].[ext]"


__all__ = [
    "CHAIN_RESOLVER_NAME",
    "COMPILER_MODULE_NAME",
    "CONFLICT_MANAGER_NAME",
    "DEFAULT_CONFIGURATION",
    "IGNORED_MESSAGE_PREFIX",
    "LIBRARY_MODULE_NAME",
    "LOCAL_ARTIFACT_PATTERN",
    "LOCAL_IVY_NAME",
    "LOCAL_IVY_PATTERN",
    "MAVEN_ARTIFACT_PATTERN",
    "MAVEN_CENTRAL_NAME",
    "MAVEN_CENTRAL_ROOT",
    "MAVEN_LOCAL_NAME",
    "RUNTIME_CONFIGURATION",
    "SBT_ORG",
    "SCALA_DIRECTORY_NAME",
    "SCALA_ORG",
    "SCALA_RETRIEVE_PATTERN",
    "SCALA_TOOLS_RELEASES_NAME",
    "SCALA_TOOLS_RELEASES_ROOT",
    "SCALA_TOOLS_SNAPSHOTS_NAME",
    "SCALA_TOOLS_SNAPSHOTS_ROOT",
    "SYNTHETIC_MODULE_REVISION",
    "SYNTHETIC_MODULE_STATUS",
    "UPDATE_LOG_NAME",
    "app_directory_name",
    "app_retrieve_pattern",
    "base_directory_name",
]
