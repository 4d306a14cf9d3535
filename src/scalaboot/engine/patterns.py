# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ivy-style pattern substitution.

Patterns contain ``[token]`` placeholders and optional ``( ... )`` groups. An
optional group is kept, without its parentheses, only when every token inside
it has a non-empty value; otherwise the whole group is dropped::

    >>> substitute_tokens("[artifact](-[classifier]).[ext]", {"artifact": "a", "ext": "jar"})
    'a.jar'
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Final

_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"\[([^\[\]()]+)\]")
_OPTIONAL_PATTERN: Final[re.Pattern[str]] = re.compile(r"\(([^()]*)\)")


def pattern_tokens(pattern: str) -> tuple[str, ...]:
    """Return the token names referenced by ``pattern`` in order of appearance."""

    return tuple(_TOKEN_PATTERN.findall(pattern))


def substitute_tokens(pattern: str, tokens: Mapping[str, str | None]) -> str:
    """Expand ``pattern`` using ``tokens``.

    Args:
        pattern: Ivy pattern with ``[token]`` placeholders and optional groups.
        tokens: Token values; ``None`` or empty values count as missing.

    Returns:
        str: The expanded pattern.

    Raises:
        ValueError: If a mandatory token has no value.
    """

    def _expand_optional(match: re.Match[str]) -> str:
        inner = match.group(1)
        names = _TOKEN_PATTERN.findall(inner)
        if any(not tokens.get(name) for name in names):
            return ""
        return inner

    def _expand_token(match: re.Match[str]) -> str:
        name = match.group(1)
        value = tokens.get(name)
        if not value:
            raise ValueError(f"pattern '{pattern}' requires a value for [{name}]")
        return value

    expanded = _OPTIONAL_PATTERN.sub(_expand_optional, pattern)
    return _TOKEN_PATTERN.sub(_expand_token, expanded)


__all__ = ["pattern_tokens", "substitute_tokens"]
