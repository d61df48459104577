"""Semantic version predicate and helpers for ``v``-prefixed versions.

Accepts ``vMAJOR``, ``vMAJOR.MINOR`` and full ``vMAJOR.MINOR.PATCH`` with
optional prerelease and build parts. Full versions are validated by
``semantic_version``; the short forms are padded with zeros when parsed.
"""

from __future__ import annotations

import re
from typing import Optional

import semantic_version

_NUM = r"(?:0|[1-9]\d*)"
_SHORT_PATTERN = re.compile(rf"^v({_NUM})(?:\.({_NUM}))?$")
_CORE_PATTERN = re.compile(rf"^v{_NUM}\.{_NUM}\.{_NUM}(?:[-+].*)?$")


def _version_from_str(v: str) -> Optional[semantic_version.Version]:
    """Safely parse a ``v``-prefixed version string."""
    if not isinstance(v, str):
        return None
    short = _SHORT_PATTERN.match(v)
    if short:
        major, minor = short.groups()
        return semantic_version.Version(major=int(major), minor=int(minor or 0), patch=0)
    if not _CORE_PATTERN.match(v):
        return None
    try:
        return semantic_version.Version(v[1:])
    except ValueError:
        return None


def is_valid(v: str) -> bool:
    """Report whether ``v`` is a valid semantic version."""
    return _version_from_str(v) is not None


def parse(v: str) -> semantic_version.Version:
    """Parse ``v`` into a ``semantic_version.Version``.

    Raises:
        ValueError: If ``v`` is not a valid semantic version.
    """
    parsed = _version_from_str(v)
    if parsed is None:
        raise ValueError(f"{v!r} is not a valid semantic version")
    return parsed


def compare(a: str, b: str) -> int:
    """Return -1, 0 or 1 comparing two valid versions by precedence."""
    va, vb = parse(a), parse(b)
    if va < vb:
        return -1
    if va > vb:
        return 1
    return 0


def major(v: str) -> str:
    """Return the major prefix, e.g. ``"v1"`` for ``"v1.2.3"``."""
    return f"v{parse(v).major}"


def major_minor(v: str) -> str:
    """Return the major.minor prefix, e.g. ``"v1.2"`` for ``"v1.2.3"``."""
    parsed = parse(v)
    return f"v{parsed.major}.{parsed.minor}"


def is_prerelease(v: str) -> bool:
    """Report whether ``v`` carries a prerelease part."""
    return bool(parse(v).prerelease)
