"""Structural checks and helpers for import and module paths."""

from __future__ import annotations

import re
from typing import Tuple

_ALLOWED_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "0123456789"
    "-._~+"
)

_WINDOWS_RESERVED = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)

_MAJOR_SUFFIX =re.compile(r"^(.*)/v(\d+)$")
_GOPKG_SUFFIX = re.compile(r"^(gopkg\.in/.*)\.v(\d+)(-unstable)?$")


def check_import_path(path: str) -> None:
    """Validate the shape of an import path.

    Raises:
        ValueError: With the reason the path is rejected.
    """
    if not path:
        raise ValueError("empty string")
    if path.startswith("/"):
        raise ValueError("leading slash")
    if path.endswith("/"):
        raise ValueError("trailing slash")
    if "//" in path:
        raise ValueError("double slash")
    for elem in path.split("/"):
        _check_element(elem)
    if path.startswith("-"):
        raise ValueError("leading dash")


def _check_element(elem: str) -> None:
    """Validate a single slash-separated path element."""
    if elem in (".", ".."):
        raise ValueError(f"invalid path element {elem!r}")
    if elem.startswith("."):
        raise ValueError(f"leading dot in path element {elem!r}")
    if elem.endswith("."):
        raise ValueError(f"trailing dot in path element {elem!r}")
    for ch in elem:
        if ch not in _ALLOWED_CHARS:
            raise ValueError(f"invalid char {ch!r}")

    # Windows treats "con.txt" like "con" and "foo~1" may be a short name.
    short = elem.split(".", 1)[0]
    if short.upper() in _WINDOWS_RESERVED:
        raise ValueError(f"{short!r} disallowed as path element component on Windows")
    tilde = short.rfind("~")
    if 0 <= tilde < len(short) - 1 and short[tilde + 1:].isdigit():
        raise ValueError(f"trailing tilde and digits in path element {elem!r}")


def split_path_version(path: str) -> Tuple[str, str, bool]:
    """Split a trailing major-version segment off a module path.

    Returns (prefix, path_major, ok). ``path_major`` is ``"/vN"`` (or
    ``".vN"`` for gopkg.in paths) and empty when the path has none. ``ok`` is
    False for a malformed suffix such as ``/v0``, ``/v1`` or ``/v01``.
    """
    if path.startswith("gopkg.in/"):
        match = _GOPKG_SUFFIX.match(path)
        if not match:
            return path, "", False
        prefix, number, _ = match.groups()
        if len(number) > 1 and number.startswith("0"):
            return path, "", False
        return prefix, path[len(prefix):], True

    match = _MAJOR_SUFFIX.match(path)
    if not match:
        return path, "", True
    prefix, number = match.groups()
    if number.startswith("0") or number == "1":
        return path, "", False
    return prefix, path[len(prefix):], True


def in_std_lib(path: str) -> bool:
    """Report whether the import path belongs to the standard library."""
    first = path.split("/", 1)[0]
    return "." not in first
