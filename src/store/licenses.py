"""Redistributability oracle over license metadata."""

from __future__ import annotations

from typing import Iterable

from constants import Constants


def is_redistributable_type(license_type: str) -> bool:
    """Report whether a single license type permits redistribution."""
    return license_type in Constants.REDISTRIBUTABLE_LICENSES


def are_redistributable(metadatas: Iterable) -> bool:
    """Report whether content covered by ``metadatas`` may be shown.

    False when there are no license files at all, or when any file has no
    detected type or a type outside the redistributable set.
    """
    metadatas = list(metadatas)
    if not metadatas:
        return False
    for meta in metadatas:
        if not meta.types:
            return False
        if not all(is_redistributable_type(t) for t in meta.types):
            return False
    return True
