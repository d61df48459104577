"""Page header view models and the helpers that build them."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from common.errors import InternalBug
from store.licenses import are_redistributable
from store.models import LicenseMetadata, Package as StorePackage, VersionInfo
from versioning.module_path import split_path_version

_ANCHOR_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]+")


@dataclass(frozen=True)
class LicenseMetadataView:
    """Display form of a license file's findings."""

    types: List[str]
    file_path: str
    anchor: str


@dataclass(frozen=True)
class Module:
    """Header information for an individual module."""

    version: str
    path: str
    commit_time: str
    repository_url: str
    is_redistributable: bool
    licenses: List[LicenseMetadataView] = field(default_factory=list)


@dataclass(frozen=True)
class Package:
    """Header information for an individual package."""

    module: Module
    path: str
    suffix: str
    synopsis: str
    is_redistributable: bool
    licenses: List[LicenseMetadataView] = field(default_factory=list)


def license_anchor(file_path: str) -> str:
    """HTML anchor for a license file."""
    return "lic-" + _ANCHOR_UNSAFE.sub("-", file_path).strip("-")


def transform_license_metadata(metadatas: Iterable[LicenseMetadata]) -> List[LicenseMetadataView]:
    return [
        LicenseMetadataView(
            types=list(m.types),
            file_path=m.file_path,
            anchor=license_anchor(m.file_path),
        )
        for m in metadatas
    ]


def create_module(
    vi: Optional[VersionInfo],
    license_metadatas: Iterable[LicenseMetadata],
    now: Optional[datetime] = None,
) -> Module:
    """Build a ``Module`` header from version info and its license findings.

    Raises:
        InternalBug: If ``vi`` is None.
    """
    if vi is None:
        raise InternalBug("version info must not be nil")
    license_metadatas = list(license_metadatas)
    return Module(
        version=vi.version,
        path=vi.module_path,
        commit_time=elapsed_time(vi.commit_time, now),
        repository_url=vi.repository_url,
        is_redistributable=are_redistributable(license_metadatas),
        licenses=transform_license_metadata(license_metadatas),
    )


def create_package(
    pkg: Optional[StorePackage],
    vi: Optional[VersionInfo],
    now: Optional[datetime] = None,
) -> Package:
    """Build a ``Package`` header from a store package and its version info.

    The synopsis is only carried for redistributable packages. License files
    at the module root are forwarded into the module header.

    Raises:
        InternalBug: If either input is None.
    """
    if pkg is None or vi is None:
        raise InternalBug("package and version info must not be nil")

    suffix = pkg.path
    if suffix.startswith(vi.module_path):
        suffix = suffix[len(vi.module_path):]
    suffix = suffix[1:] if suffix.startswith("/") else suffix
    if not suffix:
        suffix = effective_name(pkg) + " (root)"

    module_licenses = [lm for lm in pkg.licenses if lm.at_module_root]
    redistributable = pkg.is_redistributable
    return Package(
        module=create_module(vi, module_licenses, now),
        path=pkg.path,
        suffix=suffix,
        synopsis=pkg.synopsis if redistributable else "",
        is_redistributable=redistributable,
        licenses=transform_license_metadata(pkg.licenses),
    )


def effective_name(pkg: StorePackage) -> str:
    """Return either the command name or the package name."""
    if pkg.name != "main":
        return pkg.name
    if pkg.path.endswith("/v1"):
        prefix = pkg.path[:-len("/v1")]
    else:
        prefix, _, _ = split_path_version(pkg.path)
    return posixpath.basename(prefix)


def package_title(pkg: StorePackage) -> str:
    """Details page title for ``pkg``."""
    if pkg.name != "main":
        return "Package " + pkg.name
    return "Command " + effective_name(pkg)


def elapsed_time(date: datetime, now: Optional[datetime] = None) -> str:
    """Return a human-readable, relative timestamp for ``date``.

    (1) 'X hours ago' when X < 6
    (2) 'today' between 6 hours and 1 day ago
    (3) 'Y days ago' when Y < 6
    (4) A date formatted like "Jan 2, 2006" for anything further back
    """
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    elapsed_hours = int((now - date).total_seconds() / 3600)
    if elapsed_hours == 1:
        return "1 hour ago"
    if elapsed_hours < 6:
        return f"{elapsed_hours} hours ago"

    elapsed_days = elapsed_hours // 24
    if elapsed_days < 1:
        return "today"
    if elapsed_days == 1:
        return "1 day ago"
    if elapsed_days < 6:
        return f"{elapsed_days} days ago"

    return f"{date.strftime('%b')} {date.day}, {date.year}"
