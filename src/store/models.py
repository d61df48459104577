"""Data models returned by the store.

All records are frozen: a record fetched for a request is never mutated.
``from_dict`` constructors accept the shape used by store fixture files and
by the remote metadata service.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Tuple

from .licenses import are_redistributable


def parse_commit_time(value: Any) -> datetime:
    """Return a timezone-aware UTC datetime for an ISO-8601 string or datetime.

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"invalid commit time {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _dir_of(file_path: str) -> str:
    """Directory of a license file relative to the module root, "" at the root."""
    directory = posixpath.dirname(file_path)
    return "" if directory == "." else directory


@dataclass(frozen=True)
class LicenseMetadata:
    """License findings for a single license file.

    Attributes:
        types: Detected license types (SPDX identifiers).
        file_path: Path of the license file relative to the module root.
    """

    types: Tuple[str, ...]
    file_path: str

    @property
    def at_module_root(self) -> bool:
        """True when the license file lives at the module root."""
        return _dir_of(self.file_path) == ""

    def covers(self, suffix: str) -> bool:
        """True when the license applies to the package at ``suffix``."""
        directory = _dir_of(self.file_path)
        return directory == "" or suffix == directory or suffix.startswith(directory + "/")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LicenseMetadata":
        return cls(
            types=tuple(data.get("types") or ()),
            file_path=str(data["file_path"]),
        )


@dataclass(frozen=True)
class License:
    """A license file with its contents."""

    metadata: LicenseMetadata
    contents: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "License":
        return cls(
            metadata=LicenseMetadata.from_dict(data),
            contents=data.get("contents") or "",
        )


@dataclass(frozen=True)
class VersionInfo:
    """Metadata for one module at one version."""

    module_path: str
    version: str
    commit_time: datetime
    repository_url: str = ""
    version_type: str = "release"
    readme_file_path: str = ""
    readme_contents: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VersionInfo":
        return cls(
            module_path=str(data["module_path"]),
            version=str(data["version"]),
            commit_time=parse_commit_time(data["commit_time"]),
            repository_url=data.get("repository_url") or "",
            version_type=data.get("version_type") or "release",
            readme_file_path=data.get("readme_file_path") or "",
            readme_contents=data.get("readme_contents") or "",
        )


@dataclass(frozen=True)
class Package:
    """A single importable package within a module version."""

    name: str
    path: str
    synopsis: str = ""
    documentation_html: str = ""
    imports: Tuple[str, ...] = ()
    licenses: Tuple[LicenseMetadata, ...] = ()

    @property
    def is_redistributable(self) -> bool:
        return are_redistributable(self.licenses)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        module_path: str = "",
        module_licenses: Iterable[License] = (),
    ) -> "Package":
        """Build a package; licenses default to those covering its directory."""
        path = str(data["path"])
        if data.get("licenses") is not None:
            licenses = tuple(LicenseMetadata.from_dict(d) for d in data["licenses"])
        else:
            suffix = path[len(module_path):].lstrip("/") if path.startswith(module_path) else path
            licenses = tuple(
                lic.metadata for lic in module_licenses if lic.metadata.covers(suffix)
            )
        return cls(
            name=str(data["name"]),
            path=path,
            synopsis=data.get("synopsis") or "",
            documentation_html=data.get("documentation_html") or "",
            imports=tuple(data.get("imports") or ()),
            licenses=licenses,
        )


@dataclass(frozen=True)
class VersionedPackage:
    """A package together with the module version it was fetched at."""

    package: Package
    version_info: VersionInfo

    @property
    def is_redistributable(self) -> bool:
        return self.package.is_redistributable

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VersionedPackage":
        return cls(
            package=Package.from_dict(data["package"]),
            version_info=VersionInfo.from_dict(data["version_info"]),
        )


@dataclass(frozen=True)
class Version:
    """A module version with its packages and license files."""

    version_info: VersionInfo
    packages: Tuple[Package, ...] = ()
    licenses: Tuple[License, ...] = field(default=())

    @property
    def module_path(self) -> str:
        return self.version_info.module_path

    def find_package(self, path: str) -> Optional[Package]:
        """Return the package at ``path`` in this version, if any."""
        for pkg in self.packages:
            if pkg.path == path:
                return pkg
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Version":
        """Build a version from a flat mapping of version info, packages and licenses."""
        version_info = VersionInfo.from_dict(data)
        licenses = tuple(License.from_dict(d) for d in data.get("licenses") or ())
        packages = tuple(
            Package.from_dict(d, version_info.module_path, licenses)
            for d in data.get("packages") or ()
        )
        return cls(version_info=version_info, packages=packages, licenses=licenses)
