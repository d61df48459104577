"""In-memory data store backed by a fixture file."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from common.errors import NotFound, StoreError
from versioning import semver
from versioning.module_path import split_path_version

from .base import DataStore
from .models import License, Version, VersionedPackage, VersionInfo

logger = logging.getLogger(__name__)

_TYPE_RANK = {"release": 2, "prerelease": 1, "pseudo": 0}


def _latest_key(vi: VersionInfo):
    """Sort key: releases before prereleases before pseudo-versions, then semver."""
    return (_TYPE_RANK.get(vi.version_type, 0), semver.parse(vi.version))


def _suffix(pkg_path: str, module_path: str) -> str:
    return pkg_path[len(module_path):].lstrip("/")


class MemoryStore(DataStore):
    """A ``DataStore`` holding every module version in memory."""

    def __init__(self, versions: Iterable[Version] = ()):
        self._versions: Dict[Tuple[str, str], Version] = {}
        for version in versions:
            self.add_version(version)

    def add_version(self, version: Version) -> None:
        """Insert or replace a module version."""
        vi = version.version_info
        if not semver.is_valid(vi.version):
            raise ValueError(f"{vi.module_path}: {vi.version!r} is not a valid semantic version")
        self._versions[(vi.module_path, vi.version)] = version

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MemoryStore":
        return cls(Version.from_dict(d) for d in data.get("versions") or ())

    def __len__(self) -> int:
        return len(self._versions)

    def _packages_at(self, path: str) -> List[VersionedPackage]:
        """All (package, version) pairs for ``path``; the innermost module wins per version."""
        found: Dict[str, VersionedPackage] = {}
        for version in self._versions.values():
            pkg = version.find_package(path)
            if pkg is None:
                continue
            vi = version.version_info
            current = found.get(vi.version)
            if current is None or len(vi.module_path) > len(current.version_info.module_path):
                found[vi.version] = VersionedPackage(package=pkg, version_info=vi)
        return list(found.values())

    def get_latest_package(self, path: str) -> VersionedPackage:
        candidates = self._packages_at(path)
        if not candidates:
            raise NotFound(f"package {path!r} not found")
        return max(candidates, key=lambda vp: _latest_key(vp.version_info))

    def get_package(self, path: str, version: str) -> VersionedPackage:
        for candidate in self._packages_at(path):
            if candidate.version_info.version == version:
                return candidate
        raise NotFound(f"package {path}@{version} not found")

    def get_version(self, module_path: str, version: str) -> Version:
        found = self._versions.get((module_path, version))
        if found is None:
            raise NotFound(f"module {module_path}@{version} not found")
        return found

    def get_version_info(self, module_path: str, version: str) -> VersionInfo:
        return self.get_version(module_path, version).version_info

    def get_module_licenses(self, module_path: str, version: str) -> List[License]:
        return list(self.get_version(module_path, version).licenses)

    def get_package_licenses(self, path: str, module_path: str, version: str) -> List[License]:
        mod = self.get_version(module_path, version)
        pkg = mod.find_package(path)
        if pkg is None:
            raise NotFound(f"package {path} not found in {module_path}@{version}")
        file_paths = {meta.file_path for meta in pkg.licenses}
        return [lic for lic in mod.licenses if lic.metadata.file_path in file_paths]

    def get_imports(self, path: str, version: str) -> List[str]:
        return list(self.get_package(path, version).package.imports)

    def get_imported_by(
        self, path: str, module_path: str, limit: int, offset: int = 0
    ) -> Tuple[List[str], int]:
        importers = set()
        for version in self._versions.values():
            if version.module_path == module_path:
                continue
            for pkg in version.packages:
                if path in pkg.imports:
                    importers.add(pkg.path)
        ordered = sorted(importers)
        return ordered[offset:offset + limit], len(ordered)

    def _series_key(self, module_path: str, pkg_path: str) -> Tuple[str, str]:
        prefix, _, _ = split_path_version(module_path)
        return prefix, _suffix(pkg_path, module_path)

    def _package_series(self, path: str) -> List[VersionedPackage]:
        keys = {
            self._series_key(vp.version_info.module_path, path)
            for vp in self._packages_at(path)
        }
        if not keys:
            return []
        series = []
        for version in self._versions.values():
            vi = version.version_info
            for pkg in version.packages:
                if self._series_key(vi.module_path, pkg.path) in keys:
                    series.append(VersionedPackage(package=pkg, version_info=vi))
        series.sort(key=lambda vp: semver.parse(vp.version_info.version), reverse=True)
        return series

    def get_tagged_versions_for_package_series(self, path: str) -> List[VersionedPackage]:
        return [vp for vp in self._package_series(path) if vp.version_info.version_type != "pseudo"]

    def get_pseudo_versions_for_package_series(self, path: str) -> List[VersionedPackage]:
        return [vp for vp in self._package_series(path) if vp.version_info.version_type == "pseudo"]


def load_store_file(file_path: str) -> MemoryStore:
    """Load a YAML (or JSON) fixture into a ``MemoryStore``.

    Raises:
        StoreError: If the file cannot be read or does not describe versions.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data: Optional[Any] = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise StoreError(f"unable to load store file {file_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise StoreError(f"store file {file_path} must hold a mapping with a 'versions' list")
    try:
        store = MemoryStore.from_dict(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise StoreError(f"invalid store file {file_path}: {exc}") from exc
    logger.info("Loaded %d module versions from %s", len(store), file_path)
    return store
