"""Abstract data store consumed by the details frontend.

Every operation raises ``NotFound`` when the requested record does not
exist and ``StoreError`` for any other failure. Callers rely on that split
to tell an expected miss from an infrastructure problem.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Tuple

from .models import License, Version, VersionedPackage, VersionInfo


class DataStore(ABC):
    """Read-only access to module and package metadata."""

    @abstractmethod
    def get_latest_package(self, path: str) -> VersionedPackage:
        """Return the package at ``path`` in its latest version."""

    @abstractmethod
    def get_package(self, path: str, version: str) -> VersionedPackage:
        """Return the package at ``path`` in module version ``version``."""

    @abstractmethod
    def get_version_info(self, module_path: str, version: str) -> VersionInfo:
        """Return the version info for a module at ``version``."""

    @abstractmethod
    def get_module_licenses(self, module_path: str, version: str) -> List[License]:
        """Return every license file of a module version."""

    @abstractmethod
    def get_version(self, module_path: str, version: str) -> Version:
        """Return a module version together with its packages."""

    @abstractmethod
    def get_package_licenses(self, path: str, module_path: str, version: str) -> List[License]:
        """Return the license files that apply to a package."""

    @abstractmethod
    def get_imports(self, path: str, version: str) -> List[str]:
        """Return the import paths imported by a package."""

    @abstractmethod
    def get_imported_by(
        self, path: str, module_path: str, limit: int, offset: int = 0
    ) -> Tuple[List[str], int]:
        """Return one page of importers of ``path`` and the total count.

        Packages inside ``module_path`` itself are not counted.
        """

    @abstractmethod
    def get_tagged_versions_for_package_series(self, path: str) -> List[VersionedPackage]:
        """Return tagged versions of the package series, newest first."""

    @abstractmethod
    def get_pseudo_versions_for_package_series(self, path: str) -> List[VersionedPackage]:
        """Return pseudo-versions of the package series, newest first."""
