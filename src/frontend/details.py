"""Detail views and the per-tab dispatch tables.

Each tab variant maps to exactly one fetcher. A fetcher queries the store
for the data its view needs and returns one of the ``*Details`` records.
Store errors are left to propagate; the caller classifies them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Union

from common.errors import InternalBug
from store.base import DataStore
from store.models import License, VersionedPackage, VersionInfo
from versioning import semver
from versioning.module_path import in_std_lib

from .header import Package, create_package, elapsed_time, license_anchor
from .pagination import Pagination, PaginationParams
from .tabs import ModuleTab, PackageTab

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentationDetails:
    """Data for the doc template."""

    module_path: str
    documentation_html: str


@dataclass(frozen=True)
class ReadMeDetails:
    """Data for the readme template."""

    module_path: str
    readme_file_path: str
    readme: str


@dataclass(frozen=True)
class ModuleDetails:
    """Data for the module template: every package in the module version."""

    module_path: str
    version: str
    packages: List[Package] = field(default_factory=list)


@dataclass(frozen=True)
class PackageVersion:
    version: str
    path: str
    commit_time: str


@dataclass(frozen=True)
class MinorVersionGroup:
    minor: str
    latest_version: str
    patch_versions: List[PackageVersion] = field(default_factory=list)


@dataclass(frozen=True)
class MajorVersionGroup:
    major: str
    latest_version: str
    minor_versions: List[MinorVersionGroup] = field(default_factory=list)


@dataclass(frozen=True)
class VersionsDetails:
    """Version history of a package series, grouped by major then minor."""

    major_versions: List[MajorVersionGroup] = field(default_factory=list)


@dataclass(frozen=True)
class ImportsDetails:
    """Imports of a package, split into standard library and the rest."""

    module_path: str
    external_imports: List[str] = field(default_factory=list)
    std_lib: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ImportedByDetails:
    """One page of packages importing a package."""

    module_path: str
    imported_by: List[str]
    pagination: Pagination


@dataclass(frozen=True)
class LicenseView:
    """A license file prepared for display."""

    types: List[str]
    file_path: str
    anchor: str
    contents: str


@dataclass(frozen=True)
class LicensesDetails:
    licenses: List[LicenseView] = field(default_factory=list)


Details = Union[
    DocumentationDetails,
    ReadMeDetails,
    ModuleDetails,
    VersionsDetails,
    ImportsDetails,
    ImportedByDetails,
    LicensesDetails,
]


@dataclass(frozen=True)
class PackageContext:
    """Everything a package detail fetcher may use."""

    store: DataStore
    pkg: VersionedPackage
    pagination: PaginationParams = PaginationParams()
    now: Optional[datetime] = None


@dataclass(frozen=True)
class ModuleContext:
    """Everything a module detail fetcher may use."""

    store: DataStore
    version_info: VersionInfo
    licenses: Sequence[License] = ()
    now: Optional[datetime] = None


def transform_licenses(licenses: Sequence[License]) -> List[LicenseView]:
    return [
        LicenseView(
            types=list(lic.metadata.types),
            file_path=lic.metadata.file_path,
            anchor=license_anchor(lic.metadata.file_path),
            contents=lic.contents,
        )
        for lic in licenses
    ]


def fetch_documentation_details(ctx: PackageContext) -> DocumentationDetails:
    return DocumentationDetails(
        module_path=ctx.pkg.version_info.module_path,
        documentation_html=ctx.pkg.package.documentation_html,
    )


def _readme_details(vi: VersionInfo) -> ReadMeDetails:
    return ReadMeDetails(
        module_path=vi.module_path,
        readme_file_path=vi.readme_file_path,
        readme=vi.readme_contents,
    )


def fetch_module_details(store: DataStore, vi: VersionInfo, now: Optional[datetime] = None) -> ModuleDetails:
    """Fetch every package of the module version described by ``vi``."""
    version = store.get_version(vi.module_path, vi.version)
    packages = [
        create_package(p, vi, now)
        for p in sorted(version.packages, key=lambda p: p.path)
    ]
    return ModuleDetails(
        module_path=version.module_path,
        version=vi.version,
        packages=packages,
    )


def group_versions(versions: Sequence[VersionedPackage], now: Optional[datetime] = None) -> List[MajorVersionGroup]:
    """Group versions (newest first) by major, then by major.minor."""
    majors: Dict[str, Dict[str, List[PackageVersion]]] = {}
    for vp in versions:
        vi = vp.version_info
        minors = majors.setdefault(semver.major(vi.version), {})
        minors.setdefault(semver.major_minor(vi.version), []).append(
            PackageVersion(
                version=vi.version,
                path=vp.package.path,
                commit_time=elapsed_time(vi.commit_time, now),
            )
        )

    groups = []
    for major, minors in majors.items():
        minor_groups = [
            MinorVersionGroup(minor=minor, latest_version=patches[0].version, patch_versions=patches)
            for minor, patches in minors.items()
        ]
        groups.append(MajorVersionGroup(
            major=major,
            latest_version=minor_groups[0].latest_version,
            minor_versions=minor_groups,
        ))
    return groups


def fetch_versions_details(ctx: PackageContext) -> VersionsDetails:
    """Tagged versions of the package series, or pseudo-versions if none are tagged."""
    path = ctx.pkg.package.path
    versions = ctx.store.get_tagged_versions_for_package_series(path)
    if not versions:
        versions = ctx.store.get_pseudo_versions_for_package_series(path)
    return VersionsDetails(major_versions=group_versions(versions, ctx.now))


def fetch_imports_details(ctx: PackageContext) -> ImportsDetails:
    imports = ctx.store.get_imports(ctx.pkg.package.path, ctx.pkg.version_info.version)
    external, std = [], []
    for imp in imports:
        (std if in_std_lib(imp) else external).append(imp)
    return ImportsDetails(
        module_path=ctx.pkg.version_info.module_path,
        external_imports=external,
        std_lib=std,
    )


def fetch_imported_by_details(ctx: PackageContext) -> ImportedByDetails:
    params = ctx.pagination
    importers, total = ctx.store.get_imported_by(
        ctx.pkg.package.path,
        ctx.pkg.version_info.module_path,
        params.limit,
        params.offset,
    )
    return ImportedByDetails(
        module_path=ctx.pkg.version_info.module_path,
        imported_by=list(importers),
        pagination=Pagination.create(params, len(importers), total),
    )


def fetch_package_licenses_details(ctx: PackageContext) -> LicensesDetails:
    vi = ctx.pkg.version_info
    licenses = ctx.store.get_package_licenses(ctx.pkg.package.path, vi.module_path, vi.version)
    return LicensesDetails(licenses=transform_licenses(licenses))


PackageFetcher = Callable[[PackageContext], Details]
ModuleFetcher = Callable[[ModuleContext], Details]

PACKAGE_DETAIL_FETCHERS: Dict[PackageTab, PackageFetcher] = {
    PackageTab.DOC: fetch_documentation_details,
    PackageTab.README: lambda ctx: _readme_details(ctx.pkg.version_info),
    PackageTab.MODULE: lambda ctx: fetch_module_details(ctx.store, ctx.pkg.version_info, ctx.now),
    PackageTab.VERSIONS: fetch_versions_details,
    PackageTab.IMPORTS: fetch_imports_details,
    PackageTab.IMPORTED_BY: fetch_imported_by_details,
    PackageTab.LICENSES: fetch_package_licenses_details,
}


def _module_readme(ctx: ModuleContext) -> ReadMeDetails:
    return _readme_details(ctx.version_info)


# TODO: give modfile, versions, dependents, dependencies and importedby their
# own module views; until then they show the README.
MODULE_DETAIL_FETCHERS: Dict[ModuleTab, ModuleFetcher] = {
    ModuleTab.PACKAGES: lambda ctx: fetch_module_details(ctx.store, ctx.version_info, ctx.now),
    ModuleTab.LICENSES: lambda ctx: LicensesDetails(licenses=transform_licenses(ctx.licenses)),
    ModuleTab.README: _module_readme,
    ModuleTab.MODFILE: _module_readme,
    ModuleTab.VERSIONS: _module_readme,
    ModuleTab.DEPENDENTS: _module_readme,
    ModuleTab.DEPENDENCIES: _module_readme,
    ModuleTab.IMPORTED_BY: _module_readme,
}


def fetch_details_for_package(tab: PackageTab, ctx: PackageContext) -> Details:
    """Return tab details by delegating to the tab's fetcher.

    Raises:
        InternalBug: If the tab has no fetcher.
    """
    fetcher = PACKAGE_DETAIL_FETCHERS.get(tab)
    if fetcher is None:
        raise InternalBug(f"BUG: unable to fetch details: unknown tab {tab!r}")
    return fetcher(ctx)


def fetch_details_for_module(tab: ModuleTab, ctx: ModuleContext) -> Details:
    """Return module tab details by delegating to the tab's fetcher.

    Raises:
        InternalBug: If the tab has no fetcher.
    """
    fetcher = MODULE_DETAIL_FETCHERS.get(tab)
    if fetcher is None:
        raise InternalBug(f"BUG: unable to fetch details: unknown tab {tab!r}")
    return fetcher(ctx)
