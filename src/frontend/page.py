"""Request pipeline producing the details page view model.

parse -> resolve -> header -> tab lookup -> redistributability gate ->
detail fetch -> ``DetailsPage``. Every outcome other than a page is raised
as a ``PageError`` subclass for the HTTP layer to map.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from common.errors import (
    InfrastructureFailure,
    MalformedInput,
    NotFound,
    StoreError,
)
from common.logging_utils import extra_context, is_debug_enabled
from constants import Namespaces
from store.base import DataStore
from versioning import semver
from versioning.parser import parse_module_path_and_version

from .details import (
    Details,
    ModuleContext,
    PackageContext,
    fetch_details_for_module,
    fetch_details_for_package,
)
from .header import Module, Package, create_module, create_package, package_title
from .pagination import PaginationParams
from .resolver import resolve_module, resolve_package
from .tabs import ModuleTab, PackageTab, TabRegistries, TabSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetailsPage:
    """View model handed to the renderer for a package or module page."""

    title: str
    settings: TabSettings
    header: Union[Package, Module]
    details: Optional[Details]
    can_show_details: bool
    tabs: List[TabSettings] = field(default_factory=list)
    namespace: str = Namespaces.PACKAGE.value

    @property
    def template_name(self) -> str:
        return self.settings.template_name

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-serializable form of the page."""
        return {
            "title": self.title,
            "namespace": self.namespace,
            "template": self.settings.template_name,
            "settings": asdict(self.settings),
            "header": asdict(self.header),
            "can_show_details": self.can_show_details,
            "details_kind": self.settings.name if self.details is not None else None,
            "details": asdict(self.details) if self.details is not None else None,
            "tabs": [asdict(t) for t in self.tabs],
        }


def suggested_search(path: str) -> str:
    return f"To search for packages like {path}, see /search?q={path}."


class DetailsHandler:
    """Builds details pages from a store and the startup tab registries."""

    def __init__(self, store: DataStore, tabs: Optional[TabRegistries] = None):
        self._store = store
        self._tabs = tabs or TabRegistries.default()

    @property
    def tabs(self) -> TabRegistries:
        return self._tabs

    def package_page(
        self,
        url_path: str,
        tab: str = "",
        pagination: Optional[PaginationParams] = None,
        now: Optional[datetime] = None,
    ) -> DetailsPage:
        """Build the page for ``/pkg/<import-path>[@<version>]?tab=<tab>``.

        Raises:
            PageError: MalformedInput, PathNotFound, VersionMismatch,
                InternalBug or InfrastructureFailure.
        """
        path, version = parse_module_path_and_version(url_path)
        if version and not semver.is_valid(version):
            msg = f'"{version}" is not a valid semantic version.'
            raise MalformedInput(msg, message=msg, secondary_message=suggested_search(path))

        pkg = resolve_package(self._store, path, version)
        header = create_package(pkg.package, pkg.version_info, now)

        redistributable = pkg.is_redistributable
        default = PackageTab.DOC if redistributable else PackageTab.MODULE
        selected, settings = self._tabs.package.lookup(tab, default.value)
        can_show_details = redistributable or settings.always_show_details

        details = None
        if can_show_details:
            ctx = PackageContext(
                store=self._store,
                pkg=pkg,
                pagination=pagination or PaginationParams(),
                now=now,
            )
            details = self._fetch(selected, lambda: fetch_details_for_package(selected, ctx))

        self._log_page(Namespaces.PACKAGE, path, pkg.version_info.version, selected, can_show_details)
        return DetailsPage(
            title=package_title(pkg.package),
            settings=settings,
            header=header,
            details=details,
            can_show_details=can_show_details,
            tabs=list(self._tabs.package.settings),
            namespace=Namespaces.PACKAGE.value,
        )

    def module_page(
        self,
        url_path: str,
        tab: str = "",
        now: Optional[datetime] = None,
    ) -> DetailsPage:
        """Build the page for ``/mod/<module-path>@<version>?tab=<tab>``.

        Raises:
            PageError: MalformedInput, PathNotFound, InternalBug or
                InfrastructureFailure.
        """
        path, version = parse_module_path_and_version(url_path)
        if version and not semver.is_valid(version):
            msg = f'"{version}" is not a valid semantic version.'
            raise MalformedInput(msg, message=msg)

        vi = resolve_module(self._store, path, version)
        try:
            licenses = self._store.get_module_licenses(path, version)
        except (NotFound, StoreError) as exc:
            raise InfrastructureFailure(
                f"error getting module licenses for {path}@{version}: {exc}"
            ) from exc

        header = create_module(vi, [lic.metadata for lic in licenses], now)

        selected, settings = self._tabs.module.lookup(tab, ModuleTab.README.value)
        can_show_details = header.is_redistributable or settings.always_show_details

        details = None
        if can_show_details:
            ctx = ModuleContext(store=self._store, version_info=vi, licenses=licenses, now=now)
            details = self._fetch(selected, lambda: fetch_details_for_module(selected, ctx))

        self._log_page(Namespaces.MODULE, path, version, selected, can_show_details)
        return DetailsPage(
            title=vi.module_path,
            settings=settings,
            header=header,
            details=details,
            can_show_details=can_show_details,
            tabs=list(self._tabs.module.settings),
            namespace=Namespaces.MODULE.value,
        )

    def _fetch(self, tab, fetch) -> Details:
        """Run a detail fetcher, classifying store failures as infrastructure errors."""
        try:
            return fetch()
        except (NotFound, StoreError) as exc:
            raise InfrastructureFailure(f"error fetching page for {tab.value!r}: {exc}") from exc

    def _log_page(self, namespace, path, version, tab, can_show_details) -> None:
        if is_debug_enabled(logger):
            logger.debug(
                "Details page built",
                extra=extra_context(
                    event="page",
                    component="details",
                    action=namespace.value,
                    target=f"{path}@{version}",
                    tab=tab.value,
                    can_show_details=can_show_details,
                )
            )
