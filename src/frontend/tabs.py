"""Tab settings and the immutable per-namespace tab registries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple, Type


class PackageTab(Enum):
    """Views available on a package details page."""

    DOC = "doc"
    README = "readme"
    MODULE = "module"
    VERSIONS = "versions"
    IMPORTS = "imports"
    IMPORTED_BY = "importedby"
    LICENSES = "licenses"


class ModuleTab(Enum):
    """Views a module details page can dispatch to."""

    README = "readme"
    PACKAGES = "packages"
    VERSIONS = "versions"
    LICENSES = "licenses"
    MODFILE = "modfile"
    DEPENDENTS = "dependents"
    DEPENDENCIES = "dependencies"
    IMPORTED_BY = "importedby"


@dataclass(frozen=True)
class TabSettings:
    """Tab-specific metadata.

    Attributes:
        name: Tab name used in the URL.
        display_name: Formatted tab name.
        always_show_details: Whether the tab content can be shown even if the
            content is not redistributable.
        template_name: Template used to render the tab.
    """

    name: str
    display_name: str
    template_name: str
    always_show_details: bool = False


PACKAGE_TAB_SETTINGS: Tuple[TabSettings, ...] = (
    TabSettings(name="doc", display_name="Doc", template_name="pkg_doc.tmpl"),
    TabSettings(name="readme", display_name="README", template_name="readme.tmpl"),
    TabSettings(name="module", display_name="Module", template_name="module.tmpl",
                always_show_details=True),
    TabSettings(name="versions", display_name="Versions", template_name="pkg_versions.tmpl",
                always_show_details=True),
    TabSettings(name="imports", display_name="Imports", template_name="pkg_imports.tmpl",
                always_show_details=True),
    TabSettings(name="importedby", display_name="Imported By", template_name="pkg_importedby.tmpl",
                always_show_details=True),
    TabSettings(name="licenses", display_name="Licenses", template_name="licenses.tmpl"),
)

MODULE_TAB_SETTINGS: Tuple[TabSettings, ...] = (
    TabSettings(name="readme", display_name="README", template_name="readme.tmpl"),
    TabSettings(name="packages", display_name="Packages", template_name="module.tmpl",
                always_show_details=True),
    TabSettings(name="versions", display_name="Versions", template_name="not_implemented.tmpl",
                always_show_details=True),
    TabSettings(name="licenses", display_name="Licenses", template_name="licenses.tmpl"),
)


class TabRegistry:
    """Ordered, read-only collection of tab settings for one namespace.

    Built once at startup; lookups never mutate it.
    """

    def __init__(self, tab_type: Type[Enum], settings: Iterable[TabSettings]):
        self._tab_type = tab_type
        self._settings = tuple(settings)
        lookup = {}
        for s in self._settings:
            if s.name in lookup:
                raise ValueError(f"duplicate tab name {s.name!r}")
            try:
                tab_type(s.name)
            except ValueError as exc:
                raise ValueError(f"tab {s.name!r} is not a {tab_type.__name__}") from exc
            lookup[s.name] = s
        self._lookup: Mapping[str, TabSettings] = MappingProxyType(lookup)

    @property
    def settings(self) -> Tuple[TabSettings, ...]:
        """All settings in display order."""
        return self._settings

    @property
    def tab_type(self) -> Type[Enum]:
        return self._tab_type

    def __contains__(self, name: object) -> bool:
        return name in self._lookup

    def __iter__(self):
        return iter(self._settings)

    def get(self, name: str) -> Optional[TabSettings]:
        return self._lookup.get(name)

    def lookup(self, name: str, default: str) -> Tuple[Enum, TabSettings]:
        """Return the tab and settings for ``name``, or for ``default`` if unknown.

        Raises:
            KeyError: If ``default`` itself is not registered.
        """
        settings = self._lookup.get(name)
        if settings is None:
            settings = self._lookup[default]
        return self._tab_type(settings.name), settings


@dataclass(frozen=True)
class TabRegistries:
    """The package and module registries, passed into request handling."""

    package: TabRegistry
    module: TabRegistry

    @classmethod
    def default(cls) -> "TabRegistries":
        return cls(
            package=TabRegistry(PackageTab, PACKAGE_TAB_SETTINGS),
            module=TabRegistry(ModuleTab, MODULE_TAB_SETTINGS),
        )
