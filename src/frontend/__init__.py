"""Details frontend package.

Resolves ``/pkg`` and ``/mod`` URL paths to a package or module version,
picks the requested tab, gates content by redistributability and builds
the view model handed to the renderer.
"""

from .tabs import ModuleTab, PackageTab, TabRegistries, TabRegistry, TabSettings
from .page import DetailsHandler, DetailsPage
from .server import DetailsServer, ServerConfig

__all__ = [
    "ModuleTab",
    "PackageTab",
    "TabRegistries",
    "TabRegistry",
    "TabSettings",
    "DetailsHandler",
    "DetailsPage",
    "DetailsServer",
    "ServerConfig",
]
