"""Version resolution: turn (path, version) into a concrete store record.

Store errors are classified here: ``NotFound`` drives the fallback logic,
anything else becomes ``InfrastructureFailure``.
"""

from __future__ import annotations

import logging

from common.errors import (
    InfrastructureFailure,
    MalformedInput,
    NotFound,
    PathNotFound,
    StoreError,
    VersionMismatch,
)
from store.base import DataStore
from store.models import VersionedPackage, VersionInfo

logger = logging.getLogger(__name__)


def resolve_package(store: DataStore, path: str, version: str) -> VersionedPackage:
    """Return the package at ``path`` and ``version``, or its latest version.

    Raises:
        PathNotFound: If no version of the package exists, or the requested
            version does not and neither does any other.
        VersionMismatch: If the package exists, but not at ``version``.
        InfrastructureFailure: If any store call fails for another reason.
    """
    if not version:
        try:
            return store.get_latest_package(path)
        except NotFound as exc:
            raise PathNotFound(f"package {path!r} not found") from exc
        except StoreError as exc:
            raise InfrastructureFailure(f"get_latest_package({path!r}): {exc}") from exc

    try:
        return store.get_package(path, version)
    except NotFound:
        pass
    except StoreError as exc:
        raise InfrastructureFailure(f"get_package({path!r}, {version!r}): {exc}") from exc

    # Only the outcome of this probe matters, not the package it returns.
    try:
        store.get_latest_package(path)
    except NotFound as exc:
        raise PathNotFound(f"package {path}@{version} not found") from exc
    except StoreError as exc:
        raise InfrastructureFailure(
            f"get_latest_package({path!r}) after missing {version!r}: {exc}"
        ) from exc

    logger.debug("Package %s exists, but not at %s", path, version)
    raise VersionMismatch(
        f"package {path}@{version} not found, other versions exist",
        message=f"Package {path}@{version} is not available.",
        secondary_message=(
            "There are other versions of this package that are! "
            f"To view them, see /pkg/{path}?tab=versions."
        ),
    )


def resolve_module(store: DataStore, path: str, version: str) -> VersionInfo:
    """Return the version info of module ``path`` at ``version``.

    Raises:
        MalformedInput: If ``version`` is empty.
        PathNotFound: If the module version does not exist.
        InfrastructureFailure: If the store fails for another reason.
    """
    if not version:
        msg = f'Version for "{path}" must be specified.'
        raise MalformedInput(msg, message=msg)
    try:
        return store.get_version_info(path, version)
    except NotFound as exc:
        raise PathNotFound(f"module {path}@{version} not found") from exc
    except StoreError as exc:
        raise InfrastructureFailure(f"get_version_info({path!r}, {version!r}): {exc}") from exc
