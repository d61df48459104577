"""Data store client for a remote JSON metadata service."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Dict, List, Optional, Tuple

from common.errors import NotFound, StoreError
from common.http_client import get_json

from .base import DataStore
from .models import License, Version, VersionedPackage, VersionInfo

logger = logging.getLogger(__name__)


class HttpStore(DataStore):
    """A ``DataStore`` backed by a metadata service.

    Endpoints take the path (and ``@version`` where relevant) in the URL and
    answer with JSON in the shape accepted by the models' ``from_dict``.
    A 404 answer means the record does not exist.
    """

    def __init__(self, base_url: str, timeout: Optional[float] = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, endpoint: str, path: str, version: str = "") -> str:
        target = urllib.parse.quote(path, safe="/")
        if version:
            target += "@" + urllib.parse.quote(version, safe="")
        return f"{self._base_url}/{endpoint}/{target}"

    def _fetch(self, endpoint: str, path: str, version: str = "", params: Optional[Dict[str, Any]] = None) -> Any:
        url = self._url(endpoint, path, version)
        status, body = get_json(url, context="store", params=params, timeout=self._timeout)
        if status == 404:
            raise NotFound(f"{endpoint}: {path}@{version or 'latest'} not found")
        if status != 200 or body is None:
            raise StoreError(f"{endpoint}: unexpected status {status} for {path}@{version or 'latest'}")
        return body

    def _decode(self, endpoint: str, build, body: Any) -> Any:
        try:
            return build(body)
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreError(f"{endpoint}: malformed response: {exc}") from exc

    def get_latest_package(self, path: str) -> VersionedPackage:
        body = self._fetch("latest-package", path)
        return self._decode("latest-package", VersionedPackage.from_dict, body)

    def get_package(self, path: str, version: str) -> VersionedPackage:
        body = self._fetch("package", path, version)
        return self._decode("package", VersionedPackage.from_dict, body)

    def get_version_info(self, module_path: str, version: str) -> VersionInfo:
        body = self._fetch("version-info", module_path, version)
        return self._decode("version-info", VersionInfo.from_dict, body)

    def get_module_licenses(self, module_path: str, version: str) -> List[License]:
        body = self._fetch("module-licenses", module_path, version)
        return self._decode("module-licenses", lambda b: [License.from_dict(d) for d in b], body)

    def get_version(self, module_path: str, version: str) -> Version:
        body = self._fetch("version", module_path, version)
        return self._decode("version", Version.from_dict, body)

    def get_package_licenses(self, path: str, module_path: str, version: str) -> List[License]:
        body = self._fetch("package-licenses", path, version, params={"module": module_path})
        return self._decode("package-licenses", lambda b: [License.from_dict(d) for d in b], body)

    def get_imports(self, path: str, version: str) -> List[str]:
        body = self._fetch("imports", path, version)
        return self._decode("imports", lambda b: [str(p) for p in b], body)

    def get_imported_by(
        self, path: str, module_path: str, limit: int, offset: int = 0
    ) -> Tuple[List[str], int]:
        body = self._fetch(
            "imported-by", path,
            params={"module": module_path, "limit": limit, "offset": offset},
        )
        return self._decode(
            "imported-by",
            lambda b: ([str(p) for p in b["paths"]], int(b["total"])),
            body,
        )

    def get_tagged_versions_for_package_series(self, path: str) -> List[VersionedPackage]:
        body = self._fetch("tagged-versions", path)
        return self._decode("tagged-versions", lambda b: [VersionedPackage.from_dict(d) for d in b], body)

    def get_pseudo_versions_for_package_series(self, path: str) -> List[VersionedPackage]:
        body = self._fetch("pseudo-versions", path)
        return self._decode("pseudo-versions", lambda b: [VersionedPackage.from_dict(d) for d in b], body)
