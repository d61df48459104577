"""Tests for version resolution and its error classification."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from common.errors import (
    InfrastructureFailure,
    MalformedInput,
    NotFound,
    PathNotFound,
    StoreError,
    VersionMismatch,
)
from frontend.resolver import resolve_module, resolve_package
from store.base import DataStore
from store.models import Package, VersionedPackage, VersionInfo

VI = VersionInfo(
    module_path="example.com/foo",
    version="v1.0.0",
    commit_time=datetime(2019, 1, 1, tzinfo=timezone.utc),
)
PKG = VersionedPackage(package=Package(name="foo", path="example.com/foo"), version_info=VI)


class TestResolvePackage:
    """Tests for resolve_package."""

    def setup_method(self):
        self.store = MagicMock(spec=DataStore)

    def test_latest_when_no_version(self):
        self.store.get_latest_package.return_value = PKG
        assert resolve_package(self.store, "example.com/foo", "") is PKG
        self.store.get_package.assert_not_called()

    def test_latest_not_found(self):
        self.store.get_latest_package.side_effect = NotFound("missing")
        with pytest.raises(PathNotFound):
            resolve_package(self.store, "example.com/foo", "")

    def test_latest_store_error(self):
        self.store.get_latest_package.side_effect = StoreError("db down")
        with pytest.raises(InfrastructureFailure) as excinfo:
            resolve_package(self.store, "example.com/foo", "")
        assert excinfo.value.status == 500

    def test_exact_version(self):
        self.store.get_package.return_value = PKG
        assert resolve_package(self.store, "example.com/foo", "v1.0.0") is PKG
        self.store.get_package.assert_called_once_with("example.com/foo", "v1.0.0")
        self.store.get_latest_package.assert_not_called()

    def test_exact_version_store_error(self):
        self.store.get_package.side_effect = StoreError("db down")
        with pytest.raises(InfrastructureFailure):
            resolve_package(self.store, "example.com/foo", "v1.0.0")
        self.store.get_latest_package.assert_not_called()

    def test_missing_version_other_versions_exist(self):
        """A miss at one version with a hit at latest is a version mismatch."""
        self.store.get_package.side_effect = NotFound("missing")
        self.store.get_latest_package.return_value = PKG
        with pytest.raises(VersionMismatch) as excinfo:
            resolve_package(self.store, "example.com/foo", "v9.9.9")
        err = excinfo.value
        assert err.status == 404
        assert err.message == "Package example.com/foo@v9.9.9 is not available."
        assert err.secondary_message == (
            "There are other versions of this package that are! "
            "To view them, see /pkg/example.com/foo?tab=versions."
        )
        self.store.get_latest_package.assert_called_once_with("example.com/foo")

    def test_missing_version_and_path(self):
        self.store.get_package.side_effect = NotFound("missing")
        self.store.get_latest_package.side_effect = NotFound("missing")
        with pytest.raises(PathNotFound) as excinfo:
            resolve_package(self.store, "example.com/foo", "v9.9.9")
        assert not isinstance(excinfo.value, VersionMismatch)
        assert self.store.get_latest_package.call_count == 1

    def test_probe_store_error(self):
        self.store.get_package.side_effect = NotFound("missing")
        self.store.get_latest_package.side_effect = StoreError("timeout")
        with pytest.raises(InfrastructureFailure):
            resolve_package(self.store, "example.com/foo", "v9.9.9")


class TestResolveModule:
    """Tests for resolve_module."""

    def setup_method(self):
        self.store = MagicMock(spec=DataStore)

    def test_version_required(self):
        with pytest.raises(MalformedInput) as excinfo:
            resolve_module(self.store, "example.com/foo", "")
        assert excinfo.value.message == 'Version for "example.com/foo" must be specified.'
        self.store.get_version_info.assert_not_called()

    def test_found(self):
        self.store.get_version_info.return_value = VI
        assert resolve_module(self.store, "example.com/foo", "v1.0.0") is VI

    def test_not_found(self):
        self.store.get_version_info.side_effect = NotFound("missing")
        with pytest.raises(PathNotFound):
            resolve_module(self.store, "example.com/foo", "v1.0.0")

    def test_store_error(self):
        self.store.get_version_info.side_effect = StoreError("boom")
        with pytest.raises(InfrastructureFailure):
            resolve_module(self.store, "example.com/foo", "v1.0.0")
