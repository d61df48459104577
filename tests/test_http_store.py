"""Tests for the remote metadata store client."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from common import http_client
from common.errors import NotFound, StoreError
from store.http import HttpStore

BASE = "http://meta.example.com/api/"

VERSION_INFO = {
    "module_path": "example.com/foo",
    "version": "v1.0.0",
    "commit_time": "2019-01-01T00:00:00Z",
    "repository_url": "https://example.com/foo",
}


def _response(status, body=None, text=None):
    res = MagicMock()
    res.status_code = status
    res.text = text if text is not None else json.dumps(body)
    return res


class TestHttpStore:
    """Tests for HttpStore requests and response handling."""

    def setup_method(self):
        self.store = HttpStore(BASE, timeout=5)
        self.calls = []

    def _serve(self, monkeypatch, response):
        def fake_get(url, timeout=None, **kwargs):
            self.calls.append((url, timeout, kwargs))
            if isinstance(response, Exception):
                raise response
            return response

        monkeypatch.setattr(http_client.requests, "get", fake_get)

    def test_version_info(self, monkeypatch):
        self._serve(monkeypatch, _response(200, VERSION_INFO))
        vi = self.store.get_version_info("example.com/foo", "v1.0.0")
        assert vi.version == "v1.0.0"
        assert vi.commit_time.year == 2019
        url, timeout, _ = self.calls[0]
        assert url == "http://meta.example.com/api/version-info/example.com/foo@v1.0.0"
        assert timeout == 5

    def test_latest_package(self, monkeypatch):
        body = {
            "package": {"name": "foo", "path": "example.com/foo",
                        "licenses": [{"types": ["MIT"], "file_path": "LICENSE"}]},
            "version_info": VERSION_INFO,
        }
        self._serve(monkeypatch, _response(200, body))
        pkg = self.store.get_latest_package("example.com/foo")
        assert pkg.is_redistributable
        assert self.calls[0][0].endswith("/latest-package/example.com/foo")

    def test_imported_by(self, monkeypatch):
        self._serve(monkeypatch, _response(200, {"paths": ["example.com/user/a"], "total": 7}))
        paths, total = self.store.get_imported_by("example.com/foo/bar", "example.com/foo", 1, 3)
        assert paths == ["example.com/user/a"]
        assert total == 7
        assert self.calls[0][2]["params"] == {"module": "example.com/foo", "limit": 1, "offset": 3}

    def test_not_found(self, monkeypatch):
        self._serve(monkeypatch, _response(404, text="not found"))
        with pytest.raises(NotFound):
            self.store.get_package("example.com/foo", "v9.9.9")

    def test_server_error(self, monkeypatch):
        self._serve(monkeypatch, _response(503, text="unavailable"))
        with pytest.raises(StoreError) as excinfo:
            self.store.get_imports("example.com/foo", "v1.0.0")
        assert not isinstance(excinfo.value, NotFound)

    def test_invalid_json(self, monkeypatch):
        self._serve(monkeypatch, _response(200, text="<html>"))
        with pytest.raises(StoreError):
            self.store.get_version_info("example.com/foo", "v1.0.0")

    def test_malformed_body(self, monkeypatch):
        self._serve(monkeypatch, _response(200, {"unexpected": True}))
        with pytest.raises(StoreError):
            self.store.get_version_info("example.com/foo", "v1.0.0")

    def test_timeout(self, monkeypatch):
        self._serve(monkeypatch, requests.Timeout("slow"))
        with pytest.raises(StoreError):
            self.store.get_version("example.com/foo", "v1.0.0")

    def test_connection_error(self, monkeypatch):
        self._serve(monkeypatch, requests.ConnectionError("refused"))
        with pytest.raises(StoreError):
            self.store.get_module_licenses("example.com/foo", "v1.0.0")

    def test_path_is_quoted(self, monkeypatch):
        self._serve(monkeypatch, _response(200, []))
        self.store.get_tagged_versions_for_package_series("example.com/a b")
        assert self.calls[0][0].endswith("/tagged-versions/example.com/a%20b")
