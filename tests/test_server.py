"""Tests for the details HTTP server."""

import asyncio
from argparse import Namespace
from unittest.mock import MagicMock

import aiohttp
import aiohttp.test_utils

from common.errors import StoreError
from frontend.server import DetailsServer, ServerConfig
from store.base import DataStore


def _get(server, path, params=None):
    """Issue one GET against the server's app and return (status, json body)."""

    async def _run():
        app = server._create_app()
        async with aiohttp.test_utils.TestServer(app) as ts:
            async with aiohttp.ClientSession() as session:
                resp = await session.get(f"http://{ts.host}:{ts.port}{path}", params=params)
                return resp.status, await resp.json()

    return asyncio.run(_run())


class TestDetailsServer:
    """End-to-end tests through the aiohttp application."""

    def setup_method(self):
        self.config = ServerConfig(port=0, imported_by_limit=1)

    def test_health_check_endpoint(self, store):
        """Test health check returns 200 with the registered tabs."""
        status, data = _get(DetailsServer(self.config, store), "/_discovery/health")
        assert status == 200
        assert data["status"] == "ok"
        assert data["package_tabs"][0] == "doc"
        assert "packages" in data["module_tabs"]

    def test_package_page(self, store):
        status, data = _get(DetailsServer(self.config, store), "/pkg/example.com/foo@v1.0.0")
        assert status == 200
        assert data["title"] == "Package foo"
        assert data["template"] == "pkg_doc.tmpl"
        assert data["header"]["module"]["version"] == "v1.0.0"
        assert data["details"]["documentation_html"] == "<p>foo v1.0.0 docs</p>"

    def test_package_tab_and_pagination(self, store):
        """Test the configured page size applies to imported-by."""
        status, data = _get(
            DetailsServer(self.config, store),
            "/pkg/example.com/foo/bar",
            params={"tab": "importedby"},
        )
        assert status == 200
        assert data["details_kind"] == "importedby"
        assert data["details"]["imported_by"] == ["example.com/user/a"]
        assert data["details"]["pagination"]["next_page"] == 2

    def test_module_page(self, store):
        status, data = _get(
            DetailsServer(self.config, store),
            "/mod/example.com/foo@v1.1.0",
            params={"tab": "packages"},
        )
        assert status == 200
        assert data["namespace"] == "mod"
        assert len(data["details"]["packages"]) == 3

    def test_bad_version_is_400(self, store):
        status, data = _get(DetailsServer(self.config, store), "/pkg/example.com/foo@master")
        assert status == 400
        assert data["message"] == '"master" is not a valid semantic version.'
        assert "search" in data["secondary_message"]

    def test_missing_module_version_is_400(self, store):
        status, data = _get(DetailsServer(self.config, store), "/mod/example.com/foo")
        assert status == 400
        assert data["message"] == 'Version for "example.com/foo" must be specified.'

    def test_unknown_path_is_404(self, store):
        status, data = _get(DetailsServer(self.config, store), "/pkg/example.com/nothing")
        assert status == 404
        assert data["message"] == "Not Found"

    def test_version_mismatch_is_404_with_hint(self, store):
        status, data = _get(DetailsServer(self.config, store), "/pkg/example.com/foo@v9.9.9")
        assert status == 404
        assert data["message"] == "Package example.com/foo@v9.9.9 is not available."
        assert data["secondary_message"].endswith("/pkg/example.com/foo?tab=versions.")

    def test_store_failure_is_generic_500(self):
        """Test that 5xx responses do not leak the underlying error."""
        failing = MagicMock(spec=DataStore)
        failing.get_latest_package.side_effect = StoreError("password=hunter2")
        status, data = _get(DetailsServer(self.config, failing), "/pkg/example.com/foo")
        assert status == 500
        assert data["message"] == "Internal Server Error"
        assert "hunter2" not in str(data)
        assert "secondary_message" not in data

    def test_unexpected_exception_is_500(self):
        failing = MagicMock(spec=DataStore)
        failing.get_latest_package.side_effect = RuntimeError("boom")
        status, data = _get(DetailsServer(self.config, failing), "/pkg/example.com/foo")
        assert status == 500
        assert data["error"] == "Internal Server Error"


class TestServerLifecycle:
    """Tests for starting and stopping the server."""

    def test_start_then_stop(self, store):
        server = DetailsServer(ServerConfig(port=0), store)

        async def _run():
            await server.start()
            assert server._runner is not None
            await server.stop()
            assert server._runner is None
            # A second stop is a no-op.
            await server.stop()

        asyncio.run(_run())

    def test_stop_before_start(self, store):
        server = DetailsServer(ServerConfig(port=0), store)
        asyncio.run(server.stop())
        assert server._runner is None


class TestServerConfig:
    """Tests for ServerConfig.from_args."""

    def _args(self, **overrides):
        values = dict(HOST=None, PORT=None, STORE_FILE=None, STORE_URL=None,
                      IMPORTED_BY_LIMIT=None, TIMEOUT=None)
        values.update(overrides)
        return Namespace(**values)

    def test_defaults(self):
        config = ServerConfig.from_args(self._args())
        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.imported_by_limit == 100

    def test_file_config_applied(self):
        config = ServerConfig.from_args(self._args(), {"port": 9000, "store_url": "http://meta"})
        assert config.port == 9000
        assert config.store_url == "http://meta"

    def test_cli_overrides_file(self):
        config = ServerConfig.from_args(self._args(PORT=7000), {"port": 9000})
        assert config.port == 7000

    def test_unknown_file_key_ignored(self, caplog):
        config = ServerConfig.from_args(self._args(), {"colour": "blue"})
        assert not hasattr(config, "colour")
        assert "colour" in caplog.text
