"""Details frontend HTTP server using aiohttp."""

from __future__ import annotations

import asyncio
import logging
import signal
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Dict, Optional

from aiohttp import web

from common.errors import PageError
from constants import Constants
from store.base import DataStore

from .page import DetailsHandler, DetailsPage
from .pagination import PaginationParams
from .tabs import TabRegistries

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
    """Configuration for the details server."""

    host: str = Constants.DEFAULT_HOST
    port: int = Constants.DEFAULT_PORT
    store_file: Optional[str] = None
    store_url: Optional[str] = None
    imported_by_limit: int = Constants.IMPORTED_BY_PAGE_SIZE
    timeout: int = Constants.REQUEST_TIMEOUT

    @classmethod
    def from_args(cls, args: Any, file_config: Optional[Dict[str, Any]] = None) -> "ServerConfig":
        """Create config from CLI arguments over an optional config file.

        Args:
            args: Parsed CLI arguments namespace.
            file_config: Values loaded from the config file, if any.

        Returns:
            ServerConfig instance.
        """
        config = cls()
        for key, value in (file_config or {}).items():
            if hasattr(config, key):
                setattr(config, key, value)
            else:
                logger.warning("Ignoring unknown config key: %s", key)

        # CLI values win over the config file
        for key in ("host", "port", "store_file", "store_url", "imported_by_limit", "timeout"):
            value = getattr(args, key.upper(), None)
            if value is not None:
                setattr(config, key, value)
        return config


class DetailsServer:
    """HTTP server for package and module details pages.

    Serves ``/pkg/<import-path>[@<version>]`` and
    ``/mod/<module-path>@<version>``; the ``tab`` query parameter selects
    the view. Pages are returned as JSON for the renderer.
    """

    def __init__(self, config: ServerConfig, store: DataStore, tabs: Optional[TabRegistries] = None):
        """Initialize the server.

        Args:
            config: Server configuration.
            store: Data store queried for every request.
            tabs: Tab registries; the defaults when omitted.
        """
        self._config = config
        self._handler = DetailsHandler(store, tabs or TabRegistries.default())
        self._app: Optional[web.Application] = None
        self._runner: Optional[web.AppRunner] = None

    def _create_app(self) -> web.Application:
        """Create the aiohttp application."""
        app = web.Application()
        app.router.add_get(Constants.HEALTH_PATH, self._health_check)
        app.router.add_get("/pkg/{path:.*}", self._handle_package)
        app.router.add_get("/mod/{path:.*}", self._handle_module)
        return app

    async def _health_check(self, request: web.Request) -> web.Response:
        """Health check endpoint."""
        return web.json_response({
            "status": "ok",
            "package_tabs": [t.name for t in self._handler.tabs.package],
            "module_tabs": [t.name for t in self._handler.tabs.module],
        })

    async def _handle_package(self, request: web.Request) -> web.Response:
        """Handle ``/pkg/<import-path>[@<version>]?tab=<tab>``."""
        url_path = request.path[len("/pkg"):]
        tab = request.query.get("tab", "")
        pagination = PaginationParams.from_query(request.query, self._config.imported_by_limit)
        return self._serve(
            request,
            lambda: self._handler.package_page(url_path, tab, pagination),
        )

    async def _handle_module(self, request: web.Request) -> web.Response:
        """Handle ``/mod/<module-path>@<version>?tab=<tab>``."""
        url_path = request.path[len("/mod"):]
        tab = request.query.get("tab", "")
        return self._serve(request, lambda: self._handler.module_page(url_path, tab))

    def _serve(self, request: web.Request, build) -> web.Response:
        """Build a page and answer with it, or with the matching error page."""
        try:
            page: DetailsPage = build()
        except PageError as err:
            if err.status >= 500:
                logger.error("%s %s: %s", request.method, request.path, err, exc_info=err)
            else:
                logger.info("%s %s: %s", request.method, request.path, err)
            return self._error_response(err.status, err.message, err.secondary_message)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Unexpected error serving %s", request.path)
            return self._error_response(HTTPStatus.INTERNAL_SERVER_ERROR)

        logger.info("Served %s %s -> %s", request.method, request.path, page.template_name)
        return web.json_response(page.to_dict())

    def _error_response(
        self,
        status: int,
        message: Optional[str] = None,
        secondary_message: Optional[str] = None,
    ) -> web.Response:
        """Create an error page response.

        5xx responses never carry the underlying cause.
        """
        status = HTTPStatus(status)
        body = {
            "status": status.value,
            "error": status.phrase,
            "message": message if status < 500 and message else status.phrase,
        }
        if secondary_message and status < 500:
            body["secondary_message"] = secondary_message
        return web.json_response(body, status=status.value)

    async def start(self) -> None:
        """Start the server."""
        self._app = self._create_app()
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()

        site = web.TCPSite(
            self._runner,
            self._config.host,
            self._config.port,
        )
        await site.start()

        logger.info(
            "Details server listening on http://%s:%s",
            self._config.host, self._config.port,
        )

    async def stop(self) -> None:
        """Stop the server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._app = None


def run_server_sync(config: ServerConfig, store: DataStore) -> None:
    """Run the details server synchronously.

    Installs signal handlers for SIGTERM and SIGINT for clean shutdown.

    Args:
        config: Server configuration.
        store: Data store to serve from.
    """
    server = DetailsServer(config, store)
    loop = asyncio.new_event_loop()

    async def run():
        await server.start()
        stop_event = asyncio.Event()
        running_loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            running_loop.add_signal_handler(sig, stop_event.set)
        await stop_event.wait()
        logger.info("Shutdown signal received, stopping...")
        await server.stop()

    try:
        loop.run_until_complete(run())
    except KeyboardInterrupt:
        # Fallback for platforms where signal handlers don't work (Windows)
        loop.run_until_complete(server.stop())
    finally:
        loop.close()
        logger.info("Details server shutdown complete")
