"""Command-line glue for the details server.

Loads the config file, selects the data store and runs the aiohttp server.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, Optional

import yaml

from common.errors import StoreError
from common.logging_utils import configure_logging
from constants import Constants, ExitCodes
from frontend.server import ServerConfig, run_server_sync
from store.base import DataStore
from store.http import HttpStore
from store.memory import MemoryStore, load_store_file

logger = logging.getLogger(__name__)


def _load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load server configuration from a YAML or JSON file.

    Args:
        config_path: Path to the config file.

    Returns:
        The ``server`` section of the file, or the whole mapping.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}
    if isinstance(data, dict):
        return data.get("server", data)
    return {}


def _setup_logging(args: Any) -> None:
    """Configure logging based on CLI arguments.

    Args:
        args: Parsed CLI arguments.
    """
    # Honor CLI --loglevel
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()

    configure_logging()

    # Add file handler if --logfile specified
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
        file_handler.setFormatter(formatter)
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def build_store(config: ServerConfig) -> DataStore:
    """Return the data store selected by ``config``.

    Raises:
        StoreError: If the store file cannot be loaded.
    """
    if config.store_url:
        logger.info("Using remote store at %s", config.store_url)
        return HttpStore(config.store_url, timeout=config.timeout)
    if config.store_file:
        return load_store_file(config.store_file)
    logger.warning("No store configured - every lookup will be not found")
    return MemoryStore()


def run_server(args: Any) -> None:
    """Entry point for the server command.

    Args:
        args: Parsed CLI arguments namespace.
    """
    _setup_logging(args)

    config_path = getattr(args, "CONFIG", None)
    file_config = _load_config_file(config_path)
    if file_config:
        logger.info("Loaded config from: %s", config_path)

    config = ServerConfig.from_args(args, file_config)
    try:
        store = build_store(config)
    except StoreError as e:
        logger.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    print(
        f"\n"
        f"  Details Server\n"
        f"  ==============\n"
        f"  Listening: http://{config.host}:{config.port}\n"
        f"  Packages:  http://{config.host}:{config.port}/pkg/<import-path>[@<version>]\n"
        f"  Modules:   http://{config.host}:{config.port}/mod/<module-path>@<version>\n"
        f"\n"
        f"  Press Ctrl+C to stop\n"
    )

    run_server_sync(config, store)
