"""Tests for CLI argument parsing and server command helpers."""

import os

import pytest

import cli_server
from args import parse_args
from cli_server import _load_config_file, build_store
from common.errors import StoreError
from constants import ExitCodes
from frontend.server import ServerConfig
from store.http import HttpStore
from store.memory import MemoryStore

FIXTURE = os.path.join(os.path.dirname(__file__), "fixtures", "store.yaml")


def test_parse_args_defaults():
    """Unset options stay None so the config file can supply them."""
    args = parse_args([])
    assert args.PORT is None
    assert args.STORE_FILE is None
    assert args.LOG_LEVEL == "INFO"


def test_parse_args_values():
    args = parse_args(["-s", FIXTURE, "-p", "9000", "--imported-by-limit", "20"])
    assert args.STORE_FILE == FIXTURE
    assert args.PORT == 9000
    assert args.IMPORTED_BY_LIMIT == 20


def test_store_options_are_exclusive():
    with pytest.raises(SystemExit):
        parse_args(["-s", FIXTURE, "-u", "http://meta"])


def test_load_config_file_server_section(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("server:\n  port: 9100\n  store_file: store.yaml\n")
    assert _load_config_file(str(path)) == {"port": 9100, "store_file": "store.yaml"}


def test_load_config_file_flat(tmp_path):
    path = tmp_path / "config.json"
    path.write_text('{"host": "0.0.0.0"}')
    assert _load_config_file(str(path)) == {"host": "0.0.0.0"}


def test_load_config_file_missing(tmp_path):
    assert _load_config_file(str(tmp_path / "absent.yml")) == {}
    assert _load_config_file(None) == {}


def test_build_store_prefers_url():
    store = build_store(ServerConfig(store_url="http://meta", store_file=FIXTURE, timeout=3))
    assert isinstance(store, HttpStore)
    assert store.base_url == "http://meta"


def test_build_store_from_file():
    store = build_store(ServerConfig(store_file=FIXTURE))
    assert isinstance(store, MemoryStore)
    assert len(store) == 8


def test_build_store_empty():
    store = build_store(ServerConfig())
    assert isinstance(store, MemoryStore)
    assert len(store) == 0


def test_run_server_bad_store_file_exits(monkeypatch, tmp_path):
    """A store file that cannot be loaded exits before the server starts."""
    started = []
    monkeypatch.setattr(cli_server, "run_server_sync", lambda *a: started.append(a))
    monkeypatch.setattr(cli_server, "_setup_logging", lambda args: None)
    args = parse_args(["-s", str(tmp_path / "missing.yaml")])
    with pytest.raises(SystemExit) as excinfo:
        cli_server.run_server(args)
    assert excinfo.value.code == ExitCodes.FILE_ERROR.value
    assert started == []


def test_run_server_starts(monkeypatch):
    started = []
    monkeypatch.setattr(cli_server, "run_server_sync", lambda config, store: started.append((config, store)))
    monkeypatch.setattr(cli_server, "_setup_logging", lambda args: None)
    cli_server.run_server(parse_args(["-s", FIXTURE, "-p", "0"]))
    config, store = started[0]
    assert config.port == 0
    assert len(store) == 8


def test_build_store_error_type(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("versions: [")
    with pytest.raises(StoreError):
        build_store(ServerConfig(store_file=str(bad)))
