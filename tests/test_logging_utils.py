"""Tests for logging helpers."""

import logging

from common.logging_utils import ContextFormatter, extra_context, safe_url


def test_extra_context_orders_known_keys_and_drops_none():
    extra = extra_context(duration_ms=3, target="t", event="page", outcome=None)
    assert list(extra["context"]) == ["event", "target", "duration_ms"]


def test_context_formatter_appends_fields():
    record = logging.LogRecord("x", logging.DEBUG, __file__, 1, "built", None, None)
    record.context = {"event": "page", "tab": "doc"}
    assert ContextFormatter("%(message)s").format(record) == "built [event=page tab=doc]"


def test_safe_url_strips_credentials_and_query():
    assert safe_url("https://user:pw@meta.example.com:8443/api/x?token=1") == "https://meta.example.com:8443/api/x"
