"""Shared HTTP helpers used by the remote store client.

Encapsulates common request/timeout error handling so callers avoid
duplicating try/except blocks. Transport failures surface as
``StoreError``; the caller decides what an HTTP status means.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.errors import StoreError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def safe_get(
    url: str,
    *,
    context: str,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "store").
        timeout: Seconds before giving up; defaults to Constants.REQUEST_TIMEOUT.
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: The HTTP response object.

    Raises:
        StoreError: On timeout or connection failure.
    """
    safe_target = safe_url(url)
    timeout = timeout or Constants.REQUEST_TIMEOUT
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(url, timeout=timeout, **kwargs)
        except requests.Timeout as exc:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                timeout,
            )
            raise StoreError(f"{context} request to {safe_target} timed out") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            raise StoreError(f"{context} request to {safe_target} failed: {exc}") from exc

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res


def get_json(
    url: str,
    *,
    context: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
) -> Tuple[int, Optional[Any]]:
    """Perform GET request and parse a JSON body.

    Args:
        url: Target URL.
        context: Source tag for logs.
        params: Optional query parameters.
        timeout: Optional timeout override in seconds.

    Returns:
        Tuple of (status_code, parsed_json_or_none). The body is only parsed
        for 200 responses.

    Raises:
        StoreError: On transport failure or an undecodable 200 body.
    """
    res = safe_get(url, context=context, params=params, timeout=timeout)
    if res.status_code != 200:
        return res.status_code, None
    try:
        return res.status_code, json.loads(res.text)
    except json.JSONDecodeError as exc:
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    status_code=res.status_code,
                    target=safe_url(url)
                )
            )
        raise StoreError(f"{context} returned invalid JSON from {safe_url(url)}") from exc
