"""Error taxonomy shared by the store, the request pipeline and the HTTP layer.

Store implementations raise ``NotFound`` for an expected miss and
``StoreError`` for anything else. The request pipeline classifies those at
the call site into ``PageError`` subclasses, each carrying the HTTP status
the boundary should answer with.
"""

from __future__ import annotations

from typing import Optional


class DiscoveryError(Exception):
    """Base class for all errors raised by this project."""


class NotFound(DiscoveryError):
    """The requested path or version does not exist in the store."""


class StoreError(DiscoveryError):
    """The store failed for a reason other than a missing record."""


class PageError(DiscoveryError):
    """An error the HTTP boundary turns into an error page.

    Attributes:
        status: HTTP status code for the response.
        message: User-facing message, or None for the generic status text.
        secondary_message: Optional follow-up hint shown under the message.
    """

    status = 500

    def __init__(
        self,
        detail: str,
        message: Optional[str] = None,
        secondary_message: Optional[str] = None,
    ):
        super().__init__(detail)
        self.message = message
        self.secondary_message = secondary_message


class MalformedInput(PageError):
    """Bad path or version syntax."""

    status = 400


class PathNotFound(PageError):
    """The path, or the path at the requested version, is absent."""

    status = 404


class VersionMismatch(PageError):
    """The path exists, but not at the requested version."""

    status = 404


class InternalBug(PageError):
    """An invariant of the pipeline was broken (e.g. tab table drift)."""


class InfrastructureFailure(PageError):
    """A store or dependency failure unrelated to a missing record."""
