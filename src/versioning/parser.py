"""URL path parsing for ``<path>[@<version>]`` requests."""

from __future__ import annotations

from typing import Tuple

from common.errors import MalformedInput

from .module_path import check_import_path


def parse_module_path_and_version(url_path: str) -> Tuple[str, str]:
    """Return the import path and version named by ``url_path``.

    ``url_path`` has the shape ``/<path>`` or ``/<path>@<version>``. A single
    leading slash is trimmed from the path; when no version is present a
    single trailing slash is trimmed as well. Trailing slashes are trimmed
    from the version, which is the empty string when absent.

    Raises:
        MalformedInput: If the URL holds more than one ``@`` or the path
            is not a well-formed import path.
    """
    parts = url_path.split("@")
    if len(parts) not in (1, 2):
        raise MalformedInput(f"malformed URL path {url_path!r}")

    import_path = parts[0]
    if import_path.startswith("/"):
        import_path = import_path[1:]
    if len(parts) == 1 and import_path.endswith("/"):
        import_path = import_path[:-1]
    try:
        check_import_path(import_path)
    except ValueError as exc:
        raise MalformedInput(f"malformed import path {import_path!r}: {exc}") from exc

    if len(parts) == 1:
        return import_path, ""
    return import_path, parts[1].rstrip("/")
