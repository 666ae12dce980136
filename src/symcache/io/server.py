"""Symbol server address handling."""

from __future__ import annotations

import re
from dataclasses import dataclass

# scheme is optional; the host stops at the first slash and may not contain
# whitespace or query/fragment markers.
_SERVER_PATTERN = re.compile(r"^((?:https?://)?[^/\s?#]+)(/.*)$")


@dataclass(frozen=True, slots=True)
class ServerAddress:
    """Upstream symbol server split into ``scheme://host`` and path prefix."""

    host_and_scheme: str
    path_prefix: str

    @property
    def base_url(self) -> str:
        if "://" in self.host_and_scheme:
            return self.host_and_scheme
        return f"http://{self.host_and_scheme}"

    def url_for(self, relative: str) -> str:
        """Return the absolute URL of `relative` on this server."""
        return f"{self.base_url}{self.path_prefix}{relative}"


def normalize_server_url(server_url: str) -> str:
    """Ensure the configured server URL ends with a slash."""
    if server_url and not server_url.endswith("/"):
        return server_url + "/"
    return server_url


def parse_server_address(server_url: str) -> ServerAddress | None:
    """Split `server_url` into host and path prefix, or return None if unparsable."""
    match = _SERVER_PATTERN.match(normalize_server_url(server_url))
    if match is None:
        return None
    return ServerAddress(host_and_scheme=match.group(1), path_prefix=match.group(2))


__all__ = ["ServerAddress", "normalize_server_url", "parse_server_address"]
