"""Symbol server fetch utilities."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import requests

from symcache.errors import SizeMismatch, TransportFailure

DEFAULT_USER_AGENT = "symcache/0.1.0"

DEFAULT_HEADERS: Mapping[str, str] = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": "*/*",
    # keep the body byte-for-byte comparable with Content-Length
    "Accept-Encoding": "identity",
    "Connection": "keep-alive",
}

logger = logging.getLogger(__name__)


def fetch_symbol(
    url: str,
    *,
    timeout_seconds: float | None = None,
    headers: Mapping[str, str] | None = None,
) -> bytes:
    """GET `url` following redirects and return the verified body.

    Raises ``TransportFailure`` on connection errors or any status other than
    200, and ``SizeMismatch`` when ``Content-Length`` is absent, zero, or does
    not equal the number of bytes received.
    """
    merged_headers = dict(DEFAULT_HEADERS)
    if headers:
        merged_headers.update(headers)

    try:
        response = requests.get(
            url,
            timeout=timeout_seconds,
            headers=merged_headers,
            allow_redirects=True,
        )
    except requests.RequestException as exc:
        raise TransportFailure(f"Request to {url} failed: {exc}") from exc

    if response.status_code != 200:
        raise TransportFailure(f"Unexpected HTTP {response.status_code} from {url}")

    body = response.content
    declared = content_length(response)
    if not declared or declared != len(body):
        raise SizeMismatch(
            f"Content-Length {declared} does not match received {len(body)} bytes from {url}"
        )

    logger.debug("Fetched %s bytes from %s", len(body), url)
    return body


def content_length(response: requests.Response) -> int:
    """Return the declared Content-Length, or 0 when missing or unparsable."""
    raw = response.headers.get("Content-Length")
    if raw is None:
        return 0
    try:
        return int(raw.strip())
    except ValueError:
        return 0


__all__ = ["DEFAULT_HEADERS", "DEFAULT_USER_AGENT", "content_length", "fetch_symbol"]
