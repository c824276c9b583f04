"""
Tor exit list feed fetching.

Downloads the Tor Project's exit-addresses feed (TorDNSEL format),
extracts the ExitAddress fields and persists them as a plain list,
one address per line.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging
import os
import tempfile
from pathlib import Path

import httpx

from torexit.config import TOR_EXIT_ADDRESSES_URL
from torexit.detector.errors import ListIOError, NetworkError

logger = logging.getLogger(__name__)

EXIT_ADDRESS_PREFIX = "ExitAddress"

USER_AGENT = "torexit/0.1 (+https://check.torproject.org/exit-addresses)"


def parse_exit_addresses(feed: str) -> list[str]:
    """Extract exit addresses from feed text.

    Feed order is kept and duplicates are not removed. Lines look like:

        ExitAddress 185.220.101.4 2023-01-01 00:00:00
    """
    addresses = []
    for line in feed.split("\n"):
        if not line.startswith(EXIT_ADDRESS_PREFIX):
            continue
        _, _, fields = line.rstrip("\r").partition(" ")
        if not fields:
            continue
        address = fields.split(" ", 1)[0]
        if address:
            addresses.append(address.lower())
    return addresses


def render_exit_list(addresses: list[str]) -> str:
    """Join addresses into the on-disk list format (no trailing newline)."""
    return "\n".join(addresses)


def write_exit_list(path: str | Path, content: str) -> None:
    """Replace the list file with content.

    Writes to a temporary file next to the target and swaps it in, so a
    failed write leaves the previous list in place.
    """
    target = Path(path)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(content)
        os.replace(tmp_name, target)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ListIOError(f"Unable to save the file: {target}") from e


class FeedFetcher:
    """Fetch the Tor exit-addresses feed."""

    def __init__(
        self,
        url: str = TOR_EXIT_ADDRESSES_URL,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            transport=self.transport,
        )

    def fetch(self) -> str:
        """Download the raw feed as text."""
        logger.debug(f"Fetching exit list from {self.url}")
        try:
            with self._client() as client:
                resp = client.get(self.url)
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"HTTP {e.response.status_code} while getting the data from {self.url}"
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"An error occurred while getting the data: {e}") from e

        return resp.content.decode("utf-8", errors="replace")

    def fetch_addresses(self) -> list[str]:
        """Download the feed and return the parsed exit addresses."""
        addresses = parse_exit_addresses(self.fetch())
        logger.info(f"Parsed {len(addresses)} exit addresses from {self.url}")
        return addresses
