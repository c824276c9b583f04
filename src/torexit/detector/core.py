"""
Core Tor exit detection functionality.

TorDetector owns the exit list location and an optional in-memory copy
of its contents, refreshes the list from the Tor Project feed and
answers membership queries against it.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx

from torexit.config import DetectorConfig, get_config
from torexit.detector.addresses import get_client_ip_address, is_valid_ip
from torexit.detector.errors import (
    ConfigurationError,
    EmptyListError,
    InvalidArgumentError,
    ListIOError,
    NetworkError,
)
from torexit.detector.feed import FeedFetcher, render_exit_list, write_exit_list
from torexit.logging_config import track_error

logger = logging.getLogger(__name__)


@dataclass
class ListState:
    """Exit list location, cache policy and cached entries."""
    list_path: str | None = None
    cache_enabled: bool = False
    cached: frozenset[str] | None = None


@dataclass
class ExitListStatus:
    """Snapshot of the persisted exit list."""
    path: str | None
    exists: bool = False
    entries: int = 0
    modified: datetime | None = None
    cache_enabled: bool = False
    cached_entries: int | None = None


def parse_exit_list(content: str) -> frozenset[str]:
    """Turn list file content into a set of lowercase addresses."""
    return frozenset(
        line.strip().lower()
        for line in content.splitlines()
        if line.strip()
    )


class TorDetector:
    """Check addresses against a locally persisted Tor exit list.

    Usage:
        detector = TorDetector().set_list_path("tor_exit_list.txt").set_list_cache(True)
        detector.refresh_list()
        detector.is_tor("185.220.101.4")
    """

    def __init__(
        self,
        config: DetectorConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.config = config or get_config()
        self.state = ListState()
        self.fetcher = FeedFetcher(
            url=self.config.feed_url,
            timeout=self.config.timeout,
            transport=transport,
        )
        if self.config.list_path:
            self.set_list_path(self.config.list_path)
        self.set_list_cache(self.config.cache_enabled)

    # Configuration

    def set_list_path(self, path: Any) -> "TorDetector":
        """Set the list file path. Switching paths drops the cache."""
        if isinstance(path, os.PathLike):
            path = os.fspath(path)
        if not isinstance(path, str):
            raise InvalidArgumentError("Invalid path.")
        if path == "":
            path = None
        if path != self.state.list_path:
            self.state.cached = None
            self.state.list_path = path
        return self

    def get_list_path(self) -> str | None:
        return self.state.list_path or None

    def set_list_cache(self, enabled: Any) -> "TorDetector":
        """Enable caching only for a literal True; anything else disables and clears it."""
        if enabled is not True:
            self.state.cache_enabled = False
            self.state.cached = None
            return self
        self.state.cache_enabled = True
        return self

    def get_list_cache(self) -> bool:
        return self.state.cache_enabled

    def invalidate_cache(self) -> "TorDetector":
        self.state.cached = None
        return self

    def _resolve_path(self) -> Path:
        if not self.state.list_path:
            raise ConfigurationError("No path has been set.")
        path = Path(self.state.list_path)
        if not path.is_absolute() and self.config.base_dir:
            path = Path(self.config.base_dir) / path
        return path

    def _read_text(self, path: Path) -> str:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            track_error(
                "list_read_error",
                "An error occurred while reading the file content.",
                e,
                {"path": str(path)},
            )
            raise ListIOError(f"Unable to read the list: {path}") from e
        return content

    def _read_entries(self, path: Path) -> frozenset[str]:
        return parse_exit_list(self._read_text(path))

    # Cache loading

    def load_cache(self) -> bool:
        """Read the list into the cache.

        Returns False when caching is disabled, no path is set or the list
        is empty; True once the cache holds the list.
        """
        if not self.state.cache_enabled or not self.state.list_path:
            return False
        entries = self._read_entries(self._resolve_path())
        if not entries:
            return False
        self.state.cached = entries
        logger.debug(f"Cached {len(entries)} exit addresses")
        return True

    async def load_cache_async(self) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.load_cache)

    # Feed refresh

    def refresh_list(self) -> None:
        """Download the current exit list and overwrite the list file."""
        path = self._resolve_path()

        try:
            addresses = self.fetcher.fetch_addresses()
        except NetworkError as e:
            track_error("feed_fetch_error", str(e), e, {"url": self.fetcher.url})
            raise

        try:
            write_exit_list(path, render_exit_list(addresses))
        except ListIOError as e:
            track_error("list_write_error", str(e), e, {"path": str(path)})
            raise

        if self.state.cache_enabled:
            self.state.cached = frozenset(addresses) or None

        logger.info(f"Exit list updated: {len(addresses)} addresses written to {path}")

    async def refresh_list_async(self) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.refresh_list)

    # Lookups

    def is_tor(self, address: Any) -> bool:
        """Check if an IP address is a known Tor exit node.

        Raises:
            InvalidArgumentError: address is not a valid IPv4/IPv6 literal
            ConfigurationError: no list path has been set
            EmptyListError: the list file holds no addresses
            ListIOError: the list file could not be read
        """
        if not is_valid_ip(address):
            raise InvalidArgumentError("Invalid IP address.")
        path = self._resolve_path()
        address = address.lower()

        entries = self.state.cached if self.state.cache_enabled else None
        if entries is None:
            entries = self._read_entries(path)
            if not entries:
                raise EmptyListError(f"The given list is empty: {path}")
            if self.state.cache_enabled:
                self.state.cached = entries

        return address in entries

    async def is_tor_async(self, address: Any) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.is_tor, address)

    def get_client_ip_address(self, request: Any, trust_proxy: bool | None = None) -> str | None:
        if trust_proxy is None:
            trust_proxy = self.config.trust_proxy
        return get_client_ip_address(request, trust_proxy=trust_proxy)

    def is_tor_request(self, request: Any, trust_proxy: bool | None = None) -> bool:
        """Check whether the client behind a request is using Tor."""
        address = self.get_client_ip_address(request, trust_proxy=trust_proxy)
        if address is None:
            return False
        return self.is_tor(address)

    def status(self) -> ExitListStatus:
        """Describe the configured list file without raising on missing files."""
        result = ExitListStatus(
            path=self.get_list_path(),
            cache_enabled=self.state.cache_enabled,
            cached_entries=len(self.state.cached) if self.state.cached is not None else None,
        )
        if result.path is None:
            return result

        path = self._resolve_path()
        if path.is_file():
            result.exists = True
            result.modified = datetime.fromtimestamp(path.stat().st_mtime)
            # Lines on disk; duplicate feed entries each count
            result.entries = sum(1 for line in self._read_text(path).splitlines() if line.strip())
        return result


# Convenience functions
def check_tor_exit(ip: str, list_path: str | None = None) -> bool:
    """Check an IP against a list file (defaults to the configured one)."""
    detector = TorDetector()
    if list_path is not None:
        detector.set_list_path(list_path)
    return detector.is_tor(ip)


def refresh_exit_list(list_path: str | None = None) -> None:
    """Refresh a list file (defaults to the configured one) from the feed."""
    detector = TorDetector()
    if list_path is not None:
        detector.set_list_path(list_path)
    detector.refresh_list()
