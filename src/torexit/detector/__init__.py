"""
Tor Exit Detection Module

Provides utilities for checking whether IPs are Tor exit nodes:
- Exit list refresh from the Tor Project exit-addresses feed
- Membership lookups with optional in-memory caching
- Client address extraction from web framework requests

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from torexit.detector.addresses import get_client_ip_address, is_valid_ip
from torexit.detector.core import (
    ExitListStatus,
    ListState,
    TorDetector,
    check_tor_exit,
    refresh_exit_list,
)
from torexit.detector.errors import (
    ConfigurationError,
    EmptyListError,
    InvalidArgumentError,
    ListIOError,
    NetworkError,
    TorDetectorError,
)
from torexit.detector.feed import FeedFetcher, parse_exit_addresses

__all__ = [
    "TorDetector",
    "ListState",
    "ExitListStatus",
    "FeedFetcher",
    "check_tor_exit",
    "refresh_exit_list",
    "get_client_ip_address",
    "is_valid_ip",
    "parse_exit_addresses",
    "TorDetectorError",
    "InvalidArgumentError",
    "ConfigurationError",
    "ListIOError",
    "NetworkError",
    "EmptyListError",
]
