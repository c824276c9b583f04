"""
Tor exit detector exceptions.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""


class TorDetectorError(Exception):
    """Base exception for Tor exit detector errors."""
    pass


class InvalidArgumentError(TorDetectorError, ValueError):
    """Bad list path or IP address argument."""
    pass


class ConfigurationError(TorDetectorError):
    """Operation attempted without a list path configured."""
    pass


class ListIOError(TorDetectorError, OSError):
    """The exit list file could not be read or written."""
    pass


class NetworkError(TorDetectorError):
    """The exit list feed could not be fetched."""
    pass


class EmptyListError(TorDetectorError):
    """The exit list file exists but holds no addresses."""
    pass
