"""
Configuration management for torexit.

Loads detector settings from environment variables or a .env file.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import os
from pathlib import Path
from dataclasses import dataclass

from dotenv import load_dotenv


# Check common locations for .env
env_locations = [
    Path.home() / ".torexit" / ".env",
    Path.home() / ".config" / "torexit" / ".env",
    Path.cwd() / ".env",
]
for env_path in env_locations:
    if env_path.exists():
        load_dotenv(env_path)
        break


# Tor Project exit list (TorDNSEL format)
TOR_EXIT_ADDRESSES_URL = "https://check.torproject.org/exit-addresses"

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class DetectorConfig:
    """Tor exit detector configuration."""

    # Location of the persisted exit list
    list_path: str | None = None
    # Directory relative list paths are resolved against (None = cwd)
    base_dir: str | None = None

    cache_enabled: bool = False

    feed_url: str = TOR_EXIT_ADDRESSES_URL
    timeout: float = 10.0

    # Honour X-Forwarded-For when extracting client addresses
    trust_proxy: bool = True

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "DetectorConfig":
        """Load configuration from environment variables."""
        return cls(
            list_path=os.getenv("TOREXIT_LIST_PATH") or None,
            base_dir=os.getenv("TOREXIT_BASE_DIR") or None,
            cache_enabled=_env_flag("TOREXIT_CACHE", False),
            feed_url=os.getenv("TOREXIT_FEED_URL", TOR_EXIT_ADDRESSES_URL),
            timeout=float(os.getenv("TOREXIT_TIMEOUT", "10.0")),
            trust_proxy=_env_flag("TOREXIT_TRUST_PROXY", True),
            log_level=os.getenv("TOREXIT_LOG_LEVEL", "INFO"),
        )


# Global config instance
_config: DetectorConfig | None = None


def get_config() -> DetectorConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = DetectorConfig.from_env()
    return _config


def set_config(config: DetectorConfig | None) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
