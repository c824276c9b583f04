"""
torexit - Tor Exit Node Detection

Keeps a local list of Tor exit node addresses, refreshes it from the
Tor Project's exit-addresses feed and answers membership queries
against it.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "0.1.0"
__author__ = "DNS Science.io"
__copyright__ = "Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company"
