"""
IP address validation and client address extraction.

get_client_ip_address() understands the request shapes of the common
Python web stacks: WSGI environ dicts, Django (META), Flask/werkzeug
(remote_addr, environ), Starlette/FastAPI (client.host) and aiohttp
(remote, transport).
"""

from collections.abc import Mapping
from typing import Any, Iterator

from netaddr import INET_PTON, valid_ipv4, valid_ipv6

FORWARDED_FOR_HEADER = "X-Forwarded-For"
FORWARDED_FOR_ENVIRON = "HTTP_X_FORWARDED_FOR"


def is_valid_ip(address: Any) -> bool:
    """Check for a strict IPv4 dotted-quad or IPv6 literal."""
    if not isinstance(address, str) or address == "":
        return False
    return valid_ipv4(address, flags=INET_PTON) or valid_ipv6(address)


def _normalize(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    address = value.strip()
    if is_valid_ip(address):
        return address.lower()
    return None


# Framework request objects; Starlette and aiohttp requests are also Mappings
REQUEST_ATTRIBUTES = ("headers", "client", "remote", "remote_addr", "environ", "META", "transport", "socket")


def _is_environ(request: Any) -> bool:
    return isinstance(request, Mapping) and not any(
        hasattr(request, attr) for attr in REQUEST_ATTRIBUTES
    )


def _forwarded_for(request: Any) -> str | None:
    if _is_environ(request):
        return request.get(FORWARDED_FOR_ENVIRON)

    headers = getattr(request, "headers", None)
    if headers is not None and hasattr(headers, "get"):
        # Plain dicts are case sensitive, framework header maps are not
        value = headers.get(FORWARDED_FOR_HEADER) or headers.get(FORWARDED_FOR_HEADER.lower())
        if value:
            return value

    for attr in ("environ", "META"):
        env = getattr(request, attr, None)
        if isinstance(env, Mapping) and env.get(FORWARDED_FOR_ENVIRON):
            return env.get(FORWARDED_FOR_ENVIRON)
    return None


def _peer_host(peername: Any) -> Any:
    if isinstance(peername, (tuple, list)) and peername:
        return peername[0]
    return peername


def _remote_addresses(request: Any) -> Iterator[Any]:
    """Yield direct-connection address candidates, most specific first."""
    if _is_environ(request):
        yield request.get("REMOTE_ADDR")
        return

    client = getattr(request, "client", None)
    if client is not None:
        yield getattr(client, "host", None)

    yield getattr(request, "remote", None)
    yield getattr(request, "remote_addr", None)

    for attr in ("environ", "META"):
        env = getattr(request, attr, None)
        if isinstance(env, Mapping):
            yield env.get("REMOTE_ADDR")

    transport = getattr(request, "transport", None)
    if transport is not None and hasattr(transport, "get_extra_info"):
        yield _peer_host(transport.get_extra_info("peername"))

    sock = getattr(request, "socket", None)
    if sock is not None and hasattr(sock, "getpeername"):
        try:
            yield _peer_host(sock.getpeername())
        except OSError:
            # Socket already closed
            pass


def get_client_ip_address(request: Any, trust_proxy: bool = True) -> str | None:
    """
    Return the client's IP address for an incoming request.

    Args:
        request: WSGI environ or framework request object
        trust_proxy: Use the last X-Forwarded-For hop when present

    Returns:
        Lowercased address, or None if no valid address was found
    """
    if trust_proxy:
        forwarded = _forwarded_for(request)
        if isinstance(forwarded, str) and forwarded != "":
            address = _normalize(forwarded.split(",")[-1])
            if address:
                return address

    for candidate in _remote_addresses(request):
        address = _normalize(candidate)
        if address:
            return address
    return None
