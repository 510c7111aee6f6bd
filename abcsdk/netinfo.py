"""Discovery of the local host's reportable IP address."""

from __future__ import annotations

import functools
import ipaddress
import socket

DEFAULT_LOCAL_IP = "127.0.0.1"

_INNER_FIRST_OCTETS = frozenset({100, 172, 192})


def is_inner_ip(ipv4: str) -> bool:
    """Whether a dotted IPv4 string is treated as an intranet address."""
    first = ipv4.split(".")[0]
    try:
        first_num = int(first)
    except ValueError:
        first_num = 0
    return first_num in _INNER_FIRST_OCTETS or 1 <= first_num <= 15


def _is_addr_ok(ip: ipaddress.IPv4Address | ipaddress.IPv6Address) -> bool:
    if ip.is_loopback:
        return False
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
        if ip.is_loopback:
            return False
    if isinstance(ip, ipaddress.IPv4Address):
        return is_inner_ip(str(ip))
    return True


def _host_addresses() -> list[str]:
    seen: dict[str, None] = {}
    for *_, sockaddr in socket.getaddrinfo(socket.gethostname(), None):
        seen.setdefault(str(sockaddr[0]).split("%", 1)[0], None)
    return list(seen)


def local_ip_list(limit: int) -> list[str]:
    """Return up to ``limit`` usable local addresses.

    An empty list means the addresses could not be read; if none qualify,
    the default loopback address is returned instead.
    """
    try:
        candidates = _host_addresses()
    except OSError:
        return []
    result: list[str] = []
    for candidate in candidates:
        try:
            ip = ipaddress.ip_address(candidate)
        except ValueError:
            continue
        if not _is_addr_ok(ip):
            continue
        result.append(str(ip))
        if len(result) >= limit:
            break
    return result or [DEFAULT_LOCAL_IP]


@functools.lru_cache(maxsize=None)
def local_ip() -> str:
    """Return the first usable local address, computed once."""
    ips = local_ip_list(1)
    return ips[0] if ips else DEFAULT_LOCAL_IP