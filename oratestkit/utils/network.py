"""Local network interface enumeration."""

import ipaddress
import socket

import psutil

__all__ = ("get_local_ip_addresses",)


def get_local_ip_addresses() -> "list[dict[str, str]]":
    """List the external IPv4 addresses of this host.

    Loopback addresses are skipped. When an interface carries more than one
    IPv4 address, the extra addresses are reported as aliases named
    ``<interface>:<n>``.

    Returns:
        ``{"name": ..., "address": ...}`` entries in interface order.
    """
    result: "list[dict[str, str]]" = []
    for ifname, addresses in psutil.net_if_addrs().items():
        alias = 0
        for address in addresses:
            if address.family != socket.AF_INET:
                continue
            if ipaddress.ip_address(address.address).is_loopback:
                continue
            name = f"{ifname}:{alias}" if alias >= 1 else ifname
            result.append({"name": name, "address": address.address})
            alias += 1
    return result
