"""Network reputation lookups for the network risk check.

No reputation feed is wired in yet; ``NoopNetworkReputationChecker`` answers
"not a VPN/proxy" for every address. A real implementation only has to
satisfy ``NetworkReputationChecker`` and can be passed to the assessor.
"""

import ipaddress
import re
from typing import Protocol


class ReputationLookupError(Exception):
    """The reputation backend could not answer."""


class NetworkReputationChecker(Protocol):
    async def is_vpn_or_proxy(self, ip_address: str) -> bool: ...


class NoopNetworkReputationChecker:
    async def is_vpn_or_proxy(self, ip_address: str) -> bool:
        return False


# 10/8, 172.16/12, 192.168/16 and loopback
_PRIVATE_NETWORKS = tuple(
    ipaddress.ip_network(net)
    for net in ("10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16", "127.0.0.0/8")
)
_PRIVATE_PREFIX = re.compile(r"^(10\.|192\.168\.|172\.(1[6-9]|2[0-9]|3[0-1])\.|127\.)")


def is_private_or_loopback(ip: str) -> bool:
    """True for RFC1918 and 127.* addresses.

    Values that do not parse as an IPv4 address (forwarded-for lists, "unknown")
    are matched on their leading octets.
    """
    try:
        address = ipaddress.ip_address(ip.strip())
    except ValueError:
        return bool(_PRIVATE_PREFIX.match(ip.strip()))
    if address.version != 4:
        return False
    return any(address in net for net in _PRIVATE_NETWORKS)


def is_automation_user_agent(user_agent: str, markers: tuple[str, ...]) -> bool:
    lowered = user_agent.lower()
    return any(marker in lowered for marker in markers)
