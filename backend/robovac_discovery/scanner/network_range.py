import ipaddress
import logging
from typing import Optional, List, Tuple

import netifaces

from ..core.config import settings

logger = logging.getLogger(__name__)


def classify_private_address(ip: str) -> Optional[Tuple[str, int]]:
    """
    Map a private IPv4 address to the base network it belongs to.

    Args:
        ip: Dotted-quad IPv4 address

    Returns:
        (base network address, declared prefix length), or None when the
        address is not in an RFC1918 range
    """
    try:
        parts = [int(x) for x in ip.split(".")]
    except ValueError:
        return None
    if len(parts) != 4:
        return None

    if parts[0] == 192 and parts[1] == 168:
        return f"192.168.{parts[2]}.0", 24
    if parts[0] == 10:
        return f"10.{parts[1]}.{parts[2]}.0", 24
    if parts[0] == 172 and 16 <= parts[1] <= 31:
        # Declared /16, but only the first 254 hosts are ever enumerated
        return f"172.{parts[1]}.0.0", 16

    return None


def _interface_ipv4_addresses() -> List[str]:
    """Non-loopback IPv4 addresses of all local interfaces, in interface order."""
    addresses = []
    for iface in netifaces.interfaces():
        try:
            addrs = netifaces.ifaddresses(iface)
        except (OSError, ValueError) as e:
            logger.debug("Skipping interface %s: %s", iface, e)
            continue
        for info in addrs.get(netifaces.AF_INET, []):
            ip = info.get("addr")
            if ip and not ip.startswith("127."):
                addresses.append(ip)
    return addresses


def resolve_base_network(configured: Optional[str] = None,
                         fallback: Optional[str] = None) -> str:
    """
    Get the base network address to scan - from config or auto-detect.

    Args:
        configured: Subnet in CIDR notation overriding detection
        fallback: Base used when no private address is found
            (defaults to the FALLBACK_BASE_NETWORK setting)

    Returns:
        Base network address, e.g. "192.168.1.0"

    Raises:
        ValueError: if the configured subnet is not a valid IPv4 network
    """
    if configured:
        network = ipaddress.ip_network(configured, strict=False)
        if network.version != 4:
            raise ValueError(f"Configured subnet is not IPv4: {configured}")
        logger.info("Using configured subnet: %s", configured)
        return str(network.network_address)

    try:
        for ip in _interface_ipv4_addresses():
            classified = classify_private_address(ip)
            if classified:
                base, prefix = classified
                logger.info("Auto-detected network %s/%s from %s", base, prefix, ip)
                return base
    except (OSError, ValueError) as e:
        logger.warning("Error detecting local network: %s", e)

    fallback = fallback or settings.FALLBACK_BASE_NETWORK
    logger.warning("No private IPv4 address found, using fallback network %s", fallback)
    return fallback


def host_addresses(base: str, count: Optional[int] = None) -> List[str]:
    """Build the candidate address list: host octets 1..count of the base's first three octets."""
    if count is None:
        count = settings.HOST_COUNT
    prefix = ".".join(base.split(".")[:3])
    return [f"{prefix}.{i}" for i in range(1, count + 1)]
