"""
OUI (Organizationally Unique Identifier) matching for Anker/Eufy hardware.

Only a short fixed list of prefixes is needed: the scanner just has to tell
whether a neighbor table entry belongs to the RoboVac vendor.
"""

from typing import Optional, Dict

ANKER_EUFY = "Anker/Eufy"

# First three octets, lowercase and colon separated
KNOWN_OUIS: Dict[str, str] = {
    "34:ea:34": ANKER_EUFY,  # Anker Innovations Limited
    "70:55:82": ANKER_EUFY,
    "90:9a:4a": ANKER_EUFY,
    "a4:c1:38": ANKER_EUFY,
    "2c:aa:8e": ANKER_EUFY,
}


def normalize_mac(mac: str) -> str:
    """Normalize a MAC address to lowercase with colons."""
    return mac.strip().lower().replace("-", ":")


def lookup_vendor(mac: Optional[str]) -> Optional[str]:
    """
    Look up the vendor label for a MAC address.

    Args:
        mac: MAC address, e.g. "34:EA:34:11:22:33" or "34-ea-34-11-22-33"

    Returns:
        Vendor label or None if the prefix is not a known OUI
    """
    if not mac:
        return None

    prefix = normalize_mac(mac)[:8]
    for oui, vendor in KNOWN_OUIS.items():
        if prefix.startswith(oui):
            return vendor

    return None
