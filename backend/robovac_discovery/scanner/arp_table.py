"""
Neighbor (ARP) table readers.

The scanner only needs an IP -> MAC map of hosts the operating system has
recently talked to. Two sources are supported:
- the platform's `arp -a` output, parsed by a platform specific parser
- /proc/net/arp on Linux, read directly without spawning a process

Every reader is best effort: any failure yields an empty map.
"""

import asyncio
import logging
import os
import re
import sys
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from ..core.config import settings

logger = logging.getLogger(__name__)

ArpParser = Callable[[str], Dict[str, str]]

PROC_NET_ARP = "/proc/net/arp"

BROADCAST_MAC = "ff:ff:ff:ff:ff:ff"
INCOMPLETE_MAC = "00:00:00:00:00:00"

# macOS / BSD: hostname (192.168.1.100) at aa:bb:cc:d:ee:f on en0 ifscope [ethernet]
# BSD arp drops leading zeros, so octets may be a single digit
BSD_PATTERN = re.compile(
    r"\((\d+\.\d+\.\d+\.\d+)\) at ([a-fA-F0-9]{1,2}(?::[a-fA-F0-9]{1,2}){5})(?=\s|$)"
)
# Linux: 192.168.1.100 ether aa:bb:cc:dd:ee:ff C eth0, or the BSD style from net-tools
LINUX_PATTERN = re.compile(r"(\d+\.\d+\.\d+\.\d+).*?([a-fA-F0-9:]{17})")
# Windows: 192.168.1.100        aa-bb-cc-dd-ee-ff     dynamic
WINDOWS_PATTERN = re.compile(r"(\d+\.\d+\.\d+\.\d+)\s+([a-fA-F0-9-]{17})")


def _parse_lines(output: str, pattern: re.Pattern) -> Dict[str, str]:
    arp_map = {}
    for line in output.splitlines():
        match = pattern.search(line)
        if not match:
            continue
        ip, mac = match.groups()
        mac = ":".join(octet.zfill(2) for octet in mac.lower().replace("-", ":").split(":"))
        if mac in (BROADCAST_MAC, INCOMPLETE_MAC):
            continue
        arp_map[ip] = mac
    return arp_map


def parse_bsd_arp(output: str) -> Dict[str, str]:
    """Parse `arp -a` output in the "host (ip) at mac" layout."""
    return _parse_lines(output, BSD_PATTERN)


def parse_linux_arp(output: str) -> Dict[str, str]:
    """Parse Linux `arp -a` / `arp -n` output with a colon-delimited MAC."""
    return _parse_lines(output, LINUX_PATTERN)


def parse_windows_arp(output: str) -> Dict[str, str]:
    """Parse Windows `arp -a` output; dash-delimited MACs are converted to colons."""
    return _parse_lines(output, WINDOWS_PATTERN)


ARP_PARSERS: Dict[str, ArpParser] = {
    "darwin": parse_bsd_arp,
    "linux": parse_linux_arp,
    "win32": parse_windows_arp,
}


def select_parser(platform: str) -> Optional[ArpParser]:
    """Pick the parser for a platform identifier such as sys.platform."""
    if platform.startswith("linux"):
        return ARP_PARSERS["linux"]
    return ARP_PARSERS.get(platform)


class ARPTableProvider(ABC):
    """Source of the IP -> MAC neighbor map."""

    @abstractmethod
    async def read(self) -> Dict[str, str]:
        """Return the current neighbor table; never raises."""


class CommandARPTable(ARPTableProvider):
    """Reads the neighbor table from the `arp -a` command."""

    def __init__(self, platform: Optional[str] = None, timeout: Optional[float] = None):
        self.platform = platform or sys.platform
        self.timeout = timeout if timeout is not None else settings.ARP_TIMEOUT
        self.parser = select_parser(self.platform)
        if self.parser is None:
            logger.info("No ARP parser for platform %s, neighbor lookup disabled", self.platform)

    async def read(self) -> Dict[str, str]:
        if self.parser is None:
            return {}

        try:
            output = await self._run_arp()
        except FileNotFoundError:
            logger.warning("arp command not found, continuing without neighbor table")
            return {}
        except asyncio.TimeoutError:
            logger.warning("arp command timed out after %ss", self.timeout)
            return {}
        except OSError as e:
            logger.warning("Failed to run arp command: %s", e)
            return {}

        if output is None:
            return {}

        arp_map = self.parser(output)
        logger.debug("Found %d devices in ARP table", len(arp_map))
        return arp_map

    async def _run_arp(self) -> Optional[str]:
        process = await asyncio.create_subprocess_exec(
            "arp", "-a",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE
        )
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            try:
                process.kill()
            except ProcessLookupError:
                pass  # exited between the timeout and the kill
            await process.wait()
            raise

        if process.returncode != 0:
            logger.warning(
                "arp command exited with %s: %s",
                process.returncode,
                stderr.decode(errors="replace").strip()
            )
            return None

        return stdout.decode(errors="replace")


class ProcNetARPTable(ARPTableProvider):
    """Reads the Linux kernel neighbor table straight from /proc/net/arp."""

    def __init__(self, path: str = PROC_NET_ARP):
        self.path = path

    async def read(self) -> Dict[str, str]:
        try:
            with open(self.path, "r") as f:
                content = f.read()
        except OSError as e:
            logger.warning("Failed to read %s: %s", self.path, e)
            return {}

        arp_map = parse_proc_net_arp(content)
        logger.debug("Found %d devices in %s", len(arp_map), self.path)
        return arp_map


def parse_proc_net_arp(content: str) -> Dict[str, str]:
    """
    Parse /proc/net/arp.

    Format:
        IP address       HW type     Flags       HW address            Mask     Device
        192.168.1.1      0x1         0x2         aa:bb:cc:dd:ee:ff     *        eth0
    """
    arp_map = {}
    for line in content.splitlines()[1:]:
        fields = line.split()
        if len(fields) < 4:
            continue
        ip, mac = fields[0], fields[3].lower()
        if mac in (BROADCAST_MAC, INCOMPLETE_MAC):
            continue
        arp_map[ip] = mac
    return arp_map


def get_arp_table_provider(source: Optional[str] = None) -> ARPTableProvider:
    """Provider factory: /proc/net/arp on Linux when available, `arp -a` otherwise."""
    source = source or settings.ARP_SOURCE

    if source == "command":
        return CommandARPTable()
    if source in ("auto", "proc") and sys.platform.startswith("linux") and os.path.exists(PROC_NET_ARP):
        return ProcNetARPTable()
    if source == "proc":
        logger.warning("%s not available, falling back to arp command", PROC_NET_ARP)
    elif source != "auto":
        raise ValueError(f"Unsupported ARP source: {source}")

    return CommandARPTable()
