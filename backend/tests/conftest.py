"""
Shared fakes for the discovery test suite.

The scanner talks to the network only through its provider interfaces, so
every test substitutes in-memory versions of them.
"""

import asyncio
from typing import Dict, Iterable, List, Optional

import pytest

from robovac_discovery.core.config import Settings
from robovac_discovery.scanner.arp_table import ARPTableProvider
from robovac_discovery.scanner.host_probe import ReachabilityProber
from robovac_discovery.scanner.network_scanner import NetworkScanner
from robovac_discovery.scanner.port_probe import PortProber


class FakeARPTable(ARPTableProvider):
    def __init__(self, entries: Optional[Dict[str, str]] = None):
        self.entries = entries or {}
        self.reads = 0

    async def read(self) -> Dict[str, str]:
        self.reads += 1
        return dict(self.entries)


class FakeProber(ReachabilityProber):
    def __init__(self, alive: Iterable[str] = (), delay: float = 0.0):
        self.alive = set(alive)
        self.delay = delay
        self.probed: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def is_alive(self, ip: str) -> bool:
        self.probed.append(ip)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        return ip in self.alive


class FakePortProber(PortProber):
    def __init__(self, open_by_ip: Optional[Dict[str, List[int]]] = None):
        super().__init__(timeout=0.01)
        self.open_by_ip = open_by_ip or {}
        self.scanned: List[str] = []

    async def check_port(self, ip: str, port: int) -> bool:
        self.scanned.append(ip)
        return port in self.open_by_ip.get(ip, [])


@pytest.fixture
def scan_settings():
    return Settings(DEFAULT_SUBNET="192.168.1.0/24")


@pytest.fixture
def make_scanner(scan_settings):
    """Build a scanner wired to fakes."""
    def _make(arp=None, alive=(), open_ports=None, delay=0.0, settings=None, **kwargs):
        return NetworkScanner(
            settings=settings or scan_settings,
            arp_provider=FakeARPTable(arp),
            prober=FakeProber(alive, delay=delay),
            port_prober=FakePortProber(open_ports),
            **kwargs
        )
    return _make
