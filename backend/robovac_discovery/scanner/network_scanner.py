import asyncio
import inspect
import logging
from typing import Callable, Dict, List, Optional

from .arp_table import ARPTableProvider, get_arp_table_provider
from .host_probe import PingProber, ReachabilityProber
from .models import NetworkDevice
from .network_range import host_addresses, resolve_base_network
from .oui_lookup import lookup_vendor
from .port_probe import PortProber
from .ranking import rank_devices
from ..core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

ScanCallback = Callable[[str, dict], object]


class NetworkScanner:
    """Orchestrates RoboVac discovery over the local /24 slice."""

    def __init__(self, settings: Optional[Settings] = None,
                 arp_provider: Optional[ARPTableProvider] = None,
                 prober: Optional[ReachabilityProber] = None,
                 port_prober: Optional[PortProber] = None,
                 progress_callback: Optional[ScanCallback] = None):
        self.settings = settings or default_settings
        self.arp_provider = arp_provider or get_arp_table_provider(self.settings.ARP_SOURCE)
        self.prober = prober or PingProber(
            timeout=self.settings.PING_TIMEOUT,
            process_timeout=self.settings.PING_PROCESS_TIMEOUT
        )
        self.port_prober = port_prober or PortProber(timeout=self.settings.PORT_TIMEOUT)
        self._callbacks: List[ScanCallback] = []
        if progress_callback:
            self.register_callback(progress_callback)

    def register_callback(self, callback: ScanCallback):
        """Register a callback for scan updates."""
        self._callbacks.append(callback)

    def unregister_callback(self, callback: ScanCallback):
        """Unregister a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    async def _notify_callbacks(self, event_type: str, data: dict):
        """Notify all registered callbacks; failures never affect the scan."""
        for callback in self._callbacks:
            try:
                result = callback(event_type, data)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning("Callback error: %s", e)

    async def discover(self, subnet: Optional[str] = None) -> List[NetworkDevice]:
        """
        Scan the local network for devices exposing Tuya ports.

        Args:
            subnet: Network to scan (uses DEFAULT_SUBNET or auto-detection if None)

        Returns:
            Devices ranked with likely RoboVacs first, then by ascending address
        """
        logger.info("Starting local network discovery...")

        base = resolve_base_network(
            subnet or self.settings.DEFAULT_SUBNET,
            fallback=self.settings.FALLBACK_BASE_NETWORK
        )
        ips = host_addresses(base, self.settings.HOST_COUNT)
        logger.info("Scanning %d addresses from %s", len(ips), base)

        # Built once, read-only for the rest of the scan
        arp_table = await self.arp_provider.read()
        logger.debug("Found %d devices in ARP table", len(arp_table))

        await self._notify_callbacks("scan_started", {
            "base_network": base,
            "total": len(ips)
        })

        batch_size = self.settings.SCAN_BATCH_SIZE
        semaphore = asyncio.Semaphore(batch_size)
        progress = {"scanned": 0}

        async def wrapped(ip: str) -> Optional[NetworkDevice]:
            try:
                async with semaphore:
                    return await self._probe_host(ip, arp_table)
            finally:
                progress["scanned"] += 1
                scanned = progress["scanned"]
                if scanned % batch_size == 0 or scanned == len(ips):
                    logger.debug("Scanned %d/%d IPs...", scanned, len(ips))
                    await self._notify_callbacks("scan_progress", {
                        "scanned": scanned,
                        "total": len(ips)
                    })

        # gather keeps input order, so results stay in ascending address order
        results = await asyncio.gather(*[wrapped(ip) for ip in ips], return_exceptions=True)

        devices = []
        for ip, result in zip(ips, results):
            if isinstance(result, NetworkDevice):
                devices.append(result)
            elif isinstance(result, Exception):
                logger.warning("Probe pipeline failed for %s: %s", ip, result)

        ranked = rank_devices(devices)
        candidates = sum(1 for d in ranked if d.is_likely_candidate)
        logger.info(
            "Network discovery complete. Found %d potential devices (%d likely RoboVacs)",
            len(ranked), candidates
        )

        await self._notify_callbacks("scan_completed", {
            "base_network": base,
            "devices_found": len(ranked),
            "candidates": candidates
        })

        return ranked

    async def _probe_host(self, ip: str, arp_table: Dict[str, str]) -> Optional[NetworkDevice]:
        """Ping, then port scan, then tag with neighbor table data."""
        if not await self.prober.is_alive(ip):
            return None

        logger.debug("Device found at %s, checking ports...", ip)
        open_ports = await self.port_prober.open_ports(ip, self.settings.CANDIDATE_PORTS)
        if not open_ports:
            return None

        mac = arp_table.get(ip)
        device = NetworkDevice(
            ip=ip,
            mac=mac,
            vendor=lookup_vendor(mac),
            ports=open_ports,
            control_port=self.settings.CONTROL_PORT
        )
        logger.debug("Potential device: %s", device.to_dict())
        return device

    async def find_candidates(self, subnet: Optional[str] = None) -> List[NetworkDevice]:
        """Devices that are most likely RoboVacs."""
        devices = await self.discover(subnet)
        return [
            d for d in devices
            if d.is_likely_candidate or (d.control_port in d.ports and d.vendor is not None)
        ]

    async def best_candidate_ip(self, subnet: Optional[str] = None) -> Optional[str]:
        """
        Pick the single best address to attempt a local connection at.

        A likely RoboVac wins; otherwise the first device with the control
        port open; otherwise None.
        """
        devices = await self.discover(subnet)
        if not devices:
            logger.info("No devices found during auto-discovery")
            return None

        for device in devices:
            if device.is_likely_candidate:
                logger.info(
                    "Found likely RoboVac at %s (MAC: %s, Vendor: %s)",
                    device.ip, device.mac, device.vendor
                )
                return device.ip

        for device in devices:
            if device.control_port in device.ports:
                logger.info(
                    "Found potential RoboVac at %s with port %s open",
                    device.ip, device.control_port
                )
                return device.ip

        logger.info("No suitable RoboVac candidates found")
        return None


async def discover_devices(subnet: Optional[str] = None) -> List[NetworkDevice]:
    """Run a discovery scan with default settings."""
    return await NetworkScanner().discover(subnet)


async def find_robovacs(subnet: Optional[str] = None) -> List[NetworkDevice]:
    """Run a discovery scan and keep only likely RoboVacs."""
    return await NetworkScanner().find_candidates(subnet)
