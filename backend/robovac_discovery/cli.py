import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from . import __version__
from .core.config import settings
from .core.logging_setup import setup_logging
from .scanner.models import NetworkDevice
from .scanner.network_scanner import NetworkScanner
from .schemas import BestCandidateResponse, DeviceResponse, DiscoveryResponse

logger = logging.getLogger(__name__)


def format_device(device: NetworkDevice) -> str:
    """One line summary of a discovered device."""
    marker = "*" if device.is_likely_candidate else " "
    ports = ",".join(str(p) for p in device.ports)
    return f"{marker} {device.ip:<15}  {device.mac or '-':<17}  {device.vendor or '-':<12}  ports={ports}"


def build_discovery_response(devices: List[NetworkDevice]) -> DiscoveryResponse:
    return DiscoveryResponse(
        devices=[DeviceResponse.model_validate(d) for d in devices],
        total=len(devices),
        candidates=sum(1 for d in devices if d.is_likely_candidate)
    )


async def run(args: argparse.Namespace) -> int:
    scanner = NetworkScanner()

    if args.best:
        ip = await scanner.best_candidate_ip(args.subnet)
        response = BestCandidateResponse(
            success=ip is not None,
            ip=ip,
            message=f"Best candidate at {ip}" if ip else "No suitable RoboVac candidates found."
        )
        print(response.model_dump_json(indent=2) if args.json else response.message)
        return 0 if ip else 1

    if args.candidates:
        devices = await scanner.find_candidates(args.subnet)
    else:
        devices = await scanner.discover(args.subnet)

    if args.json:
        print(build_discovery_response(devices).model_dump_json(indent=2))
        return 0

    if not devices:
        print("No devices found.")
        return 0

    for device in devices:
        print(format_device(device))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="robovac-discover",
        description="Discover Eufy RoboVac devices on the local network"
    )
    parser.add_argument("--candidates", action="store_true", help="Only show likely RoboVacs")
    parser.add_argument("--best", action="store_true", help="Print the single best address to connect to")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--subnet", default=None, help="Subnet to scan, e.g. 192.168.1.0/24 (auto-detected if omitted)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    setup_logging(args.debug or settings.DEBUG)

    try:
        return asyncio.run(run(args))
    except ValueError as e:
        logger.error("Discovery failed: %s", e)
        return 2
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
