import asyncio
import logging
from typing import Iterable, List, Optional

from ..core.config import settings

logger = logging.getLogger(__name__)


class PortProber:
    """Pass/fail TCP connect checks against the candidate port set."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else settings.PORT_TIMEOUT

    async def check_port(self, ip: str, port: int) -> bool:
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(ip, port),
                timeout=self.timeout
            )
        except (asyncio.TimeoutError, OSError) as e:
            logger.debug("%s:%s closed (%s)", ip, port, type(e).__name__)
            return False

        # No payload is exchanged, the connect itself is the answer
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return True

    async def open_ports(self, ip: str, ports: Optional[Iterable[int]] = None) -> List[int]:
        """Probe all ports in parallel and return the open ones in candidate order."""
        if ports is None:
            ports = settings.CANDIDATE_PORTS
        ports = list(ports)

        results = await asyncio.gather(*[self.check_port(ip, p) for p in ports])
        return [port for port, is_open in zip(ports, results) if is_open]
