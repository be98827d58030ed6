import asyncio
import logging
import sys
from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.config import settings

logger = logging.getLogger(__name__)


class ReachabilityProber(ABC):
    """Cheap liveness check run before any port is probed."""

    @abstractmethod
    async def is_alive(self, ip: str) -> bool:
        """Return True if the host answered; never raises."""


class PingProber(ReachabilityProber):
    """Single ICMP echo through the system ping utility."""

    def __init__(self, platform: Optional[str] = None,
                 timeout: Optional[float] = None,
                 process_timeout: Optional[float] = None):
        self.platform = platform or sys.platform
        self.timeout = timeout if timeout is not None else settings.PING_TIMEOUT
        self.process_timeout = (
            process_timeout if process_timeout is not None else settings.PING_PROCESS_TIMEOUT
        )

    def build_command(self, ip: str) -> List[str]:
        if self.platform == "win32":
            return ["ping", "-n", "1", "-w", str(int(self.timeout * 1000)), ip]
        return ["ping", "-c", "1", "-W", str(max(1, int(self.timeout))), ip]

    async def is_alive(self, ip: str) -> bool:
        """Ping a single host."""
        try:
            process = await asyncio.create_subprocess_exec(
                *self.build_command(ip),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL
            )
        except OSError as e:
            logger.debug("Could not run ping for %s: %s", ip, e)
            return False

        try:
            await asyncio.wait_for(process.wait(), timeout=self.process_timeout)
        except asyncio.TimeoutError:
            try:
                process.kill()
            except ProcessLookupError:
                pass  # exited between the timeout and the kill
            await process.wait()
            logger.debug("Ping to %s timed out", ip)
            return False

        return process.returncode == 0
