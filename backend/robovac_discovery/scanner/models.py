from dataclasses import dataclass, field
from typing import Optional, List

from ..core.config import settings


@dataclass
class NetworkDevice:
    """Represents a host that answered a ping and has a candidate port open."""
    ip: str
    mac: Optional[str] = None
    vendor: Optional[str] = None
    ports: List[int] = field(default_factory=list)
    # Port whose presence most strongly implies the Tuya local protocol
    control_port: int = field(default=settings.CONTROL_PORT, repr=False, compare=False)

    @property
    def is_likely_candidate(self) -> bool:
        """Known vendor MAC plus an open control port."""
        return self.vendor is not None and self.control_port in self.ports

    def to_dict(self) -> dict:
        return {
            "ip": self.ip,
            "mac": self.mac,
            "vendor": self.vendor,
            "ports": list(self.ports),
            "is_likely_candidate": self.is_likely_candidate,
        }
