from pydantic import BaseModel, ConfigDict
from typing import Optional


class DeviceResponse(BaseModel):
    """Discovered device schema."""
    model_config = ConfigDict(from_attributes=True)

    ip: str
    mac: Optional[str] = None
    vendor: Optional[str] = None
    ports: list[int]
    is_likely_candidate: bool


class DiscoveryResponse(BaseModel):
    """Discovery result with summary counts."""
    devices: list[DeviceResponse]
    total: int
    candidates: int


class BestCandidateResponse(BaseModel):
    """Single best address for a local connection attempt."""
    success: bool
    ip: Optional[str] = None
    message: str
