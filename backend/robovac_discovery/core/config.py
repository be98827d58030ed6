from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Network range
    DEFAULT_SUBNET: Optional[str] = None  # Auto-detect if None
    FALLBACK_BASE_NETWORK: str = "192.168.1.0"
    HOST_COUNT: int = 254  # host octets 1..254 of the base network

    # Tuya local protocol ports, control port first
    CANDIDATE_PORTS: list[int] = [6668, 6667, 443]
    CONTROL_PORT: int = 6668

    # Scanning
    SCAN_BATCH_SIZE: int = 20  # max host pipelines in flight
    PING_TIMEOUT: float = 1.0  # seconds, passed to ping itself
    PING_PROCESS_TIMEOUT: float = 2.0  # seconds, hard cap on the ping process
    PORT_TIMEOUT: float = 0.5  # seconds per TCP connect attempt
    ARP_TIMEOUT: float = 5.0  # seconds for the neighbor table dump
    ARP_SOURCE: str = "auto"  # auto, proc or command

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
