# Scanner module
from .models import NetworkDevice
from .network_scanner import NetworkScanner, discover_devices, find_robovacs
from .ranking import rank_devices

__all__ = ["NetworkDevice", "NetworkScanner", "discover_devices", "find_robovacs", "rank_devices"]
