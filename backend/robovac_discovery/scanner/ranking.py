from typing import Iterable, List

from .models import NetworkDevice


def rank_devices(devices: Iterable[NetworkDevice]) -> List[NetworkDevice]:
    """Put likely candidates first, keeping discovery order within each group."""
    # sorted() is stable, so address order survives inside both partitions
    return sorted(devices, key=lambda d: not d.is_likely_candidate)
