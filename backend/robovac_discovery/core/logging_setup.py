import logging
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(debug: Optional[bool] = None) -> None:
    """Configure root logging for command line use.

    Library modules only create loggers; handlers are installed here.
    """
    if debug is None:
        debug = settings.DEBUG

    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT)
