"""
Logging configuration.

Imported once by ``member_map.main`` so every module logger created with
``logging.getLogger(__name__)`` shares the same handler and format.
"""

import logging
import sys

from member_map.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format=LOG_FORMAT,
    handlers=[logging.StreamHandler(sys.stdout)],
)

# httpx logs every request at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)
