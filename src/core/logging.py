from __future__ import annotations

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    log_level = (level or "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # httpx logs every store request at INFO.
    logging.getLogger("httpx").setLevel(max(logging.WARNING, logging.getLevelName(log_level)))
