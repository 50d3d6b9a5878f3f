"""Root logger configuration for hosts (the demo script, an editor, ...).

The engine modules only call ``logging.getLogger(__name__)``; nothing in the
package configures handlers on import.
"""
from __future__ import annotations

from typing import Optional
import logging
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """Console handler, plus a rotating file handler (1 MB, 2 backups) when `log_file` is set."""
    root = logging.getLogger()
    root.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)

    root.handlers.clear()
    root.addHandler(ch)

    if log_file:
        fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=2)
        fh.setFormatter(fmt)
        root.addHandler(fh)
