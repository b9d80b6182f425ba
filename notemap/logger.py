"""
Centralized logging for notemap.
Logs to both console and a rotating file (.notemap_data/notemap.log).
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from logging.handlers import RotatingFileHandler

ROOT_LOGGER = "notemap"
LOG_DIR = Path(os.environ.get("NOTEMAP_LOG_DIR", ".notemap_data"))
LOG_FILE = LOG_DIR / "notemap.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def _configure_root() -> logging.Logger:
    global _configured
    root = logging.getLogger(ROOT_LOGGER)

    if not _configured:
        root.setLevel(logging.DEBUG)
        LOG_DIR.mkdir(parents=True, exist_ok=True)

        # Console handler
        ch = logging.StreamHandler()
        ch.setLevel(logging.INFO)
        ch.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

        # File handler (rotates at 2MB, keeps 3 backups)
        fh = RotatingFileHandler(LOG_FILE, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

        root.addHandler(ch)
        root.addHandler(fh)
        _configured = True

    return root


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Return ``notemap.<name>``; handlers live on the shared parent."""
    root = _configure_root()
    if name == ROOT_LOGGER:
        return root
    return root.getChild(name)
