"""
Runtime settings — read once from NOTEMAP_* environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TypeVar

from notemap.logger import get_logger

log = get_logger("config")

T = TypeVar("T")

DEFAULT_API_BASE_URL = "http://localhost:8080/api"


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: Optional[float] = None     # None → transport default
    notice_ttl: float = 5.0                     # seconds a notice stays visible
    max_notices: Optional[int] = None           # None → unbounded stacking
    upload_settle_delay: float = 0.5
    canvas_width: int = 800
    canvas_height: int = 600
    default_depth: int = 2
    max_depth: int = 5


def _read(env: Mapping[str, str], key: str, cast: Callable[[str], T], default: T) -> T:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        log.warning(f"Ignoring {key}={raw!r} (not a valid value), using {default!r}")
        return default


def _optional_float(raw: str) -> Optional[float]:
    if raw.lower() == "none":
        return None
    value = float(raw)
    if value <= 0:
        raise ValueError(raw)
    return value


def _optional_int(raw: str) -> Optional[int]:
    if raw.lower() == "none":
        return None
    value = int(raw)
    if value < 1:
        raise ValueError(raw)
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    defaults = Settings()
    settings = Settings(
        api_base_url=_read(env, "NOTEMAP_API_BASE_URL", str, defaults.api_base_url).rstrip("/"),
        request_timeout=_read(env, "NOTEMAP_REQUEST_TIMEOUT", _optional_float, defaults.request_timeout),
        notice_ttl=_read(env, "NOTEMAP_NOTICE_TTL", float, defaults.notice_ttl),
        max_notices=_read(env, "NOTEMAP_MAX_NOTICES", _optional_int, defaults.max_notices),
        upload_settle_delay=_read(env, "NOTEMAP_UPLOAD_SETTLE_DELAY", float, defaults.upload_settle_delay),
        canvas_width=_read(env, "NOTEMAP_CANVAS_WIDTH", int, defaults.canvas_width),
        canvas_height=_read(env, "NOTEMAP_CANVAS_HEIGHT", int, defaults.canvas_height),
    )
    log.info(f"Settings loaded | api={settings.api_base_url} | timeout={settings.request_timeout}")
    return settings
