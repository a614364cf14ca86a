"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "moisa",
    "environment": "dev",
    "http": {
        "follow_redirects": True,
        "user_agent": "Moisa/1.1.1",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "torrentio": {
        "base_url": "https://torrentio.strem.fun",
        "path_prefix": "qualityfilter=threed,480p,scr,cam,unknown",
        "timeout_ms": 25_000,
    },
    "torrserver": {
        "url": "http://127.0.0.1:8090",
    },
    "stremio": {
        "public_base_url": None,
        "max_streams": 25,
    },
}
