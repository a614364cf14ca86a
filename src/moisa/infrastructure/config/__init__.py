from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, StremioConfig, TorrentioConfig, TorrServerConfig

__all__ = [
    "AppConfig",
    "EnvOverrides",
    "StremioConfig",
    "TorrServerConfig",
    "TorrentioConfig",
    "load_config",
]
