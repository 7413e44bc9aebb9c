"""Configuration loading and validation for system_monitor."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_MONGO_URL = "mongodb://localhost:27017/system-monitor"
DEFAULT_DATABASE = "system-monitor"

# Process-wide option defaults, the lowest configuration layer of every monitor.
GLOBAL_DEFAULTS: dict[str, Any] = {"interval": 1000}


@dataclass
class StorageConfig:
    """Backing store settings."""

    backend: str = "mongo"
    mongo_url: str = DEFAULT_MONGO_URL
    server_selection_timeout_ms: int = 5000
    local_output_dir: str = "./monitor_data"
    otel_endpoint: str = "http://localhost:4318"
    otel_service_name: str = "system-monitor"
    otel_export_interval_ms: int = 10000


@dataclass
class MonitorConfig:
    """Per-monitor settings: an enable switch plus option overrides."""

    enabled: bool = True
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class SystemMonitorConfig:
    """Top-level system_monitor configuration."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    defaults: dict[str, Any] = field(default_factory=lambda: dict(GLOBAL_DEFAULTS))
    monitors: dict[str, MonitorConfig] = field(default_factory=dict)

    def monitor(self, key: str) -> MonitorConfig:
        """Return the settings for *key*, falling back to an enabled monitor without overrides."""
        return self.monitors.get(key) or MonitorConfig()


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides using SYSTEM_MONITOR_ prefix."""
    env_map = {
        "SYSTEM_MONITOR_BACKEND": ("storage", "backend"),
        "SYSTEM_MONITOR_MONGO_URL": ("storage", "mongo_url"),
        "SYSTEM_MONITOR_LOCAL_OUTPUT_DIR": ("storage", "local_output_dir"),
        "SYSTEM_MONITOR_OTEL_ENDPOINT": ("storage", "otel_endpoint"),
        "SYSTEM_MONITOR_INTERVAL": ("defaults", "interval"),
    }
    for env_key, path in env_map.items():
        value = os.environ.get(env_key)
        if value is not None:
            obj = data
            for part in path[:-1]:
                obj = obj.setdefault(part, {})
            final_key = path[-1]
            # interval is in milliseconds
            if final_key == "interval":
                obj[final_key] = int(value)
            else:
                obj[final_key] = value
    return data


def _monitor_config(raw: Any) -> MonitorConfig:
    if not isinstance(raw, dict):
        return MonitorConfig(enabled=bool(raw) if raw is not None else True)
    options = dict(raw)
    enabled = bool(options.pop("enabled", True))
    return MonitorConfig(enabled=enabled, options=options)


def _dict_to_config(data: dict[str, Any]) -> SystemMonitorConfig:
    """Convert a raw dictionary to a SystemMonitorConfig dataclass."""
    storage_data = data.get("storage") or {}
    defaults = dict(GLOBAL_DEFAULTS)
    defaults.update(data.get("defaults") or {})
    monitors_data = data.get("monitors") or {}

    return SystemMonitorConfig(
        storage=StorageConfig(**{
            k: v for k, v in storage_data.items()
            if k in StorageConfig.__dataclass_fields__
        }),
        defaults=defaults,
        monitors={key: _monitor_config(raw) for key, raw in monitors_data.items()},
    )


def load_config(path: str | Path | None = None) -> SystemMonitorConfig:
    """Load configuration from a YAML file with environment overrides.

    Looks for ``system_monitor.yaml`` in the current directory if *path* is None.
    """
    data: dict[str, Any] = {}
    if path is None:
        path = Path("system_monitor.yaml")
    else:
        path = Path(path)

    if path.exists():
        with open(path, encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh)
            if isinstance(loaded, dict):
                data = loaded

    data = _apply_env_overrides(data)
    return _dict_to_config(data)
