"""Tests for the configuration module."""

import os
import tempfile

import yaml

from system_monitor.config import (
    DEFAULT_MONGO_URL,
    MonitorConfig,
    SystemMonitorConfig,
    load_config,
)


def test_load_config_defaults():
    """Loading from a non-existent file returns defaults."""
    cfg = load_config("/tmp/nonexistent_system_monitor.yaml")
    assert isinstance(cfg, SystemMonitorConfig)
    assert cfg.storage.backend == "mongo"
    assert cfg.storage.mongo_url == DEFAULT_MONGO_URL
    assert cfg.storage.mongo_url == "mongodb://localhost:27017/system-monitor"
    assert cfg.defaults == {"interval": 1000}
    assert cfg.monitors == {}
    assert cfg.monitor("cpu") == MonitorConfig()


def test_load_config_from_yaml():
    """Loading from a YAML file populates values."""
    data = {
        "storage": {
            "backend": "local",
            "local_output_dir": "/var/lib/monitor",
            "unknown_key": 1,
        },
        "defaults": {"interval": 5000},
        "monitors": {
            "cpu": {"update_interval": None},
            "mem": {"enabled": False},
            "disk": {"mount_point": "/data", "free_only": True},
        },
    }
    with tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False) as fh:
        yaml.dump(data, fh)
        path = fh.name

    try:
        cfg = load_config(path)
        assert cfg.storage.backend == "local"
        assert cfg.storage.local_output_dir == "/var/lib/monitor"
        assert cfg.defaults["interval"] == 5000
        assert cfg.monitor("cpu") == MonitorConfig(options={"update_interval": None})
        assert cfg.monitor("mem").enabled is False
        assert cfg.monitor("disk").options == {"mount_point": "/data", "free_only": True}
    finally:
        os.unlink(path)


def test_monitor_shorthand():
    """A bare boolean toggles a monitor."""
    with tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False) as fh:
        fh.write("monitors:\n  disk: false\n  mem:\n")
        path = fh.name

    try:
        cfg = load_config(path)
        assert cfg.monitor("disk").enabled is False
        assert cfg.monitor("mem").enabled is True
    finally:
        os.unlink(path)


def test_env_override():
    """Environment variables override YAML values."""
    data = {"storage": {"backend": "local"}, "defaults": {"interval": 100}}
    with tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False) as fh:
        yaml.dump(data, fh)
        path = fh.name

    try:
        os.environ["SYSTEM_MONITOR_BACKEND"] = "mongo"
        os.environ["SYSTEM_MONITOR_MONGO_URL"] = "mongodb://db:27017/metrics"
        os.environ["SYSTEM_MONITOR_INTERVAL"] = "2500"
        cfg = load_config(path)
        assert cfg.storage.backend == "mongo"
        assert cfg.storage.mongo_url == "mongodb://db:27017/metrics"
        assert cfg.defaults["interval"] == 2500
    finally:
        os.environ.pop("SYSTEM_MONITOR_BACKEND", None)
        os.environ.pop("SYSTEM_MONITOR_MONGO_URL", None)
        os.environ.pop("SYSTEM_MONITOR_INTERVAL", None)
        os.unlink(path)
