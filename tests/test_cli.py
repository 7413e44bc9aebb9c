"""Tests for the command line interface."""

import json
import tempfile

import pytest
import yaml

from system_monitor import __version__
from system_monitor.cli import main


def _write_config(data):
    fh = tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False)
    with fh:
        yaml.dump(data, fh)
    return fh.name


def test_version(capsys):
    main(["version"])
    assert capsys.readouterr().out.strip() == f"system-monitor {__version__}"


def test_no_command_exits(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1


def test_sample_prints_every_monitor(capsys):
    path = _write_config({
        "monitors": {
            "cpu": {"update_interval": None},
            "mem": {"percentage_output": False},
        },
    })
    main(["--config", path, "sample"])
    results = json.loads(capsys.readouterr().out)
    assert set(results) == {"cpu", "mem", "disk"}
    assert 0 <= results["cpu"] <= 100
    assert set(results["mem"]) == {"freemem", "totalmem"}
    assert set(results["disk"]) == {"free", "used"}


def test_run_exits_when_storage_unreachable():
    path = _write_config({
        "storage": {
            "backend": "mongo",
            "mongo_url": "mongodb://127.0.0.1:1/system-monitor",
            "server_selection_timeout_ms": 100,
        },
    })
    with pytest.raises(SystemExit) as exc_info:
        main(["--config", path, "run"])
    assert exc_info.value.code == 1


def test_run_rejects_unknown_backend():
    path = _write_config({"storage": {"backend": "carrier-pigeon"}})
    with pytest.raises(ValueError, match="carrier-pigeon"):
        main(["--config", path, "run"])


def test_sample_reports_failed_disk_and_keeps_others(capsys):
    path = _write_config({
        "monitors": {
            "cpu": {"update_interval": None},
            "disk": {"mount_point": "/no/such/mount"},
        },
    })
    main(["--config", path, "sample"])
    results = json.loads(capsys.readouterr().out)
    assert results["disk"] is None
    assert 0 <= results["cpu"] <= 100
    assert 0 <= results["mem"] <= 100
