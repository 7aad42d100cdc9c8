"""Tests for the hostsnap entry point."""

import logging

from hostsnap import app
from hostsnap.monitor import SnapshotCollector
from hostsnap.policy import LinuxDiskPolicy


def test_main_prints_report(make_provider, monkeypatch, capsys):
    """Test main writes one full report to stdout."""
    provider = make_provider(
        cpu=[23.456],
        processes=[(1, 3 * 1024 * 1024)],
        network=[("eth0", 3 * 1024 * 1024, 1024 * 1024, 0, 2)],
    )
    monkeypatch.setattr(
        app,
        "SnapshotCollector",
        lambda: SnapshotCollector(provider, LinuxDiskPolicy(), cpu_interval=0),
    )

    app.main()

    out = capsys.readouterr().out
    assert "CPU使用率:  23.46%" in out
    assert "1. PID: 1, Memory Usage: 3 MB" in out
    assert "发送错误数：2" in out


def test_main_network_failure_goes_to_log(make_provider, unavailable, monkeypatch, capsys, caplog):
    """Test a network failure is logged, not printed into the report."""
    provider = make_provider(network=unavailable("interfaces unreadable"))
    monkeypatch.setattr(
        app,
        "SnapshotCollector",
        lambda: SnapshotCollector(provider, LinuxDiskPolicy(), cpu_interval=0),
    )

    with caplog.at_level(logging.WARNING):
        app.main()

    out = capsys.readouterr().out
    assert "服务器的网络信息如下:" in out
    assert "interfaces unreadable" not in out
    assert "interfaces unreadable" in caplog.text
