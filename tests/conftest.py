"""Shared fixtures for hostsnap tests."""

import pytest

from hostsnap.models import (
    DiskUsage,
    MetricUnavailable,
    NetworkInterfaceCounters,
    Partition,
)


class FakeProcess:
    """ProcessHandle returning a fixed RSS, or raising when rss is None."""

    def __init__(self, pid: int, rss: int | None) -> None:
        self.pid = pid
        self._rss = rss

    def resident_bytes(self) -> int:
        if self._rss is None:
            raise MetricUnavailable(f"memory info for pid {self.pid}: access denied")
        return self._rss


class FakeProvider:
    """
    Scripted MetricsProvider.

    Any argument given as an exception instance is raised by its call.
    """

    def __init__(
        self,
        cpu=(12.5,),
        cores=4,
        load=(0.5, 2.0, 1.0),
        memory=42.0,
        processes=(),
        partitions=(),
        usage=None,
        network=(),
    ) -> None:
        self.cpu = cpu
        self.cores = cores
        self.load = load
        self.memory = memory
        self.processes = processes
        self.partitions = partitions
        self.usage = usage or {}
        self.network = network
        self.calls: list[str] = []

    @staticmethod
    def _value(value):
        if isinstance(value, Exception):
            raise value
        return value

    def cpu_percent(self, interval, per_core=False):
        self.calls.append("cpu_percent")
        return list(self._value(self.cpu))

    def cpu_core_count(self, logical=False):
        self.calls.append("cpu_core_count")
        return self._value(self.cores)

    def load_average(self):
        self.calls.append("load_average")
        return self._value(self.load)

    def memory_used_percent(self):
        self.calls.append("memory_used_percent")
        return self._value(self.memory)

    def list_processes(self):
        self.calls.append("list_processes")
        return [FakeProcess(pid, rss) for pid, rss in self._value(self.processes)]

    def disk_partitions(self, all=True):
        self.calls.append("disk_partitions")
        return [Partition(device, mountpoint) for device, mountpoint in self._value(self.partitions)]

    def disk_usage(self, mountpoint):
        self.calls.append("disk_usage")
        usage = self._value(self.usage[mountpoint])
        if isinstance(usage, DiskUsage):
            return usage
        return DiskUsage(used_percent=usage[0], inodes_used_percent=usage[1])

    def net_io_counters(self, per_interface=True):
        self.calls.append("net_io_counters")
        return [NetworkInterfaceCounters(*row) for row in self._value(self.network)]


@pytest.fixture
def make_provider():
    """Factory for scripted metrics providers."""
    return FakeProvider


@pytest.fixture
def unavailable():
    """Factory for provider failures."""
    return lambda message="provider failure": MetricUnavailable(message)
