"""Metrics provider capability and its psutil implementation."""

import os
from typing import Protocol

import psutil

from hostsnap.models import (
    DiskUsage,
    MetricUnavailable,
    NetworkInterfaceCounters,
    Partition,
)

# Errors psutil raises for a single failed call
PROVIDER_ERRORS = (psutil.Error, OSError, NotImplementedError)


class ProcessHandle(Protocol):
    """A live process whose resident memory can be read."""

    @property
    def pid(self) -> int: ...

    def resident_bytes(self) -> int: ...


class MetricsProvider(Protocol):
    """Read-only OS metrics capability consumed by the samplers."""

    def cpu_percent(self, interval: float, per_core: bool = False) -> list[float]: ...

    def cpu_core_count(self, logical: bool = False) -> int: ...

    def load_average(self) -> tuple[float, float, float]: ...

    def memory_used_percent(self) -> float: ...

    def list_processes(self) -> list[ProcessHandle]: ...

    def disk_partitions(self, all: bool = True) -> list[Partition]: ...

    def disk_usage(self, mountpoint: str) -> DiskUsage: ...

    def net_io_counters(self, per_interface: bool = True) -> list[NetworkInterfaceCounters]: ...


class PsutilProcess:
    """ProcessHandle backed by a psutil.Process."""

    def __init__(self, process: psutil.Process) -> None:
        self._process = process

    @property
    def pid(self) -> int:
        return self._process.pid

    def resident_bytes(self) -> int:
        try:
            return self._process.memory_info().rss
        except PROVIDER_ERRORS as exc:
            raise MetricUnavailable(f"memory info for pid {self._process.pid}: {exc}") from exc


class PsutilProvider:
    """
    MetricsProvider that reads the local host through psutil.

    Every psutil or OS error is re-raised as MetricUnavailable so callers
    only ever handle one exception type.
    """

    def cpu_percent(self, interval: float, per_core: bool = False) -> list[float]:
        try:
            result = psutil.cpu_percent(interval=interval, percpu=per_core)
        except PROVIDER_ERRORS as exc:
            raise MetricUnavailable(f"cpu percent: {exc}") from exc
        return list(result) if per_core else [result]

    def cpu_core_count(self, logical: bool = False) -> int:
        try:
            count = psutil.cpu_count(logical=logical)
        except PROVIDER_ERRORS as exc:
            raise MetricUnavailable(f"cpu count: {exc}") from exc
        # psutil returns None when the count cannot be determined
        if not count:
            raise MetricUnavailable("cpu count: undetermined")
        return count

    def load_average(self) -> tuple[float, float, float]:
        try:
            return psutil.getloadavg()
        except PROVIDER_ERRORS as exc:
            raise MetricUnavailable(f"load average: {exc}") from exc

    def memory_used_percent(self) -> float:
        try:
            return psutil.virtual_memory().percent
        except PROVIDER_ERRORS as exc:
            raise MetricUnavailable(f"virtual memory: {exc}") from exc

    def list_processes(self) -> list[PsutilProcess]:
        try:
            return [PsutilProcess(proc) for proc in psutil.process_iter()]
        except PROVIDER_ERRORS as exc:
            raise MetricUnavailable(f"process list: {exc}") from exc

    def disk_partitions(self, all: bool = True) -> list[Partition]:
        try:
            parts = psutil.disk_partitions(all=all)
        except PROVIDER_ERRORS as exc:
            raise MetricUnavailable(f"disk partitions: {exc}") from exc
        return [Partition(device=part.device, mountpoint=part.mountpoint) for part in parts]

    def disk_usage(self, mountpoint: str) -> DiskUsage:
        try:
            usage = psutil.disk_usage(mountpoint)
            inodes_percent = _inodes_used_percent(mountpoint)
        except PROVIDER_ERRORS as exc:
            raise MetricUnavailable(f"disk usage for {mountpoint}: {exc}") from exc
        return DiskUsage(used_percent=usage.percent, inodes_used_percent=inodes_percent)

    def net_io_counters(self, per_interface: bool = True) -> list[NetworkInterfaceCounters]:
        try:
            counters = psutil.net_io_counters(pernic=per_interface)
        except PROVIDER_ERRORS as exc:
            raise MetricUnavailable(f"network io counters: {exc}") from exc
        if counters is None:
            raise MetricUnavailable("network io counters: no interfaces")
        if not per_interface:
            counters = {"all": counters}
        return [
            NetworkInterfaceCounters(
                name=name,
                bytes_recv=stat.bytes_recv,
                bytes_sent=stat.bytes_sent,
                errin=stat.errin,
                errout=stat.errout,
            )
            for name, stat in counters.items()
        ]


def _inodes_used_percent(mountpoint: str) -> float:
    """Percentage of inodes in use, 0.0 where the filesystem has none."""
    if not hasattr(os, "statvfs"):
        return 0.0
    st = os.statvfs(mountpoint)
    if st.f_files == 0:
        return 0.0
    used = st.f_files - st.f_ffree
    return used * 100.0 / st.f_files
