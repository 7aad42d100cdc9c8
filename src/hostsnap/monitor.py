"""Snapshot collection engine for hostsnap."""

import logging
import math
from collections.abc import Callable

from hostsnap.models import (
    DiskUsage,
    DiskUsageMap,
    MetricResult,
    MetricUnavailable,
    NetworkInterfaceCounters,
    ProcessMemorySample,
    ProcessRanking,
    Snapshot,
)
from hostsnap.policy import DiskPolicy, select_policy
from hostsnap.provider import MetricsProvider, PsutilProvider

logger = logging.getLogger(__name__)

CPU_ERROR = "Check Cpu Error"
MEMORY_ERROR = "无法获取内存信息"
DISK_ERROR = "Check Disk Error  Not Found disk "

DEFAULT_CPU_INTERVAL = 5.0


def two_decimals(value: float) -> str:
    """Render to two decimals, re-parse and render again."""
    rounded = float(f"{value:.2f}")
    return f"{rounded:.2f}"


def ceil_percent(value: float) -> int:
    """Round a usage percentage up to a whole, non-negative percent."""
    return max(0, math.ceil(value))


def sample_cpu_percent(provider: MetricsProvider, interval: float) -> MetricResult[str]:
    """Aggregate CPU utilization measured over a blocking interval."""
    try:
        samples = provider.cpu_percent(interval, per_core=False)
        if not samples:
            raise MetricUnavailable("cpu percent: provider returned no samples")
    except MetricUnavailable as exc:
        logger.debug("CPU percent unavailable: %s", exc)
        return MetricResult("", error=CPU_ERROR)
    return MetricResult(two_decimals(samples[0]))


def sample_cpu_load(provider: MetricsProvider, policy: DiskPolicy) -> MetricResult[str]:
    """5-minute load average per physical core; empty off Linux."""
    if not policy.supports_load_average:
        return MetricResult("")
    try:
        cores = provider.cpu_core_count(logical=False)
        if cores <= 0:
            raise MetricUnavailable("cpu count: no physical cores")
        _, load5, _ = provider.load_average()
    except MetricUnavailable as exc:
        logger.debug("CPU load unavailable: %s", exc)
        return MetricResult("", error=CPU_ERROR)
    return MetricResult(two_decimals(load5 / cores))


def sample_memory(provider: MetricsProvider) -> MetricResult[str]:
    """System-wide memory used percent."""
    try:
        percent = provider.memory_used_percent()
    except MetricUnavailable as exc:
        logger.debug("Memory unavailable: %s", exc)
        return MetricResult("", error=MEMORY_ERROR)
    return MetricResult(f"{percent:.2f}")


def rank_processes_by_memory(provider: MetricsProvider) -> ProcessRanking:
    """
    Collect resident memory of every visible process, largest first.

    Processes that exit or deny access mid-scan are skipped and counted.
    A failed enumeration yields an empty ranking carrying the error.
    """
    try:
        handles = provider.list_processes()
    except MetricUnavailable as exc:
        logger.debug("Process list unavailable: %s", exc)
        return ProcessRanking(error=str(exc))

    samples: list[ProcessMemorySample] = []
    skipped = 0
    for handle in handles:
        try:
            rss = handle.resident_bytes()
        except MetricUnavailable as exc:
            logger.debug("Skipping process: %s", exc)
            skipped += 1
            continue
        samples.append(ProcessMemorySample(pid=handle.pid, resident_bytes=rss))

    samples.sort(key=lambda sample: sample.resident_bytes, reverse=True)
    return ProcessRanking(samples=samples, skipped=skipped)


def _map_disk_usage(
    provider: MetricsProvider,
    policy: DiskPolicy,
    percent_of: Callable[[DiskUsage], float],
) -> MetricResult[DiskUsageMap]:
    try:
        partitions = provider.disk_partitions(all=True)
    except MetricUnavailable as exc:
        logger.debug("Disk partitions unavailable: %s", exc)
        return MetricResult(DiskUsageMap(), error=DISK_ERROR)

    usage_map = DiskUsageMap()
    for partition in partitions:
        if not policy.include(partition):
            continue
        try:
            usage = provider.disk_usage(partition.mountpoint)
        except MetricUnavailable as exc:
            logger.debug("Skipping partition %s: %s", partition.device, exc)
            usage_map.skipped += 1
            continue
        usage_map.entries[policy.key_for(partition)] = ceil_percent(percent_of(usage))
    return MetricResult(usage_map)


def map_disk_space(provider: MetricsProvider, policy: DiskPolicy) -> MetricResult[DiskUsageMap]:
    """Space used percent per included filesystem."""
    return _map_disk_usage(provider, policy, lambda usage: usage.used_percent)


def map_disk_inodes(provider: MetricsProvider, policy: DiskPolicy) -> MetricResult[DiskUsageMap]:
    """Inodes used percent per included filesystem; empty off Linux."""
    if not policy.supports_inodes:
        return MetricResult(DiskUsageMap())
    return _map_disk_usage(provider, policy, lambda usage: usage.inodes_used_percent)


def read_network_counters(provider: MetricsProvider) -> list[NetworkInterfaceCounters] | None:
    """Per-interface I/O counters, or None after logging the failure."""
    try:
        return provider.net_io_counters(per_interface=True)
    except MetricUnavailable as exc:
        logger.warning("无法获取网络IO信息：%s", exc)
        return None


class SnapshotCollector:
    """
    Runs every sampler once, in sequence, against one metrics provider.

    A failing sampler degrades only its own metric; the others still run.
    """

    def __init__(
        self,
        provider: MetricsProvider | None = None,
        policy: DiskPolicy | None = None,
        cpu_interval: float = DEFAULT_CPU_INTERVAL,
    ) -> None:
        """
        Initialize the SnapshotCollector.

        Args:
            provider: Metrics source. Defaults to the local host via psutil.
            policy: Platform strategy. Defaults to the running platform's.
            cpu_interval: Blocking CPU measurement window (seconds). Default 5.0s.
        """
        self._provider = provider if provider is not None else PsutilProvider()
        self._policy = policy if policy is not None else select_policy()
        self._cpu_interval = max(0.0, cpu_interval)

    @property
    def cpu_interval(self) -> float:
        """Get the CPU measurement window."""
        return self._cpu_interval

    @property
    def policy(self) -> DiskPolicy:
        """Get the platform strategy in use."""
        return self._policy

    def collect(self) -> Snapshot:
        """Collect a snapshot of the current host state."""
        # Blocks for the whole CPU interval
        cpu_percent = sample_cpu_percent(self._provider, self._cpu_interval)
        cpu_load = sample_cpu_load(self._provider, self._policy)
        memory_percent = sample_memory(self._provider)
        disk_inodes = map_disk_inodes(self._provider, self._policy)
        disk_space = map_disk_space(self._provider, self._policy)
        processes = rank_processes_by_memory(self._provider)
        network = read_network_counters(self._provider)

        return Snapshot(
            cpu_percent=cpu_percent,
            cpu_load=cpu_load,
            memory_percent=memory_percent,
            disk_space=disk_space,
            disk_inodes=disk_inodes,
            processes=processes,
            network=network,
        )
