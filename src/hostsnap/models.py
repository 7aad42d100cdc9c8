"""Data models for hostsnap."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


class MetricUnavailable(Exception):
    """Raised when a single metrics provider call fails."""


@dataclass(slots=True, frozen=True)
class ProcessMemorySample:
    """Resident memory of one process at snapshot time."""

    pid: int
    resident_bytes: int


@dataclass(slots=True, frozen=True)
class NetworkInterfaceCounters:
    """Cumulative I/O counters for one network interface since boot."""

    name: str
    bytes_recv: int
    bytes_sent: int
    errin: int
    errout: int


@dataclass(slots=True, frozen=True)
class Partition:
    """A mounted filesystem as reported by the provider."""

    device: str
    mountpoint: str


@dataclass(slots=True, frozen=True)
class DiskUsage:
    """Usage percentages of a single mounted filesystem."""

    used_percent: float
    inodes_used_percent: float


@dataclass(slots=True, frozen=True)
class MetricResult(Generic[T]):
    """
    Outcome of one sampler: a value, or a degraded metric with an error.

    A degraded result still carries a value of the normal type (an empty
    string or an empty map) so renderers never have to branch on type.
    """

    value: T
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True when the metric was sampled successfully."""
        return self.error is None


@dataclass(slots=True)
class DiskUsageMap:
    """Rounded usage percent keyed by device or mountpoint."""

    entries: dict[str, int] = field(default_factory=dict)
    skipped: int = 0


@dataclass(slots=True)
class ProcessRanking:
    """Processes ordered by resident memory, largest first."""

    samples: list[ProcessMemorySample] = field(default_factory=list)
    skipped: int = 0
    error: str | None = None


@dataclass(slots=True)
class Snapshot:
    """One point-in-time set of sampled host metrics."""

    cpu_percent: MetricResult[str]
    cpu_load: MetricResult[str]
    memory_percent: MetricResult[str]
    disk_space: MetricResult[DiskUsageMap]
    disk_inodes: MetricResult[DiskUsageMap]
    processes: ProcessRanking
    network: list[NetworkInterfaceCounters] | None
