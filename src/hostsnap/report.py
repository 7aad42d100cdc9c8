"""Plain-text report rendering for hostsnap."""

import json

from hostsnap.models import (
    DiskUsageMap,
    MetricResult,
    NetworkInterfaceCounters,
    ProcessMemorySample,
    Snapshot,
)

BANNER = """
# hostsnap - point-in-time host resource snapshot
"""

RULE = "+" * 30
SEPARATOR = "-" * 29

MEBIBYTE = 1024 * 1024


def section_header(title: str) -> str:
    """Format a section header line."""
    return f"{RULE}{title}{RULE}"


def to_megabytes(size: int) -> int:
    """Whole mebibytes, truncated."""
    return size // MEBIBYTE


def encode_disk_map(result: MetricResult[DiskUsageMap]) -> str:
    """Compact JSON of the usage map, or the placeholder when degraded."""
    if not result.ok:
        return result.error or ""
    encoded = {key: f"{percent}%" for key, percent in result.value.entries.items()}
    return json.dumps(encoded, ensure_ascii=False, separators=(",", ":"))


def _metric_text(result: MetricResult[str], suffix: str = "") -> str:
    if not result.ok:
        return result.error or ""
    return f"{result.value}{suffix}"


def render_cpu_memory(snapshot: Snapshot) -> list[str]:
    """Lines of the CPU, CPU load and memory block."""
    load = snapshot.cpu_load
    if load.ok and not load.value:
        load_line = ""
    else:
        load_line = f"CPU负载: {_metric_text(load)}"
    return [
        f"CPU使用率:  {_metric_text(snapshot.cpu_percent, '%')}",
        load_line,
        f"内存使用率:  {_metric_text(snapshot.memory_percent, '%')}",
    ]


def render_disks(snapshot: Snapshot) -> list[str]:
    """Lines of the disk space and inode block."""
    return [
        f"磁盘空间使用率:  {encode_disk_map(snapshot.disk_space)}",
        f"磁盘Inode使用率:  {encode_disk_map(snapshot.disk_inodes)}",
    ]


def render_top_processes(samples: list[ProcessMemorySample], top_n: int = 5) -> list[str]:
    """Up to top_n processes; fewer samples render fewer lines."""
    count = max(0, min(top_n, len(samples)))
    return [
        f"{i}. PID: {sample.pid}, Memory Usage: {to_megabytes(sample.resident_bytes)} MB"
        for i, sample in enumerate(samples[:count], start=1)
    ]


def render_network(interfaces: list[NetworkInterfaceCounters] | None) -> list[str]:
    """Per-interface counter lines; nothing when counters are absent."""
    lines: list[str] = []
    for io in interfaces or []:
        lines.extend(
            [
                f"网络接口：{io.name}",
                f"接收兆字节数：{to_megabytes(io.bytes_recv)}MB",
                f"发送兆字节数：{to_megabytes(io.bytes_sent)}MB",
                f"接收错误数：{io.errin}",
                f"发送错误数：{io.errout}",
                SEPARATOR,
            ]
        )
    return lines


def render_report(snapshot: Snapshot, top_n: int = 5) -> str:
    """
    Render a full snapshot as sectioned plain text.

    Every section header is always present, even when its metric failed.
    """
    lines = [BANNER]
    lines.append(section_header("CPU/CPU负载/内存信息"))
    lines.append("")
    lines.extend(render_cpu_memory(snapshot))
    lines.append("")
    lines.append(section_header("磁盘空间使用率/磁盘Inode使用率"))
    lines.append("")
    lines.extend(render_disks(snapshot))
    lines.append("")
    lines.append(section_header("占用内存前五的进程信息如下:"))
    lines.extend(render_top_processes(snapshot.processes.samples, top_n))
    lines.append("")
    lines.append(section_header("服务器的网络信息如下:"))
    lines.extend(render_network(snapshot.network))
    return "\n".join(lines) + "\n"
