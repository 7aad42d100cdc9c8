"""Platform strategies for disk filtering, disk keys and CPU load."""

import psutil

from hostsnap.models import Partition

# Device substrings never reported on Linux
EXCLUDED_DEVICE_MARKERS = ("loop", "/boot/efi", "/dev/sda1 -")


def is_device_mapper(device: str) -> bool:
    """Check whether a device path names a device-mapper volume."""
    return "dm-" in device


class LinuxDiskPolicy:
    """Real block devices only, keyed by mountpoint for dm- volumes."""

    name = "linux"
    supports_load_average = True
    supports_inodes = True

    def include(self, partition: Partition) -> bool:
        device = partition.device
        if "/dev/" not in device:
            return False
        return not any(marker in device for marker in EXCLUDED_DEVICE_MARKERS)

    def key_for(self, partition: Partition) -> str:
        if is_device_mapper(partition.device):
            return partition.mountpoint
        return partition.device


class GenericDiskPolicy:
    """Every partition, keyed by device label without its trailing colon."""

    name = "generic"
    supports_load_average = False
    supports_inodes = False

    def include(self, partition: Partition) -> bool:
        return True

    def key_for(self, partition: Partition) -> str:
        if is_device_mapper(partition.device):
            return partition.mountpoint
        return partition.device.rstrip(":")


DiskPolicy = LinuxDiskPolicy | GenericDiskPolicy


def select_policy(linux: bool | None = None) -> DiskPolicy:
    """
    Pick the platform strategy once per run.

    Args:
        linux: Force the Linux branch on or off. Defaults to psutil.LINUX.
    """
    if linux is None:
        linux = psutil.LINUX
    return LinuxDiskPolicy() if linux else GenericDiskPolicy()
