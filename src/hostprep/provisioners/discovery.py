"""Disk discovery: first unused, unpartitioned data disk in profile search order."""

import os
import re
from typing import Iterable, List, Optional, Set

from .. import log
from ..host import Host
from ..schema import BlockDevice, DiskSearch

_MDSTAT_MEMBER_RE = re.compile(r"^([^\s\[]+)\[\d+\]")


def candidate_disks(host: Host, search: DiskSearch) -> List[str]:
    """Expand search patterns in order; each pattern's matches sorted as strings.

    With the Azure patterns every single-digit LUN comes before any two-digit
    one, and two-digit LUNs order lexically, not numerically.
    """
    seen: Set[str] = set()
    out: List[str] = []
    for pattern in search.patterns:
        for match in host.glob(pattern):
            if match not in seen:
                seen.add(match)
                out.append(match)
    return out


def has_partitions(host: Host, disk: str, partition_globs: Iterable[str]) -> bool:
    return any(host.glob(disk + suffix) for suffix in partition_globs)


def _device_fields(text: str) -> Set[str]:
    """First column of /proc/mounts or /proc/swaps."""
    fields = set()
    for line in text.splitlines():
        parts = line.split()
        if parts:
            fields.add(parts[0])
    return fields


def _mdstat_members(text: str) -> Set[str]:
    """Kernel names of md array members ("sdc" from "md0 : active raid1 sdc[0] sdd[1]")."""
    members = set()
    for line in text.splitlines():
        if " : " not in line:
            continue
        for token in line.split(" : ", 1)[1].split():
            m = _MDSTAT_MEMBER_RE.match(token)
            if m:
                members.add(m.group(1))
    return members


def is_disk_available(host: Host, disk: str) -> bool:
    """False if the disk is an LVM PV, mounted, used as swap, or an md RAID member.

    A disk opened directly by an application without any signature is not
    detected and counts as available.
    """
    names = {disk, host.resolve(disk)}

    if host.is_physical_volume(disk):
        log.debug(f"{disk}: LVM physical volume")
        return False

    if names & _device_fields(host.read_proc("mounts")):
        log.debug(f"{disk}: mounted")
        return False

    if names & _device_fields(host.read_proc("swaps")):
        log.debug(f"{disk}: swap")
        return False

    kernel_names = {os.path.basename(n) for n in names}
    if kernel_names & _mdstat_members(host.read_proc("mdstat")):
        log.debug(f"{disk}: md RAID member")
        return False

    return True


def find_first_unused_data_disk(host: Host, search: DiskSearch) -> Optional[BlockDevice]:
    """Return the first candidate that exists, has no partitions and is available."""
    for disk in candidate_disks(host, search):
        if not host.exists(disk):
            continue
        if has_partitions(host, disk, search.partition_globs):
            # Partition table present, the owner probably has plans for it
            log.debug(f"{disk}: partitioned, skipping")
            continue
        if not is_disk_available(host, disk):
            continue
        return BlockDevice(path=disk, resolved=host.resolve(disk))
    return None


def find_orphan_physical_volume(host: Host, search: DiskSearch) -> Optional[BlockDevice]:
    """First candidate already initialised as a PV but not yet in any volume group."""
    orphans = host.orphan_physical_volumes()
    if not orphans:
        return None
    for disk in candidate_disks(host, search):
        if not host.exists(disk):
            continue
        resolved = host.resolve(disk)
        if {disk, resolved} & orphans:
            return BlockDevice(path=disk, resolved=resolved)
    return None
