"""Volume group and logical volume manager: PV -> VG -> LV (100% free) -> XFS."""

from typing import Optional

from .. import log
from ..errors import DiskNotFoundError
from ..host import Host
from ..schema import XFS, DiskSearch, LogicalVolume, VolumeSpec
from .discovery import find_first_unused_data_disk, find_orphan_physical_volume


def lv_device(volume_group: str, logical_volume: str) -> str:
    """Device-mapper path; LVM doubles hyphens inside names."""
    vg = volume_group.replace("-", "--")
    lv = logical_volume.replace("-", "--")
    return f"/dev/mapper/{vg}-{lv}"


def ensure_volume_group(host: Host, volume_group: str, search: DiskSearch, optional: bool = False) -> bool:
    """Make sure the group exists. Returns False when an optional group was skipped."""
    if host.vg_exists(volume_group):
        log.success(f"Volume group {volume_group} already exists")
        return True

    orphan = find_orphan_physical_volume(host, search)
    if orphan is not None:
        log.substep(f"Creating volume group {volume_group} using existing physical volume {orphan.path}")
        host.check(["vgcreate", volume_group, orphan.path])
        return True

    disk = find_first_unused_data_disk(host, search)
    if disk is None:
        if optional:
            log.warn(f"No unused data disk for optional volume group {volume_group}, skipping")
            return False
        raise DiskNotFoundError(volume_group)

    log.substep(f"Creating volume group {volume_group} using {disk.path}")
    host.check(["pvcreate", disk.path])
    host.check(["vgcreate", volume_group, disk.path])
    return True


def ensure_logical_volume(host: Host, volume: VolumeSpec, search: DiskSearch) -> Optional[LogicalVolume]:
    """Return the logical volume, creating and formatting it if needed.

    None means the volume is optional and no disk was available.
    """
    vg, name = volume.volume_group, volume.logical_volume
    device = lv_device(vg, name)

    if host.lv_exists(vg, name):
        fstype = host.filesystem_type(device)
        if fstype is not None:
            log.success(f"Logical volume {name} already exists")
            return LogicalVolume(volume_group=vg, name=name, device=device, fstype=fstype)
        log.warn(f"Logical volume {name} has no filesystem, formatting")
        host.check(["mkfs.xfs", device])
        return LogicalVolume(volume_group=vg, name=name, device=device, fstype=XFS, created=True)

    if not ensure_volume_group(host, vg, search, optional=volume.optional):
        return None

    log.substep(f"Creating logical volume {name}")
    host.check(["lvcreate", "--extents", "+100%FREE", vg, "--name", name, "--activate", "y"])

    log.substep(f"Creating XFS filesystem on {name}")
    host.check(["mkfs.xfs", device])
    log.success(f"Logical volume {name} created")
    return LogicalVolume(volume_group=vg, name=name, device=device, fstype=XFS, created=True)
