"""Mount manager: mountpoint directory, fstab entry, mount."""

from typing import List

from .. import log
from ..host import FSTAB, Host
from ..schema import XFS, DiskSearch, FstabEntry, LogicalVolume, StepResult, StepStatus, VolumeSpec
from .lvm import ensure_logical_volume


def ensure_fstab_entry(host: Host, volume: LogicalVolume, mountpoint: str, options: str) -> StepResult:
    """Append an fstab line unless one already targets exactly this mountpoint."""
    if host.has_fstab_entry(mountpoint):
        log.success(f"{mountpoint} already exists in {FSTAB}")
        return StepResult(kind="fstab", target=mountpoint, status=StepStatus.EXISTS)

    entry = FstabEntry(device=volume.device, mountpoint=mountpoint, fstype=XFS, options=options)
    log.substep(f"Creating {FSTAB} entry for {mountpoint}")
    host.append_fstab(entry)
    return StepResult(kind="fstab", target=mountpoint, status=StepStatus.CREATED, detail=entry.line())


def ensure_mounted(host: Host, volume: VolumeSpec, search: DiskSearch) -> List[StepResult]:
    mountpoint = volume.mountpoint

    if host.is_mounted(mountpoint):
        log.success(f"{mountpoint} already mounted")
        return [StepResult(kind="mount", target=mountpoint, status=StepStatus.EXISTS)]

    log.step(f"Preparing {mountpoint}")
    lv = ensure_logical_volume(host, volume, search)
    if lv is None:
        log.success(f"Skipped optional {mountpoint}")
        return [
            StepResult(
                kind="mount",
                target=mountpoint,
                status=StepStatus.SKIPPED,
                detail=f"no unused disk for {volume.volume_group}",
            )
        ]

    results = [
        StepResult(
            kind="volume",
            target=f"{lv.volume_group}/{lv.name}",
            status=StepStatus.CREATED if lv.created else StepStatus.EXISTS,
            detail=lv.device,
        )
    ]
    host.makedirs(mountpoint)
    results.append(ensure_fstab_entry(host, lv, mountpoint, volume.mount_options))

    log.substep(f"Mounting {mountpoint}")
    host.check(["mount", mountpoint])
    log.success(f"Mounted {mountpoint}")
    results.append(StepResult(kind="mount", target=mountpoint, status=StepStatus.CREATED))
    return results
