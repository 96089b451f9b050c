"""
Provisioning schema.

Profiles describe what a host should look like (disks to search, volumes,
directories, links); reports describe what a run actually did.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

XFS = "xfs"
DEFAULT_MOUNT_OPTIONS = "defaults,noatime"


# --- Host resources ---


class BlockDevice(BaseModel):
    """A raw data disk found by discovery."""

    path: str
    resolved: str = ""  # kernel device the path points at, e.g. /dev/sdc


class LogicalVolume(BaseModel):
    """An LVM logical volume carrying an XFS filesystem."""

    volume_group: str
    name: str
    device: str
    fstype: str = XFS
    created: bool = False  # True when made by this run


class FstabEntry(BaseModel):
    """One line of /etc/fstab."""

    device: str
    mountpoint: str
    fstype: str = XFS
    options: str = DEFAULT_MOUNT_OPTIONS
    dump: int = 0
    passno: int = 0

    def line(self) -> str:
        return f"{self.device} {self.mountpoint} {self.fstype} {self.options} {self.dump} {self.passno}"

    @classmethod
    def parse(cls, line: str) -> Optional["FstabEntry"]:
        """Parse an fstab line; None for blanks, comments and short lines."""
        line = line.strip()
        if not line or line.startswith("#"):
            return None
        parts = line.split()
        if len(parts) < 3:
            return None
        return cls(
            device=parts[0],
            mountpoint=parts[1],
            fstype=parts[2],
            options=parts[3] if len(parts) > 3 else "defaults",
            dump=int(parts[4]) if len(parts) > 4 and parts[4].isdigit() else 0,
            passno=int(parts[5]) if len(parts) > 5 and parts[5].isdigit() else 0,
        )


# --- Profile ---


class DiskSearch(BaseModel):
    """Where to look for data disks, in priority order."""

    patterns: List[str]
    # Suffixes appended to a candidate; any match means the disk is partitioned
    partition_globs: List[str] = Field(default_factory=lambda: ["-part*"])


class VolumeSpec(BaseModel):
    """A volume group + logical volume mounted at a fixed path."""

    volume_group: str
    logical_volume: str
    mountpoint: str
    optional: bool = False
    mount_options: str = DEFAULT_MOUNT_OPTIONS


class DirectorySpec(BaseModel):
    """A plain directory with optional mode and numeric ownership."""

    path: str
    mode: Optional[int] = None
    uid: Optional[int] = None
    gid: Optional[int] = None


class LinkSpec(BaseModel):
    """Relocates a well-known system path onto the data volume via a symlink."""

    link: str
    target: str
    mode: Optional[int] = None  # applied to target
    uid: Optional[int] = None
    gid: Optional[int] = None


class Profile(BaseModel):
    """Environment-specific provisioning layout."""

    name: str
    description: str = ""
    disks: DiskSearch
    volumes: List[VolumeSpec] = Field(default_factory=list)
    directories: List[DirectorySpec] = Field(default_factory=list)
    links: List[LinkSpec] = Field(default_factory=list)
    installer_url: str = ""
    installer_path: str = "/root/kurl.sh"

    model_config = {"extra": "forbid"}


# --- Report ---


class StepStatus(str, Enum):
    CREATED = "created"
    EXISTS = "exists"
    SKIPPED = "skipped"


class StepResult(BaseModel):
    """Outcome of one idempotent step."""

    kind: str  # volume, mount, fstab, directory, link
    target: str
    status: StepStatus
    detail: str = ""


class ProvisionReport(BaseModel):
    """
    Record of a provisioning run. Serialized as provision-report.json.
    """

    meta: dict = Field(default_factory=dict)  # hostname, timestamp, host_root
    profile: str = ""
    steps: List[StepResult] = Field(default_factory=list)
    warnings: List[dict] = Field(default_factory=list)  # {source, message, severity}

    model_config = {"extra": "forbid"}

    def created(self) -> List[StepResult]:
        return [s for s in self.steps if s.status == StepStatus.CREATED]
