"""
Built-in environment profiles and profile loading.

generic covers on-prem VMs with plain /dev/sdX, vdX, xvdX or NVMe disks.
azure searches the udev-provided LUN links from 66-azure-storage.rules,
/dev/disk/azure/scsi[0-3]/lun[0-63], and adds the rook, openebs and
blobfuse links.
"""

from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from .errors import ProfileError
from .host import Host
from .schema import DirectorySpec, DiskSearch, LinkSpec, Profile, VolumeSpec

DEFAULT_INSTALLER_URL = "https://k8s.kurl.sh/ai-auditor"

# Official mongo and postgres images both run as uid/gid 999
DB_SERVICE_UID = 999
DB_SERVICE_GID = 999

_VOLUMES = [
    VolumeSpec(volume_group="vg_data", logical_volume="lv_data", mountpoint="/data"),
    VolumeSpec(volume_group="vg_backup", logical_volume="lv_backup", mountpoint="/backup", optional=True),
]

_DIRECTORIES = [
    DirectorySpec(path="/backup/mongo", uid=DB_SERVICE_UID, gid=DB_SERVICE_GID),
    DirectorySpec(path="/backup/postgres", uid=DB_SERVICE_UID, gid=DB_SERVICE_GID),
]

# Runtime roots are 0711 when created by docker/containerd themselves
_RUNTIME_LINKS = [
    LinkSpec(link="/var/lib/docker", target="/data/docker", mode=0o711),
    LinkSpec(link="/var/lib/containerd", target="/data/containerd", mode=0o711),
    LinkSpec(link="/var/lib/kubelet", target="/data/kubelet"),
]

_AZURE_LINKS = [
    LinkSpec(link="/opt/replicated/rook", target="/data/rook"),
    LinkSpec(link="/var/openebs/local", target="/data/openebs-local"),
    LinkSpec(link="/var/lib/blobfuse", target="/data/blobfuse"),
]

GENERIC = Profile(
    name="generic",
    description="On-prem VM with plain block devices",
    disks=DiskSearch(
        patterns=["/dev/sd[a-z]", "/dev/vd[a-z]", "/dev/xvd[a-z]", "/dev/nvme[0-9]n1"],
        partition_globs=["[0-9]*", "p[0-9]*"],
    ),
    volumes=_VOLUMES,
    directories=_DIRECTORIES,
    links=_RUNTIME_LINKS,
    installer_url=DEFAULT_INSTALLER_URL,
)

AZURE = Profile(
    name="azure",
    description="Azure VM with data disks attached as SCSI LUNs",
    disks=DiskSearch(
        # Single-digit LUNs on every controller first, then two-digit ones as strings
        # (scsi0/lun63 before scsi1/lun10)
        patterns=["/dev/disk/azure/scsi*/lun[0-9]", "/dev/disk/azure/scsi*/lun[1-9][0-9]"],
        partition_globs=["-part*"],
    ),
    volumes=_VOLUMES,
    directories=_DIRECTORIES,
    links=_AZURE_LINKS + _RUNTIME_LINKS,
    installer_url=DEFAULT_INSTALLER_URL,
)

BUILTIN_PROFILES: Dict[str, Profile] = {p.name: p for p in (GENERIC, AZURE)}


def detect_profile(host: Host) -> str:
    """azure when the Azure udev disk links are present, otherwise generic."""
    if host.path("/dev/disk/azure").is_dir():
        return AZURE.name
    return GENERIC.name


def load_profile(name: Optional[str] = None, path: Optional[Path] = None) -> Profile:
    """Built-in profile by name, or a JSON profile file when path is given."""
    if path is not None:
        try:
            return Profile.model_validate_json(Path(path).read_text())
        except OSError as e:
            raise ProfileError(f"Cannot read profile file {path}: {e}") from e
        except ValidationError as e:
            raise ProfileError(f"Invalid profile file {path}: {e}") from e
    if name not in BUILTIN_PROFILES:
        raise ProfileError(
            f"Unknown profile {name!r}; choose one of: {', '.join(sorted(BUILTIN_PROFILES))}"
        )
    return BUILTIN_PROFILES[name].model_copy(deep=True)
