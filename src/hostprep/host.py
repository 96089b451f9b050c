"""
Host state: the single seam between provisioners and the machine.

File paths are resolved beneath host_root; commands go through the executor.
Query methods treat a non-zero exit as "absent" but a missing tool (exit 127)
as a hard failure, so an uninstalled lvm2 never looks like an empty disk.
"""

import glob
import os
from pathlib import Path
from typing import List, Optional, Set

from . import log
from .errors import CommandError
from .executor import Executor, RunResult, make_executor
from .schema import FstabEntry

FSTAB = "/etc/fstab"
_MAX_LINK_HOPS = 40


class Host:
    def __init__(self, host_root: Path = Path("/"), executor: Optional[Executor] = None):
        self.host_root = Path(host_root)
        self.executor = executor if executor is not None else make_executor(str(self.host_root))

    # --- paths ---

    def path(self, p: str) -> Path:
        """Map a host path (/etc/fstab) to the local filesystem."""
        return self.host_root / p.lstrip("/")

    def _host_path(self, local: str) -> str:
        rel = os.path.relpath(local, str(self.host_root))
        return "/" if rel == "." else "/" + rel

    def exists(self, p: str) -> bool:
        return self.path(p).exists()

    def is_symlink(self, p: str) -> bool:
        return self.path(p).is_symlink()

    def glob(self, pattern: str) -> List[str]:
        """Expand a shell-style pattern; matches are sorted lexically like bash does."""
        matches = glob.glob(str(self.path(pattern)))
        return sorted(self._host_path(m) for m in matches)

    def resolve(self, p: str) -> str:
        """Follow symlinks in host namespace (/dev/disk/azure/scsi1/lun0 -> /dev/sdc)."""
        cur = p
        for _ in range(_MAX_LINK_HOPS):
            local = self.path(cur)
            if not local.is_symlink():
                return cur
            target = os.readlink(local)
            if os.path.isabs(target):
                cur = os.path.normpath(target)
            else:
                cur = os.path.normpath(os.path.join(os.path.dirname(cur), target))
        return cur

    # --- commands ---

    def check(self, cmd: List[str]) -> RunResult:
        """Run a command that must succeed."""
        result = self.executor(cmd)
        if not result.ok:
            raise CommandError(cmd, result)
        return result

    def _probe(self, cmd: List[str]) -> RunResult:
        result = self.executor(cmd)
        if result.missing_tool:
            raise CommandError(cmd, result)
        return result

    def _query(self, cmd: List[str]) -> bool:
        return self._probe(cmd).ok

    def lv_exists(self, volume_group: str, logical_volume: str) -> bool:
        return self._query(["lvdisplay", f"{volume_group}/{logical_volume}"])

    def vg_exists(self, volume_group: str) -> bool:
        return self._query(["vgdisplay", volume_group])

    def is_physical_volume(self, device: str) -> bool:
        return self._query(["pvdisplay", device])

    def is_mounted(self, mountpoint: str) -> bool:
        return self._query(["mountpoint", "-q", mountpoint])

    def filesystem_type(self, device: str) -> Optional[str]:
        """Filesystem signature on device ("xfs"), or None when blkid finds none."""
        result = self._probe(["blkid", "-o", "value", "-s", "TYPE", device])
        if not result.ok:
            return None
        return result.stdout.strip() or None

    def orphan_physical_volumes(self) -> Set[str]:
        """PVs that belong to no volume group (pvcreate ran, vgcreate did not)."""
        result = self._probe(["pvs", "--noheadings", "-o", "pv_name,vg_name"])
        if not result.ok:
            return set()
        orphans = set()
        for line in result.stdout.splitlines():
            parts = line.split()
            if len(parts) == 1:
                orphans.add(parts[0])
        return orphans

    # --- files ---

    def read_proc(self, name: str) -> str:
        """Contents of /proc/<name>, or "" if it cannot be read."""
        p = self.path(f"/proc/{name}")
        try:
            return p.read_text()
        except (FileNotFoundError, PermissionError) as exc:
            log.debug(f"cannot read {p}: {exc}")
            return ""

    def fstab_entries(self) -> List[FstabEntry]:
        fstab = self.path(FSTAB)
        if not fstab.exists():
            return []
        entries = []
        for line in fstab.read_text().splitlines():
            entry = FstabEntry.parse(line)
            if entry is not None:
                entries.append(entry)
        return entries

    def has_fstab_entry(self, mountpoint: str) -> bool:
        return any(e.mountpoint == mountpoint for e in self.fstab_entries())

    def append_fstab(self, entry: FstabEntry) -> None:
        fstab = self.path(FSTAB)
        fstab.parent.mkdir(parents=True, exist_ok=True)
        existing = fstab.read_text() if fstab.exists() else ""
        with open(fstab, "a") as f:
            if existing and not existing.endswith("\n"):
                f.write("\n")
            f.write(entry.line() + "\n")

    def makedirs(self, p: str) -> None:
        self.path(p).mkdir(parents=True, exist_ok=True)

    def symlink(self, link: str, target: str) -> None:
        """Create link -> target; target is stored as a host path."""
        os.symlink(target, self.path(link))

    def chmod(self, p: str, mode: int) -> None:
        os.chmod(self.path(p), mode)

    def chown(self, p: str, uid: int, gid: int) -> None:
        os.chown(self.path(p), uid, gid)
